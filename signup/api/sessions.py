# signup/api/sessions.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Path, Query, status

from signup.api.deps import get_registry
from signup.core.errors import raise_for_error
from signup.schemas.attendance import AttendeeOut
from signup.schemas.common import MAX_DB_INT, MessageOut
from signup.schemas.session import (
    SessionCreate,
    SessionCreatedOut,
    SessionDetailsOut,
    SessionManageOut,
    SessionOut,
    SessionPrivateOut,
    SessionUpdate,
    SessionWithCountOut,
)
from signup.services.session_registry import SessionRegistry

router = APIRouter(prefix="/sessions", tags=["sessions"])


# =====================================================================
# LIST / CREATE
# =====================================================================
@router.get("", response_model=List[SessionOut], summary="List public sessions")
def list_sessions(registry: SessionRegistry = Depends(get_registry)):
    sessions, _ = registry.list_public()
    return sessions


@router.post(
    "",
    response_model=SessionCreatedOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create a session (organizer)",
)
def create_session(payload: SessionCreate, registry: SessionRegistry = Depends(get_registry)):
    created, err = registry.create(payload)
    raise_for_error(err)
    return created


# =====================================================================
# LOOKUPS BY CODE
# =====================================================================
@router.get(
    "/private/{code}",
    response_model=SessionPrivateOut,
    summary="Private session by invite token or management code",
)
def get_private_session(code: str, registry: SessionRegistry = Depends(get_registry)):
    session, err = registry.get_private(code)
    raise_for_error(err, not_found="Session not found or invalid code/token")
    return session


@router.get(
    "/check-management/{code}",
    response_model=SessionManageOut,
    summary="Which session does this management code own?",
)
def check_management_code(code: str, registry: SessionRegistry = Depends(get_registry)):
    session, err = registry.get_by_management_code(code)
    raise_for_error(err, not_found="Invalid management code")
    return session


# =====================================================================
# EDIT (organizer)
# =====================================================================
@router.get("/edit/{session_id}", response_model=SessionManageOut, summary="Session data for the edit form")
def get_session_for_edit(
    session_id: int = Path(..., ge=1, le=MAX_DB_INT),
    management_code: str = Query(..., min_length=1),
    registry: SessionRegistry = Depends(get_registry),
):
    session, err = registry.get_for_edit(session_id, management_code)
    raise_for_error(err, not_found="Session not found or incorrect management code")
    return session


@router.patch("/edit/{session_id}", response_model=MessageOut, summary="Partially update a session")
def update_session(
    session_id: int = Path(..., ge=1, le=MAX_DB_INT),
    management_code: str = Query(..., min_length=1),
    fields: Optional[SessionUpdate] = Body(None),
    registry: SessionRegistry = Depends(get_registry),
):
    _, err = registry.update(session_id, management_code, fields or SessionUpdate())
    raise_for_error(err, not_found="Session not found")
    return {"ok": True, "message": "Session updated successfully"}


# =====================================================================
# SINGLE SESSION
# =====================================================================
@router.get("/{session_id}", response_model=SessionWithCountOut, summary="Public session with participant count")
def get_session(
    session_id: int = Path(..., ge=1, le=MAX_DB_INT),
    registry: SessionRegistry = Depends(get_registry),
):
    found, err = registry.get_public(session_id)
    raise_for_error(err, not_found="Session not found")
    return SessionWithCountOut(
        **SessionOut.model_validate(found["session"]).model_dump(),
        participants=found["participants"],
    )


@router.get("/{session_id}/details", response_model=SessionDetailsOut, summary="Session with its attendees")
def get_session_details(
    session_id: int = Path(..., ge=1, le=MAX_DB_INT),
    code: Optional[str] = Query(None, description="Management code or invite token"),
    registry: SessionRegistry = Depends(get_registry),
):
    found, err = registry.get_details(session_id, code)
    raise_for_error(err, not_found="Session not found")
    return SessionDetailsOut(
        **SessionOut.model_validate(found["session"]).model_dump(),
        participants=found["participants"],
        attendees=[AttendeeOut(**a) for a in found["attendees"]],
    )


@router.delete("/{session_id}", response_model=MessageOut, summary="Delete a session and its attendances")
def delete_session(
    session_id: int = Path(..., ge=1, le=MAX_DB_INT),
    management_code: str = Query(..., min_length=1),
    registry: SessionRegistry = Depends(get_registry),
):
    _, err = registry.delete(session_id, management_code)
    raise_for_error(err, not_found="Session not found")
    return {"ok": True, "message": "Session deleted successfully"}
