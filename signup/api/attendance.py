# signup/api/attendance.py
from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Path, Query, status

from signup.api.deps import get_ledger
from signup.core.errors import raise_for_error
from signup.schemas.attendance import AttendeeOut, JoinIn, JoinOut
from signup.schemas.common import MAX_DB_INT, MessageOut
from signup.schemas.session import AttendanceLookupOut
from signup.services.attendance_ledger import AttendanceLedger

router = APIRouter(prefix="/attendance", tags=["attendance"])


# =====================================================================
# JOIN (participant)
# =====================================================================
@router.post(
    "/{session_id}/attend",
    response_model=JoinOut,
    status_code=status.HTTP_201_CREATED,
    summary="Join a session (invite token required for private sessions)",
)
def attend_session(
    session_id: int = Path(..., ge=1, le=MAX_DB_INT),
    invite_token: Optional[str] = Query(None),
    payload: Optional[JoinIn] = Body(None),
    ledger: AttendanceLedger = Depends(get_ledger),
):
    name = payload.name if payload else None
    code, err = ledger.join(session_id, name=name, invite_token=invite_token)
    raise_for_error(err, not_found="Session not found")
    return {"attendance_code": code}


# =====================================================================
# CANCEL / LOOKUP (participant, by attendance code)
# =====================================================================
@router.delete("/{session_id}/cancel", response_model=MessageOut, summary="Cancel own attendance")
def cancel_attendance(
    session_id: int = Path(..., ge=1, le=MAX_DB_INT),
    attendance_code: str = Query(..., min_length=1),
    ledger: AttendanceLedger = Depends(get_ledger),
):
    _, err = ledger.cancel(session_id, attendance_code)
    raise_for_error(err, not_found="Attendance not found for this session")
    return {"ok": True, "message": "Attendance cancelled successfully"}


@router.get("/check", response_model=AttendanceLookupOut, summary="Session joined with this attendance code")
def check_attendance(
    attendance_code: str = Query(..., min_length=1),
    ledger: AttendanceLedger = Depends(get_ledger),
):
    found, err = ledger.lookup(attendance_code)
    raise_for_error(err, not_found="Attendance code not found")
    return found


# =====================================================================
# ROSTER (organizer, by management code)
# =====================================================================
@router.get("/{session_id}/attendees", response_model=List[AttendeeOut], summary="Attendees of a session")
def list_attendees(
    session_id: int = Path(..., ge=1, le=MAX_DB_INT),
    management_code: str = Query(..., min_length=1),
    ledger: AttendanceLedger = Depends(get_ledger),
):
    attendees, err = ledger.list_attendees(session_id, management_code)
    raise_for_error(err, not_found="Session not found or no attendees")
    return attendees


@router.delete(
    "/{session_id}/attendees/{attendee_id}",
    response_model=MessageOut,
    summary="Remove an attendee (organizer)",
)
def remove_attendee(
    session_id: int = Path(..., ge=1, le=MAX_DB_INT),
    attendee_id: int = Path(..., ge=1, le=MAX_DB_INT),
    management_code: str = Query(..., min_length=1),
    ledger: AttendanceLedger = Depends(get_ledger),
):
    _, err = ledger.remove_attendee(session_id, attendee_id, management_code)
    raise_for_error(err, not_found="Attendee not found")
    return {"ok": True, "message": "Attendee removed successfully"}
