# signup/services/session_registry.py
"""
Session registry: owns session records, their visibility rules and the
management-code check that guards edit, delete and roster operations.

Every public method runs in its own transaction and returns a
``(result, error)`` tuple; ``error`` is one of ``signup.core.errors``.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import ValidationError
from sqlalchemy.orm import Session

from signup.core import errors
from signup.core.config import Settings, get_settings
from signup.core.utils import codes_match, gen_code
from signup.crud import attendance_crud, session_crud
from signup.db.session import CodeCollisionError, Database, save_with_fresh_codes
from signup.models.session import Session as SessionModel, Visibility
from signup.schemas.session import SessionCreate, SessionUpdate

log = logging.getLogger("signup.registry")

Result = Tuple[Any, Optional[str]]


class SessionRegistry:
    def __init__(self, database: Database, settings: Optional[Settings] = None):
        self.database = database
        self.settings = settings or get_settings()

    # =====================================================================
    # Helpers
    # =====================================================================
    def new_code(self) -> str:
        return gen_code(self.settings.CODE_BYTES)

    def management_link(self, session_id: int, management_code: str) -> str:
        base = self.settings.PUBLIC_BASE_URL.rstrip("/")
        return f"{base}/sessions/{session_id}/edit?management_code={management_code}"

    def share_link(self, session_id: int, invite_token: Optional[str]) -> str:
        base = self.settings.PUBLIC_BASE_URL.rstrip("/")
        link = f"{base}/sessions/{session_id}/attend"
        if invite_token:
            link += f"?invite_token={invite_token}"
        return link

    @staticmethod
    def may_join(session: SessionModel, invite_token: Optional[str]) -> bool:
        """Public sessions are open; private ones need the exact invite token."""
        if not session.is_private:
            return True
        return codes_match(invite_token, session.invite_token)

    def authorize(self, db: Session, session_id: int, management_code: Optional[str]) -> Result:
        """Load a session and check its management code inside the caller's transaction."""
        session = session_crud.get(db, session_id)
        if session is None:
            return None, errors.NOT_FOUND
        if not codes_match(management_code, session.management_code):
            log.info("management code rejected for session id=%s", session_id)
            return None, errors.UNAUTHORIZED
        return session, None

    def lock(self, db: Session, session_id: int) -> Optional[SessionModel]:
        return session_crud.get_for_update(db, session_id)

    # =====================================================================
    # CREATE
    # =====================================================================
    def create(self, fields: Union[SessionCreate, Mapping[str, Any]]) -> Result:
        if isinstance(fields, SessionCreate):
            data = fields
        else:
            try:
                data = SessionCreate.model_validate(dict(fields or {}))
            except ValidationError as e:
                log.info("session rejected: %d invalid field(s)", e.error_count())
                return None, errors.VALIDATION

        payload = data.model_dump()
        private = data.visibility == Visibility.private

        def _build() -> SessionModel:
            return SessionModel(
                **payload,
                management_code=self.new_code(),
                invite_token=self.new_code() if private else None,
            )

        try:
            with self.database.transaction() as db:
                session = save_with_fresh_codes(db, _build, self.settings.CODE_GENERATION_TRIES)
        except CodeCollisionError:
            log.error("could not generate unique codes for a new session")
            return None, errors.CONFLICT

        log.info("session created id=%s visibility=%s", session.id, session.visibility.value)
        return {
            "id": session.id,
            "management_code": session.management_code,
            "management_link": self.management_link(session.id, session.management_code),
            "share_link": self.share_link(session.id, session.invite_token),
        }, None

    # =====================================================================
    # READ
    # =====================================================================
    def list_public(self) -> Tuple[List[SessionModel], None]:
        with self.database.transaction() as db:
            return session_crud.list_public(db), None

    def get_public(self, session_id: int) -> Result:
        with self.database.transaction() as db:
            session = session_crud.get(db, session_id)
            if session is None or session.is_private:
                return None, errors.NOT_FOUND
            participants = attendance_crud.count_for_session(db, session_id)
        return {"session": session, "participants": participants}, None

    def get_private(self, code: Optional[str]) -> Result:
        if not code:
            return None, errors.NOT_FOUND
        with self.database.transaction() as db:
            session = session_crud.get_private_by_code(db, code)
        if session is None:
            return None, errors.NOT_FOUND
        return session, None

    def get_by_management_code(self, code: Optional[str]) -> Result:
        if not code:
            return None, errors.NOT_FOUND
        with self.database.transaction() as db:
            session = session_crud.get_by_management_code(db, code)
        if session is None:
            return None, errors.NOT_FOUND
        return session, None

    def get_details(self, session_id: int, code: Optional[str] = None) -> Result:
        """
        Session of any visibility with its roster (``{id, name}`` only).

        With ``DETAILS_REQUIRE_CODE`` a private session also needs its
        management code or invite token; a wrong code looks like a missing
        session.
        """
        with self.database.transaction() as db:
            session = session_crud.get(db, session_id)
            if session is None:
                return None, errors.NOT_FOUND
            if self.settings.DETAILS_REQUIRE_CODE and session.is_private:
                if not (
                    codes_match(code, session.management_code)
                    or codes_match(code, session.invite_token)
                ):
                    return None, errors.NOT_FOUND
            attendees = attendance_crud.roster(db, session_id)
        return {"session": session, "attendees": attendees, "participants": len(attendees)}, None

    def get_for_edit(self, session_id: int, management_code: Optional[str]) -> Result:
        with self.database.transaction() as db:
            session, err = self.authorize(db, session_id, management_code)
        if err:
            # wrong code and missing session are indistinguishable here
            return None, errors.NOT_FOUND
        return session, None

    # =====================================================================
    # UPDATE
    # =====================================================================
    def update(
        self,
        session_id: int,
        management_code: Optional[str],
        fields: Union[SessionUpdate, Mapping[str, Any], None],
    ) -> Result:
        if isinstance(fields, SessionUpdate):
            changes = fields.model_dump(exclude_unset=True)
        else:
            if not fields:
                return None, errors.NO_FIELDS
            try:
                changes = SessionUpdate.model_validate(dict(fields)).model_dump(exclude_unset=True)
            except ValidationError:
                return None, errors.VALIDATION
        if not changes:
            return None, errors.NO_FIELDS

        visibility = changes.pop("visibility", None)

        try:
            with self.database.transaction() as db:
                session, err = self.authorize(db, session_id, management_code)
                if err:
                    return None, err

                for key, value in changes.items():
                    setattr(session, key, value)

                if visibility == Visibility.public:
                    session.visibility = Visibility.public
                    session.invite_token = None
                db.flush()

                if visibility == Visibility.private and not session.is_private:
                    def _make_private() -> SessionModel:
                        session.visibility = Visibility.private
                        session.invite_token = self.new_code()
                        return session

                    save_with_fresh_codes(db, _make_private, self.settings.CODE_GENERATION_TRIES)
        except CodeCollisionError:
            log.error("could not generate a unique invite token for session id=%s", session_id)
            return None, errors.CONFLICT

        updated = sorted(changes) + (["visibility"] if visibility is not None else [])
        log.info("session updated id=%s fields=%s", session_id, ",".join(updated))
        return True, None

    # =====================================================================
    # DELETE
    # =====================================================================
    def delete(self, session_id: int, management_code: Optional[str]) -> Result:
        with self.database.transaction() as db:
            session, err = self.authorize(db, session_id, management_code)
            if err:
                return None, err
            removed = attendance_crud.delete_for_session(db, session_id)
            db.delete(session)

        log.info("session deleted id=%s attendances_removed=%s", session_id, removed)
        return True, None
