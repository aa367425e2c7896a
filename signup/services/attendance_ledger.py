# signup/services/attendance_ledger.py
"""
Attendance ledger: join, cancel and roster management for sessions.

The ledger asks the session registry for visibility and ownership
decisions inside its own transaction, so a check and the write it guards
always see the same session row.
"""
from __future__ import annotations

import logging
from typing import Any, Optional, Tuple

from signup.core import errors
from signup.core.utils import gen_code
from signup.crud import attendance_crud
from signup.db.session import CodeCollisionError, Database, save_with_fresh_codes
from signup.models.attendance import ANONYMOUS, Attendance
from signup.services.session_registry import SessionRegistry

log = logging.getLogger("signup.ledger")

Result = Tuple[Any, Optional[str]]


def display_name(name: Optional[str]) -> str:
    name = (name or "").strip()
    return name or ANONYMOUS


class AttendanceLedger:
    def __init__(self, database: Database, registry: SessionRegistry):
        self.database = database
        self.registry = registry
        self.settings = registry.settings

    # =====================================================================
    # JOIN
    # =====================================================================
    def join(
        self,
        session_id: int,
        name: Optional[str] = None,
        invite_token: Optional[str] = None,
    ) -> Result:
        """
        Take a seat in a session and return the new attendance code.

        The session row is locked for the whole transaction, so the
        attendance count and the insert that depends on it cannot
        interleave with another join on the same session.
        """
        try:
            with self.database.transaction() as db:
                session = self.registry.lock(db, session_id)
                if session is None:
                    return None, errors.NOT_FOUND

                if not self.registry.may_join(session, invite_token):
                    log.info("join refused for private session id=%s", session_id)
                    return None, errors.FORBIDDEN

                if session.max_participants is not None:
                    taken = attendance_crud.count_for_session(db, session_id)
                    if taken >= session.max_participants:
                        log.info("session id=%s is full (%s/%s)", session_id, taken, session.max_participants)
                        return None, errors.FULL

                attendance = save_with_fresh_codes(
                    db,
                    lambda: Attendance(
                        session_id=session_id,
                        name=display_name(name),
                        attendance_code=gen_code(self.settings.CODE_BYTES),
                    ),
                    self.settings.CODE_GENERATION_TRIES,
                )
                code = attendance.attendance_code
                attendee_id = attendance.id
        except CodeCollisionError:
            log.error("could not generate a unique attendance code for session id=%s", session_id)
            return None, errors.CONFLICT

        log.info("attendee id=%s joined session id=%s", attendee_id, session_id)
        return code, None

    # =====================================================================
    # CANCEL (participant, by attendance code)
    # =====================================================================
    def cancel(self, session_id: int, attendance_code: Optional[str]) -> Result:
        if not attendance_code:
            return None, errors.NOT_FOUND
        with self.database.transaction() as db:
            removed = attendance_crud.delete_by_code(db, session_id, attendance_code)
        if not removed:
            return None, errors.NOT_FOUND
        log.info("attendance cancelled for session id=%s", session_id)
        return True, None

    # =====================================================================
    # LOOKUP (participant, by attendance code)
    # =====================================================================
    def lookup(self, attendance_code: Optional[str]) -> Result:
        if not attendance_code:
            return None, errors.NOT_FOUND
        with self.database.transaction() as db:
            session = attendance_crud.get_session_by_code(db, attendance_code)
        if session is None:
            return None, errors.NOT_FOUND
        return {"session": session, "attendance_code": attendance_code}, None

    # =====================================================================
    # ROSTER (organizer, by management code)
    # =====================================================================
    def list_attendees(self, session_id: int, management_code: Optional[str]) -> Result:
        with self.database.transaction() as db:
            _, err = self.registry.authorize(db, session_id, management_code)
            if err:
                return None, err
            attendees = attendance_crud.roster(db, session_id)

        if not attendees and self.settings.EMPTY_ROSTER_NOT_FOUND:
            return None, errors.NOT_FOUND
        return attendees, None

    def remove_attendee(
        self,
        session_id: int,
        attendee_id: int,
        management_code: Optional[str],
    ) -> Result:
        with self.database.transaction() as db:
            _, err = self.registry.authorize(db, session_id, management_code)
            if err:
                return None, err
            removed = attendance_crud.delete_by_id(db, session_id, attendee_id)

        if not removed:
            return None, errors.NOT_FOUND
        log.info("attendee id=%s removed from session id=%s by organizer", attendee_id, session_id)
        return True, None
