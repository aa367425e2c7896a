# signup/crud/attendance_crud.py
from typing import Dict, List, Optional, Union

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from signup.models.attendance import Attendance
from signup.models.session import Session as SessionModel


def count_for_session(db: Session, session_id: int) -> int:
    stmt = select(func.count(Attendance.id)).where(Attendance.session_id == session_id)
    return int(db.execute(stmt).scalar_one())


def roster(db: Session, session_id: int) -> List[Dict[str, Union[int, str]]]:
    """``{id, name}`` of every attendee, in join order. Codes are not selected."""
    stmt = (
        select(Attendance.id, Attendance.name)
        .where(Attendance.session_id == session_id)
        .order_by(Attendance.id.asc())
    )
    return [{"id": row.id, "name": row.name} for row in db.execute(stmt).all()]


def get_session_by_code(db: Session, attendance_code: str) -> Optional[SessionModel]:
    """Owning session of an attendance code (inner join: no orphans)."""
    stmt = (
        select(SessionModel)
        .join(Attendance, Attendance.session_id == SessionModel.id)
        .where(Attendance.attendance_code == attendance_code)
    )
    return db.execute(stmt).scalar_one_or_none()


def delete_by_code(db: Session, session_id: int, attendance_code: str) -> int:
    stmt = delete(Attendance).where(
        Attendance.session_id == session_id,
        Attendance.attendance_code == attendance_code,
    )
    return db.execute(stmt).rowcount


def delete_by_id(db: Session, session_id: int, attendee_id: int) -> int:
    stmt = delete(Attendance).where(
        Attendance.session_id == session_id,
        Attendance.id == attendee_id,
    )
    return db.execute(stmt).rowcount


def delete_for_session(db: Session, session_id: int) -> int:
    return db.execute(delete(Attendance).where(Attendance.session_id == session_id)).rowcount
