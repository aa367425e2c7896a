# signup/crud/session_crud.py
from typing import List, Optional

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from signup.models.session import Session as SessionModel, Visibility


# =========================
#  LOOKUPS
# =========================
def get(db: Session, session_id: int) -> Optional[SessionModel]:
    return db.get(SessionModel, session_id)


def get_for_update(db: Session, session_id: int) -> Optional[SessionModel]:
    """
    Load a session holding a row lock until the transaction ends
    (SELECT ... FOR UPDATE; SQLite relies on BEGIN IMMEDIATE instead).
    """
    stmt = select(SessionModel).where(SessionModel.id == session_id).with_for_update()
    return db.execute(stmt).scalar_one_or_none()


def list_public(db: Session) -> List[SessionModel]:
    stmt = (
        select(SessionModel)
        .where(SessionModel.visibility == Visibility.public)
        .order_by(SessionModel.id.asc())
    )
    return list(db.execute(stmt).scalars().all())


def get_private_by_code(db: Session, code: str) -> Optional[SessionModel]:
    """Private session whose management code or invite token equals ``code``."""
    stmt = select(SessionModel).where(
        SessionModel.visibility == Visibility.private,
        or_(SessionModel.management_code == code, SessionModel.invite_token == code),
    )
    return db.execute(stmt).scalars().first()


def get_by_management_code(db: Session, code: str) -> Optional[SessionModel]:
    stmt = select(SessionModel).where(SessionModel.management_code == code)
    return db.execute(stmt).scalar_one_or_none()
