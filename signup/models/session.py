# signup/models/session.py
import enum

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    Enum,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from signup.db.base import Base


class Visibility(str, enum.Enum):
    public = "public"
    private = "private"


class Session(Base):
    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)

    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)

    # Date and time are stored as entered by the organizer
    date = Column(String(32), nullable=False)
    time = Column(String(32), nullable=False)
    location = Column(String(200), nullable=False)

    # NULL = unlimited
    max_participants = Column(Integer, nullable=True)

    visibility = Column(
        Enum(Visibility, name="session_visibility", native_enum=False, length=16),
        nullable=False,
        default=Visibility.public,
    )

    # Ownership secret (edit / delete / roster)
    management_code = Column(String(128), unique=True, nullable=False, index=True)

    # Join/view secret, present only for private sessions
    invite_token = Column(String(128), unique=True, nullable=True, index=True)

    created_at = Column(DateTime(timezone=False), server_default=func.now(), nullable=False)

    # --- RELATIONSHIPS -------------------------------------------------
    attendances = relationship(
        "Attendance",
        back_populates="session",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Attendance.id",
    )

    __table_args__ = (
        CheckConstraint(
            "max_participants IS NULL OR max_participants > 0",
            name="ck_sessions_max_participants_positive",
        ),
        CheckConstraint(
            "(visibility = 'private' AND invite_token IS NOT NULL)"
            " OR (visibility = 'public' AND invite_token IS NULL)",
            name="ck_sessions_invite_token_iff_private",
        ),
    )

    @property
    def is_private(self) -> bool:
        return self.visibility == Visibility.private
