# signup/models/attendance.py
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from signup.db.base import Base

ANONYMOUS = "Anonymous"


class Attendance(Base):
    __tablename__ = "attendances"

    id = Column(Integer, primary_key=True, autoincrement=True)

    session_id = Column(
        Integer,
        ForeignKey("sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Display name chosen by the participant
    name = Column(String(128), nullable=False, default=ANONYMOUS)

    # Secret handed to the participant to cancel or look up the attendance
    attendance_code = Column(String(128), unique=True, nullable=False, index=True)

    joined_at = Column(DateTime(timezone=False), server_default=func.now(), nullable=False)

    session = relationship("Session", back_populates="attendances")
