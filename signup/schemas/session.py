# signup/schemas/session.py
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from signup.models.session import Visibility
from signup.schemas.attendance import AttendeeOut
from signup.schemas.common import MAX_DB_INT

# ------------------------------------------------------------
# Input
# ------------------------------------------------------------
class SessionCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    date: str = Field(..., min_length=1, max_length=32, description="e.g. 2025-01-01")
    time: str = Field(..., min_length=1, max_length=32, description="e.g. 10:00")
    location: str = Field(..., min_length=1, max_length=200)
    max_participants: Optional[int] = Field(
        None,
        gt=0,
        le=MAX_DB_INT,
        validation_alias=AliasChoices("max_participants", "maxParticipants"),
        description="Capacity; omit for unlimited.",
    )
    visibility: Visibility

    model_config = {"str_strip_whitespace": True, "populate_by_name": True}


class SessionUpdate(BaseModel):
    """Partial update: only the fields actually sent are applied."""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=5000)
    date: Optional[str] = Field(None, min_length=1, max_length=32)
    time: Optional[str] = Field(None, min_length=1, max_length=32)
    location: Optional[str] = Field(None, min_length=1, max_length=200)
    max_participants: Optional[int] = Field(
        None,
        gt=0,
        le=MAX_DB_INT,
        validation_alias=AliasChoices("max_participants", "maxParticipants"),
    )
    visibility: Optional[Visibility] = None

    model_config = {"str_strip_whitespace": True, "populate_by_name": True}

    @field_validator("title", "date", "time", "location", "visibility")
    @classmethod
    def _required_not_null(cls, v):
        # only runs for values that were sent; an explicit null is rejected
        if v is None:
            raise ValueError("field cannot be null")
        return v


# ------------------------------------------------------------
# Output
# ------------------------------------------------------------
class SessionOut(BaseModel):
    """Public view: never carries management code or invite token."""
    id: int
    title: str
    description: Optional[str] = None
    date: str
    time: str
    location: str
    max_participants: Optional[int] = None
    visibility: Visibility
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class SessionWithCountOut(SessionOut):
    participants: int = 0


class SessionDetailsOut(SessionOut):
    participants: int = 0
    attendees: List[AttendeeOut] = Field(default_factory=list)


class SessionPrivateOut(SessionOut):
    """View for callers already holding a credential for the session."""
    invite_token: Optional[str] = None


class SessionManageOut(SessionPrivateOut):
    management_code: str


class SessionCreatedOut(BaseModel):
    message: str = "Session created successfully"
    id: int
    management_code: str
    management_link: str
    share_link: str


class AttendanceLookupOut(BaseModel):
    session: SessionPrivateOut
    attendance_code: str
