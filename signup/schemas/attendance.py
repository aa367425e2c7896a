# signup/schemas/attendance.py
from typing import Optional

from pydantic import BaseModel, Field


class JoinIn(BaseModel):
    name: Optional[str] = Field(None, max_length=128, description="Optional nickname")

    model_config = {"str_strip_whitespace": True}


class JoinOut(BaseModel):
    message: str = "Joined session successfully"
    attendance_code: str


class AttendeeOut(BaseModel):
    # no attendance_code: organizers only see id and name
    id: int
    name: str

    model_config = {"from_attributes": True}
