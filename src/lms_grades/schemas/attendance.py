from datetime import date
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, model_validator


class AttendanceCreate(BaseModel):
    student_id: UUID
    session_type: Literal["LIVE", "VOD"] = "LIVE"
    session_id: str = Field(..., min_length=1)
    duration_seconds: int = Field(..., ge=0)
    total_duration_seconds: int = Field(..., ge=0)
    attendance_date: date

    @model_validator(mode="after")
    def check_duration(self):
        if self.duration_seconds > self.total_duration_seconds:
            raise ValueError("duration_seconds cannot exceed total_duration_seconds")
        return self


class AttendanceRead(BaseModel):
    id: UUID
    student_id: UUID
    course_id: UUID
    session_type: str
    session_id: str
    duration_seconds: int
    total_duration_seconds: int
    attendance_date: date

    class Config:
        from_attributes = True
