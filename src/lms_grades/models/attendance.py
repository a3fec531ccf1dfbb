from sqlmodel import SQLModel, Field
import uuid
from datetime import date, datetime
from sqlalchemy import UniqueConstraint
from src.lms_grades.utils.time import get_utc_time


class AttendanceRecord(SQLModel, table=True):
    __tablename__ = "attendance_record"
    __table_args__ = (
        UniqueConstraint("student_id", "course_id", "session_id", name="uq_attendance_session"),
        {"extend_existing": True},
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    student_id: uuid.UUID = Field(index=True)
    course_id: uuid.UUID = Field(foreign_key="course.id", index=True)
    session_type: str = Field(default="LIVE")  # LIVE or VOD
    session_id: str
    duration_seconds: int = Field(default=0)  # time the student was present
    total_duration_seconds: int = Field(default=0)  # session length
    attendance_date: date
    updated_at: datetime = Field(default_factory=get_utc_time)

    @property
    def session_rate(self) -> float:
        if self.total_duration_seconds <= 0:
            return 0.0
        return self.duration_seconds / self.total_duration_seconds * 100
