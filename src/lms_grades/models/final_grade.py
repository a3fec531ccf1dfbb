from sqlmodel import SQLModel, Field
import uuid
from datetime import datetime
from sqlalchemy import UniqueConstraint
from src.lms_grades.utils.time import get_utc_time


class FinalGrade(SQLModel, table=True):
    """Denormalized per-student summary, refreshed after every grading event."""
    __tablename__ = "final_grade"
    __table_args__ = (
        UniqueConstraint("student_id", "course_id", name="uq_final_grade_student_course"),
        {"extend_existing": True},
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    student_id: uuid.UUID = Field(index=True)
    course_id: uuid.UUID = Field(foreign_key="course.id", index=True)
    attendance_rate: float = Field(default=0.0)
    assignment_score: float = Field(default=0.0)
    exam_score: float = Field(default=0.0)
    total_score: float = Field(default=0.0)
    progress_percentage: float = Field(default=0.0)
    updated_at: datetime = Field(default_factory=get_utc_time)
