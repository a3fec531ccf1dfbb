# student_grade.py
from sqlmodel import SQLModel, Field, Relationship, Column, JSON
import enum
import uuid
from datetime import datetime
from typing import List, Optional, TYPE_CHECKING
from sqlalchemy import Enum as SQLAlchemyEnum, Text, UniqueConstraint
from src.lms_grades.utils.time import get_utc_time, ensure_utc

if TYPE_CHECKING:
    from src.lms_grades.models.enrollment import Enrollment
    from src.lms_grades.models.grade_item import GradeItem


class SubmissionState(str, enum.Enum):
    NOT_SUBMITTED = "NOT_SUBMITTED"
    SUBMITTED = "SUBMITTED"
    GRADED = "GRADED"


class StudentGrade(SQLModel, table=True):
    __tablename__ = "student_grade"
    __table_args__ = (
        UniqueConstraint("enrollment_id", "item_id", name="uq_student_grade_enrollment_item"),
        {"extend_existing": True},
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    enrollment_id: uuid.UUID = Field(foreign_key="enrollment.id", index=True)
    item_id: uuid.UUID = Field(foreign_key="grade_item.id", index=True)
    score: float = Field(default=0.0)
    state: SubmissionState = Field(default=SubmissionState.NOT_SUBMITTED, sa_column=Column(SQLAlchemyEnum(SubmissionState), nullable=False))
    submitted_at: Optional[datetime] = None
    submission_data: Optional[dict] = Field(default=None, sa_type=JSON)
    feedback: Optional[str] = Field(default=None, sa_column=Column(Text))
    updated_at: datetime = Field(default_factory=get_utc_time)

    enrollment: "Enrollment" = Relationship(back_populates="grades")
    item: "GradeItem" = Relationship(back_populates="student_grades")
    history: List["GradeHistory"] = Relationship(back_populates="student_grade", sa_relationship_kwargs={"cascade": "all, delete-orphan"})

    @property
    def is_completed(self) -> bool:
        # Completed means graded; a submission alone does not count
        return self.state == SubmissionState.GRADED

    @property
    def has_submitted(self) -> bool:
        return self.submitted_at is not None

    def is_late(self, due_date: Optional[datetime]) -> bool:
        if self.submitted_at is None or due_date is None:
            return False
        return ensure_utc(self.submitted_at) > ensure_utc(due_date)


class GradeHistory(SQLModel, table=True):
    __tablename__ = "grade_history"
    __table_args__ = {"extend_existing": True}

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    student_grade_id: uuid.UUID = Field(foreign_key="student_grade.id", index=True)
    previous_score: float
    new_score: float
    modified_by: Optional[uuid.UUID] = None
    reason: Optional[str] = None
    created_at: datetime = Field(default_factory=get_utc_time)

    student_grade: StudentGrade = Relationship(back_populates="history")
