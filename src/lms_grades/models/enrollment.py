# File: src/lms_grades/models/enrollment.py
from sqlmodel import SQLModel, Field, Relationship, Column
import enum
import uuid
from datetime import datetime
from typing import Optional, TYPE_CHECKING, List
from sqlalchemy import Enum as SQLAlchemyEnum, UniqueConstraint
from src.lms_grades.utils.time import get_utc_time

if TYPE_CHECKING:
    from src.lms_grades.models.course import Course
    from src.lms_grades.models.student_grade import StudentGrade


class EnrollmentStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    DROPPED = "DROPPED"


class ProgressStatus(str, enum.Enum):
    NOT_STARTED = "NOT_STARTED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"


class Enrollment(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("student_id", "course_id", name="uq_enrollment_student_course"),
        {"extend_existing": True},
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    student_id: uuid.UUID = Field(index=True)
    course_id: uuid.UUID = Field(foreign_key="course.id", index=True)
    status: EnrollmentStatus = Field(default=EnrollmentStatus.ACTIVE, sa_column=Column(SQLAlchemyEnum(EnrollmentStatus), nullable=False))
    enroll_date: datetime = Field(default_factory=get_utc_time)
    # Denormalized snapshot; read paths recompute instead of trusting it
    final_grade: Optional[float] = None

    course: "Course" = Relationship(back_populates="enrollments")
    grades: List["StudentGrade"] = Relationship(back_populates="enrollment", sa_relationship_kwargs={"cascade": "all, delete-orphan"})
    progress: Optional["ProgressMarker"] = Relationship(back_populates="enrollment", sa_relationship_kwargs={"cascade": "all, delete-orphan", "uselist": False})

    @property
    def is_active(self) -> bool:
        return self.status == EnrollmentStatus.ACTIVE


class ProgressMarker(SQLModel, table=True):
    __tablename__ = "progress_marker"
    __table_args__ = {"extend_existing": True}

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    enrollment_id: uuid.UUID = Field(foreign_key="enrollment.id", unique=True)
    progress_status: ProgressStatus = Field(default=ProgressStatus.NOT_STARTED, sa_column=Column(SQLAlchemyEnum(ProgressStatus), nullable=False))
    progress_percentage: float = Field(default=0.0)
    last_accessed_at: datetime = Field(default_factory=get_utc_time)

    enrollment: "Enrollment" = Relationship(back_populates="progress")
