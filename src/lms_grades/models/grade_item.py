# grade_item.py
from sqlmodel import SQLModel, Field, Relationship, Column
import enum
import uuid
from datetime import datetime
from typing import List, Optional, TYPE_CHECKING
from sqlalchemy import Enum as SQLAlchemyEnum, UniqueConstraint

if TYPE_CHECKING:
    from src.lms_grades.models.course import Course
    from src.lms_grades.models.student_grade import StudentGrade


class GradeCategory(str, enum.Enum):
    ATTENDANCE = "ATTENDANCE"
    ASSIGNMENT = "ASSIGNMENT"
    EXAM = "EXAM"


class GradeItem(SQLModel, table=True):
    __tablename__ = "grade_item"
    __table_args__ = (
        UniqueConstraint("course_id", "item_order", name="uq_grade_item_course_order"),
        {"extend_existing": True},
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    course_id: uuid.UUID = Field(foreign_key="course.id", index=True)
    category: GradeCategory = Field(sa_column=Column(SQLAlchemyEnum(GradeCategory), nullable=False))
    name: str
    max_score: int = Field(default=100)
    due_date: Optional[datetime] = None  # always None for attendance items
    item_order: int

    course: "Course" = Relationship(back_populates="grade_items")
    student_grades: List["StudentGrade"] = Relationship(back_populates="item")
