from sqlmodel import SQLModel, Field, Relationship
import uuid
from typing import List, Optional, TYPE_CHECKING
from datetime import datetime
from src.lms_grades.utils.time import get_utc_time

if TYPE_CHECKING:
    from src.lms_grades.models.enrollment import Enrollment
    from src.lms_grades.models.grade_item import GradeItem


class Course(SQLModel, table=True):
    __tablename__ = 'course'
    __table_args__ = {"extend_existing": True}

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    title: str
    description: Optional[str] = None

    # Category weights in percent; the three always sum to 100
    attendance_weight: int = Field(default=20)
    assignment_weight: int = Field(default=50)
    exam_weight: int = Field(default=30)

    # Expected cardinality of each category, used as progress denominators
    weeks_count: int = Field(default=0)
    assignment_count: int = Field(default=0)
    exam_count: int = Field(default=0)

    created_at: datetime = Field(default_factory=get_utc_time)
    updated_at: datetime = Field(default_factory=get_utc_time)

    # Relationships
    grade_items: List["GradeItem"] = Relationship(back_populates="course", sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "GradeItem.item_order"})
    enrollments: List["Enrollment"] = Relationship(back_populates="course", sa_relationship_kwargs={"cascade": "all, delete-orphan"})
