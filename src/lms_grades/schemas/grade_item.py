from pydantic import BaseModel, Field
from typing import List, Optional
from uuid import UUID
from datetime import datetime

from src.lms_grades.models.grade_item import GradeCategory


class CatalogProvision(BaseModel):
    weeks_count: int = Field(..., ge=0, example=16)
    assignment_count: int = Field(..., ge=0, example=4)
    exam_count: int = Field(..., ge=0, example=2)


class GradeItemCreate(BaseModel):
    category: GradeCategory
    name: str
    due_date: Optional[datetime] = None


class GradeItemUpdate(BaseModel):
    name: Optional[str] = None
    due_date: Optional[datetime] = None


class GradeItemRead(BaseModel):
    id: UUID
    course_id: UUID
    category: GradeCategory
    name: str
    max_score: int
    due_date: Optional[datetime] = None
    item_order: int

    class Config:
        from_attributes = True


class CatalogRead(BaseModel):
    course_id: UUID
    items: List[GradeItemRead]
