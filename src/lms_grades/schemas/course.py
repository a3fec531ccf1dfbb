# File: src/lms_grades/schemas/course.py
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
import uuid


class CourseWeights(BaseModel):
    attendance_weight: int = Field(..., ge=0, le=100, example=20)
    assignment_weight: int = Field(..., ge=0, le=100, example=50)
    exam_weight: int = Field(..., ge=0, le=100, example=30)

    @property
    def total(self) -> int:
        return self.attendance_weight + self.assignment_weight + self.exam_weight


class CourseCreate(CourseWeights):
    title: str = Field(..., example="Introduction to Databases")
    description: Optional[str] = Field(default=None, example="Relational modelling, SQL and transactions.")
    # When given, the grade item catalog is provisioned together with the course
    weeks_count: Optional[int] = Field(default=None, ge=0, example=16)
    assignment_count: Optional[int] = Field(default=None, ge=0, example=4)
    exam_count: Optional[int] = Field(default=None, ge=0, example=2)


class CourseRead(BaseModel):
    id: uuid.UUID
    title: str
    description: Optional[str] = None
    attendance_weight: int
    assignment_weight: int
    exam_weight: int
    weeks_count: int
    assignment_count: int
    exam_count: int
    created_at: datetime

    class Config:
        from_attributes = True
