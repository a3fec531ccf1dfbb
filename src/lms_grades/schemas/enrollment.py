# File: src/lms_grades/schemas/enrollment.py
import uuid
from datetime import datetime
from pydantic import BaseModel
from typing import Optional

from src.lms_grades.models.enrollment import EnrollmentStatus, ProgressStatus


class EnrollmentCreate(BaseModel):
    student_id: uuid.UUID


class ProgressRead(BaseModel):
    progress_status: ProgressStatus
    progress_percentage: float
    last_accessed_at: datetime

    class Config:
        from_attributes = True


class EnrollmentRead(BaseModel):
    id: uuid.UUID
    student_id: uuid.UUID
    course_id: uuid.UUID
    status: EnrollmentStatus
    enroll_date: datetime
    final_grade: Optional[float] = None

    class Config:
        from_attributes = True


class EnrollmentInitialized(BaseModel):
    enrollment: EnrollmentRead
    progress: ProgressRead
    grade_items_count: dict  # per category plus "total"
