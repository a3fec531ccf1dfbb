# File: src/lms_grades/schemas/submission.py

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from uuid import UUID
from datetime import datetime

from src.lms_grades.models.grade_item import GradeCategory
from src.lms_grades.models.student_grade import SubmissionState
from src.lms_grades.schemas.grade import RecalculationResult


class SubmissionCreate(BaseModel):
    # opaque payload: uploaded file keys, quiz answers, ...
    submission_data: Dict[str, Any]


class SubmissionGrade(BaseModel):
    # Range is checked by the workflow so out-of-range scores raise InvalidScore
    score: float
    feedback: Optional[str] = None
    graded_by: Optional[UUID] = None
    reason: Optional[str] = None


class StudentGradeRead(BaseModel):
    id: UUID
    enrollment_id: UUID
    student_id: UUID
    item_id: UUID
    item_name: str
    category: GradeCategory
    due_date: Optional[datetime] = None
    score: float
    state: SubmissionState
    is_completed: bool
    has_submitted: bool
    is_late: bool
    submitted_at: Optional[datetime] = None
    submission_data: Optional[Dict[str, Any]] = None
    feedback: Optional[str] = None


class GradingOutcome(BaseModel):
    """The grade write always succeeded; ``recalculation`` reports the follow-up."""
    grade: StudentGradeRead
    recalculation: RecalculationResult


class ItemSubmissions(BaseModel):
    item_id: UUID
    item_name: str
    due_date: Optional[datetime] = None
    submissions: List[StudentGradeRead] = Field(default_factory=list)
