# File: src/lms_grades/schemas/grade.py
import enum
from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from src.lms_grades.models.grade_item import GradeCategory
from src.lms_grades.models.student_grade import SubmissionState


class CategoryRates(BaseModel):
    attendance: float = 0.0
    assignment: float = 0.0
    exam: float = 0.0


class GradeResult(BaseModel):
    """
    Output of the grade calculator.

    ``weighted_total`` is the course grade (category averages combined by the
    course weights). ``progress_percentage`` is earned points over all
    possible points; the two answer different questions and are never merged.
    """
    attendance_rate: float
    assignment_avg: float
    exam_avg: float
    weighted_total: float
    progress_percentage: float
    completion_rates: CategoryRates
    earned_points: float
    possible_points: float


class WriteTarget(str, enum.Enum):
    SUMMARY = "SUMMARY"
    ENROLLMENT_CACHE = "ENROLLMENT_CACHE"
    UNAVAILABLE = "UNAVAILABLE"


class RecalculationResult(BaseModel):
    course_id: UUID
    student_id: UUID
    target: WriteTarget
    result: Optional[GradeResult] = None
    error: Optional[str] = None

    @property
    def persisted(self) -> bool:
        return self.target != WriteTarget.UNAVAILABLE


class GradedItemView(BaseModel):
    id: UUID
    name: str
    category: GradeCategory
    due_date: Optional[datetime] = None
    score: float
    state: SubmissionState
    is_completed: bool
    is_late: bool


class AttendanceSessionView(BaseModel):
    session_id: str
    session_type: str
    attendance_date: date
    duration_seconds: int
    total_duration_seconds: int
    attendance_rate: float


class StudentGradesView(BaseModel):
    course_id: UUID
    course_title: str
    student_id: UUID
    attendance_weight: int
    assignment_weight: int
    exam_weight: int
    weeks_count: int
    assignment_count: int
    exam_count: int
    attendance_sessions: List[AttendanceSessionView] = Field(default_factory=list)
    assignments: List[GradedItemView] = Field(default_factory=list)
    exams: List[GradedItemView] = Field(default_factory=list)
    grade: GradeResult
    cached_final_grade: Optional[float] = None


class GradeExportRow(BaseModel):
    enrollment_id: UUID
    student_id: UUID
    grade: GradeResult


class ItemStatistics(BaseModel):
    item_id: UUID
    name: str
    category: GradeCategory
    total_students: int
    graded_count: int
    average_score: float
    min_score: Optional[float] = None
    max_score: Optional[float] = None
    median_score: Optional[float] = None
    completion_rate: float


class CourseStatistics(BaseModel):
    course_id: UUID
    course_title: str
    attendance_weight: int
    assignment_weight: int
    exam_weight: int
    items: List[ItemStatistics] = Field(default_factory=list)
