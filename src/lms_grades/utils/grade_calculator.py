# File: src/lms_grades/utils/grade_calculator.py
"""
Pure grade computation.

Nothing in this module touches the database: callers load the course,
attendance records and per-item grades, and ``compute_grade`` turns them
into a ``GradeResult``. Dashboards, transcripts, exports and the final
grade write-back all go through here so they agree on the numbers.
"""
from typing import Iterable, Protocol, Sequence

from src.lms_grades.models.student_grade import SubmissionState
from src.lms_grades.schemas.grade import CategoryRates, GradeResult

MAX_ITEM_SCORE = 100.0
# A session attended at least this much earns full progress credit
FULL_CREDIT_SESSION_RATE = 80.0


class WeightedCourse(Protocol):
    attendance_weight: int
    assignment_weight: int
    exam_weight: int
    weeks_count: int
    assignment_count: int
    exam_count: int


class AttendanceLike(Protocol):
    duration_seconds: int
    total_duration_seconds: int


class GradeLike(Protocol):
    score: float
    state: SubmissionState


def _clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def effective_score(grade: GradeLike) -> float:
    """Score that counts toward averages; ungraded rows count as 0."""
    if grade.state != SubmissionState.GRADED:
        return 0.0
    return float(grade.score or 0.0)


def attendance_rate(records: Iterable[AttendanceLike]) -> float:
    attended = 0
    required = 0
    for record in records:
        attended += record.duration_seconds or 0
        required += record.total_duration_seconds or 0
    if required <= 0:
        return 0.0
    return _clamp(attended / required * 100)


def session_credit(record: AttendanceLike) -> float:
    if not record.total_duration_seconds or record.total_duration_seconds <= 0:
        return 0.0
    rate = _clamp(record.duration_seconds / record.total_duration_seconds * 100)
    return MAX_ITEM_SCORE if rate >= FULL_CREDIT_SESSION_RATE else rate


def category_average(grades: Sequence[GradeLike]) -> float:
    # Averaged over every catalog row, so missing work drags the average down
    if not grades:
        return 0.0
    return sum(effective_score(g) for g in grades) / len(grades)


def _rate(earned: float, possible: float) -> float:
    if possible <= 0:
        return 0.0
    return earned / possible * 100


def compute_grade(
    course: WeightedCourse,
    attendance_records: Sequence[AttendanceLike],
    assignment_grades: Sequence[GradeLike],
    exam_grades: Sequence[GradeLike],
) -> GradeResult:
    att_rate = attendance_rate(attendance_records)
    assignment_avg = category_average(assignment_grades)
    exam_avg = category_average(exam_grades)

    # No re-normalization: weights that do not sum to 100 are a configuration bug
    weighted_total = (
        att_rate * course.attendance_weight / 100
        + assignment_avg * course.assignment_weight / 100
        + exam_avg * course.exam_weight / 100
    )

    possible_attendance = course.weeks_count * MAX_ITEM_SCORE
    possible_assignment = course.assignment_count * MAX_ITEM_SCORE
    possible_exam = course.exam_count * MAX_ITEM_SCORE

    earned_attendance = min(
        sum(session_credit(r) for r in attendance_records),
        possible_attendance,
    )
    earned_assignment = sum(effective_score(g) for g in assignment_grades)
    earned_exam = sum(effective_score(g) for g in exam_grades)

    earned = earned_attendance + earned_assignment + earned_exam
    possible = possible_attendance + possible_assignment + possible_exam

    return GradeResult(
        attendance_rate=att_rate,
        assignment_avg=assignment_avg,
        exam_avg=exam_avg,
        weighted_total=weighted_total,
        progress_percentage=_clamp(_rate(earned, possible)),
        completion_rates=CategoryRates(
            attendance=_clamp(_rate(earned_attendance, possible_attendance)),
            assignment=_clamp(_rate(earned_assignment, possible_assignment)),
            exam=_clamp(_rate(earned_exam, possible_exam)),
        ),
        earned_points=earned,
        possible_points=possible,
    )
