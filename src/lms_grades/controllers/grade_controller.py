# File: src/lms_grades/controllers/grade_controller.py

import logging
from typing import List, Tuple
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ..exceptions import NotEnrolled, RecalculationUnavailable
from ..models.attendance import AttendanceRecord
from ..models.course import Course
from ..models.enrollment import Enrollment
from ..models.final_grade import FinalGrade
from ..models.grade_item import GradeCategory, GradeItem
from ..models.student_grade import StudentGrade
from ..schemas.grade import (
    AttendanceSessionView,
    GradedItemView,
    GradeResult,
    RecalculationResult,
    StudentGradesView,
    WriteTarget,
)
from ..utils.grade_calculator import compute_grade
from ..utils.time import get_utc_time
from .course_controller import get_course
from .enrollment_controller import get_enrollment, touch_progress

logger = logging.getLogger(__name__)


def list_attendance(db: Session, course_id: UUID, student_id: UUID) -> List[AttendanceRecord]:
    return db.exec(
        select(AttendanceRecord)
        .where(
            AttendanceRecord.course_id == course_id,
            AttendanceRecord.student_id == student_id,
        )
        .order_by(AttendanceRecord.attendance_date, AttendanceRecord.session_id)
    ).all()


def load_catalog_grades(db: Session, enrollment: Enrollment) -> List[Tuple[GradeItem, StudentGrade]]:
    """
    Pair every catalog item with the enrollment's grade row.

    A missing row (an item added outside the enrollment flow) is stood in for
    by an unsaved zero placeholder, so averages always span the whole catalog.
    """
    items = db.exec(
        select(GradeItem)
        .where(GradeItem.course_id == enrollment.course_id)
        .order_by(GradeItem.item_order)
    ).all()
    rows = db.exec(
        select(StudentGrade).where(StudentGrade.enrollment_id == enrollment.id)
    ).all()
    by_item = {row.item_id: row for row in rows}

    pairs = []
    for item in items:
        grade = by_item.get(item.id)
        if grade is None:
            logger.warning(f"Enrollment {enrollment.id} has no grade row for item {item.id}; counting it as 0")
            grade = StudentGrade(enrollment_id=enrollment.id, item_id=item.id)
        pairs.append((item, grade))
    return pairs


def compute_for_enrollment(db: Session, course: Course, enrollment: Enrollment) -> GradeResult:
    attendance = list_attendance(db, course.id, enrollment.student_id)
    pairs = load_catalog_grades(db, enrollment)
    assignments = [g for item, g in pairs if item.category == GradeCategory.ASSIGNMENT]
    exams = [g for item, g in pairs if item.category == GradeCategory.EXAM]
    return compute_grade(course, attendance, assignments, exams)


def _require_enrollment(db: Session, course_id: UUID, student_id: UUID) -> Enrollment:
    enrollment = get_enrollment(db, course_id, student_id)
    if not enrollment:
        raise NotEnrolled(f"Student {student_id} has no enrollment in course {course_id}.")
    return enrollment


def _write_summary(db: Session, enrollment: Enrollment, result: GradeResult):
    summary = db.exec(
        select(FinalGrade).where(
            FinalGrade.student_id == enrollment.student_id,
            FinalGrade.course_id == enrollment.course_id,
        )
    ).first()
    if summary is None:
        summary = FinalGrade(student_id=enrollment.student_id, course_id=enrollment.course_id)

    summary.attendance_rate = result.attendance_rate
    summary.assignment_score = result.assignment_avg
    summary.exam_score = result.exam_avg
    summary.total_score = result.weighted_total
    summary.progress_percentage = result.progress_percentage
    summary.updated_at = get_utc_time()
    db.add(summary)

    # keep the enrollment cache in step with the summary
    enrollment.final_grade = result.weighted_total
    db.add(enrollment)
    touch_progress(db, enrollment, result.progress_percentage)
    db.flush()


def _write_enrollment_cache(db: Session, enrollment_id: UUID, result: GradeResult):
    enrollment = db.get(Enrollment, enrollment_id)
    enrollment.final_grade = result.weighted_total
    db.add(enrollment)
    db.flush()


def recalculate_and_persist(db: Session, course_id: UUID, student_id: UUID) -> RecalculationResult:
    """
    Recompute a student's course grade and store it.

    The FinalGrade summary is written first; if that store fails only the
    enrollment's ``final_grade`` cache is written. When both fail the result
    reports UNAVAILABLE instead of raising, so a grading operation that
    already committed is never undone. Repeated calls converge on the same
    stored values.
    """
    # a missing course or enrollment is still raised; only store failures are reported
    try:
        course = get_course(db, course_id)
        enrollment = _require_enrollment(db, course_id, student_id)
        enrollment_id = enrollment.id
        result = compute_for_enrollment(db, course, enrollment)
    except SQLAlchemyError as e:
        db.rollback()
        error = RecalculationUnavailable(f"Could not load grade data: {e}")
        logger.error(f"Recalculation for student {student_id} in course {course_id} failed: {error.detail}", exc_info=True)
        return RecalculationResult(course_id=course_id, student_id=student_id, target=WriteTarget.UNAVAILABLE, error=error.detail)

    try:
        _write_summary(db, enrollment, result)
        db.commit()
        target = WriteTarget.SUMMARY
    except SQLAlchemyError as e:
        db.rollback()
        logger.warning(f"Final grade summary unavailable ({e}); writing enrollment cache only")
        try:
            _write_enrollment_cache(db, enrollment_id, result)
            db.commit()
            target = WriteTarget.ENROLLMENT_CACHE
        except SQLAlchemyError as cache_error:
            db.rollback()
            error = RecalculationUnavailable(f"Final grade could not be stored: {cache_error}")
            logger.error(f"Recalculation for student {student_id} in course {course_id}: {error.detail}", exc_info=True)
            return RecalculationResult(
                course_id=course_id,
                student_id=student_id,
                target=WriteTarget.UNAVAILABLE,
                result=result,
                error=error.detail,
            )

    logger.info(
        f"Final grade for student {student_id} in course {course_id}: "
        f"{result.weighted_total:.2f} (progress {result.progress_percentage:.1f}%) -> {target.value}"
    )
    return RecalculationResult(course_id=course_id, student_id=student_id, target=target, result=result)


def get_student_grades(db: Session, course_id: UUID, student_id: UUID) -> StudentGradesView:
    """Transcript/dashboard view; always recomputed rather than read from the cache."""
    course = get_course(db, course_id)
    enrollment = _require_enrollment(db, course_id, student_id)

    attendance = list_attendance(db, course_id, student_id)
    pairs = load_catalog_grades(db, enrollment)

    def _view(item: GradeItem, grade: StudentGrade) -> GradedItemView:
        return GradedItemView(
            id=item.id,
            name=item.name,
            category=item.category,
            due_date=item.due_date,
            score=grade.score,
            state=grade.state,
            is_completed=grade.is_completed,
            is_late=grade.is_late(item.due_date),
        )

    assignments = [g for item, g in pairs if item.category == GradeCategory.ASSIGNMENT]
    exams = [g for item, g in pairs if item.category == GradeCategory.EXAM]

    return StudentGradesView(
        course_id=course.id,
        course_title=course.title,
        student_id=student_id,
        attendance_weight=course.attendance_weight,
        assignment_weight=course.assignment_weight,
        exam_weight=course.exam_weight,
        weeks_count=course.weeks_count,
        assignment_count=course.assignment_count,
        exam_count=course.exam_count,
        attendance_sessions=[
            AttendanceSessionView(
                session_id=r.session_id,
                session_type=r.session_type,
                attendance_date=r.attendance_date,
                duration_seconds=r.duration_seconds,
                total_duration_seconds=r.total_duration_seconds,
                attendance_rate=r.session_rate,
            )
            for r in attendance
        ],
        assignments=[_view(item, g) for item, g in pairs if item.category == GradeCategory.ASSIGNMENT],
        exams=[_view(item, g) for item, g in pairs if item.category == GradeCategory.EXAM],
        grade=compute_grade(course, attendance, assignments, exams),
        cached_final_grade=enrollment.final_grade,
    )
