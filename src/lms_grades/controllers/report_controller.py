# File: src/lms_grades/controllers/report_controller.py

import logging
import statistics
from typing import List
from uuid import UUID

from sqlmodel import Session, select

from ..models.enrollment import Enrollment, EnrollmentStatus
from ..models.grade_item import GradeItem
from ..models.student_grade import StudentGrade, SubmissionState
from ..schemas.grade import CourseStatistics, GradeExportRow, ItemStatistics
from .course_controller import get_course
from .grade_controller import compute_for_enrollment

logger = logging.getLogger(__name__)


def _active_enrollments(db: Session, course_id: UUID) -> List[Enrollment]:
    return db.exec(
        select(Enrollment)
        .where(
            Enrollment.course_id == course_id,
            Enrollment.status == EnrollmentStatus.ACTIVE,
        )
        .order_by(Enrollment.enroll_date)
    ).all()


def export_course_grades(db: Session, course_id: UUID) -> List[GradeExportRow]:
    course = get_course(db, course_id)
    rows = [
        GradeExportRow(
            enrollment_id=enrollment.id,
            student_id=enrollment.student_id,
            grade=compute_for_enrollment(db, course, enrollment),
        )
        for enrollment in _active_enrollments(db, course_id)
    ]
    logger.info(f"Exported grades for {len(rows)} students in course {course_id}")
    return rows


def course_statistics(db: Session, course_id: UUID) -> CourseStatistics:
    """
    Per-item score distribution across ACTIVE enrollments.

    Only GRADED rows contribute to the score figures; ``completion_rate`` is
    the share of active students whose row is graded.
    """
    course = get_course(db, course_id)
    items = db.exec(
        select(GradeItem)
        .where(GradeItem.course_id == course_id)
        .order_by(GradeItem.item_order)
    ).all()
    total_students = len(_active_enrollments(db, course_id))

    item_stats = []
    for item in items:
        scores = db.exec(
            select(StudentGrade.score)
            .join(Enrollment, StudentGrade.enrollment_id == Enrollment.id)
            .where(
                StudentGrade.item_id == item.id,
                StudentGrade.state == SubmissionState.GRADED,
                Enrollment.status == EnrollmentStatus.ACTIVE,
            )
        ).all()

        item_stats.append(ItemStatistics(
            item_id=item.id,
            name=item.name,
            category=item.category,
            total_students=total_students,
            graded_count=len(scores),
            average_score=statistics.fmean(scores) if scores else 0.0,
            min_score=min(scores) if scores else None,
            max_score=max(scores) if scores else None,
            median_score=statistics.median(scores) if scores else None,
            completion_rate=len(scores) / total_students * 100 if total_students else 0.0,
        ))

    return CourseStatistics(
        course_id=course.id,
        course_title=course.title,
        attendance_weight=course.attendance_weight,
        assignment_weight=course.assignment_weight,
        exam_weight=course.exam_weight,
        items=item_stats,
    )
