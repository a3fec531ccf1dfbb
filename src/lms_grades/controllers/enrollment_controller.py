# File: src/lms_grades/controllers/enrollment_controller.py

import logging
from typing import Optional
from uuid import UUID

from sqlmodel import Session, select

from ..exceptions import AlreadyEnrolled, NotEnrolled, ProvisioningFailed
from ..models.enrollment import Enrollment, EnrollmentStatus, ProgressMarker, ProgressStatus
from ..models.grade_item import GradeCategory, GradeItem
from ..models.student_grade import StudentGrade
from ..schemas.enrollment import EnrollmentInitialized, EnrollmentRead, ProgressRead
from ..utils.time import get_utc_time
from .course_controller import get_course

logger = logging.getLogger(__name__)


def get_enrollment(db: Session, course_id: UUID, student_id: UUID) -> Optional[Enrollment]:
    return db.exec(
        select(Enrollment).where(
            Enrollment.course_id == course_id,
            Enrollment.student_id == student_id,
        )
    ).first()


def is_actively_enrolled(db: Session, course_id: UUID, student_id: UUID) -> bool:
    enrollment = get_enrollment(db, course_id, student_id)
    return enrollment is not None and enrollment.is_active


def ensure_enrollment(db: Session, course_id: UUID, student_id: UUID) -> Enrollment:
    """Raise NotEnrolled unless the student is actively enrolled in the course."""
    enrollment = get_enrollment(db, course_id, student_id)
    if not enrollment or not enrollment.is_active:
        raise NotEnrolled(f"Student {student_id} is not enrolled in course {course_id}.")
    return enrollment


def _count_by_category(items) -> dict:
    counts = {category.value.lower(): 0 for category in GradeCategory}
    for item in items:
        counts[item.category.value.lower()] += 1
    counts["total"] = len(items)
    return counts


def initialize_enrollment(db: Session, student_id: UUID, course_id: UUID) -> EnrollmentInitialized:
    """
    Enroll a student and materialize one placeholder grade per catalog item.

    A DROPPED enrollment for the same pair is reactivated rather than
    duplicated, and only the placeholders it is missing are created. An empty
    catalog is not an error: the enrollment simply has no grade rows yet.
    """
    logger.info(f"Initializing enrollment for student {student_id} in course {course_id}")
    course = get_course(db, course_id)

    enrollment = get_enrollment(db, course_id, student_id)
    if enrollment and enrollment.is_active:
        logger.warning(f"Student {student_id} is already enrolled in course {course_id}")
        raise AlreadyEnrolled()

    items = db.exec(
        select(GradeItem)
        .where(GradeItem.course_id == course_id)
        .order_by(GradeItem.item_order)
    ).all()

    now = get_utc_time()
    try:
        if enrollment:
            logger.info(f"Reactivating dropped enrollment {enrollment.id}")
            enrollment.status = EnrollmentStatus.ACTIVE
            enrollment.enroll_date = now
            existing_item_ids = {g.item_id for g in enrollment.grades}
        else:
            enrollment = Enrollment(student_id=student_id, course_id=course.id, enroll_date=now)
            existing_item_ids = set()
        db.add(enrollment)
        db.flush()

        progress = enrollment.progress
        if progress is None:
            progress = ProgressMarker(enrollment_id=enrollment.id, last_accessed_at=now)
        else:
            progress.last_accessed_at = now
        db.add(progress)

        created = 0
        for item in items:
            if item.id in existing_item_ids:
                continue
            db.add(StudentGrade(enrollment_id=enrollment.id, item_id=item.id))
            created += 1
        db.flush()
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Enrollment of student {student_id} in course {course_id} failed: {e}", exc_info=True)
        raise ProvisioningFailed("Enrollment could not be completed; no changes were saved.")

    db.refresh(enrollment)
    db.refresh(progress)
    if items:
        logger.info(f"Created {created} placeholder grades for enrollment {enrollment.id}")
    else:
        logger.info(f"Course {course_id} has no grade items yet; enrollment {enrollment.id} has no grade rows")

    return EnrollmentInitialized(
        enrollment=EnrollmentRead.model_validate(enrollment),
        progress=ProgressRead.model_validate(progress),
        grade_items_count=_count_by_category(items),
    )


def drop_enrollment(db: Session, student_id: UUID, course_id: UUID) -> Enrollment:
    enrollment = ensure_enrollment(db, course_id, student_id)
    enrollment.status = EnrollmentStatus.DROPPED
    db.add(enrollment)
    db.commit()
    db.refresh(enrollment)
    logger.info(f"Dropped enrollment {enrollment.id}")
    return enrollment


def touch_progress(db: Session, enrollment: Enrollment, progress_percentage: float):
    """Move the progress marker along; called by the final grade write-back."""
    progress = enrollment.progress
    if progress is None:
        progress = ProgressMarker(enrollment_id=enrollment.id)
    progress.progress_percentage = progress_percentage
    if progress_percentage >= 100:
        progress.progress_status = ProgressStatus.COMPLETED
    elif progress_percentage > 0:
        progress.progress_status = ProgressStatus.IN_PROGRESS
    else:
        progress.progress_status = ProgressStatus.NOT_STARTED
    progress.last_accessed_at = get_utc_time()
    db.add(progress)
