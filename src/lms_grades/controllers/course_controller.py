# File: src/lms_grades/controllers/course_controller.py

import logging
from uuid import UUID

from sqlmodel import Session

from ..exceptions import CourseNotFound, InvalidWeights
from ..models.course import Course
from ..schemas.course import CourseCreate, CourseWeights
from ..utils.time import get_utc_time

logger = logging.getLogger(__name__)


def get_course(db: Session, course_id: UUID) -> Course:
    course = db.get(Course, course_id)
    if not course:
        raise CourseNotFound()
    return course


def _validate_weights(weights: CourseWeights):
    if weights.total != 100:
        logger.warning(
            f"Rejected weights {weights.attendance_weight}/{weights.assignment_weight}/"
            f"{weights.exam_weight} (sum {weights.total})"
        )
        raise InvalidWeights(f"Weights must sum to 100, got {weights.total}.")


def create_course(db: Session, payload: CourseCreate) -> Course:
    """
    Create a course with validated category weights.

    When all three category counts are supplied the grade item catalog is
    provisioned in the same transaction, so a failed provisioning leaves no
    course behind. Otherwise the course starts with an empty catalog and
    ``provision_catalog`` is called later.
    """
    _validate_weights(payload)

    course = Course(
        title=payload.title,
        description=payload.description,
        attendance_weight=payload.attendance_weight,
        assignment_weight=payload.assignment_weight,
        exam_weight=payload.exam_weight,
    )
    db.add(course)

    counts = (payload.weeks_count, payload.assignment_count, payload.exam_count)
    if all(c is not None for c in counts):
        from .catalog_controller import provision_catalog

        db.flush()
        # commits the course together with its catalog, or rolls both back
        provision_catalog(db, course.id, *counts)
    else:
        db.commit()

    db.refresh(course)
    logger.info(f"Created course {course.id} ('{course.title}')")

    return course


def update_course_weights(db: Session, course_id: UUID, weights: CourseWeights) -> Course:
    course = get_course(db, course_id)
    _validate_weights(weights)

    course.attendance_weight = weights.attendance_weight
    course.assignment_weight = weights.assignment_weight
    course.exam_weight = weights.exam_weight
    course.updated_at = get_utc_time()
    db.add(course)
    db.commit()
    db.refresh(course)
    logger.info(
        f"Updated weights for course {course_id}: "
        f"{course.attendance_weight}/{course.assignment_weight}/{course.exam_weight}"
    )
    return course
