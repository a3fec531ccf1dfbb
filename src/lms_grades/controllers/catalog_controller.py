# File: src/lms_grades/controllers/catalog_controller.py

import logging
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlmodel import Session, select

from ..exceptions import CatalogExists, GradingError, ItemNotFound, ProvisioningFailed
from ..models.enrollment import Enrollment, EnrollmentStatus
from ..models.grade_item import GradeCategory, GradeItem
from ..models.student_grade import StudentGrade
from ..utils.time import ensure_utc, get_utc_time
from .course_controller import get_course

logger = logging.getLogger(__name__)

EXAM_NAMES = ("Midterm", "Final", "Quiz 1", "Quiz 2")

_COUNT_FIELDS = {
    GradeCategory.ATTENDANCE: "weeks_count",
    GradeCategory.ASSIGNMENT: "assignment_count",
    GradeCategory.EXAM: "exam_count",
}


def exam_name(index: int) -> str:
    """Display name for the 1-based ``index``-th exam of a course."""
    if index <= len(EXAM_NAMES):
        return EXAM_NAMES[index - 1]
    return f"Exam {index}"


def _build_catalog(course_id: UUID, weeks_count: int, assignment_count: int, exam_count: int) -> List[GradeItem]:
    items = []
    order = 0
    for week in range(1, weeks_count + 1):
        order += 1
        items.append(GradeItem(course_id=course_id, category=GradeCategory.ATTENDANCE, name=f"Week {week} Attendance", item_order=order))
    for number in range(1, assignment_count + 1):
        order += 1
        items.append(GradeItem(course_id=course_id, category=GradeCategory.ASSIGNMENT, name=f"Assignment {number}", item_order=order))
    for number in range(1, exam_count + 1):
        order += 1
        items.append(GradeItem(course_id=course_id, category=GradeCategory.EXAM, name=exam_name(number), item_order=order))
    return items


def list_catalog(db: Session, course_id: UUID) -> List[GradeItem]:
    get_course(db, course_id)
    return db.exec(
        select(GradeItem)
        .where(GradeItem.course_id == course_id)
        .order_by(GradeItem.item_order)
    ).all()


def provision_catalog(
    db: Session,
    course_id: UUID,
    weeks_count: int,
    assignment_count: int,
    exam_count: int,
) -> List[GradeItem]:
    """
    Create the full grade item catalog for a course in one unit of work.

    Either every item is inserted and the course's category counts are
    updated, or nothing is committed at all.
    """
    logger.info(
        f"Provisioning catalog for course {course_id}: "
        f"{weeks_count} weeks, {assignment_count} assignments, {exam_count} exams"
    )
    course = get_course(db, course_id)

    existing = db.exec(
        select(func.count()).select_from(GradeItem).where(GradeItem.course_id == course_id)
    ).one()
    if existing:
        logger.warning(f"Course {course_id} already has {existing} grade items; refusing to provision")
        raise CatalogExists()

    items = _build_catalog(course_id, weeks_count, assignment_count, exam_count)
    try:
        for item in items:
            db.add(item)
            db.flush()

        course.weeks_count = weeks_count
        course.assignment_count = assignment_count
        course.exam_count = exam_count
        course.updated_at = get_utc_time()
        db.add(course)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Catalog provisioning failed for course {course_id}: {e}", exc_info=True)
        raise ProvisioningFailed(f"Could not provision grade items for course {course_id}.")

    for item in items:
        db.refresh(item)
    logger.info(f"Provisioned {len(items)} grade items for course {course_id}")
    return items


def add_grade_item(
    db: Session,
    course_id: UUID,
    category: GradeCategory,
    name: str,
    due_date: Optional[datetime] = None,
) -> GradeItem:
    """Append an assignment or exam and backfill placeholders for active students."""
    if category == GradeCategory.ATTENDANCE:
        raise GradingError("Attendance items are created by catalog provisioning only.")

    course = get_course(db, course_id)
    last_order = db.exec(
        select(func.max(GradeItem.item_order)).where(GradeItem.course_id == course_id)
    ).one()

    item = GradeItem(
        course_id=course_id,
        category=category,
        name=name,
        due_date=ensure_utc(due_date),
        item_order=(last_order or 0) + 1,
    )
    try:
        db.add(item)
        db.flush()

        enrollments = db.exec(
            select(Enrollment).where(
                Enrollment.course_id == course_id,
                Enrollment.status == EnrollmentStatus.ACTIVE,
            )
        ).all()
        for enrollment in enrollments:
            db.add(StudentGrade(enrollment_id=enrollment.id, item_id=item.id))

        field = _COUNT_FIELDS[category]
        setattr(course, field, getattr(course, field) + 1)
        course.updated_at = get_utc_time()
        db.add(course)
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Adding grade item '{name}' to course {course_id} failed: {e}", exc_info=True)
        raise ProvisioningFailed(f"Could not add grade item '{name}'.")

    db.refresh(item)
    logger.info(f"Added {category.value} item '{name}' to course {course_id}; backfilled {len(enrollments)} students")
    return item


def update_grade_item(
    db: Session,
    item_id: UUID,
    name: Optional[str] = None,
    due_date: Optional[datetime] = None,
    course_id: Optional[UUID] = None,
) -> GradeItem:
    item = db.get(GradeItem, item_id)
    if not item or (course_id is not None and item.course_id != course_id):
        raise ItemNotFound()

    if name is not None:
        item.name = name
    if due_date is not None:
        if item.category == GradeCategory.ATTENDANCE:
            raise GradingError("Attendance items have no due date.")
        item.due_date = ensure_utc(due_date)

    db.add(item)
    db.commit()
    db.refresh(item)
    return item
