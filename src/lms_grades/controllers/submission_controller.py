# File: src/lms_grades/controllers/submission_controller.py

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlmodel import Session, select

from ..exceptions import InvalidScore, ItemNotFound, NotEnrolled, NotSubmittable, PastDueDate
from ..models.enrollment import Enrollment
from ..models.grade_item import GradeCategory, GradeItem
from ..models.student_grade import GradeHistory, StudentGrade, SubmissionState
from ..schemas.submission import GradingOutcome, ItemSubmissions, StudentGradeRead
from ..utils.time import ensure_utc, get_utc_time
from .enrollment_controller import ensure_enrollment, get_enrollment
from .grade_controller import recalculate_and_persist

logger = logging.getLogger(__name__)

MIN_SCORE = 0.0
MAX_SCORE = 100.0


def _get_item(db: Session, item_id: UUID, course_id: Optional[UUID] = None) -> GradeItem:
    item = db.get(GradeItem, item_id)
    if not item or (course_id is not None and item.course_id != course_id):
        raise ItemNotFound()
    return item


def _get_or_create_row(db: Session, enrollment: Enrollment, item: GradeItem) -> StudentGrade:
    row = db.exec(
        select(StudentGrade).where(
            StudentGrade.enrollment_id == enrollment.id,
            StudentGrade.item_id == item.id,
        )
    ).first()
    if row is None:
        # item was added without a backfill for this student
        logger.warning(f"Creating missing grade row for enrollment {enrollment.id}, item {item.id}")
        row = StudentGrade(enrollment_id=enrollment.id, item_id=item.id)
    return row


def _to_read(row: StudentGrade, item: GradeItem, student_id: UUID) -> StudentGradeRead:
    return StudentGradeRead(
        id=row.id,
        enrollment_id=row.enrollment_id,
        student_id=student_id,
        item_id=item.id,
        item_name=item.name,
        category=item.category,
        due_date=item.due_date,
        score=row.score,
        state=row.state,
        is_completed=row.is_completed,
        has_submitted=row.has_submitted,
        is_late=row.is_late(item.due_date),
        submitted_at=row.submitted_at,
        submission_data=row.submission_data,
        feedback=row.feedback,
    )


def submit(
    db: Session,
    student_id: UUID,
    item_id: UUID,
    submission_data: dict,
    now: Optional[datetime] = None,
) -> StudentGradeRead:
    """
    Record a student's submission for an assignment or exam.

    Resubmitting is allowed until the due date. A resubmission of already
    graded work sends it back to SUBMITTED, so it stops counting toward the
    grade until it is graded again.
    """
    # 1️⃣ Load & validate the item
    item = _get_item(db, item_id)
    if item.category == GradeCategory.ATTENDANCE:
        raise NotSubmittable()

    # 2️⃣ Check enrollment
    enrollment = ensure_enrollment(db, item.course_id, student_id)

    # 3️⃣ Deadline: submitting exactly at the due instant is still on time
    now = ensure_utc(now) if now is not None else get_utc_time()
    if item.due_date is not None and now > ensure_utc(item.due_date):
        logger.info(f"Rejected late submission from student {student_id} for item {item_id}")
        raise PastDueDate()

    # 4️⃣ Update the grade row
    row = _get_or_create_row(db, enrollment, item)
    was_graded = row.state == SubmissionState.GRADED
    if was_graded:
        logger.info(f"Student {student_id} resubmitted graded item {item_id}; awaiting regrade")
    row.submission_data = submission_data
    row.submitted_at = now
    row.state = SubmissionState.SUBMITTED
    row.updated_at = now
    db.add(row)
    db.commit()
    db.refresh(row)

    logger.info(f"Submission recorded for student {student_id}, item {item_id}")

    # 5️⃣ Drop the ungraded item from the stored final grade
    if was_graded:
        recalculation = recalculate_and_persist(db, item.course_id, student_id)
        if not recalculation.persisted:
            logger.warning(f"Resubmission saved but final grade not updated: {recalculation.error}")
        db.refresh(row)

    return _to_read(row, item, student_id)


def grade(
    db: Session,
    item_id: UUID,
    student_id: UUID,
    score: float,
    feedback: Optional[str] = None,
    graded_by: Optional[UUID] = None,
    reason: Optional[str] = None,
    course_id: Optional[UUID] = None,
) -> GradingOutcome:
    """
    Grade one item for one student, then recalculate their course grade.

    The grade is committed before the recalculation starts. A recalculation
    that cannot store its result is reported in the outcome, never by
    undoing the grade.
    """
    if score is None or not MIN_SCORE <= score <= MAX_SCORE:
        raise InvalidScore(f"Score must be between {MIN_SCORE:g} and {MAX_SCORE:g}, got {score}.")

    item = _get_item(db, item_id, course_id)
    if item.category == GradeCategory.ATTENDANCE:
        raise NotSubmittable("Attendance is graded from session records, not per item.")

    # dropped students can still be graded for work they handed in
    enrollment = get_enrollment(db, item.course_id, student_id)
    if enrollment is None:
        raise NotEnrolled(f"Student {student_id} has no enrollment in course {item.course_id}.")

    row = _get_or_create_row(db, enrollment, item)
    previous_score = row.score
    was_graded = row.state == SubmissionState.GRADED

    row.score = float(score)
    row.state = SubmissionState.GRADED
    if feedback is not None:
        row.feedback = feedback
    row.updated_at = get_utc_time()
    db.add(row)
    db.flush()

    if not was_graded or previous_score != row.score:
        db.add(GradeHistory(
            student_grade_id=row.id,
            previous_score=previous_score,
            new_score=row.score,
            modified_by=graded_by,
            reason=reason,
        ))

    db.commit()
    db.refresh(row)
    logger.info(f"Graded item {item_id} for student {student_id}: {previous_score} -> {row.score}")

    recalculation = recalculate_and_persist(db, item.course_id, student_id)
    if not recalculation.persisted:
        logger.warning(f"Grade for student {student_id} saved but final grade not updated: {recalculation.error}")

    db.refresh(row)
    return GradingOutcome(grade=_to_read(row, item, student_id), recalculation=recalculation)


def get_student_grade(db: Session, item_id: UUID, student_id: UUID) -> StudentGradeRead:
    item = _get_item(db, item_id)
    enrollment = ensure_enrollment(db, item.course_id, student_id)
    return _to_read(_get_or_create_row(db, enrollment, item), item, student_id)


def list_item_submissions(db: Session, item_id: UUID, course_id: Optional[UUID] = None) -> ItemSubmissions:
    """Every enrolled student's row for one item, for the grading screen."""
    item = _get_item(db, item_id, course_id)
    results = db.exec(
        select(StudentGrade, Enrollment)
        .join(Enrollment, StudentGrade.enrollment_id == Enrollment.id)
        .where(StudentGrade.item_id == item_id)
        .order_by(StudentGrade.submitted_at)
    ).all()

    return ItemSubmissions(
        item_id=item.id,
        item_name=item.name,
        due_date=item.due_date,
        submissions=[_to_read(row, item, enrollment.student_id) for row, enrollment in results],
    )
