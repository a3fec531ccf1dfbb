# File: src/lms_grades/controllers/attendance_controller.py

import logging
from typing import List
from uuid import UUID

from sqlmodel import Session, select

from ..models.attendance import AttendanceRecord
from ..schemas.attendance import AttendanceCreate
from ..schemas.grade import RecalculationResult
from ..utils.time import get_utc_time
from .course_controller import get_course
from .enrollment_controller import ensure_enrollment
from .grade_controller import list_attendance, recalculate_and_persist

logger = logging.getLogger(__name__)


def record_attendance(db: Session, course_id: UUID, payload: AttendanceCreate) -> RecalculationResult:
    """
    Upsert one session's attendance for a student and refresh their grade.

    Sessions are keyed by ``session_id``; recording the same session again
    replaces the earlier durations.
    """
    get_course(db, course_id)
    ensure_enrollment(db, course_id, payload.student_id)

    record = db.exec(
        select(AttendanceRecord).where(
            AttendanceRecord.student_id == payload.student_id,
            AttendanceRecord.course_id == course_id,
            AttendanceRecord.session_id == payload.session_id,
        )
    ).first()
    if record is None:
        record = AttendanceRecord(
            student_id=payload.student_id,
            course_id=course_id,
            session_id=payload.session_id,
            attendance_date=payload.attendance_date,
        )

    record.session_type = payload.session_type
    record.total_duration_seconds = payload.total_duration_seconds
    record.duration_seconds = min(payload.duration_seconds, payload.total_duration_seconds)
    record.attendance_date = payload.attendance_date
    record.updated_at = get_utc_time()
    db.add(record)
    db.commit()
    logger.info(
        f"Attendance for student {payload.student_id} in session {payload.session_id}: "
        f"{record.duration_seconds}/{record.total_duration_seconds}s"
    )

    return recalculate_and_persist(db, course_id, payload.student_id)


def get_attendance(db: Session, course_id: UUID, student_id: UUID) -> List[AttendanceRecord]:
    get_course(db, course_id)
    return list_attendance(db, course_id, student_id)
