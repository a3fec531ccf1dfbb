# File: src/lms_grades/routers/admin_grade_router.py

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from ..controllers import (
    attendance_controller,
    catalog_controller,
    course_controller,
    grade_controller,
    report_controller,
    submission_controller,
)
from ..db.session import get_db
from ..schemas.attendance import AttendanceCreate, AttendanceRead
from ..schemas.course import CourseCreate, CourseRead, CourseWeights
from ..schemas.grade import CourseStatistics, GradeExportRow, RecalculationResult, StudentGradesView
from ..schemas.grade_item import CatalogProvision, CatalogRead, GradeItemCreate, GradeItemRead, GradeItemUpdate
from ..schemas.submission import GradingOutcome, ItemSubmissions, SubmissionGrade
from ..utils.dependencies import get_grader_id

router = APIRouter(prefix="/courses", tags=["Admin Grades"])


# ─── Courses ───────────────────────────────────────────────────
@router.post("", response_model=CourseRead, status_code=status.HTTP_201_CREATED)
def create_course(payload: CourseCreate, db: Session = Depends(get_db)):
    return course_controller.create_course(db, payload)


@router.get("/{course_id}", response_model=CourseRead)
def read_course(course_id: UUID, db: Session = Depends(get_db)):
    return course_controller.get_course(db, course_id)


@router.put("/{course_id}/weights", response_model=CourseRead)
def update_weights(course_id: UUID, weights: CourseWeights, db: Session = Depends(get_db)):
    return course_controller.update_course_weights(db, course_id, weights)


# ─── Catalog ───────────────────────────────────────────────────
@router.post("/{course_id}/catalog", response_model=CatalogRead, status_code=status.HTTP_201_CREATED)
def provision_catalog(course_id: UUID, payload: CatalogProvision, db: Session = Depends(get_db)):
    items = catalog_controller.provision_catalog(
        db, course_id, payload.weeks_count, payload.assignment_count, payload.exam_count
    )
    return CatalogRead(course_id=course_id, items=items)


@router.get("/{course_id}/catalog", response_model=CatalogRead)
def list_catalog(course_id: UUID, db: Session = Depends(get_db)):
    return CatalogRead(course_id=course_id, items=catalog_controller.list_catalog(db, course_id))


@router.post("/{course_id}/items", response_model=GradeItemRead, status_code=status.HTTP_201_CREATED)
def add_item(course_id: UUID, payload: GradeItemCreate, db: Session = Depends(get_db)):
    return catalog_controller.add_grade_item(db, course_id, payload.category, payload.name, payload.due_date)


@router.patch("/{course_id}/items/{item_id}", response_model=GradeItemRead)
def update_item(course_id: UUID, item_id: UUID, payload: GradeItemUpdate, db: Session = Depends(get_db)):
    return catalog_controller.update_grade_item(db, item_id, payload.name, payload.due_date, course_id=course_id)


# ─── Grading ───────────────────────────────────────────────────
@router.get("/{course_id}/items/{item_id}/submissions", response_model=ItemSubmissions)
def item_submissions(course_id: UUID, item_id: UUID, db: Session = Depends(get_db)):
    return submission_controller.list_item_submissions(db, item_id, course_id=course_id)


@router.put("/{course_id}/items/{item_id}/students/{student_id}/grade", response_model=GradingOutcome)
def grade_item(
    course_id: UUID,
    item_id: UUID,
    student_id: UUID,
    payload: SubmissionGrade,
    grader_id: Optional[UUID] = Depends(get_grader_id),
    db: Session = Depends(get_db),
):
    return submission_controller.grade(
        db,
        item_id,
        student_id,
        payload.score,
        feedback=payload.feedback,
        graded_by=payload.graded_by or grader_id,
        reason=payload.reason,
        course_id=course_id,
    )


@router.post("/{course_id}/attendance", response_model=RecalculationResult)
def record_attendance(course_id: UUID, payload: AttendanceCreate, db: Session = Depends(get_db)):
    return attendance_controller.record_attendance(db, course_id, payload)


@router.get("/{course_id}/students/{student_id}/attendance", response_model=List[AttendanceRead])
def student_attendance(course_id: UUID, student_id: UUID, db: Session = Depends(get_db)):
    return attendance_controller.get_attendance(db, course_id, student_id)


@router.post("/{course_id}/students/{student_id}/recalculate", response_model=RecalculationResult)
def recalculate(course_id: UUID, student_id: UUID, db: Session = Depends(get_db)):
    return grade_controller.recalculate_and_persist(db, course_id, student_id)


@router.get("/{course_id}/students/{student_id}/grades", response_model=StudentGradesView)
def student_grades(course_id: UUID, student_id: UUID, db: Session = Depends(get_db)):
    return grade_controller.get_student_grades(db, course_id, student_id)


# ─── Reports ───────────────────────────────────────────────────
@router.get("/{course_id}/statistics", response_model=CourseStatistics)
def statistics(course_id: UUID, db: Session = Depends(get_db)):
    return report_controller.course_statistics(db, course_id)


@router.get("/{course_id}/export", response_model=List[GradeExportRow])
def export_grades(course_id: UUID, db: Session = Depends(get_db)):
    return report_controller.export_course_grades(db, course_id)
