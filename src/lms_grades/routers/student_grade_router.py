# File: src/lms_grades/routers/student_grade_router.py

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from ..controllers.enrollment_controller import drop_enrollment, initialize_enrollment
from ..controllers.grade_controller import get_student_grades
from ..controllers.submission_controller import get_student_grade, submit
from ..db.session import get_db
from ..schemas.enrollment import EnrollmentInitialized, EnrollmentRead
from ..schemas.grade import StudentGradesView
from ..schemas.submission import StudentGradeRead, SubmissionCreate
from ..utils.dependencies import get_current_student_id

router = APIRouter(tags=["Student Grades"])


@router.post(
    "/courses/{course_id}/enroll",
    response_model=EnrollmentInitialized,
    status_code=status.HTTP_201_CREATED,
)
def enroll(
    course_id: UUID,
    student_id: UUID = Depends(get_current_student_id),
    db: Session = Depends(get_db),
):
    return initialize_enrollment(db, student_id, course_id)


@router.delete("/courses/{course_id}/enroll", response_model=EnrollmentRead)
def drop(
    course_id: UUID,
    student_id: UUID = Depends(get_current_student_id),
    db: Session = Depends(get_db),
):
    return drop_enrollment(db, student_id, course_id)


@router.get("/courses/{course_id}/grades", response_model=StudentGradesView)
def my_grades(
    course_id: UUID,
    student_id: UUID = Depends(get_current_student_id),
    db: Session = Depends(get_db),
):
    return get_student_grades(db, course_id, student_id)


@router.get("/items/{item_id}", response_model=StudentGradeRead)
def my_item_grade(
    item_id: UUID,
    student_id: UUID = Depends(get_current_student_id),
    db: Session = Depends(get_db),
):
    return get_student_grade(db, item_id, student_id)


@router.post("/items/{item_id}/submissions", response_model=StudentGradeRead)
def submit_item(
    item_id: UUID,
    payload: SubmissionCreate,
    student_id: UUID = Depends(get_current_student_id),
    db: Session = Depends(get_db),
):
    return submit(db, student_id, item_id, payload.submission_data)
