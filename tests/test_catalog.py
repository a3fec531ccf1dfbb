import pytest
from sqlalchemy import event, func
from sqlmodel import select

from src.lms_grades.controllers.catalog_controller import (
    add_grade_item,
    exam_name,
    list_catalog,
    provision_catalog,
    update_grade_item,
)
from src.lms_grades.controllers.course_controller import create_course, update_course_weights
from src.lms_grades.controllers.enrollment_controller import initialize_enrollment
from src.lms_grades.exceptions import (
    CatalogExists,
    GradingError,
    InvalidWeights,
    ItemNotFound,
    ProvisioningFailed,
)
from src.lms_grades.models.course import Course
from src.lms_grades.models.grade_item import GradeCategory, GradeItem
from src.lms_grades.models.student_grade import StudentGrade
from src.lms_grades.schemas.course import CourseCreate, CourseWeights


def _item_count(db):
    return db.exec(select(func.count()).select_from(GradeItem)).one()


def test_provision_names_and_orders_items(db, course):
    items = provision_catalog(db, course.id, 2, 2, 5)

    assert [i.name for i in items] == [
        "Week 1 Attendance",
        "Week 2 Attendance",
        "Assignment 1",
        "Assignment 2",
        "Midterm",
        "Final",
        "Quiz 1",
        "Quiz 2",
        "Exam 5",
    ]
    assert [i.item_order for i in items] == list(range(1, 10))
    assert all(i.max_score == 100 for i in items)
    assert all(i.due_date is None for i in items if i.category == GradeCategory.ATTENDANCE)

    db.refresh(course)
    assert (course.weeks_count, course.assignment_count, course.exam_count) == (2, 2, 5)


def test_exam_names_past_fixed_list():
    assert exam_name(1) == "Midterm"
    assert exam_name(4) == "Quiz 2"
    assert exam_name(6) == "Exam 6"


def test_provision_twice_is_rejected(db, small_course):
    with pytest.raises(CatalogExists):
        provision_catalog(db, small_course.id, 1, 1, 1)
    assert _item_count(db) == 4


def test_provision_failure_leaves_no_items(db, course):
    calls = {"n": 0}

    def fail_on_third(mapper, connection, target):
        calls["n"] += 1
        if calls["n"] == 3:
            raise RuntimeError("disk full")

    event.listen(GradeItem, "before_insert", fail_on_third)
    try:
        with pytest.raises(ProvisioningFailed):
            provision_catalog(db, course.id, 2, 2, 1)
    finally:
        event.remove(GradeItem, "before_insert", fail_on_third)

    assert _item_count(db) == 0
    refreshed = db.get(Course, course.id)
    assert refreshed.weeks_count == 0
    assert refreshed.assignment_count == 0


def test_empty_catalog_is_allowed(db, course):
    assert provision_catalog(db, course.id, 0, 0, 0) == []
    assert list_catalog(db, course.id) == []


def test_create_course_with_counts_provisions_catalog(db):
    course = create_course(db, CourseCreate(
        title="Algorithms",
        attendance_weight=10,
        assignment_weight=40,
        exam_weight=50,
        weeks_count=3,
        assignment_count=1,
        exam_count=2,
    ))

    assert len(list_catalog(db, course.id)) == 6
    assert course.weeks_count == 3


def test_weights_must_sum_to_100(db, course):
    with pytest.raises(InvalidWeights):
        create_course(db, CourseCreate(
            title="Bad", attendance_weight=20, assignment_weight=50, exam_weight=20,
        ))
    with pytest.raises(InvalidWeights):
        update_course_weights(db, course.id, CourseWeights(
            attendance_weight=50, assignment_weight=50, exam_weight=50,
        ))

    updated = update_course_weights(db, course.id, CourseWeights(
        attendance_weight=0, assignment_weight=60, exam_weight=40,
    ))
    assert updated.assignment_weight == 60


def test_add_item_appends_and_backfills(db, small_course, student_id):
    initialize_enrollment(db, student_id, small_course.id)

    item = add_grade_item(db, small_course.id, GradeCategory.ASSIGNMENT, "Project")

    assert item.item_order == 5
    db.refresh(small_course)
    assert small_course.assignment_count == 2
    row = db.exec(select(StudentGrade).where(StudentGrade.item_id == item.id)).one()
    assert row.score == 0
    assert not row.is_completed


def test_attendance_items_cannot_be_added(db, small_course):
    with pytest.raises(GradingError):
        add_grade_item(db, small_course.id, GradeCategory.ATTENDANCE, "Extra week")


def test_update_item_due_date(db, small_course):
    assignment = [i for i in list_catalog(db, small_course.id) if i.category == GradeCategory.ASSIGNMENT][0]
    updated = update_grade_item(db, assignment.id, name="Essay")
    assert updated.name == "Essay"


def test_failed_provisioning_leaves_no_course(db):
    def fail_on_insert(mapper, connection, target):
        raise RuntimeError("disk full")

    event.listen(GradeItem, "before_insert", fail_on_insert)
    try:
        with pytest.raises(ProvisioningFailed):
            create_course(db, CourseCreate(
                title="Compilers",
                attendance_weight=20,
                assignment_weight=50,
                exam_weight=30,
                weeks_count=2,
                assignment_count=1,
                exam_count=1,
            ))
    finally:
        event.remove(GradeItem, "before_insert", fail_on_insert)

    assert db.exec(select(func.count()).select_from(Course)).one() == 0
    assert _item_count(db) == 0


def test_update_item_rejects_other_course(db, small_course):
    other = create_course(db, CourseCreate(
        title="Other", attendance_weight=20, assignment_weight=50, exam_weight=30,
    ))
    item = list_catalog(db, small_course.id)[0]

    with pytest.raises(ItemNotFound):
        update_grade_item(db, item.id, name="Moved", course_id=other.id)
