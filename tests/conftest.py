import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import src.lms_grades.models  # noqa: F401
from src.lms_grades.controllers.catalog_controller import provision_catalog
from src.lms_grades.controllers.course_controller import create_course
from src.lms_grades.db.session import get_db
from src.lms_grades.main import app
from src.lms_grades.schemas.course import CourseCreate


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def db(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def course(db):
    """A 20/50/30 course with an empty catalog."""
    return create_course(db, CourseCreate(
        title="Databases",
        attendance_weight=20,
        assignment_weight=50,
        exam_weight=30,
    ))


@pytest.fixture
def small_course(db, course):
    """Two weeks, one assignment, one exam."""
    provision_catalog(db, course.id, 2, 1, 1)
    db.refresh(course)
    return course


@pytest.fixture
def student_id():
    return uuid.uuid4()


@pytest.fixture
def client(engine):
    def _get_db():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_db] = _get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
