import logging
from typing import Generator

from sqlmodel import Session, SQLModel, create_engine

from src.lms_grades.config.settings import DATABASE_URL, SQL_ECHO

logger = logging.getLogger(__name__)

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, echo=SQL_ECHO, connect_args=connect_args)


def create_db_and_tables():
    # Models must be imported so their tables are registered on the metadata
    import src.lms_grades.models  # noqa: F401

    SQLModel.metadata.create_all(engine)
    logger.info("Database tables created successfully.")


def get_db() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session
