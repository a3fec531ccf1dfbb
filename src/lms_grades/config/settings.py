import os
import logging
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Load environment variables from .env file
load_dotenv()


def _normalise_database_url(url: str) -> str:
    # Older Postgres providers hand out postgres:// which SQLAlchemy rejects
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


DATABASE_URL = _normalise_database_url(os.getenv("DATABASE_URL", "sqlite:///./lms_grades.db"))
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() in ("1", "true", "yes")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]

if DATABASE_URL.startswith("sqlite"):
    logger.info("Using SQLite database; set DATABASE_URL for Postgres in production")
