# ───────────────────────────────────────────────────────────────
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import configure_mappers

# ─── Local imports ─────────────────────────────────────────────
from src.lms_grades.config.settings import CORS_ORIGINS, LOG_LEVEL
from src.lms_grades.db.session import create_db_and_tables
from src.lms_grades.routers import admin_grade_router, student_grade_router
from src.lms_grades.utils.time import get_utc_time

# ─── Logging ───────────────────────────────────────────────────
logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

# ─── FastAPI app ───────────────────────────────────────────────
app = FastAPI(
    title="LMS Grades",
    description="Grade and progress computation API",
    version="1.0.0",
)

# ─── Middlewares ───────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ─── Startup ───────────────────────────────────────────────────
@app.on_event("startup")
async def on_startup():
    logging.info("Configuring SQLAlchemy mappers...")
    try:
        configure_mappers()
        logging.info("Mappers configured successfully.")
    except Exception as e:
        logging.error(f"Mapper configuration failed: {e}", exc_info=True)
        raise

    logging.info("Creating database and tables...")
    try:
        create_db_and_tables()
    except Exception as e:
        logging.error(f"Failed to create database and tables: {e}", exc_info=True)
        raise


# ─── Routers ───────────────────────────────────────────────────
app.include_router(admin_grade_router.router, prefix="/api/admin")
app.include_router(student_grade_router.router, prefix="/api/student")


# ─── Simple endpoints ──────────────────────────────────────────
@app.get("/")
async def root():
    return {
        "message": "LMS Grades API",
        "docs_url": "/docs",
        "redoc_url": "/redoc",
    }


@app.get("/health")
async def health_check():
    return {"status": "ok", "timestamp": get_utc_time().isoformat()}
