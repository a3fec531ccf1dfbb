# src/lms_grades/models/__init__.py

# Centralises all model imports so SQLAlchemy's metadata knows every table
# before mappers are configured or tables are created.

# --- Course configuration ---
from .course import Course
from .grade_item import GradeItem, GradeCategory

# --- Enrollment and per-student grade records (depend on Course) ---
from .enrollment import Enrollment, EnrollmentStatus, ProgressMarker, ProgressStatus
from .student_grade import StudentGrade, SubmissionState, GradeHistory

# --- Attendance and denormalized summaries ---
from .attendance import AttendanceRecord
from .final_grade import FinalGrade


# The __all__ list defines the public API for the 'models' package.
__all__ = [
    "Course",
    "GradeItem",
    "GradeCategory",
    "Enrollment",
    "EnrollmentStatus",
    "ProgressMarker",
    "ProgressStatus",
    "StudentGrade",
    "SubmissionState",
    "GradeHistory",
    "AttendanceRecord",
    "FinalGrade",
]
