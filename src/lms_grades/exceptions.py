# File: src/lms_grades/exceptions.py
"""
Typed failures raised by the grading engine.

Every error is an ``HTTPException`` so controllers can raise it directly and
FastAPI renders it with the right status code. Callers outside a request
(tests, scripts) catch the concrete class.
"""
from fastapi import HTTPException, status


class GradingError(HTTPException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Grading operation failed."

    def __init__(self, detail: str | None = None):
        super().__init__(status_code=self.status_code, detail=detail or self.default_detail)


class CourseNotFound(GradingError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Course not found."


class ItemNotFound(GradingError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Grade item not found."


class AlreadyEnrolled(GradingError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Student is already enrolled in this course."


class NotEnrolled(GradingError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Student is not enrolled in this course."


class PastDueDate(GradingError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "The due date has passed. Submissions are no longer accepted."


class NotSubmittable(GradingError):
    default_detail = "This grade item does not accept submissions."


class InvalidScore(GradingError):
    default_detail = "Score must be between 0 and 100."


class InvalidWeights(GradingError):
    default_detail = "Attendance, assignment and exam weights must sum to 100."


class CatalogExists(GradingError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Grade items have already been provisioned for this course."


class ProvisioningFailed(GradingError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Provisioning failed; no changes were saved."


class RecalculationUnavailable(GradingError):
    """Never raised to callers of ``grade``; carried in the recalculation result."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Final grade could not be refreshed."
