# File location: src/lms_grades/utils/dependencies.py
from typing import Annotated, Optional
from uuid import UUID

from fastapi import Header


async def get_current_student_id(
    x_student_id: Annotated[UUID, Header(description="Identity of the calling student")],
) -> UUID:
    """
    Identity of the student making the request.

    Authentication happens upstream; the gateway forwards the verified id
    in the ``X-Student-Id`` header.
    """
    return x_student_id


async def get_grader_id(
    x_grader_id: Annotated[Optional[UUID], Header()] = None,
) -> Optional[UUID]:
    return x_grader_id
