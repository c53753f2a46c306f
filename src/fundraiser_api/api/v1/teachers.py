"""Teachers API endpoints (admin)."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from fundraiser_api.core.dependencies import STAFF_ROLES, get_async_session, require_role
from fundraiser_api.models.user import User
from fundraiser_api.schemas.common import PaginationMeta, PaginationParams, ValidationResponse
from fundraiser_api.schemas.teacher import (
    PaginatedTeacherResponse,
    TeacherCreateRequest,
    TeacherResponse,
    TeacherUpdateRequest,
    TeacherValidateRequest,
)
from fundraiser_api.services import teacher_service

teachers_router = APIRouter(prefix="/teachers", tags=["teachers"])


@teachers_router.get("")
async def list_teachers(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _user: Annotated[User, Depends(require_role(*STAFF_ROLES))],
    pagination: Annotated[PaginationParams, Depends()],
    school_id: Annotated[uuid.UUID | None, Query(description="Filter by school")] = None,
) -> PaginatedTeacherResponse:
    """List teachers, optionally for one school."""
    teachers, total = await teacher_service.list_teachers(
        session, school_id=school_id, page=pagination.page, page_size=pagination.page_size
    )
    return PaginatedTeacherResponse(
        items=[TeacherResponse.model_validate(t) for t in teachers],
        pagination=PaginationMeta.build(total, pagination),
    )


@teachers_router.post("/validate")
async def validate_teacher(
    body: TeacherValidateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _user: Annotated[User, Depends(require_role(*STAFF_ROLES))],
) -> ValidationResponse:
    """Check a teacher against the rules without saving it."""
    errors = await teacher_service.validate_teacher_candidate(
        session,
        first_name=body.first_name,
        last_name=body.last_name,
        school_id=body.school_id,
        teacher_id=body.teacher_id,
    )
    return ValidationResponse.from_errors(errors)


@teachers_router.get("/{teacher_id}")
async def get_teacher(
    teacher_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _user: Annotated[User, Depends(require_role(*STAFF_ROLES))],
) -> TeacherResponse:
    """Get a single teacher."""
    return TeacherResponse.model_validate(await teacher_service.require_teacher(session, teacher_id))


@teachers_router.post("", status_code=status.HTTP_201_CREATED)
async def create_teacher(
    body: TeacherCreateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_user: Annotated[User, Depends(require_role(*STAFF_ROLES))],
) -> TeacherResponse:
    """Create a teacher at a school."""
    teacher = await teacher_service.create_teacher(
        session, first_name=body.first_name, last_name=body.last_name, school_id=body.school_id
    )
    logger.info(f"User {current_user.username} created teacher {teacher.id}")
    return TeacherResponse.model_validate(teacher)


@teachers_router.patch("/{teacher_id}")
async def update_teacher(
    teacher_id: uuid.UUID,
    body: TeacherUpdateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _user: Annotated[User, Depends(require_role(*STAFF_ROLES))],
) -> TeacherResponse:
    """Update a teacher's name or school."""
    teacher = await teacher_service.update_teacher(
        session, teacher_id, data=body.model_dump(exclude_unset=True, exclude_none=True)
    )
    return TeacherResponse.model_validate(teacher)


@teachers_router.delete("/{teacher_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_teacher(
    teacher_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_user: Annotated[User, Depends(require_role("admin"))],
) -> Response:
    """Delete a teacher no campaign targets.  Requires admin."""
    await teacher_service.delete_teacher(session, teacher_id)
    logger.info(f"Admin {current_user.username} deleted teacher {teacher_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
