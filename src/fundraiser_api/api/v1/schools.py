"""Schools API endpoints (admin)."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from fundraiser_api.core.dependencies import STAFF_ROLES, get_async_session, require_role
from fundraiser_api.models.school import School
from fundraiser_api.models.user import User
from fundraiser_api.schemas.common import PaginationMeta, PaginationParams
from fundraiser_api.schemas.school import (
    PaginatedSchoolResponse,
    SchoolCreateRequest,
    SchoolResponse,
    SchoolUpdateRequest,
)
from fundraiser_api.services import school_service

schools_router = APIRouter(prefix="/schools", tags=["schools"])


async def _build_response(session: AsyncSession, school: School) -> SchoolResponse:
    """Build a school response with the state resolved through the district."""
    data = SchoolResponse.model_validate(school)
    data.state_id = await school_service.get_school_state_id(session, school)
    return data


@schools_router.get("")
async def list_schools(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _user: Annotated[User, Depends(require_role(*STAFF_ROLES))],
    pagination: Annotated[PaginationParams, Depends()],
    district_id: Annotated[uuid.UUID | None, Query(description="Filter by district")] = None,
) -> PaginatedSchoolResponse:
    """List schools, optionally for one district."""
    schools, total = await school_service.list_schools(
        session, district_id=district_id, page=pagination.page, page_size=pagination.page_size
    )
    return PaginatedSchoolResponse(
        items=[SchoolResponse.model_validate(s) for s in schools],
        pagination=PaginationMeta.build(total, pagination),
    )


@schools_router.get("/{school_id}")
async def get_school(
    school_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _user: Annotated[User, Depends(require_role(*STAFF_ROLES))],
) -> SchoolResponse:
    """Get a single school, including the state it belongs to."""
    school = await school_service.require_school(session, school_id)
    return await _build_response(session, school)


@schools_router.post("", status_code=status.HTTP_201_CREATED)
async def create_school(
    body: SchoolCreateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_user: Annotated[User, Depends(require_role(*STAFF_ROLES))],
) -> SchoolResponse:
    """Create a school within a district."""
    school = await school_service.create_school(session, name=body.name, district_id=body.district_id)
    logger.info(f"User {current_user.username} created school {school.id}")
    return await _build_response(session, school)


@schools_router.patch("/{school_id}")
async def update_school(
    school_id: uuid.UUID,
    body: SchoolUpdateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _user: Annotated[User, Depends(require_role(*STAFF_ROLES))],
) -> SchoolResponse:
    """Rename a school."""
    school = await school_service.update_school(session, school_id, data=body.model_dump(exclude_unset=True))
    return await _build_response(session, school)


@schools_router.delete("/{school_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_school(
    school_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_user: Annotated[User, Depends(require_role("admin"))],
) -> Response:
    """Delete a school with no teachers and no campaigns.  Requires admin."""
    await school_service.delete_school(session, school_id)
    logger.info(f"Admin {current_user.username} deleted school {school_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
