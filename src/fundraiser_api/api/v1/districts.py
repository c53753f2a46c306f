"""Districts API endpoints (admin)."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from fundraiser_api.core.dependencies import STAFF_ROLES, get_async_session, require_role
from fundraiser_api.models.user import User
from fundraiser_api.schemas.common import PaginationMeta, PaginationParams
from fundraiser_api.schemas.district import (
    DistrictCreateRequest,
    DistrictResponse,
    DistrictUpdateRequest,
    PaginatedDistrictResponse,
)
from fundraiser_api.services import district_service

districts_router = APIRouter(prefix="/districts", tags=["districts"])


@districts_router.get("")
async def list_districts(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _user: Annotated[User, Depends(require_role(*STAFF_ROLES))],
    pagination: Annotated[PaginationParams, Depends()],
    state_id: Annotated[uuid.UUID | None, Query(description="Filter by state")] = None,
) -> PaginatedDistrictResponse:
    """List districts, optionally for one state."""
    districts, total = await district_service.list_districts(
        session, state_id=state_id, page=pagination.page, page_size=pagination.page_size
    )
    return PaginatedDistrictResponse(
        items=[DistrictResponse.model_validate(d) for d in districts],
        pagination=PaginationMeta.build(total, pagination),
    )


@districts_router.get("/{district_id}")
async def get_district(
    district_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _user: Annotated[User, Depends(require_role(*STAFF_ROLES))],
) -> DistrictResponse:
    """Get a single district."""
    return DistrictResponse.model_validate(await district_service.require_district(session, district_id))


@districts_router.post("", status_code=status.HTTP_201_CREATED)
async def create_district(
    body: DistrictCreateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_user: Annotated[User, Depends(require_role(*STAFF_ROLES))],
) -> DistrictResponse:
    """Create a district within a state."""
    district = await district_service.create_district(session, name=body.name, state_id=body.state_id)
    logger.info(f"User {current_user.username} created district {district.id}")
    return DistrictResponse.model_validate(district)


@districts_router.patch("/{district_id}")
async def update_district(
    district_id: uuid.UUID,
    body: DistrictUpdateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _user: Annotated[User, Depends(require_role(*STAFF_ROLES))],
) -> DistrictResponse:
    """Rename a district."""
    district = await district_service.update_district(session, district_id, data=body.model_dump(exclude_unset=True))
    return DistrictResponse.model_validate(district)


@districts_router.delete("/{district_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_district(
    district_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_user: Annotated[User, Depends(require_role("admin"))],
) -> Response:
    """Delete a district that has no schools.  Requires admin."""
    await district_service.delete_district(session, district_id)
    logger.info(f"Admin {current_user.username} deleted district {district_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
