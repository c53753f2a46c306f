"""Contributors API endpoints (admin)."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from fundraiser_api.core.dependencies import STAFF_ROLES, get_async_session, require_role
from fundraiser_api.models.user import User
from fundraiser_api.schemas.common import PaginationMeta, PaginationParams
from fundraiser_api.schemas.contribution import ContributionResponse, PaginatedContributionResponse
from fundraiser_api.schemas.contributor import (
    ContributorCreateRequest,
    ContributorResponse,
    ContributorUpdateRequest,
    PaginatedContributorResponse,
)
from fundraiser_api.services import contribution_service, contributor_service

contributors_router = APIRouter(prefix="/contributors", tags=["contributors"])


@contributors_router.get("")
async def list_contributors(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _user: Annotated[User, Depends(require_role(*STAFF_ROLES))],
    pagination: Annotated[PaginationParams, Depends()],
) -> PaginatedContributorResponse:
    """List contributors ordered by email."""
    contributors, total = await contributor_service.list_contributors(
        session, page=pagination.page, page_size=pagination.page_size
    )
    return PaginatedContributorResponse(
        items=[ContributorResponse.model_validate(c) for c in contributors],
        pagination=PaginationMeta.build(total, pagination),
    )


@contributors_router.get("/{contributor_id}")
async def get_contributor(
    contributor_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _user: Annotated[User, Depends(require_role(*STAFF_ROLES))],
) -> ContributorResponse:
    """Get a single contributor."""
    return ContributorResponse.model_validate(await contributor_service.require_contributor(session, contributor_id))


@contributors_router.get("/{contributor_id}/contributions")
async def list_contributor_contributions(
    contributor_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _user: Annotated[User, Depends(require_role(*STAFF_ROLES))],
    pagination: Annotated[PaginationParams, Depends()],
) -> PaginatedContributionResponse:
    """List a contributor's contributions across campaigns, newest first."""
    contributor = await contributor_service.require_contributor(session, contributor_id)
    contributions, total = await contribution_service.list_for_contributor(
        session, contributor.id, page=pagination.page, page_size=pagination.page_size
    )
    return PaginatedContributionResponse(
        items=[ContributionResponse.model_validate(c) for c in contributions],
        pagination=PaginationMeta.build(total, pagination),
    )


@contributors_router.post("", status_code=status.HTTP_201_CREATED)
async def create_contributor(
    body: ContributorCreateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_user: Annotated[User, Depends(require_role(*STAFF_ROLES))],
) -> ContributorResponse:
    """Create a contributor ahead of their first contribution."""
    contributor = await contributor_service.create_contributor(session, email=str(body.email), name=body.name)
    logger.info(f"User {current_user.username} created contributor {contributor.id}")
    return ContributorResponse.model_validate(contributor)


@contributors_router.patch("/{contributor_id}")
async def update_contributor(
    contributor_id: uuid.UUID,
    body: ContributorUpdateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _user: Annotated[User, Depends(require_role(*STAFF_ROLES))],
) -> ContributorResponse:
    """Update a contributor's name or email."""
    data = body.model_dump(exclude_unset=True)
    if data.get("email") is not None:
        data["email"] = str(data["email"])
    contributor = await contributor_service.update_contributor(session, contributor_id, data=data)
    return ContributorResponse.model_validate(contributor)


@contributors_router.delete("/{contributor_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_contributor(
    contributor_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_user: Annotated[User, Depends(require_role("admin"))],
) -> Response:
    """Delete a contributor that has no contributions.  Requires admin."""
    await contributor_service.delete_contributor(session, contributor_id)
    logger.info(f"Admin {current_user.username} deleted contributor {contributor_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
