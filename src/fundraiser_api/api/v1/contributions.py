"""Campaign contributions API endpoints (admin)."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from fundraiser_api.core.dependencies import STAFF_ROLES, get_async_session, require_role
from fundraiser_api.lib.consistency import RecordNotFoundError
from fundraiser_api.models.user import User
from fundraiser_api.schemas.common import PaginationMeta, PaginationParams
from fundraiser_api.schemas.contribution import ContributionResponse, PaginatedContributionResponse
from fundraiser_api.services import campaign_service, contribution_service

contributions_router = APIRouter(prefix="/campaigns/{slug}/contributions", tags=["contributions"])


@contributions_router.get("")
async def list_contributions(
    slug: str,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _user: Annotated[User, Depends(require_role(*STAFF_ROLES))],
    pagination: Annotated[PaginationParams, Depends()],
) -> PaginatedContributionResponse:
    """List a campaign's contributions, newest first."""
    campaign = await campaign_service.get_campaign_by_slug(session, slug)
    contributions, total = await contribution_service.list_for_campaign(
        session, campaign.id, page=pagination.page, page_size=pagination.page_size
    )
    return PaginatedContributionResponse(
        items=[ContributionResponse.model_validate(c) for c in contributions],
        pagination=PaginationMeta.build(total, pagination),
    )


@contributions_router.delete("/{contribution_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_contribution(
    slug: str,
    contribution_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_user: Annotated[User, Depends(require_role("admin"))],
) -> Response:
    """Remove a contribution record (refunds, test data).  Requires admin."""
    campaign = await campaign_service.get_campaign_by_slug(session, slug)
    contribution = await contribution_service.get_contribution(session, contribution_id)
    if contribution is None or contribution.campaign_id != campaign.id:
        raise RecordNotFoundError("Contribution", contribution_id)
    await contribution_service.delete_contribution(session, contribution_id)
    logger.info(f"Admin {current_user.username} deleted contribution {contribution_id} from campaign {slug}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
