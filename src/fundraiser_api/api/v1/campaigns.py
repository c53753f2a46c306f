"""Campaigns API endpoints (admin).

Campaigns are addressed by their slug.  Every rule failure is raised by the
service layer and rendered by the application's exception handlers.
"""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from fundraiser_api.core.config import Settings, get_settings
from fundraiser_api.core.dependencies import STAFF_ROLES, get_async_session, require_role
from fundraiser_api.lib.consistency import SlugPolicy
from fundraiser_api.models.campaign import Campaign
from fundraiser_api.models.user import User
from fundraiser_api.schemas.campaign import (
    CampaignCreateRequest,
    CampaignResponse,
    CampaignUpdateRequest,
    CampaignValidateRequest,
    PaginatedCampaignResponse,
)
from fundraiser_api.schemas.common import PaginationMeta, PaginationParams, ValidationResponse
from fundraiser_api.services import campaign_service

campaigns_router = APIRouter(prefix="/campaigns", tags=["campaigns"])


def slug_policy_from_settings(settings: Settings) -> SlugPolicy:
    """Build the slug generation policy from application settings."""
    return SlugPolicy(
        max_attempts=settings.slug_max_attempts,
        max_length=settings.slug_max_length,
        suffix_length=settings.slug_suffix_length,
    )


async def _build_response(session: AsyncSession, campaign: Campaign) -> CampaignResponse:
    """Build a campaign response with the target's display name."""
    data = CampaignResponse.model_validate(campaign)
    data.campaignable_name = await campaign_service.get_campaignable_name(session, campaign)
    return data


@campaigns_router.get("")
async def list_campaigns(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _user: Annotated[User, Depends(require_role(*STAFF_ROLES))],
    pagination: Annotated[PaginationParams, Depends()],
    state_id: Annotated[uuid.UUID | None, Query(description="Filter by state")] = None,
    district_id: Annotated[uuid.UUID | None, Query(description="Filter by district")] = None,
    school_id: Annotated[uuid.UUID | None, Query(description="Filter by school")] = None,
    active: Annotated[bool | None, Query(description="Filter by active flag")] = None,
) -> PaginatedCampaignResponse:
    """List campaigns with optional filters."""
    campaigns, total = await campaign_service.list_campaigns(
        session,
        state_id=state_id,
        district_id=district_id,
        school_id=school_id,
        active=active,
        page=pagination.page,
        page_size=pagination.page_size,
    )
    return PaginatedCampaignResponse(
        items=[await _build_response(session, c) for c in campaigns],
        pagination=PaginationMeta.build(total, pagination),
    )


@campaigns_router.post("/validate")
async def validate_campaign(
    body: CampaignValidateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _user: Annotated[User, Depends(require_role(*STAFF_ROLES))],
) -> ValidationResponse:
    """Check a campaign against every rule without saving it.

    A state, district or school that does not exist is reported as a 400
    error rather than as a field error.
    """
    campaign_id = None
    if body.existing_slug is not None:
        campaign_id = (await campaign_service.get_campaign_by_slug(session, body.existing_slug)).id
    values = body.model_dump(exclude_unset=True, exclude={"existing_slug", "active"})
    result = await campaign_service.validate_campaign_candidate(session, values, campaign_id=campaign_id)
    if result.missing_associations:
        result.raise_for_errors()
    return ValidationResponse.from_errors(result.errors)


@campaigns_router.get("/{slug}")
async def get_campaign(
    slug: str,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _user: Annotated[User, Depends(require_role(*STAFF_ROLES))],
) -> CampaignResponse:
    """Get a campaign by slug, active or not."""
    campaign = await campaign_service.get_campaign_by_slug(session, slug)
    return await _build_response(session, campaign)


@campaigns_router.post("", status_code=status.HTTP_201_CREATED)
async def create_campaign(
    body: CampaignCreateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    settings: Annotated[Settings, Depends(get_settings)],
    current_user: Annotated[User, Depends(require_role(*STAFF_ROLES))],
) -> CampaignResponse:
    """Create a campaign.  The slug is generated from the name unless supplied."""
    campaign = await campaign_service.create_campaign(
        session,
        name=body.name,
        state_id=body.state_id,
        district_id=body.district_id,
        school_id=body.school_id,
        campaignable_type=body.campaignable_type,
        campaignable_id=body.campaignable_id,
        school_wide=body.school_wide,
        active=body.active,
        slug=body.slug,
        slug_policy=slug_policy_from_settings(settings),
    )
    logger.info(f"User {current_user.username} created campaign {campaign.slug}")
    return await _build_response(session, campaign)


@campaigns_router.patch("/{slug}")
async def update_campaign(
    slug: str,
    body: CampaignUpdateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_user: Annotated[User, Depends(require_role(*STAFF_ROLES))],
) -> CampaignResponse:
    """Update a campaign.  The slug never changes."""
    existing = await campaign_service.get_campaign_by_slug(session, slug)
    campaign = await campaign_service.update_campaign(session, existing.id, data=body.model_dump(exclude_unset=True))
    logger.info(f"User {current_user.username} updated campaign {slug}")
    return await _build_response(session, campaign)


@campaigns_router.delete("/{slug}", status_code=status.HTTP_204_NO_CONTENT)
async def destroy_campaign(
    slug: str,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_user: Annotated[User, Depends(require_role("admin"))],
) -> Response:
    """Destroy an inactive campaign without contributions.  Requires admin."""
    campaign = await campaign_service.get_campaign_by_slug(session, slug)
    await campaign_service.destroy_campaign(session, campaign.id)
    logger.info(f"Admin {current_user.username} destroyed campaign {slug}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
