"""Public read-only endpoints backing the campaign landing pages.

No authentication.  Only active campaigns are visible.
"""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from fundraiser_api.core.dependencies import get_async_session
from fundraiser_api.lib.consistency import RecordNotFoundError
from fundraiser_api.models.campaign import Campaign
from fundraiser_api.schemas.campaign import PaginatedPublicCampaignResponse, PublicCampaignResponse
from fundraiser_api.schemas.common import PaginationMeta, PaginationParams
from fundraiser_api.schemas.contribution import ContributionCreateRequest, ContributionResponse
from fundraiser_api.schemas.district import DistrictResponse, PaginatedDistrictResponse
from fundraiser_api.schemas.school import PaginatedSchoolResponse, SchoolResponse
from fundraiser_api.schemas.terms import TermsResponse
from fundraiser_api.services import (
    campaign_service,
    contribution_service,
    district_service,
    school_service,
    terms_service,
)

public_router = APIRouter(prefix="/public", tags=["public"])


async def _build_response(session: AsyncSession, campaign: Campaign) -> PublicCampaignResponse:
    data = PublicCampaignResponse.model_validate(campaign)
    data.campaignable_name = await campaign_service.get_campaignable_name(session, campaign)
    return data


async def _get_active_campaign(session: AsyncSession, slug: str) -> Campaign:
    """Get an active campaign by slug; inactive campaigns do not exist publicly."""
    campaign = await campaign_service.get_campaign_by_slug(session, slug)
    if not campaign.active:
        raise RecordNotFoundError("Campaign", slug)
    return campaign


@public_router.get("/districts")
async def list_districts(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    pagination: Annotated[PaginationParams, Depends()],
    state_id: Annotated[uuid.UUID | None, Query(description="Filter by state")] = None,
) -> PaginatedDistrictResponse:
    """List districts."""
    districts, total = await district_service.list_districts(
        session, state_id=state_id, page=pagination.page, page_size=pagination.page_size
    )
    return PaginatedDistrictResponse(
        items=[DistrictResponse.model_validate(d) for d in districts],
        pagination=PaginationMeta.build(total, pagination),
    )


@public_router.get("/districts/{district_id}/schools")
async def list_district_schools(
    district_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    pagination: Annotated[PaginationParams, Depends()],
) -> PaginatedSchoolResponse:
    """List the schools of a district."""
    district = await district_service.require_district(session, district_id)
    schools, total = await school_service.list_schools(
        session, district_id=district.id, page=pagination.page, page_size=pagination.page_size
    )
    items = []
    for school in schools:
        item = SchoolResponse.model_validate(school)
        item.state_id = district.state_id
        items.append(item)
    return PaginatedSchoolResponse(items=items, pagination=PaginationMeta.build(total, pagination))


@public_router.get("/districts/{district_id}/schools/{school_id}/campaigns")
async def list_school_campaigns(
    district_id: uuid.UUID,
    school_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    pagination: Annotated[PaginationParams, Depends()],
) -> PaginatedPublicCampaignResponse:
    """List the active campaigns of a school."""
    school = await school_service.require_school(session, school_id)
    if school.district_id != district_id:
        raise RecordNotFoundError("School", school_id)
    campaigns, total = await campaign_service.list_campaigns(
        session, school_id=school.id, active=True, page=pagination.page, page_size=pagination.page_size
    )
    return PaginatedPublicCampaignResponse(
        items=[await _build_response(session, c) for c in campaigns],
        pagination=PaginationMeta.build(total, pagination),
    )


@public_router.get("/campaigns/{slug}")
async def get_campaign(
    slug: str,
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> PublicCampaignResponse:
    """Get an active campaign's landing page data."""
    campaign = await _get_active_campaign(session, slug)
    return await _build_response(session, campaign)


@public_router.post("/campaigns/{slug}/contributions", status_code=status.HTTP_201_CREATED)
async def create_contribution(
    slug: str,
    body: ContributionCreateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> ContributionResponse:
    """Record a contribution to a campaign.

    Payment capture happens outside this service; this only stores the record.
    Contributions to inactive campaigns are refused with ``CAMPAIGN_INACTIVE``.
    """
    campaign = await campaign_service.get_campaign_by_slug(session, slug)
    contribution = await contribution_service.record_contribution(
        session,
        campaign.id,
        amount_cents=body.amount_cents,
        contributor_name=body.contributor_name,
        contributor_email=str(body.contributor_email) if body.contributor_email is not None else None,
    )
    logger.info(f"Public contribution {contribution.id} recorded for campaign {slug}")
    return ContributionResponse.model_validate(contribution)


@public_router.get("/tos")
async def get_terms(
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> TermsResponse:
    """Get the terms of service shown to contributors."""
    terms = await terms_service.get_terms(session)
    return TermsResponse.model_validate(terms) if terms is not None else TermsResponse()
