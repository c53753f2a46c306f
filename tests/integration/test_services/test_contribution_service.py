"""Integration tests for the contribution service."""

import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from fundraiser_api.lib.consistency import CampaignableKind, ErrorCode, FieldValidationError, RecordNotFoundError
from fundraiser_api.models import Campaign
from fundraiser_api.services.campaign_service import create_campaign
from fundraiser_api.services.contribution_service import (
    count_for_campaign,
    delete_contribution,
    get_contribution,
    list_for_campaign,
    record_contribution,
)


@pytest.fixture
async def campaign(async_session: AsyncSession, hierarchy) -> Campaign:
    return await create_campaign(
        async_session,
        name="Snow Canyon Band Trip",
        state_id=hierarchy.utah.id,
        district_id=hierarchy.washington.id,
        school_id=hierarchy.snow_canyon.id,
        campaignable_type=CampaignableKind.SCHOOL,
        campaignable_id=hierarchy.snow_canyon.id,
        school_wide=True,
        active=True,
    )


class TestRecordContribution:
    """Tests for record_contribution."""

    @pytest.mark.asyncio
    async def test_record_for_active_campaign(self, async_session: AsyncSession, campaign: Campaign) -> None:
        contribution = await record_contribution(
            async_session, campaign.id, amount_cents=2500, contributor_name="Pat", contributor_email="pat@example.com"
        )
        assert contribution.campaign_id == campaign.id
        assert contribution.amount_cents == 2500
        assert await count_for_campaign(async_session, campaign.id) == 1

    @pytest.mark.asyncio
    async def test_inactive_campaign_refused(self, async_session: AsyncSession, hierarchy) -> None:
        inactive = await create_campaign(
            async_session,
            name="Quiet Drive",
            state_id=hierarchy.utah.id,
            district_id=hierarchy.washington.id,
            school_id=hierarchy.snow_canyon.id,
            campaignable_type=CampaignableKind.SCHOOL,
            campaignable_id=hierarchy.snow_canyon.id,
            school_wide=True,
        )
        with pytest.raises(FieldValidationError) as exc_info:
            await record_contribution(async_session, inactive.id, amount_cents=100)
        assert exc_info.value.codes == [ErrorCode.CAMPAIGN_INACTIVE]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", [0, -500])
    async def test_non_positive_amount(self, async_session: AsyncSession, campaign: Campaign, amount: int) -> None:
        with pytest.raises(FieldValidationError) as exc_info:
            await record_contribution(async_session, campaign.id, amount_cents=amount)
        assert exc_info.value.codes == [ErrorCode.AMOUNT_INVALID]
        assert exc_info.value.errors[0].field == "amount_cents"

    @pytest.mark.asyncio
    async def test_unknown_campaign(self, async_session: AsyncSession) -> None:
        with pytest.raises(RecordNotFoundError):
            await record_contribution(async_session, uuid.uuid4(), amount_cents=100)


class TestListAndDelete:
    """Tests for listing and removing contributions."""

    @pytest.mark.asyncio
    async def test_list_for_campaign(self, async_session: AsyncSession, campaign: Campaign) -> None:
        for amount in (100, 200, 300):
            await record_contribution(async_session, campaign.id, amount_cents=amount)
        contributions, total = await list_for_campaign(async_session, campaign.id, page_size=2)
        assert total == 3
        assert len(contributions) == 2

    @pytest.mark.asyncio
    async def test_delete_contribution(self, async_session: AsyncSession, campaign: Campaign) -> None:
        contribution = await record_contribution(async_session, campaign.id, amount_cents=100)
        contribution_id = contribution.id
        await delete_contribution(async_session, contribution_id)
        assert await get_contribution(async_session, contribution_id) is None
        assert await count_for_campaign(async_session, campaign.id) == 0

    @pytest.mark.asyncio
    async def test_delete_unknown_contribution(self, async_session: AsyncSession) -> None:
        with pytest.raises(RecordNotFoundError):
            await delete_contribution(async_session, uuid.uuid4())
