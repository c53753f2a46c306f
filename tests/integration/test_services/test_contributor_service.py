"""Integration tests for the contributor service and contribution linking."""

import uuid
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from fundraiser_api.lib.consistency import (
    CampaignableKind,
    DestroyGuardError,
    ErrorCode,
    FieldValidationError,
    RecordNotFoundError,
    UniquenessRaceError,
)
from fundraiser_api.models import Campaign
from fundraiser_api.services import contributor_service
from fundraiser_api.services.campaign_service import create_campaign
from fundraiser_api.services.contribution_service import list_for_contributor, record_contribution
from fundraiser_api.services.contributor_service import (
    count_contributions,
    create_contributor,
    delete_contributor,
    find_by_email,
    list_contributors,
    update_contributor,
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


class TestCreateAndUpdateContributor:
    """Tests for create_contributor and update_contributor."""

    @pytest.mark.asyncio
    async def test_create(self, async_session: AsyncSession) -> None:
        contributor = await create_contributor(async_session, email=" pat@example.com ", name="Pat")
        assert contributor.email == "pat@example.com"
        assert contributor.name == "Pat"

    @pytest.mark.asyncio
    async def test_email_taken_ignoring_case(self, async_session: AsyncSession) -> None:
        await create_contributor(async_session, email="pat@example.com")
        with pytest.raises(FieldValidationError) as exc_info:
            await create_contributor(async_session, email="PAT@example.com")
        assert exc_info.value.codes == [ErrorCode.EMAIL_TAKEN]
        assert exc_info.value.errors[0].field == "email"

    @pytest.mark.asyncio
    async def test_blank_email(self, async_session: AsyncSession) -> None:
        with pytest.raises(FieldValidationError) as exc_info:
            await create_contributor(async_session, email="   ")
        assert exc_info.value.codes == [ErrorCode.EMAIL_REQUIRED]

    @pytest.mark.asyncio
    async def test_email_race_reported_as_retryable(self, async_session: AsyncSession) -> None:
        await create_contributor(async_session, email="pat@example.com")
        with patch.object(contributor_service, "_check", AsyncMock(return_value="Pat@Example.com")):
            with pytest.raises(UniquenessRaceError) as exc_info:
                await create_contributor(async_session, email="Pat@Example.com")
        assert exc_info.value.codes == [ErrorCode.EMAIL_TAKEN]

    @pytest.mark.asyncio
    async def test_update_name_keeps_email(self, async_session: AsyncSession) -> None:
        contributor = await create_contributor(async_session, email="pat@example.com")
        updated = await update_contributor(async_session, contributor.id, data={"name": "Pat Jones"})
        assert updated.name == "Pat Jones"
        assert updated.email == "pat@example.com"

    @pytest.mark.asyncio
    async def test_update_to_other_email_rejected(self, async_session: AsyncSession) -> None:
        await create_contributor(async_session, email="pat@example.com")
        sam = await create_contributor(async_session, email="sam@example.com")
        with pytest.raises(FieldValidationError) as exc_info:
            await update_contributor(async_session, sam.id, data={"email": "Pat@example.com"})
        assert exc_info.value.codes == [ErrorCode.EMAIL_TAKEN]

    @pytest.mark.asyncio
    async def test_list_ordered_by_email(self, async_session: AsyncSession) -> None:
        for email in ("sam@example.com", "alex@example.com", "pat@example.com"):
            await create_contributor(async_session, email=email)
        contributors, total = await list_contributors(async_session)
        assert total == 3
        assert [c.email for c in contributors] == ["alex@example.com", "pat@example.com", "sam@example.com"]


class TestContributionLinking:
    """Tests for linking contributions to contributors by email."""

    @pytest.mark.asyncio
    async def test_first_contribution_adds_contributor(self, async_session: AsyncSession, campaign: Campaign) -> None:
        contribution = await record_contribution(
            async_session, campaign.id, amount_cents=500, contributor_name="Pat", contributor_email="pat@example.com"
        )
        contributor = await find_by_email(async_session, "pat@example.com")
        assert contributor is not None
        assert contributor.name == "Pat"
        assert contribution.contributor_id == contributor.id

    @pytest.mark.asyncio
    async def test_repeat_email_reuses_contributor(self, async_session: AsyncSession, campaign: Campaign) -> None:
        first = await record_contribution(
            async_session, campaign.id, amount_cents=500, contributor_email="pat@example.com"
        )
        second = await record_contribution(
            async_session, campaign.id, amount_cents=700, contributor_email="PAT@example.com"
        )
        assert second.contributor_id == first.contributor_id
        contributions, total = await list_for_contributor(async_session, first.contributor_id)
        assert total == 2
        assert {c.amount_cents for c in contributions} == {500, 700}

    @pytest.mark.asyncio
    async def test_anonymous_contribution_not_linked(self, async_session: AsyncSession, campaign: Campaign) -> None:
        contribution = await record_contribution(async_session, campaign.id, amount_cents=500)
        assert contribution.contributor_id is None
        _, total = await list_contributors(async_session)
        assert total == 0


class TestDeleteContributor:
    """Tests for delete_contributor."""

    @pytest.mark.asyncio
    async def test_delete_unused(self, async_session: AsyncSession) -> None:
        contributor = await create_contributor(async_session, email="pat@example.com")
        contributor_id = contributor.id
        await delete_contributor(async_session, contributor_id)
        with pytest.raises(RecordNotFoundError):
            await contributor_service.require_contributor(async_session, contributor_id)

    @pytest.mark.asyncio
    async def test_guard_blocks_contributor_with_contributions(
        self, async_session: AsyncSession, campaign: Campaign
    ) -> None:
        contribution = await record_contribution(
            async_session, campaign.id, amount_cents=500, contributor_email="pat@example.com"
        )
        with pytest.raises(DestroyGuardError) as exc_info:
            await delete_contributor(async_session, contribution.contributor_id)
        assert exc_info.value.codes == [ErrorCode.CONTRIBUTOR_HAS_CONTRIBUTIONS]

    @pytest.mark.asyncio
    async def test_foreign_key_backs_up_guard(self, async_session: AsyncSession, campaign: Campaign) -> None:
        """A contribution landing after the guard count still blocks the delete."""
        contribution = await record_contribution(
            async_session, campaign.id, amount_cents=500, contributor_email="pat@example.com"
        )
        contributor_id = contribution.contributor_id
        with patch.object(contributor_service, "count_contributions", AsyncMock(return_value=0)):
            with pytest.raises(DestroyGuardError) as exc_info:
                await delete_contributor(async_session, contributor_id)
        assert exc_info.value.codes == [ErrorCode.CONTRIBUTOR_HAS_CONTRIBUTIONS]
        assert await count_contributions(async_session, contributor_id) == 1

    @pytest.mark.asyncio
    async def test_missing_contributor(self, async_session: AsyncSession) -> None:
        with pytest.raises(RecordNotFoundError):
            await delete_contributor(async_session, uuid.uuid4())
