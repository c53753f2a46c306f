"""Integration tests for the state, district and school services."""

import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from fundraiser_api.lib.consistency import (
    CampaignableKind,
    DestroyGuardError,
    ErrorCode,
    FieldValidationError,
    MissingAssociationError,
    RecordNotFoundError,
)
from fundraiser_api.services.campaign_service import create_campaign
from fundraiser_api.services.district_service import create_district, delete_district, list_districts, update_district
from fundraiser_api.services.school_service import (
    create_school,
    delete_school,
    get_school_state_id,
    list_schools,
    update_school,
)
from fundraiser_api.services.state_service import create_state, delete_state, list_states, update_state
from fundraiser_api.services.teacher_service import delete_teacher


class TestStateService:
    """Tests for state CRUD."""

    @pytest.mark.asyncio
    async def test_create_state_normalizes(self, async_session: AsyncSession) -> None:
        state = await create_state(async_session, name=" Arizona ", abbr="az")
        assert state.name == "Arizona"
        assert state.abbr == "AZ"

    @pytest.mark.asyncio
    async def test_duplicate_name_ignoring_case(self, async_session: AsyncSession, hierarchy) -> None:
        with pytest.raises(FieldValidationError) as exc_info:
            await create_state(async_session, name="UTAH", abbr="UT")
        assert exc_info.value.codes == [ErrorCode.NAME_TAKEN]

    @pytest.mark.asyncio
    async def test_blank_fields(self, async_session: AsyncSession) -> None:
        with pytest.raises(FieldValidationError) as exc_info:
            await create_state(async_session, name="", abbr=" ")
        assert exc_info.value.codes == [ErrorCode.NAME_REQUIRED, ErrorCode.ABBR_REQUIRED]

    @pytest.mark.asyncio
    async def test_update_state(self, async_session: AsyncSession, hierarchy) -> None:
        state = await update_state(async_session, hierarchy.nevada.id, data={"abbr": "nv"})
        assert state.abbr == "NV"
        assert state.name == "Nevada"

    @pytest.mark.asyncio
    async def test_list_states_ordered(self, async_session: AsyncSession, hierarchy) -> None:
        states, total = await list_states(async_session)
        assert total == 2
        assert [s.name for s in states] == ["Nevada", "Utah"]

    @pytest.mark.asyncio
    async def test_delete_state_with_districts_refused(self, async_session: AsyncSession, hierarchy) -> None:
        with pytest.raises(DestroyGuardError) as exc_info:
            await delete_state(async_session, hierarchy.utah.id)
        assert exc_info.value.codes == [ErrorCode.STATE_HAS_DISTRICTS]

    @pytest.mark.asyncio
    async def test_delete_empty_state(self, async_session: AsyncSession) -> None:
        state = await create_state(async_session, name="Idaho", abbr="ID")
        await delete_state(async_session, state.id)
        _, total = await list_states(async_session)
        assert total == 0

    @pytest.mark.asyncio
    async def test_update_unknown_state(self, async_session: AsyncSession) -> None:
        with pytest.raises(RecordNotFoundError):
            await update_state(async_session, uuid.uuid4(), data={"name": "Nowhere"})


class TestDistrictService:
    """Tests for district CRUD."""

    @pytest.mark.asyncio
    async def test_create_district(self, async_session: AsyncSession, hierarchy) -> None:
        district = await create_district(async_session, name="Iron County", state_id=hierarchy.utah.id)
        assert district.state_id == hierarchy.utah.id
        districts, total = await list_districts(async_session, state_id=hierarchy.utah.id)
        assert total == 2
        assert [d.name for d in districts] == ["Iron County", "Washington County"]

    @pytest.mark.asyncio
    async def test_create_district_unknown_state(self, async_session: AsyncSession) -> None:
        with pytest.raises(MissingAssociationError) as exc_info:
            await create_district(async_session, name="Iron County", state_id=uuid.uuid4())
        assert exc_info.value.codes == [ErrorCode.STATE_REQUIRED]

    @pytest.mark.asyncio
    async def test_rename_ignores_state_change(self, async_session: AsyncSession, hierarchy) -> None:
        """A district's state cannot be changed after creation."""
        district = await update_district(
            async_session, hierarchy.washington.id, data={"name": "Washington Co.", "state_id": hierarchy.nevada.id}
        )
        assert district.name == "Washington Co."
        assert district.state_id == hierarchy.utah.id

    @pytest.mark.asyncio
    async def test_blank_rename_rejected(self, async_session: AsyncSession, hierarchy) -> None:
        with pytest.raises(FieldValidationError):
            await update_district(async_session, hierarchy.washington.id, data={"name": "  "})

    @pytest.mark.asyncio
    async def test_delete_district_with_schools_refused(self, async_session: AsyncSession, hierarchy) -> None:
        with pytest.raises(DestroyGuardError) as exc_info:
            await delete_district(async_session, hierarchy.clark.id)
        assert exc_info.value.codes == [ErrorCode.DISTRICT_HAS_SCHOOLS]


class TestSchoolService:
    """Tests for school CRUD."""

    @pytest.mark.asyncio
    async def test_create_school(self, async_session: AsyncSession, hierarchy) -> None:
        school = await create_school(async_session, name="Pine View", district_id=hierarchy.washington.id)
        assert await get_school_state_id(async_session, school) == hierarchy.utah.id
        schools, total = await list_schools(async_session, district_id=hierarchy.washington.id)
        assert total == 2
        assert [s.name for s in schools] == ["Pine View", "Snow Canyon"]

    @pytest.mark.asyncio
    async def test_create_school_unknown_district(self, async_session: AsyncSession) -> None:
        with pytest.raises(MissingAssociationError) as exc_info:
            await create_school(async_session, name="Pine View", district_id=uuid.uuid4())
        assert exc_info.value.codes == [ErrorCode.DISTRICT_REQUIRED]

    @pytest.mark.asyncio
    async def test_rename_school(self, async_session: AsyncSession, hierarchy) -> None:
        school = await update_school(async_session, hierarchy.snow_canyon.id, data={"name": "Snow Canyon High"})
        assert school.name == "Snow Canyon High"

    @pytest.mark.asyncio
    async def test_delete_school_with_teachers_and_campaigns(self, async_session: AsyncSession, hierarchy) -> None:
        """Every blocking dependency is reported."""
        await create_campaign(
            async_session,
            name="Band Trip",
            state_id=hierarchy.utah.id,
            district_id=hierarchy.washington.id,
            school_id=hierarchy.snow_canyon.id,
            campaignable_type=CampaignableKind.SCHOOL,
            campaignable_id=hierarchy.snow_canyon.id,
            school_wide=True,
        )
        with pytest.raises(DestroyGuardError) as exc_info:
            await delete_school(async_session, hierarchy.snow_canyon.id)
        assert exc_info.value.codes == [ErrorCode.SCHOOL_HAS_TEACHERS, ErrorCode.SCHOOL_HAS_CAMPAIGNS]

    @pytest.mark.asyncio
    async def test_delete_school_once_empty(self, async_session: AsyncSession, hierarchy) -> None:
        school_id = hierarchy.desert_hills.id
        await delete_teacher(async_session, hierarchy.reyes.id)
        await delete_school(async_session, school_id)
        _, total = await list_schools(async_session, district_id=hierarchy.clark.id)
        assert total == 0
