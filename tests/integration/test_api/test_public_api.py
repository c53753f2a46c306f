"""Integration tests for the public landing-page endpoints."""

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from fundraiser_api.api.v1.public import public_router
from fundraiser_api.core.dependencies import get_async_session
from fundraiser_api.lib.consistency import CampaignableKind
from fundraiser_api.main import register_exception_handlers
from fundraiser_api.services.campaign_service import create_campaign


@pytest.fixture
async def client(async_session: AsyncSession) -> AsyncClient:
    """Unauthenticated client; the public router needs no user."""
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(public_router, prefix="/api/v1")
    app.dependency_overrides[get_async_session] = lambda: async_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


@pytest.fixture
async def campaigns(async_session: AsyncSession, hierarchy) -> None:
    """One active school-wide campaign and one inactive teacher campaign at Snow Canyon."""
    common = {
        "state_id": hierarchy.utah.id,
        "district_id": hierarchy.washington.id,
        "school_id": hierarchy.snow_canyon.id,
    }
    await create_campaign(
        async_session,
        name="Band Trip",
        campaignable_type=CampaignableKind.SCHOOL,
        campaignable_id=hierarchy.snow_canyon.id,
        school_wide=True,
        active=True,
        **common,
    )
    await create_campaign(
        async_session,
        name="Robotics Club",
        campaignable_type=CampaignableKind.TEACHER,
        campaignable_id=hierarchy.holmberg.id,
        school_wide=False,
        **common,
    )


class TestPublicDirectory:
    """Tests for the district and school directory."""

    @pytest.mark.asyncio
    async def test_list_districts(self, client: AsyncClient, hierarchy) -> None:
        resp = await client.get("/api/v1/public/districts")
        assert resp.status_code == 200
        assert [d["name"] for d in resp.json()["items"]] == ["Clark County", "Washington County"]

    @pytest.mark.asyncio
    async def test_list_district_schools(self, client: AsyncClient, hierarchy) -> None:
        resp = await client.get(f"/api/v1/public/districts/{hierarchy.washington.id}/schools")
        assert resp.status_code == 200
        items = resp.json()["items"]
        assert [s["name"] for s in items] == ["Snow Canyon"]
        assert items[0]["state_id"] == str(hierarchy.utah.id)

    @pytest.mark.asyncio
    async def test_school_campaigns_only_active(self, client: AsyncClient, hierarchy, campaigns) -> None:
        resp = await client.get(
            f"/api/v1/public/districts/{hierarchy.washington.id}/schools/{hierarchy.snow_canyon.id}/campaigns"
        )
        assert resp.status_code == 200
        assert [c["slug"] for c in resp.json()["items"]] == ["band-trip"]

    @pytest.mark.asyncio
    async def test_school_campaigns_paginated(
        self, client: AsyncClient, async_session: AsyncSession, hierarchy, campaigns
    ) -> None:
        for name in ("Art Supplies", "Choir Robes"):
            await create_campaign(
                async_session,
                name=name,
                state_id=hierarchy.utah.id,
                district_id=hierarchy.washington.id,
                school_id=hierarchy.snow_canyon.id,
                campaignable_type=CampaignableKind.SCHOOL,
                campaignable_id=hierarchy.snow_canyon.id,
                school_wide=True,
                active=True,
            )
        url = f"/api/v1/public/districts/{hierarchy.washington.id}/schools/{hierarchy.snow_canyon.id}/campaigns"

        first = await client.get(url, params={"page_size": 2})
        assert [c["slug"] for c in first.json()["items"]] == ["art-supplies", "band-trip"]
        assert first.json()["pagination"] == {"total": 3, "page": 1, "page_size": 2, "total_pages": 2}

        second = await client.get(url, params={"page": 2, "page_size": 2})
        assert [c["slug"] for c in second.json()["items"]] == ["choir-robes"]

    @pytest.mark.asyncio
    async def test_school_outside_district(self, client: AsyncClient, hierarchy) -> None:
        resp = await client.get(
            f"/api/v1/public/districts/{hierarchy.clark.id}/schools/{hierarchy.snow_canyon.id}/campaigns"
        )
        assert resp.status_code == 404


class TestPublicCampaign:
    """Tests for campaign landing pages and contributions."""

    @pytest.mark.asyncio
    async def test_active_campaign_visible(self, client: AsyncClient, campaigns) -> None:
        resp = await client.get("/api/v1/public/campaigns/band-trip")
        assert resp.status_code == 200
        data = resp.json()
        assert data["campaignable_name"] == "Snow Canyon"
        assert "id" not in data

    @pytest.mark.asyncio
    async def test_inactive_campaign_hidden(self, client: AsyncClient, campaigns) -> None:
        resp = await client.get("/api/v1/public/campaigns/robotics-club")
        assert resp.status_code == 404

    @pytest.mark.asyncio
    async def test_contribute_to_active_campaign(self, client: AsyncClient, campaigns) -> None:
        resp = await client.post(
            "/api/v1/public/campaigns/band-trip/contributions",
            json={"amount_cents": 2500, "contributor_name": "Pat", "contributor_email": "pat@example.com"},
        )
        assert resp.status_code == 201
        assert resp.json()["amount_cents"] == 2500

    @pytest.mark.asyncio
    async def test_contribute_to_inactive_campaign(self, client: AsyncClient, campaigns) -> None:
        resp = await client.post("/api/v1/public/campaigns/robotics-club/contributions", json={"amount_cents": 2500})
        assert resp.status_code == 422
        assert resp.json()["code"] == "CAMPAIGN_INACTIVE"

    @pytest.mark.asyncio
    async def test_contribute_non_positive_amount(self, client: AsyncClient, campaigns) -> None:
        resp = await client.post("/api/v1/public/campaigns/band-trip/contributions", json={"amount_cents": 0})
        assert resp.status_code == 422
        assert resp.json()["errors"][0]["code"] == "AMOUNT_INVALID"
