"""Pydantic v2 schemas for campaign operations.

Request fields are all optional at the schema level so that missing values are
reported by the campaign rules with their stable error codes (for example
``SCHOOL_WIDE_REQUIRED``) rather than as generic request validation errors.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from fundraiser_api.lib.consistency import CampaignableKind
from fundraiser_api.schemas.common import PaginationMeta


class CampaignResponse(BaseModel):
    """A campaign as seen by the admin backend."""

    model_config = {"from_attributes": True}

    id: uuid.UUID
    name: str
    slug: str
    state_id: uuid.UUID
    district_id: uuid.UUID
    school_id: uuid.UUID
    campaignable_type: CampaignableKind
    campaignable_id: uuid.UUID
    campaignable_name: str | None = None
    school_wide: bool
    active: bool
    created_at: datetime
    updated_at: datetime


class PublicCampaignResponse(BaseModel):
    """A campaign landing page payload."""

    model_config = {"from_attributes": True}

    name: str
    slug: str
    state_id: uuid.UUID
    district_id: uuid.UUID
    school_id: uuid.UUID
    campaignable_type: CampaignableKind
    campaignable_name: str | None = None
    school_wide: bool


class CampaignCreateRequest(BaseModel):
    """Request body for creating a campaign.  ``slug`` is generated when omitted."""

    name: str | None = Field(default=None, max_length=200)
    state_id: uuid.UUID | None = None
    district_id: uuid.UUID | None = None
    school_id: uuid.UUID | None = None
    campaignable_type: CampaignableKind | None = None
    campaignable_id: uuid.UUID | None = None
    school_wide: bool | None = None
    active: bool = False
    slug: str | None = Field(default=None, max_length=200)


class CampaignUpdateRequest(BaseModel):
    """Request body for updating a campaign.  Only the fields sent are changed."""

    name: str | None = Field(default=None, max_length=200)
    state_id: uuid.UUID | None = None
    district_id: uuid.UUID | None = None
    school_id: uuid.UUID | None = None
    campaignable_type: CampaignableKind | None = None
    campaignable_id: uuid.UUID | None = None
    school_wide: bool | None = None
    active: bool | None = None


class CampaignValidateRequest(CampaignCreateRequest):
    """Dry-run campaign validation.

    ``existing_slug`` names the campaign being edited: the other fields are
    merged over it and it is excluded from the uniqueness checks.
    """

    existing_slug: str | None = None


class PaginatedCampaignResponse(BaseModel):
    """Paginated list of campaigns."""

    items: list[CampaignResponse]
    pagination: PaginationMeta


class PaginatedPublicCampaignResponse(BaseModel):
    """Paginated list of landing page payloads."""

    items: list[PublicCampaignResponse]
    pagination: PaginationMeta
