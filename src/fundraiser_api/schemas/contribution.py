"""Pydantic v2 schemas for contribution operations."""

import uuid
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from fundraiser_api.schemas.common import PaginationMeta


class ContributionResponse(BaseModel):
    """A recorded contribution."""

    model_config = {"from_attributes": True}

    id: uuid.UUID
    campaign_id: uuid.UUID
    amount_cents: int
    contributor_name: str | None = None
    contributor_email: str | None = None
    contributor_id: uuid.UUID | None = None
    created_at: datetime


class ContributionCreateRequest(BaseModel):
    """Request body for recording a contribution.

    ``amount_cents`` is range-checked by the service so a non-positive amount is
    reported as ``AMOUNT_INVALID``.
    """

    amount_cents: int
    contributor_name: str | None = Field(default=None, max_length=200)
    contributor_email: EmailStr | None = None


class PaginatedContributionResponse(BaseModel):
    """Paginated list of contributions."""

    items: list[ContributionResponse]
    pagination: PaginationMeta
