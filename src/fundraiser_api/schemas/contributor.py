"""Pydantic v2 schemas for contributor operations."""

import uuid
from datetime import datetime

from pydantic import BaseModel, EmailStr, Field

from fundraiser_api.schemas.common import PaginationMeta


class ContributorResponse(BaseModel):
    """A contributor."""

    model_config = {"from_attributes": True}

    id: uuid.UUID
    name: str | None = None
    email: str
    created_at: datetime


class ContributorCreateRequest(BaseModel):
    """Request body for creating a contributor."""

    email: EmailStr
    name: str | None = Field(default=None, max_length=200)


class ContributorUpdateRequest(BaseModel):
    """Request body for updating a contributor (all fields optional)."""

    email: EmailStr | None = None
    name: str | None = Field(default=None, max_length=200)


class PaginatedContributorResponse(BaseModel):
    """Paginated list of contributors."""

    items: list[ContributorResponse]
    pagination: PaginationMeta
