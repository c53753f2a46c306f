"""Pydantic v2 schemas for district operations."""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from fundraiser_api.schemas.common import PaginationMeta


class DistrictResponse(BaseModel):
    """A school district."""

    model_config = {"from_attributes": True}

    id: uuid.UUID
    name: str
    state_id: uuid.UUID
    created_at: datetime


class DistrictCreateRequest(BaseModel):
    """Request body for creating a district."""

    name: str = Field(max_length=200)
    state_id: uuid.UUID


class DistrictUpdateRequest(BaseModel):
    """Request body for renaming a district."""

    name: str = Field(max_length=200)


class PaginatedDistrictResponse(BaseModel):
    """Paginated list of districts."""

    items: list[DistrictResponse]
    pagination: PaginationMeta
