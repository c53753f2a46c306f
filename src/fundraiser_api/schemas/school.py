"""Pydantic v2 schemas for school operations."""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from fundraiser_api.schemas.common import PaginationMeta


class SchoolResponse(BaseModel):
    """A school, with the state derived through its district."""

    model_config = {"from_attributes": True}

    id: uuid.UUID
    name: str
    district_id: uuid.UUID
    state_id: uuid.UUID | None = None
    created_at: datetime


class SchoolCreateRequest(BaseModel):
    """Request body for creating a school."""

    name: str = Field(max_length=200)
    district_id: uuid.UUID


class SchoolUpdateRequest(BaseModel):
    """Request body for renaming a school."""

    name: str = Field(max_length=200)


class PaginatedSchoolResponse(BaseModel):
    """Paginated list of schools."""

    items: list[SchoolResponse]
    pagination: PaginationMeta
