"""Pydantic v2 schemas for state operations."""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from fundraiser_api.schemas.common import PaginationMeta


class StateResponse(BaseModel):
    """A state."""

    model_config = {"from_attributes": True}

    id: uuid.UUID
    name: str
    abbr: str
    created_at: datetime


class StateCreateRequest(BaseModel):
    """Request body for creating a state."""

    name: str = Field(max_length=100)
    abbr: str = Field(max_length=10)


class StateUpdateRequest(BaseModel):
    """Request body for updating a state (all fields optional)."""

    name: str | None = Field(default=None, max_length=100)
    abbr: str | None = Field(default=None, max_length=10)


class PaginatedStateResponse(BaseModel):
    """Paginated list of states."""

    items: list[StateResponse]
    pagination: PaginationMeta
