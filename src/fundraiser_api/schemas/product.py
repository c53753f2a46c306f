"""Pydantic v2 schemas for product operations.

Prices travel as decimal dollars (``"12.50"``); the service converts them to
cents and reports bad prices as ``PRICE_INVALID``.
"""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from fundraiser_api.schemas.common import PaginationMeta


class ProductResponse(BaseModel):
    """A catalogue product."""

    model_config = {"from_attributes": True}

    id: uuid.UUID
    name: str
    description: str | None = None
    price_dollars: Decimal
    created_at: datetime
    updated_at: datetime


class ProductCreateRequest(BaseModel):
    """Request body for creating a product."""

    name: str | None = Field(default=None, max_length=200)
    description: str | None = None
    price_dollars: Decimal | None = None


class ProductUpdateRequest(BaseModel):
    """Request body for updating a product (all fields optional)."""

    name: str | None = Field(default=None, max_length=200)
    description: str | None = None
    price_dollars: Decimal | None = None


class PaginatedProductResponse(BaseModel):
    """Paginated list of products."""

    items: list[ProductResponse]
    pagination: PaginationMeta
