"""Common Pydantic v2 schemas shared across the API.

Provides pagination, error response, and validation result schemas.
"""

import math

from pydantic import BaseModel, Field

from fundraiser_api.lib.consistency import FieldError


class PaginationParams(BaseModel):
    """Query parameters for paginated endpoints."""

    page: int = Field(default=1, ge=1, description="Page number (1-based)")
    page_size: int = Field(default=20, ge=1, le=100, description="Items per page")


class PaginationMeta(BaseModel):
    """Pagination metadata included in paginated responses."""

    total: int = Field(description="Total number of items")
    page: int = Field(description="Current page number")
    page_size: int = Field(description="Items per page")
    total_pages: int = Field(description="Total number of pages")

    @classmethod
    def build(cls, total: int, params: PaginationParams) -> "PaginationMeta":
        return cls(
            total=total,
            page=params.page,
            page_size=params.page_size,
            total_pages=max(1, math.ceil(total / params.page_size)),
        )


class FieldErrorItem(BaseModel):
    """One failed rule, attached to the field it concerns."""

    field: str
    code: str
    message: str

    @classmethod
    def from_error(cls, error: FieldError) -> "FieldErrorItem":
        return cls(**error.as_dict())


class ErrorResponse(BaseModel):
    """Standard error response body."""

    detail: str = Field(description="Human-readable error message")
    code: str | None = Field(default=None, description="Machine-readable error code")
    errors: list[FieldErrorItem] | None = Field(default=None, description="Detailed validation errors")


class ValidationResponse(BaseModel):
    """Result of a dry-run validation."""

    valid: bool
    errors: list[FieldErrorItem] = Field(default_factory=list)

    @classmethod
    def from_errors(cls, errors: list[FieldError]) -> "ValidationResponse":
        return cls(valid=not errors, errors=[FieldErrorItem.from_error(e) for e in errors])
