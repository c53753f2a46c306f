"""Pydantic v2 schemas for the terms of service."""

from datetime import datetime

from pydantic import BaseModel


class TermsResponse(BaseModel):
    """The terms of service.  ``body`` is empty until the terms are first written."""

    model_config = {"from_attributes": True}

    body: str = ""
    updated_at: datetime | None = None


class TermsUpdateRequest(BaseModel):
    """Request body replacing the terms of service."""

    body: str | None = None
