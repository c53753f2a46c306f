"""Pydantic v2 schemas for teacher operations."""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from fundraiser_api.schemas.common import PaginationMeta


class TeacherResponse(BaseModel):
    """A teacher at a school."""

    model_config = {"from_attributes": True}

    id: uuid.UUID
    first_name: str
    last_name: str
    full_name: str
    school_id: uuid.UUID
    created_at: datetime


class TeacherCreateRequest(BaseModel):
    """Request body for creating a teacher."""

    first_name: str = Field(max_length=100)
    last_name: str = Field(max_length=100)
    school_id: uuid.UUID


class TeacherUpdateRequest(BaseModel):
    """Request body for updating a teacher (all fields optional)."""

    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    school_id: uuid.UUID | None = None


class TeacherValidateRequest(BaseModel):
    """Dry-run teacher validation; ``teacher_id`` names the teacher being edited."""

    first_name: str | None = None
    last_name: str | None = None
    school_id: uuid.UUID | None = None
    teacher_id: uuid.UUID | None = None


class PaginatedTeacherResponse(BaseModel):
    """Paginated list of teachers."""

    items: list[TeacherResponse]
    pagination: PaginationMeta
