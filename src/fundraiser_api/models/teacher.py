"""Teacher model -- a classroom a campaign can target."""

import uuid

from sqlalchemy import ForeignKey, Index, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from fundraiser_api.lib.consistency.teacher_rules import full_name
from fundraiser_api.models.base import Base, TimestampMixin, UUIDMixin


class Teacher(Base, UUIDMixin, TimestampMixin):
    """A teacher at exactly one school.

    The (first_name, last_name) pair is unique per school; the same pair may
    appear at different schools.
    """

    __tablename__ = "teachers"

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    school_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("schools.id", ondelete="RESTRICT"),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("school_id", "first_name", "last_name", name="uq_teachers_school_name"),
        Index("ix_teachers_school_id", "school_id"),
    )

    @property
    def full_name(self) -> str:
        return full_name(self.first_name, self.last_name)
