"""School model -- belongs to one district and, through it, one state."""

import uuid

from sqlalchemy import ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from fundraiser_api.models.base import Base, TimestampMixin, UUIDMixin


class School(Base, UUIDMixin, TimestampMixin):
    """A school (e.g., "Snow Canyon").

    Attributes:
        name: Display name.
        district_id: FK to the owning district.
    """

    __tablename__ = "schools"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    district_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("districts.id", ondelete="RESTRICT"),
        nullable=False,
    )

    __table_args__ = (Index("ix_schools_district_id", "district_id"),)
