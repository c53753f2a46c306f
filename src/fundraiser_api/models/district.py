"""District model -- a school district inside one state."""

import uuid

from sqlalchemy import ForeignKey, Index, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from fundraiser_api.models.base import Base, TimestampMixin, UUIDMixin


class District(Base, UUIDMixin, TimestampMixin):
    """A school district (e.g., "Washington County").

    Attributes:
        name: Display name.
        state_id: FK to the owning state.
    """

    __tablename__ = "districts"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    state_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("states.id", ondelete="RESTRICT"),
        nullable=False,
    )

    __table_args__ = (Index("ix_districts_state_id", "state_id"),)
