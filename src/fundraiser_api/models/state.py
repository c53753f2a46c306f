"""State model -- root of the geographic hierarchy."""

from sqlalchemy import Index, String, func
from sqlalchemy.orm import Mapped, mapped_column

from fundraiser_api.models.base import Base, TimestampMixin, UUIDMixin


class State(Base, UUIDMixin, TimestampMixin):
    """A US state.

    Attributes:
        name: Display name, unique ignoring case (e.g., "Utah").
        abbr: Postal abbreviation (e.g., "UT").
    """

    __tablename__ = "states"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    abbr: Mapped[str] = mapped_column(String(10), nullable=False)


Index("uq_states_name_lower", func.lower(State.name), unique=True)
