"""Contributor model -- a donor, identified by email."""

from sqlalchemy import Index, String, func
from sqlalchemy.orm import Mapped, mapped_column

from fundraiser_api.models.base import Base, TimestampMixin, UUIDMixin


class Contributor(Base, UUIDMixin, TimestampMixin):
    """A person who has contributed to one or more campaigns.

    Contributions that carry an email are linked to the contributor with that
    email, so repeat donors are tracked across campaigns.
    """

    __tablename__ = "contributors"

    name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False)


Index("uq_contributors_email_lower", func.lower(Contributor.email), unique=True)
