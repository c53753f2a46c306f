"""Contribution model -- a donation recorded against a campaign.

The FK uses ``ON DELETE RESTRICT`` so the database itself refuses to remove a
campaign that has contributions, even if one lands between the guard check
and the delete.
"""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fundraiser_api.models.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from fundraiser_api.models.campaign import Campaign


class Contribution(Base, UUIDMixin, TimestampMixin):
    """A single contribution.

    Attributes:
        campaign_id: FK to the campaign.
        amount_cents: Amount in cents (positive).
        contributor_name: Optional display name of the donor.
        contributor_email: Optional donor email.
        contributor_id: FK to the contributor with ``contributor_email``, if any.
    """

    __tablename__ = "contributions"

    campaign_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("campaigns.id", ondelete="RESTRICT"),
        nullable=False,
    )
    amount_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    contributor_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    contributor_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contributor_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("contributors.id", ondelete="RESTRICT"),
        nullable=True,
    )

    campaign: Mapped["Campaign"] = relationship(back_populates="contributions", lazy="noload")  # noqa: F821

    __table_args__ = (
        Index("ix_contributions_campaign_id", "campaign_id"),
        Index("ix_contributions_contributor_id", "contributor_id"),
        CheckConstraint("amount_cents > 0", name="ck_contributions_amount_positive"),
    )
