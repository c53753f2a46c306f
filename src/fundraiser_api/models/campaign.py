"""Campaign model -- a fundraiser for a whole school or a single teacher.

``campaignable_type`` + ``campaignable_id`` form a polymorphic reference (no
database FK): ``"school"`` points into ``schools``, ``"teacher"`` into
``teachers``.  The unique indexes on ``slug`` and ``lower(name)`` are the
authoritative uniqueness guards; the service layer pre-checks them only to
produce field-level errors.
"""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Index, String, Uuid, false, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fundraiser_api.lib.consistency.campaign_rules import CampaignableKind
from fundraiser_api.models.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from fundraiser_api.models.contribution import Contribution


class Campaign(Base, UUIDMixin, TimestampMixin):
    """A fundraising campaign attached to a school or teacher.

    Attributes:
        name: Display name, unique ignoring case.
        slug: Public URL identifier, generated once at creation.
        state_id / district_id / school_id: Where the campaign lives.
        campaignable_type / campaignable_id: The target (school or teacher).
        school_wide: Whether the campaign benefits the whole school.
        active: Whether the landing page is live.
    """

    __tablename__ = "campaigns"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str] = mapped_column(String(200), nullable=False, unique=True)
    state_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("states.id", ondelete="RESTRICT"), nullable=False)
    district_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("districts.id", ondelete="RESTRICT"),
        nullable=False,
    )
    school_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("schools.id", ondelete="RESTRICT"), nullable=False)
    campaignable_type: Mapped[str] = mapped_column(String(20), nullable=False)
    campaignable_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    school_wide: Mapped[bool] = mapped_column(Boolean, nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, server_default=false())

    contributions: Mapped[list["Contribution"]] = relationship(  # noqa: F821
        back_populates="campaign",
        lazy="noload",
        passive_deletes="all",
    )

    __table_args__ = (
        Index("ix_campaigns_school_id", "school_id"),
        Index("ix_campaigns_campaignable", "campaignable_type", "campaignable_id"),
    )

    @property
    def campaignable_kind(self) -> CampaignableKind:
        return CampaignableKind(self.campaignable_type)


Index("uq_campaigns_name_lower", func.lower(Campaign.name), unique=True)
