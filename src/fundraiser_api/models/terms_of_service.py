"""Terms of service -- a single editable document shown on the landing pages."""

from sqlalchemy import CheckConstraint, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from fundraiser_api.models.base import Base, TimestampMixin

TERMS_ID = 1


class TermsOfService(Base, TimestampMixin):
    """The one and only terms of service row (``id`` is always ``TERMS_ID``)."""

    __tablename__ = "terms_of_service"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False, default=TERMS_ID)
    body: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (CheckConstraint(f"id = {TERMS_ID}", name="ck_terms_of_service_singleton"),)
