"""Product model -- an item in the fundraising catalogue."""

from decimal import Decimal

from sqlalchemy import CheckConstraint, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from fundraiser_api.models.base import Base, TimestampMixin, UUIDMixin


class Product(Base, UUIDMixin, TimestampMixin):
    """A catalogue product sold to raise funds.

    Attributes:
        name: Display name, unique ignoring case.
        description: Optional long description.
        price_cents: Price in cents (zero or more).
    """

    __tablename__ = "products"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price_cents: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (CheckConstraint("price_cents >= 0", name="ck_products_price_non_negative"),)

    @property
    def price_dollars(self) -> Decimal:
        return (Decimal(self.price_cents) / 100).quantize(Decimal("0.01"))


Index("uq_products_name_lower", func.lower(Product.name), unique=True)
