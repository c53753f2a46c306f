"""Product service -- the fundraising catalogue."""

import uuid
from decimal import Decimal, InvalidOperation

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fundraiser_api.lib.consistency import (
    ErrorCode,
    FieldError,
    FieldValidationError,
    RecordNotFoundError,
    UniquenessRaceError,
    normalize_name,
)
from fundraiser_api.models.product import Product

_UPDATABLE_FIELDS: frozenset[str] = frozenset({"name", "description", "price_dollars"})


def dollars_to_cents(price: Decimal | int | str | None) -> int | None:
    """Convert a dollar price to cents.

    Returns:
        The price in cents, or None when the price is negative, not a number or
        has more than two decimal places.
    """
    if price is None:
        return None
    try:
        amount = Decimal(str(price))
    except InvalidOperation:
        return None
    if not amount.is_finite() or amount < 0:
        return None
    cents = amount * 100
    if cents != cents.to_integral_value():
        return None
    return int(cents)


async def list_products(session: AsyncSession, *, page: int = 1, page_size: int = 20) -> tuple[list[Product], int]:
    """List products ordered by name.

    Returns:
        Tuple of (products, total count).
    """
    total = (await session.execute(select(func.count(Product.id)))).scalar_one()
    query = select(Product).order_by(Product.name).offset((page - 1) * page_size).limit(page_size)
    products = list((await session.execute(query)).scalars().all())
    return products, total


async def get_product(session: AsyncSession, product_id: uuid.UUID) -> Product | None:
    """Get a product by ID, or None."""
    return await session.get(Product, product_id)


async def require_product(session: AsyncSession, product_id: uuid.UUID) -> Product:
    """Get a product by ID.

    Raises:
        RecordNotFoundError: If the product does not exist.
    """
    product = await get_product(session, product_id)
    if product is None:
        raise RecordNotFoundError("Product", product_id)
    return product


async def name_taken(session: AsyncSession, name: str, *, excluding_id: uuid.UUID | None = None) -> bool:
    """Check whether another product already uses ``name``, ignoring case."""
    query = select(Product.id).where(func.lower(Product.name) == name.lower())
    if excluding_id is not None:
        query = query.where(Product.id != excluding_id)
    return (await session.execute(query.limit(1))).scalar_one_or_none() is not None


async def _check(
    session: AsyncSession,
    name: str | None,
    price_dollars: Decimal | None,
    product_id: uuid.UUID | None,
) -> int:
    """Run the product rules and return the price in cents."""
    errors: list[FieldError] = []
    clean_name = normalize_name(name)
    if clean_name is None:
        errors.append(FieldError.of("name", ErrorCode.NAME_REQUIRED))
    elif await name_taken(session, clean_name, excluding_id=product_id):
        errors.append(FieldError.of("name", ErrorCode.NAME_TAKEN))

    cents = dollars_to_cents(price_dollars)
    if price_dollars is None:
        errors.append(FieldError.of("price_dollars", ErrorCode.PRICE_REQUIRED))
    elif cents is None:
        errors.append(FieldError.of("price_dollars", ErrorCode.PRICE_INVALID))
    if errors:
        raise FieldValidationError(errors)
    return cents  # type: ignore[return-value]


async def _commit_or_race(session: AsyncSession, name: str, product_id: uuid.UUID | None) -> None:
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        if not await name_taken(session, name, excluding_id=product_id):
            raise
        logger.warning(f"Product write for '{name}' lost a uniqueness race")
        raise UniquenessRaceError([FieldError.of("name", ErrorCode.NAME_TAKEN)]) from None


async def create_product(
    session: AsyncSession,
    *,
    name: str | None,
    price_dollars: Decimal | None,
    description: str | None = None,
) -> Product:
    """Create a catalogue product.

    Raises:
        FieldValidationError: If the name is blank or taken, or the price is missing or invalid.
        UniquenessRaceError: If a concurrent insert claimed the name first.
    """
    cents = await _check(session, name, price_dollars, None)
    clean_name: str = normalize_name(name)  # type: ignore[assignment]
    product = Product(name=clean_name, description=description, price_cents=cents)
    session.add(product)
    await _commit_or_race(session, clean_name, None)
    await session.refresh(product)
    logger.info(f"Created product {product.id} ({clean_name}, {cents} cents)")
    return product


async def update_product(session: AsyncSession, product_id: uuid.UUID, *, data: dict) -> Product:
    """Update a product, re-running the product rules on the merged record.

    Raises:
        RecordNotFoundError: If the product does not exist.
        FieldValidationError: If the merged record breaks a rule.
        UniquenessRaceError: If a concurrent write claimed the name first.
    """
    product = await require_product(session, product_id)
    changes = {k: v for k, v in data.items() if k in _UPDATABLE_FIELDS}
    name = changes.get("name", product.name)
    price = changes.get("price_dollars", product.price_dollars)
    cents = await _check(session, name, price, product.id)

    clean_name: str = normalize_name(name)  # type: ignore[assignment]
    product.name = clean_name
    product.price_cents = cents
    if "description" in changes:
        product.description = changes["description"]
    await _commit_or_race(session, clean_name, product_id)
    await session.refresh(product)
    logger.info(f"Updated product {product_id}")
    return product


async def delete_product(session: AsyncSession, product_id: uuid.UUID) -> None:
    """Delete a product.

    Raises:
        RecordNotFoundError: If the product does not exist.
    """
    product = await require_product(session, product_id)
    await session.delete(product)
    await session.commit()
    logger.info(f"Deleted product {product_id}")
