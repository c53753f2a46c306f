"""Products API endpoints (admin catalogue)."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from fundraiser_api.core.dependencies import STAFF_ROLES, get_async_session, require_role
from fundraiser_api.models.user import User
from fundraiser_api.schemas.common import PaginationMeta, PaginationParams
from fundraiser_api.schemas.product import (
    PaginatedProductResponse,
    ProductCreateRequest,
    ProductResponse,
    ProductUpdateRequest,
)
from fundraiser_api.services import product_service

products_router = APIRouter(prefix="/products", tags=["products"])


@products_router.get("")
async def list_products(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _user: Annotated[User, Depends(require_role(*STAFF_ROLES))],
    pagination: Annotated[PaginationParams, Depends()],
) -> PaginatedProductResponse:
    """List products ordered by name."""
    products, total = await product_service.list_products(
        session, page=pagination.page, page_size=pagination.page_size
    )
    return PaginatedProductResponse(
        items=[ProductResponse.model_validate(p) for p in products],
        pagination=PaginationMeta.build(total, pagination),
    )


@products_router.get("/{product_id}")
async def get_product(
    product_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _user: Annotated[User, Depends(require_role(*STAFF_ROLES))],
) -> ProductResponse:
    """Get a single product."""
    return ProductResponse.model_validate(await product_service.require_product(session, product_id))


@products_router.post("", status_code=status.HTTP_201_CREATED)
async def create_product(
    body: ProductCreateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_user: Annotated[User, Depends(require_role(*STAFF_ROLES))],
) -> ProductResponse:
    """Add a product to the catalogue."""
    product = await product_service.create_product(
        session, name=body.name, price_dollars=body.price_dollars, description=body.description
    )
    logger.info(f"User {current_user.username} created product {product.id}")
    return ProductResponse.model_validate(product)


@products_router.patch("/{product_id}")
async def update_product(
    product_id: uuid.UUID,
    body: ProductUpdateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _user: Annotated[User, Depends(require_role(*STAFF_ROLES))],
) -> ProductResponse:
    """Update a product's name, description or price."""
    product = await product_service.update_product(session, product_id, data=body.model_dump(exclude_unset=True))
    return ProductResponse.model_validate(product)


@products_router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(
    product_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_user: Annotated[User, Depends(require_role("admin"))],
) -> Response:
    """Remove a product from the catalogue.  Requires admin."""
    await product_service.delete_product(session, product_id)
    logger.info(f"Admin {current_user.username} deleted product {product_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
