"""Terms of service API endpoints (admin)."""

from typing import Annotated

from fastapi import APIRouter, Depends
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from fundraiser_api.core.dependencies import STAFF_ROLES, get_async_session, require_role
from fundraiser_api.models.user import User
from fundraiser_api.schemas.terms import TermsResponse, TermsUpdateRequest
from fundraiser_api.services import terms_service

terms_router = APIRouter(prefix="/tos", tags=["terms"])


@terms_router.get("")
async def get_terms(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _user: Annotated[User, Depends(require_role(*STAFF_ROLES))],
) -> TermsResponse:
    """Get the terms of service."""
    terms = await terms_service.get_terms(session)
    return TermsResponse.model_validate(terms) if terms is not None else TermsResponse()


@terms_router.put("")
async def update_terms(
    body: TermsUpdateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_user: Annotated[User, Depends(require_role("admin"))],
) -> TermsResponse:
    """Replace the terms of service.  Requires admin."""
    terms = await terms_service.update_terms(session, body=body.body)
    logger.info(f"Admin {current_user.username} updated the terms of service")
    return TermsResponse.model_validate(terms)
