"""States API endpoints (admin)."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from fundraiser_api.core.dependencies import STAFF_ROLES, get_async_session, require_role
from fundraiser_api.models.user import User
from fundraiser_api.schemas.common import PaginationMeta, PaginationParams
from fundraiser_api.schemas.state import (
    PaginatedStateResponse,
    StateCreateRequest,
    StateResponse,
    StateUpdateRequest,
)
from fundraiser_api.services import state_service

states_router = APIRouter(prefix="/states", tags=["states"])


@states_router.get("")
async def list_states(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _user: Annotated[User, Depends(require_role(*STAFF_ROLES))],
    pagination: Annotated[PaginationParams, Depends()],
) -> PaginatedStateResponse:
    """List states ordered by name."""
    states, total = await state_service.list_states(session, page=pagination.page, page_size=pagination.page_size)
    return PaginatedStateResponse(
        items=[StateResponse.model_validate(s) for s in states],
        pagination=PaginationMeta.build(total, pagination),
    )


@states_router.get("/{state_id}")
async def get_state(
    state_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _user: Annotated[User, Depends(require_role(*STAFF_ROLES))],
) -> StateResponse:
    """Get a single state."""
    return StateResponse.model_validate(await state_service.require_state(session, state_id))


@states_router.post("", status_code=status.HTTP_201_CREATED)
async def create_state(
    body: StateCreateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_user: Annotated[User, Depends(require_role(*STAFF_ROLES))],
) -> StateResponse:
    """Create a state."""
    state = await state_service.create_state(session, name=body.name, abbr=body.abbr)
    logger.info(f"User {current_user.username} created state {state.id}")
    return StateResponse.model_validate(state)


@states_router.patch("/{state_id}")
async def update_state(
    state_id: uuid.UUID,
    body: StateUpdateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _user: Annotated[User, Depends(require_role(*STAFF_ROLES))],
) -> StateResponse:
    """Rename a state or change its abbreviation."""
    state = await state_service.update_state(session, state_id, data=body.model_dump(exclude_unset=True))
    return StateResponse.model_validate(state)


@states_router.delete("/{state_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_state(
    state_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_user: Annotated[User, Depends(require_role("admin"))],
) -> Response:
    """Delete a state that has no districts.  Requires admin."""
    await state_service.delete_state(session, state_id)
    logger.info(f"Admin {current_user.username} deleted state {state_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
