"""State service -- CRUD for the root of the geographic hierarchy."""

import uuid

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
    check_children,
    normalize_name,
)
from fundraiser_api.models.district import District
from fundraiser_api.models.state import State

_UPDATABLE_FIELDS: frozenset[str] = frozenset({"name", "abbr"})


async def list_states(session: AsyncSession, *, page: int = 1, page_size: int = 50) -> tuple[list[State], int]:
    """List states ordered by name.

    Returns:
        Tuple of (states, total count).
    """
    total = (await session.execute(select(func.count(State.id)))).scalar_one()
    query = select(State).order_by(State.name).offset((page - 1) * page_size).limit(page_size)
    states = list((await session.execute(query)).scalars().all())
    return states, total


async def get_state(session: AsyncSession, state_id: uuid.UUID) -> State | None:
    """Get a state by ID, or None."""
    return await session.get(State, state_id)


async def require_state(session: AsyncSession, state_id: uuid.UUID) -> State:
    """Get a state by ID.

    Raises:
        RecordNotFoundError: If the state does not exist.
    """
    state = await get_state(session, state_id)
    if state is None:
        raise RecordNotFoundError("State", state_id)
    return state


async def name_taken(session: AsyncSession, name: str, *, excluding_id: uuid.UUID | None = None) -> bool:
    """Check whether another state already uses ``name``, ignoring case."""
    query = select(State.id).where(func.lower(State.name) == name.lower())
    if excluding_id is not None:
        query = query.where(State.id != excluding_id)
    return (await session.execute(query.limit(1))).scalar_one_or_none() is not None


async def _check(session: AsyncSession, name: str | None, abbr: str | None, state_id: uuid.UUID | None) -> None:
    errors: list[FieldError] = []
    clean_name = normalize_name(name)
    if clean_name is None:
        errors.append(FieldError.of("name", ErrorCode.NAME_REQUIRED))
    elif await name_taken(session, clean_name, excluding_id=state_id):
        errors.append(FieldError.of("name", ErrorCode.NAME_TAKEN))
    if normalize_name(abbr) is None:
        errors.append(FieldError.of("abbr", ErrorCode.ABBR_REQUIRED))
    if errors:
        raise FieldValidationError(errors)


async def create_state(session: AsyncSession, *, name: str, abbr: str) -> State:
    """Create a state.

    Raises:
        FieldValidationError: If the name is blank or taken, or abbr is blank.
        UniquenessRaceError: If a concurrent insert claimed the name first.
    """
    await _check(session, name, abbr, None)
    state = State(name=name.strip(), abbr=abbr.strip().upper())
    session.add(state)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise UniquenessRaceError([FieldError.of("name", ErrorCode.NAME_TAKEN)]) from None
    await session.refresh(state)
    logger.info(f"Created state {state.id} ({state.name})")
    return state


async def update_state(session: AsyncSession, state_id: uuid.UUID, *, data: dict) -> State:
    """Update a state's name and/or abbreviation.

    Raises:
        RecordNotFoundError: If the state does not exist.
        FieldValidationError: If the merged record breaks a rule.
        UniquenessRaceError: If a concurrent write claimed the name first.
    """
    state = await require_state(session, state_id)
    changes = {k: v for k, v in data.items() if k in _UPDATABLE_FIELDS}
    await _check(session, changes.get("name", state.name), changes.get("abbr", state.abbr), state.id)

    if "name" in changes:
        state.name = changes["name"].strip()
    if "abbr" in changes:
        state.abbr = changes["abbr"].strip().upper()
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise UniquenessRaceError([FieldError.of("name", ErrorCode.NAME_TAKEN)]) from None
    await session.refresh(state)
    logger.info(f"Updated state {state.id}")
    return state


async def delete_state(session: AsyncSession, state_id: uuid.UUID) -> None:
    """Delete a state that has no districts.

    Raises:
        RecordNotFoundError: If the state does not exist.
        DestroyGuardError: If districts still reference the state.
    """
    state = await require_state(session, state_id)
    district_count = (
        await session.execute(select(func.count(District.id)).where(District.state_id == state.id))
    ).scalar_one()
    check_children({ErrorCode.STATE_HAS_DISTRICTS: district_count})

    await session.delete(state)
    await session.commit()
    logger.info(f"Deleted state {state_id}")
