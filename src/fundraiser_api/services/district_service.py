"""District service -- CRUD for districts within a state.

A district's state is fixed at creation: only the name may change afterwards.
"""

import uuid

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from fundraiser_api.lib.consistency import (
    ErrorCode,
    FieldError,
    FieldValidationError,
    MissingAssociationError,
    RecordNotFoundError,
    check_children,
    normalize_name,
)
from fundraiser_api.models.district import District
from fundraiser_api.models.school import School
from fundraiser_api.models.state import State


async def list_districts(
    session: AsyncSession,
    *,
    state_id: uuid.UUID | None = None,
    page: int = 1,
    page_size: int = 50,
) -> tuple[list[District], int]:
    """List districts, optionally restricted to one state.

    Returns:
        Tuple of (districts, total count).
    """
    query = select(District)
    count_query = select(func.count(District.id))
    if state_id is not None:
        query = query.where(District.state_id == state_id)
        count_query = count_query.where(District.state_id == state_id)

    total = (await session.execute(count_query)).scalar_one()
    query = query.order_by(District.name).offset((page - 1) * page_size).limit(page_size)
    districts = list((await session.execute(query)).scalars().all())
    return districts, total


async def get_district(session: AsyncSession, district_id: uuid.UUID) -> District | None:
    """Get a district by ID, or None."""
    return await session.get(District, district_id)


async def require_district(session: AsyncSession, district_id: uuid.UUID) -> District:
    """Get a district by ID.

    Raises:
        RecordNotFoundError: If the district does not exist.
    """
    district = await get_district(session, district_id)
    if district is None:
        raise RecordNotFoundError("District", district_id)
    return district


async def create_district(session: AsyncSession, *, name: str, state_id: uuid.UUID) -> District:
    """Create a district in an existing state.

    Raises:
        MissingAssociationError: If the state does not exist.
        FieldValidationError: If the name is blank.
    """
    if await session.get(State, state_id) is None:
        raise MissingAssociationError(["state"])
    clean_name = normalize_name(name)
    if clean_name is None:
        raise FieldValidationError([FieldError.of("name", ErrorCode.NAME_REQUIRED)])

    district = District(name=clean_name, state_id=state_id)
    session.add(district)
    await session.commit()
    await session.refresh(district)
    logger.info(f"Created district {district.id} ({clean_name}) in state {state_id}")
    return district


async def update_district(session: AsyncSession, district_id: uuid.UUID, *, data: dict) -> District:
    """Rename a district.  Any other key in ``data`` is ignored.

    Raises:
        RecordNotFoundError: If the district does not exist.
        FieldValidationError: If the new name is blank.
    """
    district = await require_district(session, district_id)
    if "name" in data:
        clean_name = normalize_name(data["name"])
        if clean_name is None:
            raise FieldValidationError([FieldError.of("name", ErrorCode.NAME_REQUIRED)])
        district.name = clean_name
    await session.commit()
    await session.refresh(district)
    logger.info(f"Updated district {district.id}")
    return district


async def delete_district(session: AsyncSession, district_id: uuid.UUID) -> None:
    """Delete a district that has no schools.

    Raises:
        RecordNotFoundError: If the district does not exist.
        DestroyGuardError: If schools still reference the district.
    """
    district = await require_district(session, district_id)
    school_count = (
        await session.execute(select(func.count(School.id)).where(School.district_id == district.id))
    ).scalar_one()
    check_children({ErrorCode.DISTRICT_HAS_SCHOOLS: school_count})

    await session.delete(district)
    await session.commit()
    logger.info(f"Deleted district {district_id}")
