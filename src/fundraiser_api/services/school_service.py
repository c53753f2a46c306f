"""School service -- CRUD for schools within a district."""

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
from fundraiser_api.models.campaign import Campaign
from fundraiser_api.models.district import District
from fundraiser_api.models.school import School
from fundraiser_api.models.teacher import Teacher


async def list_schools(
    session: AsyncSession,
    *,
    district_id: uuid.UUID | None = None,
    page: int = 1,
    page_size: int = 50,
) -> tuple[list[School], int]:
    """List schools, optionally restricted to one district.

    Returns:
        Tuple of (schools, total count).
    """
    query = select(School)
    count_query = select(func.count(School.id))
    if district_id is not None:
        query = query.where(School.district_id == district_id)
        count_query = count_query.where(School.district_id == district_id)

    total = (await session.execute(count_query)).scalar_one()
    query = query.order_by(School.name).offset((page - 1) * page_size).limit(page_size)
    schools = list((await session.execute(query)).scalars().all())
    return schools, total


async def get_school(session: AsyncSession, school_id: uuid.UUID) -> School | None:
    """Get a school by ID, or None."""
    return await session.get(School, school_id)


async def require_school(session: AsyncSession, school_id: uuid.UUID) -> School:
    """Get a school by ID.

    Raises:
        RecordNotFoundError: If the school does not exist.
    """
    school = await get_school(session, school_id)
    if school is None:
        raise RecordNotFoundError("School", school_id)
    return school


async def get_school_state_id(session: AsyncSession, school: School) -> uuid.UUID:
    """Return the state a school belongs to, through its district."""
    result = await session.execute(select(District.state_id).where(District.id == school.district_id))
    return result.scalar_one()


async def create_school(session: AsyncSession, *, name: str, district_id: uuid.UUID) -> School:
    """Create a school in an existing district.

    Raises:
        MissingAssociationError: If the district does not exist.
        FieldValidationError: If the name is blank.
    """
    if await session.get(District, district_id) is None:
        raise MissingAssociationError(["district"])
    clean_name = normalize_name(name)
    if clean_name is None:
        raise FieldValidationError([FieldError.of("name", ErrorCode.NAME_REQUIRED)])

    school = School(name=clean_name, district_id=district_id)
    session.add(school)
    await session.commit()
    await session.refresh(school)
    logger.info(f"Created school {school.id} ({clean_name}) in district {district_id}")
    return school


async def update_school(session: AsyncSession, school_id: uuid.UUID, *, data: dict) -> School:
    """Rename a school.  Any other key in ``data`` is ignored.

    Raises:
        RecordNotFoundError: If the school does not exist.
        FieldValidationError: If the new name is blank.
    """
    school = await require_school(session, school_id)
    if "name" in data:
        clean_name = normalize_name(data["name"])
        if clean_name is None:
            raise FieldValidationError([FieldError.of("name", ErrorCode.NAME_REQUIRED)])
        school.name = clean_name
    await session.commit()
    await session.refresh(school)
    logger.info(f"Updated school {school.id}")
    return school


async def delete_school(session: AsyncSession, school_id: uuid.UUID) -> None:
    """Delete a school with no teachers and no campaigns.

    Raises:
        RecordNotFoundError: If the school does not exist.
        DestroyGuardError: If teachers or campaigns still reference the school.
    """
    school = await require_school(session, school_id)
    teacher_count = (
        await session.execute(select(func.count(Teacher.id)).where(Teacher.school_id == school.id))
    ).scalar_one()
    campaign_count = (
        await session.execute(select(func.count(Campaign.id)).where(Campaign.school_id == school.id))
    ).scalar_one()
    check_children(
        {
            ErrorCode.SCHOOL_HAS_TEACHERS: teacher_count,
            ErrorCode.SCHOOL_HAS_CAMPAIGNS: campaign_count,
        }
    )

    await session.delete(school)
    await session.commit()
    logger.info(f"Deleted school {school_id}")
