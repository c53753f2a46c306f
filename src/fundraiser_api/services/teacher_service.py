"""Teacher service -- registry of teachers with the one-name-pair-per-school rule."""

import uuid

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fundraiser_api.lib.consistency import (
    CampaignableKind,
    DestroyGuardError,
    ErrorCode,
    FieldError,
    FieldValidationError,
    RecordNotFoundError,
    UniquenessRaceError,
    normalize_name,
    validate_teacher,
)
from fundraiser_api.models.campaign import Campaign
from fundraiser_api.models.school import School
from fundraiser_api.models.teacher import Teacher

_UPDATABLE_FIELDS: frozenset[str] = frozenset({"first_name", "last_name", "school_id"})


async def list_teachers(
    session: AsyncSession,
    *,
    school_id: uuid.UUID | None = None,
    page: int = 1,
    page_size: int = 50,
) -> tuple[list[Teacher], int]:
    """List teachers ordered by last then first name.

    Returns:
        Tuple of (teachers, total count).
    """
    query = select(Teacher)
    count_query = select(func.count(Teacher.id))
    if school_id is not None:
        query = query.where(Teacher.school_id == school_id)
        count_query = count_query.where(Teacher.school_id == school_id)

    total = (await session.execute(count_query)).scalar_one()
    query = query.order_by(Teacher.last_name, Teacher.first_name).offset((page - 1) * page_size).limit(page_size)
    teachers = list((await session.execute(query)).scalars().all())
    return teachers, total


async def get_teacher(session: AsyncSession, teacher_id: uuid.UUID) -> Teacher | None:
    """Get a teacher by ID, or None."""
    return await session.get(Teacher, teacher_id)


async def require_teacher(session: AsyncSession, teacher_id: uuid.UUID) -> Teacher:
    """Get a teacher by ID.

    Raises:
        RecordNotFoundError: If the teacher does not exist.
    """
    teacher = await get_teacher(session, teacher_id)
    if teacher is None:
        raise RecordNotFoundError("Teacher", teacher_id)
    return teacher


async def count_duplicates(
    session: AsyncSession,
    first_name: str,
    last_name: str,
    school_id: uuid.UUID,
    *,
    excluding_id: uuid.UUID | None = None,
) -> int:
    """Count other teachers at ``school_id`` with the same name pair."""
    query = select(func.count(Teacher.id)).where(
        Teacher.school_id == school_id,
        Teacher.first_name == first_name,
        Teacher.last_name == last_name,
    )
    if excluding_id is not None:
        query = query.where(Teacher.id != excluding_id)
    return (await session.execute(query)).scalar_one()


async def _race_errors(
    session: AsyncSession,
    first_name: str,
    last_name: str,
    school_id: uuid.UUID,
    teacher_id: uuid.UUID | None,
) -> list[FieldError]:
    """Confirm that a failed write ran into the name-pair constraint."""
    if await count_duplicates(session, first_name, last_name, school_id, excluding_id=teacher_id):
        return [FieldError.of("first_name", ErrorCode.DUPLICATE_TEACHER)]
    return []


async def count_campaigns_for_teacher(session: AsyncSession, teacher_id: uuid.UUID) -> int:
    """Count campaigns that target this teacher."""
    result = await session.execute(
        select(func.count(Campaign.id)).where(
            Campaign.campaignable_type == CampaignableKind.TEACHER.value,
            Campaign.campaignable_id == teacher_id,
        )
    )
    return result.scalar_one()


async def validate_teacher_candidate(
    session: AsyncSession,
    *,
    first_name: str | None,
    last_name: str | None,
    school_id: uuid.UUID | None,
    teacher_id: uuid.UUID | None = None,
) -> list[FieldError]:
    """Resolve the school and run the teacher rules.

    Args:
        session: Database session.
        first_name: Given name.
        last_name: Family name.
        school_id: School the teacher belongs to.
        teacher_id: The teacher being updated (excluded from the duplicate check).

    Returns:
        Every failed rule; empty when the teacher is valid.
    """
    school = await session.get(School, school_id) if school_id is not None else None
    first, last = normalize_name(first_name), normalize_name(last_name)
    duplicates = 0
    if school is not None and first is not None and last is not None:
        duplicates = await count_duplicates(session, first, last, school.id, excluding_id=teacher_id)
    return validate_teacher(first, last, school, duplicate_count=duplicates)


async def create_teacher(
    session: AsyncSession,
    *,
    first_name: str,
    last_name: str,
    school_id: uuid.UUID,
) -> Teacher:
    """Create a teacher.

    Raises:
        FieldValidationError: If a rule fails (including ``DUPLICATE_TEACHER``).
        UniquenessRaceError: If a concurrent insert created the same teacher first.
    """
    errors = await validate_teacher_candidate(
        session, first_name=first_name, last_name=last_name, school_id=school_id
    )
    if errors:
        raise FieldValidationError(errors)

    first, last = first_name.strip(), last_name.strip()
    teacher = Teacher(first_name=first, last_name=last, school_id=school_id)
    session.add(teacher)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        errors = await _race_errors(session, first, last, school_id, None)
        if not errors:
            raise
        logger.warning(f"Teacher create for '{first} {last}' lost a uniqueness race")
        raise UniquenessRaceError(errors) from None
    await session.refresh(teacher)
    logger.info(f"Created teacher {teacher.id} ({teacher.full_name}) at school {school_id}")
    return teacher


async def update_teacher(session: AsyncSession, teacher_id: uuid.UUID, *, data: dict) -> Teacher:
    """Update a teacher, re-running the teacher rules on the merged record.

    Moving a teacher to another school is refused while campaigns target them,
    since those campaigns are tied to the current school.

    Raises:
        RecordNotFoundError: If the teacher does not exist.
        FieldValidationError: If the merged record breaks a rule.
        UniquenessRaceError: If a concurrent write created the same teacher first.
    """
    teacher = await require_teacher(session, teacher_id)
    changes = {k: v for k, v in data.items() if k in _UPDATABLE_FIELDS}
    merged = {
        "first_name": changes.get("first_name", teacher.first_name),
        "last_name": changes.get("last_name", teacher.last_name),
        "school_id": changes.get("school_id", teacher.school_id),
    }

    errors = await validate_teacher_candidate(session, teacher_id=teacher.id, **merged)
    if merged["school_id"] != teacher.school_id and await count_campaigns_for_teacher(session, teacher.id):
        errors.append(FieldError.of("school", ErrorCode.TEACHER_HAS_CAMPAIGNS))
    if errors:
        raise FieldValidationError(errors)

    first, last, school_id = merged["first_name"].strip(), merged["last_name"].strip(), merged["school_id"]
    teacher.first_name = first
    teacher.last_name = last
    teacher.school_id = school_id
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        errors = await _race_errors(session, first, last, school_id, teacher_id)
        if not errors:
            raise
        logger.warning(f"Teacher update {teacher_id} lost a uniqueness race")
        raise UniquenessRaceError(errors) from None
    await session.refresh(teacher)
    logger.info(f"Updated teacher {teacher.id}")
    return teacher


async def delete_teacher(session: AsyncSession, teacher_id: uuid.UUID) -> None:
    """Delete a teacher that no campaign targets.

    Raises:
        RecordNotFoundError: If the teacher does not exist.
        DestroyGuardError: If campaigns still target the teacher.
    """
    teacher = await require_teacher(session, teacher_id)
    if await count_campaigns_for_teacher(session, teacher.id):
        raise DestroyGuardError([ErrorCode.TEACHER_HAS_CAMPAIGNS])

    await session.delete(teacher)
    await session.commit()
    logger.info(f"Deleted teacher {teacher_id}")
