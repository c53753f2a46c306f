"""Contributor service -- donors, matched across contributions by email."""

import uuid

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fundraiser_api.lib.consistency import (
    DestroyGuardError,
    ErrorCode,
    FieldError,
    FieldValidationError,
    RecordNotFoundError,
    UniquenessRaceError,
    check_children,
    normalize_name,
)
from fundraiser_api.models.contribution import Contribution
from fundraiser_api.models.contributor import Contributor

_UPDATABLE_FIELDS: frozenset[str] = frozenset({"name", "email"})


async def list_contributors(
    session: AsyncSession,
    *,
    page: int = 1,
    page_size: int = 20,
) -> tuple[list[Contributor], int]:
    """List contributors ordered by email.

    Returns:
        Tuple of (contributors, total count).
    """
    total = (await session.execute(select(func.count(Contributor.id)))).scalar_one()
    query = select(Contributor).order_by(Contributor.email).offset((page - 1) * page_size).limit(page_size)
    contributors = list((await session.execute(query)).scalars().all())
    return contributors, total


async def require_contributor(session: AsyncSession, contributor_id: uuid.UUID) -> Contributor:
    """Get a contributor by ID.

    Raises:
        RecordNotFoundError: If the contributor does not exist.
    """
    contributor = await session.get(Contributor, contributor_id)
    if contributor is None:
        raise RecordNotFoundError("Contributor", contributor_id)
    return contributor


async def find_by_email(
    session: AsyncSession,
    email: str,
    *,
    excluding_id: uuid.UUID | None = None,
) -> Contributor | None:
    """Find the contributor with ``email``, ignoring case."""
    query = select(Contributor).where(func.lower(Contributor.email) == email.strip().lower())
    if excluding_id is not None:
        query = query.where(Contributor.id != excluding_id)
    return (await session.execute(query.limit(1))).scalar_one_or_none()


async def get_or_add_for_contribution(session: AsyncSession, email: str, name: str | None) -> Contributor:
    """Return the contributor for ``email``, adding one to the session if none exists.

    Nothing is committed; the caller commits together with the contribution.
    """
    contributor = await find_by_email(session, email)
    if contributor is not None:
        return contributor
    contributor = Contributor(email=email.strip(), name=normalize_name(name))
    session.add(contributor)
    await session.flush()
    logger.debug(f"Added contributor {contributor.id} for {contributor.email}")
    return contributor


async def count_contributions(session: AsyncSession, contributor_id: uuid.UUID) -> int:
    """Count contributions linked to a contributor."""
    result = await session.execute(
        select(func.count(Contribution.id)).where(Contribution.contributor_id == contributor_id)
    )
    return result.scalar_one()


async def _check(session: AsyncSession, email: str | None, contributor_id: uuid.UUID | None) -> str:
    clean_email = normalize_name(email)
    if clean_email is None:
        raise FieldValidationError([FieldError.of("email", ErrorCode.EMAIL_REQUIRED)])
    if await find_by_email(session, clean_email, excluding_id=contributor_id) is not None:
        raise FieldValidationError([FieldError.of("email", ErrorCode.EMAIL_TAKEN)])
    return clean_email


async def _commit_or_race(session: AsyncSession, email: str, contributor_id: uuid.UUID | None) -> None:
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        if await find_by_email(session, email, excluding_id=contributor_id) is None:
            raise
        logger.warning(f"Contributor write for {email} lost a uniqueness race")
        raise UniquenessRaceError([FieldError.of("email", ErrorCode.EMAIL_TAKEN)]) from None


async def create_contributor(session: AsyncSession, *, email: str | None, name: str | None = None) -> Contributor:
    """Create a contributor.

    Raises:
        FieldValidationError: If the email is blank or already used.
        UniquenessRaceError: If a concurrent insert claimed the email first.
    """
    clean_email = await _check(session, email, None)
    contributor = Contributor(email=clean_email, name=normalize_name(name))
    session.add(contributor)
    await _commit_or_race(session, clean_email, None)
    await session.refresh(contributor)
    logger.info(f"Created contributor {contributor.id} ({clean_email})")
    return contributor


async def update_contributor(session: AsyncSession, contributor_id: uuid.UUID, *, data: dict) -> Contributor:
    """Update a contributor's name and/or email.

    Raises:
        RecordNotFoundError: If the contributor does not exist.
        FieldValidationError: If the email is blank or used by another contributor.
        UniquenessRaceError: If a concurrent write claimed the email first.
    """
    contributor = await require_contributor(session, contributor_id)
    changes = {k: v for k, v in data.items() if k in _UPDATABLE_FIELDS}
    clean_email = await _check(session, changes.get("email", contributor.email), contributor.id)

    contributor.email = clean_email
    if "name" in changes:
        contributor.name = normalize_name(changes["name"])
    await _commit_or_race(session, clean_email, contributor_id)
    await session.refresh(contributor)
    logger.info(f"Updated contributor {contributor_id}")
    return contributor


async def delete_contributor(session: AsyncSession, contributor_id: uuid.UUID) -> None:
    """Delete a contributor that has no contributions.

    The ``ON DELETE RESTRICT`` foreign key on contributions backs the guard up.

    Raises:
        RecordNotFoundError: If the contributor does not exist.
        DestroyGuardError: If contributions still reference the contributor.
    """
    contributor = await require_contributor(session, contributor_id)
    check_children({ErrorCode.CONTRIBUTOR_HAS_CONTRIBUTIONS: await count_contributions(session, contributor.id)})

    await session.delete(contributor)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        logger.warning(f"Refused to delete contributor {contributor_id}: contribution recorded during delete")
        raise DestroyGuardError([ErrorCode.CONTRIBUTOR_HAS_CONTRIBUTIONS]) from None
    logger.info(f"Deleted contributor {contributor_id}")
