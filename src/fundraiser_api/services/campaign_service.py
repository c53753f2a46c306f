"""Campaign service -- create, update and destroy campaigns under the consistency rules.

Every write resolves the referenced state, district, school and target, runs
:func:`~fundraiser_api.lib.consistency.validate_campaign` and only then touches
the database.  The unique indexes on ``campaigns.slug`` and ``lower(name)`` are
the final word on uniqueness; a constraint violation that slips past the
pre-check surfaces as :class:`UniquenessRaceError`.
"""

import uuid
from typing import Any

from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fundraiser_api.lib.consistency import (
    CampaignableKind,
    CampaignableRef,
    CampaignCandidate,
    DestroyGuardError,
    ErrorCode,
    FieldError,
    RecordNotFoundError,
    SlugPolicy,
    UniquenessRaceError,
    ValidationResult,
    check_campaign_destroy,
    generate_unique_slug,
    normalize_name,
    validate_campaign,
)
from fundraiser_api.models.campaign import Campaign
from fundraiser_api.models.district import District
from fundraiser_api.models.school import School
from fundraiser_api.models.state import State
from fundraiser_api.models.teacher import Teacher
from fundraiser_api.services.contribution_service import count_for_campaign

# Fields that may be set via update.  ``slug`` is absent: it is
# assigned once at creation and never changes.
_UPDATABLE_FIELDS: frozenset[str] = frozenset(
    {
        "name",
        "state_id",
        "district_id",
        "school_id",
        "campaignable_type",
        "campaignable_id",
        "school_wide",
        "active",
    }
)


# ---------------------------------------------------------------------------
# Read operations
# ---------------------------------------------------------------------------


async def get_campaign(session: AsyncSession, campaign_id: uuid.UUID) -> Campaign | None:
    """Get a campaign by ID, or None."""
    return await session.get(Campaign, campaign_id)


async def require_campaign(session: AsyncSession, campaign_id: uuid.UUID) -> Campaign:
    """Get a campaign by ID.

    Raises:
        RecordNotFoundError: If the campaign does not exist.
    """
    campaign = await get_campaign(session, campaign_id)
    if campaign is None:
        raise RecordNotFoundError("Campaign", campaign_id)
    return campaign


async def find_by_slug(session: AsyncSession, slug: str) -> Campaign | None:
    """Get a campaign by its public slug, or None."""
    result = await session.execute(select(Campaign).where(Campaign.slug == slug))
    return result.scalar_one_or_none()


async def get_campaign_by_slug(session: AsyncSession, slug: str) -> Campaign:
    """Get a campaign by its public slug.

    Raises:
        RecordNotFoundError: If no campaign has this slug.
    """
    campaign = await find_by_slug(session, slug)
    if campaign is None:
        raise RecordNotFoundError("Campaign", slug)
    return campaign


async def find_by_name_case_insensitive(
    session: AsyncSession,
    name: str,
    *,
    excluding_id: uuid.UUID | None = None,
) -> Campaign | None:
    """Find another campaign whose name equals ``name`` ignoring case."""
    query = select(Campaign).where(func.lower(Campaign.name) == name.strip().lower())
    if excluding_id is not None:
        query = query.where(Campaign.id != excluding_id)
    result = await session.execute(query.limit(1))
    return result.scalar_one_or_none()


async def slug_taken(session: AsyncSession, slug: str, *, excluding_id: uuid.UUID | None = None) -> bool:
    """Check whether another campaign already uses ``slug``."""
    query = select(Campaign.id).where(Campaign.slug == slug)
    if excluding_id is not None:
        query = query.where(Campaign.id != excluding_id)
    return (await session.execute(query.limit(1))).scalar_one_or_none() is not None


async def list_campaigns(
    session: AsyncSession,
    *,
    state_id: uuid.UUID | None = None,
    district_id: uuid.UUID | None = None,
    school_id: uuid.UUID | None = None,
    active: bool | None = None,
    page: int = 1,
    page_size: int = 20,
) -> tuple[list[Campaign], int]:
    """List campaigns with optional filters, ordered by name.

    Returns:
        Tuple of (campaigns, total count).
    """
    filters = []
    if state_id is not None:
        filters.append(Campaign.state_id == state_id)
    if district_id is not None:
        filters.append(Campaign.district_id == district_id)
    if school_id is not None:
        filters.append(Campaign.school_id == school_id)
    if active is not None:
        filters.append(Campaign.active.is_(active))

    total = (await session.execute(select(func.count(Campaign.id)).where(*filters))).scalar_one()
    query = select(Campaign).where(*filters).order_by(Campaign.name).offset((page - 1) * page_size).limit(page_size)
    campaigns = list((await session.execute(query)).scalars().all())

    logger.info(f"Listed {len(campaigns)} campaigns (total={total}, page={page})")
    return campaigns, total


async def get_campaignable_name(session: AsyncSession, campaign: Campaign) -> str | None:
    """Display name of the campaign target: the school name or the teacher's full name."""
    if campaign.campaignable_kind is CampaignableKind.SCHOOL:
        school = await session.get(School, campaign.campaignable_id)
        return school.name if school is not None else None
    teacher = await session.get(Teacher, campaign.campaignable_id)
    return teacher.full_name if teacher is not None else None


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


async def resolve_campaignable(
    session: AsyncSession,
    kind: CampaignableKind | str | None,
    target_id: uuid.UUID | None,
) -> CampaignableRef | None:
    """Resolve a (kind, id) pair to a tagged reference carrying the owning school.

    Returns:
        The reference, or None if either part is missing, the kind is unknown,
        or the target does not exist.
    """
    if kind is None or target_id is None:
        return None
    try:
        kind = CampaignableKind(kind)
    except ValueError:
        return None

    match kind:
        case CampaignableKind.SCHOOL:
            school = await session.get(School, target_id)
            return CampaignableRef(kind, school.id, school.id) if school is not None else None
        case CampaignableKind.TEACHER:
            teacher = await session.get(Teacher, target_id)
            return CampaignableRef(kind, teacher.id, teacher.school_id) if teacher is not None else None
    return None


async def build_candidate(
    session: AsyncSession,
    values: dict[str, Any],
    *,
    campaign_id: uuid.UUID | None = None,
) -> CampaignCandidate:
    """Look up every record a campaign write refers to."""

    async def _get(model: type, key: uuid.UUID | None) -> Any:
        return await session.get(model, key) if key is not None else None

    return CampaignCandidate(
        name=values.get("name"),
        state=await _get(State, values.get("state_id")),
        district=await _get(District, values.get("district_id")),
        school=await _get(School, values.get("school_id")),
        campaignable=await resolve_campaignable(
            session, values.get("campaignable_type"), values.get("campaignable_id")
        ),
        school_wide=values.get("school_wide"),
        active=values.get("active", False),
        slug=values.get("slug"),
        id=campaign_id,
    )


async def check_candidate(session: AsyncSession, candidate: CampaignCandidate) -> ValidationResult:
    """Answer the uniqueness questions for ``candidate`` and run the campaign rules."""
    name = normalize_name(candidate.name)
    name_in_use = (
        name is not None
        and await find_by_name_case_insensitive(session, name, excluding_id=candidate.id) is not None
    )
    slug_in_use = candidate.slug is not None and await slug_taken(session, candidate.slug, excluding_id=candidate.id)
    return validate_campaign(candidate, name_taken=name_in_use, slug_taken=slug_in_use)


async def validate_campaign_candidate(
    session: AsyncSession,
    values: dict[str, Any],
    *,
    campaign_id: uuid.UUID | None = None,
) -> ValidationResult:
    """Validate campaign values without writing anything.

    Args:
        session: Database session.
        values: Campaign fields (``name``, ``state_id``, ``district_id``,
            ``school_id``, ``campaignable_type``, ``campaignable_id``,
            ``school_wide``, optional ``slug``).
        campaign_id: The campaign being edited; merges ``values`` over it and
            excludes it from the uniqueness checks.

    Returns:
        The validation result.

    Raises:
        RecordNotFoundError: If ``campaign_id`` is given but does not exist.
    """
    if campaign_id is not None:
        existing = await require_campaign(session, campaign_id)
        values = _merge(existing, values)
    candidate = await build_candidate(session, values, campaign_id=campaign_id)
    return await check_candidate(session, candidate)


def _merge(campaign: Campaign, changes: dict[str, Any]) -> dict[str, Any]:
    merged = {name: getattr(campaign, name) for name in _UPDATABLE_FIELDS}
    merged.update({k: v for k, v in changes.items() if k in _UPDATABLE_FIELDS})
    merged["slug"] = campaign.slug
    return merged


async def _race_errors(session: AsyncSession, name: str, slug: str, campaign_id: uuid.UUID | None) -> list[FieldError]:
    """Work out which uniqueness constraint a failed write ran into."""
    errors: list[FieldError] = []
    if await find_by_name_case_insensitive(session, name, excluding_id=campaign_id) is not None:
        errors.append(FieldError.of("name", ErrorCode.NAME_TAKEN))
    if await slug_taken(session, slug, excluding_id=campaign_id):
        errors.append(FieldError.of("slug", ErrorCode.SLUG_TAKEN))
    return errors


# ---------------------------------------------------------------------------
# Write operations (admin)
# ---------------------------------------------------------------------------


async def create_campaign(
    session: AsyncSession,
    *,
    name: str | None,
    state_id: uuid.UUID | None,
    district_id: uuid.UUID | None,
    school_id: uuid.UUID | None,
    campaignable_type: CampaignableKind | str | None,
    campaignable_id: uuid.UUID | None,
    school_wide: bool | None,
    active: bool = False,
    slug: str | None = None,
    slug_policy: SlugPolicy | None = None,
) -> Campaign:
    """Create a campaign.

    The slug is generated from the name unless one is supplied (e.g. when
    importing campaigns that already have public URLs); a supplied slug goes
    through the same format and uniqueness rules.

    Raises:
        MissingAssociationError: If state, district or school does not exist.
        FieldValidationError: If any other rule fails.
        SlugGenerationError: If no free slug could be found.
        UniquenessRaceError: If a concurrent write claimed the name or slug first.
    """
    values = {
        "name": name,
        "state_id": state_id,
        "district_id": district_id,
        "school_id": school_id,
        "campaignable_type": campaignable_type,
        "campaignable_id": campaignable_id,
        "school_wide": school_wide,
        "active": active,
        "slug": slug,
    }
    candidate = await build_candidate(session, values)
    result = await check_candidate(session, candidate)
    result.raise_for_errors()

    clean_name: str = normalize_name(name)  # type: ignore[assignment]
    target: CampaignableRef = candidate.campaignable  # type: ignore[assignment]
    if slug is None:
        slug = await generate_unique_slug(
            clean_name,
            lambda s: slug_taken(session, s),
            policy=slug_policy,
        )

    campaign = Campaign(
        name=clean_name,
        slug=slug,
        state_id=state_id,
        district_id=district_id,
        school_id=school_id,
        campaignable_type=target.kind.value,
        campaignable_id=target.id,
        school_wide=school_wide,
        active=active,
    )
    session.add(campaign)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        errors = await _race_errors(session, clean_name, slug, None)
        if not errors:
            raise
        logger.warning(f"Campaign create for '{clean_name}' lost a uniqueness race: {[e.code for e in errors]}")
        raise UniquenessRaceError(errors) from None
    await session.refresh(campaign)
    logger.info(f"Created campaign {campaign.id} ({clean_name}, slug={slug}, active={active})")
    return campaign


async def update_campaign(session: AsyncSession, campaign_id: uuid.UUID, *, data: dict[str, Any]) -> Campaign:
    """Update a campaign, re-running every rule against the merged record.

    Only fields in ``_UPDATABLE_FIELDS`` are applied; ``slug`` and unknown keys
    are ignored.  Nothing is written unless the merged record is valid.

    Raises:
        RecordNotFoundError: If the campaign does not exist.
        MissingAssociationError: If state, district or school does not exist.
        FieldValidationError: If any other rule fails.
        UniquenessRaceError: If a concurrent write claimed the name first.
    """
    campaign = await require_campaign(session, campaign_id)
    merged = _merge(campaign, data)
    candidate = await build_candidate(session, merged, campaign_id=campaign.id)
    result = await check_candidate(session, candidate)
    result.raise_for_errors()

    campaign.name = normalize_name(merged["name"])  # type: ignore[assignment]
    campaign.state_id = merged["state_id"]
    campaign.district_id = merged["district_id"]
    campaign.school_id = merged["school_id"]
    target: CampaignableRef = candidate.campaignable  # type: ignore[assignment]
    campaign.campaignable_type = target.kind.value
    campaign.campaignable_id = target.id
    campaign.school_wide = merged["school_wide"]
    campaign.active = merged["active"]
    slug = campaign.slug
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        errors = await _race_errors(session, merged["name"], slug, campaign_id)
        if not errors:
            raise
        logger.warning(f"Campaign update {campaign_id} lost a uniqueness race: {[e.code for e in errors]}")
        raise UniquenessRaceError(errors) from None
    await session.refresh(campaign)
    logger.info(f"Updated campaign {campaign.id}")
    return campaign


async def destroy_campaign(session: AsyncSession, campaign_id: uuid.UUID) -> None:
    """Destroy a campaign that is inactive and has no contributions.

    The campaign row is locked (``SELECT ... FOR UPDATE``) for the whole
    check-and-delete transaction.  The ``ON DELETE RESTRICT`` foreign key on
    contributions backs the guard up: a violation during the delete is
    reported as ``CAMPAIGN_HAS_CONTRIBUTIONS``.

    Raises:
        RecordNotFoundError: If the campaign does not exist.
        DestroyGuardError: If the campaign is active or has contributions.
    """
    result = await session.execute(select(Campaign).where(Campaign.id == campaign_id).with_for_update())
    campaign = result.scalar_one_or_none()
    if campaign is None:
        raise RecordNotFoundError("Campaign", campaign_id)

    contribution_count = await count_for_campaign(session, campaign.id)
    try:
        check_campaign_destroy(campaign.active, contribution_count)
    except DestroyGuardError as e:
        await session.rollback()
        logger.warning(f"Refused to destroy campaign {campaign_id}: {[c.value for c in e.codes]}")
        raise

    slug = campaign.slug
    await session.delete(campaign)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        logger.warning(f"Refused to destroy campaign {campaign_id}: contribution recorded during destroy")
        raise DestroyGuardError([ErrorCode.CAMPAIGN_HAS_CONTRIBUTIONS]) from None
    logger.info(f"Destroyed campaign {campaign_id} ({slug})")
