"""Contribution service -- records donations against campaigns.

Payment capture happens elsewhere; this module only stores the record, links
it to its contributor and answers how many contributions a campaign has.
"""

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
)
from fundraiser_api.models.campaign import Campaign
from fundraiser_api.models.contribution import Contribution
from fundraiser_api.services import contributor_service


async def count_for_campaign(session: AsyncSession, campaign_id: uuid.UUID) -> int:
    """Count contributions recorded for a campaign."""
    result = await session.execute(select(func.count(Contribution.id)).where(Contribution.campaign_id == campaign_id))
    return result.scalar_one()


async def get_contribution(session: AsyncSession, contribution_id: uuid.UUID) -> Contribution | None:
    """Get a contribution by ID, or None."""
    return await session.get(Contribution, contribution_id)


async def list_for_campaign(
    session: AsyncSession,
    campaign_id: uuid.UUID,
    *,
    page: int = 1,
    page_size: int = 20,
) -> tuple[list[Contribution], int]:
    """List a campaign's contributions, newest first.

    Returns:
        Tuple of (contributions, total count).
    """
    total = await count_for_campaign(session, campaign_id)
    query = (
        select(Contribution)
        .where(Contribution.campaign_id == campaign_id)
        .order_by(Contribution.created_at.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    contributions = list((await session.execute(query)).scalars().all())
    return contributions, total


async def list_for_contributor(
    session: AsyncSession,
    contributor_id: uuid.UUID,
    *,
    page: int = 1,
    page_size: int = 20,
) -> tuple[list[Contribution], int]:
    """List a contributor's contributions across campaigns, newest first.

    Returns:
        Tuple of (contributions, total count).
    """
    total = await contributor_service.count_contributions(session, contributor_id)
    query = (
        select(Contribution)
        .where(Contribution.contributor_id == contributor_id)
        .order_by(Contribution.created_at.desc())
        .offset((page - 1) * page_size)
        .limit(page_size)
    )
    contributions = list((await session.execute(query)).scalars().all())
    return contributions, total


async def record_contribution(
    session: AsyncSession,
    campaign_id: uuid.UUID,
    *,
    amount_cents: int,
    contributor_name: str | None = None,
    contributor_email: str | None = None,
) -> Contribution:
    """Record a contribution for an active campaign.

    A contribution with an email is linked to the contributor with that email,
    creating the contributor on first use.

    Raises:
        RecordNotFoundError: If the campaign does not exist.
        FieldValidationError: If the campaign is inactive or the amount is not positive.
        UniquenessRaceError: If a concurrent contribution created the same contributor first.
    """
    campaign = await session.get(Campaign, campaign_id)
    if campaign is None:
        raise RecordNotFoundError("Campaign", campaign_id)

    errors: list[FieldError] = []
    if not campaign.active:
        errors.append(FieldError.of("campaign", ErrorCode.CAMPAIGN_INACTIVE))
    if amount_cents <= 0:
        errors.append(FieldError.of("amount_cents", ErrorCode.AMOUNT_INVALID))
    if errors:
        raise FieldValidationError(errors)

    contribution = Contribution(
        campaign_id=campaign_id,
        amount_cents=amount_cents,
        contributor_name=contributor_name,
        contributor_email=contributor_email,
    )
    try:
        if contributor_email:
            contributor = await contributor_service.get_or_add_for_contribution(
                session, contributor_email, contributor_name
            )
            contribution.contributor_id = contributor.id
        session.add(contribution)
        await session.commit()
    except IntegrityError:
        await session.rollback()
        if not contributor_email or await contributor_service.find_by_email(session, contributor_email) is None:
            raise
        logger.warning(f"Contribution for campaign {campaign_id} lost a contributor race on {contributor_email}")
        raise UniquenessRaceError([FieldError.of("contributor_email", ErrorCode.EMAIL_TAKEN)]) from None
    await session.refresh(contribution)
    logger.info(f"Recorded contribution {contribution.id} ({amount_cents} cents) for campaign {campaign_id}")
    return contribution


async def delete_contribution(session: AsyncSession, contribution_id: uuid.UUID) -> None:
    """Remove a contribution record (refunds, test data).

    Raises:
        RecordNotFoundError: If the contribution does not exist.
    """
    contribution = await session.get(Contribution, contribution_id)
    if contribution is None:
        raise RecordNotFoundError("Contribution", contribution_id)
    campaign_id = contribution.campaign_id
    await session.delete(contribution)
    await session.commit()
    logger.info(f"Deleted contribution {contribution_id} from campaign {campaign_id}")
