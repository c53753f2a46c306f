"""Terms of service -- read and replace the single terms document."""

from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fundraiser_api.lib.consistency import ErrorCode, FieldError, FieldValidationError
from fundraiser_api.models.terms_of_service import TERMS_ID, TermsOfService


async def get_terms(session: AsyncSession) -> TermsOfService | None:
    """Get the terms of service, or None if they were never written."""
    return await session.get(TermsOfService, TERMS_ID)


async def update_terms(session: AsyncSession, *, body: str | None) -> TermsOfService:
    """Replace the terms of service, creating the row on first write.

    Raises:
        FieldValidationError: If the body is blank.
    """
    if body is None or not body.strip():
        raise FieldValidationError([FieldError.of("body", ErrorCode.BODY_REQUIRED)])

    terms = await get_terms(session)
    if terms is None:
        terms = TermsOfService(id=TERMS_ID, body=body)
        session.add(terms)
    else:
        terms.body = body
    try:
        await session.commit()
    except IntegrityError:
        # Another writer created the row first; overwrite theirs
        await session.rollback()
        terms = await get_terms(session)
        if terms is None:
            raise
        terms.body = body
        await session.commit()

    await session.refresh(terms)
    logger.info(f"Updated terms of service ({len(body)} characters)")
    return terms
