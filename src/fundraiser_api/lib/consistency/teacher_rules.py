"""Rules for teacher records: required names and one name pair per school."""

from fundraiser_api.lib.consistency.campaign_rules import SchoolRecord, normalize_name
from fundraiser_api.lib.consistency.errors import ErrorCode, FieldError


def full_name(first_name: str, last_name: str) -> str:
    """Display name used on landing pages and admin lists."""
    return f"{first_name} {last_name}"


def validate_teacher(
    first_name: str | None,
    last_name: str | None,
    school: SchoolRecord | None,
    *,
    duplicate_count: int = 0,
) -> list[FieldError]:
    """Check a teacher candidate.

    Args:
        first_name: Given name.
        last_name: Family name.
        school: The resolved school, or None if it does not exist.
        duplicate_count: Other teachers at the same school with the same
            (first_name, last_name) pair.

    Returns:
        Every failed rule; empty when the teacher is valid.
    """
    errors: list[FieldError] = []
    if normalize_name(first_name) is None:
        errors.append(FieldError.of("first_name", ErrorCode.FIRST_NAME_REQUIRED))
    if normalize_name(last_name) is None:
        errors.append(FieldError.of("last_name", ErrorCode.LAST_NAME_REQUIRED))
    if school is None:
        errors.append(FieldError.of("school", ErrorCode.SCHOOL_REQUIRED))
    if duplicate_count > 0:
        errors.append(FieldError.of("first_name", ErrorCode.DUPLICATE_TEACHER))
    return errors
