"""Preconditions checked before a record is deleted."""

from fundraiser_api.lib.consistency.errors import DestroyGuardError, ErrorCode


def campaign_destroy_blockers(active: bool, contribution_count: int) -> list[ErrorCode]:
    """List the reasons a campaign cannot be destroyed (empty if it can)."""
    blockers: list[ErrorCode] = []
    if active:
        blockers.append(ErrorCode.CAMPAIGN_ACTIVE)
    if contribution_count > 0:
        blockers.append(ErrorCode.CAMPAIGN_HAS_CONTRIBUTIONS)
    return blockers


def check_campaign_destroy(active: bool, contribution_count: int) -> None:
    """Refuse to destroy an active campaign or one that has contributions.

    Raises:
        DestroyGuardError: Listing every violated condition.
    """
    blockers = campaign_destroy_blockers(active, contribution_count)
    if blockers:
        raise DestroyGuardError(blockers)


def check_children(counts: dict[ErrorCode, int]) -> None:
    """Refuse a hierarchy delete while dependent records remain.

    Args:
        counts: Dependent-record count keyed by the code to report when non-zero.

    Raises:
        DestroyGuardError: If any count is positive.
    """
    blockers = [code for code, count in counts.items() if count > 0]
    if blockers:
        raise DestroyGuardError(blockers)
