"""Unit tests for the delete guards."""

import pytest

from fundraiser_api.lib.consistency import (
    DestroyGuardError,
    ErrorCode,
    campaign_destroy_blockers,
    check_campaign_destroy,
    check_children,
)


class TestCampaignDestroyGuard:
    """Tests for the campaign destroy precondition."""

    def test_inactive_without_contributions_passes(self) -> None:
        check_campaign_destroy(active=False, contribution_count=0)
        assert campaign_destroy_blockers(False, 0) == []

    def test_active_campaign_refused(self) -> None:
        with pytest.raises(DestroyGuardError) as exc_info:
            check_campaign_destroy(active=True, contribution_count=0)
        assert exc_info.value.code == ErrorCode.CAMPAIGN_ACTIVE

    def test_campaign_with_contributions_refused(self) -> None:
        with pytest.raises(DestroyGuardError) as exc_info:
            check_campaign_destroy(active=False, contribution_count=1)
        assert exc_info.value.codes == [ErrorCode.CAMPAIGN_HAS_CONTRIBUTIONS]

    def test_reports_both_reasons_active_first(self) -> None:
        assert campaign_destroy_blockers(True, 3) == [
            ErrorCode.CAMPAIGN_ACTIVE,
            ErrorCode.CAMPAIGN_HAS_CONTRIBUTIONS,
        ]


class TestCheckChildren:
    """Tests for the hierarchy delete guard."""

    def test_no_children_passes(self) -> None:
        check_children({ErrorCode.SCHOOL_HAS_TEACHERS: 0, ErrorCode.SCHOOL_HAS_CAMPAIGNS: 0})

    def test_reports_only_positive_counts(self) -> None:
        with pytest.raises(DestroyGuardError) as exc_info:
            check_children({ErrorCode.SCHOOL_HAS_TEACHERS: 0, ErrorCode.SCHOOL_HAS_CAMPAIGNS: 2})
        assert exc_info.value.codes == [ErrorCode.SCHOOL_HAS_CAMPAIGNS]
