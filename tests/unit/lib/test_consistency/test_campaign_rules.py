"""Unit tests for the campaign consistency rules.

Records are plain stand-ins; the rules never touch the database.
"""

import uuid
from dataclasses import dataclass, field

import pytest

from fundraiser_api.lib.consistency import (
    CampaignableKind,
    CampaignableRef,
    CampaignCandidate,
    ErrorCode,
    FieldValidationError,
    MissingAssociationError,
    normalize_name,
    validate_campaign,
)


@dataclass
class _State:
    id: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass
class _District:
    state_id: uuid.UUID
    id: uuid.UUID = field(default_factory=uuid.uuid4)


@dataclass
class _School:
    district_id: uuid.UUID
    id: uuid.UUID = field(default_factory=uuid.uuid4)


def _school_ref(school: _School) -> CampaignableRef:
    return CampaignableRef(CampaignableKind.SCHOOL, school.id, school.id)


def _teacher_ref(school: _School) -> CampaignableRef:
    return CampaignableRef(CampaignableKind.TEACHER, uuid.uuid4(), school.id)


@pytest.fixture
def utah() -> _State:
    return _State()


@pytest.fixture
def washington(utah: _State) -> _District:
    return _District(state_id=utah.id)


@pytest.fixture
def snow_canyon(washington: _District) -> _School:
    return _School(district_id=washington.id)


@pytest.fixture
def candidate(utah: _State, washington: _District, snow_canyon: _School) -> CampaignCandidate:
    """A valid school-wide campaign for Snow Canyon."""
    return CampaignCandidate(
        name="Snow Canyon Band Trip",
        state=utah,
        district=washington,
        school=snow_canyon,
        campaignable=_school_ref(snow_canyon),
        school_wide=True,
    )


class TestValidCampaigns:
    """Consistent candidates pass."""

    def test_school_wide_campaign_for_its_school_is_valid(self, candidate: CampaignCandidate) -> None:
        result = validate_campaign(candidate)
        assert result.valid
        assert result.codes == []

    def test_teacher_campaign_for_teacher_of_school_is_valid(
        self, candidate: CampaignCandidate, snow_canyon: _School
    ) -> None:
        candidate.campaignable = _teacher_ref(snow_canyon)
        candidate.school_wide = False
        assert validate_campaign(candidate).valid

    def test_valid_for_many_consistent_triples(self) -> None:
        """Every consistent (state, district, school) triple with a school-wide target validates."""
        for _ in range(25):
            state = _State()
            district = _District(state_id=state.id)
            school = _School(district_id=district.id)
            result = validate_campaign(
                CampaignCandidate(
                    name=f"Campaign {uuid.uuid4()}",
                    state=state,
                    district=district,
                    school=school,
                    campaignable=_school_ref(school),
                    school_wide=True,
                )
            )
            assert result.valid, result.codes

    def test_raise_for_errors_is_silent_when_valid(self, candidate: CampaignCandidate) -> None:
        validate_campaign(candidate).raise_for_errors()


class TestHierarchyConsistency:
    """District/state and school/district pairing."""

    def test_district_of_other_state_fails(self, candidate: CampaignCandidate) -> None:
        candidate.state = _State()
        result = validate_campaign(candidate)
        assert ErrorCode.DISTRICT_STATE_MISMATCH in result.codes

    def test_district_state_mismatch_reported_with_other_errors(self, candidate: CampaignCandidate) -> None:
        """The mismatch is reported regardless of other fields."""
        candidate.state = _State()
        candidate.name = "   "
        candidate.school_wide = None
        result = validate_campaign(candidate)
        assert ErrorCode.DISTRICT_STATE_MISMATCH in result.codes
        assert ErrorCode.NAME_REQUIRED in result.codes
        assert ErrorCode.SCHOOL_WIDE_REQUIRED in result.codes

    def test_school_of_other_district_fails(self, candidate: CampaignCandidate, utah: _State) -> None:
        other_school = _School(district_id=_District(state_id=utah.id).id)
        candidate.school = other_school
        candidate.campaignable = _school_ref(other_school)
        result = validate_campaign(candidate)
        assert result.codes == [ErrorCode.SCHOOL_DISTRICT_MISMATCH]

    def test_mismatch_errors_name_their_field(self, candidate: CampaignCandidate) -> None:
        candidate.state = _State()
        candidate.school = _School(district_id=uuid.uuid4())
        fields = {e.code: e.field for e in validate_campaign(candidate).errors}
        assert fields[ErrorCode.DISTRICT_STATE_MISMATCH] == "district"
        assert fields[ErrorCode.SCHOOL_DISTRICT_MISMATCH] == "school"


class TestCampaignableMatch:
    """The target must agree with the school_wide flag and the campaign's school."""

    def test_school_wide_with_teacher_target_fails(self, candidate: CampaignCandidate, snow_canyon: _School) -> None:
        candidate.campaignable = _teacher_ref(snow_canyon)
        assert validate_campaign(candidate).codes == [ErrorCode.CAMPAIGNABLE_MISMATCH]

    def test_school_wide_with_teacher_of_other_school_fails(self, candidate: CampaignCandidate) -> None:
        other_school = _School(district_id=uuid.uuid4())
        candidate.campaignable = _teacher_ref(other_school)
        assert ErrorCode.CAMPAIGNABLE_MISMATCH in validate_campaign(candidate).codes

    def test_school_wide_with_other_school_fails(self, candidate: CampaignCandidate) -> None:
        candidate.campaignable = _school_ref(_School(district_id=uuid.uuid4()))
        assert validate_campaign(candidate).codes == [ErrorCode.CAMPAIGNABLE_MISMATCH]

    def test_teacher_campaign_with_teacher_of_other_school_fails(self, candidate: CampaignCandidate) -> None:
        candidate.school_wide = False
        candidate.campaignable = _teacher_ref(_School(district_id=uuid.uuid4()))
        assert validate_campaign(candidate).codes == [ErrorCode.CAMPAIGNABLE_MISMATCH]

    def test_teacher_campaign_with_school_target_fails(self, candidate: CampaignCandidate) -> None:
        candidate.school_wide = False
        assert validate_campaign(candidate).codes == [ErrorCode.CAMPAIGNABLE_MISMATCH]

    def test_missing_target_is_required_not_mismatch(self, candidate: CampaignCandidate) -> None:
        candidate.campaignable = None
        assert validate_campaign(candidate).codes == [ErrorCode.CAMPAIGNABLE_REQUIRED]

    def test_missing_school_wide_skips_match(self, candidate: CampaignCandidate) -> None:
        candidate.school_wide = None
        assert validate_campaign(candidate).codes == [ErrorCode.SCHOOL_WIDE_REQUIRED]

    def test_null_active_required(self, candidate: CampaignCandidate) -> None:
        candidate.active = None
        assert validate_campaign(candidate).codes == [ErrorCode.ACTIVE_REQUIRED]


class TestNameAndSlug:
    """Name presence/uniqueness and slug format/uniqueness."""

    @pytest.mark.parametrize("name", [None, "", "   "])
    def test_blank_name_is_required(self, candidate: CampaignCandidate, name: str | None) -> None:
        candidate.name = name
        assert validate_campaign(candidate).codes == [ErrorCode.NAME_REQUIRED]

    def test_taken_name(self, candidate: CampaignCandidate) -> None:
        assert validate_campaign(candidate, name_taken=True).codes == [ErrorCode.NAME_TAKEN]

    def test_blank_name_not_reported_as_taken(self, candidate: CampaignCandidate) -> None:
        candidate.name = ""
        assert validate_campaign(candidate, name_taken=True).codes == [ErrorCode.NAME_REQUIRED]

    def test_absent_slug_is_not_checked(self, candidate: CampaignCandidate) -> None:
        assert validate_campaign(candidate, slug_taken=True).valid

    def test_taken_slug(self, candidate: CampaignCandidate) -> None:
        candidate.slug = "snow-canyon-band-trip"
        assert validate_campaign(candidate, slug_taken=True).codes == [ErrorCode.SLUG_TAKEN]

    @pytest.mark.parametrize("slug", ["Snow Canyon", "snow--canyon", "-snow", "snow_canyon", ""])
    def test_malformed_slug(self, candidate: CampaignCandidate, slug: str) -> None:
        candidate.slug = slug
        assert validate_campaign(candidate).codes == [ErrorCode.SLUG_INVALID]


class TestMissingAssociations:
    """Missing state/district/school are reported separately and suppress dependent checks."""

    def test_missing_state_suppresses_district_check(self, candidate: CampaignCandidate) -> None:
        candidate.state = None
        result = validate_campaign(candidate)
        assert result.missing_associations == ["state"]
        assert result.errors == []
        assert result.codes == [ErrorCode.STATE_REQUIRED]

    def test_missing_school_suppresses_school_checks(self, candidate: CampaignCandidate) -> None:
        candidate.school = None
        candidate.school_wide = False
        result = validate_campaign(candidate)
        assert result.missing_associations == ["school"]
        assert result.errors == []

    def test_all_missing(self) -> None:
        result = validate_campaign(
            CampaignCandidate(name=None, state=None, district=None, school=None, campaignable=None, school_wide=None)
        )
        assert result.missing_associations == ["state", "district", "school"]
        assert {e.code for e in result.errors} == {
            ErrorCode.NAME_REQUIRED,
            ErrorCode.CAMPAIGNABLE_REQUIRED,
            ErrorCode.SCHOOL_WIDE_REQUIRED,
        }

    def test_raise_prefers_missing_association(self, candidate: CampaignCandidate) -> None:
        candidate.district = None
        candidate.name = None
        with pytest.raises(MissingAssociationError) as exc_info:
            validate_campaign(candidate).raise_for_errors()
        assert exc_info.value.codes == [ErrorCode.DISTRICT_REQUIRED]

    def test_raise_field_validation_error(self, candidate: CampaignCandidate) -> None:
        candidate.state = _State()
        with pytest.raises(FieldValidationError) as exc_info:
            validate_campaign(candidate).raise_for_errors()
        assert exc_info.value.codes == [ErrorCode.DISTRICT_STATE_MISMATCH]


class TestNormalizeName:
    """Tests for normalize_name."""

    def test_strips_whitespace(self) -> None:
        assert normalize_name("  Band Trip ") == "Band Trip"

    def test_blank_becomes_none(self) -> None:
        assert normalize_name(" \t ") is None

    def test_none_stays_none(self) -> None:
        assert normalize_name(None) is None
