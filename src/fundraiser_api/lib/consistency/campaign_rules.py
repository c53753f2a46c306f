"""Consistency rules for a campaign's geographic and organizational associations.

Pure functions over already-resolved records: the caller looks up the state,
district, school and campaign target, answers the two uniqueness questions, and
hands everything over.  Nothing in here touches the database.
"""

import enum
import uuid
from dataclasses import dataclass, field
from typing import Protocol

from fundraiser_api.lib.consistency.errors import (
    ErrorCode,
    FieldError,
    FieldValidationError,
    MissingAssociationError,
)
from fundraiser_api.lib.consistency.slug import is_valid_slug


class CampaignableKind(enum.StrEnum):
    """What a campaign raises money for."""

    SCHOOL = "school"
    TEACHER = "teacher"


class StateRecord(Protocol):
    id: uuid.UUID


class DistrictRecord(Protocol):
    id: uuid.UUID
    state_id: uuid.UUID


class SchoolRecord(Protocol):
    id: uuid.UUID
    district_id: uuid.UUID


@dataclass(frozen=True)
class CampaignableRef:
    """Tagged reference to a campaign target.

    ``school_id`` is the school that owns the target: the school itself for
    :attr:`CampaignableKind.SCHOOL`, the teacher's school for
    :attr:`CampaignableKind.TEACHER`.
    """

    kind: CampaignableKind
    id: uuid.UUID
    school_id: uuid.UUID


@dataclass
class CampaignCandidate:
    """A campaign as it would look after the write."""

    name: str | None
    state: StateRecord | None
    district: DistrictRecord | None
    school: SchoolRecord | None
    campaignable: CampaignableRef | None
    school_wide: bool | None
    slug: str | None = None
    id: uuid.UUID | None = None
    active: bool | None = False


@dataclass
class ValidationResult:
    """Outcome of :func:`validate_campaign`."""

    errors: list[FieldError] = field(default_factory=list)
    missing_associations: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors and not self.missing_associations

    @property
    def codes(self) -> list[ErrorCode]:
        missing = MissingAssociationError(self.missing_associations).codes if self.missing_associations else []
        return missing + [e.code for e in self.errors]

    def raise_for_errors(self) -> None:
        """Raise the matching exception if the candidate is not valid.

        Raises:
            MissingAssociationError: If state, district or school is missing.
            FieldValidationError: If any other rule failed.
        """
        if self.missing_associations:
            raise MissingAssociationError(self.missing_associations)
        if self.errors:
            raise FieldValidationError(self.errors)


def normalize_name(name: str | None) -> str | None:
    """Strip surrounding whitespace; blank names become ``None``."""
    if name is None:
        return None
    stripped = name.strip()
    return stripped or None


def validate_campaign(
    candidate: CampaignCandidate,
    *,
    name_taken: bool = False,
    slug_taken: bool = False,
) -> ValidationResult:
    """Run every campaign rule and collect all failures.

    Rules do not short-circuit each other.  The only exception: when state,
    district or school is missing, the consistency checks that would read the
    missing record are skipped and the gap is reported in
    ``missing_associations`` instead.

    Args:
        candidate: The resolved campaign candidate.
        name_taken: Another campaign already uses this name, ignoring case.
        slug_taken: Another campaign already uses this slug.

    Returns:
        The collected result.
    """
    result = ValidationResult()
    errors = result.errors

    if normalize_name(candidate.name) is None:
        errors.append(FieldError.of("name", ErrorCode.NAME_REQUIRED))
    elif name_taken:
        errors.append(FieldError.of("name", ErrorCode.NAME_TAKEN))

    if candidate.slug is not None:
        if not is_valid_slug(candidate.slug):
            errors.append(FieldError.of("slug", ErrorCode.SLUG_INVALID))
        elif slug_taken:
            errors.append(FieldError.of("slug", ErrorCode.SLUG_TAKEN))

    state, district, school = candidate.state, candidate.district, candidate.school
    if state is None:
        result.missing_associations.append("state")
    if district is None:
        result.missing_associations.append("district")
    if school is None:
        result.missing_associations.append("school")

    if state is not None and district is not None and district.state_id != state.id:
        errors.append(FieldError.of("district", ErrorCode.DISTRICT_STATE_MISMATCH))
    if district is not None and school is not None and school.district_id != district.id:
        errors.append(FieldError.of("school", ErrorCode.SCHOOL_DISTRICT_MISMATCH))

    if candidate.campaignable is None:
        errors.append(FieldError.of("campaignable", ErrorCode.CAMPAIGNABLE_REQUIRED))
    if candidate.school_wide is None:
        errors.append(FieldError.of("school_wide", ErrorCode.SCHOOL_WIDE_REQUIRED))
    if candidate.active is None:
        errors.append(FieldError.of("active", ErrorCode.ACTIVE_REQUIRED))

    if candidate.campaignable is not None and candidate.school_wide is not None and school is not None:
        if not _target_matches_school(candidate.campaignable, school_wide=candidate.school_wide, school=school):
            errors.append(FieldError.of("campaignable", ErrorCode.CAMPAIGNABLE_MISMATCH))

    return result


def _target_matches_school(target: CampaignableRef, *, school_wide: bool, school: SchoolRecord) -> bool:
    """Dispatch on the target's tag and compare it with the campaign's school."""
    match target.kind:
        case CampaignableKind.SCHOOL:
            return school_wide and target.id == school.id
        case CampaignableKind.TEACHER:
            return not school_wide and target.school_id == school.id
    return False
