"""Error taxonomy shared by the consistency rules and the services.

Callers handle three families differently:

* :class:`FieldValidationError` -- the submitted data breaks a rule; render the
  carried :class:`FieldError` items next to the form fields.
* :class:`MissingAssociationError` -- the caller handed over an incomplete object
  graph (state, district or school not found).  Not a form error.
* :class:`DestroyGuardError` -- a delete was refused; the record is untouched.
"""

import enum
import uuid
from collections.abc import Iterable, Sequence
from dataclasses import dataclass


class ErrorCode(enum.StrEnum):
    """Stable, machine-readable error codes."""

    NAME_REQUIRED = "NAME_REQUIRED"
    NAME_TAKEN = "NAME_TAKEN"
    SLUG_TAKEN = "SLUG_TAKEN"
    SLUG_INVALID = "SLUG_INVALID"
    ABBR_REQUIRED = "ABBR_REQUIRED"
    STATE_REQUIRED = "STATE_REQUIRED"
    DISTRICT_REQUIRED = "DISTRICT_REQUIRED"
    SCHOOL_REQUIRED = "SCHOOL_REQUIRED"
    DISTRICT_STATE_MISMATCH = "DISTRICT_STATE_MISMATCH"
    SCHOOL_DISTRICT_MISMATCH = "SCHOOL_DISTRICT_MISMATCH"
    CAMPAIGNABLE_REQUIRED = "CAMPAIGNABLE_REQUIRED"
    CAMPAIGNABLE_MISMATCH = "CAMPAIGNABLE_MISMATCH"
    SCHOOL_WIDE_REQUIRED = "SCHOOL_WIDE_REQUIRED"
    ACTIVE_REQUIRED = "ACTIVE_REQUIRED"
    FIRST_NAME_REQUIRED = "FIRST_NAME_REQUIRED"
    LAST_NAME_REQUIRED = "LAST_NAME_REQUIRED"
    DUPLICATE_TEACHER = "DUPLICATE_TEACHER"
    TEACHER_HAS_CAMPAIGNS = "TEACHER_HAS_CAMPAIGNS"
    AMOUNT_INVALID = "AMOUNT_INVALID"
    CAMPAIGN_INACTIVE = "CAMPAIGN_INACTIVE"
    CAMPAIGN_ACTIVE = "CAMPAIGN_ACTIVE"
    CAMPAIGN_HAS_CONTRIBUTIONS = "CAMPAIGN_HAS_CONTRIBUTIONS"
    STATE_HAS_DISTRICTS = "STATE_HAS_DISTRICTS"
    DISTRICT_HAS_SCHOOLS = "DISTRICT_HAS_SCHOOLS"
    SCHOOL_HAS_TEACHERS = "SCHOOL_HAS_TEACHERS"
    SCHOOL_HAS_CAMPAIGNS = "SCHOOL_HAS_CAMPAIGNS"
    USERNAME_TAKEN = "USERNAME_TAKEN"
    EMAIL_TAKEN = "EMAIL_TAKEN"
    EMAIL_REQUIRED = "EMAIL_REQUIRED"
    PRICE_REQUIRED = "PRICE_REQUIRED"
    PRICE_INVALID = "PRICE_INVALID"
    BODY_REQUIRED = "BODY_REQUIRED"
    CONTRIBUTOR_HAS_CONTRIBUTIONS = "CONTRIBUTOR_HAS_CONTRIBUTIONS"


_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.NAME_REQUIRED: "can't be blank",
    ErrorCode.NAME_TAKEN: "has already been taken",
    ErrorCode.SLUG_TAKEN: "has already been taken",
    ErrorCode.SLUG_INVALID: "may only contain lowercase letters, digits and hyphens",
    ErrorCode.ABBR_REQUIRED: "can't be blank",
    ErrorCode.STATE_REQUIRED: "must exist",
    ErrorCode.DISTRICT_REQUIRED: "must exist",
    ErrorCode.SCHOOL_REQUIRED: "must exist",
    ErrorCode.DISTRICT_STATE_MISMATCH: "does not belong to the selected state",
    ErrorCode.SCHOOL_DISTRICT_MISMATCH: "does not belong to the selected district",
    ErrorCode.CAMPAIGNABLE_REQUIRED: "must exist",
    ErrorCode.CAMPAIGNABLE_MISMATCH: "does not match the campaign's school",
    ErrorCode.SCHOOL_WIDE_REQUIRED: "must be true or false",
    ErrorCode.ACTIVE_REQUIRED: "must be true or false",
    ErrorCode.FIRST_NAME_REQUIRED: "can't be blank",
    ErrorCode.LAST_NAME_REQUIRED: "can't be blank",
    ErrorCode.DUPLICATE_TEACHER: "a teacher with this name already exists at this school",
    ErrorCode.TEACHER_HAS_CAMPAIGNS: "teacher is the target of one or more campaigns",
    ErrorCode.AMOUNT_INVALID: "must be greater than zero",
    ErrorCode.CAMPAIGN_INACTIVE: "campaign is not accepting contributions",
    ErrorCode.CAMPAIGN_ACTIVE: "an active campaign cannot be removed",
    ErrorCode.CAMPAIGN_HAS_CONTRIBUTIONS: "a campaign with contributions cannot be removed",
    ErrorCode.STATE_HAS_DISTRICTS: "state still has districts",
    ErrorCode.DISTRICT_HAS_SCHOOLS: "district still has schools",
    ErrorCode.SCHOOL_HAS_TEACHERS: "school still has teachers",
    ErrorCode.SCHOOL_HAS_CAMPAIGNS: "school still has campaigns",
    ErrorCode.USERNAME_TAKEN: "has already been taken",
    ErrorCode.EMAIL_TAKEN: "has already been taken",
    ErrorCode.EMAIL_REQUIRED: "can't be blank",
    ErrorCode.PRICE_REQUIRED: "can't be blank",
    ErrorCode.PRICE_INVALID: "must be zero or more with at most two decimal places",
    ErrorCode.BODY_REQUIRED: "can't be blank",
    ErrorCode.CONTRIBUTOR_HAS_CONTRIBUTIONS: "contributor still has contributions",
}


def message_for(code: ErrorCode) -> str:
    """Return the default human-readable message for an error code."""
    return _MESSAGES[code]


@dataclass(frozen=True)
class FieldError:
    """A single failed rule, attached to the field it concerns."""

    field: str
    code: ErrorCode
    message: str = ""

    @classmethod
    def of(cls, field: str, code: ErrorCode) -> "FieldError":
        return cls(field=field, code=code, message=message_for(code))

    def as_dict(self) -> dict[str, str]:
        return {"field": self.field, "code": self.code.value, "message": self.message}


class FundraiserError(Exception):
    """Base class for every error raised by the campaign core."""


class FieldValidationError(FundraiserError):
    """User-submitted data failed one or more rules.  Recoverable."""

    retryable = False

    def __init__(self, errors: Sequence[FieldError]) -> None:
        self.errors: list[FieldError] = list(errors)
        summary = ", ".join(f"{e.field} {e.code.value}" for e in self.errors)
        super().__init__(f"Validation failed: {summary}")

    @property
    def codes(self) -> list[ErrorCode]:
        return [e.code for e in self.errors]


class UniquenessRaceError(FieldValidationError):
    """The storage constraint rejected a write that passed the uniqueness pre-check."""

    retryable = True


class MissingAssociationError(FundraiserError):
    """A required state/district/school reference does not resolve to a record.

    This is a defect of the caller (an incomplete object graph), not a form error.
    """

    _CODES = {
        "state": ErrorCode.STATE_REQUIRED,
        "district": ErrorCode.DISTRICT_REQUIRED,
        "school": ErrorCode.SCHOOL_REQUIRED,
    }

    def __init__(self, fields: Iterable[str]) -> None:
        self.fields: list[str] = list(fields)
        super().__init__(f"Missing required association(s): {', '.join(self.fields)}")

    @property
    def codes(self) -> list[ErrorCode]:
        return [self._CODES[f] for f in self.fields if f in self._CODES]


class DestroyGuardError(FundraiserError):
    """A delete was refused by its guard.  The record remains untouched."""

    def __init__(self, codes: Sequence[ErrorCode]) -> None:
        self.codes: list[ErrorCode] = list(codes)
        super().__init__("; ".join(message_for(c) for c in self.codes))

    @property
    def code(self) -> ErrorCode:
        return self.codes[0]


class RecordNotFoundError(FundraiserError):
    """The addressed record does not exist."""

    def __init__(self, kind: str, key: uuid.UUID | str) -> None:
        self.kind = kind
        self.key = key
        super().__init__(f"{kind} {key} not found")


class SlugGenerationError(FundraiserError):
    """No free slug was found within the configured number of attempts."""
