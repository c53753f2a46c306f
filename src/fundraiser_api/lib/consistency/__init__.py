"""Campaign consistency core -- pure rules, slug generation and delete guards.

Public API:
    - ``validate_campaign``: Check a resolved campaign candidate
    - ``validate_teacher``: Check a teacher candidate (names, duplicate per school)
    - ``check_campaign_destroy``: Destroy guard for campaigns
    - ``generate_unique_slug``: Derive a free URL-safe campaign slug
    - ``slugify`` / ``is_valid_slug``: Slug helpers
    - Error taxonomy: ``FieldValidationError``, ``UniquenessRaceError``,
      ``MissingAssociationError``, ``DestroyGuardError``, ``RecordNotFoundError``
"""

from fundraiser_api.lib.consistency.campaign_rules import (
    CampaignableKind,
    CampaignableRef,
    CampaignCandidate,
    ValidationResult,
    normalize_name,
    validate_campaign,
)
from fundraiser_api.lib.consistency.errors import (
    DestroyGuardError,
    ErrorCode,
    FieldError,
    FieldValidationError,
    FundraiserError,
    MissingAssociationError,
    RecordNotFoundError,
    SlugGenerationError,
    UniquenessRaceError,
)
from fundraiser_api.lib.consistency.guards import campaign_destroy_blockers, check_campaign_destroy, check_children
from fundraiser_api.lib.consistency.slug import SlugPolicy, generate_unique_slug, is_valid_slug, random_token, slugify
from fundraiser_api.lib.consistency.teacher_rules import full_name, validate_teacher

__all__ = [
    "CampaignCandidate",
    "CampaignableKind",
    "CampaignableRef",
    "DestroyGuardError",
    "ErrorCode",
    "FieldError",
    "FieldValidationError",
    "FundraiserError",
    "MissingAssociationError",
    "RecordNotFoundError",
    "SlugGenerationError",
    "SlugPolicy",
    "UniquenessRaceError",
    "ValidationResult",
    "campaign_destroy_blockers",
    "check_campaign_destroy",
    "check_children",
    "full_name",
    "generate_unique_slug",
    "is_valid_slug",
    "normalize_name",
    "random_token",
    "slugify",
    "validate_campaign",
    "validate_teacher",
]
