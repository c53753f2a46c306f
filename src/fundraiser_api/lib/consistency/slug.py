"""Campaign slug generation.

A slug is derived from the campaign name (``"Snow Canyon Band Trip"`` ->
``"snow-canyon-band-trip"``).  When that slug is already in use, or the name
has no usable characters, a random token is appended (or used on its own)
and the store is asked again.  Uniqueness is checked here, not reserved: the
unique index on ``campaigns.slug`` has the final say.
"""

import re
import secrets
import string
import unicodedata
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from loguru import logger

from fundraiser_api.lib.consistency.errors import SlugGenerationError

DEFAULT_MAX_ATTEMPTS = 10
DEFAULT_MAX_LENGTH = 80
DEFAULT_SUFFIX_LENGTH = 6


@dataclass(frozen=True)
class SlugPolicy:
    """Knobs for :func:`generate_unique_slug`."""

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    max_length: int = DEFAULT_MAX_LENGTH
    suffix_length: int = DEFAULT_SUFFIX_LENGTH


_TOKEN_ALPHABET = string.ascii_lowercase + string.digits
_SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def slugify(name: str, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """Generate a URL-safe slug from a display name.

    Accents are folded to ASCII, everything is lowercased, runs of spaces,
    hyphens and underscores collapse into a single hyphen, and any other
    character is dropped.

    Args:
        name: The display name to slugify.
        max_length: Upper bound on the result length.

    Returns:
        The slug; empty if the name has no usable characters.
    """
    ascii_name = unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode("ascii")
    slug = ascii_name.lower().strip()
    slug = re.sub(r"[^a-z0-9\s_-]", "", slug)
    slug = re.sub(r"[\s_-]+", "-", slug)
    return slug.strip("-")[:max_length].rstrip("-")


def is_valid_slug(slug: str) -> bool:
    """Check that a slug is lowercase alphanumerics separated by single hyphens."""
    return bool(_SLUG_RE.match(slug))


def random_token(length: int = DEFAULT_SUFFIX_LENGTH) -> str:
    """Return a random lowercase alphanumeric token."""
    return "".join(secrets.choice(_TOKEN_ALPHABET) for _ in range(length))


async def generate_unique_slug(
    candidate_name: str,
    is_taken: Callable[[str], Awaitable[bool]],
    *,
    policy: SlugPolicy | None = None,
    token_factory: Callable[[int], str] = random_token,
) -> str:
    """Find a slug for ``candidate_name`` that the store reports as unused.

    Args:
        candidate_name: Campaign name the slug is derived from.
        is_taken: Async predicate asking the campaign store about a slug.
        policy: Attempt count and length limits.
        token_factory: Produces random tokens of a given length.

    Returns:
        A slug that was free when checked.

    Raises:
        SlugGenerationError: If every attempt collided.
    """
    policy = policy or SlugPolicy()
    base = slugify(candidate_name, max_length=policy.max_length - policy.suffix_length - 1)
    for attempt in range(policy.max_attempts):
        if attempt == 0 and base:
            candidate = base
        else:
            token = token_factory(policy.suffix_length)
            candidate = f"{base}-{token}" if base else token
        if not await is_taken(candidate):
            if attempt:
                logger.debug(f"Slug for '{candidate_name}' resolved after {attempt + 1} attempts")
            return candidate

    msg = f"Could not find a free slug for '{candidate_name}' after {policy.max_attempts} attempts"
    raise SlugGenerationError(msg)
