"""
URL slugs for budgets.

Budget names are turned into readable slugs. Two budgets in one partnership
may not share a slug, so collisions get a counter and a short random suffix,
and a failed insert is retried with a fresh suffix a bounded number of times.
"""
import re
import secrets
from typing import Callable, Iterable, Optional, TypeVar

from piggyback.logging_setup import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

MAX_SLUG_LENGTH = 80
DEFAULT_SLUG = "budget"


class SlugConflictError(Exception):
    """Raised by an insert callable when the slug is already taken."""
    pass


class SlugRetryExhaustedError(Exception):
    """Raised when every retry still collided."""

    def __init__(self, name: str, attempts: int):
        super().__init__(
            f"Could not find a free slug for budget '{name}' after {attempts} attempts"
        )
        self.name = name
        self.attempts = attempts


def slugify(name: str) -> str:
    """
    Convert a budget name to a URL-safe slug.

    Examples:
        "My 50/30/20 Budget" -> "my-503020-budget"
        "Food & Dining"      -> "food-and-dining"
        "Ben's Budget!"      -> "bens-budget"
    """
    slug = name.lower().strip()
    slug = slug.replace("&", "and")
    slug = re.sub(r"['‘’]", "", slug)
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    slug = slug.strip("-")

    if len(slug) > MAX_SLUG_LENGTH:
        truncated = slug[:MAX_SLUG_LENGTH]
        last_hyphen = truncated.rfind("-")
        return truncated[:last_hyphen] if last_hyphen > 20 else truncated

    return slug or DEFAULT_SLUG


def random_suffix() -> str:
    """Four hex characters (65,536 possibilities)."""
    return secrets.token_hex(2)


def generate_unique_slug(name: str, existing_slugs: Iterable[str]) -> str:
    """
    Pick a slug that is not in existing_slugs.

    The plain slug is used when free. Otherwise the first free counter from 2
    is appended together with a random suffix, so two concurrent requests
    that saw the same existing set do not pick the same slug.
    """
    base_slug = slugify(name)
    taken = set(existing_slugs)

    if base_slug not in taken:
        return base_slug

    counter = 2
    while f"{base_slug}-{counter}" in taken:
        counter += 1
    return f"{base_slug}-{counter}-{random_suffix()}"


def insert_with_slug_retry(
    insert: Callable[[str], T],
    name: str,
    existing_slugs: Iterable[str] = (),
    max_retries: int = 3,
) -> T:
    """
    Insert a budget, regenerating its slug on unique-constraint conflicts.

    Args:
        insert: Callable that stores the budget under the given slug and
            raises SlugConflictError when the slug is taken
        name: Budget name the slug is derived from
        existing_slugs: Slugs already in use, for the first attempt
        max_retries: Retries after the first attempt

    Raises:
        SlugRetryExhaustedError: If every attempt collided

    Returns:
        Whatever insert returned
    """
    last_error: Optional[SlugConflictError] = None

    for attempt in range(max_retries + 1):
        if attempt == 0:
            slug = generate_unique_slug(name, existing_slugs)
        else:
            slug = f"{slugify(name)}-{random_suffix()}"

        try:
            return insert(slug)
        except SlugConflictError as e:
            logger.info("Slug '%s' already taken (attempt %d)", slug, attempt + 1)
            last_error = e

    raise SlugRetryExhaustedError(name, max_retries + 1) from last_error
