"""
Human-readable identifier generation for locations and owners.

Formats:
    Location: [SHORTCODE]-[TYPELETTER][YY]-[SEQ]   e.g. ABC-M26-001
    Owner:    OWN-[YY]-[SEQ]                       e.g. OWN-26-0001

SEQ is a zero-padded counter that restarts every calendar year. Location
sequences are global across all short codes.

The next sequence is computed from the highest identifier already stored, so
two concurrent creations can compute the same value. The generated identifier
is therefore only a hint: the primary-key constraint is the real guard, and
callers retry through `insert_with_generated_id` when the insert collides.
"""

import re
import string
from dataclasses import dataclass
from datetime import datetime
from typing import Awaitable, Callable, Optional, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from valet_backend.app.core.config import settings
from valet_backend.app.core.exceptions import (
    DuplicateIdentifierError,
    IdentifierSpaceExhaustedError,
    InvalidInputError,
)
from valet_backend.app.core.logging_config import get_logger
from valet_backend.app.db import errors as db_errors
from valet_backend.app.models.location import Location
from valet_backend.app.models.user import User

logger = get_logger(__name__)

Clock = Callable[[], datetime]
T = TypeVar("T")

SHORT_CODE_LENGTH = 3
DEFAULT_LOCATION_TYPE = "OTHER"

TYPE_LETTERS = {
    "MALL": "M",
    "HOTEL": "H",
    "OTHER": "O",
}

OWNER_PREFIX = "OWN"


@dataclass(frozen=True)
class IdentifierScope:
    """Where a family of identifiers lives and how its sequence is encoded."""
    name: str
    column: object
    width: int
    constraint_key: str
    like_template: str
    regex_template: str

    @property
    def max_sequence(self) -> int:
        return 10 ** self.width - 1

    def like_pattern(self, year_suffix: str) -> str:
        return self.like_template.format(year=year_suffix)

    def regex(self, year_suffix: str) -> "re.Pattern[str]":
        return re.compile(self.regex_template.format(year=re.escape(year_suffix), width=self.width))


LOCATION_SCOPE = IdentifierScope(
    name="Location",
    column=Location.location_id,
    width=3,
    constraint_key=db_errors.LOCATION_ID,
    like_template="%-_{year}-%",
    # Mirrors the LIKE filter: any row it selects with a numeric tail counts.
    regex_template=r"^.*-.{year}-(\d{{{width}}})$",
)

OWNER_SCOPE = IdentifierScope(
    name="Owner",
    column=User.user_id,
    width=4,
    constraint_key=db_errors.USER_ID,
    like_template=OWNER_PREFIX + "-{year}-%",
    regex_template=OWNER_PREFIX + r"-{year}-(\d{{{width}}})$",
)


def canonical_location_type(category: Optional[str]) -> str:
    """Strip and uppercase a location type; blank becomes OTHER."""
    if category is None:
        return DEFAULT_LOCATION_TYPE
    canonical = str(category).strip().upper()
    return canonical or DEFAULT_LOCATION_TYPE


def derive_type_letter(category: Optional[str]) -> str:
    """
    Map a location type to the single letter embedded in location IDs.

    MALL -> M, HOTEL -> H, OTHER/blank -> O, anything else -> its own
    first character, uppercased. A first character outside A-Z maps to O
    so generated IDs stay within [A-Z].
    """
    canonical = canonical_location_type(category)
    if canonical in TYPE_LETTERS:
        return TYPE_LETTERS[canonical]
    letter = canonical[0]
    if letter in string.ascii_uppercase:
        return letter
    return TYPE_LETTERS[DEFAULT_LOCATION_TYPE]


def current_year_suffix(clock: Optional[Clock] = None) -> str:
    """Two-digit current year, e.g. "26" for 2026."""
    now = (clock or datetime.now)()
    return f"{now.year % 100:02d}"


def normalize_short_code(short_code: Optional[str]) -> str:
    """
    Strip and uppercase a location short code.

    Raises:
        InvalidInputError: unless exactly 3 ASCII letters remain
    """
    code = str(short_code or "").strip().upper()
    if len(code) != SHORT_CODE_LENGTH:
        raise InvalidInputError("Location short code must be exactly 3 characters.")
    if any(ch not in string.ascii_uppercase for ch in code):
        raise InvalidInputError("Location short code must contain only letters A-Z.")
    return code


async def next_sequence(db: AsyncSession, scope: IdentifierScope, year_suffix: str) -> int:
    """
    Next free sequence number of `scope` for the given year.

    Returns the highest existing sequence + 1, or 1 when the year has none.

    Raises:
        IdentifierSpaceExhaustedError: if the value no longer fits the fixed width
    """
    result = await db.execute(
        select(scope.column).where(scope.column.like(scope.like_pattern(year_suffix)))
    )
    pattern = scope.regex(year_suffix)

    highest = 0
    for (identifier,) in result.all():
        match = pattern.match(identifier)
        if match:
            highest = max(highest, int(match.group(1)))

    sequence = highest + 1
    if sequence > scope.max_sequence:
        raise IdentifierSpaceExhaustedError(scope.name, year_suffix, scope.width)
    return sequence


async def generate_location_id(
    db: AsyncSession,
    short_code: str,
    category: Optional[str],
    clock: Optional[Clock] = None,
) -> str:
    code = normalize_short_code(short_code)
    letter = derive_type_letter(category)
    year = current_year_suffix(clock)
    sequence = await next_sequence(db, LOCATION_SCOPE, year)
    return f"{code}-{letter}{year}-{sequence:0{LOCATION_SCOPE.width}d}"


async def generate_owner_id(db: AsyncSession, clock: Optional[Clock] = None) -> str:
    year = current_year_suffix(clock)
    sequence = await next_sequence(db, OWNER_SCOPE, year)
    return f"{OWNER_PREFIX}-{year}-{sequence:0{OWNER_SCOPE.width}d}"


async def insert_with_generated_id(
    db: AsyncSession,
    scope: IdentifierScope,
    generate: Callable[[], Awaitable[str]],
    insert: Callable[[str], Awaitable[T]],
    duplicate_message: str,
    max_attempts: Optional[int] = None,
) -> T:
    """
    Run `insert` with a freshly generated identifier, retrying on collisions.

    `insert` must flush and commit its rows. When it fails on the scope's own
    uniqueness constraint the session is rolled back and a new identifier is
    generated, up to `max_attempts` times. Any other integrity error is rolled
    back and re-raised for the caller to translate.

    Raises:
        DuplicateIdentifierError: the identifier still collided on the last attempt
    """
    attempts = max_attempts or settings.id_generation_max_attempts
    identifier = None
    for attempt in range(1, attempts + 1):
        identifier = await generate()
        try:
            return await insert(identifier)
        except IntegrityError as exc:
            await db.rollback()
            if db_errors.violated_unique_key(exc) != scope.constraint_key:
                raise
            logger.warning(
                "%s ID collision on %s (attempt %d/%d)",
                scope.name, identifier, attempt, attempts,
            )
        except Exception:
            await db.rollback()
            raise

    raise DuplicateIdentifierError(duplicate_message, identifier=identifier, attempts=attempts)
