"""
Classification of unique-constraint violations.

PostgreSQL (asyncpg) reports SQLSTATE 23505 plus the violated constraint name;
SQLite reports "UNIQUE constraint failed: <table>.<column>". Both are reduced
to the same constraint key so callers can tell an identifier collision apart
from a duplicate email or phone number.
"""

import re
from typing import Optional
from sqlalchemy.exc import IntegrityError

UNIQUE_VIOLATION = "23505"

LOCATION_ID = "location_id"
USER_ID = "user_id"
EMAIL = "email_id"
PHONE = "phone_number"
LOCATION_ACCESS = "location_access"

# constraint name (PostgreSQL) or table.column (SQLite) -> constraint key
_CONSTRAINT_KEYS = {
    "locations_pkey": LOCATION_ID,
    "locations.location_id": LOCATION_ID,
    "users_pkey": USER_ID,
    "users.user_id": USER_ID,
    "users_email_id_key": EMAIL,
    "users.email_id": EMAIL,
    "users_phone_number_key": PHONE,
    "users.phone_number": PHONE,
    "location_access_user_location_key": LOCATION_ACCESS,
    "location_access.user_id, location_access.location_id": LOCATION_ACCESS,
}

_PG_CONSTRAINT = re.compile(r'unique constraint "([^"]+)"')
_SQLITE_COLUMNS = re.compile(r"UNIQUE constraint failed: ([\w., ]+)")


def _driver_error(exc: IntegrityError):
    orig = exc.orig
    # The asyncpg adapter wraps the driver exception; the original is its cause.
    return getattr(orig, "__cause__", None) or orig


def is_unique_violation(exc: IntegrityError) -> bool:
    driver_error = _driver_error(exc)
    sqlstate = getattr(driver_error, "sqlstate", None) or getattr(exc.orig, "sqlstate", None)
    if sqlstate is not None:
        return sqlstate == UNIQUE_VIOLATION
    return "UNIQUE constraint failed" in str(exc.orig) or "unique constraint" in str(exc.orig).lower()


def constraint_name(exc: IntegrityError) -> Optional[str]:
    """Raw name of the violated constraint as reported by the driver."""
    driver_error = _driver_error(exc)
    name = getattr(driver_error, "constraint_name", None)
    if name:
        return name
    message = str(exc.orig)
    match = _PG_CONSTRAINT.search(message) or _SQLITE_COLUMNS.search(message)
    if match:
        return match.group(1).strip()
    return None


def violated_unique_key(exc: IntegrityError) -> Optional[str]:
    """
    Map a unique violation to one of the constraint keys above.

    Returns None for non-unique integrity errors (foreign keys, NOT NULL)
    and for constraints this module does not know.
    """
    if not is_unique_violation(exc):
        return None
    name = constraint_name(exc)
    if name is None:
        return None
    return _CONSTRAINT_KEYS.get(name)
