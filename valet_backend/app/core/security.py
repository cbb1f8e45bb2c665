"""
Password hashing and verification.

New credentials are always stored as bcrypt hashes. Rows created by the
development seed path may still hold cleartext; those are recognised by the
absence of a bcrypt prefix and compared directly while
`allow_legacy_plaintext_passwords` is enabled.
"""

import hmac
import bcrypt
from valet_backend.app.core.config import settings
from valet_backend.app.core.logging_config import get_logger

logger = get_logger(__name__)

BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def is_hashed_credential(stored: str) -> bool:
    return bool(stored) and stored.startswith(BCRYPT_PREFIXES)


def get_password_hash(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, stored: str) -> bool:
    """
    Check a submitted password against the stored credential.

    bcrypt.checkpw does the constant-time comparison for hashed values.
    """
    if not plain_password or not stored:
        return False

    if is_hashed_credential(stored):
        try:
            return bcrypt.checkpw(plain_password.encode("utf-8"), stored.encode("utf-8"))
        except ValueError:
            logger.warning("Malformed bcrypt hash in credential store")
            return False

    if not settings.allow_legacy_plaintext_passwords:
        return False
    logger.debug("Verifying legacy cleartext credential")
    return hmac.compare_digest(plain_password.encode("utf-8"), stored.encode("utf-8"))
