"""Login credential checks.

Passwords are stored as werkzeug password hashes. Rows imported from older
databases may still hold plain text; those are compared directly.
"""

from __future__ import annotations

import hmac

import structlog
from werkzeug.security import check_password_hash, generate_password_hash

from examdesk.core.errors import AuthenticationError
from examdesk.db.users_repository import UserRecord, get_user_by_email

logger = structlog.get_logger(__name__)

# Method prefixes written by werkzeug's generate_password_hash
HASH_METHODS = ("scrypt:", "pbkdf2:")


def hash_password(password: str) -> str:
    """Hash a password for storage in users.password."""
    return generate_password_hash(password)


def is_password_hash(stored: str) -> bool:
    """True if the stored value is a werkzeug hash rather than plain text."""
    return stored.startswith(HASH_METHODS) and stored.count("$") == 2


def verify_password(password: str, stored: str) -> bool:
    """Check a password against a stored hash (or legacy plain text)."""
    if not stored:
        return False

    if is_password_hash(stored):
        return check_password_hash(stored, password)

    return hmac.compare_digest(password.encode("utf-8"), stored.encode("utf-8"))


def authenticate(email: str, password: str) -> UserRecord:
    """Return the user matching email and password.

    Raises:
        AuthenticationError: If the email is unknown or the password is wrong
    """
    user = get_user_by_email(email)
    if user is None or not verify_password(password, user.password):
        logger.info("auth.login_failed", email=email)
        raise AuthenticationError("Invalid email or password")

    logger.info("auth.login", user_id=user.id, account_type=user.account_type)
    return user
