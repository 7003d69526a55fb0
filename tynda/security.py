"""
Password hashing helpers (bcrypt).

bcrypt only looks at the first 72 bytes of a password and current releases
reject longer input outright, so registration caps passwords at
MAX_PASSWORD_BYTES and verification treats an over-long password as a
mismatch.
"""

import logging

import bcrypt

logger = logging.getLogger(__name__)

MAX_PASSWORD_BYTES = 72


def hash_password(password: str, rounds: int = 12) -> str:
    """Return a bcrypt hash (salt embedded) suitable for the users.password column."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Constant-time check of `password` against a stored bcrypt hash."""
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        # Over-long password or a hash that is not bcrypt
        logger.debug("Password verification rejected malformed input")
        return False
