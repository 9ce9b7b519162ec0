"""
app/core/security.py

Purpose: Password hashing

- One-way salted bcrypt digests, new salt per call
- Verification fails closed on malformed digests
- Plaintext passwords are never logged or stored
"""

from typing import Optional

import bcrypt

from app.core.config import settings
from app.core.logging import get_logger

logger = get_logger(__name__)

# bcrypt only reads the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


def hash_password(plaintext: str, rounds: Optional[int] = None) -> str:
    """
    Hashes a password with a freshly generated salt.

    Args:
        plaintext: Password as entered by the user
        rounds: bcrypt cost factor, defaults to settings.BCRYPT_ROUNDS

    Returns:
        bcrypt digest as a string ("$2b$...")
    """
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(plaintext.encode("utf-8"), salt).decode("utf-8")


def verify_password(plaintext: str, digest: Optional[str]) -> bool:
    """
    Checks a password against a stored digest.

    Never raises: a mismatch, an empty digest or a corrupted digest all
    return False.
    """
    if not plaintext or not digest:
        return False

    password = plaintext.encode("utf-8")
    # Signup refuses longer passwords, so none can match
    if len(password) > MAX_PASSWORD_BYTES:
        return False

    try:
        return bcrypt.checkpw(password, digest.encode("utf-8"))
    except (ValueError, TypeError):
        logger.warning("Stored password digest could not be parsed")
        return False
