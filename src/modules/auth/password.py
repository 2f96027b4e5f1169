"""Password hashing with bcrypt.

Hashes use the self-describing bcrypt format (``$2b$<cost>$<salt><hash>``),
so the salt and cost travel with the stored value and need no separate
column. Passwords are SHA-256 pre-hashed, so every character counts
whatever the length of its UTF-8 encoding.
"""

import base64
import hashlib

import bcrypt

# Work factor; each increment doubles the cost of a hash
BCRYPT_ROUNDS = 12


def _encode(password: str) -> bytes:
    """Pre-hash a password to 44 base64 bytes, under bcrypt's 72-byte input limit."""
    digest = hashlib.sha256(password.encode("utf-8")).digest()
    return base64.b64encode(digest)


def hash_password(password: str, *, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a password with a fresh random salt.

    Args:
        password: Plain text password.
        rounds: bcrypt cost factor.

    Returns:
        bcrypt hash string, salt included.
    """
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(_encode(password), salt).decode("utf-8")


def verify_password(password: str, hashed: str | None) -> bool:
    """Check a password against a stored hash in constant time.

    Args:
        password: Plain text password to check.
        hashed: Stored bcrypt hash.

    Returns:
        True if the password matches, False otherwise or when the stored
        hash is empty or malformed.
    """
    if not hashed:
        return False

    try:
        return bcrypt.checkpw(_encode(password), hashed.encode("utf-8"))
    except ValueError:
        return False
