"""
Password hashing with bcrypt.
"""

from __future__ import annotations

import bcrypt

from miniflix.infra.exceptions import BadRequest

# bcrypt only looks at the first 72 bytes of input
MAX_PASSWORD_BYTES = 72


def _encode(password: str) -> bytes:
    raw = password.encode("utf-8")
    if len(raw) > MAX_PASSWORD_BYTES:
        raise BadRequest("password too long", error_code="password_too_long")
    return raw


def hash_password(password: str, rounds: int = 10) -> str:
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=rounds)).decode("ascii")


def verify_password(password: str, password_hash: str) -> bool:
    """Check ``password`` against a stored hash; malformed hashes never verify."""
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode("ascii"))
    except (BadRequest, ValueError):
        return False
