from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from ..auth.passwords import hash_password
from ..infra.exceptions import BadRequest
from ..infra.user_repository import UserRepository


def register_user(db: Session, *, username: str, password: str, rounds: int = 10) -> dict[str, Any]:
    """Create an account with a bcrypt-hashed password.

    Raises BadRequest for blank credentials and UserExists for a taken username.
    """
    username = (username or "").strip()
    if not username or not password:
        raise BadRequest("username and password are required")

    user = UserRepository(db).add(username, hash_password(password, rounds=rounds))
    return {"id": user.id, "username": user.username}
