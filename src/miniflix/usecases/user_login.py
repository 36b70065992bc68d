from __future__ import annotations

from sqlalchemy.orm import Session

from ..auth.passwords import verify_password
from ..domain.types import Identity
from ..infra.exceptions import BadRequest, InvalidCredentials
from ..infra.user_repository import UserRepository


def authenticate_user(db: Session, *, username: str, password: str) -> Identity:
    """Verify a username/password pair and return the matching identity.

    Unknown users and wrong passwords are indistinguishable to the caller.
    """
    if not username or not password:
        raise BadRequest("username and password are required")

    user = UserRepository(db).get_by_username(username.strip())
    if user is None or not verify_password(password, user.password_hash):
        raise InvalidCredentials()
    return Identity(user_id=user.id, username=user.username)
