from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..domain.entities import User
from .exceptions import UserExists


class UserRepository:
    """Repository for account rows."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_username(self, username: str) -> User | None:
        stmt = select(User).where(User.username == username)
        return self.db.execute(stmt).scalar_one_or_none()

    def add(self, username: str, password_hash: str) -> User:
        """Insert a user and flush so the id is assigned.

        The unique constraint on ``username`` is the source of truth for
        duplicates; a violation surfaces as ``UserExists``.
        """
        user = User(username=username, password_hash=password_hash)
        self.db.add(user)
        try:
            self.db.flush()
        except IntegrityError as exc:
            self.db.rollback()
            raise UserExists(f"user {username!r} already exists") from exc
        return user
