"""
Watch progress repository.

Thin wrapper around SQLAlchemy for ``WatchProgress`` rows, following the Unit
of Work pattern: the repository executes statements on the session it is
given and the caller's ``session()`` block commits.
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any, TypeVar

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from ..domain.entities import WatchProgress
from ..domain.types import Identity
from .exceptions import StorageUnavailable
from .uow import STORAGE_ERRORS

F = TypeVar("F", bound=Callable[..., Any])

_UPSERT_DIALECTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def _storage_errors(func: F) -> F:
    """Re-raise driver connectivity errors as ``StorageUnavailable``."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except STORAGE_ERRORS as exc:
            raise StorageUnavailable(str(getattr(exc, "orig", exc))) from exc

    return wrapper  # type: ignore[return-value]


class WatchProgressRepository:
    """
    Repository for per-user resume positions.

    One row per ``(user_id, item_id)`` pair. ``upsert`` is a single
    ``INSERT ... ON CONFLICT DO UPDATE`` statement, so concurrent reports for
    the same pair are serialized by the database and the stored value is
    always one of the reported positions.
    """

    def __init__(self, db: Session):
        """
        Initialize the repository with a database session.

        Args:
            db: SQLAlchemy session instance
        """
        self.db = db

    @_storage_errors
    def get(self, identity: Identity, item_id: str) -> int:
        """Return the stored position in seconds, or 0 if none was reported."""
        stmt = select(WatchProgress.position_seconds).where(
            WatchProgress.user_id == identity.user_id,
            WatchProgress.item_id == item_id,
        )
        position = self.db.execute(stmt).scalar_one_or_none()
        return position or 0

    @_storage_errors
    def list_for_identity(self, identity: Identity) -> dict[str, int]:
        """Return ``{item_id: position_seconds}`` for every item the user has progress on."""
        stmt = select(WatchProgress.item_id, WatchProgress.position_seconds).where(
            WatchProgress.user_id == identity.user_id
        )
        return {item_id: position for item_id, position in self.db.execute(stmt)}

    @_storage_errors
    def upsert(self, identity: Identity, item_id: str, position_seconds: int) -> None:
        """
        Create or overwrite the position for ``(identity, item_id)``.

        Raises:
            ValueError: if ``position_seconds`` is negative
            StorageUnavailable: if the database cannot be reached
        """
        if position_seconds < 0:
            raise ValueError("position_seconds must be >= 0")

        dialect = self.db.get_bind().dialect.name
        insert = _UPSERT_DIALECTS.get(dialect)
        if insert is None:
            raise NotImplementedError(f"watch progress upsert is not supported on {dialect}")

        now = datetime.now(UTC)
        stmt = insert(WatchProgress).values(
            user_id=identity.user_id,
            item_id=item_id,
            position_seconds=position_seconds,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[WatchProgress.user_id, WatchProgress.item_id],
            set_={
                "position_seconds": stmt.excluded.position_seconds,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        self.db.execute(stmt)
