from __future__ import annotations

from sqlalchemy.orm import Session

from ..domain.types import Identity
from ..infra.exceptions import BadRequest
from ..infra.progress_repository import WatchProgressRepository


def record_progress(db: Session, identity: Identity, *, item_id: str, position_seconds: int) -> None:
    """Store the latest playback position for ``item_id``; last report wins.

    A position at or past the end of the video is stored like any other
    value; there is no separate "completed" state.
    """
    if not item_id:
        raise BadRequest("itemId is required")
    if position_seconds < 0:
        raise BadRequest("positionSeconds must be >= 0", error_code="bad_request")

    WatchProgressRepository(db).upsert(identity, item_id, position_seconds)
