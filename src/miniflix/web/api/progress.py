"""
Watch progress API.

Players report their current position periodically; the latest report for a
(user, video) pair overwrites the previous one.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from pydantic import AliasChoices, BaseModel, Field
from sqlalchemy.orm import sessionmaker

from miniflix.auth.identity import require_identity
from miniflix.domain.types import Identity
from miniflix.infra.logging import get_logger
from miniflix.infra.uow import session
from miniflix.usecases.progress_update import record_progress
from miniflix.web.dependencies import get_session_factory

logger = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["progress"])

MAX_POSITION_SECONDS = 2**31 - 1


class WatchReport(BaseModel):
    # "file"/"time" are the field names older players send
    item_id: str | None = Field(
        default=None, validation_alias=AliasChoices("itemId", "item_id", "file")
    )
    position_seconds: float | None = Field(
        default=None,
        ge=0,
        le=MAX_POSITION_SECONDS,
        allow_inf_nan=False,
        validation_alias=AliasChoices("positionSeconds", "position_seconds", "time"),
    )


@router.post("/watch")
def report_progress(
    body: WatchReport,
    identity: Identity = Depends(require_identity),
    factory: sessionmaker = Depends(get_session_factory),
) -> dict[str, Any]:
    # Players report fractional currentTime; resume positions are whole seconds.
    position = int(body.position_seconds or 0)
    with session(factory) as db:
        record_progress(db, identity, item_id=body.item_id or "", position_seconds=position)
    logger.debug("progress_recorded", user_id=identity.user_id, item_id=body.item_id, position=position)
    return {"ok": True}
