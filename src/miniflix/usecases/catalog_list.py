from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from ..catalog.resolver import CatalogSource
from ..domain.types import Identity, MediaItem
from ..infra.progress_repository import WatchProgressRepository


def _item_to_dict(item: MediaItem, resume_seconds: int) -> dict[str, Any]:
    return {
        "itemId": item.item_id,
        "title": item.title,
        "thumbnail": item.thumbnail,
        "size": item.size,
        "resumeSeconds": resume_seconds,
    }


def list_catalog(db: Session, identity: Identity, catalog: CatalogSource) -> list[dict[str, Any]]:
    """List every catalog item annotated with the caller's resume position.

    Progress is fetched with a single query for the identity rather than one
    lookup per item.
    """
    resume = WatchProgressRepository(db).list_for_identity(identity)
    return [_item_to_dict(item, resume.get(item.item_id, 0)) for item in catalog.list()]
