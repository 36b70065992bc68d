"""
Catalog API: the list of playable videos with the caller's resume positions.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import sessionmaker

from miniflix.auth.identity import require_identity
from miniflix.catalog.resolver import CatalogSource
from miniflix.domain.types import Identity
from miniflix.infra.uow import session
from miniflix.usecases.catalog_list import list_catalog
from miniflix.web.dependencies import get_catalog, get_session_factory

router = APIRouter(prefix="/api", tags=["catalog"])


@router.get("/videos")
def list_videos(
    identity: Identity = Depends(require_identity),
    factory: sessionmaker = Depends(get_session_factory),
    catalog: CatalogSource = Depends(get_catalog),
) -> list[dict[str, Any]]:
    """Return every catalog item annotated with ``resumeSeconds``."""
    with session(factory) as db:
        return list_catalog(db, identity, catalog)
