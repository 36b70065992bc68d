"""
CatalogResolver: lists the playable media items.

The catalog comes from a JSON manifest when one exists::

    {"files": [{"file": "intro.mp4", "title": "Intro", "thumbnail": "intro.jpg"}]}

Without a manifest, every video file in the media directory is listed and
titled by its file stem.

Usage:
    from miniflix.catalog.resolver import CatalogResolver
    resolver = CatalogResolver(video_dir, catalog_file)
    items = resolver.list()
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Protocol

from miniflix.domain.types import MediaItem
from miniflix.infra.exceptions import NotFound
from miniflix.infra.logging import get_logger
from miniflix.streaming.media_stream import describe_media, resolve_media_path

logger = get_logger(__name__)

VIDEO_EXTENSIONS = frozenset({".mp4", ".m4v", ".webm", ".ogg"})


class CatalogSource(Protocol):
    def list(self) -> list[MediaItem]: ...


class CatalogResolver:
    """Read-only catalog backed by a manifest file or a directory listing.

    The manifest is re-read on every ``list()`` call, so edits show up
    without a restart and there is no cache to invalidate.
    """

    def __init__(self, video_dir: str | Path, catalog_file: str | Path | None = None) -> None:
        self.video_dir = Path(video_dir)
        self.catalog_file = Path(catalog_file) if catalog_file else None

    def list(self) -> list[MediaItem]:
        if self.catalog_file is not None and self.catalog_file.exists():
            entries = self._read_manifest(self.catalog_file)
        else:
            entries = self._scan_directory()

        items = []
        for entry in entries:
            item = self._to_item(entry)
            if item is not None:
                items.append(item)
        return items

    def _read_manifest(self, manifest: Path) -> list[dict[str, Any]]:
        try:
            with open(manifest, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error("catalog_manifest_unreadable", path=str(manifest), error=str(e))
            return []

        files = data.get("files") if isinstance(data, dict) else None
        if not isinstance(files, list):
            logger.error("catalog_manifest_invalid", path=str(manifest))
            return []
        return [entry for entry in files if isinstance(entry, dict)]

    def _scan_directory(self) -> list[dict[str, Any]]:
        if not self.video_dir.is_dir():
            return []
        names = sorted(
            p.name
            for p in self.video_dir.iterdir()
            if p.is_file() and p.suffix.lower() in VIDEO_EXTENSIONS
        )
        return [{"file": name} for name in names]

    def _to_item(self, entry: dict[str, Any]) -> MediaItem | None:
        filename = entry.get("file")
        if not isinstance(filename, str) or not filename:
            logger.warning("catalog_entry_skipped", reason="missing_file", entry=entry)
            return None
        try:
            path = resolve_media_path(self.video_dir, filename)
            return describe_media(
                path,
                filename,
                title=entry.get("title") or None,
                thumbnail=entry.get("thumbnail") or None,
            )
        except NotFound:
            logger.warning("catalog_entry_skipped", reason="file_not_found", file=filename)
            return None
