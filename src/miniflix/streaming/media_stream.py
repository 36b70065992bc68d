"""
Range-aware media byte streaming.

Turns a ``RangeDecision`` for a file into an ASGI response whose body is read
from disk in bounded chunks with ``aiofiles``. Nothing here buffers a whole
file, and the file handle is released as soon as the client goes away.
"""

from __future__ import annotations

import mimetypes
import os
from collections.abc import AsyncIterator
from pathlib import Path

import aiofiles
from starlette.responses import Response, StreamingResponse
from starlette.types import Receive, Scope, Send

from miniflix.domain.types import FullContent, MediaItem, Partial, RangeDecision, Unsatisfiable
from miniflix.infra.exceptions import NotFound
from miniflix.infra.logging import get_logger

logger = get_logger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024

VIDEO_MEDIA_TYPES = {
    ".mp4": "video/mp4",
    ".m4v": "video/x-m4v",
    ".webm": "video/webm",
    ".ogg": "video/ogg",
    ".ogv": "video/ogg",
    ".mov": "video/quicktime",
    ".mkv": "video/x-matroska",
}


def guess_media_type(filename: str) -> str:
    """Content type for a media file, by extension."""
    ext = os.path.splitext(filename)[1].lower()
    if ext in VIDEO_MEDIA_TYPES:
        return VIDEO_MEDIA_TYPES[ext]
    guessed, _ = mimetypes.guess_type(filename)
    return guessed or "application/octet-stream"


def resolve_media_path(media_dir: Path, filename: str) -> Path:
    """
    Resolve ``filename`` to a regular file inside ``media_dir``.

    Symlinks are followed before the containment check, so a link that
    points outside the media directory is rejected just like ``..``
    segments or an absolute path.

    Raises:
        NotFound: if the name is empty, escapes the directory, or does not
            name an existing regular file.
    """
    if not filename or "\x00" in filename:
        raise NotFound(f"invalid media name {filename!r}")

    root = Path(media_dir).resolve()
    candidate = (root / filename).resolve()
    if candidate == root or not candidate.is_relative_to(root):
        logger.warning("media_path_rejected", filename=filename)
        raise NotFound(f"{filename!r} is outside the media directory")
    if not candidate.is_file():
        raise NotFound(f"{filename!r} not found")
    return candidate


def describe_media(path: Path, item_id: str, *, title: str | None = None,
                   thumbnail: str | None = None) -> MediaItem:
    """Build a ``MediaItem`` for ``path`` using its current size on disk."""
    try:
        size = path.stat().st_size
    except FileNotFoundError as exc:
        raise NotFound(f"{item_id!r} not found") from exc
    return MediaItem(
        item_id=item_id,
        title=title or Path(item_id).stem,
        size=size,
        media_type=guess_media_type(item_id),
        thumbnail=thumbnail,
    )


async def iter_file_range(
    path: Path, start: int, length: int, chunk_size: int = DEFAULT_CHUNK_SIZE
) -> AsyncIterator[bytes]:
    """
    Yield ``length`` bytes of ``path`` starting at ``start``, in order.

    At most ``chunk_size`` bytes are held at a time. If the file shrinks
    while it is being streamed an ``OSError`` aborts the response, since the
    promised Content-Length can no longer be honoured.
    """
    remaining = length
    sent = 0
    completed = False
    try:
        async with aiofiles.open(path, "rb") as f:
            await f.seek(start)
            while remaining > 0:
                chunk = await f.read(min(chunk_size, remaining))
                if not chunk:
                    raise OSError(f"{path} ended {remaining} bytes early")
                remaining -= len(chunk)
                sent += len(chunk)
                yield chunk
        completed = True
    finally:
        logger.debug(
            "stream_closed",
            path=str(path),
            start=start,
            bytes_sent=sent,
            completed=completed,
        )


class MediaStreamResponse(StreamingResponse):
    """
    StreamingResponse that always closes its body iterator.

    When the client disconnects mid-stream the server abandons the body
    iterator while it is suspended; closing it here runs the iterator's
    cleanup (closing the file) immediately rather than at garbage collection.
    """

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await super().__call__(scope, receive, send)
        finally:
            aclose = getattr(self.body_iterator, "aclose", None)
            if aclose is not None:
                await aclose()


def build_stream_response(
    item: MediaItem,
    decision: RangeDecision,
    path: Path,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> Response:
    """Translate a range decision for ``item`` into the HTTP response to send."""
    if isinstance(decision, Unsatisfiable):
        return Response(status_code=416, headers={"Content-Range": decision.content_range})

    if isinstance(decision, Partial):
        byte_range = decision.byte_range
        return MediaStreamResponse(
            iter_file_range(path, byte_range.start, byte_range.length, chunk_size),
            status_code=206,
            media_type=item.media_type,
            headers={
                "Content-Range": decision.content_range,
                "Accept-Ranges": "bytes",
                "Content-Length": str(byte_range.length),
                "Cache-Control": "no-cache",
            },
        )

    if not isinstance(decision, FullContent):
        raise TypeError(f"unknown range decision {decision!r}")

    return MediaStreamResponse(
        iter_file_range(path, 0, item.size, chunk_size),
        status_code=200,
        media_type=item.media_type,
        headers={
            "Content-Length": str(item.size),
            "Accept-Ranges": "bytes",
        },
    )
