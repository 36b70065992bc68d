"""
Video streaming endpoint with HTTP Range support.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response
from starlette.concurrency import run_in_threadpool

from miniflix.auth.identity import require_identity
from miniflix.domain.types import Identity
from miniflix.infra.logging import get_logger
from miniflix.infra.settings import Settings
from miniflix.streaming.media_stream import (
    build_stream_response,
    describe_media,
    resolve_media_path,
)
from miniflix.streaming.range_parser import parse_range
from miniflix.web.dependencies import get_settings

logger = get_logger(__name__)

router = APIRouter(tags=["stream"])


@router.get("/video/{filename:path}")
async def stream_video(
    request: Request,
    filename: str,
    identity: Identity = Depends(require_identity),
    cfg: Settings = Depends(get_settings),
) -> Response:
    """
    Stream a video file, honouring a single-interval ``Range`` header.

    - no or unparseable Range: 200 with the whole file
    - satisfiable Range: 206 with exactly the requested bytes
    - Range past the end of the file: 416 with ``Content-Range: bytes */<size>``
    """
    path = await run_in_threadpool(resolve_media_path, cfg.video_dir, filename)
    item = await run_in_threadpool(describe_media, path, filename)

    range_header = request.headers.get("range")
    decision = parse_range(range_header, item.size)
    logger.info(
        "stream_requested",
        user_id=identity.user_id,
        item_id=item.item_id,
        range=range_header,
        decision=type(decision).__name__,
    )
    return build_stream_response(item, decision, path, cfg.stream_chunk_size)
