"""
Value types shared by the streaming, catalog and progress layers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class Identity:
    """A verified, request-scoped user identity."""

    user_id: int
    username: str


@dataclass(frozen=True)
class MediaItem:
    """A playable file listed by the catalog.

    ``item_id`` is the filename relative to the media directory and is the
    key watch progress is stored under. ``size`` is read from disk when the
    catalog is resolved.
    """

    item_id: str
    title: str
    size: int
    media_type: str = "video/mp4"
    thumbnail: str | None = None


@dataclass(frozen=True)
class ByteRange:
    """Inclusive byte interval ``[start, end]`` into a file."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"invalid byte range {self.start}-{self.end}")

    @property
    def length(self) -> int:
        return self.end - self.start + 1


@dataclass(frozen=True)
class FullContent:
    """Serve the whole resource with status 200."""


@dataclass(frozen=True)
class Partial:
    """Serve ``byte_range`` with status 206."""

    byte_range: ByteRange
    total_size: int

    @property
    def content_range(self) -> str:
        return f"bytes {self.byte_range.start}-{self.byte_range.end}/{self.total_size}"


@dataclass(frozen=True)
class Unsatisfiable:
    """The requested range lies outside the resource; respond 416."""

    total_size: int

    @property
    def content_range(self) -> str:
        return f"bytes */{self.total_size}"


RangeDecision = Union[FullContent, Partial, Unsatisfiable]
