"""
Byte-range parsing and file streaming for the video endpoint.
"""

from .media_stream import build_stream_response, resolve_media_path
from .range_parser import parse_range

__all__ = ["build_stream_response", "parse_range", "resolve_media_path"]
