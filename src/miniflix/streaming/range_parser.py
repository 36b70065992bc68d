"""
HTTP ``Range`` header parsing for media streaming.

Only the single-interval form ``bytes=<start>-[<end>]`` is honoured. Anything
else (suffix ranges, multi-range lists, other units, garbage) is ignored and
the whole resource is served, which is what browsers' media elements expect
when a server does not understand their request.
"""

from __future__ import annotations

import re

from miniflix.domain.types import ByteRange, FullContent, Partial, RangeDecision, Unsatisfiable

_RANGE_RE = re.compile(r"^\s*bytes\s*=\s*(\d+)\s*-\s*(\d*)\s*$", re.IGNORECASE)


def parse_range(range_header: str | None, total_size: int) -> RangeDecision:
    """Classify a request against a resource of ``total_size`` bytes.

    Returns ``FullContent`` for a missing or unparseable header,
    ``Unsatisfiable`` when either bound falls outside the resource, and
    ``Partial`` otherwise. An omitted end means "through the last byte".
    """
    if range_header is None:
        return FullContent()

    match = _RANGE_RE.match(range_header)
    if match is None:
        return FullContent()

    start = int(match.group(1))
    end = int(match.group(2)) if match.group(2) else total_size - 1

    if start >= total_size or end >= total_size:
        return Unsatisfiable(total_size=total_size)
    if end < start:
        # Reversed bounds are a syntactically invalid range; ignore the header.
        return FullContent()

    return Partial(byte_range=ByteRange(start, end), total_size=total_size)
