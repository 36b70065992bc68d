"""
Unit tests for Range header classification.
"""

from __future__ import annotations

import pytest

from miniflix.domain.types import ByteRange, FullContent, Partial, Unsatisfiable
from miniflix.streaming.range_parser import parse_range


class TestSatisfiableRanges:
    @pytest.mark.parametrize(
        ("start", "end", "total"),
        [(0, 0, 1), (0, 999, 1000), (500, 599, 1000), (999, 999, 1000), (10, 10, 11)],
    )
    def test_closed_range_is_partial(self, start, end, total):
        decision = parse_range(f"bytes={start}-{end}", total)

        assert decision == Partial(byte_range=ByteRange(start, end), total_size=total)
        assert decision.byte_range.length == end - start + 1

    @pytest.mark.parametrize("total", [1, 2, 1000, 10**12])
    def test_open_ended_range_runs_to_last_byte(self, total):
        decision = parse_range("bytes=0-", total)

        assert isinstance(decision, Partial)
        assert decision.byte_range == ByteRange(0, total - 1)
        assert decision.byte_range.length == total

    def test_open_ended_range_from_offset(self):
        decision = parse_range("bytes=250-", 1000)

        assert decision.byte_range == ByteRange(250, 999)
        assert decision.content_range == "bytes 250-999/1000"

    def test_whitespace_and_unit_case_are_tolerated(self):
        assert parse_range("  Bytes = 1 - 2 ", 10) == Partial(ByteRange(1, 2), 10)


class TestUnsatisfiableRanges:
    @pytest.mark.parametrize("start", [1000, 1001, 5000])
    def test_start_at_or_past_size(self, start):
        decision = parse_range(f"bytes={start}-", 1000)

        assert decision == Unsatisfiable(total_size=1000)
        assert decision.content_range == "bytes */1000"

    def test_end_past_size(self):
        assert parse_range("bytes=900-1500", 1000) == Unsatisfiable(total_size=1000)

    def test_any_range_on_empty_file(self):
        assert parse_range("bytes=0-", 0) == Unsatisfiable(total_size=0)


class TestFallbackToFullContent:
    def test_missing_header(self):
        assert parse_range(None, 1000) == FullContent()

    @pytest.mark.parametrize(
        "header",
        [
            "",
            "bytes",
            "bytes=",
            "bytes=abc-def",
            "bytes=-500",  # suffix ranges are not supported
            "bytes=0-10,20-30",  # neither are multi-range requests
            "items=0-10",
            "bytes=1.5-2",
        ],
    )
    def test_malformed_header(self, header):
        assert parse_range(header, 1000) == FullContent()

    def test_reversed_bounds(self):
        assert parse_range("bytes=600-500", 1000) == FullContent()


def test_byte_range_rejects_inverted_interval():
    with pytest.raises(ValueError):
        ByteRange(5, 4)
