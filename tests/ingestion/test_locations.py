from __future__ import annotations

import math

import pytest

from clipkit.ingestion.locations import parse_location_string


@pytest.mark.parametrize(
    ("raw", "start", "end"),
    [
        ("123", 123, None),
        ("123-456", 123, 456),
        ("123–456", 123, 456),
        ("123—456", 123, 456),
        ("", 0, None),
        ("abc", 0, None),
        ("123-", 123, None),
    ],
)
def test_parse_location_string(raw: str, start: int, end: int | None) -> None:
    location = parse_location_string(raw)

    assert location.start == start
    assert location.end == end
    assert location.raw == raw


def test_malformed_range_end_is_nan() -> None:
    location = parse_location_string("123-abc")

    assert location.start == 123
    assert isinstance(location.end, float) and math.isnan(location.end)
    assert location.is_range
    assert location.has_malformed_end
    assert location.effective_end == 123


def test_none_input_is_tolerated() -> None:
    location = parse_location_string(None)

    assert (location.start, location.end) == (0, None)
    assert not location.is_range


def test_oversized_digit_runs_are_not_converted() -> None:
    huge = "9" * 5000

    assert parse_location_string(huge).start == 0

    location = parse_location_string(f"12-{huge}")
    assert location.start == 12
    assert location.has_malformed_end
