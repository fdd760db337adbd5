"""Parsing of device location expressions such as ``"120"`` or ``"120-135"``."""

from __future__ import annotations

import re

from clipkit.ingestion.models import ClippingLocation

# Longer digit runs are treated as unparseable rather than converted.
MAX_NUMBER_DIGITS = 9

_RANGE_SEPARATOR_RE = re.compile(r"[-–—]")
_LEADING_INT_RE = re.compile(rf"^\s*[+-]?(\d{{1,{MAX_NUMBER_DIGITS}}})(?!\d)")


def _leading_int(text: str) -> int | None:
    match = _LEADING_INT_RE.match(text)
    return int(match.group(1)) if match else None


def parse_location_string(raw: str | None) -> ClippingLocation:
    """Parse a location expression without ever raising.

    An unparseable start collapses to ``0``. A range whose end is present
    but not numeric yields ``end=nan`` so callers can tell it apart from a
    single location.
    """

    if not raw:
        return ClippingLocation(raw="", start=0, end=None)

    parts = _RANGE_SEPARATOR_RE.split(raw, maxsplit=1)
    start = _leading_int(parts[0]) or 0

    end: int | float | None = None
    if len(parts) > 1 and parts[1]:
        parsed_end = _leading_int(parts[1])
        end = parsed_end if parsed_end is not None else float("nan")

    return ClippingLocation(raw=raw, start=start, end=end)
