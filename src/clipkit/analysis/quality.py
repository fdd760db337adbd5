"""Heuristic flags for highlights that are probably accidental."""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence

from clipkit.analysis.thresholds import DEFAULT_THRESHOLDS, AnalysisThresholds
from clipkit.ingestion.models import Clipping, ClippingType


def suspicious_reason(text: str, thresholds: AnalysisThresholds = DEFAULT_THRESHOLDS) -> str | None:
    """Return ``too_short``, ``fragment`` or ``incomplete``, or ``None`` for normal text."""

    stripped = text.strip()
    if len(stripped) < thresholds.garbage_length:
        return "too_short"
    if len(stripped) >= thresholds.short_length:
        return None

    first = stripped[0]
    if first.isalpha() and first.islower():
        return "fragment"
    if not thresholds.valid_endings.search(stripped):
        return "incomplete"
    return None


def flag_suspicious_highlights(
    clippings: Sequence[Clipping],
    thresholds: AnalysisThresholds = DEFAULT_THRESHOLDS,
) -> tuple[list[Clipping], int]:
    result: list[Clipping] = []
    flagged = 0

    for clipping in clippings:
        reason = None
        if clipping.type is ClippingType.HIGHLIGHT and not clipping.is_suspicious:
            reason = suspicious_reason(clipping.content, thresholds)

        if reason is None:
            result.append(clipping)
            continue

        flagged += 1
        result.append(replace(clipping, is_suspicious=True, suspicious_reason=reason))

    return result, flagged
