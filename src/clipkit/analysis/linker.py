"""Attach notes to the highlights they annotate."""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence

from clipkit.analysis.stats import group_by_book
from clipkit.analysis.thresholds import DEFAULT_THRESHOLDS, AnalysisThresholds
from clipkit.ingestion.models import Clipping, ClippingType


def _covers(highlight: Clipping, position: int) -> bool:
    return highlight.location.start <= position <= highlight.location.effective_end


def find_highlight_for_note(
    note: Clipping,
    highlights: Sequence[Clipping],
    max_distance: int = DEFAULT_THRESHOLDS.linker_max_distance,
) -> Clipping | None:
    """Pick the highlight a note belongs to.

    A highlight whose range covers the note's location wins, closest start
    first. Otherwise the nearest highlight start within *max_distance*.
    """

    position = note.location.start
    covering = [highlight for highlight in highlights if _covers(highlight, position)]
    if covering:
        return min(covering, key=lambda highlight: abs(highlight.location.start - position))

    best: Clipping | None = None
    best_distance = max_distance + 1
    for highlight in highlights:
        distance = abs(highlight.location.start - position)
        if distance < best_distance:
            best, best_distance = highlight, distance
    return best


def link_notes_to_highlights(
    clippings: Sequence[Clipping],
    thresholds: AnalysisThresholds = DEFAULT_THRESHOLDS,
) -> tuple[list[Clipping], int]:
    """Copy note text onto matching highlights and cross-reference both ids.

    Notes without a location are never linked. A highlight keeps only the
    last note linked to it. Input order is preserved.
    """

    highlights_by_book = group_by_book(
        clipping for clipping in clippings if clipping.type is ClippingType.HIGHLIGHT
    )

    updates: dict[str, dict[str, object]] = {}
    linked = 0

    for note in clippings:
        if note.type is not ClippingType.NOTE or not note.location.start:
            continue

        candidates = highlights_by_book.get(note.book_key)
        if not candidates:
            continue

        match = find_highlight_for_note(note, candidates, thresholds.linker_max_distance)
        if match is None:
            continue

        updates.setdefault(match.id, {}).update(note=note.content, linked_note_id=note.id)
        updates.setdefault(note.id, {}).update(linked_highlight_id=match.id)
        linked += 1

    result = [replace(clipping, **updates[clipping.id]) if clipping.id in updates else clipping for clipping in clippings]
    return result, linked
