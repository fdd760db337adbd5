from __future__ import annotations

from clipkit.analysis.linker import find_highlight_for_note, link_notes_to_highlights
from clipkit.ingestion.locations import parse_location_string
from clipkit.ingestion.models import Clipping, ClippingType


def _clip(n: int, kind: ClippingType, location: str, content: str = "text", title: str = "Dune") -> Clipping:
    return Clipping(
        id=f"clipping-{n}",
        title=title,
        author="Frank Herbert",
        content=content,
        type=kind,
        location=parse_location_string(location),
        block_index=n,
    )


def test_range_cover_wins_over_proximity() -> None:
    wide = _clip(1, ClippingType.HIGHLIGHT, "90-120")
    near = _clip(2, ClippingType.HIGHLIGHT, "104")
    note = _clip(3, ClippingType.NOTE, "110")

    assert find_highlight_for_note(note, [wide, near]) is wide


def test_covering_highlight_with_closest_start_wins() -> None:
    outer = _clip(1, ClippingType.HIGHLIGHT, "50-150")
    inner = _clip(2, ClippingType.HIGHLIGHT, "95-105")
    note = _clip(3, ClippingType.NOTE, "100")

    assert find_highlight_for_note(note, [outer, inner]) is inner


def test_proximity_fallback_is_bounded() -> None:
    highlight = _clip(1, ClippingType.HIGHLIGHT, "200")

    assert find_highlight_for_note(_clip(2, ClippingType.NOTE, "210"), [highlight]) is highlight
    assert find_highlight_for_note(_clip(3, ClippingType.NOTE, "211"), [highlight]) is None


def test_link_notes_sets_both_sides_and_preserves_order() -> None:
    highlight = _clip(1, ClippingType.HIGHLIGHT, "100-105", "Fear is the mind-killer.")
    note = _clip(2, ClippingType.NOTE, "105", "courage")
    stray = _clip(3, ClippingType.NOTE, "900", "unrelated")
    other_book = _clip(4, ClippingType.NOTE, "101", "wrong book", title="Emma")

    result, linked = link_notes_to_highlights([highlight, note, stray, other_book])

    assert linked == 1
    assert [clipping.id for clipping in result] == ["clipping-1", "clipping-2", "clipping-3", "clipping-4"]
    assert result[0].note == "courage"
    assert result[0].linked_note_id == "clipping-2"
    assert result[1].linked_highlight_id == "clipping-1"
    assert result[2].linked_highlight_id is None
    assert result[3].linked_highlight_id is None
    assert highlight.note is None


def test_notes_without_location_are_not_linked() -> None:
    highlight = _clip(1, ClippingType.HIGHLIGHT, "1-5")
    note = _clip(2, ClippingType.NOTE, "")

    _, linked = link_notes_to_highlights([highlight, note])

    assert linked == 0
