from __future__ import annotations

from datetime import datetime

import pytest

from clipkit.analysis.dedupe import (
    find_near_duplicates,
    flag_fuzzy_duplicates,
    merge_overlapping_highlights,
    remove_exact_duplicates,
)
from clipkit.ingestion.locations import parse_location_string
from clipkit.ingestion.models import Clipping, ClippingType


def _clip(
    n: int,
    content: str,
    location: str,
    *,
    title: str = "Dune",
    author: str | None = "Frank Herbert",
    kind: ClippingType = ClippingType.HIGHLIGHT,
    **fields: object,
) -> Clipping:
    return Clipping(
        id=f"clipping-{n}",
        title=title,
        author=author,
        content=content,
        type=kind,
        location=parse_location_string(location),
        block_index=n,
        **fields,
    )


BASE = "the spice must flow through every channel of the empire tonight"
NEAR = "the spice must flow through every channel of the empire today"


def test_remove_exact_duplicates_keeps_last_and_merges_tags() -> None:
    first = _clip(1, "Same words.", "10-12", tags=("A",))
    other = _clip(2, "Different words.", "20")
    last = _clip(3, "Same words.", "10-12", tags=("B",))

    result, removed = remove_exact_duplicates([first, other, last])

    assert removed == 1
    assert [clipping.id for clipping in result] == ["clipping-2", "clipping-3"]
    assert result[1].tags == ("B", "A")


def test_remove_exact_duplicates_flag_mode_keeps_everything() -> None:
    first = _clip(1, "Same words.", "10-12")
    last = _clip(2, "Same words.", "10-12")

    result, affected = remove_exact_duplicates([first, last], remove=False)

    assert affected == 1
    assert [clipping.id for clipping in result] == ["clipping-1", "clipping-2"]
    assert result[0].suspicious_reason == "exact_duplicate"
    assert result[0].possible_duplicate_of == "clipping-2"
    assert not result[1].is_suspicious


def test_find_near_duplicates_is_per_book_and_non_destructive() -> None:
    clippings = [
        _clip(1, BASE, "10"),
        _clip(2, NEAR, "500"),
        _clip(3, NEAR, "10", title="Other Book"),
        _clip(4, NEAR, "12", kind=ClippingType.NOTE),
    ]

    candidates = find_near_duplicates(clippings, threshold=0.8)

    assert [(c.first_id, c.second_id) for c in candidates] == [("clipping-1", "clipping-2")]
    assert candidates[0].score == pytest.approx(9 / 11)
    assert clippings[1].possible_duplicate_of is None


def test_find_near_duplicates_validates_threshold() -> None:
    with pytest.raises(ValueError, match="threshold"):
        find_near_duplicates([], threshold=2.0)


def test_flag_fuzzy_duplicates_marks_the_later_record() -> None:
    clippings = [_clip(1, NEAR, "40"), _clip(2, BASE, "10"), _clip(3, BASE, "11")]

    result, flagged = flag_fuzzy_duplicates(clippings, 0.8)

    assert flagged == 1
    assert [clipping.id for clipping in result] == ["clipping-1", "clipping-2", "clipping-3"]
    assert result[0].possible_duplicate_of == "clipping-2"
    assert result[0].similarity_score == pytest.approx(9 / 11)
    # identical text is left for exact dedupe
    assert result[2].possible_duplicate_of is None


def test_flag_fuzzy_duplicates_honours_keep_policy_and_window() -> None:
    clippings = [_clip(1, BASE, "10"), _clip(2, NEAR, "20"), _clip(3, NEAR.replace("today", "now"), "200")]

    result, flagged = flag_fuzzy_duplicates(clippings, 0.8, keep=lambda a, b: max(a, b, key=lambda c: c.block_index))

    assert flagged == 1
    assert result[0].possible_duplicate_of == "clipping-2"
    assert result[1].possible_duplicate_of is None
    assert result[2].possible_duplicate_of is None


def test_merge_overlapping_highlights_combines_records() -> None:
    early = _clip(1, "the spice must flow", "100-102", date=datetime(2024, 1, 1), tags=("A",))
    later = _clip(2, "the spice must flow through the empire", "101-106", date=datetime(2024, 2, 1), tags=("B",))
    note = _clip(3, "a note", "101", kind=ClippingType.NOTE)

    result, merged = merge_overlapping_highlights([early, later, note])

    assert merged == 1
    combined, kept_note = result
    assert combined.content == later.content
    assert combined.location.raw == "100-106"
    assert (combined.location.start, combined.location.end) == (100, 106)
    assert combined.date == datetime(2024, 2, 1)
    assert combined.block_index == 1
    assert combined.tags == ("A", "B")
    assert kept_note is note


def test_merge_overlapping_flag_mode_and_distant_records() -> None:
    early = _clip(1, "the spice must flow", "100-102")
    later = _clip(2, "the spice must flow through the empire", "101-106")
    far = _clip(3, "the spice must flow", "300")

    result, affected = merge_overlapping_highlights([early, later, far], merge=False)

    assert affected == 1
    assert [clipping.id for clipping in result] == ["clipping-1", "clipping-2", "clipping-3"]
    assert result[0].suspicious_reason == "overlapping"
    assert result[0].possible_duplicate_of == "clipping-2"
    assert not result[2].is_suspicious
