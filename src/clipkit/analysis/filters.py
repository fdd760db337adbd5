"""Caller-driven filtering of processed clippings."""

from __future__ import annotations

from typing import Iterable, Sequence

from clipkit.ingestion.models import Clipping, ClippingType


def _matches_any(title: str, needles: Iterable[str]) -> bool:
    folded = title.casefold()
    return any(needle.casefold() in folded for needle in needles)


def filter_clippings(
    clippings: Sequence[Clipping],
    *,
    exclude_types: Iterable[ClippingType | str] = (),
    min_content_length: int = 0,
    only_books: Sequence[str] = (),
    exclude_books: Sequence[str] = (),
) -> list[Clipping]:
    """Drop clippings by type, content length and title substring.

    Bookmarks are exempt from the length filter since they carry no text.
    """

    if min_content_length < 0:
        raise ValueError("min_content_length cannot be negative")

    excluded = {ClippingType(value) for value in exclude_types}
    result: list[Clipping] = []

    for clipping in clippings:
        if clipping.type in excluded:
            continue
        if (
            min_content_length
            and clipping.type is not ClippingType.BOOKMARK
            and len(clipping.content) < min_content_length
        ):
            continue
        if exclude_books and _matches_any(clipping.title, exclude_books):
            continue
        if only_books and not _matches_any(clipping.title, only_books):
            continue
        result.append(clipping)

    return result


def filter_to_highlights_only(clippings: Sequence[Clipping]) -> tuple[list[Clipping], int]:
    highlights = [clipping for clipping in clippings if clipping.type is ClippingType.HIGHLIGHT]
    return highlights, len(clippings) - len(highlights)
