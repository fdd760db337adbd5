"""Grouping and aggregate counts over clipping collections."""

from __future__ import annotations

from typing import Iterable

from clipkit.ingestion.models import Clipping, ClippingStats, ClippingType


def group_by_book(clippings: Iterable[Clipping]) -> dict[tuple[str, str], list[Clipping]]:
    """Group by ``book_key``; groups and their members keep first-seen order."""

    groups: dict[tuple[str, str], list[Clipping]] = {}
    for clipping in clippings:
        groups.setdefault(clipping.book_key, []).append(clipping)
    return groups


def calculate_stats(clippings: Iterable[Clipping]) -> ClippingStats:
    items = list(clippings)
    by_type = {clipping_type.value: 0 for clipping_type in ClippingType}
    authors: set[str] = set()
    total_words = 0

    for clipping in items:
        by_type[clipping.type.value] += 1
        total_words += clipping.word_count
        if clipping.author:
            authors.add(clipping.author.casefold())

    groups = group_by_book(items)
    books = sorted(
        ((group[0].title, len(group)) for group in groups.values()),
        key=lambda item: item[1],
        reverse=True,
    )

    return ClippingStats(
        total=len(items),
        by_type=by_type,
        total_books=len(groups),
        total_authors=len(authors),
        total_words=total_words,
        books=tuple(books),
    )
