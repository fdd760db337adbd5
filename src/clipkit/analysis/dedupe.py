"""Exact and near-duplicate handling for parsed clippings."""

from __future__ import annotations

from dataclasses import dataclass, replace
import hashlib
from typing import Callable, Sequence

from clipkit.analysis.similarity import jaccard_similarity
from clipkit.analysis.stats import group_by_book
from clipkit.analysis.thresholds import DEFAULT_THRESHOLDS, AnalysisThresholds
from clipkit.ingestion.models import Clipping, ClippingLocation, ClippingType

KeepPolicy = Callable[[Clipping, Clipping], Clipping]


@dataclass(frozen=True, slots=True)
class DuplicateCandidate:
    """A pair of same-book highlights whose similarity reached the threshold."""

    first_id: str
    second_id: str
    score: float


def duplicate_hash(clipping: Clipping) -> str:
    payload = f"{clipping.title}|{clipping.location.raw}|{clipping.content}"
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def keep_earliest(a: Clipping, b: Clipping) -> Clipping:
    """Keep the clipping with the lower location, then the lower block index."""

    return min(a, b, key=lambda clipping: (clipping.location.start, clipping.block_index))


def _by_block_index(clippings: list[Clipping]) -> list[Clipping]:
    return sorted(clippings, key=lambda clipping: clipping.block_index)


def _merge_tags(target: Clipping, source: Clipping) -> Clipping:
    if not source.tags:
        return target

    existing = list(target.tags or ())
    new_tags = [tag for tag in source.tags if tag not in existing]
    if not new_tags:
        return target
    return replace(target, tags=tuple(existing + new_tags))


def remove_exact_duplicates(
    clippings: Sequence[Clipping],
    remove: bool = True,
) -> tuple[list[Clipping], int]:
    """Collapse records sharing title, location and content.

    The later record wins and inherits the earlier record's tags. With
    ``remove=False`` the earlier record is kept but flagged
    ``exact_duplicate``.
    """

    seen: dict[str, Clipping] = {}
    flagged: list[Clipping] = []

    for clipping in clippings:
        key = duplicate_hash(clipping)
        existing = seen.get(key)
        if existing is None:
            seen[key] = clipping
            continue

        if remove:
            seen[key] = _merge_tags(clipping, existing)
        else:
            flagged.append(
                replace(
                    existing,
                    is_suspicious=True,
                    suspicious_reason="exact_duplicate",
                    possible_duplicate_of=clipping.id,
                )
            )
            seen[key] = clipping

    affected = len(clippings) - len(seen)
    return _by_block_index([*seen.values(), *flagged]), affected


def find_near_duplicates(
    clippings: Sequence[Clipping],
    threshold: float = DEFAULT_THRESHOLDS.similarity_threshold,
) -> list[DuplicateCandidate]:
    """Report same-book highlight pairs with similarity >= *threshold*.

    Nothing is modified or dropped; pairs are ordered by the ingestion
    position of the first and then the second member.
    """

    if not 0.0 <= threshold <= 1.0:
        raise ValueError("threshold must be between 0.0 and 1.0")

    position = {clipping.id: index for index, clipping in enumerate(clippings)}
    highlights = [clipping for clipping in clippings if clipping.type is ClippingType.HIGHLIGHT]

    candidates: list[DuplicateCandidate] = []
    for group in group_by_book(highlights).values():
        for i, first in enumerate(group):
            for second in group[i + 1 :]:
                score = jaccard_similarity(first.content, second.content)
                if score >= threshold:
                    candidates.append(DuplicateCandidate(first.id, second.id, score))

    candidates.sort(key=lambda candidate: (position[candidate.first_id], position[candidate.second_id]))
    return candidates


def flag_fuzzy_duplicates(
    clippings: Sequence[Clipping],
    threshold: float = DEFAULT_THRESHOLDS.similarity_threshold,
    keep: KeepPolicy = keep_earliest,
    thresholds: AnalysisThresholds = DEFAULT_THRESHOLDS,
) -> tuple[list[Clipping], int]:
    """Mark near-identical highlights in the same book.

    Highlights are scanned in location order and only compared while they
    sit within the fuzzy location window. The record *keep* rejects gets
    ``similarity_score`` and ``possible_duplicate_of``. Identical texts
    are left to exact dedupe.
    """

    highlights = [clipping for clipping in clippings if clipping.type is ClippingType.HIGHLIGHT]
    flags: dict[str, tuple[float, str]] = {}

    for group in group_by_book(highlights).values():
        ordered = sorted(group, key=lambda clipping: clipping.location.start)
        for i, current in enumerate(ordered):
            if current.id in flags:
                continue
            for other in ordered[i + 1 :]:
                if other.id in flags:
                    continue
                if other.location.start - current.location.effective_end > thresholds.fuzzy_location_window:
                    break

                score = jaccard_similarity(current.content, other.content)
                if not threshold <= score < 1.0:
                    continue

                kept = keep(current, other)
                dropped = other if kept is current else current
                flags[dropped.id] = (score, kept.id)
                if dropped is current:
                    break

    result = [
        replace(clipping, similarity_score=flags[clipping.id][0], possible_duplicate_of=flags[clipping.id][1])
        if clipping.id in flags
        else clipping
        for clipping in clippings
    ]
    return result, len(flags)


def _can_merge(current: Clipping, candidate: Clipping, thresholds: AnalysisThresholds) -> bool:
    if candidate.location.start > current.location.effective_end + thresholds.merge_location_tolerance:
        return False

    text_a = current.content.lower()
    text_b = candidate.content.lower()
    if text_a in text_b or text_b in text_a:
        return True

    words_a = set(text_a.split())
    words_b = set(text_b.split())
    smallest = min(len(words_a), len(words_b))
    return smallest > 0 and len(words_a & words_b) >= smallest * thresholds.merge_word_overlap


def _merge_pair(a: Clipping, b: Clipping) -> Clipping:
    base, other = (a, b) if len(a.content) >= len(b.content) else (b, a)
    start = min(a.location.start, b.location.start)
    end = max(a.location.effective_end, b.location.effective_end)

    if a.date and b.date:
        newer = a if a.date >= b.date else b
    else:
        newer = a if a.date else b

    tags: tuple[str, ...] | None = None
    if a.tags or b.tags:
        tags = tuple(dict.fromkeys((*(a.tags or ()), *(b.tags or ()))))

    return replace(
        base,
        location=ClippingLocation(raw=f"{start}-{end}", start=start, end=end),
        date=newer.date,
        date_raw=newer.date_raw,
        block_index=min(a.block_index, b.block_index),
        tags=tags,
        note=base.note or other.note,
    )


def merge_overlapping_highlights(
    clippings: Sequence[Clipping],
    merge: bool = True,
    thresholds: AnalysisThresholds = DEFAULT_THRESHOLDS,
) -> tuple[list[Clipping], int]:
    """Fold re-highlighted passages of the same book into one record.

    With ``merge=False`` the shorter record of each overlapping pair is
    flagged ``overlapping`` instead.
    """

    highlights = [clipping for clipping in clippings if clipping.type is ClippingType.HIGHLIGHT]
    others = [clipping for clipping in clippings if clipping.type is not ClippingType.HIGHLIGHT]

    result: list[Clipping] = []
    affected = 0

    for group in group_by_book(highlights).values():
        current: Clipping | None = None
        for clipping in sorted(group, key=lambda item: item.location.start):
            if current is None:
                current = clipping
                continue

            if not _can_merge(current, clipping, thresholds):
                result.append(current)
                current = clipping
                continue

            affected += 1
            if merge:
                current = _merge_pair(current, clipping)
                continue

            keeper, redundant = (
                (current, clipping) if len(current.content) >= len(clipping.content) else (clipping, current)
            )
            result.append(
                replace(
                    redundant,
                    is_suspicious=True,
                    suspicious_reason="overlapping",
                    possible_duplicate_of=keeper.id,
                )
            )
            current = keeper

        if current is not None:
            result.append(current)

    return _by_block_index(result + others), affected
