"""Ordered post-parse passes over freshly parsed clippings."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Sequence

from clipkit.analysis.dedupe import (
    KeepPolicy,
    flag_fuzzy_duplicates,
    keep_earliest,
    merge_overlapping_highlights,
    remove_exact_duplicates,
)
from clipkit.analysis.filters import filter_clippings, filter_to_highlights_only
from clipkit.analysis.linker import link_notes_to_highlights
from clipkit.analysis.quality import flag_suspicious_highlights
from clipkit.analysis.tags import TagCase, extract_tags_from_linked_notes
from clipkit.analysis.thresholds import DEFAULT_THRESHOLDS, AnalysisThresholds
from clipkit.ingestion.models import Clipping, ClippingType

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProcessOptions:
    remove_duplicates: bool = False
    merge_overlapping: bool = False
    link_notes: bool = True
    extract_tags: bool = True
    tag_case: TagCase = TagCase.UPPERCASE
    flag_duplicates: bool = True
    similarity_threshold: float = DEFAULT_THRESHOLDS.similarity_threshold
    keep: KeepPolicy = keep_earliest
    flag_suspicious: bool = True
    exclude_types: tuple[ClippingType, ...] = ()
    min_content_length: int = 0
    only_books: tuple[str, ...] = ()
    exclude_books: tuple[str, ...] = ()
    highlights_only: bool = False
    thresholds: AnalysisThresholds = DEFAULT_THRESHOLDS


@dataclass(frozen=True, slots=True)
class ProcessingReport:
    clippings: tuple[Clipping, ...]
    duplicates_removed: int = 0
    merged: int = 0
    linked_notes: int = 0
    tags_extracted: int = 0
    fuzzy_flagged: int = 0
    suspicious_flagged: int = 0
    filtered_out: int = 0


def process_clippings(
    clippings: Sequence[Clipping],
    options: ProcessOptions | None = None,
) -> ProcessingReport:
    """Run dedupe, merge, linking, tagging, flagging and filters in that order.

    The output is sorted by ``block_index`` regardless of which passes ran.
    """

    opts = options or ProcessOptions()
    items = list(clippings)
    counts = {
        "duplicates_removed": 0,
        "merged": 0,
        "linked_notes": 0,
        "tags_extracted": 0,
        "fuzzy_flagged": 0,
        "suspicious_flagged": 0,
        "filtered_out": 0,
    }

    if opts.remove_duplicates:
        items, counts["duplicates_removed"] = remove_exact_duplicates(items)
    if opts.merge_overlapping:
        items, counts["merged"] = merge_overlapping_highlights(items, thresholds=opts.thresholds)
    if opts.link_notes:
        items, counts["linked_notes"] = link_notes_to_highlights(items, opts.thresholds)
    if opts.extract_tags:
        tagged = extract_tags_from_linked_notes(items, tag_case=opts.tag_case)
        items, counts["tags_extracted"] = tagged.clippings, tagged.extracted_count
    if opts.flag_duplicates:
        items, counts["fuzzy_flagged"] = flag_fuzzy_duplicates(
            items,
            opts.similarity_threshold,
            keep=opts.keep,
            thresholds=opts.thresholds,
        )
    if opts.flag_suspicious:
        items, counts["suspicious_flagged"] = flag_suspicious_highlights(items, opts.thresholds)

    before_filters = len(items)
    if opts.exclude_types or opts.min_content_length or opts.only_books or opts.exclude_books:
        items = filter_clippings(
            items,
            exclude_types=opts.exclude_types,
            min_content_length=opts.min_content_length,
            only_books=opts.only_books,
            exclude_books=opts.exclude_books,
        )
    if opts.highlights_only:
        items, _ = filter_to_highlights_only(items)
    counts["filtered_out"] = before_filters - len(items)

    items.sort(key=lambda clipping: clipping.block_index)
    logger.debug("Post-processing counts: %s", counts)
    return ProcessingReport(clippings=tuple(items), **counts)
