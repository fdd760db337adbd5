"""Phrase-vote language detection for clippings files."""

from __future__ import annotations

from typing import Sequence

from clipkit.ingestion.languages import DEFAULT_CATALOG, LanguageCatalog
from clipkit.ingestion.models import TokenizedBlock

DEFAULT_SAMPLE_SIZE = 10


def detect_block_language(
    block: TokenizedBlock,
    catalog: LanguageCatalog = DEFAULT_CATALOG,
) -> str | None:
    """Return the first catalog language whose phrases occur in *block*.

    The "added on" phrase is checked first; the highlight/note/bookmark
    phrases are a secondary signal.
    """

    text = " ".join(block.lines).lower()

    for patterns in catalog:
        if patterns.added_on.lower() in text:
            return patterns.code
        highlight, note, bookmark, _clip = patterns.type_forms
        if any(form.lower() in text for form in (*highlight, *note, *bookmark)):
            return patterns.code

    return None


def detect_language(
    blocks: Sequence[TokenizedBlock],
    sample_size: int = DEFAULT_SAMPLE_SIZE,
    *,
    catalog: LanguageCatalog = DEFAULT_CATALOG,
) -> str:
    """Vote on the dominant language over the first *sample_size* blocks.

    Ties go to the language that comes first in catalog order. Falls back
    to the catalog default when the sample is empty or casts no votes.
    """

    if sample_size < 1:
        raise ValueError("sample_size must be >= 1")

    votes = {code: 0 for code in catalog.codes}
    for block in blocks[:sample_size]:
        detected = detect_block_language(block, catalog)
        if detected is not None:
            votes[detected] += 1

    detected_language = catalog.default_language
    max_votes = 0
    for code in catalog.codes:
        if votes[code] > max_votes:
            max_votes = votes[code]
            detected_language = code

    return detected_language
