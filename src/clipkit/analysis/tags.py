"""Tag extraction from short keyword notes linked to highlights."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
import re
from typing import Callable, Sequence

from clipkit.ingestion.models import Clipping, ClippingType

MAX_TAG_NOTE_LENGTH = 200
MAX_TAG_LENGTH = 50
MAX_TAG_SPACES = 3

_TAG_SEPARATOR_RE = re.compile(r"[,;]")
_SENTENCE_END_RE = re.compile(r"[.!?]")


class TagCase(str, Enum):
    ORIGINAL = "original"
    UPPERCASE = "uppercase"
    LOWERCASE = "lowercase"

    def apply(self, tag: str) -> str:
        if self is TagCase.UPPERCASE:
            return tag.upper()
        if self is TagCase.LOWERCASE:
            return tag.lower()
        return tag


@dataclass(frozen=True, slots=True)
class TagExtractionResult:
    clippings: list[Clipping]
    extracted_count: int


def looks_like_tag_note(text: str) -> bool:
    """Heuristic: a short comma list of keywords rather than prose."""

    stripped = text.strip()
    if not stripped or len(stripped) >= MAX_TAG_NOTE_LENGTH:
        return False
    if _SENTENCE_END_RE.search(stripped):
        return False

    for piece in stripped.split(","):
        piece = piece.strip()
        if not 1 <= len(piece) <= MAX_TAG_LENGTH:
            return False
        if piece.count(" ") > MAX_TAG_SPACES:
            return False
    return True


def extract_tags_from_note(text: str, tag_case: TagCase | str = TagCase.UPPERCASE) -> list[str]:
    case = TagCase(tag_case)
    tags: list[str] = []
    seen: set[str] = set()

    for part in _TAG_SEPARATOR_RE.split(text):
        tag = part.strip().lstrip("#@").strip()
        if not tag:
            continue
        tag = case.apply(tag)
        key = tag.casefold()
        if key in seen:
            continue
        seen.add(key)
        tags.append(tag)

    return tags


def extract_tags_from_linked_notes(
    clippings: Sequence[Clipping],
    *,
    tag_case: TagCase | str = TagCase.UPPERCASE,
    predicate: Callable[[str], bool] = looks_like_tag_note,
) -> TagExtractionResult:
    """Turn keyword-style notes attached to highlights into tags.

    Returns a new list; only highlights whose note passes *predicate*
    receive tags, everything else is passed through untouched.
    """

    case = TagCase(tag_case)
    result: list[Clipping] = []
    extracted = 0

    for clipping in clippings:
        if clipping.type is not ClippingType.HIGHLIGHT or not clipping.note or not predicate(clipping.note):
            result.append(clipping)
            continue

        tags = extract_tags_from_note(clipping.note, case)
        if not tags:
            result.append(clipping)
            continue

        merged = tuple(dict.fromkeys((*(clipping.tags or ()), *tags)))
        result.append(replace(clipping, tags=merged))
        extracted += 1

    return TagExtractionResult(clippings=result, extracted_count=extracted)
