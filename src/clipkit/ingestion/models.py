"""Canonical data structures shared by the clippings pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
import math


class ClippingType(str, Enum):
    HIGHLIGHT = "highlight"
    NOTE = "note"
    BOOKMARK = "bookmark"
    CLIP = "clip"


class WarningSeverity(str, Enum):
    ERROR = "error"      # block dropped
    WARNING = "warning"  # record kept, one field degraded
    FATAL = "fatal"      # warning cap reached, rest of file skipped


@dataclass(frozen=True, slots=True)
class TokenizedBlock:
    """One delimiter-separated block, split into lines."""

    index: int
    lines: tuple[str, ...]
    raw: str = ""


@dataclass(frozen=True, slots=True)
class RawClipping:
    """Positional view of a block: title line, metadata line and content."""

    title_line: str
    metadata_line: str
    content_lines: tuple[str, ...]
    block_index: int

    @classmethod
    def from_block(cls, block: TokenizedBlock) -> "RawClipping":
        lines = block.lines
        return cls(
            title_line=lines[0] if lines else "",
            metadata_line=lines[1] if len(lines) > 1 else "",
            content_lines=tuple(lines[2:]),
            block_index=block.index,
        )


@dataclass(frozen=True, slots=True)
class ClippingLocation:
    """Device location, either a single value or a range.

    ``end`` is ``None`` for single locations and ``nan`` when the range end
    could not be parsed.
    """

    raw: str = ""
    start: int = 0
    end: int | float | None = None

    @property
    def is_range(self) -> bool:
        return self.end is not None

    @property
    def has_malformed_end(self) -> bool:
        return isinstance(self.end, float) and math.isnan(self.end)

    @property
    def effective_end(self) -> int:
        """Numeric end for range arithmetic; falls back to ``start``."""

        if self.end is None or self.has_malformed_end:
            return self.start
        return int(self.end)


@dataclass(frozen=True, slots=True)
class Clipping:
    """A structured highlight, note, bookmark or clip."""

    id: str
    title: str
    content: str
    type: ClippingType
    location: ClippingLocation = field(default_factory=ClippingLocation)
    author: str | None = None
    page: int | None = None
    date: datetime | None = None
    tags: tuple[str, ...] | None = None
    note: str | None = None
    block_index: int = 0
    title_raw: str = ""
    content_raw: str = ""
    date_raw: str = ""
    language: str = "en"
    source: str = "kindle"
    is_empty: bool = False
    is_limit_reached: bool = False
    title_was_cleaned: bool = False
    content_was_cleaned: bool = False
    word_count: int = 0
    char_count: int = 0
    linked_note_id: str | None = None
    linked_highlight_id: str | None = None
    is_suspicious: bool = False
    suspicious_reason: str | None = None
    similarity_score: float | None = None
    possible_duplicate_of: str | None = None

    @property
    def is_sideloaded(self) -> bool:
        return self.source == "sideload"

    @property
    def book_key(self) -> tuple[str, str]:
        return (self.title.casefold(), (self.author or "").casefold())


@dataclass(frozen=True, slots=True)
class ParseWarning:
    """Diagnostic for a block that was dropped or degraded."""

    block_index: int
    message: str
    severity: WarningSeverity = WarningSeverity.ERROR
    raw: str = ""


@dataclass(frozen=True, slots=True)
class ClippingStats:
    """Aggregate counts over a clipping collection."""

    total: int = 0
    by_type: dict[str, int] = field(default_factory=dict)
    total_books: int = 0
    total_authors: int = 0
    total_words: int = 0
    books: tuple[tuple[str, int], ...] = ()


@dataclass(frozen=True, slots=True)
class ParseMeta:
    detected_language: str
    total_blocks: int = 0
    parsed_blocks: int = 0
    skipped_blocks: int = 0
    file_size: int = 0
    parse_time: float = 0.0


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Complete pipeline output for one file."""

    clippings: tuple[Clipping, ...]
    warnings: tuple[ParseWarning, ...]
    meta: ParseMeta
    stats: ClippingStats = field(default_factory=ClippingStats)

    @property
    def is_empty(self) -> bool:
        """True when the input contained no blocks at all."""

        return self.meta.total_blocks == 0

    @property
    def is_failed_import(self) -> bool:
        """True when blocks were present but none produced a clipping."""

        return not self.clippings and bool(self.warnings)
