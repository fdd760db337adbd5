"""Per-block metadata extraction: type, location, page and date."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
import re

from clipkit.ingestion.dates import parse_clipping_date
from clipkit.ingestion.languages import LanguagePatterns
from clipkit.ingestion.locations import MAX_NUMBER_DIGITS, parse_location_string
from clipkit.ingestion.models import (
    Clipping,
    ClippingLocation,
    ClippingType,
    ParseWarning,
    RawClipping,
    TokenizedBlock,
    WarningSeverity,
)
from clipkit.ingestion.normalization import normalize_whitespace
from clipkit.ingestion.sanitizers import (
    DEFAULT_RULES,
    SanitizerRules,
    extract_author,
    is_sideloaded,
    sanitize_content,
)

UNRECOGNIZED_TYPE_MESSAGE = "Unrecognized clipping type marker"
NO_METADATA_MESSAGE = "Block has no metadata line"
WARNING_RAW_LIMIT = 200

_DATE_LEAD_CHARS = " \t:：,，"


@dataclass(frozen=True, slots=True)
class MetadataParseOutcome:
    """Fields read from one metadata line, or the reason it was rejected."""

    type: ClippingType | None = None
    location: ClippingLocation = field(default_factory=ClippingLocation)
    page: int | None = None
    date_raw: str = ""
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True, slots=True)
class BlockOutcome:
    """Either a clipping with field-level warnings or a single dropping error."""

    clipping: Clipping | None
    warnings: tuple[ParseWarning, ...] = ()

    @property
    def ok(self) -> bool:
        return self.clipping is not None


@lru_cache(maxsize=64)
def _phrase_patterns(patterns: LanguagePatterns) -> tuple[re.Pattern[str], re.Pattern[str], re.Pattern[str]]:
    number = rf"\d{{1,{MAX_NUMBER_DIGITS}}}(?!\d)"
    location = re.compile(
        re.escape(patterns.location) + rf"[^\d|]*({number}(?:\s*[-–—]\s*(?:{number}|[^\s|\d]+))?)",
        re.IGNORECASE,
    )
    page = re.compile(re.escape(patterns.page) + rf"[^\d|]*({number})", re.IGNORECASE)
    added_on = re.compile(re.escape(patterns.added_on), re.IGNORECASE)
    return location, page, added_on


def classify_type(text: str, patterns: LanguagePatterns) -> ClippingType | None:
    lowered = text.lower()
    for clipping_type, forms in zip(ClippingType, patterns.type_forms):
        if any(form.lower() in lowered for form in forms):
            return clipping_type
    return None


def parse_metadata_line(line: str, patterns: LanguagePatterns) -> MetadataParseOutcome:
    """Read the ``- Your Highlight on page 4 | Location 10-12 | Added on ...`` line.

    The leading dash is optional. Only the record type is mandatory; page,
    location and date fall back to empty values when their phrase is
    missing.
    """

    text = line.strip()
    if text.startswith("-"):
        text = text[1:].strip()

    clipping_type = classify_type(text, patterns)
    if clipping_type is None:
        return MetadataParseOutcome(error=UNRECOGNIZED_TYPE_MESSAGE)

    location_re, page_re, added_on_re = _phrase_patterns(patterns)

    location = ClippingLocation()
    location_match = location_re.search(text)
    if location_match:
        location = parse_location_string(location_match.group(1).strip())

    page_match = page_re.search(text)
    page = int(page_match.group(1)) if page_match else None

    date_raw = ""
    added_on_match = added_on_re.search(text)
    if added_on_match:
        date_raw = normalize_whitespace(text[added_on_match.end() :].lstrip(_DATE_LEAD_CHARS))

    return MetadataParseOutcome(
        type=clipping_type,
        location=location,
        page=page,
        date_raw=date_raw,
    )


def _block_warning(
    block: TokenizedBlock,
    message: str,
    severity: WarningSeverity = WarningSeverity.ERROR,
) -> ParseWarning:
    return ParseWarning(
        block_index=block.index,
        message=message,
        severity=severity,
        raw=block.raw[:WARNING_RAW_LIMIT],
    )


def parse_block(
    block: TokenizedBlock,
    patterns: LanguagePatterns,
    *,
    ordinal: int,
    rules: SanitizerRules = DEFAULT_RULES,
) -> BlockOutcome:
    """Turn one tokenized block into a clipping.

    *ordinal* is the 1-based position among accepted records and becomes
    the clipping id. Unparseable dates and malformed range ends keep the
    record and add ``warning`` severity diagnostics.
    """

    if len(block.lines) < 2:
        return BlockOutcome(clipping=None, warnings=(_block_warning(block, NO_METADATA_MESSAGE),))

    raw = RawClipping.from_block(block)
    metadata = parse_metadata_line(raw.metadata_line, patterns)
    if not metadata.ok:
        return BlockOutcome(clipping=None, warnings=(_block_warning(block, metadata.error or ""),))

    warnings: list[ParseWarning] = []

    date = None
    if metadata.date_raw:
        date = parse_clipping_date(metadata.date_raw, patterns)
        if date is None:
            warnings.append(
                _block_warning(
                    block,
                    f"Unparseable date: {metadata.date_raw!r}",
                    WarningSeverity.WARNING,
                )
            )

    if metadata.location.has_malformed_end:
        warnings.append(
            _block_warning(
                block,
                f"Malformed location range end: {metadata.location.raw!r}",
                WarningSeverity.WARNING,
            )
        )

    title_author = extract_author(raw.title_line, rules)
    content_raw = "\n".join(raw.content_lines)
    content = sanitize_content(content_raw, rules)

    clipping = Clipping(
        id=f"clipping-{ordinal}",
        title=title_author.title,
        author=title_author.author,
        content=content.content,
        type=metadata.type or ClippingType.HIGHLIGHT,
        location=metadata.location,
        page=metadata.page,
        date=date,
        block_index=block.index,
        title_raw=raw.title_line,
        content_raw=content_raw,
        date_raw=metadata.date_raw,
        language=patterns.code,
        source="sideload" if is_sideloaded(raw.title_line, rules) else "kindle",
        is_empty=content.is_empty,
        is_limit_reached=content.is_limit_reached,
        title_was_cleaned=title_author.was_cleaned,
        content_was_cleaned=content.was_cleaned,
        word_count=len(content.content.split()),
        char_count=len(content.content),
    )
    return BlockOutcome(clipping=clipping, warnings=tuple(warnings))
