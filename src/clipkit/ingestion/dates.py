"""Parsing of the localized "Added on" timestamp."""

from __future__ import annotations

from datetime import datetime
from functools import lru_cache
import re

from dateutil import parser as dateutil_parser

from clipkit.ingestion.languages import LanguagePatterns
from clipkit.ingestion.normalization import normalize_whitespace

_YEAR_RE = re.compile(r"(?<!\d)\d{4}(?!\d)")


def _name_pattern(name: str) -> str:
    escaped = re.escape(name)
    # Cased scripts need letter boundaries ("mai" must not hit "maio");
    # CJK names sit directly against digits and other ideographs.
    if name[:1].lower() != name[:1].upper():
        return rf"(?<![^\W\d_]){escaped}(?![^\W\d_])"
    return escaped


@lru_cache(maxsize=32)
def _compile_names(date_names: tuple[tuple[str, str], ...]) -> tuple[re.Pattern[str] | None, dict[str, str]]:
    if not date_names:
        return None, {}

    lookup = {localized.casefold(): english for localized, english in date_names}
    ordered = sorted(lookup, key=len, reverse=True)
    pattern = re.compile("|".join(_name_pattern(name) for name in ordered), re.IGNORECASE)
    return pattern, lookup


def translate_date_names(text: str, patterns: LanguagePatterns) -> str:
    """Replace localized weekday, month and meridiem names with English ones."""

    pattern, lookup = _compile_names(patterns.date_names)
    if pattern is None:
        return text
    return pattern.sub(lambda match: lookup.get(match.group(0).casefold(), match.group(0)), text)


def _lenient_parse(text: str) -> datetime | None:
    # Without an explicit year dateutil fills gaps from today's date.
    if not _YEAR_RE.search(text):
        return None
    try:
        return dateutil_parser.parse(text)
    except (ValueError, OverflowError):
        return None


def parse_clipping_date(text: str, patterns: LanguagePatterns) -> datetime | None:
    """Parse *text* with the language's formats, in order.

    Falls back to a lenient dateutil parse and returns ``None`` when
    nothing matches.
    """

    cleaned = normalize_whitespace(text)
    if not cleaned:
        return None

    translated = translate_date_names(cleaned, patterns)
    for date_format in patterns.date_formats:
        try:
            return datetime.strptime(translated, date_format)
        except ValueError:
            continue

    return _lenient_parse(translated)
