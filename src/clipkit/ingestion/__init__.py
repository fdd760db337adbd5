"""Clippings ingestion: tokenizing, language tables and record parsing.

The file-level entrypoints live in :mod:`clipkit.ingestion.parser` and
:mod:`clipkit.ingestion.ingestor`.
"""

from .languages import DEFAULT_CATALOG, SUPPORTED_LANGUAGES, LanguageCatalog, LanguagePatterns
from .models import (
    Clipping,
    ClippingLocation,
    ClippingStats,
    ClippingType,
    ParseMeta,
    ParseResult,
    ParseWarning,
    WarningSeverity,
)

__all__ = [
    "DEFAULT_CATALOG",
    "SUPPORTED_LANGUAGES",
    "Clipping",
    "ClippingLocation",
    "ClippingStats",
    "ClippingType",
    "LanguageCatalog",
    "LanguagePatterns",
    "ParseMeta",
    "ParseResult",
    "ParseWarning",
    "WarningSeverity",
]
