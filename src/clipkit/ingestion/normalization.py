"""Text normalization helpers used during tokenization and sanitization."""

from __future__ import annotations

import re
import unicodedata

_WHITESPACE_RE = re.compile(r"\s+")
_CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]")
_ZERO_WIDTH_RE = re.compile("[\u200b\u200c\u200d\ufeff]")
_BOM = "\ufeff"


def normalize_whitespace(text: str) -> str:
    """Collapse repeated whitespace (including NBSP) and trim boundaries."""

    return _WHITESPACE_RE.sub(" ", text.replace("\u00a0", " ")).strip()


def remove_bom(text: str) -> str:
    return text[1:] if text.startswith(_BOM) else text


def normalize_line_endings(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def remove_control_characters(text: str) -> str:
    """Drop C0 controls (except tab/newline/CR), DEL and zero-width marks."""

    return _ZERO_WIDTH_RE.sub("", _CONTROL_CHARS_RE.sub("", text))


def prepare_source_text(text: str) -> str:
    """Normalize a decoded file before tokenization.

    Newlines survive so block and line structure is preserved.
    """

    return unicodedata.normalize("NFC", normalize_line_endings(remove_bom(text)))
