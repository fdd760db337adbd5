"""Title, author and content cleanup for parsed clippings."""

from __future__ import annotations

from dataclasses import dataclass
import re

from clipkit.ingestion.normalization import normalize_whitespace, remove_control_characters

_DEHYPHENATE_RE = re.compile(r"([^\W\d_]+)-[ \t]*\n\s*([^\W\d_]+)")
_SPACE_BEFORE_PUNCT_RE = re.compile(r"\s+([.,;:!?])")


def _noise(pattern: str, flags: int = re.IGNORECASE) -> re.Pattern[str]:
    return re.compile(pattern, flags)


@dataclass(frozen=True, slots=True)
class SanitizerRules:
    """Immutable pattern tables used by the sanitizer functions."""

    title_noise_patterns: tuple[re.Pattern[str], ...]
    content_noise_patterns: tuple[re.Pattern[str], ...]
    limit_messages: tuple[str, ...]
    sideload_extensions: re.Pattern[str]
    ebok_suffix: re.Pattern[str]


DEFAULT_RULES = SanitizerRules(
    title_noise_patterns=(
        _noise(r"\s*\(Spanish Edition\)"),
        _noise(r"\s*\(English Edition\)"),
        _noise(r"\s*\(Edición española\)"),
        _noise(r"\s*\(Edición en español\)"),
        _noise(r"\s*\(French Edition\)"),
        _noise(r"\s*\(Édition française\)"),
        _noise(r"\s*\(Edition française\)"),
        _noise(r"\s*\(Version française\)"),
        _noise(r"\s*\(German Edition\)"),
        _noise(r"\s*\(Deutsche Ausgabe\)"),
        _noise(r"\s*\(Italian Edition\)"),
        _noise(r"\s*\(Edizione italiana\)"),
        _noise(r"\s*\(Portuguese Edition\)"),
        _noise(r"\s*\(Edição portuguesa\)"),
        _noise(r"\s*\(Kindle Edition\)"),
        _noise(r"\s*\(Edition \d+\)"),
        _noise(r"\s*\[Print Replica\]"),
        _noise(r"\s*\[eBook\]"),
        _noise(r"\s*\[Kindle\]"),
        # "01 Book Title" from numbered series
        _noise(r"^\d+\s+(?=\S)", 0),
        _noise(r"\s*\(\s*\)$", 0),
        _noise(r"\s*\[\s*\]$", 0),
    ),
    content_noise_patterns=(
        _noise(r"<a\s+[^>]*href=[\"']kindle:[^\"']*[\"'][^>]*>"),
        _noise(r"</a>"),
    ),
    limit_messages=(
        "You have reached the clipping limit",
        "Has alcanzado el límite de recortes",
        "Você atingiu o limite de recortes",
        "Sie haben das Markierungslimit erreicht",
        "Vous avez atteint la limite",
        "<You have reached the clipping limit for this item>",
        "您已达到本书的剪贴限制",
        "このアイテムのクリップ上限に達しました",
    ),
    sideload_extensions=_noise(r"\.(pdf|epub|mobi|azw3?|txt|doc|docx|html|fb2|rtf)\b"),
    ebok_suffix=_noise(r"_EBOK$"),
)


@dataclass(frozen=True, slots=True)
class TitleAuthor:
    title: str
    author: str | None = None
    was_cleaned: bool = False


@dataclass(frozen=True, slots=True)
class TitleSanitizeResult:
    title: str
    was_cleaned: bool = False


@dataclass(frozen=True, slots=True)
class SanitizedContent:
    content: str
    is_empty: bool = False
    is_limit_reached: bool = False
    was_cleaned: bool = False


def _find_author_group(line: str) -> int | None:
    """Return the index of the "(" opening the group that ends *line*."""

    if not line.endswith(")"):
        return None

    depth = 0
    for position in range(len(line) - 1, -1, -1):
        char = line[position]
        if char == ")":
            depth += 1
        elif char == "(":
            depth -= 1
            if depth == 0:
                return position
    return None


def sanitize_title(title: str, rules: SanitizerRules = DEFAULT_RULES) -> TitleSanitizeResult:
    """Strip file extensions, the ``_EBOK`` suffix and edition noise."""

    original = normalize_whitespace(title)
    clean = rules.sideload_extensions.sub("", title)
    clean = rules.ebok_suffix.sub("", clean.rstrip())
    for pattern in rules.title_noise_patterns:
        clean = pattern.sub("", clean)
    clean = normalize_whitespace(clean)

    if not clean:
        # Noise rules must never erase the whole title.
        return TitleSanitizeResult(title=original, was_cleaned=False)
    return TitleSanitizeResult(title=clean, was_cleaned=clean != original)


def extract_author(line: str, rules: SanitizerRules = DEFAULT_RULES) -> TitleAuthor:
    """Split ``"Title (Author)"``; the author is ``None`` when no group ends the line.

    The author group is the last balanced parenthesized group, so nested
    parentheses inside the author name survive.
    """

    trimmed = remove_control_characters(line).strip()
    start = _find_author_group(trimmed)

    if start is not None:
        title_part = trimmed[:start].strip()
        author = normalize_whitespace(trimmed[start + 1 : -1])
        if title_part and author:
            cleaned = sanitize_title(title_part, rules)
            return TitleAuthor(title=cleaned.title, author=author, was_cleaned=cleaned.was_cleaned)

    cleaned = sanitize_title(trimmed, rules)
    return TitleAuthor(title=cleaned.title, author=None, was_cleaned=cleaned.was_cleaned)


def is_sideloaded(title_line: str, rules: SanitizerRules = DEFAULT_RULES) -> bool:
    """True for personal documents that lack standard store metadata."""

    trimmed = title_line.strip()
    if rules.sideload_extensions.search(trimmed) or rules.ebok_suffix.search(trimmed):
        return True
    return extract_author(trimmed, rules).author is None


def _clean_text(text: str) -> str:
    text = _DEHYPHENATE_RE.sub(r"\1\2", text)
    text = _SPACE_BEFORE_PUNCT_RE.sub(r"\1", text)
    return normalize_whitespace(text)


def sanitize_content(raw: str, rules: SanitizerRules = DEFAULT_RULES) -> SanitizedContent:
    """Clean clipping body text and flag empty or DRM-truncated content."""

    stripped = remove_control_characters(raw).strip()
    if not stripped:
        return SanitizedContent(content="", is_empty=True)

    lowered = stripped.casefold()
    is_limit_reached = any(message.casefold() in lowered for message in rules.limit_messages)

    text = stripped
    for pattern in rules.content_noise_patterns:
        text = pattern.sub("", text)
    content = _clean_text(text)

    return SanitizedContent(
        content=content,
        is_empty=not content,
        is_limit_reached=is_limit_reached,
        was_cleaned=content != normalize_whitespace(stripped),
    )
