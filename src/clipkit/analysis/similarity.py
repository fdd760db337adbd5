"""Word-set similarity used for near-duplicate detection."""

from __future__ import annotations

from dataclasses import dataclass
import re

from clipkit.analysis.thresholds import DEFAULT_THRESHOLDS

_PUNCTUATION_RE = re.compile(r"[.,;:!?\"'„“”‘’«»\-—–()\[\]{}]")


@dataclass(frozen=True, slots=True)
class SimilarityResult:
    score: float
    is_possible_duplicate: bool


def normalize_words(text: str) -> set[str]:
    """Lowercase, blank out punctuation and split into a word set."""

    if not text:
        return set()
    return set(_PUNCTUATION_RE.sub(" ", text.lower()).split())


def jaccard_similarity(a: str, b: str) -> float:
    """Return |A∩B| / |A∪B| over the normalized word sets of *a* and *b*."""

    words_a = normalize_words(a)
    words_b = normalize_words(b)
    if not words_a or not words_b:
        return 0.0

    return len(words_a & words_b) / len(words_a | words_b)


def compare_texts(
    a: str,
    b: str,
    threshold: float = DEFAULT_THRESHOLDS.similarity_threshold,
) -> SimilarityResult:
    score = jaccard_similarity(a, b)
    return SimilarityResult(score=score, is_possible_duplicate=score >= threshold)


def is_subset(
    shorter: str,
    longer: str,
    containment: float = DEFAULT_THRESHOLDS.subset_containment,
) -> bool:
    """True when most words of *shorter* also occur in *longer*."""

    words_short = normalize_words(shorter)
    if not words_short:
        return False
    words_long = normalize_words(longer)
    return len(words_short & words_long) / len(words_short) >= containment
