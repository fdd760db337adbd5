"""Environment-driven settings for clippings parsing."""

from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Mapping

from clipkit.analysis.tags import TagCase
from clipkit.ingestion.ingestor import DEFAULT_MAX_FILE_SIZE
from clipkit.ingestion.parser import AUTO_LANGUAGE, DEFAULT_MAX_WARNINGS, ParseOptions
from clipkit.ingestion.language_detection import DEFAULT_SAMPLE_SIZE


def _parse_positive_int(*, name: str, raw_value: str, minimum: int = 1) -> int:
    try:
        value = int(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


def _parse_float_in_range(*, name: str, raw_value: str, minimum: float = 0.0, maximum: float = 1.0) -> float:
    try:
        value = float(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number") from exc
    if not minimum <= value <= maximum:
        raise ValueError(f"{name} must be between {minimum} and {maximum}")
    return value


@dataclass(frozen=True, slots=True)
class ClippingsSettings:
    """Validated parse settings read from ``CLIPKIT_*`` variables."""

    language: str = AUTO_LANGUAGE
    sample_size: int = DEFAULT_SAMPLE_SIZE
    similarity_threshold: float = 0.8
    tag_case: TagCase = TagCase.UPPERCASE
    max_warnings: int = DEFAULT_MAX_WARNINGS
    max_file_size: int = DEFAULT_MAX_FILE_SIZE

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ClippingsSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        language = source.get("CLIPKIT_LANGUAGE", AUTO_LANGUAGE).strip() or AUTO_LANGUAGE
        sample_size_raw = source.get("CLIPKIT_SAMPLE_SIZE", str(DEFAULT_SAMPLE_SIZE)).strip()
        threshold_raw = source.get("CLIPKIT_SIMILARITY_THRESHOLD", "0.8").strip()
        tag_case_raw = source.get("CLIPKIT_TAG_CASE", TagCase.UPPERCASE.value).strip().lower()
        max_warnings_raw = source.get("CLIPKIT_MAX_WARNINGS", str(DEFAULT_MAX_WARNINGS)).strip()
        max_file_size_raw = source.get("CLIPKIT_MAX_FILE_SIZE", str(DEFAULT_MAX_FILE_SIZE)).strip()

        try:
            tag_case = TagCase(tag_case_raw)
        except ValueError as exc:
            choices = ", ".join(case.value for case in TagCase)
            raise ValueError(f"CLIPKIT_TAG_CASE must be one of: {choices}") from exc

        settings = cls(
            language=language,
            sample_size=_parse_positive_int(name="CLIPKIT_SAMPLE_SIZE", raw_value=sample_size_raw),
            similarity_threshold=_parse_float_in_range(
                name="CLIPKIT_SIMILARITY_THRESHOLD",
                raw_value=threshold_raw,
            ),
            tag_case=tag_case,
            max_warnings=_parse_positive_int(name="CLIPKIT_MAX_WARNINGS", raw_value=max_warnings_raw),
            max_file_size=_parse_positive_int(name="CLIPKIT_MAX_FILE_SIZE", raw_value=max_file_size_raw),
        )

        try:
            settings.to_parse_options()
        except ValueError as exc:
            raise ValueError(f"CLIPKIT_LANGUAGE is invalid: {exc}") from exc
        return settings

    def to_parse_options(self, **overrides: object) -> ParseOptions:
        values: dict[str, object] = {
            "language": self.language,
            "sample_size": self.sample_size,
            "similarity_threshold": self.similarity_threshold,
            "tag_case": self.tag_case,
            "max_warnings": self.max_warnings,
        }
        values.update(overrides)
        return ParseOptions(**values)
