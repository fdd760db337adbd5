"""Shared numeric thresholds for the analysis passes."""

from __future__ import annotations

from dataclasses import dataclass
import re


@dataclass(frozen=True, slots=True)
class AnalysisThresholds:
    similarity_threshold: float = 0.8
    subset_containment: float = 0.9
    linker_max_distance: int = 10
    fuzzy_location_window: int = 50
    merge_location_tolerance: int = 5
    merge_word_overlap: float = 0.5
    garbage_length: int = 5
    short_length: int = 75
    valid_endings: re.Pattern[str] = re.compile(r"[.!?\"”)\]]$")

    def __post_init__(self) -> None:
        for name in ("similarity_threshold", "subset_containment", "merge_word_overlap"):
            if not 0.0 <= getattr(self, name) <= 1.0:
                raise ValueError(f"{name} must be between 0.0 and 1.0")
        for name in ("linker_max_distance", "fuzzy_location_window", "merge_location_tolerance"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} cannot be negative")
        if self.garbage_length > self.short_length:
            raise ValueError("garbage_length cannot exceed short_length")


DEFAULT_THRESHOLDS = AnalysisThresholds()
