"""End-to-end parse of a decoded clippings file."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import time

from clipkit.analysis.dedupe import KeepPolicy, keep_earliest
from clipkit.analysis.processor import ProcessOptions, process_clippings
from clipkit.analysis.stats import calculate_stats
from clipkit.analysis.tags import TagCase
from clipkit.ingestion.language_detection import DEFAULT_SAMPLE_SIZE, detect_language
from clipkit.ingestion.languages import DEFAULT_CATALOG, LanguageCatalog
from clipkit.ingestion.metadata import parse_block
from clipkit.ingestion.models import (
    Clipping,
    ClippingType,
    ParseMeta,
    ParseResult,
    ParseWarning,
    WarningSeverity,
)
from clipkit.ingestion.normalization import prepare_source_text
from clipkit.ingestion.sanitizers import DEFAULT_RULES, SanitizerRules
from clipkit.ingestion.tokenizer import tokenize

logger = logging.getLogger(__name__)

AUTO_LANGUAGE = "auto"
DEFAULT_MAX_WARNINGS = 100


@dataclass(frozen=True, slots=True)
class ParseOptions:
    """Validated knobs for :func:`parse`.

    Invalid values raise ``ValueError`` on construction so bad configuration
    never reaches the block loop.
    """

    language: str = AUTO_LANGUAGE
    sample_size: int = DEFAULT_SAMPLE_SIZE
    similarity_threshold: float = 0.8
    tag_case: TagCase | str = TagCase.UPPERCASE
    max_warnings: int = DEFAULT_MAX_WARNINGS
    catalog: LanguageCatalog = DEFAULT_CATALOG
    sanitizer_rules: SanitizerRules = DEFAULT_RULES
    link_notes: bool = True
    extract_tags: bool = True
    flag_duplicates: bool = True
    flag_suspicious: bool = True
    remove_duplicates: bool = False
    merge_overlapping: bool = False
    highlights_only: bool = False
    exclude_types: tuple[ClippingType | str, ...] = ()
    min_content_length: int = 0
    only_books: tuple[str, ...] = ()
    exclude_books: tuple[str, ...] = ()
    keep: KeepPolicy = keep_earliest

    def __post_init__(self) -> None:
        if self.language != AUTO_LANGUAGE and self.language not in self.catalog:
            raise ValueError(
                f"Unsupported language code: {self.language!r}; expected 'auto' or one of {', '.join(self.catalog.codes)}"
            )
        if self.sample_size < 1:
            raise ValueError("sample_size must be >= 1")
        if not 0.0 <= self.similarity_threshold <= 1.0:
            raise ValueError("similarity_threshold must be between 0.0 and 1.0")
        if self.max_warnings < 1:
            raise ValueError("max_warnings must be >= 1")
        if self.min_content_length < 0:
            raise ValueError("min_content_length cannot be negative")

        try:
            tag_case = TagCase(self.tag_case)
            exclude_types = tuple(ClippingType(value) for value in self.exclude_types)
        except ValueError as exc:
            raise ValueError(f"Invalid parse option: {exc}") from exc

        # Frozen: coerce through object.__setattr__.
        object.__setattr__(self, "tag_case", tag_case)
        object.__setattr__(self, "exclude_types", exclude_types)
        object.__setattr__(self, "only_books", tuple(self.only_books))
        object.__setattr__(self, "exclude_books", tuple(self.exclude_books))

    def process_options(self) -> ProcessOptions:
        return ProcessOptions(
            remove_duplicates=self.remove_duplicates,
            merge_overlapping=self.merge_overlapping,
            link_notes=self.link_notes,
            extract_tags=self.extract_tags,
            tag_case=TagCase(self.tag_case),
            flag_duplicates=self.flag_duplicates,
            similarity_threshold=self.similarity_threshold,
            keep=self.keep,
            flag_suspicious=self.flag_suspicious,
            exclude_types=tuple(ClippingType(value) for value in self.exclude_types),
            min_content_length=self.min_content_length,
            only_books=self.only_books,
            exclude_books=self.exclude_books,
            highlights_only=self.highlights_only,
        )


def _cap_warning(block_index: int, warning_count: int, remaining: int) -> ParseWarning:
    return ParseWarning(
        block_index=block_index,
        message=f"Stopped after {warning_count} warnings; {remaining} blocks not processed",
        severity=WarningSeverity.FATAL,
    )


def parse(content: str, options: ParseOptions | None = None) -> ParseResult:
    """Parse a decoded "My Clippings.txt" payload into a :class:`ParseResult`.

    Malformed blocks become warnings and never raise. Once the warning cap
    is reached the rest of the file is skipped and a terminal ``fatal``
    warning records how many blocks were left.
    """

    opts = options or ParseOptions()
    started = time.perf_counter()
    file_size = len(content.encode("utf-8", errors="replace"))

    text = prepare_source_text(content)
    if not text.strip():
        language = opts.catalog.default_language if opts.language == AUTO_LANGUAGE else opts.language
        meta = ParseMeta(
            detected_language=language,
            file_size=file_size,
            parse_time=time.perf_counter() - started,
        )
        logger.info("Empty clippings input (%d bytes)", file_size)
        return ParseResult(clippings=(), warnings=(), meta=meta, stats=calculate_stats(()))

    blocks = tokenize(text)
    if opts.language == AUTO_LANGUAGE:
        language = detect_language(blocks, opts.sample_size, catalog=opts.catalog)
    else:
        language = opts.language
    patterns = opts.catalog.get(language)

    clippings: list[Clipping] = []
    warnings: list[ParseWarning] = []
    skipped = 0

    for position, block in enumerate(blocks):
        if len(warnings) >= opts.max_warnings:
            skipped = len(blocks) - position
            warning_count = len(warnings)
            warnings.append(_cap_warning(block.index, warning_count, skipped))
            logger.warning(
                "Aborting parse after %d warnings; %d of %d blocks not processed",
                warning_count,
                skipped,
                len(blocks),
            )
            break

        outcome = parse_block(
            block,
            patterns,
            ordinal=len(clippings) + 1,
            rules=opts.sanitizer_rules,
        )
        warnings.extend(outcome.warnings)
        if outcome.clipping is None:
            logger.debug("Dropped block %d: %s", block.index, outcome.warnings[0].message)
            continue
        clippings.append(outcome.clipping)

    parsed_blocks = len(clippings)
    report = process_clippings(clippings, opts.process_options())

    meta = ParseMeta(
        detected_language=language,
        total_blocks=len(blocks),
        parsed_blocks=parsed_blocks,
        skipped_blocks=skipped,
        file_size=file_size,
        parse_time=time.perf_counter() - started,
    )
    logger.info(
        "Parsed %d of %d blocks (language=%s, warnings=%d, kept=%d)",
        parsed_blocks,
        len(blocks),
        language,
        len(warnings),
        len(report.clippings),
    )
    return ParseResult(
        clippings=report.clippings,
        warnings=tuple(warnings),
        meta=meta,
        stats=calculate_stats(report.clippings),
    )
