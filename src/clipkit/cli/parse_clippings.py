"""CLI entrypoint that parses a clippings export and prints a JSON summary."""

from __future__ import annotations

import argparse
import json
import logging

from dotenv import load_dotenv

load_dotenv()

from clipkit.analysis.tags import TagCase
from clipkit.config import ClippingsSettings
from clipkit.ingestion.ingestor import ClippingsIngestor, IngestionError, IngestionResult
from clipkit.ingestion.models import WarningSeverity


def _build_payload(ingested: IngestionResult) -> dict[str, object]:
    result = ingested.result
    warnings = result.warnings
    return {
        "path": str(ingested.path),
        "encoding": ingested.encoding,
        "detected_language": result.meta.detected_language,
        "total_blocks": result.meta.total_blocks,
        "parsed_blocks": result.meta.parsed_blocks,
        "skipped_blocks": result.meta.skipped_blocks,
        "file_size": result.meta.file_size,
        "clippings": len(result.clippings),
        "by_type": result.stats.by_type,
        "books": result.stats.total_books,
        "authors": result.stats.total_authors,
        "words": result.stats.total_words,
        "warnings": {
            severity.value: sum(1 for warning in warnings if warning.severity is severity)
            for severity in WarningSeverity
        },
        "first_warnings": [
            {"block_index": warning.block_index, "severity": warning.severity.value, "message": warning.message}
            for warning in warnings[:10]
        ],
        "is_empty": ingested.is_empty,
        "is_failed_import": ingested.is_failed_import,
    }


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Parse a Kindle clippings export and report what was found")
    parser.add_argument("--path", required=True, help="Path to My Clippings.txt")
    parser.add_argument("--language", default=None, help="Language code or 'auto' (default from CLIPKIT_LANGUAGE)")
    parser.add_argument(
        "--tag-case",
        default=None,
        choices=[case.value for case in TagCase],
        help="Case applied to extracted tags",
    )
    parser.add_argument("--max-warnings", type=int, default=None, help="Abort after this many warnings")
    args = parser.parse_args(argv)

    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.INFO,
    )

    overrides: dict[str, object] = {}
    if args.language is not None:
        overrides["language"] = args.language
    if args.tag_case is not None:
        overrides["tag_case"] = args.tag_case
    if args.max_warnings is not None:
        overrides["max_warnings"] = args.max_warnings

    try:
        settings = ClippingsSettings.from_env()
        options = settings.to_parse_options(**overrides)
    except ValueError as exc:
        print(json.dumps({"error": str(exc)}, ensure_ascii=True, indent=2))
        return 2

    ingestor = ClippingsIngestor(max_file_size=settings.max_file_size, options=options)
    try:
        ingested = ingestor.ingest(args.path)
    except IngestionError as exc:
        print(json.dumps({"path": args.path, "error": str(exc)}, ensure_ascii=True, indent=2))
        return 1

    print(json.dumps(_build_payload(ingested), ensure_ascii=True, indent=2))
    return 1 if ingested.is_empty or ingested.is_failed_import else 0


if __name__ == "__main__":
    raise SystemExit(main())
