from __future__ import annotations

import logging

import pytest

from clipkit.analysis.tags import TagCase
from clipkit.ingestion.models import ClippingType, WarningSeverity
from clipkit.ingestion.parser import ParseOptions, parse

SEPARATOR = "=========="


def _record(title: str, metadata: str, *content: str) -> str:
    body = "\n".join(content)
    return f"{title}\n{metadata}\n\n{body}\n{SEPARATOR}\n"


GOOD = _record(
    "Dune (Frank Herbert)",
    "- Your Highlight on page 12 | Location 100-105 | Added on Friday, January 5, 2024 10:30:45 AM",
    "Fear is the mind-killer.",
)
NO_MARKER = _record("Dune (Frank Herbert)", "- Something odd happened here", "Lost text.")


def _accounting_holds(result) -> bool:
    errors = sum(1 for warning in result.warnings if warning.severity is WarningSeverity.ERROR)
    return result.meta.parsed_blocks + errors + result.meta.skipped_blocks == result.meta.total_blocks


def test_good_block_plus_unmarked_block() -> None:
    result = parse(GOOD + NO_MARKER)

    assert len(result.clippings) == 1
    assert len(result.warnings) == 1
    assert result.meta.detected_language == "en"
    assert result.warnings[0].block_index == 1
    assert result.warnings[0].message == "Unrecognized clipping type marker"
    assert _accounting_holds(result)

    clipping = result.clippings[0]
    assert clipping.id == "clipping-1"
    assert clipping.title == "Dune"
    assert clipping.author == "Frank Herbert"
    assert clipping.type is ClippingType.HIGHLIGHT
    assert clipping.content == "Fear is the mind-killer."


def test_empty_content_is_an_empty_result_not_a_warning() -> None:
    for content in ("", "   \n\n", "\ufeff"):
        result = parse(content)

        assert result.is_empty
        assert result.clippings == ()
        assert result.warnings == ()
        assert result.meta.total_blocks == 0
        assert result.meta.detected_language == "en"
        assert not result.is_failed_import


def test_warning_cap_halts_exactly_and_keeps_accounting() -> None:
    content = GOOD + "".join(f"junk line {n}\n{SEPARATOR}\n" for n in range(10))

    result = parse(content, ParseOptions(max_warnings=3))

    errors = [warning for warning in result.warnings if warning.severity is WarningSeverity.ERROR]
    fatal = [warning for warning in result.warnings if warning.severity is WarningSeverity.FATAL]
    assert len(errors) == 3
    assert len(fatal) == 1
    assert result.warnings[-1] is fatal[0]
    assert fatal[0].message == "Stopped after 3 warnings; 7 blocks not processed"
    assert result.meta.total_blocks == 11
    assert result.meta.parsed_blocks == 1
    assert result.meta.skipped_blocks == 7
    assert _accounting_holds(result)


def test_cap_not_reached_means_no_fatal_warning() -> None:
    content = "".join(f"junk line {n}\n{SEPARATOR}\n" for n in range(3))

    result = parse(content, ParseOptions(max_warnings=3))

    assert len(result.warnings) == 3
    assert result.meta.skipped_blocks == 0
    assert result.is_failed_import
    assert _accounting_holds(result)


def test_degraded_fields_keep_the_record() -> None:
    content = _record(
        "Dune (Frank Herbert)",
        "- Your Highlight on Location 10-abc | Added on not a date",
        "Still parsed.",
    )

    result = parse(content)

    assert len(result.clippings) == 1
    assert {warning.severity for warning in result.warnings} == {WarningSeverity.WARNING}
    assert result.meta.parsed_blocks == 1
    assert _accounting_holds(result)


def test_linked_note_becomes_tags() -> None:
    content = GOOD + _record(
        "Dune (Frank Herbert)",
        "- Your Note on page 12 | Location 105 | Added on Friday, January 5, 2024 10:31:00 AM",
        "fear, #mind",
    )

    highlight, note = parse(content).clippings

    assert highlight.note == "fear, #mind"
    assert highlight.tags == ("FEAR", "MIND")
    assert highlight.linked_note_id == note.id
    assert note.linked_highlight_id == highlight.id
    assert note.tags is None

    lowered = parse(content, ParseOptions(tag_case="lowercase")).clippings[0]
    assert lowered.tags == ("fear", "mind")


def test_explicit_language_skips_detection() -> None:
    content = _record(
        "Rayuela (Julio Cortázar)",
        "- Tu subrayado en la posición 5-6 | Añadido el viernes, 5 de enero de 2024 10:30:45",
        "Andábamos sin buscarnos.",
    )

    assert parse(content).meta.detected_language == "es"
    forced = parse(content, ParseOptions(language="en"))
    assert forced.meta.detected_language == "en"
    assert forced.clippings == ()
    assert len(forced.warnings) == 1


def test_output_is_ordered_by_block_index_and_ids_are_sequential() -> None:
    content = GOOD + NO_MARKER + GOOD.replace("100-105", "400-405").replace("mind-killer", "little death")

    result = parse(content)

    assert [clipping.block_index for clipping in result.clippings] == [0, 2]
    assert [clipping.id for clipping in result.clippings] == ["clipping-1", "clipping-2"]


def test_remove_duplicates_option() -> None:
    result = parse(GOOD + GOOD, ParseOptions(remove_duplicates=True))

    assert len(result.clippings) == 1
    assert result.clippings[0].block_index == 1
    assert result.meta.parsed_blocks == 2


def test_stats_and_meta_are_populated() -> None:
    result = parse(GOOD)

    assert result.stats.total == 1
    assert result.stats.by_type["highlight"] == 1
    assert result.stats.total_books == 1
    assert result.meta.file_size == len(GOOD.encode("utf-8"))
    assert result.meta.parse_time >= 0.0


def test_parse_logs_summary(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="clipkit.ingestion.parser"):
        parse(GOOD)

    assert any("Parsed 1 of 1 blocks" in record.getMessage() for record in caplog.records)


@pytest.mark.parametrize(
    ("kwargs", "message"),
    [
        ({"language": "xx"}, "Unsupported language code"),
        ({"sample_size": 0}, "sample_size"),
        ({"similarity_threshold": 1.5}, "similarity_threshold"),
        ({"max_warnings": 0}, "max_warnings"),
        ({"min_content_length": -1}, "min_content_length"),
        ({"tag_case": "title"}, "Invalid parse option"),
        ({"exclude_types": ("article",)}, "Invalid parse option"),
    ],
)
def test_invalid_options_are_rejected_up_front(kwargs: dict[str, object], message: str) -> None:
    with pytest.raises(ValueError, match=message):
        ParseOptions(**kwargs)


def test_string_options_are_coerced() -> None:
    options = ParseOptions(tag_case="original", exclude_types=("note",))

    assert options.tag_case is TagCase.ORIGINAL
    assert options.exclude_types == (ClippingType.NOTE,)


def test_oversized_page_and_location_numbers_do_not_abort_the_parse() -> None:
    huge = "9" * 5000
    content = _record(
        "Dune (Frank Herbert)",
        f"- Your Highlight on page {huge} | Location {huge}-{huge} | Added on Friday, January 5, 2024 10:30:45 AM",
        "Fear is the mind-killer.",
    )

    result = parse(content)

    (clipping,) = result.clippings
    assert clipping.page is None
    assert clipping.location.start == 0
    assert _accounting_holds(result)


def test_padded_lines_are_cleaned_by_the_sanitizers() -> None:
    content = _record(
        "  Dune (Frank Herbert)  ",
        "- Your Highlight on page 12 | Location 100-105 | Added on Friday, January 5, 2024 10:30:45 AM   ",
        "   Fear is the mind-killer.   ",
    )

    (clipping,) = parse(content).clippings

    assert clipping.title == "Dune"
    assert clipping.author == "Frank Herbert"
    assert clipping.content == "Fear is the mind-killer."
    assert clipping.date is not None
