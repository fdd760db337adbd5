from __future__ import annotations

import pytest

from clipkit.ingestion.language_detection import detect_block_language, detect_language
from clipkit.ingestion.languages import DEFAULT_CATALOG, ENGLISH, GERMAN, LanguageCatalog
from clipkit.ingestion.models import TokenizedBlock


def _block(index: int, *lines: str) -> TokenizedBlock:
    return TokenizedBlock(index=index, lines=tuple(lines), raw="\n".join(lines))


ENGLISH_BLOCK = ("Dune (Frank Herbert)", "- Your Highlight on Location 10-12 | Added on Friday, January 5, 2024 10:30:45 AM", "", "Fear is the mind-killer.")
SPANISH_BLOCK = ("Rayuela (Julio Cortázar)", "- Tu subrayado en la posición 5-6 | Añadido el viernes, 5 de enero de 2024 10:30:45", "", "Texto.")
GERMAN_BLOCK = ("Faust (Goethe)", "- Ihre Markierung bei Position 5-6 | Hinzugefügt am Freitag, 5. Januar 2024 10:30:45", "", "Text.")


@pytest.mark.parametrize("sample_size", [1, 2, 5, 10, 50])
def test_english_added_on_everywhere_detects_english(sample_size: int) -> None:
    blocks = [_block(n, *ENGLISH_BLOCK) for n in range(7)]

    assert detect_language(blocks, sample_size) == "en"


def test_empty_input_returns_catalog_default() -> None:
    assert detect_language([]) == DEFAULT_CATALOG.default_language == "en"


def test_blocks_without_phrases_return_catalog_default() -> None:
    blocks = [_block(0, "random", "text"), _block(1, "more")]

    assert detect_language(blocks) == "en"


def test_majority_vote_wins() -> None:
    blocks = [_block(0, *ENGLISH_BLOCK), _block(1, *SPANISH_BLOCK), _block(2, *SPANISH_BLOCK)]

    assert detect_language(blocks) == "es"


def test_tie_resolves_in_catalog_order() -> None:
    blocks = [_block(0, *GERMAN_BLOCK), _block(1, *SPANISH_BLOCK)]

    assert detect_language(blocks) == "es"


def test_only_the_sample_is_considered() -> None:
    blocks = [_block(0, *GERMAN_BLOCK)] + [_block(n, *ENGLISH_BLOCK) for n in range(1, 5)]

    assert detect_language(blocks, sample_size=1) == "de"


def test_marker_phrase_is_a_secondary_signal() -> None:
    block = _block(0, "Faust (Goethe)", "- Ihre Notiz bei Position 5")

    assert detect_block_language(block) == "de"


def test_custom_catalog_default_is_respected() -> None:
    catalog = LanguageCatalog(languages=(GERMAN, ENGLISH))

    assert detect_language([], catalog=catalog) == "de"


def test_sample_size_must_be_positive() -> None:
    with pytest.raises(ValueError, match="sample_size"):
        detect_language([], sample_size=0)
