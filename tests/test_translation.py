"""Tests for applying translations to target records."""

from pathlib import Path
import sys

sys.path.append(str(Path(__file__).resolve().parents[1] / "python-backend"))

from lcc.alignment import align_records
from lcc.models_lcc import ContentRecord
from lcc.translation import (
    TranslationResult,
    apply_translations,
    original_content_map,
    translation_map,
)


def _targets() -> list[ContentRecord]:
    return [
        ContentRecord(id="A", raw_text="Hallo", clean_text="Hallo", original_index=0, embedding=[1.0]),
        ContentRecord(id="B", raw_text="Tschuss", original_index=1),
    ]


def test_translation_replaces_text_and_keeps_identity() -> None:
    results = [TranslationResult(content_id="A", original_content="Hallo", translated_content="Hello")]

    updated = apply_translations(_targets(), results)

    assert updated[0].raw_text == "Hello"
    assert updated[0].id == "A"
    assert updated[0].original_index == 0
    assert updated[0].clean_text == ""
    assert updated[0].embedding is None
    assert updated[1].raw_text == "Tschuss"


def test_maps_keyed_by_content_id() -> None:
    targets = _targets()
    results = [TranslationResult(content_id="B", translated_content="Bye")]
    assert original_content_map(targets) == {"A": "Hallo", "B": "Tschuss"}
    assert translation_map(results) == {"B": "Bye"}


def test_translated_records_align_by_original_index() -> None:
    reference = [ContentRecord(id="1", raw_text="Hello", original_index=0, embedding=[1.0, 0.0])]
    translated = apply_translations(_targets(), [TranslationResult(content_id="A", translated_content="Hello")])
    embedded = [
        translated[0].model_copy(update={"embedding": [1.0, 0.0]}),
        translated[1].model_copy(update={"embedding": [0.0, 1.0]}),
    ]

    result = align_records(reference, embedded, 0.5)

    assert result.aligned_rows[0].target_record.id == "A"
    assert [record.id for record in result.leftover_targets] == ["B"]
