from pathlib import Path
import sys

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1] / "python-backend"))

from lcc.errors import InputValidationError
from lcc.models_lcc import ContentRecord, RowType
from lcc.pipeline import ComparisonOptions, LocalizationComparer
from lcc.translation import TranslationResult


# Topic vectors keyed by a keyword in the cleaned text.
TOPICS = {
    "hello": [1.0, 0.0, 0.0],
    "weather": [0.0, 1.0, 0.0],
    "save": [0.0, 0.0, 1.0],
}


class KeywordEmbedder:
    def embed(self, texts):
        vectors = []
        for text in texts:
            lowered = text.lower()
            vector = next((v for key, v in TOPICS.items() if key in lowered), [0.3, 0.3, 0.3])
            vectors.append(list(vector))
        return vectors


class DictionaryTranslator:
    WORDS = {"안녕하세요": "hello there", "날씨": "the weather", "저장": "save your work"}

    def translate_batch(self, records, source_lang, target_lang="en"):
        results = []
        for record in records:
            translated = next(
                (english for korean, english in self.WORDS.items() if korean in record.raw_text),
                record.raw_text,
            )
            results.append(
                TranslationResult(
                    content_id=record.id,
                    original_content=record.raw_text,
                    translated_content=translated,
                )
            )
        return results


def _rows(*texts: str, prefix: str) -> list[ContentRecord]:
    return [
        ContentRecord(id=f"{prefix}{i}", raw_text=text, original_index=i)
        for i, text in enumerate(texts)
    ]


REFERENCE = _rows(
    "Hello, how are you today?",
    "The weather is beautiful today.",
    "Please save your work before closing.",
    prefix="R",
)


def test_align_reorders_shuffled_targets() -> None:
    target = _rows("<b>Save</b> now", "Hello!", "Nice weather", "Extra line", prefix="T")
    comparer = LocalizationComparer(KeywordEmbedder(), options=ComparisonOptions(similarity_threshold=0.9))

    report = comparer.align(REFERENCE, target)

    matched = [row.target_record.id for row in report.alignment.aligned_rows]
    assert matched == ["T1", "T2", "T0"]
    assert [record.id for record in report.alignment.leftover_targets] == ["T3"]
    assert report.display_rows[-1].row_type is RowType.UNMATCHED_TARGET
    assert report.statistics.good_matches == 3
    assert report.summary
    assert {"prepare", "align", "total"} <= set(report.timings_ms)


def test_align_with_translation_shows_original_text() -> None:
    target = _rows("저장 하세요", "안녕하세요", "날씨 좋네요", prefix="K")
    comparer = LocalizationComparer(
        KeywordEmbedder(),
        translator=DictionaryTranslator(),
        options=ComparisonOptions(similarity_threshold=0.9, translate_target=True, source_lang="ko"),
    )

    report = comparer.align(REFERENCE, target)

    first = report.display_rows[0]
    assert first.target_content_id == "K1"
    assert first.target_content == "안녕하세요"
    assert first.translated_content == "hello there"
    assert report.alignment.matched_count == 3


def test_translation_requested_without_translator_warns() -> None:
    comparer = LocalizationComparer(
        KeywordEmbedder(), options=ComparisonOptions(similarity_threshold=0.5, translate_target=True)
    )
    report = comparer.align(REFERENCE, _rows("hello", prefix="T"))
    assert any("no translator" in warning for warning in report.warnings)


def test_short_rows_are_flagged_and_unembedded_rows_warned() -> None:
    comparer = LocalizationComparer(KeywordEmbedder(), options=ComparisonOptions(similarity_threshold=0.5))
    report = comparer.align(REFERENCE, _rows("hi", "<p></p>", prefix="T"))

    assert any("too little or too much text" in warning for warning in report.warnings)
    assert any("no embedding" in warning for warning in report.warnings)
    assert "T1" in [record.id for record in report.alignment.leftover_targets]


def test_demo_row_limit_truncates_inputs() -> None:
    comparer = LocalizationComparer(
        KeywordEmbedder(), options=ComparisonOptions(similarity_threshold=0.5, demo_row_limit=2)
    )
    report = comparer.align(REFERENCE, _rows("hello", "weather", "save", prefix="T"))
    assert report.alignment.total_reference == 2


def test_line_by_line_report() -> None:
    target = _rows("Hello", "Save it", "Weather", "Hello again", prefix="T")
    comparer = LocalizationComparer(KeywordEmbedder(), options=ComparisonOptions(similarity_threshold=0.9))

    report = comparer.line_by_line(REFERENCE, target)

    assert [d.is_good_match for d in report.diagnostics] == [True, False, False, False]
    assert report.diagnostics[1].suggestion.reference_record.id == "R2"
    assert report.trailing_targets == 1
    assert report.with_suggestion == 3
    assert any("Row counts differ" in warning for warning in report.warnings)


def test_compare_files(tmp_path) -> None:
    ref_path = tmp_path / "ref.csv"
    tgt_path = tmp_path / "tgt.csv"
    ref_path.write_text("ContentId,Content\n1,Hello friend\n2,Save the file\n", encoding="utf-8")
    tgt_path.write_text("ContentId,Content\nA,Save it\nB,Hello\n", encoding="utf-8")
    comparer = LocalizationComparer(KeywordEmbedder(), options=ComparisonOptions(similarity_threshold=0.9))

    report = comparer.compare_files(ref_path, tgt_path)

    assert [row.target_content_id for row in report.display_rows] == ["B", "A"]


def test_invalid_threshold_rejected_on_construction() -> None:
    with pytest.raises(InputValidationError):
        LocalizationComparer(KeywordEmbedder(), options=ComparisonOptions(similarity_threshold=2.0))


def test_default_threshold_comes_from_configuration() -> None:
    assert ComparisonOptions().similarity_threshold == pytest.approx(0.5)
