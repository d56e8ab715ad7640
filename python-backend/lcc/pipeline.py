"""End-to-end comparison pipeline for the Localization Content Comparer."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import structlog
from pydantic import BaseModel, Field

from lcc.alignment import build_display_rows, align_records
from lcc.config_loader import get_setting, get_threshold
from lcc.diagnostics import line_by_line
from lcc.embedding import EmbeddingProvider, attach_embeddings
from lcc.errors import validate_threshold
from lcc.io.tabular import read_records
from lcc.models_lcc import (
    AlignmentResult,
    ContentRecord,
    DisplayRow,
    LineByLineDiagnostic,
    MatchingStatistics,
)
from lcc.preprocess.text import clean_records, is_content_valid
from lcc.summarizer import summarise_alignment, summarise_diagnostics, summary_bullets
from lcc.translation import (
    TranslationProvider,
    apply_translations,
    original_content_map,
    translation_map,
)

logger = structlog.get_logger(__name__)


def _default_threshold() -> float:
    return get_threshold("similarity_threshold", 0.5)


def _default_row_limit() -> int:
    return int(get_setting("comparison", "demo_row_limit", 0) or 0)


@dataclass
class ComparisonOptions:
    """High-level options for the comparer."""

    similarity_threshold: float = field(default_factory=_default_threshold)
    demo_row_limit: int = field(default_factory=_default_row_limit)
    translate_target: bool = False
    source_lang: str = "auto"
    batch_size: Optional[int] = None


@dataclass
class PreparedRecords:
    """Records ready for matching plus the text maps display rows need."""

    records: List[ContentRecord]
    original_contents: Dict[str, str] = field(default_factory=dict)
    translations: Dict[str, str] = field(default_factory=dict)


class ComparisonReport(BaseModel):
    alignment: AlignmentResult
    display_rows: List[DisplayRow] = Field(default_factory=list)
    statistics: MatchingStatistics
    summary: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    timings_ms: Dict[str, float] = Field(default_factory=dict)


class LineByLineReport(BaseModel):
    diagnostics: List[LineByLineDiagnostic] = Field(default_factory=list)
    statistics: MatchingStatistics
    trailing_targets: int = 0
    with_suggestion: int = 0
    warnings: List[str] = Field(default_factory=list)
    timings_ms: Dict[str, float] = Field(default_factory=dict)


class LocalizationComparer:
    """Coordinates cleaning, translation, embedding and matching."""

    def __init__(
        self,
        embedder: EmbeddingProvider,
        translator: Optional[TranslationProvider] = None,
        options: Optional[ComparisonOptions] = None,
    ) -> None:
        self.embedder = embedder
        self.translator = translator
        self.options = options or ComparisonOptions()
        validate_threshold(self.options.similarity_threshold)

    def _limit(self, records: Sequence[ContentRecord]) -> List[ContentRecord]:
        limit = self.options.demo_row_limit
        if limit and limit > 0:
            return list(records[:limit])
        return list(records)

    def prepare(
        self,
        records: Sequence[ContentRecord],
        *,
        translate: bool = False,
        label: str = "records",
        warnings: Optional[List[str]] = None,
    ) -> PreparedRecords:
        """Clean, optionally translate, and embed ``records``."""

        warnings = warnings if warnings is not None else []
        records = self._limit(records)
        originals = original_content_map(records)
        translations: Dict[str, str] = {}

        if translate and self.translator is not None:
            results = self.translator.translate_batch(records, self.options.source_lang, "en")
            translations = translation_map(results)
            records = apply_translations(records, results)
        elif translate:
            warnings.append(f"{label}: translation requested but no translator configured")

        records = clean_records(records)
        invalid = [record for record in records if not is_content_valid(record.clean_text)]
        if invalid:
            warnings.append(f"{label}: {len(invalid)} row(s) have too little or too much text")

        records = attach_embeddings(records, self.embedder, self.options.batch_size)
        missing = sum(1 for record in records if not record.has_embedding)
        if missing:
            warnings.append(f"{label}: {missing} row(s) have no embedding and will not be matched")

        return PreparedRecords(
            records=records,
            original_contents=originals if translate else {},
            translations=translations,
        )

    def align(
        self, reference: Sequence[ContentRecord], target: Sequence[ContentRecord]
    ) -> ComparisonReport:
        timings: Dict[str, float] = {}
        warnings: List[str] = []
        start = time.perf_counter()

        prepared_reference = self.prepare(reference, label="reference", warnings=warnings)
        prepared_target = self.prepare(
            target,
            translate=self.options.translate_target,
            label="target",
            warnings=warnings,
        )
        timings["prepare"] = (time.perf_counter() - start) * 1000

        align_start = time.perf_counter()
        result = align_records(
            prepared_reference.records,
            prepared_target.records,
            self.options.similarity_threshold,
        )
        rows = build_display_rows(
            prepared_reference.records,
            result,
            original_contents=prepared_target.original_contents,
            translations=prepared_target.translations,
        )
        timings["align"] = (time.perf_counter() - align_start) * 1000
        timings["total"] = (time.perf_counter() - start) * 1000

        logger.info("pipeline.align", warnings=len(warnings), total_ms=round(timings["total"], 1))
        return ComparisonReport(
            alignment=result,
            display_rows=rows,
            statistics=summarise_alignment(result),
            summary=summary_bullets(result),
            warnings=warnings,
            timings_ms=timings,
        )

    def line_by_line(
        self, reference: Sequence[ContentRecord], target: Sequence[ContentRecord]
    ) -> LineByLineReport:
        timings: Dict[str, float] = {}
        warnings: List[str] = []
        start = time.perf_counter()

        prepared_reference = self.prepare(reference, label="reference", warnings=warnings)
        prepared_target = self.prepare(
            target,
            translate=self.options.translate_target,
            label="target",
            warnings=warnings,
        )
        timings["prepare"] = (time.perf_counter() - start) * 1000

        if len(prepared_reference.records) != len(prepared_target.records):
            warnings.append(
                f"Row counts differ: {len(prepared_reference.records)} reference, "
                f"{len(prepared_target.records)} target"
            )

        match_start = time.perf_counter()
        diagnostics = line_by_line(
            prepared_reference.records,
            prepared_target.records,
            self.options.similarity_threshold,
        )
        timings["match"] = (time.perf_counter() - match_start) * 1000
        timings["total"] = (time.perf_counter() - start) * 1000

        summary = summarise_diagnostics(diagnostics)
        return LineByLineReport(
            diagnostics=diagnostics,
            statistics=summary["statistics"],
            trailing_targets=summary["trailing_targets"],
            with_suggestion=summary["with_suggestion"],
            warnings=warnings,
            timings_ms=timings,
        )

    def compare_files(self, reference_path: str | Path, target_path: str | Path) -> ComparisonReport:
        """Load two ``ContentId,Content`` CSV files and align them."""

        return self.align(read_records(reference_path), read_records(target_path))
