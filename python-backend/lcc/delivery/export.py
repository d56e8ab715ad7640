"""Spreadsheet exports built from the same rows shown to interactive callers."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pandas as pd
import structlog

from ..models_lcc import DisplayRow, LineByLineDiagnostic, MatchResult

logger = structlog.get_logger(__name__)

DISPLAY_COLUMNS = [
    "Target ContentId",
    "Target Content",
    "Translated Content",
    "Status",
    "Similarity Score",
    "Quality",
    "Row Type",
    "Ref Line",
    "Target Line",
]

LINE_BY_LINE_COLUMNS = [
    "Target Line",
    "Target ContentId",
    "Target Content",
    "Ref ContentId",
    "Ref Content",
    "Similarity Score",
    "Quality",
    "Status",
    "Suggested Alternative",
]


def _score(value: Optional[float]) -> Optional[float]:
    return round(value, 4) if value is not None else None


def display_rows_to_frame(rows: Sequence[DisplayRow]) -> pd.DataFrame:
    records: List[Dict[str, object]] = [
        {
            "Target ContentId": row.target_content_id,
            "Target Content": row.target_content,
            "Translated Content": row.translated_content,
            "Status": row.status,
            "Similarity Score": _score(row.similarity_score),
            "Quality": row.quality.value,
            "Row Type": row.row_type.value,
            "Ref Line": row.ref_line_number,
            "Target Line": row.target_line_number,
        }
        for row in rows
    ]
    frame = pd.DataFrame(records, columns=DISPLAY_COLUMNS)
    # nullable ints so missing line numbers don't turn the column into floats
    frame["Ref Line"] = pd.array([row.ref_line_number for row in rows], dtype="Int64")
    frame["Target Line"] = pd.array([row.target_line_number for row in rows], dtype="Int64")
    return frame


def _describe_suggestion(suggestion: Optional[MatchResult]) -> str:
    if suggestion is None:
        return ""
    reference = suggestion.reference_record
    return (
        f"Ref line {reference.original_index + 1} ({reference.id}) "
        f"score {suggestion.similarity_score:.3f}"
    )


def diagnostics_to_frame(diagnostics: Sequence[LineByLineDiagnostic]) -> pd.DataFrame:
    records: List[Dict[str, object]] = []
    for diagnostic in diagnostics:
        reference = diagnostic.reference_record
        if reference is None:
            status = "No Reference"
        else:
            status = "Good" if diagnostic.is_good_match else "Check"
        records.append(
            {
                "Target Line": diagnostic.target_record.original_index + 1,
                "Target ContentId": diagnostic.target_record.id,
                "Target Content": diagnostic.target_record.raw_text,
                "Ref ContentId": reference.id if reference is not None else "",
                "Ref Content": reference.raw_text if reference is not None else "",
                "Similarity Score": _score(diagnostic.line_score),
                "Quality": diagnostic.quality.value,
                "Status": status,
                "Suggested Alternative": _describe_suggestion(diagnostic.suggestion),
            }
        )
    return pd.DataFrame(records, columns=LINE_BY_LINE_COLUMNS)


def export_display_rows(path: str | Path, rows: Sequence[DisplayRow]) -> Path:
    """Write aligned display rows to ``path`` as CSV."""

    path = Path(path)
    display_rows_to_frame(rows).to_csv(path, index=False, encoding="utf-8")
    logger.info("export.display_rows", path=str(path), rows=len(rows))
    return path


def export_line_by_line(path: str | Path, diagnostics: Sequence[LineByLineDiagnostic]) -> Path:
    """Write line-by-line diagnostics to ``path`` as CSV."""

    path = Path(path)
    diagnostics_to_frame(diagnostics).to_csv(path, index=False, encoding="utf-8")
    logger.info("export.line_by_line", path=str(path), rows=len(diagnostics))
    return path
