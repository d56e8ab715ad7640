"""Tests for CSV export of display rows and diagnostics."""

from pathlib import Path
import sys

import pandas as pd

sys.path.append(str(Path(__file__).resolve().parents[1] / "python-backend"))

from lcc.alignment import generate_aligned_display
from lcc.delivery.export import (
    DISPLAY_COLUMNS,
    display_rows_to_frame,
    export_display_rows,
    export_line_by_line,
)
from lcc.diagnostics import line_by_line
from lcc.models_lcc import ContentRecord


def _record(index: int, embedding, record_id: str) -> ContentRecord:
    return ContentRecord(id=record_id, raw_text=f"text {record_id}", original_index=index, embedding=embedding)


def _inputs():
    reference = [_record(0, [1.0, 0.0], "R0"), _record(1, [0.0, 1.0], "R1")]
    target = [_record(0, [1.0, 0.0], "T0"), _record(1, [-1.0, 0.0], "T1")]
    return reference, target


def test_frame_mirrors_display_rows() -> None:
    reference, target = _inputs()
    _, rows = generate_aligned_display(reference, target, 0.5)

    frame = display_rows_to_frame(rows)

    assert list(frame.columns) == DISPLAY_COLUMNS
    assert len(frame) == len(rows) == 3
    assert list(frame["Status"]) == ["Matched", "Missing", "Unmatched Target"]
    assert list(frame["Row Type"]) == ["ReferenceAligned", "ReferenceAligned", "UnmatchedTarget"]
    assert list(frame["Target ContentId"]) == ["T0", "", "T1"]
    assert frame["Ref Line"].isna().tolist() == [False, False, True]


def test_export_display_rows_writes_csv(tmp_path) -> None:
    reference, target = _inputs()
    _, rows = generate_aligned_display(reference, target, 0.5)

    path = export_display_rows(tmp_path / "aligned.csv", rows)
    frame = pd.read_csv(path, dtype=str, keep_default_na=False)

    assert list(frame.columns) == DISPLAY_COLUMNS
    assert list(frame["Quality"]) == ["High", "Poor", "Poor"]
    assert list(frame["Target Line"]) == ["1", "", "2"]


def test_export_line_by_line_has_suggestion_column(tmp_path) -> None:
    reference = [_record(0, [1.0, 0.0], "R0"), _record(1, [0.0, 1.0], "R1")]
    target = [_record(0, [0.0, 1.0], "T0"), _record(1, [0.0, 1.0], "T1")]

    path = export_line_by_line(tmp_path / "lbl.csv", line_by_line(reference, target, 0.5))
    frame = pd.read_csv(path, dtype=str, keep_default_na=False)

    assert "Suggested Alternative" in frame.columns
    assert frame.loc[0, "Suggested Alternative"].startswith("Ref line 2 (R1)")
    assert frame.loc[1, "Suggested Alternative"] == ""
    assert list(frame["Status"]) == ["Check", "Good"]
