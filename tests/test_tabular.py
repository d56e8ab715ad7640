"""Tests for CSV reading and writing."""

from pathlib import Path
import sys

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1] / "python-backend"))

from lcc.errors import ErrorCategory, InputValidationError, LccError
from lcc.io.tabular import read_records, write_records
from lcc.models_lcc import ContentRecord


def test_read_assigns_original_index_in_file_order(tmp_path) -> None:
    path = tmp_path / "ref.csv"
    path.write_text('ContentId,Content\nb2,"Hello, world"\na1, Bye \n', encoding="utf-8")

    records = read_records(path)

    assert [(r.id, r.raw_text, r.original_index) for r in records] == [
        ("b2", "Hello, world", 0),
        ("a1", "Bye", 1),
    ]


def test_read_keeps_na_like_strings(tmp_path) -> None:
    path = tmp_path / "ref.csv"
    path.write_text("ContentId,Content\nNA,None\n2,\n", encoding="utf-8")

    records = read_records(path)

    assert records[0].id == "NA"
    assert records[0].raw_text == "None"
    assert records[1].raw_text == ""


def test_read_handles_utf8_bom(tmp_path) -> None:
    path = tmp_path / "ref.csv"
    path.write_bytes("ContentId,Content\n1,안녕\n".encode("utf-8-sig"))
    assert read_records(path)[0].raw_text == "안녕"


def test_missing_file_is_file_access_error(tmp_path) -> None:
    with pytest.raises(LccError) as excinfo:
        read_records(tmp_path / "missing.csv")
    assert excinfo.value.info.category == ErrorCategory.FILE_ACCESS


def test_missing_columns_rejected(tmp_path) -> None:
    path = tmp_path / "bad.csv"
    path.write_text("Key,Text\n1,hello\n", encoding="utf-8")
    with pytest.raises(InputValidationError):
        read_records(path)


def test_write_then_read(tmp_path) -> None:
    path = tmp_path / "out.csv"
    write_records(
        path,
        [
            ContentRecord(id="1", raw_text="first, with comma", original_index=0),
            ContentRecord(id="UNMATCHED_2", raw_text="[NO MATCH FOUND FOR: x]", original_index=-1),
        ],
    )

    assert path.read_text(encoding="utf-8").splitlines()[0] == "ContentId,Content"
    records = read_records(path)
    assert [r.id for r in records] == ["1", "UNMATCHED_2"]
    assert records[0].raw_text == "first, with comma"
