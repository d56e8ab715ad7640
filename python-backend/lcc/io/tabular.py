"""Read and write ``ContentId,Content`` CSV files."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

import pandas as pd
import structlog

from ..errors import file_not_found, invalid_tabular_format
from ..models_lcc import ContentRecord

logger = structlog.get_logger(__name__)

ID_COLUMN = "ContentId"
CONTENT_COLUMN = "Content"


def read_records(path: str | Path) -> List[ContentRecord]:
    """Load a localization CSV, numbering rows in file order from 0."""

    path = Path(path)
    if not path.exists():
        raise file_not_found(path)

    try:
        frame = pd.read_csv(path, dtype=str, keep_default_na=False, encoding="utf-8-sig")
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
        raise invalid_tabular_format(path, str(exc)) from exc

    frame.columns = [str(column).strip() for column in frame.columns]
    missing = [c for c in (ID_COLUMN, CONTENT_COLUMN) if c not in frame.columns]
    if missing:
        raise invalid_tabular_format(path, f"missing columns {missing}")

    records = [
        ContentRecord(
            id=str(content_id).strip(),
            raw_text=str(content).strip(),
            original_index=index,
        )
        for index, (content_id, content) in enumerate(
            zip(frame[ID_COLUMN], frame[CONTENT_COLUMN])
        )
    ]
    logger.debug("tabular.read", path=str(path), rows=len(records))
    return records


def write_records(path: str | Path, records: Iterable[ContentRecord]) -> Path:
    path = Path(path)
    frame = pd.DataFrame(
        [{ID_COLUMN: record.id, CONTENT_COLUMN: record.raw_text} for record in records],
        columns=[ID_COLUMN, CONTENT_COLUMN],
    )
    frame.to_csv(path, index=False, encoding="utf-8")
    logger.debug("tabular.write", path=str(path), rows=len(frame))
    return path
