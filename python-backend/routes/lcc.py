"""FastAPI router exposing the Localization Content Comparer engine."""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, TypeVar
from uuid import uuid4

import structlog
from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from lcc.alignment import generate_aligned_display
from lcc.config_loader import get_threshold
from lcc.diagnostics import line_by_line
from lcc.errors import InputValidationError, LccError
from lcc.models_lcc import (
    AlignmentResult,
    ContentRecord,
    DisplayRow,
    LineByLineDiagnostic,
    MatchingStatistics,
)
from lcc.similarity import cosine_similarity
from lcc.summarizer import summarise_alignment, summarise_diagnostics, summary_bullets

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/lcc", tags=["localization-content-comparer"])

T = TypeVar("T")


class RecordPayload(BaseModel):
    id: str
    text: str = ""
    embedding: Optional[List[float]] = None


class CompareRequest(BaseModel):
    reference: List[RecordPayload]
    target: List[RecordPayload]
    threshold: Optional[float] = None
    original_contents: Dict[str, str] = Field(default_factory=dict)
    translations: Dict[str, str] = Field(default_factory=dict)


class AlignResponse(BaseModel):
    alignment: AlignmentResult
    display_rows: List[DisplayRow]
    statistics: MatchingStatistics
    summary: List[str]
    trace_id: str


class LineByLineResponse(BaseModel):
    diagnostics: List[LineByLineDiagnostic]
    statistics: MatchingStatistics
    trailing_targets: int
    with_suggestion: int
    trace_id: str


class SimilarityRequest(BaseModel):
    a: List[float]
    b: List[float]


def _to_records(payloads: List[RecordPayload]) -> List[ContentRecord]:
    return [
        ContentRecord(
            id=payload.id,
            raw_text=payload.text,
            clean_text=payload.text,
            original_index=index,
            embedding=payload.embedding,
        )
        for index, payload in enumerate(payloads)
    ]


def _threshold(request: CompareRequest) -> float:
    if request.threshold is not None:
        return request.threshold
    return get_threshold("similarity_threshold", 0.5)


def _run(endpoint: str, action: Callable[[], T]) -> tuple[T, str]:
    trace_id = str(uuid4())
    log = logger.bind(trace_id=trace_id, endpoint=endpoint)
    try:
        return action(), trace_id
    except InputValidationError as exc:
        log.warning("request rejected", reason=exc.info.category.value)
        raise HTTPException(
            status_code=400, detail={**exc.info.to_dict(), "trace_id": trace_id}
        )
    except LccError as exc:
        log.warning("comparison failed", error=str(exc))
        raise HTTPException(
            status_code=422, detail={**exc.info.to_dict(), "trace_id": trace_id}
        )
    except Exception as exc:  # pragma: no cover - unexpected failure
        log.error("comparison failed", error=str(exc))
        raise HTTPException(status_code=500, detail={"message": "Internal error", "trace_id": trace_id})


@router.post("/align", response_model=AlignResponse)
async def align_endpoint(request: CompareRequest) -> AlignResponse:
    reference = _to_records(request.reference)
    target = _to_records(request.target)

    (result, rows), trace_id = _run(
        "align",
        lambda: generate_aligned_display(
            reference,
            target,
            _threshold(request),
            original_contents=request.original_contents,
            translations=request.translations,
        ),
    )
    return AlignResponse(
        alignment=result,
        display_rows=rows,
        statistics=summarise_alignment(result),
        summary=summary_bullets(result),
        trace_id=trace_id,
    )


@router.post("/line-by-line", response_model=LineByLineResponse)
async def line_by_line_endpoint(request: CompareRequest) -> LineByLineResponse:
    reference = _to_records(request.reference)
    target = _to_records(request.target)

    diagnostics, trace_id = _run(
        "line_by_line",
        lambda: line_by_line(reference, target, _threshold(request)),
    )
    summary = summarise_diagnostics(diagnostics)
    return LineByLineResponse(
        diagnostics=diagnostics,
        statistics=summary["statistics"],
        trailing_targets=summary["trailing_targets"],
        with_suggestion=summary["with_suggestion"],
        trace_id=trace_id,
    )


@router.post("/similarity")
async def similarity_endpoint(request: SimilarityRequest) -> Dict[str, object]:
    score, trace_id = _run("similarity", lambda: cosine_similarity(request.a, request.b))
    return {"score": score, "trace_id": trace_id}
