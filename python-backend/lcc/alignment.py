"""Gap-aware alignment of a target list against a reference list.

The assembler walks the reference list in order and emits one row per
reference record, matched or gap, then appends every target record the
assignment left unused. Records are looked up by ``original_index`` only:
records are routinely rebuilt (cleaning, translation, embedding) and two
logically identical rows are frequently different objects.
"""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Sequence, Tuple

import structlog

from .assignment import Assignment, AssignmentStrategy, greedy_assign
from .delivery.bands import QualityBand, classify_score
from .errors import (
    ErrorCategory,
    ErrorInfo,
    ErrorSeverity,
    InputValidationError,
    empty_records,
    validate_threshold,
)
from .models_lcc import AlignedRow, AlignmentResult, ContentRecord, DisplayRow, RowType
from .similarity import build_similarity_matrix, filter_embedded

logger = structlog.get_logger(__name__)


def _ensure_unique_indices(records: Sequence[ContentRecord], side: str) -> None:
    seen: set[int] = set()
    for record in records:
        if record.original_index in seen:
            raise InputValidationError(
                ErrorInfo(
                    category=ErrorCategory.DATA_VALIDATION,
                    severity=ErrorSeverity.HIGH,
                    user_message=f"The {side} list contains duplicate rows.",
                    technical_details=(
                        f"Duplicate original_index {record.original_index} in {side} records"
                    ),
                    suggested_action="Reload the file so every row has its own position.",
                    context={"side": side, "original_index": record.original_index},
                )
            )
        seen.add(record.original_index)


def validate_inputs(
    reference: Optional[Sequence[ContentRecord]],
    target: Optional[Sequence[ContentRecord]],
    threshold: float,
) -> float:
    """Reject unusable inputs before any computation; return the threshold."""

    if not reference:
        raise empty_records("reference")
    if not target:
        raise empty_records("target")
    _ensure_unique_indices(reference, "reference")
    _ensure_unique_indices(target, "target")
    return validate_threshold(threshold)


def assemble_alignment(
    reference: Sequence[ContentRecord],
    target: Sequence[ContentRecord],
    embedded_reference: Sequence[ContentRecord],
    assignment: Assignment,
) -> AlignmentResult:
    """Turn a filtered-list assignment into reference-ordered rows.

    Args:
        reference: The full reference list, in source order.
        target: The full target list, in source order.
        embedded_reference: The embedding-filtered reference list the
            assignment was computed against.
        assignment: Accepted pairs keyed by ``embedded_reference`` position.
    """
    filtered_position: Dict[int, int] = {
        record.original_index: position
        for position, record in enumerate(embedded_reference)
    }

    aligned_rows: List[AlignedRow] = []
    for reference_index, record in enumerate(reference):
        position = filtered_position.get(record.original_index)
        match = assignment.get(position) if position is not None else None
        if match is None:
            aligned_rows.append(AlignedRow(reference_index=reference_index))
            continue
        target_record, score = match
        aligned_rows.append(
            AlignedRow(
                reference_index=reference_index,
                target_record=target_record,
                score=score,
            )
        )

    used = assignment.used_target_original_indices()
    leftover_targets = sorted(
        (record for record in target if record.original_index not in used),
        key=lambda record: record.original_index,
    )

    matched_count = sum(1 for row in aligned_rows if row.has_match)
    return AlignmentResult(
        aligned_rows=aligned_rows,
        leftover_targets=leftover_targets,
        total_reference=len(reference),
        matched_count=matched_count,
        missing_count=len(aligned_rows) - matched_count,
        leftover_count=len(leftover_targets),
    )


def align_records(
    reference: Sequence[ContentRecord],
    target: Sequence[ContentRecord],
    threshold: float,
    *,
    matcher: AssignmentStrategy = greedy_assign,
) -> AlignmentResult:
    """Align ``target`` against ``reference``.

    Records without an embedding never take part in scoring: reference ones
    become gap rows and target ones become leftovers.

    Raises:
        InputValidationError: Empty lists, duplicate ``original_index`` values
            or a threshold outside ``[0, 1]``.
        DimensionMismatchError: Embeddings of different lengths.
    """
    threshold = validate_inputs(reference, target, threshold)

    embedded_reference = filter_embedded(reference)
    embedded_target = filter_embedded(target)
    matrix = build_similarity_matrix(embedded_reference, embedded_target)
    assignment = matcher(matrix, embedded_reference, embedded_target, threshold)

    result = assemble_alignment(reference, target, embedded_reference, assignment)
    logger.info(
        "alignment.complete",
        reference=result.total_reference,
        target=len(target),
        embedded_reference=len(embedded_reference),
        embedded_target=len(embedded_target),
        matched=result.matched_count,
        missing=result.missing_count,
        leftover=result.leftover_count,
        threshold=threshold,
    )
    return result


def build_display_rows(
    reference: Sequence[ContentRecord],
    result: AlignmentResult,
    *,
    original_contents: Optional[Mapping[str, str]] = None,
    translations: Optional[Mapping[str, str]] = None,
) -> List[DisplayRow]:
    """Build the rows shown in a viewer and written by the export.

    Reference-aligned rows come first in reference order, followed by the
    leftover targets by ascending ``original_index``.

    Args:
        reference: The reference list ``result`` was computed from.
        result: Output of :func:`align_records`.
        original_contents: Target id -> untranslated text. When a target was
            translated before embedding, this restores the original wording.
        translations: Target id -> translated text, shown alongside.
    """
    original_contents = original_contents or {}
    translations = translations or {}
    rows: List[DisplayRow] = []

    for aligned in result.aligned_rows:
        reference_record = reference[aligned.reference_index]
        target_record = aligned.target_record
        target_content = ""
        translated_content = ""
        if target_record is not None:
            target_content = original_contents.get(target_record.id, target_record.raw_text)
            translated_content = translations.get(target_record.id, "")
        rows.append(
            DisplayRow(
                row_type=RowType.REFERENCE_ALIGNED,
                ref_line_number=aligned.reference_index + 1,
                ref_content=reference_record.raw_text,
                target_line_number=(
                    target_record.original_index + 1 if target_record is not None else None
                ),
                target_content=target_content,
                translated_content=translated_content,
                target_content_id=target_record.id if target_record is not None else "",
                status=aligned.status,
                similarity_score=aligned.score,
                quality=classify_score(aligned.score),
            )
        )

    for leftover in sorted(result.leftover_targets, key=lambda record: record.original_index):
        rows.append(
            DisplayRow(
                row_type=RowType.UNMATCHED_TARGET,
                ref_line_number=None,
                ref_content="",
                target_line_number=leftover.original_index + 1,
                target_content=original_contents.get(leftover.id, leftover.raw_text),
                translated_content=translations.get(leftover.id, ""),
                target_content_id=leftover.id,
                status="Unmatched Target",
                similarity_score=None,
                quality=QualityBand.POOR,
            )
        )

    return rows


def generate_aligned_display(
    reference: Sequence[ContentRecord],
    target: Sequence[ContentRecord],
    threshold: float,
    *,
    original_contents: Optional[Mapping[str, str]] = None,
    translations: Optional[Mapping[str, str]] = None,
    matcher: AssignmentStrategy = greedy_assign,
) -> Tuple[AlignmentResult, List[DisplayRow]]:
    """Run one alignment and derive its display rows from the same result."""

    result = align_records(reference, target, threshold, matcher=matcher)
    rows = build_display_rows(
        reference,
        result,
        original_contents=original_contents,
        translations=translations,
    )
    return result, rows
