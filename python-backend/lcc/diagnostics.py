"""Line-by-line diagnostic comparison.

Compares ``reference[i]`` with ``target[i]`` directly. When a positional pair
is weak, the whole embedding-bearing reference list is searched for the row
most similar to the target and offered as a suggestion. Suggestions do not
consume anything, so one reference row may be suggested many times.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import structlog

from .alignment import validate_inputs
from .best_match import find_best_match
from .models_lcc import ContentRecord, LineByLineDiagnostic, MatchResult
from .similarity import cosine_similarity, filter_embedded

logger = structlog.get_logger(__name__)


def suggest_reference(
    target_record: ContentRecord,
    embedded_reference: Sequence[ContentRecord],
    threshold: float,
) -> Optional[MatchResult]:
    """Best reference row for ``target_record``, or ``None`` if unscorable.

    The returned result's ``reference_record`` is the suggested reference row
    and ``matched_record`` is the target it was suggested for.
    """
    if not target_record.has_embedding:
        return None
    best = find_best_match(target_record, embedded_reference, threshold)
    if best.matched_record is None:
        return None
    return MatchResult(
        reference_record=best.matched_record,
        matched_record=target_record,
        similarity_score=best.similarity_score,
        is_good_match=best.is_good_match,
    )


def line_by_line(
    reference: Sequence[ContentRecord],
    target: Sequence[ContentRecord],
    threshold: float,
) -> List[LineByLineDiagnostic]:
    """Return one diagnostic per target row, in target order.

    Target rows beyond the end of the reference list have no positional
    partner; they score 0.0 and still receive a suggestion.
    """
    threshold = validate_inputs(reference, target, threshold)
    if len(reference) != len(target):
        logger.warning(
            "line_by_line.length_mismatch",
            reference=len(reference),
            target=len(target),
        )

    embedded_reference = filter_embedded(reference)
    paired = min(len(reference), len(target))
    diagnostics: List[LineByLineDiagnostic] = []

    for position in range(paired):
        reference_record = reference[position]
        target_record = target[position]
        if not (reference_record.has_embedding and target_record.has_embedding):
            diagnostics.append(
                LineByLineDiagnostic(
                    target_record=target_record,
                    reference_record=reference_record,
                )
            )
            continue

        score = cosine_similarity(reference_record.embedding, target_record.embedding)
        is_good = score >= threshold
        suggestion = None
        if not is_good:
            suggestion = suggest_reference(target_record, embedded_reference, threshold)
        diagnostics.append(
            LineByLineDiagnostic(
                target_record=target_record,
                reference_record=reference_record,
                line_score=score,
                is_good_match=is_good,
                suggestion=suggestion,
            )
        )

    for target_record in target[paired:]:
        diagnostics.append(
            LineByLineDiagnostic(
                target_record=target_record,
                suggestion=suggest_reference(target_record, embedded_reference, threshold),
            )
        )

    logger.info(
        "line_by_line.complete",
        paired=paired,
        trailing=len(target) - paired,
        good=sum(1 for diagnostic in diagnostics if diagnostic.is_good_match),
    )
    return diagnostics
