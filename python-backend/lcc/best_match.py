"""Sequential best-match mode.

Each reference row, in order, takes the most similar target that no earlier
reference has claimed. Unlike :mod:`lcc.alignment` this is order dependent:
an early reference can take a target that a later one would have scored
higher on. It backs the quick report and the reordered target file.
"""

from __future__ import annotations

from typing import AbstractSet, Iterable, List, Optional, Sequence

import structlog

from .alignment import validate_inputs
from .models_lcc import ContentRecord, MatchResult
from .similarity import cosine_similarity

logger = structlog.get_logger(__name__)

PLACEHOLDER_INDEX = -1


def find_best_match(
    record: ContentRecord,
    candidates: Iterable[ContentRecord],
    threshold: float,
    used: AbstractSet[int] = frozenset(),
) -> MatchResult:
    """Return the candidate most similar to ``record``.

    Candidates whose ``original_index`` is in ``used`` or that lack an
    embedding are skipped. On equal scores the earlier candidate wins. When
    nothing can be scored the result has no match and a score of 0.0.
    """
    if not record.has_embedding:
        return MatchResult(reference_record=record)

    best_score: Optional[float] = None
    best: Optional[ContentRecord] = None
    for candidate in candidates:
        if not candidate.has_embedding or candidate.original_index in used:
            continue
        score = cosine_similarity(record.embedding, candidate.embedding)
        if best_score is None or score > best_score:
            best_score = score
            best = candidate

    if best is None or best_score is None:
        return MatchResult(reference_record=record)
    return MatchResult(
        reference_record=record,
        matched_record=best,
        similarity_score=best_score,
        is_good_match=best_score >= threshold,
    )


def find_matches(
    reference: Sequence[ContentRecord],
    target: Sequence[ContentRecord],
    threshold: float,
) -> List[MatchResult]:
    """Find a best match for every reference row, in reference order.

    A target is consumed only by a good match (score >= ``threshold``); a weak
    best guess leaves it available to later references. References without an
    embedding get an empty result.
    """
    threshold = validate_inputs(reference, target, threshold)

    used: set[int] = set()
    results: List[MatchResult] = []
    for record in reference:
        result = find_best_match(record, target, threshold, used)
        if result.matched_record is not None and result.is_good_match:
            used.add(result.matched_record.original_index)
        results.append(result)

    results.sort(key=lambda result: result.reference_record.original_index)
    logger.info(
        "best_match.complete",
        reference=len(reference),
        target=len(target),
        good=sum(1 for result in results if result.is_good_match),
    )
    return results


def create_reordered_target_list(results: Iterable[MatchResult]) -> List[ContentRecord]:
    """Target records rearranged into reference order.

    Rows without a good match become placeholders so positions still line
    up with the reference file.
    """
    reordered: List[ContentRecord] = []
    for result in sorted(results, key=lambda r: r.reference_record.original_index):
        if result.matched_record is not None and result.is_good_match:
            reordered.append(result.matched_record)
            continue
        reference = result.reference_record
        reordered.append(
            ContentRecord(
                id=f"UNMATCHED_{reference.id}",
                raw_text=f"[NO MATCH FOUND FOR: {reference.raw_text}]",
                original_index=PLACEHOLDER_INDEX,
            )
        )
    return reordered
