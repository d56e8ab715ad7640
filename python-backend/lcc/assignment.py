"""Greedy one-to-one assignment of reference rows to target rows.

This is a heuristic for maximum-weight bipartite matching, not the optimal
(Hungarian) solution. Candidates are visited best score first, so the
highest-scoring pair always wins a contested slot. Any strategy with the
same signature as :func:`greedy_assign` can replace it without touching the
assembler.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Sequence, Set, Tuple

import numpy as np
import structlog

from .errors import ErrorCategory, ErrorInfo, ErrorSeverity, InputValidationError, validate_threshold
from .models_lcc import ContentRecord

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ScoredPair:
    """A candidate pairing between filtered-list indices."""

    reference_index: int
    target_index: int
    score: float


@dataclass
class Assignment:
    """Accepted pairs keyed by index into the embedding-filtered reference list.

    At most one entry per reference index and at most one use of any target.
    """

    matches: Dict[int, Tuple[ContentRecord, float]] = field(default_factory=dict)
    used_targets: Set[int] = field(default_factory=set)

    def __len__(self) -> int:
        return len(self.matches)

    def get(self, reference_index: int) -> Tuple[ContentRecord, float] | None:
        return self.matches.get(reference_index)

    def used_target_original_indices(self) -> Set[int]:
        return {target.original_index for target, _ in self.matches.values()}


AssignmentStrategy = Callable[
    [np.ndarray, Sequence[ContentRecord], Sequence[ContentRecord], float],
    Assignment,
]


def collect_candidates(matrix: np.ndarray, threshold: float) -> List[ScoredPair]:
    """Return every cell scoring at least ``threshold``, best first.

    Ties keep row-major order: lower reference index, then lower target index.
    """
    if matrix.size == 0:
        return []
    rows, cols = np.nonzero(matrix >= threshold)
    candidates = [
        ScoredPair(reference_index=int(i), target_index=int(j), score=float(matrix[i, j]))
        for i, j in zip(rows, cols)
    ]
    candidates.sort(key=lambda c: (-c.score, c.reference_index, c.target_index))
    return candidates


def greedy_assign(
    matrix: np.ndarray,
    reference: Sequence[ContentRecord],
    target: Sequence[ContentRecord],
    threshold: float,
) -> Assignment:
    """Accept candidate pairs greedily, skipping any that reuse a row.

    Args:
        matrix: Similarity matrix of shape ``(len(reference), len(target))``.
        reference: Embedding-filtered reference records.
        target: Embedding-filtered target records.
        threshold: Minimum score for a pair to be considered, in ``[0, 1]``.

    Returns:
        The accepted :class:`Assignment`. An empty candidate list yields an
        empty assignment.
    """
    threshold = validate_threshold(threshold)
    matrix = np.asarray(matrix, dtype=np.float64)
    if matrix.ndim != 2 or matrix.shape != (len(reference), len(target)):
        raise InputValidationError(
            ErrorInfo(
                category=ErrorCategory.DATA_VALIDATION,
                severity=ErrorSeverity.HIGH,
                user_message="Similarity matrix does not match the record lists.",
                technical_details=(
                    f"Matrix shape {matrix.shape} != ({len(reference)}, {len(target)})"
                ),
            )
        )

    candidates = collect_candidates(matrix, threshold)
    assignment = Assignment()

    for candidate in candidates:
        if candidate.reference_index in assignment.matches:
            continue
        if candidate.target_index in assignment.used_targets:
            continue
        assignment.matches[candidate.reference_index] = (
            target[candidate.target_index],
            candidate.score,
        )
        assignment.used_targets.add(candidate.target_index)

    logger.debug(
        "greedy_assign.complete",
        candidates=len(candidates),
        accepted=len(assignment),
        threshold=threshold,
    )
    return assignment
