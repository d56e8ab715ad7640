"""Cosine similarity between embedding vectors.

Building the reference x target matrix is the dominant cost of an alignment
run: O(R * T * D) for R reference rows, T target rows and D embedding
dimensions. Each run builds a fresh matrix, so nothing is cached.
"""

from __future__ import annotations

from typing import List, Sequence

import numpy as np
from sklearn.metrics.pairwise import cosine_similarity as _pairwise_cosine

from .errors import DimensionMismatchError
from .models_lcc import ContentRecord

# Rounding leaves a vector compared with its own copy at 1 - 2e-16 or so.
UNIT_TOLERANCE = 1e-9


def _snap_to_unit(values: np.ndarray) -> np.ndarray:
    clipped = np.clip(values, -1.0, 1.0)
    near_unit = np.abs(np.abs(clipped) - 1.0) <= UNIT_TOLERANCE
    return np.where(near_unit, np.sign(clipped), clipped)


def cosine_similarity(vector_a: Sequence[float], vector_b: Sequence[float]) -> float:
    """Return the cosine similarity of two equal-length vectors.

    Accumulates in float64 regardless of the input precision. Returns 0.0 when
    either vector has zero magnitude. Scores within ``UNIT_TOLERANCE`` of +/-1
    are reported as exactly +/-1.

    Raises:
        DimensionMismatchError: If the vectors differ in length.
    """
    array_a = np.asarray(vector_a, dtype=np.float64).ravel()
    array_b = np.asarray(vector_b, dtype=np.float64).ravel()
    if array_a.shape[0] != array_b.shape[0]:
        raise DimensionMismatchError(array_a.shape[0], array_b.shape[0])

    norm_a = float(np.linalg.norm(array_a))
    norm_b = float(np.linalg.norm(array_b))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0

    value = np.dot(array_a, array_b) / (norm_a * norm_b)
    return float(_snap_to_unit(np.asarray(value)))


def filter_embedded(records: Sequence[ContentRecord]) -> List[ContentRecord]:
    """Keep only records that carry an embedding, preserving order."""

    return [record for record in records if record.has_embedding]


def _stack(records: Sequence[ContentRecord], dimension: int | None) -> np.ndarray:
    rows = []
    for record in records:
        vector = record.embedding or []
        if dimension is None:
            dimension = len(vector)
        elif len(vector) != dimension:
            raise DimensionMismatchError(dimension, len(vector))
        rows.append(vector)
    if not rows:
        return np.zeros((0, dimension or 0), dtype=np.float64)
    return np.asarray(rows, dtype=np.float64)


def build_similarity_matrix(
    reference: Sequence[ContentRecord],
    target: Sequence[ContentRecord],
) -> np.ndarray:
    """Compute ``matrix[i][j] = cosine(reference[i], target[j])``.

    Both lists must already be filtered to embedding-bearing records (see
    :func:`filter_embedded`). Every vector across both lists must share one
    dimensionality.

    Returns:
        A float64 array of shape ``(len(reference), len(target))``.
    """
    if not reference or not target:
        return np.zeros((len(reference), len(target)), dtype=np.float64)

    matrix_a = _stack(reference, None)
    matrix_b = _stack(target, matrix_a.shape[1])
    if matrix_a.shape[1] == 0:
        return np.zeros((len(reference), len(target)), dtype=np.float64)

    # zero-magnitude rows normalise to zero vectors and score 0.0
    similarities = _pairwise_cosine(matrix_a, matrix_b)
    return _snap_to_unit(similarities)
