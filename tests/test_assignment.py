"""Tests for the greedy one-to-one assignment matcher."""

from pathlib import Path
import sys

import numpy as np
import pytest

sys.path.append(str(Path(__file__).resolve().parents[1] / "python-backend"))

from lcc.assignment import collect_candidates, greedy_assign
from lcc.errors import InputValidationError
from lcc.models_lcc import ContentRecord


def _records(count: int, prefix: str = "r") -> list[ContentRecord]:
    return [
        ContentRecord(id=f"{prefix}{i}", raw_text=f"{prefix} {i}", original_index=i, embedding=[1.0])
        for i in range(count)
    ]


def _pairs(assignment) -> dict[int, tuple[int, float]]:
    return {
        ref: (target.original_index, score)
        for ref, (target, score) in assignment.matches.items()
    }


# ---------------------------------------------------------------------------
# Candidate collection
# ---------------------------------------------------------------------------


def test_candidates_sorted_by_score_descending() -> None:
    matrix = np.array([[0.5, 0.9], [0.7, 0.2]])
    candidates = collect_candidates(matrix, 0.5)
    assert [(c.reference_index, c.target_index) for c in candidates] == [(0, 1), (1, 0), (0, 0)]


def test_candidates_below_threshold_are_dropped() -> None:
    matrix = np.array([[0.49, 0.5]])
    candidates = collect_candidates(matrix, 0.5)
    assert [(c.reference_index, c.target_index) for c in candidates] == [(0, 1)]


def test_candidate_ties_break_on_reference_then_target() -> None:
    matrix = np.array([[0.8, 0.8], [0.8, 0.8]])
    candidates = collect_candidates(matrix, 0.5)
    assert [(c.reference_index, c.target_index) for c in candidates] == [
        (0, 0),
        (0, 1),
        (1, 0),
        (1, 1),
    ]


# ---------------------------------------------------------------------------
# Greedy assignment
# ---------------------------------------------------------------------------


def test_highest_score_wins_contested_target() -> None:
    matrix = np.array([[0.7], [0.95]])
    assignment = greedy_assign(matrix, _records(2), _records(1, "t"), 0.5)
    assert _pairs(assignment) == {1: (0, 0.95)}
    assert assignment.used_targets == {0}


def test_loser_falls_back_to_next_free_target() -> None:
    matrix = np.array([[0.9, 0.8], [0.95, 0.1]])
    assignment = greedy_assign(matrix, _records(2), _records(2, "t"), 0.5)
    assert _pairs(assignment) == {1: (0, 0.95), 0: (1, 0.8)}


def test_each_reference_and_target_used_at_most_once() -> None:
    rng = np.random.default_rng(3)
    matrix = rng.uniform(size=(8, 6))
    assignment = greedy_assign(matrix, _records(8), _records(6, "t"), 0.2)

    targets = [target.original_index for target, _ in assignment.matches.values()]
    assert len(targets) == len(set(targets))
    assert len(assignment) <= 6


def test_ties_are_deterministic() -> None:
    matrix = np.full((3, 3), 0.75)
    first = greedy_assign(matrix, _records(3), _records(3, "t"), 0.5)
    second = greedy_assign(matrix.copy(), _records(3), _records(3, "t"), 0.5)
    assert _pairs(first) == _pairs(second) == {0: (0, 0.75), 1: (1, 0.75), 2: (2, 0.75)}


def test_empty_candidate_list_gives_empty_assignment() -> None:
    matrix = np.array([[0.1, 0.2]])
    assignment = greedy_assign(matrix, _records(1), _records(2, "t"), 0.5)
    assert len(assignment) == 0
    assert assignment.used_targets == set()


def test_threshold_one_only_accepts_exact_duplicates() -> None:
    matrix = np.array([[1.0, 0.999999]])
    assignment = greedy_assign(matrix, _records(1), _records(2, "t"), 1.0)
    assert _pairs(assignment) == {0: (0, 1.0)}


@pytest.mark.parametrize("threshold", [-0.1, 1.1, float("nan"), "high", None])
def test_invalid_threshold_rejected(threshold) -> None:
    with pytest.raises(InputValidationError):
        greedy_assign(np.zeros((1, 1)), _records(1), _records(1, "t"), threshold)


def test_matrix_shape_must_match_records() -> None:
    with pytest.raises(InputValidationError):
        greedy_assign(np.zeros((2, 2)), _records(1), _records(2, "t"), 0.5)
