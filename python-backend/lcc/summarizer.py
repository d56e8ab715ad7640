"""Generate factual summaries for comparison results."""

from __future__ import annotations

from typing import Dict, List, Sequence

from .delivery.bands import QualityBand, get_band_distribution
from .models_lcc import AlignmentResult, LineByLineDiagnostic, MatchingStatistics, MatchResult


def _percentage(part: int, whole: int) -> float:
    return part / whole * 100 if whole > 0 else 0.0


def _statistics(scores: Sequence[float], good: int) -> MatchingStatistics:
    distribution = get_band_distribution(scores)
    return MatchingStatistics(
        total_reference=len(scores),
        good_matches=good,
        high_quality=distribution[QualityBand.HIGH],
        medium_quality=distribution[QualityBand.MEDIUM],
        low_quality=distribution[QualityBand.LOW],
        poor_quality=distribution[QualityBand.POOR],
        match_percentage=_percentage(good, len(scores)),
        average_similarity_score=sum(scores) / len(scores) if scores else 0.0,
    )


def get_matching_statistics(results: Sequence[MatchResult]) -> MatchingStatistics:
    """Counts over sequential best-match results.

    Every result counts toward the average, including ones with no match.
    """

    scores = [result.similarity_score for result in results]
    good = sum(1 for result in results if result.is_good_match)
    return _statistics(scores, good)


def summarise_alignment(result: AlignmentResult) -> MatchingStatistics:
    """Statistics for a gap-aware alignment.

    Gap rows count as Poor in the band distribution but are left out of the
    average, which covers matched rows only.
    """

    scores = [row.score if row.score is not None else 0.0 for row in result.aligned_rows]
    matched = [row.score for row in result.aligned_rows if row.score is not None]
    stats = _statistics(scores, result.matched_count)
    stats.average_similarity_score = sum(matched) / len(matched) if matched else 0.0
    return stats


def summarise_diagnostics(diagnostics: Sequence[LineByLineDiagnostic]) -> Dict[str, object]:
    """Statistics for a line-by-line run.

    Counts, bands and the average cover positional pairs only; trailing
    target rows are reported separately.
    """

    paired = [diagnostic for diagnostic in diagnostics if diagnostic.reference_record is not None]
    scores = [diagnostic.line_score for diagnostic in paired]
    good = sum(1 for diagnostic in paired if diagnostic.is_good_match)
    stats = _statistics(scores, good)
    return {
        "statistics": stats,
        "trailing_targets": len(diagnostics) - len(paired),
        "with_suggestion": sum(1 for d in diagnostics if d.suggestion is not None),
    }


def summary_bullets(result: AlignmentResult) -> List[str]:
    """Return a list of neutral bullet summaries."""

    stats = summarise_alignment(result)
    bullets = [
        f"{result.matched_count} of {result.total_reference} reference rows matched "
        f"({stats.match_percentage:.1f}%)",
    ]
    if result.missing_count:
        bullets.append(f"{result.missing_count} reference rows have no translation")
    if result.leftover_count:
        bullets.append(f"{result.leftover_count} target rows did not match any reference row")
    if result.matched_count:
        bullets.append(
            f"Average matched similarity {stats.average_similarity_score:.2f}; "
            f"{stats.high_quality} high, {stats.medium_quality} medium, {stats.low_quality} low"
        )
    return bullets
