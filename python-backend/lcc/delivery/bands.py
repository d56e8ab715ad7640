"""Quality band configuration for display and export.

Single source of truth for the score thresholds and band colours, so the
colour-coding in a viewer and the counts in a report never disagree.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional


class QualityBand(str, Enum):
    """Ordinal quality of a similarity score, lowest first."""

    POOR = "Poor"
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"

    @property
    def rank(self) -> int:
        return _RANKS[self]


_RANKS = {
    QualityBand.POOR: 0,
    QualityBand.LOW: 1,
    QualityBand.MEDIUM: 2,
    QualityBand.HIGH: 3,
}


@dataclass(frozen=True)
class BandConfig:
    """Configuration for a quality band."""

    band: QualityBand
    label: str
    min_score: float  # inclusive
    color: str  # CSS colour for viewers and spreadsheet exports


# Ordered from highest to lowest; the first band whose floor is reached wins.
QUALITY_BANDS: List[BandConfig] = [
    BandConfig(band=QualityBand.HIGH, label="High", min_score=0.8, color="#C6EFCE"),
    BandConfig(band=QualityBand.MEDIUM, label="Medium", min_score=0.6, color="#FFEB9C"),
    BandConfig(band=QualityBand.LOW, label="Low", min_score=0.4, color="#F8CBAD"),
    BandConfig(band=QualityBand.POOR, label="Poor", min_score=float("-inf"), color="#FFC7CE"),
]


def get_band_config(score: Optional[float]) -> BandConfig:
    """Get the band configuration for a similarity score.

    Args:
        score: Similarity score, or ``None`` when there is no pairing.

    Returns:
        BandConfig for the appropriate band. ``None`` and NaN map to Poor.
    """
    if score is None:
        return QUALITY_BANDS[-1]

    for band_config in QUALITY_BANDS:
        if score >= band_config.min_score:
            return band_config

    return QUALITY_BANDS[-1]


def classify_score(score: Optional[float]) -> QualityBand:
    """Map a score (or ``None``) to its :class:`QualityBand`."""

    return get_band_config(score).band


def get_band_distribution(scores: Iterable[Optional[float]]) -> Dict[QualityBand, int]:
    """Count scores per band; every band is present in the result."""

    distribution = {band.band: 0 for band in QUALITY_BANDS}
    for score in scores:
        distribution[classify_score(score)] += 1
    return distribution
