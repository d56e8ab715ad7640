"""Presentation-facing helpers: quality bands and tabular export."""

from .bands import QualityBand, classify_score, get_band_distribution

__all__ = ["QualityBand", "classify_score", "get_band_distribution"]
