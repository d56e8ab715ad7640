"""Localization Content Comparer package."""

from .alignment import align_records, build_display_rows, generate_aligned_display
from .diagnostics import line_by_line
from .models_lcc import AlignedRow, AlignmentResult, ContentRecord, DisplayRow, LineByLineDiagnostic
from .pipeline import ComparisonOptions, LocalizationComparer
from .similarity import build_similarity_matrix, cosine_similarity

__all__ = [
    "AlignedRow",
    "AlignmentResult",
    "ContentRecord",
    "DisplayRow",
    "LineByLineDiagnostic",
    "ComparisonOptions",
    "LocalizationComparer",
    "align_records",
    "build_display_rows",
    "generate_aligned_display",
    "line_by_line",
    "build_similarity_matrix",
    "cosine_similarity",
]
