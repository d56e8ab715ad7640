"""Data models for the Localization Content Comparer."""

from __future__ import annotations

from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .delivery.bands import QualityBand, classify_score

MatchStatus = Literal["Matched", "Missing", "Unmatched Target"]


class ContentRecord(BaseModel):
    """One row of a reference or target list.

    ``original_index`` is the record's position in its source list and is the
    only identity used for membership and ordering. Records are immutable;
    attaching ``clean_text`` or ``embedding`` yields a new object via
    ``model_copy(update=...)`` that keeps the same ``original_index``.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    raw_text: str
    clean_text: str = ""
    original_index: int
    embedding: Optional[List[float]] = None

    @property
    def has_embedding(self) -> bool:
        return self.embedding is not None


class AlignedRow(BaseModel):
    """One reference position in the aligned output; a gap when unmatched."""

    reference_index: int
    target_record: Optional[ContentRecord] = None
    score: Optional[float] = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def has_match(self) -> bool:
        return self.target_record is not None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def status(self) -> MatchStatus:
        return "Matched" if self.has_match else "Missing"


class AlignmentResult(BaseModel):
    """Reference-ordered rows plus target records nothing was paired with."""

    aligned_rows: List[AlignedRow] = Field(default_factory=list)
    leftover_targets: List[ContentRecord] = Field(default_factory=list)
    total_reference: int = 0
    matched_count: int = 0
    missing_count: int = 0
    leftover_count: int = 0


class RowType(str, Enum):
    REFERENCE_ALIGNED = "ReferenceAligned"
    UNMATCHED_TARGET = "UnmatchedTarget"


class DisplayRow(BaseModel):
    """Presentation-ready row shared by the interactive view and the export."""

    row_type: RowType
    ref_line_number: Optional[int] = None
    ref_content: str = ""
    target_line_number: Optional[int] = None
    target_content: str = ""
    translated_content: str = ""
    target_content_id: str = ""
    status: MatchStatus
    similarity_score: Optional[float] = None
    quality: QualityBand = QualityBand.POOR


class MatchResult(BaseModel):
    """Best candidate found for a single record."""

    reference_record: ContentRecord
    matched_record: Optional[ContentRecord] = None
    similarity_score: float = 0.0
    is_good_match: bool = False

    @computed_field  # type: ignore[prop-decorator]
    @property
    def quality(self) -> QualityBand:
        return classify_score(self.similarity_score)


class LineByLineDiagnostic(BaseModel):
    """Positional comparison of one target row, with an optional suggestion."""

    target_record: ContentRecord
    reference_record: Optional[ContentRecord] = None
    line_score: float = 0.0
    is_good_match: bool = False
    suggestion: Optional[MatchResult] = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def quality(self) -> QualityBand:
        return classify_score(self.line_score)


class MatchingStatistics(BaseModel):
    """Summary counts for reporting."""

    total_reference: int = 0
    good_matches: int = 0
    high_quality: int = 0
    medium_quality: int = 0
    low_quality: int = 0
    poor_quality: int = 0
    match_percentage: float = 0.0
    average_similarity_score: float = 0.0
