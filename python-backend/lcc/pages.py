"""Multi-page processing: one reference/target file pair per page.

Each page is compared line by line on demand and its result kept in memory,
so revisiting a page does not re-embed its rows.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

import structlog

from .errors import ErrorCategory, ErrorInfo, ErrorSeverity, InputValidationError, LccError
from .io.tabular import read_records
from .models_lcc import LineByLineDiagnostic, MatchingStatistics
from .pipeline import LocalizationComparer

logger = structlog.get_logger(__name__)


class PageStatus(str, Enum):
    """Page processing status."""
    READY = "ready"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"
    CACHED = "cached"


@dataclass
class PageInfo:
    name: str
    reference_path: Path
    target_path: Path
    status: PageStatus = PageStatus.READY
    last_processed: Optional[datetime] = None
    error_message: Optional[str] = None
    progress: int = 0

    @property
    def can_process(self) -> bool:
        return self.status in (PageStatus.READY, PageStatus.ERROR)

    @property
    def display_name(self) -> str:
        return f"{self.name} ({self.reference_path.name} <-> {self.target_path.name})"


@dataclass
class PageStatistics:
    """File row counts plus the line-by-line statistics of one page run."""
    total_reference: int = 0
    total_target: int = 0
    matching: MatchingStatistics = field(default_factory=MatchingStatistics)
    duration_ms: float = 0.0

    @property
    def good_matches(self) -> int:
        return self.matching.good_matches

    @property
    def average_similarity_score(self) -> float:
        return self.matching.average_similarity_score

    @property
    def match_percentage(self) -> float:
        return self.matching.match_percentage


@dataclass
class PageMatchingResult:
    page: PageInfo
    diagnostics: List[LineByLineDiagnostic] = field(default_factory=list)
    statistics: PageStatistics = field(default_factory=PageStatistics)
    processed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_success(self) -> bool:
        return self.page.status in (PageStatus.COMPLETED, PageStatus.CACHED)


def _unknown_page(name: str) -> InputValidationError:
    return InputValidationError(
        ErrorInfo(
            category=ErrorCategory.USER_INPUT,
            severity=ErrorSeverity.MEDIUM,
            user_message=f"Page '{name}' has not been added.",
            technical_details=f"No page registered under {name!r}",
            context={"page": name},
        )
    )


class PageManager:
    """Registers page file pairs and caches their line-by-line results."""

    def __init__(self, comparer: LocalizationComparer) -> None:
        self.comparer = comparer
        self.pages: Dict[str, PageInfo] = {}
        self._cache: Dict[str, PageMatchingResult] = {}

    def add_page(self, name: str, reference_path: str | Path, target_path: str | Path) -> PageInfo:
        page = PageInfo(name=name, reference_path=Path(reference_path), target_path=Path(target_path))
        self.pages[name] = page
        self._cache.pop(name, None)
        return page

    def get_cached_result(self, name: str) -> Optional[PageMatchingResult]:
        return self._cache.get(name)

    def has_cached_result(self, name: str) -> bool:
        return name in self._cache

    def remove_cached_result(self, name: str) -> None:
        self._cache.pop(name, None)
        page = self.pages.get(name)
        if page is not None and page.status in (PageStatus.CACHED, PageStatus.COMPLETED):
            page.status = PageStatus.READY

    def clear_cache(self) -> None:
        self._cache.clear()
        for page in self.pages.values():
            if page.status in (PageStatus.CACHED, PageStatus.COMPLETED):
                page.status = PageStatus.READY

    def process_page(self, name: str) -> PageMatchingResult:
        """Compare one page line by line, or return its cached result.

        A failure marks the page ``error`` with the message and re-raises.
        """
        page = self.pages.get(name)
        if page is None:
            raise _unknown_page(name)

        cached = self._cache.get(name)
        if cached is not None:
            page.status = PageStatus.CACHED
            logger.debug("pages.cache_hit", page=name)
            return cached

        page.status = PageStatus.PROCESSING
        page.error_message = None
        page.progress = 0
        start = time.perf_counter()
        try:
            reference = read_records(page.reference_path)
            target = read_records(page.target_path)
            page.progress = 30
            report = self.comparer.line_by_line(reference, target)
        except LccError as exc:
            page.status = PageStatus.ERROR
            page.error_message = exc.info.user_message
            page.progress = 0
            logger.warning("pages.failed", page=name, error=str(exc))
            raise

        statistics = PageStatistics(
            total_reference=len(reference),
            total_target=len(target),
            matching=report.statistics,
            duration_ms=(time.perf_counter() - start) * 1000,
        )
        page.status = PageStatus.COMPLETED
        page.progress = 100
        page.last_processed = datetime.now(timezone.utc)

        result = PageMatchingResult(page=page, diagnostics=report.diagnostics, statistics=statistics)
        self._cache[name] = result
        logger.info(
            "pages.processed",
            page=name,
            good=statistics.good_matches,
            duration_ms=round(statistics.duration_ms, 1),
        )
        return result

    def cached_summary(self) -> Dict[str, str]:
        return {
            name: (
                f"{result.statistics.good_matches}/{result.statistics.matching.total_reference} pairs match "
                f"({result.statistics.match_percentage:.1f}%)"
            )
            for name, result in self._cache.items()
        }
