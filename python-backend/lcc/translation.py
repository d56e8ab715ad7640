"""Translation hand-off between target rows and the comparer.

Targets in another language can be translated before embedding so both sides
are compared in one language. Concrete providers live outside this package;
anything with a ``translate_batch`` method satisfies :class:`TranslationProvider`.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Protocol, Sequence

import structlog
from pydantic import BaseModel

from .models_lcc import ContentRecord

logger = structlog.get_logger(__name__)


class TranslationResult(BaseModel):
    content_id: str
    original_content: str = ""
    translated_content: str = ""


class TranslationProvider(Protocol):
    def translate_batch(
        self,
        records: Sequence[ContentRecord],
        source_lang: str,
        target_lang: str = "en",
    ) -> List[TranslationResult]:
        ...


def apply_translations(
    records: Iterable[ContentRecord], results: Iterable[TranslationResult]
) -> List[ContentRecord]:
    """Swap each record's text for its translation.

    ``id`` and ``original_index`` are kept; ``clean_text`` and ``embedding``
    are cleared since they described the old text. Records without a
    translation are returned unchanged.
    """

    translated = {result.content_id: result.translated_content for result in results}
    updated: List[ContentRecord] = []
    missing = 0
    for record in records:
        text = translated.get(record.id)
        if text is None:
            missing += 1
            updated.append(record)
            continue
        updated.append(
            record.model_copy(update={"raw_text": text, "clean_text": "", "embedding": None})
        )
    if missing:
        logger.warning("translation.missing", count=missing)
    return updated


def original_content_map(records: Iterable[ContentRecord]) -> Dict[str, str]:
    return {record.id: record.raw_text for record in records}


def translation_map(results: Iterable[TranslationResult]) -> Dict[str, str]:
    return {result.content_id: result.translated_content for result in results}
