"""Text cleaning applied before embedding generation."""

from __future__ import annotations

from typing import Iterable, List

import regex as re
from bs4 import BeautifulSoup

from ..config_loader import get_setting
from ..models_lcc import ContentRecord

WHITESPACE_REGEX = re.compile(r"\s+")
# letters, digits, marks and underscore via \w, plus Han and Hangul blocks
SPECIAL_CHARS_REGEX = re.compile(r"[^\w\s\p{Han}\p{Hangul}]")


def strip_html(raw: str) -> str:
    """Return the visible text of ``raw`` with entities decoded."""

    if "<" not in raw and "&" not in raw:
        return raw
    soup = BeautifulSoup(raw, "html.parser")
    return soup.get_text(" ")


def clean_text(raw: str | None) -> str:
    """Clean a raw cell into text suitable for an embedding request."""

    if raw is None or not raw.strip():
        return ""

    text = raw
    if get_setting("preprocessing", "strip_html_tags", True):
        text = strip_html(text)
    if get_setting("preprocessing", "normalize_whitespace", True):
        text = WHITESPACE_REGEX.sub(" ", text).strip()
    if get_setting("preprocessing", "remove_special_characters", True):
        text = SPECIAL_CHARS_REGEX.sub(" ", text)
        text = WHITESPACE_REGEX.sub(" ", text)
    return text.strip()


def is_content_valid(text: str | None) -> bool:
    """True when cleaned text is non-blank and within the configured lengths."""

    if text is None or not text.strip():
        return False
    min_length = int(get_setting("comparison", "min_content_length", 3))
    max_length = int(get_setting("comparison", "max_content_length", 8000))
    return min_length <= len(text) <= max_length


def clean_records(records: Iterable[ContentRecord]) -> List[ContentRecord]:
    """Return copies of ``records`` with ``clean_text`` filled in."""

    return [
        record.model_copy(update={"clean_text": clean_text(record.raw_text)})
        for record in records
    ]
