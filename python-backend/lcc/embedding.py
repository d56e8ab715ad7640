"""Embedding collaborators.

The engine never calls a model itself; records arrive with embeddings
attached. This module attaches them in batches through any object that
implements :class:`EmbeddingProvider`.
"""

from __future__ import annotations

from typing import Any, List, Optional, Protocol, Sequence

import structlog

from .config_loader import get_setting
from .errors import EmbeddingProviderError, ErrorCategory, ErrorInfo, ErrorSeverity
from .models_lcc import ContentRecord

logger = structlog.get_logger(__name__)

DEFAULT_MODEL_NAME = "all-MiniLM-L6-v2"


class EmbeddingProvider(Protocol):
    def embed(self, texts: Sequence[str]) -> List[List[float]]:
        ...


def _provider_error(message: str, details: str) -> EmbeddingProviderError:
    return EmbeddingProviderError(
        ErrorInfo(
            category=ErrorCategory.API_PROCESSING,
            severity=ErrorSeverity.HIGH,
            user_message=message,
            technical_details=details,
            suggested_action="Check the embedding model installation and try again.",
        )
    )


class SentenceTransformerEmbedder:
    """Embeds texts with a local sentence-transformers model.

    The model is loaded on first use. Requires the ``embeddings`` extra.
    """

    def __init__(self, model_name: Optional[str] = None) -> None:
        self.model_name = model_name or get_setting("embedding", "model_name", DEFAULT_MODEL_NAME)
        self._model: Any = None

    def _ensure_model(self) -> None:
        if self._model is not None:
            return
        try:
            from sentence_transformers import SentenceTransformer
        except ImportError as exc:
            raise _provider_error(
                "The local embedding model is not installed.",
                "sentence-transformers is missing; install localization-content-comparer[embeddings]",
            ) from exc
        logger.info("embedding.model_load", model=self.model_name)
        self._model = SentenceTransformer(self.model_name)

    def embed(self, texts: Sequence[str]) -> List[List[float]]:
        if not texts:
            return []
        self._ensure_model()
        vectors = self._model.encode(list(texts), convert_to_numpy=True)
        return [vector.astype(float).tolist() for vector in vectors]


def _embed_batch(
    provider: EmbeddingProvider, texts: Sequence[str]
) -> List[Optional[List[float]]]:
    """Embed ``texts``; on failure retry one text at a time."""

    try:
        vectors = provider.embed(texts)
        if len(vectors) != len(texts):
            raise _provider_error(
                "The embedding service returned an unexpected number of vectors.",
                f"Expected {len(texts)} vectors, got {len(vectors)}",
            )
        return [list(vector) for vector in vectors]
    except Exception as exc:  # noqa: BLE001
        logger.warning("embedding.batch_failed", size=len(texts), error=str(exc))

    results: List[Optional[List[float]]] = []
    for text in texts:
        try:
            vectors = provider.embed([text])
            results.append(list(vectors[0]) if vectors else None)
        except Exception as exc:  # noqa: BLE001
            logger.warning("embedding.record_failed", error=str(exc))
            results.append(None)
    return results


def attach_embeddings(
    records: Sequence[ContentRecord],
    provider: EmbeddingProvider,
    batch_size: Optional[int] = None,
) -> List[ContentRecord]:
    """Return copies of ``records`` with embeddings attached.

    Records with blank ``clean_text`` are not sent to the provider and keep
    ``embedding=None``, as do records whose individual request failed. Order
    and ``original_index`` are preserved.
    """

    if batch_size is None:
        batch_size = int(get_setting("comparison", "max_embedding_batch_size", 50))
    batch_size = max(1, batch_size)

    pending = [record for record in records if record.clean_text.strip()]
    vectors: dict[int, Optional[List[float]]] = {}
    for start in range(0, len(pending), batch_size):
        batch = pending[start : start + batch_size]
        embedded = _embed_batch(provider, [record.clean_text for record in batch])
        for record, vector in zip(batch, embedded):
            vectors[record.original_index] = vector

    result = [
        record.model_copy(update={"embedding": vectors.get(record.original_index)})
        for record in records
    ]
    logger.info(
        "embedding.attached",
        total=len(records),
        embedded=sum(1 for record in result if record.has_embedding),
        batch_size=batch_size,
    )
    return result
