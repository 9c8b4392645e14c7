"""Embedding-similarity reranking of retrieved documents."""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

import numpy as np

from focus_engine.engine.embeddings import EmbeddingClient
from focus_engine.engine.errors import EmbeddingError
from focus_engine.engine.models import Document

logger = logging.getLogger(__name__)


def cosine_similarities(query_vector: Sequence[float], document_vectors: Sequence[Sequence[float]]) -> np.ndarray:
    """Cosine of ``query_vector`` against each row; zero-norm rows score 0."""
    query = np.asarray(query_vector, dtype=float)
    matrix = np.asarray(document_vectors, dtype=float)
    if matrix.ndim != 2 or query.ndim != 1 or matrix.shape[1] != query.shape[0]:
        raise EmbeddingError(
            f"Embedding dimension mismatch: query {query.shape}, documents {matrix.shape}"
        )
    norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query)
    with np.errstate(divide="ignore", invalid="ignore"):
        return np.where(norms > 0, (matrix @ query) / norms, 0.0)


async def rerank_documents(
    documents: list[Document],
    query: str,
    embeddings: EmbeddingClient,
    threshold: float,
    enabled: bool,
) -> list[Document]:
    """Keep documents scoring strictly above ``threshold``, best first.

    Disabled → ``documents`` is returned untouched. Ties keep input order.
    Surviving documents carry their similarity in ``metadata.score``.
    """
    if not enabled:
        return documents
    if not documents:
        return []

    try:
        query_vector, document_vectors = await asyncio.gather(
            embeddings.embed_query(query),
            embeddings.embed_documents([d.content for d in documents]),
        )
    except EmbeddingError:
        raise
    except Exception as exc:
        raise EmbeddingError(f"Embedding request failed ({type(exc).__name__})") from exc

    if len(document_vectors) != len(documents):
        raise EmbeddingError(
            f"Expected {len(documents)} document embeddings, got {len(document_vectors)}"
        )

    scores = cosine_similarities(query_vector, document_vectors)
    kept = [(float(s), d) for s, d in zip(scores, documents) if s > threshold]
    kept.sort(key=lambda pair: pair[0], reverse=True)
    logger.debug("rerank kept=%d/%d threshold=%.2f", len(kept), len(documents), threshold)
    return [d.with_score(s) for s, d in kept]
