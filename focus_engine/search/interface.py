"""SearchHandler ABC — what every focus mode exposes to the transport layer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import AsyncIterator, Sequence

from focus_engine.engine.embeddings import EmbeddingClient
from focus_engine.engine.llm import LLMClient
from focus_engine.engine.models import ChatTurn, EventEnvelope, OptimizationMode


class SearchHandler(ABC):
    @abstractmethod
    def search_and_answer(
        self,
        query: str,
        history: Sequence[ChatTurn],
        llm: LLMClient,
        embeddings: EmbeddingClient,
        optimization_mode: OptimizationMode = OptimizationMode.BALANCED,
        files: Sequence[str] = (),
        trace_id: str | None = None,
    ) -> AsyncIterator[EventEnvelope]:
        """Start answering ``query``; the returned stream ends in messageEnd or error."""
