"""FocusEngine — owns the model clients and stores, dispatches by focus mode."""

from __future__ import annotations

import logging
from typing import Any, AsyncIterator, Mapping, Sequence

from focus_engine.engine.embeddings import EmbeddingClient
from focus_engine.engine.llm import LLMClient
from focus_engine.engine.models import (
    ChatTurn,
    EventEnvelope,
    OptimizationMode,
    RestaurantRecord,
    SearchRequest,
)
from focus_engine.files.interface import FileStore
from focus_engine.modes.registry import FocusRegistry
from focus_engine.store.interface import ChatStore

logger = logging.getLogger(__name__)


class FocusEngine:
    """Public API: ``async for event in engine.handle(request): ...``"""

    def __init__(
        self,
        registry: FocusRegistry,
        llm_client: LLMClient,
        embedding_client: EmbeddingClient,
        file_store: FileStore,
        chat_store: ChatStore,
    ) -> None:
        self._registry = registry
        self._llm = llm_client
        self._embeddings = embedding_client
        self._files = file_store
        self._chats = chat_store

    @property
    def registry(self) -> FocusRegistry:
        return self._registry

    @property
    def file_store(self) -> FileStore:
        return self._files

    @property
    def chat_store(self) -> ChatStore:
        return self._chats

    def handle(self, request: SearchRequest) -> AsyncIterator[EventEnvelope]:
        """Start the request's pipeline.

        Raises ``UnknownFocusMode`` before any event is produced; every later
        failure arrives as the stream's ``error`` event.
        """
        mode, handler = self._registry.resolve(request.focus_mode)
        logger.info("trace=%s focus=%s optimization=%s", request.trace_id, mode.value, request.optimization_mode.value)
        return handler.search_and_answer(
            request.query,
            request.history,
            self._llm,
            self._embeddings,
            request.optimization_mode,
            request.files,
            trace_id=request.trace_id,
        )

    def evaluate_restaurant(
        self,
        restaurant: RestaurantRecord | Mapping[str, Any],
        history: Sequence[ChatTurn] = (),
        optimization_mode: OptimizationMode = OptimizationMode.BALANCED,
        trace_id: str | None = None,
    ) -> AsyncIterator[EventEnvelope]:
        return self._registry.restaurant_agent().search_and_evaluate_restaurant(
            restaurant,
            history,
            self._llm,
            self._embeddings,
            optimization_mode,
            trace_id=trace_id,
        )
