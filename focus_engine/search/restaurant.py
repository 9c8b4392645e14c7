"""Restaurant evaluation — search, extract a profile, score the fit.

Composes a ``MetaSearchAgent`` for the retrieval step only::

    Parsing → Searching → Extracting → Evaluating → Done | Failed
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from contextlib import aclosing
from typing import Any, AsyncIterator, Mapping, Sequence

from focus_engine.engine.embeddings import EmbeddingClient
from focus_engine.engine.errors import FocusEngineError, InvalidQueryFormat, NoInformationFound
from focus_engine.engine.history import format_chat_history
from focus_engine.engine.llm import LLMClient
from focus_engine.engine.models import (
    ChatTurn,
    EvaluationVerdict,
    EventEnvelope,
    EventType,
    OptimizationMode,
    RestaurantProfile,
    RestaurantRecord,
)
from focus_engine.engine.stream import event_stream, response, sources, status
from focus_engine.prompts import (
    RESTAURANT_EVALUATION_PROMPT,
    RESTAURANT_EXTRACTION_PROMPT,
    RESTAURANT_SEARCH_QUERY,
)
from focus_engine.search.interface import SearchHandler
from focus_engine.search.meta_search import MetaSearchAgent, invoke_model
from focus_engine.tracing.interface import NullTraceCollector, TraceCollector

logger = logging.getLogger(__name__)

NAME_MARKER = "Restaurant Name:"
ADDRESS_MARKER = "Address:"


def _record(name: Any, address: Any) -> RestaurantRecord | None:
    if not isinstance(name, str) or not isinstance(address, str):
        return None
    name, address = name.strip(), address.strip()
    if not name or not address:
        return None
    return RestaurantRecord(restaurant_name=name, address=address)


def parse_restaurant_query(query: str | Mapping[str, Any] | RestaurantRecord) -> RestaurantRecord:
    """Accept a record, a mapping, a JSON object string, or labeled text.

    JSON keys may be ``restaurantName`` or ``restaurant_name`` plus ``address``.
    Labeled text looks like ``Restaurant Name: <name> Address: <address>``.
    """
    if isinstance(query, RestaurantRecord):
        return query

    data: Any = query
    if isinstance(query, str):
        try:
            data = json.loads(query)
        except json.JSONDecodeError:
            data = None

    if isinstance(data, Mapping):
        record = _record(data.get("restaurantName") or data.get("restaurant_name"), data.get("address"))
        if record is not None:
            return record

    if isinstance(query, str) and NAME_MARKER in query:
        name, marker, address = query.split(NAME_MARKER, 1)[1].partition(ADDRESS_MARKER)
        if marker:
            record = _record(name, address)
            if record is not None:
                return record

    raise InvalidQueryFormat("Invalid restaurant query format")


class RestaurantEvaluationAgent(SearchHandler):
    def __init__(self, search_agent: MetaSearchAgent, trace_collector: TraceCollector | None = None) -> None:
        self._search = search_agent
        self._trace = trace_collector or NullTraceCollector()

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
        """Parse ``query`` as a restaurant record, then evaluate it."""
        trace_id = trace_id or str(uuid.uuid4())
        producer = self._run(query, list(history), llm, embeddings, OptimizationMode(optimization_mode), trace_id)
        return event_stream(producer, trace_id, self._trace)

    def search_and_evaluate_restaurant(
        self,
        restaurant: RestaurantRecord | Mapping[str, Any],
        history: Sequence[ChatTurn],
        llm: LLMClient,
        embeddings: EmbeddingClient,
        optimization_mode: OptimizationMode = OptimizationMode.BALANCED,
        trace_id: str | None = None,
    ) -> AsyncIterator[EventEnvelope]:
        trace_id = trace_id or str(uuid.uuid4())
        producer = self._run(restaurant, list(history), llm, embeddings, OptimizationMode(optimization_mode), trace_id)
        return event_stream(producer, trace_id, self._trace)

    async def _run(
        self,
        raw: str | Mapping[str, Any] | RestaurantRecord,
        history: list[ChatTurn],
        llm: LLMClient,
        embeddings: EmbeddingClient,
        optimization_mode: OptimizationMode,
        trace_id: str,
    ) -> AsyncIterator[EventEnvelope]:
        # Parsing
        record = parse_restaurant_query(raw)

        # Searching
        yield status("Searching for restaurant information...")
        raw_info_parts: list[str] = []
        search_query = RESTAURANT_SEARCH_QUERY.format(
            restaurant_name=record.restaurant_name, address=record.address,
        )
        sub_stream = self._search.search_and_answer(
            search_query, history, llm, embeddings, optimization_mode, trace_id=f"{trace_id}.search",
        )
        async with aclosing(sub_stream) as events:
            async for event in events:
                if event.type == EventType.RESPONSE:
                    raw_info_parts.append(event.data)
                elif event.type == EventType.SOURCES:
                    yield sources(event.data)
                elif event.type == EventType.STATUS:
                    yield status(event.data)
                elif event.type == EventType.ERROR:
                    raise FocusEngineError(f"Restaurant search failed: {event.data}")

        raw_info = "".join(raw_info_parts)
        if not raw_info.strip():
            raise NoInformationFound("No information found for the restaurant")

        # Extracting
        yield status("Analyzing restaurant information...")
        t0 = time.time()
        extraction = await invoke_model(llm, RESTAURANT_EXTRACTION_PROMPT.format(
            restaurant_name=record.restaurant_name,
            address=record.address,
            raw_info=raw_info,
            chat_history=format_chat_history(history),
        ))
        profile = RestaurantProfile.from_extraction(extraction)
        await self._trace.emit(trace_id, "extract", {
            "sections": [name for name, value in profile.model_dump().items() if value],
            "latency_ms": round((time.time() - t0) * 1000, 2),
        })

        # Evaluating
        yield status("Evaluating restaurant fit...")
        t0 = time.time()
        evaluation = await invoke_model(llm, RESTAURANT_EVALUATION_PROMPT.format(context=extraction))
        verdict = EvaluationVerdict.parse(evaluation)
        await self._trace.emit(trace_id, "evaluate", {
            "score": verdict.score if verdict else None,
            "latency_ms": round((time.time() - t0) * 1000, 2),
        })
        logger.info("trace=%s evaluated %r score=%s", trace_id, record.restaurant_name, verdict.score if verdict else None)

        yield response(evaluation)
