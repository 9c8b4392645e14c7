"""Tests for focus-mode resolution and FocusEngine dispatch."""

from __future__ import annotations

import pytest

from focus_engine.engine.agent import FocusEngine
from focus_engine.engine.embeddings import MockEmbeddingClient
from focus_engine.engine.errors import UnknownFocusMode
from focus_engine.engine.llm import MockLLMClient
from focus_engine.engine.models import EventType, SearchRequest
from focus_engine.modes.config import FOCUS_MODE_CONFIGS, OPTIMIZATION_POLICIES, FocusMode
from focus_engine.modes.registry import build_focus_registry
from focus_engine.search.meta_search import MetaSearchAgent
from focus_engine.search.restaurant import RestaurantEvaluationAgent


@pytest.fixture
def focus_registry(provider_registry, file_store, trace_collector):
    return build_focus_registry(provider_registry, file_store=file_store, trace_collector=trace_collector)


def make_engine(focus_registry, file_store, chat_store, responses):
    return FocusEngine(
        registry=focus_registry,
        llm_client=MockLLMClient(responses),
        embedding_client=MockEmbeddingClient(),
        file_store=file_store,
        chat_store=chat_store,
    )


class TestFocusRegistry:
    def test_every_mode_registered(self, focus_registry):
        assert set(focus_registry.modes) == set(FocusMode)

    def test_resolve_by_wire_name(self, focus_registry):
        mode, handler = focus_registry.resolve("academicSearch")
        assert mode is FocusMode.ACADEMIC
        assert isinstance(handler, MetaSearchAgent)
        assert handler.config.active_engines == ("arxiv", "google scholar", "pubmed")

    def test_restaurant_mode_is_evaluation_agent(self, focus_registry):
        _, handler = focus_registry.resolve("restaurantSearch")
        assert isinstance(handler, RestaurantEvaluationAgent)
        assert focus_registry.restaurant_agent() is handler

    def test_unknown_mode(self, focus_registry):
        with pytest.raises(UnknownFocusMode, match="Invalid focus mode"):
            focus_registry.resolve("nonexistentMode")

    def test_mode_subset(self, provider_registry):
        registry = build_focus_registry(provider_registry, configs={
            FocusMode.WEB: FOCUS_MODE_CONFIGS[FocusMode.WEB],
        })
        with pytest.raises(UnknownFocusMode):
            registry.resolve("redditSearch")
        with pytest.raises(UnknownFocusMode):
            registry.restaurant_agent()


class TestModeConfigs:
    def test_writing_assistant_never_searches(self):
        assert FOCUS_MODE_CONFIGS[FocusMode.WRITING].search_web is False

    def test_wolfram_alpha_skips_rerank(self):
        assert FOCUS_MODE_CONFIGS[FocusMode.WOLFRAM_ALPHA].rerank is False

    def test_policies_grow_with_quality(self):
        speed, balanced, quality = (OPTIMIZATION_POLICIES[m] for m in ("speed", "balanced", "quality"))
        assert speed.max_queries < balanced.max_queries < quality.max_queries
        assert speed.max_context_documents < quality.max_context_documents

    def test_configs_are_frozen(self):
        from pydantic import ValidationError

        with pytest.raises(ValidationError):
            FOCUS_MODE_CONFIGS[FocusMode.WEB].rerank = False


class TestFocusEngine:
    async def test_handle_dispatches_to_mode(self, focus_registry, file_store, chat_store):
        engine = make_engine(focus_registry, file_store, chat_store, ["Here is a poem"])

        events = [e async for e in engine.handle(SearchRequest(focus_mode="writingAssistant", query="write"))]

        assert events[-1].type == EventType.MESSAGE_END
        assert "".join(e.data for e in events if e.type == EventType.RESPONSE) == "Here is a poem"

    def test_unknown_mode_raises_before_streaming(self, focus_registry, file_store, chat_store):
        engine = make_engine(focus_registry, file_store, chat_store, [])
        with pytest.raises(UnknownFocusMode):
            engine.handle(SearchRequest(focus_mode="bogus", query="q"))

    async def test_trace_id_propagates(self, focus_registry, file_store, chat_store, tmp_path):
        engine = make_engine(focus_registry, file_store, chat_store, ["draft"])
        request = SearchRequest(focus_mode="writingAssistant", query="write", trace_id="engine-trace")

        events = [e async for e in engine.handle(request)]

        assert {e.trace_id for e in events} == {"engine-trace"}
        assert (tmp_path / "traces" / "engine-trace.jsonl").exists()

    async def test_evaluate_restaurant_rejects_bad_record(self, focus_registry, file_store, chat_store):
        engine = make_engine(focus_registry, file_store, chat_store, [])

        events = [e async for e in engine.evaluate_restaurant({"restaurantName": "Only a name"})]

        assert [e.type for e in events] == [EventType.ERROR]
