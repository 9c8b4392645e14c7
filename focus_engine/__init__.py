"""focus_engine — conversational search with focus modes, reranking, and streamed answers.

Usage::

    from focus_engine import create_engine
    from focus_engine.engine.models import SearchRequest

    engine = create_engine()
    async for event in engine.handle(SearchRequest(focus_mode="webSearch", query="...")):
        print(event.to_wire())
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()  # reads .env into os.environ (no-op if file missing)

from focus_engine.engine.agent import FocusEngine
from focus_engine.engine.embeddings import MockEmbeddingClient, OpenAIEmbeddingClient
from focus_engine.engine.llm import DemoMockLLMClient, OpenAILLMClient
from focus_engine.engine.models import EventEnvelope, EventType, SearchRequest
from focus_engine.files.in_memory import InMemoryFileStore
from focus_engine.modes.registry import build_focus_registry
from focus_engine.providers.links import LinkFetcher
from focus_engine.providers.registry import ProviderRegistry
from focus_engine.providers.searxng import make_searxng_providers
from focus_engine.store.in_memory import InMemoryChatStore
from focus_engine.tracing.jsonl_tracer import JSONLTraceCollector

__all__ = [
    "EventEnvelope",
    "EventType",
    "FocusEngine",
    "SearchRequest",
    "create_engine",
]


def create_engine(
    *,
    openai_api_key: str | None = None,
    openai_model: str | None = None,
    embedding_model: str | None = None,
    searxng_url: str | None = None,
    trace_dir: str | None = None,
    use_mock_llm: bool | None = None,
) -> FocusEngine:
    """Wire all components and return a ready-to-use FocusEngine.

    Environment variables (all optional):
      OPENAI_API_KEY          — required for real LLM and embedding calls
      OPENAI_MODEL            — default ``gpt-4o-mini``
      OPENAI_EMBEDDING_MODEL  — default ``text-embedding-3-small``
      OPENAI_BASE_URL         — OpenAI-compatible endpoint override
      USE_MOCK_LLM            — set to ``1`` to use the demo mocks
      SEARXNG_URL             — default ``http://localhost:8080``
      SEARCH_TIMEOUT          — per-provider timeout in seconds, default ``10``
      TRACE_DIR               — default ``./traces``
    """
    api_key = openai_api_key or os.environ.get("OPENAI_API_KEY")
    model = openai_model or os.environ.get("OPENAI_MODEL", "gpt-4o-mini")
    embed_model = embedding_model or os.environ.get("OPENAI_EMBEDDING_MODEL", "text-embedding-3-small")
    base_url = os.environ.get("OPENAI_BASE_URL") or None
    mock = use_mock_llm if use_mock_llm is not None else os.environ.get("USE_MOCK_LLM") == "1"
    searx = searxng_url or os.environ.get("SEARXNG_URL", "http://localhost:8080")
    timeout = float(os.environ.get("SEARCH_TIMEOUT", "10"))
    traces = trace_dir or os.environ.get("TRACE_DIR", "./traces")

    # -- components --
    trace_collector = JSONLTraceCollector(traces)
    file_store = InMemoryFileStore()
    chat_store = InMemoryChatStore()

    providers = ProviderRegistry(default_engine="web", timeout=timeout)
    for provider in make_searxng_providers(searx, timeout=timeout):
        providers.register(provider)

    registry = build_focus_registry(
        providers,
        file_store=file_store,
        link_fetcher=LinkFetcher(timeout=timeout),
        trace_collector=trace_collector,
    )

    if mock or not api_key:
        llm_client = DemoMockLLMClient()
        embedding_client = MockEmbeddingClient()
    else:
        llm_client = OpenAILLMClient(api_key=api_key, model=model, base_url=base_url)
        embedding_client = OpenAIEmbeddingClient(api_key=api_key, model=embed_model, base_url=base_url)

    return FocusEngine(
        registry=registry,
        llm_client=llm_client,
        embedding_client=embedding_client,
        file_store=file_store,
        chat_store=chat_store,
    )
