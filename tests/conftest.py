"""Shared fixtures for focus_engine tests."""

from __future__ import annotations

import asyncio

import pytest

from focus_engine.engine.models import Document, DocumentMetadata
from focus_engine.files.in_memory import InMemoryFileStore
from focus_engine.providers.interface import SearchProvider
from focus_engine.providers.registry import ProviderRegistry
from focus_engine.store.in_memory import InMemoryChatStore
from focus_engine.tracing.jsonl_tracer import JSONLTraceCollector


def make_doc(content: str, engine: str = "google", url: str | None = None, title: str | None = None) -> Document:
    return Document(content=content, metadata=DocumentMetadata(engine=engine, url=url, title=title))


class FakeProvider(SearchProvider):
    """Returns canned documents, raises ``error``, or sleeps past the timeout."""

    def __init__(
        self,
        name: str,
        documents: list[Document] | None = None,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self._name = name
        self._documents = documents or []
        self._error = error
        self._delay = delay
        self.queries: list[str] = []

    @property
    def name(self) -> str:
        return self._name

    async def fetch(self, query: str, limit: int = 10) -> list[Document]:
        self.queries.append(query)
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        return self._documents[:limit]


@pytest.fixture
def google():
    return FakeProvider("google", [
        make_doc("Google result one", "google", "https://example.com/1", "One"),
        make_doc("Google result two", "google", "https://example.com/2", "Two"),
    ])


@pytest.fixture
def bing():
    return FakeProvider("bing", [
        make_doc("Bing result", "bing", "https://example.com/3", "Three"),
    ])


@pytest.fixture
def provider_registry(google, bing):
    registry = ProviderRegistry(default_engine="google", timeout=1.0)
    registry.register(google)
    registry.register(bing)
    return registry


@pytest.fixture
def file_store():
    return InMemoryFileStore()


@pytest.fixture
def chat_store():
    return InMemoryChatStore()


@pytest.fixture
def trace_collector(tmp_path):
    return JSONLTraceCollector(trace_dir=str(tmp_path / "traces"))
