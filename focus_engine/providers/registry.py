"""Provider registry with per-provider timeout, retry, and isolated fan-out."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Iterable

from focus_engine.engine.models import Document
from focus_engine.providers.interface import SearchProvider

logger = logging.getLogger(__name__)


@dataclass
class ProviderResult:
    """Outcome of one ``(engine, query)`` fetch — documents or a failure reason."""

    engine: str
    query: str
    documents: list[Document] = field(default_factory=list)
    error: str | None = None
    latency_ms: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None


class ProviderRegistry:
    """Central provider store. ``fetch_all`` never raises for a provider failure."""

    def __init__(self, default_engine: str = "web", timeout: float = 10.0, max_retries: int = 0) -> None:
        self._providers: dict[str, SearchProvider] = {}
        self._default = default_engine
        self._timeout = timeout
        self._max_retries = max_retries

    # -- registration -------------------------------------------------------

    def register(self, provider: SearchProvider) -> None:
        self._providers[provider.name] = provider
        logger.info("Registered search provider %s", provider.name)

    def get(self, name: str) -> SearchProvider | None:
        return self._providers.get(name)

    @property
    def names(self) -> list[str]:
        return list(self._providers)

    def resolve_engines(self, active_engines: Iterable[str]) -> list[str]:
        """Empty ``active_engines`` means the default general-web provider."""
        engines = list(active_engines)
        return engines or [self._default]

    # -- execution ----------------------------------------------------------

    async def fetch(self, name: str, query: str, limit: int = 10) -> ProviderResult:
        provider = self._providers.get(name)
        if provider is None:
            return ProviderResult(engine=name, query=query, error=f"Provider '{name}' not found")

        t0 = time.time()
        last_exc: Exception | None = None
        for attempt in range(1, self._max_retries + 2):  # +2 because range is exclusive
            try:
                documents = await asyncio.wait_for(provider.fetch(query, limit), timeout=self._timeout)
                latency = time.time() - t0
                logger.info("provider=%s attempt=%d hits=%d latency=%.3fs OK", name, attempt, len(documents), latency)
                return ProviderResult(
                    engine=name,
                    query=query,
                    documents=documents,
                    latency_ms=round(latency * 1000, 2),
                )
            except Exception as exc:
                last_exc = exc
                logger.warning("provider=%s attempt=%d error=%r", name, attempt, exc)

        return ProviderResult(
            engine=name,
            query=query,
            error=str(last_exc) or type(last_exc).__name__,
            latency_ms=round((time.time() - t0) * 1000, 2),
        )

    async def fetch_all(self, engines: Iterable[str], queries: Iterable[str], limit: int = 10) -> list[ProviderResult]:
        """Fetch every ``(engine, query)`` pair concurrently; results keep that order."""
        engines = list(engines)
        pairs = [(engine, query) for query in queries for engine in engines]
        return list(await asyncio.gather(*(self.fetch(e, q, limit) for e, q in pairs)))
