"""SearXNG-backed providers (web, academic, video, forum, computation)."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from focus_engine.engine.errors import ProviderFailure
from focus_engine.engine.models import Document, DocumentMetadata
from focus_engine.providers.interface import SearchProvider

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "focus-engine/0.1"


class SearxngProvider(SearchProvider):
    """Queries a SearXNG instance's JSON API, optionally pinned to engines.

    ``engines=None`` leaves engine choice to the instance (general web).
    """

    def __init__(
        self,
        name: str,
        base_url: str,
        engines: list[str] | None = None,
        categories: list[str] | None = None,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._name = name
        self._base_url = base_url.rstrip("/")
        self._engines = engines
        self._categories = categories
        self._timeout = timeout
        self._client = client

    @property
    def name(self) -> str:
        return self._name

    def _params(self, query: str) -> dict[str, Any]:
        params: dict[str, Any] = {"q": query, "format": "json"}
        if self._engines:
            params["engines"] = ",".join(self._engines)
        if self._categories:
            params["categories"] = ",".join(self._categories)
        return params

    async def _get(self, client: httpx.AsyncClient, query: str) -> dict[str, Any]:
        response = await client.get(
            f"{self._base_url}/search",
            params=self._params(query),
            headers={"User-Agent": DEFAULT_USER_AGENT},
            timeout=self._timeout,
        )
        response.raise_for_status()
        return response.json()

    async def fetch(self, query: str, limit: int = 10) -> list[Document]:
        try:
            if self._client is not None:
                payload = await self._get(self._client, query)
            else:
                async with httpx.AsyncClient() as client:
                    payload = await self._get(client, query)
        except (httpx.HTTPError, ValueError) as exc:
            raise ProviderFailure(f"{self._name}: {exc}") from exc

        documents: list[Document] = []
        for item in payload.get("results", [])[:limit]:
            content = item.get("content") or item.get("title")
            if not content:
                continue
            documents.append(Document(
                content=content,
                metadata=DocumentMetadata(
                    engine=self._name,
                    url=item.get("url"),
                    title=item.get("title"),
                ),
            ))
        logger.debug("searxng engine=%s query=%r hits=%d", self._name, query, len(documents))
        return documents


# engine id → SearXNG engines / categories
SEARXNG_ENGINES: dict[str, dict[str, list[str] | None]] = {
    "web": {"engines": None, "categories": None},
    "google": {"engines": ["google"], "categories": None},
    "bing": {"engines": ["bing"], "categories": None},
    "arxiv": {"engines": ["arxiv"], "categories": None},
    "google scholar": {"engines": ["google scholar"], "categories": None},
    "pubmed": {"engines": ["pubmed"], "categories": None},
    "youtube": {"engines": ["youtube"], "categories": ["videos"]},
    "reddit": {"engines": ["reddit"], "categories": None},
    "wolframalpha": {"engines": ["wolframalpha"], "categories": None},
}


def make_searxng_providers(
    base_url: str,
    timeout: float = 10.0,
    client: httpx.AsyncClient | None = None,
) -> list[SearxngProvider]:
    return [
        SearxngProvider(
            name=name,
            base_url=base_url,
            engines=settings["engines"],
            categories=settings["categories"],
            timeout=timeout,
            client=client,
        )
        for name, settings in SEARXNG_ENGINES.items()
    ]
