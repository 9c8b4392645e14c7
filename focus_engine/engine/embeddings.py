"""Embedding client — ABC, OpenAI implementation, and a deterministic mock."""

from __future__ import annotations

import hashlib
from abc import ABC, abstractmethod


class EmbeddingClient(ABC):
    """Async embedding interface.

    Swap providers by implementing this ABC.
    """

    @abstractmethod
    async def embed_query(self, text: str) -> list[float]: ...

    @abstractmethod
    async def embed_documents(self, texts: list[str]) -> list[list[float]]: ...


class OpenAIEmbeddingClient(EmbeddingClient):
    def __init__(
        self,
        api_key: str | None = None,
        model: str = "text-embedding-3-small",
        base_url: str | None = None,
    ) -> None:
        from openai import AsyncOpenAI

        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url)
        self._model = model

    async def embed_query(self, text: str) -> list[float]:
        return (await self.embed_documents([text]))[0]

    async def embed_documents(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []
        response = await self._client.embeddings.create(model=self._model, input=texts)
        return [item.embedding for item in sorted(response.data, key=lambda d: d.index)]


class MockEmbeddingClient(EmbeddingClient):
    """Looks vectors up in ``vectors``; unknown texts get a hash-derived vector.

    ``fail_with`` makes every call raise, for failure-path tests.
    """

    def __init__(
        self,
        vectors: dict[str, list[float]] | None = None,
        dim: int = 8,
        fail_with: Exception | None = None,
    ) -> None:
        self._vectors = dict(vectors or {})
        self._dim = dim
        self._fail_with = fail_with
        self.calls: list[list[str]] = []

    def _vector(self, text: str) -> list[float]:
        if text in self._vectors:
            return list(self._vectors[text])
        digest = hashlib.sha256(text.encode("utf-8")).digest()
        return [b / 255.0 for b in digest[: self._dim]]

    async def embed_query(self, text: str) -> list[float]:
        self.calls.append([text])
        if self._fail_with is not None:
            raise self._fail_with
        return self._vector(text)

    async def embed_documents(self, texts: list[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        if self._fail_with is not None:
            raise self._fail_with
        return [self._vector(t) for t in texts]
