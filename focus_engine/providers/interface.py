"""SearchProvider ABC — one implementation per external engine."""

from __future__ import annotations

from abc import ABC, abstractmethod

from focus_engine.engine.models import Document


class SearchProvider(ABC):
    """Fetches candidate documents for a query from one engine.

    Every returned document carries ``metadata.engine == self.name``.
    Implementations raise on failure; the registry isolates them.
    """

    @property
    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    async def fetch(self, query: str, limit: int = 10) -> list[Document]: ...
