"""Attached-file store interface — depends only on engine.models."""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel

from focus_engine.engine.models import Document, DocumentMetadata


class StoredFile(BaseModel):
    file_id: str
    name: str
    chunks: list[str]


class FileStore(ABC):
    """Holds uploaded files as text chunks.

    Swap to a persistent store by implementing this ABC.
    """

    @abstractmethod
    async def add(self, name: str, content: str) -> StoredFile: ...

    @abstractmethod
    async def get(self, file_id: str) -> StoredFile | None: ...

    async def documents(self, file_ids: list[str]) -> list[Document]:
        """Chunks of the given files as ``engine="file"`` documents; unknown ids are skipped."""
        documents: list[Document] = []
        for file_id in file_ids:
            stored = await self.get(file_id)
            if stored is None:
                continue
            for chunk in stored.chunks:
                documents.append(Document(
                    content=chunk,
                    metadata=DocumentMetadata(engine="file", url=f"file://{stored.file_id}", title=stored.name),
                ))
        return documents
