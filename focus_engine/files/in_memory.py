"""Dict-backed file store with paragraph chunking."""

from __future__ import annotations

import re
import uuid

from focus_engine.files.interface import FileStore, StoredFile

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")


def chunk_text(content: str, max_chars: int = 1000) -> list[str]:
    """Pack paragraphs into chunks of at most ``max_chars``; longer paragraphs are split."""
    chunks: list[str] = []
    current = ""
    for paragraph in _PARAGRAPH_BREAK.split(content):
        paragraph = paragraph.strip()
        if not paragraph:
            continue
        while len(paragraph) > max_chars:
            if current:
                chunks.append(current)
                current = ""
            chunks.append(paragraph[:max_chars])
            paragraph = paragraph[max_chars:].lstrip()
        if current and len(current) + 2 + len(paragraph) > max_chars:
            chunks.append(current)
            current = ""
        current = f"{current}\n\n{paragraph}" if current else paragraph
    if current:
        chunks.append(current)
    return chunks


class InMemoryFileStore(FileStore):
    """Suitable for single-process dev/test."""

    def __init__(self, max_chunk_chars: int = 1000) -> None:
        self._files: dict[str, StoredFile] = {}
        self._max_chunk_chars = max_chunk_chars

    async def add(self, name: str, content: str) -> StoredFile:
        stored = StoredFile(
            file_id=uuid.uuid4().hex,
            name=name,
            chunks=chunk_text(content, self._max_chunk_chars),
        )
        self._files[stored.file_id] = stored
        return stored

    async def get(self, file_id: str) -> StoredFile | None:
        return self._files.get(file_id)
