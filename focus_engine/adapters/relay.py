"""Transport helpers shared by the HTTP, SSE and WebSocket adapters."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, AsyncIterator

from focus_engine.engine.models import EventEnvelope, EventType, StoredMessage
from focus_engine.store.interface import ChatStore

logger = logging.getLogger(__name__)


@dataclass
class CollectedAnswer:
    message: str = ""
    sources: list[dict[str, Any]] = field(default_factory=list)
    events: list[dict[str, Any]] = field(default_factory=list)
    error: str | None = None


async def collect(events: AsyncIterator[EventEnvelope]) -> CollectedAnswer:
    """Drain a stream into the batch-response shape."""
    answer = CollectedAnswer()
    parts: list[str] = []
    async for event in events:
        wire = event.to_wire()
        answer.events.append(wire)
        if event.type == EventType.RESPONSE:
            parts.append(event.data)
        elif event.type == EventType.SOURCES:
            answer.sources = wire["data"]
        elif event.type == EventType.ERROR:
            answer.error = event.data
    answer.message = "".join(parts)
    return answer


async def relay_and_record(
    events: AsyncIterator[EventEnvelope],
    chat_store: ChatStore,
    chat_id: str,
    message_id: str,
) -> AsyncIterator[EventEnvelope]:
    """Pass events through; store the assistant answer when ``messageEnd`` arrives."""
    parts: list[str] = []
    sources: list[dict[str, Any]] = []
    async for event in events:
        if event.type == EventType.RESPONSE:
            parts.append(event.data)
        elif event.type == EventType.SOURCES:
            sources = event.to_wire()["data"]
        elif event.type == EventType.MESSAGE_END:
            metadata: dict[str, Any] = {"sources": sources} if sources else {}
            await chat_store.add_message(StoredMessage(
                message_id=message_id,
                chat_id=chat_id,
                role="assistant",
                content="".join(parts),
                metadata=metadata,
            ))
            logger.info("chat=%s stored assistant message %s", chat_id, message_id)
        yield event
