"""Event stream guard — the only place terminal events are produced.

Producers (the search agents) yield ``status`` / ``sources`` / ``response``
events and signal failure by raising. ``event_stream`` turns that into a
finite stream ending in exactly one ``messageEnd`` or ``error``.
"""

from __future__ import annotations

import logging
import time
from contextlib import aclosing
from typing import AsyncIterator, Sequence

from focus_engine.engine.errors import FocusEngineError
from focus_engine.engine.models import Document, EventEnvelope, EventType
from focus_engine.tracing.interface import TraceCollector

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "An error occurred while processing your request"


def status(text: str) -> EventEnvelope:
    return EventEnvelope(type=EventType.STATUS, data=text)


def response(chunk: str) -> EventEnvelope:
    return EventEnvelope(type=EventType.RESPONSE, data=chunk)


def sources(documents: Sequence[Document]) -> EventEnvelope:
    return EventEnvelope(type=EventType.SOURCES, data=list(documents))


async def event_stream(
    producer: AsyncIterator[EventEnvelope],
    trace_id: str,
    trace_collector: TraceCollector | None = None,
) -> AsyncIterator[EventEnvelope]:
    t_start = time.time()
    outcome = "cancelled"
    try:
        async with aclosing(producer) as events:
            async for event in events:
                if event.is_terminal:
                    raise RuntimeError(f"producer emitted terminal event {event.type.value!r}")
                event.trace_id = trace_id
                yield event
    except FocusEngineError as exc:
        outcome = "error"
        logger.warning("trace=%s %s: %s", trace_id, type(exc).__name__, exc)
        yield EventEnvelope(type=EventType.ERROR, data=str(exc) or GENERIC_ERROR_MESSAGE, trace_id=trace_id)
    except Exception:
        outcome = "error"
        logger.error("trace=%s unexpected failure", trace_id, exc_info=True)
        yield EventEnvelope(type=EventType.ERROR, data=GENERIC_ERROR_MESSAGE, trace_id=trace_id)
    else:
        outcome = "ok"
        yield EventEnvelope(type=EventType.MESSAGE_END, trace_id=trace_id)
    finally:
        if trace_collector is not None:
            await trace_collector.emit(trace_id, "handle_done", {
                "outcome": outcome,
                "total_latency_ms": round((time.time() - t_start) * 1000, 2),
            })
            await trace_collector.flush(trace_id)
