"""JSONL file-based trace collector."""

from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Any

from focus_engine.tracing.interface import TraceCollector


class JSONLTraceCollector(TraceCollector):
    """Appends one line per pipeline step to ``{trace_dir}/{trace_id}.jsonl``.

    Steps are buffered per request and written when its event stream closes,
    so an abandoned stream still leaves a trace ending in ``handle_done``.
    """

    def __init__(self, trace_dir: str = "./traces") -> None:
        self._dir = Path(trace_dir)
        self._dir.mkdir(parents=True, exist_ok=True)
        self._buffers: dict[str, list[dict[str, Any]]] = {}

    async def emit(self, trace_id: str, event_type: str, data: dict[str, Any]) -> None:
        self._buffers.setdefault(trace_id, []).append({
            "ts": time.time(),
            "trace_id": trace_id,
            "event": event_type,
            **data,
        })

    async def flush(self, trace_id: str) -> None:
        entries = self._buffers.pop(trace_id, [])
        if not entries:
            return
        with open(self._dir / f"{trace_id}.jsonl", "a", encoding="utf-8") as f:
            f.writelines(json.dumps(entry, default=str) + "\n" for entry in entries)
