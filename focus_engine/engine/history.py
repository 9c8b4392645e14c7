from __future__ import annotations

from typing import Iterable

from focus_engine.engine.models import ChatTurn


def format_chat_history(history: Iterable[ChatTurn]) -> str:
    """Render turns as ``role: content`` lines, oldest first."""
    return "\n".join(f"{turn.role}: {turn.content}" for turn in history)
