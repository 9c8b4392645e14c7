"""Core data models — no internal dependencies, only Pydantic + stdlib."""

from __future__ import annotations

import re
import time
import uuid
from enum import Enum
from typing import Any, Literal, Sequence

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Conversation
# ---------------------------------------------------------------------------

class ChatTurn(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: Literal["human", "assistant"]
    content: str


class OptimizationMode(str, Enum):
    SPEED = "speed"
    BALANCED = "balanced"
    QUALITY = "quality"


# ---------------------------------------------------------------------------
# Retrieved documents
# ---------------------------------------------------------------------------

class DocumentMetadata(BaseModel):
    model_config = ConfigDict(frozen=True)

    engine: str
    url: str | None = None
    title: str | None = None
    score: float | None = None


class Document(BaseModel):
    """A retrieved snippet plus where it came from."""
    model_config = ConfigDict(frozen=True)

    content: str
    metadata: DocumentMetadata

    def with_score(self, score: float) -> Document:
        return self.model_copy(update={"metadata": self.metadata.model_copy(update={"score": score})})


# ---------------------------------------------------------------------------
# Outbound events (orchestrator → transport)
# ---------------------------------------------------------------------------

class EventType(str, Enum):
    STATUS = "status"
    RESPONSE = "response"
    SOURCES = "sources"
    ERROR = "error"
    MESSAGE_END = "messageEnd"


TERMINAL_EVENTS = frozenset({EventType.ERROR, EventType.MESSAGE_END})


class EventEnvelope(BaseModel):
    type: EventType
    data: Any = None
    trace_id: str = ""
    timestamp: float = Field(default_factory=time.time)

    @property
    def is_terminal(self) -> bool:
        return self.type in TERMINAL_EVENTS

    def to_wire(self) -> dict[str, Any]:
        """The ``{type, data}`` shape every transport relays as-is."""
        payload: dict[str, Any] = {"type": self.type.value}
        if self.type == EventType.SOURCES:
            payload["data"] = [d.model_dump() if isinstance(d, Document) else d for d in self.data or []]
        elif self.data is not None:
            payload["data"] = self.data
        return payload


# ---------------------------------------------------------------------------
# Inbound request (adapter → engine)
# ---------------------------------------------------------------------------

class SearchRequest(BaseModel):
    """Adapter-agnostic incoming request."""
    focus_mode: str
    query: str
    history: list[ChatTurn] = Field(default_factory=list)
    optimization_mode: OptimizationMode = OptimizationMode.BALANCED
    files: list[str] = Field(default_factory=list)
    trace_id: str = Field(default_factory=lambda: str(uuid.uuid4()))


def history_from_wire(pairs: Sequence[tuple[str, str]] | None) -> list[ChatTurn]:
    """``[["human", "..."], ["assistant", "..."]]`` → ChatTurns."""
    return [
        ChatTurn(role="human" if role == "human" else "assistant", content=content)
        for role, content in pairs or []
    ]


# ---------------------------------------------------------------------------
# Restaurant evaluation
# ---------------------------------------------------------------------------

class RestaurantRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    restaurant_name: str
    address: str


_SECTION_RE = r"<{tag}>(.*?)</{tag}>"


class RestaurantProfile(BaseModel):
    atmosphere: str = ""
    cuisine: str = ""
    menu: str = ""
    reviews: str = ""

    @classmethod
    def from_extraction(cls, text: str) -> RestaurantProfile:
        """Pull the four tagged sections out of the extraction pass output."""
        fields: dict[str, str] = {}
        for name in ("atmosphere", "cuisine", "menu", "reviews"):
            match = re.search(_SECTION_RE.format(tag=name), text, re.DOTALL | re.IGNORECASE)
            if match:
                fields[name] = match.group(1).strip()
        return cls(**fields)


_SCORE_RE = re.compile(r"\b(10|[1-9])\s*(?:out of|/)\s*10\b", re.IGNORECASE)


class EvaluationVerdict(BaseModel):
    score: int = Field(ge=1, le=10)
    rationale: str

    @classmethod
    def parse(cls, text: str) -> EvaluationVerdict | None:
        """Find an ``N out of 10`` (or ``N/10``) score; ``None`` when absent."""
        match = _SCORE_RE.search(text)
        if match is None:
            return None
        return cls(score=int(match.group(1)), rationale=text.strip())


# ---------------------------------------------------------------------------
# Persisted transcript
# ---------------------------------------------------------------------------

class StoredMessage(BaseModel):
    message_id: str
    chat_id: str
    role: Literal["user", "assistant"]
    content: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: float = Field(default_factory=time.time)


class Chat(BaseModel):
    chat_id: str
    title: str
    focus_mode: str
    files: list[str] = Field(default_factory=list)
    messages: list[StoredMessage] = Field(default_factory=list)
    created_at: float = Field(default_factory=time.time)
    updated_at: float = Field(default_factory=time.time)
