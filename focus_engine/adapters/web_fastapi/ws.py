"""WebSocket message handler — live relay plus chat persistence."""

from __future__ import annotations

import json
import logging
import secrets
from typing import Any

from fastapi import WebSocket, WebSocketDisconnect
from pydantic import BaseModel, Field, ValidationError

from focus_engine.adapters.relay import relay_and_record
from focus_engine.engine.agent import FocusEngine
from focus_engine.engine.errors import InvalidQueryFormat, UnknownFocusMode
from focus_engine.engine.models import (
    Chat,
    EventType,
    OptimizationMode,
    SearchRequest,
    StoredMessage,
    history_from_wire,
)
from focus_engine.modes.config import FocusMode
from focus_engine.search.restaurant import parse_restaurant_query

logger = logging.getLogger(__name__)


class WSChatMessage(BaseModel):
    message_id: str | None = Field(default=None, alias="messageId")
    chat_id: str = Field(alias="chatId")
    content: str = ""


class WSMessage(BaseModel):
    type: str
    message: WSChatMessage
    focus_mode: str = Field(alias="focusMode")
    optimization_mode: OptimizationMode = Field(default=OptimizationMode.BALANCED, alias="optimizationMode")
    history: list[tuple[str, str]] = Field(default_factory=list)
    files: list[str] = Field(default_factory=list)


def error_frame(data: str, key: str, message_id: str | None = None) -> str:
    frame: dict[str, Any] = {"type": "error", "data": data, "key": key}
    if message_id is not None:
        frame["messageId"] = message_id
    return json.dumps(frame)


async def handle_message(raw: str, ws: WebSocket, engine: FocusEngine) -> None:
    try:
        await _process(raw, ws, engine)
    except WebSocketDisconnect:
        logger.info("websocket closed while answering")
    except Exception:
        logger.error("Failed to process websocket message", exc_info=True)
        await ws.send_text(error_frame("Failed to process message", "PROCESSING_ERROR"))


async def _process(raw: str, ws: WebSocket, engine: FocusEngine) -> None:
    try:
        parsed = WSMessage.model_validate_json(raw)
    except ValidationError:
        logger.warning("Rejected malformed websocket message")
        await ws.send_text(error_frame("Invalid message format", "INVALID_FORMAT"))
        return

    if not parsed.message.content:
        await ws.send_text(error_frame("Invalid message format", "INVALID_FORMAT"))
        return
    if parsed.type != "message":
        return

    try:
        mode, _ = engine.registry.resolve(parsed.focus_mode)
    except UnknownFocusMode:
        await ws.send_text(error_frame("Invalid focus mode", "INVALID_FOCUS_MODE"))
        return

    history = history_from_wire(parsed.history)
    if mode is FocusMode.RESTAURANT:
        try:
            record = parse_restaurant_query(parsed.message.content)
        except InvalidQueryFormat:
            await ws.send_text(error_frame("Invalid restaurant search input format", "INVALID_FORMAT"))
            return
        events = engine.evaluate_restaurant(record, history, parsed.optimization_mode)
    else:
        events = engine.handle(SearchRequest(
            focus_mode=parsed.focus_mode,
            query=parsed.message.content,
            history=history,
            optimization_mode=parsed.optimization_mode,
            files=parsed.files,
        ))

    await _save_user_turn(engine, parsed, mode)

    ai_message_id = secrets.token_hex(7)
    async for event in relay_and_record(events, engine.chat_store, parsed.message.chat_id, ai_message_id):
        if event.type == EventType.ERROR:
            await ws.send_text(error_frame(event.data, "CHAIN_ERROR", ai_message_id))
        else:
            await ws.send_text(json.dumps({**event.to_wire(), "messageId": ai_message_id}))


async def _save_user_turn(engine: FocusEngine, parsed: WSMessage, mode: FocusMode) -> None:
    store = engine.chat_store
    chat_id = parsed.message.chat_id
    if await store.get_chat(chat_id) is None:
        await store.create_chat(Chat(
            chat_id=chat_id,
            title=parsed.message.content,
            focus_mode=mode.value,
            files=parsed.files,
        ))
    await store.add_message(StoredMessage(
        message_id=parsed.message.message_id or secrets.token_hex(7),
        chat_id=chat_id,
        role="user",
        content=parsed.message.content,
    ))
