from __future__ import annotations

import time

from focus_engine.engine.models import Chat, StoredMessage
from focus_engine.store.interface import ChatStore


class InMemoryChatStore(ChatStore):
    """Dict-backed store — suitable for single-process dev/test."""

    def __init__(self) -> None:
        self._chats: dict[str, Chat] = {}

    async def get_chat(self, chat_id: str) -> Chat | None:
        return self._chats.get(chat_id)

    async def create_chat(self, chat: Chat) -> None:
        self._chats.setdefault(chat.chat_id, chat)

    async def add_message(self, message: StoredMessage) -> bool:
        chat = self._chats.get(message.chat_id)
        if chat is None:
            raise KeyError(f"Chat '{message.chat_id}' not found")
        if any(m.message_id == message.message_id for m in chat.messages):
            return False
        chat.messages.append(message)
        chat.updated_at = time.time()
        return True

    async def delete_chat(self, chat_id: str) -> None:
        self._chats.pop(chat_id, None)
