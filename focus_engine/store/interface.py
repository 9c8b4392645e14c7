"""Chat store — ABC for transcript persistence."""

from __future__ import annotations

from abc import ABC, abstractmethod

from focus_engine.engine.models import Chat, StoredMessage


class ChatStore(ABC):
    """Async chat/message persistence interface.

    Swap to SQLite/Postgres by implementing this ABC.
    """

    @abstractmethod
    async def get_chat(self, chat_id: str) -> Chat | None: ...

    @abstractmethod
    async def create_chat(self, chat: Chat) -> None: ...

    @abstractmethod
    async def add_message(self, message: StoredMessage) -> bool:
        """Append to the message's chat. ``False`` if the id is already stored."""

    @abstractmethod
    async def delete_chat(self, chat_id: str) -> None: ...
