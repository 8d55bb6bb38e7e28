from __future__ import annotations
from typing import List, Optional, Protocol

from gemchat.schemas.chat import Conversation, Message, Role


class StoreError(Exception):
    """Raised when the backing store cannot complete an operation."""


class ChatStore(Protocol):
    """Conversation/message persistence, scoped by owning user id."""

    async def init(self) -> None:
        ...

    async def close(self) -> None:
        ...

    async def list_conversations(self, owner_id: str) -> List[Conversation]:
        """Owner's conversations, newest first."""
        ...

    async def get_conversation(self, owner_id: str, conversation_id: str) -> Optional[Conversation]:
        ...

    async def create_conversation(self, owner_id: str, title: str) -> Conversation:
        ...

    async def delete_conversation(self, owner_id: str, conversation_id: str) -> None:
        """Remove the conversation's messages, then the conversation itself."""
        ...

    async def list_messages(self, owner_id: str, conversation_id: str) -> List[Message]:
        """Messages of a conversation, oldest first."""
        ...

    async def add_message(self, owner_id: str, conversation_id: str, role: Role, content: str) -> Message:
        ...
