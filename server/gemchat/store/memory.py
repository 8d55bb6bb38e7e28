from __future__ import annotations
import threading
from dataclasses import dataclass, asdict
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional
from uuid import uuid4

from gemchat.schemas.chat import Conversation, Message, Role


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class _ConversationRow:
    id: str
    title: str
    user_id: str
    created_at: datetime


@dataclass
class _MessageRow:
    id: str
    content: str
    role: str
    conversation_id: str
    user_id: str
    created_at: datetime


class MemoryChatStore:
    """Process-local store for development mode.

    Rows live in plain lists in insertion order, so equal timestamps keep the
    order they were written in. Data is lost on restart and is not shared
    between worker processes.
    """

    def __init__(self, clock: Callable[[], datetime] = utcnow) -> None:
        self._lock = threading.Lock()
        self._clock = clock
        self._conversations: List[_ConversationRow] = []
        self._messages: List[_MessageRow] = []

    async def init(self) -> None:
        return None

    async def close(self) -> None:
        return None

    def seed_demo_data(self, owner_id: str) -> None:
        """Populate the welcome conversations shown on a fresh demo install."""
        now = self._clock()
        welcome = _ConversationRow(id=str(uuid4()), title="Welcome Chat", user_id=owner_id, created_at=now)
        help_conv = _ConversationRow(
            id=str(uuid4()), title="AI Assistant Help", user_id=owner_id, created_at=now - timedelta(days=1)
        )
        greeting = _MessageRow(
            id=str(uuid4()),
            content="Hello! Welcome to your AI assistant. How can I help you today?",
            role="assistant",
            conversation_id=welcome.id,
            user_id=owner_id,
            created_at=now,
        )
        with self._lock:
            self._conversations.extend([welcome, help_conv])
            self._messages.append(greeting)

    # Conversations
    async def list_conversations(self, owner_id: str) -> List[Conversation]:
        with self._lock:
            rows = [c for c in self._conversations if c.user_id == owner_id]
        rows.sort(key=lambda c: c.created_at, reverse=True)
        return [Conversation(**asdict(c)) for c in rows]

    async def get_conversation(self, owner_id: str, conversation_id: str) -> Optional[Conversation]:
        with self._lock:
            for c in self._conversations:
                if c.id == conversation_id and c.user_id == owner_id:
                    return Conversation(**asdict(c))
        return None

    async def create_conversation(self, owner_id: str, title: str) -> Conversation:
        conv = _ConversationRow(id=str(uuid4()), title=title, user_id=owner_id, created_at=self._clock())
        with self._lock:
            self._conversations.append(conv)
        return Conversation(**asdict(conv))

    async def delete_conversation(self, owner_id: str, conversation_id: str) -> None:
        with self._lock:
            self._messages = [
                m for m in self._messages if not (m.conversation_id == conversation_id and m.user_id == owner_id)
            ]
            self._conversations = [
                c for c in self._conversations if not (c.id == conversation_id and c.user_id == owner_id)
            ]

    # Messages
    async def list_messages(self, owner_id: str, conversation_id: str) -> List[Message]:
        with self._lock:
            rows = [m for m in self._messages if m.conversation_id == conversation_id and m.user_id == owner_id]
        rows.sort(key=lambda m: m.created_at)
        return [Message(**asdict(m)) for m in rows]

    async def add_message(self, owner_id: str, conversation_id: str, role: Role, content: str) -> Message:
        msg = _MessageRow(
            id=str(uuid4()),
            content=content,
            role=role,
            conversation_id=conversation_id,
            user_id=owner_id,
            created_at=self._clock(),
        )
        with self._lock:
            self._messages.append(msg)
        return Message(**asdict(msg))
