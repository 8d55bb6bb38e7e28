from __future__ import annotations
from datetime import datetime, timezone
from uuid import uuid4
from sqlmodel import SQLModel, Field


def new_id() -> str:
    return str(uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Conversation(SQLModel, table=True):
    __tablename__ = "conversations"

    id: str = Field(default_factory=new_id, primary_key=True)
    title: str = Field(max_length=200)
    user_id: str = Field(index=True)
    created_at: datetime = Field(default_factory=utcnow, index=True)


class Message(SQLModel, table=True):
    __tablename__ = "messages"

    id: str = Field(default_factory=new_id, primary_key=True)
    content: str
    role: str = Field(max_length=20)  # "user" or "assistant"
    conversation_id: str = Field(index=True, foreign_key="conversations.id")
    user_id: str = Field(index=True)
    created_at: datetime = Field(default_factory=utcnow, index=True)
