from __future__ import annotations
from datetime import datetime
from typing import Literal
from pydantic import BaseModel, ConfigDict, Field

Role = Literal["user", "assistant"]
ModelType = Literal["text", "image"]


class Conversation(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    user_id: str
    created_at: datetime


class Message(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    content: str
    role: Role
    conversation_id: str
    user_id: str
    created_at: datetime


class CreateConversationRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)


class DeleteConversationResponse(BaseModel):
    success: bool


class SendMessageRequest(BaseModel):
    content: str = Field(..., min_length=1)
    conversationId: str = Field(..., min_length=1)
    modelType: ModelType = "text"


class SendMessageResponse(BaseModel):
    userMessage: Message
    assistantMessage: Message
