from __future__ import annotations
from fastapi import Request

from gemchat.services.chat import ChatService
from gemchat.store.base import ChatStore


def get_store(request: Request) -> ChatStore:
    return request.app.state.store


def get_chat_service(request: Request) -> ChatService:
    return request.app.state.chat_service
