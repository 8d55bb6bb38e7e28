from fastapi import APIRouter, Depends, HTTPException, Request
import logging
from typing import List

from gemchat.api.deps import get_store
from gemchat.core.auth import get_effective_owner
from gemchat.schemas.chat import Conversation, CreateConversationRequest, DeleteConversationResponse, Message
from gemchat.store.base import ChatStore, StoreError

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/conversations", response_model=List[Conversation])
async def get_conversations(http_request: Request, store: ChatStore = Depends(get_store)) -> List[Conversation]:
    """Get the caller's conversations (most recent first)."""
    owner = get_effective_owner(http_request)
    try:
        return await store.list_conversations(owner)
    except StoreError as e:
        logger.exception("getConversations failed: %s", e)
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/conversations", response_model=Conversation)
async def create_conversation(
    body: CreateConversationRequest, http_request: Request, store: ChatStore = Depends(get_store)
) -> Conversation:
    """Create a new conversation."""
    owner = get_effective_owner(http_request)
    try:
        conv = await store.create_conversation(owner, body.title)
    except StoreError as e:
        logger.exception("createConversation failed: %s", e)
        raise HTTPException(status_code=500, detail="Internal server error")
    logger.info("Created conversation id=%s", conv.id)
    return conv


@router.delete("/conversations/{conversation_id}", response_model=DeleteConversationResponse)
async def delete_conversation(
    conversation_id: str, http_request: Request, store: ChatStore = Depends(get_store)
) -> DeleteConversationResponse:
    """Delete a conversation and all of its messages."""
    owner = get_effective_owner(http_request)
    try:
        await store.delete_conversation(owner, conversation_id)
    except StoreError as e:
        logger.exception("deleteConversation failed id=%s: %s", conversation_id, e)
        raise HTTPException(status_code=500, detail="Internal server error")
    return DeleteConversationResponse(success=True)


@router.get("/conversations/{conversation_id}/messages", response_model=List[Message])
async def get_messages(
    conversation_id: str, http_request: Request, store: ChatStore = Depends(get_store)
) -> List[Message]:
    """List messages for a conversation (oldest first)."""
    owner = get_effective_owner(http_request)
    try:
        return await store.list_messages(owner, conversation_id)
    except StoreError as e:
        logger.exception("getMessages failed id=%s: %s", conversation_id, e)
        raise HTTPException(status_code=500, detail="Internal server error")
