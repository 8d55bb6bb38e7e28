from fastapi import APIRouter, Depends, HTTPException, Request
import logging

from gemchat.api.deps import get_chat_service
from gemchat.core.auth import get_effective_owner
from gemchat.schemas.chat import SendMessageRequest, SendMessageResponse
from gemchat.services.chat import ChatService, ConversationNotFound
from gemchat.store.base import StoreError

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/chat/send", response_model=SendMessageResponse)
async def send_message(
    request: SendMessageRequest, http_request: Request, service: ChatService = Depends(get_chat_service)
) -> SendMessageResponse:
    """Store the user's message, generate the assistant reply and return both."""
    owner = get_effective_owner(http_request)
    logger.info("/chat/send start conversation=%s model_type=%s", request.conversationId, request.modelType)
    try:
        user_message, assistant_message = await service.send_message(
            owner, request.conversationId, request.content, request.modelType
        )
    except ConversationNotFound:
        raise HTTPException(status_code=404, detail="Conversation not found")
    except StoreError as e:
        logger.exception("/chat/send error conversation=%s: %s", request.conversationId, e)
        raise HTTPException(status_code=500, detail="Internal server error")
    return SendMessageResponse(userMessage=user_message, assistantMessage=assistant_message)
