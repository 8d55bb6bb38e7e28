"""Message exchange: persist the user turn, ask the AI provider, persist the reply."""
from __future__ import annotations
import asyncio
import logging
import random
from typing import Awaitable, Callable, Optional, Tuple

from gemchat.providers.base import (
    IMAGE_PROMPT_PREFIX,
    ProviderError,
    ProviderNetworkError,
    ProviderSafetyError,
    TextProvider,
)
from gemchat.providers.retry import generate_with_retry
from gemchat.schemas.chat import Message, ModelType
from gemchat.services.fallback import fallback_response
from gemchat.store.base import ChatStore

logger = logging.getLogger(__name__)

RATE_LIMIT_NOTICE = "Rate limit exceeded. Please wait a moment before sending another message."
INVALID_REQUEST_NOTICE = "Invalid request. Please check your message and try again."
AUTH_ERROR_NOTICE = "API authentication error. Please check your API key configuration."
SAFETY_NOTICE = "Your message was flagged by content safety filters. Please try rephrasing your question."
NETWORK_NOTICE = "Network connection error. Please check your internet connection and try again."

IMAGE_NOTE = "[Note: In a full implementation, this would generate an actual image using Gemini's image generation capabilities]"


class ConversationNotFound(Exception):
    def __init__(self, conversation_id: str) -> None:
        super().__init__(f"Conversation not found: {conversation_id}")
        self.conversation_id = conversation_id


def classify_provider_error(
    error: Exception, prompt: str, is_image: bool = False, rng: Optional[random.Random] = None
) -> str:
    """Map a failed generation to the assistant text shown to the user."""
    status = getattr(error, "status", None)
    message = str(error)
    if status == 503:
        return fallback_response(prompt, is_image, rng)
    if status == 429:
        return RATE_LIMIT_NOTICE
    if status == 400:
        return INVALID_REQUEST_NOTICE
    if status in (401, 403):
        return AUTH_ERROR_NOTICE
    if isinstance(error, ProviderSafetyError) or "SAFETY" in message:
        return SAFETY_NOTICE
    if isinstance(error, ProviderNetworkError) or "network" in message.lower() or "fetch" in message.lower():
        return NETWORK_NOTICE
    return fallback_response(prompt, is_image, rng)


class ChatService:
    def __init__(
        self,
        store: ChatStore,
        provider: TextProvider,
        max_attempts: int = 3,
        base_delay: float = 1.0,
        rng: Optional[random.Random] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.store = store
        self.provider = provider
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.rng = rng or random.Random()
        self.sleep = sleep

    async def _generate_reply(self, content: str, model_type: ModelType) -> str:
        is_image = model_type == "image"
        prompt = IMAGE_PROMPT_PREFIX + content if is_image else content
        try:
            text = await generate_with_retry(
                self.provider, prompt, max_attempts=self.max_attempts, base_delay=self.base_delay, sleep=self.sleep
            )
        except ProviderError as e:
            logger.error("AI generation failed provider=%s status=%s: %s", self.provider.id, e.status, e)
            return classify_provider_error(e, content, is_image, self.rng)
        except Exception as e:
            # Provider bugs still produce a reply rather than failing the turn
            logger.exception("Unexpected AI generation error provider=%s", self.provider.id)
            return classify_provider_error(e, content, is_image, self.rng)
        if is_image:
            return f"Image description: {text}\n\n{IMAGE_NOTE}"
        return text

    async def send_message(
        self, owner_id: str, conversation_id: str, content: str, model_type: ModelType = "text"
    ) -> Tuple[Message, Message]:
        """Persist a user turn and the assistant reply; returns both messages.

        The two inserts are not atomic. If storing the reply fails, the user
        message stays behind without an answer.
        """
        conv = await self.store.get_conversation(owner_id, conversation_id)
        if conv is None:
            raise ConversationNotFound(conversation_id)

        user_message = await self.store.add_message(owner_id, conversation_id, "user", content)
        logger.info("Stored user message id=%s conversation=%s model_type=%s", user_message.id, conversation_id, model_type)

        reply = await self._generate_reply(content, model_type)

        assistant_message = await self.store.add_message(owner_id, conversation_id, "assistant", reply)
        return user_message, assistant_message
