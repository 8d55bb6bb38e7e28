import random

import pytest

from gemchat.providers.base import IMAGE_PROMPT_PREFIX, ProviderError, ProviderNetworkError, ProviderSafetyError
from gemchat.services import chat as chat_module
from gemchat.services.chat import ChatService, ConversationNotFound, classify_provider_error
from gemchat.services.fallback import IMAGE_FALLBACK_TEMPLATE, TEXT_FALLBACK_TEMPLATES
from gemchat.store.base import StoreError

from conftest import RecordingSleep, ScriptedProvider

OWNER = "demo-user-123"


def _fallbacks(prompt):
    return {t.format(prompt=prompt) for t in TEXT_FALLBACK_TEMPLATES}


@pytest.mark.asyncio
async def test_send_message_success_persists_both_turns(store):
    conv = await store.create_conversation(OWNER, "Chat")
    provider = ScriptedProvider(["Paris is the capital of France."])
    service = ChatService(store, provider, sleep=RecordingSleep())

    user_message, assistant_message = await service.send_message(OWNER, conv.id, "Capital of France?", "text")

    assert user_message.role == "user"
    assert user_message.content == "Capital of France?"
    assert assistant_message.role == "assistant"
    assert assistant_message.content == "Paris is the capital of France."
    assert provider.prompts == ["Capital of France?"]

    stored = await store.list_messages(OWNER, conv.id)
    assert [m.id for m in stored] == [user_message.id, assistant_message.id]


@pytest.mark.asyncio
async def test_send_message_overloaded_uses_fallback_after_three_attempts(store):
    conv = await store.create_conversation(OWNER, "Chat")
    provider = ScriptedProvider([ProviderError("overloaded", status=503)])
    sleep = RecordingSleep()
    service = ChatService(store, provider, max_attempts=3, base_delay=1.0, sleep=sleep)

    _, assistant_message = await service.send_message(OWNER, conv.id, "hello there", "text")

    assert assistant_message.content in _fallbacks("hello there")
    assert len(provider.prompts) == 3
    assert len(sleep.delays) == 2
    assert sleep.delays[0] < sleep.delays[1]


@pytest.mark.asyncio
async def test_send_message_rate_limited_then_success(store):
    conv = await store.create_conversation(OWNER, "Chat")
    provider = ScriptedProvider([ProviderError("slow down", status=429), "recovered"])
    service = ChatService(store, provider, sleep=RecordingSleep())

    _, assistant_message = await service.send_message(OWNER, conv.id, "hi", "text")

    assert assistant_message.content == "recovered"
    assert len(provider.prompts) == 2


@pytest.mark.asyncio
async def test_image_request_rewrites_prompt_and_wraps_reply(store):
    conv = await store.create_conversation(OWNER, "Pictures")
    provider = ScriptedProvider(["A red fox in the snow"])
    service = ChatService(store, provider, sleep=RecordingSleep())

    _, assistant_message = await service.send_message(OWNER, conv.id, "a fox", "image")

    assert provider.prompts == [IMAGE_PROMPT_PREFIX + "a fox"]
    assert assistant_message.content.startswith("Image description: A red fox in the snow")


@pytest.mark.asyncio
async def test_image_request_fallback_uses_image_template(store):
    conv = await store.create_conversation(OWNER, "Pictures")
    provider = ScriptedProvider([ProviderError("overloaded", status=503)])
    service = ChatService(store, provider, sleep=RecordingSleep())

    _, assistant_message = await service.send_message(OWNER, conv.id, "a fox", "image")

    assert assistant_message.content == IMAGE_FALLBACK_TEMPLATE.format(prompt="a fox")


@pytest.mark.asyncio
async def test_unknown_conversation_persists_nothing(store):
    service = ChatService(store, ScriptedProvider(["unused"]), sleep=RecordingSleep())

    with pytest.raises(ConversationNotFound):
        await service.send_message(OWNER, "missing", "hello", "text")

    assert await store.list_messages(OWNER, "missing") == []


@pytest.mark.asyncio
async def test_assistant_store_failure_keeps_user_message(store, monkeypatch):
    conv = await store.create_conversation(OWNER, "Chat")
    service = ChatService(store, ScriptedProvider(["reply"]), sleep=RecordingSleep())
    original_add = store.add_message

    async def flaky_add(owner_id, conversation_id, role, content):
        if role == "assistant":
            raise StoreError("insert failed")
        return await original_add(owner_id, conversation_id, role, content)

    monkeypatch.setattr(store, "add_message", flaky_add)

    with pytest.raises(StoreError):
        await service.send_message(OWNER, conv.id, "hello", "text")

    remaining = await store.list_messages(OWNER, conv.id)
    assert [m.role for m in remaining] == ["user"]


@pytest.mark.asyncio
async def test_unexpected_provider_exception_becomes_fallback(store):
    conv = await store.create_conversation(OWNER, "Chat")
    service = ChatService(store, ScriptedProvider([RuntimeError("boom")]), sleep=RecordingSleep())

    _, assistant_message = await service.send_message(OWNER, conv.id, "hello", "text")

    assert assistant_message.content in _fallbacks("hello")


@pytest.mark.parametrize(
    "error, expected",
    [
        (ProviderError("slow down", status=429), chat_module.RATE_LIMIT_NOTICE),
        (ProviderError("bad", status=400), chat_module.INVALID_REQUEST_NOTICE),
        (ProviderError("who are you", status=401), chat_module.AUTH_ERROR_NOTICE),
        (ProviderError("forbidden", status=403), chat_module.AUTH_ERROR_NOTICE),
        (ProviderSafetyError("blocked: SAFETY"), chat_module.SAFETY_NOTICE),
        (ProviderError("candidate finishReason SAFETY"), chat_module.SAFETY_NOTICE),
        (ProviderNetworkError("connection reset"), chat_module.NETWORK_NOTICE),
        (ProviderError("failed to fetch"), chat_module.NETWORK_NOTICE),
    ],
)
def test_classify_provider_error_notices(error, expected):
    assert classify_provider_error(error, "hello") == expected


@pytest.mark.parametrize("error", [ProviderError("overloaded", status=503), ProviderError("teapot", status=418)])
def test_classify_provider_error_falls_back(error):
    assert classify_provider_error(error, "hello", rng=random.Random(1)) in _fallbacks("hello")
