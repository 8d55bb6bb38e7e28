from datetime import datetime, timedelta, timezone
from typing import List, Union

import pytest
from fastapi.testclient import TestClient

from gemchat.config import Settings
from gemchat.main import create_app
from gemchat.store.memory import MemoryChatStore


class FakeClock:
    """Strictly increasing timestamps, one second apart."""

    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        self.now += timedelta(seconds=1)
        return self.now


class ScriptedProvider:
    """Returns (or raises) the scripted outcomes in order and records every prompt."""

    id = "scripted"

    def __init__(self, outcomes: List[Union[str, Exception]]) -> None:
        self.outcomes = list(outcomes)
        self.prompts: List[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(clock):
    return MemoryChatStore(clock=clock)


@pytest.fixture
def settings():
    return Settings(_env_file=None, development_mode=True, seed_demo_data=False, ai_base_delay=0.0)


@pytest.fixture
def provider():
    return ScriptedProvider(["Hello from Gemini"])


#scope : function < class < module < package < session
@pytest.fixture(scope="function")
def client(settings, store, provider):
    app = create_app(settings=settings, store=store, provider=provider)
    with TestClient(app) as c:
        yield c
