from __future__ import annotations
import random
from typing import Optional

from gemchat.providers.base import IMAGE_PROMPT_PREFIX


class MockProvider:
    """Canned replies used in development mode when no Gemini key is configured."""

    id = "mock"

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()

    async def generate(self, prompt: str) -> str:
        if prompt.startswith(IMAGE_PROMPT_PREFIX):
            request = prompt[len(IMAGE_PROMPT_PREFIX):]
            return (
                f"In demo mode, I can only describe what the image might look like: a creative visual "
                f"representation of \"{request}\" with vibrant colors and artistic details. "
                f"To enable actual image generation, please configure your Google Gemini API key."
            )
        responses = [
            f"I'm a demo AI assistant! Your message was: '{prompt}'. "
            f"In a real setup, this would be powered by Google Gemini AI.",
            "Thanks for your message! I'm currently running in demo mode. "
            "To get real AI responses, please set up your Google Gemini API key.",
            "Hello! I'm here to help. This is a mock response - configure your environment "
            "variables to enable real AI chat.",
        ]
        return self._rng.choice(responses)
