from __future__ import annotations
from typing import Optional, Protocol


class ProviderError(Exception):
    """A failed call to the AI provider, with the HTTP status when there was one."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class ProviderNetworkError(ProviderError):
    """The provider could not be reached (connect/read failures, timeouts)."""


class ProviderSafetyError(ProviderError):
    """The prompt or the answer was blocked by the provider's SAFETY filter."""


class RetriesExhaustedError(ProviderError):
    def __init__(self, message: str, status: Optional[int] = None, attempts: int = 0) -> None:
        super().__init__(message, status=status)
        self.attempts = attempts


class TextProvider(Protocol):
    id: str

    async def generate(self, prompt: str) -> str:
        """Return the generated text for a single prompt, or raise ProviderError."""
        ...


# Image-style requests are answered by the text model with a caption prompt
IMAGE_PROMPT_PREFIX = "Generate a detailed description for an image based on this request: "
