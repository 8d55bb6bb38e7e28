from __future__ import annotations
import random
from typing import List, Optional

IMAGE_FALLBACK_TEMPLATE = (
    "Image Request: \"{prompt}\"\n\n"
    "I'd love to help with image generation, but the AI service is currently unavailable. "
    "This would create a visual representation of your request. "
    "Please try again in a few minutes when the service is back online."
)

TEXT_FALLBACK_TEMPLATES: List[str] = [
    "I received your message: \"{prompt}\"\n\n"
    "I'm currently unable to connect to the AI service, but I wanted to acknowledge your message. "
    "Please try again in a few moments when the service is available.",
    "Thank you for your message about \"{prompt}\". The AI service is temporarily unavailable, "
    "but I'll be ready to help as soon as it's back online.",
    "I see you're asking about \"{prompt}\". Unfortunately, I can't process this right now due to "
    "service issues, but please don't hesitate to try again shortly.",
]


def fallback_response(prompt: str, is_image: bool = False, rng: Optional[random.Random] = None) -> str:
    """Placeholder assistant reply for when the AI provider is unavailable."""
    if is_image:
        return IMAGE_FALLBACK_TEMPLATE.format(prompt=prompt)
    template = (rng or random).choice(TEXT_FALLBACK_TEMPLATES)
    return template.format(prompt=prompt)
