from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional
import httpx

from gemchat.providers.base import ProviderError, ProviderNetworkError, ProviderSafetyError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


class GeminiProvider:
    """Single-prompt text generation against the Gemini REST API."""

    id = "gemini"

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gemini-1.5-flash",
        base_url: str = DEFAULT_BASE_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self._transport = transport

    def _to_gemini_payload(self, prompt: str) -> Dict[str, Any]:
        return {"contents": [{"role": "user", "parts": [{"text": prompt}]}]}

    async def generate(self, prompt: str) -> str:
        url = f"{self.base_url}/models/{self.model}:generateContent"
        headers = {"x-goog-api-key": self.api_key or "", "Content-Type": "application/json"}
        payload = self._to_gemini_payload(prompt)

        timeout = httpx.Timeout(connect=10.0, read=60.0, write=30.0, pool=10.0)
        try:
            async with httpx.AsyncClient(timeout=timeout, trust_env=True, transport=self._transport) as client:
                resp = await client.post(url, headers=headers, json=payload)
                resp.raise_for_status()
                obj = resp.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            body = e.response.text
            raise ProviderError(f"[gemini] HTTP {status}: {body}", status=status) from e
        except httpx.TransportError as e:
            raise ProviderNetworkError(f"[gemini] network error: {e}") from e
        except ValueError as e:
            raise ProviderError(f"[gemini] malformed response: {e}") from e

        return self._extract_text(obj)

    def _extract_text(self, obj: Dict[str, Any]) -> str:
        block_reason = (obj.get("promptFeedback") or {}).get("blockReason")
        if block_reason:
            raise ProviderSafetyError(f"[gemini] prompt blocked: {block_reason}")

        candidates = obj.get("candidates") or []
        if not candidates:
            raise ProviderError("[gemini] response contained no candidates")
        first = candidates[0]
        parts: List[Dict[str, Any]] = (first.get("content") or {}).get("parts", [])
        text = "".join(p.get("text", "") for p in parts)
        if not text and first.get("finishReason") == "SAFETY":
            raise ProviderSafetyError("[gemini] response blocked: SAFETY")
        return text
