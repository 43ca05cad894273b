# timeblock/core/llm/providers/openai.py
"""Chat-completions provider speaking the OpenAI HTTP API through httpx."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Sequence

import httpx

from timeblock.config import settings
from timeblock.core.errors import ModelInvocationFailure
from timeblock.core.llm.message import Message

from .base import BaseLLMProvider

log = logging.getLogger(__name__)


class OpenAILLMProvider(BaseLLMProvider):
    name = "openai"

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
    ) -> None:
        self.api_key = api_key or settings.OPENAI_API_KEY
        if not self.api_key:
            raise ValueError("OPENAI_API_KEY is not configured")
        self.model = model or settings.OPENAI_MODEL
        self.url = settings.OPENAI_BASE_URL.rstrip("/") + "/chat/completions"
        self._http_client = http_client or httpx.AsyncClient(timeout=settings.LLM_TIMEOUT_SECONDS)
        log.info("OpenAILLMProvider initialized with model %s", self.model)

    async def complete(self, messages: Sequence[Message]) -> str:
        body: Dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": m["role"], "content": m["content"]} for m in messages],
            "max_tokens": settings.LLM_MAX_TOKENS,
            "temperature": settings.LLM_TEMPERATURE,
        }
        headers = {"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"}
        log.debug("OpenAI request: model=%s, %d message(s)", self.model, len(messages))

        try:
            response = await self._http_client.post(self.url, json=body, headers=headers)
        except httpx.HTTPError as exc:
            log.error("OpenAI request failed: %s", exc)
            raise ModelInvocationFailure(f"OpenAI API error: {type(exc).__name__}") from exc

        if not response.is_success:
            log.error("OpenAI API returned %s: %.200s", response.status_code, response.text)
            raise ModelInvocationFailure(f"OpenAI API error: {response.status_code}")

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            log.error("Unexpected OpenAI response shape: %.200s", response.text)
            raise ModelInvocationFailure("OpenAI API error: malformed response") from exc
        if not isinstance(content, str):
            raise ModelInvocationFailure("OpenAI API error: empty reply")
        return content

    async def aclose(self) -> None:
        await self._http_client.aclose()
