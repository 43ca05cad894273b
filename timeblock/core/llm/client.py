# timeblock/core/llm/client.py

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from .message import Message
from .prompts import SYSTEM_PROMPT_SCHEDULER
from .providers import get_llm_provider
from .providers.base import BaseLLMProvider

log = logging.getLogger(__name__)


class LLMClient:
    """
    Async client for LLM providers.
    Builds the transcript and delegates the call to the provider returned by
    get_llm_provider() (or the one passed in).
    """

    def __init__(
        self,
        provider: Optional[BaseLLMProvider] = None,
        system_prompt: str = SYSTEM_PROMPT_SCHEDULER,
    ) -> None:
        self.provider: BaseLLMProvider = provider or get_llm_provider()
        self.system_prompt = system_prompt
        log.info("LLMClient using provider: %s", self.provider.name)

    def build_transcript(self, history: Sequence[Message], prompt: str) -> List[Message]:
        """System instructions, then history in order, then the new user message."""
        transcript: List[Message] = [Message(role="system", content=self.system_prompt)]
        transcript.extend(Message(role=m["role"], content=m["content"]) for m in history)
        transcript.append(Message(role="user", content=prompt))
        return transcript

    async def generate(self, prompt: str, history: Sequence[Message]) -> str:
        """
        Generates the assistant reply to ``prompt`` given the prior ``history``.

        Args:
            prompt (str): The new user message (not part of ``history``).
            history (Sequence[Message]): Prior messages, oldest first.

        Returns:
            str: Reply text.

        Raises:
            ModelInvocationFailure: propagated from the provider.
        """
        transcript = self.build_transcript(history, prompt)
        log.debug("LLMClient: calling provider.complete with %d message(s)", len(transcript))
        reply = await self.provider.complete(transcript)
        log.debug("LLMClient: provider.complete returned %d chars", len(reply))
        return reply


__all__ = ("LLMClient",)
