# timeblock/core/llm/providers/base.py

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from timeblock.core.llm.message import Message


class BaseLLMProvider(ABC):
    """Abstract base class for chat-completion providers (async)."""
    name: str  # provider name, e.g. 'stub', 'openai'

    @abstractmethod
    async def complete(self, messages: Sequence[Message]) -> str:
        """
        Sends the full ordered transcript and returns the assistant reply text.

        Raises:
            ModelInvocationFailure: on a non-2xx response or transport error.
        """
        ...


__all__ = ["BaseLLMProvider", "Message"]
