# timeblock/core/llm/providers/stub.py

from __future__ import annotations

import logging
from typing import Sequence

from timeblock.core.llm.message import Message

from .base import BaseLLMProvider

log = logging.getLogger(__name__)


class StubLLMProvider(BaseLLMProvider):
    """Returns a fixed reply – handy in unit tests and offline development."""
    name = "stub"

    def __init__(self, reply: str = "ok") -> None:
        self.reply = reply

    async def complete(self, messages: Sequence[Message]) -> str:
        log.debug("StubLLMProvider: complete called with %d message(s)", len(messages))
        return self.reply
