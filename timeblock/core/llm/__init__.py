from __future__ import annotations

from .client import LLMClient
from .message import Message

__all__ = [
    "LLMClient",
    "Message",
]
