# timeblock/core/llm/message.py

from __future__ import annotations

from typing import Literal, TypedDict

Role = Literal["system", "user", "assistant"]


class Message(TypedDict):
    """One chat-completion message."""
    role: Role
    content: str


__all__ = ["Message", "Role"]
