"""
Chats: persisted conversations and the chat round trip.
"""
from __future__ import annotations

from .models import Chat, ChatMessage
from .round_trip import ChatRoundTrip
from .store import ChatStore

__all__ = ["Chat", "ChatMessage", "ChatRoundTrip", "ChatStore"]
