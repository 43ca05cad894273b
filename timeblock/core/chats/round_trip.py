# timeblock/core/chats/round_trip.py
"""
One chat round trip: user message in, assistant reply out, both persisted.

    AuthVerify → FetchHistory → PersistUserMessage → InvokeModel
               → PersistAssistantMessage → UpdateConversationTimestamp → Done

Each step runs only after the previous one finished. Failures are terminal
for the request and are never retried here. Writes already committed stay
committed: when the model call fails the user message remains in the chat
without a reply.
"""

from __future__ import annotations

import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError

from timeblock.core.auth.security import TokenVerifier
from timeblock.core.errors import (
    AuthenticationFailure,
    HistoryFetchFailure,
    ModelInvocationFailure,
    PersistFailure,
)
from timeblock.core.llm.client import LLMClient
from timeblock.core.llm.message import Message, Role
from timeblock.core.users.models import User

from .store import ChatStore

log = logging.getLogger(__name__)


class ChatRoundTrip:
    def __init__(self, verifier: TokenVerifier, store: ChatStore, llm: LLMClient) -> None:
        self.verifier = verifier
        self.store = store
        self.llm = llm

    async def run(self, token: str | None, chat_id: str, message: str) -> str:
        """
        Args:
            token (str | None): Bearer identity token.
            chat_id (str): Conversation the message belongs to.
            message (str): New user message.

        Returns:
            str: Raw assistant reply (task extraction is up to the caller).

        Raises:
            AuthenticationFailure, HistoryFetchFailure, PersistFailure,
            ModelInvocationFailure
        """
        user = await self._verify(token)
        history = await self._fetch_history(user, chat_id)

        await self._persist(chat_id, "user", message, "Failed to save user message")

        reply = await self._invoke_model(message, history)

        await self._persist(chat_id, "assistant", reply, "Failed to save assistant message")

        await self._update_timestamp(chat_id)
        log.info("[RoundTrip] chat %s done: %d history item(s), reply %d chars", chat_id, len(history), len(reply))
        return reply

    async def _verify(self, token: str | None) -> User:
        try:
            return await self.verifier.verify(token)
        except SQLAlchemyError as exc:
            log.exception("[RoundTrip] user lookup failed during authentication")
            raise AuthenticationFailure("Authentication failed") from exc

    async def _fetch_history(self, user: User, chat_id: str) -> List[Message]:
        try:
            chat = await self.store.get_chat(chat_id, user.id)
            if chat is None:
                log.warning("[RoundTrip] chat %s not found for user %s", chat_id, user.id)
                raise HistoryFetchFailure("Failed to fetch chat history")
            return await self.store.get_history(chat_id)
        except SQLAlchemyError as exc:
            log.exception("[RoundTrip] history fetch failed for chat %s", chat_id)
            raise HistoryFetchFailure("Failed to fetch chat history") from exc

    async def _persist(self, chat_id: str, role: Role, content: str, error_message: str) -> None:
        try:
            await self.store.insert_message(chat_id, role, content)
        except SQLAlchemyError as exc:
            log.exception("[RoundTrip] could not persist %s message in chat %s", role, chat_id)
            raise PersistFailure(error_message) from exc

    async def _invoke_model(self, message: str, history: List[Message]) -> str:
        try:
            return await self.llm.generate(message, history)
        except ModelInvocationFailure:
            log.warning("[RoundTrip] model invocation failed; user message stays without a reply")
            raise
        except Exception as exc:
            log.exception("[RoundTrip] unexpected error from LLM provider")
            raise ModelInvocationFailure(f"Model invocation failed: {type(exc).__name__}") from exc

    async def _update_timestamp(self, chat_id: str) -> None:
        # The reply is already persisted; a stale updated_at only affects ordering.
        try:
            await self.store.touch_chat(chat_id)
        except SQLAlchemyError:
            log.exception("[RoundTrip] failed to update timestamp of chat %s", chat_id)


__all__ = ["ChatRoundTrip"]
