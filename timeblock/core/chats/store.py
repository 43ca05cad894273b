# timeblock/core/chats/store.py

"""Persistence of chats and their messages."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from timeblock.core.llm.message import Message, Role

from .models import Chat, ChatMessage, _utcnow

log = logging.getLogger(__name__)

ChatObserver = Callable[[Chat], None]


class ChatStore:
    """
    Async store for chats and messages.

    Every write commits on its own: a message that was persisted stays
    persisted even if a later step of the same request fails.
    """

    def __init__(self, db_session: AsyncSession, on_chat_created: Optional[ChatObserver] = None) -> None:
        self.db: AsyncSession = db_session
        self.on_chat_created = on_chat_created

    async def _commit(self) -> None:
        try:
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    # ------------------------------------------------------------------ #
    #                                chats                               #
    # ------------------------------------------------------------------ #
    async def create_chat(self, user_id: str, title: str) -> Chat:
        chat = Chat(user_id=user_id, title=title)
        self.db.add(chat)
        await self._commit()
        log.info("Created chat %s for user %s", chat.id, user_id)
        if self.on_chat_created is not None:
            self.on_chat_created(chat)
        return chat

    async def get_chat(self, chat_id: str, user_id: str) -> Optional[Chat]:
        stmt = select(Chat).where(Chat.id == chat_id, Chat.user_id == user_id)
        return (await self.db.scalars(stmt)).first()

    async def list_chats(self, user_id: str) -> List[Chat]:
        """Chats of the user, most recently active first."""
        stmt = (
            select(Chat)
            .where(Chat.user_id == user_id)
            .order_by(Chat.updated_at.desc(), Chat.created_at.desc())
        )
        return list((await self.db.scalars(stmt)).all())

    async def delete_chat(self, chat_id: str, user_id: str) -> bool:
        chat = await self.get_chat(chat_id, user_id)
        if chat is None:
            log.warning("Chat %s not found for deletion (user %s)", chat_id, user_id)
            return False
        await self.db.execute(delete(ChatMessage).where(ChatMessage.chat_id == chat_id))
        await self.db.delete(chat)
        await self._commit()
        log.info("Deleted chat %s", chat_id)
        return True

    async def touch_chat(self, chat_id: str) -> None:
        """Bumps ``updated_at`` so recency-ordered listings see the activity."""
        await self.db.execute(update(Chat).where(Chat.id == chat_id).values(updated_at=_utcnow()))
        await self._commit()

    # ------------------------------------------------------------------ #
    #                               messages                             #
    # ------------------------------------------------------------------ #
    async def list_messages(self, chat_id: str) -> List[ChatMessage]:
        """All messages of a chat, oldest first."""
        stmt = (
            select(ChatMessage)
            .where(ChatMessage.chat_id == chat_id)
            .order_by(ChatMessage.created_at.asc(), ChatMessage.id.asc())
        )
        return list((await self.db.scalars(stmt)).all())

    async def get_history(self, chat_id: str) -> List[Message]:
        return [Message(role=m.role, content=m.content) for m in await self.list_messages(chat_id)]

    async def insert_message(self, chat_id: str, role: Role, content: str) -> ChatMessage:
        message = ChatMessage(chat_id=chat_id, role=role, content=content)
        self.db.add(message)
        await self._commit()
        log.debug("Saved %s message id=%s in chat %s", role, message.id, chat_id)
        return message


__all__ = ["ChatStore"]
