# timeblock/api/v1/chats.py

from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Body, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from timeblock.core.auth.security import get_current_user
from timeblock.core.chats.schemas import ChatCreate, ChatMessageOut, ChatOut
from timeblock.core.chats.store import ChatStore
from timeblock.core.users.models import User
from timeblock.db.base import get_async_db_session

router = APIRouter(
    prefix="/v1/chats",
    tags=["chats"],
    dependencies=[Depends(get_current_user)],
)
log = logging.getLogger(__name__)


@router.get("/", response_model=List[ChatOut], summary="List chats, most recently active first")
async def list_chats(
    db: AsyncSession = Depends(get_async_db_session),
    current_user: User = Depends(get_current_user),
) -> List[ChatOut]:
    chats = await ChatStore(db).list_chats(current_user.id)
    return [ChatOut.model_validate(c) for c in chats]


@router.post("/", response_model=ChatOut, status_code=status.HTTP_201_CREATED, summary="Create a chat")
async def create_chat(
    payload: ChatCreate = Body(...),
    db: AsyncSession = Depends(get_async_db_session),
    current_user: User = Depends(get_current_user),
) -> ChatOut:
    chat = await ChatStore(db).create_chat(current_user.id, payload.title)
    return ChatOut.model_validate(chat)


@router.delete("/{chat_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a chat and its messages")
async def delete_chat(
    chat_id: str,
    db: AsyncSession = Depends(get_async_db_session),
    current_user: User = Depends(get_current_user),
) -> Response:
    deleted = await ChatStore(db).delete_chat(chat_id, current_user.id)
    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Chat not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{chat_id}/messages", response_model=List[ChatMessageOut], summary="Messages of a chat, oldest first")
async def list_messages(
    chat_id: str,
    db: AsyncSession = Depends(get_async_db_session),
    current_user: User = Depends(get_current_user),
) -> List[ChatMessageOut]:
    store = ChatStore(db)
    if await store.get_chat(chat_id, current_user.id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Chat not found")
    return [ChatMessageOut.model_validate(m) for m in await store.list_messages(chat_id)]
