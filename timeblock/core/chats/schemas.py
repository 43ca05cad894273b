# timeblock/core/chats/schemas.py

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ChatWithAIRequest(BaseModel):
    """Body of POST /v1/chat-with-ai (camelCase keys, as sent by the web client)."""
    chatId: str = Field(..., min_length=1)
    message: str = Field(..., min_length=1)


class ChatWithAIResponse(BaseModel):
    success: bool = True
    message: str


class ChatCreate(BaseModel):
    title: str = Field("New chat", min_length=1, max_length=255)


class ChatOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    updated_at: datetime


class ChatMessageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    chat_id: str
    role: str
    content: str
    created_at: datetime
