# timeblock/api/v1/chat.py

from __future__ import annotations

import logging

from fastapi import APIRouter, Body, Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from timeblock.core.auth.security import TokenVerifier, bearer_token
from timeblock.core.chats.round_trip import ChatRoundTrip
from timeblock.core.chats.schemas import ChatWithAIRequest, ChatWithAIResponse
from timeblock.core.chats.store import ChatStore
from timeblock.core.errors import TimeblockError
from timeblock.core.llm.client import LLMClient
from timeblock.db.base import get_async_db_session

router = APIRouter(prefix="/v1", tags=["chat"])
log = logging.getLogger(__name__)


def get_llm_client() -> LLMClient:
    return LLMClient()


@router.post(
    "/chat-with-ai",
    response_model=ChatWithAIResponse,
    summary="Send a chat message to the assistant",
    description=(
        "Persists the user message, asks the model for a reply, persists the reply "
        "and returns it. Failures answer `{success: false, error}` with a non-2xx status."
    ),
)
async def chat_with_ai(
    payload: ChatWithAIRequest = Body(...),
    authorization: str | None = Header(None),
    db: AsyncSession = Depends(get_async_db_session),
    llm: LLMClient = Depends(get_llm_client),
) -> ChatWithAIResponse:
    log.info("[API /chat-with-ai] chat '%s' request: '%.50s...'", payload.chatId, payload.message)
    try:
        token = bearer_token(authorization)
        round_trip = ChatRoundTrip(TokenVerifier(db), ChatStore(db), llm)
        reply = await round_trip.run(token, payload.chatId, payload.message)
    except TimeblockError as e:
        log.warning("[API /chat-with-ai] %s for chat '%s': %s", type(e).__name__, payload.chatId, e.message)
        raise
    except Exception as e:
        log.exception("[API /chat-with-ai] Unhandled error processing chat '%s'", payload.chatId)
        raise TimeblockError(f"An internal error occurred: {type(e).__name__}") from e

    return ChatWithAIResponse(success=True, message=reply)
