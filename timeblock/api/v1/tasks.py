# timeblock/api/v1/tasks.py

from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Body, Depends
from pydantic import BaseModel, Field, field_validator

from timeblock.config import settings
from timeblock.core.auth.security import get_current_user
from timeblock.core.tasks import MessageParser, Task
from timeblock.core.tasks.schemas import check_time_zone

router = APIRouter(
    prefix="/v1/tasks",
    tags=["tasks"],
    dependencies=[Depends(get_current_user)],
)
log = logging.getLogger(__name__)


class ParseRequest(BaseModel):
    message: str = Field(..., description="Assistant reply to extract tasks from")
    timeZone: Optional[str] = Field(None, description="Caller's IANA zone; 'today' is read in it")

    @field_validator("timeZone")
    @classmethod
    def _known_zone(cls, value: Optional[str]) -> Optional[str]:
        return check_time_zone(value)


class ParseResponse(BaseModel):
    tasks: List[Task] = Field(default_factory=list)


def get_message_parser() -> MessageParser:
    return MessageParser()


@router.post("/parse", response_model=ParseResponse, summary="Extract schedulable tasks from an assistant reply")
async def parse_tasks(
    payload: ParseRequest = Body(...),
    parser: MessageParser = Depends(get_message_parser),
) -> ParseResponse:
    now = datetime.now(ZoneInfo(payload.timeZone or settings.DEFAULT_TIMEZONE))
    tasks = parser.parse(payload.message, now=now)
    log.info("[API /tasks/parse] extracted %d task(s)", len(tasks))
    return ParseResponse(tasks=tasks)
