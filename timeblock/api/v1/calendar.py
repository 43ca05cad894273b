# timeblock/api/v1/calendar.py

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, Query
from pydantic import BaseModel, Field, field_validator

from timeblock.config import settings
from timeblock.core.auth.security import get_current_user
from timeblock.core.calendar import (
    BaseCalendarProvider,
    CreationOutcome,
    EventMaterializer,
    get_calendar_provider,
)
from timeblock.core.calendar.schemas import EventOut
from timeblock.core.tasks import Task, to_iso_utc
from timeblock.core.tasks.schemas import check_time_zone

router = APIRouter(
    prefix="/v1/calendar",
    tags=["calendar"],
    dependencies=[Depends(get_current_user)],
)
log = logging.getLogger(__name__)


class CreateEventsRequest(BaseModel):
    tasks: List[Task] = Field(..., min_length=1)
    timeZone: Optional[str] = Field(None, description="Caller's IANA zone, stamped on every event")
    allOrNothing: bool = Field(True, description="Answer with an error if any event could not be created")

    @field_validator("timeZone")
    @classmethod
    def _known_zone(cls, value: Optional[str]) -> Optional[str]:
        return check_time_zone(value)


class CreateEventsResponse(BaseModel):
    success: bool
    timeZone: str
    outcomes: List[CreationOutcome]


class EventsOut(BaseModel):
    items: List[EventOut] = Field(default_factory=list)


def get_provider() -> BaseCalendarProvider:
    return get_calendar_provider()


@router.get("/events", response_model=EventsOut, summary="Upcoming events of the calendar")
async def list_upcoming_events(
    max_results: int = Query(10, alias="maxResults", ge=1, le=250),
    provider: BaseCalendarProvider = Depends(get_provider),
) -> EventsOut:
    resp = await provider.list_events(
        settings.GOOGLE_CALENDAR_ID,
        time_min=to_iso_utc(datetime.now(timezone.utc)),
        max_results=max_results,
        single_events=True,
        order_by="startTime",
    )
    return EventsOut(items=[EventOut.model_validate(item) for item in resp.get("items", [])])


@router.post("/events", response_model=CreateEventsResponse, summary="Create one calendar event per task")
async def create_events(
    payload: CreateEventsRequest = Body(...),
    provider: BaseCalendarProvider = Depends(get_provider),
) -> CreateEventsResponse:
    materializer = EventMaterializer(provider)
    # MaterializationFailure propagates to the app-level handler with the outcomes.
    report = await materializer.materialize(
        payload.tasks, time_zone=payload.timeZone, all_or_nothing=payload.allOrNothing
    )
    log.info(
        "[API /calendar/events] %d created, %d failed",
        len(report.succeeded), len(report.failed),
    )
    return CreateEventsResponse(
        success=not report.failed, timeZone=report.time_zone, outcomes=report.outcomes
    )
