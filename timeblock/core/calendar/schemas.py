# timeblock/core/calendar/schemas.py
"""
Pydantic schemas of calendar events.

Used in:
    * core.calendar.materializer  ― Task → provider payload
    * api/v1/calendar.py          ― upcoming events listing
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

# Google Calendar event colour ids: 11 red, 5 yellow, 2 green, 1 blue.
PRIORITY_COLOR_IDS: Dict[str, str] = {"high": "11", "medium": "5", "low": "2"}
DEFAULT_COLOR_ID = "1"


def color_id_for(priority: Optional[str]) -> str:
    return PRIORITY_COLOR_IDS.get(priority or "", DEFAULT_COLOR_ID)


class EventDateTime(BaseModel):
    dateTime: str = Field(..., description="RFC 3339 timestamp")
    timeZone: Optional[str] = Field(None, description="IANA time zone name")


class CalendarEventPayload(BaseModel):
    """Body of a provider event-creation request."""

    summary: str
    description: Optional[str] = None
    start: EventDateTime
    end: EventDateTime
    colorId: str = DEFAULT_COLOR_ID

    def to_body(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class EventOut(BaseModel):
    """An event as listed back from the provider."""

    model_config = ConfigDict(extra="ignore")

    id: str
    summary: Optional[str] = None
    description: Optional[str] = None
    start: Dict[str, Any] = Field(default_factory=dict)
    end: Dict[str, Any] = Field(default_factory=dict)
    colorId: Optional[str] = None
    htmlLink: Optional[str] = None


__all__: list[str] = [
    "PRIORITY_COLOR_IDS", "DEFAULT_COLOR_ID", "color_id_for",
    "EventDateTime", "CalendarEventPayload", "EventOut",
]
