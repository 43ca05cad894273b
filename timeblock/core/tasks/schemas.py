# timeblock/core/tasks/schemas.py
"""
Pydantic schemas for tasks extracted from assistant replies.

Used in:
    * core.tasks.parser           ― parse result
    * core.calendar.materializer  ― input of event creation
    * api/v1/tasks.py, api/v1/calendar.py
"""

from __future__ import annotations

from typing import Any, Literal, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator

Priority = Literal["low", "medium", "high"]
PRIORITIES: tuple[str, ...] = ("low", "medium", "high")


def normalize_priority(value: Any) -> Optional[str]:
    """Lower-cases a priority; anything outside low/medium/high becomes None."""
    if not isinstance(value, str):
        return None
    value = value.strip().lower()
    return value if value in PRIORITIES else None


class Task(BaseModel):
    """A schedulable unit extracted from assistant text."""

    model_config = ConfigDict(extra="ignore")

    title: str = Field(..., description="Task title, non-empty")
    description: Optional[str] = Field(None, description="Free text")
    start_time: str = Field(..., description="Absolute ISO-8601 UTC timestamp")
    end_time: str = Field(..., description="Absolute ISO-8601 UTC timestamp")
    priority: Optional[Priority] = Field(None, description="low | medium | high")
    category: Optional[str] = Field(None, description="Free text category")

    @field_validator("title", "start_time", "end_time")
    @classmethod
    def _required_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @field_validator("priority", mode="before")
    @classmethod
    def _normalize_priority(cls, value: Any) -> Optional[str]:
        return normalize_priority(value)


def check_time_zone(value: Optional[str]) -> Optional[str]:
    """Validates an IANA zone name (None passes through)."""
    if value is None:
        return None
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown time zone: {value!r}") from exc
    return value


__all__ = ["Task", "Priority", "PRIORITIES", "normalize_priority", "check_time_zone"]
