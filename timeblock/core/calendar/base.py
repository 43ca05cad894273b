# timeblock/core/calendar/base.py
"""
Abstract base for calendar providers (async).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class BaseCalendarProvider(ABC):
    """
    Calendar provider interface, modelled on the Google Calendar v3 events API.
    """

    # Provider name ('noop', 'google')
    name: str

    @abstractmethod
    async def create_event(self, calendar_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Creates one event and returns the provider's representation of it.

        Args:
            calendar_id (str): Target calendar ('primary' for the default one).
            payload (Dict[str, Any]): Event body (summary, start, end, colorId, ...).

        Returns:
            Dict[str, Any]: Created event; always contains the provider-assigned 'id'.

        Raises:
            Exception: Provider API errors are propagated unchanged.
        """
        ...

    @abstractmethod
    async def list_events(
        self,
        calendar_id: str,
        time_min: Optional[str] = None,
        max_results: int = 10,
        single_events: bool = True,
        order_by: str = "startTime",
    ) -> Dict[str, Any]:
        """
        Lists events ending after ``time_min`` (RFC 3339).

        Returns:
            Dict[str, Any]: ``{"items": [...]}``.
        """
        ...


__all__ = ["BaseCalendarProvider"]
