# timeblock/core/calendar/noop.py

from __future__ import annotations

import logging
import uuid
from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, DefaultDict, Dict, List, Optional

from .base import BaseCalendarProvider

log = logging.getLogger(__name__)


def _instant(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


class NoOpCalendarProvider(BaseCalendarProvider):
    """
    In-memory calendar; events live as long as the provider instance.
    """

    name: str = "noop"

    def __init__(self) -> None:
        self._events: DefaultDict[str, List[Dict[str, Any]]] = defaultdict(list)
        log.info("Initialized NoOpCalendarProvider (in-memory)")

    async def create_event(self, calendar_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        event_id = uuid.uuid4().hex
        event: Dict[str, Any] = {**payload, "id": event_id, "status": "confirmed"}
        self._events[calendar_id].append(event)
        log.info("NoOp: event %s added to calendar %s: '%s'", event_id, calendar_id, payload.get("summary"))
        return dict(event)

    async def list_events(
        self,
        calendar_id: str,
        time_min: Optional[str] = None,
        max_results: int = 10,
        single_events: bool = True,
        order_by: str = "startTime",
    ) -> Dict[str, Any]:
        lower = _instant(time_min)
        events = self._events.get(calendar_id, [])
        if lower is not None:
            events = [
                ev for ev in events
                if (_instant(ev.get("end", {}).get("dateTime")) or lower) >= lower
            ]
        if order_by == "startTime":
            far_past = datetime.min.replace(tzinfo=timezone.utc)
            events = sorted(events, key=lambda ev: _instant(ev.get("start", {}).get("dateTime")) or far_past)
        items = [dict(ev) for ev in events[:max_results]]
        log.debug("NoOp: listing %d event(s) from calendar %s", len(items), calendar_id)
        return {"items": items}


__all__ = ["NoOpCalendarProvider"]
