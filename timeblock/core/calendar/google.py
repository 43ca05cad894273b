# timeblock/core/calendar/google.py
"""
Calendar provider backed by the Google Calendar API (v3).
"""

from __future__ import annotations

import asyncio
import logging
import os
from typing import Any, Dict, Optional

from google.oauth2.service_account import Credentials
from googleapiclient.discovery import build

from timeblock.config import settings

from .base import BaseCalendarProvider

log = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/calendar"]


class GoogleCalendarProvider(BaseCalendarProvider):
    """
    Requires a service-account JSON key at
    ``settings.GOOGLE_CALENDAR_CREDENTIALS_JSON``. The Google client is
    blocking, so every request runs in a worker thread.
    """

    name = "google"

    def __init__(self) -> None:
        creds_path = settings.GOOGLE_CALENDAR_CREDENTIALS_JSON
        if not creds_path or not os.path.isfile(creds_path):
            raise FileNotFoundError(f"Google credentials not found: {creds_path}")
        creds = Credentials.from_service_account_file(creds_path, scopes=SCOPES)
        self._svc = build("calendar", "v3", credentials=creds, cache_discovery=False)
        log.info("Initialized GoogleCalendarProvider")

    async def create_event(self, calendar_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        request = self._svc.events().insert(calendarId=calendar_id, body=payload)
        created: Dict[str, Any] = await asyncio.to_thread(request.execute)
        log.info("[Calendar] inserted event %s: %s", created.get("id"), payload.get("summary"))
        return created

    async def list_events(
        self,
        calendar_id: str,
        time_min: Optional[str] = None,
        max_results: int = 10,
        single_events: bool = True,
        order_by: str = "startTime",
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "calendarId": calendar_id,
            "maxResults": max_results,
            "singleEvents": single_events,
            "orderBy": order_by,
        }
        if time_min:
            params["timeMin"] = time_min
        request = self._svc.events().list(**params)
        resp: Dict[str, Any] = await asyncio.to_thread(request.execute)
        return {"items": resp.get("items", [])}


__all__ = ["GoogleCalendarProvider"]
