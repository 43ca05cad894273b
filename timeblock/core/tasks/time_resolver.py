# timeblock/core/tasks/time_resolver.py
"""Free-text time expressions → absolute UTC timestamps."""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, time, timedelta, timezone

from dateutil import parser as dateutil_parser

log = logging.getLogger(__name__)

_ISO_UTC_RE = re.compile(
    r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?(?:Z|\+00:?00)",
    re.IGNORECASE,
)
_CLOCK_RE = re.compile(r"(\d{1,2}):(\d{2})\s*(am|pm)", re.IGNORECASE)


def to_iso_utc(value: datetime) -> str:
    """Formats an aware datetime as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    utc = value.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


class TimeResolver:
    """
    Converts a time expression into an absolute ISO-8601 UTC timestamp.

    ``resolve`` is total: whatever the input, it returns a timestamp. Rules are
    tried in order and the first match wins:

    1. already an ISO-8601 UTC timestamp → returned as is;
    2. "today" + ``H:MM am/pm`` → that clock time on ``now``'s local date;
    3. "tomorrow" + ``H:MM am/pm`` → same, one day later;
    4. anything python-dateutil can parse (naive results are read in
       ``now``'s zone);
    5. ``now``.

    ``now`` is always passed in by the caller; its tzinfo defines "local".
    """

    def resolve(self, text: str, now: datetime) -> str:
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        text = (text or "").strip()

        if _ISO_UTC_RE.fullmatch(text):
            return text

        lowered = text.lower()
        if "today" in lowered:
            resolved = self._at_clock(text, now.date(), now)
            if resolved is not None:
                return resolved
        if "tomorrow" in lowered:
            resolved = self._at_clock(text, (now + timedelta(days=1)).date(), now)
            if resolved is not None:
                return resolved

        parsed = self._parse_generic(text, now)
        if parsed is not None:
            return parsed

        log.debug("Could not resolve time expression %r, falling back to now", text)
        return to_iso_utc(now)

    @staticmethod
    def _at_clock(text: str, day: date, now: datetime) -> str | None:
        match = _CLOCK_RE.search(text)
        if not match:
            return None
        hour, minute = int(match.group(1)), int(match.group(2))
        if hour > 12 or minute > 59:
            return None
        is_pm = match.group(3).lower() == "pm"
        if is_pm and hour != 12:
            hour += 12
        elif not is_pm and hour == 12:
            hour = 0
        local = datetime.combine(day, time(hour, minute), tzinfo=now.tzinfo)
        return to_iso_utc(local)

    @staticmethod
    def _parse_generic(text: str, now: datetime) -> str | None:
        if not text:
            return None
        default = now.replace(hour=0, minute=0, second=0, microsecond=0, tzinfo=None)
        try:
            parsed = dateutil_parser.parse(text, default=default)
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=now.tzinfo)
            return to_iso_utc(parsed)
        except (ValueError, OverflowError) as exc:
            log.debug("dateutil could not parse %r: %s", text, exc)
            return None


__all__ = ["TimeResolver", "to_iso_utc"]
