# timeblock/core/tasks/parser.py
"""Extraction of scheduled tasks from one assistant reply."""

from __future__ import annotations

import json
import logging
import re
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional

from pydantic import ValidationError

from .schemas import Task, normalize_priority
from .time_resolver import TimeResolver

log = logging.getLogger(__name__)

_JSON_ARRAY_RE = re.compile(r"\[[\s\S]*\]")

# (line prefixes, task field); the first matching row wins.
_LINE_FIELDS: tuple[tuple[tuple[str, ...], str], ...] = (
    (("Title:", "Task:"), "title"),
    (("Description:",), "description"),
    (("Start:", "Start Time:"), "start_time"),
    (("End:", "End Time:"), "end_time"),
    (("Priority:",), "priority"),
    (("Category:",), "category"),
)
_TIME_FIELDS = frozenset({"start_time", "end_time"})


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MessageParser:
    """
    Turns an assistant reply into an ordered list of :class:`Task`.

    A JSON array embedded anywhere in the reply takes precedence; when there
    is none (or it does not decode) the reply is scanned for ``Title:`` /
    ``Start:`` / ``End:`` style lines. Parsing never raises: a reply with no
    recognizable tasks yields an empty list.
    """

    def __init__(
        self,
        resolver: Optional[TimeResolver] = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.resolver = resolver or TimeResolver()
        self.clock = clock

    def parse(self, message: str, now: Optional[datetime] = None) -> List[Task]:
        """
        Args:
            message (str): Raw assistant reply.
            now (datetime | None): Reference time for relative expressions in
                the line-oriented format. Defaults to ``self.clock()``.

        Returns:
            List[Task]: Tasks in reply order, possibly empty.
        """
        try:
            structured = self._parse_json(message)
            if structured is not None:
                log.debug("Parsed %d task(s) from JSON array", len(structured))
                return structured
            tasks = self._parse_lines(message, now or self.clock())
            log.debug("Parsed %d task(s) from plain-text lines", len(tasks))
            return tasks
        except Exception:
            log.exception("Unexpected error while parsing tasks from message")
            return []

    # ------------------------------------------------------------------ #
    #                              JSON path                             #
    # ------------------------------------------------------------------ #
    def _parse_json(self, message: str) -> Optional[List[Task]]:
        """None means "no usable JSON, fall back to lines"."""
        match = _JSON_ARRAY_RE.search(message)
        if not match:
            return None
        try:
            decoded = json.loads(match.group(0))
        except ValueError as exc:
            log.debug("Bracketed span is not valid JSON (%s), falling back to lines", exc)
            return None
        if not isinstance(decoded, list):
            return []
        return _validated(r for r in decoded if isinstance(r, dict))

    # ------------------------------------------------------------------ #
    #                          line-oriented path                        #
    # ------------------------------------------------------------------ #
    def _parse_lines(self, message: str, now: datetime) -> List[Task]:
        records: List[Dict[str, Any]] = []
        current: Dict[str, Any] = {}

        for raw_line in message.splitlines():
            line = raw_line.strip()
            field = _match_field(line)
            if field is None:
                continue
            value = line.split(":", 1)[1].strip()

            if field == "title":
                if current.get("title"):
                    records.append(current)
                    current = {}
                current["title"] = value
            elif field in _TIME_FIELDS:
                current[field] = self.resolver.resolve(value, now)
            elif field == "priority":
                priority = normalize_priority(value)
                if priority is not None:
                    current["priority"] = priority
            else:
                current[field] = value

        if current.get("title"):
            records.append(current)
        return _validated(records)


def _match_field(line: str) -> Optional[str]:
    for prefixes, field in _LINE_FIELDS:
        if line.startswith(prefixes):
            return field
    return None


def _validated(records: Iterable[Dict[str, Any]]) -> List[Task]:
    tasks: List[Task] = []
    for record in records:
        try:
            task = Task.model_validate(record)
        except ValidationError as exc:
            log.debug("Dropping incomplete task record %r: %s", record.get("title"), exc.errors())
            continue
        _warn_if_inverted(task)
        tasks.append(task)
    return tasks


def _warn_if_inverted(task: Task) -> None:
    # end <= start is accepted as-is; only surfaced in the logs.
    try:
        start = datetime.fromisoformat(task.start_time)
        end = datetime.fromisoformat(task.end_time)
        inverted = end <= start
    except (ValueError, TypeError):
        return
    if inverted:
        log.warning(
            "Task %r ends (%s) at or before it starts (%s)",
            task.title, task.end_time, task.start_time,
        )


__all__ = ["MessageParser"]
