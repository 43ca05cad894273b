# timeblock/core/calendar/materializer.py
"""Commits extracted tasks as calendar events, one at a time."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from timeblock.config import settings
from timeblock.core.errors import MaterializationFailure, PartialMaterializationFailure
from timeblock.core.tasks.schemas import Task

from .base import BaseCalendarProvider
from .schemas import CalendarEventPayload, EventDateTime, color_id_for

log = logging.getLogger(__name__)

EventObserver = Callable[[Task, Dict[str, Any]], None]


class CreationOutcome(BaseModel):
    """Result of submitting one task."""

    index: int
    task: Task
    success: bool
    event_id: Optional[str] = None
    error: Optional[str] = None


class MaterializationReport(BaseModel):
    """Per-task outcomes of one batch, in input order."""

    time_zone: str
    outcomes: List[CreationOutcome] = Field(default_factory=list)

    @property
    def succeeded(self) -> List[CreationOutcome]:
        return [o for o in self.outcomes if o.success]

    @property
    def failed(self) -> List[CreationOutcome]:
        return [o for o in self.outcomes if not o.success]

    def raise_for_failures(self) -> None:
        """Raises if any creation failed; already created events are kept."""
        failed = len(self.failed)
        if not failed:
            return
        total = len(self.outcomes)
        if failed == total:
            raise MaterializationFailure(f"Failed to create {total} calendar event(s)", self)
        raise PartialMaterializationFailure(
            f"Failed to create {failed} of {total} calendar events", self
        )


def build_payload(task: Task, time_zone: str) -> CalendarEventPayload:
    return CalendarEventPayload(
        summary=task.title,
        description=task.description,
        start=EventDateTime(dateTime=task.start_time, timeZone=time_zone),
        end=EventDateTime(dateTime=task.end_time, timeZone=time_zone),
        colorId=color_id_for(task.priority),
    )


class EventMaterializer:
    """
    Creates one calendar event per task, strictly sequentially.

    A failure on one task is recorded and the next task is still attempted;
    nothing is rolled back. Callers that want all-or-nothing semantics pass
    ``all_or_nothing=True`` and get an exception after every task has been
    attempted.
    """

    def __init__(
        self,
        provider: BaseCalendarProvider,
        calendar_id: Optional[str] = None,
        default_time_zone: Optional[str] = None,
        on_event_created: Optional[EventObserver] = None,
    ) -> None:
        self.provider = provider
        self.calendar_id = calendar_id or settings.GOOGLE_CALENDAR_ID
        self.default_time_zone = default_time_zone or settings.DEFAULT_TIMEZONE
        self.on_event_created = on_event_created

    async def materialize(
        self,
        tasks: Sequence[Task],
        *,
        time_zone: Optional[str] = None,
        all_or_nothing: bool = False,
    ) -> MaterializationReport:
        """
        Args:
            tasks (Sequence[Task]): Tasks to commit, in order.
            time_zone (str | None): Caller's IANA zone, stamped on every event
                of the batch. Defaults to the materializer's default zone.
            all_or_nothing (bool): Raise after the batch if any creation failed.

        Returns:
            MaterializationReport: One outcome per task, same order.

        Raises:
            PartialMaterializationFailure: some creations failed (all_or_nothing).
            MaterializationFailure: every creation failed (all_or_nothing).
        """
        zone = time_zone or self.default_time_zone
        report = MaterializationReport(time_zone=zone)
        log.info(
            "Materializing %d task(s) into calendar '%s' via %s (tz=%s)",
            len(tasks), self.calendar_id, self.provider.name, zone,
        )

        for index, task in enumerate(tasks):
            payload = build_payload(task, zone).to_body()
            try:
                event = await self.provider.create_event(self.calendar_id, payload)
            except Exception as exc:  # noqa: BLE001 - recorded per task
                log.warning("Calendar event %d ('%s') failed: %s", index, task.title, exc)
                report.outcomes.append(
                    CreationOutcome(index=index, task=task, success=False, error=str(exc) or type(exc).__name__)
                )
                continue

            report.outcomes.append(
                CreationOutcome(index=index, task=task, success=True, event_id=event.get("id"))
            )
            if self.on_event_created is not None:
                self._notify(index, task, event)

        log.info(
            "Materialization done: %d created, %d failed",
            len(report.succeeded), len(report.failed),
        )
        if all_or_nothing:
            report.raise_for_failures()
        return report

    def _notify(self, index: int, task: Task, event: Dict[str, Any]) -> None:
        # Observer errors are logged; the outcome stays a success.
        try:
            self.on_event_created(task, event)
        except Exception:
            log.exception("on_event_created observer failed for event %d ('%s')", index, task.title)


__all__ = [
    "CreationOutcome",
    "MaterializationReport",
    "EventMaterializer",
    "build_payload",
]
