"""
Task extraction: assistant reply → ordered list of :class:`Task`.
"""
from __future__ import annotations

from .parser import MessageParser
from .schemas import Task
from .time_resolver import TimeResolver, to_iso_utc

__all__ = ["MessageParser", "Task", "TimeResolver", "to_iso_utc"]
