# timeblock/core/errors.py
"""Failure taxonomy of the chat and scheduling pipeline.

Every exception carries the HTTP status the API layer answers with and a
short human-readable message that is safe to show to the user.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from timeblock.core.calendar.materializer import MaterializationReport


class TimeblockError(Exception):
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AuthenticationFailure(TimeblockError):
    status_code = 401


class HistoryFetchFailure(TimeblockError):
    status_code = 500


class PersistFailure(TimeblockError):
    status_code = 500


class ModelInvocationFailure(TimeblockError):
    status_code = 502


class MaterializationFailure(TimeblockError):
    """Raised under an all-or-nothing contract when calendar creations failed.

    Events created before the failure stay in the calendar; ``report`` tells
    the caller which ones.
    """

    status_code = 502

    def __init__(self, message: str, report: "MaterializationReport") -> None:
        super().__init__(message)
        self.report = report


class PartialMaterializationFailure(MaterializationFailure):
    """Some, but not all, event creations failed."""


__all__ = [
    "TimeblockError",
    "AuthenticationFailure",
    "HistoryFetchFailure",
    "PersistFailure",
    "ModelInvocationFailure",
    "MaterializationFailure",
    "PartialMaterializationFailure",
]
