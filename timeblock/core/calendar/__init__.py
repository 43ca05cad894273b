"""
Calendar subsystem package.

• ``BaseCalendarProvider`` – abstract provider interface (see base.py).
• ``EventMaterializer`` – commits tasks as provider events.
• ``get_calendar_provider()`` – factory returning the provider instance named
  explicitly or by ``settings.CALENDAR_PROVIDER``.

Providers are imported lazily (``importlib.import_module``) so the Google SDK
is only loaded when it is actually configured.
"""
from __future__ import annotations

import importlib
import logging
from typing import Callable, Dict, Type

from timeblock.config import settings

from .base import BaseCalendarProvider
from .materializer import CreationOutcome, EventMaterializer, MaterializationReport

log = logging.getLogger(__name__)


def _lazy_import(module_suffix: str, class_name: str) -> Type[BaseCalendarProvider]:
    """
    _lazy_import(".noop", "NoOpCalendarProvider")  →  <class NoOpCalendarProvider>
    """
    module = importlib.import_module(f"{__name__}{module_suffix}")
    return getattr(module, class_name)


_PROVIDER_LOADERS: Dict[str, Callable[[], Type[BaseCalendarProvider]]] = {
    "noop": lambda: _lazy_import(".noop", "NoOpCalendarProvider"),
    "google": lambda: _lazy_import(".google", "GoogleCalendarProvider"),
}

# One instance per provider name: the in-memory provider must keep its events
# between requests.
_provider_instances: Dict[str, BaseCalendarProvider] = {}


def get_calendar_provider(name: str | None = None) -> BaseCalendarProvider:
    """
    Returns the calendar provider instance.

    • ``name`` – explicit name (case-insensitive).
    • Otherwise ``settings.CALENDAR_PROVIDER`` ("noop" by default).
    """
    provider_key = (name or settings.CALENDAR_PROVIDER).lower()
    if provider_key not in _provider_instances:
        loader = _PROVIDER_LOADERS.get(provider_key)
        if loader is None:
            raise ValueError(f"Unknown calendar provider: {provider_key}")
        _provider_instances[provider_key] = loader()()
        log.info("Initialized calendar provider: %s", provider_key)
    return _provider_instances[provider_key]


__all__: list[str] = [
    "BaseCalendarProvider",
    "CreationOutcome",
    "EventMaterializer",
    "MaterializationReport",
    "get_calendar_provider",
]
