# timeblock/core/llm/providers/__init__.py
"""
LLM provider registry.

``get_llm_provider()`` builds the provider named by ``settings.LLM_PROVIDER``
once per process; the module holding it is imported only on first use.
"""

from __future__ import annotations

import importlib
import logging
from typing import Callable, Dict, Optional, Type

from timeblock.config import settings

from .base import BaseLLMProvider

log = logging.getLogger(__name__)


def _load(module_suffix: str, class_name: str) -> Type[BaseLLMProvider]:
    module_name = f"{__name__}{module_suffix}"
    try:
        provider_cls = getattr(importlib.import_module(module_name), class_name)
    except (ModuleNotFoundError, AttributeError) as e:
        log.error("Cannot load LLM provider %s.%s: %s", module_name, class_name, e)
        raise ImportError(f"LLM provider {class_name} unavailable in {module_name}") from e
    if not issubclass(provider_cls, BaseLLMProvider):
        raise TypeError(f"{class_name} does not implement BaseLLMProvider")  # pragma: no cover
    return provider_cls


_PROVIDER_LOADERS: Dict[str, Callable[[], Type[BaseLLMProvider]]] = {
    "stub": lambda: _load(".stub", "StubLLMProvider"),
    "openai": lambda: _load(".openai", "OpenAILLMProvider"),
}

_provider_instance: Optional[BaseLLMProvider] = None


def get_llm_provider() -> BaseLLMProvider:
    """Returns the process-wide LLM provider, creating it on first call."""
    global _provider_instance
    if _provider_instance is not None:
        return _provider_instance

    key = settings.LLM_PROVIDER.lower()
    loader = _PROVIDER_LOADERS.get(key)
    if loader is None:
        raise ValueError(f"Unknown LLM provider: {settings.LLM_PROVIDER}")
    try:
        _provider_instance = loader()()
    except (ImportError, ValueError, TypeError) as e:
        log.exception("LLM provider '%s' could not be initialized", key)
        raise ValueError(f"LLM provider '{key}' could not be initialized: {e}") from e
    log.info("LLM provider ready: %s", _provider_instance.name)
    return _provider_instance


async def close_llm_provider() -> None:
    """Releases the provider's network resources (app shutdown)."""
    global _provider_instance
    provider, _provider_instance = _provider_instance, None
    aclose = getattr(provider, "aclose", None)
    if aclose is not None:
        await aclose()
        log.info("LLM provider closed: %s", provider.name)


__all__ = ["BaseLLMProvider", "get_llm_provider", "close_llm_provider"]
