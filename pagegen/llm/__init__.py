"""Lazy exports for generation backend clients."""

from __future__ import annotations

from importlib import import_module
from typing import Any


_LAZY_EXPORTS: dict[str, tuple[str, str]] = {
    # base
    "Completion": ("pagegen.llm.base", "Completion"),
    "GenerationClient": ("pagegen.llm.base", "GenerationClient"),
    # clients
    "AnthropicClient": ("pagegen.llm.anthropic_client", "AnthropicClient"),
    "OpenAIClient": ("pagegen.llm.openai_client", "OpenAIClient"),
    # client_factory
    "ClientFactoryError": ("pagegen.llm.client_factory", "ClientFactoryError"),
    "create_generation_client": ("pagegen.llm.client_factory", "create_generation_client"),
    # retry
    "with_retry": ("pagegen.llm.retry", "with_retry"),
}


__all__ = sorted(_LAZY_EXPORTS.keys())


def __getattr__(name: str) -> Any:
    target = _LAZY_EXPORTS.get(name)
    if not target:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    module_name, attr = target
    module = import_module(module_name)
    value = getattr(module, attr)
    globals()[name] = value
    return value


def __dir__() -> list[str]:
    return sorted(list(globals().keys()) + list(_LAZY_EXPORTS.keys()))
