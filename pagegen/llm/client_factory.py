from __future__ import annotations

from typing import Optional

from ..config import Settings, get_settings
from .anthropic_client import AnthropicClient
from .base import GenerationClient
from .openai_client import OpenAIClient


class ClientFactoryError(ValueError):
    pass


def create_generation_client(
    settings: Optional[Settings] = None,
    provider: Optional[str] = None,
) -> GenerationClient:
    """Build the configured backend client; the caller owns its lifecycle."""
    resolved_settings = settings or get_settings()
    resolved = (provider or resolved_settings.generation_provider or "anthropic").lower()

    if resolved == "anthropic":
        return AnthropicClient(settings=resolved_settings)
    if resolved == "openai":
        return OpenAIClient(settings=resolved_settings)

    raise ClientFactoryError(f"Unknown generation provider: {resolved}")


__all__ = ["ClientFactoryError", "create_generation_client"]
