from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol, runtime_checkable


@dataclass
class Completion:
    text: str
    model: str
    stop_reason: str = ""
    usage: Optional[Dict[str, Any]] = None


@runtime_checkable
class GenerationClient(Protocol):
    """Single request/response exchange with a text generation backend.

    Implementations raise ``TransportError`` (or a subclass) when the backend
    is unreachable, rejects the call, or answers without text.
    """

    provider: str

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        cache_system_prompt: bool = True,
        model: Optional[str] = None,
        purpose: str = "page",
    ) -> str:
        ...

    async def aclose(self) -> None:
        ...


__all__ = ["Completion", "GenerationClient"]
