from __future__ import annotations

from typing import Iterable
from uuid import uuid4


def new_trace_id() -> str:
    return uuid4().hex


class PageGenError(Exception):
    def __init__(self, message: str, *, error_type: str, trace_id: str | None = None) -> None:
        self.error_type = error_type
        self.trace_id = trace_id or new_trace_id()
        super().__init__(message)

    def with_trace(self) -> str:
        return f"{self.args[0]} (trace_id={self.trace_id})"


class TransportError(PageGenError):
    """The generation backend was unreachable, rejected the call or returned no text."""

    def __init__(self, message: str, *, error_type: str = "transport", trace_id: str | None = None) -> None:
        super().__init__(message, error_type=error_type, trace_id=trace_id)


class RateLimitError(TransportError):
    def __init__(
        self,
        message: str = "Rate limit exceeded",
        *,
        retry_after: float | None = None,
        trace_id: str | None = None,
    ) -> None:
        self.retry_after = retry_after
        super().__init__(message, error_type="rate_limit", trace_id=trace_id)


class AuthenticationError(TransportError):
    def __init__(self, message: str = "Authentication failed", *, trace_id: str | None = None) -> None:
        super().__init__(message, error_type="authentication", trace_id=trace_id)


class TimeoutError(TransportError):
    def __init__(self, message: str = "Request timed out", *, trace_id: str | None = None) -> None:
        super().__init__(message, error_type="timeout", trace_id=trace_id)


class ContextLengthError(TransportError):
    def __init__(self, message: str = "Context length exceeded", *, trace_id: str | None = None) -> None:
        super().__init__(message, error_type="context_length", trace_id=trace_id)


class APIError(TransportError):
    def __init__(self, message: str, *, trace_id: str | None = None) -> None:
        super().__init__(message, error_type="api", trace_id=trace_id)


class EmptyResponseError(TransportError):
    def __init__(self, message: str = "Generation backend returned no text content", *, trace_id: str | None = None) -> None:
        super().__init__(message, error_type="empty_response", trace_id=trace_id)


class ParseError(PageGenError):
    def __init__(self, message: str, *, trace_id: str | None = None) -> None:
        super().__init__(message, error_type="parse", trace_id=trace_id)


class ValidationError(PageGenError):
    def __init__(self, violations: Iterable[str], *, trace_id: str | None = None) -> None:
        self.violations = list(violations)
        super().__init__("; ".join(self.violations) or "Invalid page document", error_type="validation", trace_id=trace_id)


__all__ = [
    "new_trace_id",
    "PageGenError",
    "TransportError",
    "RateLimitError",
    "AuthenticationError",
    "TimeoutError",
    "ContextLengthError",
    "APIError",
    "EmptyResponseError",
    "ParseError",
    "ValidationError",
]
