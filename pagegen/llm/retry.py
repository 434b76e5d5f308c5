"""Backoff for a single backend call.

This sits below the page-level retry loop: it only repeats the same request
after a transient transport failure and never changes the prompt.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple, Type

logger = logging.getLogger(__name__)


def retry_after_seconds(value: Optional[str]) -> Optional[float]:
    """Seconds from a `retry-after` header; HTTP-date values are ignored."""
    if not value:
        return None
    try:
        seconds = float(value)
    except ValueError:
        return None
    return seconds if seconds >= 0 else None


def backoff_delay(
    attempt: int,
    exc: BaseException,
    *,
    base_delay: float,
    max_delay: float,
) -> float:
    """Delay before the next try after ``attempt`` failed with ``exc``.

    A ``retry_after`` hint on the error (set from a 429 ``retry-after``
    header) wins over the exponential step when it is longer. Both are capped
    at ``max_delay``.
    """
    delay = float(base_delay) * (2 ** (attempt - 1))
    hint = getattr(exc, "retry_after", None)
    if isinstance(hint, (int, float)) and hint > delay:
        delay = float(hint)
    return min(float(max_delay), delay)


async def with_retry(
    func: Callable[..., Awaitable[Any]],
    *args: Any,
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    retry_on: Optional[Tuple[Type[BaseException], ...]] = None,
    context: Optional[Dict[str, Any]] = None,
    **kwargs: Any,
) -> Any:
    """
    Run an async backend call, backing off between tries.

    Args:
        func: Async function to execute
        max_retries: Total number of tries, at least one
        base_delay: Delay in seconds before the second try, doubled after each failure
        max_delay: Upper bound for a single delay
        retry_on: Exception types that may be retried. If None, retry everything.
        context: Provider, model and purpose of the call, added to every retry log record
    """
    attempts = max(1, int(max_retries))
    call = dict(context or {})
    last_exception: Optional[BaseException] = None

    for attempt in range(1, attempts + 1):
        try:
            return await func(*args, **kwargs)
        except Exception as exc:
            last_exception = exc
            if retry_on is not None and not isinstance(exc, retry_on):
                raise
            data = {**call, "try": attempt, "of": attempts, "error_type": getattr(exc, "error_type", type(exc).__name__)}
            if attempt >= attempts:
                logger.error("Backend call gave up: %s", exc, extra={"data": data})
                break
            delay = backoff_delay(attempt, exc, base_delay=base_delay, max_delay=max_delay)
            logger.warning(
                "Backend call failed: %s. Retrying in %.2fs",
                exc,
                delay,
                extra={"data": {**data, "delay_s": round(delay, 3)}},
            )
            await asyncio.sleep(delay)

    if last_exception is None:
        raise RuntimeError("Retry loop ended without capturing an exception")
    raise last_exception


__all__ = ["backoff_delay", "retry_after_seconds", "with_retry"]
