import asyncio
import logging

import pytest

from pagegen.exceptions import APIError, AuthenticationError, RateLimitError
import pagegen.llm.retry as retry_module
from pagegen.llm.retry import backoff_delay, retry_after_seconds, with_retry


class FlakyBackend:
    """Fails with the queued errors, then returns page text."""

    def __init__(self, *errors):
        self.errors = list(errors)
        self.calls = 0

    async def complete(self, prompt, *, purpose="page"):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return f'{{"prompt": "{prompt}", "purpose": "{purpose}"}}'


@pytest.fixture
def sleeps(monkeypatch):
    delays = []

    async def fake_sleep(delay):
        delays.append(delay)

    monkeypatch.setattr(retry_module.asyncio, "sleep", fake_sleep)
    return delays


def test_transient_backend_errors_are_retried(sleeps):
    backend = FlakyBackend(RateLimitError(), APIError("overloaded"))

    text = asyncio.run(with_retry(backend.complete, "hero copy", purpose="reply", max_retries=3, base_delay=0.5))

    assert text == '{"prompt": "hero copy", "purpose": "reply"}'
    assert backend.calls == 3
    assert sleeps == [0.5, 1.0]


def test_last_error_is_raised_once_tries_run_out(sleeps):
    backend = FlakyBackend(RateLimitError("still limited"), RateLimitError("still limited"))

    with pytest.raises(RateLimitError, match="still limited"):
        asyncio.run(with_retry(backend.complete, "page", max_retries=2, base_delay=0))
    assert backend.calls == 2
    assert sleeps == [0]


def test_non_retryable_errors_fail_fast(sleeps):
    backend = FlakyBackend(AuthenticationError("bad key"))

    with pytest.raises(AuthenticationError):
        asyncio.run(with_retry(backend.complete, "page", max_retries=3, retry_on=(RateLimitError, APIError)))
    assert backend.calls == 1
    assert sleeps == []


def test_backoff_is_exponential_and_capped():
    error = APIError("overloaded")
    delays = [backoff_delay(attempt, error, base_delay=0.5, max_delay=3.0) for attempt in range(1, 6)]
    assert delays == [0.5, 1.0, 2.0, 3.0, 3.0]


def test_rate_limit_hint_stretches_the_delay(sleeps):
    backend = FlakyBackend(RateLimitError(retry_after=4.0), RateLimitError(retry_after=0.1))

    asyncio.run(with_retry(backend.complete, "page", max_retries=3, base_delay=1.0, max_delay=30.0))

    assert sleeps == [4.0, 2.0]
    assert backoff_delay(1, RateLimitError(retry_after=120), base_delay=1.0, max_delay=30.0) == 30.0


@pytest.mark.parametrize(
    "header, expected",
    [("7", 7.0), ("1.5", 1.5), ("", None), (None, None), ("-3", None), ("Wed, 21 Oct 2026 07:28:00 GMT", None)],
)
def test_retry_after_header_parsing(header, expected):
    assert retry_after_seconds(header) == expected


def test_retry_logs_carry_call_context(sleeps, caplog):
    caplog.set_level(logging.WARNING, logger="pagegen.llm.retry")
    backend = FlakyBackend(RateLimitError(), RateLimitError())
    context = {"provider": "anthropic", "model": "claude-test", "purpose": "template_fill"}

    with pytest.raises(RateLimitError):
        asyncio.run(with_retry(backend.complete, "page", max_retries=2, base_delay=0.25, context=context))

    warning, error = caplog.records
    assert warning.levelno == logging.WARNING
    assert warning.data == {
        "provider": "anthropic",
        "model": "claude-test",
        "purpose": "template_fill",
        "try": 1,
        "of": 2,
        "error_type": "rate_limit",
        "delay_s": 0.25,
    }
    assert error.levelno == logging.ERROR
    assert error.data["try"] == 2
    assert error.data["purpose"] == "template_fill"
    assert "delay_s" not in error.data
