"""Structured JSON logging for page generation.

Backend calls and generation attempts are logged as single-line JSON
records so retries and failures can be traced per request.
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import Any


class JSONFormatter(logging.Formatter):
    """Formats log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if hasattr(record, "data"):
            entry["data"] = record.data  # type: ignore[attr-defined]
        if record.exc_info and record.exc_info[1]:
            entry["error"] = str(record.exc_info[1])
        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(
    log_dir: Path | str | None = None,
    level: int | str = logging.INFO,
) -> logging.Logger:
    """Attach JSON handlers to the ``pagegen`` logger.

    Args:
        log_dir: Directory for a ``pagegen.jsonl`` file. If None, logs to stderr only.
        level: Logging level, as a number or a name such as ``"DEBUG"``.

    Returns:
        The package logger.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger("pagegen")
    logger.setLevel(level)

    if logger.handlers:
        return logger

    fmt = JSONFormatter()

    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(path / "pagegen.jsonl", encoding="utf-8")
        fh.setFormatter(fmt)
        fh.setLevel(level)
        logger.addHandler(fh)

    sh = logging.StreamHandler()
    sh.setFormatter(fmt)
    sh.setLevel(logging.WARNING)
    logger.addHandler(sh)

    return logger


class LLMCallLogger:
    """Context manager timing a single generation backend call."""

    def __init__(self, provider: str, model: str, purpose: str = "page"):
        self.provider = provider
        self.model = model
        self.purpose = purpose
        self.start_time = 0.0
        self._logger = logging.getLogger("pagegen.llm")

    def __enter__(self) -> LLMCallLogger:
        self.start_time = time.monotonic()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        pass

    def _elapsed(self) -> float:
        return round(time.monotonic() - self.start_time, 3)

    def success(self, usage: dict | None, text_len: int, stop_reason: str = ""):
        usage = usage or {}
        self._logger.info(
            "llm_call",
            extra={"data": {
                "provider": self.provider,
                "model": self.model,
                "purpose": self.purpose,
                "elapsed_s": self._elapsed(),
                "input_tokens": usage.get("input_tokens", usage.get("prompt_tokens", 0)),
                "output_tokens": usage.get("output_tokens", usage.get("completion_tokens", 0)),
                "cache_read_tokens": usage.get("cache_read_input_tokens", 0),
                "stop_reason": stop_reason,
                "text_len": text_len,
            }},
        )

    def error(self, error: str):
        self._logger.warning(
            "llm_call_error",
            extra={"data": {
                "provider": self.provider,
                "model": self.model,
                "purpose": self.purpose,
                "elapsed_s": self._elapsed(),
                "error": error,
            }},
        )


def log_attempt(
    *,
    attempt: int,
    strategy: str,
    outcome: str,
    elapsed_ms: int,
    intent: str,
    detail: str = "",
):
    """Log the outcome of one generation attempt."""
    logger = logging.getLogger("pagegen.attempt")
    level = logging.INFO if outcome == "accepted" else logging.WARNING
    logger.log(
        level,
        "generation_attempt",
        extra={"data": {
            "attempt": attempt,
            "strategy": strategy,
            "outcome": outcome,
            "elapsed_ms": elapsed_ms,
            "intent": intent,
            "detail": detail[:500],
        }},
    )


def log_generation(
    *,
    success: bool,
    intent: str,
    page_type: str,
    retry_count: int,
    generation_time_ms: int,
    strategy: str | None,
):
    """Log a completed generation request."""
    logger = logging.getLogger("pagegen.generation")
    logger.info(
        "generation_complete",
        extra={"data": {
            "success": success,
            "intent": intent,
            "page_type": page_type,
            "retry_count": retry_count,
            "generation_time_ms": generation_time_ms,
            "strategy": strategy,
        }},
    )


__all__ = ["JSONFormatter", "setup_logging", "LLMCallLogger", "log_attempt", "log_generation"]
