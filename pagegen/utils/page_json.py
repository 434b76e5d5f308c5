from __future__ import annotations

import json
import re
from typing import Any, Dict, Optional

from ..exceptions import ParseError

_OPENING_FENCE = re.compile(r"^```(?:json|JSON)?[ \t]*\r?\n?")
_CLOSING_FENCE = re.compile(r"\r?\n?```\s*$")


def strip_code_fence(text: str) -> str:
    stripped = text.strip()
    if not stripped.startswith("```"):
        return stripped
    stripped = _OPENING_FENCE.sub("", stripped, count=1)
    stripped = _CLOSING_FENCE.sub("", stripped, count=1)
    return stripped.strip()


def extract_object_span(text: str) -> Optional[str]:
    """Outermost ``{...}`` span: first opening brace to last closing brace."""
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end <= start:
        return None
    return text[start : end + 1]


def parse_page_json(raw_text: str) -> Dict[str, Any]:
    """Extract the JSON object from a generation response.

    Raises:
        ParseError: when no object can be located or the span is not valid JSON.
    """
    if not isinstance(raw_text, str) or not raw_text.strip():
        raise ParseError("Response was empty")

    candidate = strip_code_fence(raw_text)
    if not candidate.startswith("{"):
        span = extract_object_span(candidate)
        if span is None:
            raise ParseError("No JSON object found in response")
        candidate = span

    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as exc:
        span = extract_object_span(candidate)
        if span is None or span == candidate:
            raise ParseError(f"Invalid JSON at line {exc.lineno} column {exc.colno}: {exc.msg}") from exc
        try:
            data = json.loads(span)
        except json.JSONDecodeError as inner:
            raise ParseError(f"Invalid JSON at line {inner.lineno} column {inner.colno}: {inner.msg}") from inner

    if not isinstance(data, dict):
        raise ParseError(f"Expected a JSON object, got {type(data).__name__}")
    return data


__all__ = ["parse_page_json", "strip_code_fence", "extract_object_span"]
