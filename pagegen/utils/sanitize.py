from __future__ import annotations

import copy
import math
from typing import Any

from .page_rules import (
    ELLIPSIS,
    ListRule,
    NumberRule,
    ObjectRule,
    PAGE_RULE,
    Rule,
    SECTIONS_MAX,
    StringRule,
    is_number,
    section_rule,
)


def clip_text(value: str, max_length: int) -> str:
    if len(value) <= max_length:
        return value
    return value[: max_length - len(ELLIPSIS)] + ELLIPSIS


def _clamp(value: float, rule: NumberRule) -> Any:
    cast = int if isinstance(value, int) else float
    if math.isnan(value) or value < rule.min:
        return cast(rule.min)
    if value > rule.max:
        return cast(rule.max)
    return value


def _sanitize(value: Any, rule: Rule) -> Any:
    if isinstance(rule, StringRule):
        if isinstance(value, str):
            return clip_text(value, rule.max)
        return value
    if isinstance(rule, NumberRule):
        if is_number(value):
            return _clamp(value, rule)
        return value
    if isinstance(rule, ListRule):
        if isinstance(value, list):
            return [_sanitize(item, rule.item) for item in value[: rule.max]]
        return value
    if isinstance(rule, ObjectRule):
        if isinstance(value, dict):
            return _sanitize_fields(value, rule)
        return value
    return value


def _sanitize_fields(obj: dict, rule: ObjectRule) -> dict:
    result = dict(obj)
    for name, field_rule in rule.fields.items():
        if name in result and result[name] is not None:
            result[name] = _sanitize(result[name], field_rule)
    return result


def sanitize_section(section: Any) -> Any:
    if not isinstance(section, dict):
        return section
    rule = section_rule(section.get("type"))
    if rule is None:
        return section
    return _sanitize_fields(section, rule)


def sanitize_page(doc: Any) -> Any:
    """Clip over-long strings and arrays to their bounds.

    Accepts any shape and never raises. The input is not modified; the
    result satisfies ``sanitize_page(sanitize_page(x)) == sanitize_page(x)``.
    """
    doc = copy.deepcopy(doc)
    if not isinstance(doc, dict):
        return doc
    result = _sanitize_fields(doc, PAGE_RULE)
    sections = result.get("sections")
    if isinstance(sections, list):
        result["sections"] = [sanitize_section(section) for section in sections[:SECTIONS_MAX]]
    return result


__all__ = ["clip_text", "sanitize_page", "sanitize_section"]
