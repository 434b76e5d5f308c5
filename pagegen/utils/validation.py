from __future__ import annotations

from typing import Any, List, Optional

from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ValidationError
from ..schemas.intent import IntentLayoutStrategy
from ..schemas.page import PageDocument
from .page_rules import (
    AnyRule,
    BoolRule,
    CellsRule,
    EnumRule,
    IntRule,
    ListRule,
    NumberRule,
    ObjectRule,
    PAGE_RULE,
    Rule,
    SECTIONS_MAX,
    SECTIONS_MIN,
    StringRule,
    TextOnlyRule,
    is_number,
    section_rule,
)


def _check(value: Any, rule: Rule, path: str, violations: List[str]) -> None:
    if isinstance(rule, StringRule):
        if not isinstance(value, str):
            violations.append(f"{path} must be a string")
        elif not rule.min <= len(value) <= rule.max:
            violations.append(f"{path} must be {rule.min}-{rule.max} characters (got {len(value)})")
    elif isinstance(rule, IntRule):
        if not is_number(value) or (isinstance(value, float) and not value.is_integer()):
            violations.append(f"{path} must be an integer")
        elif not rule.min <= value <= rule.max:
            violations.append(f"{path} must be between {rule.min} and {rule.max} (got {value})")
    elif isinstance(rule, NumberRule):
        if not is_number(value):
            violations.append(f"{path} must be a number")
    elif isinstance(rule, EnumRule):
        if value not in rule.choices:
            violations.append(f"{path} must be one of {', '.join(rule.choices)} (got {value!r})")
    elif isinstance(rule, BoolRule):
        if not isinstance(value, bool):
            violations.append(f"{path} must be true or false")
    elif isinstance(rule, TextOnlyRule):
        if not isinstance(value, str):
            violations.append(f"{path} must be a string")
    elif isinstance(rule, CellsRule):
        if not isinstance(value, list) or not all(isinstance(cell, (str, bool)) for cell in value):
            violations.append(f"{path} must be a list of strings or booleans")
    elif isinstance(rule, ListRule):
        if not isinstance(value, list):
            violations.append(f"{path} must be a list")
            return
        if not rule.min <= len(value) <= rule.max:
            violations.append(f"{path} must have {rule.min}-{rule.max} items (got {len(value)})")
        for idx, item in enumerate(value):
            _check(item, rule.item, f"{path}[{idx}]", violations)
    elif isinstance(rule, ObjectRule):
        if not isinstance(value, dict):
            violations.append(f"{path} must be an object")
            return
        _check_fields(value, rule, f"{path}.", violations)
    elif isinstance(rule, AnyRule):
        return


def _check_fields(obj: dict, rule: ObjectRule, prefix: str, violations: List[str]) -> None:
    for name, field_rule in rule.fields.items():
        value = obj.get(name)
        if value is None:
            if field_rule.required:
                violations.append(f"{prefix}{name} is required")
            continue
        _check(value, field_rule, f"{prefix}{name}", violations)


def validate_section(section: Any, index: int) -> List[str]:
    """Violations for one section; ``index`` is 1-based."""
    if not isinstance(section, dict):
        return [f"Section {index}: must be an object"]
    section_type = section.get("type")
    rule = section_rule(section_type)
    label = f"Section {index} ({section_type})"
    if rule is None:
        return [f"{label}: unknown section type"]
    violations: List[str] = []
    _check_fields(section, rule, "", violations)
    return [f"{label}: {violation}" for violation in violations]


def validate_page(doc: Any, strategy: Optional[IntentLayoutStrategy] = None) -> List[str]:
    """Return every rule the document breaks; an empty list means it is acceptable.

    With ``strategy`` the section count and type order must match the locked
    layout. ``requestedHeightPercent`` is only type-checked; its range is the
    renderer's concern.
    """
    if not isinstance(doc, dict):
        return ["Page document must be a JSON object"]

    missing = [key for key in ("type", "title", "description") if doc.get(key) in (None, "")]
    sections = doc.get("sections")
    if not isinstance(sections, list) or not sections:
        missing.append("sections")
    if missing:
        return [f"Page is missing required fields: {', '.join(missing)}"]

    violations: List[str] = []
    page_violations: List[str] = []
    _check_fields(doc, PAGE_RULE, "", page_violations)
    violations.extend(f"Page: {violation}" for violation in page_violations)
    if not SECTIONS_MIN <= len(sections) <= SECTIONS_MAX:
        violations.append(f"Page: sections must have {SECTIONS_MIN}-{SECTIONS_MAX} items (got {len(sections)})")

    for idx, section in enumerate(sections, start=1):
        violations.extend(validate_section(section, idx))

    if strategy is not None:
        violations.extend(validate_layout(sections, strategy))
    return violations


def validate_layout(sections: List[Any], strategy: IntentLayoutStrategy) -> List[str]:
    expected = list(strategy.section_types)
    actual = [section.get("type") if isinstance(section, dict) else None for section in sections]
    if len(actual) != len(expected):
        return [
            f"Layout: expected exactly {len(expected)} sections ({', '.join(expected)}), got {len(actual)}"
        ]
    violations: List[str] = []
    for idx, (want, got) in enumerate(zip(expected, actual), start=1):
        if want != got:
            violations.append(f"Layout: section {idx} must be {want}, got {got}")
    return violations


def to_page_document(doc: Any) -> PageDocument:
    """Convert an accepted document into the typed model.

    Raises:
        ValidationError: when the document does not fit the section union.
    """
    try:
        return PageDocument.model_validate(doc)
    except PydanticValidationError as exc:
        violations = []
        for error in exc.errors():
            location = ".".join(str(part) for part in error.get("loc", ()))
            violations.append(f"{location or 'page'}: {error.get('msg', 'invalid value')}")
        raise ValidationError(violations) from exc


__all__ = ["validate_page", "validate_section", "validate_layout", "to_page_document"]
