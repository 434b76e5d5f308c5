"""Field bounds for page documents, shared by the validator and the sanitizer."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Tuple, Union

from ..schemas.page import BACKGROUND_COLORS, PAGE_TYPES, SECTION_SIZES, VISUAL_WEIGHTS

ELLIPSIS = "..."

MIN_HEIGHT_PERCENT = 15
MAX_HEIGHT_PERCENT = 100


@dataclass(frozen=True)
class StringRule:
    min: int
    max: int
    required: bool = True

    def __post_init__(self) -> None:
        if self.max < self.min:
            raise ValueError(f"String bound max {self.max} is below min {self.min}")
        if self.max <= len(ELLIPSIS):
            raise ValueError(f"String bound max {self.max} leaves no room for a clipped value")


@dataclass(frozen=True)
class IntRule:
    min: int
    max: int
    required: bool = True

    def __post_init__(self) -> None:
        if self.max < self.min:
            raise ValueError(f"Integer bound max {self.max} is below min {self.min}")


@dataclass(frozen=True)
class NumberRule:
    """Numeric field whose range is advisory; the sanitizer clamps it."""

    min: float
    max: float
    required: bool = False


@dataclass(frozen=True)
class EnumRule:
    choices: Tuple[str, ...]
    required: bool = False


@dataclass(frozen=True)
class BoolRule:
    required: bool = True


@dataclass(frozen=True)
class TextOnlyRule:
    """Any string, no length bounds."""

    required: bool = True


@dataclass(frozen=True)
class CellsRule:
    """List of string or boolean cells."""

    required: bool = True


@dataclass(frozen=True)
class AnyRule:
    required: bool = False


@dataclass(frozen=True)
class ObjectRule:
    fields: Mapping[str, "Rule"] = field(default_factory=dict)
    required: bool = True


@dataclass(frozen=True)
class ListRule:
    min: int
    max: int
    item: "Rule"
    required: bool = True

    def __post_init__(self) -> None:
        if self.max < self.min:
            raise ValueError(f"List bound max {self.max} is below min {self.min}")


Rule = Union[StringRule, IntRule, NumberRule, EnumRule, BoolRule, TextOnlyRule, CellsRule, AnyRule, ObjectRule, ListRule]


def _obj(required: bool = True, **fields: Rule) -> ObjectRule:
    return ObjectRule(fields=MappingProxyType(fields), required=required)


LAYOUT_RULE = _obj(
    required=False,
    requestedHeightPercent=NumberRule(MIN_HEIGHT_PERCENT, MAX_HEIGHT_PERCENT),
    size=EnumRule(SECTION_SIZES),
    visualWeight=EnumRule(VISUAL_WEIGHTS),
)

_COMMON = {
    "layout": LAYOUT_RULE,
    "size": EnumRule(SECTION_SIZES),
    "visualWeight": EnumRule(VISUAL_WEIGHTS),
}

_ACTION_BUTTON = _obj(text=StringRule(3, 30), action=TextOnlyRule(), primary=BoolRule())

SECTION_RULES: Mapping[str, ObjectRule] = MappingProxyType({
    "hero": _obj(
        **_COMMON,
        headline=StringRule(10, 100),
        subheadline=StringRule(20, 150, required=False),
        ctaButton=_obj(required=False, text=StringRule(3, 30), action=TextOnlyRule()),
    ),
    "feature_grid": _obj(
        **_COMMON,
        title=StringRule(5, 60, required=False),
        subtitle=StringRule(10, 120, required=False),
        columns=IntRule(2, 4, required=False),
        features=ListRule(
            1,
            6,
            _obj(
                title=StringRule(5, 50),
                description=StringRule(10, 200),
                icon=TextOnlyRule(required=False),
            ),
        ),
    ),
    "metrics": _obj(
        **_COMMON,
        title=StringRule(5, 60, required=False),
        metrics=ListRule(
            2,
            4,
            _obj(
                label=StringRule(3, 40),
                value=StringRule(1, 20),
                description=StringRule(10, 100, required=False),
            ),
        ),
    ),
    "comparison_table": _obj(
        **_COMMON,
        title=StringRule(5, 60, required=False),
        headers=ListRule(2, 4, StringRule(3, 40)),
        rows=ListRule(2, 8, _obj(feature=StringRule(3, 50), values=CellsRule())),
    ),
    "steps": _obj(
        **_COMMON,
        title=StringRule(5, 60, required=False),
        subtitle=StringRule(10, 120, required=False),
        timeline=StringRule(3, 50, required=False),
        steps=ListRule(
            2,
            5,
            _obj(number=IntRule(1, 10), title=StringRule(5, 50), description=StringRule(10, 200)),
        ),
    ),
    "cta": _obj(
        **_COMMON,
        title=StringRule(10, 80),
        description=StringRule(10, 150, required=False),
        backgroundColor=EnumRule(BACKGROUND_COLORS),
        buttons=ListRule(1, 3, _ACTION_BUTTON, required=False),
    ),
    "faq": _obj(
        **_COMMON,
        title=StringRule(5, 60, required=False),
        items=ListRule(1, 8, _obj(question=StringRule(10, 150), answer=StringRule(20, 600))),
    ),
    "single_screen": _obj(
        **_COMMON,
        headline=StringRule(10, 80),
        subtitle=StringRule(20, 120, required=False),
        insights=ListRule(3, 4, _obj(title=StringRule(5, 60), description=StringRule(20, 250))),
        stats=ListRule(2, 3, _obj(label=StringRule(3, 40), value=StringRule(1, 20))),
        howItWorks=ListRule(3, 5, _obj(step=StringRule(10, 100))),
        ctas=ListRule(1, 3, _ACTION_BUTTON),
        visualContent=_obj(required=False, type=TextOnlyRule(), data=AnyRule()),
    ),
})

PAGE_RULE = _obj(
    type=EnumRule(PAGE_TYPES, required=True),
    title=StringRule(10, 100),
    description=StringRule(50, 250),
)

SECTIONS_MIN = 1
SECTIONS_MAX = 5


def section_rule(section_type: object) -> Optional[ObjectRule]:
    if not isinstance(section_type, str):
        return None
    return SECTION_RULES.get(section_type)


def is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


__all__ = [
    "ELLIPSIS",
    "MIN_HEIGHT_PERCENT",
    "MAX_HEIGHT_PERCENT",
    "StringRule",
    "IntRule",
    "NumberRule",
    "EnumRule",
    "BoolRule",
    "TextOnlyRule",
    "CellsRule",
    "AnyRule",
    "ObjectRule",
    "ListRule",
    "Rule",
    "LAYOUT_RULE",
    "SECTION_RULES",
    "PAGE_RULE",
    "SECTIONS_MIN",
    "SECTIONS_MAX",
    "section_rule",
    "is_number",
]
