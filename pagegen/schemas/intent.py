from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class UserIntent(str, Enum):
    """Communicative purpose of a user message.

    Declaration order doubles as the classifier's tie-break priority.
    """

    PRODUCT_INQUIRY = "product_inquiry"
    FEATURE_QUESTION = "feature_question"
    COMPARISON = "comparison"
    STATS_ROI = "stats_roi"
    IMPLEMENTATION = "implementation"
    USE_CASE = "use_case"
    OFF_TOPIC = "off_topic"


class LayoutMode(str, Enum):
    COMPACT = "compact"
    BALANCED = "balanced"
    SPACIOUS = "spacious"


@dataclass(frozen=True)
class IntentClassificationResult:
    intent: UserIntent
    confidence: float
    matched_patterns: Tuple[str, ...] = ()
    reasoning: str = ""
    rule: Optional[str] = None
    scores: Tuple[Tuple[str, int], ...] = ()

    @property
    def used_fallback_rule(self) -> bool:
        return self.rule is not None


@dataclass(frozen=True)
class SectionSpec:
    type: str
    height_percent: int
    content_focus: str


@dataclass(frozen=True)
class IntentLayoutStrategy:
    layout_mode: LayoutMode
    sections: Tuple[SectionSpec, ...]
    strategy: str
    content_density: str

    @property
    def section_types(self) -> Tuple[str, ...]:
        return tuple(section.type for section in self.sections)

    @property
    def total_height(self) -> int:
        return sum(section.height_percent for section in self.sections)


@dataclass(frozen=True)
class LengthGuideline:
    min: int
    max: int
    tone: str = ""


@dataclass(frozen=True)
class ContentGuidelines:
    headline: LengthGuideline
    subheadline: LengthGuideline
    max_features: int
    feature_description: LengthGuideline
    examples: Tuple[str, ...] = field(default_factory=tuple)


__all__ = [
    "UserIntent",
    "LayoutMode",
    "IntentClassificationResult",
    "SectionSpec",
    "IntentLayoutStrategy",
    "LengthGuideline",
    "ContentGuidelines",
]
