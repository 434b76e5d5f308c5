from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union, get_args

from pydantic import BaseModel, ConfigDict, Field

PageType = Literal[
    "solution_brief",
    "feature_showcase",
    "case_study",
    "comparison",
    "implementation_roadmap",
    "roi_calculator",
]

SectionType = Literal[
    "hero",
    "feature_grid",
    "metrics",
    "comparison_table",
    "steps",
    "cta",
    "faq",
    "single_screen",
]

SectionSize = Literal["compact", "medium", "large"]
VisualWeight = Literal["subtle", "normal", "prominent"]
BackgroundColor = Literal["blue", "green", "purple"]

PAGE_TYPES: tuple[str, ...] = get_args(PageType)
SECTION_TYPES: tuple[str, ...] = get_args(SectionType)
SECTION_SIZES: tuple[str, ...] = get_args(SectionSize)
VISUAL_WEIGHTS: tuple[str, ...] = get_args(VisualWeight)
BACKGROUND_COLORS: tuple[str, ...] = get_args(BackgroundColor)


class _Model(BaseModel):
    model_config = ConfigDict(extra="ignore")


class SectionLayout(_Model):
    requestedHeightPercent: Optional[Union[int, float]] = None
    size: Optional[SectionSize] = None
    visualWeight: Optional[VisualWeight] = None


class CtaButton(_Model):
    text: str
    action: str


class ActionButton(_Model):
    text: str
    action: str
    primary: bool


class Feature(_Model):
    title: str
    description: str
    icon: Optional[str] = None


class Metric(_Model):
    label: str
    value: str
    description: Optional[str] = None


class ComparisonRow(_Model):
    feature: str
    values: List[Union[bool, str]] = Field(default_factory=list)


class Step(_Model):
    number: int
    title: str
    description: str


class FaqItem(_Model):
    question: str
    answer: str


class Insight(_Model):
    title: str
    description: str


class Stat(_Model):
    label: str
    value: str


class HowItWorksStep(_Model):
    step: str


class VisualContent(_Model):
    type: str
    data: Any = None


class _SectionBase(_Model):
    layout: Optional[SectionLayout] = None
    size: Optional[SectionSize] = None
    visualWeight: Optional[VisualWeight] = None


class HeroSection(_SectionBase):
    type: Literal["hero"] = "hero"
    headline: str
    subheadline: Optional[str] = None
    ctaButton: Optional[CtaButton] = None


class FeatureGridSection(_SectionBase):
    type: Literal["feature_grid"] = "feature_grid"
    title: Optional[str] = None
    subtitle: Optional[str] = None
    columns: Optional[int] = None
    features: List[Feature]


class MetricsSection(_SectionBase):
    type: Literal["metrics"] = "metrics"
    title: Optional[str] = None
    metrics: List[Metric]


class ComparisonTableSection(_SectionBase):
    type: Literal["comparison_table"] = "comparison_table"
    title: Optional[str] = None
    headers: List[str]
    rows: List[ComparisonRow]


class StepsSection(_SectionBase):
    type: Literal["steps"] = "steps"
    title: Optional[str] = None
    subtitle: Optional[str] = None
    timeline: Optional[str] = None
    steps: List[Step]


class CtaSection(_SectionBase):
    type: Literal["cta"] = "cta"
    title: str
    description: Optional[str] = None
    backgroundColor: Optional[BackgroundColor] = None
    buttons: Optional[List[ActionButton]] = None


class FaqSection(_SectionBase):
    type: Literal["faq"] = "faq"
    title: Optional[str] = None
    items: List[FaqItem]


class SingleScreenSection(_SectionBase):
    type: Literal["single_screen"] = "single_screen"
    headline: str
    subtitle: Optional[str] = None
    insights: List[Insight]
    stats: List[Stat]
    howItWorks: List[HowItWorksStep]
    ctas: List[ActionButton]
    visualContent: Optional[VisualContent] = None


Section = Annotated[
    Union[
        HeroSection,
        FeatureGridSection,
        MetricsSection,
        ComparisonTableSection,
        StepsSection,
        CtaSection,
        FaqSection,
        SingleScreenSection,
    ],
    Field(discriminator="type"),
]


class PageDocument(_Model):
    type: PageType
    title: str
    description: str
    sections: List[Section]

    def to_wire(self) -> Dict[str, Any]:
        """Dump the document for rendering; absent optional fields are omitted."""
        return self.model_dump(mode="json", exclude_none=True)

    def headline(self) -> str:
        for section in self.sections:
            if isinstance(section, (HeroSection, SingleScreenSection)):
                return section.headline
        return self.title

    def feature_titles(self) -> List[str]:
        titles: List[str] = []
        for section in self.sections:
            if isinstance(section, FeatureGridSection):
                titles.extend(feature.title for feature in section.features if feature.title)
        return titles


__all__ = [
    "PageType",
    "SectionType",
    "SectionSize",
    "VisualWeight",
    "BackgroundColor",
    "PAGE_TYPES",
    "SECTION_TYPES",
    "SECTION_SIZES",
    "VISUAL_WEIGHTS",
    "BACKGROUND_COLORS",
    "SectionLayout",
    "CtaButton",
    "ActionButton",
    "Feature",
    "Metric",
    "ComparisonRow",
    "Step",
    "FaqItem",
    "Insight",
    "Stat",
    "HowItWorksStep",
    "VisualContent",
    "HeroSection",
    "FeatureGridSection",
    "MetricsSection",
    "ComparisonTableSection",
    "StepsSection",
    "CtaSection",
    "FaqSection",
    "SingleScreenSection",
    "Section",
    "PageDocument",
]
