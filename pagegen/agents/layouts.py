from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from ..schemas.intent import (
    ContentGuidelines,
    IntentLayoutStrategy,
    LayoutMode,
    LengthGuideline,
    SectionSpec,
    UserIntent,
)


def _strategy(
    mode: LayoutMode,
    sections: tuple[tuple[str, int, str], ...],
    strategy: str,
    density: str,
) -> IntentLayoutStrategy:
    return IntentLayoutStrategy(
        layout_mode=mode,
        sections=tuple(SectionSpec(type=t, height_percent=h, content_focus=f) for t, h, f in sections),
        strategy=strategy,
        content_density=density,
    )


INTENT_LAYOUT_STRATEGIES: Mapping[UserIntent, IntentLayoutStrategy] = MappingProxyType({
    UserIntent.PRODUCT_INQUIRY: _strategy(
        LayoutMode.BALANCED,
        (
            ("hero", 35, "What the product is and the core problem it solves"),
            ("feature_grid", 45, "Three or four headline capabilities with concrete benefits"),
            ("cta", 20, "Invite the visitor to see a demo or explore further"),
        ),
        "Explain the product clearly, back it with capabilities, close with a next step",
        "medium",
    ),
    UserIntent.FEATURE_QUESTION: _strategy(
        LayoutMode.BALANCED,
        (
            ("hero", 25, "Answer the feature question directly in the headline"),
            ("feature_grid", 40, "Capabilities that answer the question, each with an outcome"),
            ("faq", 20, "Follow-up questions about how the capability works"),
            ("cta", 15, "Offer a walkthrough of the feature"),
        ),
        "Lead with a direct answer, then detail capabilities and likely follow-ups",
        "medium",
    ),
    UserIntent.COMPARISON: _strategy(
        LayoutMode.BALANCED,
        (
            ("hero", 20, "Position the product against the alternative without attacking it"),
            ("comparison_table", 40, "Feature-by-feature comparison on criteria buyers care about"),
            ("feature_grid", 25, "Differentiators the comparison cannot show"),
            ("cta", 15, "Offer a detailed comparison or expert call"),
        ),
        "Let a fact-based table carry the argument, then highlight differentiators",
        "high",
    ),
    UserIntent.STATS_ROI: _strategy(
        LayoutMode.BALANCED,
        (
            ("hero", 30, "Quantified outcome headline"),
            ("metrics", 35, "Two to four headline numbers with context"),
            ("feature_grid", 20, "Capabilities that produce those numbers"),
            ("cta", 15, "Offer an ROI estimate for the visitor's business"),
        ),
        "Open with numbers, explain what drives them, offer a personalised estimate",
        "high",
    ),
    UserIntent.IMPLEMENTATION: _strategy(
        LayoutMode.BALANCED,
        (
            ("hero", 25, "Reassure that getting started is simple and fast"),
            ("steps", 40, "Implementation phases with realistic timing"),
            ("faq", 20, "Common onboarding concerns"),
            ("cta", 15, "Schedule a kickoff or onboarding call"),
        ),
        "Show a clear path to launch and remove onboarding objections",
        "medium",
    ),
    UserIntent.USE_CASE: _strategy(
        LayoutMode.COMPACT,
        (
            ("single_screen", 85, "Insights, stats and how it works for the visitor's scenario"),
            ("cta", 15, "Invite the visitor to discuss their specific situation"),
        ),
        "Answer an open-ended scenario on one dense screen",
        "high",
    ),
    UserIntent.OFF_TOPIC: _strategy(
        LayoutMode.COMPACT,
        (
            ("hero", 60, "Politely steer back to beverage market intelligence"),
            ("cta", 40, "Suggest relevant questions the product can answer"),
        ),
        "Acknowledge briefly and redirect to what the product does",
        "low",
    ),
})


CONTENT_GUIDELINES: Mapping[UserIntent, ContentGuidelines] = MappingProxyType({
    UserIntent.PRODUCT_INQUIRY: ContentGuidelines(
        headline=LengthGuideline(30, 70, "clear and confident"),
        subheadline=LengthGuideline(60, 140, "explanatory"),
        max_features=4,
        feature_description=LengthGuideline(40, 120),
        examples=(
            "Market Intelligence Built for Beverage Brands",
            "Turn Distributor Data Into Winning Decisions",
        ),
    ),
    UserIntent.FEATURE_QUESTION: ContentGuidelines(
        headline=LengthGuideline(25, 60, "direct answer"),
        subheadline=LengthGuideline(50, 120, "specific"),
        max_features=4,
        feature_description=LengthGuideline(50, 150),
        examples=(
            "Yes, Performance Tracking Works Across Every Account",
            "Distributor Intelligence, Updated Daily",
        ),
    ),
    UserIntent.COMPARISON: ContentGuidelines(
        headline=LengthGuideline(25, 70, "confident, not combative"),
        subheadline=LengthGuideline(50, 130, "fact-based"),
        max_features=3,
        feature_description=LengthGuideline(40, 120),
        examples=(
            "Why Beverage Teams Switch From Generic BI Tools",
            "Purpose-Built for Beverage, Not Adapted for It",
        ),
    ),
    UserIntent.STATS_ROI: ContentGuidelines(
        headline=LengthGuideline(20, 60, "quantified"),
        subheadline=LengthGuideline(50, 120, "evidence-led"),
        max_features=3,
        feature_description=LengthGuideline(40, 120),
        examples=(
            "Brands See 23% Faster Account Growth",
            "Cut Wasted Field Visits by a Third",
        ),
    ),
    UserIntent.IMPLEMENTATION: ContentGuidelines(
        headline=LengthGuideline(25, 60, "reassuring"),
        subheadline=LengthGuideline(50, 120, "practical"),
        max_features=0,
        feature_description=LengthGuideline(0, 0),
        examples=(
            "Live in Two Weeks, Not Two Quarters",
            "Your Path From Kickoff to First Insights",
        ),
    ),
    UserIntent.USE_CASE: ContentGuidelines(
        headline=LengthGuideline(25, 70, "empathetic and specific"),
        subheadline=LengthGuideline(40, 110, "scenario-focused"),
        max_features=0,
        feature_description=LengthGuideline(0, 0),
        examples=(
            "Find the Accounts Your Distributors Are Missing",
            "Grow Craft Distribution Without Growing Headcount",
        ),
    ),
    UserIntent.OFF_TOPIC: ContentGuidelines(
        headline=LengthGuideline(20, 60, "friendly redirect"),
        subheadline=LengthGuideline(40, 110, "helpful"),
        max_features=0,
        feature_description=LengthGuideline(0, 0),
        examples=(
            "Let's Talk Beverage Market Intelligence",
            "Here's What We Can Help You With",
        ),
    ),
})


INTENT_PAGE_TYPES: Mapping[UserIntent, str] = MappingProxyType({
    UserIntent.PRODUCT_INQUIRY: "solution_brief",
    UserIntent.FEATURE_QUESTION: "feature_showcase",
    UserIntent.COMPARISON: "comparison",
    UserIntent.STATS_ROI: "roi_calculator",
    UserIntent.IMPLEMENTATION: "implementation_roadmap",
    UserIntent.USE_CASE: "solution_brief",
    UserIntent.OFF_TOPIC: "solution_brief",
})


PAGE_TYPE_TEMPLATES: Mapping[str, str] = MappingProxyType({
    "solution_brief": (
        "Solution Brief\n"
        "Purpose: address a specific pain point the user mentioned.\n"
        "Structure: hero about solving the pain point; feature_grid with 3-4 capabilities; cta for a demo.\n"
        "Tone: professional, solution-focused, empathetic."
    ),
    "feature_showcase": (
        "Feature Showcase\n"
        "Purpose: highlight the specific features the user asked about.\n"
        "Structure: hero with the feature benefit; feature_grid with 4-6 details; "
        "comparison_table against traditional approaches; cta to learn more.\n"
        "Tone: technical but accessible, benefits-focused."
    ),
    "case_study": (
        "Case Study\n"
        "Purpose: provide proof with real metrics.\n"
        "Structure: hero with the success story; metrics with key results; steps showing how the rollout "
        "happened; cta to replicate the success.\n"
        "Tone: results-focused, data-driven."
    ),
    "comparison": (
        "Comparison\n"
        "Purpose: show why the product stands out from alternatives.\n"
        "Structure: hero on what is different; comparison_table feature by feature; feature_grid with unique "
        "advantages; cta to talk to an expert.\n"
        "Tone: confident, fact-based, never attacking competitors."
    ),
    "implementation_roadmap": (
        "Implementation Roadmap\n"
        "Purpose: show a clear path to launch with a realistic timeline.\n"
        "Structure: hero on the path to success; steps with phases; faq with common concerns; cta to schedule a "
        "kickoff.\n"
        "Tone: reassuring, clear, actionable."
    ),
    "roi_calculator": (
        "ROI Overview\n"
        "Purpose: help the user understand financial impact.\n"
        "Structure: hero on calculating ROI; metrics with potential gains from industry averages; feature_grid "
        "with the drivers; cta for a tailored estimate.\n"
        "Tone: analytical, credible, conservative with numbers."
    ),
})


def strategy_for(intent: UserIntent | str) -> IntentLayoutStrategy:
    """Fixed section layout for ``intent``; unknown values get the off-topic degrade layout."""
    try:
        key = UserIntent(intent)
    except ValueError:
        key = UserIntent.OFF_TOPIC
    return INTENT_LAYOUT_STRATEGIES[key]


def content_guidelines_for(intent: UserIntent | str) -> ContentGuidelines:
    try:
        key = UserIntent(intent)
    except ValueError:
        key = UserIntent.OFF_TOPIC
    return CONTENT_GUIDELINES[key]


def page_type_for_intent(intent: UserIntent | str) -> str:
    try:
        key = UserIntent(intent)
    except ValueError:
        return "solution_brief"
    return INTENT_PAGE_TYPES[key]


def page_type_template(page_type: str) -> str:
    return PAGE_TYPE_TEMPLATES.get(page_type, PAGE_TYPE_TEMPLATES["solution_brief"])


__all__ = [
    "INTENT_LAYOUT_STRATEGIES",
    "CONTENT_GUIDELINES",
    "INTENT_PAGE_TYPES",
    "PAGE_TYPE_TEMPLATES",
    "strategy_for",
    "content_guidelines_for",
    "page_type_for_intent",
    "page_type_template",
]
