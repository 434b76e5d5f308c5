import json

import pytest

from pagegen.config import clear_runtime_overrides, refresh_settings


SECTION_BODIES = {
    "hero": {
        "headline": "Market Intelligence Built for Beverage Brands",
        "subheadline": "Track distributor performance and spot growth gaps before your competitors do.",
        "ctaButton": {"text": "Explore Features", "action": "explore_features"},
    },
    "feature_grid": {
        "title": "Core Capabilities",
        "features": [
            {
                "title": "Performance Analytics Dashboard",
                "description": "See depletion trends by account and distributor in one view.",
            },
            {
                "title": "Competitive Intelligence Tracking",
                "description": "Know which competitor brands are gaining shelf space near you.",
            },
            {
                "title": "Account Prioritization Engine",
                "description": "Rank accounts by growth potential so reps visit the right stores.",
            },
        ],
    },
    "metrics": {
        "title": "Proven Results",
        "metrics": [
            {"label": "Account growth", "value": "23%", "description": "Average lift in the first two quarters."},
            {"label": "Hours saved", "value": "12/week", "description": "Less time spent merging spreadsheets."},
        ],
    },
    "comparison_table": {
        "title": "How We Compare",
        "headers": ["Capability", "BevGenie", "Spreadsheets"],
        "rows": [
            {"feature": "Daily distributor data", "values": [True, False]},
            {"feature": "Account scoring", "values": ["Built in", "Manual"]},
        ],
    },
    "steps": {
        "title": "Your Path to Launch",
        "steps": [
            {"number": 1, "title": "Kickoff call", "description": "Agree on goals, data sources and owners."},
            {"number": 2, "title": "Data connection", "description": "Connect distributor feeds in under a week."},
            {"number": 3, "title": "Team training", "description": "Hands-on sessions for sales and marketing."},
        ],
    },
    "cta": {
        "title": "Ready to See It in Action?",
        "description": "Book a short demo tailored to your portfolio.",
        "backgroundColor": "blue",
        "buttons": [
            {"text": "Schedule Demo", "action": "schedule_demo", "primary": True},
            {"text": "Learn More", "action": "learn_more", "primary": False},
        ],
    },
    "faq": {
        "title": "Common Questions",
        "items": [
            {
                "question": "How long does setup take?",
                "answer": "Most teams are live within two weeks of the kickoff call.",
            },
        ],
    },
    "single_screen": {
        "headline": "Find the Accounts Your Distributors Miss",
        "subtitle": "A focused view of where your brand can grow next quarter.",
        "insights": [
            {"title": "Gap analysis", "description": "Spot accounts that carry competitors but not you."},
            {"title": "Distributor focus", "description": "See which distributor reps push your brand hardest."},
            {"title": "Velocity trends", "description": "Catch slowing SKUs before they lose placement."},
        ],
        "stats": [
            {"label": "Accounts scored", "value": "40k+"},
            {"label": "Data refresh", "value": "Daily"},
        ],
        "howItWorks": [
            {"step": "Connect your distributor data feeds"},
            {"step": "Review the ranked list of growth accounts"},
            {"step": "Send prioritized routes to your field team"},
        ],
        "ctas": [{"text": "Talk to an Expert", "action": "contact", "primary": True}],
    },
}


def make_section(section_type, height=None, **overrides):
    section = {"type": section_type, **json.loads(json.dumps(SECTION_BODIES[section_type]))}
    if height is not None:
        section["layout"] = {"requestedHeightPercent": height}
    section.update(overrides)
    return section


def make_page(strategy=None, *, page_type="solution_brief", section_types=None):
    if strategy is not None:
        sections = [make_section(spec.type, spec.height_percent) for spec in strategy.sections]
    else:
        sections = [make_section(section_type) for section_type in (section_types or ("hero", "feature_grid", "cta"))]
    return {
        "type": page_type,
        "title": "Beverage Market Intelligence Overview",
        "description": "See how beverage suppliers use distributor data to find growth and act on it faster.",
        "sections": sections,
    }


@pytest.fixture
def page_factory():
    return make_page


@pytest.fixture
def section_factory():
    return make_section


@pytest.fixture(autouse=True)
def _reset_runtime_overrides():
    yield
    clear_runtime_overrides()
    refresh_settings()
