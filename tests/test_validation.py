import pytest

from pagegen.agents.layouts import strategy_for
from pagegen.exceptions import ValidationError
from pagegen.schemas.intent import IntentLayoutStrategy, LayoutMode, SectionSpec, UserIntent
from pagegen.schemas.page import CtaSection, HeroSection, PageDocument
from pagegen.utils.page_json import parse_page_json
from pagegen.utils.validation import to_page_document, validate_page, validate_section


def _strategy(*sections):
    return IntentLayoutStrategy(
        layout_mode=LayoutMode.BALANCED,
        sections=tuple(SectionSpec(type=t, height_percent=h, content_focus="focus") for t, h in sections),
        strategy="test",
        content_density="medium",
    )


def test_valid_page_has_no_violations(page_factory):
    for intent in UserIntent:
        strategy = strategy_for(intent)
        assert validate_page(page_factory(strategy), strategy) == [], intent


def test_structure_passes_regardless_of_declared_height(page_factory):
    strategy = _strategy(("hero", 40), ("feature_grid", 40), ("cta", 20))
    doc = page_factory(section_types=("hero", "feature_grid", "cta"))
    for section, height in zip(doc["sections"], (5, 250, 33.3)):
        section["layout"] = {"requestedHeightPercent": height}
    assert validate_page(doc, strategy) == []


def test_missing_top_level_fields_short_circuit():
    violations = validate_page({"type": "solution_brief", "sections": []})
    assert violations == ["Page is missing required fields: title, description, sections"]


def test_non_object_document():
    assert validate_page(["not", "a", "page"]) == ["Page document must be a JSON object"]


def test_page_field_bounds(page_factory):
    doc = page_factory()
    doc["title"] = "Too short"
    doc["description"] = "Short description"
    doc["type"] = "brochure"
    violations = validate_page(doc)
    assert "Page: title must be 10-100 characters (got 9)" in violations
    assert any(v.startswith("Page: description must be 50-250 characters") for v in violations)
    assert any(v.startswith("Page: type must be one of") for v in violations)


def test_section_count_bounds(page_factory, section_factory):
    doc = page_factory()
    doc["sections"] = [section_factory("hero") for _ in range(6)]
    assert "Page: sections must have 1-5 items (got 6)" in validate_page(doc)


def test_section_violations_are_one_based(page_factory):
    doc = page_factory()
    del doc["sections"][0]["headline"]
    doc["sections"][1]["features"] = []
    violations = validate_page(doc)
    assert "Section 1 (hero): headline is required" in violations
    assert "Section 2 (feature_grid): features must have 1-6 items (got 0)" in violations


def test_unknown_section_type(page_factory):
    doc = page_factory()
    doc["sections"].append({"type": "carousel"})
    assert "Section 4 (carousel): unknown section type" in validate_page(doc)


def test_nested_field_paths(section_factory):
    section = section_factory("cta")
    section["buttons"][0]["primary"] = "yes"
    section["backgroundColor"] = "orange"
    violations = validate_section(section, 3)
    assert "Section 3 (cta): buttons[0].primary must be true or false" in violations
    assert any(v.startswith("Section 3 (cta): backgroundColor must be one of blue, green, purple") for v in violations)


def test_single_screen_requires_its_lists(section_factory):
    section = section_factory("single_screen")
    del section["howItWorks"]
    section["stats"] = section["stats"][:1]
    violations = validate_section(section, 1)
    assert "Section 1 (single_screen): howItWorks is required" in violations
    assert "Section 1 (single_screen): stats must have 2-3 items (got 1)" in violations


def test_integer_fields(section_factory):
    section = section_factory("steps")
    section["steps"][0]["number"] = 1.5
    section["steps"][1]["number"] = 11
    violations = validate_section(section, 1)
    assert "Section 1 (steps): steps[0].number must be an integer" in violations
    assert "Section 1 (steps): steps[1].number must be between 1 and 10 (got 11)" in violations


def test_comparison_cells_accept_strings_and_booleans(section_factory):
    section = section_factory("comparison_table")
    assert validate_section(section, 1) == []
    section["rows"][0]["values"] = [1, 2]
    assert validate_section(section, 1) == [
        "Section 1 (comparison_table): rows[0].values must be a list of strings or booleans"
    ]


def test_layout_lock_count_and_order(page_factory):
    strategy = strategy_for(UserIntent.FEATURE_QUESTION)
    doc = page_factory(section_types=("hero", "feature_grid", "cta"))
    assert validate_page(doc, strategy) == [
        "Layout: expected exactly 4 sections (hero, feature_grid, faq, cta), got 3"
    ]

    doc = page_factory(section_types=("hero", "faq", "feature_grid", "cta"))
    violations = validate_page(doc, strategy)
    assert "Layout: section 2 must be feature_grid, got faq" in violations
    assert "Layout: section 3 must be faq, got feature_grid" in violations


def test_to_page_document_builds_tagged_union(page_factory):
    page = to_page_document(page_factory(strategy_for(UserIntent.OFF_TOPIC)))
    assert isinstance(page, PageDocument)
    assert isinstance(page.sections[0], HeroSection)
    assert isinstance(page.sections[1], CtaSection)
    assert page.headline() == "Market Intelligence Built for Beverage Brands"

    wire = page.to_wire()
    assert wire["sections"][0]["layout"] == {"requestedHeightPercent": 60}
    assert "size" not in wire["sections"][1]
    assert wire["sections"][1]["buttons"][0]["primary"] is True


def test_to_page_document_raises_validation_error():
    with pytest.raises(ValidationError) as excinfo:
        to_page_document({"type": "solution_brief", "title": "t", "description": "d", "sections": [{"type": "nope"}]})
    assert excinfo.value.violations


def test_minimal_parsed_hero_page_converts():
    raw = (
        '{"type":"solution_brief","title":"A Solution For Brewers Everywhere",'
        '"description":"This page demonstrates a concrete example that meets the fifty character minimum easily.",'
        '"sections":[{"type":"hero","headline":"Solve Your Distribution Challenges Today"}]}'
    )
    doc = parse_page_json(raw)
    assert validate_page(doc) == []
    assert to_page_document(doc).sections[0].headline == "Solve Your Distribution Challenges Today"
