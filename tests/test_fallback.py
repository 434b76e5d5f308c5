from pagegen.services.fallback import (
    FALLBACK_PAGE_CONTENT,
    estimate_generation_time,
    fallback_page_content,
    page_cache_key,
    primary_persona_label,
)


def test_fallback_content_per_page_type():
    assert fallback_page_content("comparison") == FALLBACK_PAGE_CONTENT["comparison"]
    assert fallback_page_content(None) == FALLBACK_PAGE_CONTENT["solution_brief"]
    assert fallback_page_content("unknown") == FALLBACK_PAGE_CONTENT["solution_brief"]


def test_generation_time_estimates():
    assert estimate_generation_time("case_study") == 5000
    assert estimate_generation_time("unknown") == 4000


def test_page_cache_key_is_stable():
    key = page_cache_key("What is BevGenie?", "solution_brief")
    assert key == page_cache_key("What is BevGenie?", "solution_brief")
    assert key.startswith("page_solution_brief_")
    assert key.endswith("_default")
    assert page_cache_key("", "comparison", "craft") == "page_comparison_0_craft"


def test_page_cache_key_only_uses_message_prefix():
    base = "x" * 100
    assert page_cache_key(base + "tail one", "faq") == page_cache_key(base + "tail two", "faq")


def test_page_cache_key_matches_known_hash():
    # 31-based rolling hash of "a" is 97, base 36 "2p".
    assert page_cache_key("a", "solution_brief") == "page_solution_brief_2p_default"


def test_primary_persona_label():
    persona = {"distributor_score": 0.75, "compliance_focus_score": 0.9, "craft_score": 0.7}
    assert primary_persona_label(persona) == "distributor_compliance_focus"
    assert primary_persona_label({}) == ""
