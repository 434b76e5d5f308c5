import json

from pagegen.agents.intent_classifier import classify_intent
from pagegen.agents.layouts import strategy_for
from pagegen.agents.prompts import (
    JSON_ONLY_INSTRUCTION,
    LAYOUT_FREE,
    build_page_skeleton,
    build_reply_user_prompt,
    build_system_prompt,
    build_template_fill_prompts,
    build_user_prompt,
    describe_section_limits,
)
from pagegen.schemas.intent import UserIntent
from pagegen.schemas.request import (
    ConversationTurn,
    KnowledgeDocument,
    PageContext,
    PageGenerationRequest,
)


def _request(**kwargs):
    kwargs.setdefault("user_message", "What is BevGenie?")
    return PageGenerationRequest(**kwargs)


def test_locked_system_prompt_spells_out_layout():
    strategy = strategy_for(UserIntent.PRODUCT_INQUIRY)
    intent = classify_intent("What is BevGenie?")
    prompt = build_system_prompt(_request(), strategy, intent, page_type="solution_brief")

    assert "You MUST generate EXACTLY 3 sections in this EXACT order" in prompt
    assert "1. hero section (35% height)" in prompt
    assert "Must specify: layout.requestedHeightPercent = 45" in prompt
    assert "Use ONLY these types, in this order: hero, feature_grid, cta" in prompt
    assert "USER INTENT: product_inquiry" in prompt
    assert "Confidence: 100%" in prompt
    assert "Market Intelligence Built for Beverage Brands" in prompt
    assert "feature_grid:" in prompt
    assert "PREVIOUSLY USED CONTENT" not in prompt


def test_system_prompt_includes_memory_warning():
    strategy = strategy_for(UserIntent.OFF_TOPIC)
    intent = classify_intent("tell me a joke")
    warning = 'PREVIOUSLY USED CONTENT - DO NOT REPEAT:\n  - "Old Headline"'
    prompt = build_system_prompt(_request(), strategy, intent, memory_warning=warning, product_name="Acme")
    assert warning in prompt
    assert prompt.startswith("You are a content writer for Acme B2B SaaS.")


def test_free_layout_prompt_uses_page_template():
    strategy = strategy_for(UserIntent.IMPLEMENTATION)
    intent = classify_intent("how do we get started")
    prompt = build_system_prompt(
        _request(),
        strategy,
        intent,
        page_type="implementation_roadmap",
        layout_mode=LAYOUT_FREE,
    )
    assert "Implementation Roadmap" in prompt
    assert "LAYOUT IS LOCKED" not in prompt
    assert "EXACTLY" not in prompt


def test_user_prompt_carries_context_and_feedback():
    strategy = strategy_for(UserIntent.FEATURE_QUESTION)
    request = _request(
        user_message="Does it support Salesforce?",
        persona_description="Regional sales lead at a craft brewery " * 10,
        page_context=PageContext(context="Distributor analytics", source="button"),
        interaction_source="cta_click",
        conversation_history=[
            ConversationTurn(role="user", content="first"),
            ConversationTurn(role="assistant", content="second"),
            ConversationTurn(role="user", content="third"),
        ],
        knowledge_documents=[
            KnowledgeDocument(id="1", content="Salesforce sync runs nightly.", similarity_score=0.91),
            KnowledgeDocument(id="2", content="CSV import is supported.", similarity_score=0.5),
            KnowledgeDocument(id="3", content="Not included.", similarity_score=0.4),
        ],
    )
    prompt = build_user_prompt(
        request,
        strategy,
        page_type="feature_showcase",
        feedback=["Section 1 (hero): headline is required"],
    )

    assert prompt.startswith('USER QUERY: "Does it support Salesforce?"')
    assert "GENERATE: feature_showcase page with the 4 sections" in prompt
    assert 'CONTEXT: User clicked "Distributor analytics"' in prompt
    assert "INTERACTION SOURCE: cta_click" in prompt
    assert "user: first" not in prompt
    assert "assistant: second" in prompt
    assert "user: third" in prompt
    profile_line = next(line for line in prompt.splitlines() if line.startswith("USER PROFILE: "))
    assert len(profile_line) == len("USER PROFILE: ") + 150
    assert "1. [91% match] Salesforce sync runs nightly." in prompt
    assert "2. [50% match] CSV import is supported." in prompt
    assert "Not included." not in prompt
    assert "REMEMBER: Generate EXACTLY 4 sections with types: hero, feature_grid, faq, cta" in prompt
    assert "YOUR PREVIOUS ATTEMPT WAS REJECTED" in prompt
    assert "- Section 1 (hero): headline is required" in prompt
    assert prompt.endswith(JSON_ONLY_INSTRUCTION)


def test_persona_scores_become_profile_label():
    strategy = strategy_for(UserIntent.PRODUCT_INQUIRY)
    request = _request(persona={"craft_score": 0.9, "supplier_score": 0.8, "large_score": 0.2})
    prompt = build_user_prompt(request, strategy)
    assert "USER PROFILE: supplier_craft" in prompt


def test_page_skeleton_fixes_structure():
    strategy = strategy_for(UserIntent.STATS_ROI)
    skeleton = build_page_skeleton(strategy, "roi_calculator")
    assert skeleton["type"] == "roi_calculator"
    assert [s["type"] for s in skeleton["sections"]] == ["hero", "metrics", "feature_grid", "cta"]
    assert [s["layout"]["requestedHeightPercent"] for s in skeleton["sections"]] == [30, 35, 20, 15]
    assert skeleton["sections"][0]["headline"] == "<headline: 10-100 chars>"
    assert len(skeleton["sections"][1]["metrics"]) >= 2


def test_template_fill_prompts():
    strategy = strategy_for(UserIntent.USE_CASE)
    skeleton = build_page_skeleton(strategy, "solution_brief")
    system_prompt, user_prompt = build_template_fill_prompts(
        _request(user_message="Can you help my team find new accounts?"),
        strategy,
        skeleton,
        product_name="Acme",
    )
    assert "Acme" in system_prompt
    assert "Content density: high" in system_prompt
    assert 'USER QUERY: "Can you help my team find new accounts?"' in user_prompt
    assert json.dumps(skeleton, indent=2, ensure_ascii=False) in user_prompt


def test_describe_section_limits():
    limits = describe_section_limits("hero")
    assert "headline (required): 10-100 chars" in limits
    assert describe_section_limits("carousel") == ""


def test_reply_prompt_includes_recent_history():
    request = _request(
        user_message="And pricing?",
        conversation_history=[ConversationTurn(role="user", content="What is BevGenie?")],
    )
    prompt = build_reply_user_prompt(request)
    assert "user: What is BevGenie?" in prompt
    assert prompt.endswith("VISITOR: And pricing?")
