"""
Page Generation Prompts

Prompt assembly for the layout-locked generator, the free-layout generator
and the template-fill fast path.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Sequence

from ..schemas.intent import IntentClassificationResult, IntentLayoutStrategy
from ..schemas.request import PageGenerationRequest
from ..services.fallback import primary_persona_label
from ..utils.page_rules import (
    AnyRule,
    BoolRule,
    CellsRule,
    EnumRule,
    IntRule,
    ListRule,
    ObjectRule,
    Rule,
    StringRule,
    TextOnlyRule,
    section_rule,
)
from .layouts import content_guidelines_for, page_type_template

PERSONA_CHAR_LIMIT = 150
KNOWLEDGE_CHAR_LIMIT = 150
KNOWLEDGE_TOP_K = 2
HISTORY_TURNS = 2
HISTORY_CHAR_LIMIT = 150
HEIGHT_TOLERANCE = 5
HEIGHT_SUM_MIN = 95
HEIGHT_SUM_MAX = 105

LAYOUT_LOCKED = "locked"
LAYOUT_FREE = "free"

# ============ Shared Blocks ============

JSON_ONLY_INSTRUCTION = (
    "Respond with ONLY one valid JSON object matching the page structure. "
    "No markdown, no code fences, no explanation before or after the JSON."
)

FEATURE_TITLE_RULES = """FEATURE TITLES (used for icon mapping):
Each feature title in a feature_grid should contain one of: Performance, Intelligence, Distributor,
Competitive, Gap, Account, Prioritization, Optimization.
Good: "Performance Analytics Dashboard", "Competitive Intelligence Tracking"
Bad: "Track Your Metrics", "Market Insights" (no keyword)"""

CTA_RULES = """CTA REQUIREMENTS:
- hero sections include a ctaButton with text and action
- cta sections include a buttons array with at least 2 buttons, one marked primary
- button text is action-oriented: "Explore Features", "Schedule Demo", "Get Started"
- never leave CTA fields empty or null"""

BRAND_RULES = """BRAND GUIDELINES:
- Beverage industry B2B terminology
- Professional, credible tone
- Focus on market intelligence and data-driven insights"""

# ============ Template Fill Prompt ============

TEMPLATE_FILL_SYSTEM_PROMPT = """You are a content writer for {product} B2B SaaS.
You receive a JSON page template. Replace every "<...>" placeholder with real content that answers the user.

RULES:
- Keep every "type" and "layout" value exactly as given
- Keep the number and order of sections exactly as given
- Respect the character range written inside each placeholder
- Keep list lengths as given unless a placeholder says otherwise
- Content density: {density}

{brand_rules}

{json_only}"""

TEMPLATE_FILL_USER_PROMPT = """USER QUERY: "{user_message}"
{context_block}
TEMPLATE:
{skeleton}

{json_only}"""

# ============ Chat Reply Prompt ============

REPLY_SYSTEM_PROMPT = """You are the assistant on the {product} website, a market intelligence platform for the beverage industry.
Answer the visitor in 2-3 short sentences. A generated page with details is shown next to your reply,
so do not list features or numbers in full. Stay friendly and professional; never invent customer names."""


def _truncate(text: Optional[str], limit: int) -> str:
    return (text or "")[:limit]


def _rule_summary(rule: Rule) -> str:
    if isinstance(rule, StringRule):
        return f"{rule.min}-{rule.max} chars"
    if isinstance(rule, IntRule):
        return f"integer {rule.min}-{rule.max}"
    if isinstance(rule, EnumRule):
        return " | ".join(rule.choices)
    if isinstance(rule, BoolRule):
        return "true/false"
    if isinstance(rule, CellsRule):
        return "list of strings or booleans"
    if isinstance(rule, ListRule):
        return f"{rule.min}-{rule.max} items"
    return "text"


def describe_section_limits(section_type: str) -> str:
    """One line per field of ``section_type`` with its bounds."""
    rule = section_rule(section_type)
    if rule is None:
        return ""
    lines = [f"{section_type}:"]
    for name, field_rule in rule.fields.items():
        if name in {"layout", "size", "visualWeight"}:
            continue
        required = "required" if field_rule.required else "optional"
        summary = _rule_summary(field_rule)
        if isinstance(field_rule, ListRule) and isinstance(field_rule.item, ObjectRule):
            inner = ", ".join(
                f"{child} {_rule_summary(child_rule)}"
                for child, child_rule in field_rule.item.fields.items()
                if not isinstance(child_rule, AnyRule)
            )
            summary = f"{summary}, each {{{inner}}}"
        elif isinstance(field_rule, ListRule):
            summary = f"{summary}, each {_rule_summary(field_rule.item)}"
        lines.append(f"  - {name} ({required}): {summary}")
    return "\n".join(lines)


def _placeholder(name: str, rule: Rule, index: int = 0) -> Any:
    if isinstance(rule, StringRule):
        return f"<{name}: {rule.min}-{rule.max} chars>"
    if isinstance(rule, IntRule):
        return min(rule.max, rule.min + index)
    if isinstance(rule, EnumRule):
        return rule.choices[0]
    if isinstance(rule, BoolRule):
        return index == 0
    if isinstance(rule, TextOnlyRule):
        return f"<{name}>"
    if isinstance(rule, CellsRule):
        return ["<value>", True]
    if isinstance(rule, ListRule):
        count = max(rule.min, min(rule.max, 3))
        return [_placeholder(name.rstrip("s") or name, rule.item, idx) for idx in range(count)]
    if isinstance(rule, ObjectRule):
        return {
            child: _placeholder(child, child_rule, index)
            for child, child_rule in rule.fields.items()
            if not isinstance(child_rule, AnyRule) and (child_rule.required or isinstance(child_rule, (StringRule, ListRule)))
        }
    return None


def build_section_skeleton(section_type: str, height_percent: int) -> Dict[str, Any]:
    rule = section_rule(section_type)
    skeleton: Dict[str, Any] = {"type": section_type, "layout": {"requestedHeightPercent": height_percent}}
    if rule is None:
        return skeleton
    for name, field_rule in rule.fields.items():
        if name in {"layout", "size", "visualWeight", "visualContent"}:
            continue
        if field_rule.required or isinstance(field_rule, (StringRule, ListRule, ObjectRule)):
            skeleton[name] = _placeholder(name, field_rule)
    return skeleton


def build_page_skeleton(strategy: IntentLayoutStrategy, page_type: str) -> Dict[str, Any]:
    """Page template with structural keys fixed and content left as placeholders."""
    return {
        "type": page_type,
        "title": "<title: 10-100 chars>",
        "description": "<description: 50-250 chars>",
        "sections": [build_section_skeleton(spec.type, spec.height_percent) for spec in strategy.sections],
    }


def _section_requirements(strategy: IntentLayoutStrategy) -> str:
    parts: List[str] = []
    for idx, spec in enumerate(strategy.sections, start=1):
        parts.append(
            f"{idx}. {spec.type} section ({spec.height_percent}% height)\n"
            f"   - Content focus: {spec.content_focus}\n"
            f"   - Must specify: layout.requestedHeightPercent = {spec.height_percent}"
        )
    return "\n".join(parts)


def _guidelines_block(intent_result: IntentClassificationResult) -> str:
    guidelines = content_guidelines_for(intent_result.intent)
    lines = [f'CONTENT GUIDELINES FOR "{intent_result.intent.value}":']
    lines.append(
        f"- Headline: {guidelines.headline.min}-{guidelines.headline.max} chars, {guidelines.headline.tone}"
    )
    lines.append(
        f"- Subheadline: {guidelines.subheadline.min}-{guidelines.subheadline.max} chars, "
        f"{guidelines.subheadline.tone}"
    )
    if guidelines.max_features > 0:
        lines.append(f"- Max features: {guidelines.max_features}")
    if guidelines.feature_description.max > 0:
        lines.append(
            f"- Feature descriptions: {guidelines.feature_description.min}-"
            f"{guidelines.feature_description.max} chars"
        )
    lines.append("")
    lines.append("Example headlines for this intent:")
    lines.extend(f'  - "{example}"' for example in guidelines.examples)
    return "\n".join(lines)


def _output_format(strategy: Optional[IntentLayoutStrategy], page_type: str) -> str:
    if strategy is not None:
        example = build_page_skeleton(strategy, page_type)
    else:
        example = {
            "type": page_type,
            "title": "<title: 10-100 chars>",
            "description": "<description: 50-250 chars>",
            "sections": [build_section_skeleton("hero", 35)],
        }
    return "REQUIRED JSON OUTPUT FORMAT:\n" + json.dumps(example, indent=2, ensure_ascii=False)


def build_system_prompt(
    request: PageGenerationRequest,
    strategy: IntentLayoutStrategy,
    intent_result: IntentClassificationResult,
    *,
    page_type: Optional[str] = None,
    product_name: str = "BevGenie",
    memory_warning: str = "",
    layout_mode: str = LAYOUT_LOCKED,
) -> str:
    """System prompt for one page generation attempt.

    In locked mode the prompt fixes section count, type order and the
    requested height of every section; in free mode it describes the page
    type and lets the generator choose sections.
    """
    page_type = page_type or request.page_type or "solution_brief"
    blocks: List[str] = []
    blocks.append(
        f"You are a content writer for {product_name} B2B SaaS."
        + (" The layout is FIXED - you only write content." if layout_mode == LAYOUT_LOCKED else "")
    )
    blocks.append(
        f"USER INTENT: {intent_result.intent.value}\n"
        f"Strategy: {strategy.strategy}\n"
        f"Confidence: {round(intent_result.confidence * 100)}%\n"
        f"Reasoning: {intent_result.reasoning}"
    )

    if layout_mode == LAYOUT_LOCKED:
        count = len(strategy.sections)
        types = ", ".join(strategy.section_types)
        blocks.append(
            f"LAYOUT IS LOCKED\n"
            f"You MUST generate EXACTLY {count} sections in this EXACT order:\n\n"
            f"{_section_requirements(strategy)}\n\n"
            f"Total: {strategy.total_height}%"
        )
        blocks.append(
            "HEIGHT CONSTRAINT:\n"
            f"Copy each requestedHeightPercent from the list above. You may move a value by at most "
            f"{HEIGHT_TOLERANCE} points, and the sum across all sections MUST land between "
            f"{HEIGHT_SUM_MIN} and {HEIGHT_SUM_MAX}. The renderer normalizes the sum to fill the screen."
        )
        blocks.append(
            "ABSOLUTE REQUIREMENTS:\n"
            f"1. Generate EXACTLY {count} sections (no more, no less)\n"
            f"2. Use ONLY these types, in this order: {types}\n"
            "3. Do not add, skip or reorder sections\n"
            "4. Every section carries layout.requestedHeightPercent"
        )
        section_types: Sequence[str] = strategy.section_types
    else:
        blocks.append(
            "PAGE TEMPLATE:\n"
            f"{page_type_template(page_type)}\n\n"
            "Choose 2-5 sections from: hero, feature_grid, metrics, comparison_table, steps, cta, faq, "
            "single_screen. Give every section layout.requestedHeightPercent (15-100) so that the sum lands "
            f"between {HEIGHT_SUM_MIN} and {HEIGHT_SUM_MAX}."
        )
        section_types = ("hero", "feature_grid", "metrics", "comparison_table", "steps", "cta", "faq")

    blocks.append(_guidelines_block(intent_result))

    limits = [describe_section_limits(section_type) for section_type in dict.fromkeys(section_types)]
    blocks.append("FIELD LIMITS (characters / items):\n" + "\n".join(limit for limit in limits if limit))

    blocks.append(FEATURE_TITLE_RULES)
    blocks.append(CTA_RULES)
    if memory_warning:
        blocks.append(memory_warning)
    blocks.append(f"{BRAND_RULES}\n- Content density: {strategy.content_density}")
    blocks.append(_output_format(strategy if layout_mode == LAYOUT_LOCKED else None, page_type))
    blocks.append(
        "CRITICAL:\n"
        "- Output ONLY valid JSON\n"
        "- NO markdown code blocks\n"
        "- NO explanatory text\n"
        + (f"- Exactly {len(strategy.sections)} sections\n" if layout_mode == LAYOUT_LOCKED else "")
        + "- All required fields must be present"
    )
    return "\n\n".join(blocks)


def _context_lines(request: PageGenerationRequest) -> List[str]:
    parts: List[str] = []
    context = request.page_context.context if request.page_context else None
    if context:
        parts.append(f'\nCONTEXT: User clicked "{context}" - provide deeper detail on this topic.')
    if request.interaction_source:
        parts.append(f"INTERACTION SOURCE: {request.interaction_source}")

    history = request.conversation_history[-HISTORY_TURNS:]
    if history:
        parts.append("\nRECENT CONVERSATION:")
        parts.extend(f"  {turn.role}: {_truncate(turn.content, HISTORY_CHAR_LIMIT)}" for turn in history)

    persona = request.persona_description or primary_persona_label(request.persona)
    if persona:
        parts.append(f"\nUSER PROFILE: {_truncate(persona, PERSONA_CHAR_LIMIT)}")

    if request.knowledge_documents:
        parts.append("\nRELEVANT INSIGHTS FROM KNOWLEDGE BASE:")
        for idx, doc in enumerate(request.knowledge_documents[:KNOWLEDGE_TOP_K], start=1):
            percent = round((doc.similarity_score or 0.0) * 100)
            parts.append(f"  {idx}. [{percent}% match] {_truncate(doc.content, KNOWLEDGE_CHAR_LIMIT)}")
    return parts


def format_feedback(feedback: Sequence[str]) -> str:
    if not feedback:
        return ""
    lines = ["\nYOUR PREVIOUS ATTEMPT WAS REJECTED. Fix every issue below:"]
    lines.extend(f"- {item}" for item in feedback)
    return "\n".join(lines)


def build_user_prompt(
    request: PageGenerationRequest,
    strategy: IntentLayoutStrategy,
    *,
    page_type: Optional[str] = None,
    feedback: Sequence[str] = (),
    layout_mode: str = LAYOUT_LOCKED,
) -> str:
    page_type = page_type or request.page_type or "solution_brief"
    parts: List[str] = [f'USER QUERY: "{request.user_message}"']
    if layout_mode == LAYOUT_LOCKED:
        parts.append(
            f"\nGENERATE: {page_type} page with the {len(strategy.sections)} sections specified in the system prompt."
        )
    else:
        parts.append(f"\nGENERATE: {page_type} page following the page template in the system prompt.")

    parts.extend(_context_lines(request))

    if layout_mode == LAYOUT_LOCKED:
        parts.append(
            f"\nREMEMBER: Generate EXACTLY {len(strategy.sections)} sections with types: "
            f"{', '.join(strategy.section_types)}"
        )
    corrective = format_feedback(feedback)
    if corrective:
        parts.append(corrective)
    parts.append(f"\n{JSON_ONLY_INSTRUCTION}")
    return "\n".join(parts)


def build_template_fill_prompts(
    request: PageGenerationRequest,
    strategy: IntentLayoutStrategy,
    skeleton: Dict[str, Any],
    *,
    product_name: str = "BevGenie",
) -> tuple[str, str]:
    system_prompt = TEMPLATE_FILL_SYSTEM_PROMPT.format(
        product=product_name,
        density=strategy.content_density,
        brand_rules=BRAND_RULES,
        json_only=JSON_ONLY_INSTRUCTION,
    )
    context_block = "\n".join(_context_lines(request))
    user_prompt = TEMPLATE_FILL_USER_PROMPT.format(
        user_message=request.user_message,
        context_block=context_block,
        skeleton=json.dumps(skeleton, indent=2, ensure_ascii=False),
        json_only=JSON_ONLY_INSTRUCTION,
    )
    return system_prompt, user_prompt


def build_reply_user_prompt(request: PageGenerationRequest) -> str:
    parts: List[str] = []
    history = request.conversation_history[-HISTORY_TURNS:]
    if history:
        parts.append("RECENT CONVERSATION:")
        parts.extend(f"  {turn.role}: {_truncate(turn.content, HISTORY_CHAR_LIMIT)}" for turn in history)
        parts.append("")
    parts.append(f"VISITOR: {request.user_message}")
    return "\n".join(parts)


__all__ = [
    "LAYOUT_LOCKED",
    "LAYOUT_FREE",
    "JSON_ONLY_INSTRUCTION",
    "build_system_prompt",
    "build_user_prompt",
    "build_template_fill_prompts",
    "build_page_skeleton",
    "build_section_skeleton",
    "describe_section_limits",
    "format_feedback",
    "REPLY_SYSTEM_PROMPT",
    "build_reply_user_prompt",
]
