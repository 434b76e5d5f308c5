from __future__ import annotations

from typing import Dict, Mapping, Optional

FALLBACK_PAGE_CONTENT: Dict[str, str] = {
    "solution_brief": (
        "I understand your challenge. Our solution is designed to address these specific pain points "
        "in the beverage industry. Let me know if you would like more details about how we can help."
    ),
    "feature_showcase": (
        "Great question! These features are core to our platform and help teams work more efficiently. "
        "Would you like me to walk through any specific capability in more detail?"
    ),
    "case_study": (
        "We have helped many beverage companies achieve significant results. Each implementation is "
        "tailored to their unique needs. Would you like to discuss a similar scenario?"
    ),
    "comparison": (
        "We stand out by focusing specifically on the beverage industry with purpose-built features. "
        "Let me know which aspects matter most to you, and I can provide a detailed comparison."
    ),
    "implementation_roadmap": (
        "Most implementations follow a structured process that we can customize to your timeline. "
        "We ensure a smooth launch with proper planning and support every step of the way."
    ),
    "roi_calculator": (
        "The financial impact depends on your specific situation. Factors like team size, current "
        "processes, and your goals all play a role. Let us discuss your scenario to build a more "
        "accurate projection."
    ),
}

ESTIMATED_GENERATION_MS: Dict[str, int] = {
    "solution_brief": 3000,
    "feature_showcase": 4000,
    "case_study": 5000,
    "comparison": 4500,
    "implementation_roadmap": 4000,
    "roi_calculator": 3500,
}

PERSONA_SCORE_THRESHOLD = 0.7

_PERSONA_LABELS = (
    ("supplier_score", "supplier"),
    ("distributor_score", "distributor"),
    ("craft_score", "craft"),
    ("mid_sized_score", "mid_sized"),
    ("large_score", "large"),
    ("sales_focus_score", "sales_focus"),
    ("marketing_focus_score", "marketing_focus"),
    ("compliance_focus_score", "compliance_focus"),
)


def fallback_page_content(page_type: Optional[str]) -> str:
    """Static reply used when no page could be generated."""
    return FALLBACK_PAGE_CONTENT.get(page_type or "", FALLBACK_PAGE_CONTENT["solution_brief"])


def estimate_generation_time(page_type: Optional[str]) -> int:
    return ESTIMATED_GENERATION_MS.get(page_type or "", 4000)


def _hash_string(text: str) -> str:
    value = 0
    for char in text:
        value = ((value << 5) - value + ord(char)) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return _to_base36(abs(value))


def _to_base36(number: int) -> str:
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    if number == 0:
        return "0"
    out = []
    while number:
        number, rem = divmod(number, 36)
        out.append(digits[rem])
    return "".join(reversed(out))


def page_cache_key(user_message: str, page_type: str, persona_hash: Optional[str] = None) -> str:
    """Cache key for a generated page, stable across processes."""
    message_hash = _hash_string((user_message or "")[:100])
    return f"page_{page_type}_{message_hash}_{persona_hash or 'default'}"


def primary_persona_label(persona: Mapping[str, float]) -> str:
    """Underscore-joined labels for persona scores above the threshold."""
    labels = [label for key, label in _PERSONA_LABELS if float(persona.get(key, 0.0) or 0.0) > PERSONA_SCORE_THRESHOLD]
    return "_".join(labels)


__all__ = [
    "FALLBACK_PAGE_CONTENT",
    "ESTIMATED_GENERATION_MS",
    "fallback_page_content",
    "estimate_generation_time",
    "page_cache_key",
    "primary_persona_label",
]
