from .intent_classifier import (
    IntentClassifier,
    classify_intent,
    classify_intent_batch,
    is_confident,
    resolve_intent,
)
from .layouts import content_guidelines_for, page_type_for_intent, strategy_for
from .page_generator import PageGenerator
from .prompts import (
    REPLY_SYSTEM_PROMPT,
    build_page_skeleton,
    build_system_prompt,
    build_template_fill_prompts,
    build_user_prompt,
)
from .strategies import (
    GenerationContext,
    GenerationStrategy,
    LayoutLockedStrategy,
    StrategyOutcome,
    TemplateFillStrategy,
)

__all__ = [
    "IntentClassifier",
    "classify_intent",
    "classify_intent_batch",
    "is_confident",
    "resolve_intent",
    "strategy_for",
    "content_guidelines_for",
    "page_type_for_intent",
    "PageGenerator",
    "REPLY_SYSTEM_PROMPT",
    "build_page_skeleton",
    "build_system_prompt",
    "build_template_fill_prompts",
    "build_user_prompt",
    "GenerationContext",
    "GenerationStrategy",
    "LayoutLockedStrategy",
    "StrategyOutcome",
    "TemplateFillStrategy",
]
