"""Pattern-based intent classification for incoming chat messages.

Every intent owns three pattern families matched against the lower-cased,
trimmed message: keyword substrings (1 point), phrases (3 points) and
anchored question patterns (5 points). The highest score wins, ties going to
the intent declared first in ``UserIntent``.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
import logging
import re
from typing import Dict, List, Mapping, Optional, Pattern, Sequence, Tuple

from ..schemas.intent import IntentClassificationResult, UserIntent

logger = logging.getLogger(__name__)

DEFAULT_PRODUCT_NAME = "BevGenie"

KEYWORD_WEIGHT = 1
PHRASE_WEIGHT = 3
PATTERN_WEIGHT = 5

FALLBACK_CONFIDENCE = 0.3
DOMINANCE_RATIO = 0.6

DEFAULT_CONFIDENCE_THRESHOLDS: Dict[UserIntent, float] = {
    UserIntent.PRODUCT_INQUIRY: 0.4,
    UserIntent.FEATURE_QUESTION: 0.5,
    UserIntent.COMPARISON: 0.7,
    UserIntent.STATS_ROI: 0.6,
    UserIntent.IMPLEMENTATION: 0.6,
    UserIntent.USE_CASE: 0.3,
    UserIntent.OFF_TOPIC: 0.8,
}

FALLBACK_INTENT = UserIntent.USE_CASE

# "{p}" is replaced by the lower-cased product name; in regexes by its escaped form.
_PATTERN_TABLE: Dict[UserIntent, Dict[str, Tuple[str, ...]]] = {
    UserIntent.PRODUCT_INQUIRY: {
        "keywords": ("what is", "tell me about", "explain", "{p}", "product", "platform", "overview", "about"),
        "phrases": (
            "what is {p}",
            "tell me about {p}",
            "what does {p} do",
            "{p} overview",
            "what can {p}",
            "describe {p}",
        ),
        "patterns": (
            r"^what (?:is|does|can) (?:this|the|your)?\s?(?:product|platform|solution|tool)",
            r"^(?:tell|explain).*(?:about|{p}|platform|product)",
            r"^(?:what|who) (?:are|is) (?:you|{p})",
        ),
    },
    UserIntent.FEATURE_QUESTION: {
        "keywords": ("feature", "capability", "function", "can it", "does it have", "support", "integrate", "analytics"),
        "phrases": (
            "what features",
            "does it have",
            "can it do",
            "what capabilities",
            "how does it work",
            "what can it do",
            "features available",
            "functionality",
        ),
        "patterns": (
            r"^what (?:features|capabilities|functions)",
            r"^(?:does it|can it|do you) (?:have|support|offer|provide)",
            r"^(?:how|what) (?:does|do) (?:it|the|your)?\s?(?:features?|work)",
            r"^(?:list|show|tell).*(?:features|capabilities)",
        ),
    },
    UserIntent.COMPARISON: {
        "keywords": (
            "vs",
            "versus",
            "compare",
            "comparison",
            "competitor",
            "alternative",
            "difference",
            "better than",
            "why choose",
        ),
        "phrases": (
            "{p} vs",
            "compare to",
            "compared to",
            "better than",
            "why choose {p}",
            "advantages over",
            "difference between",
            "alternative to",
        ),
        "patterns": (
            r"\bvs\b|\bversus\b",
            r"\bcompare(?:d)?\s+(?:to|with|against)",
            r"\b(?:better|different)\s+(?:than|from)",
            r"\b(?:why|how)\s+(?:choose|use|prefer)",
            r"\balternative(?:s)?\s+to",
        ),
    },
    UserIntent.STATS_ROI: {
        "keywords": (
            "roi",
            "results",
            "metrics",
            "stats",
            "statistics",
            "impact",
            "performance",
            "outcomes",
            "savings",
            "revenue",
            "growth",
        ),
        "phrases": (
            "what results",
            "roi calculator",
            "show me stats",
            "what impact",
            "how much save",
            "revenue increase",
            "proven results",
            "customer success",
        ),
        "patterns": (
            r"\b(?:roi|return on investment)",
            r"\b(?:results|metrics|stats|statistics|outcomes)\b",
            r"\b(?:how much|what).*(?:save|increase|improve|gain)",
            r"\b(?:impact|performance|growth|revenue)",
            r"\bproven\s+(?:results|success)",
        ),
    },
    UserIntent.IMPLEMENTATION: {
        "keywords": (
            "get started",
            "how to",
            "implement",
            "setup",
            "onboard",
            "launch",
            "install",
            "deploy",
            "integration",
            "timeline",
        ),
        "phrases": (
            "get started",
            "how to start",
            "implementation process",
            "setup guide",
            "onboarding",
            "launch timeline",
            "how long to implement",
            "integration steps",
        ),
        "patterns": (
            r"^(?:how (?:do|can) (?:i|we)).*(?:get started|start|begin|implement|setup|onboard)",
            r"\b(?:implementation|setup|onboarding|integration)\s+(?:process|steps|guide|timeline)",
            r"\bhow long.*(?:to|does it take).*(?:implement|setup|launch)",
            r"^(?:what|show).*(?:steps|process).*(?:get started|implement)",
        ),
    },
    UserIntent.USE_CASE: {
        "keywords": (
            "can you help",
            "use case",
            "scenario",
            "for my",
            "my business",
            "my team",
            "problem",
            "challenge",
            "need",
            "looking for",
        ),
        "phrases": (
            "can you help with",
            "does it work for",
            "use case for",
            "my business",
            "my problem",
            "i need",
            "looking for solution",
            "solve my",
        ),
        "patterns": (
            r"^(?:can|could|will).*(?:help|work|solve|address)",
            r"\b(?:my|our)\s+(?:business|team|company|problem|challenge|need)",
            r"\buse case.*for\b",
            r"\b(?:looking for|need|want).*(?:solution|help|tool)",
            r"\b(?:does it|can it).*work.*for\b",
        ),
    },
    UserIntent.OFF_TOPIC: {
        "keywords": ("weather", "recipe", "movie", "sports", "politics", "joke", "game", "music", "news"),
        "phrases": (
            "tell me a joke",
            "what's the weather",
            "latest news",
            "movie recommendation",
            "recipe for",
            "sports score",
        ),
        "patterns": (
            r"^(?:tell|give|show).*(?:joke|story|game)",
            r"\b(?:weather|recipe|movie|sports|politics|music|news)\b",
            r"^(?:what|who|how).*(?:not related to beverage|unrelated)",
        ),
    },
}

_INTENT_LABELS: Dict[UserIntent, str] = {
    UserIntent.PRODUCT_INQUIRY: "Product inquiry - user wants to understand what {name} is",
    UserIntent.FEATURE_QUESTION: "Feature question - user asking about specific capabilities",
    UserIntent.COMPARISON: "Comparison - user comparing {name} to alternatives",
    UserIntent.STATS_ROI: "Stats/ROI - user interested in metrics and business impact",
    UserIntent.IMPLEMENTATION: "Implementation - user asking about getting started",
    UserIntent.USE_CASE: "Use case - user exploring if {name} fits their needs",
    UserIntent.OFF_TOPIC: "Off-topic - query not related to beverage intelligence",
}


@dataclass(frozen=True)
class _IntentPatterns:
    keywords: Tuple[str, ...]
    phrases: Tuple[str, ...]
    patterns: Tuple[Pattern[str], ...]


@lru_cache(maxsize=8)
def _compile_patterns(product_name: str) -> Tuple[Tuple[UserIntent, _IntentPatterns], ...]:
    product = product_name.strip().lower()
    escaped = re.escape(product)
    compiled: List[Tuple[UserIntent, _IntentPatterns]] = []
    for intent in UserIntent:
        table = _PATTERN_TABLE[intent]
        compiled.append(
            (
                intent,
                _IntentPatterns(
                    keywords=tuple(item.replace("{p}", product) for item in table["keywords"]),
                    phrases=tuple(item.replace("{p}", product) for item in table["phrases"]),
                    patterns=tuple(
                        re.compile(item.replace("{p}", escaped), re.IGNORECASE) for item in table["patterns"]
                    ),
                ),
            )
        )
    return tuple(compiled)


def _score(text: str, patterns: _IntentPatterns) -> Tuple[int, List[str]]:
    score = 0
    matched: List[str] = []
    for keyword in patterns.keywords:
        if keyword and keyword in text:
            score += KEYWORD_WEIGHT
            matched.append(f"keyword:{keyword}")
    for phrase in patterns.phrases:
        if phrase and phrase in text:
            score += PHRASE_WEIGHT
            matched.append(f"phrase:{phrase}")
    for idx, pattern in enumerate(patterns.patterns):
        if pattern.search(text):
            score += PATTERN_WEIGHT
            matched.append(f"pattern:{idx}")
    return score, matched


def _fallback_rule(text: str, product: str) -> Tuple[UserIntent, str, int]:
    if len(text) < 20 and product and product in text:
        return UserIntent.PRODUCT_INQUIRY, "short_product_mention", 2
    # A blank message has no "?" and zero words, so it never reaches the question rule.
    if "?" in text and len(text.split()) < 10:
        return UserIntent.FEATURE_QUESTION, "short_question", 1
    return UserIntent.USE_CASE, "generic_query", 1


def _reasoning(
    intent: UserIntent,
    matches: Sequence[str],
    score: int,
    confidence: float,
    product_name: str,
) -> str:
    label = _INTENT_LABELS[intent].format(name=product_name)
    summary = f"Matched {len(matches)} pattern(s)" if matches else "No explicit patterns, using heuristics"
    return f"{label}. {summary}. Score: {score}, Confidence: {round(confidence * 100)}%"


def classify_intent(message: str, *, product_name: str = DEFAULT_PRODUCT_NAME) -> IntentClassificationResult:
    """Classify ``message`` into one of the ``UserIntent`` categories."""
    text = (message or "").strip().lower()
    product = product_name.strip().lower()

    scores: Dict[UserIntent, int] = {}
    matches: Dict[UserIntent, List[str]] = {}
    for intent, patterns in _compile_patterns(product_name):
        scores[intent], matches[intent] = _score(text, patterns)

    top_intent = UserIntent.PRODUCT_INQUIRY
    max_score = -1
    for intent in UserIntent:
        if scores[intent] > max_score:
            max_score = scores[intent]
            top_intent = intent

    rule: Optional[str] = None
    matched: Tuple[str, ...] = tuple(matches[top_intent])
    if max_score == 0:
        top_intent, rule, max_score = _fallback_rule(text, product)
        matched = ()

    # The heuristic's synthetic score is not part of the total.
    total = sum(scores.values())
    if total > 0:
        confidence = min(1.0, max_score / (total * DOMINANCE_RATIO))
    else:
        confidence = FALLBACK_CONFIDENCE

    reasoning = _reasoning(top_intent, matched, max_score, confidence, product_name)
    if rule:
        reasoning = f"{reasoning} (rule: {rule})"

    logger.debug(
        "Intent classified",
        extra={"data": {
            "message": (message or "")[:60],
            "intent": top_intent.value,
            "confidence": round(confidence, 3),
            "scores": {intent.value: value for intent, value in scores.items()},
            "rule": rule,
        }},
    )

    return IntentClassificationResult(
        intent=top_intent,
        confidence=confidence,
        matched_patterns=matched,
        reasoning=reasoning,
        rule=rule,
        scores=tuple((intent.value, scores[intent]) for intent in UserIntent),
    )


def classify_intent_batch(
    messages: Sequence[str],
    *,
    product_name: str = DEFAULT_PRODUCT_NAME,
) -> List[IntentClassificationResult]:
    return [classify_intent(message, product_name=product_name) for message in messages]


def confidence_threshold(
    intent: UserIntent,
    overrides: Optional[Mapping[UserIntent, float]] = None,
) -> float:
    if overrides and intent in overrides:
        return float(overrides[intent])
    return DEFAULT_CONFIDENCE_THRESHOLDS[intent]


def is_confident(
    result: IntentClassificationResult,
    overrides: Optional[Mapping[UserIntent, float]] = None,
) -> bool:
    return result.confidence >= confidence_threshold(result.intent, overrides)


def resolve_intent(
    result: IntentClassificationResult,
    overrides: Optional[Mapping[UserIntent, float]] = None,
) -> UserIntent:
    """Return the intent to act on, remapping low-confidence results to ``use_case``."""
    if is_confident(result, overrides):
        return result.intent
    logger.info(
        "Low intent confidence (%s%% for %s), falling back to %s",
        round(result.confidence * 100),
        result.intent.value,
        FALLBACK_INTENT.value,
    )
    return FALLBACK_INTENT


class IntentClassifier:
    """Classifier bound to a product name and per-intent threshold overrides."""

    def __init__(
        self,
        *,
        product_name: str = DEFAULT_PRODUCT_NAME,
        thresholds: Optional[Mapping[UserIntent, float]] = None,
    ) -> None:
        self.product_name = product_name
        self.thresholds = dict(thresholds or {})

    def classify(self, message: str) -> IntentClassificationResult:
        return classify_intent(message, product_name=self.product_name)

    def classify_batch(self, messages: Sequence[str]) -> List[IntentClassificationResult]:
        return classify_intent_batch(messages, product_name=self.product_name)

    def is_confident(self, result: IntentClassificationResult) -> bool:
        return is_confident(result, self.thresholds)

    def resolve(self, result: IntentClassificationResult) -> UserIntent:
        return resolve_intent(result, self.thresholds)


__all__ = [
    "DEFAULT_PRODUCT_NAME",
    "DEFAULT_CONFIDENCE_THRESHOLDS",
    "FALLBACK_CONFIDENCE",
    "FALLBACK_INTENT",
    "IntentClassifier",
    "classify_intent",
    "classify_intent_batch",
    "confidence_threshold",
    "is_confident",
    "resolve_intent",
]
