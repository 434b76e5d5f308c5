"""Generation strategies tried in order by ``PageGenerator``.

``TemplateFillStrategy`` is the fast path: one call that only fills the
content of a pre-built skeleton. ``LayoutLockedStrategy`` is the general
path: a bounded, strictly sequential retry loop that feeds each failure back
into the next prompt.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import asyncio
from dataclasses import dataclass, field
import logging
import time
from typing import Any, Callable, Dict, List, Optional

from ..config import Settings
from ..exceptions import PageGenError, ParseError, TransportError, ValidationError
from ..exceptions import TimeoutError as AttemptTimeoutError
from ..llm.base import GenerationClient
from ..log import log_attempt
from ..schemas.intent import IntentClassificationResult, IntentLayoutStrategy
from ..schemas.page import PageDocument
from ..schemas.request import AttemptRecord, PageGenerationRequest
from ..utils.page_json import parse_page_json
from ..utils.sanitize import sanitize_page
from ..utils.validation import to_page_document, validate_page
from .prompts import (
    LAYOUT_FREE,
    LAYOUT_LOCKED,
    build_page_skeleton,
    build_system_prompt,
    build_template_fill_prompts,
    build_user_prompt,
)

logger = logging.getLogger(__name__)

Validator = Callable[[Any, Optional[IntentLayoutStrategy]], List[str]]

PARSE_RETRY_INSTRUCTION = (
    "Your previous response could not be parsed ({error}). "
    "Return exactly one JSON object, with no text before or after it and no code fences."
)


@dataclass
class GenerationContext:
    request: PageGenerationRequest
    intent_result: IntentClassificationResult
    strategy: IntentLayoutStrategy
    page_type: str
    memory_warning: str = ""


@dataclass
class StrategyOutcome:
    page: Optional[PageDocument] = None
    error: Optional[str] = None
    retry_count: int = 0
    attempts: List[AttemptRecord] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.page is not None


class GenerationStrategy(ABC):
    name: str = "base"

    def __init__(
        self,
        client: GenerationClient,
        settings: Settings,
        *,
        validator: Validator = validate_page,
    ) -> None:
        self.client = client
        self.settings = settings
        self.validator = validator

    @abstractmethod
    async def run(self, ctx: GenerationContext) -> StrategyOutcome:
        raise NotImplementedError

    async def _complete(self, system_prompt: str, user_prompt: str, **kwargs: Any) -> str:
        timeout = float(self.settings.attempt_timeout_seconds)
        try:
            return await asyncio.wait_for(
                self.client.complete(system_prompt, user_prompt, **kwargs),
                timeout=timeout if timeout > 0 else None,
            )
        except asyncio.TimeoutError as exc:
            raise AttemptTimeoutError(f"Generation attempt exceeded {timeout:.0f}s") from exc

    def _accept(
        self,
        doc: Dict[str, Any],
        layout: Optional[IntentLayoutStrategy],
        extra_violations: Optional[List[str]] = None,
    ) -> PageDocument:
        """Validate the raw document, then sanitize and convert it.

        Out-of-bounds output is rejected here and never clipped into shape.

        Raises:
            ValidationError: when any rule is broken.
        """
        violations = list(self.validator(doc, layout))
        if extra_violations:
            violations.extend(extra_violations)
        if violations:
            raise ValidationError(violations)
        return to_page_document(sanitize_page(doc))

    def _record(
        self,
        ctx: GenerationContext,
        attempt: int,
        outcome: str,
        started: float,
        detail: str = "",
    ) -> AttemptRecord:
        elapsed_ms = int((time.monotonic() - started) * 1000)
        log_attempt(
            attempt=attempt,
            strategy=self.name,
            outcome=outcome,
            elapsed_ms=elapsed_ms,
            intent=ctx.intent_result.intent.value,
            detail=detail,
        )
        return AttemptRecord(attempt=attempt, strategy=self.name, outcome=outcome, elapsed_ms=elapsed_ms, detail=detail)


def _leftover_placeholders(value: Any, path: str = "") -> List[str]:
    if isinstance(value, str):
        text = value.strip()
        if text.startswith("<") and text.endswith(">"):
            return [f"{path or 'value'} still contains a template placeholder"]
        return []
    if isinstance(value, dict):
        found: List[str] = []
        for key, item in value.items():
            found.extend(_leftover_placeholders(item, f"{path}.{key}" if path else str(key)))
        return found
    if isinstance(value, list):
        found = []
        for idx, item in enumerate(value):
            found.extend(_leftover_placeholders(item, f"{path}[{idx}]"))
        return found
    return []


class TemplateFillStrategy(GenerationStrategy):
    """Single fast attempt against a skeleton whose structure is pre-built."""

    name = "template_fill"

    def _force_structure(self, doc: Dict[str, Any], skeleton: Dict[str, Any]) -> Dict[str, Any]:
        forced = dict(doc)
        forced["type"] = skeleton["type"]
        sections = forced.get("sections")
        if isinstance(sections, list):
            merged = []
            for idx, section in enumerate(sections):
                if isinstance(section, dict) and idx < len(skeleton["sections"]):
                    template = skeleton["sections"][idx]
                    section = {**section, "type": template["type"], "layout": dict(template["layout"])}
                merged.append(section)
            forced["sections"] = merged
        return forced

    async def run(self, ctx: GenerationContext) -> StrategyOutcome:
        started = time.monotonic()
        skeleton = build_page_skeleton(ctx.strategy, ctx.page_type)
        system_prompt, user_prompt = build_template_fill_prompts(
            ctx.request,
            ctx.strategy,
            skeleton,
            product_name=self.settings.product_name,
        )
        try:
            raw = await self._complete(
                system_prompt,
                user_prompt,
                max_tokens=self.settings.template_max_tokens,
                model=self.settings.template_model,
                purpose=self.name,
            )
            doc = self._force_structure(parse_page_json(raw), skeleton)
            page = self._accept(doc, ctx.strategy, _leftover_placeholders(doc))
        except PageGenError as exc:
            outcome = _outcome_label(exc)
            record = self._record(ctx, 1, outcome, started, str(exc))
            logger.info("Template fill failed (%s); falling through", outcome)
            return StrategyOutcome(error=str(exc), attempts=[record])

        record = self._record(ctx, 1, "accepted", started)
        return StrategyOutcome(page=page, attempts=[record])


class LayoutLockedStrategy(GenerationStrategy):
    """Generate, parse and validate up to ``max_retries + 1`` times."""

    def __init__(
        self,
        client: GenerationClient,
        settings: Settings,
        *,
        validator: Validator = validate_page,
        max_retries: Optional[int] = None,
        layout_mode: Optional[str] = None,
    ) -> None:
        super().__init__(client, settings, validator=validator)
        self.max_retries = max(0, int(max_retries if max_retries is not None else settings.page_max_retries))
        self.layout_mode = LAYOUT_FREE if (layout_mode or settings.layout_mode) == LAYOUT_FREE else LAYOUT_LOCKED
        self.name = "layout_locked" if self.layout_mode == LAYOUT_LOCKED else "free_layout"

    async def run(self, ctx: GenerationContext) -> StrategyOutcome:
        attempts: List[AttemptRecord] = []
        feedback: List[str] = []
        last_error = "Generation failed"
        lock = ctx.strategy if self.layout_mode == LAYOUT_LOCKED else None

        system_prompt = build_system_prompt(
            ctx.request,
            ctx.strategy,
            ctx.intent_result,
            page_type=ctx.page_type,
            product_name=self.settings.product_name,
            memory_warning=ctx.memory_warning,
            layout_mode=self.layout_mode,
        )

        for attempt in range(1, self.max_retries + 2):
            started = time.monotonic()
            user_prompt = build_user_prompt(
                ctx.request,
                ctx.strategy,
                page_type=ctx.page_type,
                feedback=feedback,
                layout_mode=self.layout_mode,
            )
            try:
                raw = await self._complete(
                    system_prompt,
                    user_prompt,
                    max_tokens=self.settings.max_tokens,
                    temperature=self.settings.temperature,
                    cache_system_prompt=True,
                    purpose=self.name,
                )
                page = self._accept(parse_page_json(raw), lock)
            except TransportError as exc:
                last_error = f"Generation backend error: {exc}"
                attempts.append(self._record(ctx, attempt, "transport_error", started, str(exc)))
            except ParseError as exc:
                last_error = f"Could not parse generated page: {exc}"
                feedback = [PARSE_RETRY_INSTRUCTION.format(error=exc)]
                attempts.append(self._record(ctx, attempt, "parse_error", started, str(exc)))
            except ValidationError as exc:
                last_error = "; ".join(exc.violations)
                feedback = list(exc.violations)
                attempts.append(self._record(ctx, attempt, "validation_error", started, last_error))
            else:
                attempts.append(self._record(ctx, attempt, "accepted", started))
                return StrategyOutcome(page=page, retry_count=attempt - 1, attempts=attempts)

        return StrategyOutcome(error=last_error, retry_count=self.max_retries, attempts=attempts)


def _outcome_label(exc: PageGenError) -> str:
    if isinstance(exc, TransportError):
        return "transport_error"
    if isinstance(exc, ParseError):
        return "parse_error"
    return "validation_error"


__all__ = [
    "GenerationContext",
    "StrategyOutcome",
    "GenerationStrategy",
    "TemplateFillStrategy",
    "LayoutLockedStrategy",
    "PARSE_RETRY_INSTRUCTION",
]
