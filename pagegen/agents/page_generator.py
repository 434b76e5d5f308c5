"""Page generation orchestrator.

Classifies the request, picks the layout strategy, then tries the generation
strategies in order until one produces a page that passes validation. The
public methods never raise for generation problems; failures come back as an
unsuccessful ``GenerationResult``.
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
import time
from typing import List, Optional, Sequence

from ..config import Settings, get_settings
from ..exceptions import TransportError
from ..llm.base import GenerationClient
from ..log import log_generation
from ..schemas.intent import IntentClassificationResult
from ..schemas.request import (
    AttemptRecord,
    ChatTurnResult,
    GenerationResult,
    PageGenerationRequest,
)
from ..services.content_memory import ContentMemory
from ..services.fallback import fallback_page_content
from ..services.knowledge import KnowledgeLookup, fetch_knowledge
from ..utils.validation import validate_page
from .intent_classifier import IntentClassifier
from .layouts import page_type_for_intent, strategy_for
from .prompts import REPLY_SYSTEM_PROMPT, build_reply_user_prompt
from .strategies import (
    GenerationContext,
    GenerationStrategy,
    LayoutLockedStrategy,
    TemplateFillStrategy,
    Validator,
)

logger = logging.getLogger(__name__)

VARIANT_SUFFIX = " (Variant {index}: Try a different approach to messaging)"


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


class PageGenerator:
    def __init__(
        self,
        client: GenerationClient,
        *,
        settings: Optional[Settings] = None,
        content_memory: Optional[ContentMemory] = None,
        knowledge_lookup: Optional[KnowledgeLookup] = None,
        classifier: Optional[IntentClassifier] = None,
        validator: Validator = validate_page,
        strategies: Optional[Sequence[GenerationStrategy]] = None,
    ) -> None:
        self.client = client
        self.settings = settings or get_settings()
        self.content_memory = content_memory or ContentMemory(
            max_headlines=self.settings.memory_max_headlines,
            max_feature_titles=self.settings.memory_max_feature_titles,
            max_sessions=self.settings.memory_max_sessions,
        )
        self.knowledge_lookup = knowledge_lookup
        self.classifier = classifier or IntentClassifier(product_name=self.settings.product_name)
        if strategies is None:
            strategies = self._default_strategies(validator)
        self.strategies: List[GenerationStrategy] = list(strategies)

    def _default_strategies(self, validator: Validator) -> List[GenerationStrategy]:
        strategies: List[GenerationStrategy] = []
        if self.settings.template_fill_enabled:
            strategies.append(TemplateFillStrategy(self.client, self.settings, validator=validator))
        strategies.append(LayoutLockedStrategy(self.client, self.settings, validator=validator))
        return strategies

    def _classify(self, request: PageGenerationRequest) -> IntentClassificationResult:
        if request.precomputed_intent is not None:
            return IntentClassificationResult(
                intent=request.precomputed_intent,
                confidence=1.0,
                matched_patterns=("provided",),
                reasoning="Intent supplied by caller",
            )
        result = self.classifier.classify(request.user_message)
        resolved = self.classifier.resolve(result)
        if resolved is not result.intent:
            return dataclasses.replace(result, intent=resolved)
        return result

    async def _with_knowledge(self, request: PageGenerationRequest) -> PageGenerationRequest:
        if request.knowledge_documents or self.knowledge_lookup is None:
            return request
        documents = await fetch_knowledge(
            self.knowledge_lookup,
            request.user_message,
            self.settings.knowledge_top_k,
        )
        if not documents:
            return request
        return request.model_copy(update={"knowledge_documents": documents})

    async def generate(self, request: PageGenerationRequest) -> GenerationResult:
        """Generate one page for ``request``."""
        started = time.monotonic()
        intent_result: Optional[IntentClassificationResult] = None
        page_type: Optional[str] = request.page_type
        try:
            intent_result = self._classify(request)
            strategy = strategy_for(intent_result.intent)
            page_type = request.page_type or page_type_for_intent(intent_result.intent)
            request = await self._with_knowledge(request)
            ctx = GenerationContext(
                request=request,
                intent_result=intent_result,
                strategy=strategy,
                page_type=page_type,
                memory_warning=self.content_memory.warning_for(request.session_id),
            )
            result = await self._run_strategies(ctx)
        except Exception as exc:
            logger.exception("Page generation failed unexpectedly")
            result = GenerationResult(
                success=False,
                error=f"Unexpected generation error: {exc}",
                intent=intent_result.intent if intent_result else None,
                page_type=page_type,
            )

        result.generation_time_ms = _elapsed_ms(started)
        log_generation(
            success=result.success,
            intent=result.intent.value if result.intent else "",
            page_type=result.page_type or "",
            retry_count=result.retry_count,
            generation_time_ms=result.generation_time_ms,
            strategy=result.strategy_used,
        )
        return result

    async def _run_strategies(self, ctx: GenerationContext) -> GenerationResult:
        attempts: List[AttemptRecord] = []
        error = "No generation strategy configured"
        retry_count = 0
        used: Optional[str] = None
        for strategy in self.strategies:
            outcome = await strategy.run(ctx)
            attempts.extend(outcome.attempts)
            used = strategy.name
            if outcome.success:
                page = outcome.page
                self.content_memory.track(ctx.request.session_id, page.headline(), page.feature_titles())
                return GenerationResult(
                    success=True,
                    page=page,
                    retry_count=outcome.retry_count,
                    intent=ctx.intent_result.intent,
                    page_type=ctx.page_type,
                    strategy_used=used,
                    attempts=attempts,
                )
            error = outcome.error or error
            retry_count = outcome.retry_count

        return GenerationResult(
            success=False,
            error=error,
            retry_count=retry_count,
            intent=ctx.intent_result.intent,
            page_type=ctx.page_type,
            strategy_used=used,
            attempts=attempts,
        )

    async def generate_batch(self, requests: Sequence[PageGenerationRequest]) -> List[GenerationResult]:
        """Run independent pipelines concurrently; results keep input order."""
        if not requests:
            return []
        return list(await asyncio.gather(*(self.generate(request) for request in requests)))

    async def generate_variants(self, request: PageGenerationRequest, count: int = 2) -> List[GenerationResult]:
        variants = [
            request.model_copy(update={"user_message": request.user_message + VARIANT_SUFFIX.format(index=index + 1)})
            for index in range(max(0, count))
        ]
        return await self.generate_batch(variants)

    async def _reply(self, request: PageGenerationRequest, system_prompt: str) -> tuple[str, bool]:
        try:
            text = await self.client.complete(
                system_prompt,
                build_reply_user_prompt(request),
                max_tokens=self.settings.reply_max_tokens,
                temperature=self.settings.temperature,
                purpose="reply",
            )
        except TransportError as exc:
            logger.warning("Chat reply failed, using fallback text: %s", exc)
            return fallback_page_content(request.page_type), True
        except Exception:
            logger.exception("Unexpected chat reply error, using fallback text")
            return fallback_page_content(request.page_type), True
        text = (text or "").strip()
        if not text:
            return fallback_page_content(request.page_type), True
        return text, False

    async def respond(
        self,
        request: PageGenerationRequest,
        reply_system_prompt: Optional[str] = None,
    ) -> ChatTurnResult:
        """Produce a short chat reply and a page for the same message."""
        system_prompt = reply_system_prompt or REPLY_SYSTEM_PROMPT.format(product=self.settings.product_name)
        (reply, degraded), page_result = await asyncio.gather(
            self._reply(request, system_prompt),
            self.generate(request),
        )
        return ChatTurnResult(reply=reply, page_result=page_result, reply_degraded=degraded)


__all__ = ["PageGenerator", "VARIANT_SUFFIX"]
