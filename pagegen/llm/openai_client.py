from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx
import openai
from openai import AsyncOpenAI

from ..config import Settings, get_settings
from ..exceptions import (
    APIError,
    AuthenticationError,
    ContextLengthError,
    EmptyResponseError,
    RateLimitError,
    TimeoutError,
    TransportError,
)
from ..log import LLMCallLogger
from .base import Completion
from .retry import retry_after_seconds, with_retry

logger = logging.getLogger(__name__)


class OpenAIClient:
    """Chat-completions backend for any OpenAI-compatible endpoint.

    The system prompt is sent as its own message so endpoints with automatic
    prefix caching can reuse the static instruction block.
    """

    provider = "openai"

    def __init__(
        self,
        *,
        settings: Optional[Settings] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        timeout_seconds: Optional[float] = None,
        max_retries: Optional[int] = None,
        base_delay: Optional[float] = None,
    ) -> None:
        resolved_settings = settings or get_settings()
        resolved_api_key = api_key or resolved_settings.openai_api_key
        resolved_base_url = base_url or resolved_settings.openai_base_url
        if not resolved_api_key:
            raise AuthenticationError("OPENAI_API_KEY is not configured")
        if not resolved_base_url:
            raise TransportError("OPENAI_BASE_URL is not configured")

        self._timeout_seconds = (
            float(timeout_seconds) if timeout_seconds is not None else float(resolved_settings.llm_timeout_seconds)
        )
        self._max_retries = int(max_retries) if max_retries is not None else int(resolved_settings.llm_max_retries)
        self._base_delay = float(base_delay) if base_delay is not None else float(resolved_settings.llm_base_delay)
        self._retryable_errors = (RateLimitError, TimeoutError, APIError)
        self._client = AsyncOpenAI(
            api_key=resolved_api_key,
            base_url=resolved_base_url,
            timeout=self._timeout_seconds,
            max_retries=0,
        )
        self._default_model = model or resolved_settings.model
        self._default_temperature = temperature if temperature is not None else resolved_settings.temperature
        self._default_max_tokens = max_tokens if max_tokens is not None else resolved_settings.max_tokens

    @property
    def model(self) -> str:
        return self._default_model

    def _build_messages(self, system_prompt: str, user_prompt: str) -> List[Dict[str, str]]:
        messages: List[Dict[str, str]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": user_prompt})
        return messages

    async def create_completion(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        model: Optional[str] = None,
        purpose: str = "page",
    ) -> Completion:
        resolved_model = model or self._default_model
        payload = {
            "model": resolved_model,
            "messages": self._build_messages(system_prompt, user_prompt),
            "temperature": temperature if temperature is not None else self._default_temperature,
            "max_tokens": max_tokens if max_tokens is not None else self._default_max_tokens,
        }

        async def _request() -> Any:
            try:
                return await self._client.chat.completions.create(**payload)
            except TransportError:
                raise
            except Exception as exc:
                raise self._handle_error(exc) from exc

        with LLMCallLogger(self.provider, resolved_model, purpose) as call_log:
            try:
                response = await with_retry(
                    _request,
                    max_retries=self._max_retries,
                    base_delay=self._base_delay,
                    retry_on=self._retryable_errors,
                    context={"provider": self.provider, "model": resolved_model, "purpose": purpose},
                )
            except TransportError as exc:
                call_log.error(str(exc))
                raise

            content = ""
            stop_reason = ""
            if response.choices:
                choice = response.choices[0]
                content = getattr(choice.message, "content", None) or ""
                stop_reason = getattr(choice, "finish_reason", None) or ""
            if not isinstance(content, str) or not content.strip():
                call_log.error("empty content")
                raise EmptyResponseError()

            usage = self._usage_to_dict(getattr(response, "usage", None))
            call_log.success(usage, len(content), stop_reason)
        return Completion(text=content, model=resolved_model, stop_reason=stop_reason, usage=usage)

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        cache_system_prompt: bool = True,
        model: Optional[str] = None,
        purpose: str = "page",
    ) -> str:
        # Prefix caching is automatic on chat-completions endpoints.
        completion = await self.create_completion(
            system_prompt,
            user_prompt,
            max_tokens=max_tokens,
            temperature=temperature,
            model=model,
            purpose=purpose,
        )
        return completion.text

    async def aclose(self) -> None:
        await self._client.close()

    def _usage_to_dict(self, usage: Any) -> Optional[Dict[str, Any]]:
        if not usage:
            return None
        if isinstance(usage, dict):
            return dict(usage)
        data: Dict[str, Any] = {}
        for key in ("prompt_tokens", "completion_tokens", "total_tokens"):
            value = getattr(usage, key, None)
            if value is not None:
                data[key] = value
        return data or None

    def _handle_error(self, exc: Exception) -> TransportError:
        code, message = self._extract_error_details(exc)
        if isinstance(exc, openai.RateLimitError):
            return RateLimitError(
                message or "Rate limit exceeded",
                retry_after=retry_after_seconds(exc.response.headers.get("retry-after")),
            )
        if isinstance(exc, openai.AuthenticationError):
            return AuthenticationError(message or "Authentication failed")
        if isinstance(exc, (openai.APITimeoutError, httpx.TimeoutException)):
            return TimeoutError(message or "Request timed out")
        if isinstance(exc, openai.BadRequestError):
            if self._is_context_length_error(code, message):
                return ContextLengthError(message or "Context length exceeded")
            return TransportError(message or "Bad request")
        if isinstance(
            exc,
            (
                openai.PermissionDeniedError,
                openai.NotFoundError,
                openai.ConflictError,
                openai.UnprocessableEntityError,
            ),
        ):
            return TransportError(message or str(exc))
        if isinstance(exc, (openai.APIConnectionError, openai.APIStatusError, openai.APIError)):
            return APIError(message or str(exc))
        return APIError(str(exc))

    def _extract_error_details(self, exc: Exception) -> tuple[Optional[str], str]:
        message = str(exc)
        code: Optional[str] = None
        body = getattr(exc, "body", None)
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict):
                code = error.get("code") or error.get("type")
                message = error.get("message") or message
        elif isinstance(body, str) and body:
            message = body
        return code, message

    def _is_context_length_error(self, code: Optional[str], message: str) -> bool:
        if code and code.lower() in {"context_length_exceeded", "context_length"}:
            return True
        lower = message.lower()
        return "maximum context length" in lower or "context length" in lower


__all__ = ["OpenAIClient"]
