from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

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


class AnthropicClient:
    """Messages API backend over a shared ``httpx.AsyncClient``.

    When ``cache_system_prompt`` is set the system prompt is sent as a text
    block marked ``cache_control: ephemeral``, so repeated calls that share the
    same intent instructions hit the backend's prompt cache.
    """

    provider = "anthropic"

    def __init__(
        self,
        *,
        settings: Optional[Settings] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        api_version: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        timeout_seconds: Optional[float] = None,
        max_retries: Optional[int] = None,
        base_delay: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        resolved_settings = settings or get_settings()
        self.api_key = api_key or resolved_settings.anthropic_api_key
        if not self.api_key:
            raise AuthenticationError("ANTHROPIC_API_KEY is not configured")
        self.base_url = base_url or resolved_settings.anthropic_base_url
        self.api_version = api_version or resolved_settings.anthropic_api_version
        timeout = timeout_seconds if timeout_seconds is not None else resolved_settings.llm_timeout_seconds

        self._max_retries = int(max_retries) if max_retries is not None else int(resolved_settings.llm_max_retries)
        self._base_delay = float(base_delay) if base_delay is not None else float(resolved_settings.llm_base_delay)
        self._retryable_errors = (RateLimitError, TimeoutError, APIError)
        self._default_model = model or resolved_settings.model
        self._default_temperature = temperature if temperature is not None else resolved_settings.temperature
        self._default_max_tokens = max_tokens if max_tokens is not None else resolved_settings.max_tokens
        self._client = http_client or httpx.AsyncClient(base_url=self.base_url, timeout=timeout)

    @property
    def model(self) -> str:
        return self._default_model

    def _build_system(self, system_prompt: str, cache_system_prompt: bool) -> List[Dict[str, Any]]:
        block: Dict[str, Any] = {"type": "text", "text": system_prompt}
        if cache_system_prompt:
            block["cache_control"] = {"type": "ephemeral"}
        return [block]

    def build_payload(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        cache_system_prompt: bool = True,
        model: Optional[str] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "model": model or self._default_model,
            "max_tokens": max_tokens if max_tokens is not None else self._default_max_tokens,
            "temperature": temperature if temperature is not None else self._default_temperature,
            "messages": [{"role": "user", "content": user_prompt}],
        }
        if system_prompt:
            payload["system"] = self._build_system(system_prompt, cache_system_prompt)
        return payload

    def _headers(self) -> Dict[str, str]:
        return {
            "x-api-key": self.api_key,
            "anthropic-version": self.api_version,
            "content-type": "application/json",
        }

    async def _call_once(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        try:
            response = await self._client.post("/v1/messages", json=payload, headers=self._headers())
        except httpx.TimeoutException as exc:
            raise TimeoutError(str(exc) or "Request timed out") from exc
        except httpx.HTTPError as exc:
            raise APIError(str(exc) or exc.__class__.__name__) from exc
        if response.status_code >= 400:
            raise self._handle_error(response)
        try:
            data = response.json()
        except ValueError as exc:
            raise APIError("Anthropic response was not JSON") from exc
        if not isinstance(data, dict):
            raise APIError("Anthropic response was not a JSON object")
        return data

    def _handle_error(self, response: httpx.Response) -> TransportError:
        message = response.text
        error_type = ""
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            error_type = str(body["error"].get("type") or "")
            message = body["error"].get("message") or message

        status = response.status_code
        if status == 429:
            return RateLimitError(
                message or "Rate limit exceeded",
                retry_after=retry_after_seconds(response.headers.get("retry-after")),
            )
        if status in (401, 403):
            return AuthenticationError(message or "Authentication failed")
        if status == 408:
            return TimeoutError(message or "Request timed out")
        if status == 400 and "prompt is too long" in (message or "").lower():
            return ContextLengthError(message)
        if status >= 500 or error_type == "overloaded_error":
            return APIError(message or f"Anthropic API error {status}")
        return TransportError(f"Anthropic API error {status}: {message}")

    def _extract_text(self, data: Dict[str, Any]) -> str:
        parts: List[str] = []
        for item in data.get("content") or []:
            if isinstance(item, dict) and item.get("type") == "text":
                text = item.get("text")
                if text:
                    parts.append(str(text))
        return "".join(parts)

    async def create_completion(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        cache_system_prompt: bool = True,
        model: Optional[str] = None,
        purpose: str = "page",
    ) -> Completion:
        payload = self.build_payload(
            system_prompt,
            user_prompt,
            max_tokens=max_tokens,
            temperature=temperature,
            cache_system_prompt=cache_system_prompt,
            model=model,
        )
        with LLMCallLogger(self.provider, payload["model"], purpose) as call_log:
            try:
                data = await with_retry(
                    self._call_once,
                    payload,
                    max_retries=self._max_retries,
                    base_delay=self._base_delay,
                    retry_on=self._retryable_errors,
                    context={"provider": self.provider, "model": payload["model"], "purpose": purpose},
                )
            except TransportError as exc:
                call_log.error(str(exc))
                raise

            text = self._extract_text(data)
            if not text.strip():
                call_log.error("no text content")
                raise EmptyResponseError()
            usage = data.get("usage") if isinstance(data.get("usage"), dict) else None
            stop_reason = str(data.get("stop_reason") or "")
            call_log.success(usage, len(text), stop_reason)
        return Completion(text=text, model=payload["model"], stop_reason=stop_reason, usage=usage)

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
        completion = await self.create_completion(
            system_prompt,
            user_prompt,
            max_tokens=max_tokens,
            temperature=temperature,
            cache_system_prompt=cache_system_prompt,
            model=model,
            purpose=purpose,
        )
        return completion.text

    async def aclose(self) -> None:
        await self._client.aclose()


__all__ = ["AnthropicClient"]
