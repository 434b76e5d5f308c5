from __future__ import annotations

from dataclasses import dataclass, field
import os
from typing import Any

from dotenv import find_dotenv, load_dotenv


def _load_env() -> None:
    env_path = find_dotenv(usecwd=True)
    if env_path:
        load_dotenv(env_path, override=False)


_load_env()


def _get_env(key: str, default: str | None = None) -> str | None:
    value = os.getenv(key)
    if value is None or value == "":
        return default
    return value


def _get_bool(key: str, default: bool = False) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "on"}


def _get_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


@dataclass
class Settings:
    generation_provider: str = field(
        default_factory=lambda: (_get_env("GENERATION_PROVIDER", "anthropic") or "anthropic").lower()
    )
    model: str = field(default_factory=lambda: _get_env("MODEL", "claude-sonnet-4-5-20250929"))
    template_model: str | None = field(default_factory=lambda: _get_env("TEMPLATE_MODEL"))

    openai_api_key: str | None = field(default_factory=lambda: _get_env("OPENAI_API_KEY"))
    openai_base_url: str = field(default_factory=lambda: _get_env("OPENAI_BASE_URL", "https://api.openai.com/v1"))

    anthropic_api_key: str | None = field(default_factory=lambda: _get_env("ANTHROPIC_API_KEY"))
    anthropic_base_url: str = field(default_factory=lambda: _get_env("ANTHROPIC_BASE_URL", "https://api.anthropic.com"))
    anthropic_api_version: str = field(default_factory=lambda: _get_env("ANTHROPIC_API_VERSION", "2023-06-01"))

    temperature: float = field(default_factory=lambda: _get_float("TEMPERATURE", 0.7))
    max_tokens: int = field(default_factory=lambda: _get_int("MAX_TOKENS", 4096))
    template_max_tokens: int = field(default_factory=lambda: _get_int("TEMPLATE_MAX_TOKENS", 2048))
    reply_max_tokens: int = field(default_factory=lambda: _get_int("REPLY_MAX_TOKENS", 150))

    llm_timeout_seconds: float = field(default_factory=lambda: _get_float("LLM_TIMEOUT_SECONDS", 60.0))
    llm_max_retries: int = field(default_factory=lambda: _get_int("LLM_MAX_RETRIES", 3))
    llm_base_delay: float = field(default_factory=lambda: _get_float("LLM_BASE_DELAY", 1.0))

    page_max_retries: int = field(default_factory=lambda: _get_int("PAGE_MAX_RETRIES", 2))
    attempt_timeout_seconds: float = field(default_factory=lambda: _get_float("ATTEMPT_TIMEOUT_SECONDS", 45.0))
    template_fill_enabled: bool = field(default_factory=lambda: _get_bool("TEMPLATE_FILL_ENABLED", True))
    layout_mode: str = field(default_factory=lambda: (_get_env("LAYOUT_MODE", "locked") or "locked").lower())

    product_name: str = field(default_factory=lambda: _get_env("PRODUCT_NAME", "BevGenie"))
    knowledge_top_k: int = field(default_factory=lambda: _get_int("KNOWLEDGE_TOP_K", 5))
    memory_max_headlines: int = field(default_factory=lambda: _get_int("MEMORY_MAX_HEADLINES", 5))
    memory_max_feature_titles: int = field(default_factory=lambda: _get_int("MEMORY_MAX_FEATURE_TITLES", 15))
    memory_max_sessions: int = field(default_factory=lambda: _get_int("MEMORY_MAX_SESSIONS", 1000))

    log_level: str = field(default_factory=lambda: _get_env("LOG_LEVEL", "INFO"))
    log_dir: str | None = field(default_factory=lambda: _get_env("LOG_DIR"))


_settings: Settings | None = None
_runtime_overrides: dict[str, Any] = {}


def _apply_runtime_overrides(settings: Settings) -> None:
    for key, value in _runtime_overrides.items():
        if value is None:
            continue
        if hasattr(settings, key):
            setattr(settings, key, value)


def update_runtime_overrides(overrides: dict[str, Any]) -> None:
    if not overrides:
        return
    for key, value in overrides.items():
        if value is None:
            continue
        _runtime_overrides[key] = value
    if _settings is not None:
        _apply_runtime_overrides(_settings)


def clear_runtime_overrides() -> None:
    _runtime_overrides.clear()


def get_runtime_overrides() -> dict[str, Any]:
    return dict(_runtime_overrides)


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    _apply_runtime_overrides(_settings)
    return _settings


def refresh_settings() -> Settings:
    """Rebuild settings from environment variables."""
    global _settings
    _settings = Settings()
    _apply_runtime_overrides(_settings)
    return _settings


__all__ = [
    "Settings",
    "get_settings",
    "refresh_settings",
    "update_runtime_overrides",
    "clear_runtime_overrides",
    "get_runtime_overrides",
]
