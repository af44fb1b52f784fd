from __future__ import annotations

import os
from collections.abc import Mapping

from pydantic import BaseModel, Field, model_validator

from .models import ModelRequest

DEFAULT_GATEWAY_BASE_URL = "https://llm-gateway.dyad.sh/v1"


def _default_auto_models() -> list[ModelRequest]:
    return [
        ModelRequest(provider="google", name="gemini-2.5-flash-preview-04-17"),
        ModelRequest(provider="anthropic", name="claude-3-7-sonnet-latest"),
        ModelRequest(provider="openai", name="gpt-4.1"),
    ]


class ResolverConfig(BaseModel):
    gateway_base_url: str = DEFAULT_GATEWAY_BASE_URL
    auto_models: list[ModelRequest] = Field(default_factory=_default_auto_models)
    free_suffix: str = ":free"
    recent_error_window_seconds: int = 300
    event_log_max_events: int = 1000
    provider_store_path: str | None = None

    @model_validator(mode="after")
    def validate_resolver_config(self) -> "ResolverConfig":
        if not self.gateway_base_url.strip():
            raise ValueError("gateway_base_url must not be empty")
        if not self.auto_models:
            raise ValueError("auto_models must not be empty")
        if any(model.is_auto for model in self.auto_models):
            raise ValueError("auto_models must name concrete providers")
        if self.recent_error_window_seconds <= 0:
            raise ValueError("recent_error_window_seconds must be positive")
        if self.event_log_max_events < 1:
            raise ValueError("event_log_max_events must be >= 1")
        return self

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ResolverConfig":
        env = environ if environ is not None else os.environ
        values: dict[str, object] = {}
        gateway_base_url = _env_text(env, "MODEL_RESOLVER_GATEWAY_BASE_URL")
        if gateway_base_url:
            values["gateway_base_url"] = gateway_base_url
        window = _env_text(env, "MODEL_RESOLVER_RECENT_ERROR_WINDOW_SECONDS")
        if window:
            values["recent_error_window_seconds"] = int(window)
        max_events = _env_text(env, "MODEL_RESOLVER_EVENT_LOG_MAX_EVENTS")
        if max_events:
            values["event_log_max_events"] = int(max_events)
        store_path = _env_text(env, "MODEL_RESOLVER_PROVIDER_STORE_PATH")
        if store_path:
            values["provider_store_path"] = store_path
        return cls(**values)


def _env_text(env: Mapping[str, str], name: str) -> str | None:
    value = env.get(name)
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None
