from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from model_resolver.llm.models import ModelRequest, ProviderType, UserSettings


class ResolveRequest(BaseModel):
    model: ModelRequest
    settings: UserSettings = Field(default_factory=UserSettings)


class ModelClientResponse(BaseModel):
    name: str
    kind: str
    model_id: str
    base_url: str
    api_key: str | None = None
    builtin_provider_id: str | None = None


class ResolveResponse(BaseModel):
    primary: ModelClientResponse
    backups: list[ModelClientResponse] = Field(default_factory=list)


class ProviderResponse(BaseModel):
    id: str
    name: str
    type: ProviderType
    api_base_url: str | None = None
    env_var_name: str | None = None
    gateway_prefix: str | None = None
    gateway_eligible: bool = False


class RecordErrorRequest(BaseModel):
    provider: str
    model: str
    message: str | None = None


class TrackedModelErrorResponse(BaseModel):
    provider: str
    model: str
    error_count: int
    last_error_at: datetime | None = None
    last_message: str | None = None


class ErrorSnapshotResponse(BaseModel):
    window_seconds: int
    generated_at: datetime
    model_count: int
    models: list[TrackedModelErrorResponse]


class HookEventResponse(BaseModel):
    at: datetime
    kind: str
    name: str
    level: str
    payload: dict = Field(default_factory=dict)


class EventLogResponse(BaseModel):
    max_events: int
    event_count: int
    events: list[HookEventResponse]
