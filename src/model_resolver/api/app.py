from __future__ import annotations

from fastapi import FastAPI, HTTPException, Query

from model_resolver.api.schemas import (
    ErrorSnapshotResponse,
    EventLogResponse,
    HookEventResponse,
    ModelClientResponse,
    ProviderResponse,
    RecordErrorRequest,
    ResolveRequest,
    ResolveResponse,
)
from model_resolver.hooks import EventLogger, mask_sensitive_text
from model_resolver.llm import (
    ConfigurationError,
    ConstructionError,
    EnvironmentReader,
    FileProviderStore,
    LLMErrorStore,
    ModelClient,
    ModelClientResolver,
    ProviderRegistry,
    ResolutionError,
    ResolverConfig,
    UnsupportedProviderError,
)
from model_resolver.llm.provider_catalog import BUILTIN_PROVIDER_IDS
from model_resolver.llm.resolver import ProviderLookup


def _client_response(model_client: ModelClient) -> ModelClientResponse:
    return ModelClientResponse(
        **model_client.client.describe(),
        builtin_provider_id=model_client.builtin_provider_id,
    )


def _event_log_response(event_logger: EventLogger, *, level: str | None = None) -> EventLogResponse:
    events = event_logger.list_events(level=level)
    return EventLogResponse(
        max_events=event_logger.max_events,
        event_count=len(events),
        events=[
            HookEventResponse(
                at=event.at,
                kind=event.kind,
                name=event.name,
                level=event.level,
                payload=event.payload,
            )
            for event in events
        ],
    )


def _status_code(exc: ResolutionError) -> int:
    if isinstance(exc, UnsupportedProviderError):
        return 400
    if isinstance(exc, (ConfigurationError, ConstructionError)):
        return 422
    return 500


def create_app(
    config: ResolverConfig | None = None,
    *,
    registry: ProviderLookup | None = None,
    error_store: LLMErrorStore | None = None,
    env: EnvironmentReader | None = None,
) -> FastAPI:
    config = config or ResolverConfig.from_env()
    env = env or EnvironmentReader()
    registry = registry or ProviderRegistry(
        provider_store=FileProviderStore(config.provider_store_path, reserved_ids=set(BUILTIN_PROVIDER_IDS)),
        env_lookup=env,
    )
    error_store = error_store or LLMErrorStore(window_seconds=config.recent_error_window_seconds)
    event_logger = EventLogger(max_events=config.event_log_max_events)
    resolver = ModelClientResolver(
        registry=registry,
        config=config,
        env_lookup=env,
        error_store=error_store,
        logger=event_logger,
    )

    app = FastAPI(title="Model Resolver API", version="0.1.0")
    app.state.resolver = resolver
    app.state.llm_error_store = error_store
    app.state.event_logger = event_logger

    @app.get("/llm/providers", response_model=list[ProviderResponse])
    async def list_providers() -> list[ProviderResponse]:
        return [
            ProviderResponse(
                **provider.model_dump(exclude={"name"}),
                name=provider.display_name,
                gateway_eligible=provider.gateway_eligible,
            )
            for provider in registry.list_providers()
        ]

    @app.post("/llm/resolve", response_model=ResolveResponse)
    async def resolve_model(payload: ResolveRequest) -> ResolveResponse:
        try:
            result = resolver.resolve(payload.model, payload.settings)
        except ResolutionError as exc:
            detail = {
                "error": type(exc).__name__,
                "message": mask_sensitive_text(str(exc)),
                "provider": exc.provider,
                "model": exc.model,
            }
            if isinstance(exc, ConfigurationError):
                detail["reason"] = exc.reason
            raise HTTPException(status_code=_status_code(exc), detail=detail) from exc

        return ResolveResponse(
            primary=_client_response(result.primary),
            backups=[_client_response(backup) for backup in result.backups],
        )

    @app.get("/llm/events", response_model=EventLogResponse)
    async def get_events(level: str | None = Query(default=None)) -> EventLogResponse:
        return _event_log_response(event_logger, level=level)

    @app.post("/llm/events/reset", response_model=EventLogResponse)
    async def reset_events() -> EventLogResponse:
        event_logger.reset()
        return _event_log_response(event_logger)

    @app.post("/llm/errors", response_model=ErrorSnapshotResponse)
    async def record_model_error(payload: RecordErrorRequest) -> ErrorSnapshotResponse:
        error_store.record_error(
            provider=payload.provider,
            model=payload.model,
            message=mask_sensitive_text(payload.message) if payload.message else None,
        )
        return ErrorSnapshotResponse.model_validate(error_store.snapshot())

    @app.get("/llm/errors", response_model=ErrorSnapshotResponse)
    async def get_model_errors() -> ErrorSnapshotResponse:
        return ErrorSnapshotResponse.model_validate(error_store.snapshot())

    @app.post("/llm/errors/reset", response_model=ErrorSnapshotResponse)
    async def reset_model_errors() -> ErrorSnapshotResponse:
        error_store.clear()
        return ErrorSnapshotResponse.model_validate(error_store.snapshot())

    return app


app = create_app()
