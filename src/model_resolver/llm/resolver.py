from __future__ import annotations

from collections.abc import Sequence
from typing import Callable, Protocol

from model_resolver.hooks.observability import EventLogger

from .client_factory import ClientFactory, ProviderKind
from .config import ResolverConfig
from .env import EnvironmentReader
from .error_store import LLMErrorStore, RecentFailureOracle
from .errors import ConfigurationError, UnsupportedProviderError
from .models import (
    AUTO_PROVIDER,
    ModelClient,
    ModelRequest,
    ProviderDescriptor,
    ProviderType,
    ResolutionResult,
    UserSettings,
)
from .provider_auth import has_own_api_key, resolve_candidate_api_key, resolve_provider_api_key

BUDGET_SAVER_PROVIDER = "google"


class ProviderLookup(Protocol):
    def list_providers(self) -> Sequence[ProviderDescriptor]: ...

    def get(self, provider_id: str) -> ProviderDescriptor | None: ...


class ModelClientResolver:
    """
    Turns a model request plus user settings into a primary client and ordered backups.
    - "auto" walks the configured candidates and resolves the first one with a credential
    - a configured gateway key with Dyad Pro enabled reroutes eligible providers through the gateway
    - everything else is built directly against the provider
    """

    def __init__(
        self,
        *,
        registry: ProviderLookup,
        config: ResolverConfig | None = None,
        env_lookup: Callable[[str], str | None] | None = None,
        error_store: RecentFailureOracle | None = None,
        client_factory: ClientFactory | None = None,
        logger: EventLogger | None = None,
    ) -> None:
        self.registry = registry
        self.config = config or ResolverConfig()
        self.env_lookup = env_lookup or EnvironmentReader()
        self.error_store = error_store or LLMErrorStore(
            window_seconds=self.config.recent_error_window_seconds
        )
        self.client_factory = client_factory or ClientFactory()
        self.logger = logger or EventLogger()

    def resolve(self, request: ModelRequest, settings: UserSettings) -> ResolutionResult:
        if request.is_auto:
            request = self._select_auto_candidate(settings)
        return self._resolve_concrete(request, settings)

    def _select_auto_candidate(self, settings: UserSettings) -> ModelRequest:
        # order is policy: stop at the first candidate that has a credential
        for candidate in self.config.auto_models:
            descriptor = self.registry.get(candidate.provider)
            if descriptor is None:
                self.logger.on_resolution(
                    "auto_candidate_skipped",
                    provider=candidate.provider,
                    model=candidate.name,
                    reason=ConfigurationError.UNKNOWN_PROVIDER,
                )
                continue

            api_key, source = resolve_candidate_api_key(
                provider_id=candidate.provider,
                settings=settings,
                descriptor=descriptor,
                env_lookup=self.env_lookup,
            )
            if api_key:
                self.logger.on_resolution(
                    "auto_candidate_selected",
                    provider=candidate.provider,
                    model=candidate.name,
                    credential_source=source.value if source else None,
                )
                return candidate

        raise ConfigurationError(
            ConfigurationError.AUTO_EXHAUSTED,
            "No API keys available for any model supported by the 'auto' provider.",
            provider=AUTO_PROVIDER,
        )

    def _resolve_concrete(self, request: ModelRequest, settings: UserSettings) -> ResolutionResult:
        descriptor = self.registry.get(request.provider)
        if descriptor is None:
            raise ConfigurationError(
                ConfigurationError.UNKNOWN_PROVIDER,
                f"Configuration not found for provider: {request.provider}",
                provider=request.provider,
                model=request.name,
            )

        gateway_result = self._evaluate_gateway(request, settings, descriptor)
        if gateway_result is not None:
            return gateway_result
        return ResolutionResult(primary=self._build_direct(request, settings, descriptor))

    def _evaluate_gateway(
        self,
        request: ModelRequest,
        settings: UserSettings,
        descriptor: ProviderDescriptor,
    ) -> ResolutionResult | None:
        gateway_key = settings.gateway_api_key
        if not gateway_key or not settings.enable_dyad_pro:
            return None

        if not descriptor.gateway_eligible:
            self.logger.warn(
                "resolution",
                "gateway_prefix_missing",
                {
                    "provider": descriptor.id,
                    "model": request.name,
                    "detail": (
                        f"Dyad Pro enabled, but provider {descriptor.id} does not have a gateway "
                        "prefix defined. Falling back to direct provider connection."
                    ),
                },
            )
            return None

        gateway_model = f"{descriptor.gateway_prefix}{self._strip_free_suffix(request.name)}"
        gateway_client = ModelClient(
            client=self.client_factory.build(
                ProviderKind.OPENAI,
                gateway_model,
                gateway_key,
                self.config.gateway_base_url,
                name=AUTO_PROVIDER,
            ),
            builtin_provider_id=AUTO_PROVIDER,
        )

        if self._budget_saver_applies(request, settings, descriptor):
            # the direct client failing to build is surfaced, not replaced by the gateway
            primary = self._build_direct(request, settings, descriptor)
            self.logger.on_resolution(
                "pro_saver_selected",
                provider=descriptor.id,
                model=request.name,
                backup_model=gateway_model,
            )
            return ResolutionResult(primary=primary, backups=(gateway_client,))

        self.logger.on_resolution("gateway_selected", provider=descriptor.id, model=gateway_model)
        return ResolutionResult(primary=gateway_client)

    def _budget_saver_applies(
        self,
        request: ModelRequest,
        settings: UserSettings,
        descriptor: ProviderDescriptor,
    ) -> bool:
        return (
            settings.enable_pro_saver_mode
            and descriptor.id == BUDGET_SAVER_PROVIDER
            and has_own_api_key(settings, BUDGET_SAVER_PROVIDER)
            and not self.error_store.has_recent_failure(BUDGET_SAVER_PROVIDER, request.name)
        )

    def _strip_free_suffix(self, model_name: str) -> str:
        return model_name.removesuffix(self.config.free_suffix)

    def _build_direct(
        self,
        request: ModelRequest,
        settings: UserSettings,
        descriptor: ProviderDescriptor,
    ) -> ModelClient:
        kind = ProviderKind.from_provider_id(descriptor.id)
        if kind is None:
            if descriptor.type != ProviderType.CUSTOM:
                raise UnsupportedProviderError(
                    f"Unsupported model provider: {request.provider}",
                    provider=request.provider,
                    model=request.name,
                )
            kind = ProviderKind.CUSTOM
        backend = self.client_factory.backend(kind)

        api_key, source = resolve_provider_api_key(
            provider_id=descriptor.id,
            settings=settings,
            descriptor=descriptor,
            env_lookup=self.env_lookup,
        )
        if backend.requires_api_key and not api_key:
            hint = f" or set {descriptor.env_var_name}" if descriptor.env_var_name else ""
            raise ConfigurationError(
                ConfigurationError.MISSING_API_KEY,
                f"No API key configured for provider {descriptor.display_name}; "
                f"add one in settings{hint}.",
                provider=descriptor.id,
                model=request.name,
            )

        base_url: str | None = None
        if backend.uses_descriptor_base_url:
            base_url = descriptor.api_base_url or None
            if kind == ProviderKind.CUSTOM and not base_url:
                raise ConfigurationError(
                    ConfigurationError.MISSING_BASE_URL,
                    f"Custom provider {descriptor.id} is missing the API Base URL.",
                    provider=descriptor.id,
                    model=request.name,
                )

        handle = self.client_factory.build(
            kind,
            request.name,
            api_key if backend.accepts_api_key else None,
            base_url,
            name=descriptor.id,
        )
        self.logger.on_resolution(
            "direct_selected",
            provider=descriptor.id,
            model=request.name,
            credential_source=source.value if source and backend.accepts_api_key else None,
        )
        return ModelClient(
            client=handle,
            builtin_provider_id=descriptor.id if backend.tags_identity else None,
        )
