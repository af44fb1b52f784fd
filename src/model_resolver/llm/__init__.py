"""Model client resolution: credentials, provider registry, gateway override, client handles."""

from .client_factory import ClientFactory, ModelHandle, ProviderBackend, ProviderKind
from .config import ResolverConfig
from .env import EnvironmentReader
from .error_store import LLMErrorStore, RecentFailureOracle
from .errors import ConfigurationError, ConstructionError, ResolutionError, UnsupportedProviderError
from .models import (
    AUTO_PROVIDER,
    ApiKeySecret,
    ModelClient,
    ModelRequest,
    ProviderDescriptor,
    ProviderSetting,
    ProviderType,
    ResolutionResult,
    UserSettings,
)
from .provider_auth import CredentialSource
from .provider_catalog import ProviderRegistry, StaticProviderRegistry, builtin_providers, custom_provider
from .provider_store import FileProviderStore, default_provider_store_path
from .resolver import ModelClientResolver

__all__ = [
    "AUTO_PROVIDER",
    "ApiKeySecret",
    "builtin_providers",
    "ClientFactory",
    "ConfigurationError",
    "ConstructionError",
    "CredentialSource",
    "custom_provider",
    "default_provider_store_path",
    "EnvironmentReader",
    "FileProviderStore",
    "LLMErrorStore",
    "ModelClient",
    "ModelClientResolver",
    "ModelHandle",
    "ModelRequest",
    "ProviderBackend",
    "ProviderDescriptor",
    "ProviderKind",
    "ProviderRegistry",
    "ProviderSetting",
    "ProviderType",
    "RecentFailureOracle",
    "ResolutionError",
    "ResolutionResult",
    "ResolverConfig",
    "StaticProviderRegistry",
    "UnsupportedProviderError",
    "UserSettings",
]
