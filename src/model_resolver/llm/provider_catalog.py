from __future__ import annotations

from collections.abc import Callable, Sequence

from .env import EnvironmentReader
from .models import ProviderDescriptor, ProviderType
from .provider_store import FileProviderStore

DEFAULT_OLLAMA_BASE_URL = "http://127.0.0.1:11434/api"
DEFAULT_LMSTUDIO_BASE_URL = "http://localhost:1234/v1"

BUILTIN_PROVIDER_IDS = frozenset({"openai", "anthropic", "google", "openrouter", "ollama", "lmstudio"})


def builtin_providers(env_lookup: Callable[[str], str | None] | None = None) -> list[ProviderDescriptor]:
    lookup = env_lookup or EnvironmentReader()
    return [
        ProviderDescriptor(
            id="openai",
            name="OpenAI",
            env_var_name="OPENAI_API_KEY",
            gateway_prefix="",
        ),
        ProviderDescriptor(
            id="anthropic",
            name="Anthropic",
            env_var_name="ANTHROPIC_API_KEY",
            gateway_prefix="anthropic/",
        ),
        ProviderDescriptor(
            id="google",
            name="Google",
            env_var_name="GEMINI_API_KEY",
            gateway_prefix="gemini/",
        ),
        ProviderDescriptor(
            id="openrouter",
            name="OpenRouter",
            env_var_name="OPENROUTER_API_KEY",
            gateway_prefix="openrouter/",
        ),
        ProviderDescriptor(
            id="ollama",
            name="Ollama",
            api_base_url=lookup("OLLAMA_HOST") or DEFAULT_OLLAMA_BASE_URL,
        ),
        ProviderDescriptor(
            id="lmstudio",
            name="LM Studio",
            api_base_url=DEFAULT_LMSTUDIO_BASE_URL,
        ),
    ]


class ProviderRegistry:
    """Built-in providers plus custom providers, read fresh on every lookup."""

    def __init__(
        self,
        *,
        provider_store: FileProviderStore | None = None,
        extra_providers: Sequence[ProviderDescriptor] = (),
        env_lookup: Callable[[str], str | None] | None = None,
    ) -> None:
        self.provider_store = provider_store
        self.extra_providers = list(extra_providers)
        self.env_lookup = env_lookup

    def list_providers(self) -> list[ProviderDescriptor]:
        providers = builtin_providers(self.env_lookup)
        seen = {provider.id for provider in providers}
        custom: list[ProviderDescriptor] = list(self.extra_providers)
        if self.provider_store is not None:
            custom.extend(self.provider_store.list_providers())
        for provider in custom:
            if provider.id in seen:
                continue
            seen.add(provider.id)
            providers.append(provider)
        return providers

    def get(self, provider_id: str) -> ProviderDescriptor | None:
        for provider in self.list_providers():
            if provider.id == provider_id:
                return provider
        return None


def custom_provider(
    provider_id: str,
    *,
    api_base_url: str | None,
    name: str | None = None,
    env_var_name: str | None = None,
) -> ProviderDescriptor:
    return ProviderDescriptor(
        id=provider_id,
        name=name,
        type=ProviderType.CUSTOM,
        api_base_url=api_base_url,
        env_var_name=env_var_name,
    )


class StaticProviderRegistry:
    def __init__(self, providers: Sequence[ProviderDescriptor]) -> None:
        self.providers = list(providers)

    def list_providers(self) -> list[ProviderDescriptor]:
        return list(self.providers)

    def get(self, provider_id: str) -> ProviderDescriptor | None:
        return next((provider for provider in self.providers if provider.id == provider_id), None)
