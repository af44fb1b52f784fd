from __future__ import annotations

from enum import Enum
from typing import Callable

from .models import ProviderDescriptor, UserSettings

EnvLookup = Callable[[str], str | None]


class CredentialSource(str, Enum):
    GATEWAY = "gateway"
    SETTINGS = "settings"
    ENV = "env"


def resolve_provider_api_key(
    *,
    provider_id: str,
    settings: UserSettings,
    descriptor: ProviderDescriptor | None,
    env_lookup: EnvLookup,
) -> tuple[str | None, CredentialSource | None]:
    """Provider-specific setting first, then the env var named by the descriptor."""
    key = settings.api_key_for(provider_id)
    if key:
        return key, CredentialSource.SETTINGS

    env_var_name = descriptor.env_var_name if descriptor else None
    if env_var_name:
        key = env_lookup(env_var_name)
        if key:
            return key, CredentialSource.ENV
    return None, None


def resolve_candidate_api_key(
    *,
    provider_id: str,
    settings: UserSettings,
    descriptor: ProviderDescriptor | None,
    env_lookup: EnvLookup,
) -> tuple[str | None, CredentialSource | None]:
    # auto-cascade candidates also count the gateway-wide key
    gateway_key = settings.gateway_api_key
    if gateway_key:
        return gateway_key, CredentialSource.GATEWAY
    return resolve_provider_api_key(
        provider_id=provider_id,
        settings=settings,
        descriptor=descriptor,
        env_lookup=env_lookup,
    )


def has_own_api_key(settings: UserSettings, provider_id: str) -> bool:
    # presence only; validity would need a network round trip
    return bool(settings.api_key_for(provider_id))
