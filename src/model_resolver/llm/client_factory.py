from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import httpx

from model_resolver.hooks.security import mask_secret

from .errors import ConstructionError

ANTHROPIC_API_VERSION = "2023-06-01"


class ProviderKind(str, Enum):
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GOOGLE = "google"
    OPENROUTER = "openrouter"
    OLLAMA = "ollama"
    LMSTUDIO = "lmstudio"
    CUSTOM = "custom"

    @classmethod
    def from_provider_id(cls, provider_id: str) -> "ProviderKind | None":
        if provider_id == cls.CUSTOM.value:
            return None
        try:
            return cls(provider_id)
        except ValueError:
            return None


@dataclass(frozen=True)
class ProviderBackend:
    kind: ProviderKind
    requires_api_key: bool
    default_base_url: str | None
    # base URL comes from the provider descriptor instead of the fixed default
    uses_descriptor_base_url: bool = False
    # direct clients are tagged with the provider id
    tags_identity: bool = True
    # local servers run without credentials
    accepts_api_key: bool = True


PROVIDER_BACKENDS: dict[ProviderKind, ProviderBackend] = {
    ProviderKind.OPENAI: ProviderBackend(
        kind=ProviderKind.OPENAI,
        requires_api_key=True,
        default_base_url="https://api.openai.com/v1",
    ),
    ProviderKind.ANTHROPIC: ProviderBackend(
        kind=ProviderKind.ANTHROPIC,
        requires_api_key=True,
        default_base_url="https://api.anthropic.com/v1",
    ),
    ProviderKind.GOOGLE: ProviderBackend(
        kind=ProviderKind.GOOGLE,
        requires_api_key=True,
        default_base_url="https://generativelanguage.googleapis.com/v1beta",
    ),
    ProviderKind.OPENROUTER: ProviderBackend(
        kind=ProviderKind.OPENROUTER,
        requires_api_key=True,
        default_base_url="https://openrouter.ai/api/v1",
    ),
    ProviderKind.OLLAMA: ProviderBackend(
        kind=ProviderKind.OLLAMA,
        requires_api_key=False,
        default_base_url="http://127.0.0.1:11434/api",
        uses_descriptor_base_url=True,
        tags_identity=False,
        accepts_api_key=False,
    ),
    ProviderKind.LMSTUDIO: ProviderBackend(
        kind=ProviderKind.LMSTUDIO,
        requires_api_key=False,
        default_base_url="http://localhost:1234/v1",
        uses_descriptor_base_url=True,
        tags_identity=False,
        accepts_api_key=False,
    ),
    ProviderKind.CUSTOM: ProviderBackend(
        kind=ProviderKind.CUSTOM,
        requires_api_key=False,
        default_base_url=None,
        uses_descriptor_base_url=True,
        tags_identity=False,
    ),
}


def build_provider_auth_headers(*, kind: ProviderKind, api_key: str | None) -> dict[str, str]:
    headers = {
        "Accept": "application/json",
        "Content-Type": "application/json",
    }
    key = (api_key or "").strip()
    if not key:
        return headers

    if kind == ProviderKind.ANTHROPIC:
        headers["x-api-key"] = key
        headers["anthropic-version"] = ANTHROPIC_API_VERSION
        return headers

    if kind == ProviderKind.GOOGLE:
        headers["x-goog-api-key"] = key
        return headers

    # OpenAI-compatible wire: openai, openrouter, lmstudio, custom, and the gateway
    headers["Authorization"] = f"Bearer {key}"
    return headers


@dataclass(frozen=True)
class ModelHandle:
    """A client bound to one provider, model and credential.

    Nothing is sent over the network when a handle is built; callers open a
    transport with ``http_client()`` when they are ready to issue requests.
    """

    name: str
    kind: ProviderKind
    model_id: str
    base_url: str
    api_key: str | None = field(default=None, repr=False)

    def auth_headers(self) -> dict[str, str]:
        return build_provider_auth_headers(kind=self.kind, api_key=self.api_key)

    def http_client(
        self,
        *,
        timeout: float = 60.0,
        transport: httpx.BaseTransport | None = None,
    ) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            headers=self.auth_headers(),
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    def describe(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "kind": self.kind.value,
            "model_id": self.model_id,
            "base_url": self.base_url,
            "api_key": mask_secret(self.api_key),
        }


def _validate_base_url(base_url: str, *, name: str, model: str) -> str:
    raw = base_url.strip()
    try:
        url = httpx.URL(raw)
    except httpx.InvalidURL as exc:
        raise ConstructionError(
            f"invalid base URL for provider {name}: {raw!r} ({exc})",
            provider=name,
            model=model,
        ) from exc
    if url.scheme not in {"http", "https"} or not url.host:
        raise ConstructionError(
            f"base URL for provider {name} must be an absolute http(s) URL: {raw!r}",
            provider=name,
            model=model,
        )
    return raw.rstrip("/")


class ClientFactory:
    def __init__(self, backends: dict[ProviderKind, ProviderBackend] | None = None) -> None:
        self.backends = dict(backends or PROVIDER_BACKENDS)

    def backend(self, kind: ProviderKind) -> ProviderBackend:
        return self.backends[kind]

    def build(
        self,
        kind: ProviderKind,
        model: str,
        api_key: str | None,
        base_url: str | None,
        *,
        name: str | None = None,
    ) -> ModelHandle:
        label = name or kind.value
        model_id = model.strip()
        if not model_id:
            raise ConstructionError(f"model id is empty for provider {label}", provider=label)

        effective_base_url = base_url or self.backend(kind).default_base_url
        if not effective_base_url:
            raise ConstructionError(
                f"no base URL available for provider {label}",
                provider=label,
                model=model_id,
            )
        return ModelHandle(
            name=label,
            kind=kind,
            model_id=model_id,
            base_url=_validate_base_url(effective_base_url, name=label, model=model_id),
            api_key=api_key,
        )
