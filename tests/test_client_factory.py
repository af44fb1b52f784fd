from __future__ import annotations

import httpx
import pytest

from model_resolver.llm.client_factory import (
    PROVIDER_BACKENDS,
    ClientFactory,
    ModelHandle,
    ProviderKind,
    build_provider_auth_headers,
)
from model_resolver.llm.errors import ConstructionError


def test_every_kind_has_a_backend() -> None:
    assert set(PROVIDER_BACKENDS) == set(ProviderKind)


def test_provider_kind_lookup_excludes_custom_escape_hatch() -> None:
    assert ProviderKind.from_provider_id("openai") == ProviderKind.OPENAI
    assert ProviderKind.from_provider_id("custom") is None
    assert ProviderKind.from_provider_id("my-llm") is None


@pytest.mark.parametrize(
    ("kind", "expected_url"),
    [
        (ProviderKind.OPENAI, "https://api.openai.com/v1"),
        (ProviderKind.ANTHROPIC, "https://api.anthropic.com/v1"),
        (ProviderKind.GOOGLE, "https://generativelanguage.googleapis.com/v1beta"),
        (ProviderKind.OPENROUTER, "https://openrouter.ai/api/v1"),
        (ProviderKind.OLLAMA, "http://127.0.0.1:11434/api"),
        (ProviderKind.LMSTUDIO, "http://localhost:1234/v1"),
    ],
)
def test_build_uses_default_base_url(kind: ProviderKind, expected_url: str) -> None:
    handle = ClientFactory().build(kind, "some-model", "key", None)
    assert handle.base_url == expected_url
    assert handle.name == kind.value


def test_build_strips_trailing_slash_and_keeps_name() -> None:
    handle = ClientFactory().build(
        ProviderKind.CUSTOM,
        "m",
        None,
        "https://llm.example.com/v1/",
        name="my-llm",
    )
    assert handle.base_url == "https://llm.example.com/v1"
    assert handle.name == "my-llm"


@pytest.mark.parametrize("base_url", ["ftp://example.com", "/v1/chat", "example.com/v1"])
def test_build_rejects_malformed_base_url(base_url: str) -> None:
    with pytest.raises(ConstructionError):
        ClientFactory().build(ProviderKind.CUSTOM, "m", None, base_url, name="my-llm")


def test_build_rejects_custom_without_base_url() -> None:
    with pytest.raises(ConstructionError):
        ClientFactory().build(ProviderKind.CUSTOM, "m", None, None)


def test_build_rejects_empty_model() -> None:
    with pytest.raises(ConstructionError):
        ClientFactory().build(ProviderKind.OPENAI, "  ", "key", None)


def test_auth_headers_per_kind() -> None:
    assert build_provider_auth_headers(kind=ProviderKind.OPENAI, api_key="sk-1")["Authorization"] == "Bearer sk-1"
    anthropic = build_provider_auth_headers(kind=ProviderKind.ANTHROPIC, api_key="ant")
    assert anthropic["x-api-key"] == "ant"
    assert "anthropic-version" in anthropic
    assert build_provider_auth_headers(kind=ProviderKind.GOOGLE, api_key="g")["x-goog-api-key"] == "g"
    keyless = build_provider_auth_headers(kind=ProviderKind.OLLAMA, api_key=None)
    assert "Authorization" not in keyless


def test_handle_repr_and_describe_hide_api_key() -> None:
    handle = ModelHandle(
        name="openai",
        kind=ProviderKind.OPENAI,
        model_id="gpt-4.1",
        base_url="https://api.openai.com/v1",
        api_key="sk-abcdefghijklmnopqrstuvwxyz",
    )
    assert "sk-abcdefghijklmnopqrstuvwxyz" not in repr(handle)
    assert handle.describe()["api_key"] == "sk-...wxyz"


def test_handle_http_client_sends_auth_headers() -> None:
    seen: dict[str, str] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["authorization"] = request.headers.get("Authorization", "")
        return httpx.Response(200, json={"data": []})

    handle = ClientFactory().build(
        ProviderKind.OPENAI,
        "gemini/gemini-2.5-pro",
        "dyad-key",
        "https://llm-gateway.dyad.sh/v1",
        name="auto",
    )
    with handle.http_client(transport=httpx.MockTransport(handler)) as client:
        response = client.get("/models")

    assert response.status_code == 200
    assert seen["url"] == "https://llm-gateway.dyad.sh/v1/models"
    assert seen["authorization"] == "Bearer dyad-key"
