from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from model_resolver.llm.config import DEFAULT_GATEWAY_BASE_URL, ResolverConfig
from model_resolver.llm.env import EnvironmentReader
from model_resolver.llm.models import ModelRequest, ProviderDescriptor, ProviderType
from model_resolver.llm.provider_catalog import (
    BUILTIN_PROVIDER_IDS,
    DEFAULT_OLLAMA_BASE_URL,
    ProviderRegistry,
    custom_provider,
)
from model_resolver.llm.provider_store import FileProviderStore


def test_builtin_catalog_gateway_eligibility() -> None:
    registry = ProviderRegistry(env_lookup=EnvironmentReader(environ={}))
    providers = {provider.id: provider for provider in registry.list_providers()}

    assert set(providers) == BUILTIN_PROVIDER_IDS
    assert not providers["openai"].gateway_eligible
    assert providers["openai"].gateway_prefix == ""
    assert providers["anthropic"].gateway_eligible
    assert providers["google"].gateway_prefix == "gemini/"
    assert not providers["ollama"].gateway_eligible
    assert providers["ollama"].api_base_url == DEFAULT_OLLAMA_BASE_URL


def test_ollama_host_from_env() -> None:
    registry = ProviderRegistry(env_lookup=EnvironmentReader(environ={"OLLAMA_HOST": "http://gpu-box:11434/api"}))
    assert registry.get("ollama").api_base_url == "http://gpu-box:11434/api"


def test_registry_merges_custom_providers_from_store(tmp_path: Path) -> None:
    store = FileProviderStore(str(tmp_path / "providers.json"), reserved_ids=set(BUILTIN_PROVIDER_IDS))
    store.save_provider(
        ProviderDescriptor(
            id="my-llm",
            name="My LLM",
            api_base_url="https://llm.example.com/v1",
            gateway_prefix="ignored/",
        )
    )
    registry = ProviderRegistry(provider_store=store, env_lookup=EnvironmentReader(environ={}))

    provider = registry.get("my-llm")
    assert provider is not None
    assert provider.type == ProviderType.CUSTOM
    assert provider.gateway_prefix is None
    assert registry.get("missing") is None


def test_registry_reads_store_fresh_on_each_lookup(tmp_path: Path) -> None:
    store = FileProviderStore(str(tmp_path / "providers.json"))
    registry = ProviderRegistry(provider_store=store, env_lookup=EnvironmentReader(environ={}))
    assert registry.get("later") is None

    store.save_provider(custom_provider("later", api_base_url="http://localhost:9000/v1"))
    assert registry.get("later") is not None

    assert store.delete_provider("later")
    assert registry.get("later") is None
    assert not store.delete_provider("later")


def test_store_rejects_builtin_ids(tmp_path: Path) -> None:
    store = FileProviderStore(str(tmp_path / "providers.json"), reserved_ids=set(BUILTIN_PROVIDER_IDS))
    with pytest.raises(ValueError):
        store.save_provider(custom_provider("openai", api_base_url="http://localhost:9000/v1"))


def test_store_default_path_from_env(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("MODEL_RESOLVER_PROVIDER_STORE_PATH", str(tmp_path / "custom.json"))
    store = FileProviderStore()
    assert store.path == (tmp_path / "custom.json").resolve()
    assert store.list_providers() == []


def test_descriptor_rejects_reserved_auto_id() -> None:
    with pytest.raises(ValidationError):
        ProviderDescriptor(id="auto")


def test_environment_reader_prefers_overrides_and_ignores_blank() -> None:
    env = EnvironmentReader({"OPENAI_API_KEY": "override"}, environ={"OPENAI_API_KEY": "process", "BLANK": "  "})
    assert env.get("OPENAI_API_KEY") == "override"
    assert env("BLANK") is None
    assert env.get("") is None


def test_resolver_config_from_env() -> None:
    config = ResolverConfig.from_env(
        {
            "MODEL_RESOLVER_GATEWAY_BASE_URL": "https://gateway.example.com/v1",
            "MODEL_RESOLVER_RECENT_ERROR_WINDOW_SECONDS": "120",
            "MODEL_RESOLVER_PROVIDER_STORE_PATH": " ",
        }
    )
    assert config.gateway_base_url == "https://gateway.example.com/v1"
    assert config.recent_error_window_seconds == 120
    assert config.provider_store_path is None


def test_resolver_config_defaults_and_validation() -> None:
    config = ResolverConfig.from_env({})
    assert config.gateway_base_url == DEFAULT_GATEWAY_BASE_URL
    assert [model.provider for model in config.auto_models] == ["google", "anthropic", "openai"]

    with pytest.raises(ValidationError):
        ResolverConfig(auto_models=[])
    with pytest.raises(ValidationError):
        ResolverConfig(auto_models=[ModelRequest(provider="auto", name="auto")])
    with pytest.raises(ValidationError):
        ResolverConfig(recent_error_window_seconds=0)
