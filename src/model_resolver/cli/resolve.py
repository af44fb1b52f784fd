from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from model_resolver.hooks import mask_sensitive_text
from model_resolver.llm import (
    AUTO_PROVIDER,
    ConfigurationError,
    EnvironmentReader,
    FileProviderStore,
    ModelClient,
    ModelClientResolver,
    ModelRequest,
    ProviderRegistry,
    ResolutionError,
    ResolutionResult,
    ResolverConfig,
    UserSettings,
)
from model_resolver.llm.provider_catalog import BUILTIN_PROVIDER_IDS


def _load_settings(path: str | None) -> UserSettings:
    if not path:
        return UserSettings()
    raw = Path(path).expanduser().read_text(encoding="utf-8").strip()
    if not raw:
        return UserSettings()
    return UserSettings.model_validate(json.loads(raw))


def _client_payload(model_client: ModelClient) -> dict[str, Any]:
    payload = model_client.client.describe()
    payload["builtin_provider_id"] = model_client.builtin_provider_id
    return payload


def _result_payload(result: ResolutionResult) -> dict[str, Any]:
    return {
        "primary": _client_payload(result.primary),
        "backups": [_client_payload(backup) for backup in result.backups],
    }


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="model-resolver",
        description="Resolve a provider/model request into client handles (API keys are masked).",
    )
    parser.add_argument("--provider", default=AUTO_PROVIDER, help="provider id, or 'auto'")
    parser.add_argument("--model", help="model name (required unless --provider is auto)")
    parser.add_argument("--settings", help="path to a user settings JSON file")
    parser.add_argument("--provider-store", help="path to the custom providers JSON file")
    parser.add_argument(
        "--gateway-base-url",
        help="override the gateway endpoint (default from MODEL_RESOLVER_GATEWAY_BASE_URL)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    model = (args.model or "").strip()
    if not model:
        if args.provider != AUTO_PROVIDER:
            parser.error(f"--model is required for provider {args.provider!r}")
        model = AUTO_PROVIDER

    config = ResolverConfig.from_env()
    if args.gateway_base_url:
        config = config.model_copy(update={"gateway_base_url": args.gateway_base_url})
    env = EnvironmentReader()
    registry = ProviderRegistry(
        provider_store=FileProviderStore(
            args.provider_store or config.provider_store_path,
            reserved_ids=set(BUILTIN_PROVIDER_IDS),
        ),
        env_lookup=env,
    )
    resolver = ModelClientResolver(registry=registry, config=config, env_lookup=env)

    try:
        settings = _load_settings(args.settings)
        result = resolver.resolve(ModelRequest(provider=args.provider, name=model), settings)
    except ResolutionError as exc:
        reason = f" ({exc.reason})" if isinstance(exc, ConfigurationError) else ""
        print(f"error: {type(exc).__name__}{reason}: {mask_sensitive_text(str(exc))}", file=sys.stderr)
        return 1
    except (OSError, ValueError) as exc:
        print(f"error: could not load settings: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(_result_payload(result), ensure_ascii=True, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
