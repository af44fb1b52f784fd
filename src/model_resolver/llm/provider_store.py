from __future__ import annotations

import json
import os
from pathlib import Path

from .models import ProviderDescriptor, ProviderType


class FileProviderStore:
    """JSON-file store for user-defined, OpenAI-compatible providers."""

    def __init__(self, path: str | None = None, *, reserved_ids: set[str] | None = None) -> None:
        self.path = Path(path).expanduser().resolve() if path else default_provider_store_path()
        self.reserved_ids = set(reserved_ids or ())

    def _read_all(self) -> dict[str, dict]:
        if not self.path.exists():
            return {}
        raw = self.path.read_text(encoding="utf-8").strip()
        if not raw:
            return {}
        return json.loads(raw)

    def _write_all(self, payload: dict[str, dict]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(payload, ensure_ascii=True, indent=2), encoding="utf-8")

    def save_provider(self, provider: ProviderDescriptor) -> ProviderDescriptor:
        if provider.id in self.reserved_ids:
            raise ValueError(f"provider id is reserved for a built-in provider: {provider.id}")
        stored = provider.model_copy(update={"type": ProviderType.CUSTOM, "gateway_prefix": None})
        all_data = self._read_all()
        all_data[stored.id] = stored.model_dump(mode="json")
        self._write_all(all_data)
        return stored

    def delete_provider(self, provider_id: str) -> bool:
        all_data = self._read_all()
        if provider_id not in all_data:
            return False
        del all_data[provider_id]
        self._write_all(all_data)
        return True

    def list_providers(self) -> list[ProviderDescriptor]:
        rows = [ProviderDescriptor.model_validate(data) for data in self._read_all().values()]
        return sorted(rows, key=lambda row: row.id)


def default_provider_store_path() -> Path:
    explicit = os.getenv("MODEL_RESOLVER_PROVIDER_STORE_PATH")
    if explicit:
        return Path(explicit).expanduser().resolve()
    return (Path.home() / ".config" / "model_resolver" / "providers.json").resolve()
