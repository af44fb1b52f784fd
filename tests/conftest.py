from pathlib import Path
import sys

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from model_resolver.llm.error_store import LLMErrorStore


class FakeEnv:
    def __init__(self, values: dict[str, str] | None = None) -> None:
        self.values = dict(values or {})
        self.lookups: list[str] = []

    def __call__(self, name: str) -> str | None:
        self.lookups.append(name)
        return self.values.get(name)


@pytest.fixture
def fake_env() -> FakeEnv:
    return FakeEnv()


@pytest.fixture
def error_store() -> LLMErrorStore:
    return LLMErrorStore(window_seconds=60)
