from datetime import datetime, timedelta, timezone

from model_resolver.llm.error_store import LLMErrorStore


def test_recent_failure_is_reported_within_window() -> None:
    store = LLMErrorStore(window_seconds=60)
    store.record_error(provider="google", model="gemini-2.5-pro", message="quota exceeded")

    assert store.has_recent_failure("google", "gemini-2.5-pro")
    assert not store.model_has_no_recent_error("google", "gemini-2.5-pro")
    assert not store.has_recent_failure("google", "gemini-2.5-flash")
    assert not store.has_recent_failure("openai", "gemini-2.5-pro")


def test_failures_outside_window_are_pruned() -> None:
    store = LLMErrorStore(window_seconds=60)
    now = datetime(2026, 2, 18, 12, 0, tzinfo=timezone.utc)
    store.record_error(provider="google", model="gemini-2.5-pro", timestamp=now - timedelta(minutes=5))
    store.record_error(provider="google", model="gemini-2.5-flash", timestamp=now - timedelta(seconds=10))

    assert not store.has_recent_failure("google", "gemini-2.5-pro", now=now)
    assert store.has_recent_failure("google", "gemini-2.5-flash", now=now)


def test_out_of_order_timestamps_are_pruned() -> None:
    store = LLMErrorStore(window_seconds=60)
    now = datetime(2026, 2, 18, 12, 0, tzinfo=timezone.utc)
    store.record_error(provider="google", model="recent", timestamp=now - timedelta(seconds=5))
    store.record_error(provider="google", model="stale", timestamp=now - timedelta(hours=1))

    assert store.has_recent_failure("google", "recent", now=now)
    assert not store.has_recent_failure("google", "stale", now=now)


def test_naive_timestamps_are_treated_as_utc() -> None:
    store = LLMErrorStore(window_seconds=60)
    now = datetime(2026, 2, 18, 12, 0)
    store.record_error(provider="google", model="m", timestamp=now - timedelta(seconds=30))

    assert store.has_recent_failure("google", "m", now=now)


def test_snapshot_and_clear() -> None:
    store = LLMErrorStore(window_seconds=60)
    store.record_error(provider="google", model="m", message="first")
    store.record_error(provider="google", model="m", message="second")
    store.record_error(provider=" ", model="m")

    snapshot = store.snapshot()
    assert snapshot["model_count"] == 1
    row = snapshot["models"][0]
    assert row["error_count"] == 2
    assert row["last_message"] == "second"

    store.clear()
    assert store.snapshot()["model_count"] == 0
