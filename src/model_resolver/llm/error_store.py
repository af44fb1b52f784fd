from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from threading import Lock
from typing import Protocol


class RecentFailureOracle(Protocol):
    def has_recent_failure(self, provider: str, model: str) -> bool: ...


@dataclass
class _ErrorEvent:
    provider: str
    model: str
    timestamp: datetime
    message: str | None = None


class LLMErrorStore:
    """Sliding-window record of failed (provider, model) calls."""

    def __init__(self, *, window_seconds: int = 300) -> None:
        self.window_seconds = max(1, window_seconds)
        self._window = timedelta(seconds=self.window_seconds)
        self._events: deque[_ErrorEvent] = deque()
        self._lock = Lock()

    def record_error(
        self,
        *,
        provider: str,
        model: str,
        message: str | None = None,
        timestamp: datetime | None = None,
    ) -> None:
        provider_id = provider.strip()
        model_id = model.strip()
        if not provider_id or not model_id:
            return

        event_time = _as_utc(timestamp or datetime.now(timezone.utc))
        with self._lock:
            self._events.append(
                _ErrorEvent(provider=provider_id, model=model_id, timestamp=event_time, message=message)
            )

    def has_recent_failure(self, provider: str, model: str, *, now: datetime | None = None) -> bool:
        current = _as_utc(now or datetime.now(timezone.utc))
        with self._lock:
            self._prune_locked(now=current)
            return any(
                event.provider == provider and event.model == model and event.timestamp <= current
                for event in self._events
            )

    def model_has_no_recent_error(self, provider: str, model: str) -> bool:
        return not self.has_recent_failure(provider, model)

    def clear(self) -> None:
        with self._lock:
            self._events.clear()

    def snapshot(self) -> dict:
        now = datetime.now(timezone.utc)
        with self._lock:
            self._prune_locked(now=now)
            rows: dict[tuple[str, str], dict] = {}
            for event in self._events:
                row = rows.setdefault(
                    (event.provider, event.model),
                    {
                        "provider": event.provider,
                        "model": event.model,
                        "error_count": 0,
                        "last_error_at": None,
                        "last_message": None,
                    },
                )
                row["error_count"] += 1
                row["last_error_at"] = event.timestamp.isoformat()
                row["last_message"] = event.message

        models = sorted(rows.values(), key=lambda row: (row["provider"], row["model"]))
        return {
            "window_seconds": self.window_seconds,
            "generated_at": now.isoformat(),
            "model_count": len(models),
            "models": models,
        }

    def _prune_locked(self, *, now: datetime) -> None:
        cutoff = now - self._window
        # timestamps may be recorded out of order
        if any(event.timestamp < cutoff for event in self._events):
            self._events = deque(event for event in self._events if event.timestamp >= cutoff)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
