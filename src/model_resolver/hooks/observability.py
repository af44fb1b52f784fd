from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass
class HookEvent:
    at: datetime
    kind: str
    name: str
    level: str = "info"
    payload: dict[str, Any] = field(default_factory=dict)


class EventLogger:
    """In-memory event log; the oldest events are dropped past ``max_events``."""

    def __init__(self, *, max_events: int = 1000) -> None:
        self.max_events = max(1, max_events)
        self._events: deque[HookEvent] = deque(maxlen=self.max_events)

    def record(
        self,
        kind: str,
        name: str,
        payload: dict[str, Any] | None = None,
        *,
        level: str = "info",
    ) -> None:
        self._events.append(
            HookEvent(
                at=datetime.now(timezone.utc),
                kind=kind,
                name=name,
                level=level,
                payload=payload or {},
            )
        )

    def on_resolution(self, phase: str, *, provider: str, model: str, **extra: Any) -> None:
        self.record("resolution", phase, {"provider": provider, "model": model, **extra})

    def warn(self, kind: str, name: str, payload: dict[str, Any] | None = None) -> None:
        self.record(kind, name, payload, level="warning")

    def list_events(self, *, level: str | None = None) -> list[HookEvent]:
        if level is None:
            return list(self._events)
        return [event for event in self._events if event.level == level]

    def reset(self) -> None:
        self._events.clear()
