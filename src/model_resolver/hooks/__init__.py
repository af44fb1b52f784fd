"""Observability and secret-masking hooks."""

from .observability import EventLogger, HookEvent
from .security import mask_secret, mask_sensitive_text

__all__ = [
    "EventLogger",
    "HookEvent",
    "mask_secret",
    "mask_sensitive_text",
]
