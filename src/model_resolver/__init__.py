"""Resolve model requests and user settings into ready-to-use LLM client handles."""

from .llm import (
    ModelClient,
    ModelClientResolver,
    ModelRequest,
    ProviderRegistry,
    ResolutionResult,
    ResolverConfig,
    UserSettings,
)

__all__ = [
    "ModelClient",
    "ModelClientResolver",
    "ModelRequest",
    "ProviderRegistry",
    "ResolutionResult",
    "ResolverConfig",
    "UserSettings",
]
