from __future__ import annotations


class ResolutionError(RuntimeError):
    def __init__(self, message: str, *, provider: str | None = None, model: str | None = None) -> None:
        super().__init__(message)
        self.provider = provider
        self.model = model


class ConfigurationError(ResolutionError):
    UNKNOWN_PROVIDER = "unknown provider"
    AUTO_EXHAUSTED = "no credentials for any auto-candidate"
    MISSING_BASE_URL = "missing API base URL"
    MISSING_API_KEY = "missing API key"

    def __init__(
        self,
        reason: str,
        message: str,
        *,
        provider: str | None = None,
        model: str | None = None,
    ) -> None:
        super().__init__(message, provider=provider, model=model)
        self.reason = reason


class UnsupportedProviderError(ResolutionError):
    pass


class ConstructionError(ResolutionError):
    pass
