from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, model_validator

if TYPE_CHECKING:
    from .client_factory import ModelHandle

AUTO_PROVIDER = "auto"


class ProviderType(str, Enum):
    BUILTIN = "builtin"
    CUSTOM = "custom"


class ModelRequest(BaseModel):
    provider: str
    name: str

    model_config = ConfigDict(frozen=True)

    @property
    def is_auto(self) -> bool:
        return self.provider == AUTO_PROVIDER


class ApiKeySecret(BaseModel):
    value: str


class ProviderSetting(BaseModel):
    api_key: ApiKeySecret | None = None


class UserSettings(BaseModel):
    provider_settings: dict[str, ProviderSetting] = Field(default_factory=dict)
    enable_dyad_pro: bool = False
    enable_pro_saver_mode: bool = False

    def api_key_for(self, provider: str) -> str | None:
        setting = self.provider_settings.get(provider)
        if setting is None or setting.api_key is None:
            return None
        return setting.api_key.value or None

    @property
    def gateway_api_key(self) -> str | None:
        return self.api_key_for(AUTO_PROVIDER)


class ProviderDescriptor(BaseModel):
    id: str
    name: str | None = None
    type: ProviderType = ProviderType.BUILTIN
    api_base_url: str | None = None
    env_var_name: str | None = None
    gateway_prefix: str | None = None

    @model_validator(mode="after")
    def validate_descriptor(self) -> "ProviderDescriptor":
        if not self.id.strip():
            raise ValueError("provider id must not be empty")
        if self.id == AUTO_PROVIDER:
            raise ValueError("'auto' is reserved and cannot be used as a provider id")
        return self

    @property
    def display_name(self) -> str:
        return self.name or self.id

    @property
    def gateway_eligible(self) -> bool:
        return bool(self.gateway_prefix)


@dataclass(frozen=True)
class ModelClient:
    client: ModelHandle
    builtin_provider_id: str | None = None


@dataclass(frozen=True)
class ResolutionResult:
    primary: ModelClient
    backups: tuple[ModelClient, ...] = field(default_factory=tuple)
