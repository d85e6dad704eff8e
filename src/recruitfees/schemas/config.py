"""Pydantic configuration schema for CLI YAML input."""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator


class EngineConfig(BaseModel):
    base_currency: str | None = None
    margin_rate: Decimal | None = Field(default=None, ge=0)

    model_config = ConfigDict(extra="forbid")

    @field_validator("base_currency")
    @classmethod
    def _upper(cls, value: str | None) -> str | None:
        return value.strip().upper() if value else None


class AppConfig(BaseModel):
    engine: EngineConfig = Field(default_factory=EngineConfig)
    rates: dict[str, Decimal] | None = None

    model_config = ConfigDict(extra="forbid")

    def to_settings(self) -> dict[str, Any]:
        settings: dict[str, Any] = {}
        engine_settings = self.engine.model_dump(exclude_none=True)
        if engine_settings:
            settings["engine"] = engine_settings
        if self.rates:
            settings["rates"] = dict(self.rates)
        return settings


def load_config(raw: Any) -> AppConfig:
    if not isinstance(raw, dict):
        raise ValidationError.from_exception_data(
            "AppConfig",
            [{"type": "dict_type", "loc": ("config",), "input": raw}],
        )
    return AppConfig.model_validate(raw)
