"""Configuration management utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from ..core.currency import RateTable, RateTableError

PACKAGE_CONFIG_DIR = Path(__file__).resolve().parent


class ConfigManager:
    """Simple YAML-backed configuration loader."""

    def __init__(self, base_path: str | Path = PACKAGE_CONFIG_DIR):
        self._base_path = Path(base_path)

    def load(self, name: str) -> dict[str, Any]:
        """Load a YAML configuration by name without file extension."""
        path = self._base_path / f"{name}.yaml"
        with path.open("r", encoding="utf-8") as handle:
            loaded = yaml.safe_load(handle) or {}
        if not isinstance(loaded, dict):
            raise RateTableError(f"{path} must contain a YAML mapping")
        return loaded


def default_rate_table(
    base_currency: str | None = None,
    *,
    manager: ConfigManager | None = None,
) -> RateTable:
    """Load the packaged fallback rate table, rebased when asked.

    The shipped table is expressed in UGX. Passing another ``base_currency``
    re-expresses every rate relative to it.
    """
    data = (manager or ConfigManager()).load("rates")
    table = RateTable.from_mapping(
        data.get("rates") or {},
        base_currency=data.get("base_currency", "UGX"),
    )
    if base_currency and base_currency.upper() != table.base_currency:
        return table.rebased(base_currency)
    return table


__all__ = ["ConfigManager", "PACKAGE_CONFIG_DIR", "default_rate_table"]
