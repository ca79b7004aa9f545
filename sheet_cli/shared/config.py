"""Configuration loading utilities for the sheet ledger CLI suite."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, MutableMapping

import yaml

from . import paths
from .exceptions import ConfigurationError


@dataclass(frozen=True, slots=True)
class SheetSettings:
    """Where the published sheet lives and how to download it."""

    url: str | None
    timeout: float
    cache_bust: bool


@dataclass(frozen=True, slots=True)
class ExtractionSettings:
    """Column heuristics used while reading a sheet export."""

    block_width: int
    balance_scan_width: int
    transaction_scan_width: int


@dataclass(frozen=True, slots=True)
class CatalogSettings:
    """Year bounds of the selectable month catalog."""

    start_year: int
    end_year: int


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Top-level application configuration."""

    source_path: Path
    sheet: SheetSettings
    extraction: ExtractionSettings
    catalog: CatalogSettings

    def with_sheet_url(self, new_url: str | None) -> AppConfig:
        """Return a copy with an updated sheet URL."""
        new_sheet = replace(self.sheet, url=new_url or None)
        return replace(self, sheet=new_sheet)


def _default_config() -> dict[str, Any]:
    return {
        "sheet": {
            "url": None,
            "timeout": 30.0,
            "cache_bust": True,
        },
        "extraction": {
            "block_width": 8,
            "balance_scan_width": 9,
            "transaction_scan_width": 3,
        },
        "catalog": {
            "start_year": 2024,
            "end_year": 2030,
        },
    }


ENV_OVERRIDE_SPEC: dict[str, tuple[str, type]] = {
    "sheet.url": ("SHEETCLI_SHEET_URL", str),
    "sheet.timeout": ("SHEETCLI_FETCH_TIMEOUT", float),
    "sheet.cache_bust": ("SHEETCLI_CACHE_BUST", bool),
    "extraction.block_width": ("SHEETCLI_BLOCK_WIDTH", int),
    "extraction.balance_scan_width": ("SHEETCLI_BALANCE_SCAN_WIDTH", int),
    "extraction.transaction_scan_width": ("SHEETCLI_TRANSACTION_SCAN_WIDTH", int),
    "catalog.start_year": ("SHEETCLI_CATALOG_START_YEAR", int),
    "catalog.end_year": ("SHEETCLI_CATALOG_END_YEAR", int),
}


def load_config(
    config_path: str | Path | None = None,
    env: Mapping[str, str] | None = None,
) -> AppConfig:
    """Load configuration from defaults, YAML file, and env overrides."""
    env = dict(os.environ if env is None else env)
    resolved_config_path = _resolve_config_path(config_path, env)
    file_data = _load_yaml(resolved_config_path)
    merged: dict[str, Any] = _deep_merge(_default_config(), file_data)
    merged = _apply_env_overrides(merged, env)
    return _build_config(merged, resolved_config_path)


def _resolve_config_path(config_path: str | Path | None, env: Mapping[str, str]) -> Path:
    if config_path:
        return paths.resolve_path(config_path)
    return paths.default_config_path(env=env)


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
        if not isinstance(data, MutableMapping):
            raise ConfigurationError(f"Config file at {path} must define a mapping root object.")
        return dict(data)


def _deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], Mapping) and isinstance(value, Mapping):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _apply_env_overrides(config: dict[str, Any], env: Mapping[str, str]) -> dict[str, Any]:
    config_copy = _deep_merge(config, {})
    for dotted_key, (env_key, expected_type) in ENV_OVERRIDE_SPEC.items():
        if env_key not in env:
            continue
        raw_value = env[env_key]
        try:
            value = _coerce_env_value(raw_value, expected_type)
        except ValueError as exc:
            raise ConfigurationError(
                f"Environment override {env_key} has invalid value '{raw_value}': {exc}"
            ) from exc
        _assign_nested(config_copy, dotted_key.split("."), value)
    return config_copy


def _coerce_env_value(raw: str, expected_type: type) -> Any:
    cleaned = raw.strip()
    if expected_type is bool:
        lowered = cleaned.lower()
        if lowered in {"1", "true", "yes", "on"}:
            return True
        if lowered in {"0", "false", "no", "off"}:
            return False
        raise ValueError("expected boolean (true/false)")
    if expected_type is int:
        return int(cleaned)
    if expected_type is float:
        return float(cleaned)
    return cleaned


def _assign_nested(target: MutableMapping[str, Any], keys: list[str], value: Any) -> None:
    current = target
    for key in keys[:-1]:
        if key not in current or not isinstance(current[key], MutableMapping):
            current[key] = {}
        current = current[key]  # type: ignore[assignment]
    current[keys[-1]] = value


def _build_config(data: Mapping[str, Any], source_path: Path) -> AppConfig:
    try:
        sheet_cfg = data["sheet"]
        raw_url = str(sheet_cfg.get("url") or "").strip()
        sheet = SheetSettings(
            url=raw_url or None,
            timeout=float(sheet_cfg["timeout"]),
            cache_bust=bool(sheet_cfg["cache_bust"]),
        )
        extraction_cfg = data["extraction"]
        extraction = ExtractionSettings(
            block_width=int(extraction_cfg["block_width"]),
            balance_scan_width=int(extraction_cfg["balance_scan_width"]),
            transaction_scan_width=int(extraction_cfg["transaction_scan_width"]),
        )
        catalog_cfg = data["catalog"]
        catalog = CatalogSettings(
            start_year=int(catalog_cfg["start_year"]),
            end_year=int(catalog_cfg["end_year"]),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise ConfigurationError(f"Invalid configuration structure: {exc}") from exc

    if sheet.timeout <= 0:
        raise ConfigurationError("sheet.timeout must be positive.")
    for name in ("block_width", "balance_scan_width", "transaction_scan_width"):
        if getattr(extraction, name) < 1:
            raise ConfigurationError(f"extraction.{name} must be at least 1.")
    if catalog.start_year > catalog.end_year:
        raise ConfigurationError(
            f"catalog.start_year ({catalog.start_year}) is after catalog.end_year ({catalog.end_year})."
        )

    return AppConfig(
        source_path=source_path,
        sheet=sheet,
        extraction=extraction,
        catalog=catalog,
    )
