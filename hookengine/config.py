"""Configuration models and loading for the hook engine."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field

from hookengine.models import DEFAULT_PRIORITY

CONFIG_FILENAME = ".hookengine.yaml"


class DispatchConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    default_priority: int = DEFAULT_PRIORITY
    log_callback_errors: bool = True


class DiagnosticsConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    record_timings: bool = True
    max_timings_per_hook: int = Field(default=0, ge=0)


class PluginsConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    modules: list[str] = Field(default_factory=list)
    strict: bool = False


class LoggingConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    level: str = "INFO"


class HookEngineConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    dispatch: DispatchConfig = Field(default_factory=DispatchConfig)
    diagnostics: DiagnosticsConfig = Field(default_factory=DiagnosticsConfig)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_yaml_mapping(path: Path) -> dict[str, Any]:
    if not path.is_file():
        raise ValueError(f"Config file not found: {path}")
    data = yaml.safe_load(path.read_text())
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"YAML at {path} must decode to a mapping")
    return data


def resolve_config_path(config_path: str | Path | None) -> Path | None:
    if config_path is None:
        return None
    path = Path(config_path)
    if path.is_dir():
        candidate = path / CONFIG_FILENAME
        return candidate if candidate.exists() else None
    return path


def load_effective_config(
    config_path: str | Path | None = None,
    system_defaults: dict[str, Any] | None = None,
    runtime_override: dict[str, Any] | None = None,
) -> HookEngineConfig:
    """Load config with precedence runtime > config file > system defaults.

    `config_path` may point at a YAML file or at a directory holding `.hookengine.yaml`.
    A directory without that file adds no layer; a named file that is missing raises `ValueError`.
    """
    merged: dict[str, Any] = {}
    if system_defaults:
        merged = _deep_merge(merged, system_defaults)

    path = resolve_config_path(config_path)
    if path is not None:
        file_config = load_yaml_mapping(path)
        if file_config:
            merged = _deep_merge(merged, file_config)

    if runtime_override:
        merged = _deep_merge(merged, runtime_override)

    return HookEngineConfig.model_validate(merged)
