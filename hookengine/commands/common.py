"""Shared helpers for CLI command modules."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Any

from hookengine.config import HookEngineConfig, load_effective_config, load_yaml_mapping

ALIAS_TO_CANONICAL = {
    "list": "catalog",
    "dispatch": "fire",
    "validate": "check",
}


def normalize_command(name: str) -> str:
    return ALIAS_TO_CANONICAL.get(name, name)


def load_yaml_dict(path: str | None) -> dict | None:
    if not path:
        return None
    data = load_yaml_mapping(Path(path))
    return data or None


def load_config(args: argparse.Namespace) -> HookEngineConfig:
    return load_effective_config(
        config_path=getattr(args, "config", None),
        system_defaults=load_yaml_dict(getattr(args, "system_config", None)),
        runtime_override=load_yaml_dict(getattr(args, "runtime_override", None)),
    )


def parse_json_value(raw: str | None) -> Any:
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON value {raw!r}: {exc.msg}") from exc


def add_config_flags(cmd: argparse.ArgumentParser) -> None:
    cmd.add_argument("--config", help="Config YAML, or a directory holding .hookengine.yaml")
    cmd.add_argument("--system-config", help="Optional system defaults YAML")
    cmd.add_argument("--runtime-override", help="Optional runtime override YAML")


def add_kind_flag(cmd: argparse.ArgumentParser, help_text: str) -> None:
    cmd.add_argument("--kind", choices=["action", "filter"], default=None, help=help_text)
