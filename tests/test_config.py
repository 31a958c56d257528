from pathlib import Path

import pytest
from pydantic import ValidationError

from hookengine.config import CONFIG_FILENAME, HookEngineConfig, load_effective_config


def test_defaults() -> None:
    config = HookEngineConfig()

    assert config.dispatch.default_priority == 10
    assert config.dispatch.log_callback_errors is True
    assert config.diagnostics.max_timings_per_hook == 0
    assert config.plugins.modules == []
    assert config.logging.level == "INFO"


def test_config_precedence(tmp_path: Path) -> None:
    (tmp_path / CONFIG_FILENAME).write_text(
        """
dispatch:
  default_priority: 20
diagnostics:
  max_timings_per_hook: 100
plugins:
  modules: [plugins.file_plugin]
"""
    )
    system = {
        "dispatch": {"default_priority": 5, "log_callback_errors": False},
        "diagnostics": {"max_timings_per_hook": 10},
    }
    runtime = {"diagnostics": {"max_timings_per_hook": 500}}

    config = load_effective_config(tmp_path, system_defaults=system, runtime_override=runtime)

    assert config.dispatch.default_priority == 20
    assert config.dispatch.log_callback_errors is False
    assert config.diagnostics.max_timings_per_hook == 500
    assert config.plugins.modules == ["plugins.file_plugin"]


def test_explicit_file_path(tmp_path: Path) -> None:
    path = tmp_path / "hooks.yaml"
    path.write_text("plugins:\n  strict: true\n")

    assert load_effective_config(path).plugins.strict is True


def test_directory_without_config_file_adds_no_layer(tmp_path: Path) -> None:
    assert load_effective_config(tmp_path) == HookEngineConfig()


def test_missing_named_config_file_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ValueError, match="not found"):
        load_effective_config(tmp_path / "absent.yaml")


def test_non_mapping_yaml_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "hooks.yaml"
    path.write_text("- just\n- a list\n")

    with pytest.raises(ValueError, match="mapping"):
        load_effective_config(path)


def test_unknown_keys_are_rejected() -> None:
    with pytest.raises(ValidationError):
        load_effective_config(runtime_override={"dispatch": {"default_prio": 3}})

    with pytest.raises(ValidationError):
        load_effective_config(runtime_override={"diagnostics": {"max_timings_per_hook": -1}})
