import importlib
import sys
import textwrap
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from hookengine.config import HookEngineConfig
from hookengine.errors import PluginLoadError
from hookengine.hooks import HookEngine
from hookengine.lifecycle import get_hook_engine
from hookengine.plugins import PluginLoader

PluginWriter = Callable[[str, str], str]


@pytest.fixture
def write_plugin(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[PluginWriter]:
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.setattr(sys, "dont_write_bytecode", True)
    written: list[str] = []

    def write(module_name: str, source: str) -> str:
        (tmp_path / f"{module_name}.py").write_text(textwrap.dedent(source))
        importlib.invalidate_caches()
        written.append(module_name)
        return module_name

    yield write

    for module_name in written:
        sys.modules.pop(module_name, None)


def test_load_registers_through_scope(write_plugin: PluginWriter) -> None:
    name = write_plugin(
        "hookplug_shout",
        """
        def register(scope):
            scope.add_filter("ui.chat.message:filter:outgoing", lambda v: v.upper())
            scope.add_action("ai.chat.send:action:before", lambda payload: None)
        """,
    )
    engine = HookEngine()
    loader = PluginLoader(engine)

    assert loader.load(name) is True
    assert loader.load(name) is True
    assert loader.loaded == [name]
    assert loader.registrations(name) == 2
    assert engine.apply_filters_sync("ui.chat.message:filter:outgoing", "hi") == "HI"


def test_unload_releases_registrations_and_calls_unregister(write_plugin: PluginWriter) -> None:
    name = write_plugin(
        "hookplug_unregister",
        """
        calls = []

        def register(scope):
            scope.add_action("x", lambda: None)
            scope.once_action("y", lambda: None)

        def unregister():
            calls.append("unregister")
        """,
    )
    engine = HookEngine()
    loader = PluginLoader(engine)
    loader.load(name)

    assert loader.unload(name) == 2
    assert engine.has_action() is False
    assert sys.modules[name].calls == ["unregister"]
    assert loader.unload(name) == 0


def test_reload_swaps_callbacks_without_duplicates(write_plugin: PluginWriter) -> None:
    name = write_plugin(
        "hookplug_reload",
        """
        def register(scope):
            scope.add_filter("f", lambda v: v + ["v1"])
        """,
    )
    engine = HookEngine()
    loader = PluginLoader(engine)
    loader.load(name)
    assert engine.apply_filters_sync("f", []) == ["v1"]

    write_plugin(
        name,
        """
        def register(scope):
            scope.add_filter("f", lambda v: v + ["second-generation"])
        """,
    )
    assert loader.reload(name) is True

    assert engine.apply_filters_sync("f", []) == ["second-generation"]
    assert engine.diagnostics.callbacks() == 1


def test_reload_resets_diagnostics(write_plugin: PluginWriter) -> None:
    name = write_plugin(
        "hookplug_diag",
        """
        def register(scope):
            scope.add_action("x", lambda: None)
        """,
    )
    engine = HookEngine()
    loader = PluginLoader(engine)
    loader.load(name)
    engine.do_action_sync("x")
    assert engine.diagnostics.timings

    loader.reload(name)

    assert engine.diagnostics.timings == {}
    assert engine.has_action("x") is True


def test_reload_of_unloaded_plugin_loads_it(write_plugin: PluginWriter) -> None:
    name = write_plugin(
        "hookplug_fresh",
        """
        def register(scope):
            scope.add_action("x", lambda: None)
        """,
    )
    loader = PluginLoader(HookEngine())

    assert loader.reload(name) is True
    assert loader.loaded == [name]


def test_missing_module_is_skipped_unless_strict(caplog: pytest.LogCaptureFixture) -> None:
    loader = PluginLoader(HookEngine())

    assert loader.load("hookplug_does_not_exist") is False
    assert "hookplug_does_not_exist" in caplog.text

    strict = PluginLoader(HookEngine(), strict=True)
    with pytest.raises(PluginLoadError) as excinfo:
        strict.load("hookplug_does_not_exist")
    assert excinfo.value.module == "hookplug_does_not_exist"


def test_module_without_register_is_rejected(write_plugin: PluginWriter) -> None:
    name = write_plugin("hookplug_empty", "VALUE = 1\n")
    loader = PluginLoader(HookEngine(), strict=True)

    with pytest.raises(PluginLoadError, match="register"):
        loader.load(name)


def test_failing_register_rolls_back_partial_registrations(write_plugin: PluginWriter) -> None:
    name = write_plugin(
        "hookplug_partial",
        """
        def register(scope):
            scope.add_action("x", lambda: None)
            raise RuntimeError("half way")
        """,
    )
    engine = HookEngine()
    loader = PluginLoader(engine)

    assert loader.load(name) is False
    assert engine.has_action() is False
    assert loader.loaded == []


def test_from_config_loads_listed_modules_into_global_engine(write_plugin: PluginWriter) -> None:
    first = write_plugin(
        "hookplug_cfg_a",
        """
        def register(scope):
            scope.add_action("x", lambda: None)
        """,
    )
    config = HookEngineConfig.model_validate({"plugins": {"modules": [first, "hookplug_cfg_missing"]}})

    loader = PluginLoader.from_config(config)

    assert loader.engine is get_hook_engine()
    assert loader.loaded == [first]
    assert loader.unload_all() == 1
