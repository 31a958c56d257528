"""Loading, unloading and hot-reloading of hook plugin modules.

A plugin is any importable module exposing `register(scope)`. Everything it
registers through the scope is released on unload, so a reload never leaves
the previous generation's callbacks behind. An optional module-level
`unregister()` runs after the scope is released.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Iterable
from types import ModuleType

from hookengine.config import HookEngineConfig
from hookengine.errors import PluginLoadError
from hookengine.hooks import HookEngine
from hookengine.lifecycle import HookScope, get_hook_engine

logger = logging.getLogger(__name__)


class PluginLoader:
    def __init__(self, engine: HookEngine | None = None, *, strict: bool = False) -> None:
        self.engine = engine if engine is not None else get_hook_engine()
        self.strict = strict
        self._scopes: dict[str, HookScope] = {}
        self._modules: dict[str, ModuleType] = {}

    @classmethod
    def from_config(cls, config: HookEngineConfig, engine: HookEngine | None = None) -> PluginLoader:
        loader = cls(engine, strict=config.plugins.strict)
        loader.load_all(config.plugins.modules)
        return loader

    @property
    def loaded(self) -> list[str]:
        return list(self._scopes)

    def registrations(self, module_name: str) -> int:
        scope = self._scopes.get(module_name)
        return scope.active if scope is not None else 0

    def load(self, module_name: str) -> bool:
        if module_name in self._scopes:
            logger.debug("Hook plugin %s already loaded", module_name)
            return True
        try:
            module = importlib.import_module(module_name)
        except Exception as exc:
            return self._fail(module_name, f"import failed: {exc}", exc)
        return self._register(module_name, module)

    def load_all(self, module_names: Iterable[str]) -> list[str]:
        return [name for name in module_names if self.load(name)]

    def unload(self, module_name: str) -> int:
        scope = self._scopes.pop(module_name, None)
        module = self._modules.pop(module_name, None)
        if scope is None:
            return 0
        released = scope.dispose()
        unregister = getattr(module, "unregister", None)
        if callable(unregister):
            try:
                unregister()
            except Exception:
                logger.warning("unregister() of hook plugin %s failed", module_name, exc_info=True)
        logger.info("Unloaded hook plugin %s (%s registrations released)", module_name, released)
        return released

    def unload_all(self) -> int:
        return sum(self.unload(name) for name in reversed(self.loaded))

    def reload(self, module_name: str) -> bool:
        """Release, re-import and re-register one plugin; diagnostics start fresh."""
        module = self._modules.get(module_name)
        self.unload(module_name)
        self.engine.reset_diagnostics()
        if module is None:
            return self.load(module_name)
        try:
            module = importlib.reload(module)
        except Exception as exc:
            return self._fail(module_name, f"reload failed: {exc}", exc)
        return self._register(module_name, module)

    def _register(self, module_name: str, module: ModuleType) -> bool:
        register = getattr(module, "register", None)
        if not callable(register):
            return self._fail(module_name, "module has no register(scope) function")

        scope = HookScope(self.engine, name=module_name)
        try:
            register(scope)
        except Exception as exc:
            scope.dispose()
            return self._fail(module_name, f"register() raised {exc!r}", exc)

        self._scopes[module_name] = scope
        self._modules[module_name] = module
        logger.info("Loaded hook plugin %s (%s registrations)", module_name, scope.active)
        return True

    def _fail(self, module_name: str, reason: str, cause: BaseException | None = None) -> bool:
        if self.strict:
            raise PluginLoadError(module_name, reason) from cause
        logger.error("Skipping hook plugin %s: %s", module_name, reason)
        return False
