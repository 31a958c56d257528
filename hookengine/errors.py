"""Errors raised by the engine itself (callback failures never surface)."""

from __future__ import annotations


class HookEngineError(RuntimeError):
    pass


class EngineSlotError(HookEngineError):
    """Raised when a live global engine would be replaced."""


class PluginLoadError(HookEngineError):
    def __init__(self, module: str, reason: str) -> None:
        super().__init__(f"Failed to load hook plugin {module!r}: {reason}")
        self.module = module
        self.reason = reason
