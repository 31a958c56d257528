"""Process-wide engine slot and scoped registration cleanup.

The live engine is parked on the `builtins` module rather than in a module
global, so `importlib.reload()` of any hookengine module (or of a plugin that
imported it) finds the same instance instead of creating a second,
disconnected registry. Reloading code is expected to dispose its own
registrations first; `HookScope` makes that a single call.
"""

from __future__ import annotations

import builtins
import logging
import threading
from collections.abc import Callable
from typing import Any

from hookengine.errors import EngineSlotError
from hookengine.hooks import Disposer, HookEngine
from hookengine.models import HookCallback, HookKind, OnOptions

logger = logging.getLogger(__name__)

GLOBAL_SLOT = "__HOOKENGINE__"

_slot_lock = threading.Lock()


def peek_hook_engine() -> HookEngine | None:
    return getattr(builtins, GLOBAL_SLOT, None)


def get_hook_engine(factory: Callable[[], HookEngine] | None = None) -> HookEngine:
    """Return the global engine, creating it on first use."""
    engine = peek_hook_engine()
    if engine is not None:
        return engine
    with _slot_lock:
        engine = peek_hook_engine()
        if engine is None:
            engine = factory() if factory is not None else HookEngine()
            setattr(builtins, GLOBAL_SLOT, engine)
            logger.debug("Attached hook engine %#x to global slot %s", id(engine), GLOBAL_SLOT)
    return engine


def set_hook_engine(engine: HookEngine, *, replace: bool = False) -> HookEngine:
    with _slot_lock:
        current = peek_hook_engine()
        if current is engine:
            return engine
        if current is not None and not replace:
            raise EngineSlotError(f"A hook engine is already attached to {GLOBAL_SLOT}")
        setattr(builtins, GLOBAL_SLOT, engine)
    return engine


def clear_hook_engine() -> HookEngine | None:
    with _slot_lock:
        engine = peek_hook_engine()
        if engine is not None:
            delattr(builtins, GLOBAL_SLOT)
    return engine


def reset_diagnostics() -> None:
    """Module-disposal hook: clear diagnostics of the global engine, keep registrations."""
    engine = peek_hook_engine()
    if engine is not None:
        engine.reset_diagnostics()


class HookScope:
    """Collects the disposers of one owner so they can be released together."""

    def __init__(self, engine: HookEngine | None = None, name: str | None = None) -> None:
        self.engine = engine if engine is not None else get_hook_engine()
        self.name = name
        self._disposers: list[Disposer] = []

    def on(
        self,
        name: str,
        fn: HookCallback,
        opts: OnOptions | None = None,
        *,
        kind: HookKind | str | None = None,
        priority: int | None = None,
    ) -> Disposer:
        return self.track(self.engine.on(name, fn, opts, kind=kind, priority=priority))

    def add_action(self, name: str, fn: HookCallback, priority: int | None = None) -> Disposer:
        return self.on(name, fn, kind=HookKind.ACTION, priority=priority)

    def add_filter(self, name: str, fn: HookCallback, priority: int | None = None) -> Disposer:
        return self.on(name, fn, kind=HookKind.FILTER, priority=priority)

    def once_action(self, name: str, fn: HookCallback, priority: int | None = None) -> Disposer:
        return self.track(self.engine.once_action(name, fn, priority))

    def track(self, disposer: Disposer) -> Disposer:
        self._disposers.append(disposer)
        return disposer

    @property
    def active(self) -> int:
        return sum(1 for disposer in self._disposers if not disposer.disposed)

    def dispose(self) -> int:
        released = self.active
        while self._disposers:
            self.engine.off(self._disposers.pop())
        if released:
            logger.debug("Scope %s released %s registration(s)", self.name or hex(id(self)), released)
        return released

    def __enter__(self) -> HookScope:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.dispose()
