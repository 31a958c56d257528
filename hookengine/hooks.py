"""Hook engine: action/filter registration and orchestration."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, Literal, TypeVar

from hookengine.diagnostics import HookDiagnostics
from hookengine.dispatch import Dispatcher
from hookengine.models import DEFAULT_PRIORITY, CallbackEntry, HookCallback, HookKind, OnOptions
from hookengine.registry import CallbackRegistry

if TYPE_CHECKING:
    from hookengine.config import HookEngineConfig

logger = logging.getLogger(__name__)

T = TypeVar("T")

FILTER_MARKER = ":filter:"


def detect_kind(name: str) -> HookKind:
    return HookKind.FILTER if FILTER_MARKER in name else HookKind.ACTION


class Disposer:
    """Removes exactly one registration, at most once."""

    def __init__(self, engine: HookEngine, registry: CallbackRegistry, entry: CallbackEntry) -> None:
        self.engine = engine
        self.entry = entry
        self._registry = registry
        self.disposed = False

    def __call__(self) -> None:
        if self.disposed:
            return
        self.disposed = True
        self._registry.discard(self.entry)

    def __repr__(self) -> str:
        state = "disposed" if self.disposed else "active"
        return f"<Disposer {self.entry.name!r} priority={self.entry.priority} {state}>"


class HookEngine:
    """In-process hook engine with deterministic callback ordering.

    Callbacks run by ascending priority, then registration order. Exact and
    wildcard registrations are merged per dispatch from a snapshot, so
    (un)registering from inside a running callback only affects later
    dispatches. A failing callback is logged and counted; it never aborts the
    dispatch or reaches the caller.
    """

    def __init__(
        self,
        default_priority: int = DEFAULT_PRIORITY,
        *,
        max_timings_per_hook: int = 0,
        record_timings: bool = True,
        log_errors: bool = True,
    ) -> None:
        self.default_priority = default_priority
        sequence = itertools.count(1)
        self._actions = CallbackRegistry(default_priority, sequence)
        self._filters = CallbackRegistry(default_priority, sequence)
        self._diagnostics = HookDiagnostics(
            self._count_callbacks,
            max_timings_per_hook=max_timings_per_hook,
            record_timings=record_timings,
        )
        self._dispatcher = Dispatcher(self._diagnostics, default_priority=default_priority, log_errors=log_errors)

    @classmethod
    def from_config(cls, config: HookEngineConfig) -> HookEngine:
        return cls(
            default_priority=config.dispatch.default_priority,
            max_timings_per_hook=config.diagnostics.max_timings_per_hook,
            record_timings=config.diagnostics.record_timings,
            log_errors=config.dispatch.log_callback_errors,
        )

    # filters

    def add_filter(self, name: str, fn: HookCallback, priority: int | None = None) -> None:
        self._filters.add(name, fn, priority)

    def remove_filter(self, name: str, fn: HookCallback, priority: int | None = None) -> None:
        self._filters.remove(name, fn, priority)

    async def apply_filters(self, name: str, value: T, *args: Any) -> T:
        entries = self._filters.matching(name)
        if not entries:
            return value
        return await self._dispatcher.run_async(entries, name, args, is_filter=True, value=value)

    def apply_filters_sync(self, name: str, value: T, *args: Any) -> T:
        entries = self._filters.matching(name)
        if not entries:
            return value
        return self._dispatcher.run_sync(entries, name, args, is_filter=True, value=value)

    # actions

    def add_action(self, name: str, fn: HookCallback, priority: int | None = None) -> None:
        self._actions.add(name, fn, priority)

    def remove_action(self, name: str, fn: HookCallback, priority: int | None = None) -> None:
        self._actions.remove(name, fn, priority)

    async def do_action(self, name: str, *args: Any) -> None:
        entries = self._actions.matching(name)
        if not entries:
            return
        await self._dispatcher.run_async(entries, name, args, is_filter=False)

    def do_action_sync(self, name: str, *args: Any) -> None:
        entries = self._actions.matching(name)
        if not entries:
            return
        self._dispatcher.run_sync(entries, name, args, is_filter=False)

    # utils

    def has_filter(self, name: str | None = None, fn: HookCallback | None = None) -> bool | int:
        return self._filters.has(name, fn)

    def has_action(self, name: str | None = None, fn: HookCallback | None = None) -> bool | int:
        return self._actions.has(name, fn)

    def remove_all_callbacks(self, priority: int | None = None) -> None:
        self._actions.remove_all(priority)
        self._filters.remove_all(priority)

    def current_priority(self) -> int | Literal[False]:
        return self._dispatcher.current_priority()

    def hook_names(self, kind: HookKind | None = None) -> list[str]:
        """Registered patterns, exact and wildcard, in first-registration order."""
        if kind == HookKind.ACTION:
            return self._actions.names()
        if kind == HookKind.FILTER:
            return self._filters.names()
        names = self._actions.names()
        names.extend(name for name in self._filters.names() if name not in names)
        return names

    # unified registration

    def on(
        self,
        name: str,
        fn: HookCallback,
        opts: OnOptions | Mapping[str, Any] | None = None,
        *,
        kind: HookKind | str | None = None,
        priority: int | None = None,
    ) -> Disposer:
        if opts is not None:
            if not isinstance(opts, OnOptions):
                opts = OnOptions.model_validate(opts)
            kind = kind if kind is not None else opts.kind
            priority = priority if priority is not None else opts.priority
        resolved = HookKind(kind) if kind is not None else detect_kind(name)
        registry = self._filters if resolved == HookKind.FILTER else self._actions
        entry = registry.add(name, fn, priority)
        return Disposer(self, registry, entry)

    def off(self, disposer: Callable[[], Any] | None) -> None:
        if not callable(disposer):
            logger.debug("Ignoring non-callable disposer %r", disposer)
            return
        if isinstance(disposer, Disposer) and disposer.engine is not self:
            logger.debug("Ignoring disposer owned by another engine: %r", disposer)
            return
        try:
            disposer()
        except Exception:
            logger.warning("Hook disposer %r failed", disposer, exc_info=True)

    def once_action(self, name: str, fn: HookCallback, priority: int | None = None) -> Disposer:
        disposer: Disposer | None = None

        def once(*args: Any) -> Any:
            if disposer is None or disposer.disposed:
                return None
            disposer()
            return fn(*args)

        once.__qualname__ = f"once({getattr(fn, '__qualname__', repr(fn))})"
        entry = self._actions.add(name, once, priority)
        disposer = Disposer(self, self._actions, entry)
        return disposer

    # diagnostics

    @property
    def diagnostics(self) -> HookDiagnostics:
        return self._diagnostics

    def reset_diagnostics(self) -> None:
        self._diagnostics.reset()

    def _count_callbacks(self, kind: HookKind | None) -> int:
        if kind == HookKind.ACTION:
            return self._actions.count()
        if kind == HookKind.FILTER:
            return self._filters.count()
        return self._actions.count() + self._filters.count()
