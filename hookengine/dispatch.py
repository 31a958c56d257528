"""Callback chain execution for actions and filters, sync and async."""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from contextvars import ContextVar
from functools import partial
from typing import Any, Literal

from hookengine.diagnostics import HookDiagnostics
from hookengine.models import DEFAULT_PRIORITY, CallbackEntry

logger = logging.getLogger(__name__)

# (dispatcher id, priority) frames; lives in the task context so concurrent
# dispatches on separate tasks never see each other's frames.
_PRIORITY_FRAMES: ContextVar[tuple[tuple[int, int], ...]] = ContextVar("hookengine_priority_frames", default=())


class Dispatcher:
    """Runs a resolved callback snapshot in order, isolating every failure."""

    def __init__(
        self,
        diagnostics: HookDiagnostics,
        *,
        default_priority: int = DEFAULT_PRIORITY,
        log_errors: bool = True,
    ) -> None:
        self.diagnostics = diagnostics
        self.default_priority = default_priority
        self.log_errors = log_errors
        self._pending: set[asyncio.Future[Any]] = set()

    @property
    def priority_stack(self) -> list[int]:
        owner = id(self)
        return [priority for frame_owner, priority in _PRIORITY_FRAMES.get() if frame_owner == owner]

    def current_priority(self) -> int | Literal[False]:
        owner = id(self)
        for frame_owner, priority in reversed(_PRIORITY_FRAMES.get()):
            if frame_owner == owner:
                return priority
        return False

    @property
    def pending(self) -> int:
        """Fire-and-forget tasks started by sync dispatch that have not settled yet."""
        return len(self._pending)

    async def run_async(
        self,
        entries: Sequence[CallbackEntry],
        name: str,
        args: tuple[Any, ...],
        *,
        is_filter: bool,
        value: Any = None,
    ) -> Any:
        with self._frame(entries):
            for entry in entries:
                self._set_priority(entry.priority)
                start = time.perf_counter()
                try:
                    if is_filter:
                        result = entry.fn(value, *args)
                        if inspect.isawaitable(result):
                            result = await result
                        value = result
                    else:
                        result = entry.fn(*args)
                        if inspect.isawaitable(result):
                            await result
                except asyncio.CancelledError:
                    # Only a cancellation aimed at the dispatching task propagates.
                    task = asyncio.current_task()
                    if task is not None and task.cancelling():
                        raise
                    self._record_failure(name, entry, is_filter)
                except Exception:
                    self._record_failure(name, entry, is_filter)
                finally:
                    self.diagnostics.record_timing(name, (time.perf_counter() - start) * 1000.0)
        return value

    def run_sync(
        self,
        entries: Sequence[CallbackEntry],
        name: str,
        args: tuple[Any, ...],
        *,
        is_filter: bool,
        value: Any = None,
    ) -> Any:
        with self._frame(entries):
            for entry in entries:
                self._set_priority(entry.priority)
                start = time.perf_counter()
                try:
                    if is_filter:
                        # An awaitable returned here becomes the next value as-is.
                        value = entry.fn(value, *args)
                    else:
                        result = entry.fn(*args)
                        if inspect.isawaitable(result):
                            self._detach(name, entry, result)
                except Exception:
                    self._record_failure(name, entry, is_filter)
                finally:
                    self.diagnostics.record_timing(name, (time.perf_counter() - start) * 1000.0)
        return value

    @contextmanager
    def _frame(self, entries: Sequence[CallbackEntry]) -> Iterator[None]:
        first = entries[0].priority if entries else self.default_priority
        token = _PRIORITY_FRAMES.set(_PRIORITY_FRAMES.get() + ((id(self), first),))
        try:
            yield
        finally:
            _PRIORITY_FRAMES.reset(token)

    def _set_priority(self, priority: int) -> None:
        frames = _PRIORITY_FRAMES.get()
        _PRIORITY_FRAMES.set(frames[:-1] + ((id(self), priority),))

    def _record_failure(self, name: str, entry: CallbackEntry, is_filter: bool) -> None:
        self.diagnostics.record_error(name)
        if self.log_errors:
            logger.error(
                "Error in %s %r from callback %s",
                "filter" if is_filter else "action",
                name,
                entry.describe(),
                exc_info=True,
            )

    def _detach(self, name: str, entry: CallbackEntry, awaitable: Any) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            if inspect.iscoroutine(awaitable):
                awaitable.close()
            logger.warning(
                "Dropped awaitable returned by %s on %r: sync dispatch outside an event loop",
                entry.describe(),
                name,
            )
            return

        future = asyncio.ensure_future(awaitable)
        self._pending.add(future)
        future.add_done_callback(partial(self._settle, name, entry))

    def _settle(self, name: str, entry: CallbackEntry, future: asyncio.Future[Any]) -> None:
        self._pending.discard(future)
        if future.cancelled():
            return
        exc = future.exception()
        if exc is None:
            return
        self.diagnostics.record_error(name)
        if self.log_errors:
            logger.error(
                "Error in detached action %r from callback %s",
                name,
                entry.describe(),
                exc_info=exc,
            )
