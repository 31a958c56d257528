"""Per-hook timing and error counters."""

from __future__ import annotations

from collections import deque
from collections.abc import Callable, Mapping
from types import MappingProxyType

from hookengine.models import HookKind, HookStats

CallbackCounter = Callable[[HookKind | None], int]


class HookDiagnostics:
    """Observational counters kept beside the registry.

    Recording is a single append or increment; nothing here may raise into a
    dispatch loop. `reset()` clears the maps in place so views handed out
    earlier stay valid.
    """

    def __init__(
        self,
        counter: CallbackCounter | None = None,
        *,
        max_timings_per_hook: int = 0,
        record_timings: bool = True,
    ) -> None:
        self._counter = counter
        self._max_timings = max_timings_per_hook if max_timings_per_hook > 0 else None
        self.record_timings = record_timings
        self._timings: dict[str, deque[float]] = {}
        self._errors: dict[str, int] = {}

    @property
    def timings(self) -> Mapping[str, deque[float]]:
        return MappingProxyType(self._timings)

    @property
    def errors(self) -> Mapping[str, int]:
        return MappingProxyType(self._errors)

    def record_timing(self, name: str, duration_ms: float) -> None:
        if not self.record_timings:
            return
        samples = self._timings.get(name)
        if samples is None:
            samples = self._timings[name] = deque(maxlen=self._max_timings)
        samples.append(duration_ms)

    def record_error(self, name: str) -> None:
        self._errors[name] = self._errors.get(name, 0) + 1

    def error_count(self, name: str) -> int:
        return self._errors.get(name, 0)

    def callbacks(self, kind: HookKind | str | None = None) -> int:
        if self._counter is None:
            return 0
        return self._counter(HookKind(kind) if kind is not None else None)

    def reset(self) -> None:
        self._timings.clear()
        self._errors.clear()

    def summary(self) -> list[HookStats]:
        stats: list[HookStats] = []
        for name in sorted(set(self._timings) | set(self._errors)):
            samples = self._timings.get(name) or ()
            total = float(sum(samples))
            count = len(samples)
            stats.append(
                HookStats(
                    name=name,
                    samples=count,
                    total_ms=round(total, 4),
                    avg_ms=round(total / count, 4) if count else 0.0,
                    max_ms=round(max(samples), 4) if count else 0.0,
                    errors=self._errors.get(name, 0),
                )
            )
        return stats
