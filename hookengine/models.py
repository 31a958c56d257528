"""Core domain models for the hook engine."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_PRIORITY = 10

HookCallback = Callable[..., Any]


class HookKind(str, Enum):
    ACTION = "action"
    FILTER = "filter"


@dataclass(frozen=True, eq=False)
class CallbackEntry:
    """One registration: callback, priority, insertion id and the pattern it was registered under.

    Entries compare by identity so two registrations of the same callable stay distinct.
    """

    fn: HookCallback
    priority: int
    id: int
    name: str

    @property
    def sort_key(self) -> tuple[int, int]:
        return (self.priority, self.id)

    def describe(self) -> str:
        return getattr(self.fn, "__qualname__", None) or repr(self.fn)


class OnOptions(BaseModel):
    model_config = ConfigDict(extra="forbid")

    kind: HookKind | None = None
    priority: int | None = None


class HookStats(BaseModel):
    """Per-hook aggregate over the retained timing samples.

    `samples` is one per callback invocation (not per dispatch). It is bounded by
    `max_timings_per_hook` and stays 0 when timing is disabled; `errors` is always counted.
    """

    model_config = ConfigDict(extra="forbid")

    name: str
    samples: int = 0
    total_ms: float = 0.0
    avg_ms: float = 0.0
    max_ms: float = 0.0
    errors: int = 0


class DispatchReport(BaseModel):
    """Result of a CLI-driven dispatch, serialized as JSON."""

    model_config = ConfigDict(extra="forbid")

    hook: str
    kind: HookKind
    sync: bool = False
    result: Any = None
    callbacks: int = 0
    stats: list[HookStats] = Field(default_factory=list)
