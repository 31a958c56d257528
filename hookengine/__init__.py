"""In-process action/filter hook engine."""

from hookengine.hooks import Disposer, HookEngine, detect_kind
from hookengine.lifecycle import HookScope, get_hook_engine, reset_diagnostics
from hookengine.models import DEFAULT_PRIORITY, CallbackEntry, HookKind, OnOptions

__all__ = [
    "DEFAULT_PRIORITY",
    "CallbackEntry",
    "Disposer",
    "HookEngine",
    "HookKind",
    "HookScope",
    "OnOptions",
    "detect_kind",
    "get_hook_engine",
    "reset_diagnostics",
]
