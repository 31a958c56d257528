"""Ordered callback storage for one dispatch family (actions or filters)."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Iterator

from hookengine.models import DEFAULT_PRIORITY, CallbackEntry, HookCallback
from hookengine.patterns import is_wildcard, pattern_matches

logger = logging.getLogger(__name__)


class CallbackRegistry:
    """Callbacks keyed by the literal pattern they were registered under.

    Exact names live in a dict of lists; wildcard registrations live in a single
    list and are matched against the concrete name at dispatch time. The id
    sequence can be shared between registries so ordering stays global.
    """

    def __init__(
        self,
        default_priority: int = DEFAULT_PRIORITY,
        sequence: Iterator[int] | None = None,
    ) -> None:
        self.default_priority = default_priority
        self._sequence = sequence or itertools.count(1)
        self._exact: dict[str, list[CallbackEntry]] = {}
        self._wildcards: list[CallbackEntry] = []

    def add(self, name: str, fn: HookCallback, priority: int | None = None) -> CallbackEntry:
        resolved = self.default_priority if priority is None else priority
        entry = CallbackEntry(fn=fn, priority=resolved, id=next(self._sequence), name=name)
        if is_wildcard(name):
            self._wildcards.append(entry)
        else:
            self._exact.setdefault(name, []).append(entry)
        logger.debug("Registered %s on %s (priority=%s, id=%s)", entry.describe(), name, resolved, entry.id)
        return entry

    def remove(self, name: str, fn: HookCallback, priority: int | None = None) -> int:
        bucket = self._wildcards if is_wildcard(name) else self._exact.get(name)
        if not bucket:
            return 0
        for index, entry in enumerate(bucket):
            if entry.name != name or entry.fn is not fn:
                continue
            if priority is not None and entry.priority != priority:
                continue
            del bucket[index]
            self._prune(name)
            return 1
        return 0

    def discard(self, entry: CallbackEntry) -> bool:
        bucket = self._wildcards if is_wildcard(entry.name) else self._exact.get(entry.name)
        if not bucket:
            return False
        for index, existing in enumerate(bucket):
            if existing is entry:
                del bucket[index]
                self._prune(entry.name)
                return True
        return False

    def has(self, name: str | None = None, fn: HookCallback | None = None) -> bool | int:
        if not name:
            return bool(self._wildcards) or any(self._exact.values())
        if fn is not None:
            for entry in self._exact.get(name, []):
                if entry.fn is fn:
                    return entry.priority
            for entry in self._wildcards:
                if entry.name == name and entry.fn is fn:
                    return entry.priority
            return False
        if self._exact.get(name):
            return True
        return any(pattern_matches(entry.name, name) for entry in self._wildcards)

    def remove_all(self, priority: int | None = None) -> None:
        if priority is None:
            self._exact.clear()
            self._wildcards.clear()
            return
        for name in list(self._exact):
            kept = [entry for entry in self._exact[name] if entry.priority != priority]
            if kept:
                self._exact[name] = kept
            else:
                del self._exact[name]
        self._wildcards[:] = [entry for entry in self._wildcards if entry.priority != priority]

    def matching(self, name: str) -> list[CallbackEntry]:
        """Fresh, sorted snapshot of every entry that applies to `name`."""
        matched = list(self._exact.get(name, ()))
        matched.extend(entry for entry in self._wildcards if pattern_matches(entry.name, name))
        matched.sort(key=lambda entry: entry.sort_key)
        return matched

    def names(self) -> list[str]:
        patterns = list(self._exact)
        for entry in self._wildcards:
            if entry.name not in patterns:
                patterns.append(entry.name)
        return patterns

    def count(self) -> int:
        return sum(len(entries) for entries in self._exact.values()) + len(self._wildcards)

    def _prune(self, name: str) -> None:
        if name in self._exact and not self._exact[name]:
            del self._exact[name]
