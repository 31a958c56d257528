"""Single-segment wildcard matching for hook names."""

from __future__ import annotations

import re
from collections.abc import Iterable
from functools import lru_cache

WILDCARD = "*"
_DELIMITER_RE = re.compile(r"([.:])")


def is_wildcard(pattern: str) -> bool:
    return WILDCARD in pattern


@lru_cache(maxsize=2048)
def split_segments(name: str) -> tuple[str, ...]:
    """Split a hook name into tokens, keeping the `.`/`:` delimiters in place.

    `db.messages.create:action:before` ->
    ('db', '.', 'messages', '.', 'create', ':', 'action', ':', 'before')
    """
    return tuple(_DELIMITER_RE.split(name))


@lru_cache(maxsize=8192)
def pattern_matches(pattern: str, name: str) -> bool:
    """Structural match where a bare `*` token stands for exactly one non-empty token.

    Delimiters must line up one-for-one, so a wildcard never spans a `.` or `:`.
    A token that mixes text and `*` is compared literally.
    """
    if pattern == name:
        return True
    if not is_wildcard(pattern):
        return False

    pattern_parts = split_segments(pattern)
    name_parts = split_segments(name)
    if len(pattern_parts) != len(name_parts):
        return False

    for expected, actual in zip(pattern_parts, name_parts):
        if expected == WILDCARD:
            if not actual or actual in (".", ":"):
                return False
            continue
        if expected != actual:
            return False
    return True


def match_patterns(name: str, patterns: Iterable[str]) -> list[str]:
    return [pattern for pattern in patterns if pattern_matches(pattern, name)]
