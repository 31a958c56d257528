"""Validate a hook name against the catalog."""

from __future__ import annotations

import argparse

from hookengine.catalog import is_known_hook, known_kind, suggest_similar
from hookengine.hooks import detect_kind
from hookengine.typed import payload_signature


def run(args: argparse.Namespace) -> int:
    name = args.name
    if is_known_hook(name):
        kind = known_kind(name)
        print(f"{name}: known {kind.value} hook")
        signature = payload_signature(name)
        if signature:
            print(f"  arguments: ({', '.join(signature)})")
        return 0

    print(f"{name}: unknown hook (would register as {detect_kind(name).value})")
    suggestions = suggest_similar(name)
    if suggestions:
        print("  did you mean:")
        for suggestion in suggestions:
            print(f"    {suggestion}")
    return 1
