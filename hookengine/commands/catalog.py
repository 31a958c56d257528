"""List well-known hook names."""

from __future__ import annotations

import argparse
import json

from hookengine.catalog import KNOWN_HOOKS, list_hooks
from hookengine.models import HookKind


def run(args: argparse.Namespace) -> int:
    kind = HookKind(args.kind) if args.kind else None
    names = list_hooks(kind=kind, prefix=args.prefix)
    if args.json:
        print(json.dumps({name: KNOWN_HOOKS[name].value for name in names}, indent=2))
        return 0
    for name in names:
        print(f"{KNOWN_HOOKS[name].value:<7} {name}")
    return 0
