"""CLI parser construction."""

from __future__ import annotations

import argparse

from hookengine.commands.common import add_config_flags, add_kind_flag


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hookengine", description="Action/filter hook engine tooling")
    parser.add_argument("--log-level", default="INFO", help="Logging level (DEBUG, INFO, WARNING, ERROR)")

    sub = parser.add_subparsers(dest="command", required=True)

    catalog = sub.add_parser("catalog", aliases=["list"], help="List well-known hook names")
    add_kind_flag(catalog, "Only list hooks of this kind")
    catalog.add_argument("--prefix", default=None, help="Only list hooks starting with this prefix")
    catalog.add_argument("--json", action="store_true", help="Emit a JSON object of name -> kind")

    fire = sub.add_parser("fire", aliases=["dispatch"], help="Load plugins and dispatch one hook")
    fire.add_argument("name", help="Hook name, e.g. ui.chat.message:filter:outgoing")
    fire.add_argument("--value", default=None, help="Initial filter value as JSON")
    fire.add_argument("--arg", action="append", default=[], help="Extra callback argument as JSON (repeatable)")
    fire.add_argument("--plugin", action="append", default=[], help="Plugin module to load (repeatable)")
    fire.add_argument("--sync", action="store_true", help="Use the synchronous dispatcher")
    add_kind_flag(fire, "Dispatch family; inferred from the hook name when omitted")
    add_config_flags(fire)

    check = sub.add_parser("check", aliases=["validate"], help="Check a hook name against the catalog")
    check.add_argument("name", help="Hook name to check")

    return parser
