"""CLI entrypoint for hook catalog inspection and ad-hoc dispatch."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Callable

from hookengine.commands import catalog, check, fire
from hookengine.commands.common import normalize_command
from hookengine.commands.parser import build_parser
from hookengine.errors import HookEngineError
from hookengine.logging_utils import configure_logging

logger = logging.getLogger(__name__)

COMMANDS: dict[str, Callable[[argparse.Namespace], int]] = {
    "catalog": catalog.run,
    "fire": fire.run,
    "check": check.run,
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    command = COMMANDS.get(normalize_command(args.command))
    if command is None:
        parser.print_help()
        return 1

    try:
        return command(args)
    except (ValueError, HookEngineError) as exc:
        logger.error("%s failed: %s", normalize_command(args.command), exc)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
