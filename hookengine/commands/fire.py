"""Dispatch one hook against the configured plugins."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from typing import Any

from hookengine.commands.common import load_config, parse_json_value
from hookengine.hooks import HookEngine, detect_kind
from hookengine.models import DispatchReport, HookKind
from hookengine.plugins import PluginLoader

logger = logging.getLogger(__name__)


def _dispatch(engine: HookEngine, name: str, kind: HookKind, value: Any, extra: list[Any], sync: bool) -> Any:
    if kind == HookKind.FILTER:
        if sync:
            return engine.apply_filters_sync(name, value, *extra)
        return asyncio.run(engine.apply_filters(name, value, *extra))

    args = extra if value is None else [value, *extra]
    if sync:
        engine.do_action_sync(name, *args)
    else:
        asyncio.run(engine.do_action(name, *args))
    return None


def run(args: argparse.Namespace) -> int:
    kind = HookKind(args.kind) if args.kind else detect_kind(args.name)
    value = parse_json_value(args.value)
    extra = [parse_json_value(raw) for raw in args.arg]

    config = load_config(args)
    engine = HookEngine.from_config(config)
    loader = PluginLoader(engine, strict=config.plugins.strict)
    loaded = loader.load_all([*config.plugins.modules, *args.plugin])

    try:
        result = _dispatch(engine, args.name, kind, value, extra, args.sync)
        report = DispatchReport(
            hook=args.name,
            kind=kind,
            sync=args.sync,
            result=result,
            callbacks=engine.diagnostics.callbacks(kind),
            stats=engine.diagnostics.summary(),
        )
    finally:
        loader.unload_all()

    print(json.dumps(report.model_dump(), indent=2, default=str))
    logger.info("Dispatched %s %s through %s plugin(s)", kind.value, args.name, len(loaded) or "no")
    return 0
