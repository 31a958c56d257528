"""Catalog of well-known hook names.

Hook names follow `domain.entity.operation:kind:phase`. The engine accepts any
string; this catalog only exists so tooling can list, validate and suggest
names. DB hooks are generated from the table/operation/phase families.
"""

from __future__ import annotations

import difflib
from itertools import product

from hookengine.models import HookKind

A = HookKind.ACTION
F = HookKind.FILTER

CORE_HOOKS: dict[str, HookKind] = {
    "ui.chat.message:filter:outgoing": F,
    "ui.chat.message:filter:incoming": F,
    "ai.chat.model:filter:select": F,
    "ai.chat.messages:filter:input": F,
    "ai.chat.send:action:before": A,
    "ai.chat.send:action:after": A,
    "ai.chat.stream:action:delta": A,
    "ai.chat.stream:action:reasoning": A,
    "ai.chat.stream:action:complete": A,
    "ai.chat.stream:action:error": A,
    "ai.chat.retry:action:before": A,
    "ai.chat.retry:action:after": A,
    "ui.pane.active:action": A,
    "ui.pane.blur:action": A,
    "ui.pane.switch:action": A,
    "ui.pane.thread:filter:select": F,
    "ui.pane.thread:action:changed": A,
    "ui.pane.doc:filter:select": F,
    "ui.pane.doc:action:changed": A,
    "ui.pane.doc:action:saved": A,
    "ui.pane.msg:action:sent": A,
    "ui.pane.msg:action:received": A,
    "files.attach:filter:input": F,
    "sync.bootstrap:action:start": A,
    "sync.bootstrap:action:progress": A,
    "sync.bootstrap:action:complete": A,
    "sync.pull:action:received": A,
    "sync.pull:action:applied": A,
    "sync.pull:action:error": A,
    "sync.pull:action:after": A,
    "sync.subscription:action:statusChange": A,
    "sync.conflict:action:detected": A,
    "sync.op:action:captured": A,
    "sync.push:action:before": A,
    "sync.push:action:after": A,
    "sync.error:action": A,
    "sync.retry:action": A,
    "sync.queue:action:full": A,
    "sync.rescan:action:starting": A,
    "sync.rescan:action:progress": A,
    "sync.rescan:action:completed": A,
    "sync.stats:action": A,
    "notify:action:push": A,
    "notify:action:read": A,
    "notify:action:clicked": A,
    "notify:action:cleared": A,
    "notify:filter:before_store": F,
}

DB_ENTITIES = ("messages", "threads", "documents", "files", "projects", "posts", "prompts", "attachments", "kv")
DB_OPERATIONS = (
    "create",
    "upsert",
    "update",
    "delete",
    "get",
    "search",
    "byProject",
    "children",
    "fork",
    "normalize",
    "list",
)
DB_PHASES = ("before", "after")
DB_FILTER_PHASES = ("input", "output")
DB_DELETE_TYPES = ("soft", "hard")

_DB_EXTRA_HOOKS: dict[str, HookKind] = {
    "db.files.refchange:action:after": A,
    "db.kv.upsertByName:action:after": A,
    "db.kv.deleteByName:action:hard:before": A,
    "db.kv.deleteByName:action:hard:after": A,
    "db.messages.files.validate:filter:hashes": F,
    "db.kv.getByName:filter:output": F,
    "db.kv.upsertByName:filter:input": F,
    "db.threads.searchByTitle:filter:output": F,
    "db.posts.all:filter:output": F,
}


def _check(value: str, allowed: tuple[str, ...], label: str) -> None:
    if value not in allowed:
        raise ValueError(f"Unknown DB {label} {value!r}; expected one of: {', '.join(allowed)}")


def db_action_hook(entity: str, operation: str, phase: str, delete_type: str | None = None) -> str:
    _check(entity, DB_ENTITIES, "entity")
    _check(operation, DB_OPERATIONS, "operation")
    _check(phase, DB_PHASES, "phase")
    if delete_type is None:
        return f"db.{entity}.{operation}:action:{phase}"
    if operation != "delete":
        raise ValueError("delete_type is only valid for the delete operation")
    _check(delete_type, DB_DELETE_TYPES, "delete type")
    return f"db.{entity}.delete:action:{delete_type}:{phase}"


def db_filter_hook(entity: str, operation: str, phase: str) -> str:
    _check(entity, DB_ENTITIES, "entity")
    _check(operation, DB_OPERATIONS, "operation")
    _check(phase, DB_FILTER_PHASES, "filter phase")
    return f"db.{entity}.{operation}:filter:{phase}"


def _build_db_hooks() -> dict[str, HookKind]:
    hooks: dict[str, HookKind] = {}
    for entity, operation in product(DB_ENTITIES, DB_OPERATIONS):
        for phase in DB_PHASES:
            hooks[db_action_hook(entity, operation, phase)] = A
        for phase in DB_FILTER_PHASES:
            hooks[db_filter_hook(entity, operation, phase)] = F
    for entity, delete_type, phase in product(DB_ENTITIES, DB_DELETE_TYPES, DB_PHASES):
        hooks[db_action_hook(entity, "delete", phase, delete_type)] = A
    hooks.update(_DB_EXTRA_HOOKS)
    return hooks


DB_HOOKS: dict[str, HookKind] = _build_db_hooks()

KNOWN_HOOKS: dict[str, HookKind] = {**CORE_HOOKS, **DB_HOOKS}


def is_known_hook(name: str) -> bool:
    return name in KNOWN_HOOKS


def known_kind(name: str) -> HookKind | None:
    return KNOWN_HOOKS.get(name)


def list_hooks(kind: HookKind | None = None, prefix: str | None = None) -> list[str]:
    return sorted(
        name
        for name, hook_kind in KNOWN_HOOKS.items()
        if (kind is None or hook_kind == kind) and (not prefix or name.startswith(prefix))
    )


def suggest_similar(name: str, limit: int = 5) -> list[str]:
    """Known names sharing the leading `domain.` prefix, closest first."""
    head = name.split(".", 1)[0] if "." in name else name.split(":", 1)[0]
    candidates = [known for known in KNOWN_HOOKS if known.startswith(f"{head}.") or known.startswith(f"{head}:")]
    if not candidates:
        candidates = list(KNOWN_HOOKS)
    return difflib.get_close_matches(name, candidates, n=limit, cutoff=0.5)
