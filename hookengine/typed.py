"""Statically typed façade over `HookEngine`.

Every method delegates straight to the wrapped engine; the only difference is
what a type checker sees. Known hook names are `Literal` aliases and the chat
filters carry per-name overloads so `apply_filters()` returns the right type.
Unknown names remain accepted as plain `str` so plugins can define their own
hooks.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from typing import Any, Literal, NotRequired, TypedDict, TypeVar, overload

from hookengine.diagnostics import HookDiagnostics
from hookengine.hooks import Disposer, HookEngine
from hookengine.models import HookKind, OnOptions

T = TypeVar("T")

ActionHookName = Literal[
    "ai.chat.send:action:before",
    "ai.chat.send:action:after",
    "ai.chat.stream:action:delta",
    "ai.chat.stream:action:reasoning",
    "ai.chat.stream:action:complete",
    "ai.chat.stream:action:error",
    "ai.chat.retry:action:before",
    "ai.chat.retry:action:after",
    "ui.pane.active:action",
    "ui.pane.blur:action",
    "ui.pane.switch:action",
    "ui.pane.thread:action:changed",
    "ui.pane.doc:action:changed",
    "ui.pane.doc:action:saved",
    "ui.pane.msg:action:sent",
    "ui.pane.msg:action:received",
    "sync.push:action:before",
    "sync.push:action:after",
    "sync.error:action",
    "sync.stats:action",
    "notify:action:push",
    "notify:action:read",
    "notify:action:clicked",
    "notify:action:cleared",
]

FilterHookName = Literal[
    "ui.chat.message:filter:outgoing",
    "ui.chat.message:filter:incoming",
    "ai.chat.model:filter:select",
    "ai.chat.messages:filter:input",
    "ui.pane.thread:filter:select",
    "ui.pane.doc:filter:select",
    "files.attach:filter:input",
    "notify:filter:before_store",
]

KnownHookName = ActionHookName | FilterHookName


class AiSendBeforePayload(TypedDict):
    threadId: NotRequired[str]
    modelId: str
    user: dict[str, Any]
    assistant: dict[str, Any]
    messagesCount: NotRequired[int]


class AiSendAfterTimings(TypedDict):
    startedAt: float
    endedAt: float
    durationMs: float


class AiSendAfterPayload(TypedDict, total=False):
    threadId: str
    request: dict[str, Any]
    response: dict[str, Any]
    timings: AiSendAfterTimings
    aborted: bool


class AiStreamDeltaPayload(TypedDict):
    threadId: NotRequired[str]
    assistantId: str
    streamId: str
    deltaLength: int
    totalLength: int
    chunkIndex: int


class AiStreamCompletePayload(TypedDict):
    threadId: NotRequired[str]
    assistantId: str
    streamId: str
    totalLength: int
    reasoningLength: NotRequired[int]
    fileHashes: NotRequired[str | None]


class AiStreamErrorPayload(TypedDict, total=False):
    threadId: str
    streamId: str
    error: Any
    aborted: bool


class FilesAttachInputPayload(TypedDict):
    file: Any
    name: str
    mime: str
    size: int
    kind: Literal["image", "pdf"]


class NotificationCreatePayload(TypedDict):
    type: str
    title: str
    body: NotRequired[str]
    threadId: NotRequired[str]
    documentId: NotRequired[str]
    actions: NotRequired[list[dict[str, Any]]]


# Return `False` from these filters to veto the operation.
ChatOutgoingFilterReturn = str | Literal[False]
ChatIncomingFilterReturn = str
FilesAttachFilterReturn = FilesAttachInputPayload | Literal[False]
NotifyBeforeStoreReturn = NotificationCreatePayload | Literal[False]

# Argument tuple per known hook name (documentation and tooling only).
HOOK_PAYLOADS: dict[str, tuple[str, ...]] = {
    "ai.chat.send:action:before": ("AiSendBeforePayload",),
    "ai.chat.send:action:after": ("AiSendAfterPayload",),
    "ai.chat.stream:action:delta": ("str", "AiStreamDeltaPayload"),
    "ai.chat.stream:action:complete": ("AiStreamCompletePayload",),
    "ai.chat.stream:action:error": ("AiStreamErrorPayload",),
    "ui.chat.message:filter:outgoing": ("str",),
    "ui.chat.message:filter:incoming": ("str", "str | None"),
    "ai.chat.model:filter:select": ("str",),
    "files.attach:filter:input": ("FilesAttachInputPayload | False",),
    "notify:action:push": ("NotificationCreatePayload",),
    "notify:action:read": ("{id: str, readAt: int}",),
    "notify:action:cleared": ("{count: int}",),
    "notify:filter:before_store": ("NotificationCreatePayload | False", "{source: str}"),
}


def payload_signature(name: str) -> tuple[str, ...] | None:
    return HOOK_PAYLOADS.get(name)


OutgoingFilter = Callable[[str], ChatOutgoingFilterReturn | Awaitable[ChatOutgoingFilterReturn]]
IncomingFilter = Callable[[str, str | None], str | Awaitable[str]]
ModelSelectFilter = Callable[[str], str | Awaitable[str]]
AttachFilter = Callable[
    [FilesAttachInputPayload | Literal[False]],
    FilesAttachFilterReturn | Awaitable[FilesAttachFilterReturn],
]


class TypedHookEngine:
    def __init__(self, engine: HookEngine) -> None:
        self.engine = engine

    @property
    def diagnostics(self) -> HookDiagnostics:
        return self.engine.diagnostics

    # actions

    def add_action(self, name: ActionHookName | str, callback: Callable[..., Any], priority: int | None = None) -> None:
        self.engine.add_action(name, callback, priority)

    def remove_action(self, name: ActionHookName | str, callback: Callable[..., Any], priority: int | None = None) -> None:
        self.engine.remove_action(name, callback, priority)

    async def do_action(self, name: ActionHookName | str, *args: Any) -> None:
        await self.engine.do_action(name, *args)

    def do_action_sync(self, name: ActionHookName | str, *args: Any) -> None:
        self.engine.do_action_sync(name, *args)

    # filters

    @overload
    def add_filter(
        self, name: Literal["ui.chat.message:filter:outgoing"], callback: OutgoingFilter, priority: int | None = None
    ) -> None: ...

    @overload
    def add_filter(
        self, name: Literal["ui.chat.message:filter:incoming"], callback: IncomingFilter, priority: int | None = None
    ) -> None: ...

    @overload
    def add_filter(
        self, name: Literal["ai.chat.model:filter:select"], callback: ModelSelectFilter, priority: int | None = None
    ) -> None: ...

    @overload
    def add_filter(
        self, name: Literal["files.attach:filter:input"], callback: AttachFilter, priority: int | None = None
    ) -> None: ...

    @overload
    def add_filter(self, name: str, callback: Callable[..., Any], priority: int | None = None) -> None: ...

    def add_filter(self, name: str, callback: Callable[..., Any], priority: int | None = None) -> None:
        self.engine.add_filter(name, callback, priority)

    def remove_filter(self, name: FilterHookName | str, callback: Callable[..., Any], priority: int | None = None) -> None:
        self.engine.remove_filter(name, callback, priority)

    @overload
    async def apply_filters(
        self, name: Literal["ui.chat.message:filter:outgoing"], value: str
    ) -> ChatOutgoingFilterReturn: ...

    @overload
    async def apply_filters(
        self, name: Literal["ui.chat.message:filter:incoming"], value: str, thread_id: str | None = None
    ) -> ChatIncomingFilterReturn: ...

    @overload
    async def apply_filters(self, name: Literal["ai.chat.model:filter:select"], value: str) -> str: ...

    @overload
    async def apply_filters(
        self, name: Literal["files.attach:filter:input"], value: FilesAttachInputPayload | Literal[False]
    ) -> FilesAttachFilterReturn: ...

    @overload
    async def apply_filters(self, name: str, value: T, *args: Any) -> T: ...

    async def apply_filters(self, name: str, value: Any, *args: Any) -> Any:
        return await self.engine.apply_filters(name, value, *args)

    def apply_filters_sync(self, name: FilterHookName | str, value: T, *args: Any) -> T:
        return self.engine.apply_filters_sync(name, value, *args)

    # unified

    def on(
        self,
        name: KnownHookName | str,
        callback: Callable[..., Any],
        opts: OnOptions | Mapping[str, Any] | None = None,
        *,
        kind: HookKind | str | None = None,
        priority: int | None = None,
    ) -> Disposer:
        return self.engine.on(name, callback, opts, kind=kind, priority=priority)

    def off(self, disposer: Callable[[], Any]) -> None:
        self.engine.off(disposer)

    def once_action(self, name: ActionHookName | str, callback: Callable[..., Any], priority: int | None = None) -> Disposer:
        return self.engine.once_action(name, callback, priority)

    # passthrough

    def has_action(self, name: ActionHookName | str | None = None, fn: Callable[..., Any] | None = None) -> bool | int:
        return self.engine.has_action(name, fn)

    def has_filter(self, name: FilterHookName | str | None = None, fn: Callable[..., Any] | None = None) -> bool | int:
        return self.engine.has_filter(name, fn)

    def remove_all_callbacks(self, priority: int | None = None) -> None:
        self.engine.remove_all_callbacks(priority)

    def current_priority(self) -> int | Literal[False]:
        return self.engine.current_priority()


def create_typed_hook_engine(engine: HookEngine) -> TypedHookEngine:
    return TypedHookEngine(engine)


class TypedOn:
    """Minimal wrapper that only types `on()` for known hook names."""

    def __init__(self, engine: HookEngine) -> None:
        self._engine = engine

    def on(self, key: KnownHookName, fn: Callable[..., Any], opts: OnOptions | None = None) -> Disposer:
        return self._engine.on(key, fn, opts)


def typed_on(engine: HookEngine) -> TypedOn:
    return TypedOn(engine)
