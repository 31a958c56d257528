import pytest

from hookengine.hooks import HookEngine
from hookengine.typed import HOOK_PAYLOADS, create_typed_hook_engine, payload_signature, typed_on


@pytest.mark.asyncio
async def test_typed_engine_delegates_to_wrapped_engine() -> None:
    engine = HookEngine()
    hooks = create_typed_hook_engine(engine)
    seen: list[dict] = []

    hooks.add_filter("ui.chat.message:filter:outgoing", lambda value: value.upper(), 10)
    hooks.add_filter("ui.chat.message:filter:outgoing", lambda value: value + "!", 20)
    def record(payload: dict) -> None:
        seen.append(payload)

    hooks.add_action("ai.chat.send:action:before", record)

    assert await hooks.apply_filters("ui.chat.message:filter:outgoing", "hello") == "HELLO!"
    assert hooks.apply_filters_sync("ui.chat.message:filter:outgoing", "hi") == "HI!"
    await hooks.do_action("ai.chat.send:action:before", {"modelId": "m", "user": {}, "assistant": {}})
    hooks.do_action_sync("ai.chat.send:action:before", {"modelId": "n", "user": {}, "assistant": {}})

    assert [payload["modelId"] for payload in seen] == ["m", "n"]
    assert engine.has_action("ai.chat.send:action:before", record) == 10
    assert hooks.diagnostics is engine.diagnostics


@pytest.mark.asyncio
async def test_typed_engine_registration_round_trip() -> None:
    engine = HookEngine()
    hooks = create_typed_hook_engine(engine)

    def veto(value: str) -> str | bool:
        return False if "secret" in value else value

    hooks.add_filter("ui.chat.message:filter:outgoing", veto)
    assert await hooks.apply_filters("ui.chat.message:filter:outgoing", "my secret") is False
    assert hooks.has_filter("ui.chat.message:filter:outgoing", veto) == 10

    hooks.remove_filter("ui.chat.message:filter:outgoing", veto)
    assert hooks.has_filter() is False

    dispose = hooks.on("notify:filter:before_store", lambda payload, ctx: payload)
    assert engine.has_filter("notify:filter:before_store") is True
    hooks.off(dispose)
    assert engine.has_filter() is False

    calls: list[int] = []
    hooks.once_action("ui.pane.blur:action", lambda payload: calls.append(payload))
    await hooks.do_action("ui.pane.blur:action", 1)
    await hooks.do_action("ui.pane.blur:action", 2)
    assert calls == [1]

    def on_error(payload: int) -> None:
        calls.append(payload)

    hooks.add_action("sync.error:action", on_error, 3)
    assert hooks.has_action("sync.error:action", on_error) == 3
    hooks.remove_action("sync.error:action", on_error)
    assert hooks.has_action("sync.error:action") is False
    hooks.remove_all_callbacks()
    assert hooks.current_priority() is False


def test_typed_on_registers_known_hook() -> None:
    engine = HookEngine()
    dispose = typed_on(engine).on("ui.chat.message:filter:incoming", lambda value, thread_id: value)

    assert engine.has_filter("ui.chat.message:filter:incoming") is True
    dispose()
    assert engine.has_filter("ui.chat.message:filter:incoming") is False


def test_payload_signatures() -> None:
    assert payload_signature("ui.chat.message:filter:incoming") == ("str", "str | None")
    assert payload_signature("unknown") is None
    assert all(signature for signature in HOOK_PAYLOADS.values())
