from __future__ import annotations

import asyncio

import pytest
import voltgate


def test_listen_and_emit():
    controller: voltgate.EventController[int] = voltgate.EventController('numbers')
    received = []

    sub = controller.listen(received.append)
    assert sub.active
    assert controller.emit(1) == 1
    assert controller.emit(2) == 1
    assert received == [1, 2]


def test_subscription_ids_are_unique():
    controller: voltgate.EventController[int] = voltgate.EventController()
    subs = [controller.listen(lambda _: None) for _ in range(5)]
    assert len({s.id for s in subs}) == 5


def test_delete_is_idempotent():
    controller: voltgate.EventController[int] = voltgate.EventController()
    received = []

    sub = controller.listen(received.append)
    assert sub.delete() is True
    assert sub.delete() is False
    assert not sub.active

    assert controller.emit(1) == 0
    assert received == []


def test_self_removal_during_emit():
    controller: voltgate.EventController[str] = voltgate.EventController()
    calls = []

    def a(value: str, /) -> None:
        calls.append('a')

    def b(value: str, /) -> None:
        calls.append('b')
        sub_b.delete()

    def c(value: str, /) -> None:
        calls.append('c')

    controller.listen(a)
    sub_b = controller.listen(b)
    controller.listen(c)

    assert controller.emit('x') == 3
    assert sorted(calls) == ['a', 'b', 'c']

    calls.clear()
    assert controller.emit('y') == 2
    assert sorted(calls) == ['a', 'c']


def test_removing_another_subscription_skips_it():
    controller: voltgate.EventController[str] = voltgate.EventController()
    calls = []

    def first(value: str, /) -> None:
        calls.append('first')
        second_sub.delete()

    def second(value: str, /) -> None:
        calls.append('second')

    controller.listen(first)
    second_sub = controller.listen(second)

    controller.emit('x')
    assert calls == ['first']


def test_override_replaces_all():
    controller: voltgate.EventController[int] = voltgate.EventController()
    old = []
    new = []

    old_sub = controller.listen(old.append)
    controller.listen(old.append)
    controller.override(new.append)

    assert not old_sub.active
    assert len(controller) == 1
    controller.emit(7)
    assert old == []
    assert new == [7]


def test_callback_errors_do_not_propagate():
    controller: voltgate.EventController[int] = voltgate.EventController()
    received = []

    def broken(value: int, /) -> None:
        raise RuntimeError('boom')

    controller.listen(broken)
    controller.listen(received.append)

    assert controller.emit(1) == 2
    assert received == [1]


@pytest.mark.asyncio
async def test_coroutine_callbacks_are_scheduled():
    controller: voltgate.EventController[int] = voltgate.EventController()
    queue: asyncio.Queue[int] = asyncio.Queue()

    async def on_value(value: int, /) -> None:
        await queue.put(value * 2)

    controller.listen(on_value)
    controller.emit(21)

    assert await asyncio.wait_for(queue.get(), timeout=1) == 42


@pytest.mark.asyncio
async def test_emit_async_does_not_block():
    controller: voltgate.EventController[int] = voltgate.EventController()
    received = []

    controller.listen(received.append)
    controller.emit_async(1)
    assert received == []

    await asyncio.sleep(0)
    assert received == [1]


@pytest.mark.asyncio
async def test_emit_then_continue_runs_follow_up_first():
    controller: voltgate.EventController[int] = voltgate.EventController()
    state = {'value': 0}
    seen = []

    def follow_up(value: int, /) -> None:
        state['value'] = value

    controller.listen(lambda value: seen.append(state['value']))
    controller.emit_then_continue(5, follow_up)
    assert seen == []
    assert state['value'] == 0

    await asyncio.sleep(0)
    assert seen == [5]


@pytest.mark.asyncio
async def test_emit_then_continue_without_subscribers():
    controller: voltgate.EventController[int] = voltgate.EventController()
    done = []

    controller.emit_then_continue(1, done.append)
    await asyncio.sleep(0)
    assert done == [1]


def test_registry_creates_controllers_lazily():
    registry = voltgate.EventRegistry()
    assert registry.get(int) is None
    assert int not in registry

    controller = registry[int]
    assert registry[int] is controller
    assert registry.get(int) is controller
    assert controller.name == 'int'

    received = []
    registry.listen(int, received.append)
    controller.emit(3)
    assert received == [3]
