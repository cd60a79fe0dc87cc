"""
The MIT License (MIT)

Copyright (c) 2024-present MCausc78

Permission is hereby granted, free of charge, to any person obtaining a
copy of this software and associated documentation files (the "Software"),
to deal in the Software without restriction, including without limitation
the rights to use, copy, modify, merge, publish, distribute, sublicense,
and/or sell copies of the Software, and to permit persons to whom the
Software is furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in
all copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS
OR IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING
FROM, OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER
DEALINGS IN THE SOFTWARE.
"""

from __future__ import annotations

import asyncio
from inspect import isawaitable
import logging
import typing

if typing.TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from . import utils

_L = logging.getLogger(__name__)

T = typing.TypeVar('T')


class Subscription(typing.Generic[T]):
    """Represents a registration of callback on :class:`EventController`.

    Attributes
    ----------
    controller: :class:`EventController`
        The controller this subscription belongs to.
    id: :class:`int`
        The subscription's sequence number, unique within controller.
    callback: MaybeAwaitableFunc[[T], None]
        The callback.
    """

    __slots__ = (
        'controller',
        'id',
        'callback',
    )

    def __init__(
        self,
        *,
        controller: EventController[T],
        id: int,
        callback: utils.MaybeAwaitableFunc[[T], None],
    ) -> None:
        self.controller: EventController[T] = controller
        self.id: int = id
        self.callback: utils.MaybeAwaitableFunc[[T], None] = callback

    def __repr__(self) -> str:
        return f'<Subscription id={self.id} controller={self.controller.name!r} active={self.active}>'

    def __call__(self, arg: T, /) -> utils.MaybeAwaitable[None]:
        return self.callback(arg)

    @property
    def active(self) -> bool:
        """:class:`bool`: Whether the subscription is still registered."""
        return self.controller._subscriptions.get(self.id) is self

    def delete(self) -> bool:
        """Removes the subscription.

        Calling this more than once is harmless.

        Returns
        -------
        :class:`bool`
            Whether the subscription was registered before this call.
        """
        subscriptions = self.controller._subscriptions
        if subscriptions.get(self.id) is self:
            del subscriptions[self.id]
            return True
        return False

    remove = delete


class EventController(typing.Generic[T]):
    """A multicast channel for values of a single event type.

    Callbacks may be plain functions or coroutine functions. Awaitables returned by callbacks
    are scheduled as independent tasks, so :meth:`emit` never blocks on them.

    Exceptions raised by callbacks are logged and never propagate to the emitter.

    Parameters
    ----------
    name: Optional[:class:`str`]
        The channel's name, used in logs.
    """

    __slots__ = (
        '_next_id',
        '_subscriptions',
        '_tasks',
        'name',
    )

    def __init__(self, name: str | None = None) -> None:
        self._next_id: int = 0
        self._subscriptions: dict[int, Subscription[T]] = {}
        self._tasks: set[asyncio.Task[None]] = set()
        self.name: str = name or 'unnamed'

    def __repr__(self) -> str:
        return f'<EventController name={self.name!r} subscriptions={len(self._subscriptions)}>'

    def __len__(self) -> int:
        return len(self._subscriptions)

    @property
    def subscriptions(self) -> list[Subscription[T]]:
        """List[:class:`Subscription`]: The currently registered subscriptions."""
        return list(self._subscriptions.values())

    def listen(self, callback: utils.MaybeAwaitableFunc[[T], None], /) -> Subscription[T]:
        """Registers a callback.

        Parameters
        ----------
        callback: MaybeAwaitableFunc[[T], None]
            The function to call on every subsequent emission.

        Returns
        -------
        :class:`Subscription`
            The subscription handle.
        """
        self._next_id += 1
        sub = Subscription(controller=self, id=self._next_id, callback=callback)
        self._subscriptions[sub.id] = sub
        return sub

    def override(self, callback: utils.MaybeAwaitableFunc[[T], None], /) -> Subscription[T]:
        """Replaces all registered callbacks with a single one.

        Returns
        -------
        :class:`Subscription`
            The subscription handle of new callback.
        """
        self._subscriptions.clear()
        return self.listen(callback)

    def clear(self) -> None:
        """Removes all subscriptions."""
        self._subscriptions.clear()

    async def _await_callback(self, aw: Awaitable[typing.Any], /) -> None:
        try:
            await aw
        except Exception:
            _L.exception('Subscriber for %s raised an exception', self.name)

    def _invoke(self, sub: Subscription[T], value: T, /) -> None:
        try:
            result = sub.callback(value)
        except Exception:
            _L.exception('Subscriber for %s raised an exception', self.name)
            return

        if isawaitable(result):
            task = asyncio.ensure_future(self._await_callback(result))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    def emit(self, value: T, /) -> int:
        """Invokes every registered callback with the value, on the calling context.

        Callbacks may remove their own or other subscriptions during emission.
        A subscription removed before its turn is skipped.

        Returns
        -------
        :class:`int`
            The number of callbacks invoked.
        """
        subscriptions = self._subscriptions
        called = 0
        for sub in list(subscriptions.values()):
            if subscriptions.get(sub.id) is not sub:
                continue
            self._invoke(sub, value)
            called += 1
        if _L.isEnabledFor(logging.DEBUG):
            _L.debug('Emitted %s to %i subscribers', self.name, called)
        return called

    def emit_async(self, value: T, /) -> asyncio.Handle:
        """Schedules :meth:`emit` on the running event loop and returns immediately.

        The caller does not observe completion or errors of the callbacks.

        Returns
        -------
        :class:`asyncio.Handle`
            The scheduled callback's handle.
        """
        return asyncio.get_running_loop().call_soon(self.emit, value)

    def _run_then_emit(self, value: T, follow_up: Callable[[T], typing.Any], /) -> None:
        try:
            follow_up(value)
        except Exception:
            _L.exception('Processing %s failed', self.name)
        self.emit(value)

    def emit_then_continue(self, value: T, follow_up: Callable[[T], typing.Any], /) -> asyncio.Handle:
        """Schedules ``follow_up(value)`` and then :meth:`emit` as one unit on the running event loop.

        ``follow_up`` always runs to completion before any callback observes the value,
        and it runs even when nobody is subscribed.

        Parameters
        ----------
        value: T
            The value to publish.
        follow_up: Callable[[T], Any]
            The internal state mutation to run first (usually cache update).

        Returns
        -------
        :class:`asyncio.Handle`
            The scheduled callback's handle.
        """
        return asyncio.get_running_loop().call_soon(self._run_then_emit, value, follow_up)


class EventRegistry:
    """A mapping of event types to their :class:`EventController`.

    Controllers are created on first access.
    """

    __slots__ = ('_controllers',)

    def __init__(self) -> None:
        self._controllers: dict[type[typing.Any], EventController[typing.Any]] = {}

    def __repr__(self) -> str:
        return f'<EventRegistry controllers={len(self._controllers)}>'

    def __contains__(self, event: object, /) -> bool:
        return event in self._controllers

    def __getitem__(self, event: type[T], /) -> EventController[T]:
        try:
            return self._controllers[event]
        except KeyError:
            controller = self._controllers[event] = EventController(event.__name__)
            return controller

    def get(self, event: type[T], /) -> EventController[T] | None:
        """Optional[:class:`EventController`]: Returns controller for the event type, without creating one."""
        return self._controllers.get(event)

    def listen(self, event: type[T], callback: utils.MaybeAwaitableFunc[[T], None], /) -> Subscription[T]:
        """Shortcut for ``registry[event].listen(callback)``."""
        return self[event].listen(callback)


__all__ = (
    'Subscription',
    'EventController',
    'EventRegistry',
)
