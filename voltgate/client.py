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
import logging
import typing

from . import utils
from .autumn import Autumn
from .cache import GenericCache
from .core import UNDEFINED, UndefinedOr
from .dispatch import EventRegistry, Subscription
from .http import HTTPClient
from .shard import DEFAULT_URL, Shard

if typing.TYPE_CHECKING:
    from collections.abc import Callable

    from typing_extensions import Self

    from .events import BaseEvent

    E = typing.TypeVar('E', bound=BaseEvent)
    F = typing.TypeVar('F')

_L = logging.getLogger(__name__)


class Client:
    """A Revolt client.

    The client composes a :class:`.HTTPClient`, an :class:`.Autumn` file client and
    a :class:`.Shard`, all sharing one :class:`.GenericCache` and one :class:`.EventRegistry`.

    Parameters
    ----------
    token: :class:`str`
        The authentication token.
    bot: :class:`bool`
        Whether the token belongs to bot account. Defaults to ``True``.
    cache: Optional[:class:`.GenericCache`]
        The cache to use. Pass :meth:`.GenericCache.disabled` to turn caching off.
    http_base: Optional[:class:`str`]
        The base URL of REST API.
    autumn_base: Optional[:class:`str`]
        The base URL of file server.
    websocket_url: Optional[:class:`str`]
        The URL of event stream.
    heartbeat_interval: :class:`float`
        The duration in seconds between pings.
    reconnect_delay: :class:`float`
        The duration in seconds to wait before reconnecting.
    """

    __slots__ = (
        '_autumn',
        '_cache',
        '_events',
        '_http',
        '_shard',
        'closed',
    )

    def __init__(
        self,
        token: str,
        *,
        bot: bool = True,
        cache: GenericCache | None = None,
        http_base: str | None = None,
        autumn_base: str | None = None,
        websocket_url: str | None = None,
        heartbeat_interval: float = 30.0,
        reconnect_delay: float = 3.0,
    ) -> None:
        self.closed: bool = True
        self._cache: GenericCache = GenericCache() if cache is None else cache
        self._events: EventRegistry = EventRegistry()
        self._http: HTTPClient = HTTPClient(token, base=http_base, bot=bot)
        self._autumn: Autumn = Autumn(token, base=autumn_base, bot=bot, parser=self._http.parser)
        self._shard: Shard = Shard(
            token,
            url=websocket_url or DEFAULT_URL,
            bot=bot,
            cache=self._cache,
            events=self._events,
            heartbeat_interval=heartbeat_interval,
            reconnect_delay=reconnect_delay,
        )

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} closed={self.closed!r} shard={self._shard!r}>'

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, exc_type, exc_value, tb, /) -> None:
        await self.close()

    @property
    def autumn(self) -> Autumn:
        """:class:`.Autumn`: The file server client."""
        return self._autumn

    @property
    def cache(self) -> GenericCache:
        """:class:`.GenericCache`: The cache shared between shard and client."""
        return self._cache

    @property
    def events(self) -> EventRegistry:
        """:class:`.EventRegistry`: The event channels."""
        return self._events

    @property
    def http(self) -> HTTPClient:
        """:class:`.HTTPClient`: The REST client."""
        return self._http

    @property
    def shard(self) -> Shard:
        """:class:`.Shard`: The event stream client."""
        return self._shard

    @property
    def latency(self) -> float:
        """:class:`float`: The event stream latency in seconds. ``nan`` if unknown."""
        return self._shard.latency

    def with_credentials(self, token: str, *, bot: bool = True) -> None:
        """Modifies the credentials used by all underlying clients.

        Parameters
        ----------
        token: :class:`str`
            The authentication token.
        bot: :class:`bool`
            Whether the token belongs to bot account or not.
        """
        self._http.with_credentials(token, bot=bot)
        self._autumn.with_credentials(token, bot=bot)
        self._shard.with_credentials(token, bot=bot)

    def subscribe(self, event: type[E], callback: utils.MaybeAwaitableFunc[[E], None], /) -> Subscription[E]:
        """Subscribes to an event.

        Parameters
        ----------
        event: Type[E]
            The event to subscribe to.
        callback: MaybeAwaitableFunc[[E], None]
            The callback. Coroutine functions are scheduled as tasks.

        Returns
        -------
        :class:`.Subscription`
            The subscription. Call :meth:`.Subscription.delete` to stop receiving events.
        """
        return self._events[event].listen(callback)

    def listen(self, event: type[E], /) -> Callable[[F], F]:
        """A decorator that subscribes the function to an event.

        Example
        -------

        .. code-block:: python3

            @client.listen(voltgate.MessageCreateEvent)
            async def on_message(event):
                if event.message.content == '!ping':
                    await client.http.send_message(event.message.channel_id, 'Pong!')
        """

        def decorator(func: F, /) -> F:
            self._events[event].listen(func)  # type: ignore
            return func

        return decorator

    on = listen

    async def wait_for(
        self,
        event: type[E],
        /,
        *,
        check: Callable[[E], bool] | None = None,
        timeout: float | None = None,
    ) -> E:
        """|coro|

        Waits for a WebSocket event to be dispatched.

        This could be used to wait for a user to reply to a message,
        or to react to a message.

        The ``timeout`` parameter is passed onto :func:`asyncio.wait_for`. By default,
        it does not timeout. Note that this does propagate the
        :exc:`asyncio.TimeoutError` for you in case of timeout and is provided for
        ease of use.

        This function returns the **first event that meets the requirements**.

        Examples
        --------

        Waiting for a user reply: ::

            @client.on(voltgate.MessageCreateEvent)
            async def on_message(event):
                message = event.message
                if message.content.startswith('$greet'):
                    channel_id = message.channel_id
                    await client.http.send_message(channel_id, 'Say hello!')

                    def check(event):
                        return event.message.content == 'hello' and event.message.channel_id == channel_id

                    msg = await client.wait_for(voltgate.MessageCreateEvent, check=check)
                    await client.http.send_message(channel_id, f'Hello {msg.message.author_id}!')

        Parameters
        ----------
        event: Type[E]
            The event to wait for.
        check: Optional[Callable[[E], :class:`bool`]]
            A predicate to check what to wait for.
        timeout: Optional[:class:`float`]
            The number of seconds to wait before timing out and raising :exc:`asyncio.TimeoutError`.

        Raises
        ------
        asyncio.TimeoutError
            If a timeout is provided and it was reached.

        Returns
        -------
        E
            The event that satisfied the ``check``.
        """
        future: asyncio.Future[E] = asyncio.get_running_loop().create_future()

        def callback(value: E, /) -> None:
            if future.done():
                return
            if check is not None:
                try:
                    if not check(value):
                        return
                except Exception as exc:
                    future.set_exception(exc)
                    return
            future.set_result(value)

        subscription = self._events[event].listen(callback)
        try:
            return await asyncio.wait_for(future, timeout=timeout)
        finally:
            subscription.delete()

    async def start(self) -> None:
        """|coro|

        Connects to the event stream and waits until the client is closed.
        """
        self.closed = False
        await self._shard.open()
        await self._shard.wait_closed()

    async def close(self, *, http: bool = True) -> None:
        """|coro|

        Closes the event stream connection and, optionally, all HTTP sessions.
        """
        self.closed = True
        await self._shard.close()
        if http:
            await self._http.cleanup()
            await self._autumn.cleanup()

    def run(
        self,
        *,
        log_handler: UndefinedOr[logging.Handler | None] = UNDEFINED,
        log_formatter: UndefinedOr[logging.Formatter] = UNDEFINED,
        log_level: UndefinedOr[int] = UNDEFINED,
        root_logger: bool = False,
        asyncio_debug: bool = False,
    ) -> None:
        """A blocking call that abstracts away the event loop
        initialisation from you.

        If you want more control over the event loop then this
        function should not be used. Use :meth:`.start` coroutine.

        This function also sets up the logging library. This can be disabled
        by passing ``None`` to the ``log_handler`` parameter.

        Parameters
        -----------
        log_handler: Optional[:class:`logging.Handler`]
            The log handler to use for the library's logger. If this is ``None``
            then the library will not set up anything logging related.

            The default log handler if not provided is :class:`logging.StreamHandler`.
        log_formatter: :class:`logging.Formatter`
            The formatter to use with the given log handler. If not provided then it
            defaults to a color based logging formatter (if available).
        log_level: :class:`int`
            The default log level for the library's logger. Defaults to ``logging.INFO``.
        root_logger: :class:`bool`
            Whether to set up the root logger rather than the library logger.
            Defaults to ``False``.
        asyncio_debug: :class:`bool`
            Whether to run with asyncio debug mode enabled or not.
        """

        async def runner() -> None:
            try:
                await self.start()
            finally:
                if not self.closed:
                    await self.close()

        if log_handler is not None:
            utils.setup_logging(
                handler=log_handler,
                formatter=log_formatter,
                level=log_level,
                root=root_logger,
            )

        try:
            asyncio.run(runner(), debug=asyncio_debug)
        except KeyboardInterrupt:
            _L.info('Received keyboard interrupt, exiting')


__all__ = ('Client',)
