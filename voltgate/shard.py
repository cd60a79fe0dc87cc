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
import math
import time
import typing

import aiohttp

from . import utils
from .cache import GenericCache
from .core import ULIDOr, resolve_id, __version__ as version
from .dispatch import EventRegistry
from .enums import ShardState
from .errors import (
    VoltgateError,
    ShardError,
    SocketError,
    TransportError,
    ConnectError,
    ShardClosedError,
    InvalidData,
)
from .events import (
    BaseEvent,
    RawEvent,
    ErrorEvent,
    ProtocolErrorEvent,
    AuthenticatedEvent,
    ReadyEvent,
)
from .parser import Parser

if typing.TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from .channel import TextChannel
    from .dispatch import EventController

    E = typing.TypeVar('E', bound=BaseEvent)
    F = typing.TypeVar('F')

_L = logging.getLogger(__name__)

DEFAULT_URL: typing.Final[str] = 'wss://ws.revolt.chat/?version=1&format=json'
DEFAULT_SHARD_USER_AGENT: typing.Final[str] = f'voltgate Shard client ({version})'

_CLOSE_MESSAGE_TYPES: typing.Final[tuple[aiohttp.WSMsgType, ...]] = (
    aiohttp.WSMsgType.CLOSE,
    aiohttp.WSMsgType.CLOSING,
    aiohttp.WSMsgType.CLOSED,
)


class Socket(typing.Protocol):
    """The transport the shard talks over. :class:`aiohttp.ClientWebSocketResponse` satisfies this protocol."""

    @property
    def closed(self) -> bool: ...

    @property
    def close_code(self) -> int | None: ...

    async def send_str(self, data: str, /) -> None: ...

    async def receive(self) -> aiohttp.WSMessage: ...

    async def close(self, *, code: int = ...) -> bool: ...


def _process(event: BaseEvent, /) -> bool:
    return event.process()


class Shard:
    """Implements the event stream client.

    The shard keeps a single WebSocket connection alive, decodes incoming frames
    into typed events, applies their effects to :attr:`cache` and publishes them
    on :attr:`events`.

    Parameters
    ----------
    token: :class:`str`
        The authentication token.
    url: :class:`str`
        The WebSocket URL to connect to. Defaults to :data:`DEFAULT_URL`.
    bot: :class:`bool`
        Whether the token belongs to bot account. Defaults to ``True``.
    cache: Optional[:class:`.GenericCache`]
        The cache to populate. A cache with default limits is created if not provided.
    dialer: Optional[Callable[[:class:`str`, Dict[:class:`str`, :class:`str`]], Awaitable[:class:`Socket`]]]
        The function that opens the transport, given the URL and handshake headers.
        Defaults to :meth:`aiohttp.ClientSession.ws_connect`.
    session: Optional[:class:`aiohttp.ClientSession`]
        The session used by default dialer. A session is created, and owned by the shard, if not provided.
    events: Optional[:class:`.EventRegistry`]
        The registry to publish events on.
    json: Optional[:class:`.JSONCodec`]
        The codec for frames.
    logger: Optional[:class:`logging.Logger`]
        The logger to use.
    heartbeat_interval: :class:`float`
        The duration in seconds between pings. Defaults to 30.
    reconnect_delay: :class:`float`
        The duration in seconds to sleep before reconnecting. Defaults to 3.
    user_agent: Optional[:class:`str`]
        The HTTP user agent used when connecting to WebSocket.

    Attributes
    ----------
    cache: :class:`.GenericCache`
        The cache.
    events: :class:`.EventRegistry`
        The event channels.
    parser: :class:`.Parser`
        The frame decoder.
    state: :class:`.ShardState`
        The connection state.
    """

    __slots__ = (
        '_closed',
        '_close_event',
        '_dialer',
        '_heartbeat_sequence',
        '_heartbeat_task',
        '_json',
        '_last_ping',
        '_last_pong',
        '_logger',
        '_open_future',
        '_owns_session',
        '_reader_task',
        '_session',
        '_socket',
        '_write_lock',
        'bot',
        'cache',
        'events',
        'heartbeat_interval',
        'parser',
        'reconnect_delay',
        'state',
        'token',
        'url',
        'user_agent',
    )

    def __init__(
        self,
        token: str,
        *,
        url: str = DEFAULT_URL,
        bot: bool = True,
        cache: GenericCache | None = None,
        dialer: Callable[[str, dict[str, str]], Awaitable[Socket]] | None = None,
        session: aiohttp.ClientSession | None = None,
        events: EventRegistry | None = None,
        json: utils.JSONCodec | None = None,
        logger: logging.Logger | None = None,
        heartbeat_interval: float = 30.0,
        reconnect_delay: float = 3.0,
        user_agent: str | None = None,
    ) -> None:
        if token is None:
            raise TypeError('Token must be provided')
        if not url.startswith(('ws://', 'wss://')):
            raise ValueError(f'Expected ws:// or wss:// URL, got {url!r}')
        if heartbeat_interval <= 0:
            raise ValueError('Heartbeat interval must be positive')
        if reconnect_delay < 0:
            raise ValueError('Reconnect delay cannot be negative')

        self._closed: bool = False
        self._close_event: asyncio.Event = asyncio.Event()
        self._dialer: Callable[[str, dict[str, str]], Awaitable[Socket]] = dialer or self._ws_connect
        self._heartbeat_sequence: int = 0
        self._heartbeat_task: asyncio.Task[None] | None = None
        self._json: utils.JSONCodec = utils._resolve_codec(json)
        self._last_ping: float | None = None
        self._last_pong: float | None = None
        self._logger: logging.Logger = logger or _L
        self._open_future: asyncio.Future[None] | None = None
        self._owns_session: bool = session is None
        self._reader_task: asyncio.Task[None] | None = None
        self._session: aiohttp.ClientSession | None = session
        self._socket: Socket | None = None
        self._write_lock: asyncio.Lock = asyncio.Lock()
        self.bot: bool = bot
        self.cache: GenericCache = GenericCache() if cache is None else cache
        self.events: EventRegistry = EventRegistry() if events is None else events
        self.heartbeat_interval: float = heartbeat_interval
        self.parser: Parser = Parser()
        self.reconnect_delay: float = reconnect_delay
        self.state: ShardState = ShardState.disconnected
        self.token: str = token
        self.url: str = url
        self.user_agent: str = user_agent or DEFAULT_SHARD_USER_AGENT

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} url={self.url!r} state={self.state!r}>'

    def is_closed(self) -> bool:
        """:class:`bool`: Whether the shard was closed by the user."""
        return self._closed

    @property
    def latency(self) -> float:
        """:class:`float`: The duration in seconds between last ping and its acknowledgement.

        This is ``nan`` if no acknowledged ping exists yet.
        """
        if self._last_ping is None or self._last_pong is None or self._last_pong < self._last_ping:
            return math.nan
        return self._last_pong - self._last_ping

    @property
    def socket(self) -> Socket:
        """:class:`Socket`: The current WebSocket connection."""
        if self._socket is None:
            raise TypeError('No websocket')
        return self._socket

    def with_credentials(self, token: str, *, bot: bool = True) -> None:
        """Modifies the credentials used on next authentication.

        Parameters
        ----------
        token: :class:`str`
            The authentication token.
        bot: :class:`bool`
            Whether the token belongs to bot account or not.
        """
        self.token = token
        self.bot = bot

    def on(self, event: type[E], /) -> Callable[[F], F]:
        """A decorator that registers the function as subscriber of event type.

        Example
        -------

        .. code-block:: python3

            @shard.on(voltgate.MessageCreateEvent)
            async def on_message(event):
                print(event.message.content)
        """

        def decorator(func: F, /) -> F:
            self.events[event].listen(func)  # type: ignore
            return func

        return decorator

    def get_headers(self) -> dict[str, str]:
        """Dict[:class:`str`, :class:`str`]: The headers to use when connecting to WebSocket."""
        return {'User-Agent': self.user_agent}

    async def _ws_connect(self, url: str, headers: dict[str, str], /) -> Socket:
        session = self._session
        if session is None:
            session = self._session = aiohttp.ClientSession()
        return await session.ws_connect(url, headers=headers)

    async def cleanup(self) -> None:
        """|coro|

        Closes the aiohttp session, if it was created by the shard.
        """
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    # Sending

    async def send(self, payload: dict[str, typing.Any], /) -> None:
        """|coro|

        Sends a frame over WebSocket.

        Raises
        ------
        ShardClosedError
            The shard is not connected.
        TransportError
            Writing to WebSocket failed.
        """
        socket = self._socket
        if socket is None or self._closed:
            raise ShardClosedError('The shard is not connected')

        data = self._json.dumps(payload)
        if self._logger.isEnabledFor(logging.DEBUG) and payload.get('type') != 'Authenticate':
            self._logger.debug('Sending %s', data)

        async with self._write_lock:
            try:
                await socket.send_str(data)
            except (aiohttp.ClientError, OSError, RuntimeError) as exc:
                raise TransportError(f'Failed to send frame: {exc}') from exc

    async def authenticate(self) -> None:
        """|coro|

        Authenticates the currently connected WebSocket. This is called right after successful WebSocket handshake.
        """
        await self.send({'type': 'Authenticate', 'token': self.token})

    async def ping(self) -> None:
        """|coro|

        Pings the WebSocket.
        """
        self._heartbeat_sequence += 1
        await self.send({'type': 'Ping', 'data': self._heartbeat_sequence})
        self._last_ping = time.monotonic()

    async def begin_typing(self, channel: ULIDOr[TextChannel], /) -> None:
        """|coro|

        Begins typing in a channel.

        Parameters
        ----------
        channel: ULIDOr[:class:`.TextChannel`]
            The channel to begin typing in.
        """
        await self.send({'type': 'BeginTyping', 'channel': resolve_id(channel)})

    async def end_typing(self, channel: ULIDOr[TextChannel], /) -> None:
        """|coro|

        Ends typing in a channel.

        Parameters
        ----------
        channel: ULIDOr[:class:`.TextChannel`]
            The channel to end typing in.
        """
        await self.send({'type': 'EndTyping', 'channel': resolve_id(channel)})

    # Lifecycle

    async def open(self) -> None:
        """|coro|

        Connects to WebSocket, authenticates and waits for ready.

        Once this returns, the shard keeps reconnecting in background until :meth:`close` is called.
        The connection failures after that are published as :class:`.ErrorEvent`.

        Raises
        ------
        ShardClosedError
            The shard was closed.
        ConnectError
            Connecting to WebSocket failed.
        SocketError
            The server rejected authentication.
        ShardError
            The connection broke before ready.
        """
        if self._closed:
            raise ShardClosedError('The shard is closed')
        if self._reader_task is not None:
            raise VoltgateError('The connection is already open')

        future: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._open_future = future

        def on_ready(_: ReadyEvent, /) -> None:
            if not future.done():
                future.set_result(None)

        def on_protocol_error(event: ProtocolErrorEvent, /) -> None:
            if not future.done():
                future.set_exception(SocketError(event.error_id))

        def on_error(event: ErrorEvent, /) -> None:
            if isinstance(event.error, ShardError) and not future.done():
                future.set_exception(event.error)

        subscriptions = (
            self.events[ReadyEvent].listen(on_ready),
            self.events[ProtocolErrorEvent].listen(on_protocol_error),
            self.events[ErrorEvent].listen(on_error),
        )
        try:
            await self._connect()
            self._reader_task = asyncio.create_task(self._read_loop())
            await future
        except BaseException:
            await self._teardown()
            raise
        finally:
            for subscription in subscriptions:
                subscription.delete()
            self._open_future = None
            # not awaited when connecting failed
            if future.done() and not future.cancelled():
                future.exception()

    async def _connect(self) -> None:
        self.state = ShardState.connecting
        self._logger.debug('Connecting to %s', self.url)
        try:
            socket = await self._dialer(self.url, self.get_headers())
        except Exception as exc:
            self.state = ShardState.disconnected
            raise ConnectError(self.url, exc) from exc

        if self._closed:
            await socket.close(code=aiohttp.WSCloseCode.OK)
            raise ShardClosedError('The shard was closed while connecting')

        self._socket = socket
        self._last_ping = None
        self._last_pong = None
        self.state = ShardState.authenticating
        self._logger.info('Connected to %s, authenticating', self.url)

        self._stop_heartbeat()
        self._heartbeat_task = asyncio.create_task(self._heartbeat())
        try:
            await self.authenticate()
        except TransportError:
            self._stop_heartbeat()
            self._socket = None
            if not socket.closed:
                try:
                    await socket.close(code=aiohttp.WSCloseCode.OK)
                except (aiohttp.ClientError, OSError, RuntimeError) as exc:
                    self._logger.warning('Failed to close websocket', exc_info=exc)
            if not self._closed:
                self.state = ShardState.disconnected
            raise

    async def _heartbeat(self) -> None:
        while not self._closed:
            try:
                await asyncio.wait_for(self._close_event.wait(), timeout=self.heartbeat_interval)
            except asyncio.TimeoutError:
                pass
            else:
                return

            if self._last_ping is not None and (self._last_pong is None or self._last_pong < self._last_ping):
                self._logger.warning('Ping #%i was not acknowledged, stopping heartbeat', self._heartbeat_sequence)
                return

            try:
                await self.ping()
            except (ShardClosedError, TransportError) as exc:
                self._logger.warning('Failed to send ping: %s', exc)
                return

    def _stop_heartbeat(self) -> None:
        task = self._heartbeat_task
        self._heartbeat_task = None
        if task is not None and not task.done():
            task.cancel()

    async def _receive(self, socket: Socket, /) -> dict[str, typing.Any] | None:
        try:
            message = await socket.receive()
        except (aiohttp.ClientError, OSError, RuntimeError) as exc:
            raise TransportError(f'Failed to read frame: {exc}') from exc

        if message.type in _CLOSE_MESSAGE_TYPES:
            raise TransportError('WebSocket was closed', code=socket.close_code)

        if message.type is aiohttp.WSMsgType.ERROR:
            raise TransportError(f'WebSocket failed: {message.data}')

        if message.type not in (aiohttp.WSMsgType.TEXT, aiohttp.WSMsgType.BINARY):
            self._logger.debug('Received unknown message type: %s, ignoring', message.type)
            return None

        try:
            payload = self._json.loads(message.data)
        except ValueError as exc:
            raise InvalidData(f'Received malformed frame: {exc}', payload=message.data) from exc

        if not isinstance(payload, dict) or not isinstance(payload.get('type'), str):
            raise InvalidData('Received frame without type', payload=payload)
        return payload

    async def _read_loop(self) -> None:
        while not self._closed:
            socket = self._socket
            if socket is None:
                return
            try:
                payload = await self._receive(socket)
            except InvalidData as exc:
                self._logger.warning('%s', exc)
                self._dispatch_error(exc)
                continue
            except TransportError as exc:
                if self._closed:
                    return
                self._logger.error('Lost connection: %s', exc)
                self._dispatch_error(exc)
                await self._reconnect()
                continue

            if payload is None:
                continue
            try:
                self.handle(payload)
            except Exception as exc:
                error = InvalidData(f'Failed to handle {payload.get("type")} frame: {exc!r}', payload=payload)
                self._logger.warning('%s', error)
                self._dispatch_error(error)

    async def _reconnect(self) -> None:
        self._stop_heartbeat()
        socket = self._socket
        self._socket = None
        if socket is not None and not socket.closed:
            try:
                await socket.close()
            except Exception as exc:
                self._logger.warning('Failed to close websocket', exc_info=exc)

        while not self._closed:
            self.state = ShardState.disconnected
            self._logger.info('Reconnecting in %.2f seconds', self.reconnect_delay)
            await asyncio.sleep(self.reconnect_delay)
            if self._closed:
                return
            try:
                await self._connect()
            except ShardClosedError:
                return
            except (ConnectError, TransportError) as exc:
                self._logger.error('Reconnect failed: %s', exc)
                self._dispatch_error(exc)
            else:
                return

    async def _teardown(self) -> None:
        self._stop_heartbeat()
        reader = self._reader_task
        self._reader_task = None
        if reader is not None and reader is not asyncio.current_task() and not reader.done():
            reader.cancel()
            try:
                await reader
            except asyncio.CancelledError:
                pass

        socket = self._socket
        self._socket = None
        if socket is not None and not socket.closed:
            try:
                await socket.close(code=aiohttp.WSCloseCode.OK)
            except (aiohttp.ClientError, OSError, RuntimeError) as exc:
                self._logger.warning('Failed to close websocket', exc_info=exc)
        if not self._closed:
            self.state = ShardState.disconnected

    async def close(self) -> None:
        """|coro|

        Closes the connection. The shard never reconnects after this.

        Calling this more than once is harmless.
        """
        if self._closed:
            return
        self._closed = True
        self.state = ShardState.closing
        self._close_event.set()
        self._logger.debug('Closing the shard')

        future = self._open_future
        if future is not None and not future.done():
            future.set_exception(ShardClosedError('The shard was closed while opening'))

        socket = self._socket
        if socket is not None and not socket.closed:
            async with self._write_lock:
                try:
                    await socket.close(code=aiohttp.WSCloseCode.OK)
                except (aiohttp.ClientError, OSError, RuntimeError) as exc:
                    self._logger.warning('Failed to close websocket', exc_info=exc)

        await self._teardown()
        await self.cleanup()
        self.state = ShardState.closed

    async def wait_closed(self) -> None:
        """|coro|

        Waits until :meth:`close` is called.
        """
        await self._close_event.wait()

    # Dispatching

    def _dispatch_error(self, error: Exception, /) -> None:
        self.events[ErrorEvent].emit_async(ErrorEvent(shard=self, error=error))

    def dispatch(self, event: BaseEvent, /) -> None:
        """Publishes the event. Its cache effect is applied before any subscriber observes it."""
        controller: EventController[typing.Any] = self.events[type(event)]
        controller.emit_then_continue(event, _process)

    def handle(self, payload: dict[str, typing.Any], /) -> None:
        """Handles a decoded frame.

        Unknown frame types are ignored. Frames that cannot be decoded are published as :class:`.ErrorEvent`.

        Parameters
        ----------
        payload: Dict[:class:`str`, Any]
            The frame.
        """
        type = payload.get('type')
        if self._logger.isEnabledFor(logging.DEBUG) and type != 'Ready':
            self._logger.debug('Received %s', payload)

        self.events[RawEvent].emit_async(RawEvent(shard=self, payload=payload))

        if type == 'Bulk':
            frames = payload.get('v')
            if not isinstance(frames, list):
                self._dispatch_error(InvalidData('Received Bulk frame without frames', payload=payload))
                return
            for frame in frames:
                if isinstance(frame, dict):
                    self.handle(frame)
                else:
                    self._dispatch_error(InvalidData('Received non-object frame in Bulk', payload=frame))
            return

        if type == 'Pong':
            self._last_pong = time.monotonic()
            return

        if type == 'Error':
            error_id = payload.get('error', 'LabelMe')
            self._logger.error('Server reported an error: %s', error_id)
            self.events[ProtocolErrorEvent].emit_async(ProtocolErrorEvent(shard=self, error_id=error_id))
            return

        if type == 'NotFound':
            self._logger.error('Session was not found')
            self.events[ProtocolErrorEvent].emit_async(ProtocolErrorEvent(shard=self, error_id='InvalidSession'))
            return

        parser = self.parser.get_event_parser(type)  # type: ignore
        if parser is None:
            self._logger.debug('Received unknown event: %s, ignoring', type)
            return

        try:
            event = parser(self, payload)
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            error = InvalidData(f'Failed to parse {type} frame: {exc!r}', payload=payload)
            self._logger.warning('%s', error)
            self._dispatch_error(error)
            return

        if isinstance(event, AuthenticatedEvent):
            self._logger.info('Authenticated')
        elif isinstance(event, ReadyEvent):
            self.state = ShardState.ready
            self._logger.info(
                'Ready with %i users, %i servers and %i channels',
                len(event.users),
                len(event.servers),
                len(event.channels),
            )
        self.dispatch(event)


__all__ = (
    'DEFAULT_URL',
    'DEFAULT_SHARD_USER_AGENT',
    'Socket',
    'Shard',
)
