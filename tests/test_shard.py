from __future__ import annotations

import asyncio
import json
import math
import typing

import aiohttp
import pytest
import voltgate

READY = {'type': 'Ready', 'users': [], 'servers': [], 'channels': [], 'members': [], 'emojis': []}


class Frame(typing.NamedTuple):
    type: aiohttp.WSMsgType
    data: typing.Any


class FakeSocket:
    def __init__(self, server: FakeServer, /) -> None:
        self.server = server
        self.incoming: asyncio.Queue[Frame] = asyncio.Queue()
        self.sent: list[dict[str, typing.Any]] = []
        self.closed = False
        self.close_code: int | None = None

    async def send_str(self, data: str, /) -> None:
        if self.closed:
            raise RuntimeError('socket is closed')
        payload = json.loads(data)
        self.sent.append(payload)
        self.server.on_frame(self, payload)

    async def receive(self) -> Frame:
        return await self.incoming.get()

    async def close(self, *, code: int = 1000) -> bool:
        if self.closed:
            return False
        self.closed = True
        self.close_code = code
        self.incoming.put_nowait(Frame(aiohttp.WSMsgType.CLOSED, None))
        return True

    def feed(self, payload: typing.Any, /) -> None:
        self.incoming.put_nowait(Frame(aiohttp.WSMsgType.TEXT, json.dumps(payload)))

    def feed_raw(self, data: str, /) -> None:
        self.incoming.put_nowait(Frame(aiohttp.WSMsgType.TEXT, data))

    def abort(self) -> None:
        self.closed = True
        self.close_code = 1006
        self.incoming.put_nowait(Frame(aiohttp.WSMsgType.CLOSED, None))


class FakeServer:
    def __init__(self, *, reply: list[dict[str, typing.Any]] | None = None, failures: int = 0) -> None:
        self.reply: list[dict[str, typing.Any]] = [{'type': 'Authenticated'}, READY] if reply is None else reply
        self.failures = failures
        self.sockets: list[FakeSocket] = []
        self.dials = 0
        self.headers: list[dict[str, str]] = []

    async def dial(self, url: str, headers: dict[str, str], /) -> FakeSocket:
        self.dials += 1
        self.headers.append(headers)
        if self.failures > 0:
            self.failures -= 1
            raise OSError('connection refused')
        socket = FakeSocket(self)
        self.sockets.append(socket)
        return socket

    def on_frame(self, socket: FakeSocket, payload: dict[str, typing.Any], /) -> None:
        if payload['type'] == 'Authenticate':
            for frame in self.reply:
                socket.feed(frame)


def make_shard(server: FakeServer, **kwargs: typing.Any) -> voltgate.Shard:
    kwargs.setdefault('reconnect_delay', 0)
    return voltgate.Shard('token', dialer=server.dial, **kwargs)


async def wait_until(predicate: typing.Callable[[], bool], *, timeout: float = 1) -> None:
    async def waiter() -> None:
        while not predicate():
            await asyncio.sleep(0.001)

    await asyncio.wait_for(waiter(), timeout=timeout)


def test_constructor_validation():
    with pytest.raises(ValueError):
        voltgate.Shard('token', url='https://example.com')
    with pytest.raises(ValueError):
        voltgate.Shard('token', heartbeat_interval=0)
    with pytest.raises(ValueError):
        voltgate.Shard('token', reconnect_delay=-1)

    shard = voltgate.Shard('token')
    assert shard.url == voltgate.DEFAULT_URL
    assert shard.state is voltgate.ShardState.disconnected
    assert math.isnan(shard.latency)


@pytest.mark.asyncio
async def test_open_reaches_ready():
    server = FakeServer()
    shard = make_shard(server)

    await shard.open()
    assert shard.state is voltgate.ShardState.ready
    assert server.sockets[0].sent[0] == {'type': 'Authenticate', 'token': 'token'}
    assert server.headers[0]['User-Agent'] == voltgate.DEFAULT_SHARD_USER_AGENT

    # listeners used by open() are gone
    assert len(shard.events[voltgate.ReadyEvent]) == 0
    assert len(shard.events[voltgate.ProtocolErrorEvent]) == 0
    assert len(shard.events[voltgate.ErrorEvent]) == 0

    await shard.close()
    assert shard.state is voltgate.ShardState.closed
    assert server.sockets[0].closed
    assert server.sockets[0].close_code == aiohttp.WSCloseCode.OK


@pytest.mark.asyncio
async def test_open_fails_on_protocol_error():
    server = FakeServer(reply=[{'type': 'Error', 'error': 'InvalidSession'}])
    shard = make_shard(server)

    with pytest.raises(voltgate.SocketError) as exc_info:
        await shard.open()
    assert exc_info.value.error_id == 'InvalidSession'
    assert server.sockets[0].closed
    assert len(shard.events[voltgate.ReadyEvent]) == 0
    assert shard.state is voltgate.ShardState.disconnected


@pytest.mark.asyncio
async def test_open_fails_on_not_found():
    server = FakeServer(reply=[{'type': 'NotFound'}])
    shard = make_shard(server)

    with pytest.raises(voltgate.SocketError) as exc_info:
        await shard.open()
    assert exc_info.value.error_id == 'InvalidSession'


@pytest.mark.asyncio
async def test_open_fails_when_dial_fails_and_can_be_retried():
    server = FakeServer(failures=1)
    shard = make_shard(server)

    with pytest.raises(voltgate.ConnectError):
        await shard.open()
    assert shard.state is voltgate.ShardState.disconnected

    await shard.open()
    assert shard.state is voltgate.ShardState.ready
    await shard.close()


@pytest.mark.asyncio
async def test_close_while_opening():
    server = FakeServer(reply=[])
    shard = make_shard(server)

    task = asyncio.create_task(shard.open())
    await wait_until(lambda: shard.state is voltgate.ShardState.authenticating)
    await shard.close()

    with pytest.raises(voltgate.ShardClosedError):
        await asyncio.wait_for(task, timeout=1)
    assert shard.state is voltgate.ShardState.closed
    assert server.sockets[0].closed
    assert len(shard.events[voltgate.ReadyEvent]) == 0


@pytest.mark.asyncio
async def test_open_twice_and_after_close():
    shard = make_shard(FakeServer())
    await shard.open()

    with pytest.raises(voltgate.VoltgateError):
        await shard.open()

    await shard.close()
    await shard.close()
    assert shard.is_closed()

    with pytest.raises(voltgate.ShardClosedError):
        await shard.open()


@pytest.mark.asyncio
async def test_send_without_connection():
    shard = voltgate.Shard('token')
    with pytest.raises(voltgate.ShardClosedError):
        await shard.begin_typing('01HZCHANNEL000000000000000')


@pytest.mark.asyncio
async def test_typing_frames():
    server = FakeServer()
    shard = make_shard(server)
    await shard.open()

    await shard.begin_typing('c1')
    await shard.end_typing('c1')
    assert server.sockets[0].sent[1:] == [
        {'type': 'BeginTyping', 'channel': 'c1'},
        {'type': 'EndTyping', 'channel': 'c1'},
    ]
    await shard.close()


@pytest.mark.asyncio
async def test_reconnects_after_abrupt_closure():
    server = FakeServer()
    shard = make_shard(server)
    ready = []
    errors = []
    shard.events[voltgate.ReadyEvent].listen(ready.append)
    shard.events[voltgate.ErrorEvent].listen(lambda event: errors.append(event.error))

    await shard.open()
    await wait_until(lambda: len(ready) == 1)

    server.sockets[0].abort()
    await wait_until(lambda: len(ready) == 2)

    assert server.dials == 2
    assert server.sockets[1].sent[0] == {'type': 'Authenticate', 'token': 'token'}
    assert shard.state is voltgate.ShardState.ready
    assert any(isinstance(e, voltgate.TransportError) for e in errors)

    await shard.close()


@pytest.mark.asyncio
async def test_reconnect_retries_failed_dials():
    server = FakeServer()
    shard = make_shard(server)
    ready = []
    shard.events[voltgate.ReadyEvent].listen(ready.append)

    await shard.open()
    server.failures = 2
    server.sockets[0].abort()

    await wait_until(lambda: len(ready) == 2)
    assert server.dials == 4
    await shard.close()


@pytest.mark.asyncio
async def test_reconnect_closes_socket_when_authentication_fails():
    server = FakeServer()
    shard = make_shard(server)
    ready = []
    shard.events[voltgate.ReadyEvent].listen(ready.append)
    await shard.open()

    reply = server.on_frame

    def on_frame(socket: FakeSocket, payload: dict[str, typing.Any], /) -> None:
        if socket is server.sockets[1]:
            raise RuntimeError('connection reset')
        reply(socket, payload)

    server.on_frame = on_frame  # type: ignore
    server.sockets[0].abort()

    await wait_until(lambda: len(ready) == 2)
    assert server.dials == 3
    assert server.sockets[1].closed
    assert not server.sockets[2].closed
    await shard.close()


@pytest.mark.asyncio
async def test_close_suppresses_reconnect():
    server = FakeServer()
    shard = make_shard(server)
    await shard.open()

    server.sockets[0].abort()
    await shard.close()
    for _ in range(10):
        await asyncio.sleep(0)

    assert server.dials == 1
    assert shard.state is voltgate.ShardState.closed


@pytest.mark.asyncio
async def test_malformed_frames_do_not_stop_reading():
    server = FakeServer()
    shard = make_shard(server)
    errors = []
    messages = []
    shard.events[voltgate.ErrorEvent].listen(lambda event: errors.append(event.error))
    shard.events[voltgate.MessageCreateEvent].listen(messages.append)

    await shard.open()
    socket = server.sockets[0]
    socket.feed_raw('{not json')
    socket.feed({'no': 'type'})
    socket.feed({'type': 'SomethingNew'})
    socket.feed({'type': 'Bulk', 'v': None})
    socket.feed({'type': 'Bulk', 'v': 'frames'})
    socket.feed({'type': 'MessageUpdate', 'id': 'm0', 'channel': 'c1', 'data': 'oops'})
    socket.feed({'type': 'Message', '_id': 'm0', 'channel': 'c1', 'author': 'u1', 'content': 'hi', 'masquerade': 'x'})
    socket.feed({'type': 'Message', '_id': 'm1', 'channel': 'c1', 'author': 'u1', 'content': 'hi'})

    await wait_until(lambda: len(messages) == 1)
    assert len(errors) == 6
    assert all(isinstance(e, voltgate.InvalidData) for e in errors)
    assert server.dials == 1
    await shard.close()


@pytest.mark.asyncio
async def test_ping_and_latency():
    server = FakeServer()
    shard = make_shard(server)
    await shard.open()
    assert math.isnan(shard.latency)

    await shard.ping()
    assert server.sockets[0].sent[-1] == {'type': 'Ping', 'data': 1}
    assert math.isnan(shard.latency)

    server.sockets[0].feed({'type': 'Pong', 'data': 1})
    await wait_until(lambda: not math.isnan(shard.latency))
    assert shard.latency >= 0
    await shard.close()


@pytest.mark.asyncio
async def test_heartbeat_stops_when_ping_is_not_acknowledged():
    server = FakeServer()
    shard = make_shard(server, heartbeat_interval=0.01)
    await shard.open()

    await asyncio.sleep(0.1)
    pings = [p for p in server.sockets[0].sent if p['type'] == 'Ping']
    assert len(pings) == 1
    await shard.close()


@pytest.mark.asyncio
async def test_heartbeat_keeps_going_when_acknowledged():
    server = FakeServer()
    shard = make_shard(server, heartbeat_interval=0.01)

    def on_frame(socket: FakeSocket, payload: dict[str, typing.Any], /) -> None:
        if payload['type'] == 'Authenticate':
            socket.feed(READY)
        elif payload['type'] == 'Ping':
            socket.feed({'type': 'Pong', 'data': payload['data']})

    server.on_frame = on_frame  # type: ignore
    await shard.open()

    await wait_until(lambda: sum(p['type'] == 'Ping' for p in server.sockets[0].sent) >= 3)
    await shard.close()


@pytest.mark.asyncio
async def test_shard_on_decorator():
    server = FakeServer(reply=[READY, {'type': 'ChannelStartTyping', 'id': 'c1', 'user': 'u1'}])
    shard = make_shard(server)
    received = []

    @shard.on(voltgate.ChannelStartTypingEvent)
    async def on_typing(event: voltgate.ChannelStartTypingEvent, /) -> None:
        received.append(event.user_id)

    await shard.open()
    await wait_until(lambda: received == ['u1'])
    await shard.close()


@pytest.mark.asyncio
async def test_wait_closed():
    shard = make_shard(FakeServer())
    await shard.open()

    waiter = asyncio.create_task(shard.wait_closed())
    await asyncio.sleep(0)
    assert not waiter.done()

    await shard.close()
    await asyncio.wait_for(waiter, timeout=1)
