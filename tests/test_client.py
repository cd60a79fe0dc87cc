from __future__ import annotations

import asyncio

import pytest
import voltgate


def typing_event(client: voltgate.Client, channel_id: str) -> voltgate.ChannelStartTypingEvent:
    return voltgate.ChannelStartTypingEvent(shard=client.shard, channel_id=channel_id, user_id='u1')


def test_client_composition():
    cache = voltgate.GenericCache.disabled()
    client = voltgate.Client('token', cache=cache, http_base='https://example.com/api')

    assert client.cache is cache
    assert client.shard.cache is cache
    assert client.shard.events is client.events
    assert client.autumn.parser is client.http.parser
    assert client.http.base == 'https://example.com/api'
    assert client.autumn.base == 'https://autumn.revolt.chat'
    assert client.closed


def test_with_credentials():
    client = voltgate.Client('token')
    client.with_credentials('session', bot=False)

    for target in (client.http, client.autumn, client.shard):
        assert target.token == 'session'
        assert not target.bot


@pytest.mark.asyncio
async def test_listen_and_subscribe():
    client = voltgate.Client('token')
    received = []

    @client.listen(voltgate.ChannelStartTypingEvent)
    def on_typing(event: voltgate.ChannelStartTypingEvent, /) -> None:
        received.append(('listen', event.channel_id))

    subscription = client.subscribe(
        voltgate.ChannelStartTypingEvent, lambda event: received.append(('subscribe', event.channel_id))
    )

    client.events[voltgate.ChannelStartTypingEvent].emit(typing_event(client, 'c1'))
    subscription.delete()
    client.events[voltgate.ChannelStartTypingEvent].emit(typing_event(client, 'c2'))

    assert received == [('listen', 'c1'), ('subscribe', 'c1'), ('listen', 'c2')]


@pytest.mark.asyncio
async def test_wait_for():
    client = voltgate.Client('token')
    controller = client.events[voltgate.ChannelStartTypingEvent]

    waiter = asyncio.create_task(
        client.wait_for(voltgate.ChannelStartTypingEvent, check=lambda event: event.channel_id == 'c2')
    )
    await asyncio.sleep(0)
    assert len(controller) == 1

    controller.emit(typing_event(client, 'c1'))
    await asyncio.sleep(0)
    assert not waiter.done()

    controller.emit(typing_event(client, 'c2'))
    event = await asyncio.wait_for(waiter, timeout=1)
    assert event.channel_id == 'c2'
    assert len(controller) == 0


@pytest.mark.asyncio
async def test_wait_for_timeout():
    client = voltgate.Client('token')

    with pytest.raises(asyncio.TimeoutError):
        await client.wait_for(voltgate.ChannelStartTypingEvent, timeout=0.01)
    assert len(client.events[voltgate.ChannelStartTypingEvent]) == 0


@pytest.mark.asyncio
async def test_close_is_idempotent():
    async with voltgate.Client('token') as client:
        assert not client.shard.is_closed()

    assert client.closed
    assert client.shard.state is voltgate.ShardState.closed
    await client.close()
