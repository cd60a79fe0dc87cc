from __future__ import annotations

import asyncio
import typing

import pytest
import voltgate

USER = {
    '_id': '01HZUSER000000000000000000',
    'username': 'alice',
    'discriminator': '0001',
    'online': True,
    'badges': 1,
    'flags': 4,
}

SERVER = {
    '_id': '01HZSERVER0000000000000000',
    'owner': USER['_id'],
    'name': 'Lounge',
    'channels': ['01HZCHANNEL000000000000000'],
    'default_permissions': 0,
    'roles': {
        '01HZROLE000000000000000000': {
            'name': 'Moderator',
            'permissions': {'a': 1, 'd': 0},
            'hoist': True,
            'rank': 1,
        },
    },
}

CHANNEL = {
    'channel_type': 'TextChannel',
    '_id': '01HZCHANNEL000000000000000',
    'server': SERVER['_id'],
    'name': 'general',
}

MEMBER = {
    '_id': {'server': SERVER['_id'], 'user': USER['_id']},
    'joined_at': '2024-01-01T00:00:00.000Z',
}


def message(id: str, content: str) -> dict[str, typing.Any]:
    return {
        'type': 'Message',
        '_id': id,
        'channel': CHANNEL['_id'],
        'author': USER['_id'],
        'content': content,
    }


async def feed(shard: voltgate.Shard, *payloads: dict[str, typing.Any]) -> None:
    for payload in payloads:
        shard.handle(payload)
    # scheduled cache updates and emissions run on next iterations
    for _ in range(3):
        await asyncio.sleep(0)


def test_parse_user():
    user = voltgate.Parser().parse_user(USER)
    assert user.id == USER['_id']
    assert user.name == 'alice'
    assert user.online is True

    optimized = user.to_optimized()
    assert optimized.online is True
    assert optimized.badges.developer is True
    assert optimized.flags.flags.banned is True


def test_parse_channel_rejects_unknown_type():
    with pytest.raises(ValueError):
        voltgate.Parser().parse_channel({'channel_type': 'Teleporter', '_id': 'x'})


def test_get_event_parser():
    parser = voltgate.Parser()
    assert parser.get_event_parser('Message') is not None
    assert parser.get_event_parser('BulkMessageDelete') is not None
    assert parser.get_event_parser('BulkDeleteMessage') is not None
    assert parser.get_event_parser('Nope') is None


@pytest.mark.asyncio
async def test_end_to_end_scenario():
    shard = voltgate.Shard('token')
    cache = shard.cache

    await feed(
        shard,
        {'type': 'Ready', 'users': [USER], 'servers': [], 'channels': [], 'members': [], 'emojis': []},
        message('m1', 'hi'),
    )
    assert cache.messages.get(CHANNEL['_id'], 'm1').content == 'hi'  # type: ignore

    await feed(shard, {'type': 'MessageUpdate', 'id': 'm1', 'channel': CHANNEL['_id'], 'data': {'content': 'bye'}})
    assert cache.messages.get(CHANNEL['_id'], 'm1').content == 'bye'  # type: ignore

    await feed(shard, {'type': 'MessageDelete', 'id': 'm1', 'channel': CHANNEL['_id']})
    assert cache.messages.get(CHANNEL['_id'], 'm1') is None

    user = cache.users.get(USER['_id'])
    assert user is not None
    assert user.name == 'alice'
    assert user.online is True


@pytest.mark.asyncio
async def test_subscriber_sees_patched_cache():
    shard = voltgate.Shard('token')
    seen = []

    def on_update(event: voltgate.MessageUpdateEvent, /) -> None:
        cached = event.cache.messages.get(event.message.channel_id, event.message.id)
        seen.append(None if cached is None else cached.content)

    shard.events[voltgate.MessageUpdateEvent].listen(on_update)

    await feed(
        shard,
        message('m1', 'before'),
        {'type': 'MessageUpdate', 'id': 'm1', 'channel': CHANNEL['_id'], 'data': {'content': 'after'}},
    )
    assert seen == ['after']


@pytest.mark.asyncio
async def test_subscriber_sees_ready_cache():
    shard = voltgate.Shard('token')
    seen = []

    shard.events[voltgate.ReadyEvent].listen(lambda event: seen.append(event.cache.users.get(USER['_id'])))

    await feed(shard, {'type': 'Ready', 'users': [USER], 'servers': [], 'channels': [], 'members': [], 'emojis': []})
    assert len(seen) == 1
    assert seen[0] is not None
    assert shard.state is voltgate.ShardState.ready


@pytest.mark.asyncio
async def test_update_for_unknown_message_is_ignored():
    shard = voltgate.Shard('token')
    received = []
    shard.events[voltgate.MessageUpdateEvent].listen(received.append)

    await feed(shard, {'type': 'MessageUpdate', 'id': 'nope', 'channel': 'c', 'data': {'content': 'x'}})
    assert shard.cache.messages.size() == 0
    assert len(received) == 1


@pytest.mark.asyncio
async def test_bulk_message_delete_both_discriminators():
    shard = voltgate.Shard('token')
    await feed(shard, message('m1', 'a'), message('m2', 'b'), message('m3', 'c'))
    assert shard.cache.messages.size() == 3

    await feed(shard, {'type': 'BulkMessageDelete', 'channel': CHANNEL['_id'], 'ids': ['m1', 'm2']})
    assert shard.cache.messages.size() == 1

    await feed(shard, {'type': 'BulkDeleteMessage', 'channel_id': CHANNEL['_id'], 'ids': ['m3', 'unknown']})
    assert shard.cache.messages.size() == 0


@pytest.mark.asyncio
async def test_bulk_frame_is_unpacked():
    shard = voltgate.Shard('token')
    raw = []
    shard.events[voltgate.RawEvent].listen(lambda event: raw.append(event.payload['type']))

    await feed(shard, {'type': 'Bulk', 'v': [message('m1', 'a'), message('m2', 'b')]})
    assert shard.cache.messages.size() == 2
    assert raw == ['Bulk', 'Message', 'Message']


@pytest.mark.asyncio
async def test_server_lifecycle():
    shard = voltgate.Shard('token')
    cache = shard.cache
    server_id = SERVER['_id']
    role_id = '01HZROLE000000000000000000'

    await feed(shard, {'type': 'ServerCreate', 'id': server_id, 'server': SERVER, 'channels': [CHANNEL]})
    assert cache.servers.get(server_id).name == 'Lounge'  # type: ignore
    assert cache.channels.get(CHANNEL['_id']).name == 'general'  # type: ignore
    role = cache.roles.get(server_id, role_id)
    assert role is not None
    assert role.flags.hoist is True

    await feed(shard, {'type': 'ServerMemberJoin', 'id': server_id, 'user': USER['_id']})
    assert cache.members.get(server_id, USER['_id']) is not None

    await feed(
        shard,
        {
            'type': 'ServerMemberUpdate',
            'id': {'server': server_id, 'user': USER['_id']},
            'data': {'nickname': 'ally'},
            'clear': [],
        },
    )
    assert cache.members.get(server_id, USER['_id']).nick == 'ally'  # type: ignore

    await feed(shard, {'type': 'ServerRoleUpdate', 'id': server_id, 'role_id': role_id, 'data': {'hoist': False}})
    role = cache.roles.get(server_id, role_id)
    assert role is not None
    assert role.flags.hoist is False
    assert role.name == 'Moderator'

    await feed(shard, {'type': 'ServerDelete', 'id': server_id})
    assert cache.servers.get(server_id) is None
    assert cache.roles.get_group(server_id) == {}
    assert cache.members.get_group(server_id) == {}


@pytest.mark.asyncio
async def test_role_update_with_all_fields_creates_role():
    shard = voltgate.Shard('token')
    await feed(
        shard,
        {
            'type': 'ServerRoleUpdate',
            'id': 's1',
            'role_id': 'r1',
            'data': {'name': 'Fresh', 'permissions': {'a': 0, 'd': 0}, 'hoist': False, 'rank': 3},
            'clear': [],
        },
    )
    role = shard.cache.roles.get('s1', 'r1')
    assert role is not None
    assert role.name == 'Fresh'
    assert role.rank == 3


@pytest.mark.asyncio
async def test_member_leave_and_role_delete():
    shard = voltgate.Shard('token')
    await feed(
        shard,
        {'type': 'Ready', 'users': [], 'servers': [SERVER], 'channels': [], 'members': [MEMBER], 'emojis': []},
    )
    assert shard.cache.members.get(SERVER['_id'], USER['_id']) is not None

    await feed(shard, {'type': 'ServerMemberLeave', 'id': SERVER['_id'], 'user': USER['_id'], 'reason': 'Kick'})
    assert shard.cache.members.get(SERVER['_id'], USER['_id']) is None

    await feed(shard, {'type': 'ServerRoleDelete', 'id': SERVER['_id'], 'role_id': '01HZROLE000000000000000000'})
    assert shard.cache.roles.size() == 0


@pytest.mark.asyncio
async def test_channel_update_and_delete():
    shard = voltgate.Shard('token')
    await feed(shard, {'type': 'ChannelCreate', **CHANNEL})

    await feed(
        shard,
        {'type': 'ChannelUpdate', 'id': CHANNEL['_id'], 'data': {'name': 'random', 'nsfw': True}, 'clear': []},
    )
    channel = shard.cache.channels.get(CHANNEL['_id'])
    assert channel is not None
    assert channel.name == 'random'
    assert channel.nsfw is True

    await feed(shard, {'type': 'ChannelDelete', 'id': CHANNEL['_id']})
    assert shard.cache.channels.get(CHANNEL['_id']) is None


@pytest.mark.asyncio
async def test_user_update_patches_only_present_fields():
    shard = voltgate.Shard('token')
    await feed(shard, {'type': 'Ready', 'users': [USER], 'servers': [], 'channels': [], 'members': [], 'emojis': []})

    await feed(shard, {'type': 'UserUpdate', 'id': USER['_id'], 'data': {'badges': 256}, 'clear': []})
    user = shard.cache.users.get(USER['_id'])
    assert user is not None
    assert user.online is True
    assert user.flags.flags.banned is True
    assert user.badges.early_adopter is True
    assert user.badges.developer is False

    await feed(
        shard,
        {'type': 'UserUpdate', 'id': USER['_id'], 'data': {'online': False, 'display_name': 'Al'}, 'clear': []},
    )
    assert user.online is False
    assert user.display_name == 'Al'
    assert user.badges.early_adopter is True

    await feed(shard, {'type': 'UserUpdate', 'id': USER['_id'], 'data': {}, 'clear': ['DisplayName']})
    assert user.display_name is None


@pytest.mark.asyncio
async def test_emoji_create_and_delete():
    shard = voltgate.Shard('token')
    emoji = {
        'type': 'EmojiCreate',
        '_id': '01HZEMOJI00000000000000000',
        'parent': {'type': 'Server', 'id': SERVER['_id']},
        'creator_id': USER['_id'],
        'name': 'smile',
        'animated': True,
    }
    await feed(shard, emoji)
    cached = shard.cache.emojis.get(emoji['_id'])
    assert cached is not None
    assert cached.flags.animated is True

    await feed(shard, {'type': 'EmojiDelete', 'id': emoji['_id']})
    assert shard.cache.emojis.get(emoji['_id']) is None


@pytest.mark.asyncio
async def test_typing_has_no_cache_effect():
    shard = voltgate.Shard('token')
    received = []
    shard.events[voltgate.ChannelStartTypingEvent].listen(received.append)

    await feed(shard, {'type': 'ChannelStartTyping', 'id': CHANNEL['_id'], 'user': USER['_id']})
    assert len(received) == 1
    assert received[0].user_id == USER['_id']
    assert shard.cache.channels.size() == 0


@pytest.mark.asyncio
async def test_malformed_event_is_reported():
    shard = voltgate.Shard('token')
    errors = []
    shard.events[voltgate.ErrorEvent].listen(lambda event: errors.append(event.error))

    await feed(shard, {'type': 'Message', 'content': 'missing ids'})
    assert len(errors) == 1
    assert isinstance(errors[0], voltgate.InvalidData)
    assert shard.cache.messages.size() == 0


@pytest.mark.asyncio
async def test_protocol_errors():
    shard = voltgate.Shard('token')
    errors = []
    shard.events[voltgate.ProtocolErrorEvent].listen(lambda event: errors.append(event.error_id))

    await feed(shard, {'type': 'Error', 'error': 'InternalServer'}, {'type': 'NotFound'})
    assert errors == ['InternalServer', 'InvalidSession']


@pytest.mark.asyncio
async def test_disabled_cache_still_publishes():
    shard = voltgate.Shard('token', cache=voltgate.GenericCache.disabled())
    received = []
    shard.events[voltgate.MessageCreateEvent].listen(received.append)

    await feed(shard, message('m1', 'hi'))
    assert len(received) == 1
    assert shard.cache.messages.get(CHANNEL['_id'], 'm1') is None
