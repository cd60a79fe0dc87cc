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

import typing
from urllib.parse import quote

HTTPMethod = typing.Literal['GET', 'POST', 'PATCH', 'DELETE', 'PUT']


class CompiledRoute:
    """Represents compiled API route."""

    __slots__ = ('route', 'args')

    def __init__(self, route: Route, /, **args: typing.Any) -> None:
        self.route: Route = route
        self.args: dict[str, typing.Any] = args

    def __repr__(self) -> str:
        return f'<CompiledRoute route={self.route!r} args={self.args!r}>'

    def __str__(self) -> str:
        return f'CompiledRoute({self.route}, **{self.args!r})'

    def build(self) -> str:
        """:class:`str`: The path with every argument substituted and percent-encoded."""
        return self.route.path.format_map({k: quote(str(v), safe='') for k, v in self.args.items()})


class Route:
    """Represents API route."""

    __slots__ = (
        'method',
        'path',
    )

    def __init__(self, method: HTTPMethod, path: str, /) -> None:
        self.method: HTTPMethod = method
        self.path: str = path

    def __repr__(self) -> str:
        return f'<Route method={self.method!r} path={self.path!r}>'

    def __str__(self) -> str:
        return f'{self.method} {self.path}'

    def compile(self, **args: typing.Any) -> CompiledRoute:
        """Compiles route."""
        return CompiledRoute(self, **args)


GET: typing.Final[HTTPMethod] = 'GET'
POST: typing.Final[HTTPMethod] = 'POST'
PUT: typing.Final[HTTPMethod] = 'PUT'
DELETE: typing.Final[HTTPMethod] = 'DELETE'
PATCH: typing.Final[HTTPMethod] = 'PATCH'

ROOT: typing.Final[Route] = Route(GET, '/')

# Channels control
CHANNELS_CHANNEL_ACK: typing.Final[Route] = Route(PUT, '/channels/{channel_id}/ack/{message_id}')
CHANNELS_CHANNEL_DELETE: typing.Final[Route] = Route(DELETE, '/channels/{channel_id}')
CHANNELS_CHANNEL_EDIT: typing.Final[Route] = Route(PATCH, '/channels/{channel_id}')
CHANNELS_CHANNEL_FETCH: typing.Final[Route] = Route(GET, '/channels/{channel_id}')
CHANNELS_INVITE_CREATE: typing.Final[Route] = Route(POST, '/channels/{channel_id}/invites')
CHANNELS_MESSAGE_DELETE_BULK: typing.Final[Route] = Route(DELETE, '/channels/{channel_id}/messages/bulk')
CHANNELS_MESSAGE_CLEAR_REACTIONS: typing.Final[Route] = Route(
    DELETE, '/channels/{channel_id}/messages/{message_id}/reactions'
)
CHANNELS_MESSAGE_DELETE: typing.Final[Route] = Route(DELETE, '/channels/{channel_id}/messages/{message_id}')
CHANNELS_MESSAGE_EDIT: typing.Final[Route] = Route(PATCH, '/channels/{channel_id}/messages/{message_id}')
CHANNELS_MESSAGE_FETCH: typing.Final[Route] = Route(GET, '/channels/{channel_id}/messages/{message_id}')
CHANNELS_MESSAGE_QUERY: typing.Final[Route] = Route(GET, '/channels/{channel_id}/messages')
CHANNELS_MESSAGE_REACT: typing.Final[Route] = Route(
    PUT, '/channels/{channel_id}/messages/{message_id}/reactions/{emoji}'
)
CHANNELS_MESSAGE_SEND: typing.Final[Route] = Route(POST, '/channels/{channel_id}/messages')
CHANNELS_MESSAGE_UNREACT: typing.Final[Route] = Route(
    DELETE, '/channels/{channel_id}/messages/{message_id}/reactions/{emoji}'
)
CHANNELS_WEBHOOK_CREATE: typing.Final[Route] = Route(POST, '/channels/{channel_id}/webhooks')
CHANNELS_WEBHOOK_FETCH_ALL: typing.Final[Route] = Route(GET, '/channels/{channel_id}/webhooks')

# Customization
CUSTOMISATION_EMOJI_CREATE: typing.Final[Route] = Route(PUT, '/custom/emoji/{attachment_id}')
CUSTOMISATION_EMOJI_DELETE: typing.Final[Route] = Route(DELETE, '/custom/emoji/{emoji_id}')
CUSTOMISATION_EMOJI_FETCH: typing.Final[Route] = Route(GET, '/custom/emoji/{emoji_id}')

# Invites
INVITES_INVITE_DELETE: typing.Final[Route] = Route(DELETE, '/invites/{invite_code}')
INVITES_INVITE_FETCH: typing.Final[Route] = Route(GET, '/invites/{invite_code}')
INVITES_INVITE_JOIN: typing.Final[Route] = Route(POST, '/invites/{invite_code}')

# Onboarding
ONBOARD_COMPLETE: typing.Final[Route] = Route(POST, '/onboard/complete')
ONBOARD_HELLO: typing.Final[Route] = Route(GET, '/onboard/hello')

# Servers
SERVERS_BAN_CREATE: typing.Final[Route] = Route(PUT, '/servers/{server_id}/bans/{user_id}')
SERVERS_BAN_LIST: typing.Final[Route] = Route(GET, '/servers/{server_id}/bans')
SERVERS_BAN_REMOVE: typing.Final[Route] = Route(DELETE, '/servers/{server_id}/bans/{user_id}')
SERVERS_CHANNEL_CREATE: typing.Final[Route] = Route(POST, '/servers/{server_id}/channels')
SERVERS_EMOJI_LIST: typing.Final[Route] = Route(GET, '/servers/{server_id}/emojis')
SERVERS_MEMBER_EDIT: typing.Final[Route] = Route(PATCH, '/servers/{server_id}/members/{member_id}')
SERVERS_MEMBER_FETCH: typing.Final[Route] = Route(GET, '/servers/{server_id}/members/{member_id}')
SERVERS_MEMBER_FETCH_ALL: typing.Final[Route] = Route(GET, '/servers/{server_id}/members')
SERVERS_MEMBER_REMOVE: typing.Final[Route] = Route(DELETE, '/servers/{server_id}/members/{member_id}')
SERVERS_PERMISSIONS_SET: typing.Final[Route] = Route(PUT, '/servers/{server_id}/permissions/{role_id}')
SERVERS_ROLES_CREATE: typing.Final[Route] = Route(POST, '/servers/{server_id}/roles')
SERVERS_ROLES_DELETE: typing.Final[Route] = Route(DELETE, '/servers/{server_id}/roles/{role_id}')
SERVERS_ROLES_EDIT: typing.Final[Route] = Route(PATCH, '/servers/{server_id}/roles/{role_id}')
SERVERS_SERVER_DELETE: typing.Final[Route] = Route(DELETE, '/servers/{server_id}')
SERVERS_SERVER_EDIT: typing.Final[Route] = Route(PATCH, '/servers/{server_id}')
SERVERS_SERVER_FETCH: typing.Final[Route] = Route(GET, '/servers/{server_id}')

# Users
USERS_EDIT_SELF_USER: typing.Final[Route] = Route(PATCH, '/users/@me')
USERS_FETCH_SELF: typing.Final[Route] = Route(GET, '/users/@me')
USERS_FETCH_USER: typing.Final[Route] = Route(GET, '/users/{user_id}')
USERS_OPEN_DM: typing.Final[Route] = Route(GET, '/users/{user_id}/dm')

# Webhooks
WEBHOOKS_WEBHOOK_DELETE: typing.Final[Route] = Route(DELETE, '/webhooks/{webhook_id}')
WEBHOOKS_WEBHOOK_DELETE_WITH_TOKEN: typing.Final[Route] = Route(DELETE, '/webhooks/{webhook_id}/{webhook_token}')
WEBHOOKS_WEBHOOK_EDIT: typing.Final[Route] = Route(PATCH, '/webhooks/{webhook_id}')
WEBHOOKS_WEBHOOK_FETCH: typing.Final[Route] = Route(GET, '/webhooks/{webhook_id}')

__all__ = (
    'HTTPMethod',
    'CompiledRoute',
    'Route',
    'GET',
    'POST',
    'PUT',
    'DELETE',
    'PATCH',
    'ROOT',
    'CHANNELS_CHANNEL_ACK',
    'CHANNELS_CHANNEL_DELETE',
    'CHANNELS_CHANNEL_EDIT',
    'CHANNELS_CHANNEL_FETCH',
    'CHANNELS_INVITE_CREATE',
    'CHANNELS_MESSAGE_DELETE_BULK',
    'CHANNELS_MESSAGE_CLEAR_REACTIONS',
    'CHANNELS_MESSAGE_DELETE',
    'CHANNELS_MESSAGE_EDIT',
    'CHANNELS_MESSAGE_FETCH',
    'CHANNELS_MESSAGE_QUERY',
    'CHANNELS_MESSAGE_REACT',
    'CHANNELS_MESSAGE_SEND',
    'CHANNELS_MESSAGE_UNREACT',
    'CHANNELS_WEBHOOK_CREATE',
    'CHANNELS_WEBHOOK_FETCH_ALL',
    'CUSTOMISATION_EMOJI_CREATE',
    'CUSTOMISATION_EMOJI_DELETE',
    'CUSTOMISATION_EMOJI_FETCH',
    'INVITES_INVITE_DELETE',
    'INVITES_INVITE_FETCH',
    'INVITES_INVITE_JOIN',
    'ONBOARD_COMPLETE',
    'ONBOARD_HELLO',
    'SERVERS_BAN_CREATE',
    'SERVERS_BAN_LIST',
    'SERVERS_BAN_REMOVE',
    'SERVERS_CHANNEL_CREATE',
    'SERVERS_EMOJI_LIST',
    'SERVERS_MEMBER_EDIT',
    'SERVERS_MEMBER_FETCH',
    'SERVERS_MEMBER_FETCH_ALL',
    'SERVERS_MEMBER_REMOVE',
    'SERVERS_PERMISSIONS_SET',
    'SERVERS_ROLES_CREATE',
    'SERVERS_ROLES_DELETE',
    'SERVERS_ROLES_EDIT',
    'SERVERS_SERVER_DELETE',
    'SERVERS_SERVER_EDIT',
    'SERVERS_SERVER_FETCH',
    'USERS_EDIT_SELF_USER',
    'USERS_FETCH_SELF',
    'USERS_FETCH_USER',
    'USERS_OPEN_DM',
    'WEBHOOKS_WEBHOOK_DELETE',
    'WEBHOOKS_WEBHOOK_DELETE_WITH_TOKEN',
    'WEBHOOKS_WEBHOOK_EDIT',
    'WEBHOOKS_WEBHOOK_FETCH',
)
