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

import aiohttp
from multidict import CIMultiDict

from . import routes, utils
from .core import (
    UNDEFINED,
    UndefinedOr,
    ULIDOr,
    resolve_id,
    __version__ as version,
)
from .emoji import resolve_emoji
from .errors import (
    HTTPException,
    Unauthorized,
    Forbidden,
    NotFound,
    Conflict,
    Ratelimited,
    InternalServerError,
    BadGateway,
)
from .message import Reply
from .parser import Parser

if typing.TYPE_CHECKING:
    from collections.abc import Sequence

    from .channel import BaseChannel, Channel, GroupChannel, TextChannel
    from .emoji import BaseEmoji, Emoji, ResolvableEmoji, ServerEmoji
    from .message import Masquerade, Message, SendableEmbed
    from .permissions import PermissionOverride
    from .server import Member, Role, Server, ServerBan
    from .user import User
    from .webhook import Webhook


DEFAULT_HTTP_USER_AGENT: typing.Final[str] = f'voltgate HTTP client ({version})'
DEFAULT_API_URL: typing.Final[str] = 'https://api.revolt.chat/'

_L = logging.getLogger(__name__)
_STATUS_TO_ERRORS: typing.Final[dict[int, type[HTTPException]]] = {
    401: Unauthorized,
    403: Forbidden,
    404: NotFound,
    409: Conflict,
    429: Ratelimited,
    500: InternalServerError,
    502: BadGateway,
}


class HTTPClient:
    """Represents an HTTP client sending HTTP requests to the API.

    Parameters
    ----------
    token: :class:`str`
        The authentication token.
    base: :class:`str`
        The base API URL.
    bot: :class:`bool`
        Whether the token belongs to bot account. Defaults to ``True``.
    max_retries: :class:`int`
        How many times to retry requests that received 429 or 502 HTTP status code. Defaults to 3.
    session: Optional[:class:`aiohttp.ClientSession`]
        The session to use. A session is created, and owned by the client, if not provided.
    user_agent: Optional[:class:`str`]
        The HTTP user agent used when making requests.
    parser: Optional[:class:`.Parser`]
        The parser to produce entities with.

    Attributes
    ----------
    bot: :class:`bool`
        Whether the token belongs to bot account.
    max_retries: :class:`int`
        How many times to retry requests that received 429 or 502 HTTP status code.
    parser: :class:`.Parser`
        The parser.
    token: :class:`str`
        The token in use.
    user_agent: :class:`str`
        The HTTP user agent used when making requests.
    """

    __slots__ = (
        '_base',
        '_owns_session',
        '_session',
        'bot',
        'max_retries',
        'parser',
        'token',
        'user_agent',
    )

    def __init__(
        self,
        token: str,
        *,
        base: str | None = None,
        bot: bool = True,
        max_retries: int = 3,
        session: aiohttp.ClientSession | None = None,
        user_agent: str | None = None,
        parser: Parser | None = None,
    ) -> None:
        if token is None:
            raise TypeError('Token must be provided')
        if base is None:
            base = DEFAULT_API_URL
        if not base.startswith(('http://', 'https://')):
            raise ValueError(f'Expected http:// or https:// URL, got {base!r}')

        self._base: str = base.rstrip('/')
        self._owns_session: bool = session is None
        self._session: aiohttp.ClientSession | None = session
        self.bot: bool = bot
        self.max_retries: int = max_retries
        self.parser: Parser = parser or Parser()
        self.token: str = token
        self.user_agent: str = user_agent or DEFAULT_HTTP_USER_AGENT

    @property
    def base(self) -> str:
        """:class:`str`: The base URL used for API requests."""
        return self._base

    def url_for(self, route: routes.CompiledRoute, /) -> str:
        """Returns a URL for route.

        Parameters
        ----------
        route: :class:`~routes.CompiledRoute`
            The route.

        Returns
        -------
        :class:`str`
            The URL for the route.
        """
        return self._base + route.build()

    def with_credentials(self, token: str, *, bot: bool = True) -> None:
        """Modifies HTTP client credentials.

        Parameters
        ----------
        token: :class:`str`
            The authentication token.
        bot: :class:`bool`
            Whether the token belongs to bot account or not. Defaults to ``True``.
        """
        self.token = token
        self.bot = bot

    def add_headers(
        self,
        headers: CIMultiDict[typing.Any],
        /,
        *,
        accept_json: bool = True,
        authenticated: bool = True,
        json_body: bool = False,
        user_agent: UndefinedOr[str | None] = UNDEFINED,
    ) -> None:
        if accept_json:
            headers['Accept'] = 'application/json'

        if json_body:
            headers['Content-type'] = 'application/json'

        if authenticated and self.token:
            headers['X-Bot-Token' if self.bot else 'X-Session-Token'] = self.token

        if user_agent is UNDEFINED:
            user_agent = self.user_agent

        if user_agent is not None:
            headers['User-Agent'] = user_agent

    def _get_session(self) -> aiohttp.ClientSession:
        session = self._session
        if session is None:
            session = self._session = aiohttp.ClientSession()
        return session

    async def send_request(
        self,
        session: aiohttp.ClientSession,
        /,
        *,
        method: str,
        url: str,
        headers: CIMultiDict[typing.Any],
        **kwargs,
    ) -> aiohttp.ClientResponse:
        return await session.request(
            method,
            url,
            headers=headers,
            **kwargs,
        )

    async def raw_request(
        self,
        route: routes.CompiledRoute,
        *,
        accept_json: bool = True,
        authenticated: bool = True,
        json: UndefinedOr[typing.Any] = UNDEFINED,
        user_agent: UndefinedOr[str | None] = UNDEFINED,
        **kwargs,
    ) -> aiohttp.ClientResponse:
        """|coro|

        Perform a HTTP request, with retrying and errors handling.

        Parameters
        ----------
        route: :class:`~routes.CompiledRoute`
            The route.
        accept_json: :class:`bool`
            Whether to explicitly receive JSON or not. Defaults to ``True``.
        authenticated: :class:`bool`
            Whether to attach the token to request. Defaults to ``True``.
        json: UndefinedOr[Any]
            The JSON payload to pass in.
        user_agent: UndefinedOr[Optional[:class:`str`]]
            The user agent to use for HTTP request. Defaults to :attr:`.user_agent`.

        Raises
        ------
        :class:`HTTPException`
            Something went wrong during request.

        Returns
        -------
        :class:`aiohttp.ClientResponse`
            The aiohttp response.
        """
        headers: CIMultiDict[typing.Any]

        try:
            headers = CIMultiDict(kwargs.pop('headers'))
        except KeyError:
            headers = CIMultiDict()

        self.add_headers(
            headers,
            accept_json=accept_json,
            authenticated=authenticated,
            json_body=json is not UNDEFINED,
            user_agent=user_agent,
        )

        method = route.route.method
        path = route.build()
        url = self._base + path

        if json is not UNDEFINED:
            kwargs['data'] = utils.to_json(json)

        retries = 0

        while True:
            _L.debug('Sending request to %s %s with %s', method, path, kwargs.get('data'))

            response = await self.send_request(
                self._get_session(),
                method=method,
                url=url,
                headers=headers,
                **kwargs,
            )

            if response.status < 400:
                return response

            _L.debug('%s %s has returned %s', method, path, response.status)
            retries += 1

            if response.status == 502 and retries < self.max_retries:
                response.close()
                continue

            data = await utils._json_or_text(response)

            if response.status == 429 and retries < self.max_retries:
                if isinstance(data, dict):
                    retry_after: float = data.get('retry_after', 0) / 1000.0
                else:
                    retry_after = 1

                _L.debug('Ratelimited on %s %s, retrying in %.3f seconds', method, url, retry_after)
                response.close()
                await asyncio.sleep(retry_after)
                continue

            response.close()
            raise _STATUS_TO_ERRORS.get(response.status, HTTPException)(response, data)

    async def request(
        self,
        route: routes.CompiledRoute,
        *,
        accept_json: bool = True,
        authenticated: bool = True,
        json: UndefinedOr[typing.Any] = UNDEFINED,
        log: bool = True,
        user_agent: UndefinedOr[str | None] = UNDEFINED,
        **kwargs,
    ) -> typing.Any:
        """|coro|

        Perform a HTTP request, with retrying and errors handling.

        Parameters
        ----------
        route: :class:`~routes.CompiledRoute`
            The route.
        accept_json: :class:`bool`
            Whether to explicitly receive JSON or not. Defaults to ``True``.
        authenticated: :class:`bool`
            Whether to attach the token to request. Defaults to ``True``.
        json: UndefinedOr[Any]
            The JSON payload to pass in.
        log: :class:`bool`
            Whether to log successful response or not. This option is intended to avoid console spam caused
            by routes like ``GET /servers/{server_id}/members``. Defaults to ``True``.
        user_agent: UndefinedOr[Optional[:class:`str`]]
            The user agent to use for HTTP request. Defaults to :attr:`.user_agent`.

        Raises
        ------
        :class:`HTTPException`
            Something went wrong during request.

        Returns
        -------
        Any
            The parsed JSON response.
        """
        response = await self.raw_request(
            route,
            accept_json=accept_json,
            authenticated=authenticated,
            json=json,
            user_agent=user_agent,
            **kwargs,
        )
        result = await utils._json_or_text(response)

        if log:
            _L.debug('%s %s has received %s %s', route.route.method, route.build(), response.status, result)
        else:
            _L.debug('%s %s has received %s [too large response]', route.route.method, route.build(), response.status)

        response.close()
        return result

    async def cleanup(self) -> None:
        """|coro|

        Closes the aiohttp session, if it was created by the client.
        """
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def query_node(self) -> dict[str, typing.Any]:
        """|coro|

        Retrieves the instance information. This does not require authentication.

        Returns
        -------
        Dict[:class:`str`, Any]
            The instance configuration.
        """
        return await self.request(routes.ROOT.compile(), authenticated=False)

    # Channels control
    async def acknowledge_message(self, channel: ULIDOr[TextChannel], message: ULIDOr[Message]) -> None:
        """|coro|

        Marks a message as read.

        .. note::
            This can only be used by non-bot accounts.
        """
        await self.request(
            routes.CHANNELS_CHANNEL_ACK.compile(channel_id=resolve_id(channel), message_id=resolve_id(message))
        )

    async def close_channel(self, channel: ULIDOr[BaseChannel], silent: bool | None = None) -> None:
        """|coro|

        Deletes a server channel, leaves a group or closes a group.

        Parameters
        ----------
        channel: ULIDOr[:class:`.BaseChannel`]
            The channel to close.
        silent: Optional[:class:`bool`]
            Whether to not send message when leaving.
        """
        params = {}
        if silent is not None:
            params['leave_silently'] = utils._bool(silent)
        await self.request(routes.CHANNELS_CHANNEL_DELETE.compile(channel_id=resolve_id(channel)), params=params)

    async def edit_channel(
        self,
        channel: ULIDOr[BaseChannel],
        *,
        name: UndefinedOr[str] = UNDEFINED,
        description: UndefinedOr[str | None] = UNDEFINED,
        owner: UndefinedOr[ULIDOr[User]] = UNDEFINED,
        icon: UndefinedOr[str | None] = UNDEFINED,
        nsfw: UndefinedOr[bool] = UNDEFINED,
        archived: UndefinedOr[bool] = UNDEFINED,
    ) -> Channel:
        """|coro|

        Edits a channel.

        Passing ``None`` to ``description`` or ``icon`` removes them.

        Parameters
        ----------
        channel: ULIDOr[:class:`.BaseChannel`]
            The channel.
        name: UndefinedOr[:class:`str`]
            The new channel name.
        description: UndefinedOr[Optional[:class:`str`]]
            The new channel description.
        owner: UndefinedOr[ULIDOr[:class:`.User`]]
            The new group owner.
        icon: UndefinedOr[Optional[:class:`str`]]
            The ID of uploaded file to use as new channel icon.
        nsfw: UndefinedOr[:class:`bool`]
            To mark the channel as NSFW or not.
        archived: UndefinedOr[:class:`bool`]
            To mark the channel as archived or not.

        Raises
        ------
        :class:`Forbidden`
            You do not have permissions to edit the channel.
        :class:`NotFound`
            The channel was not found.

        Returns
        -------
        :class:`.Channel`
            The newly updated channel.
        """
        payload: dict[str, typing.Any] = {}
        remove: list[str] = []
        if name is not UNDEFINED:
            payload['name'] = name
        if description is not UNDEFINED:
            if description is None:
                remove.append('Description')
            else:
                payload['description'] = description
        if owner is not UNDEFINED:
            payload['owner'] = resolve_id(owner)
        if icon is not UNDEFINED:
            if icon is None:
                remove.append('Icon')
            else:
                payload['icon'] = icon
        if nsfw is not UNDEFINED:
            payload['nsfw'] = nsfw
        if archived is not UNDEFINED:
            payload['archived'] = archived
        if remove:
            payload['remove'] = remove

        resp = await self.request(
            routes.CHANNELS_CHANNEL_EDIT.compile(channel_id=resolve_id(channel)),
            json=payload,
        )
        return self.parser.parse_channel(resp)

    async def get_channel(self, channel: ULIDOr[BaseChannel], /) -> Channel:
        """|coro|

        Fetch a :class:`.Channel` with the specified ID.

        Parameters
        ----------
        channel: ULIDOr[:class:`.BaseChannel`]
            The channel to fetch.

        Raises
        ------
        :class:`NotFound`
            The channel was not found.

        Returns
        -------
        :class:`.Channel`
            The retrieved channel.
        """
        resp = await self.request(routes.CHANNELS_CHANNEL_FETCH.compile(channel_id=resolve_id(channel)))
        return self.parser.parse_channel(resp)

    async def create_channel_invite(self, channel: ULIDOr[GroupChannel | TextChannel]) -> str:
        """|coro|

        Creates an invite to channel. The destination channel must be a group or server channel.

        Returns
        -------
        :class:`str`
            The invite code.
        """
        resp = await self.request(routes.CHANNELS_INVITE_CREATE.compile(channel_id=resolve_id(channel)))
        return resp['_id']

    async def delete_messages(self, channel: ULIDOr[TextChannel], messages: Sequence[ULIDOr[Message]]) -> None:
        """|coro|

        Deletes multiple messages.

        You must have :attr:`~Permissions.manage_messages` to do this regardless whether you authored the message or not.

        Parameters
        ----------
        channel: ULIDOr[:class:`.TextChannel`]
            The channel.
        messages: Sequence[ULIDOr[:class:`.Message`]]
            The messages to delete.

        Raises
        ------
        :class:`HTTPException`
            Deleting messages failed.
        """
        payload = {'ids': [resolve_id(message) for message in messages]}
        await self.request(
            routes.CHANNELS_MESSAGE_DELETE_BULK.compile(channel_id=resolve_id(channel)),
            json=payload,
        )

    async def clear_reactions(self, channel: ULIDOr[TextChannel], message: ULIDOr[Message]) -> None:
        """|coro|

        Removes all the reactions from the message.
        """
        await self.request(
            routes.CHANNELS_MESSAGE_CLEAR_REACTIONS.compile(
                channel_id=resolve_id(channel),
                message_id=resolve_id(message),
            )
        )

    async def delete_message(self, channel: ULIDOr[TextChannel], message: ULIDOr[Message]) -> None:
        """|coro|

        Deletes a message.

        Parameters
        ----------
        channel: ULIDOr[:class:`.TextChannel`]
            The channel.
        message: ULIDOr[:class:`.Message`]
            The message.

        Raises
        ------
        :class:`Forbidden`
            You do not have permissions to delete the message.
        :class:`NotFound`
            The message was not found.
        """
        await self.request(
            routes.CHANNELS_MESSAGE_DELETE.compile(channel_id=resolve_id(channel), message_id=resolve_id(message))
        )

    async def edit_message(
        self,
        channel: ULIDOr[TextChannel],
        message: ULIDOr[Message],
        *,
        content: UndefinedOr[str] = UNDEFINED,
        embeds: UndefinedOr[list[SendableEmbed]] = UNDEFINED,
    ) -> Message:
        """|coro|

        Edits a message that you've previously sent.

        Parameters
        ----------
        channel: ULIDOr[:class:`.TextChannel`]
            The channel.
        message: ULIDOr[:class:`.Message`]
            The message.
        content: UndefinedOr[:class:`str`]
            The new content to replace the message with.
        embeds: UndefinedOr[List[:class:`.SendableEmbed`]]
            The new embeds to replace the original with. Must be a maximum of 10. To remove all embeds ``[]`` should be passed.

        Raises
        ------
        :class:`HTTPException`
            Editing the message failed.

        Returns
        -------
        :class:`.Message`
            The newly edited message.
        """
        payload: dict[str, typing.Any] = {}
        if content is not UNDEFINED:
            payload['content'] = content
        if embeds is not UNDEFINED:
            payload['embeds'] = [embed.build() for embed in embeds]

        resp = await self.request(
            routes.CHANNELS_MESSAGE_EDIT.compile(
                channel_id=resolve_id(channel),
                message_id=resolve_id(message),
            ),
            json=payload,
        )
        return self.parser.parse_message(resp)

    async def get_message(self, channel: ULIDOr[TextChannel], message: ULIDOr[Message]) -> Message:
        """|coro|

        Retrieves a message.

        Raises
        ------
        :class:`NotFound`
            The channel or message was not found.

        Returns
        -------
        :class:`.Message`
            The retrieved message.
        """
        resp = await self.request(
            routes.CHANNELS_MESSAGE_FETCH.compile(
                channel_id=resolve_id(channel),
                message_id=resolve_id(message),
            )
        )
        return self.parser.parse_message(resp)

    async def get_messages(
        self,
        channel: ULIDOr[TextChannel],
        *,
        limit: int | None = None,
        before: ULIDOr[Message] | None = None,
        after: ULIDOr[Message] | None = None,
        nearby: ULIDOr[Message] | None = None,
    ) -> list[Message]:
        """|coro|

        Retrieves multiple messages from the channel.

        Parameters
        ----------
        channel: ULIDOr[:class:`.TextChannel`]
            The channel.
        limit: Optional[:class:`int`]
            The maximum number of messages to get. Must be between 1 and 100.
        before: Optional[ULIDOr[:class:`.Message`]]
            The message before which messages should be fetched.
        after: Optional[ULIDOr[:class:`.Message`]]
            The message after which messages should be fetched.
        nearby: Optional[ULIDOr[:class:`.Message`]]
            The message to search around. Specifying this ignores ``before`` and ``after`` parameters.

        Returns
        -------
        List[:class:`.Message`]
            The messages retrieved.
        """
        params: dict[str, typing.Any] = {}
        if limit is not None:
            params['limit'] = limit
        if before is not None:
            params['before'] = resolve_id(before)
        if after is not None:
            params['after'] = resolve_id(after)
        if nearby is not None:
            params['nearby'] = resolve_id(nearby)

        resp = await self.request(
            routes.CHANNELS_MESSAGE_QUERY.compile(channel_id=resolve_id(channel)),
            params=params,
            log=False,
        )
        if isinstance(resp, dict):
            resp = resp['messages']
        return list(map(self.parser.parse_message, resp))

    async def add_reaction_to_message(
        self,
        channel: ULIDOr[TextChannel],
        message: ULIDOr[Message],
        emoji: ResolvableEmoji,
    ) -> None:
        """|coro|

        React to a given message.

        Parameters
        ----------
        channel: ULIDOr[:class:`.TextChannel`]
            The channel.
        message: ULIDOr[:class:`.Message`]
            The message.
        emoji: :class:`.ResolvableEmoji`
            The emoji to react with.
        """
        await self.request(
            routes.CHANNELS_MESSAGE_REACT.compile(
                channel_id=resolve_id(channel),
                message_id=resolve_id(message),
                emoji=resolve_emoji(emoji),
            )
        )

    async def remove_reactions_from_message(
        self,
        channel: ULIDOr[TextChannel],
        message: ULIDOr[Message],
        emoji: ResolvableEmoji,
        *,
        user: ULIDOr[User] | None = None,
        remove_all: bool | None = None,
    ) -> None:
        """|coro|

        Remove your own, someone else's or all of a given reaction.

        Removing reactions of others requires :attr:`~Permissions.manage_messages`.
        """
        params = {}
        if user is not None:
            params['user_id'] = resolve_id(user)
        if remove_all is not None:
            params['remove_all'] = utils._bool(remove_all)
        await self.request(
            routes.CHANNELS_MESSAGE_UNREACT.compile(
                channel_id=resolve_id(channel),
                message_id=resolve_id(message),
                emoji=resolve_emoji(emoji),
            ),
            params=params,
        )

    async def send_message(
        self,
        channel: ULIDOr[TextChannel],
        content: str | None = None,
        *,
        nonce: str | None = None,
        attachments: list[str] | None = None,
        replies: list[Reply | ULIDOr[Message]] | None = None,
        embeds: list[SendableEmbed] | None = None,
        masquerade: Masquerade | None = None,
    ) -> Message:
        """|coro|

        Sends a message to the given channel.

        Parameters
        ----------
        channel: ULIDOr[:class:`.TextChannel`]
            The destination channel.
        content: Optional[:class:`str`]
            The message content.
        nonce: Optional[:class:`str`]
            The message nonce.
        attachments: Optional[List[:class:`str`]]
            The IDs of uploaded files to send the message with. See :meth:`.Autumn.upload`.
        replies: Optional[List[Union[:class:`.Reply`, ULIDOr[:class:`.Message`]]]]
            The message replies.
        embeds: Optional[List[:class:`.SendableEmbed`]]
            The embeds to send the message with.
        masquerade: Optional[:class:`.Masquerade`]
            The masquerade for the message.

        Raises
        ------
        :class:`HTTPException`
            Possible values for :attr:`~HTTPException.type`:

            +------------------------+----------------------------------------------------+
            | Value                  | Reason                                             |
            +------------------------+----------------------------------------------------+
            | ``EmptyMessage``       | The message was empty.                             |
            +------------------------+----------------------------------------------------+
            | ``FailedValidation``   | The payload was invalid.                           |
            +------------------------+----------------------------------------------------+
            | ``PayloadTooLarge``    | The message was too large.                         |
            +------------------------+----------------------------------------------------+
            | ``TooManyAttachments`` | You provided more attachments than allowed.        |
            +------------------------+----------------------------------------------------+
        :class:`Forbidden`
            You do not have permissions to send messages.
        :class:`NotFound`
            The channel/file/reply was not found.

        Returns
        -------
        :class:`.Message`
            The message that was sent.
        """
        payload: dict[str, typing.Any] = {}
        if content is not None:
            payload['content'] = content
        if attachments is not None:
            payload['attachments'] = attachments
        if replies is not None:
            payload['replies'] = [
                (reply.build() if isinstance(reply, Reply) else {'id': resolve_id(reply), 'mention': False})
                for reply in replies
            ]
        if embeds is not None:
            payload['embeds'] = [embed.build() for embed in embeds]
        if masquerade is not None:
            payload['masquerade'] = masquerade.build()

        headers = {}
        if nonce is not None:
            headers['Idempotency-Key'] = nonce

        resp = await self.request(
            routes.CHANNELS_MESSAGE_SEND.compile(channel_id=resolve_id(channel)),
            json=payload,
            headers=headers,
        )
        return self.parser.parse_message(resp)

    async def create_webhook(
        self,
        channel: ULIDOr[GroupChannel | TextChannel],
        *,
        name: str,
        avatar: str | None = None,
    ) -> Webhook:
        """|coro|

        Creates a webhook which 3rd party platforms can use to send.

        Parameters
        ----------
        channel: ULIDOr[Union[:class:`.GroupChannel`, :class:`.TextChannel`]]
            The channel to create webhook in.
        name: :class:`str`
            The webhook name. Must be between 1 and 32 chars long.
        avatar: Optional[:class:`str`]
            The ID of uploaded file to use as webhook avatar.

        Returns
        -------
        :class:`.Webhook`
            The created webhook.
        """
        payload: dict[str, typing.Any] = {'name': name}
        if avatar is not None:
            payload['avatar'] = avatar
        resp = await self.request(
            routes.CHANNELS_WEBHOOK_CREATE.compile(channel_id=resolve_id(channel)),
            json=payload,
        )
        return self.parser.parse_webhook(resp)

    async def get_channel_webhooks(self, channel: ULIDOr[GroupChannel | TextChannel], /) -> list[Webhook]:
        """|coro|

        Retrieves all webhooks in a channel.
        """
        resp = await self.request(routes.CHANNELS_WEBHOOK_FETCH_ALL.compile(channel_id=resolve_id(channel)))
        return list(map(self.parser.parse_webhook, resp))

    # Customization control (emojis)
    async def create_server_emoji(
        self,
        server: ULIDOr[Server],
        attachment: str,
        *,
        name: str,
        nsfw: bool | None = None,
    ) -> ServerEmoji:
        """|coro|

        Creates an emoji in server.

        Parameters
        ----------
        server: ULIDOr[:class:`.Server`]
            The server.
        attachment: :class:`str`
            The ID of file uploaded with :attr:`~UploadTag.emojis` tag.
        name: :class:`str`
            The emoji name. Must be at least 2 characters.
        nsfw: Optional[:class:`bool`]
            To mark the emoji as NSFW or not.

        Returns
        -------
        :class:`.ServerEmoji`
            The created emoji.
        """
        payload: dict[str, typing.Any] = {'name': name, 'parent': {'type': 'Server', 'id': resolve_id(server)}}
        if nsfw is not None:
            payload['nsfw'] = nsfw
        resp = await self.request(
            routes.CUSTOMISATION_EMOJI_CREATE.compile(attachment_id=attachment),
            json=payload,
        )
        return self.parser.parse_server_emoji(resp)

    async def delete_emoji(self, emoji: ULIDOr[BaseEmoji], /) -> None:
        """|coro|

        Deletes a emoji.
        """
        await self.request(routes.CUSTOMISATION_EMOJI_DELETE.compile(emoji_id=resolve_id(emoji)))

    async def get_emoji(self, emoji: ULIDOr[BaseEmoji], /) -> Emoji:
        """|coro|

        Retrieves a custom emoji.

        Raises
        ------
        :class:`NotFound`
            The emoji was not found.

        Returns
        -------
        :class:`.Emoji`
            The retrieved emoji.
        """
        resp = await self.request(routes.CUSTOMISATION_EMOJI_FETCH.compile(emoji_id=resolve_id(emoji)))
        return self.parser.parse_emoji(resp)

    # Invites control
    async def delete_invite(self, code: str, /) -> None:
        """|coro|

        Deletes an invite.
        """
        await self.request(routes.INVITES_INVITE_DELETE.compile(invite_code=code))

    async def get_invite(self, code: str, /) -> dict[str, typing.Any]:
        """|coro|

        Retrieves an invite. This does not require authentication.

        Returns
        -------
        Dict[:class:`str`, Any]
            The public invite information.
        """
        return await self.request(routes.INVITES_INVITE_FETCH.compile(invite_code=code), authenticated=False)

    async def accept_invite(self, code: str, /) -> Server | GroupChannel:
        """|coro|

        Accepts an invite.

        Parameters
        ----------
        code: :class:`str`
            The invite code.

        Raises
        ------
        :class:`Forbidden`
            You're banned from the server.
        :class:`NotFound`
            The invite was not found.

        Returns
        -------
        Union[:class:`.Server`, :class:`.GroupChannel`]
            The joined server or group.
        """
        resp = await self.request(routes.INVITES_INVITE_JOIN.compile(invite_code=code))
        if resp['type'] == 'Server':
            return self.parser.parse_server(resp['server'])
        return self.parser.parse_group_channel(resp['channel'])

    # Onboarding control
    async def complete_onboarding(self, username: str, /) -> User:
        """|coro|

        Sets a new username, completes onboarding and allows a user to start using the platform.

        Parameters
        ----------
        username: :class:`str`
            The username to use.

        Returns
        -------
        :class:`.User`
            The updated user.
        """
        resp = await self.request(routes.ONBOARD_COMPLETE.compile(), json={'username': username})
        return self.parser.parse_user(resp)

    async def onboarding_status(self) -> bool:
        """|coro|

        Whether the current account requires onboarding or whether you can continue to send requests as usual.
        """
        resp = await self.request(routes.ONBOARD_HELLO.compile())
        return resp['onboarding']

    # Servers control
    async def ban(self, server: ULIDOr[Server], user: ULIDOr[User], *, reason: str | None = None) -> ServerBan:
        """|coro|

        Bans a user from the server.

        Parameters
        ----------
        server: ULIDOr[:class:`.Server`]
            The server.
        user: ULIDOr[:class:`.User`]
            The user to ban from the server.
        reason: Optional[:class:`str`]
            The ban reason. Can be only up to 1024 characters long.

        Returns
        -------
        :class:`.ServerBan`
            The created ban.
        """
        resp = await self.request(
            routes.SERVERS_BAN_CREATE.compile(server_id=resolve_id(server), user_id=resolve_id(user)),
            json={'reason': reason},
        )
        return self.parser.parse_ban(resp)

    async def get_bans(self, server: ULIDOr[Server], /) -> list[ServerBan]:
        """|coro|

        Retrieves all bans on a server.
        """
        resp = await self.request(routes.SERVERS_BAN_LIST.compile(server_id=resolve_id(server)))
        return list(map(self.parser.parse_ban, resp['bans']))

    async def unban(self, server: ULIDOr[Server], user: ULIDOr[User]) -> None:
        """|coro|

        Unbans a user from the server.
        """
        await self.request(routes.SERVERS_BAN_REMOVE.compile(server_id=resolve_id(server), user_id=resolve_id(user)))

    async def create_server_channel(
        self,
        server: ULIDOr[Server],
        *,
        type: typing.Literal['Text', 'Voice'] = 'Text',
        name: str,
        description: str | None = None,
        nsfw: bool | None = None,
    ) -> Channel:
        """|coro|

        Create a new text or voice channel within server.

        Parameters
        ----------
        server: ULIDOr[:class:`.Server`]
            The server.
        type: :class:`str`
            The channel type, ``'Text'`` or ``'Voice'``. Defaults to ``'Text'``.
        name: :class:`str`
            The channel name. Must be between 1 and 32 characters.
        description: Optional[:class:`str`]
            The channel description. Can be only up to 1024 characters.
        nsfw: Optional[:class:`bool`]
            To mark channel as NSFW or not.

        Returns
        -------
        :class:`.Channel`
            The channel created in server.
        """
        payload: dict[str, typing.Any] = {'type': type, 'name': name}
        if description is not None:
            payload['description'] = description
        if nsfw is not None:
            payload['nsfw'] = nsfw
        resp = await self.request(
            routes.SERVERS_CHANNEL_CREATE.compile(server_id=resolve_id(server)),
            json=payload,
        )
        return self.parser.parse_channel(resp)

    async def get_server_emojis(self, server: ULIDOr[Server], /) -> list[ServerEmoji]:
        """|coro|

        Retrieves all custom :class:`.ServerEmoji`'s that belong to a server.
        """
        resp = await self.request(routes.SERVERS_EMOJI_LIST.compile(server_id=resolve_id(server)))
        return list(map(self.parser.parse_server_emoji, resp))

    async def edit_member(
        self,
        server: ULIDOr[Server],
        member: str,
        *,
        nick: UndefinedOr[str | None] = UNDEFINED,
        roles: UndefinedOr[list[ULIDOr[Role]] | None] = UNDEFINED,
        timeout: UndefinedOr[int | None] = UNDEFINED,
    ) -> Member:
        """|coro|

        Edits the member.

        Passing ``None`` to ``nick``, ``roles`` or ``timeout`` removes them.

        Parameters
        ----------
        server: ULIDOr[:class:`.Server`]
            The server.
        member: :class:`str`
            The ID of member's user.
        nick: UndefinedOr[Optional[:class:`str`]]
            The member's new nick.
        roles: UndefinedOr[Optional[List[ULIDOr[:class:`.Role`]]]]
            The member's new list of roles.
        timeout: UndefinedOr[Optional[:class:`int`]]
            The duration in seconds the member should be timed out for.

        Returns
        -------
        :class:`.Member`
            The newly updated member.
        """
        payload: dict[str, typing.Any] = {}
        remove: list[str] = []
        if nick is not UNDEFINED:
            if nick is None:
                remove.append('Nickname')
            else:
                payload['nickname'] = nick
        if roles is not UNDEFINED:
            if roles is None:
                remove.append('Roles')
            else:
                payload['roles'] = [resolve_id(role) for role in roles]
        if timeout is not UNDEFINED:
            if timeout is None:
                remove.append('Timeout')
            else:
                payload['timeout'] = timeout
        if remove:
            payload['remove'] = remove

        resp = await self.request(
            routes.SERVERS_MEMBER_EDIT.compile(server_id=resolve_id(server), member_id=member),
            json=payload,
        )
        return self.parser.parse_member(resp)

    async def get_member(self, server: ULIDOr[Server], member: str) -> Member:
        """|coro|

        Retrieves a member.

        Raises
        ------
        :class:`NotFound`
            The server or member was not found.

        Returns
        -------
        :class:`.Member`
            The retrieved member.
        """
        resp = await self.request(routes.SERVERS_MEMBER_FETCH.compile(server_id=resolve_id(server), member_id=member))
        return self.parser.parse_member(resp)

    async def get_members(self, server: ULIDOr[Server], /, *, exclude_offline: bool | None = None) -> list[Member]:
        """|coro|

        Retrieves all server members.

        Parameters
        ----------
        server: ULIDOr[:class:`.Server`]
            The server.
        exclude_offline: Optional[:class:`bool`]
            Whether to exclude offline users.

        Returns
        -------
        List[:class:`.Member`]
            The retrieved members.
        """
        params = {}
        if exclude_offline is not None:
            params['exclude_offline'] = utils._bool(exclude_offline)

        resp = await self.request(
            routes.SERVERS_MEMBER_FETCH_ALL.compile(server_id=resolve_id(server)),
            log=False,
            params=params,
        )
        return list(map(self.parser.parse_member, resp['members']))

    async def kick_member(self, server: ULIDOr[Server], member: str, /) -> None:
        """|coro|

        Removes a member from the server.
        """
        await self.request(routes.SERVERS_MEMBER_REMOVE.compile(server_id=resolve_id(server), member_id=member))

    async def create_role(self, server: ULIDOr[Server], *, name: str, rank: int | None = None) -> Role:
        """|coro|

        Creates a new server role.

        Parameters
        ----------
        server: ULIDOr[:class:`.Server`]
            The server to create role in.
        name: :class:`str`
            The role name. Must be between 1 and 32 characters long.
        rank: Optional[:class:`int`]
            The ranking position. The smaller value is, the more role takes priority.

        Returns
        -------
        :class:`.Role`
            The role created in server.
        """
        server_id = resolve_id(server)
        payload: dict[str, typing.Any] = {'name': name}
        if rank is not None:
            payload['rank'] = rank
        resp = await self.request(routes.SERVERS_ROLES_CREATE.compile(server_id=server_id), json=payload)
        return self.parser.parse_role(resp['role'], resp['id'], server_id)

    async def delete_role(self, server: ULIDOr[Server], role: ULIDOr[Role], /) -> None:
        """|coro|

        Deletes a server role.
        """
        await self.request(routes.SERVERS_ROLES_DELETE.compile(server_id=resolve_id(server), role_id=resolve_id(role)))

    async def edit_role(
        self,
        server: ULIDOr[Server],
        role: ULIDOr[Role],
        *,
        name: UndefinedOr[str] = UNDEFINED,
        colour: UndefinedOr[str | None] = UNDEFINED,
        hoist: UndefinedOr[bool] = UNDEFINED,
        rank: UndefinedOr[int] = UNDEFINED,
    ) -> Role:
        """|coro|

        Edits a role.

        Parameters
        ----------
        server: ULIDOr[:class:`.Server`]
            The server the role in.
        role: ULIDOr[:class:`.Role`]
            The role to edit.
        name: UndefinedOr[:class:`str`]
            The new role name.
        colour: UndefinedOr[Optional[:class:`str`]]
            The new role colour. Passing ``None`` removes it.
        hoist: UndefinedOr[:class:`bool`]
            Whether this role should be displayed separately.
        rank: UndefinedOr[:class:`int`]
            The new ranking position.

        Returns
        -------
        :class:`.Role`
            The newly updated role.
        """
        server_id = resolve_id(server)
        role_id = resolve_id(role)

        payload: dict[str, typing.Any] = {}
        remove: list[str] = []
        if name is not UNDEFINED:
            payload['name'] = name
        if colour is not UNDEFINED:
            if colour is None:
                remove.append('Colour')
            else:
                payload['colour'] = colour
        if hoist is not UNDEFINED:
            payload['hoist'] = hoist
        if rank is not UNDEFINED:
            payload['rank'] = rank
        if remove:
            payload['remove'] = remove

        resp = await self.request(
            routes.SERVERS_ROLES_EDIT.compile(server_id=server_id, role_id=role_id),
            json=payload,
        )
        return self.parser.parse_role(resp, role_id, server_id)

    async def leave_server(self, server: ULIDOr[Server], /, *, silent: bool | None = None) -> None:
        """|coro|

        Leaves the server if not owner otherwise deletes it.

        Parameters
        ----------
        server: ULIDOr[:class:`.Server`]
            The server to leave from.
        silent: Optional[:class:`bool`]
            Whether to not send a leave message.
        """
        params = {}
        if silent is not None:
            params['leave_silently'] = utils._bool(silent)
        await self.request(routes.SERVERS_SERVER_DELETE.compile(server_id=resolve_id(server)), params=params)

    async def edit_server(
        self,
        server: ULIDOr[Server],
        *,
        name: UndefinedOr[str] = UNDEFINED,
        description: UndefinedOr[str | None] = UNDEFINED,
        icon: UndefinedOr[str | None] = UNDEFINED,
        banner: UndefinedOr[str | None] = UNDEFINED,
        default_permissions: UndefinedOr[int] = UNDEFINED,
        analytics: UndefinedOr[bool] = UNDEFINED,
    ) -> Server:
        """|coro|

        Edits the server.

        Passing ``None`` to ``description``, ``icon`` or ``banner`` removes them.

        Returns
        -------
        :class:`.Server`
            The newly updated server.
        """
        payload: dict[str, typing.Any] = {}
        remove: list[str] = []
        if name is not UNDEFINED:
            payload['name'] = name
        if description is not UNDEFINED:
            if description is None:
                remove.append('Description')
            else:
                payload['description'] = description
        if icon is not UNDEFINED:
            if icon is None:
                remove.append('Icon')
            else:
                payload['icon'] = icon
        if banner is not UNDEFINED:
            if banner is None:
                remove.append('Banner')
            else:
                payload['banner'] = banner
        if default_permissions is not UNDEFINED:
            payload['default_permissions'] = default_permissions
        if analytics is not UNDEFINED:
            payload['analytics'] = analytics
        if remove:
            payload['remove'] = remove

        resp = await self.request(
            routes.SERVERS_SERVER_EDIT.compile(server_id=resolve_id(server)),
            json=payload,
        )
        return self.parser.parse_server(resp)

    async def get_server(self, server: ULIDOr[Server], /, *, populate_channels: bool | None = None) -> Server:
        """|coro|

        Retrieves a :class:`.Server`.

        Parameters
        ----------
        server: ULIDOr[:class:`.Server`]
            The server to fetch.
        populate_channels: Optional[:class:`bool`]
            Whether to populate channels.

        Raises
        ------
        :class:`NotFound`
            The server was not found.

        Returns
        -------
        :class:`.Server`
            The retrieved server.
        """
        params = {}
        if populate_channels is not None:
            params['include_channels'] = utils._bool(populate_channels)

        resp = await self.request(
            routes.SERVERS_SERVER_FETCH.compile(server_id=resolve_id(server)),
            params=params,
        )
        if populate_channels:
            resp = dict(resp)
            resp['channels'] = [channel['_id'] for channel in resp.get('channels', ())]
        return self.parser.parse_server(resp)

    async def set_role_permissions(
        self,
        server: ULIDOr[Server],
        role: ULIDOr[Role],
        permissions: PermissionOverride,
    ) -> Server:
        """|coro|

        Sets permissions for the specified role in the server.
        """
        resp = await self.request(
            routes.SERVERS_PERMISSIONS_SET.compile(
                server_id=resolve_id(server),
                role_id=resolve_id(role),
            ),
            json={'permissions': permissions.build()},
        )
        return self.parser.parse_server(resp)

    # Users control
    async def edit_my_user(
        self,
        *,
        display_name: UndefinedOr[str | None] = UNDEFINED,
        avatar: UndefinedOr[str | None] = UNDEFINED,
        status_text: UndefinedOr[str | None] = UNDEFINED,
        profile_content: UndefinedOr[str | None] = UNDEFINED,
    ) -> User:
        """|coro|

        Edits the current user.

        Passing ``None`` to any parameter removes it.

        Returns
        -------
        :class:`.User`
            The newly updated authenticated user.
        """
        payload: dict[str, typing.Any] = {}
        remove: list[str] = []
        if display_name is not UNDEFINED:
            if display_name is None:
                remove.append('DisplayName')
            else:
                payload['display_name'] = display_name
        if avatar is not UNDEFINED:
            if avatar is None:
                remove.append('Avatar')
            else:
                payload['avatar'] = avatar
        if status_text is not UNDEFINED:
            if status_text is None:
                remove.append('StatusText')
            else:
                payload['status'] = {'text': status_text}
        if profile_content is not UNDEFINED:
            if profile_content is None:
                remove.append('ProfileContent')
            else:
                payload['profile'] = {'content': profile_content}
        if remove:
            payload['remove'] = remove

        resp = await self.request(routes.USERS_EDIT_SELF_USER.compile(), json=payload)
        return self.parser.parse_user(resp)

    async def get_me(self) -> User:
        """|coro|

        Retrieve your user information.

        Raises
        ------
        :class:`Unauthorized`
            Invalid token.

        Returns
        -------
        :class:`.User`
            The retrieved user.
        """
        resp = await self.request(routes.USERS_FETCH_SELF.compile())
        return self.parser.parse_user(resp)

    async def get_user(self, user: ULIDOr[User], /) -> User:
        """|coro|

        Retrieve a user's information.

        Raises
        ------
        :class:`NotFound`
            The user was not found.

        Returns
        -------
        :class:`.User`
            The retrieved user.
        """
        resp = await self.request(routes.USERS_FETCH_USER.compile(user_id=resolve_id(user)))
        return self.parser.parse_user(resp)

    async def open_dm(self, user: ULIDOr[User], /) -> Channel:
        """|coro|

        Retrieve a DM (or create if it doesn't exist) with another user.

        If target is current user, a saved messages channel is returned.

        Returns
        -------
        :class:`.Channel`
            The private channel.
        """
        resp = await self.request(routes.USERS_OPEN_DM.compile(user_id=resolve_id(user)))
        return self.parser.parse_channel(resp)

    # Webhooks control
    async def delete_webhook(self, webhook: ULIDOr[Webhook], /, *, token: str | None = None) -> None:
        """|coro|

        Deletes a webhook. If webhook token wasn't given, the library will attempt delete webhook with current bot/user token.
        """
        if token is None:
            await self.request(routes.WEBHOOKS_WEBHOOK_DELETE.compile(webhook_id=resolve_id(webhook)))
        else:
            await self.request(
                routes.WEBHOOKS_WEBHOOK_DELETE_WITH_TOKEN.compile(
                    webhook_id=resolve_id(webhook),
                    webhook_token=token,
                ),
                authenticated=False,
            )

    async def edit_webhook(
        self,
        webhook: ULIDOr[Webhook],
        *,
        name: UndefinedOr[str] = UNDEFINED,
        avatar: UndefinedOr[str | None] = UNDEFINED,
        permissions: UndefinedOr[int] = UNDEFINED,
    ) -> Webhook:
        """|coro|

        Edits a webhook.

        Parameters
        ----------
        webhook: ULIDOr[:class:`.Webhook`]
            The webhook to edit.
        name: UndefinedOr[:class:`str`]
            The new webhook name. Must be between 1 and 32 chars long.
        avatar: UndefinedOr[Optional[:class:`str`]]
            The ID of uploaded file to use as new avatar. Passing ``None`` removes it.
        permissions: UndefinedOr[:class:`int`]
            The new webhook permissions.

        Returns
        -------
        :class:`.Webhook`
            The newly updated webhook.
        """
        payload: dict[str, typing.Any] = {}
        remove: list[str] = []
        if name is not UNDEFINED:
            payload['name'] = name
        if avatar is not UNDEFINED:
            if avatar is None:
                remove.append('Avatar')
            else:
                payload['avatar'] = avatar
        if permissions is not UNDEFINED:
            payload['permissions'] = permissions
        if remove:
            payload['remove'] = remove

        resp = await self.request(
            routes.WEBHOOKS_WEBHOOK_EDIT.compile(webhook_id=resolve_id(webhook)),
            json=payload,
        )
        return self.parser.parse_webhook(resp)

    async def get_webhook(self, webhook: ULIDOr[Webhook], /) -> Webhook:
        """|coro|

        Retrieves a webhook.

        Raises
        ------
        :class:`NotFound`
            The webhook was not found.

        Returns
        -------
        :class:`.Webhook`
            The retrieved webhook.
        """
        resp = await self.request(routes.WEBHOOKS_WEBHOOK_FETCH.compile(webhook_id=resolve_id(webhook)))
        return self.parser.parse_webhook(resp)


__all__ = (
    'DEFAULT_HTTP_USER_AGENT',
    'DEFAULT_API_URL',
    'HTTPClient',
)
