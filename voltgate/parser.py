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

from datetime import datetime, timezone
import sys
import typing

from .cdn import AssetMetadata, Asset
from .channel import (
    SavedMessagesChannel,
    DMChannel,
    GroupChannel,
    TextChannel,
    VoiceChannel,
    PartialChannel,
    Channel,
)
from .core import UNDEFINED
from .emoji import ServerEmoji, DetachedEmoji, Emoji
from .enums import (
    AssetMetadataType,
    EmbedType,
    MemberRemovalIntention,
    Presence,
    RelationshipStatus,
)
from .events import (
    AuthenticatedEvent,
    LogoutEvent,
    ReadyEvent,
    MessageCreateEvent,
    MessageUpdateEvent,
    MessageAppendEvent,
    MessageDeleteEvent,
    MessageDeleteBulkEvent,
    MessageReactEvent,
    MessageUnreactEvent,
    MessageClearReactionEvent,
    ChannelCreateEvent,
    ChannelUpdateEvent,
    ChannelDeleteEvent,
    GroupRecipientAddEvent,
    GroupRecipientRemoveEvent,
    ChannelStartTypingEvent,
    ChannelStopTypingEvent,
    MessageAckEvent,
    ServerCreateEvent,
    ServerUpdateEvent,
    ServerDeleteEvent,
    ServerMemberJoinEvent,
    ServerMemberUpdateEvent,
    ServerMemberRemoveEvent,
    ServerRoleUpdateEvent,
    ServerRoleDeleteEvent,
    ServerEmojiCreateEvent,
    ServerEmojiDeleteEvent,
    ReportCreateEvent,
    UserUpdateEvent,
    UserRelationshipUpdateEvent,
    UserSettingsUpdateEvent,
    UserPlatformWipeEvent,
    WebhookCreateEvent,
    WebhookUpdateEvent,
    WebhookDeleteEvent,
    AuthifierEvent,
)
from .message import (
    Embed,
    MessageMasquerade,
    MessageWebhook,
    Message,
    PartialMessage,
    MessageAppendData,
)
from .permissions import PermissionOverride
from .server import (
    Category,
    SystemMessageChannels,
    Role,
    PartialRole,
    Server,
    PartialServer,
    Member,
    PartialMember,
    ServerBan,
)
from .user import (
    UserStatus,
    PartialUserStatus,
    UserProfile,
    PartialUserProfile,
    Relationship,
    BotUserInfo,
    User,
    PartialUser,
)
from .utils import utcnow
from .webhook import Webhook, PartialWebhook

if typing.TYPE_CHECKING:
    from collections.abc import Callable

    from .shard import Shard

    Payload = dict[str, typing.Any]

if sys.version_info >= (3, 11):
    _parse_dt = datetime.fromisoformat
else:
    # datetime.fromisoformat in Python 3.10 doesn't parse ISO8601 timestamps, so we have to do it ourselves
    # Example: 2025-02-03T19:39:34.263Z

    _strptime = datetime.strptime

    def _parse_dt(date_string: str, /) -> datetime:
        return _strptime(date_string, '%Y-%m-%dT%H:%M:%S.%fZ').replace(tzinfo=timezone.utc)


class Parser:
    """An factory that produces entities and events from raw data.

    All methods raise :class:`KeyError`, :class:`TypeError` or :class:`ValueError`
    if the payload is malformed.
    """

    __slots__ = (
        '_channel_parsers',
        '_event_parsers',
    )

    def __init__(self) -> None:
        self._channel_parsers: dict[str, Callable[[Payload], Channel]] = {
            'SavedMessages': self.parse_saved_messages_channel,
            'DirectMessage': self.parse_direct_message_channel,
            'Group': self.parse_group_channel,
            'TextChannel': self.parse_text_channel,
            'VoiceChannel': self.parse_voice_channel,
        }
        self._event_parsers: dict[str, Callable[[Shard, Payload], typing.Any]] = {
            'Authenticated': self.parse_authenticated_event,
            'Logout': self.parse_logout_event,
            'Ready': self.parse_ready_event,
            'Message': self.parse_message_event,
            'MessageUpdate': self.parse_message_update_event,
            'MessageAppend': self.parse_message_append_event,
            'MessageDelete': self.parse_message_delete_event,
            'MessageReact': self.parse_message_react_event,
            'MessageUnreact': self.parse_message_unreact_event,
            'MessageRemoveReaction': self.parse_message_remove_reaction_event,
            'BulkMessageDelete': self.parse_bulk_message_delete_event,
            'BulkDeleteMessage': self.parse_bulk_message_delete_event,
            'ChannelCreate': self.parse_channel_create_event,
            'ChannelUpdate': self.parse_channel_update_event,
            'ChannelDelete': self.parse_channel_delete_event,
            'ChannelGroupJoin': self.parse_channel_group_join_event,
            'ChannelGroupLeave': self.parse_channel_group_leave_event,
            'ChannelStartTyping': self.parse_channel_start_typing_event,
            'ChannelStopTyping': self.parse_channel_stop_typing_event,
            'ChannelAck': self.parse_channel_ack_event,
            'ServerCreate': self.parse_server_create_event,
            'ServerUpdate': self.parse_server_update_event,
            'ServerDelete': self.parse_server_delete_event,
            'ServerMemberJoin': self.parse_server_member_join_event,
            'ServerMemberUpdate': self.parse_server_member_update_event,
            'ServerMemberLeave': self.parse_server_member_leave_event,
            'ServerRoleUpdate': self.parse_server_role_update_event,
            'ServerRoleDelete': self.parse_server_role_delete_event,
            'EmojiCreate': self.parse_emoji_create_event,
            'EmojiDelete': self.parse_emoji_delete_event,
            'ReportCreate': self.parse_report_create_event,
            'UserUpdate': self.parse_user_update_event,
            'UserRelationship': self.parse_user_relationship_event,
            'UserSettingsUpdate': self.parse_user_settings_update_event,
            'UserPlatformWipe': self.parse_user_platform_wipe_event,
            'WebhookCreate': self.parse_webhook_create_event,
            'WebhookUpdate': self.parse_webhook_update_event,
            'WebhookDelete': self.parse_webhook_delete_event,
            'Auth': self.parse_auth_event,
        }

    def get_event_parser(self, type: str, /) -> Callable[[Shard, Payload], typing.Any] | None:
        """Returns parser for the event discriminator, or ``None`` if it is not known."""
        return self._event_parsers.get(type)

    # Entities

    def parse_asset_metadata(self, payload: Payload, /) -> AssetMetadata:
        return AssetMetadata(
            type=AssetMetadataType(payload['type']),
            width=payload.get('width'),
            height=payload.get('height'),
        )

    def parse_asset(self, payload: Payload, /) -> Asset:
        """Parses a file object.

        Parameters
        ----------
        payload: Dict[:class:`str`, Any]
            The file payload to parse.

        Returns
        -------
        :class:`.Asset`
            The parsed file object.
        """
        return Asset(
            id=payload['_id'],
            tag=payload['tag'],
            filename=payload['filename'],
            metadata=self.parse_asset_metadata(payload['metadata']),
            content_type=payload['content_type'],
            size=payload['size'],
            deleted=payload.get('deleted', False),
            reported=payload.get('reported', False),
            message_id=payload.get('message_id'),
            user_id=payload.get('user_id'),
            server_id=payload.get('server_id'),
            object_id=payload.get('object_id'),
        )

    def _parse_optional_asset(self, payload: Payload | None, /) -> Asset | None:
        return None if payload is None else self.parse_asset(payload)

    def parse_permission_override_field(self, payload: Payload, /) -> PermissionOverride:
        return PermissionOverride(allow=payload['a'], deny=payload['d'])

    def parse_user_status(self, payload: Payload, /) -> UserStatus:
        presence = payload.get('presence')
        return UserStatus(
            text=payload.get('text'),
            presence=None if presence is None else Presence(presence),
        )

    def parse_user_profile(self, payload: Payload, /) -> UserProfile:
        return UserProfile(
            content=payload.get('content'),
            background=self._parse_optional_asset(payload.get('background')),
        )

    def parse_relationship(self, payload: Payload, /) -> Relationship:
        return Relationship(id=payload['_id'], status=RelationshipStatus(payload['status']))

    def parse_user(self, payload: Payload, /) -> User:
        """Parses a user object.

        Parameters
        ----------
        payload: Dict[:class:`str`, Any]
            The user payload to parse.

        Returns
        -------
        :class:`.User`
            The parsed user object.
        """
        status = payload.get('status')
        profile = payload.get('profile')
        bot = payload.get('bot')

        return User(
            id=payload['_id'],
            name=payload['username'],
            discriminator=payload['discriminator'],
            display_name=payload.get('display_name'),
            internal_avatar=self._parse_optional_asset(payload.get('avatar')),
            relations=[self.parse_relationship(r) for r in payload.get('relations', ())],
            raw_badges=payload.get('badges', 0),
            status=None if status is None else self.parse_user_status(status),
            profile=None if profile is None else self.parse_user_profile(profile),
            raw_flags=payload.get('flags', 0),
            privileged=payload.get('privileged', False),
            bot=None if bot is None else BotUserInfo(owner_id=bot['owner']),
            relationship=RelationshipStatus(payload.get('relationship', 'None')),
            online=payload.get('online', False),
        )

    def parse_saved_messages_channel(self, payload: Payload, /) -> SavedMessagesChannel:
        return SavedMessagesChannel(id=payload['_id'], user_id=payload['user'])

    def parse_direct_message_channel(self, payload: Payload, /) -> DMChannel:
        recipient_ids = payload['recipients']
        return DMChannel(
            id=payload['_id'],
            active=payload['active'],
            recipient_ids=(recipient_ids[0], recipient_ids[1]),
            last_message_id=payload.get('last_message_id'),
        )

    def parse_group_channel(self, payload: Payload, /) -> GroupChannel:
        return GroupChannel(
            id=payload['_id'],
            name=payload['name'],
            owner_id=payload['owner'],
            description=payload.get('description'),
            recipient_ids=payload['recipients'],
            internal_icon=self._parse_optional_asset(payload.get('icon')),
            last_message_id=payload.get('last_message_id'),
            raw_permissions=payload.get('permissions'),
            nsfw=payload.get('nsfw', False),
        )

    def _server_channel_fields(self, payload: Payload, /) -> dict[str, typing.Any]:
        default_permissions = payload.get('default_permissions')
        return {
            'id': payload['_id'],
            'server_id': payload['server'],
            'name': payload['name'],
            'description': payload.get('description'),
            'internal_icon': self._parse_optional_asset(payload.get('icon')),
            'default_permissions': (
                None if default_permissions is None else self.parse_permission_override_field(default_permissions)
            ),
            'role_permissions': {
                k: self.parse_permission_override_field(v) for k, v in payload.get('role_permissions', {}).items()
            },
            'nsfw': payload.get('nsfw', False),
        }

    def parse_text_channel(self, payload: Payload, /) -> TextChannel:
        return TextChannel(
            **self._server_channel_fields(payload),
            last_message_id=payload.get('last_message_id'),
        )

    def parse_voice_channel(self, payload: Payload, /) -> VoiceChannel:
        return VoiceChannel(**self._server_channel_fields(payload))

    def parse_channel(self, payload: Payload, /) -> Channel:
        """Parses a channel object.

        Parameters
        ----------
        payload: Dict[:class:`str`, Any]
            The channel payload to parse.

        Raises
        ------
        ValueError
            The channel type is unknown.

        Returns
        -------
        :class:`.Channel`
            The parsed channel object.
        """
        channel_type = payload['channel_type']
        try:
            parser = self._channel_parsers[channel_type]
        except KeyError:
            raise ValueError(f'Unknown channel type: {channel_type!r}') from None
        return parser(payload)

    def parse_category(self, payload: Payload, /) -> Category:
        return Category(id=payload['id'], title=payload['title'], channels=payload['channels'])

    def parse_system_message_channels(self, payload: Payload, /) -> SystemMessageChannels:
        return SystemMessageChannels(
            user_joined=payload.get('user_joined'),
            user_left=payload.get('user_left'),
            user_kicked=payload.get('user_kicked'),
            user_banned=payload.get('user_banned'),
        )

    def parse_role(self, payload: Payload, role_id: str, server_id: str, /) -> Role:
        return Role(
            id=role_id,
            server_id=server_id,
            name=payload['name'],
            permissions=self.parse_permission_override_field(payload['permissions']),
            colour=payload.get('colour'),
            hoist=payload.get('hoist', False),
            rank=payload['rank'],
        )

    def parse_server(self, payload: Payload, /) -> Server:
        """Parses a server object.

        Parameters
        ----------
        payload: Dict[:class:`str`, Any]
            The server payload to parse.

        Returns
        -------
        :class:`.Server`
            The parsed server object.
        """
        server_id = payload['_id']
        system_messages = payload.get('system_messages')

        return Server(
            id=server_id,
            owner_id=payload['owner'],
            name=payload['name'],
            description=payload.get('description'),
            channel_ids=payload['channels'],
            categories=[self.parse_category(c) for c in payload.get('categories', ())],
            system_messages=None if system_messages is None else self.parse_system_message_channels(system_messages),
            roles={k: self.parse_role(v, k, server_id) for k, v in payload.get('roles', {}).items()},
            default_permissions=payload['default_permissions'],
            internal_icon=self._parse_optional_asset(payload.get('icon')),
            internal_banner=self._parse_optional_asset(payload.get('banner')),
            raw_flags=payload.get('flags', 0),
            nsfw=payload.get('nsfw', False),
            analytics=payload.get('analytics', False),
            discoverable=payload.get('discoverable', False),
        )

    def parse_member(self, payload: Payload, /) -> Member:
        id = payload['_id']
        timeout = payload.get('timeout')

        return Member(
            id=id['user'],
            server_id=id['server'],
            joined_at=_parse_dt(payload['joined_at']),
            nick=payload.get('nickname'),
            internal_server_avatar=self._parse_optional_asset(payload.get('avatar')),
            roles=payload.get('roles', []),
            timed_out_until=None if timeout is None else _parse_dt(timeout),
        )

    def parse_ban(self, payload: Payload, /) -> ServerBan:
        id = payload['_id']
        return ServerBan(server_id=id['server'], user_id=id['user'], reason=payload.get('reason'))

    def parse_emoji(self, payload: Payload, /) -> Emoji:
        """Parses an emoji object.

        Parameters
        ----------
        payload: Dict[:class:`str`, Any]
            The emoji payload to parse.

        Returns
        -------
        Union[:class:`.ServerEmoji`, :class:`.DetachedEmoji`]
            The parsed emoji object.
        """
        parent = payload['parent']
        if parent['type'] == 'Server':
            return ServerEmoji(
                id=payload['_id'],
                server_id=parent['id'],
                creator_id=payload['creator_id'],
                name=payload['name'],
                animated=payload.get('animated', False),
                nsfw=payload.get('nsfw', False),
            )
        return DetachedEmoji(
            id=payload['_id'],
            creator_id=payload['creator_id'],
            name=payload['name'],
            animated=payload.get('animated', False),
            nsfw=payload.get('nsfw', False),
        )

    def parse_server_emoji(self, payload: Payload, /) -> ServerEmoji:
        emoji = self.parse_emoji(payload)
        if not isinstance(emoji, ServerEmoji):
            raise ValueError(f'Expected server emoji, got {emoji!r}')
        return emoji

    def parse_embed(self, payload: Payload, /) -> Embed:
        embed_type = EmbedType(payload['type'])
        media = payload.get('media')

        if embed_type in (EmbedType.image, EmbedType.video):
            return Embed(
                type=embed_type,
                url=payload.get('url'),
                width=payload.get('width'),
                height=payload.get('height'),
            )

        return Embed(
            type=embed_type,
            url=payload.get('url'),
            title=payload.get('title'),
            description=payload.get('description'),
            icon_url=payload.get('icon_url'),
            colour=payload.get('colour'),
            site_name=payload.get('site_name'),
            internal_media=self._parse_optional_asset(media) if isinstance(media, dict) else None,
        )

    def parse_message(self, payload: Payload, /) -> Message:
        """Parses a message object.

        Parameters
        ----------
        payload: Dict[:class:`str`, Any]
            The message payload to parse.

        Returns
        -------
        :class:`.Message`
            The parsed message object.
        """
        webhook = payload.get('webhook')
        edited_at = payload.get('edited')
        masquerade = payload.get('masquerade')

        return Message(
            id=payload['_id'],
            nonce=payload.get('nonce'),
            channel_id=payload['channel'],
            author_id=payload['author'],
            webhook=None if webhook is None else MessageWebhook(name=webhook['name'], avatar=webhook.get('avatar')),
            content=payload.get('content', ''),
            system_event=payload.get('system'),
            attachments=[self.parse_asset(a) for a in payload.get('attachments', ())],
            edited_at=None if edited_at is None else _parse_dt(edited_at),
            embeds=[self.parse_embed(e) for e in payload.get('embeds', ())],
            mention_ids=payload.get('mentions', []),
            replies=payload.get('replies', []),
            reactions=payload.get('reactions', {}),
            masquerade=(
                None
                if masquerade is None
                else MessageMasquerade(
                    name=masquerade.get('name'),
                    avatar=masquerade.get('avatar'),
                    colour=masquerade.get('colour'),
                )
            ),
            pinned=payload.get('pinned', False),
        )

    def parse_webhook(self, payload: Payload, /) -> Webhook:
        return Webhook(
            id=payload['id'],
            name=payload['name'],
            internal_avatar=self._parse_optional_asset(payload.get('avatar')),
            creator_id=payload['creator_id'],
            channel_id=payload['channel_id'],
            raw_permissions=payload['permissions'],
            token=payload.get('token'),
        )

    # Events

    def parse_authenticated_event(self, shard: Shard, payload: Payload, /) -> AuthenticatedEvent:
        return AuthenticatedEvent(shard=shard)

    def parse_logout_event(self, shard: Shard, payload: Payload, /) -> LogoutEvent:
        return LogoutEvent(shard=shard)

    def parse_ready_event(self, shard: Shard, payload: Payload, /) -> ReadyEvent:
        """Parses a Ready event.

        Parameters
        ----------
        shard: :class:`.Shard`
            The shard the event arrived on.
        payload: Dict[:class:`str`, Any]
            The event payload to parse.

        Returns
        -------
        :class:`.ReadyEvent`
            The parsed ready event object.
        """
        return ReadyEvent(
            shard=shard,
            users=[self.parse_user(u) for u in payload.get('users', ())],
            servers=[self.parse_server(s) for s in payload.get('servers', ())],
            channels=[self.parse_channel(c) for c in payload.get('channels', ())],
            members=[self.parse_member(m) for m in payload.get('members', ())],
            emojis=[self.parse_server_emoji(e) for e in payload.get('emojis') or ()],
        )

    def parse_message_event(self, shard: Shard, payload: Payload, /) -> MessageCreateEvent:
        return MessageCreateEvent(shard=shard, message=self.parse_message(payload))

    def parse_message_update_event(self, shard: Shard, payload: Payload, /) -> MessageUpdateEvent:
        data = payload['data']
        embeds = data.get('embeds')
        edited_at = data.get('edited')

        return MessageUpdateEvent(
            shard=shard,
            message=PartialMessage(
                id=payload['id'],
                channel_id=payload['channel'],
                content=data.get('content', UNDEFINED),
                embeds=UNDEFINED if embeds is None else [self.parse_embed(e) for e in embeds],
                edited_at=UNDEFINED if edited_at is None else _parse_dt(edited_at),
                pinned=data.get('pinned', UNDEFINED),
            ),
        )

    def parse_message_append_event(self, shard: Shard, payload: Payload, /) -> MessageAppendEvent:
        data = payload['append']
        embeds = data.get('embeds')

        return MessageAppendEvent(
            shard=shard,
            data=MessageAppendData(
                id=payload['id'],
                channel_id=payload['channel'],
                embeds=UNDEFINED if embeds is None else [self.parse_embed(e) for e in embeds],
            ),
        )

    def parse_message_delete_event(self, shard: Shard, payload: Payload, /) -> MessageDeleteEvent:
        return MessageDeleteEvent(shard=shard, channel_id=payload['channel'], message_id=payload['id'])

    def parse_message_react_event(self, shard: Shard, payload: Payload, /) -> MessageReactEvent:
        return MessageReactEvent(
            shard=shard,
            channel_id=payload['channel_id'],
            message_id=payload['id'],
            user_id=payload['user_id'],
            emoji=payload['emoji_id'],
        )

    def parse_message_unreact_event(self, shard: Shard, payload: Payload, /) -> MessageUnreactEvent:
        return MessageUnreactEvent(
            shard=shard,
            channel_id=payload['channel_id'],
            message_id=payload['id'],
            user_id=payload['user_id'],
            emoji=payload['emoji_id'],
        )

    def parse_message_remove_reaction_event(self, shard: Shard, payload: Payload, /) -> MessageClearReactionEvent:
        return MessageClearReactionEvent(
            shard=shard,
            channel_id=payload['channel_id'],
            message_id=payload['id'],
            emoji=payload['emoji_id'],
        )

    def parse_bulk_message_delete_event(self, shard: Shard, payload: Payload, /) -> MessageDeleteBulkEvent:
        channel_id = payload['channel'] if 'channel' in payload else payload['channel_id']
        return MessageDeleteBulkEvent(shard=shard, channel_id=channel_id, message_ids=payload['ids'])

    def parse_channel_create_event(self, shard: Shard, payload: Payload, /) -> ChannelCreateEvent:
        return ChannelCreateEvent(shard=shard, channel=self.parse_channel(payload))

    def parse_channel_update_event(self, shard: Shard, payload: Payload, /) -> ChannelUpdateEvent:
        """Parses a ChannelUpdate event.

        Fields listed in ``clear`` are represented as ``None``.
        """
        clear = payload.get('clear', ())
        data = payload['data']

        icon = data.get('icon')
        role_permissions = data.get('role_permissions')
        default_permissions = data.get('default_permissions')

        return ChannelUpdateEvent(
            shard=shard,
            channel=PartialChannel(
                id=payload['id'],
                name=data.get('name', UNDEFINED),
                owner_id=data.get('owner', UNDEFINED),
                description=None if 'Description' in clear else data.get('description', UNDEFINED),
                internal_icon=None if 'Icon' in clear else (UNDEFINED if icon is None else self.parse_asset(icon)),
                nsfw=data.get('nsfw', UNDEFINED),
                active=data.get('active', UNDEFINED),
                raw_permissions=data.get('permissions', UNDEFINED),
                role_permissions=(
                    UNDEFINED
                    if role_permissions is None
                    else {k: self.parse_permission_override_field(v) for k, v in role_permissions.items()}
                ),
                default_permissions=(
                    None
                    if 'DefaultPermissions' in clear
                    else (
                        UNDEFINED
                        if default_permissions is None
                        else self.parse_permission_override_field(default_permissions)
                    )
                ),
                last_message_id=data.get('last_message_id', UNDEFINED),
            ),
        )

    def parse_channel_delete_event(self, shard: Shard, payload: Payload, /) -> ChannelDeleteEvent:
        return ChannelDeleteEvent(shard=shard, channel_id=payload['id'])

    def parse_channel_group_join_event(self, shard: Shard, payload: Payload, /) -> GroupRecipientAddEvent:
        return GroupRecipientAddEvent(shard=shard, channel_id=payload['id'], user_id=payload['user'])

    def parse_channel_group_leave_event(self, shard: Shard, payload: Payload, /) -> GroupRecipientRemoveEvent:
        return GroupRecipientRemoveEvent(shard=shard, channel_id=payload['id'], user_id=payload['user'])

    def parse_channel_start_typing_event(self, shard: Shard, payload: Payload, /) -> ChannelStartTypingEvent:
        return ChannelStartTypingEvent(shard=shard, channel_id=payload['id'], user_id=payload['user'])

    def parse_channel_stop_typing_event(self, shard: Shard, payload: Payload, /) -> ChannelStopTypingEvent:
        return ChannelStopTypingEvent(shard=shard, channel_id=payload['id'], user_id=payload['user'])

    def parse_channel_ack_event(self, shard: Shard, payload: Payload, /) -> MessageAckEvent:
        return MessageAckEvent(
            shard=shard,
            channel_id=payload['id'],
            message_id=payload['message_id'],
            user_id=payload['user'],
        )

    def parse_server_create_event(self, shard: Shard, payload: Payload, /) -> ServerCreateEvent:
        return ServerCreateEvent(
            shard=shard,
            joined_at=utcnow(),
            server=self.parse_server(payload['server']),
            channels=[self.parse_channel(c) for c in payload.get('channels', ())],
            emojis=[self.parse_server_emoji(e) for e in payload.get('emojis') or ()],
        )

    def parse_server_update_event(self, shard: Shard, payload: Payload, /) -> ServerUpdateEvent:
        """Parses a ServerUpdate event.

        Fields listed in ``clear`` are represented as ``None``.
        """
        clear = payload.get('clear', ())
        data = payload['data']

        categories = data.get('categories')
        system_messages = data.get('system_messages')
        icon = data.get('icon')
        banner = data.get('banner')

        return ServerUpdateEvent(
            shard=shard,
            server=PartialServer(
                id=payload['id'],
                owner_id=data.get('owner', UNDEFINED),
                name=data.get('name', UNDEFINED),
                description=None if 'Description' in clear else data.get('description', UNDEFINED),
                channel_ids=data.get('channels', UNDEFINED),
                categories=(
                    None
                    if 'Categories' in clear
                    else (UNDEFINED if categories is None else [self.parse_category(c) for c in categories])
                ),
                system_messages=(
                    None
                    if 'SystemMessages' in clear
                    else (
                        UNDEFINED if system_messages is None else self.parse_system_message_channels(system_messages)
                    )
                ),
                default_permissions=data.get('default_permissions', UNDEFINED),
                internal_icon=None if 'Icon' in clear else (UNDEFINED if icon is None else self.parse_asset(icon)),
                internal_banner=(
                    None if 'Banner' in clear else (UNDEFINED if banner is None else self.parse_asset(banner))
                ),
                raw_flags=data.get('flags', UNDEFINED),
                discoverable=data.get('discoverable', UNDEFINED),
                analytics=data.get('analytics', UNDEFINED),
                nsfw=data.get('nsfw', UNDEFINED),
            ),
        )

    def parse_server_delete_event(self, shard: Shard, payload: Payload, /) -> ServerDeleteEvent:
        return ServerDeleteEvent(shard=shard, server_id=payload['id'])

    def parse_server_member_join_event(self, shard: Shard, payload: Payload, /) -> ServerMemberJoinEvent:
        member = payload.get('member')
        if member is not None:
            return ServerMemberJoinEvent(shard=shard, member=self.parse_member(member))

        return ServerMemberJoinEvent(
            shard=shard,
            member=Member(
                id=payload['user'],
                server_id=payload['id'],
                joined_at=utcnow(),
            ),
        )

    def parse_server_member_update_event(self, shard: Shard, payload: Payload, /) -> ServerMemberUpdateEvent:
        """Parses a ServerMemberUpdate event.

        Fields listed in ``clear`` are represented as ``None``.
        """
        id = payload['id']
        clear = payload.get('clear', ())
        data = payload['data']

        avatar = data.get('avatar')
        timeout = data.get('timeout')

        return ServerMemberUpdateEvent(
            shard=shard,
            member=PartialMember(
                id=id['user'],
                server_id=id['server'],
                nick=None if 'Nickname' in clear else data.get('nickname', UNDEFINED),
                internal_server_avatar=(
                    None if 'Avatar' in clear else (UNDEFINED if avatar is None else self.parse_asset(avatar))
                ),
                roles=None if 'Roles' in clear else data.get('roles', UNDEFINED),
                timed_out_until=(
                    None if 'Timeout' in clear else (UNDEFINED if timeout is None else _parse_dt(timeout))
                ),
            ),
        )

    def parse_server_member_leave_event(self, shard: Shard, payload: Payload, /) -> ServerMemberRemoveEvent:
        return ServerMemberRemoveEvent(
            shard=shard,
            server_id=payload['id'],
            user_id=payload['user'],
            reason=MemberRemovalIntention(payload.get('reason', 'Leave')),
        )

    def parse_server_role_update_event(self, shard: Shard, payload: Payload, /) -> ServerRoleUpdateEvent:
        """Parses a ServerRoleUpdate event.

        Fields listed in ``clear`` are represented as ``None``.
        """
        clear = payload.get('clear', ())
        data = payload['data']
        permissions = data.get('permissions')

        return ServerRoleUpdateEvent(
            shard=shard,
            role=PartialRole(
                id=payload['role_id'],
                server_id=payload['id'],
                name=data.get('name', UNDEFINED),
                permissions=UNDEFINED if permissions is None else self.parse_permission_override_field(permissions),
                colour=None if 'Colour' in clear else data.get('colour', UNDEFINED),
                hoist=data.get('hoist', UNDEFINED),
                rank=data.get('rank', UNDEFINED),
            ),
        )

    def parse_server_role_delete_event(self, shard: Shard, payload: Payload, /) -> ServerRoleDeleteEvent:
        return ServerRoleDeleteEvent(shard=shard, server_id=payload['id'], role_id=payload['role_id'])

    def parse_emoji_create_event(self, shard: Shard, payload: Payload, /) -> ServerEmojiCreateEvent:
        return ServerEmojiCreateEvent(shard=shard, emoji=self.parse_server_emoji(payload))

    def parse_emoji_delete_event(self, shard: Shard, payload: Payload, /) -> ServerEmojiDeleteEvent:
        return ServerEmojiDeleteEvent(shard=shard, emoji_id=payload['id'])

    def parse_report_create_event(self, shard: Shard, payload: Payload, /) -> ReportCreateEvent:
        report = dict(payload)
        report.pop('type', None)
        return ReportCreateEvent(shard=shard, report=report)

    def parse_user_update_event(self, shard: Shard, payload: Payload, /) -> UserUpdateEvent:
        """Parses a UserUpdate event.

        Fields listed in ``clear`` are represented as ``None``. Cleared presence resets to invisible.

        Parameters
        ----------
        shard: :class:`.Shard`
            The shard the event arrived on.
        payload: Dict[:class:`str`, Any]
            The event payload to parse.

        Returns
        -------
        :class:`.UserUpdateEvent`
            The parsed user update event object.
        """
        clear = payload.get('clear', ())
        data = payload['data']

        avatar = data.get('avatar')
        status = data.get('status')
        profile = data.get('profile')
        relations = data.get('relations')
        relationship = data.get('relationship')

        status_text_cleared = 'StatusText' in clear
        status_presence_cleared = 'StatusPresence' in clear
        if status is not None or status_text_cleared or status_presence_cleared:
            status = status or {}
            presence = status.get('presence')
            partial_status = PartialUserStatus(
                text=None if status_text_cleared else status.get('text', UNDEFINED),
                presence=None if status_presence_cleared else (UNDEFINED if presence is None else Presence(presence)),
            )
        else:
            partial_status = UNDEFINED

        profile_content_cleared = 'ProfileContent' in clear
        profile_background_cleared = 'ProfileBackground' in clear
        if profile is not None or profile_content_cleared or profile_background_cleared:
            profile = profile or {}
            background = profile.get('background')
            partial_profile = PartialUserProfile(
                content=None if profile_content_cleared else profile.get('content', UNDEFINED),
                background=(
                    None
                    if profile_background_cleared
                    else (UNDEFINED if background is None else self.parse_asset(background))
                ),
            )
        else:
            partial_profile = UNDEFINED

        return UserUpdateEvent(
            shard=shard,
            user=PartialUser(
                id=payload['id'],
                name=data.get('username', UNDEFINED),
                discriminator=data.get('discriminator', UNDEFINED),
                display_name=None if 'DisplayName' in clear else data.get('display_name', UNDEFINED),
                internal_avatar=(
                    None if 'Avatar' in clear else (UNDEFINED if avatar is None else self.parse_asset(avatar))
                ),
                relations=UNDEFINED if relations is None else [self.parse_relationship(r) for r in relations],
                raw_badges=data.get('badges', UNDEFINED),
                status=partial_status,
                profile=partial_profile,
                raw_flags=data.get('flags', UNDEFINED),
                online=data.get('online', UNDEFINED),
                relationship=UNDEFINED if relationship is None else RelationshipStatus(relationship),
            ),
        )

    def parse_user_relationship_event(self, shard: Shard, payload: Payload, /) -> UserRelationshipUpdateEvent:
        return UserRelationshipUpdateEvent(
            shard=shard,
            current_user_id=payload['id'],
            user=self.parse_user(payload['user']),
        )

    def parse_user_settings_update_event(self, shard: Shard, payload: Payload, /) -> UserSettingsUpdateEvent:
        return UserSettingsUpdateEvent(
            shard=shard,
            current_user_id=payload['id'],
            partial={k: (v[0], v[1]) for k, v in payload['update'].items()},
        )

    def parse_user_platform_wipe_event(self, shard: Shard, payload: Payload, /) -> UserPlatformWipeEvent:
        return UserPlatformWipeEvent(shard=shard, user_id=payload['user_id'], raw_flags=payload['flags'])

    def parse_webhook_create_event(self, shard: Shard, payload: Payload, /) -> WebhookCreateEvent:
        return WebhookCreateEvent(shard=shard, webhook=self.parse_webhook(payload))

    def parse_webhook_update_event(self, shard: Shard, payload: Payload, /) -> WebhookUpdateEvent:
        remove = payload.get('remove', ())
        data = payload['data']
        avatar = data.get('avatar')

        return WebhookUpdateEvent(
            shard=shard,
            webhook=PartialWebhook(
                id=payload['id'],
                name=data.get('name', UNDEFINED),
                internal_avatar=(
                    None if 'Avatar' in remove else (UNDEFINED if avatar is None else self.parse_asset(avatar))
                ),
                raw_permissions=data.get('permissions', UNDEFINED),
            ),
        )

    def parse_webhook_delete_event(self, shard: Shard, payload: Payload, /) -> WebhookDeleteEvent:
        return WebhookDeleteEvent(shard=shard, webhook_id=payload['id'])

    def parse_auth_event(self, shard: Shard, payload: Payload, /) -> AuthifierEvent:
        data = dict(payload)
        data.pop('type', None)
        return AuthifierEvent(shard=shard, event_type=data.pop('event_type'), payload=data)


__all__ = ('Parser',)
