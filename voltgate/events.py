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

from datetime import datetime
import typing

from attrs import define, field

from .enums import MemberRemovalIntention, RelationshipStatus

if typing.TYPE_CHECKING:
    from .cache import GenericCache
    from .channel import Channel, PartialChannel
    from .emoji import ServerEmoji
    from .message import Message, MessageAppendData, PartialMessage
    from .server import Member, PartialMember, PartialRole, PartialServer, Server
    from .shard import Shard
    from .user import PartialUser, User
    from .webhook import PartialWebhook, Webhook


@define(slots=True)
class BaseEvent:
    """Base class for all events."""

    event_name: typing.ClassVar[str] = 'base'

    def process(self) -> bool:
        """:class:`bool`: Applies the event to internal state. Called before subscribers observe the event.

        Returns whether the event had any effect on cache.
        """
        return False


@define(slots=True)
class ShardEvent(BaseEvent):
    """Base class for events arrived over WebSocket."""

    shard: Shard = field(repr=False, kw_only=True)
    """:class:`.Shard`: The shard the event arrived on."""

    @property
    def cache(self) -> GenericCache:
        """:class:`.GenericCache`: The cache of the shard."""
        return self.shard.cache


@define(slots=True)
class RawEvent(ShardEvent):
    """Dispatched for every decoded frame, before it is handled."""

    event_name: typing.ClassVar[str] = 'raw'

    payload: dict[str, typing.Any] = field(repr=True, kw_only=True)
    """Dict[:class:`str`, Any]: The decoded frame."""


@define(slots=True)
class ErrorEvent(ShardEvent):
    """Dispatched when the shard encounters a transport or decode error."""

    event_name: typing.ClassVar[str] = 'error'

    error: Exception = field(repr=True, kw_only=True)
    """:class:`Exception`: The error."""


@define(slots=True)
class ProtocolErrorEvent(ShardEvent):
    """Dispatched when the server reports an error, such as ``InvalidSession``."""

    event_name: typing.ClassVar[str] = 'protocol_error'

    error_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The error identifier."""


@define(slots=True)
class AuthenticatedEvent(ShardEvent):
    """Dispatched when the server has authenticated connection and client will shortly start receiving data."""

    event_name: typing.ClassVar[str] = 'authenticated'


@define(slots=True)
class LogoutEvent(ShardEvent):
    """Dispatched when the connected user got logged out."""

    event_name: typing.ClassVar[str] = 'logout'


@define(slots=True)
class ReadyEvent(ShardEvent):
    """Dispatched when initial state is available.

    .. warning::
        This event may be dispatched multiple times due to reconnects.
    """

    event_name: typing.ClassVar[str] = 'ready'

    users: list[User] = field(repr=True, kw_only=True)
    """List[:class:`.User`]: The users that the client can see (from DMs, groups, and relationships)."""

    servers: list[Server] = field(repr=True, kw_only=True)
    """List[:class:`.Server`]: The servers the connected user is in."""

    channels: list[Channel] = field(repr=True, kw_only=True)
    """List[:class:`.Channel`]: The DM channels, server channels and groups the connected user participates in."""

    members: list[Member] = field(repr=True, kw_only=True)
    """List[:class:`.Member`]: The own members for servers."""

    emojis: list[ServerEmoji] = field(repr=True, kw_only=True)
    """List[:class:`.ServerEmoji`]: The emojis from servers the user participating in."""

    def process(self) -> bool:
        cache = self.cache

        for u in self.users:
            cache.users.set(u.to_optimized())

        for s in self.servers:
            cache.servers.set(s.to_optimized())
            for role in s.roles.values():
                cache.roles.set(s.id, role.to_optimized())

        for channel in self.channels:
            cache.channels.set(channel.to_optimized())

        for member in self.members:
            cache.members.set(member.server_id, member)

        for e in self.emojis:
            cache.emojis.set(e.to_optimized())

        return True


@define(slots=True)
class MessageCreateEvent(ShardEvent):
    """Dispatched when someone sends message in a channel."""

    event_name: typing.ClassVar[str] = 'message_create'

    message: Message = field(repr=True, kw_only=True)
    """:class:`.Message`: The message sent."""

    def process(self) -> bool:
        message = self.message
        return self.cache.messages.set(message.channel_id, message.to_optimized())


@define(slots=True)
class MessageUpdateEvent(ShardEvent):
    """Dispatched when the message is updated."""

    event_name: typing.ClassVar[str] = 'message_update'

    message: PartialMessage = field(repr=True, kw_only=True)
    """:class:`.PartialMessage`: The fields that were updated."""

    def process(self) -> bool:
        message = self.message
        return self.cache.messages.partially_update(
            message.channel_id,
            message.id,
            lambda m: m.locally_update(message),
        )


@define(slots=True)
class MessageAppendEvent(ShardEvent):
    """Dispatched when embeds are appended to the message."""

    event_name: typing.ClassVar[str] = 'message_append'

    data: MessageAppendData = field(repr=True, kw_only=True)
    """:class:`.MessageAppendData`: The data that got appended to message."""

    def process(self) -> bool:
        data = self.data
        return self.cache.messages.partially_update(
            data.channel_id,
            data.id,
            lambda m: m.locally_append(data),
        )


@define(slots=True)
class MessageDeleteEvent(ShardEvent):
    """Dispatched when the message is deleted in channel."""

    event_name: typing.ClassVar[str] = 'message_delete'

    channel_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The channel's ID the message was in."""

    message_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The deleted message's ID."""

    def process(self) -> bool:
        return self.cache.messages.delete(self.channel_id, self.message_id) is not None


@define(slots=True)
class MessageDeleteBulkEvent(ShardEvent):
    """Dispatched when multiple messages are deleted from channel."""

    event_name: typing.ClassVar[str] = 'message_delete_bulk'

    channel_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The channel's ID where messages got deleted from."""

    message_ids: list[str] = field(repr=True, kw_only=True)
    """List[:class:`str`]: The deleted messages's IDs."""

    def process(self) -> bool:
        messages = self.cache.messages
        removed = False
        for message_id in self.message_ids:
            if messages.delete(self.channel_id, message_id) is not None:
                removed = True
        return removed


@define(slots=True)
class MessageReactEvent(ShardEvent):
    """Dispatched when someone reacts to message."""

    event_name: typing.ClassVar[str] = 'message_react'

    channel_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The channel's ID the message is in."""

    message_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The message's ID that got a reaction."""

    user_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The user's ID that added a reaction."""

    emoji: str = field(repr=True, kw_only=True)
    """:class:`str`: The emoji that was reacted with. May be either ULID or Unicode emoji."""


@define(slots=True)
class MessageUnreactEvent(ShardEvent):
    """Dispatched when someone removes their reaction from message."""

    event_name: typing.ClassVar[str] = 'message_unreact'

    channel_id: str = field(repr=True, kw_only=True)
    message_id: str = field(repr=True, kw_only=True)
    user_id: str = field(repr=True, kw_only=True)
    emoji: str = field(repr=True, kw_only=True)


@define(slots=True)
class MessageClearReactionEvent(ShardEvent):
    """Dispatched when reactions for specific emoji are removed from message."""

    event_name: typing.ClassVar[str] = 'message_clear_reaction'

    channel_id: str = field(repr=True, kw_only=True)
    message_id: str = field(repr=True, kw_only=True)
    emoji: str = field(repr=True, kw_only=True)


@define(slots=True)
class ChannelCreateEvent(ShardEvent):
    """Dispatched when the channel is created or became visible for the connected user."""

    event_name: typing.ClassVar[str] = 'channel_create'

    channel: Channel = field(repr=True, kw_only=True)
    """:class:`.Channel`: The created channel."""

    def process(self) -> bool:
        return self.cache.channels.set(self.channel.to_optimized())


@define(slots=True)
class ChannelUpdateEvent(ShardEvent):
    """Dispatched when the channel is updated."""

    event_name: typing.ClassVar[str] = 'channel_update'

    channel: PartialChannel = field(repr=True, kw_only=True)
    """:class:`.PartialChannel`: The fields that were updated."""

    def process(self) -> bool:
        channel = self.channel
        return self.cache.channels.partially_update(channel.id, lambda c: c.locally_update(channel))


@define(slots=True)
class ChannelDeleteEvent(ShardEvent):
    """Dispatched when the server channel or group is deleted or became hidden for the connected user."""

    event_name: typing.ClassVar[str] = 'channel_delete'

    channel_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The channel's ID that got deleted or hidden."""

    def process(self) -> bool:
        return self.cache.channels.delete(self.channel_id) is not None


@define(slots=True)
class GroupRecipientAddEvent(ShardEvent):
    """Dispatched when recipient is added to the group."""

    event_name: typing.ClassVar[str] = 'recipient_add'

    channel_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The affected group's ID."""

    user_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The user's ID who was added to the group."""


@define(slots=True)
class GroupRecipientRemoveEvent(ShardEvent):
    """Dispatched when recipient is removed from the group."""

    event_name: typing.ClassVar[str] = 'recipient_remove'

    channel_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The affected group's ID."""

    user_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The user's ID who was removed from the group."""


@define(slots=True)
class ChannelStartTypingEvent(ShardEvent):
    """Dispatched when someone starts typing in a channel."""

    event_name: typing.ClassVar[str] = 'channel_start_typing'

    channel_id: str = field(repr=True, kw_only=True)
    user_id: str = field(repr=True, kw_only=True)


@define(slots=True)
class ChannelStopTypingEvent(ShardEvent):
    """Dispatched when someone stopped typing in a channel."""

    event_name: typing.ClassVar[str] = 'channel_stop_typing'

    channel_id: str = field(repr=True, kw_only=True)
    user_id: str = field(repr=True, kw_only=True)


@define(slots=True)
class MessageAckEvent(ShardEvent):
    """Dispatched when the connected user acknowledges the message in a channel (probably from remote device)."""

    event_name: typing.ClassVar[str] = 'message_ack'

    channel_id: str = field(repr=True, kw_only=True)
    message_id: str = field(repr=True, kw_only=True)
    user_id: str = field(repr=True, kw_only=True)


@define(slots=True)
class ServerCreateEvent(ShardEvent):
    """Dispatched when the server is created, or client joined server."""

    event_name: typing.ClassVar[str] = 'server_create'

    joined_at: datetime = field(repr=True, kw_only=True)
    """:class:`~datetime.datetime`: When the event was received."""

    server: Server = field(repr=True, kw_only=True)
    """:class:`.Server`: The server that client was added to."""

    channels: list[Channel] = field(repr=True, kw_only=True)
    """List[:class:`.Channel`]: The server channels."""

    emojis: list[ServerEmoji] = field(repr=True, kw_only=True)
    """List[:class:`.ServerEmoji`]: The server emojis."""

    def process(self) -> bool:
        cache = self.cache
        server = self.server

        cache.servers.set(server.to_optimized())
        for role in server.roles.values():
            cache.roles.set(server.id, role.to_optimized())
        for channel in self.channels:
            cache.channels.set(channel.to_optimized())
        for emoji in self.emojis:
            cache.emojis.set(emoji.to_optimized())
        return True


@define(slots=True)
class ServerUpdateEvent(ShardEvent):
    """Dispatched when the server details are updated."""

    event_name: typing.ClassVar[str] = 'server_update'

    server: PartialServer = field(repr=True, kw_only=True)
    """:class:`.PartialServer`: The fields that were updated."""

    def process(self) -> bool:
        server = self.server
        return self.cache.servers.partially_update(server.id, lambda s: s.locally_update(server))


@define(slots=True)
class ServerDeleteEvent(ShardEvent):
    """Dispatched when the server is deleted."""

    event_name: typing.ClassVar[str] = 'server_delete'

    server_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The deleted server's ID."""

    def process(self) -> bool:
        cache = self.cache
        cache.roles.delete_group(self.server_id)
        cache.members.delete_group(self.server_id)
        return cache.servers.delete(self.server_id) is not None


@define(slots=True)
class ServerMemberJoinEvent(ShardEvent):
    """Dispatched when the user got added to the server."""

    event_name: typing.ClassVar[str] = 'server_member_join'

    member: Member = field(repr=True, kw_only=True)
    """:class:`.Member`: The joined member."""

    def process(self) -> bool:
        return self.cache.members.set(self.member.server_id, self.member)


@define(slots=True)
class ServerMemberUpdateEvent(ShardEvent):
    """Dispatched when the member details are updated."""

    event_name: typing.ClassVar[str] = 'server_member_update'

    member: PartialMember = field(repr=True, kw_only=True)
    """:class:`.PartialMember`: The fields that were updated."""

    def process(self) -> bool:
        member = self.member
        return self.cache.members.partially_update(member.server_id, member.id, lambda m: m.locally_update(member))


@define(slots=True)
class ServerMemberRemoveEvent(ShardEvent):
    """Dispatched when the member (or client user) got removed from server."""

    event_name: typing.ClassVar[str] = 'server_member_remove'

    server_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The server's ID from which the user was removed from."""

    user_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The removed user's ID."""

    reason: MemberRemovalIntention = field(repr=True, kw_only=True)
    """:class:`.MemberRemovalIntention`: The reason why member was removed."""

    def process(self) -> bool:
        return self.cache.members.delete(self.server_id, self.user_id) is not None


@define(slots=True)
class ServerRoleUpdateEvent(ShardEvent):
    """Dispatched when the role got created or updated in server."""

    event_name: typing.ClassVar[str] = 'server_role_update'

    role: PartialRole = field(repr=True, kw_only=True)
    """:class:`.PartialRole`: The fields that got updated."""

    @property
    def created(self) -> bool:
        """:class:`bool`: Whether the role was just created.

        A role update that carries name, permissions, hoist and rank describes a new role.
        """
        return self.role.is_complete()

    def process(self) -> bool:
        role = self.role
        roles = self.cache.roles

        full = role.into_full()
        if full is not None:
            return roles.set(role.server_id, full.to_optimized())
        return roles.partially_update(role.server_id, role.id, lambda r: r.locally_update(role))


@define(slots=True)
class ServerRoleDeleteEvent(ShardEvent):
    """Dispatched when the server role got deleted."""

    event_name: typing.ClassVar[str] = 'server_role_delete'

    server_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The server's ID the role was in."""

    role_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The deleted role's ID."""

    def process(self) -> bool:
        return self.cache.roles.delete(self.server_id, self.role_id) is not None


@define(slots=True)
class ServerEmojiCreateEvent(ShardEvent):
    """Dispatched when emoji is created in server."""

    event_name: typing.ClassVar[str] = 'server_emoji_create'

    emoji: ServerEmoji = field(repr=True, kw_only=True)
    """:class:`.ServerEmoji`: The created emoji."""

    def process(self) -> bool:
        return self.cache.emojis.set(self.emoji.to_optimized())


@define(slots=True)
class ServerEmojiDeleteEvent(ShardEvent):
    """Dispatched when emoji is deleted from the server."""

    event_name: typing.ClassVar[str] = 'server_emoji_delete'

    emoji_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The deleted emoji's ID."""

    def process(self) -> bool:
        return self.cache.emojis.delete(self.emoji_id) is not None


@define(slots=True)
class ReportCreateEvent(ShardEvent):
    """Dispatched when the report is created."""

    event_name: typing.ClassVar[str] = 'report_create'

    report: dict[str, typing.Any] = field(repr=True, kw_only=True)
    """Dict[:class:`str`, Any]: The created report."""


@define(slots=True)
class UserUpdateEvent(ShardEvent):
    """Dispatched when the user details are updated."""

    event_name: typing.ClassVar[str] = 'user_update'

    user: PartialUser = field(repr=True, kw_only=True)
    """:class:`.PartialUser`: The fields that were updated."""

    def process(self) -> bool:
        user = self.user
        return self.cache.users.partially_update(user.id, lambda u: u.locally_update(user))


@define(slots=True)
class UserRelationshipUpdateEvent(ShardEvent):
    """Dispatched when the relationship with user was updated."""

    event_name: typing.ClassVar[str] = 'user_relationship_update'

    current_user_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The current user ID."""

    user: User = field(repr=True, kw_only=True)
    """:class:`.User`: The user whose relationship with us changed."""

    @property
    def new_relationship(self) -> RelationshipStatus:
        """:class:`.RelationshipStatus`: The new relationship with the user."""
        return self.user.relationship

    def process(self) -> bool:
        status = self.user.relationship

        def update(u: typing.Any) -> None:
            u.relationship = status

        return self.cache.users.partially_update(self.user.id, update)


@define(slots=True)
class UserSettingsUpdateEvent(ShardEvent):
    """Dispatched when the user settings are changed, likely from remote device."""

    event_name: typing.ClassVar[str] = 'user_settings_update'

    current_user_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The current user ID."""

    partial: dict[str, tuple[int, str]] = field(repr=True, kw_only=True)
    """Dict[:class:`str`, Tuple[:class:`int`, :class:`str`]]: The changed settings, mapped to their revision timestamp and value."""


@define(slots=True)
class UserPlatformWipeEvent(ShardEvent):
    """Dispatched when the user has been platform banned or deleted their account."""

    event_name: typing.ClassVar[str] = 'user_platform_wipe'

    user_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The wiped user's ID."""

    raw_flags: int = field(repr=True, kw_only=True)
    """:class:`int`: The user's flags raw value, explaining reason of the wipe."""


@define(slots=True)
class WebhookCreateEvent(ShardEvent):
    """Dispatched when the webhook is created in a channel."""

    event_name: typing.ClassVar[str] = 'webhook_create'

    webhook: Webhook = field(repr=True, kw_only=True)
    """:class:`.Webhook`: The created webhook."""

    def process(self) -> bool:
        return self.cache.webhooks.set(self.webhook.to_optimized())


@define(slots=True)
class WebhookUpdateEvent(ShardEvent):
    """Dispatched when the webhook details are updated."""

    event_name: typing.ClassVar[str] = 'webhook_update'

    webhook: PartialWebhook = field(repr=True, kw_only=True)
    """:class:`.PartialWebhook`: The fields that were updated."""

    def process(self) -> bool:
        webhook = self.webhook
        return self.cache.webhooks.partially_update(webhook.id, lambda w: w.locally_update(webhook))


@define(slots=True)
class WebhookDeleteEvent(ShardEvent):
    """Dispatched when the webhook is deleted."""

    event_name: typing.ClassVar[str] = 'webhook_delete'

    webhook_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The deleted webhook's ID."""

    def process(self) -> bool:
        return self.cache.webhooks.delete(self.webhook_id) is not None


@define(slots=True)
class AuthifierEvent(ShardEvent):
    """Dispatched when authentication related event happens, such as session creation or deletion."""

    event_name: typing.ClassVar[str] = 'authifier'

    event_type: str = field(repr=True, kw_only=True)
    """:class:`str`: The event's type, like ``'CreateSession'`` or ``'DeleteSession'``."""

    payload: dict[str, typing.Any] = field(repr=True, kw_only=True)
    """Dict[:class:`str`, Any]: The event's data."""


__all__ = (
    'BaseEvent',
    'ShardEvent',
    'RawEvent',
    'ErrorEvent',
    'ProtocolErrorEvent',
    'AuthenticatedEvent',
    'LogoutEvent',
    'ReadyEvent',
    'MessageCreateEvent',
    'MessageUpdateEvent',
    'MessageAppendEvent',
    'MessageDeleteEvent',
    'MessageDeleteBulkEvent',
    'MessageReactEvent',
    'MessageUnreactEvent',
    'MessageClearReactionEvent',
    'ChannelCreateEvent',
    'ChannelUpdateEvent',
    'ChannelDeleteEvent',
    'GroupRecipientAddEvent',
    'GroupRecipientRemoveEvent',
    'ChannelStartTypingEvent',
    'ChannelStopTypingEvent',
    'MessageAckEvent',
    'ServerCreateEvent',
    'ServerUpdateEvent',
    'ServerDeleteEvent',
    'ServerMemberJoinEvent',
    'ServerMemberUpdateEvent',
    'ServerMemberRemoveEvent',
    'ServerRoleUpdateEvent',
    'ServerRoleDeleteEvent',
    'ServerEmojiCreateEvent',
    'ServerEmojiDeleteEvent',
    'ReportCreateEvent',
    'UserUpdateEvent',
    'UserRelationshipUpdateEvent',
    'UserSettingsUpdateEvent',
    'UserPlatformWipeEvent',
    'WebhookCreateEvent',
    'WebhookUpdateEvent',
    'WebhookDeleteEvent',
    'AuthifierEvent',
)
