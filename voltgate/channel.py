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

from attrs import Factory, define, field

from .base import Base
from .cdn import Asset, OptimizedAsset, optimize_asset
from .core import UNDEFINED, UndefinedOr
from .enums import ChannelType
from .flags import ChannelProjectionFlags
from .permissions import PermissionOverride


@define(slots=True)
class BaseChannel(Base):
    """Represents channel on Revolt."""

    type: typing.ClassVar[ChannelType]

    def _projection(self, **kwargs: typing.Any) -> OptimizedChannel:
        return OptimizedChannel(id=self.id, type=self.type, **kwargs)

    def to_optimized(self) -> OptimizedChannel:
        """:class:`OptimizedChannel`: Builds the cached projection of this channel."""
        return self._projection()


@define(slots=True)
class SavedMessagesChannel(BaseChannel):
    """Represents a personal "Saved Notes" channel which allows users to save messages."""

    type = ChannelType.saved_messages

    user_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The ID of the user this channel belongs to."""

    def to_optimized(self) -> OptimizedChannel:
        return self._projection(owner_id=self.user_id)


@define(slots=True)
class DMChannel(BaseChannel):
    """Represents a private channel between two users."""

    type = ChannelType.private

    active: bool = field(repr=True, kw_only=True)
    """:class:`bool`: Whether this DM channel is currently open on both sides."""

    recipient_ids: tuple[str, str] = field(repr=True, kw_only=True)
    """Tuple[:class:`str`, :class:`str`]: The tuple of user IDs participating in DM."""

    last_message_id: str | None = field(repr=True, kw_only=True)
    """Optional[:class:`str`]: The last message ID sent in the channel."""

    def to_optimized(self) -> OptimizedChannel:
        return self._projection(
            recipient_ids=list(self.recipient_ids),
            flags=ChannelProjectionFlags(active=self.active),
        )


@define(slots=True)
class GroupChannel(BaseChannel):
    """Represents Revolt group channel between 1 or more participants."""

    type = ChannelType.group

    name: str = field(repr=True, kw_only=True)
    """:class:`str`: The group's name."""

    owner_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The user's ID who owns this group."""

    description: str | None = field(repr=True, kw_only=True)
    """Optional[:class:`str`]: The group description."""

    recipient_ids: list[str] = field(repr=True, kw_only=True)
    """List[:class:`str`]: The IDs of recipients."""

    internal_icon: Asset | None = field(repr=True, kw_only=True)
    """Optional[:class:`.Asset`]: The group icon."""

    last_message_id: str | None = field(repr=True, kw_only=True)
    """Optional[:class:`str`]: The last message ID sent in the channel."""

    raw_permissions: int | None = field(repr=True, kw_only=True)
    """Optional[:class:`int`]: The permissions assigned to members of this group. Does not apply to the owner of the group."""

    nsfw: bool = field(repr=True, kw_only=True)
    """:class:`bool`: Whether this group is marked as not safe for work."""

    def to_optimized(self) -> OptimizedChannel:
        return self._projection(
            name=self.name,
            owner_id=self.owner_id,
            description=self.description,
            recipient_ids=list(self.recipient_ids),
            icon=optimize_asset(self.internal_icon),
            raw_permissions=self.raw_permissions,
            flags=ChannelProjectionFlags(nsfw=self.nsfw),
        )


@define(slots=True)
class BaseServerChannel(BaseChannel):
    server_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The server ID that channel belongs to."""

    name: str = field(repr=True, kw_only=True)
    """:class:`str`: The display name of the channel."""

    description: str | None = field(repr=True, kw_only=True)
    """Optional[:class:`str`]: The channel description."""

    internal_icon: Asset | None = field(repr=True, kw_only=True)
    """Optional[:class:`.Asset`]: The custom channel icon."""

    default_permissions: PermissionOverride | None = field(repr=True, kw_only=True)
    """Optional[:class:`.PermissionOverride`]: Default permissions assigned to users in this channel."""

    role_permissions: dict[str, PermissionOverride] = field(repr=True, kw_only=True)
    """Dict[:class:`str`, :class:`.PermissionOverride`]: The permissions assigned based on role to this channel."""

    nsfw: bool = field(repr=True, kw_only=True)
    """:class:`bool`: Whether this channel is marked as not safe for work."""

    def to_optimized(self) -> OptimizedChannel:
        return self._projection(
            server_id=self.server_id,
            name=self.name,
            description=self.description,
            icon=optimize_asset(self.internal_icon),
            default_permissions=self.default_permissions,
            role_permissions=dict(self.role_permissions),
            flags=ChannelProjectionFlags(nsfw=self.nsfw),
        )


@define(slots=True)
class TextChannel(BaseServerChannel):
    """Represents a text channel that belongs to a server on Revolt."""

    type = ChannelType.text

    last_message_id: str | None = field(repr=True, kw_only=True)
    """Optional[:class:`str`]: The last message ID sent in the channel."""


@define(slots=True)
class VoiceChannel(BaseServerChannel):
    """Represents a voice channel that belongs to a server on Revolt."""

    type = ChannelType.voice


PrivateChannel = SavedMessagesChannel | DMChannel | GroupChannel
ServerChannel = TextChannel | VoiceChannel
Channel = PrivateChannel | ServerChannel


@define(slots=True)
class PartialChannel(Base):
    """Represents a partial channel on Revolt.

    Fields that were not changed are :data:`.UNDEFINED`, and cleared fields are ``None``.
    """

    name: UndefinedOr[str] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[:class:`str`]: The new channel name, if applicable."""

    owner_id: UndefinedOr[str] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[:class:`str`]: The ID of new group owner, if applicable."""

    description: UndefinedOr[str | None] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[Optional[:class:`str`]]: The new channel's description, if applicable."""

    internal_icon: UndefinedOr[Asset | None] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[Optional[:class:`.Asset`]]: The new channel's icon, if applicable."""

    nsfw: UndefinedOr[bool] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[:class:`bool`]: Whether the channel have been marked as NSFW, if applicable."""

    active: UndefinedOr[bool] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[:class:`bool`]: Whether the DM channel is active now, if applicable."""

    raw_permissions: UndefinedOr[int] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[:class:`int`]: The new group's permissions raw value, if applicable."""

    role_permissions: UndefinedOr[dict[str, PermissionOverride]] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[Dict[:class:`str`, :class:`.PermissionOverride`]]: The new channel's permission overrides for roles."""

    default_permissions: UndefinedOr[PermissionOverride | None] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[Optional[:class:`.PermissionOverride`]]: The new channel's permission overrides for everyone."""

    last_message_id: UndefinedOr[str] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[:class:`str`]: The last message ID sent in the channel."""


@define(slots=True)
class OptimizedChannel:
    """Represents a cached channel of any type.

    The active and NSFW markers are packed into :attr:`flags`.
    """

    id: str = field(repr=True, kw_only=True)
    """:class:`str`: The channel's ID."""

    type: ChannelType = field(repr=True, kw_only=True)
    """:class:`.ChannelType`: The channel's type."""

    name: str = field(default='', repr=True, kw_only=True)
    """:class:`str`: The channel's name. Empty for DMs and saved notes."""

    description: str | None = field(default=None, repr=False, kw_only=True)
    """Optional[:class:`str`]: The channel's description."""

    icon: OptimizedAsset | None = field(default=None, repr=False, kw_only=True)
    """Optional[:class:`.OptimizedAsset`]: The channel's icon."""

    owner_id: str | None = field(default=None, repr=True, kw_only=True)
    """Optional[:class:`str`]: The owner of group, or user of saved notes channel."""

    server_id: str | None = field(default=None, repr=True, kw_only=True)
    """Optional[:class:`str`]: The server the channel belongs to."""

    recipient_ids: list[str] = field(factory=list, repr=False, kw_only=True)
    """List[:class:`str`]: The recipients of DM or group."""

    raw_permissions: int | None = field(default=None, repr=False, kw_only=True)
    """Optional[:class:`int`]: The permissions of group members."""

    default_permissions: PermissionOverride | None = field(default=None, repr=False, kw_only=True)
    """Optional[:class:`.PermissionOverride`]: The default permissions override in server channel."""

    role_permissions: dict[str, PermissionOverride] = field(factory=dict, repr=False, kw_only=True)
    """Dict[:class:`str`, :class:`.PermissionOverride`]: The role permission overrides in server channel."""

    last_message_id: str | None = field(default=None, repr=False, kw_only=True)
    """Optional[:class:`str`]: The last message ID sent in the channel, if it was updated."""

    flags: ChannelProjectionFlags = field(default=Factory(ChannelProjectionFlags), repr=True, kw_only=True)
    """:class:`.ChannelProjectionFlags`: The packed active and NSFW markers."""

    @property
    def active(self) -> bool:
        """:class:`bool`: Whether the DM channel is open on both sides."""
        return self.flags.active

    @property
    def nsfw(self) -> bool:
        """:class:`bool`: Whether the channel is marked as NSFW."""
        return self.flags.nsfw

    def locally_update(self, data: PartialChannel, /) -> None:
        """Locally updates channel with provided data.

        .. warning::
            This is called by library internally to keep cache up to date.
        """
        if data.name is not UNDEFINED:
            self.name = data.name
        if data.description is not UNDEFINED:
            self.description = data.description
        if data.internal_icon is not UNDEFINED:
            self.icon = optimize_asset(data.internal_icon)
        if data.active is not UNDEFINED:
            self.flags.active = data.active
        if data.nsfw is not UNDEFINED:
            self.flags.nsfw = data.nsfw
        if data.default_permissions is not UNDEFINED:
            self.default_permissions = data.default_permissions
        if data.role_permissions is not UNDEFINED:
            self.role_permissions = data.role_permissions
        if data.owner_id is not UNDEFINED:
            self.owner_id = data.owner_id
        if data.raw_permissions is not UNDEFINED:
            self.raw_permissions = data.raw_permissions
        if data.last_message_id is not UNDEFINED:
            self.last_message_id = data.last_message_id


__all__ = (
    'BaseChannel',
    'SavedMessagesChannel',
    'DMChannel',
    'GroupChannel',
    'BaseServerChannel',
    'TextChannel',
    'VoiceChannel',
    'PrivateChannel',
    'ServerChannel',
    'Channel',
    'PartialChannel',
    'OptimizedChannel',
)
