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

from attrs import Factory, define, field

from .base import Base
from .cdn import Asset, OptimizedAsset, optimize_asset
from .core import UNDEFINED, UndefinedOr
from .flags import RoleProjectionFlags, ServerProjectionFlags
from .permissions import PermissionOverride


@define(slots=True)
class Category:
    """Represents a category containing channels in Revolt server."""

    id: str = field(repr=True, kw_only=True)
    """:class:`str`: The category's ID."""

    title: str = field(repr=True, kw_only=True)
    """:class:`str`: The category's title."""

    channels: list[str] = field(repr=True, kw_only=True)
    """List[:class:`str`]: The IDs of channels in this category."""

    def build(self) -> dict[str, typing.Any]:
        return {'id': self.id, 'title': self.title, 'channels': self.channels}


@define(slots=True)
class SystemMessageChannels:
    """Represent system message channel assignments in a Revolt server."""

    user_joined: str | None = field(default=None, repr=True, kw_only=True)
    """Optional[:class:`str`]: The channel's ID to send user join messages in."""

    user_left: str | None = field(default=None, repr=True, kw_only=True)
    """Optional[:class:`str`]: The channel's ID to send user left messages in."""

    user_kicked: str | None = field(default=None, repr=True, kw_only=True)
    """Optional[:class:`str`]: The channel's ID to send user kicked messages in."""

    user_banned: str | None = field(default=None, repr=True, kw_only=True)
    """Optional[:class:`str`]: The channel's ID to send user banned messages in."""

    def build(self) -> dict[str, typing.Any]:
        payload = {}
        if self.user_joined is not None:
            payload['user_joined'] = self.user_joined
        if self.user_left is not None:
            payload['user_left'] = self.user_left
        if self.user_kicked is not None:
            payload['user_kicked'] = self.user_kicked
        if self.user_banned is not None:
            payload['user_banned'] = self.user_banned
        return payload


@define(slots=True)
class Role(Base):
    """Represents a role in Revolt server."""

    server_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The server's ID the role belongs to."""

    name: str = field(repr=True, kw_only=True)
    """:class:`str`: The role's name."""

    permissions: PermissionOverride = field(repr=True, kw_only=True)
    """:class:`.PermissionOverride`: Permissions available to members with this role."""

    colour: str | None = field(repr=True, kw_only=True)
    """Optional[:class:`str`]: The role's colour. This is valid CSS colour."""

    hoist: bool = field(repr=True, kw_only=True)
    """:class:`bool`: Whether this role should be shown separately on the member sidebar."""

    rank: int = field(repr=True, kw_only=True)
    """:class:`int`: The role's rank. Lower is higher priority."""

    def to_optimized(self) -> OptimizedRole:
        """:class:`OptimizedRole`: Builds the cached projection of this role."""
        return OptimizedRole(
            id=self.id,
            name=self.name,
            permissions=self.permissions,
            colour=self.colour,
            rank=self.rank,
            flags=RoleProjectionFlags(hoist=self.hoist),
        )


@define(slots=True)
class PartialRole(Base):
    """Represents a partial role for the server.

    Fields that were not changed are :data:`.UNDEFINED`, and cleared fields are ``None``.
    """

    server_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The server's ID the role belongs to."""

    name: UndefinedOr[str] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[:class:`str`]: The new role's name."""

    permissions: UndefinedOr[PermissionOverride] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[:class:`.PermissionOverride`]: The new role's permissions."""

    colour: UndefinedOr[str | None] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[Optional[:class:`str`]]: The new role's colour."""

    hoist: UndefinedOr[bool] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[:class:`bool`]: Whether this role should be displayed separately."""

    rank: UndefinedOr[int] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[:class:`int`]: The new ranking position."""

    def is_complete(self) -> bool:
        """:class:`bool`: Whether the partial carries enough data to describe a newly created role."""
        return (
            bool(self.name)
            and self.permissions is not UNDEFINED
            and self.hoist is not UNDEFINED
            and self.rank is not UNDEFINED
        )

    def into_full(self) -> Role | None:
        """Optional[:class:`Role`]: Tries to convert partial to full role."""
        if not self.is_complete():
            return None
        return Role(
            id=self.id,
            server_id=self.server_id,
            name=self.name,  # type: ignore
            permissions=self.permissions,  # type: ignore
            colour=None if self.colour is UNDEFINED else self.colour,
            hoist=self.hoist,  # type: ignore
            rank=self.rank,  # type: ignore
        )


@define(slots=True)
class OptimizedRole:
    """Represents a cached role."""

    id: str = field(repr=True, kw_only=True)
    name: str = field(repr=True, kw_only=True)
    permissions: PermissionOverride = field(factory=PermissionOverride, repr=True, kw_only=True)
    colour: str | None = field(default=None, repr=True, kw_only=True)
    rank: int = field(default=0, repr=True, kw_only=True)
    flags: RoleProjectionFlags = field(default=Factory(RoleProjectionFlags), repr=True, kw_only=True)

    @property
    def hoist(self) -> bool:
        """:class:`bool`: Whether this role is displayed separately on the member sidebar."""
        return self.flags.hoist

    def locally_update(self, data: PartialRole, /) -> None:
        """Locally updates role with provided data.

        .. warning::
            This is called by library internally to keep cache up to date.
        """
        if data.name is not UNDEFINED:
            self.name = data.name
        if data.permissions is not UNDEFINED:
            self.permissions = data.permissions
        if data.colour is not UNDEFINED:
            self.colour = data.colour
        if data.hoist is not UNDEFINED:
            self.flags.hoist = data.hoist
        if data.rank is not UNDEFINED:
            self.rank = data.rank


@define(slots=True)
class Server(Base):
    """Represents a server on Revolt."""

    owner_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The user's ID who owns this server."""

    name: str = field(repr=True, kw_only=True)
    """:class:`str`: The name of the server."""

    description: str | None = field(repr=True, kw_only=True)
    """Optional[:class:`str`]: The server description."""

    channel_ids: list[str] = field(repr=True, kw_only=True)
    """List[:class:`str`]: The IDs of channels within this server."""

    categories: list[Category] = field(repr=True, kw_only=True)
    """List[:class:`Category`]: The categories for this server."""

    system_messages: SystemMessageChannels | None = field(repr=True, kw_only=True)
    """Optional[:class:`SystemMessageChannels`]: The configuration for sending system event messages."""

    roles: dict[str, Role] = field(repr=True, kw_only=True)
    """Dict[:class:`str`, :class:`Role`]: The server roles."""

    default_permissions: int = field(repr=True, kw_only=True)
    """:class:`int`: The default set of server and channel permissions."""

    internal_icon: Asset | None = field(repr=True, kw_only=True)
    """Optional[:class:`.Asset`]: The server icon."""

    internal_banner: Asset | None = field(repr=True, kw_only=True)
    """Optional[:class:`.Asset`]: The server banner."""

    raw_flags: int = field(repr=True, kw_only=True)
    """:class:`int`: The server's flags raw value."""

    nsfw: bool = field(repr=True, kw_only=True)
    """:class:`bool`: Whether this server is flagged as not safe for work."""

    analytics: bool = field(repr=True, kw_only=True)
    """:class:`bool`: Whether to enable analytics."""

    discoverable: bool = field(repr=True, kw_only=True)
    """:class:`bool`: Whether this server should be publicly discoverable."""

    def to_optimized(self) -> OptimizedServer:
        """:class:`OptimizedServer`: Builds the cached projection of this server."""
        return OptimizedServer(
            id=self.id,
            owner_id=self.owner_id,
            name=self.name,
            description=self.description,
            channel_ids=list(self.channel_ids),
            categories=list(self.categories),
            system_messages=self.system_messages,
            default_permissions=self.default_permissions,
            icon=optimize_asset(self.internal_icon),
            banner=optimize_asset(self.internal_banner),
            raw_flags=self.raw_flags,
            flags=ServerProjectionFlags(
                analytics=self.analytics,
                nsfw=self.nsfw,
                discoverable=self.discoverable,
            ),
        )


@define(slots=True)
class PartialServer(Base):
    """Represents a partial server on Revolt.

    Fields that were not changed are :data:`.UNDEFINED`, and cleared fields are ``None``.
    """

    owner_id: UndefinedOr[str] = field(default=UNDEFINED, repr=True, kw_only=True)
    name: UndefinedOr[str] = field(default=UNDEFINED, repr=True, kw_only=True)
    description: UndefinedOr[str | None] = field(default=UNDEFINED, repr=True, kw_only=True)
    channel_ids: UndefinedOr[list[str]] = field(default=UNDEFINED, repr=True, kw_only=True)
    categories: UndefinedOr[list[Category] | None] = field(default=UNDEFINED, repr=True, kw_only=True)
    system_messages: UndefinedOr[SystemMessageChannels | None] = field(default=UNDEFINED, repr=True, kw_only=True)
    default_permissions: UndefinedOr[int] = field(default=UNDEFINED, repr=True, kw_only=True)
    internal_icon: UndefinedOr[Asset | None] = field(default=UNDEFINED, repr=True, kw_only=True)
    internal_banner: UndefinedOr[Asset | None] = field(default=UNDEFINED, repr=True, kw_only=True)
    raw_flags: UndefinedOr[int] = field(default=UNDEFINED, repr=True, kw_only=True)
    discoverable: UndefinedOr[bool] = field(default=UNDEFINED, repr=True, kw_only=True)
    analytics: UndefinedOr[bool] = field(default=UNDEFINED, repr=True, kw_only=True)
    nsfw: UndefinedOr[bool] = field(default=UNDEFINED, repr=True, kw_only=True)


@define(slots=True)
class OptimizedServer:
    """Represents a cached server.

    The analytics, NSFW and discoverable markers are packed into :attr:`flags`.
    """

    id: str = field(repr=True, kw_only=True)
    """:class:`str`: The server's ID."""

    owner_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The user's ID who owns this server."""

    name: str = field(repr=True, kw_only=True)
    """:class:`str`: The name of the server."""

    description: str | None = field(default=None, repr=False, kw_only=True)
    channel_ids: list[str] = field(factory=list, repr=False, kw_only=True)
    categories: list[Category] = field(factory=list, repr=False, kw_only=True)
    system_messages: SystemMessageChannels | None = field(default=None, repr=False, kw_only=True)
    default_permissions: int = field(default=0, repr=False, kw_only=True)
    icon: OptimizedAsset | None = field(default=None, repr=False, kw_only=True)
    banner: OptimizedAsset | None = field(default=None, repr=False, kw_only=True)
    raw_flags: int = field(default=0, repr=False, kw_only=True)

    flags: ServerProjectionFlags = field(default=Factory(ServerProjectionFlags), repr=True, kw_only=True)
    """:class:`.ServerProjectionFlags`: The packed boolean markers."""

    @property
    def nsfw(self) -> bool:
        """:class:`bool`: Whether this server is flagged as not safe for work."""
        return self.flags.nsfw

    def locally_update(self, data: PartialServer, /) -> None:
        """Locally updates server with provided data.

        .. warning::
            This is called by library internally to keep cache up to date.
        """
        if data.owner_id is not UNDEFINED:
            self.owner_id = data.owner_id
        if data.name is not UNDEFINED:
            self.name = data.name
        if data.description is not UNDEFINED:
            self.description = data.description
        if data.channel_ids is not UNDEFINED:
            self.channel_ids = data.channel_ids
        if data.categories is not UNDEFINED:
            self.categories = data.categories or []
        if data.system_messages is not UNDEFINED:
            self.system_messages = data.system_messages
        if data.default_permissions is not UNDEFINED:
            self.default_permissions = data.default_permissions
        if data.internal_icon is not UNDEFINED:
            self.icon = optimize_asset(data.internal_icon)
        if data.internal_banner is not UNDEFINED:
            self.banner = optimize_asset(data.internal_banner)
        if data.raw_flags is not UNDEFINED:
            self.raw_flags = data.raw_flags
        if data.analytics is not UNDEFINED:
            self.flags.analytics = data.analytics
        if data.nsfw is not UNDEFINED:
            self.flags.nsfw = data.nsfw
        if data.discoverable is not UNDEFINED:
            self.flags.discoverable = data.discoverable


@define(slots=True)
class Member:
    """Represents a Revolt member to a :class:`Server`.

    The member is keyed by :attr:`id` (the user's ID) within the server's group.
    """

    id: str = field(repr=True, kw_only=True)
    """:class:`str`: The user's ID."""

    server_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The server's ID."""

    joined_at: datetime = field(repr=True, kw_only=True)
    """:class:`~datetime.datetime`: When the member joined the server."""

    nick: str | None = field(default=None, repr=True, kw_only=True)
    """Optional[:class:`str`]: The member's nick."""

    internal_server_avatar: Asset | None = field(default=None, repr=True, kw_only=True)
    """Optional[:class:`.Asset`]: The member's avatar on server."""

    roles: list[str] = field(factory=list, repr=True, kw_only=True)
    """List[:class:`str`]: The member's roles."""

    timed_out_until: datetime | None = field(default=None, repr=True, kw_only=True)
    """Optional[:class:`~datetime.datetime`]: The timestamp this member is timed out until."""

    def locally_update(self, data: PartialMember, /) -> None:
        """Locally updates member with provided data.

        .. warning::
            This is called by library internally to keep cache up to date.
        """
        if data.nick is not UNDEFINED:
            self.nick = data.nick
        if data.internal_server_avatar is not UNDEFINED:
            self.internal_server_avatar = data.internal_server_avatar
        if data.roles is not UNDEFINED:
            self.roles = data.roles or []
        if data.timed_out_until is not UNDEFINED:
            self.timed_out_until = data.timed_out_until


@define(slots=True)
class PartialMember:
    """Represents a partial Revolt member to a :class:`Server`."""

    id: str = field(repr=True, kw_only=True)
    server_id: str = field(repr=True, kw_only=True)
    nick: UndefinedOr[str | None] = field(default=UNDEFINED, repr=True, kw_only=True)
    internal_server_avatar: UndefinedOr[Asset | None] = field(default=UNDEFINED, repr=True, kw_only=True)
    roles: UndefinedOr[list[str] | None] = field(default=UNDEFINED, repr=True, kw_only=True)
    timed_out_until: UndefinedOr[datetime | None] = field(default=UNDEFINED, repr=True, kw_only=True)


@define(slots=True)
class ServerBan:
    """Represents a ban on a server."""

    server_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The server's ID."""

    user_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The banned user's ID."""

    reason: str | None = field(repr=True, kw_only=True)
    """Optional[:class:`str`]: The ban reason."""


__all__ = (
    'Category',
    'SystemMessageChannels',
    'Role',
    'PartialRole',
    'OptimizedRole',
    'Server',
    'PartialServer',
    'OptimizedServer',
    'Member',
    'PartialMember',
    'ServerBan',
)
