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
from .enums import Presence, RelationshipStatus
from .flags import UserBadges, UserFlags, UserProjectionFlags


@define(slots=True)
class UserStatus:
    """Represents user's active status."""

    text: str | None = field(repr=True, kw_only=True)
    """Optional[:class:`str`]: The custom status text."""

    presence: Presence | None = field(repr=True, kw_only=True)
    """Optional[:class:`.Presence`]: The current presence option."""

    def to_optimized(self) -> OptimizedUserStatus:
        return OptimizedUserStatus(text=self.text, presence=self.presence)


@define(slots=True)
class PartialUserStatus:
    """Represents partial user's status.

    ``None`` means the field was cleared.
    """

    text: UndefinedOr[str | None] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[Optional[:class:`str`]]: The new custom status text."""

    presence: UndefinedOr[Presence | None] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[Optional[:class:`.Presence`]]: The new presence."""


@define(slots=True)
class UserProfile:
    """Represents a profile of a user."""

    content: str | None = field(repr=True, kw_only=True)
    """Optional[:class:`str`]: The user's profile content."""

    background: Asset | None = field(repr=True, kw_only=True)
    """Optional[:class:`.Asset`]: The background visible on user's profile."""

    def to_optimized(self) -> OptimizedUserProfile:
        return OptimizedUserProfile(content=self.content, background=optimize_asset(self.background))


@define(slots=True)
class PartialUserProfile:
    content: UndefinedOr[str | None] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[Optional[:class:`str`]]: The new profile content."""

    background: UndefinedOr[Asset | None] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[Optional[:class:`.Asset`]]: The new profile background."""


@define(slots=True)
class Relationship:
    """Represents a relationship entry indicating current status with other user."""

    id: str = field(repr=True, kw_only=True)
    """:class:`str`: The other user's ID."""

    status: RelationshipStatus = field(repr=True, kw_only=True)
    """:class:`.RelationshipStatus`: The relationship status with them."""


@define(slots=True)
class BotUserInfo:
    owner_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The ID of the user who owns this bot."""


@define(slots=True)
class User(Base):
    """Represents a user on Revolt."""

    name: str = field(repr=True, kw_only=True)
    """:class:`str`: The username of the user."""

    discriminator: str = field(repr=True, kw_only=True)
    """:class:`str`: The discriminator of the user."""

    display_name: str | None = field(repr=True, kw_only=True)
    """Optional[:class:`str`]: The user's display name."""

    internal_avatar: Asset | None = field(repr=True, kw_only=True)
    """Optional[:class:`.Asset`]: The user's avatar."""

    relations: list[Relationship] = field(repr=True, kw_only=True)
    """List[:class:`Relationship`]: The user's relations. Only present for the connected user."""

    raw_badges: int = field(repr=True, kw_only=True)
    """:class:`int`: The user's badges raw value."""

    status: UserStatus | None = field(repr=True, kw_only=True)
    """Optional[:class:`UserStatus`]: The user's current status."""

    profile: UserProfile | None = field(repr=True, kw_only=True)
    """Optional[:class:`UserProfile`]: The user's profile, if it was sent."""

    raw_flags: int = field(repr=True, kw_only=True)
    """:class:`int`: The user's flags raw value."""

    privileged: bool = field(repr=True, kw_only=True)
    """:class:`bool`: Whether this user is privileged."""

    bot: BotUserInfo | None = field(repr=True, kw_only=True)
    """Optional[:class:`BotUserInfo`]: The information about the bot."""

    relationship: RelationshipStatus = field(repr=True, kw_only=True)
    """:class:`.RelationshipStatus`: The current session user's relationship with this user."""

    online: bool = field(repr=True, kw_only=True)
    """:class:`bool`: Whether this user is currently online."""

    def __str__(self) -> str:
        return self.display_name or self.name

    @property
    def tag(self) -> str:
        """:class:`str`: The tag of the user, in ``name#discriminator`` form."""
        return f'{self.name}#{self.discriminator}'

    @property
    def badges(self) -> UserBadges:
        """:class:`.UserBadges`: The user's badges."""
        return UserBadges(self.raw_badges)

    @property
    def flags(self) -> UserFlags:
        """:class:`.UserFlags`: The user's flags."""
        return UserFlags(self.raw_flags)

    def to_optimized(self) -> OptimizedUser:
        """:class:`OptimizedUser`: Builds the cached projection of this user."""
        return OptimizedUser(
            id=self.id,
            name=self.name,
            discriminator=self.discriminator,
            display_name=self.display_name,
            avatar=optimize_asset(self.internal_avatar),
            status=None if self.status is None else self.status.to_optimized(),
            profile=None if self.profile is None else self.profile.to_optimized(),
            relations=list(self.relations),
            relationship=self.relationship,
            bot_owner_id=None if self.bot is None else self.bot.owner_id,
            flags=UserProjectionFlags.build(badges=self.raw_badges, flags=self.raw_flags, online=self.online),
        )


@define(slots=True)
class PartialUser(Base):
    """Represents a partial user on Revolt.

    Fields that were not changed are :data:`.UNDEFINED`, and cleared fields are ``None``.
    """

    name: UndefinedOr[str] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[:class:`str`]: The new user's name."""

    discriminator: UndefinedOr[str] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[:class:`str`]: The new user's discriminator."""

    display_name: UndefinedOr[str | None] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[Optional[:class:`str`]]: The new user's display name."""

    internal_avatar: UndefinedOr[Asset | None] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[Optional[:class:`.Asset`]]: The new user's avatar."""

    relations: UndefinedOr[list[Relationship]] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[List[:class:`Relationship`]]: The new user's relations."""

    raw_badges: UndefinedOr[int] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[:class:`int`]: The new user's badges raw value."""

    status: UndefinedOr[PartialUserStatus] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[:class:`PartialUserStatus`]: The new user's status."""

    profile: UndefinedOr[PartialUserProfile] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[:class:`PartialUserProfile`]: The new user's profile."""

    raw_flags: UndefinedOr[int] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[:class:`int`]: The new user's flags raw value."""

    online: UndefinedOr[bool] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[:class:`bool`]: Whether the user came online."""

    relationship: UndefinedOr[RelationshipStatus] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[:class:`.RelationshipStatus`]: The new relationship with the user."""


@define(slots=True)
class OptimizedUserStatus:
    text: str | None = field(default=None, repr=True, kw_only=True)
    presence: Presence | None = field(default=None, repr=True, kw_only=True)

    def locally_update(self, data: PartialUserStatus, /) -> None:
        """Locally updates user status with provided data.

        .. warning::
            This is called by library internally to keep cache up to date.
        """
        if data.text is not UNDEFINED:
            self.text = data.text
        if data.presence is not UNDEFINED:
            self.presence = Presence.invisible if data.presence is None else data.presence


@define(slots=True)
class OptimizedUserProfile:
    content: str | None = field(default=None, repr=True, kw_only=True)
    background: OptimizedAsset | None = field(default=None, repr=True, kw_only=True)

    def locally_update(self, data: PartialUserProfile, /) -> None:
        """Locally updates user profile with provided data.

        .. warning::
            This is called by library internally to keep cache up to date.
        """
        if data.content is not UNDEFINED:
            self.content = data.content
        if data.background is not UNDEFINED:
            self.background = optimize_asset(data.background)


def _sets_anything(*values: typing.Any) -> bool:
    return any(v is not UNDEFINED and v is not None for v in values)


@define(slots=True)
class OptimizedUser:
    """Represents a cached user.

    Badges, flags and online status are packed into :attr:`flags`.
    """

    id: str = field(repr=True, kw_only=True)
    """:class:`str`: The user's ID."""

    name: str = field(repr=True, kw_only=True)
    """:class:`str`: The username of the user."""

    discriminator: str = field(repr=True, kw_only=True)
    """:class:`str`: The discriminator of the user."""

    display_name: str | None = field(default=None, repr=True, kw_only=True)
    """Optional[:class:`str`]: The user's display name."""

    avatar: OptimizedAsset | None = field(default=None, repr=True, kw_only=True)
    """Optional[:class:`.OptimizedAsset`]: The user's avatar."""

    status: OptimizedUserStatus | None = field(default=None, repr=True, kw_only=True)
    """Optional[:class:`OptimizedUserStatus`]: The user's status."""

    profile: OptimizedUserProfile | None = field(default=None, repr=True, kw_only=True)
    """Optional[:class:`OptimizedUserProfile`]: The user's profile."""

    relations: list[Relationship] = field(factory=list, repr=False, kw_only=True)
    """List[:class:`Relationship`]: The user's relations."""

    relationship: RelationshipStatus = field(default=RelationshipStatus.none, repr=True, kw_only=True)
    """:class:`.RelationshipStatus`: The current session user's relationship with this user."""

    bot_owner_id: str | None = field(default=None, repr=True, kw_only=True)
    """Optional[:class:`str`]: The ID of bot owner, if the user is a bot."""

    flags: UserProjectionFlags = field(default=Factory(UserProjectionFlags), repr=True, kw_only=True)
    """:class:`.UserProjectionFlags`: The packed badges, flags and online status."""

    @property
    def online(self) -> bool:
        """:class:`bool`: Whether this user is currently online."""
        return self.flags.online

    @property
    def badges(self) -> UserBadges:
        """:class:`.UserBadges`: The user's badges."""
        return self.flags.badges

    @property
    def bot(self) -> bool:
        """:class:`bool`: Whether the user is a bot."""
        return self.bot_owner_id is not None

    def locally_update(self, data: PartialUser, /) -> None:
        """Locally updates user with provided data.

        .. warning::
            This is called by library internally to keep cache up to date.
        """
        if data.raw_badges is not UNDEFINED:
            self.flags.update_badges(data.raw_badges)
        if data.raw_flags is not UNDEFINED:
            self.flags.update_flags(data.raw_flags)
        if data.online is not UNDEFINED:
            self.flags.online = data.online
        if data.name is not UNDEFINED:
            self.name = data.name
        if data.discriminator is not UNDEFINED:
            self.discriminator = data.discriminator
        if data.display_name is not UNDEFINED:
            self.display_name = data.display_name
        if data.internal_avatar is not UNDEFINED:
            self.avatar = optimize_asset(data.internal_avatar)
        if data.status is not UNDEFINED:
            status = data.status
            if self.status is None and _sets_anything(status.text, status.presence):
                self.status = OptimizedUserStatus()
            if self.status is not None:
                self.status.locally_update(status)
        if data.profile is not UNDEFINED:
            profile = data.profile
            if self.profile is None and _sets_anything(profile.content, profile.background):
                self.profile = OptimizedUserProfile()
            if self.profile is not None:
                self.profile.locally_update(profile)
        if data.relations is not UNDEFINED:
            self.relations = data.relations
        if data.relationship is not UNDEFINED:
            self.relationship = data.relationship


__all__ = (
    'UserStatus',
    'PartialUserStatus',
    'UserProfile',
    'PartialUserProfile',
    'Relationship',
    'BotUserInfo',
    'User',
    'PartialUser',
    'OptimizedUserStatus',
    'OptimizedUserProfile',
    'OptimizedUser',
)
