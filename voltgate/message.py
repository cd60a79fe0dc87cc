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

from .base import Base
from .cdn import Asset, OptimizedAsset
from .core import UNDEFINED, UndefinedOr
from .enums import EmbedType


@define(slots=True)
class Embed:
    """Represents a message embed."""

    type: EmbedType = field(repr=True, kw_only=True)
    """:class:`.EmbedType`: The embed's type."""

    url: str | None = field(default=None, repr=True, kw_only=True)
    """Optional[:class:`str`]: The URL the embed points to."""

    title: str | None = field(default=None, repr=True, kw_only=True)
    """Optional[:class:`str`]: The title of the embed."""

    description: str | None = field(default=None, repr=True, kw_only=True)
    """Optional[:class:`str`]: The description of the embed."""

    icon_url: str | None = field(default=None, repr=True, kw_only=True)
    """Optional[:class:`str`]: The URL to site icon, or embed icon."""

    colour: str | None = field(default=None, repr=True, kw_only=True)
    """Optional[:class:`str`]: The CSS colour of the embed."""

    site_name: str | None = field(default=None, repr=True, kw_only=True)
    """Optional[:class:`str`]: The site name, for website embeds."""

    internal_media: Asset | None = field(default=None, repr=True, kw_only=True)
    """Optional[:class:`.Asset`]: The uploaded media, for text embeds."""

    width: int | None = field(default=None, repr=True, kw_only=True)
    """Optional[:class:`int`]: The width of image or video embed."""

    height: int | None = field(default=None, repr=True, kw_only=True)
    """Optional[:class:`int`]: The height of image or video embed."""

    def to_optimized(self) -> OptimizedEmbed:
        return OptimizedEmbed(
            type=self.type,
            url=self.url,
            title=self.title,
            description=self.description,
            colour=self.colour,
        )


@define(slots=True)
class OptimizedEmbed:
    type: EmbedType = field(repr=True, kw_only=True)
    url: str | None = field(default=None, repr=True, kw_only=True)
    title: str | None = field(default=None, repr=True, kw_only=True)
    description: str | None = field(default=None, repr=True, kw_only=True)
    colour: str | None = field(default=None, repr=True, kw_only=True)


class SendableEmbed:
    """Represents a text embed before it is sent.

    Attributes
    ----------
    icon_url: Optional[:class:`str`]
        The embed icon URL.
    url: Optional[:class:`str`]
        The embed URL.
    title: Optional[:class:`str`]
        The title of the embed.
    description: Optional[:class:`str`]
        The description of the embed.
    media: Optional[:class:`str`]
        The ID of uploaded file to attach.
    colour: Optional[:class:`str`]
        The embed colour. This must be valid CSS colour.
    """

    __slots__ = ('icon_url', 'url', 'title', 'description', 'media', 'colour')

    def __init__(
        self,
        title: str | None = None,
        description: str | None = None,
        *,
        icon_url: str | None = None,
        url: str | None = None,
        media: str | None = None,
        colour: str | None = None,
    ) -> None:
        self.icon_url: str | None = icon_url
        self.url: str | None = url
        self.title: str | None = title
        self.description: str | None = description
        self.media: str | None = media
        self.colour: str | None = colour

    def build(self) -> dict[str, typing.Any]:
        payload: dict[str, typing.Any] = {}
        if self.icon_url is not None:
            payload['icon_url'] = self.icon_url
        if self.url is not None:
            payload['url'] = self.url
        if self.title is not None:
            payload['title'] = self.title
        if self.description is not None:
            payload['description'] = self.description
        if self.media is not None:
            payload['media'] = self.media
        if self.colour is not None:
            payload['colour'] = self.colour
        return payload


class Reply:
    """Represents a message reply.

    Attributes
    ----------
    id: :class:`str`
        The ID of the message to reply to.
    mention: :class:`bool`
        Whether to mention author of that message.
    """

    __slots__ = ('id', 'mention')

    def __init__(self, id: str, mention: bool = False) -> None:
        self.id: str = id
        self.mention: bool = mention

    def build(self) -> dict[str, typing.Any]:
        return {'id': self.id, 'mention': self.mention}


class Masquerade:
    """Represents overrides of name and/or avatar on message.

    Attributes
    ----------
    name: Optional[:class:`str`]
        The name to replace the display name shown on this message.
    avatar: Optional[:class:`str`]
        The image URL to replace the displayed avatar shown on this message.
    colour: Optional[:class:`str`]
        The CSS colour to replace display role colour shown on this message.
    """

    __slots__ = ('name', 'avatar', 'colour')

    def __init__(self, name: str | None = None, avatar: str | None = None, *, colour: str | None = None) -> None:
        self.name: str | None = name
        self.avatar: str | None = avatar
        self.colour: str | None = colour

    def build(self) -> dict[str, typing.Any]:
        payload = {}
        if self.name is not None:
            payload['name'] = self.name
        if self.avatar is not None:
            payload['avatar'] = self.avatar
        if self.colour is not None:
            payload['colour'] = self.colour
        return payload


@define(slots=True)
class MessageMasquerade:
    name: str | None = field(default=None, repr=True, kw_only=True)
    avatar: str | None = field(default=None, repr=True, kw_only=True)
    colour: str | None = field(default=None, repr=True, kw_only=True)


@define(slots=True)
class MessageWebhook:
    """Information about the webhook bundled with message."""

    name: str = field(repr=True, kw_only=True)
    avatar: str | None = field(repr=True, kw_only=True)


@define(slots=True)
class Message(Base):
    """Represents a message in channel on Revolt."""

    nonce: str | None = field(repr=True, kw_only=True)
    """Optional[:class:`str`]: The unique value generated by client sending this message."""

    channel_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The channel's ID this message was sent in."""

    author_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The user's ID or webhook this message was sent by."""

    webhook: MessageWebhook | None = field(repr=True, kw_only=True)
    """Optional[:class:`MessageWebhook`]: The webhook that sent this message."""

    content: str = field(repr=True, kw_only=True)
    """:class:`str`: The message's content."""

    system_event: dict[str, typing.Any] | None = field(repr=True, kw_only=True)
    """Optional[Dict[:class:`str`, Any]]: The system event information, occured in this message, if any."""

    attachments: list[Asset] = field(repr=True, kw_only=True)
    """List[:class:`.Asset`]: The attachments of the message."""

    edited_at: datetime | None = field(repr=True, kw_only=True)
    """Optional[:class:`~datetime.datetime`]: The timestamp at which this message was last edited."""

    embeds: list[Embed] = field(repr=True, kw_only=True)
    """List[:class:`Embed`]: The attached embeds to this message."""

    mention_ids: list[str] = field(repr=True, kw_only=True)
    """List[:class:`str`]: The user's IDs mentioned in this message."""

    replies: list[str] = field(repr=True, kw_only=True)
    """List[:class:`str`]: The message's IDs this message is replying to."""

    reactions: dict[str, list[str]] = field(repr=True, kw_only=True)
    """Dict[:class:`str`, List[:class:`str`]]: The mapping of emojis to list of user IDs."""

    masquerade: MessageMasquerade | None = field(repr=True, kw_only=True)
    """Optional[:class:`MessageMasquerade`]: The name and / or avatar overrides for this message."""

    pinned: bool = field(default=False, repr=True, kw_only=True)
    """:class:`bool`: Whether the message is pinned."""

    def to_optimized(self) -> OptimizedMessage:
        """:class:`OptimizedMessage`: Builds the cached projection of this message."""
        return OptimizedMessage(
            id=self.id,
            channel_id=self.channel_id,
            author_id=self.author_id,
            content=self.content,
            attachments=[a.to_optimized() for a in self.attachments],
            embeds=[e.to_optimized() for e in self.embeds],
            edited_at=self.edited_at,
            mention_ids=list(self.mention_ids),
            replies=list(self.replies),
            pinned=self.pinned,
        )


@define(slots=True)
class PartialMessage(Base):
    """Represents partial message in channel on Revolt."""

    channel_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The channel's ID this message was sent in."""

    edited_at: UndefinedOr[datetime] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[:class:`~datetime.datetime`]: When message was last edited."""

    content: UndefinedOr[str] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[:class:`str`]: The new message's content."""

    embeds: UndefinedOr[list[Embed]] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[List[:class:`Embed`]]: The new message embeds."""

    pinned: UndefinedOr[bool] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[:class:`bool`]: Whether the message was just pinned."""


@define(slots=True)
class MessageAppendData(Base):
    """Appended data to message in channel on Revolt."""

    channel_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The channel's ID this message was sent in."""

    embeds: UndefinedOr[list[Embed]] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[List[:class:`Embed`]]: The embeds that were appended."""


@define(slots=True)
class OptimizedMessage:
    """Represents a cached message."""

    id: str = field(repr=True, kw_only=True)
    channel_id: str = field(repr=True, kw_only=True)
    author_id: str = field(repr=True, kw_only=True)
    content: str = field(default='', repr=True, kw_only=True)
    attachments: list[OptimizedAsset] = field(factory=list, repr=False, kw_only=True)
    embeds: list[OptimizedEmbed] = field(factory=list, repr=False, kw_only=True)
    edited_at: datetime | None = field(default=None, repr=False, kw_only=True)
    mention_ids: list[str] = field(factory=list, repr=False, kw_only=True)
    replies: list[str] = field(factory=list, repr=False, kw_only=True)
    pinned: bool = field(default=False, repr=False, kw_only=True)

    def locally_update(self, data: PartialMessage, /) -> None:
        """Locally updates message with provided data.

        .. warning::
            This is called by library internally to keep cache up to date.
        """
        if data.content is not UNDEFINED:
            self.content = data.content
        if data.embeds is not UNDEFINED:
            self.embeds = [e.to_optimized() for e in data.embeds]
        if data.edited_at is not UNDEFINED:
            self.edited_at = data.edited_at
        if data.pinned is not UNDEFINED:
            self.pinned = data.pinned

    def locally_append(self, data: MessageAppendData, /) -> None:
        """Locally appends embeds to message.

        .. warning::
            This is called by library internally to keep cache up to date.
        """
        if data.embeds is not UNDEFINED:
            self.embeds.extend(e.to_optimized() for e in data.embeds)


__all__ = (
    'Embed',
    'OptimizedEmbed',
    'SendableEmbed',
    'Reply',
    'Masquerade',
    'MessageMasquerade',
    'MessageWebhook',
    'Message',
    'PartialMessage',
    'MessageAppendData',
    'OptimizedMessage',
)
