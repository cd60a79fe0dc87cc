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

from attrs import Factory, define, field

from .base import Base
from .flags import EmojiProjectionFlags


@define(slots=True)
class BaseEmoji(Base):
    """Represents an emoji on Revolt."""

    creator_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The user's ID who uploaded this emoji."""

    name: str = field(repr=True, kw_only=True)
    """:class:`str`: The emoji's name."""

    animated: bool = field(repr=True, kw_only=True)
    """:class:`bool`: Whether the emoji is animated."""

    nsfw: bool = field(repr=True, kw_only=True)
    """:class:`bool`: Whether the emoji is marked as NSFW."""

    def __eq__(self, other: object, /) -> bool:
        return self is other or isinstance(other, BaseEmoji) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __str__(self) -> str:
        return f':{self.id}:'

    def _parent_id(self) -> str | None:
        return None

    def to_optimized(self) -> OptimizedEmoji:
        """:class:`OptimizedEmoji`: Builds the cached projection of this emoji."""
        return OptimizedEmoji(
            id=self.id,
            name=self.name,
            creator_id=self.creator_id,
            server_id=self._parent_id(),
            flags=EmojiProjectionFlags(animated=self.animated, nsfw=self.nsfw),
        )


@define(slots=True)
class ServerEmoji(BaseEmoji):
    """Represents an emoji in Revolt :class:`.Server`."""

    server_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The server's ID the emoji belongs to."""

    def _parent_id(self) -> str | None:
        return self.server_id


@define(slots=True)
class DetachedEmoji(BaseEmoji):
    """Represents a deleted emoji on Revolt."""


Emoji = ServerEmoji | DetachedEmoji
ResolvableEmoji = BaseEmoji | str


@define(slots=True)
class OptimizedEmoji:
    """Represents a cached emoji."""

    id: str = field(repr=True, kw_only=True)
    name: str = field(repr=True, kw_only=True)
    creator_id: str = field(repr=True, kw_only=True)
    server_id: str | None = field(default=None, repr=True, kw_only=True)
    flags: EmojiProjectionFlags = field(default=Factory(EmojiProjectionFlags), repr=True, kw_only=True)

    def __str__(self) -> str:
        return f':{self.id}:'


def resolve_emoji(resolvable: ResolvableEmoji | OptimizedEmoji, /) -> str:
    """:class:`str`: Resolves emoji's ID from parameter.

    Unicode emojis are returned as is.
    """
    return resolvable if isinstance(resolvable, str) else resolvable.id


__all__ = (
    'BaseEmoji',
    'ServerEmoji',
    'DetachedEmoji',
    'Emoji',
    'ResolvableEmoji',
    'OptimizedEmoji',
    'resolve_emoji',
)
