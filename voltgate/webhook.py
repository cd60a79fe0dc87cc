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

from attrs import define, field

from .base import Base
from .cdn import Asset, OptimizedAsset, optimize_asset
from .core import UNDEFINED, UndefinedOr


@define(slots=True)
class Webhook(Base):
    """Represents a webhook on Revolt."""

    name: str = field(repr=True, kw_only=True)
    """:class:`str`: The webhook's name."""

    internal_avatar: Asset | None = field(repr=True, kw_only=True)
    """Optional[:class:`.Asset`]: The webhook's avatar."""

    creator_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The user's ID who created this webhook."""

    channel_id: str = field(repr=True, kw_only=True)
    """:class:`str`: The channel's ID the webhook in."""

    raw_permissions: int = field(repr=True, kw_only=True)
    """:class:`int`: The raw value of permissions for this webhook."""

    token: str | None = field(repr=False, kw_only=True)
    """Optional[:class:`str`]: The webhook's private token."""

    def to_optimized(self) -> OptimizedWebhook:
        """:class:`OptimizedWebhook`: Builds the cached projection of this webhook."""
        return OptimizedWebhook(
            id=self.id,
            name=self.name,
            avatar=optimize_asset(self.internal_avatar),
            creator_id=self.creator_id,
            channel_id=self.channel_id,
            raw_permissions=self.raw_permissions,
        )


@define(slots=True)
class PartialWebhook(Base):
    """Represents a partial webhook on Revolt."""

    name: UndefinedOr[str] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[:class:`str`]: The new webhook's name."""

    internal_avatar: UndefinedOr[Asset | None] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[Optional[:class:`.Asset`]]: The new webhook's avatar."""

    raw_permissions: UndefinedOr[int] = field(default=UNDEFINED, repr=True, kw_only=True)
    """UndefinedOr[:class:`int`]: The new webhook's permissions raw value."""


@define(slots=True)
class OptimizedWebhook:
    """Represents a cached webhook. The private token is never cached."""

    id: str = field(repr=True, kw_only=True)
    name: str = field(repr=True, kw_only=True)
    avatar: OptimizedAsset | None = field(default=None, repr=True, kw_only=True)
    creator_id: str = field(repr=True, kw_only=True)
    channel_id: str = field(repr=True, kw_only=True)
    raw_permissions: int = field(default=0, repr=True, kw_only=True)

    def locally_update(self, data: PartialWebhook, /) -> None:
        """Locally updates webhook with provided data.

        .. warning::
            This is called by library internally to keep cache up to date.
        """
        if data.name is not UNDEFINED:
            self.name = data.name
        if data.internal_avatar is not UNDEFINED:
            self.avatar = optimize_asset(data.internal_avatar)
        if data.raw_permissions is not UNDEFINED:
            self.raw_permissions = data.raw_permissions


__all__ = (
    'Webhook',
    'PartialWebhook',
    'OptimizedWebhook',
)
