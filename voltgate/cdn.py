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

from attrs import define, field

from .enums import AssetMetadataType

DEFAULT_AUTUMN_URL: typing.Final[str] = 'https://autumn.revolt.chat'


def _asset_url(base: str, tag: str, id: str, size: int | None, /) -> str:
    url = f'{base.rstrip("/")}/{quote(tag)}/{quote(id)}'
    if size is not None:
        url += f'?max_side={size}'
    return url


@define(slots=True)
class AssetMetadata:
    """Metadata associated with a file."""

    type: AssetMetadataType = field(repr=True, kw_only=True)
    """:class:`.AssetMetadataType`: The metadata type."""

    width: int | None = field(repr=True, kw_only=True)
    """Optional[:class:`int`]: The width of image or video."""

    height: int | None = field(repr=True, kw_only=True)
    """Optional[:class:`int`]: The height of image or video."""


@define(slots=True)
class Asset:
    """Represents a file on Autumn."""

    id: str = field(repr=True, kw_only=True)
    """:class:`str`: The file's ID."""

    tag: str = field(repr=True, kw_only=True)
    """:class:`str`: The tag this file was uploaded to, like ``'attachments'``."""

    filename: str = field(repr=True, kw_only=True)
    """:class:`str`: The original filename."""

    metadata: AssetMetadata = field(repr=True, kw_only=True)
    """:class:`AssetMetadata`: The parsed metadata of this file."""

    content_type: str = field(repr=True, kw_only=True)
    """:class:`str`: The content type of this file."""

    size: int = field(repr=True, kw_only=True)
    """:class:`int`: The size of this file, in bytes."""

    deleted: bool = field(default=False, repr=True, kw_only=True)
    """:class:`bool`: Whether this file was deleted."""

    reported: bool = field(default=False, repr=True, kw_only=True)
    """:class:`bool`: Whether this file was reported."""

    message_id: str | None = field(default=None, repr=True, kw_only=True)
    user_id: str | None = field(default=None, repr=True, kw_only=True)
    server_id: str | None = field(default=None, repr=True, kw_only=True)
    object_id: str | None = field(default=None, repr=True, kw_only=True)

    def url(self, *, base: str = DEFAULT_AUTUMN_URL, size: int | None = None) -> str:
        """:class:`str`: Returns URL to the file."""
        return _asset_url(base, self.tag, self.id, size)

    def to_optimized(self) -> OptimizedAsset:
        return OptimizedAsset(id=self.id, tag=self.tag, content_type=self.content_type)


@define(slots=True)
class OptimizedAsset:
    """The cached reference to a file. Only the fields needed to build a URL are kept."""

    id: str = field(repr=True, kw_only=True)
    """:class:`str`: The file's ID."""

    tag: str = field(repr=True, kw_only=True)
    """:class:`str`: The file's tag."""

    content_type: str = field(default='', repr=True, kw_only=True)
    """:class:`str`: The content type of this file."""

    def url(self, *, base: str = DEFAULT_AUTUMN_URL, size: int | None = None) -> str:
        """:class:`str`: Returns URL to the file."""
        return _asset_url(base, self.tag, self.id, size)


def optimize_asset(asset: Asset | None, /) -> OptimizedAsset | None:
    return None if asset is None else asset.to_optimized()


__all__ = (
    'DEFAULT_AUTUMN_URL',
    'AssetMetadata',
    'Asset',
    'OptimizedAsset',
    'optimize_asset',
)
