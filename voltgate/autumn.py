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

import logging
import typing

import aiohttp

from .enums import UploadTag
from .http import HTTPClient
from .routes import GET, POST, Route

if typing.TYPE_CHECKING:
    from .parser import Parser

_L = logging.getLogger(__name__)

DEFAULT_AUTUMN_API_URL: typing.Final[str] = 'https://autumn.revolt.chat/'

AUTUMN_FETCH_CONFIG: typing.Final[Route] = Route(GET, '/')
AUTUMN_UPLOAD: typing.Final[Route] = Route(POST, '/{tag}')
AUTUMN_FILE_FETCH: typing.Final[Route] = Route(GET, '/{tag}/{file_id}')


class Autumn(HTTPClient):
    """Represents an HTTP client for the file server.

    This shares credentials handling, retries and errors with :class:`.HTTPClient`.

    Parameters
    ----------
    token: :class:`str`
        The authentication token.
    base: Optional[:class:`str`]
        The base URL of file server. Defaults to ``'https://autumn.revolt.chat/'``.
    """

    __slots__ = ()

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
        super().__init__(
            token,
            base=DEFAULT_AUTUMN_API_URL if base is None else base,
            bot=bot,
            max_retries=max_retries,
            session=session,
            user_agent=user_agent,
            parser=parser,
        )

    async def fetch_config(self) -> dict[str, typing.Any]:
        """|coro|

        Retrieves the file server configuration, including limits of each tag.
        """
        return await self.request(AUTUMN_FETCH_CONFIG.compile(), authenticated=False)

    async def upload(
        self,
        tag: UploadTag | str,
        file: bytes | typing.BinaryIO,
        *,
        filename: str,
        content_type: str | None = None,
    ) -> str:
        """|coro|

        Uploads a file.

        Parameters
        ----------
        tag: Union[:class:`.UploadTag`, :class:`str`]
            The bucket to upload file to.
        file: Union[:class:`bytes`, BinaryIO]
            The file contents.
        filename: :class:`str`
            The file name shown in clients.
        content_type: Optional[:class:`str`]
            The file's MIME type. Guessed by server if not provided.

        Raises
        ------
        :class:`HTTPException`
            Possible values for :attr:`~HTTPException.type`:

            +------------------------+-----------------------------------------+
            | Value                  | Reason                                  |
            +------------------------+-----------------------------------------+
            | ``FileTooLarge``       | The file exceeds the size limit of tag. |
            +------------------------+-----------------------------------------+
            | ``FileTypeNotAllowed`` | The tag does not accept such files.     |
            +------------------------+-----------------------------------------+

        Returns
        -------
        :class:`str`
            The ID of uploaded file. Pass it to methods accepting attachments, icons or avatars.
        """
        if isinstance(tag, UploadTag):
            tag = tag.value

        form = aiohttp.FormData()
        form.add_field('file', file, filename=filename, content_type=content_type)

        _L.debug('Uploading %s to %s', filename, tag)
        resp = await self.request(AUTUMN_UPLOAD.compile(tag=tag), data=form)
        return resp['id']

    async def download(self, tag: UploadTag | str, file_id: str, /) -> bytes:
        """|coro|

        Downloads a file.

        Parameters
        ----------
        tag: Union[:class:`.UploadTag`, :class:`str`]
            The bucket the file is in.
        file_id: :class:`str`
            The file's ID.

        Returns
        -------
        :class:`bytes`
            The file contents.
        """
        if isinstance(tag, UploadTag):
            tag = tag.value

        response = await self.raw_request(AUTUMN_FILE_FETCH.compile(tag=tag, file_id=file_id), accept_json=False)
        try:
            return await response.read()
        finally:
            response.close()


__all__ = (
    'DEFAULT_AUTUMN_API_URL',
    'AUTUMN_FETCH_CONFIG',
    'AUTUMN_UPLOAD',
    'AUTUMN_FILE_FETCH',
    'Autumn',
)
