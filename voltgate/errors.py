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

if typing.TYPE_CHECKING:
    from aiohttp import ClientResponse as Response


class VoltgateError(Exception):
    """Base exception class for voltgate

    Ideally speaking, this could be caught to handle any exceptions raised from this library.
    """

    __slots__ = ()


class HTTPException(VoltgateError):
    """Exception that's raised when an HTTP request operation fails.

    Attributes
    ------------
    response: :class:`aiohttp.ClientResponse`
        The response of the failed HTTP request.
    data: Union[Dict[:class:`str`, Any], Any]
        The data of the error. Could be an empty string.
    status: :class:`int`
        The status code of the HTTP request.
    type: :class:`str`
        The API specific error type for the failure. ``'NonJSON'`` if the body was not JSON.
    retry_after: Optional[:class:`float`]
        The duration in milliseconds to wait until ratelimit expires.
    error: Optional[:class:`str`]
        The validation error details, or response text if it was not JSON.
    max: Optional[:class:`int`]
        The maximum count of entities, for ``'TooMany*'`` and ``'FileTooLarge'`` errors.
    permission: Optional[:class:`str`]
        The permission required to perform request.
    operation: Optional[:class:`str`]
        The database operation that failed.
    collection: Optional[:class:`str`]
        The collection's name the operation was on.
    location: Optional[:class:`str`]
        The path to server source location where error occured.
    with_: Optional[:class:`str`]
        The entity kind the error is related to.
    feature: Optional[:class:`str`]
        The feature that was disabled.
    """

    __slots__ = (
        'response',
        'data',
        'status',
        'type',
        'retry_after',
        'error',
        'max',
        'permission',
        'operation',
        'collection',
        'location',
        'with_',
        'feature',
    )

    def __init__(
        self,
        response: Response,
        data: dict[str, typing.Any] | str,
        /,
    ) -> None:
        self.response: Response = response
        self.data: dict[str, typing.Any] | str = data
        self.status: int = response.status

        errors = []

        if isinstance(data, str):
            self.type: str = 'NonJSON'
            self.retry_after: float | None = None
            self.error: str | None = data
            errors.append(data)
            self.max: int | None = None
            self.permission: str | None = None
            self.operation: str | None = None
            self.collection: str | None = None
            self.location: str | None = None
            self.with_: str | None = None
            self.feature: str | None = None
        else:
            self.type = data.get('type', 'Unknown')

            self.retry_after = data.get('retry_after')
            if self.retry_after is not None:
                errors.append(f'retry_after={self.retry_after}')

            self.error = data.get('error')
            if self.error is not None:
                errors.append(f'error={self.error}')

            self.max = data.get('max')
            if self.max is not None:
                errors.append(f'max={self.max}')

            self.permission = data.get('permission')
            if self.permission is not None:
                errors.append(f'permission={self.permission}')

            self.operation = data.get('operation')
            if self.operation is not None:
                errors.append(f'operation={self.operation}')

            self.collection = data.get('collection')
            if self.collection is not None:
                errors.append(f'collection={self.collection}')

            self.location = data.get('location')
            if self.location is not None:
                errors.append(f'location={self.location}')

            self.with_ = data.get('with')
            if self.with_ is not None:
                errors.append(f'with={self.with_}')

            self.feature = data.get('feature')
            if self.feature is not None:
                errors.append(f'feature={self.feature}')

        super().__init__(
            f'{self.type} (raw={data})' if len(errors) == 0 else f"{self.type}: {' '.join(errors)} (raw={data})"
        )


class Unauthorized(HTTPException):
    __slots__ = ()


class Forbidden(HTTPException):
    __slots__ = ()


class NotFound(HTTPException):
    __slots__ = ()


class Conflict(HTTPException):
    __slots__ = ()


class Ratelimited(HTTPException):
    __slots__ = ()


class InternalServerError(HTTPException):
    __slots__ = ()


class BadGateway(HTTPException):
    __slots__ = ()


class ShardError(VoltgateError):
    """Base class for errors that happen on event stream connection."""

    __slots__ = ()


_SOCKET_ERROR_DESCRIPTIONS: typing.Final[dict[str, str]] = {
    'LabelMe': 'uncategorised error',
    'InternalServer': 'the server ran into an issue',
    'InvalidSession': 'authentication details are incorrect',
    'OnboardingNotFinished': 'user has not chosen a username',
    'AlreadyAuthenticated': 'this connection is already authenticated',
}


class SocketError(ShardError):
    """Exception that's raised when the server reports an error over event stream.

    Attributes
    ----------
    error_id: :class:`str`
        The error identifier sent by server, for example ``'InvalidSession'``.
    """

    __slots__ = ('error_id',)

    def __init__(self, error_id: str, /) -> None:
        self.error_id: str = error_id
        description = _SOCKET_ERROR_DESCRIPTIONS.get(error_id)
        super().__init__(error_id if description is None else f'{error_id}: {description}')

    @property
    def description(self) -> str | None:
        """Optional[:class:`str`]: The human readable description of error, if known."""
        return _SOCKET_ERROR_DESCRIPTIONS.get(self.error_id)


class TransportError(ShardError):
    """Exception that's raised when the underlying WebSocket fails or gets closed by remote end.

    Attributes
    ----------
    code: Optional[:class:`int`]
        The WebSocket close code, if available.
    """

    __slots__ = ('code',)

    def __init__(self, message: str, /, *, code: int | None = None) -> None:
        self.code: int | None = code
        super().__init__(message if code is None else f'{message} (code: {code})')


class ConnectError(ShardError):
    """Exception that's raised when connecting to the event stream endpoint fails."""

    __slots__ = ('url',)

    def __init__(self, url: str, exc: Exception, /) -> None:
        self.url: str = url
        super().__init__(f'Failed to connect to {url}: {exc}')


class ShardClosedError(ShardError):
    __slots__ = ()


class InvalidData(VoltgateError):
    """Exception that's raised when the library encounters unknown
    or invalid data from the API.

    Attributes
    ----------
    reason: :class:`str`
        The reason why data is invalid.
    payload: Any
        The offending payload, if available.
    """

    __slots__ = ('reason', 'payload')

    def __init__(self, reason: str, /, *, payload: typing.Any = None) -> None:
        self.reason: str = reason
        self.payload: typing.Any = payload
        super().__init__(reason)


__all__ = (
    'VoltgateError',
    'HTTPException',
    'Unauthorized',
    'Forbidden',
    'NotFound',
    'Conflict',
    'Ratelimited',
    'InternalServerError',
    'BadGateway',
    'ShardError',
    'SocketError',
    'TransportError',
    'ConnectError',
    'ShardClosedError',
    'InvalidData',
)
