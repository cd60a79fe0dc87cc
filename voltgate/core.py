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

from datetime import datetime, timezone
from enum import Enum
import typing


class _Sentinel(Enum):
    """The library sentinels."""

    undefined = 'UNDEFINED'

    def __bool__(self) -> typing.Literal[False]:
        return False

    def __repr__(self) -> typing.Literal['UNDEFINED']:
        return self.value

    def __eq__(self, other: object, /) -> bool:
        return self is other

    def __hash__(self) -> int:
        return hash(self.value)


Undefined: typing.TypeAlias = typing.Literal[_Sentinel.undefined]
UNDEFINED: Undefined = _Sentinel.undefined


T = typing.TypeVar('T')
UndefinedOr = Undefined | T

# Crockford's base32
_ULID_ALPHABET: typing.Final[str] = '0123456789ABCDEFGHJKMNPQRSTVWXYZ'
_ULID_DECODE: typing.Final[dict[str, int]] = {c: i for i, c in enumerate(_ULID_ALPHABET)}
_ULID_LENGTH: typing.Final[int] = 26
_ULID_TIMESTAMP_LENGTH: typing.Final[int] = 10


def is_ulid(value: typing.Any, /) -> bool:
    """:class:`bool`: Whether the value looks like a valid ULID.

    An identifier is valid when it is exactly 26 characters long, consists only of
    Crockford's base32 characters (case-insensitive) and its first character does not overflow 128 bits.
    """
    if not isinstance(value, str) or len(value) != _ULID_LENGTH:
        return False
    value = value.upper()
    if value[0] not in '01234567':
        return False
    return all(c in _ULID_DECODE for c in value)


def ulid_timestamp(val: str, /) -> float:
    """Decodes the timestamp part of ULID.

    Parameters
    ----------
    val: :class:`str`
        The ULID.

    Raises
    ------
    ValueError
        The ULID is malformed.

    Returns
    -------
    :class:`float`
        The UNIX timestamp in seconds.
    """
    if not is_ulid(val):
        raise ValueError(f'Invalid ULID: {val!r}')

    ms = 0
    for c in val[:_ULID_TIMESTAMP_LENGTH].upper():
        ms = (ms << 5) | _ULID_DECODE[c]
    return ms / 1000


def ulid_time(val: str, /) -> datetime:
    return datetime.fromtimestamp(ulid_timestamp(val), timezone.utc)


class HasID(typing.Protocol):
    id: str


U = typing.TypeVar('U', bound='HasID')
ULIDOr = str | U


def resolve_id(resolvable: ULIDOr[U], /) -> str:
    if isinstance(resolvable, str):
        return resolvable
    return resolvable.id


# zero ID
ZID = '00000000000000000000000000'

__version__: str = '1.1.0'

__all__ = (
    'Undefined',
    'UNDEFINED',
    'T',
    'UndefinedOr',
    'is_ulid',
    'ulid_timestamp',
    'ulid_time',
    'HasID',
    'ULIDOr',
    'resolve_id',
    'ZID',
    '__version__',
)
