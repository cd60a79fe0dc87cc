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

import inspect
import typing

from .utils import MISSING

if typing.TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from typing_extensions import Self

BF = typing.TypeVar('BF', bound='BaseFlags')


class flag(typing.Generic[BF]):
    # A descriptor for a single bit (or a group of bits) of BaseFlags
    __slots__ = (
        '__doc__',
        '_func',
        '_parent',
        'name',
        'value',
        'alias',
    )

    def __init__(self, *, alias: bool = False) -> None:
        self.__doc__: typing.Optional[str] = None
        self._func: Callable[[BF], int] = MISSING
        self._parent: type[BF] = MISSING
        self.name: str = ''
        self.value: int = 0
        self.alias: bool = alias

    def __call__(self, func: Callable[[BF], int], /) -> Self:
        self._func = func
        self.__doc__ = func.__doc__
        self.name = func.__name__
        return self

    @typing.overload
    def __get__(self, instance: None, owner: type[BF], /) -> Self: ...

    @typing.overload
    def __get__(self, instance: BF, owner: type[BF], /) -> bool: ...

    def __get__(self, instance: typing.Optional[BF], owner: type[BF], /) -> typing.Union[bool, Self]:
        if instance is None:
            return self
        else:
            return instance._get(self)

    def __set__(self, instance: BF, value: bool, /) -> None:
        instance._set(self, value)

    def __and__(self, other: typing.Union[BF, flag[BF], int], /) -> BF:
        return self._parent(self.value) & other

    def __or__(self, other: typing.Union[BF, flag[BF], int], /) -> BF:
        return self._parent(self.value) | other

    def __xor__(self, other: typing.Union[BF, flag[BF], int], /) -> BF:
        return self._parent(self.value) ^ other

    def __int__(self) -> int:
        return self.value


class BaseFlags:
    """Base class for flags.

    The flags are stored as a single integer, and every :class:`flag` sets or clears only
    its own bits, leaving the rest of value untouched.
    """

    if typing.TYPE_CHECKING:
        ALL_VALUE: typing.ClassVar[int]
        VALID_FLAGS: typing.ClassVar[dict[str, int]]
        FLAGS: typing.ClassVar[dict[str, flag]]

    __slots__ = ('value',)

    def __init_subclass__(cls, *, support_kwargs: bool = True) -> None:
        valid_flags = {}
        flags = {}
        for _, f in inspect.getmembers(cls):
            if isinstance(f, flag):
                f.value = f._func(cls)
                if f.alias:
                    continue
                valid_flags[f.name] = f.value
                flags[f.name] = f
                f._parent = cls

        all = 0
        for value in valid_flags.values():
            all |= value

        cls.ALL_VALUE = all
        cls.VALID_FLAGS = valid_flags
        cls.FLAGS = flags

        if support_kwargs:

            def init_with_kwargs(self, value: int = 0, /, **kwargs: bool) -> None:
                self.value = value

                if kwargs:
                    for k, f in kwargs.items():
                        if k not in self.VALID_FLAGS:
                            raise TypeError(f'Unknown flag {k}')
                        setattr(self, k, f)

            cls.__init__ = init_with_kwargs
        else:

            def init_without_kwargs(self, value: int = 0, /) -> None:
                self.value = value

            cls.__init__ = init_without_kwargs  # type: ignore

    if typing.TYPE_CHECKING:

        def __init__(self, value: int = 0, /, **kwargs: bool) -> None:
            pass

    def _get(self, other: flag[Self], /) -> bool:
        ov = other.value
        return (self.value & ov) == ov

    def _set(self, flag: flag[Self], value: bool, /) -> None:
        if value:
            self.value |= flag.value
        else:
            self.value &= ~flag.value

    @classmethod
    def all(cls) -> Self:
        """Returns instance with all flags."""
        return cls(cls.ALL_VALUE)

    @classmethod
    def none(cls) -> Self:
        """Returns instance with no flags."""
        return cls(0)

    def __hash__(self) -> int:
        return hash(self.value)

    def __iter__(self) -> Iterator[tuple[str, bool]]:
        for name in self.FLAGS:
            yield (name, getattr(self, name))

    def __repr__(self, /) -> str:
        return f'<{self.__class__.__name__}: {self.value}>'

    def copy(self) -> Self:
        """Copies the flag value."""
        return self.__class__(self.value)

    def _value_of(self, other: typing.Union[Self, flag[Self], int], /) -> int:
        if isinstance(other, int):
            return other
        elif isinstance(other, (flag, self.__class__)):
            return other.value
        else:
            raise TypeError(f'cannot get {other.__class__.__name__} value')

    def __and__(self, other: typing.Union[Self, flag[Self], int], /) -> Self:
        return self.__class__(self.value & self._value_of(other))

    def __bool__(self) -> bool:
        return self.value != 0

    def __contains__(self, other: typing.Union[Self, flag[Self], int], /) -> bool:
        ov = self._value_of(other)
        return (self.value & ov) == ov

    def __eq__(self, other: object, /) -> bool:
        return self is other or isinstance(other, self.__class__) and self.value == other.value

    def __ne__(self, other: object, /) -> bool:
        return not self.__eq__(other)

    def __iand__(self, other: typing.Union[Self, flag[Self], int], /) -> Self:
        self.value &= self._value_of(other)
        return self

    def __ior__(self, other: typing.Union[Self, flag[Self], int], /) -> Self:
        self.value |= self._value_of(other)
        return self

    def __ixor__(self, other: typing.Union[Self, flag[Self], int], /) -> Self:
        self.value ^= self._value_of(other)
        return self

    def __int__(self) -> int:
        return self.value

    def __or__(self, other: typing.Union[Self, flag[Self], int], /) -> Self:
        return self.__class__(self.value | self._value_of(other))

    def __xor__(self, other: typing.Union[Self, flag[Self], int], /) -> Self:
        return self.__class__(self.value ^ self._value_of(other))


class UserBadges(BaseFlags, support_kwargs=True):
    """Wraps up a user badges value, as sent by API."""

    __slots__ = ()

    @flag()
    def developer(cls) -> int:
        """:class:`bool`: Whether user is platform developer."""
        return 1 << 0

    @flag()
    def translator(cls) -> int:
        """:class:`bool`: Whether the user helped translate platform."""
        return 1 << 1

    @flag()
    def supporter(cls) -> int:
        """:class:`bool`: Whether the user monetarily supported platform."""
        return 1 << 2

    @flag()
    def responsible_disclosure(cls) -> int:
        """:class:`bool`: Whether the user have responsibly disclosed a security issue."""
        return 1 << 3

    @flag()
    def founder(cls) -> int:
        """:class:`bool`: Whether the user is a platform founder."""
        return 1 << 4

    @flag()
    def platform_moderation(cls) -> int:
        """:class:`bool`: Whether the user is a platform moderator."""
        return 1 << 5

    @flag()
    def active_supporter(cls) -> int:
        """:class:`bool`: Whether the user is active monetary supporter."""
        return 1 << 6

    @flag()
    def paw(cls) -> int:
        return 1 << 7

    @flag()
    def early_adopter(cls) -> int:
        """:class:`bool`: Whether the user joined as one of the first 1000 users."""
        return 1 << 8

    @flag()
    def reserved_relevant_joke_badge_1(cls) -> int:
        return 1 << 9

    @flag()
    def reserved_relevant_joke_badge_2(cls) -> int:
        return 1 << 10


class UserFlags(BaseFlags, support_kwargs=True):
    """Wraps up a user flags value, as sent by API."""

    __slots__ = ()

    @flag()
    def suspended(cls) -> int:
        """:class:`bool`: Whether the user has been suspended from the platform."""
        return 1 << 0

    @flag()
    def deleted(cls) -> int:
        """:class:`bool`: Whether the user has deleted their account."""
        return 1 << 1

    @flag()
    def banned(cls) -> int:
        """:class:`bool`: Whether the user was banned off the platform."""
        return 1 << 2

    @flag()
    def spam(cls) -> int:
        """:class:`bool`: Whether the user was marked as spam and removed from platform."""
        return 1 << 3


# Layout of UserProjectionFlags:
#   bits 0..15   badges
#   bits 16..23  user flags
#   bit  31      online
USER_BADGES_MASK: typing.Final[int] = 0xFFFF
USER_FLAGS_SHIFT: typing.Final[int] = 16
USER_FLAGS_MASK: typing.Final[int] = 0xFF << USER_FLAGS_SHIFT


class UserProjectionFlags(BaseFlags, support_kwargs=True):
    """The packed flags of a cached user.

    Badges, account flags and online status share one integer. Each of them
    can be replaced without touching the others, see :meth:`update_badges` and :meth:`update_flags`.
    """

    __slots__ = ()

    @flag()
    def online(cls) -> int:
        """:class:`bool`: Whether the user is currently online."""
        return 1 << 31

    @classmethod
    def build(cls, *, badges: int = 0, flags: int = 0, online: bool = False) -> Self:
        self = cls()
        self.update_badges(badges)
        self.update_flags(flags)
        self.online = online
        return self

    @property
    def badges(self) -> UserBadges:
        """:class:`UserBadges`: The user's badges."""
        return UserBadges(self.value & USER_BADGES_MASK)

    @property
    def flags(self) -> UserFlags:
        """:class:`UserFlags`: The user's account flags."""
        return UserFlags((self.value & USER_FLAGS_MASK) >> USER_FLAGS_SHIFT)

    def update_badges(self, badges: int, /) -> None:
        """Replaces the badges segment.

        Parameters
        ----------
        badges: :class:`int`
            The raw badges value.
        """
        self.value = (self.value & ~USER_BADGES_MASK) | (badges & USER_BADGES_MASK)

    def update_flags(self, flags: int, /) -> None:
        """Replaces the account flags segment.

        Parameters
        ----------
        flags: :class:`int`
            The raw user flags value.
        """
        self.value = (self.value & ~USER_FLAGS_MASK) | ((flags << USER_FLAGS_SHIFT) & USER_FLAGS_MASK)


class ChannelProjectionFlags(BaseFlags, support_kwargs=True):
    """The packed flags of a cached channel."""

    __slots__ = ()

    @flag()
    def active(cls) -> int:
        """:class:`bool`: Whether the DM channel is currently open on both sides."""
        return 1 << 0

    @flag()
    def nsfw(cls) -> int:
        """:class:`bool`: Whether the channel is marked as NSFW."""
        return 1 << 1


class ServerProjectionFlags(BaseFlags, support_kwargs=True):
    """The packed flags of a cached server."""

    __slots__ = ()

    @flag()
    def analytics(cls) -> int:
        """:class:`bool`: Whether analytics are enabled for the server."""
        return 1 << 0

    @flag()
    def nsfw(cls) -> int:
        """:class:`bool`: Whether the server is marked as NSFW."""
        return 1 << 1

    @flag()
    def discoverable(cls) -> int:
        """:class:`bool`: Whether the server is publicly listed."""
        return 1 << 2


class RoleProjectionFlags(BaseFlags, support_kwargs=True):
    """The packed flags of a cached role."""

    __slots__ = ()

    @flag()
    def hoist(cls) -> int:
        """:class:`bool`: Whether the role is displayed separately in member list."""
        return 1 << 0


class EmojiProjectionFlags(BaseFlags, support_kwargs=True):
    """The packed flags of a cached emoji."""

    __slots__ = ()

    @flag()
    def animated(cls) -> int:
        return 1 << 0

    @flag()
    def nsfw(cls) -> int:
        return 1 << 1


__all__ = (
    'flag',
    'BaseFlags',
    'UserBadges',
    'UserFlags',
    'USER_BADGES_MASK',
    'USER_FLAGS_SHIFT',
    'USER_FLAGS_MASK',
    'UserProjectionFlags',
    'ChannelProjectionFlags',
    'ServerProjectionFlags',
    'RoleProjectionFlags',
    'EmojiProjectionFlags',
)
