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
    from collections.abc import Callable, Iterator

    from .channel import OptimizedChannel
    from .emoji import OptimizedEmoji
    from .message import OptimizedMessage
    from .server import Member, OptimizedRole, OptimizedServer
    from .user import OptimizedUser
    from .webhook import OptimizedWebhook


class Cacheable(typing.Protocol):
    id: str


V = typing.TypeVar('V', bound='Cacheable')

DISABLED: typing.Final[int] = 0
UNLIMITED: typing.Final[int] = -1


def _pop_any(d: dict[str, typing.Any], /) -> None:
    # Eviction is not LRU, any key may be picked
    for key in d:
        del d[key]
        return


class Cache1(typing.Generic[V]):
    """A bounded mapping of entities keyed by their ID.

    ``max_size`` controls the capacity policy:

    - ``0`` (the default) disables the cache: every :meth:`set` call is a no-op.
    - a negative number (see :data:`UNLIMITED`) means there is no limit.
    - a positive number bounds the count of stored entities. When it is reached,
      an arbitrary stored entity is evicted to make room, unless ``dont_insert_if_overflow``
      is set, in which case the new entity is silently rejected.

    None of methods raise: absence of an entity is a normal condition.

    Parameters
    ----------
    max_size: :class:`int`
        The capacity policy.
    dont_insert_if_overflow: :class:`bool`
        Whether to reject new entities instead of evicting when cache is full.
    checker: Optional[Callable[[:class:`Cache1`, V], :class:`bool`]]
        The admission predicate. It runs before eviction and may veto an insertion by returning ``False``.
    """

    __slots__ = (
        '_entries',
        'checker',
        'dont_insert_if_overflow',
        'max_size',
    )

    def __init__(
        self,
        *,
        max_size: int = DISABLED,
        dont_insert_if_overflow: bool = False,
        checker: Callable[[Cache1[V], V], bool] | None = None,
    ) -> None:
        self._entries: dict[str, V] = {}
        self.checker: Callable[[Cache1[V], V], bool] | None = checker
        self.dont_insert_if_overflow: bool = dont_insert_if_overflow
        self.max_size: int = max_size

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} max_size={self.max_size} size={len(self._entries)}>'

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, id: object, /) -> bool:
        return id in self._entries

    def __iter__(self) -> Iterator[V]:
        return iter(list(self._entries.values()))

    @property
    def enabled(self) -> bool:
        """:class:`bool`: Whether the cache accepts entities at all."""
        return self.max_size != DISABLED

    def get(self, id: str, /) -> V | None:
        """Retrieves an entity.

        Parameters
        ----------
        id: :class:`str`
            The entity's ID.

        Returns
        -------
        Optional[V]
            The entity, or ``None`` if it is not in cache.
        """
        return self._entries.get(id)

    def _resize(self, entity: V, /) -> bool:
        if self.max_size == DISABLED:
            return False

        if self.checker is not None and not self.checker(self, entity):
            return False

        if self.max_size > 0 and entity.id not in self._entries and len(self._entries) >= self.max_size:
            if self.dont_insert_if_overflow:
                return False
            _pop_any(self._entries)
        return True

    def set(self, entity: V, /) -> bool:
        """Inserts or overwrites an entity.

        Parameters
        ----------
        entity: V
            The entity to store.

        Returns
        -------
        :class:`bool`
            Whether the entity was stored. ``False`` means capacity policy or checker rejected it.
        """
        if not entity.id or not self._resize(entity):
            return False
        self._entries[entity.id] = entity
        return True

    def delete(self, id: str, /) -> V | None:
        """Removes an entity, if present.

        Returns
        -------
        Optional[V]
            The removed entity.
        """
        return self._entries.pop(id, None)

    def partially_update(self, id: str, updater: Callable[[V], typing.Any], /) -> bool:
        """Mutates a stored entity in place.

        The updater is called only if entity is present.

        Parameters
        ----------
        id: :class:`str`
            The entity's ID.
        updater: Callable[[V], Any]
            The function that mutates the entity.

        Returns
        -------
        :class:`bool`
            Whether the updater was called.
        """
        entity = self._entries.get(id)
        if entity is None:
            return False
        updater(entity)
        return True

    def size(self) -> int:
        """:class:`int`: Returns count of stored entities."""
        return len(self._entries)

    def values(self) -> list[V]:
        return list(self._entries.values())

    def clear(self) -> None:
        self._entries.clear()


class Cache2(typing.Generic[V]):
    """A bounded mapping of entities scoped by parent ID, such as messages by channel.

    Each limit is ``0`` for "not configured", negative for "unlimited" or positive for a bound.
    If none of limits are configured, the cache is disabled.

    On every :meth:`set` the policy is evaluated in following order:

    1. The checker (if any) may veto insertion.
    2. If ``max_group_size`` is reached in target group (and key is new), an arbitrary entry of that group is evicted.
    3. If ``total_max_size`` is reached (and key is new), an arbitrary entry of any group is evicted.
    4. If ``max_groups`` is reached (and parent is new), an arbitrary whole group is evicted.
    5. The entity is inserted.

    If ``dont_insert_if_overflow`` is set, reaching any limit rejects the entity instead of evicting.

    Parameters
    ----------
    max_groups: :class:`int`
        The maximum count of distinct parents.
    max_group_size: :class:`int`
        The maximum count of entities per parent.
    total_max_size: :class:`int`
        The maximum count of entities across all parents.
    dont_insert_if_overflow: :class:`bool`
        Whether to reject new entities instead of evicting.
    checker: Optional[Callable[[:class:`Cache2`, :class:`str`, V], :class:`bool`]]
        The admission predicate, called with the cache, parent ID and entity.
    """

    __slots__ = (
        '_groups',
        '_total',
        'checker',
        'dont_insert_if_overflow',
        'max_group_size',
        'max_groups',
        'total_max_size',
    )

    def __init__(
        self,
        *,
        max_groups: int = DISABLED,
        max_group_size: int = DISABLED,
        total_max_size: int = DISABLED,
        dont_insert_if_overflow: bool = False,
        checker: Callable[[Cache2[V], str, V], bool] | None = None,
    ) -> None:
        self._groups: dict[str, dict[str, V]] = {}
        self._total: int = 0
        self.checker: Callable[[Cache2[V], str, V], bool] | None = checker
        self.dont_insert_if_overflow: bool = dont_insert_if_overflow
        self.max_group_size: int = max_group_size
        self.max_groups: int = max_groups
        self.total_max_size: int = total_max_size

    def __repr__(self) -> str:
        return (
            f'<{self.__class__.__name__} max_groups={self.max_groups} max_group_size={self.max_group_size} '
            f'total_max_size={self.total_max_size} size={self._total} groups={len(self._groups)}>'
        )

    def __len__(self) -> int:
        return self._total

    def __iter__(self) -> Iterator[V]:
        return iter([entity for group in self._groups.values() for entity in group.values()])

    @property
    def enabled(self) -> bool:
        """:class:`bool`: Whether the cache accepts entities at all."""
        return not (
            self.max_groups == DISABLED and self.max_group_size == DISABLED and self.total_max_size == DISABLED
        )

    def get(self, parent: str, id: str, /) -> V | None:
        """Retrieves an entity.

        Parameters
        ----------
        parent: :class:`str`
            The parent's ID.
        id: :class:`str`
            The entity's ID.

        Returns
        -------
        Optional[V]
            The entity, or ``None`` if it is not in cache.
        """
        group = self._groups.get(parent)
        if group is None:
            return None
        return group.get(id)

    def get_group(self, parent: str, /) -> dict[str, V]:
        """Dict[:class:`str`, V]: Returns a copy of entities stored under parent."""
        return dict(self._groups.get(parent, {}))

    def _evict_from_group(self, parent: str, /) -> None:
        group = self._groups[parent]
        if group:
            _pop_any(group)
            self._total -= 1

    def _evict_anywhere(self) -> None:
        for parent, group in self._groups.items():
            if not group:
                continue
            _pop_any(group)
            self._total -= 1
            if not group:
                del self._groups[parent]
            return

    def _evict_group(self) -> None:
        for parent in self._groups:
            self.delete_group(parent)
            return

    def _resize(self, parent: str, entity: V, /) -> bool:
        if not self.enabled:
            return False

        if self.checker is not None and not self.checker(self, parent, entity):
            return False

        group = self._groups.get(parent)
        is_new_parent = group is None
        is_new = group is None or entity.id not in group

        if (
            is_new
            and group is not None
            and self.max_group_size > 0
            and len(group) >= self.max_group_size
        ):
            if self.dont_insert_if_overflow:
                return False
            self._evict_from_group(parent)

        if is_new and self.total_max_size > 0 and self._total >= self.total_max_size:
            if self.dont_insert_if_overflow:
                return False
            self._evict_anywhere()

        if is_new_parent and self.max_groups > 0 and len(self._groups) >= self.max_groups:
            if self.dont_insert_if_overflow:
                return False
            self._evict_group()

        return True

    def set(self, parent: str, entity: V, /) -> bool:
        """Inserts or overwrites an entity under parent.

        Parameters
        ----------
        parent: :class:`str`
            The parent's ID.
        entity: V
            The entity to store.

        Returns
        -------
        :class:`bool`
            Whether the entity was stored.
        """
        if not parent or not entity.id or not self._resize(parent, entity):
            return False

        try:
            group = self._groups[parent]
        except KeyError:
            group = self._groups[parent] = {}

        if entity.id not in group:
            self._total += 1
        group[entity.id] = entity
        return True

    def delete(self, parent: str, id: str, /) -> V | None:
        """Removes an entity, if present.

        Returns
        -------
        Optional[V]
            The removed entity.
        """
        group = self._groups.get(parent)
        if group is None:
            return None
        entity = group.pop(id, None)
        if entity is not None:
            self._total -= 1
            if not group:
                del self._groups[parent]
        return entity

    def delete_group(self, parent: str, /) -> int:
        """Removes all entities stored under parent.

        Returns
        -------
        :class:`int`
            How many entities were removed.
        """
        group = self._groups.pop(parent, None)
        if group is None:
            return 0
        removed = len(group)
        self._total -= removed
        return removed

    def partially_update(self, parent: str, id: str, updater: Callable[[V], typing.Any], /) -> bool:
        """Mutates a stored entity in place. The updater is called only if entity is present.

        Returns
        -------
        :class:`bool`
            Whether the updater was called.
        """
        group = self._groups.get(parent)
        if group is None:
            return False
        entity = group.get(id)
        if entity is None:
            return False
        updater(entity)
        return True

    def size(self) -> int:
        """:class:`int`: Returns count of stored entities across all groups."""
        return self._total

    def groups_count(self) -> int:
        """:class:`int`: Returns count of distinct parents."""
        return len(self._groups)

    def clear(self) -> None:
        self._groups.clear()
        self._total = 0


class GenericCache:
    """The set of caches kept up to date by event stream.

    Parameters
    ----------
    channels: Optional[:class:`Cache1`]
        The channel cache. Unlimited by default.
    emojis: Optional[:class:`Cache1`]
        The custom emoji cache. Unlimited by default.
    members: Optional[:class:`Cache2`]
        The member cache, scoped by server ID. Unlimited by default.
    messages: Optional[:class:`Cache2`]
        The message cache, scoped by channel ID. Holds at most 1000 messages per channel by default.
    roles: Optional[:class:`Cache2`]
        The role cache, scoped by server ID. Unlimited by default.
    servers: Optional[:class:`Cache1`]
        The server cache. Unlimited by default.
    users: Optional[:class:`Cache1`]
        The user cache. Unlimited by default.
    webhooks: Optional[:class:`Cache1`]
        The webhook cache. Unlimited by default.
    """

    __slots__ = (
        'channels',
        'emojis',
        'members',
        'messages',
        'roles',
        'servers',
        'users',
        'webhooks',
    )

    def __init__(
        self,
        *,
        channels: Cache1[OptimizedChannel] | None = None,
        emojis: Cache1[OptimizedEmoji] | None = None,
        members: Cache2[Member] | None = None,
        messages: Cache2[OptimizedMessage] | None = None,
        roles: Cache2[OptimizedRole] | None = None,
        servers: Cache1[OptimizedServer] | None = None,
        users: Cache1[OptimizedUser] | None = None,
        webhooks: Cache1[OptimizedWebhook] | None = None,
    ) -> None:
        self.channels: Cache1[OptimizedChannel] = Cache1(max_size=UNLIMITED) if channels is None else channels
        self.emojis: Cache1[OptimizedEmoji] = Cache1(max_size=UNLIMITED) if emojis is None else emojis
        self.members: Cache2[Member] = Cache2(max_groups=UNLIMITED) if members is None else members
        self.messages: Cache2[OptimizedMessage] = Cache2(max_group_size=1000) if messages is None else messages
        self.roles: Cache2[OptimizedRole] = Cache2(max_groups=UNLIMITED) if roles is None else roles
        self.servers: Cache1[OptimizedServer] = Cache1(max_size=UNLIMITED) if servers is None else servers
        self.users: Cache1[OptimizedUser] = Cache1(max_size=UNLIMITED) if users is None else users
        self.webhooks: Cache1[OptimizedWebhook] = Cache1(max_size=UNLIMITED) if webhooks is None else webhooks

    @classmethod
    def disabled(cls) -> GenericCache:
        """Creates a cache set where nothing is ever stored."""
        return cls(
            channels=Cache1(),
            emojis=Cache1(),
            members=Cache2(),
            messages=Cache2(),
            roles=Cache2(),
            servers=Cache1(),
            users=Cache1(),
            webhooks=Cache1(),
        )

    def __repr__(self) -> str:
        return (
            f'<GenericCache users={len(self.users)} servers={len(self.servers)} channels={len(self.channels)} '
            f'messages={len(self.messages)}>'
        )


__all__ = (
    'Cacheable',
    'DISABLED',
    'UNLIMITED',
    'Cache1',
    'Cache2',
    'GenericCache',
)
