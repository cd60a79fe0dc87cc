from __future__ import annotations

from attrs import define, field
import pytest
import voltgate


@define(slots=True)
class Entity:
    id: str = field(repr=True, kw_only=True)
    value: int = field(default=0, repr=True, kw_only=True)


def test_cache1_disabled_by_default():
    cache: voltgate.Cache1[Entity] = voltgate.Cache1()
    assert not cache.enabled

    assert cache.set(Entity(id='a')) is False
    assert cache.get('a') is None
    assert cache.size() == 0


def test_cache1_unlimited():
    cache: voltgate.Cache1[Entity] = voltgate.Cache1(max_size=voltgate.UNLIMITED)
    for i in range(1000):
        assert cache.set(Entity(id=str(i)))
    assert cache.size() == 1000
    assert cache.get('999') == Entity(id='999')


@pytest.mark.parametrize('capacity', [1, 3, 10])
def test_cache1_eviction_bound(capacity: int):
    cache: voltgate.Cache1[Entity] = voltgate.Cache1(max_size=capacity)
    for i in range(capacity * 5):
        cache.set(Entity(id=str(i)))
        assert cache.size() <= capacity
    assert cache.size() == capacity

    # the latest entity always survives its own insertion
    assert str(capacity * 5 - 1) in cache


def test_cache1_overwrite_does_not_evict():
    cache: voltgate.Cache1[Entity] = voltgate.Cache1(max_size=2)
    cache.set(Entity(id='a'))
    cache.set(Entity(id='b'))
    assert cache.set(Entity(id='a', value=5))
    assert cache.size() == 2
    assert cache.get('a').value == 5  # type: ignore
    assert cache.get('b') is not None


def test_cache1_dont_insert_if_overflow():
    cache: voltgate.Cache1[Entity] = voltgate.Cache1(max_size=1, dont_insert_if_overflow=True)
    assert cache.set(Entity(id='a'))
    assert cache.set(Entity(id='b')) is False
    assert 'a' in cache
    assert 'b' not in cache


def test_cache1_checker_runs_first():
    calls = []

    def checker(c, entity, /):
        calls.append(entity.id)
        return entity.value > 0

    cache: voltgate.Cache1[Entity] = voltgate.Cache1(max_size=1, checker=checker)
    assert cache.set(Entity(id='a', value=1))
    assert cache.set(Entity(id='b', value=0)) is False

    # vetoed entity did not evict anything
    assert cache.get('a') is not None
    assert calls == ['a', 'b']


def test_cache1_delete_and_partially_update():
    cache: voltgate.Cache1[Entity] = voltgate.Cache1(max_size=voltgate.UNLIMITED)
    cache.set(Entity(id='a', value=1))

    def bump(entity: Entity, /) -> None:
        entity.value += 1

    assert cache.partially_update('a', bump)
    assert cache.get('a').value == 2  # type: ignore

    assert cache.delete('a') == Entity(id='a', value=2)
    assert cache.delete('a') is None
    assert cache.size() == 0


def test_partially_update_on_absent_key():
    called = False

    def mutator(entity: Entity, /) -> None:
        nonlocal called
        called = True

    cache1: voltgate.Cache1[Entity] = voltgate.Cache1(max_size=voltgate.UNLIMITED)
    assert cache1.partially_update('missing', mutator) is False
    assert 'missing' not in cache1

    cache2: voltgate.Cache2[Entity] = voltgate.Cache2(max_groups=voltgate.UNLIMITED)
    cache2.set('p', Entity(id='a'))
    assert cache2.partially_update('p', 'missing', mutator) is False
    assert cache2.partially_update('other', 'a', mutator) is False
    assert cache2.size() == 1
    assert cache2.groups_count() == 1

    assert not called


def test_cache2_disabled_when_unconfigured():
    cache: voltgate.Cache2[Entity] = voltgate.Cache2()
    assert not cache.enabled
    assert cache.set('p', Entity(id='a')) is False
    assert cache.get('p', 'a') is None
    assert cache.size() == 0
    assert cache.groups_count() == 0


def test_cache2_max_group_size():
    cache: voltgate.Cache2[Entity] = voltgate.Cache2(max_group_size=2)
    for i in range(5):
        cache.set('p', Entity(id=str(i)))
    cache.set('q', Entity(id='x'))

    assert len(cache.get_group('p')) == 2
    assert cache.get('p', '4') is not None
    assert cache.size() == 3
    assert cache.groups_count() == 2


def test_cache2_total_max_size():
    cache: voltgate.Cache2[Entity] = voltgate.Cache2(total_max_size=3)
    for parent in ('p', 'q', 'r', 's'):
        for i in range(2):
            cache.set(parent, Entity(id=f'{parent}{i}'))
            assert cache.size() <= 3
    assert cache.size() == 3
    assert sum(len(cache.get_group(p)) for p in ('p', 'q', 'r', 's')) == 3


def test_cache2_max_groups():
    cache: voltgate.Cache2[Entity] = voltgate.Cache2(max_groups=2)
    cache.set('p', Entity(id='a'))
    cache.set('p', Entity(id='b'))
    cache.set('q', Entity(id='c'))
    cache.set('r', Entity(id='d'))

    assert cache.groups_count() == 2
    assert cache.get('r', 'd') is not None
    assert cache.size() == len(list(cache))


def test_cache2_total_eviction_emptying_target_group_keeps_other_groups():
    cache: voltgate.Cache2[Entity] = voltgate.Cache2(max_groups=2, total_max_size=2)
    cache.set('p', Entity(id='a'))
    cache.set('q', Entity(id='b'))

    # evicts p's only entry, the group of p is then recreated
    assert cache.set('p', Entity(id='c'))

    assert cache.groups_count() == 2
    assert cache.size() == 2
    assert cache.get('q', 'b') is not None
    assert cache.get('p', 'c') is not None
    assert cache.get('p', 'a') is None


def test_cache2_delete_group():
    cache: voltgate.Cache2[Entity] = voltgate.Cache2(max_groups=voltgate.UNLIMITED)
    for i in range(3):
        cache.set('p', Entity(id=f'p{i}'))
    for i in range(2):
        cache.set('q', Entity(id=f'q{i}'))

    size = cache.size()
    groups = cache.groups_count()

    assert cache.delete_group('p') == 3
    assert cache.groups_count() == groups - 1
    assert cache.size() == size - 3
    assert cache.delete_group('p') == 0
    assert cache.size() == 2


def test_cache2_delete_keeps_count():
    cache: voltgate.Cache2[Entity] = voltgate.Cache2(max_groups=voltgate.UNLIMITED)
    cache.set('p', Entity(id='a'))
    cache.set('p', Entity(id='a', value=1))
    assert cache.size() == 1

    assert cache.delete('p', 'b') is None
    assert cache.delete('q', 'a') is None
    assert cache.delete('p', 'a') is not None
    assert cache.size() == 0
    assert cache.groups_count() == 0


def test_generic_cache_defaults():
    cache = voltgate.GenericCache()
    assert cache.users.enabled
    assert cache.messages.max_group_size == 1000

    disabled = voltgate.GenericCache.disabled()
    for name in ('channels', 'emojis', 'members', 'messages', 'roles', 'servers', 'users', 'webhooks'):
        assert not getattr(disabled, name).enabled
