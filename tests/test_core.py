from __future__ import annotations

from datetime import datetime, timezone
import logging

from attrs import define
import pytest
import voltgate
from voltgate import utils


@define(slots=True)
class Thing:
    id: str


def test_undefined_sentinel():
    assert not voltgate.UNDEFINED
    assert repr(voltgate.UNDEFINED) == 'UNDEFINED'
    assert voltgate.UNDEFINED == voltgate.UNDEFINED
    assert voltgate.UNDEFINED != 'UNDEFINED'
    assert voltgate.UNDEFINED is not None
    assert len({voltgate.UNDEFINED, voltgate.UNDEFINED}) == 1


@pytest.mark.parametrize(
    ('value', 'expected'),
    [
        ('01ARZ3NDEKTSV4RRFFQ69G5FAV', True),
        ('01arz3ndektsv4rrffq69g5fav', True),
        (voltgate.ZID, True),
        ('7ZZZZZZZZZZZZZZZZZZZZZZZZZ', True),
        ('8ZZZZZZZZZZZZZZZZZZZZZZZZZ', False),
        ('01ARZ3NDEKTSV4RRFFQ69G5FA', False),
        ('01ARZ3NDEKTSV4RRFFQ69G5FAVX', False),
        ('01ARZ3NDEKTSV4RRFFQ69G5FAU', False),
        ('01ARZ3NDEKTSV4RRFFQ69G5FAI', False),
        ('', False),
        (None, False),
        (1234, False),
    ],
)
def test_is_ulid(value, expected):
    assert voltgate.is_ulid(value) is expected


def test_ulid_timestamp():
    assert voltgate.ulid_timestamp('01ARZ3NDEKTSV4RRFFQ69G5FAV') == 1469922850259 / 1000
    assert voltgate.ulid_timestamp('01arz3ndektsv4rrffq69g5fav') == 1469922850259 / 1000
    assert voltgate.ulid_timestamp(voltgate.ZID) == 0
    assert voltgate.ulid_time(voltgate.ZID) == datetime(1970, 1, 1, tzinfo=timezone.utc)

    with pytest.raises(ValueError):
        voltgate.ulid_timestamp('not an ulid')


def test_resolve_id():
    assert voltgate.resolve_id('01ARZ3NDEKTSV4RRFFQ69G5FAV') == '01ARZ3NDEKTSV4RRFFQ69G5FAV'
    assert voltgate.resolve_id(Thing('01ARZ3NDEKTSV4RRFFQ69G5FAV')) == '01ARZ3NDEKTSV4RRFFQ69G5FAV'


def test_json_codec():
    codec = utils._resolve_codec(None)
    assert isinstance(codec, utils.DefaultJSONCodec)
    assert codec.loads(codec.dumps({'type': 'Ping', 'data': 1})) == {'type': 'Ping', 'data': 1}
    assert codec.loads(b'[1,2]') == [1, 2]
    with pytest.raises(ValueError):
        codec.loads('{')

    with pytest.raises(TypeError):
        utils._resolve_codec(object())  # type: ignore


def test_bool():
    assert utils._bool(True) == 'true'
    assert utils._bool(False) == 'false'


@pytest.mark.asyncio
async def test_maybe_coroutine():
    async def coro(x: int) -> int:
        return x * 2

    assert await utils.maybe_coroutine(coro, 2) == 4
    assert await utils.maybe_coroutine(lambda x: x + 1, 2) == 3


def test_setup_logging():
    logger = logging.getLogger('voltgate')
    handler = logging.NullHandler()
    level = logger.level
    try:
        utils.setup_logging(handler=handler, level=logging.WARNING, root=False)
        assert handler in logger.handlers
        assert logger.level == logging.WARNING
        assert handler.formatter is not None
    finally:
        logger.removeHandler(handler)
        logger.setLevel(level)
