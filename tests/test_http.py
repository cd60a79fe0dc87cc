from __future__ import annotations

import typing

import aiohttp
from multidict import CIMultiDict
import pytest
import voltgate
from voltgate import routes, utils

SESSION: typing.Any = object()


class FakeResponse:
    def __init__(self, status: int, body: typing.Any = None, *, content_type: str | None = 'application/json') -> None:
        self.status = status
        self.headers: CIMultiDict[str] = CIMultiDict()
        if content_type is not None:
            self.headers['content-type'] = content_type
        if isinstance(body, (bytes, str)):
            self.body = body if isinstance(body, bytes) else body.encode('utf-8')
        else:
            self.body = utils.to_json(body).encode('utf-8')
        self.closed = False

    async def text(self, encoding: str = 'utf-8') -> str:
        return self.body.decode(encoding)

    async def read(self) -> bytes:
        return self.body

    def close(self) -> None:
        self.closed = True


class Request(typing.NamedTuple):
    method: str
    url: str
    headers: CIMultiDict[typing.Any]
    kwargs: dict[str, typing.Any]


class RecordingMixin:
    responses: list[FakeResponse]
    requests: list[Request]

    def prepare(self, *responses: FakeResponse) -> None:
        self.responses = list(responses)
        self.requests = []

    async def send_request(
        self,
        session: aiohttp.ClientSession,
        /,
        *,
        method: str,
        url: str,
        headers: CIMultiDict[typing.Any],
        **kwargs,
    ) -> typing.Any:
        self.requests.append(Request(method, url, CIMultiDict(headers), kwargs))
        return self.responses.pop(0)


class FakeHTTPClient(RecordingMixin, voltgate.HTTPClient):
    pass


class FakeAutumn(RecordingMixin, voltgate.Autumn):
    pass


def make_http(*responses: FakeResponse, **kwargs: typing.Any) -> FakeHTTPClient:
    http = FakeHTTPClient('token', session=SESSION, **kwargs)
    http.prepare(*responses)
    return http


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    delays = []

    async def sleep(delay: float, /) -> None:
        delays.append(delay)

    monkeypatch.setattr('voltgate.http.asyncio.sleep', sleep)
    return delays


def test_route_arguments_are_escaped():
    route = routes.SERVERS_MEMBER_FETCH.compile(server_id='a/b', member_id='c d')
    assert route.build() == '/servers/a%2Fb/members/c%20d'
    assert str(routes.SERVERS_MEMBER_FETCH) == 'GET /servers/{server_id}/members/{member_id}'


def test_invalid_base_url():
    with pytest.raises(ValueError):
        voltgate.HTTPClient('token', base='ftp://example.com')


def test_url_for():
    http = voltgate.HTTPClient('token', base='https://example.com/api/')
    assert http.base == 'https://example.com/api'
    assert http.url_for(routes.ROOT.compile()) == 'https://example.com/api/'


@pytest.mark.asyncio
async def test_unauthenticated_request():
    http = make_http(FakeResponse(200, {'revolt': '0.7'}))
    assert await http.query_node() == {'revolt': '0.7'}

    request = http.requests[0]
    assert request.method == 'GET'
    assert request.url == 'https://api.revolt.chat/'
    # query_node does not require authentication
    assert 'X-Bot-Token' not in request.headers
    assert request.headers['Accept'] == 'application/json'
    assert request.headers['User-Agent'] == voltgate.DEFAULT_HTTP_USER_AGENT


@pytest.mark.asyncio
async def test_credentials_headers():
    http = make_http(FakeResponse(204, b'', content_type=None), FakeResponse(204, b'', content_type=None))

    await http.delete_message('c1', 'm1')
    assert http.requests[0].headers['X-Bot-Token'] == 'token'
    assert http.requests[0].method == 'DELETE'
    assert http.requests[0].url == 'https://api.revolt.chat/channels/c1/messages/m1'

    http.with_credentials('session', bot=False)
    await http.delete_message('c1', 'm1')
    assert http.requests[1].headers['X-Session-Token'] == 'session'
    assert 'X-Bot-Token' not in http.requests[1].headers


@pytest.mark.asyncio
async def test_send_message():
    http = make_http(
        FakeResponse(200, {'_id': 'm1', 'channel': 'c1', 'author': 'u1', 'content': 'hello'}),
    )

    message = await http.send_message('c1', 'hello', nonce='n1', replies=[voltgate.Reply('m0', True), 'm2'])
    assert message.id == 'm1'
    assert message.channel_id == 'c1'
    assert message.content == 'hello'

    request = http.requests[0]
    assert request.method == 'POST'
    assert request.url == 'https://api.revolt.chat/channels/c1/messages'
    assert request.headers['Idempotency-Key'] == 'n1'
    assert request.headers['Content-type'] == 'application/json'
    assert utils.from_json(request.kwargs['data']) == {
        'content': 'hello',
        'replies': [{'id': 'm0', 'mention': True}, {'id': 'm2', 'mention': False}],
    }


@pytest.mark.asyncio
async def test_bad_gateway_is_retried_immediately(no_sleep):
    http = make_http(
        FakeResponse(502, 'Bad Gateway', content_type='text/html'),
        FakeResponse(200, {'ok': True}),
    )

    assert await http.request(routes.ROOT.compile()) == {'ok': True}
    assert len(http.requests) == 2
    assert no_sleep == []


@pytest.mark.asyncio
async def test_ratelimit_is_retried(no_sleep):
    http = make_http(
        FakeResponse(429, {'retry_after': 1500}),
        FakeResponse(200, {'ok': True}),
    )

    assert await http.request(routes.ROOT.compile()) == {'ok': True}
    assert no_sleep == [1.5]


@pytest.mark.asyncio
async def test_retries_are_bounded():
    http = make_http(
        FakeResponse(429, {'type': 'RateLimited', 'retry_after': 0}),
        FakeResponse(429, {'type': 'RateLimited', 'retry_after': 0}),
        FakeResponse(429, {'type': 'RateLimited', 'retry_after': 0}),
        max_retries=3,
    )

    with pytest.raises(voltgate.Ratelimited) as exc_info:
        await http.request(routes.ROOT.compile())
    assert len(http.requests) == 3
    assert exc_info.value.retry_after == 0


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ('status', 'exc_type'),
    [
        (400, voltgate.HTTPException),
        (401, voltgate.Unauthorized),
        (403, voltgate.Forbidden),
        (404, voltgate.NotFound),
        (409, voltgate.Conflict),
        (500, voltgate.InternalServerError),
    ],
)
async def test_status_to_exception(status, exc_type):
    http = make_http(FakeResponse(status, {'type': 'MissingPermission', 'permission': 'SendMessage'}))

    with pytest.raises(exc_type) as exc_info:
        await http.request(routes.ROOT.compile())

    exc = exc_info.value
    assert type(exc) is exc_type
    assert exc.status == status
    assert exc.type == 'MissingPermission'
    assert exc.permission == 'SendMessage'
    assert http.requests[0].kwargs == {}


@pytest.mark.asyncio
async def test_non_json_error():
    http = make_http(FakeResponse(404, 'nothing here', content_type='text/plain'))

    with pytest.raises(voltgate.NotFound) as exc_info:
        await http.request(routes.ROOT.compile())
    assert exc_info.value.type == 'NonJSON'
    assert exc_info.value.error == 'nothing here'


@pytest.mark.asyncio
async def test_autumn_upload():
    autumn = FakeAutumn('token', session=SESSION)
    autumn.prepare(FakeResponse(200, {'id': 'file1'}))

    file_id = await autumn.upload(voltgate.UploadTag.attachments, b'data', filename='a.txt')
    assert file_id == 'file1'

    request = autumn.requests[0]
    assert request.method == 'POST'
    assert request.url == 'https://autumn.revolt.chat/attachments'
    assert request.headers['X-Bot-Token'] == 'token'
    assert isinstance(request.kwargs['data'], aiohttp.FormData)


@pytest.mark.asyncio
async def test_autumn_download():
    autumn = FakeAutumn('token', session=SESSION)
    response = FakeResponse(200, b'\x89PNG', content_type='image/png')
    autumn.prepare(response)

    assert await autumn.download('icons', 'file1') == b'\x89PNG'
    assert autumn.requests[0].url == 'https://autumn.revolt.chat/icons/file1'
    assert 'Accept' not in autumn.requests[0].headers
    assert response.closed
