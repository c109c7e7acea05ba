import asyncio
import json

import httpx
import pytest

from tusur_timetable.cache import InMemoryCache
from tusur_timetable.config import TimetableConfig
from tusur_timetable.service import TimetableService
from tusur_timetable.session import TimetableSession


class Clock:
    """Manually advanced time source for InMemoryCache."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeUpstream:
    """MockTransport handler keyed by URL without query string.

    Unknown URLs answer 404. ``latency`` makes every response yield to the
    event loop first, so concurrent callers really overlap.
    """

    def __init__(self) -> None:
        self.routes: dict[str, tuple] = {}
        self.requests: list[httpx.Request] = []
        self.latency = 0.0

    def add(self, url, text=None, *, json_body=None, status=200, error=False):
        self.routes[url] = (text, json_body, status, error)

    def hits(self, url) -> int:
        return sum(1 for r in self.requests if _plain_url(r) == url)

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        await asyncio.sleep(self.latency)
        route = self.routes.get(_plain_url(request))
        if route is None:
            return httpx.Response(404, text="not found")
        text, json_body, status, error = route
        if error:
            raise httpx.ConnectError("connection refused", request=request)
        if json_body is not None:
            return httpx.Response(status, text=json.dumps(json_body))
        return httpx.Response(status, text=text or "")


def _plain_url(request: httpx.Request) -> str:
    return f"{request.url.scheme}://{request.url.host}{request.url.path}"


@pytest.fixture
def config():
    return TimetableConfig(_env_file=None, base_week_id=786, base_week_anchor=None)


@pytest.fixture
def clock():
    return Clock()


@pytest.fixture
def cache(clock):
    return InMemoryCache(clock=clock)


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
async def session(upstream, config):
    client = httpx.AsyncClient(transport=httpx.MockTransport(upstream.handler))
    yield TimetableSession(client, config)
    await client.aclose()


@pytest.fixture
def service(cache, session, config):
    return TimetableService(cache, session, config)
