"""
Shared fixtures for the mocked upstream site and the result cache.
"""

from typing import Callable, Dict, Generator, List

import httpx
import pytest

from desidub.utils.cache import result_cache
from desidub.utils.http_client import http_client


class Upstream:
    """Routes mocked upstream requests by path and records what was requested."""

    def __init__(self):
        self.pages: Dict[str, httpx.Response] = {}
        self.requests: List[httpx.Request] = []

    def add(self, path: str, html: str = "", status_code: int = 200):
        self.pages[path] = httpx.Response(status_code, text=html)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.pages.get(request.url.path, httpx.Response(404, text="Not found"))

    def count(self, path: str) -> int:
        return sum(1 for request in self.requests if request.url.path == path)


@pytest.fixture(autouse=True)
def clear_result_cache() -> Generator[None, None, None]:
    """Start every test with an empty shared result cache."""
    result_cache.clear()
    yield
    result_cache.clear()


@pytest.fixture
def upstream() -> Generator[Upstream, None, None]:
    """Install a MockTransport-backed client on the shared HTTP client."""
    mock = Upstream()
    http_client.set_client(httpx.AsyncClient(transport=httpx.MockTransport(mock.handler)))
    yield mock
    http_client.set_client(None)


@pytest.fixture
def fake_clock() -> Callable[[], float]:
    """A manually advanced clock for cache expiry tests."""

    class FakeClock:
        def __init__(self):
            self.now = 1000.0

        def __call__(self) -> float:
            return self.now

        def advance(self, seconds: float):
            self.now += seconds

    return FakeClock()
