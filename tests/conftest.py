"""Shared fixtures: a recording fake upstream, a fake clock and a test app."""

import copy
import random
from typing import Any, Callable, Mapping

import pytest
from fastapi.testclient import TestClient

from nasa_gateway.api.app import create_app
from nasa_gateway.config import Settings
from nasa_gateway.errors import UpstreamError
from nasa_gateway.repositories import MemoryResponseCache
from nasa_gateway.services import NasaService

BASE_URL = "https://api.nasa.test"
IMAGES_BASE_URL = "https://images.nasa.test"
SEARCH_PATH = f"{IMAGES_BASE_URL}/search"
API_KEY = "TEST_KEY"


class FakeUpstreamClient:
    """Records every fetch and answers from a path -> response table.

    A response may be a JSON-like value, an exception instance (raised), or a
    callable taking the params and returning either of those.
    """

    def __init__(self, routes: dict[str, Any] | None = None) -> None:
        self.routes: dict[str, Any] = dict(routes or {})
        self.calls: list[tuple[str, dict]] = []
        self.closed = False

    async def fetch(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        query = dict(params or {})
        self.calls.append((path, query))
        if path not in self.routes:
            raise UpstreamError(404, f"No fake route for {path}")

        result = self.routes[path]
        if callable(result):
            result = result(query)
        if isinstance(result, Exception):
            raise result
        return copy.deepcopy(result)

    async def aclose(self) -> None:
        self.closed = True

    def calls_to(self, path: str) -> list[dict]:
        return [params for called, params in self.calls if called == path]


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def __call__(self) -> float:
        return self.now


def search_by_topic(results: dict[str, Any]) -> Callable[[dict], Any]:
    """Build a search route answering per ``q`` value."""

    def route(params: dict) -> Any:
        return results.get(params.get("q"), UpstreamError(500, f"unexpected topic {params.get('q')}"))

    return route


def search_payload(*nasa_ids: str, total_hits: int | None = None) -> dict:
    return {
        "collection": {
            "metadata": {"total_hits": total_hits if total_hits is not None else len(nasa_ids)},
            "items": [{"data": [{"nasa_id": nasa_id, "title": nasa_id}], "href": f"{nasa_id}.json"} for nasa_id in nasa_ids],
        }
    }


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        nasa_api_base_url=BASE_URL,
        nasa_images_api_base_url=IMAGES_BASE_URL,
        nasa_api_key=API_KEY,
        cache_ttl=60,
        rate_limit_window_ms=900000,
        rate_limit_max_requests=1000,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def upstream() -> FakeUpstreamClient:
    return FakeUpstreamClient()


@pytest.fixture
def cache(clock) -> MemoryResponseCache:
    return MemoryResponseCache(ttl=60, clock=clock)


@pytest.fixture
def service(upstream, cache) -> NasaService:
    return NasaService(
        upstream=upstream,
        store=cache,
        base_url=BASE_URL,
        api_key=API_KEY,
        images_base_url=IMAGES_BASE_URL,
    )


@pytest.fixture
def client(test_settings, upstream):
    """Test client with the lifespan running and the fake upstream wired in."""
    app = create_app(settings=test_settings, upstream_client=upstream, rng=random.Random(7))
    with TestClient(app) as test_client:
        yield test_client
