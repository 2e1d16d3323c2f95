"""Pytest configuration and fixtures."""

from __future__ import annotations

from typing import Any, Callable, Union

import pytest
import requests

import config
from db.cache import InMemoryResponseCache
from modules.tool_usage.places_client import GooglePlacesClient
from modules.tool_usage.weather_tool import WeatherTool
from schemas.search import SearchRequest

Route = Union[dict, Exception, Callable[[dict], Any]]


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, payload: Any, status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


class FakeSession:
    """
    Routes GET calls by URL substring.

    A route value may be a payload dict, a FakeResponse, an exception to
    raise, or a callable taking the query params and returning either.
    """

    def __init__(self, routes: dict[str, Route] | None = None) -> None:
        self.routes: dict[str, Route] = dict(routes or {})
        self.calls: list[tuple[str, dict]] = []

    def get(self, url: str, params: dict | None = None, timeout: float | None = None):
        params = dict(params or {})
        self.calls.append((url, params))
        for fragment, route in self.routes.items():
            if fragment not in url:
                continue
            if callable(route):
                route = route(params)
            if isinstance(route, Exception):
                raise route
            if isinstance(route, FakeResponse):
                return route
            return FakeResponse(route)
        raise requests.ConnectionError(f"no route for {url}")

    def calls_to(self, fragment: str) -> list[dict]:
        return [params for url, params in self.calls if fragment in url]


# ── Payload builders ──────────────────────────────────────────────────────────

def place_result(
    place_id: str,
    name: str,
    rating: float | None = 4.5,
    total: int = 100,
    types: list[str] | None = None,
    vicinity: str = "Oakland",
    lat: float = 37.80,
    lng: float = -122.27,
    **extra: Any,
) -> dict:
    item = {
        "place_id": place_id,
        "name": name,
        "user_ratings_total": total,
        "types": types or ["park", "establishment"],
        "vicinity": vicinity,
        "geometry": {"location": {"lat": lat, "lng": lng}},
    }
    if rating is not None:
        item["rating"] = rating
    item.update(extra)
    return item


def ok(results: list[dict] | None = None, **extra: Any) -> dict:
    return {"status": "OK", "results": results or [], **extra}


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def places_client(fake_session: FakeSession) -> GooglePlacesClient:
    """Configured client talking to the fake session, no cache."""
    return GooglePlacesClient("test-key", session=fake_session)


@pytest.fixture
def unconfigured_client(fake_session: FakeSession) -> GooglePlacesClient:
    return GooglePlacesClient("", session=fake_session)


@pytest.fixture
def weather_tool(fake_session: FakeSession) -> WeatherTool:
    return WeatherTool("test-key", session=fake_session)


@pytest.fixture
def memory_cache() -> InMemoryResponseCache:
    return InMemoryResponseCache()


@pytest.fixture
def search() -> SearchRequest:
    return SearchRequest(
        city="Oakland",
        adults=2,
        kids=2,
        hasDog=True,
        hasCar=True,
        travelTime=30,
        activities=["Parks", "Museums"],
    )


@pytest.fixture
def no_keys(monkeypatch: pytest.MonkeyPatch) -> None:
    """Blank every provider key so build_container() runs fully in demo mode."""
    for name in (
        "GOOGLE_PLACES_API_KEY", "GOOGLE_MAPS_API_KEY",
        "GOOGLE_GEOCODING_API_KEY", "OPENWEATHER_API_KEY",
    ):
        monkeypatch.setattr(config, name, "")
    monkeypatch.setattr(config, "REQUEST_LOG_ENABLED", False)
