"""
modules/tool_usage/places_client.py
------------------------------------
Thin `requests` wrapper over the Google Maps Platform web-service endpoints
(legacy JSON API).

    GET {base}/geocode/json                  address → coordinates
    GET {base}/place/nearbysearch/json       proximity search
    GET {base}/place/details/json            one place, selected fields
    GET {base}/place/textsearch/json         free-text search
    GET {base}/place/autocomplete/json       city suggestions
    GET {base}/distancematrix/json           origin/destination travel time
        {base}/place/photo                   photo URL (never fetched here)

Auth: `key` query param. One client holds one key; the pipeline builds one
client for Places and one for Geocoding.

Every call goes through the ResponseCache. The API key is stripped from the
parameters before the cache key is computed. Any status other than OK /
ZERO_RESULTS, and any HTTP or network failure, raises PlacesApiError.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

import requests

import config
from db.cache import NullResponseCache, ResponseCache, make_key
from schemas.recommendation import Coordinates

logger = logging.getLogger(__name__)

_OK_STATUSES = ("OK", "ZERO_RESULTS")

# Fields requested by the PlaceEnricher / InsightExtractor
DETAIL_FIELDS: tuple[str, ...] = (
    "name", "rating", "user_ratings_total", "formatted_address",
    "formatted_phone_number", "website", "opening_hours", "photos",
    "reviews", "price_level", "types", "geometry",
)
REVIEW_FIELDS: tuple[str, ...] = ("name", "reviews", "rating", "types")
PASSTHROUGH_DETAIL_FIELDS = (
    "name,rating,user_ratings_total,formatted_address,opening_hours,"
    "price_level,types,geometry,photos"
)


class PlacesApiError(RuntimeError):
    """Google Maps Platform call failed (transport error or non-OK status)."""

    def __init__(self, message: str, status: Optional[str] = None) -> None:
        super().__init__(message)
        self.status = status


class GooglePlacesClient:

    def __init__(
        self,
        api_key: Optional[str],
        session: Optional[requests.Session] = None,
        cache: Optional[ResponseCache] = None,
        timeout: float = config.HTTP_TIMEOUT_S,
        base_url: str = config.GOOGLE_MAPS_BASE_URL,
    ) -> None:
        self.api_key = api_key or ""
        self.session = session or requests.Session()
        self.cache = cache or NullResponseCache()
        self.timeout = timeout
        self.base_url = base_url.rstrip("/")

    @property
    def configured(self) -> bool:
        return config.is_configured(self.api_key)

    # ── Endpoints ─────────────────────────────────────────────────────────────

    def geocode(self, address: str) -> list[dict]:
        """Return the geocoder's ``results`` list (may be empty)."""
        data = self._get_json(
            "geocode/json", {"address": address}, config.CACHE_TTL_GEOCODE,
        )
        return data.get("results", [])

    def nearby_search(
        self,
        location: Coordinates,
        radius: int,
        place_type: Optional[str] = None,
        keyword: Optional[str] = None,
    ) -> list[dict]:
        params: dict[str, Any] = {"location": location.as_param(), "radius": int(radius)}
        if place_type:
            params["type"] = place_type
        if keyword:
            params["keyword"] = keyword
        data = self._get_json("place/nearbysearch/json", params, config.CACHE_TTL_NEARBY)
        return data.get("results", [])

    def place_details(self, place_id: str, fields: Iterable[str] | str = DETAIL_FIELDS) -> dict:
        """Return the ``result`` object, or {} when Google has nothing for the id."""
        if not isinstance(fields, str):
            fields = ",".join(fields)
        data = self._get_json(
            "place/details/json",
            {"place_id": place_id, "fields": fields},
            config.CACHE_TTL_DETAILS,
        )
        return data.get("result") or {}

    def text_search(
        self,
        query: str,
        location: Optional[Coordinates] = None,
        radius: Optional[int] = None,
        place_type: Optional[str] = None,
    ) -> list[dict]:
        params: dict[str, Any] = {"query": query}
        if location is not None:
            params["location"] = location.as_param()
            params["radius"] = int(radius or 5000)
        if place_type:
            params["type"] = place_type
        data = self._get_json("place/textsearch/json", params, config.CACHE_TTL_TEXT_SEARCH)
        return data.get("results", [])

    def autocomplete(
        self,
        text: str,
        location: Optional[Coordinates] = None,
        radius: Optional[int] = None,
    ) -> list[dict]:
        """City suggestions for *text*."""
        params: dict[str, Any] = {"input": text, "types": "(cities)"}
        if location is not None:
            params["location"] = location.as_param()
            params["radius"] = int(radius or 50000)
        data = self._get_json("place/autocomplete/json", params, config.CACHE_TTL_AUTOCOMPLETE)
        return data.get("predictions", [])

    def distance_matrix(self, origin: str, destination: str, mode: str = "driving") -> dict:
        """
        Return the first matrix element for origin → destination.

        The element carries its own ``status``; callers check it for
        NOT_FOUND / ZERO_RESULTS.
        """
        data = self._get_json(
            "distancematrix/json",
            {"origins": origin, "destinations": destination, "mode": mode},
            config.CACHE_TTL_DISTANCE,
        )
        rows = data.get("rows") or [{}]
        elements = rows[0].get("elements") or [{}]
        return elements[0]

    def photo_url(self, photo_reference: str, max_width: int = 800) -> str:
        return (
            f"{self.base_url}/place/photo"
            f"?maxwidth={max_width}&photo_reference={photo_reference}&key={self.api_key}"
        )

    # ── Private ───────────────────────────────────────────────────────────────

    def _get_json(self, path: str, params: dict[str, Any], ttl: int) -> dict:
        if not self.configured:
            raise PlacesApiError(f"{path}: API key not configured", status="REQUEST_DENIED")

        key = make_key(path, params)
        return self.cache.get_or_fetch(key, ttl, lambda: self._request(path, params))

    def _request(self, path: str, params: dict[str, Any]) -> dict:
        url = f"{self.base_url}/{path}"
        try:
            resp = self.session.get(
                url, params={**params, "key": self.api_key}, timeout=self.timeout,
            )
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as exc:
            raise PlacesApiError(f"{path}: {exc}") from exc
        except ValueError as exc:
            raise PlacesApiError(f"{path}: invalid JSON in response") from exc

        status = data.get("status", "OK")
        if status not in _OK_STATUSES:
            message = data.get("error_message") or status
            raise PlacesApiError(f"{path}: {message}", status=status)
        logger.debug("GET %s → %s", path, status)
        return data
