"""
api/routes/places.py
--------------------
Thin Google Maps Platform passthrough for the frontend.

    GET /api/places/search?query=&lat=&lng=&radius=&types=
    GET /api/places/details/{place_id}?fields=
    GET /api/places/nearby?lat=&lng=&radius=&type=&keyword=
    GET /api/places/autocomplete?input=&lat=&lng=&radius=
    GET /api/places/geocode?address=
    GET /api/places/distance?origin=&destination=&mode=

Responses are {"success": true, "data": ...}. Upstream responses are cached
by the client. No key → 503, upstream failure → 502, missing params → 400.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, TypeVar

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_container, get_places_client
from main import ServiceContainer
from modules.tool_usage.places_client import (
    PASSTHROUGH_DETAIL_FIELDS, GooglePlacesClient, PlacesApiError,
)
from schemas.recommendation import Coordinates

logger = logging.getLogger(__name__)

router = APIRouter()

T = TypeVar("T")


# ── Helpers ───────────────────────────────────────────────────────────────────

def _require_configured(client: GooglePlacesClient) -> GooglePlacesClient:
    if not client.configured:
        raise HTTPException(status_code=503, detail="Google Maps API key not configured")
    return client


def _configured_places_client(
    client: GooglePlacesClient = Depends(get_places_client),
) -> GooglePlacesClient:
    return _require_configured(client)


def _configured_geocoding_client(
    container: ServiceContainer = Depends(get_container),
) -> GooglePlacesClient:
    return _require_configured(container.geocoding_client)


def _upstream(label: str, call: Callable[[], T]) -> T:
    try:
        return call()
    except PlacesApiError as exc:
        logger.error("Places %s failed: %s", label, exc)
        raise HTTPException(status_code=502, detail=f"Upstream {label} failed") from exc


def _location(lat: Optional[float], lng: Optional[float]) -> Optional[Coordinates]:
    if lat is None or lng is None:
        return None
    try:
        return Coordinates(lat, lng)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


# ── Endpoints ─────────────────────────────────────────────────────────────────

@router.get("/search", summary="Free-text place search")
def search_places(
    query: Optional[str] = None,
    lat: Optional[float] = None,
    lng: Optional[float] = None,
    radius: int = 5000,
    types: Optional[str] = None,
    client: GooglePlacesClient = Depends(_configured_places_client),
) -> dict:
    if not query:
        raise HTTPException(status_code=400, detail="Query parameter is required")
    location = _location(lat, lng)
    # Google accepts a single type
    place_type = types.split(",")[0].strip() if types else None
    results = _upstream(
        "search", lambda: client.text_search(query, location, radius, place_type),
    )
    return {"success": True, "data": {"results": results, "count": len(results)}}


@router.get("/details/{place_id}", summary="Details for one place")
def place_details(
    place_id: str,
    fields: str = PASSTHROUGH_DETAIL_FIELDS,
    client: GooglePlacesClient = Depends(_configured_places_client),
) -> dict:
    details = _upstream("details", lambda: client.place_details(place_id, fields))
    return {"success": True, "data": details}


@router.get("/nearby", summary="Places near a location")
def nearby_places(
    lat: Optional[float] = None,
    lng: Optional[float] = None,
    radius: int = 5000,
    type: Optional[str] = None,
    keyword: Optional[str] = None,
    client: GooglePlacesClient = Depends(_configured_places_client),
) -> dict:
    location = _location(lat, lng)
    if location is None:
        raise HTTPException(status_code=400, detail="Latitude and longitude are required")
    results = _upstream(
        "nearby", lambda: client.nearby_search(location, radius, place_type=type, keyword=keyword),
    )
    return {"success": True, "data": {"results": results, "count": len(results)}}


@router.get("/autocomplete", summary="City suggestions")
def autocomplete(
    input: Optional[str] = None,
    lat: Optional[float] = None,
    lng: Optional[float] = None,
    radius: int = 50000,
    client: GooglePlacesClient = Depends(_configured_places_client),
) -> dict:
    if not input:
        raise HTTPException(status_code=400, detail="Input parameter is required")
    location = _location(lat, lng)
    predictions = _upstream(
        "autocomplete", lambda: client.autocomplete(input, location, radius),
    )
    return {"success": True, "data": {"predictions": predictions, "count": len(predictions)}}


@router.get("/geocode", summary="Address to coordinates")
def geocode(
    address: Optional[str] = None,
    client: GooglePlacesClient = Depends(_configured_geocoding_client),
) -> dict:
    if not address:
        raise HTTPException(status_code=400, detail="Address parameter is required")
    results = _upstream("geocode", lambda: client.geocode(address))
    if not results:
        return {"success": True, "data": None}

    first = results[0]
    return {
        "success": True,
        "data": {
            "location":         (first.get("geometry") or {}).get("location"),
            "formattedAddress": first.get("formatted_address"),
            "placeId":          first.get("place_id"),
        },
    }


@router.get("/distance", summary="Travel distance and time")
def distance(
    origin: Optional[str] = None,
    destination: Optional[str] = None,
    mode: str = "driving",
    client: GooglePlacesClient = Depends(_configured_places_client),
) -> dict:
    if not origin or not destination:
        raise HTTPException(status_code=400, detail="Origin and destination are required")
    element = _upstream("distance", lambda: client.distance_matrix(origin, destination, mode))

    if element.get("status") == "OK":
        data = {"distance": element.get("distance"), "duration": element.get("duration"), "mode": mode}
    else:
        data = {"error": "Could not calculate distance", "status": element.get("status")}
    return {"success": True, "data": data}
