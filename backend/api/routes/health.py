"""
api/routes/health.py
--------------------
Health-check endpoints: used by load balancers, Docker health probes, etc.
Both report whether each provider runs live or in demo mode.
"""
from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

import config
from api.dependencies import get_container
from main import ServiceContainer

router = APIRouter()


def _status(configured: bool) -> str:
    return "active" if configured else "demo_mode"


@router.get("/health", summary="Health check")
def health(container: ServiceContainer = Depends(get_container)) -> dict:
    """Returns 200 OK when the service is running."""
    places_live = container.places_client.configured
    return {
        "status": "OK",
        "port":   config.PORT,
        "googleMapsIntegration": _status(places_live),
        "integrations": {
            "googlePlaces":   _status(places_live),
            "googleGeocoding": _status(container.geocoding_client.configured),
            "openWeather":    _status(container.weather_tool.configured),
        },
        "dataSource": "Google Maps Platform" if places_live else "Demo Data",
        "timestamp":  datetime.now(timezone.utc).isoformat(),
    }


@router.get("/api/health", summary="Health check (API prefix)")
def api_health(container: ServiceContainer = Depends(get_container)) -> dict:
    return {
        "status":    "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "googleMapsIntegration": _status(container.places_client.configured),
        "endpoints": {
            "recommendations": "/api/recommendations",
            "places":          "/api/places",
            "feedback":        "/api/feedback",
            "health":          "/health",
        },
    }
