"""
modules/tool_usage/geocode_tool.py
-----------------------------------
Resolves a city name to Coordinates via the Google Geocoding API.

Address sent upstream:  "{city}, {config.GEOCODE_REGION}"  e.g. "Oakland, CA, USA"

Never raises. Without a configured key, on an API error, or on zero results
the default point (config.DEFAULT_LAT / DEFAULT_LNG, San Francisco) is
returned.
"""

from __future__ import annotations

import logging

import config
from modules.tool_usage.places_client import GooglePlacesClient, PlacesApiError
from schemas.recommendation import Coordinates

logger = logging.getLogger(__name__)


def default_coordinates() -> Coordinates:
    return Coordinates(config.DEFAULT_LAT, config.DEFAULT_LNG)


class Geocoder:

    def __init__(self, client: GooglePlacesClient, region: str = config.GEOCODE_REGION) -> None:
        self.client = client
        self.region = region

    def resolve(self, city: str) -> Coordinates:
        if not self.client.configured:
            logger.info("Geocoding key not configured, using default coordinates for %r", city)
            return default_coordinates()

        address = f"{city}, {self.region}" if self.region else city
        try:
            results = self.client.geocode(address)
        except PlacesApiError as exc:
            logger.warning("Geocoding failed for %r: %s", city, exc)
            return default_coordinates()

        if not results:
            logger.warning("No geocoding results for %r", city)
            return default_coordinates()

        try:
            loc = results[0]["geometry"]["location"]
            coords = Coordinates(float(loc["lat"]), float(loc["lng"]))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Malformed geocoding result for %r: %s", city, exc)
            return default_coordinates()

        logger.info("Geocoded %r → (%.4f, %.4f)", city, coords.lat, coords.lng)
        return coords
