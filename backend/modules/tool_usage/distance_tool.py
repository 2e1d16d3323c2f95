"""
modules/tool_usage/distance_tool.py
-------------------------------------
Drive-time estimate using the Haversine formula with a configurable average
speed. No external HTTP calls are made.

Config knob (config.py):
  AVERAGE_DRIVE_SPEED_KMH -- average speed used for ETA text (default: 40)
"""

from __future__ import annotations

import math
from typing import Optional

import config
from schemas.recommendation import Coordinates

# ---------------------------------------------------------------------------
# Pure maths
# ---------------------------------------------------------------------------

_EARTH_RADIUS_KM = 6371.0

MIN_ETA_MINUTES = 5
DEFAULT_ETA_TEXT = "20 mins"


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points (Haversine formula) in km."""
    r = _EARTH_RADIUS_KM
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lam = math.radians(lon2 - lon1)
    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lam / 2) ** 2
    )
    return 2 * r * math.asin(math.sqrt(a))


def _km_to_minutes(km: float, speed_kmh: float) -> float:
    """Straight-line km to minutes at a given speed."""
    return (km / speed_kmh) * 60.0


# ---------------------------------------------------------------------------
# DistanceTool
# ---------------------------------------------------------------------------


class DistanceTool:
    """
    Estimates drive time from the search origin to a place from straight-line
    distance and config.AVERAGE_DRIVE_SPEED_KMH.
    """

    def __init__(self, speed_kmh: float = config.AVERAGE_DRIVE_SPEED_KMH) -> None:
        self.speed_kmh = speed_kmh

    def travel_time_minutes(self, origin: Coordinates, dest: Coordinates) -> float:
        if origin == dest:
            return 0.0
        km = haversine_km(origin.lat, origin.lng, dest.lat, dest.lng)
        return _km_to_minutes(km, self.speed_kmh)

    def eta_text(self, origin: Coordinates, dest: Optional[Coordinates]) -> str:
        """'N mins', never below MIN_ETA_MINUTES; DEFAULT_ETA_TEXT without geometry."""
        if dest is None:
            return DEFAULT_ETA_TEXT
        minutes = max(MIN_ETA_MINUTES, int(round(self.travel_time_minutes(origin, dest))))
        return f"{minutes} mins"
