"""Unit tests for the straight-line ETA estimate."""

import pytest

from modules.tool_usage.distance_tool import DEFAULT_ETA_TEXT, DistanceTool, haversine_km
from schemas.recommendation import Coordinates

OAKLAND = Coordinates(37.8044, -122.2712)
SAN_FRANCISCO = Coordinates(37.7749, -122.4194)


def test_haversine_oakland_to_san_francisco():
    km = haversine_km(OAKLAND.lat, OAKLAND.lng, SAN_FRANCISCO.lat, SAN_FRANCISCO.lng)

    assert km == pytest.approx(13.4, abs=0.3)


class TestDistanceTool:

    def test_eta_text_at_average_speed(self):
        tool = DistanceTool(speed_kmh=40)

        assert tool.eta_text(OAKLAND, SAN_FRANCISCO) == "20 mins"

    def test_short_hops_have_a_floor(self):
        nearby = Coordinates(37.8050, -122.2710)

        assert DistanceTool().eta_text(OAKLAND, nearby) == "5 mins"

    def test_missing_destination_uses_default(self):
        assert DistanceTool().eta_text(OAKLAND, None) == DEFAULT_ETA_TEXT

    def test_same_point_is_zero_minutes(self):
        assert DistanceTool().travel_time_minutes(OAKLAND, OAKLAND) == 0.0
