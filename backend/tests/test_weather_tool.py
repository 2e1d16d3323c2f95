"""Unit tests for the OpenWeatherMap tool."""

import pytest
import requests

from conftest import FakeResponse, FakeSession
from db.cache import InMemoryResponseCache
from modules.tool_usage.weather_tool import WeatherTool, _owm_code_to_condition, demo_weather

OWM_PAYLOAD = {
    "weather": [{"id": 500, "main": "Rain", "description": "light rain", "icon": "10d"}],
    "main": {"temp": 61.6, "humidity": 82},
    "wind": {"speed": 11.5},
    "name": "Oakland",
}


class TestWeatherTool:

    def test_parses_current_conditions(self, weather_tool, fake_session):
        fake_session.routes["/weather"] = OWM_PAYLOAD

        report = weather_tool.fetch("Oakland")

        assert report.temperature == 62
        assert report.description == "light rain"
        assert report.humidity == 82
        assert report.wind_speed == 11.5
        assert report.icon == "10d"
        assert report.condition == "rainy"
        assert report.is_demo is False

    def test_query_uses_country_suffix_and_imperial_units(self, fake_session):
        fake_session.routes["/weather"] = OWM_PAYLOAD
        WeatherTool("test-key", session=fake_session, country_suffix="CA,US").fetch("Oakland")

        params = fake_session.calls_to("/weather")[0]
        assert params == {"q": "Oakland,CA,US", "units": "imperial", "appid": "test-key"}

    def test_unconfigured_key_returns_demo(self, fake_session):
        report = WeatherTool("your_openweather_api_key", session=fake_session).fetch("Oakland")

        assert report == demo_weather()
        assert fake_session.calls == []

    def test_demo_report_values(self):
        report = demo_weather()

        assert report.is_demo is True
        assert report.to_dict() == {
            "temperature": 72,
            "description": "partly cloudy",
            "humidity":    65,
            "windSpeed":   8,
            "icon":        "02d",
            "condition":   "mostly_clear",
        }

    def test_http_error_returns_demo(self, weather_tool, fake_session):
        fake_session.routes["/weather"] = FakeResponse({"cod": 401}, status_code=401)

        assert weather_tool.fetch("Oakland").is_demo is True

    def test_network_error_returns_demo(self, weather_tool, fake_session):
        fake_session.routes["/weather"] = requests.Timeout("slow")

        assert weather_tool.fetch("Oakland").is_demo is True

    def test_malformed_payload_returns_demo(self, weather_tool, fake_session):
        fake_session.routes["/weather"] = {"weather": []}

        assert weather_tool.fetch("Oakland").is_demo is True

    def test_repeat_lookup_is_cached(self):
        session = FakeSession({"/weather": OWM_PAYLOAD})
        tool = WeatherTool("test-key", session=session, cache=InMemoryResponseCache())

        tool.fetch("Oakland")
        tool.fetch("Oakland")

        assert len(session.calls) == 1


@pytest.mark.parametrize("code, condition", [
    (211, "thunderstorm"),
    (301, "drizzle"),
    (500, "rainy"),
    (503, "heavy_rain"),
    (601, "snow"),
    (611, "blizzard"),
    (741, "foggy"),
    (800, "clear"),
    (801, "mostly_clear"),
    (803, "cloudy"),
    (804, "overcast"),
    (999, "cloudy"),
])
def test_owm_code_to_condition(code, condition):
    assert _owm_code_to_condition(code) == condition
