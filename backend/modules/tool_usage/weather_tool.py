"""
modules/tool_usage/weather_tool.py
-------------------------------------
Current conditions for a city from the OpenWeatherMap Current Weather API.

Endpoint:
    GET https://api.openweathermap.org/data/2.5/weather
        ?q={city},CA,US&appid={key}&units=imperial

No OAuth: plain API key in `appid` query param. Fixed 5 s timeout.

Without a configured key, or on any upstream failure, a demo report is
returned (72°F, partly cloudy, humidity 65, wind 8 mph, icon 02d) and
flagged with ``is_demo``.

OWM condition code → coarse condition string
──────────────────────────────────────────────
  2xx  Thunderstorm           → "thunderstorm"
  3xx  Drizzle                → "drizzle"
  500/501/520-531 Rain        → "rainy"
  502-504, 511 Heavy rain     → "heavy_rain"
  600-602, 620 Snow           → "snow"
  611-616, 621-622 Sleet      → "blizzard"
  7xx  Atmosphere (fog/haze)  → "foggy"
  800  Clear sky              → "clear"
  801  Few clouds             → "mostly_clear"
  802-803 Scattered/broken    → "cloudy"
  804  Overcast               → "overcast"
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

import config
from db.cache import NullResponseCache, ResponseCache, make_key
from schemas.recommendation import WeatherReport

logger = logging.getLogger(__name__)


class WeatherApiError(RuntimeError):
    """OpenWeatherMap call failed or returned an unusable payload."""


# ─────────────────────────────────────────────────────────────────────────────
# OWM code → internal condition string
# ─────────────────────────────────────────────────────────────────────────────

def _owm_code_to_condition(code: int) -> str:
    """
    Map an OpenWeatherMap weather condition code to our internal condition string.
    Codes: https://openweathermap.org/weather-conditions
    """
    if 200 <= code < 300:
        return "thunderstorm"
    if 300 <= code < 400:
        return "drizzle"
    if code in (500, 501, 520, 521, 522, 531):
        return "rainy"
    if code in (502, 503, 504, 511):
        return "heavy_rain"
    if 600 <= code <= 602 or code == 620:
        return "snow"
    if 611 <= code <= 616 or code in (621, 622):
        return "blizzard"
    if 700 <= code < 800:
        return "foggy"
    if code == 800:
        return "clear"
    if code == 801:
        return "mostly_clear"
    if code in (802, 803):
        return "cloudy"
    if code == 804:
        return "overcast"
    return "cloudy"  # unknown codes


def demo_weather() -> WeatherReport:
    """Demo conditions for offline use."""
    return WeatherReport(
        temperature = 72,
        description = "partly cloudy",
        humidity    = 65,
        wind_speed  = 8,
        icon        = "02d",
        condition   = "mostly_clear",
        is_demo     = True,
    )


# ─────────────────────────────────────────────────────────────────────────────
# WeatherTool
# ─────────────────────────────────────────────────────────────────────────────

class WeatherTool:
    """Fetches current conditions; falls back to a demo report."""

    def __init__(
        self,
        api_key: Optional[str],
        session: Optional[requests.Session] = None,
        cache: Optional[ResponseCache] = None,
        timeout: float = config.WEATHER_TIMEOUT_S,
        base_url: str = config.OPENWEATHER_BASE_URL,
        country_suffix: str = config.WEATHER_COUNTRY_SUFFIX,
    ) -> None:
        self.api_key = api_key or ""
        self.session = session or requests.Session()
        self.cache = cache or NullResponseCache()
        self.timeout = timeout
        self.base_url = base_url.rstrip("/")
        self.country_suffix = country_suffix

    @property
    def configured(self) -> bool:
        return config.is_configured(self.api_key)

    def fetch(self, city: str) -> WeatherReport:
        """Current weather for *city*. Never raises."""
        if not self.configured:
            logger.info("OpenWeatherMap key not configured, using demo weather")
            return demo_weather()
        try:
            return self._parse(self._current(city))
        except (WeatherApiError, requests.RequestException) as exc:
            logger.warning("Weather lookup failed for %r: %s", city, exc)
            return demo_weather()

    # -------------------------------------------------------------------------
    # Private
    # -------------------------------------------------------------------------

    def _current(self, city: str) -> dict:
        query = f"{city},{self.country_suffix}" if self.country_suffix else city
        params = {"q": query, "units": "imperial"}
        key = make_key("weather", params)
        return self.cache.get_or_fetch(
            key, config.CACHE_TTL_WEATHER, lambda: self._request(params),
        )

    def _request(self, params: dict[str, Any]) -> dict:
        resp = self.session.get(
            f"{self.base_url}/weather",
            params={**params, "appid": self.api_key},
            timeout=self.timeout,
        )
        if resp.status_code != 200:
            raise WeatherApiError(f"HTTP {resp.status_code} from OpenWeatherMap")
        try:
            return resp.json()
        except ValueError as exc:
            raise WeatherApiError("invalid JSON from OpenWeatherMap") from exc

    @staticmethod
    def _parse(data: dict) -> WeatherReport:
        try:
            main = data["main"]
            current = data["weather"][0]
            return WeatherReport(
                temperature = int(round(float(main["temp"]))),
                description = current.get("description", ""),
                humidity    = int(main.get("humidity", 0)),
                wind_speed  = float((data.get("wind") or {}).get("speed", 0.0)),
                icon        = current.get("icon", ""),
                condition   = _owm_code_to_condition(int(current.get("id", 0))),
            )
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise WeatherApiError(f"unexpected weather payload: {exc}") from exc
