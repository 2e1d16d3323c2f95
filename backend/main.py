"""
main.py
--------
Composition root and one-shot CLI for the family trip recommendation pipeline.

build_container() reads config.py once and wires every component:
  HTTP session → response cache → Places / Geocoding clients
  → Geocoder, PlaceFinder, PlaceEnricher, InsightExtractor,
    NearbyAttractionFinder, ItinerarySynthesizer, WeatherTool, DistanceTool
  → RecommendationService
  → FeedbackService (memory or postgres store)

Run:
  python main.py --city Oakland --kids 2 --dog --car --travel-time 30 \
                 --activity Parks --activity Museums

Prints the recommendation payload as JSON.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import dataclass
from typing import Optional

import requests

import config
from db.cache import ResponseCache, build_cache
from modules.feedback.feedback_service import FeedbackService, build_feedback_store
from modules.observability.logger import build_event_log
from modules.observability.logging_setup import setup_logging
from modules.recommendation.composer import RecommendationService, parse_stages
from modules.recommendation.insight_extractor import InsightExtractor
from modules.recommendation.itinerary_synthesizer import ItinerarySynthesizer
from modules.recommendation.nearby_finder import NearbyAttractionFinder
from modules.recommendation.place_enricher import PlaceEnricher
from modules.recommendation.place_finder import PlaceFinder
from modules.tool_usage.distance_tool import DistanceTool
from modules.tool_usage.geocode_tool import Geocoder
from modules.tool_usage.places_client import GooglePlacesClient
from modules.tool_usage.weather_tool import WeatherTool
from schemas.search import SearchRequest

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    """Everything the HTTP layer and the CLI need, built once per process."""
    cache: ResponseCache
    places_client: GooglePlacesClient
    geocoding_client: GooglePlacesClient
    weather_tool: WeatherTool
    recommendations: RecommendationService
    feedback: FeedbackService


def build_container(
    session: Optional[requests.Session] = None,
    cache: Optional[ResponseCache] = None,
    feedback_backend: Optional[str] = None,
) -> ServiceContainer:
    session = session or requests.Session()
    cache = cache if cache is not None else build_cache(config.RESPONSE_CACHE_BACKEND)

    places_client = GooglePlacesClient(config.GOOGLE_PLACES_API_KEY, session=session, cache=cache)
    geocoding_client = GooglePlacesClient(
        config.GOOGLE_GEOCODING_API_KEY or config.GOOGLE_MAPS_API_KEY,
        session=session,
        cache=cache,
    )
    weather_tool = WeatherTool(config.OPENWEATHER_API_KEY, session=session, cache=cache)

    recommendations = RecommendationService(
        places_client=places_client,
        geocoder=Geocoder(geocoding_client),
        finder=PlaceFinder(places_client),
        enricher=PlaceEnricher(places_client),
        insight_extractor=InsightExtractor(places_client),
        nearby_finder=NearbyAttractionFinder(places_client),
        synthesizer=ItinerarySynthesizer(),
        weather_tool=weather_tool,
        distance_tool=DistanceTool(),
        stages=parse_stages(config.PIPELINE_STAGES),
        max_packs=config.MAX_PACKS,
        events=build_event_log(),
    )
    feedback = FeedbackService(build_feedback_store(feedback_backend or config.FEEDBACK_BACKEND))

    logger.info(
        "Services ready (places=%s, geocoding=%s, weather=%s, cache=%s, feedback=%s)",
        "active" if places_client.configured else "demo_mode",
        "active" if geocoding_client.configured else "demo_mode",
        "active" if weather_tool.configured else "demo_mode",
        type(cache).__name__,
        type(feedback.store).__name__,
    )
    return ServiceContainer(
        cache=cache,
        places_client=places_client,
        geocoding_client=geocoding_client,
        weather_tool=weather_tool,
        recommendations=recommendations,
        feedback=feedback,
    )


def run_pipeline(search: SearchRequest, container: Optional[ServiceContainer] = None) -> dict:
    """One recommendation run; builds a container when none is given."""
    container = container or build_container()
    return container.recommendations.recommend(search)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate family trip recommendation packs.")
    parser.add_argument("--city", default="San Francisco")
    parser.add_argument("--adults", type=int, default=2)
    parser.add_argument("--kids", type=int, default=0)
    parser.add_argument("--dog", action="store_true", help="Travelling with a dog.")
    parser.add_argument("--car", action="store_true", help="Travelling by car.")
    parser.add_argument("--travel-time", type=int, default=None, help="Minutes (15-90).")
    parser.add_argument(
        "--activity", action="append", default=None,
        help="Activity category, repeatable (e.g. --activity Parks --activity Museums).",
    )
    return parser.parse_args(argv)


if __name__ == "__main__":
    setup_logging()
    args = _parse_args(sys.argv[1:])
    search = SearchRequest(
        city=args.city,
        adults=args.adults,
        kids=args.kids,
        has_dog=args.dog,
        has_car=args.car,
        travel_time=args.travel_time if args.travel_time is not None else (30 if args.car else None),
        activities=args.activity or ["Parks"],
    )
    print(json.dumps(run_pipeline(search), indent=2))
