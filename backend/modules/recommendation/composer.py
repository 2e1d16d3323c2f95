"""
modules/recommendation/composer.py
-----------------------------------
RecommendationService: the per-request pipeline.

  Geocoder → PlaceFinder → PlaceEnricher
      → per place: {NearbyAttractionFinder, InsightExtractor}
      → ItinerarySynthesizer → pack
  WeatherTool (independent, merged at the top level)

Optional stages are switched by a PipelineStage flag set (config
PIPELINE_STAGES). A disabled stage yields its fallback output.

The whole pack-building run is error-isolated: any exception, or zero packs,
produces the single static fallback pack. The caller always gets a
well-formed payload with success=True.
"""

from __future__ import annotations

import logging
import uuid
from enum import Flag, auto
from typing import Optional

import config
from modules.observability.logger import RequestEventLog
from modules.recommendation.insight_extractor import InsightExtractor, fallback_insights
from modules.recommendation.itinerary_synthesizer import (
    ItinerarySynthesizer, fallback_itinerary,
)
from modules.recommendation.nearby_finder import NearbyAttractionFinder, fallback_attractions
from modules.recommendation.place_enricher import PlaceEnricher
from modules.recommendation.place_finder import PlaceFinder
from modules.tool_usage.distance_tool import DistanceTool
from modules.tool_usage.geocode_tool import Geocoder
from modules.tool_usage.places_client import GooglePlacesClient
from modules.tool_usage.weather_tool import WeatherTool, demo_weather
from schemas.recommendation import (
    CandidatePlace, Coordinates, ItineraryStep, RecommendationPack, Spoke, WeatherReport,
)
from schemas.search import SearchRequest

logger = logging.getLogger(__name__)

DATA_SOURCE_LIVE = "Google Maps Platform"
DATA_SOURCE_DEMO = "Demo Mode"


class PipelineStage(Flag):
    NONE     = 0
    DETAILS  = auto()
    INSIGHTS = auto()
    NEARBY   = auto()
    WEATHER  = auto()
    ALL      = DETAILS | INSIGHTS | NEARBY | WEATHER


def parse_stages(text: Optional[str]) -> PipelineStage:
    """
    "details,nearby" → DETAILS | NEARBY. Unknown names are logged and
    ignored; "all" enables everything, an empty string disables everything.
    """
    stages = PipelineStage.NONE
    for raw in (text or "").split(","):
        name = raw.strip().upper()
        if not name:
            continue
        try:
            stages |= PipelineStage[name]
        except KeyError:
            logger.warning("Ignoring unknown pipeline stage %r", raw.strip())
    return stages


# ── Pack presentation helpers ─────────────────────────────────────────────────

PRICE_LABELS = ("Free", "$", "$$", "$$$", "$$$$")

TYPE_DESCRIPTIONS: dict[str, str] = {
    "park":               "A beautiful outdoor space perfect for family adventures",
    "museum":             "An educational and entertaining destination",
    "restaurant":         "A highly-rated dining experience",
    "shopping_mall":      "A convenient shopping destination",
    "tourist_attraction": "A popular destination worth visiting",
    "establishment":      "A well-rated local destination",
}

DOG_FRIENDLY_TYPES = frozenset({"park", "hiking_area", "beach", "natural_feature", "campground"})
KID_FRIENDLY_TYPES = frozenset({"park", "amusement_park", "zoo", "museum", "aquarium", "playground"})

STOCK_PHOTOS: dict[str, str] = {
    "nature":        "https://images.unsplash.com/photo-1441974231531-c6227db76b6e?w=800&h=400&fit=crop",
    "museum":        "https://images.unsplash.com/photo-1541961017774-22349e4a1262?w=800&h=400&fit=crop",
    "food":          "https://images.unsplash.com/photo-1414235077428-338989a2e8c0?w=800&h=400&fit=crop",
    "shopping":      "https://images.unsplash.com/photo-1441986300917-64674bd600d8?w=800&h=400&fit=crop",
    "entertainment": "https://images.unsplash.com/photo-1578662996442-48f60103fc96?w=800&h=400&fit=crop",
    "water":         "https://images.unsplash.com/photo-1507525428034-b723cf961d3e?w=800&h=400&fit=crop",
    "default":       "https://images.unsplash.com/photo-1506905925346-21bda4d32df4?w=800&h=400&fit=crop",
}

# (photo category, types) in priority order
_PHOTO_CATEGORIES: tuple[tuple[str, frozenset[str]], ...] = (
    ("nature",        frozenset({"park", "hiking_area", "natural_feature"})),
    ("museum",        frozenset({"museum", "art_gallery"})),
    ("food",          frozenset({"restaurant", "cafe"})),
    ("shopping",      frozenset({"shopping_mall", "store"})),
    ("entertainment", frozenset({"amusement_park", "zoo"})),
    ("water",         frozenset({"beach", "aquarium"})),
)


def describe_place(primary_type: str, review_count: int, price_level: Optional[int]) -> str:
    base = TYPE_DESCRIPTIONS.get(primary_type or "establishment", TYPE_DESCRIPTIONS["establishment"])
    review_text = f" with {review_count} Google reviews" if review_count > 0 else ""
    price_text = ""
    if price_level is not None and 0 <= price_level < len(PRICE_LABELS):
        price_text = f"Price range: {PRICE_LABELS[price_level]}"
    return f"{base}{review_text}. {price_text}".strip()


def is_dog_friendly(types: list[str]) -> bool:
    return bool(DOG_FRIENDLY_TYPES.intersection(types))


def is_kid_friendly(types: list[str]) -> bool:
    return bool(KID_FRIENDLY_TYPES.intersection(types))


def photo_category(types: list[str]) -> str:
    type_set = set(types)
    for category, members in _PHOTO_CATEGORIES:
        if type_set & members:
            return category
    return "default"


def stock_photo_url(category: str) -> str:
    return STOCK_PHOTOS.get(category, STOCK_PHOTOS["default"])


# ── Static fallback pack ──────────────────────────────────────────────────────

def fallback_pack(search: SearchRequest) -> RecommendationPack:
    city = search.city
    core = {
        "name":         f"Top-Rated Family Spot in {city}",
        "description":  "A highly-rated Google Maps destination perfect for family "
                        "adventures with pets and kids.",
        "rating":       4.7,
        "reviewCount":  342,
        "vicinity":     city,
        "dogFriendly":  search.has_dog,
        "kidFriendly":  search.kids > 0,
        "priceLevel":   1,
        "googleData": {
            "placeId":     "demo_place_1",
            "phone":       None,
            "website":     None,
            "isOpen":      True,
            "photos":      [],
            "bannerPhoto": stock_photo_url("default"),
        },
    }
    return RecommendationPack(
        core=core,
        eta_text="15 mins",
        spokes=[
            Spoke("Family-Friendly Café", "RESTAURANT"),
            Spoke("Local Playground", "NATURE"),
            Spoke("Pet Supply Store", "SHOPPING"),
        ],
        itinerary=[
            ItineraryStep("Arrival & Exploration", "30 min", "Get oriented and explore the area"),
            ItineraryStep("Main Family Activity", "90 min", "Enjoy quality time with family and pets"),
            ItineraryStep("Nearby Discovery", "45 min", "Visit a nearby attraction or grab refreshments"),
        ],
        family_insights=fallback_itinerary().insights,
    )


# ─────────────────────────────────────────────────────────────────────────────
# RecommendationService
# ─────────────────────────────────────────────────────────────────────────────

class RecommendationService:

    def __init__(
        self,
        places_client: GooglePlacesClient,
        geocoder: Geocoder,
        finder: PlaceFinder,
        enricher: PlaceEnricher,
        insight_extractor: InsightExtractor,
        nearby_finder: NearbyAttractionFinder,
        synthesizer: ItinerarySynthesizer,
        weather_tool: WeatherTool,
        distance_tool: DistanceTool,
        stages: PipelineStage = PipelineStage.ALL,
        max_packs: int = config.MAX_PACKS,
        events: Optional[RequestEventLog] = None,
    ) -> None:
        self.places_client = places_client
        self.geocoder = geocoder
        self.finder = finder
        self.enricher = enricher
        self.insight_extractor = insight_extractor
        self.nearby_finder = nearby_finder
        self.synthesizer = synthesizer
        self.weather_tool = weather_tool
        self.distance_tool = distance_tool
        self.stages = stages
        self.max_packs = max_packs
        self.events = events

    def recommend(self, search: SearchRequest) -> dict:
        """Run the full pipeline for one request. Never raises."""
        request_id = f"req_{uuid.uuid4().hex[:12]}"
        if self.events is not None:
            self.events.begin(request_id, search.to_params())
        logger.info(
            "Generating recommendations for %s (activities: %s)",
            search.city, ", ".join(search.activity_names),
        )

        used_demo_places = False
        packs: list[RecommendationPack] = []
        try:
            packs, used_demo_places = self._build_packs(search, request_id)
        except Exception:
            logger.exception("Recommendation pipeline failed for %s", search.city)
            packs = []

        fallback_used = not packs
        if fallback_used:
            logger.warning("No packs built for %s, using fallback pack", search.city)
            packs = [fallback_pack(search)]

        weather = self._weather(search.city)
        demo = used_demo_places or fallback_used or weather.is_demo
        data_source = DATA_SOURCE_DEMO if (used_demo_places or fallback_used) else DATA_SOURCE_LIVE

        if self.events is not None:
            self.events.end(request_id, packs=len(packs), demoMode=demo, fallbackUsed=fallback_used)

        return {
            "success":      True,
            "demoMode":     demo,
            "packs":        [p.to_dict() for p in packs],
            "weather":      weather.to_dict(),
            "totalResults": len(packs),
            "searchParams": search.to_params(),
            "dataSource":   data_source,
        }

    # -------------------------------------------------------------------------
    # Private
    # -------------------------------------------------------------------------

    def _build_packs(
        self, search: SearchRequest, request_id: str,
    ) -> tuple[list[RecommendationPack], bool]:
        origin = self.geocoder.resolve(search.city)
        result = self.finder.find(origin, search.activity_names, search.travel_time)
        self._event(
            request_id, "places_found", count=len(result.places), radiusM=result.radius_m,
            placeTypes=result.place_types, demo=result.used_demo_data,
        )

        places = result.places
        if PipelineStage.DETAILS in self.stages and not result.used_demo_data:
            places = self.enricher.enrich(places)

        packs = []
        for place in places[: self.max_packs]:
            pack = self._build_pack(place, search, origin)
            packs.append(pack)
            self._event(
                request_id, "pack_built", placeId=place.place_id, name=place.name,
                spokes=len(pack.spokes),
            )
        return packs, result.used_demo_data

    def _build_pack(
        self, place: CandidatePlace, search: SearchRequest, origin: Coordinates,
    ) -> RecommendationPack:
        if PipelineStage.NEARBY in self.stages:
            spokes = self.nearby_finder.find(place, search.city)
        else:
            spokes = fallback_attractions(search.city)

        if PipelineStage.INSIGHTS in self.stages:
            insights = self.insight_extractor.extract(place)
        else:
            insights = fallback_insights(place.primary_type)

        try:
            itinerary = self.synthesizer.synthesize(place, spokes, insights)
        except Exception:
            logger.exception("Itinerary synthesis failed for %r", place.name)
            itinerary = fallback_itinerary()

        rating = place.rating if place.rating is not None else 4.0
        price_level = place.price_level or 0
        core = {
            "name":        place.name,
            "description": describe_place(place.primary_type, place.user_ratings_total, price_level),
            "rating":      rating,
            "reviewCount": place.user_ratings_total,
            "vicinity":    place.vicinity or place.formatted_address or search.city,
            "dogFriendly": is_dog_friendly(place.types),
            "kidFriendly": is_kid_friendly(place.types),
            "priceLevel":  price_level,
            "googleData": {
                "placeId":     place.place_id,
                "phone":       place.phone,
                "website":     place.website,
                "isOpen":      place.open_now,
                "photos":      place.photo_refs[:3],
                "bannerPhoto": self._banner_photo(place),
            },
        }
        return RecommendationPack(
            core=core,
            eta_text=self.distance_tool.eta_text(origin, place.location),
            spokes=spokes,
            itinerary=itinerary.steps,
            family_insights=itinerary.insights,
        )

    def _banner_photo(self, place: CandidatePlace) -> str:
        if place.photo_refs and self.places_client.configured:
            return self.places_client.photo_url(place.photo_refs[0])
        return stock_photo_url(photo_category(place.types))

    def _weather(self, city: str) -> WeatherReport:
        if PipelineStage.WEATHER not in self.stages:
            return demo_weather()
        return self.weather_tool.fetch(city)

    def _event(self, request_id: str, event: str, **payload) -> None:
        if self.events is not None:
            self.events.record(request_id, event, **payload)
