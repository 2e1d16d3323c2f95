"""modules/recommendation: Family trip recommendation pipeline."""

from modules.recommendation.place_finder import (
    PlaceFinder, PlaceSearchResult, map_activities_to_place_types, search_radius_m,
)
from modules.recommendation.place_enricher import PlaceEnricher
from modules.recommendation.insight_extractor import InsightExtractor
from modules.recommendation.nearby_finder import NearbyAttractionFinder
from modules.recommendation.itinerary_synthesizer import ItineraryCategory, ItinerarySynthesizer
from modules.recommendation.composer import PipelineStage, RecommendationService, parse_stages

__all__ = [
    "PlaceFinder",
    "PlaceSearchResult",
    "map_activities_to_place_types",
    "search_radius_m",
    "PlaceEnricher",
    "InsightExtractor",
    "NearbyAttractionFinder",
    "ItineraryCategory",
    "ItinerarySynthesizer",
    "PipelineStage",
    "RecommendationService",
    "parse_stages",
]
