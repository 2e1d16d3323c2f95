"""
modules/recommendation/place_finder.py
---------------------------------------
Candidate venue search: one Places nearby query per mapped place type,
within a radius derived from the family's travel-time budget.

Radius heuristic (local roads vs. highways, not a routing computation):

  t ≤ 15        min(t × 400, 8000) m
  15 < t ≤ 30   8000  + (t − 15) × 800
  30 < t ≤ 60   20000 + (t − 30) × 1000
  t > 60        min(50000 + (t − 60) × 800, 100000)

Each boundary value belongs to the lower band, so t=15 → 6000 m.

Filters: rating present and ≥ 4.0, at least 10 ratings, dedupe on
(name, vicinity). Ranked by weight × rating, truncated to 10.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from modules.tool_usage.places_client import GooglePlacesClient, PlacesApiError
from schemas.recommendation import CandidatePlace, Coordinates

logger = logging.getLogger(__name__)

DEFAULT_TRAVEL_TIME_MIN = 15
MIN_RATING = 4.0
MIN_RATINGS_TOTAL = 10
MAX_CANDIDATES = 10

# Frontend activity name → Google place types (order matters for query order)
ACTIVITY_PLACE_TYPES: dict[str, list[str]] = {
    "Hiking":          ["park", "hiking_area", "natural_feature"],
    "Beach":           ["beach", "natural_feature"],
    "Playgrounds":     ["park", "amusement_park", "playground"],
    "Scenic Drives":   ["scenic_drive", "tourist_attraction", "natural_feature"],
    "Shopping":        ["shopping_mall", "store", "department_store"],
    "Farmers Markets": ["food", "market", "grocery_or_supermarket"],
    "Picnic Areas":    ["park", "campground"],
    "Breweries":       ["bar", "restaurant", "food"],
    "Museums":         ["museum", "art_gallery", "tourist_attraction"],
    "Dog Parks":       ["park", "veterinary_care"],
    "Gardens":         ["park", "botanical_garden", "tourist_attraction"],
    "Outdoor Dining":  ["restaurant", "cafe", "meal_takeaway"],
    "Parks":           ["park", "national_park"],
    "Restaurants":     ["restaurant", "cafe"],
    "Coffee Shops":    ["cafe"],
}

DEFAULT_PLACE_TYPES: list[str] = ["park", "tourist_attraction", "amusement_park", "museum"]


# ─────────────────────────────────────────────────────────────────────────────
# Pure helpers
# ─────────────────────────────────────────────────────────────────────────────

def search_radius_m(travel_time: Optional[int]) -> int:
    """Search radius in metres for a travel-time budget in minutes."""
    t = DEFAULT_TRAVEL_TIME_MIN if travel_time is None else travel_time
    if t <= 15:
        return min(t * 400, 8000)
    if t <= 30:
        return 8000 + (t - 15) * 800
    if t <= 60:
        return 20000 + (t - 30) * 1000
    return min(50000 + (t - 60) * 800, 100000)


def rating_weight(travel_time: Optional[int]) -> float:
    """
    Sort weight per travel-time band: short trips ×2, medium ×1.5, long ×3.

    A positive constant multiplier never changes the order, so the result is
    always rating-descending.
    """
    t = DEFAULT_TRAVEL_TIME_MIN if travel_time is None else travel_time
    if t <= 20:
        return 2.0
    if t <= 45:
        return 1.5
    return 3.0


def map_activities_to_place_types(activities: Iterable[str]) -> list[str]:
    """
    Merge the mapped place types for *activities*, first-seen order, no
    duplicates. Unknown activities contribute nothing; an empty result is
    replaced by DEFAULT_PLACE_TYPES.
    """
    types: list[str] = []
    for activity in activities:
        name = getattr(activity, "value", activity)
        for place_type in ACTIVITY_PLACE_TYPES.get(name, []):
            if place_type not in types:
                types.append(place_type)
    return types or list(DEFAULT_PLACE_TYPES)


def parse_results(results: Iterable[dict], place_type: str = "") -> list[CandidatePlace]:
    """Parse nearby-search items, skipping any that are malformed."""
    places: list[CandidatePlace] = []
    for item in results:
        try:
            places.append(CandidatePlace.from_api(item))
        except (ValueError, TypeError) as exc:
            logger.warning("Skipping malformed %s result: %s", place_type or "place", exc)
    return places


def passes_quality_filter(place: CandidatePlace) -> bool:
    return (
        place.rating is not None
        and place.rating >= MIN_RATING
        and place.user_ratings_total >= MIN_RATINGS_TOTAL
    )


def remove_duplicates(places: Iterable[CandidatePlace]) -> list[CandidatePlace]:
    """Keep the first place for each (name, vicinity) pair."""
    seen: set[tuple[str, str]] = set()
    unique: list[CandidatePlace] = []
    for place in places:
        key = (place.name, place.vicinity)
        if key in seen:
            continue
        seen.add(key)
        unique.append(place)
    return unique


def demo_places() -> list[CandidatePlace]:
    """Built-in San Francisco candidates used when live search is unavailable."""
    return [
        CandidatePlace(
            place_id="demo_1",
            name="Golden Gate Park",
            rating=4.8,
            user_ratings_total=15420,
            vicinity="San Francisco",
            types=["park", "establishment"],
            price_level=0,
            location=Coordinates(37.7694, -122.4862),
        ),
        CandidatePlace(
            place_id="demo_2",
            name="California Academy of Sciences",
            rating=4.6,
            user_ratings_total=8930,
            vicinity="San Francisco",
            types=["museum", "establishment"],
            price_level=3,
            location=Coordinates(37.7699, -122.4661),
        ),
    ]


# ─────────────────────────────────────────────────────────────────────────────
# PlaceFinder
# ─────────────────────────────────────────────────────────────────────────────

@dataclass
class PlaceSearchResult:
    places: list[CandidatePlace] = field(default_factory=list)
    radius_m: int = 0
    place_types: list[str] = field(default_factory=list)
    used_demo_data: bool = False


class PlaceFinder:

    def __init__(self, client: GooglePlacesClient, max_results: int = MAX_CANDIDATES) -> None:
        self.client = client
        self.max_results = max_results

    def find(
        self,
        location: Coordinates,
        activities: Iterable[str],
        travel_time: Optional[int] = None,
    ) -> PlaceSearchResult:
        radius = search_radius_m(travel_time)
        place_types = map_activities_to_place_types(activities)

        if not self.client.configured:
            logger.info("Places key not configured, returning demo places")
            return PlaceSearchResult(demo_places(), radius, place_types, used_demo_data=True)

        logger.info(
            "Travel time %s min → radius %.1f km, types: %s",
            travel_time, radius / 1000, ", ".join(place_types),
        )

        collected: list[CandidatePlace] = []
        failures = 0
        for place_type in place_types:
            try:
                results = self.client.nearby_search(location, radius, place_type=place_type)
            except PlacesApiError as exc:
                failures += 1
                logger.warning("Nearby search for %s failed: %s", place_type, exc)
                continue
            candidates = parse_results(results, place_type)
            kept = [p for p in candidates if passes_quality_filter(p)]
            logger.debug(
                "%s: %d results, %d after filtering", place_type, len(candidates), len(kept),
            )
            collected.extend(kept)

        if failures == len(place_types):
            logger.warning("All %d place-type queries failed, returning demo places", failures)
            return PlaceSearchResult(demo_places(), radius, place_types, used_demo_data=True)

        unique = remove_duplicates(collected)
        weight = rating_weight(travel_time)
        # sorted() is stable: equal ratings keep query order
        ranked = sorted(unique, key=lambda p: weight * (p.rating or 0.0), reverse=True)
        return PlaceSearchResult(ranked[: self.max_results], radius, place_types)
