"""
modules/recommendation/nearby_finder.py
----------------------------------------
Secondary proximity search around a chosen place, producing the "spokes"
shown beside each pack.

Pipeline (one nearby search, radius 800 m):
  1. rating ≥ 3.8 and ≥ 5 ratings
  2. drop names containing "parking"
  3. drop non-tourist results (is_tourist_attraction)
  4. drop the origin place (case-insensitive name substring)
  5. sort by rating desc, take 5
  6. classify by type priority (categorize_place)

No key, no geometry, a search error or zero survivors → city fallback
attractions.
"""

from __future__ import annotations

import logging
from typing import Optional

from modules.tool_usage.places_client import GooglePlacesClient, PlacesApiError
from schemas.recommendation import CandidatePlace, Spoke

logger = logging.getLogger(__name__)

NEARBY_RADIUS_M = 800
MIN_RATING = 3.8
MIN_RATINGS_TOTAL = 5
MAX_SPOKES = 5

# ── Tourist classifier ────────────────────────────────────────────────────────
# Deny lists win over allow lists.

TOURIST_TYPES: frozenset[str] = frozenset({
    "tourist_attraction", "museum", "art_gallery", "park", "natural_feature",
    "restaurant", "cafe", "bakery", "shopping_mall", "clothing_store", "jewelry_store",
    "amusement_park", "aquarium", "zoo", "movie_theater", "bowling_alley",
    "historic", "church", "synagogue", "mosque", "temple", "landmark",
    "beauty_salon", "spa", "gym", "fitness_center", "stadium", "theater",
})

EXCLUDE_TYPES: frozenset[str] = frozenset({
    "dentist", "doctor", "hospital", "clinic", "pharmacy", "veterinary_care",
    "lawyer", "accounting", "insurance_agency", "real_estate_agency",
    "car_dealer", "car_rental", "car_repair", "gas_station", "bank", "atm",
    "post_office", "school", "university", "library", "police", "fire_station",
    "local_government_office", "embassy", "funeral_home", "cemetery",
})

EXCLUDE_NAME_PATTERNS: tuple[str, ...] = (
    "dds", "dmd", "dr.", "doctor", "dentist", "orthodontist", "endodontist",
    "pediatrician", "cardiologist", "dermatologist", "neurologist",
    "attorney", "lawyer", "esq", "cpa", "accountant", "insurance",
    "real estate", "realtor", "mortgage", "loan", "credit union",
    "dmv", "post office", "ups store", "fedex", "usps",
    "elementary school", "middle school", "high school", "college",
    "university", "medical center", "urgent care", "emergency room",
    "pharmacy", "drugstore", "cvs", "walgreens", "rite aid",
    "auto repair", "car wash", "oil change", "tire shop",
    "bank of america", "wells fargo", "chase", "citibank",
)

TOURIST_NAME_PATTERNS: tuple[str, ...] = (
    "museum", "gallery", "park", "garden", "trail", "beach", "lake",
    "restaurant", "cafe", "bistro", "grill", "pizza", "sushi", "thai",
    "shop", "store", "market", "mall", "plaza", "center", "square",
    "theater", "cinema", "playhouse", "auditorium", "stadium", "arena",
    "zoo", "aquarium", "botanical", "conservatory", "observatory",
    "monument", "memorial", "statue", "fountain", "bridge", "tower",
)

# (category, types) in priority order; first match wins
_CATEGORY_PRIORITY: tuple[tuple[str, frozenset[str]], ...] = (
    ("RESTAURANT", frozenset({"restaurant", "meal_takeaway", "food"})),
    ("CAFE",       frozenset({"cafe", "bakery"})),
    ("SHOPPING",   frozenset({"store", "shopping_mall", "clothing_store"})),
    ("CULTURE",    frozenset({"tourist_attraction", "museum", "art_gallery"})),
    ("SERVICES",   frozenset({"gas_station", "atm", "bank"})),
    ("NATURE",     frozenset({"park", "natural_feature"})),
)

FALLBACK_ATTRACTION_NAMES: tuple[str, ...] = ("Local Coffee Shop", "Family Restaurant", "Gift Shop")


def is_tourist_attraction(name: str, types: list[str]) -> bool:
    lowered = name.lower()
    type_set = set(types)
    if type_set & EXCLUDE_TYPES:
        return False
    if any(pattern in lowered for pattern in EXCLUDE_NAME_PATTERNS):
        return False
    if type_set & TOURIST_TYPES:
        return True
    return any(pattern in lowered for pattern in TOURIST_NAME_PATTERNS)


def categorize_place(types: list[str]) -> str:
    type_set = set(types)
    for category, members in _CATEGORY_PRIORITY:
        if type_set & members:
            return category
    return "LOCAL"


def fallback_attractions(city: str) -> list[Spoke]:
    """Generic spokes for *city*; the visitor center needs a city name."""
    names: list[str] = []
    if city and city.strip():
        names.append(f"{city.strip()} Visitor Center")
    names.extend(FALLBACK_ATTRACTION_NAMES)
    return [Spoke(name=name, type="LOCAL") for name in names]


class NearbyAttractionFinder:

    def __init__(self, client: GooglePlacesClient, radius_m: int = NEARBY_RADIUS_M) -> None:
        self.client = client
        self.radius_m = radius_m

    def find(self, place: CandidatePlace, city: str) -> list[Spoke]:
        if not self.client.configured:
            return fallback_attractions(city)
        if place.location is None:
            logger.info("No coordinates for %r, using fallback attractions", place.name)
            return fallback_attractions(city)

        try:
            results = self.client.nearby_search(place.location, self.radius_m)
        except PlacesApiError as exc:
            logger.warning("Nearby attraction search failed for %r: %s", place.name, exc)
            return fallback_attractions(city)

        origin = place.name.lower()
        survivors: list[Spoke] = []
        for item in results:
            try:
                spoke = _candidate_spoke(item, origin)
            except (ValueError, TypeError, AttributeError) as exc:
                logger.debug("Skipping malformed nearby result for %r: %s", place.name, exc)
                continue
            if spoke is not None:
                survivors.append(spoke)

        survivors.sort(key=lambda spoke: spoke.rating, reverse=True)
        spokes = survivors[:MAX_SPOKES]
        logger.debug("Found %d nearby attractions for %r", len(spokes), place.name)
        return spokes or fallback_attractions(city)


def _candidate_spoke(item: dict, origin: str) -> Optional[Spoke]:
    """Spoke for one nearby result, or None when the result is filtered out."""
    name = str(item.get("name", "") or "")
    types = list(item.get("types") or [])
    rating = float(item.get("rating") or 0)
    if rating < MIN_RATING:
        return None
    if int(item.get("user_ratings_total") or 0) < MIN_RATINGS_TOTAL:
        return None
    if "parking" in name.lower():
        return None
    if not is_tourist_attraction(name, types):
        return None
    if origin and origin in name.lower():
        return None
    return Spoke(
        name=name,
        type=categorize_place(types),
        rating=rating,
        vicinity=item.get("vicinity"),
    )
