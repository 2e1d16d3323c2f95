"""
schemas/recommendation.py
-------------------------
Dataclass definitions for everything the recommendation pipeline passes
between stages, plus the pack structure returned to the frontend.

Nothing here is persisted: a CandidatePlace is created by the PlaceFinder,
filled in by the PlaceEnricher and discarded once the composer has built
its pack.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class Coordinates:
    """WGS-84 point. Construction fails on out-of-range values."""
    lat: float
    lng: float

    def __post_init__(self) -> None:
        if not -90.0 <= self.lat <= 90.0:
            raise ValueError(f"latitude out of range: {self.lat}")
        if not -180.0 <= self.lng <= 180.0:
            raise ValueError(f"longitude out of range: {self.lng}")

    def as_param(self) -> str:
        """Google web-service ``location`` parameter form: "lat,lng"."""
        return f"{self.lat},{self.lng}"


@dataclass
class Review:
    author: str = ""
    rating: float = 0.0
    text: str = ""

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> "Review":
        return cls(
            author=item.get("author_name", "") or "",
            rating=float(item.get("rating", 0) or 0),
            text=item.get("text", "") or "",
        )


@dataclass
class CandidatePlace:
    """
    One venue returned by a Places nearby search.

    ``types`` keeps Google's order: the first entry is the primary category.
    Detail fields stay empty until the PlaceEnricher attaches them.
    """
    place_id: str = ""
    name: str = ""
    rating: Optional[float] = None
    user_ratings_total: int = 0
    types: list[str] = field(default_factory=list)
    vicinity: str = ""
    price_level: Optional[int] = None
    location: Optional[Coordinates] = None

    # ── Detail fields (PlaceEnricher) ─────────────────────────────────────
    phone: Optional[str] = None
    website: Optional[str] = None
    open_now: Optional[bool] = None
    formatted_address: Optional[str] = None
    photo_refs: list[str] = field(default_factory=list)
    reviews: list[Review] = field(default_factory=list)
    details_fetched: bool = False

    @property
    def primary_type(self) -> str:
        return self.types[0] if self.types else ""

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> "CandidatePlace":
        """Parse one ``results[]`` entry of a legacy Places response."""
        if not isinstance(item, dict):
            raise TypeError(f"place result is not an object: {item!r}")
        place = cls(place_id=item.get("place_id", ""), name=item.get("name", ""))
        place.apply_details(item, mark_fetched=False)
        return place

    def apply_details(self, result: dict[str, Any], mark_fetched: bool = True) -> None:
        """
        Overlay fields from a Places ``result`` dict.

        Only keys present in *result* overwrite existing values, so a partial
        details payload never erases what the nearby search already gave us.
        Every field is parsed before any is assigned: a malformed payload
        raises ValueError or TypeError and leaves the place untouched.
        """
        updates: dict[str, Any] = {}
        if result.get("name"):
            updates["name"] = str(result["name"])
        if result.get("rating") is not None:
            updates["rating"] = float(result["rating"])
        if result.get("user_ratings_total") is not None:
            updates["user_ratings_total"] = int(result["user_ratings_total"])
        if result.get("types"):
            updates["types"] = list(result["types"])
        if result.get("vicinity"):
            updates["vicinity"] = result["vicinity"]
        if result.get("price_level") is not None:
            updates["price_level"] = int(result["price_level"])

        geometry = result.get("geometry") or {}
        if not isinstance(geometry, dict):
            raise TypeError(f"geometry is not an object: {geometry!r}")
        loc = geometry.get("location")
        if loc and "lat" in loc and "lng" in loc:
            updates["location"] = Coordinates(float(loc["lat"]), float(loc["lng"]))

        if "formatted_phone_number" in result:
            updates["phone"] = result["formatted_phone_number"]
        if "website" in result:
            updates["website"] = result["website"]
        if "formatted_address" in result:
            updates["formatted_address"] = result["formatted_address"]
        hours = result.get("opening_hours")
        if isinstance(hours, dict) and "open_now" in hours:
            updates["open_now"] = bool(hours["open_now"])
        if result.get("photos"):
            updates["photo_refs"] = [
                p["photo_reference"] for p in result["photos"]
                if isinstance(p, dict) and p.get("photo_reference")
            ]
        if result.get("reviews"):
            updates["reviews"] = [
                Review.from_api(r) for r in result["reviews"]
                if isinstance(r, dict)
            ]

        for name, value in updates.items():
            setattr(self, name, value)
        if mark_fetched:
            self.details_fetched = True


@dataclass
class FamilyInsight:
    text: str
    rating: Optional[float] = None
    source: str = "fallback"      # "review" | "fallback"

    @property
    def from_review(self) -> bool:
        return self.source == "review"


@dataclass
class ItineraryStep:
    activity: str
    duration: str                 # display text, e.g. "90 min"
    description: str
    tips: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "activity":    self.activity,
            "duration":    self.duration,
            "description": self.description,
        }
        if self.tips:
            data["tips"] = self.tips
        return data


@dataclass
class Itinerary:
    """Exactly three ordered steps plus the insight strings shown beside them."""
    steps: list[ItineraryStep] = field(default_factory=list)
    insights: list[str] = field(default_factory=list)


@dataclass
class Spoke:
    """A nearby point of interest shown around the core destination."""
    name: str
    type: str = "LOCAL"
    rating: Optional[float] = None
    vicinity: Optional[str] = None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"name": self.name, "type": self.type}
        if self.rating is not None:
            data["rating"] = self.rating
        if self.vicinity:
            data["vicinity"] = self.vicinity
        return data


@dataclass
class WeatherReport:
    temperature: int              # °F
    description: str
    humidity: int                 # %
    wind_speed: float             # mph
    icon: str                     # OpenWeatherMap icon code, e.g. "02d"
    condition: str = "cloudy"     # coarse condition, see weather_tool
    is_demo: bool = False

    def to_dict(self) -> dict:
        return {
            "temperature": self.temperature,
            "description": self.description,
            "humidity":    self.humidity,
            "windSpeed":   self.wind_speed,
            "icon":        self.icon,
            "condition":   self.condition,
        }


@dataclass
class RecommendationPack:
    """
    One recommended destination with everything the frontend renders for it.

    ``core`` is kept as a plain dict because its shape is the wire format
    (camelCase keys, nested ``googleData``).
    """
    core: dict[str, Any]
    eta_text: str
    spokes: list[Spoke] = field(default_factory=list)
    itinerary: list[ItineraryStep] = field(default_factory=list)
    family_insights: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "core":           self.core,
            "eta":            {"durationText": self.eta_text},
            "spokes":         [s.to_dict() for s in self.spokes],
            "itinerary":      [step.to_dict() for step in self.itinerary],
            "familyInsights": list(self.family_insights),
        }
