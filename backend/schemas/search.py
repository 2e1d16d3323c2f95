"""
schemas/search.py
-----------------
Inbound request models (pydantic). Wire names are camelCase to match the
frontend; Python attributes stay snake_case.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Activity(str, Enum):
    HIKING          = "Hiking"
    BEACH           = "Beach"
    PLAYGROUNDS     = "Playgrounds"
    SCENIC_DRIVES   = "Scenic Drives"
    SHOPPING        = "Shopping"
    FARMERS_MARKETS = "Farmers Markets"
    PICNIC_AREAS    = "Picnic Areas"
    BREWERIES       = "Breweries"
    MUSEUMS         = "Museums"
    DOG_PARKS       = "Dog Parks"
    GARDENS         = "Gardens"
    OUTDOOR_DINING  = "Outdoor Dining"
    PARKS           = "Parks"
    RESTAURANTS     = "Restaurants"
    COFFEE_SHOPS    = "Coffee Shops"


class SearchRequest(BaseModel):
    """One family's trip preferences. Immutable once received."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    city: str = Field(..., min_length=2, max_length=100)
    adults: int = Field(..., ge=0, le=6)
    kids: int = Field(..., ge=0, le=6)
    has_dog: bool = Field(..., alias="hasDog")
    has_car: bool = Field(..., alias="hasCar")
    travel_time: Optional[int] = Field(None, alias="travelTime", ge=15, le=90)
    activities: list[Activity] = Field(..., min_length=1, max_length=8)

    @model_validator(mode="after")
    def _travel_time_with_car(self) -> "SearchRequest":
        if self.has_car and self.travel_time is None:
            raise ValueError("travelTime is required when hasCar is true")
        return self

    @property
    def activity_names(self) -> list[str]:
        return [a.value for a in self.activities]

    def to_params(self) -> dict:
        """Echo of the request as sent back in ``searchParams``."""
        return {
            "city":       self.city,
            "adults":     self.adults,
            "kids":       self.kids,
            "hasDog":     self.has_dog,
            "hasCar":     self.has_car,
            "travelTime": self.travel_time,
            "activities": self.activity_names,
        }


class FeedbackRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    pack_id: str = Field(..., alias="packId", min_length=1, max_length=200)
    rating: int = Field(..., ge=1, le=5)
    feedback: Optional[str] = Field(None, max_length=500)
