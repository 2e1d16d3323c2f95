"""
modules/recommendation/insight_extractor.py
--------------------------------------------
Pulls family/pet-relevant sentences out of Google reviews.

Rules:
  - only reviews rated ≥ 4
  - split on [.!?]+; keep sentences 30 < len < 200 (trimmed) that contain a
    family keyword
  - dedupe on the lowercase first 50 characters
  - at most 3, first letter capitalised

When no review qualifies (or none are available) the three canned insights
for the place's primary category are returned instead.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable

from modules.tool_usage.places_client import REVIEW_FIELDS, GooglePlacesClient, PlacesApiError
from schemas.recommendation import CandidatePlace, FamilyInsight, Review

logger = logging.getLogger(__name__)

MAX_INSIGHTS = 3
MIN_REVIEW_RATING = 4
_SENTENCE_SPLIT = re.compile(r"[.!?]+")

FAMILY_KEYWORDS: tuple[str, ...] = (
    "family", "kids", "children", "child", "baby", "toddler", "teen", "teenager",
    "parents", "mom", "dad", "mother", "father", "grandparents", "grandma", "grandpa",
    "playground", "play", "fun", "enjoy", "love", "great", "amazing", "wonderful",
    "safe", "clean", "friendly", "helpful", "staff", "service", "food", "restaurant",
    "cafe", "snack", "drink", "water", "bathroom", "restroom", "parking", "easy",
    "convenient", "accessible", "wheelchair", "stroller", "diaper", "nursing",
    "dog", "dogs", "pet", "pets", "leash",
)

FALLBACK_INSIGHTS: dict[str, list[str]] = {
    "park": [
        "Families love the open spaces and playgrounds",
        "Perfect for picnics and outdoor activities",
        "Great place for kids to run around and play",
    ],
    "museum": [
        "Interactive exhibits keep kids engaged",
        "Educational and fun for the whole family",
        "Staff are very helpful with family visitors",
    ],
    "restaurant": [
        "Family-friendly atmosphere and menu",
        "Good portion sizes for sharing",
        "Comfortable seating for families",
    ],
    "attraction": [
        "Fun experience for all ages",
        "Well-maintained and safe for families",
        "Great photo opportunities throughout",
    ],
}


def fallback_insights(primary_type: str) -> list[FamilyInsight]:
    texts = FALLBACK_INSIGHTS.get(primary_type, FALLBACK_INSIGHTS["attraction"])
    return [FamilyInsight(text=t, rating=None, source="fallback") for t in texts]


def _mentions_family(sentence: str) -> bool:
    lowered = sentence.lower()
    return any(keyword in lowered for keyword in FAMILY_KEYWORDS)


def analyze_reviews(reviews: Iterable[Review]) -> list[FamilyInsight]:
    """Review-sourced insights only; may be empty."""
    insights: list[FamilyInsight] = []
    seen: set[str] = set()
    for review in reviews:
        if review.rating < MIN_REVIEW_RATING or not review.text:
            continue
        for raw in _SENTENCE_SPLIT.split(review.text):
            sentence = raw.strip()
            if not 30 < len(sentence) < 200 or not _mentions_family(sentence):
                continue
            key = sentence.lower()[:50]
            if key in seen:
                continue
            seen.add(key)
            insights.append(FamilyInsight(
                text=sentence[0].upper() + sentence[1:],
                rating=review.rating,
                source="review",
            ))
            if len(insights) == MAX_INSIGHTS:
                return insights
    return insights


class InsightExtractor:

    def __init__(self, client: GooglePlacesClient) -> None:
        self.client = client

    def extract(self, place: CandidatePlace) -> list[FamilyInsight]:
        reviews = place.reviews
        if not reviews and self.client.configured and not place.details_fetched:
            reviews = self._fetch_reviews(place)

        insights = analyze_reviews(reviews) if reviews else []
        if not insights:
            return fallback_insights(place.primary_type)
        logger.debug("Extracted %d family insights for %r", len(insights), place.name)
        return insights

    def _fetch_reviews(self, place: CandidatePlace) -> list[Review]:
        try:
            result = self.client.place_details(place.place_id, REVIEW_FIELDS)
        except PlacesApiError as exc:
            logger.warning("Review lookup failed for %r: %s", place.name, exc)
            return []
        reviews: list[Review] = []
        for item in result.get("reviews") or []:
            try:
                reviews.append(Review.from_api(item))
            except (ValueError, TypeError, AttributeError) as exc:
                logger.debug("Skipping malformed review for %r: %s", place.name, exc)
        return reviews
