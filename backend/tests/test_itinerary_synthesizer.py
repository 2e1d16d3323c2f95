"""Unit tests for template itinerary synthesis."""

import pytest

from modules.recommendation.itinerary_synthesizer import (
    ItineraryCategory, ItinerarySynthesizer, classify, fallback_itinerary,
)
from schemas.recommendation import CandidatePlace, FamilyInsight, Spoke

SPOKES = [Spoke("Grand Lake Theatre"), Spoke("Arizmendi Bakery"), Spoke("Fairyland"), Spoke("Gift Shop")]


@pytest.mark.parametrize("name, types, category", [
    ("Redwood Trail", ["park"], ItineraryCategory.TRAIL),
    ("Tilden Park", ["hiking_area"], ItineraryCategory.TRAIL),
    ("Oakland Museum", ["point_of_interest"], ItineraryCategory.MUSEUM),
    ("Chabot Space Center", ["museum"], ItineraryCategory.MUSEUM),
    ("Lake Merritt", ["park"], ItineraryCategory.PARK),
    ("Jack London Square", ["tourist_attraction"], ItineraryCategory.PARK),
])
def test_classify(name, types, category):
    assert classify(CandidatePlace(name=name, types=types)) is category


class TestItinerarySynthesizer:

    def test_three_steps_with_tips(self):
        itinerary = ItinerarySynthesizer().synthesize(
            CandidatePlace(name="Oakland Museum", types=["museum"]), [], [],
        )

        assert [s.activity for s in itinerary.steps] == [
            "Orientation & Planning", "Main Exploration", "Wrap-up & Souvenirs",
        ]
        assert [s.duration for s in itinerary.steps] == ["30 min", "120 min", "30 min"]
        assert all(s.tips for s in itinerary.steps)
        assert len(itinerary.insights) == 3

    def test_names_top_three_spokes_in_second_step(self):
        itinerary = ItinerarySynthesizer().synthesize(
            CandidatePlace(name="Redwood Trail", types=["hiking_area"]), SPOKES, [],
        )

        assert "nearby attractions like Grand Lake Theatre, Arizmendi Bakery, Fairyland" in (
            itinerary.steps[1].description
        )
        assert "Gift Shop" not in itinerary.steps[1].description

    def test_templates_are_not_mutated_between_calls(self):
        synthesizer = ItinerarySynthesizer()
        trail = CandidatePlace(name="Redwood Trail", types=["hiking_area"])

        synthesizer.synthesize(trail, SPOKES, [])
        second = synthesizer.synthesize(trail, [], [])

        assert "like" not in second.steps[1].description

    def test_appends_at_most_two_review_insights(self):
        insights = [
            FamilyInsight("Review one", 5, "review"),
            FamilyInsight("Canned text", None, "fallback"),
            FamilyInsight("Review two", 4, "review"),
            FamilyInsight("Review three", 5, "review"),
        ]

        itinerary = ItinerarySynthesizer().synthesize(
            CandidatePlace(name="Lake Merritt", types=["park"]), [], insights,
        )

        assert len(itinerary.insights) == 5
        assert itinerary.insights[-2:] == ["Review one", "Review two"]
        assert "Canned text" not in itinerary.insights


def test_fallback_itinerary():
    itinerary = fallback_itinerary()

    assert [s.activity for s in itinerary.steps] == [
        "Arrival & Exploration", "Main Experience", "Wrap-up & Departure",
    ]
    assert len(itinerary.insights) == 3
