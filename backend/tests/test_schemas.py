"""Unit tests for request models and pipeline records."""

import pytest
from pydantic import ValidationError

from schemas.recommendation import CandidatePlace, Coordinates, ItineraryStep, Spoke
from schemas.search import Activity, FeedbackRequest, SearchRequest


class TestCoordinates:

    def test_as_param(self):
        assert Coordinates(37.5, -122.25).as_param() == "37.5,-122.25"

    @pytest.mark.parametrize("lat, lng", [(91, 0), (-91, 0), (0, 181), (0, -181)])
    def test_rejects_out_of_range(self, lat, lng):
        with pytest.raises(ValueError):
            Coordinates(lat, lng)


class TestSearchRequest:

    def test_camel_case_aliases(self):
        search = SearchRequest.model_validate({
            "city": "Oakland", "adults": 2, "kids": 0, "hasDog": True, "hasCar": False,
            "activities": ["Coffee Shops"],
        })

        assert search.has_dog is True
        assert search.has_car is False
        assert search.travel_time is None
        assert search.activities == [Activity.COFFEE_SHOPS]
        assert search.activity_names == ["Coffee Shops"]

    def test_group_and_transport_fields_are_required(self):
        with pytest.raises(ValidationError) as info:
            SearchRequest.model_validate({"city": "Oakland", "activities": ["Parks"]})

        missing = {err["loc"][0] for err in info.value.errors() if err["type"] == "missing"}
        assert missing == {"adults", "kids", "hasDog", "hasCar"}

    def test_is_immutable(self, search):
        with pytest.raises(ValidationError):
            search.city = "Berkeley"

    def test_car_without_travel_time_is_invalid(self):
        with pytest.raises(ValidationError, match="travelTime is required"):
            SearchRequest(city="Oakland", adults=2, kids=1, hasDog=False, hasCar=True, activities=["Parks"])


def test_feedback_request_alias():
    body = FeedbackRequest.model_validate({"packId": "pack_1", "rating": 4})

    assert body.pack_id == "pack_1"
    assert body.feedback is None


class TestCandidatePlace:

    def test_from_api(self):
        place = CandidatePlace.from_api({
            "place_id": "p1",
            "name": "Lake Merritt",
            "rating": 4.7,
            "user_ratings_total": 9000,
            "types": ["park", "establishment"],
            "vicinity": "Oakland",
            "price_level": 0,
            "geometry": {"location": {"lat": 37.80, "lng": -122.26}},
            "opening_hours": {"open_now": False},
        })

        assert place.primary_type == "park"
        assert place.location == Coordinates(37.80, -122.26)
        assert place.price_level == 0
        assert place.open_now is False
        assert place.details_fetched is False

    def test_malformed_details_leave_place_unchanged(self):
        place = CandidatePlace(place_id="p1", name="Orig", rating=4.6, types=["park"])

        with pytest.raises(ValueError, match="latitude out of range"):
            place.apply_details({
                "name": "Renamed", "types": ["museum"],
                "geometry": {"location": {"lat": 999, "lng": 0}},
            })

        assert (place.name, place.rating, place.types) == ("Orig", 4.6, ["park"])
        assert place.details_fetched is False

    def test_from_api_rejects_non_object(self):
        with pytest.raises(TypeError):
            CandidatePlace.from_api(["not", "a", "place"])

    def test_primary_type_of_untyped_place(self):
        assert CandidatePlace().primary_type == ""


def test_step_and_spoke_omit_empty_fields():
    assert ItineraryStep("Walk", "30 min", "Around the lake").to_dict() == {
        "activity": "Walk", "duration": "30 min", "description": "Around the lake",
    }
    assert Spoke("Gift Shop").to_dict() == {"name": "Gift Shop", "type": "LOCAL"}
