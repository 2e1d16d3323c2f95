"""Unit tests for candidate place search."""

import pytest

from conftest import ok, place_result
from modules.recommendation.place_finder import (
    DEFAULT_PLACE_TYPES, PlaceFinder, demo_places, map_activities_to_place_types,
    rating_weight, remove_duplicates, search_radius_m,
)
from schemas.recommendation import CandidatePlace, Coordinates
from schemas.search import Activity

OAKLAND = Coordinates(37.8044, -122.2712)


@pytest.mark.parametrize("minutes, radius", [
    (None, 6000),
    (10, 4000),
    (15, 6000),
    (16, 8800),
    (30, 20000),
    (45, 35000),
    (60, 50000),
    (90, 74000),
    (200, 100000),
])
def test_search_radius(minutes, radius):
    assert search_radius_m(minutes) == radius


@pytest.mark.parametrize("minutes, weight", [(15, 2.0), (20, 2.0), (21, 1.5), (45, 1.5), (46, 3.0)])
def test_rating_weight_bands(minutes, weight):
    assert rating_weight(minutes) == weight


class TestActivityMapping:

    def test_merges_types_in_first_seen_order(self):
        types = map_activities_to_place_types(["Parks", "Hiking"])

        assert types == ["park", "national_park", "hiking_area", "natural_feature"]

    def test_accepts_enum_members(self):
        assert map_activities_to_place_types([Activity.COFFEE_SHOPS]) == ["cafe"]

    @pytest.mark.parametrize("activities", [[], ["Skydiving"]])
    def test_unmapped_activities_use_defaults(self, activities):
        assert map_activities_to_place_types(activities) == DEFAULT_PLACE_TYPES


def test_remove_duplicates_keeps_first_per_name_and_vicinity():
    places = [
        CandidatePlace(place_id="a", name="Lake Merritt", vicinity="Oakland"),
        CandidatePlace(place_id="b", name="Lake Merritt", vicinity="Oakland"),
        CandidatePlace(place_id="c", name="Lake Merritt", vicinity="Downtown"),
    ]

    assert [p.place_id for p in remove_duplicates(places)] == ["a", "c"]


class TestPlaceFinder:

    def test_unconfigured_key_returns_demo_places(self, unconfigured_client, fake_session):
        result = PlaceFinder(unconfigured_client).find(OAKLAND, ["Parks"], 30)

        assert result.used_demo_data is True
        assert [p.name for p in result.places] == [p.name for p in demo_places()]
        assert result.radius_m == 20000
        assert fake_session.calls == []

    def test_queries_each_type_and_filters_ranks_dedupes(self, places_client, fake_session):
        by_type = {
            "park": [
                place_result("p1", "Lake Merritt", rating=4.6),
                place_result("p2", "Tiny Lot", rating=4.9, total=3),         # too few ratings
                place_result("p3", "Unrated Green", rating=None),             # no rating
                place_result("p4", "Meh Park", rating=3.9),                   # below 4.0
            ],
            "national_park": [place_result("p5", "Redwood Regional", rating=4.8)],
            "museum": [
                place_result("p6", "Oakland Museum", rating=4.7, types=["museum"]),
                place_result("p1", "Lake Merritt", rating=4.6),               # duplicate
            ],
            "art_gallery": [],
            "tourist_attraction": [place_result("p7", "Jack London Square", rating=4.6)],
        }
        fake_session.routes["place/nearbysearch/json"] = lambda params: ok(by_type[params["type"]])

        result = PlaceFinder(places_client).find(OAKLAND, ["Parks", "Museums"], 30)

        assert result.used_demo_data is False
        assert result.place_types == [
            "park", "national_park", "museum", "art_gallery", "tourist_attraction",
        ]
        assert len(fake_session.calls) == 5
        assert {params["radius"] for params in fake_session.calls_to("nearbysearch")} == {20000}
        # rating-descending, ties keep query order
        assert [p.place_id for p in result.places] == ["p5", "p6", "p1", "p7"]

    def test_truncates_to_max_results(self, places_client, fake_session):
        fake_session.routes["place/nearbysearch/json"] = ok(
            [place_result(f"p{i}", f"Park {i}", rating=4.0 + i / 100) for i in range(15)]
        )

        result = PlaceFinder(places_client, max_results=10).find(OAKLAND, ["Coffee Shops"], 15)

        assert len(result.places) == 10
        assert result.places[0].place_id == "p14"

    def test_one_failing_type_does_not_stop_the_search(self, places_client, fake_session):
        def nearby(params):
            if params["type"] == "park":
                return {"status": "OVER_QUERY_LIMIT"}
            return ok([place_result("n1", "Redwood Regional", rating=4.8)])
        fake_session.routes["place/nearbysearch/json"] = nearby

        result = PlaceFinder(places_client).find(OAKLAND, ["Parks"], 30)

        assert result.used_demo_data is False
        assert [p.place_id for p in result.places] == ["n1"]

    def test_all_types_failing_returns_demo_places(self, places_client, fake_session):
        fake_session.routes["place/nearbysearch/json"] = {"status": "REQUEST_DENIED"}

        result = PlaceFinder(places_client).find(OAKLAND, ["Parks"], 30)

        assert result.used_demo_data is True
        assert result.places[0].place_id == "demo_1"

    def test_parses_geometry_and_primary_type(self, places_client, fake_session):
        fake_session.routes["place/nearbysearch/json"] = ok([
            place_result("p1", "Oakland Zoo", types=["zoo", "park"], lat=37.75, lng=-122.15),
        ])

        place = PlaceFinder(places_client).find(OAKLAND, ["Coffee Shops"], 15).places[0]

        assert place.primary_type == "zoo"
        assert place.location == Coordinates(37.75, -122.15)
        assert place.details_fetched is False

    def test_malformed_result_is_skipped(self, places_client, fake_session):
        fake_session.routes["place/nearbysearch/json"] = ok([
            place_result("good", "Good Park", lat=37.8),
            place_result("bad", "Bad Park", lat=937.0),
            place_result("odd", "Odd Park", rating="five stars"),
        ])

        result = PlaceFinder(places_client).find(OAKLAND, ["Coffee Shops"], 15)

        assert result.used_demo_data is False
        assert [p.name for p in result.places] == ["Good Park"]
