"""Unit tests for place detail enrichment."""

from conftest import ok
from modules.recommendation.place_enricher import MAX_ENRICHED, PlaceEnricher
from schemas.recommendation import CandidatePlace

DETAILS = {
    "name": "Lake Merritt",
    "formatted_phone_number": "(510) 555-0100",
    "website": "https://lakemerritt.org",
    "formatted_address": "Lake Merritt, Oakland, CA",
    "opening_hours": {"open_now": True},
    "photos": [{"photo_reference": "ref1"}, {"photo_reference": "ref2"}],
    "reviews": [{"author_name": "Sam", "rating": 5, "text": "Our kids loved the boats."}],
}


def _places(n):
    return [CandidatePlace(place_id=f"p{i}", name=f"Place {i}", rating=4.5) for i in range(n)]


class TestPlaceEnricher:

    def test_attaches_details(self, places_client, fake_session):
        fake_session.routes["place/details/json"] = {"status": "OK", "result": DETAILS}

        place = PlaceEnricher(places_client, delay_s=0).enrich(_places(1))[0]

        assert place.details_fetched is True
        assert place.phone == "(510) 555-0100"
        assert place.website == "https://lakemerritt.org"
        assert place.open_now is True
        assert place.photo_refs == ["ref1", "ref2"]
        assert place.reviews[0].author == "Sam"
        assert place.reviews[0].rating == 5.0

    def test_sleeps_between_calls_only(self, places_client, fake_session):
        fake_session.routes["place/details/json"] = {"status": "OK", "result": {}}
        sleeps = []

        PlaceEnricher(places_client, delay_s=0.1, sleep=sleeps.append).enrich(_places(4))

        assert sleeps == [0.1, 0.1, 0.1]
        assert len(fake_session.calls) == 4

    def test_caps_batch_size(self, places_client, fake_session):
        fake_session.routes["place/details/json"] = {"status": "OK", "result": {}}

        enriched = PlaceEnricher(places_client, delay_s=0).enrich(_places(MAX_ENRICHED + 3))

        assert len(enriched) == MAX_ENRICHED
        assert len(fake_session.calls) == MAX_ENRICHED

    def test_failed_lookup_keeps_place(self, places_client, fake_session):
        def details(params):
            if params["place_id"] == "p1":
                return {"status": "NOT_FOUND"}
            return {"status": "OK", "result": {"website": "https://example.org"}}
        fake_session.routes["place/details/json"] = details

        enriched = PlaceEnricher(places_client, delay_s=0).enrich(_places(3))

        assert [p.place_id for p in enriched] == ["p0", "p1", "p2"]
        assert [p.details_fetched for p in enriched] == [True, False, True]
        assert enriched[1].name == "Place 1"

    def test_unconfigured_key_passes_places_through(self, unconfigured_client, fake_session):
        places = _places(2)

        assert PlaceEnricher(unconfigured_client).enrich(places) == places
        assert fake_session.calls == []

    def test_partial_details_do_not_erase_search_fields(self, places_client, fake_session):
        fake_session.routes["place/details/json"] = ok(result={"website": "https://example.org"})
        place = CandidatePlace(place_id="p0", name="Lake Merritt", rating=4.6, vicinity="Oakland")

        PlaceEnricher(places_client, delay_s=0).enrich([place])

        assert place.name == "Lake Merritt"
        assert place.rating == 4.6
        assert place.vicinity == "Oakland"
        assert place.website == "https://example.org"

    def test_malformed_details_keep_search_fields(self, places_client, fake_session):
        fake_session.routes["place/details/json"] = ok(result={
            "name": "Renamed", "rating": 1.0, "geometry": {"location": {"lat": 999, "lng": 0}},
        })
        place = CandidatePlace(place_id="p0", name="Orig", rating=4.6)

        enriched = PlaceEnricher(places_client, delay_s=0).enrich([place])

        assert [p.name for p in enriched] == ["Orig"]
        assert enriched[0].rating == 4.6
        assert enriched[0].details_fetched is False
