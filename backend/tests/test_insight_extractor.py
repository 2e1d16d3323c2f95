"""Unit tests for family insight extraction."""

from modules.recommendation.insight_extractor import (
    FALLBACK_INSIGHTS, InsightExtractor, analyze_reviews, fallback_insights,
)
from schemas.recommendation import CandidatePlace, Review


class TestAnalyzeReviews:

    def test_keeps_family_sentences_from_good_reviews(self):
        reviews = [Review("A", 5, "the kids loved the playground near the entrance. Short one!")]

        insights = analyze_reviews(reviews)

        assert [i.text for i in insights] == ["The kids loved the playground near the entrance"]
        assert insights[0].source == "review"
        assert insights[0].rating == 5

    def test_ignores_reviews_below_four_stars(self):
        reviews = [Review("B", 3, "Our family had a lovely afternoon by the water here")]

        assert analyze_reviews(reviews) == []

    def test_ignores_sentences_without_keywords(self):
        reviews = [Review("C", 5, "The architecture of this building is quite remarkable")]

        assert analyze_reviews(reviews) == []

    def test_ignores_sentences_outside_length_bounds(self):
        reviews = [Review("D", 5, "Kids had fun! " + "The kids " + "x" * 200 + ".")]

        assert analyze_reviews(reviews) == []

    def test_dedupes_on_first_fifty_characters(self):
        base = "Our family spent the whole afternoon at the lake with the ducks"
        reviews = [
            Review("E", 5, base + " and geese."),
            Review("F", 4, base + " and swans."),
        ]

        assert len(analyze_reviews(reviews)) == 1

    def test_returns_at_most_three(self):
        text = ". ".join(
            f"Our kids enjoyed spot number {n} more than anything else" for n in range(6)
        )

        assert len(analyze_reviews([Review("G", 5, text)])) == 3

    def test_pet_keywords_count(self):
        reviews = [Review("H", 5, "Lots of shade and our dog could stay on leash the whole time")]

        assert len(analyze_reviews(reviews)) == 1


def test_fallback_insights_by_type():
    assert [i.text for i in fallback_insights("museum")] == FALLBACK_INSIGHTS["museum"]
    assert [i.text for i in fallback_insights("bowling_alley")] == FALLBACK_INSIGHTS["attraction"]
    assert all(i.source == "fallback" for i in fallback_insights("park"))


class TestInsightExtractor:

    def test_uses_attached_reviews_without_fetching(self, places_client, fake_session):
        place = CandidatePlace(
            place_id="p1", types=["park"],
            reviews=[Review("A", 5, "Great playground for kids of every age and size")],
        )

        insights = InsightExtractor(places_client).extract(place)

        assert insights[0].from_review
        assert fake_session.calls == []

    def test_fetches_reviews_when_none_attached(self, places_client, fake_session):
        fake_session.routes["place/details/json"] = {"status": "OK", "result": {"reviews": [
            {"author_name": "Kim", "rating": 5, "text": "Our children spent hours on the climbing wall"},
        ]}}
        place = CandidatePlace(place_id="p1", types=["museum"])

        insights = InsightExtractor(places_client).extract(place)

        assert [i.text for i in insights] == ["Our children spent hours on the climbing wall"]
        assert fake_session.calls_to("details")[0]["fields"] == "name,reviews,rating,types"

    def test_skips_fetch_when_details_already_fetched(self, places_client, fake_session):
        place = CandidatePlace(place_id="p1", types=["museum"], details_fetched=True)

        insights = InsightExtractor(places_client).extract(place)

        assert [i.text for i in insights] == FALLBACK_INSIGHTS["museum"]
        assert fake_session.calls == []

    def test_unconfigured_key_uses_fallback(self, unconfigured_client, fake_session):
        insights = InsightExtractor(unconfigured_client).extract(CandidatePlace(types=["restaurant"]))

        assert [i.text for i in insights] == FALLBACK_INSIGHTS["restaurant"]
        assert fake_session.calls == []

    def test_lookup_error_uses_fallback(self, places_client, fake_session):
        fake_session.routes["place/details/json"] = {"status": "UNKNOWN_ERROR"}

        insights = InsightExtractor(places_client).extract(CandidatePlace(place_id="p", types=["park"]))

        assert [i.text for i in insights] == FALLBACK_INSIGHTS["park"]

    def test_malformed_review_is_skipped(self, places_client, fake_session):
        fake_session.routes["place/details/json"] = {"status": "OK", "result": {"reviews": [
            {"author_name": "Lee", "rating": "great", "text": "Kids loved it but the rating is text"},
            "not a review",
            {"author_name": "Kim", "rating": 5, "text": "Our children spent hours on the climbing wall"},
        ]}}

        insights = InsightExtractor(places_client).extract(CandidatePlace(place_id="p1", types=["museum"]))

        assert [i.text for i in insights] == ["Our children spent hours on the climbing wall"]
