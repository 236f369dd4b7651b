import json
import unittest

from news_enrichment.assembler import ContextAssembler
from news_enrichment.models import (
    ContextBuilder,
    EnrichedRecord,
    EnrichmentResult,
    GeoLocation,
    MediaAsset,
    build_map_url,
)

from tests.fakes import make_item


class TestEnrichmentResult(unittest.TestCase):
    def test_maps_wire_keys_to_routing_hints(self):
        result = EnrichmentResult.from_payload(
            {
                "summary": " Drought worsens. ",
                "tags": ["#Kenya", "#Drought", "#Maize"],
                "relevance_score": 0.8,
                "media_justification": "Shows the fields",
                "wikipedia_search_term": "Rift Valley",
                "location": "Nakuru",
                "search_trend_query": "Kenya drought",
                "social_sentiment_query": "maize prices",
            }
        )
        self.assertEqual(result.summary, "Drought worsens.")
        self.assertEqual(result.wikipedia_query, "Rift Valley")
        self.assertEqual(result.location, "Nakuru")
        self.assertEqual(result.trend_query, "Kenya drought")
        self.assertEqual(result.sentiment_query, "maize prices")
        self.assertTrue(result.has_routing_hints())

    def test_relevance_score_is_clamped_and_must_be_finite(self):
        self.assertEqual(EnrichmentResult.from_payload({"relevance_score": 1.7}).relevance_score, 1.0)
        self.assertEqual(EnrichmentResult.from_payload({"relevance_score": -3}).relevance_score, 0.0)
        nan = json.loads('{"relevance_score": NaN}')
        self.assertIsNone(EnrichmentResult.from_payload(nan).relevance_score)
        self.assertIsNone(EnrichmentResult.from_payload({"relevance_score": "high"}).relevance_score)
        self.assertIsNone(EnrichmentResult.from_payload({"relevance_score": True}).relevance_score)

    def test_tags_truncated_to_five_and_dropped_below_three(self):
        many = EnrichmentResult.from_payload({"tags": ["a", "b", "c", "d", "e", "f", "g"]})
        self.assertEqual(many.tags, ["a", "b", "c", "d", "e"])
        few = EnrichmentResult.from_payload({"tags": ["a", " ", "b"]})
        self.assertIsNone(few.tags)
        self.assertIsNone(EnrichmentResult.from_payload({"tags": "#a #b #c"}).tags)

    def test_blank_hints_are_ignored(self):
        result = EnrichmentResult.from_payload({"location": "   ", "wikipedia_search_term": 42})
        self.assertFalse(result.has_routing_hints())
        self.assertTrue(result.is_empty())


class TestContextBuilder(unittest.TestCase):
    def test_nothing_written_builds_no_context(self):
        self.assertIsNone(ContextBuilder().build())

    def test_fields_cannot_be_overwritten(self):
        builder = ContextBuilder().with_trend("'x' stable this week")
        with self.assertRaises(ValueError):
            builder.with_trend("'x' +5% this week")


class TestGeoLocation(unittest.TestCase):
    def test_map_url_is_derived_from_coordinates(self):
        geo = GeoLocation(lat=-0.3031, lng=36.08)
        self.assertEqual(geo.map_url, build_map_url(-0.3031, 36.08))
        self.assertEqual(
            geo.to_dict()["map_url"],
            "https://www.google.com/maps/search/?api=1&query=-0.3031,36.08&zoom=15",
        )


class TestEnrichedRecord(unittest.TestCase):
    def test_routing_hints_never_reach_the_record(self):
        result = EnrichmentResult.from_payload(
            {
                "summary": "s",
                "tags": ["a", "b", "c"],
                "relevance_score": 0.5,
                "location": "Nairobi",
                "wikipedia_search_term": "Nairobi",
            }
        )
        data = ContextAssembler().assemble(make_item(), result).to_dict()
        for key in ("location", "wikipedia_search_term", "wikipedia_query", "trend_query"):
            self.assertNotIn(key, data)
        self.assertNotIn("context", data)
        self.assertNotIn("media", data)

    def test_from_dict_restores_stored_record(self):
        record = ContextAssembler().assemble(
            make_item(id="abc"),
            EnrichmentResult(summary="s", tags=["a", "b", "c"], relevance_score=0.4),
            media=MediaAsset(justification="j", related_video_url="https://www.youtube.com/watch?v=1"),
            snippet="Kenya is a country.",
            geo=GeoLocation(lat=1.0, lng=2.0),
        )
        restored = EnrichedRecord.from_dict(record.to_dict())
        self.assertEqual(restored, record)


if __name__ == "__main__":
    unittest.main()
