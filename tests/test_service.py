import json
import tempfile
import threading
import unittest
from pathlib import Path
from unittest import mock

import httpx
from fastapi.testclient import TestClient

from news_enrichment import storage
from news_enrichment.config import EnrichmentConfig, IngestionConfig
from news_enrichment.ingestion import NewsIngestor, normalize_timestamp, publisher_from_url
from news_enrichment.models import Context, EnrichedRecord, GeoLocation
from news_enrichment.server import create_app
from news_enrichment.service import EnrichmentService
from news_enrichment.storage import JsonRecordStore, RecordNotFound

from tests.fakes import failing_client, make_item, mock_client


class StubOrchestrator:
    def __init__(self, produce=True):
        self.produce = produce
        self.items = []
        self.closed = False

    def enrich(self, item):
        self.items.append(item)
        if not self.produce:
            return None
        return EnrichedRecord(
            item=item,
            summary="Summary.",
            tags=["#a", "#b", "#c"],
            relevance_score=0.7,
            context=Context(geo=GeoLocation(lat=1.0, lng=2.0)),
        )

    def close(self):
        self.closed = True


class StubIngestor:
    def __init__(self, items):
        self.items = items

    def fetch(self):
        return list(self.items)


class TestJsonRecordStore(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "records.json"

    def tearDown(self):
        self._tmp.cleanup()

    def test_store_assigns_id_and_persists(self):
        store = JsonRecordStore(self.path)
        stored = store.store(EnrichedRecord(item=make_item(), summary="s"))

        self.assertTrue(stored["id"])
        self.assertIn("ingested_at", stored)
        self.assertEqual(store.get(stored["id"]), stored)

        reloaded = JsonRecordStore(self.path)
        self.assertEqual(reloaded.list_records(), [stored])

    def test_existing_id_is_kept(self):
        store = JsonRecordStore(self.path)
        stored = store.store(EnrichedRecord(item=make_item(id="fixed")))
        self.assertEqual(stored["id"], "fixed")

    def test_unknown_id_raises(self):
        with self.assertRaises(RecordNotFound):
            JsonRecordStore(self.path).get("missing")

    def test_invalid_entries_are_skipped_on_load(self):
        good = EnrichedRecord(item=make_item(id="ok")).to_dict()
        self.path.write_text(json.dumps({"records": [good, {"title": "no id or body"}]}))
        self.assertEqual([r["id"] for r in JsonRecordStore(self.path).list_records()], ["ok"])

    def test_unexpected_file_layout_is_ignored(self):
        self.path.write_text(json.dumps([{"id": "x"}]))
        self.assertEqual(JsonRecordStore(self.path).list_records(), [])

    def test_concurrent_writers_do_not_lose_records(self):
        store = JsonRecordStore(self.path)
        real_dumps = json.dumps
        first_writer_saving = threading.Event()
        second_writer_done = threading.Event()

        def slow_dumps(*args, **kwargs):
            if threading.current_thread().name == "writer-a":
                first_writer_saving.set()
                second_writer_done.wait(timeout=0.5)
            return real_dumps(*args, **kwargs)

        def write_b():
            store.store(EnrichedRecord(item=make_item(id="b")))
            second_writer_done.set()

        with mock.patch.object(storage.json, "dumps", slow_dumps):
            writer_a = threading.Thread(
                target=store.store,
                args=(EnrichedRecord(item=make_item(id="a")),),
                name="writer-a",
            )
            writer_a.start()
            self.assertTrue(first_writer_saving.wait(timeout=2))
            writer_b = threading.Thread(target=write_b, name="writer-b")
            writer_b.start()
            writer_a.join(timeout=5)
            writer_b.join(timeout=5)

        reloaded = sorted(r["id"] for r in JsonRecordStore(self.path).list_records())
        self.assertEqual(reloaded, ["a", "b"])


class TestEnrichmentService(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.store = JsonRecordStore(Path(self._tmp.name) / "records.json")

    def tearDown(self):
        self._tmp.cleanup()

    def test_none_results_are_not_forwarded(self):
        service = EnrichmentService(EnrichmentConfig(), StubOrchestrator(produce=False), self.store)
        self.assertIsNone(service.process(make_item()))
        self.assertEqual(self.store.list_records(), [])

    def test_refresh_processes_every_ingested_item(self):
        items = [make_item(title="one"), make_item(title="two")]
        orchestrator = StubOrchestrator()
        service = EnrichmentService(
            EnrichmentConfig(), orchestrator, self.store, StubIngestor(items)
        )
        self.assertEqual(service.refresh(), 2)
        self.assertEqual([i.title for i in orchestrator.items], ["one", "two"])
        self.assertEqual(len(self.store.list_records()), 2)

    def test_stop_closes_orchestrator(self):
        orchestrator = StubOrchestrator()
        service = EnrichmentService(EnrichmentConfig(), orchestrator, self.store)
        service.start()
        service.stop()
        self.assertTrue(orchestrator.closed)


class TestServer(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.store = JsonRecordStore(Path(self._tmp.name) / "records.json")
        self.orchestrator = StubOrchestrator()
        self.service = EnrichmentService(
            EnrichmentConfig(), self.orchestrator, self.store, StubIngestor([make_item()])
        )
        self.client = TestClient(create_app(self.service))

    def tearDown(self):
        self._tmp.cleanup()

    def test_health(self):
        self.assertEqual(self.client.get("/healthz").json(), {"status": "ok"})

    def test_enrich_then_read_back(self):
        response = self.client.post(
            "/enrich",
            json={
                "title": "Drought",
                "body": "Long body",
                "source_url": "https://example.com/a",
                "publisher": "Example",
                "published_at": "2024-05-01T08:00:00Z",
            },
        )
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["summary"], "Summary.")
        self.assertEqual(body["context"]["geo"]["map_url"].split("query=")[1], "1.0,2.0&zoom=15")

        listed = self.client.get("/news").json()
        self.assertEqual([r["id"] for r in listed], [body["id"]])
        self.assertEqual(self.client.get(f"/news/{body['id']}").json()["title"], "Drought")

    def test_unknown_record_is_404(self):
        self.assertEqual(self.client.get("/news/nope").status_code, 404)

    def test_blank_title_is_rejected(self):
        response = self.client.post("/enrich", json={"title": "  ", "body": "text"})
        self.assertEqual(response.status_code, 422)

    def test_failed_enrichment_is_502(self):
        self.orchestrator.produce = False
        response = self.client.post("/enrich", json={"title": "t", "body": "b"})
        self.assertEqual(response.status_code, 502)

    def test_ingest_runs_a_refresh(self):
        self.assertEqual(self.client.post("/ingest").json(), {"processed": 1})


class TestNewsIngestor(unittest.TestCase):
    def test_articles_are_mapped_and_short_bodies_dropped(self):
        articles = [
            {
                "title": "Long story",
                "content": "x" * 250,
                "url": "https://www.bbc.co.uk/news/a",
                "source": {"name": None},
                "publishedAt": "2024-05-01T10:00:00+02:00",
            },
            {
                "title": "Short story",
                "content": "too short",
                "url": "https://example.com/b",
                "source": {"name": "Example"},
                "publishedAt": "2024-05-01T10:00:00Z",
            },
        ]

        def handler(request: httpx.Request) -> httpx.Response:
            self.assertEqual(request.url.params["q"], "africa")
            self.assertEqual(request.url.params["apiKey"], "key")
            return httpx.Response(200, json={"articles": articles})

        items = NewsIngestor(IngestionConfig(api_key="key"), mock_client(handler)).fetch()

        self.assertEqual(len(items), 1)
        item = items[0]
        self.assertEqual(item.title, "Long story")
        self.assertEqual(item.publisher, "bbc.co.uk")
        self.assertEqual(item.published_at, "2024-05-01T08:00:00Z")
        self.assertEqual(item.source_url, "https://www.bbc.co.uk/news/a")

    def test_fetch_failure_yields_no_items(self):
        self.assertEqual(NewsIngestor(IngestionConfig(), failing_client()).fetch(), [])

    def test_helpers(self):
        self.assertEqual(publisher_from_url("https://news.example.com/x"), "example.com")
        self.assertEqual(normalize_timestamp("not a date"), "not a date")
        self.assertEqual(normalize_timestamp(None), "")


if __name__ == "__main__":
    unittest.main()
