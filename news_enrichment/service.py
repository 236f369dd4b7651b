"""Core enrichment service: ingest, enrich, store."""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Dict, Optional

from .config import EnrichmentConfig
from .ingestion import NewsIngestor
from .models import NewsItem
from .orchestrator import EnrichmentOrchestrator
from .storage import RecordStore

LOGGER = logging.getLogger(__name__)


class EnrichmentService:
    """Feed news items through the orchestrator and forward results to storage."""

    def __init__(
        self,
        config: EnrichmentConfig,
        orchestrator: EnrichmentOrchestrator,
        store: RecordStore,
        ingestor: Optional[NewsIngestor] = None,
    ) -> None:
        self.config = config
        self.orchestrator = orchestrator
        self.store = store
        self.ingestor = ingestor
        self._stop_event = threading.Event()
        self._fetch_thread: Optional[threading.Thread] = None

    def start(self) -> None:
        if self.ingestor is None:
            LOGGER.info("No ingestor configured; serving on-demand enrichment only")
            return
        LOGGER.info("Starting news enrichment service")
        self._stop_event.clear()
        self._fetch_thread = threading.Thread(target=self._fetch_loop, daemon=True)
        self._fetch_thread.start()

    def stop(self) -> None:
        LOGGER.info("Stopping news enrichment service")
        self._stop_event.set()
        if self._fetch_thread is not None:
            self._fetch_thread.join(timeout=5)
            self._fetch_thread = None
        self.orchestrator.close()

    def _fetch_loop(self) -> None:
        while not self._stop_event.is_set():
            start = time.time()
            try:
                self.refresh()
            except Exception as exc:  # pragma: no cover - resilience
                LOGGER.exception("Periodic news refresh failed: %s", exc)
            elapsed = time.time() - start
            wait_time = max(0.0, self.config.ingestion.interval_seconds - elapsed)
            self._stop_event.wait(wait_time)

    def process(self, item: NewsItem) -> Optional[Dict[str, Any]]:
        """Enrich one item and store it; ``None`` when nothing was produced."""

        record = self.orchestrator.enrich(item)
        if record is None:
            LOGGER.info("No enriched record for %r; nothing forwarded", item.title)
            return None
        return self.store.store(record)

    def refresh(self) -> int:
        if self.ingestor is None:
            return 0
        LOGGER.info("Refreshing news items")
        processed = 0
        for item in self.ingestor.fetch():
            if self.process(item) is not None:
                processed += 1
        LOGGER.info("Stored %d enriched records", processed)
        return processed


__all__ = ["EnrichmentService"]
