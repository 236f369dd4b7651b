"""Entrypoint for running the news enrichment service."""

from __future__ import annotations

import logging

import httpx
import uvicorn

from .config import load_config
from .ingestion import NewsIngestor
from .orchestrator import EnrichmentOrchestrator
from .server import create_app
from .service import EnrichmentService
from .storage import JsonRecordStore


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    config = load_config()

    if not config.model.api_key:
        logging.warning("OPENROUTER_API_KEY is not set; extraction calls will be rejected")
    logging.info("Using model %s at %s", config.model.model, config.model.base_url)

    orchestrator = EnrichmentOrchestrator.from_config(config)
    ingestor = None
    if config.ingestion.api_key:
        ingestor = NewsIngestor(config.ingestion, httpx.Client(timeout=config.ingestion.timeout))
    else:
        logging.info("NEWS_API_KEY is not set; periodic ingestion disabled")

    store = JsonRecordStore(config.store_path)
    service = EnrichmentService(config, orchestrator, store, ingestor)
    service.start()

    app = create_app(service)

    logging.info("Starting API server on %s:%s", config.api_host, config.api_port)
    try:
        uvicorn.run(app, host=config.api_host, port=config.api_port)
    finally:
        service.stop()
        if ingestor is not None:
            ingestor.client.close()


if __name__ == "__main__":  # pragma: no cover
    main()
