"""Pipeline orchestrator tying together extraction, augmentation and assembly."""

from __future__ import annotations

import concurrent.futures as futures
import logging
from typing import Any, Callable, Dict, Optional

import httpx

from .assembler import ContextAssembler
from .config import EnrichmentConfig
from .extractor import EnrichmentExtractor
from .geocoder import GeocodeThrottle, Geocoder
from .knowledge import KnowledgeSnippetFetcher
from .media import MediaResolver
from .model_client import ChatModelClient
from .models import EnrichedRecord, EnrichmentResult, GeoLocation, NewsItem
from .sentiment import SentimentEstimator
from .trends import TrendEstimator

LOGGER = logging.getLogger(__name__)


class EnrichmentOrchestrator:
    """Run extraction, then the augmentation lookups concurrently, then assembly.

    A failure inside any lookup only removes that lookup's contribution. A
    failure of the extraction call itself ends the pipeline with ``None``.
    """

    def __init__(
        self,
        extractor: EnrichmentExtractor,
        media: MediaResolver,
        knowledge: KnowledgeSnippetFetcher,
        geocoder: Geocoder,
        trends: TrendEstimator,
        sentiment: SentimentEstimator,
        throttle: GeocodeThrottle,
        assembler: Optional[ContextAssembler] = None,
        max_workers: int = 5,
    ) -> None:
        self.extractor = extractor
        self.media = media
        self.knowledge = knowledge
        self.geocoder = geocoder
        self.trends = trends
        self.sentiment = sentiment
        self.throttle = throttle
        self.assembler = assembler or ContextAssembler()
        self.max_workers = max_workers
        self._client: Optional[httpx.Client] = None

    @classmethod
    def from_config(
        cls,
        config: EnrichmentConfig,
        client: Optional[httpx.Client] = None,
    ) -> "EnrichmentOrchestrator":
        owned = client is None
        http = client or httpx.Client(timeout=config.collectors.timeout)
        model = ChatModelClient(config.model, http)
        orchestrator = cls(
            extractor=EnrichmentExtractor(model, config.model),
            media=MediaResolver(config.collectors, http),
            knowledge=KnowledgeSnippetFetcher(config.collectors, http),
            geocoder=Geocoder(config.collectors, http),
            trends=TrendEstimator(config.collectors, http),
            sentiment=SentimentEstimator(config.collectors, http, model, config.model),
            throttle=GeocodeThrottle(config.collectors.geocode_delay_seconds),
            max_workers=config.max_workers,
        )
        if owned:
            orchestrator._client = http
        return orchestrator

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def _geocode(self, location: str) -> Optional[GeoLocation]:
        self.throttle.wait()
        return self.geocoder.geocode(location)

    def _plan(self, item: NewsItem, result: EnrichmentResult) -> Dict[str, Callable[[], Any]]:
        tasks: Dict[str, Callable[[], Any]] = {}
        if result.media_justification:
            justification = result.media_justification
            tasks["media"] = lambda: self.media.resolve(item.title, justification)
        if result.wikipedia_query:
            term = result.wikipedia_query
            tasks["snippet"] = lambda: self.knowledge.fetch(term)
        if result.location:
            location = result.location
            tasks["geo"] = lambda: self._geocode(location)
        if result.trend_query:
            query = result.trend_query
            tasks["trend"] = lambda: self.trends.estimate(query)
        if result.sentiment_query:
            topic = result.sentiment_query
            tasks["sentiment"] = lambda: self.sentiment.estimate(topic)
        return tasks

    def _collect(self, tasks: Dict[str, Callable[[], Any]]) -> Dict[str, Any]:
        if not tasks:
            return {}
        collected: Dict[str, Any] = {}
        workers = max(1, min(self.max_workers, len(tasks)))
        with futures.ThreadPoolExecutor(max_workers=workers) as pool:
            pending = {pool.submit(task): name for name, task in tasks.items()}
            for fut in futures.as_completed(pending):
                name = pending[fut]
                try:
                    collected[name] = fut.result()
                except Exception:
                    LOGGER.warning("Augmentation %s failed", name, exc_info=True)
                    collected[name] = None
        return collected

    def enrich(self, item: NewsItem) -> Optional[EnrichedRecord]:
        """Enrich one item; ``None`` means there is nothing to forward."""

        try:
            extraction = self.extractor.extract(item)
        except Exception:
            LOGGER.exception("Error processing news %r", item.title)
            return None
        LOGGER.debug("Extraction for %r finished as %s", item.title, extraction.status.value)

        result = extraction.result
        collected = self._collect(self._plan(item, result))

        try:
            return self.assembler.assemble(
                item,
                result,
                media=collected.get("media"),
                snippet=collected.get("snippet"),
                geo=collected.get("geo"),
                trend=collected.get("trend"),
                sentiment=collected.get("sentiment"),
            )
        except Exception:
            LOGGER.exception("Assembling enriched record for %r failed", item.title)
            return None


__all__ = ["EnrichmentOrchestrator"]
