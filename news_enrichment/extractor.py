"""Model-backed extraction of summary, tags, relevance and routing hints."""

from __future__ import annotations

import logging

from .config import ModelConfig
from .errors import ModelOutputMalformed, ModelTransportError
from .model_client import ChatModelClient, parse_json_object
from .models import EnrichmentResult, Extraction, ExtractionStatus, NewsItem

LOGGER = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an AI content enrichment model for African news. "
    "Respond in strict JSON format. All property names and string values must be "
    "enclosed in double quotes. The fields are: "
    "summary, "
    "tags (3-5 hashtags), "
    "relevance_score (0.0-1.0, African audience relevance), "
    "media_justification (string), "
    "wikipedia_search_term (a short, 1-3 word keyword/phrase from the text for a Wikipedia search), "
    "location (a location name from the text), "
    "search_trend_query (a short, 1-3 word keyword/phrase from the text for a Google search "
    "trend analysis), "
    "social_sentiment_query (a short, 1-3 word keyword/phrase from the text for a social "
    "sentiment analysis on X)"
)

REPAIR_PROMPT = (
    "You are a JSON fixer. You will receive a string that is not valid JSON and you need "
    "to fix it. Respond only with the corrected JSON."
)


class EnrichmentExtractor:
    """Ask the model for structured enrichment, repairing bad JSON at most once."""

    def __init__(self, model: ChatModelClient, config: ModelConfig) -> None:
        self.model = model
        self.config = config

    def extract(self, item: NewsItem) -> Extraction:
        # Transport failures here are fatal for the pipeline and propagate.
        raw = self.model.complete(
            [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": f"Title: {item.title}\nBody: {item.body}"},
            ],
            temperature=self.config.extraction_temperature,
        )
        try:
            payload = parse_json_object(raw)
        except ModelOutputMalformed as exc:
            LOGGER.warning("Extraction for %r returned malformed JSON: %s", item.title, exc)
            return self._repair(item, raw)
        return Extraction(
            status=ExtractionStatus.VALID,
            result=EnrichmentResult.from_payload(payload),
            model_calls=1,
        )

    def _repair(self, item: NewsItem, raw: str) -> Extraction:
        try:
            fixed = self.model.complete(
                [
                    {"role": "system", "content": REPAIR_PROMPT},
                    {"role": "user", "content": f"Fix this JSON string: {raw}"},
                ],
                temperature=self.config.repair_temperature,
            )
        except ModelTransportError as exc:
            LOGGER.warning("JSON repair call failed for %r: %s", item.title, exc)
            return Extraction.empty()

        try:
            payload = parse_json_object(fixed)
        except ModelOutputMalformed as exc:
            LOGGER.error(
                "Repaired JSON for %r is still malformed (%s); continuing without enrichment",
                item.title,
                exc,
            )
            LOGGER.debug("Problematic string: %s | repaired string: %s", raw, fixed)
            return Extraction.empty()

        LOGGER.info("Repaired extraction JSON for %r", item.title)
        return Extraction(
            status=ExtractionStatus.REPAIRED,
            result=EnrichmentResult.from_payload(payload),
            model_calls=2,
        )


__all__ = ["EnrichmentExtractor", "REPAIR_PROMPT", "SYSTEM_PROMPT"]
