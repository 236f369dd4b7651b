"""Social sentiment estimate from recent posts on X."""

from __future__ import annotations

import json
import logging
import math
from typing import Any, List

import httpx

from .config import CollectorConfig, ModelConfig
from .model_client import ChatModelClient, parse_json_object

LOGGER = logging.getLogger(__name__)

X_RECENT_SEARCH_URL = "https://api.x.com/2/tweets/search/recent"
MAX_RESULTS = 20
UNAVAILABLE_MESSAGE = "Social sentiment data unavailable."

CLASSIFIER_PROMPT = (
    "You are a sentiment analysis model. You will receive a list of tweets and you need "
    "to classify the sentiment of each tweet as POSITIVE, NEGATIVE, or NEUTRAL. Respond "
    "with a JSON object containing the percentage of positive tweets. The JSON object "
    'should have a single key "positive_percentage".'
)


def positive_percentage(payload: Any) -> int:
    value = payload.get("positive_percentage") if isinstance(payload, dict) else None
    if isinstance(value, str):
        try:
            value = float(value.strip().rstrip("%"))
        except ValueError:
            return 0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    if not math.isfinite(value):
        return 0
    return int(math.floor(value + 0.5))


class SentimentEstimator:
    """Classify a batch of recent posts with the chat model in a single call."""

    def __init__(
        self,
        config: CollectorConfig,
        client: httpx.Client,
        model: ChatModelClient,
        model_config: ModelConfig,
    ) -> None:
        self.config = config
        self.client = client
        self.model = model
        self.model_config = model_config

    def recent_posts(self, topic: str) -> List[str]:
        response = self.client.get(
            X_RECENT_SEARCH_URL,
            params={"query": topic, "max_results": MAX_RESULTS, "tweet.fields": "lang"},
            headers={"Authorization": f"Bearer {self.config.x_bearer_token}"},
            timeout=self.config.timeout,
        )
        response.raise_for_status()
        posts = response.json().get("data") or []
        return [
            post["text"]
            for post in posts
            if post.get("lang") == self.config.sentiment_language and post.get("text")
        ]

    def estimate(self, topic: str) -> str:
        try:
            posts = self.recent_posts(topic)
            if not posts:
                return f"No recent mentions of {topic} on X"
            answer = self.model.complete(
                [
                    {"role": "system", "content": CLASSIFIER_PROMPT},
                    {"role": "user", "content": json.dumps(posts, ensure_ascii=False)},
                ],
                temperature=self.model_config.classification_temperature,
                response_format={"type": "json_object"},
            )
            percent = positive_percentage(parse_json_object(answer))
        except Exception as exc:
            LOGGER.warning("X sentiment failed for %r: %s", topic, exc)
            return UNAVAILABLE_MESSAGE
        return f"{percent}% positive mentions on X in last 24h"


__all__ = ["SentimentEstimator", "positive_percentage"]
