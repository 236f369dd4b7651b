"""Search-trend heuristic built from web search result counts."""

from __future__ import annotations

import logging
import math

import httpx

from .config import CollectorConfig

LOGGER = logging.getLogger(__name__)

SERPER_SEARCH_URL = "https://google.serper.dev/search"
CURRENT_WINDOW = "qdr:w"
PREVIOUS_WINDOW = "qdr:2w"
ORGANIC_WEIGHT = 10
RELATED_WEIGHT = 5


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def growth_percentage(current: int, previous: int) -> int:
    """Week-over-window growth, rounded; a zero baseline counts as no growth."""

    if previous <= 0:
        return 0
    return round_half_up((current - previous) / previous * 100)


def format_trend(query: str, current: int, previous: int) -> str:
    growth = growth_percentage(current, previous)
    if growth > 0:
        return f"'{query}' +{growth}% this week"
    if growth < 0:
        return f"'{query}' {growth}% this week"
    return f"'{query}' stable this week"


class TrendEstimator:
    """Estimate search interest growth for a short query."""

    def __init__(self, config: CollectorConfig, client: httpx.Client) -> None:
        self.config = config
        self.client = client

    def search_volume(self, query: str, window: str) -> int:
        """Weighted organic + related result count for one time window; 0 on failure."""

        try:
            response = self.client.post(
                SERPER_SEARCH_URL,
                json={"q": query, "tbs": window, "gl": "us", "hl": "en", "page": 1},
                headers={
                    "X-API-KEY": self.config.serper_api_key,
                    "Content-Type": "application/json",
                },
                timeout=self.config.timeout,
            )
            response.raise_for_status()
            data = response.json()
            organic = len(data.get("organic") or [])
            related = len(data.get("relatedSearches") or [])
        except Exception as exc:
            LOGGER.warning("Search volume fetch failed for %r (%s): %s", query, window, exc)
            return 0
        return organic * ORGANIC_WEIGHT + related * RELATED_WEIGHT

    def estimate(self, query: str) -> str:
        try:
            current = self.search_volume(query, CURRENT_WINDOW)
            previous = self.search_volume(query, PREVIOUS_WINDOW)
            return format_trend(query, current, previous)
        except Exception as exc:
            LOGGER.warning("Trend lookup failed for %r: %s", query, exc)
            return f"'{query}' trend unavailable."


__all__ = ["TrendEstimator", "format_trend", "growth_percentage"]
