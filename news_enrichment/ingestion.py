"""Pull raw news items from NewsAPI."""

from __future__ import annotations

import logging
from datetime import timezone
from typing import Any, Dict, List, Optional

import httpx
import tldextract
from dateutil import parser as dtparse

from .config import IngestionConfig
from .models import NewsItem

LOGGER = logging.getLogger(__name__)

NEWS_API_URL = "https://newsapi.org/v2/everything"
# Bundled public suffix snapshot only; no network fetch on first use.
_TLD_EXTRACT = tldextract.TLDExtract(suffix_list_urls=())


def normalize_timestamp(value: Optional[str]) -> str:
    """Return ``value`` as an ISO-8601 UTC string, or unchanged if unparseable."""

    if not value:
        return ""
    try:
        dt = dtparse.parse(str(value))
    except (ValueError, OverflowError):
        return str(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def publisher_from_url(url: str) -> str:
    ext = _TLD_EXTRACT(url)
    return ".".join(part for part in [ext.domain, ext.suffix] if part)


class NewsIngestor:
    """Fetch a small batch of articles and map them onto :class:`NewsItem`."""

    def __init__(self, config: IngestionConfig, client: httpx.Client) -> None:
        self.config = config
        self.client = client

    def _map_article(self, article: Dict[str, Any]) -> Optional[NewsItem]:
        body = article.get("content") or ""
        title = article.get("title") or ""
        if not title or len(body) < self.config.min_body_chars:
            return None
        url = article.get("url") or ""
        source = article.get("source") or {}
        publisher = source.get("name") or publisher_from_url(url)
        return NewsItem(
            title=title,
            body=body,
            source_url=url,
            publisher=publisher,
            published_at=normalize_timestamp(article.get("publishedAt")),
        )

    def fetch(self) -> List[NewsItem]:
        try:
            response = self.client.get(
                NEWS_API_URL,
                params={"q": self.config.query, "apiKey": self.config.api_key},
                timeout=self.config.timeout,
            )
            response.raise_for_status()
            articles = response.json().get("articles") or []
        except Exception as exc:
            LOGGER.warning("News fetch failed: %s", exc)
            return []

        items: List[NewsItem] = []
        for article in articles[: self.config.limit]:
            item = self._map_article(article)
            if item is not None:
                items.append(item)
        LOGGER.info("Ingested %d of %d fetched articles", len(items), len(articles))
        return items


__all__ = ["NewsIngestor", "normalize_timestamp", "publisher_from_url"]
