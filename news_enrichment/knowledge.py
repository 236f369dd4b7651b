"""Short encyclopedic snippets from the Wikipedia query API."""

from __future__ import annotations

import logging
import re
from typing import Optional

import httpx

from .config import CollectorConfig

LOGGER = logging.getLogger(__name__)

WIKIPEDIA_API_URL = "https://en.wikipedia.org/w/api.php"
SNIPPET_CHARS = 500
MISSING_PAGE_ID = "-1"
WS_RE = re.compile(r"\s+")


class KnowledgeSnippetFetcher:
    def __init__(self, config: CollectorConfig, client: httpx.Client) -> None:
        self.config = config
        self.client = client

    def fetch(self, term: str) -> Optional[str]:
        """Return the intro extract for ``term``, or ``None`` when there is none."""

        try:
            response = self.client.get(
                WIKIPEDIA_API_URL,
                params={
                    "action": "query",
                    "format": "json",
                    "titles": term,
                    "prop": "extracts",
                    "exintro": 1,
                    "explaintext": 1,
                    "exchars": SNIPPET_CHARS,
                    "redirects": 1,
                },
                timeout=self.config.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except Exception as exc:
            LOGGER.warning("Wikipedia lookup failed for %r: %s", term, exc)
            return None

        try:
            extract = self._page_extract(data)
        except (AttributeError, KeyError, TypeError) as exc:
            LOGGER.warning("Unexpected Wikipedia payload for %r: %s", term, exc)
            return None
        if extract is None:
            LOGGER.debug("No Wikipedia page for %r", term)
            return None
        snippet = WS_RE.sub(" ", extract.strip())
        return snippet or None

    @staticmethod
    def _page_extract(data: dict) -> Optional[str]:
        error = data.get("error")
        if error:
            info = error.get("info") if isinstance(error, dict) else error
            LOGGER.warning("Wikipedia API error: %s", info)
            return None
        pages = (data.get("query") or {}).get("pages")
        if not pages:
            return None
        page_id = next(iter(pages))
        if page_id == MISSING_PAGE_ID:
            return None
        extract = (pages[page_id] or {}).get("extract")
        if not isinstance(extract, str):
            return None
        return extract


__all__ = ["KnowledgeSnippetFetcher"]
