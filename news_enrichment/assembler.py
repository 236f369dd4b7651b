"""Fold extraction and augmentation outputs onto the base news item."""

from __future__ import annotations

from typing import Optional

from .models import (
    ContextBuilder,
    EnrichedRecord,
    EnrichmentResult,
    GeoLocation,
    MediaAsset,
    NewsItem,
)


class ContextAssembler:
    """Build the final record in a fixed merge order.

    base <- extraction (summary, tags, relevance) <- media <- snippet <- geo
    <- trend <- sentiment. Routing hints are dropped here. The context is only
    created once one of the augmentations has something to contribute.
    """

    def assemble(
        self,
        base: NewsItem,
        extraction: EnrichmentResult,
        media: Optional[MediaAsset] = None,
        snippet: Optional[str] = None,
        geo: Optional[GeoLocation] = None,
        trend: Optional[str] = None,
        sentiment: Optional[str] = None,
    ) -> EnrichedRecord:
        context = ContextBuilder()
        if snippet:
            context.with_snippet(snippet)
        if geo is not None:
            context.with_geo(geo)
        if trend:
            context.with_trend(trend)
        if sentiment:
            context.with_sentiment(sentiment)

        return EnrichedRecord(
            item=base,
            summary=extraction.summary,
            tags=list(extraction.tags) if extraction.tags is not None else None,
            relevance_score=extraction.relevance_score,
            media=media,
            context=context.build(),
        )


__all__ = ["ContextAssembler"]
