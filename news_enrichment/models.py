"""Core data models for the enrichment pipeline."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

MAP_ZOOM = 15
MIN_TAGS = 3
MAX_TAGS = 5


@dataclass(frozen=True)
class NewsItem:
    """A raw news item as delivered by ingestion."""

    title: str
    body: str
    source_url: str
    publisher: str
    published_at: str
    id: Optional[str] = None
    ingested_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.id is not None:
            data["id"] = self.id
        data.update(
            {
                "title": self.title,
                "body": self.body,
                "source_url": self.source_url,
                "publisher": self.publisher,
                "published_at": self.published_at,
            }
        )
        if self.ingested_at is not None:
            data["ingested_at"] = self.ingested_at
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NewsItem":
        return cls(
            title=data["title"],
            body=data["body"],
            source_url=data.get("source_url", ""),
            publisher=data.get("publisher", ""),
            published_at=data.get("published_at", ""),
            id=data.get("id"),
            ingested_at=data.get("ingested_at"),
        )


def _clean_hint(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    cleaned = value.strip()
    return cleaned or None


def _clean_score(value: Any) -> Optional[float]:
    # bool is an int subclass; "true" is not a score.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    score = float(value)
    if not math.isfinite(score):
        return None
    return min(max(score, 0.0), 1.0)


def _clean_tags(value: Any) -> Optional[List[str]]:
    if not isinstance(value, list):
        return None
    tags = [tag.strip() for tag in value if isinstance(tag, str) and tag.strip()]
    tags = tags[:MAX_TAGS]
    if len(tags) < MIN_TAGS:
        return None
    return tags


@dataclass
class EnrichmentResult:
    """Structured fields derived from the chat model.

    ``summary``, ``tags`` and ``relevance_score`` end up on the record. The
    remaining fields are routing hints for the augmentation lookups and are
    never persisted.
    """

    summary: Optional[str] = None
    tags: Optional[List[str]] = None
    relevance_score: Optional[float] = None
    media_justification: Optional[str] = None
    wikipedia_query: Optional[str] = None
    location: Optional[str] = None
    trend_query: Optional[str] = None
    sentiment_query: Optional[str] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "EnrichmentResult":
        """Map the model's JSON keys onto the result, dropping unusable values."""

        summary = payload.get("summary")
        return cls(
            summary=summary.strip() if isinstance(summary, str) and summary.strip() else None,
            tags=_clean_tags(payload.get("tags")),
            relevance_score=_clean_score(payload.get("relevance_score")),
            media_justification=_clean_hint(payload.get("media_justification")),
            wikipedia_query=_clean_hint(payload.get("wikipedia_search_term")),
            location=_clean_hint(payload.get("location")),
            trend_query=_clean_hint(payload.get("search_trend_query")),
            sentiment_query=_clean_hint(payload.get("social_sentiment_query")),
        )

    def has_routing_hints(self) -> bool:
        return any(
            (
                self.media_justification,
                self.wikipedia_query,
                self.location,
                self.trend_query,
                self.sentiment_query,
            )
        )

    def is_empty(self) -> bool:
        return (
            self.summary is None
            and self.tags is None
            and self.relevance_score is None
            and not self.has_routing_hints()
        )


class ExtractionStatus(str, Enum):
    VALID = "valid"
    REPAIRED = "repaired"
    EMPTY = "empty"


@dataclass
class Extraction:
    """Outcome of an extraction: how it was obtained plus the parsed fields."""

    status: ExtractionStatus
    result: EnrichmentResult = field(default_factory=EnrichmentResult)
    model_calls: int = 1

    @classmethod
    def empty(cls, model_calls: int = 2) -> "Extraction":
        return cls(status=ExtractionStatus.EMPTY, result=EnrichmentResult(), model_calls=model_calls)


@dataclass(frozen=True)
class MediaAsset:
    justification: str
    featured_image_url: Optional[str] = None
    related_video_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.featured_image_url:
            data["featured_image_url"] = self.featured_image_url
        if self.related_video_url:
            data["related_video_url"] = self.related_video_url
        data["media_justification"] = self.justification
        return data


def build_map_url(lat: float, lng: float, zoom: int = MAP_ZOOM) -> str:
    """Return the map link for a coordinate pair."""

    return f"https://www.google.com/maps/search/?api=1&query={lat},{lng}&zoom={zoom}"


@dataclass(frozen=True)
class GeoLocation:
    lat: float
    lng: float

    @property
    def map_url(self) -> str:
        return build_map_url(self.lat, self.lng)

    def to_dict(self) -> Dict[str, Any]:
        return {"lat": self.lat, "lng": self.lng, "map_url": self.map_url}


@dataclass(frozen=True)
class Context:
    """Successful augmentation outputs attached to a record."""

    wikipedia_snippet: Optional[str] = None
    geo: Optional[GeoLocation] = None
    search_trend: Optional[str] = None
    social_sentiment: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.wikipedia_snippet is not None:
            data["wikipedia_snippet"] = self.wikipedia_snippet
        if self.geo is not None:
            data["geo"] = self.geo.to_dict()
        if self.search_trend is not None:
            data["search_trend"] = self.search_trend
        if self.social_sentiment is not None:
            data["social_sentiment"] = self.social_sentiment
        return data


class ContextBuilder:
    """Accumulate context fields one at a time; nothing exists until a write."""

    def __init__(self) -> None:
        self._fields: Dict[str, Any] = {}

    def _set(self, name: str, value: Any) -> "ContextBuilder":
        if name in self._fields:
            raise ValueError(f"context field {name!r} is already set")
        self._fields[name] = value
        return self

    def with_snippet(self, snippet: str) -> "ContextBuilder":
        return self._set("wikipedia_snippet", snippet)

    def with_geo(self, geo: GeoLocation) -> "ContextBuilder":
        return self._set("geo", geo)

    def with_trend(self, trend: str) -> "ContextBuilder":
        return self._set("search_trend", trend)

    def with_sentiment(self, sentiment: str) -> "ContextBuilder":
        return self._set("social_sentiment", sentiment)

    def build(self) -> Optional[Context]:
        if not self._fields:
            return None
        return Context(**self._fields)


@dataclass(frozen=True)
class EnrichedRecord:
    """The base item plus everything enrichment produced for it."""

    item: NewsItem
    summary: Optional[str] = None
    tags: Optional[List[str]] = None
    relevance_score: Optional[float] = None
    media: Optional[MediaAsset] = None
    context: Optional[Context] = None

    def to_dict(self) -> Dict[str, Any]:
        data = self.item.to_dict()
        if self.summary is not None:
            data["summary"] = self.summary
        if self.tags is not None:
            data["tags"] = list(self.tags)
        if self.relevance_score is not None:
            data["relevance_score"] = self.relevance_score
        if self.media is not None:
            data["media"] = self.media.to_dict()
        if self.context is not None:
            data["context"] = self.context.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EnrichedRecord":
        media = None
        raw_media = data.get("media")
        if raw_media:
            media = MediaAsset(
                justification=raw_media.get("media_justification", ""),
                featured_image_url=raw_media.get("featured_image_url") or None,
                related_video_url=raw_media.get("related_video_url") or None,
            )
        context = None
        raw_context = data.get("context")
        if raw_context:
            builder = ContextBuilder()
            if raw_context.get("wikipedia_snippet"):
                builder.with_snippet(raw_context["wikipedia_snippet"])
            raw_geo = raw_context.get("geo")
            if raw_geo:
                builder.with_geo(GeoLocation(lat=float(raw_geo["lat"]), lng=float(raw_geo["lng"])))
            if raw_context.get("search_trend"):
                builder.with_trend(raw_context["search_trend"])
            if raw_context.get("social_sentiment"):
                builder.with_sentiment(raw_context["social_sentiment"])
            context = builder.build()
        tags = data.get("tags")
        return cls(
            item=NewsItem.from_dict(data),
            summary=data.get("summary"),
            tags=list(tags) if tags is not None else None,
            relevance_score=data.get("relevance_score"),
            media=media,
            context=context,
        )


__all__ = [
    "Context",
    "ContextBuilder",
    "EnrichedRecord",
    "EnrichmentResult",
    "Extraction",
    "ExtractionStatus",
    "GeoLocation",
    "MediaAsset",
    "NewsItem",
    "build_map_url",
]
