"""Pydantic schemas for request and response payloads."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, validator

from .models import NewsItem


class NewsItemPayload(BaseModel):
    title: str = Field(..., description="Headline of the news item")
    body: str = Field(..., description="Full text of the news item")
    source_url: str = Field("", description="Canonical URL of the story")
    publisher: str = Field("", description="Name of the publishing outlet")
    published_at: str = Field("", description="Publication timestamp (ISO-8601)")
    id: Optional[str] = None

    @validator("title", "body")
    def validate_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be empty")
        return value

    def to_item(self) -> NewsItem:
        return NewsItem(
            title=self.title,
            body=self.body,
            source_url=self.source_url,
            publisher=self.publisher,
            published_at=self.published_at,
            id=self.id,
        )


class GeoResponse(BaseModel):
    lat: float
    lng: float
    map_url: str


class MediaResponse(BaseModel):
    featured_image_url: Optional[str] = None
    related_video_url: Optional[str] = None
    media_justification: str


class ContextResponse(BaseModel):
    wikipedia_snippet: Optional[str] = None
    geo: Optional[GeoResponse] = None
    search_trend: Optional[str] = None
    social_sentiment: Optional[str] = None


class EnrichedRecordResponse(BaseModel):
    id: str
    title: str
    body: str
    source_url: str
    publisher: str
    published_at: str
    ingested_at: Optional[str] = None
    summary: Optional[str] = None
    tags: Optional[List[str]] = None
    relevance_score: Optional[float] = None
    media: Optional[MediaResponse] = None
    context: Optional[ContextResponse] = None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "EnrichedRecordResponse":
        return cls.parse_obj(record)


class IngestResponse(BaseModel):
    processed: int = Field(..., description="Number of records enriched and stored")


__all__ = [
    "ContextResponse",
    "EnrichedRecordResponse",
    "GeoResponse",
    "IngestResponse",
    "MediaResponse",
    "NewsItemPayload",
]
