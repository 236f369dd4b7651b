"""Featured image and related video lookup."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from .config import CollectorConfig
from .models import MediaAsset

LOGGER = logging.getLogger(__name__)

SERPER_IMAGES_URL = "https://google.serper.dev/images"
YOUTUBE_SEARCH_URL = "https://www.googleapis.com/youtube/v3/search"
YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v={video_id}"


class MediaResolver:
    """Find an image and a video for a story; either one is enough."""

    def __init__(self, config: CollectorConfig, client: httpx.Client) -> None:
        self.config = config
        self.client = client

    def find_image(self, query: str) -> Optional[str]:
        try:
            response = self.client.post(
                SERPER_IMAGES_URL,
                json={"q": query},
                headers={
                    "X-API-KEY": self.config.serper_api_key,
                    "Content-Type": "application/json",
                },
                timeout=self.config.timeout,
            )
            response.raise_for_status()
            images = response.json().get("images") or []
            if not images:
                return None
            return images[0].get("imageUrl") or None
        except Exception as exc:
            LOGGER.warning("Image search failed for %r: %s", query, exc)
            return None

    def find_video(self, query: str) -> Optional[str]:
        try:
            response = self.client.get(
                YOUTUBE_SEARCH_URL,
                params={
                    "part": "snippet",
                    "q": query,
                    "type": "video",
                    "key": self.config.youtube_api_key,
                },
                timeout=self.config.timeout,
            )
            response.raise_for_status()
            items = response.json().get("items") or []
            if not items:
                return None
            video_id = items[0]["id"]["videoId"]
        except Exception as exc:
            LOGGER.warning("Video search failed for %r: %s", query, exc)
            return None
        return YOUTUBE_WATCH_URL.format(video_id=video_id)

    def resolve(self, query: str, justification: str) -> Optional[MediaAsset]:
        image_url = self.find_image(query)
        video_url = self.find_video(query)
        if not image_url and not video_url:
            LOGGER.debug("No media found for %r", query)
            return None
        return MediaAsset(
            justification=justification,
            featured_image_url=image_url,
            related_video_url=video_url,
        )


__all__ = ["MediaResolver"]
