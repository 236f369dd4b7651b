"""Free-text location geocoding via Nominatim, plus its request throttle."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

import httpx

from .config import CollectorConfig
from .models import GeoLocation

LOGGER = logging.getLogger(__name__)

NOMINATIM_SEARCH_URL = "https://nominatim.openstreetmap.org/search"


class GeocodeThrottle:
    """Hold each geocode call back by a fixed delay.

    Every call waits at least ``delay_seconds`` and is released no sooner than
    ``delay_seconds`` after the previous call scheduled through the same
    throttle, so concurrent pipelines sharing it stay within the provider's
    one-request-per-second policy.
    """

    def __init__(
        self,
        delay_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.delay_seconds = delay_seconds
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self._last_release: Optional[float] = None

    def wait(self) -> float:
        """Block until the next geocode call may go out; return the time waited."""

        with self._lock:
            now = self._clock()
            release_at = now + self.delay_seconds
            if self._last_release is not None:
                release_at = max(release_at, self._last_release + self.delay_seconds)
            self._last_release = release_at
        pause = release_at - now
        if pause > 0:
            self._sleep(pause)
        return pause


class Geocoder:
    def __init__(self, config: CollectorConfig, client: httpx.Client) -> None:
        self.config = config
        self.client = client

    def geocode(self, location_name: str) -> Optional[GeoLocation]:
        try:
            response = self.client.get(
                NOMINATIM_SEARCH_URL,
                params={
                    "q": location_name,
                    "format": "json",
                    "addressdetails": 1,
                    "limit": 1,
                },
                headers={"User-Agent": self.config.geocoder_user_agent},
                timeout=self.config.timeout,
            )
            response.raise_for_status()
            results = response.json()
            if not results:
                LOGGER.debug("No geocoding match for %r", location_name)
                return None
            first = results[0]
            return GeoLocation(lat=float(first["lat"]), lng=float(first["lon"]))
        except Exception as exc:
            LOGGER.warning("Geocoding failed for %r: %s", location_name, exc)
            return None


__all__ = ["GeocodeThrottle", "Geocoder"]
