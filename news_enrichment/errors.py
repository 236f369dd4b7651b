"""Exception types raised inside the enrichment pipeline."""

from __future__ import annotations


class EnrichmentError(Exception):
    """Base class for enrichment failures."""


class ModelTransportError(EnrichmentError):
    """The chat model could not be reached or returned an unusable envelope."""


class ModelOutputMalformed(EnrichmentError):
    """The chat model answered, but not with a JSON object."""

    def __init__(self, message: str, raw: str) -> None:
        super().__init__(message)
        self.raw = raw


__all__ = [
    "EnrichmentError",
    "ModelOutputMalformed",
    "ModelTransportError",
]
