"""Configuration helpers for the news enrichment service."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
import os


@dataclass
class ModelConfig:
    """Settings for the OpenAI-compatible chat model used for extraction."""

    api_key: str = ""
    base_url: str = "https://openrouter.ai/api/v1"
    model: str = "qwen/qwen2.5-vl-72b-instruct:free"
    timeout: float = 60.0
    site_url: str = "https://swen.ai"
    site_name: str = "SWEN"
    extraction_temperature: float = 0.4
    repair_temperature: float = 0.0
    classification_temperature: float = 0.0

    @property
    def completions_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/chat/completions"


@dataclass
class CollectorConfig:
    """Credentials and limits for the augmentation lookups."""

    serper_api_key: str = ""
    youtube_api_key: str = ""
    x_bearer_token: str = ""
    geocoder_user_agent: str = "SWEN/1.0 (dev@swen.ai)"
    timeout: float = 15.0
    sentiment_language: str = "en"
    geocode_delay_seconds: float = 1.0


@dataclass
class IngestionConfig:
    """Settings for pulling raw news items from NewsAPI."""

    api_key: str = ""
    query: str = "africa"
    limit: int = 5
    min_body_chars: int = 200
    interval_seconds: int = 1800
    timeout: float = 15.0


@dataclass
class EnrichmentConfig:
    """Top-level configuration for the service."""

    model: ModelConfig = field(default_factory=ModelConfig)
    collectors: CollectorConfig = field(default_factory=CollectorConfig)
    ingestion: IngestionConfig = field(default_factory=IngestionConfig)
    store_path: Path = Path("data/enriched_news.json")
    max_workers: int = 5
    api_host: str = "0.0.0.0"
    api_port: int = 8080


def _float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return float(value)


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return int(value)


def load_config() -> EnrichmentConfig:
    """Load configuration from environment variables with sensible defaults."""

    model = ModelConfig(
        api_key=os.getenv("OPENROUTER_API_KEY", ""),
        base_url=os.getenv("MODEL_BASE_URL", "https://openrouter.ai/api/v1"),
        model=os.getenv("MODEL_NAME", "qwen/qwen2.5-vl-72b-instruct:free"),
        timeout=_float_env("MODEL_TIMEOUT", 60.0),
        site_url=os.getenv("SITE_URL", "https://swen.ai"),
        site_name=os.getenv("SITE_NAME", "SWEN"),
    )
    collectors = CollectorConfig(
        serper_api_key=os.getenv("SERPER_API_KEY", ""),
        youtube_api_key=os.getenv("YOUTUBE_API_KEY", ""),
        x_bearer_token=os.getenv("X_BEARER_TOKEN", ""),
        geocoder_user_agent=os.getenv("GEOCODER_USER_AGENT", "SWEN/1.0 (dev@swen.ai)"),
        timeout=_float_env("COLLECTOR_TIMEOUT", 15.0),
        sentiment_language=os.getenv("SENTIMENT_LANGUAGE", "en"),
        geocode_delay_seconds=_float_env("GEOCODE_DELAY_SECONDS", 1.0),
    )
    if collectors.geocode_delay_seconds < 0:
        raise ValueError("GEOCODE_DELAY_SECONDS must not be negative")
    ingestion = IngestionConfig(
        api_key=os.getenv("NEWS_API_KEY", ""),
        query=os.getenv("INGEST_QUERY", "africa"),
        limit=_int_env("INGEST_LIMIT", 5),
        min_body_chars=_int_env("INGEST_MIN_BODY_CHARS", 200),
        interval_seconds=_int_env("INGEST_INTERVAL_SECONDS", 1800),
        timeout=collectors.timeout,
    )

    max_workers = _int_env("MAX_WORKERS", 5)
    if max_workers <= 0:
        raise ValueError("MAX_WORKERS must be positive")

    return EnrichmentConfig(
        model=model,
        collectors=collectors,
        ingestion=ingestion,
        store_path=Path(os.getenv("STORE_PATH", "data/enriched_news.json")),
        max_workers=max_workers,
        api_host=os.getenv("API_HOST", "0.0.0.0"),
        api_port=_int_env("PORT", 8080),
    )


__all__ = [
    "CollectorConfig",
    "EnrichmentConfig",
    "IngestionConfig",
    "ModelConfig",
    "load_config",
]
