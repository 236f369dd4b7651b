"""News enrichment application package."""

from .config import EnrichmentConfig, load_config
from .models import EnrichedRecord, NewsItem
from .orchestrator import EnrichmentOrchestrator
from .service import EnrichmentService

__all__ = [
    "EnrichedRecord",
    "EnrichmentConfig",
    "EnrichmentOrchestrator",
    "EnrichmentService",
    "NewsItem",
    "load_config",
]
