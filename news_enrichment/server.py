"""FastAPI application for on-demand enrichment and reading stored records."""

from __future__ import annotations

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from .schemas import EnrichedRecordResponse, IngestResponse, NewsItemPayload
from .service import EnrichmentService
from .storage import RecordNotFound


def create_app(service: EnrichmentService) -> FastAPI:
    app = FastAPI(title="News Enrichment", version="1.0.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def get_service() -> EnrichmentService:
        return service

    @app.get("/healthz", summary="Health check")
    def health_check() -> dict[str, str]:
        return {"status": "ok"}

    @app.post("/enrich", response_model=EnrichedRecordResponse)
    def enrich_news(
        payload: NewsItemPayload,
        svc: EnrichmentService = Depends(get_service),
    ) -> EnrichedRecordResponse:
        stored = svc.process(payload.to_item())
        if stored is None:
            raise HTTPException(status_code=502, detail="Enrichment failed")
        return EnrichedRecordResponse.from_record(stored)

    @app.post("/ingest", response_model=IngestResponse)
    def ingest_news(svc: EnrichmentService = Depends(get_service)) -> IngestResponse:
        return IngestResponse(processed=svc.refresh())

    @app.get("/news", response_model=list[EnrichedRecordResponse])
    def list_news(svc: EnrichmentService = Depends(get_service)) -> list[EnrichedRecordResponse]:
        return [EnrichedRecordResponse.from_record(rec) for rec in svc.store.list_records()]

    @app.get("/news/{record_id}", response_model=EnrichedRecordResponse)
    def get_news(
        record_id: str,
        svc: EnrichmentService = Depends(get_service),
    ) -> EnrichedRecordResponse:
        try:
            record = svc.store.get(record_id)
        except RecordNotFound as exc:
            raise HTTPException(status_code=404, detail="News not found") from exc
        return EnrichedRecordResponse.from_record(record)

    return app


__all__ = ["create_app"]
