"""Persistence for enriched records."""

from __future__ import annotations

import json
import logging
import os
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Protocol

from .models import EnrichedRecord

LOGGER = logging.getLogger(__name__)


class RecordNotFound(KeyError):
    """No stored record has the requested id."""


class RecordStore(Protocol):
    def store(self, record: EnrichedRecord) -> Dict[str, Any]: ...

    def list_records(self) -> List[Dict[str, Any]]: ...

    def get(self, record_id: str) -> Dict[str, Any]: ...


class JsonRecordStore:
    """Keep enriched records in memory and mirror them to a JSON file."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._records: Dict[str, Dict[str, Any]] = {}
        self._load()

    def store(self, record: EnrichedRecord) -> Dict[str, Any]:
        data = record.to_dict()
        data.setdefault("id", str(uuid.uuid4()))
        data.setdefault("ingested_at", datetime.now(timezone.utc).isoformat())
        with self._lock:
            self._records[data["id"]] = data
            self._save()
        LOGGER.debug("Stored record %s", data["id"])
        return data

    def list_records(self) -> List[Dict[str, Any]]:
        with self._lock:
            return list(self._records.values())

    def get(self, record_id: str) -> Dict[str, Any]:
        with self._lock:
            record = self._records.get(record_id)
        if record is None:
            raise RecordNotFound(record_id)
        return record

    def _load(self) -> None:
        if not self._path.exists():
            return
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            LOGGER.warning("Failed to load stored records: %s", exc)
            return

        if not isinstance(raw, dict):
            LOGGER.warning("Ignoring stored records file with unexpected layout: %s", self._path)
            return

        records: Dict[str, Dict[str, Any]] = {}
        for entry in raw.get("records") or []:
            try:
                EnrichedRecord.from_dict(entry)
                records[entry["id"]] = entry
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                LOGGER.debug("Skipping invalid stored record: %s", exc)
                continue
        with self._lock:
            self._records = records

    def _save(self) -> None:
        # Caller holds the lock, so the file always mirrors the latest snapshot.
        payload = {"records": list(self._records.values())}
        tmp_path = self._path.with_name(self._path.name + ".tmp")
        try:
            tmp_path.write_text(
                json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8"
            )
            os.replace(tmp_path, self._path)
        except OSError:
            LOGGER.warning("Failed to persist stored records", exc_info=True)


__all__ = ["JsonRecordStore", "RecordNotFound", "RecordStore"]
