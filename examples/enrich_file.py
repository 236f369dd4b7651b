"""Command-line helper that enriches a JSON file of news items."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Sequence

from news_enrichment.config import load_config
from news_enrichment.models import NewsItem
from news_enrichment.orchestrator import EnrichmentOrchestrator
from news_enrichment.progress import BatchProgress


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Enrich news items from a JSON file")
    parser.add_argument("input", type=Path, help="JSON array of news items")
    parser.add_argument(
        "--output",
        type=Path,
        default=Path("enriched.json"),
        help="Where to write the enriched records. Defaults to ./enriched.json.",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    raw = json.loads(args.input.read_text(encoding="utf-8"))
    items = [NewsItem.from_dict(entry) for entry in raw]

    orchestrator = EnrichmentOrchestrator.from_config(load_config())
    records = []
    try:
        with BatchProgress(len(items)) as progress:
            for item in items:
                record = orchestrator.enrich(item)
                progress.record(record is not None)
                if record is not None:
                    records.append(record.to_dict())
    finally:
        orchestrator.close()

    args.output.parent.mkdir(parents=True, exist_ok=True)
    args.output.write_text(json.dumps(records, ensure_ascii=False, indent=2), encoding="utf-8")
    print(f"Wrote {len(records)} of {len(items)} items.")
    print(f"Output file: {args.output}")


if __name__ == "__main__":  # pragma: no cover
    main()
