"""Progress display for batch enrichment runs."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)


class BatchProgress:
    """Single progress bar that also counts enriched and dropped items."""

    def __init__(self, total: int, console: Optional[Console] = None) -> None:
        self.console = console or Console()
        self.total = total
        self.enriched = 0
        self.dropped = 0
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("{task.description}", justify="left"),
            BarColumn(bar_width=None),
            TextColumn("{task.completed}/{task.total}"),
            TimeElapsedColumn(),
            console=self.console,
            transient=False,
        )
        self._task: Optional[TaskID] = None

    def __enter__(self) -> "BatchProgress":
        self._progress.__enter__()
        self._task = self._progress.add_task("Enrich", total=self.total)
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._task is not None:
            self._progress.update(
                self._task,
                description=f"Enrich • {self.enriched} stored, {self.dropped} dropped",
            )
        self._progress.__exit__(exc_type, exc, tb)

    def record(self, produced: bool) -> None:
        if produced:
            self.enriched += 1
        else:
            self.dropped += 1
        if self._task is not None:
            self._progress.advance(self._task, 1)


__all__ = ["BatchProgress"]
