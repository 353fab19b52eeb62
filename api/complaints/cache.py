"""
Most-recently-fetched structured page.

The app owns exactly one instance (`app.state.cache`). Routes receive it
through `dependencies.get_cache`. Every structured fetch replaces the batch
wholesale; the ingestion loops read `total()` once to size their iteration.
"""

from __future__ import annotations

import asyncio

from .schemas import RecordBatch


class IngestionCache:
    def __init__(self, batch: RecordBatch | None = None) -> None:
        self._batch = batch or RecordBatch()
        self._lock = asyncio.Lock()

    async def replace(self, batch: RecordBatch) -> None:
        async with self._lock:
            self._batch = batch

    async def snapshot(self) -> RecordBatch:
        async with self._lock:
            return self._batch

    async def total(self) -> int:
        async with self._lock:
            return int(self._batch.total)
