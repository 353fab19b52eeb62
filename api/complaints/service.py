"""
Complaint ingestion "service layer".

This file contains logic that is independent of FastAPI's routing layer:
- Single-page fetches (structured and CSV)
- The paginated fetch -> convert -> persist loops

Loop rules:
- The iteration count is computed once, before the first page, from the
  cached total and the loop's page size. It is not refreshed mid-run.
- Each page is requested with the caller's `limit`; `offset` advances by
  `limit` after each persisted page.
- An empty page ends the run successfully without touching storage.
- Any failure aborts the run. Pages already written stay written.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any

import pydantic

from core import settings, traffy
from core.errors import FetchError

from . import conversion, repository
from .cache import IngestionCache
from .schemas import ComplaintRecord, RecordBatch

logger = logging.getLogger(__name__)

STATUS_SAVED = "Data successfully saved"
STATUS_NOTHING = "No data to insert"


@dataclass(frozen=True)
class PageQuery:
    start: str = ""
    end: str = ""
    offset: int = 0
    limit: int = 0


@dataclass(frozen=True)
class Attribution:
    name: str = ""
    org: str = ""
    purpose: str = ""
    email: str = ""


@dataclass(frozen=True)
class LoadResult:
    status: str
    pages: int
    inserted: int
    next_offset: int


def iteration_count(total: int, page_size: int) -> int:
    if page_size <= 0:
        raise ValueError("page_size must be > 0")
    if total <= 0:
        return 0
    return math.ceil(total / page_size)


def parse_batch(payload: dict[str, Any]) -> RecordBatch:
    try:
        return RecordBatch.model_validate(payload)
    except pydantic.ValidationError as exc:
        raise FetchError("Failed to fetch data", details=f"unexpected payload shape: {exc}") from exc


async def fetch_page(cache: IngestionCache, query: PageQuery) -> RecordBatch:
    """
    Fetch one structured page and make it the cached batch.
    """
    payload = await traffy.fetch_geojson(
        base_url=settings.upstream_base_url(),
        start=query.start,
        end=query.end,
        offset=query.offset,
        limit=query.limit,
        timeout_s=settings.upstream_timeout_s(),
    )
    batch = parse_batch(payload)
    await cache.replace(batch)
    return batch


async def fetch_complaints(query: PageQuery, attribution: Attribution) -> list[ComplaintRecord]:
    """
    Fetch one CSV page and convert it. Nothing is cached or stored.
    """
    text = await traffy.fetch_csv(
        base_url=settings.upstream_base_url(),
        start=query.start,
        end=query.end,
        offset=query.offset,
        limit=query.limit,
        name=attribution.name,
        org=attribution.org,
        purpose=attribution.purpose,
        email=attribution.email,
        timeout_s=settings.upstream_timeout_s(),
    )
    return conversion.convert_csv(text)


async def ingest_geojson(
    cache: IngestionCache,
    query: PageQuery,
    *,
    page_size: int | None = None,
) -> LoadResult:
    page_size = page_size or settings.geojson_page_size()
    iterations = iteration_count(await cache.total(), page_size)
    offset = query.offset
    pages = 0
    inserted = 0

    for i in range(iterations):
        logger.info("ingest_page kind=geojson iteration=%s offset=%s limit=%s", i, offset, query.limit)
        page = PageQuery(start=query.start, end=query.end, offset=offset, limit=query.limit)
        batch = await fetch_page(cache, page)
        if not batch.features:
            logger.info("ingest_done kind=geojson reason=empty_page pages=%s inserted=%s", pages, inserted)
            return LoadResult(status=STATUS_NOTHING, pages=pages, inserted=inserted, next_offset=offset)

        inserted += await repository.insert_documents([f.to_document() for f in batch.features])
        pages += 1
        offset += query.limit

    logger.info("ingest_done kind=geojson iterations=%s pages=%s inserted=%s", iterations, pages, inserted)
    return LoadResult(status=STATUS_SAVED, pages=pages, inserted=inserted, next_offset=offset)


async def ingest_csv(
    cache: IngestionCache,
    query: PageQuery,
    attribution: Attribution,
    *,
    page_size: int | None = None,
) -> LoadResult:
    """
    CSV loop. It only reads the cached total; the structured path is what
    keeps that total fresh, so a CSV run never updates the cache itself.
    """
    page_size = page_size or settings.csv_page_size()
    iterations = iteration_count(await cache.total(), page_size)
    offset = query.offset
    pages = 0
    inserted = 0

    for i in range(iterations):
        logger.info("ingest_page kind=csv iteration=%s offset=%s limit=%s", i, offset, query.limit)
        page = PageQuery(start=query.start, end=query.end, offset=offset, limit=query.limit)
        complaints = await fetch_complaints(page, attribution)
        if not complaints:
            logger.info("ingest_done kind=csv reason=empty_page pages=%s inserted=%s", pages, inserted)
            return LoadResult(status=STATUS_NOTHING, pages=pages, inserted=inserted, next_offset=offset)

        inserted += await repository.insert_documents([c.to_document() for c in complaints])
        pages += 1
        offset += query.limit

    logger.info("ingest_done kind=csv iterations=%s pages=%s inserted=%s", iterations, pages, inserted)
    return LoadResult(status=STATUS_SAVED, pages=pages, inserted=inserted, next_offset=offset)
