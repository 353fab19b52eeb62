"""
FastAPI router for complaint fetch and ingestion endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from . import dependencies, service
from .cache import IngestionCache
from .schemas import ComplaintRecord, LoadResponse, RecordBatch

router = APIRouter()


@router.get("/", response_model=RecordBatch)
async def fetch_geojson_page(
    query: service.PageQuery = Depends(dependencies.page_query),
    cache: IngestionCache = Depends(dependencies.get_cache),
) -> RecordBatch:
    """
    Fetch one structured page, replace the cache with it, and return it.
    """
    await service.fetch_page(cache, query)
    return await cache.snapshot()


@router.get("/topojson", response_model=list[ComplaintRecord])
async def fetch_csv_page(
    query: service.PageQuery = Depends(dependencies.page_query),
    attribution: service.Attribution = Depends(dependencies.attribution),
) -> list[ComplaintRecord]:
    """
    Fetch one CSV page and return it as JSON records, without storing it.
    """
    return await service.fetch_complaints(query, attribution)


@router.post("/saveToMongoDB", response_model=LoadResponse)
async def save_geojson(
    query: service.PageQuery = Depends(dependencies.page_query),
    cache: IngestionCache = Depends(dependencies.get_cache),
) -> dict:
    result = await service.ingest_geojson(cache, query)
    return _load_response(result)


@router.post("/saveToMongoDBCSV", response_model=LoadResponse)
async def save_csv(
    query: service.PageQuery = Depends(dependencies.page_query),
    attribution: service.Attribution = Depends(dependencies.attribution),
    cache: IngestionCache = Depends(dependencies.get_cache),
) -> dict:
    result = await service.ingest_csv(cache, query, attribution)
    return _load_response(result)


def _load_response(result: service.LoadResult) -> dict:
    return {
        "status": result.status,
        "pages": result.pages,
        "inserted": result.inserted,
        "next_offset": result.next_offset,
    }
