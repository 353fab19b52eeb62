import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from complaints import repository as complaints_repository
from complaints import service as complaints_service
from complaints.cache import IngestionCache
from complaints.router import router as complaints_router
from core import db
from core.errors import ComplaintsError, StartupError
from core.logging import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()

    # Both the store and the upstream must be reachable before serving.
    try:
        await db.init_pool()
        await complaints_repository.ensure_collection()
    except Exception as exc:
        await db.close_pool()
        logger.critical("startup_failed step=document_store error=%s", exc)
        raise StartupError("Failed to connect to the document store", details=str(exc)) from exc

    try:
        batch = await complaints_service.fetch_page(app.state.cache, complaints_service.PageQuery())
    except ComplaintsError as exc:
        await db.close_pool()
        logger.critical("startup_failed step=initial_fetch error=%s", exc.details or exc.message)
        raise StartupError("Failed to fetch initial data", details=exc.details) from exc

    logger.info("startup_complete cached_total=%s", batch.total)
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(lifespan=lifespan)
app.state.cache = IngestionCache()

app.include_router(complaints_router, tags=["complaints"])


@app.exception_handler(ComplaintsError)
async def complaints_error_handler(request: Request, exc: ComplaintsError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request_failed path=%s error=%s details=%s", request.url.path, exc.message, exc.details)
    else:
        logger.warning("request_rejected path=%s error=%s", request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.get("/health")
async def health() -> dict:
    cached_total = await app.state.cache.total()
    return {"status": "ok", "cached_total": cached_total}
