"""FastAPI application entrypoint."""

from __future__ import annotations

import asyncio
import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from kharcha.config import settings
from kharcha.jobs.scheduler import register_jobs, scheduler
from kharcha.routers import assistant, dashboard, export, ledger, menu, users
from kharcha.services.change_feed import ChangeFeed
from kharcha.services.ledger_store import LedgerStore
from kharcha.services.snapshot_cache import SnapshotCache
from kharcha.utils.errors import AppError, InvalidInputError
from kharcha.utils.supabase_client import get_service_client

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


def build_snapshot_cache() -> SnapshotCache:
    """Create a cache that reads the store off the event loop."""
    store = LedgerStore(get_service_client())
    return SnapshotCache(lambda: asyncio.to_thread(store.fetch_collections))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Wire the change feed and snapshot cache, and run the scheduler."""
    feed = ChangeFeed()
    cache = build_snapshot_cache()
    app.state.change_feed = feed
    app.state.snapshot_cache = cache
    await cache.start(feed)

    if settings.enable_scheduler:
        register_jobs(feed)
        scheduler.start()
        logger.info("Scheduler started")
    yield
    if settings.enable_scheduler and scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")
    await cache.stop()
    if assistant.get_assistant_client.cache_info().currsize:
        assistant.get_assistant_client().close()
        assistant.get_assistant_client.cache_clear()


app = FastAPI(
    title=settings.app_name,
    description="Shared household expense ledger - Backend API",
    version=settings.app_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_timing_middleware(request: Request, call_next):
    """Add per-request processing time and optionally log slow requests."""
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    response.headers["X-Process-Time-Ms"] = f"{elapsed_ms:.1f}"

    threshold_ms = settings.slow_request_log_threshold_ms
    if threshold_ms > 0 and elapsed_ms >= threshold_ms:
        logger.warning(
            "Slow request %s %s %.1fms",
            request.method,
            request.url.path,
            elapsed_ms,
        )

    return response


@app.exception_handler(AppError)
async def app_error_handler(_: Request, exc: AppError) -> JSONResponse:
    """Convert domain exceptions into structured API responses."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(
    _: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """Normalize FastAPI validation responses."""
    detail = exc.errors()
    message = detail[0].get("msg", "Invalid request") if detail else "Invalid request"
    api_error = InvalidInputError(message)
    return JSONResponse(status_code=api_error.status_code, content=api_error.to_dict())


@app.exception_handler(Exception)
async def unhandled_error_handler(_: Request, exc: Exception) -> JSONResponse:
    """Catch unexpected errors without leaking internals."""
    logger.exception("Unhandled exception", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "code": "INTERNAL_ERROR"},
    )


app.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
app.include_router(ledger.router, prefix="/ledger", tags=["ledger"])
app.include_router(menu.router, prefix="/menu", tags=["menu"])
app.include_router(users.router, prefix="/users", tags=["users"])
app.include_router(export.router, tags=["export"])
app.include_router(assistant.router, prefix="/assistant", tags=["assistant"])


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint for deploys and uptime probes."""
    return {"status": "ok", "version": settings.app_version}
