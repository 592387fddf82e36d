# app/main.py
"""
FastAPI application entry point.
Includes API key middleware, error handlers, all routers and the lifecycle sweeper task.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from app.routers import bookings, vehicles, payments, health
from app.database import create_tables
from app.config import settings
from app.services.exceptions import BookingServiceError
from app.services.sweeper_service import run_lifecycle_sweeper
from app.utils.logger import get_logger
import time
import asyncio

logger = get_logger(__name__)

app = FastAPI(
    title="Car Rental Booking API",
    description="Car reservations, payments and booking lifecycle.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── API Key Middleware ───────────────────────────────────────────────────────
class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Optional shared-secret check for callers of the API (the web frontend, admin tools).
    Set API_KEY in .env. Leave empty to disable.
    """
    open_paths = {"/api/health", "/docs", "/redoc", "/openapi.json"}

    async def dispatch(self, request: Request, call_next):
        if request.url.path in self.open_paths or not settings.API_KEY:
            return await call_next(request)

        api_key = request.headers.get("X-API-Key") or request.query_params.get("api_key")
        if api_key != settings.API_KEY:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"detail": "Invalid or missing API key"},
            )
        return await call_next(request)


if settings.API_KEY:
    app.add_middleware(APIKeyMiddleware)


# ── Request Timing Middleware ────────────────────────────────────────────────
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.time()
    response = await call_next(request)
    duration = round((time.time() - start) * 1000, 2)
    logger.debug(f"{request.method} {request.url.path} → {response.status_code} ({duration}ms)")
    return response


# ── Error Handlers ───────────────────────────────────────────────────────────
@app.exception_handler(BookingServiceError)
async def booking_error_handler(request: Request, exc: BookingServiceError):
    logger.info(f"{request.method} {request.url.path} rejected: {exc.status_code} {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(bookings.router, prefix="/api", tags=["📅 Bookings"])
app.include_router(vehicles.router, prefix="/api", tags=["🚗 Cars"])
app.include_router(payments.router, prefix="/api", tags=["💳 Payments"])
app.include_router(health.router,   prefix="/api", tags=["💚 Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
_sweeper_task = None


@app.on_event("startup")
async def startup():
    global _sweeper_task
    logger.info("🚀 Car Rental Backend starting up...")
    create_tables()
    logger.info("✅ Database tables ready")
    logger.info(f"🌐 Listening on http://{settings.BACKEND_HOST}:{settings.BACKEND_PORT}")
    logger.info("📖 API docs at /docs")

    if settings.SWEEPER_ENABLED:
        _sweeper_task = asyncio.create_task(run_lifecycle_sweeper(), name="lifecycle-sweeper")
    else:
        logger.warning("Lifecycle sweeper disabled — stale bookings will not be cleaned up")


@app.on_event("shutdown")
async def shutdown():
    logger.info("🛑 Car Rental Backend shutting down...")
    if _sweeper_task:
        _sweeper_task.cancel()
        try:
            await _sweeper_task
        except asyncio.CancelledError:
            logger.info("🧹 Lifecycle sweeper stopped")
