# parking_tracker/main.py
"""
FastAPI application entry point.
Includes security middleware, error handlers, routers, and the startup hook
that opens the parking registry (restore from snapshot or bootstrap).
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from parking_tracker.routers import lot, health
from parking_tracker.database import create_tables, SessionLocal
from parking_tracker.config import settings
from parking_tracker.errors import ParkingError
from parking_tracker.services.persistence import open_registry
from parking_tracker.utils.logger import get_logger
import time

logger = get_logger(__name__)

app = FastAPI(
    title="Parking Lot Tracker API",
    description="Fixed-capacity parking spot registry with persisted snapshots.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# ── CORS (allow a dashboard page to call the API) ───────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],   # Restrict to dashboard origin in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── API Key Middleware ───────────────────────────────────────────────────────
class APIKeyMiddleware(BaseHTTPMiddleware):
    """
    Optional lightweight API key auth.
    Health check and docs stay open. Set API_KEY in .env. Leave empty to disable auth.
    """
    async def dispatch(self, request: Request, call_next):
        open_paths = {"/api/v1/health", "/docs", "/redoc", "/openapi.json"}
        if request.url.path in open_paths or not settings.API_KEY:
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


# ── Registry Error Handler ───────────────────────────────────────────────────
@app.exception_handler(ParkingError)
async def parking_error_handler(request: Request, exc: ParkingError):
    logger.info(f"{request.method} {request.url.path} rejected: {exc.name}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.name},
    )


# ── Global Exception Handler ─────────────────────────────────────────────────
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


# ── Routers ──────────────────────────────────────────────────────────────────
app.include_router(lot.router,    prefix="/api/v1", tags=["🅿️  Parking Lot"])
app.include_router(health.router, prefix="/api/v1", tags=["💚 Health"])


# ── Startup ───────────────────────────────────────────────────────────────────
@app.on_event("startup")
async def startup():
    logger.info("🚀 Parking Tracker starting up...")
    create_tables()
    logger.info("✅ Database tables ready")

    db = SessionLocal()
    try:
        app.state.registry = open_registry(db, settings.DEFAULT_CAPACITY)
    finally:
        db.close()
    registry = app.state.registry
    logger.info(f"🅿️  {registry.total_spots}/{registry.capacity} spots, {registry.available_count} available")
    logger.info(f"🌐 Listening on {settings.BACKEND_URL}")
    logger.info("📖 API docs at /docs")


@app.on_event("shutdown")
async def shutdown():
    logger.info("🛑 Parking Tracker shutting down...")
