"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from motosense.api import (
    leaderboard_router,
    predictions_router,
    races_router,
    riders_router,
    rounds_router,
    sync_router,
    users_router,
)
from motosense.api.deps import error_body
from motosense.config import get_settings
from motosense.database import AsyncSessionLocal, init_db
from motosense.exceptions import MotoSenseError, RateLimitExceeded
from motosense.logging_config import configure_logging
from motosense.services import seed_sources

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    configure_logging(settings.log_level)
    await init_db()
    async with AsyncSessionLocal() as session:
        await seed_sources(session)
        await session.commit()
    logger.info("%s %s started", settings.app_name, settings.app_version)
    yield
    # Shutdown
    pass


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Motorsport prediction scoring and round progression service",
    lifespan=lifespan,
)

# CORS middleware for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:8081"],  # Expo dev server
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(MotoSenseError)
async def motosense_error_handler(request: Request, exc: MotoSenseError):
    """Render domain errors as ``{error, code, timestamp}``."""
    headers = None
    if isinstance(exc, RateLimitExceeded):
        headers = {"Retry-After": str(exc.retry_after)}
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, exc.code), headers=headers)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=error_body("Internal server error", "INTERNAL_ERROR"))


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "status": "running",
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


# Register API routers
app.include_router(races_router, prefix="/api")
app.include_router(riders_router, prefix="/api")
app.include_router(predictions_router, prefix="/api")
app.include_router(rounds_router, prefix="/api")
app.include_router(sync_router, prefix="/api")
app.include_router(users_router, prefix="/api")
app.include_router(leaderboard_router, prefix="/api")
