"""
Protest Tracker API - Main Application Entry Point

Organizers register, log in and publish protest listings; the public browses
listings and likes protests or follows organizers.

Every request waits for the one-shot schema initialization before reaching a
handler, so the service can be deployed where each cold start is a fresh
process and no separate migration step runs.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from protest_tracker.api.errors import register_exception_handlers
from protest_tracker.api.middleware import RequestLoggingMiddleware, SchemaReadyMiddleware
from protest_tracker.api.router import api_router
from protest_tracker.core.config import get_settings
from protest_tracker.core.logging import get_logger, setup_logging
from protest_tracker.core.metrics import metrics_endpoint
from protest_tracker.db.init_db import ensure_db_ready, is_db_ready
from protest_tracker.db.session import engine

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown hooks."""
    setup_logging()
    logger = get_logger(__name__)

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
    )

    if settings.uses_insecure_secret:
        logger.warning("insecure_jwt_secret", message="JWT_SECRET is unset; using the built-in default")

    if settings.DB_INIT_EAGER:
        # A failure here aborts startup so the platform restarts the process
        await ensure_db_ready()

    yield

    await engine.dispose()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Protest listings, organizer accounts, likes and follows",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# Middleware added last runs first: requests are logged before they wait on the schema
app.add_middleware(SchemaReadyMiddleware)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)
app.include_router(api_router)


@app.get("/api/health", tags=["Health"])
async def health_check():
    """Health check endpoint for load balancers and uptime probes."""
    return {
        "status": "ok",
        "message": f"{settings.APP_NAME} is running",
        "version": settings.APP_VERSION,
        "database_ready": is_db_ready(),
    }


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"{settings.APP_NAME} is running",
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }


@app.get("/metrics", include_in_schema=False)
async def metrics():
    return metrics_endpoint()
