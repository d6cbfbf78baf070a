"""
Insight Feed Backend

FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from .config import get_settings
from .core.logging import setup_logging, get_logger
from .core.exceptions import register_exception_handlers
from .core.rate_limit import limiter
from .routers import channels_router, publish_router, scheduler_router
from .services.scheduler import get_scheduler_service

# Initialize
settings = get_settings()
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(
        "app_startup",
        environment=settings.environment,
        debug=settings.debug,
        repo_dir=str(settings.repo_dir),
        api_key_configured=bool(settings.youtube_api_key),
    )

    if settings.auto_publish_enabled:
        get_scheduler_service().start()
        logger.info("scheduler_auto_started", schedule=settings.auto_publish_cron)

    yield

    if settings.auto_publish_enabled:
        get_scheduler_service().stop()

    logger.info("app_shutdown")


# Create FastAPI app
app = FastAPI(
    title="Insight Feed Backend",
    description="Curated YouTube feed: channel registry, fetch and publish",
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register exception handlers
register_exception_handlers(app)

# Include routers
app.include_router(channels_router)
app.include_router(publish_router)
app.include_router(scheduler_router)


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "service": "Insight Feed Backend",
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs" if settings.debug else "disabled",
        "scheduler": "enabled" if settings.auto_publish_enabled else "manual",
    }


@app.get("/health")
async def health():
    """Health check for load balancers."""
    return {"status": "healthy"}


def run():
    """Run the API server with uvicorn."""
    import uvicorn

    uvicorn.run("insight_feed.main:app", host="0.0.0.0", port=settings.port, reload=settings.debug)


if __name__ == "__main__":
    run()
