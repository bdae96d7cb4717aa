"""FastAPI application for the Training Log analytics."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api.exception_handlers import register_exception_handlers
from .api.routes import analytics, records, sessions
from .config import get_settings
from .utils.log_sanitizer import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info(f"Starting Training Log API v{__version__}")
    yield
    logger.info("Shutting down Training Log API")


app = FastAPI(
    title="Training Log API",
    description="Training-log analytics: records, predictions, fitness and alerts",
    version=__version__,
    lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(records.router, prefix="/api/v1/records", tags=["records"])
app.include_router(analytics.router, prefix="/api/v1", tags=["analytics"])
app.include_router(sessions.router, prefix="/api/v1/sessions", tags=["sessions"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Training Log API",
        "version": __version__,
        "status": "healthy",
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
