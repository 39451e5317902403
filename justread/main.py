"""
Just Read Feed API

Serves stored feed sections and exposes the refresh trigger used by the job
scheduler. Shared connections are released on shutdown.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api import feed, health
from .config import settings
from .db import close_backend_client, close_redis_data_source
from .logging_config import setup_logging

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not settings.has_redis:
        logger.warning("REDIS_URL not set; feed reads and refreshes will return 503")
    if not settings.has_score_api:
        logger.warning("SCORE_API_URL not set; feeds above the ranking threshold cannot refresh")
    yield
    await close_backend_client()
    await close_redis_data_source()


app = FastAPI(
    title="Just Read Feed API",
    description="Personalized reading feed built from saved and public items",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router, tags=["Health"])
app.include_router(feed.router, tags=["Feed"])


@app.get("/")
async def root():
    """Service name plus the entry points a feed client needs"""
    return {
        "name": "just-read-feed",
        "version": __version__,
        "feed": "/feed/{user_id}",
        "health": "/healthz",
        "docs": "/docs",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "justread.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
        log_level=settings.log_level.lower()
    )
