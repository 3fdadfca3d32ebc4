"""Main FastAPI application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.routes import reviews_router
from app.api.routes import router as books_router
from app.core.config import settings
from app.core.redis_client import create_redis
from app.domain.entities import Book, Review
from app.domain.events import LifecycleEvents
from app.infrastructure.cache.redis_cache import RedisCache
from app.infrastructure.database.connection import init_db
from app.services.cache_invalidator import BookCacheInvalidator

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events.

    Wires the lifecycle event registries the repositories dispatch on and
    subscribes the cache invalidator to them.
    """
    logger.info("Starting book rankings application")
    await init_db()
    logger.info("Database initialized")

    redis_client = create_redis()
    app.state.book_events = LifecycleEvents[Book]("book")
    app.state.review_events = LifecycleEvents[Review]("review")
    BookCacheInvalidator(RedisCache(redis_client)).subscribe(
        app.state.book_events, app.state.review_events
    )
    yield
    await redis_client.aclose()
    logger.info("Shutting down book rankings application")


app = FastAPI(
    title="Book Rankings",
    description="Books ranked by review activity and rating over time windows",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(books_router)
app.include_router(reviews_router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
