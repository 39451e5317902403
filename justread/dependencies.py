"""Default collaborator wiring built from settings."""

from typing import Optional

from .config import settings
from .db import get_backend_client, get_redis_data_source
from .providers.score import ScoreApiProvider
from .services.just_read_feed.store import FeedStore
from .workers.just_read_feed_worker import UpdateJustReadFeedWorker, WorkerConfig

_score_provider: Optional[ScoreApiProvider] = None


def get_score_provider() -> ScoreApiProvider:
    global _score_provider
    if _score_provider is None:
        _score_provider = ScoreApiProvider()
    return _score_provider


def get_feed_store() -> FeedStore:
    """Feed store on the shared Redis connection (unavailable if REDIS_URL is unset)."""
    return FeedStore(
        get_redis_data_source().client,
        max_items=settings.feed_max_sections,
        ttl_ms=settings.feed_section_ttl_seconds * 1000,
    )


def get_feed_worker(config: Optional[WorkerConfig] = None) -> UpdateJustReadFeedWorker:
    return UpdateJustReadFeedWorker(
        backend=get_backend_client(),
        scorer=get_score_provider(),
        store=get_feed_store(),
        config=config,
    )
