"""
Just Read Feed Worker

Refreshes a user's just read feed: select candidates, rank them, mix them
into sections, and append the sections to the feed store.

Designed to be run per user from a job queue, or over a list of users in a
simple loop.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from justread.logging_config import bind_job_context, clear_job_context
from justread.services.just_read_feed.mixer import FeedMixer
from justread.services.just_read_feed.ranker import CandidateRanker
from justread.services.just_read_feed.selector import CandidateSelector
from justread.services.just_read_feed.store import FeedStore

logger = logging.getLogger(__name__)

UPDATE_JUST_READ_FEED_JOB = "UPDATE_JUST_READ_FEED_JOB"

SKIPPED_USER_NOT_FOUND = "user_not_found"
SKIPPED_NO_CANDIDATES = "no_candidates"


@dataclass
class UpdateJustReadFeedJobData:
    """Payload of an UPDATE_JUST_READ_FEED_JOB."""
    user_id: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UpdateJustReadFeedJobData":
        return cls(user_id=data.get("userId") or data["user_id"])


@dataclass
class WorkerConfig:
    """Configuration for the feed worker."""
    max_candidates: int = 100
    max_private_candidates: int = 70
    max_public_candidates: int = 30
    min_candidates_to_rank: int = 10


@dataclass
class WorkerResult:
    """Result from one feed refresh."""
    user_id: str
    started_at: datetime
    ended_at: datetime
    candidates: int = 0
    ranked: int = 0
    sections: int = 0
    undistributed: int = 0
    written: bool = False
    skipped_reason: Optional[str] = None

    @property
    def duration_seconds(self) -> float:
        return (self.ended_at - self.started_at).total_seconds()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "userId": self.user_id,
            "startedAt": self.started_at.isoformat(),
            "endedAt": self.ended_at.isoformat(),
            "durationSeconds": self.duration_seconds,
            "candidates": self.candidates,
            "ranked": self.ranked,
            "sections": self.sections,
            "undistributed": self.undistributed,
            "written": self.written,
            "skippedReason": self.skipped_reason,
        }


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UpdateJustReadFeedWorker:
    """
    Runs the feed refresh pipeline for one user at a time.

    Collaborators are injected; errors from the backend, the scoring service,
    or the store propagate to the caller unchanged.
    """

    def __init__(
        self,
        backend: Any,
        scorer: Any,
        store: FeedStore,
        config: Optional[WorkerConfig] = None,
    ):
        """
        Initialize the worker.

        Args:
            backend: Content backend (user, library, subscription, public item lookups)
            scorer: Scoring provider
            store: Feed store sections are appended to
            config: Worker configuration
        """
        self._backend = backend
        self._store = store
        self._config = config or WorkerConfig()

        self._selector = CandidateSelector(
            backend,
            max_candidates=self._config.max_candidates,
            max_private=self._config.max_private_candidates,
            max_public=self._config.max_public_candidates,
        )
        self._ranker = CandidateRanker(
            scorer,
            min_candidates=self._config.min_candidates_to_rank,
        )
        self._mixer = FeedMixer()

    async def run(self, user_id: str) -> WorkerResult:
        """
        Refresh the feed of one user.

        Returns:
            WorkerResult describing what was written, or why nothing was
        """
        result = WorkerResult(user_id=user_id, started_at=_utcnow(), ended_at=_utcnow())
        bind_job_context(user_id=user_id)
        try:
            user = await self._backend.find_active_user(user_id)
            if not user:
                logger.error(f"User {user_id} not found")
                result.skipped_reason = SKIPPED_USER_NOT_FOUND
                return result

            logger.info(f"Updating just read feed for user {user_id}")

            candidates = await self._selector.select(user)
            result.candidates = len(candidates)
            logger.info(f"Found {len(candidates)} candidates")

            logger.info("Ranking candidates")
            ranked = await self._ranker.rank(user_id, candidates)
            result.ranked = len(ranked)
            if not ranked:
                logger.info("No candidates found")
                result.skipped_reason = SKIPPED_NO_CANDIDATES
                return result

            logger.info("Mix feed items to create sections")
            mixed = self._mixer.mix(ranked)
            result.sections = len(mixed.sections)
            result.undistributed = len(mixed.undistributed)
            logger.info(f"Created {len(mixed.sections)} sections")

            logger.info("Appending sections to feed")
            await self._store.append_sections(user_id, mixed.sections)
            result.written = True
            logger.info("Feed updated for user", extra={"user_id": user_id})

            return result
        finally:
            result.ended_at = _utcnow()
            clear_job_context()


async def update_just_read_feed(
    data: UpdateJustReadFeedJobData,
    backend: Any,
    scorer: Any,
    store: FeedStore,
    config: Optional[WorkerConfig] = None,
) -> WorkerResult:
    """
    Job entry point for UPDATE_JUST_READ_FEED_JOB.

    Args:
        data: Job payload
        backend: Content backend client
        scorer: Scoring provider
        store: Feed store
        config: Worker configuration

    Returns:
        WorkerResult for the user
    """
    worker = UpdateJustReadFeedWorker(
        backend=backend,
        scorer=scorer,
        store=store,
        config=config,
    )
    return await worker.run(data.user_id)


async def run_update_just_read_feed_loop(
    user_ids: Iterable[str],
    backend: Any,
    scorer: Any,
    store: FeedStore,
    config: Optional[WorkerConfig] = None,
    interval_seconds: int = 3600,
    max_iterations: Optional[int] = None,
) -> List[WorkerResult]:
    """
    Refresh feeds for a fixed set of users in a continuous loop.

    A failure for one user is logged and does not stop the pass.

    Args:
        user_ids: Users to refresh on every pass
        backend: Content backend client
        scorer: Scoring provider
        store: Feed store
        config: Worker configuration
        interval_seconds: Seconds between passes
        max_iterations: Max passes (None for infinite)

    Returns:
        Results of the last pass
    """
    worker = UpdateJustReadFeedWorker(
        backend=backend,
        scorer=scorer,
        store=store,
        config=config,
    )
    users = list(user_ids)

    results: List[WorkerResult] = []
    iterations = 0
    while max_iterations is None or iterations < max_iterations:
        results = []
        for user_id in users:
            try:
                results.append(await worker.run(user_id))
            except Exception as e:
                logger.error(f"Feed refresh for user {user_id} failed: {e}")

        written = sum(1 for r in results if r.written)
        logger.info(f"Feed loop iteration {iterations + 1}: {written}/{len(users)} feeds updated")

        iterations += 1

        if max_iterations is None or iterations < max_iterations:
            logger.info(f"Sleeping {interval_seconds}s until next run...")
            await asyncio.sleep(interval_seconds)

    return results
