"""
Background Workers

Workers for scheduled and queued feed refreshes.
"""

from .just_read_feed_worker import (
    UPDATE_JUST_READ_FEED_JOB,
    UpdateJustReadFeedJobData,
    UpdateJustReadFeedWorker,
    WorkerConfig,
    WorkerResult,
    run_update_just_read_feed_loop,
    update_just_read_feed,
)

__all__ = [
    "UPDATE_JUST_READ_FEED_JOB",
    "UpdateJustReadFeedJobData",
    "UpdateJustReadFeedWorker",
    "WorkerConfig",
    "WorkerResult",
    "run_update_just_read_feed_loop",
    "update_just_read_feed",
]
