"""
Just Read Feed

Selects unseen candidates for a user, ranks them, mixes them into display
sections under diversity limits, and keeps the result in a per-user store.
"""

from .models import (
    Candidate,
    FeedEntry,
    ItemType,
    LibraryItem,
    MixResult,
    PublicItem,
    Section,
    SectionItem,
    SectionLayout,
    Subscription,
    SubscriptionRef,
    User,
)
from .selector import CandidateSelector
from .ranker import CandidateRanker
from .mixer import FeedMixer
from .store import FeedStore, FeedStoreError, FeedStoreUnavailableError

__all__ = [
    # Models
    "Candidate",
    "FeedEntry",
    "ItemType",
    "LibraryItem",
    "MixResult",
    "PublicItem",
    "Section",
    "SectionItem",
    "SectionLayout",
    "Subscription",
    "SubscriptionRef",
    "User",
    # Pipeline
    "CandidateSelector",
    "CandidateRanker",
    "FeedMixer",
    # Store
    "FeedStore",
    "FeedStoreError",
    "FeedStoreUnavailableError",
]
