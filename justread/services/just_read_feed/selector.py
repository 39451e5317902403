"""
Candidate Selector

Merges the user's unseen library items with unseen public inventory into one
bounded candidate list.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence

from .language import language_to_code
from .models import (
    Candidate,
    ItemType,
    LibraryItem,
    PublicItem,
    Subscription,
    SubscriptionRef,
    User,
)

logger = logging.getLogger(__name__)

MAX_CANDIDATES = 100
MAX_PRIVATE_CANDIDATES = 70
MAX_PUBLIC_CANDIDATES = 30
LIBRARY_SEARCH_SIZE = 100
PUBLIC_SEARCH_LIMIT = 100
UNSEEN_LIBRARY_QUERY = "-is:seen wordsCount:>0"


def _find_subscription(
    item: LibraryItem,
    subscriptions: Sequence[Subscription],
) -> Optional[SubscriptionRef]:
    if not item.subscription:
        return None
    for subscription in subscriptions:
        if subscription.name == item.subscription or subscription.url == item.subscription:
            return SubscriptionRef(name=subscription.name, type=subscription.type)
    return None


def library_item_to_candidate(
    item: LibraryItem,
    subscriptions: Sequence[Subscription],
) -> Candidate:
    return Candidate(
        id=item.id,
        title=item.title,
        url=item.original_url,
        type=ItemType.LIBRARY_ITEM,
        thumbnail=item.thumbnail or None,
        preview_content=item.description or None,
        language_code=language_to_code(item.item_language),
        author=item.author or None,
        dir=item.directionality or "ltr",
        date=item.created_at,
        topic=item.topic,
        # the library query only returns items with a word count
        word_count=item.word_count or 0,
        site_name=item.site_name or None,
        site_icon=item.site_icon or None,
        folder=item.folder,
        score=item.score,
        published_at=item.published_at,
        subscription=_find_subscription(item, subscriptions),
    )


def public_item_to_candidate(item: PublicItem) -> Candidate:
    return Candidate(
        id=item.id,
        title=item.title,
        url=item.url,
        type=ItemType.PUBLIC_ITEM,
        thumbnail=item.thumbnail,
        preview_content=item.preview_content,
        language_code=item.language_code or "en",
        author=item.author,
        dir=item.dir or "ltr",
        date=item.created_at,
        topic=item.topic,
        word_count=item.word_count or 0,
        site_icon=item.site_icon,
        published_at=item.published_at,
        subscription=SubscriptionRef(name=item.source.name, type=item.source.type),
    )


class CandidateSelector:
    """
    Builds the candidate set for one job run.

    Up to `max_private` candidates come from the user's library; the rest of
    the `max_candidates` budget is filled from the public inventory, never
    more than `max_public` of them.
    """

    def __init__(
        self,
        backend: Any,
        max_candidates: int = MAX_CANDIDATES,
        max_private: int = MAX_PRIVATE_CANDIDATES,
        max_public: int = MAX_PUBLIC_CANDIDATES,
    ):
        """
        Args:
            backend: Content backend exposing search_library_items,
                find_subscriptions_by_names and find_unseen_public_items
            max_candidates: Total candidate budget
            max_private: Cap on library candidates
            max_public: Cap on public inventory candidates
        """
        self._backend = backend
        self._max_candidates = max_candidates
        self._max_private = max_private
        self._max_public = max_public

    async def select(self, user: User) -> List[Candidate]:
        user_id = user.id

        library_items = await self._backend.search_library_items(
            user_id,
            size=LIBRARY_SEARCH_SIZE,
            include_content=False,
            query=UNSEEN_LIBRARY_QUERY,
        )
        logger.info(f"Found {len(library_items)} library items")

        subscription_names = [item.subscription for item in library_items if item.subscription]
        subscriptions = await self._backend.find_subscriptions_by_names(
            user_id, subscription_names
        )

        private_candidates = [
            library_item_to_candidate(item, subscriptions)
            for item in library_items
        ][: self._max_private]
        logger.info(f"Found {len(private_candidates)} private candidates")

        public_items = await self._backend.find_unseen_public_items(
            user_id, limit=PUBLIC_SEARCH_LIMIT
        )
        logger.info(f"Found {len(public_items)} public items")

        vacancies = max(min(self._max_candidates - len(private_candidates), self._max_public), 0)
        public_candidates = [public_item_to_candidate(item) for item in public_items][:vacancies]
        logger.info(f"Found {len(public_candidates)} public candidates")

        return private_candidates + public_candidates
