"""
Feed Mixer

Packs ranked candidates into batches of up to ten under per-batch diversity
limits, then turns every batch into display sections: single-item "long"
sections for the first five members and one "quick links" section for the rest.

Long-form items (word count at or above the median) are placed before short
ones so they tend to land in the single-item slots.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence, Tuple

from .models import Candidate, MixResult, Section, SectionLayout

logger = logging.getLogger(__name__)

BATCH_SIZE = 10
LONG_SLOTS = 5

# Max existing batch members allowed to share each attribute with a new item
MAX_SAME_TITLE = 0
MAX_SAME_AUTHOR = 1
MAX_SAME_SITE = 1
MAX_SAME_SUBSCRIPTION = 1


def median_word_count(candidates: Sequence[Candidate]) -> int:
    """Element at index len // 2 of the sorted word counts; even lengths are not averaged."""
    word_counts = sorted(c.word_count for c in candidates)
    return word_counts[len(word_counts) // 2]


def split_by_length(candidates: Sequence[Candidate]) -> Tuple[List[Candidate], List[Candidate]]:
    """Return (short, long) around the median, keeping relative order."""
    median = median_word_count(candidates)
    short_items: List[Candidate] = []
    long_items: List[Candidate] = []
    for item in candidates:
        if item.word_count < median:
            short_items.append(item)
        else:
            long_items.append(item)
    return short_items, long_items


def satisfies_constraints(batch: Sequence[Candidate], item: Candidate) -> bool:
    title_count = sum(1 for i in batch if i.title == item.title)
    author_count = sum(1 for i in batch if i.author == item.author)
    site_count = sum(1 for i in batch if i.site_name == item.site_name)
    subscription_count = sum(
        1 for i in batch if i.subscription_name == item.subscription_name
    )

    return (
        title_count <= MAX_SAME_TITLE
        and author_count <= MAX_SAME_AUTHOR
        and site_count <= MAX_SAME_SITE
        and subscription_count <= MAX_SAME_SUBSCRIPTION
    )


class FeedMixer:
    """Turns a ranked candidate list into ordered feed sections."""

    def __init__(self, batch_size: int = BATCH_SIZE, long_slots: int = LONG_SLOTS):
        self._batch_size = batch_size
        self._long_slots = long_slots

    def _place(self, item: Candidate, batches: List[List[Candidate]]) -> bool:
        for batch in batches:
            if len(batch) < self._long_slots and satisfies_constraints(batch, item):
                batch.append(item)
                return True

        # overflow: ignore diversity, only respect capacity
        for batch in batches:
            if len(batch) < self._batch_size:
                batch.append(item)
                return True

        return False

    def distribute(
        self,
        items: Sequence[Candidate],
        batches: List[List[Candidate]],
    ) -> List[Candidate]:
        """Greedy first-fit of `items` into `batches`; returns the items that did not fit."""
        leftovers: List[Candidate] = []
        for item in items:
            if not self._place(item, batches):
                leftovers.append(item)
        return leftovers

    def batch_to_sections(self, batch: Sequence[Candidate]) -> List[Section]:
        sections = [
            Section(items=[item.to_item_ref()], layout=SectionLayout.LONG)
            for item in batch[: self._long_slots]
        ]
        # a batch that never filled its long slots has nothing left for quick links
        if len(batch) >= self._long_slots:
            sections.append(
                Section(
                    items=[item.to_item_ref() for item in batch[self._long_slots:]],
                    layout=SectionLayout.QUICK_LINKS,
                )
            )
        return sections

    def mix(self, ranked: Sequence[Candidate], batch_count: Optional[int] = None) -> MixResult:
        """
        Build sections from candidates already sorted by ascending score.

        Args:
            ranked: Ranked candidates
            batch_count: Number of batches to fill (default: enough to hold every candidate)

        Returns:
            MixResult with sections in storage order and any undistributed candidates
        """
        if not ranked:
            return MixResult()

        if batch_count is None:
            batch_count = math.ceil(len(ranked) / self._batch_size)

        short_items, long_items = split_by_length(ranked)
        batches: List[List[Candidate]] = [[] for _ in range(batch_count)]

        undistributed = self.distribute(long_items, batches)
        undistributed += self.distribute(short_items, batches)
        if undistributed:
            logger.warning(f"{len(undistributed)} candidates did not fit in {batch_count} batches")

        sections: List[Section] = []
        for batch in batches:
            sections.extend(self.batch_to_sections(batch))

        return MixResult(
            sections=sections,
            undistributed=undistributed,
            batch_count=batch_count,
        )
