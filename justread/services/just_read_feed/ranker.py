"""
Candidate Ranker

Orders candidates by relevance, reusing scores that were already computed and
asking the scoring service for the rest.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from .models import Candidate

logger = logging.getLogger(__name__)

# Feeds this small are not worth a scoring call
MIN_CANDIDATES_TO_RANK = 10


class CandidateRanker:
    """Sorts candidates in ascending score order (lowest first)."""

    def __init__(self, scorer: Any, min_candidates: int = MIN_CANDIDATES_TO_RANK):
        """
        Args:
            scorer: Provider exposing get_scores(user_id, item_features)
            min_candidates: Lists of this size or smaller are returned unchanged
        """
        self._scorer = scorer
        self._min_candidates = min_candidates

    async def rank(self, user_id: str, candidates: List[Candidate]) -> List[Candidate]:
        if len(candidates) <= self._min_candidates:
            return candidates

        precalculated: Dict[str, float] = {
            c.id: c.score for c in candidates if c.score is not None
        }
        unscored = [c for c in candidates if c.score is None]

        new_scores: Dict[str, float] = {}
        if unscored:
            item_features = {c.id: c.to_features() for c in unscored}
            logger.info(f"Requesting scores for {len(item_features)} candidates")
            new_scores = await self._scorer.get_scores(user_id, item_features)

        # disjoint by construction
        scores = {**precalculated, **new_scores}

        return sorted(candidates, key=lambda c: scores.get(c.id) or 0)
