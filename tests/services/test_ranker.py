"""
Tests for Candidate Ranker
"""

from datetime import datetime
from unittest.mock import AsyncMock

import pytest

from justread.providers.score import ScoreApiError
from justread.services.just_read_feed.models import Candidate, ItemType, SubscriptionRef
from justread.services.just_read_feed.ranker import CandidateRanker


def make_candidate(i, score=None, **overrides):
    fields = dict(
        id=f"item-{i}",
        title=f"Title {i}",
        url=f"https://example.com/{i}",
        type=ItemType.PUBLIC_ITEM,
        language_code="en",
        dir="ltr",
        date=datetime(2025, 1, 1, 12, 0, 0),
        word_count=500,
        score=score,
    )
    fields.update(overrides)
    return Candidate(**fields)


@pytest.fixture
def mock_scorer():
    """Mock scoring provider."""
    return AsyncMock()


class TestCandidateRanker:
    """Tests for CandidateRanker.rank."""

    @pytest.mark.asyncio
    async def test_small_lists_returned_unchanged(self, mock_scorer):
        candidates = [make_candidate(i) for i in range(10)]

        ranked = await CandidateRanker(mock_scorer).rank("user-1", candidates)

        assert [c.id for c in ranked] == [c.id for c in candidates]
        mock_scorer.get_scores.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_list(self, mock_scorer):
        ranked = await CandidateRanker(mock_scorer).rank("user-1", [])

        assert ranked == []
        mock_scorer.get_scores.assert_not_called()

    @pytest.mark.asyncio
    async def test_sorted_ascending_by_fetched_score(self, mock_scorer):
        candidates = [make_candidate(i) for i in range(12)]
        mock_scorer.get_scores.return_value = {
            f"item-{i}": float(12 - i) for i in range(12)
        }

        ranked = await CandidateRanker(mock_scorer).rank("user-1", candidates)

        assert [c.id for c in ranked] == [f"item-{i}" for i in reversed(range(12))]

    @pytest.mark.asyncio
    async def test_precomputed_scores_not_sent(self, mock_scorer):
        candidates = [make_candidate(i, score=0.5 + i) for i in range(6)]
        candidates += [make_candidate(i) for i in range(6, 12)]
        mock_scorer.get_scores.return_value = {f"item-{i}": 0.1 * i for i in range(6, 12)}

        ranked = await CandidateRanker(mock_scorer).rank("user-1", candidates)

        mock_scorer.get_scores.assert_awaited_once()
        user_id, features = mock_scorer.get_scores.call_args.args
        assert user_id == "user-1"
        assert set(features) == {f"item-{i}" for i in range(6, 12)}

        scores = [c.score if c.score is not None else 0.1 * int(c.id.split("-")[1]) for c in ranked]
        assert scores == sorted(scores)

    @pytest.mark.asyncio
    async def test_all_precomputed_skips_scoring_call(self, mock_scorer):
        candidates = [make_candidate(i, score=float(20 - i)) for i in range(11)]

        ranked = await CandidateRanker(mock_scorer).rank("user-1", candidates)

        mock_scorer.get_scores.assert_not_called()
        assert ranked[0].id == "item-10"
        assert ranked[-1].id == "item-0"

    @pytest.mark.asyncio
    async def test_missing_score_counts_as_zero(self, mock_scorer):
        candidates = [make_candidate(i) for i in range(11)]
        # item-0 not scored, the rest negative or positive
        mock_scorer.get_scores.return_value = {
            f"item-{i}": (-1.0 if i % 2 else 1.0) for i in range(1, 11)
        }

        ranked = await CandidateRanker(mock_scorer).rank("user-1", candidates)
        ids = [c.id for c in ranked]

        negatives = [f"item-{i}" for i in range(1, 11, 2)]
        positives = [f"item-{i}" for i in range(2, 11, 2)]
        assert ids == negatives + ["item-0"] + positives

    @pytest.mark.asyncio
    async def test_feature_bundle(self, mock_scorer):
        published = datetime(2024, 12, 31, 8, 0, 0)
        candidates = [
            make_candidate(
                i,
                thumbnail="https://img" if i == 0 else None,
                site_name="example.com",
                author="Ann",
                folder="inbox",
                published_at=published,
                subscription=SubscriptionRef(name="Daily", type="NEWSLETTER"),
            )
            for i in range(11)
        ]
        mock_scorer.get_scores.return_value = {}

        await CandidateRanker(mock_scorer).rank("user-1", candidates)

        _, features = mock_scorer.get_scores.call_args.args
        bundle = features["item-0"]
        assert bundle == {
            "title": "Title 0",
            "has_thumbnail": True,
            "has_site_icon": False,
            "saved_at": "2025-01-01T12:00:00",
            "site": "example.com",
            "language": "en",
            "directionality": "ltr",
            "folder": "inbox",
            "subscription_type": "NEWSLETTER",
            "author": "Ann",
            "word_count": 500,
            "published_at": "2024-12-31T08:00:00",
        }
        assert features["item-1"]["has_thumbnail"] is False

    @pytest.mark.asyncio
    async def test_scoring_failure_propagates(self, mock_scorer):
        candidates = [make_candidate(i) for i in range(11)]
        mock_scorer.get_scores.side_effect = ScoreApiError("boom")

        with pytest.raises(ScoreApiError):
            await CandidateRanker(mock_scorer).rank("user-1", candidates)
