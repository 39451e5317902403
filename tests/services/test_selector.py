"""
Tests for Candidate Selector

Tests item conversion and the private/public candidate budget.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from justread.db import BackendQueryError
from justread.services.just_read_feed.language import language_to_code
from justread.services.just_read_feed.models import (
    ItemType,
    LibraryItem,
    PublicItem,
    Subscription,
    User,
)
from justread.services.just_read_feed.selector import (
    CandidateSelector,
    UNSEEN_LIBRARY_QUERY,
    library_item_to_candidate,
    public_item_to_candidate,
)


CREATED_AT = datetime(2025, 1, 1, tzinfo=timezone.utc)


def make_library_item(i, **overrides):
    data = {
        "id": f"lib-{i}",
        "title": f"Library {i}",
        "originalUrl": f"https://example.com/lib/{i}",
        "createdAt": CREATED_AT.isoformat(),
        "wordCount": 800 + i,
    }
    data.update(overrides)
    return LibraryItem.model_validate(data)


def make_public_item(i, **overrides):
    data = {
        "id": f"pub-{i}",
        "title": f"Public {i}",
        "url": f"https://example.com/pub/{i}",
        "createdAt": CREATED_AT.isoformat(),
        "wordCount": 400 + i,
        "source": {"name": f"source-{i}", "type": "RSS"},
    }
    data.update(overrides)
    return PublicItem.model_validate(data)


@pytest.fixture
def user():
    return User(id="user-1")


@pytest.fixture
def mock_backend():
    """Mock content backend."""
    backend = AsyncMock()
    backend.search_library_items.return_value = []
    backend.find_subscriptions_by_names.return_value = []
    backend.find_unseen_public_items.return_value = []
    return backend


# =============================================================================
# Conversion Tests
# =============================================================================


class TestLanguageToCode:
    """Tests for language_to_code."""

    def test_known_names(self):
        assert language_to_code("English") == "en"
        assert language_to_code("french") == "fr"
        assert language_to_code(" German ") == "de"

    def test_defaults(self):
        assert language_to_code(None) == "en"
        assert language_to_code("") == "en"
        assert language_to_code("Klingon") == "en"

    def test_code_passthrough(self):
        assert language_to_code("ja") == "ja"


class TestLibraryItemToCandidate:
    """Tests for library item conversion."""

    def test_defaults(self):
        candidate = library_item_to_candidate(make_library_item(1), [])

        assert candidate.id == "lib-1"
        assert candidate.url == "https://example.com/lib/1"
        assert candidate.type == ItemType.LIBRARY_ITEM
        assert candidate.language_code == "en"
        assert candidate.dir == "ltr"
        assert candidate.word_count == 801
        assert candidate.subscription is None
        assert candidate.score is None

    def test_optional_fields(self):
        item = make_library_item(
            1,
            description="Preview",
            itemLanguage="Spanish",
            directionality="rtl",
            siteName="",
            score=0.75,
        )
        candidate = library_item_to_candidate(item, [])

        assert candidate.preview_content == "Preview"
        assert candidate.language_code == "es"
        assert candidate.dir == "rtl"
        assert candidate.site_name is None
        assert candidate.score == 0.75

    def test_subscription_matched_by_name(self):
        subs = [Subscription(name="Daily", url="https://daily.example.com", type="NEWSLETTER")]
        candidate = library_item_to_candidate(make_library_item(1, subscription="Daily"), subs)

        assert candidate.subscription.name == "Daily"
        assert candidate.subscription.type == "NEWSLETTER"

    def test_subscription_matched_by_url(self):
        subs = [Subscription(name="Blog", url="https://blog.example.com/rss", type="RSS")]
        item = make_library_item(1, subscription="https://blog.example.com/rss")
        candidate = library_item_to_candidate(item, subs)

        assert candidate.subscription.name == "Blog"

    def test_unresolved_subscription_absent(self):
        subs = [Subscription(name="Other", type="RSS")]
        candidate = library_item_to_candidate(make_library_item(1, subscription="Daily"), subs)

        assert candidate.subscription is None


class TestPublicItemToCandidate:
    """Tests for public item conversion."""

    def test_conversion(self):
        candidate = public_item_to_candidate(make_public_item(3, languageCode="de"))

        assert candidate.type == ItemType.PUBLIC_ITEM
        assert candidate.language_code == "de"
        assert candidate.dir == "ltr"
        assert candidate.subscription.name == "source-3"
        assert candidate.subscription.type == "RSS"

    def test_language_default(self):
        candidate = public_item_to_candidate(make_public_item(3))
        assert candidate.language_code == "en"


# =============================================================================
# Selector Tests
# =============================================================================


class TestCandidateSelector:
    """Tests for CandidateSelector.select."""

    @pytest.mark.asyncio
    async def test_queries(self, mock_backend, user):
        await CandidateSelector(mock_backend).select(user)

        mock_backend.search_library_items.assert_awaited_once_with(
            "user-1", size=100, include_content=False, query=UNSEEN_LIBRARY_QUERY,
        )
        mock_backend.find_unseen_public_items.assert_awaited_once_with("user-1", limit=100)

    @pytest.mark.asyncio
    async def test_subscription_names_resolved(self, mock_backend, user):
        mock_backend.search_library_items.return_value = [
            make_library_item(1, subscription="Daily"),
            make_library_item(2),
            make_library_item(3, subscription="Weekly"),
        ]
        mock_backend.find_subscriptions_by_names.return_value = [
            Subscription(name="Daily", type="NEWSLETTER"),
        ]

        candidates = await CandidateSelector(mock_backend).select(user)

        mock_backend.find_subscriptions_by_names.assert_awaited_once_with(
            "user-1", ["Daily", "Weekly"]
        )
        assert candidates[0].subscription.name == "Daily"
        assert candidates[1].subscription is None
        assert candidates[2].subscription is None

    @pytest.mark.asyncio
    async def test_private_capped_at_70_public_fills_rest(self, mock_backend, user):
        mock_backend.search_library_items.return_value = [make_library_item(i) for i in range(100)]
        mock_backend.find_unseen_public_items.return_value = [make_public_item(i) for i in range(100)]

        candidates = await CandidateSelector(mock_backend).select(user)

        private = [c for c in candidates if c.type == ItemType.LIBRARY_ITEM]
        public = [c for c in candidates if c.type == ItemType.PUBLIC_ITEM]
        assert len(candidates) == 100
        assert len(private) == 70
        assert len(public) == 30
        assert [c.id for c in private] == [f"lib-{i}" for i in range(70)]
        assert [c.id for c in public] == [f"pub-{i}" for i in range(30)]

    @pytest.mark.asyncio
    async def test_few_private_items(self, mock_backend, user):
        mock_backend.search_library_items.return_value = [make_library_item(i) for i in range(5)]
        mock_backend.find_unseen_public_items.return_value = [make_public_item(i) for i in range(50)]

        candidates = await CandidateSelector(mock_backend).select(user)

        assert len(candidates) == 35
        assert candidates[0].id == "lib-0"
        assert candidates[5].id == "pub-0"

    @pytest.mark.asyncio
    async def test_no_public_items(self, mock_backend, user):
        mock_backend.search_library_items.return_value = [make_library_item(i) for i in range(5)]

        candidates = await CandidateSelector(mock_backend).select(user)

        assert [c.id for c in candidates] == [f"lib-{i}" for i in range(5)]

    @pytest.mark.asyncio
    async def test_backend_error_propagates(self, mock_backend, user):
        mock_backend.search_library_items.side_effect = BackendQueryError("down")

        with pytest.raises(BackendQueryError):
            await CandidateSelector(mock_backend).select(user)
