"""
Just Read Feed Data Models

Source entities read from the content backend, the normalized candidate the
feed pipeline works on, and the sections persisted to the feed store.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class ItemType(str, Enum):
    """Where a candidate came from."""
    LIBRARY_ITEM = "library_item"  # User's own saved item
    PUBLIC_ITEM = "public_item"    # Shared public inventory


class SectionLayout(str, Enum):
    """Display layout of a stored section."""
    LONG = "long"                # Exactly one item
    QUICK_LINKS = "quick links"  # Several items


# =============================================================================
# Source entities (content backend payloads)
# =============================================================================


class User(BaseModel):
    """A user as returned by the active-user lookup."""

    id: str
    status: str = "ACTIVE"


class Subscription(BaseModel):
    """A user's subscription (newsletter, feed) resolved by name."""

    id: Optional[str] = None
    name: str
    url: Optional[str] = None
    type: str


class LibraryItem(BaseModel):
    """An item saved in the user's library."""

    id: str
    title: str
    original_url: str = Field(..., alias="originalUrl")
    thumbnail: Optional[str] = None
    description: Optional[str] = None
    item_language: Optional[str] = Field(None, alias="itemLanguage")
    author: Optional[str] = None
    directionality: Optional[str] = None
    created_at: datetime = Field(..., alias="createdAt")
    topic: Optional[str] = None
    word_count: Optional[int] = Field(None, alias="wordCount")
    site_name: Optional[str] = Field(None, alias="siteName")
    site_icon: Optional[str] = Field(None, alias="siteIcon")
    folder: Optional[str] = None
    score: Optional[float] = None
    published_at: Optional[datetime] = Field(None, alias="publishedAt")
    subscription: Optional[str] = None

    class Config:
        populate_by_name = True


class PublicItemSource(BaseModel):
    """Origin of a public inventory item."""

    name: str
    type: str


class PublicItem(BaseModel):
    """An item from the shared public inventory."""

    id: str
    title: str
    url: str
    thumbnail: Optional[str] = None
    preview_content: Optional[str] = Field(None, alias="previewContent")
    language_code: Optional[str] = Field(None, alias="languageCode")
    author: Optional[str] = None
    dir: Optional[str] = None
    created_at: datetime = Field(..., alias="createdAt")
    topic: Optional[str] = None
    word_count: Optional[int] = Field(None, alias="wordCount")
    site_icon: Optional[str] = Field(None, alias="siteIcon")
    published_at: Optional[datetime] = Field(None, alias="publishedAt")
    source: PublicItemSource

    class Config:
        populate_by_name = True


# =============================================================================
# Pipeline models
# =============================================================================


@dataclass
class SubscriptionRef:
    """Name and type of the subscription a candidate came through."""
    name: str
    type: str


@dataclass
class Candidate:
    """
    A normalized content item eligible for the feed.

    Built fresh on every job run and never persisted as-is.
    """
    id: str
    title: str
    url: str
    type: ItemType
    language_code: str
    dir: str
    date: datetime
    word_count: int
    thumbnail: Optional[str] = None
    preview_content: Optional[str] = None
    author: Optional[str] = None
    topic: Optional[str] = None
    site_icon: Optional[str] = None
    site_name: Optional[str] = None
    folder: Optional[str] = None
    score: Optional[float] = None  # Precomputed relevance, if any
    published_at: Optional[datetime] = None
    subscription: Optional[SubscriptionRef] = None

    @property
    def subscription_name(self) -> Optional[str]:
        return self.subscription.name if self.subscription else None

    def to_features(self) -> Dict[str, Any]:
        """Feature bundle sent to the scoring service."""
        return {
            "title": self.title,
            "has_thumbnail": bool(self.thumbnail),
            "has_site_icon": bool(self.site_icon),
            "saved_at": self.date.isoformat(),
            "site": self.site_name,
            "language": self.language_code,
            "directionality": self.dir,
            "folder": self.folder,
            "subscription_type": self.subscription.type if self.subscription else None,
            "author": self.author,
            "word_count": self.word_count,
            "published_at": self.published_at.isoformat() if self.published_at else None,
        }

    def to_item_ref(self) -> "SectionItem":
        return SectionItem(id=self.id, type=self.type.value)


@dataclass(frozen=True)
class SectionItem:
    """Reference to an item inside a section; enough to resolve it later."""
    id: str
    type: str

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "type": self.type}


@dataclass(frozen=True)
class Section:
    """The unit stored in and served from the feed."""
    items: List[SectionItem]
    layout: SectionLayout

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [item.to_dict() for item in self.items],
            "layout": self.layout.value,
        }

    def to_json(self) -> str:
        """Serialized form used as the store member."""
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Section":
        return cls(
            items=[SectionItem(id=i["id"], type=i["type"]) for i in data.get("items", [])],
            layout=SectionLayout(data["layout"]),
        )

    @classmethod
    def from_json(cls, raw: str) -> "Section":
        return cls.from_dict(json.loads(raw))


@dataclass
class FeedEntry:
    """A section read back from the store with its rank-score."""
    section: Section
    score: int

    def to_dict(self) -> Dict[str, Any]:
        return {"section": self.section.to_dict(), "score": self.score}


@dataclass
class MixResult:
    """Sections produced by the mixer plus anything it could not place."""
    sections: List[Section] = field(default_factory=list)
    undistributed: List[Candidate] = field(default_factory=list)
    batch_count: int = 0
