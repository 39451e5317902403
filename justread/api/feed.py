"""
Feed API Endpoints

Serves a user's stored feed sections page by page and lets the scheduler
trigger a refresh.
"""

from fastapi import APIRouter, Header, HTTPException, Query
from pydantic import BaseModel
from typing import List, Optional
import logging

from ..config import settings
from ..db import BackendError
from ..dependencies import get_feed_store, get_feed_worker
from ..providers.score import ScoreApiError
from ..services.just_read_feed.store import FeedStoreUnavailableError

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/feed")

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


# =============================================================================
# Response Models
# =============================================================================


class SectionItemOut(BaseModel):
    id: str
    type: str


class SectionOut(BaseModel):
    items: List[SectionItemOut]
    layout: str


class FeedEntryOut(BaseModel):
    """A section with the rank-score used as its pagination cursor."""
    section: SectionOut
    score: int


class FeedResponse(BaseModel):
    sections: List[FeedEntryOut]
    count: int
    nextCursor: Optional[int] = None


class RefreshResult(BaseModel):
    """Result of a triggered feed refresh."""
    success: bool
    written: bool = False
    sections: int = 0
    skippedReason: Optional[str] = None
    message: Optional[str] = None


# =============================================================================
# Public Endpoints
# =============================================================================


@router.get("/{user_id}", response_model=FeedResponse)
async def get_feed(
    user_id: str,
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    cursor: Optional[int] = None,
):
    """Get a page of feed sections, newest first; pass the last score as `cursor` for the next page."""
    try:
        store = get_feed_store()
        entries = await store.get_sections(user_id, limit, max_score=cursor)
    except FeedStoreUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except Exception as e:
        logger.error(f"Error reading feed for {user_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    sections = [FeedEntryOut(**entry.to_dict()) for entry in entries]
    next_cursor = entries[-1].score if len(entries) == limit else None

    return FeedResponse(
        sections=sections,
        count=len(sections),
        nextCursor=next_cursor,
    )


# =============================================================================
# Internal Endpoints (called by the job scheduler)
# =============================================================================


@router.post("/internal/refresh/{user_id}", response_model=RefreshResult)
async def trigger_feed_refresh(
    user_id: str,
    x_internal_key: str = Header(..., alias="X-Internal-Key"),
):
    """Run the feed refresh job for one user."""
    if not settings.internal_api_key or x_internal_key != settings.internal_api_key:
        raise HTTPException(status_code=401, detail="Invalid internal API key")

    try:
        worker = get_feed_worker()
        result = await worker.run(user_id)
    except FeedStoreUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except (BackendError, ScoreApiError) as e:
        logger.error(f"Feed refresh for {user_id} failed: {e}")
        return RefreshResult(success=False, message=str(e))

    return RefreshResult(
        success=True,
        written=result.written,
        sections=result.sections,
        skippedReason=result.skipped_reason,
    )
