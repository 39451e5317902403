from fastapi import APIRouter
from typing import Dict, Any

from ..db import get_redis_data_source
from ..dependencies import get_score_provider

router = APIRouter()


async def _store_status() -> Dict[str, Any]:
    source = get_redis_data_source()
    if not source.enabled:
        return {"status": "unavailable", "reason": "REDIS_URL not configured"}
    try:
        await source.ping()
        return {"status": "healthy"}
    except Exception as e:
        return {"status": "error", "reason": str(e)}


@router.get("/healthz")
async def health_check() -> Dict[str, Any]:
    """Health check endpoint that verifies the feed store and scoring service"""

    dependency_status = {
        "feed_store": await _store_status(),
        "score_api": await get_score_provider().health_check(),
    }

    # The feed cannot be served without its store
    store_ok = dependency_status["feed_store"]["status"] == "healthy"
    all_ok = all(
        status["status"] in ["healthy", "unavailable"]
        for status in dependency_status.values()
    )

    return {
        "status": "healthy" if store_ok and all_ok else "degraded",
        "dependencies": dependency_status,
    }
