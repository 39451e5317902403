import httpx
from typing import Any, Dict, Optional

from ..config import settings
from .base import ScoreProvider


class ScoreApiError(Exception):
    """The scoring service could not produce scores."""
    pass


class ScoreApiProvider(ScoreProvider):
    """HTTP client for the relevance scoring service"""

    name = "score_api"

    def __init__(
        self,
        api_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout_s: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_url = api_url if api_url is not None else settings.score_api_url
        self.token = token if token is not None else settings.score_api_token
        self.timeout_s = timeout_s or settings.request_timeout_seconds
        self._transport = transport

    def _build_headers(self) -> Dict[str, str]:
        headers: Dict[str, str] = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def ready(self) -> bool:
        return bool(self.api_url)

    async def health_check(self) -> Dict[str, Any]:
        if not await self.ready():
            return {
                "status": "unavailable",
                "reason": "SCORE_API_URL not configured"
            }

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(
                    self.api_url,
                    headers=self._build_headers(),
                    json={"user_id": "healthcheck", "item_features": {}},
                    timeout=self.timeout_s,
                )
                response.raise_for_status()
                return {"status": "healthy", "latency_ms": int(response.elapsed.total_seconds() * 1000)}
        except httpx.HTTPError as e:
            return {"status": "error", "reason": str(e)}

    async def get_scores(self, user_id: str, item_features: Dict[str, Dict[str, Any]]) -> Dict[str, float]:
        """POST the feature bundles and return the id -> score mapping"""
        if not await self.ready():
            raise ScoreApiError("SCORE_API_URL is required")

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(
                    self.api_url,
                    headers=self._build_headers(),
                    json={"user_id": user_id, "item_features": item_features},
                    timeout=self.timeout_s,
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            raise ScoreApiError(f"Scoring failed: {e.response.status_code} {e.response.text}") from e
        except httpx.RequestError as e:
            raise ScoreApiError(f"Request failed: {str(e)}") from e

        if not isinstance(data, dict):
            raise ScoreApiError(f"Unexpected scoring response: {type(data).__name__}")

        try:
            return {str(item_id): float(score) for item_id, score in data.items() if score is not None}
        except (TypeError, ValueError) as e:
            raise ScoreApiError(f"Non-numeric score in response: {e}") from e
