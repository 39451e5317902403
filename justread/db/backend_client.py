"""
Client for the content backend that owns users, library items,
subscriptions, and the public inventory.

Queries go through the backend's HTTP query API; this module also exposes the
four lookups the feed job consumes as typed convenience methods.
"""

import httpx
from pydantic import BaseModel, ValidationError
from typing import Any, Dict, List, Optional, Type, TypeVar

from justread.config import settings
from justread.services.just_read_feed.models import (
    LibraryItem,
    PublicItem,
    Subscription,
    User,
)


class BackendError(Exception):
    """Base exception for content backend errors."""
    pass


class BackendAuthError(BackendError):
    """Authentication error when calling the backend."""
    pass


class BackendQueryError(BackendError):
    """Error executing a backend query."""
    pass


ModelT = TypeVar("ModelT", bound=BaseModel)


def _parse_records(function_name: str, model: Type[ModelT], records: Any) -> List[ModelT]:
    """Validate query records, reporting malformed payloads as query errors."""
    try:
        return [model.model_validate(record) for record in records or []]
    except ValidationError as e:
        raise BackendQueryError(f"Malformed {function_name} response: {e}") from e


class BackendClient:
    """
    Async client for the content backend query API.

    Example usage:
        client = BackendClient(
            base_url="https://content.internal",
            api_key="secret",
        )

        user = await client.find_active_user("user-1")
        items = await client.search_library_items(
            "user-1", size=100, include_content=False, query="-is:seen",
        )
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url or settings.backend_url
        self.api_key = api_key if api_key is not None else settings.backend_api_key
        self.timeout = timeout or float(settings.request_timeout_seconds)
        self._transport = transport

        if not self.base_url:
            raise BackendError("BACKEND_URL is required")

        self.base_url = self.base_url.rstrip("/")

        self._client: Optional[httpx.AsyncClient] = None

    @property
    def headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers=self.headers,
                transport=self._transport,
            )
        return self._client

    async def close(self):
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def query(
        self,
        function_name: str,
        args: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Execute a backend query function.

        Args:
            function_name: Query path, e.g. "libraryItems:search"
            args: Arguments passed to the query

        Returns:
            The query value

        Raises:
            BackendAuthError: On a 401 response
            BackendQueryError: If the request or the query fails
        """
        client = await self._get_client()

        try:
            response = await client.post(
                f"{self.base_url}/api/query",
                json={
                    "path": function_name,
                    "args": args or {},
                },
            )

            if response.status_code == 401:
                raise BackendAuthError("Invalid or missing backend API key")

            response.raise_for_status()
            data = response.json()

            if "error" in data:
                raise BackendQueryError(data["error"])

            return data.get("value")

        except httpx.HTTPStatusError as e:
            raise BackendQueryError(f"Query failed: {e.response.text}") from e
        except httpx.RequestError as e:
            raise BackendQueryError(f"Request failed: {str(e)}") from e

    # =========================================================================
    # Feed collaborators
    # =========================================================================

    async def find_active_user(self, user_id: str) -> Optional[User]:
        """Return the user if it exists and is active."""
        value = await self.query("users:findActive", {"userId": user_id})
        if not value:
            return None
        return _parse_records("users:findActive", User, [value])[0]

    async def search_library_items(
        self,
        user_id: str,
        *,
        size: int,
        include_content: bool,
        query: str,
    ) -> List[LibraryItem]:
        """Search the user's library with a filter expression."""
        value = await self.query(
            "libraryItems:search",
            {
                "userId": user_id,
                "size": size,
                "includeContent": include_content,
                "query": query,
            },
        )
        return _parse_records("libraryItems:search", LibraryItem, value)

    async def find_subscriptions_by_names(
        self,
        user_id: str,
        names: List[str],
    ) -> List[Subscription]:
        """Resolve subscriptions whose name (or URL) is in `names`."""
        if not names:
            return []
        value = await self.query(
            "subscriptions:findByNames",
            {"userId": user_id, "names": names},
        )
        return _parse_records("subscriptions:findByNames", Subscription, value)

    async def find_unseen_public_items(
        self,
        user_id: str,
        *,
        limit: int,
    ) -> List[PublicItem]:
        """Public inventory items the user has not seen yet."""
        value = await self.query(
            "publicItems:findUnseen",
            {"userId": user_id, "limit": limit},
        )
        return _parse_records("publicItems:findUnseen", PublicItem, value)


# Singleton instance
_backend_client: Optional[BackendClient] = None


def get_backend_client() -> BackendClient:
    """Get the singleton backend client instance."""
    global _backend_client
    if _backend_client is None:
        _backend_client = BackendClient()
    return _backend_client


async def close_backend_client():
    """Close the singleton client's HTTP connections, if it was ever created."""
    global _backend_client
    if _backend_client is not None:
        await _backend_client.close()
        _backend_client = None
