from abc import ABC, abstractmethod
from typing import Any, Dict


class Provider(ABC):
    """Base interface for external services the feed job depends on"""

    name: str
    timeout_s: int = 10

    @abstractmethod
    async def ready(self) -> bool:
        """Check if provider is configured to serve requests"""
        pass

    @abstractmethod
    async def health_check(self) -> Dict[str, Any]:
        """Return provider health status"""
        pass


class ScoreProvider(Provider):
    """Provider of per-item relevance scores for a user"""

    @abstractmethod
    async def get_scores(self, user_id: str, item_features: Dict[str, Dict[str, Any]]) -> Dict[str, float]:
        """Score items keyed by item id; returns item id -> score"""
        pass
