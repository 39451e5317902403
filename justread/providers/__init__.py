from .base import Provider, ScoreProvider
from .score import ScoreApiError, ScoreApiProvider

__all__ = ["Provider", "ScoreProvider", "ScoreApiError", "ScoreApiProvider"]
