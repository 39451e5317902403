from .backend_client import (
    BackendAuthError,
    BackendClient,
    BackendError,
    BackendQueryError,
    close_backend_client,
    get_backend_client,
)
from .redis_source import RedisDataSource, close_redis_data_source, get_redis_data_source

__all__ = [
    "BackendAuthError",
    "BackendClient",
    "BackendError",
    "BackendQueryError",
    "close_backend_client",
    "get_backend_client",
    "RedisDataSource",
    "close_redis_data_source",
    "get_redis_data_source",
]
