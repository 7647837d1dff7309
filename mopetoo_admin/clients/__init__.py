from mopetoo_admin.clients.auth_store import AuthStore
from mopetoo_admin.clients.config import ClientConfig, ConfigError, load_config
from mopetoo_admin.clients.errors import (
    ApiError,
    AuthError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    RateLimitError,
    ServerError,
    TransportError,
    ValidationError,
    map_error,
)
from mopetoo_admin.clients.http_client import HttpClient

__all__ = [
    "AuthStore",
    "ClientConfig",
    "ConfigError",
    "load_config",
    "ApiError",
    "AuthError",
    "ConflictError",
    "NotFoundError",
    "PermissionDeniedError",
    "RateLimitError",
    "ServerError",
    "TransportError",
    "ValidationError",
    "map_error",
    "HttpClient",
]
