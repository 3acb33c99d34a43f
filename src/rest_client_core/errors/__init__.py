"""Error hierarchy and status mapping for rest-client-core."""

from rest_client_core.errors.exceptions import (
    APIError,
    BadRequestError,
    ClientError,
    ConfigurationError,
    ConflictError,
    ContentNegotiationError,
    ForbiddenError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    RequestError,
    RequestTimeoutError,
    RestClientError,
    ServerError,
    UnauthorizedError,
)
from rest_client_core.errors.handler import raise_for_status

__all__ = [
    "APIError",
    "BadRequestError",
    "ClientError",
    "ConfigurationError",
    "ConflictError",
    "ContentNegotiationError",
    "ForbiddenError",
    "NetworkError",
    "NotFoundError",
    "RateLimitError",
    "RequestError",
    "RequestTimeoutError",
    "RestClientError",
    "ServerError",
    "UnauthorizedError",
    "raise_for_status",
]
