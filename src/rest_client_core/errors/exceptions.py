"""Structured exceptions for configuration and request errors."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rest_client_core.transport.base import RestRequest, RestResponse


class RestClientError(Exception):
    """Base exception for everything raised by rest-client-core."""

    pass


class ConfigurationError(RestClientError, ValueError):
    """Raised synchronously when client options are invalid.

    A configuration error is fatal to client construction: no client is
    built and no request is attempted.
    """

    pass


class RequestError(RestClientError):
    """Base exception for failures of a single client call."""

    def __init__(
        self,
        message: str,
        request: "RestRequest | None" = None,
        response: "RestResponse | None" = None,
    ):
        super().__init__(message)
        self.request = request
        self.response = response


class NetworkError(RequestError):
    """The transport failed before a response was received."""

    pass


class RequestTimeoutError(RequestError):
    """An attempt did not complete within the configured timeout."""

    pass


class ContentNegotiationError(RequestError):
    """An entity could not be serialized or deserialized."""

    pass


class APIError(RequestError):
    """Non-2xx HTTP response."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response: "RestResponse | None" = None,
        request: "RestRequest | None" = None,
    ):
        super().__init__(message, request=request, response=response)
        self.status_code = status_code


class ClientError(APIError):
    """4xx client errors."""

    pass


class BadRequestError(ClientError):
    """400 Bad Request."""

    pass


class UnauthorizedError(ClientError):
    """401 Unauthorized."""

    pass


class ForbiddenError(ClientError):
    """403 Forbidden."""

    pass


class NotFoundError(ClientError):
    """404 Not Found."""

    pass


class ConflictError(ClientError):
    """409 Conflict."""

    pass


class RateLimitError(ClientError):
    """429 Too Many Requests."""

    def __init__(self, message: str, retry_after: int | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class ServerError(APIError):
    """5xx server errors."""

    pass
