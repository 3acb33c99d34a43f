"""Error handling utilities for REST responses."""

from typing import TYPE_CHECKING

from rest_client_core.errors.exceptions import (
    APIError,
    BadRequestError,
    ClientError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
    RateLimitError,
    ServerError,
    UnauthorizedError,
)

if TYPE_CHECKING:
    from rest_client_core.transport.base import RestResponse

EXCEPTION_MAP: dict[int, type[APIError]] = {
    400: BadRequestError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
    429: RateLimitError,
}


def raise_for_status(response: "RestResponse") -> None:
    """Raise the matching APIError for a non-2xx response.

    Args:
        response: Response produced by the transport

    Raises:
        APIError subclass based on status code
    """
    if response.is_success:
        return

    status_code = response.status_code

    if status_code in EXCEPTION_MAP:
        exc_class = EXCEPTION_MAP[status_code]
    elif 400 <= status_code < 500:
        exc_class = ClientError
    elif 500 <= status_code < 600:
        exc_class = ServerError
    else:
        exc_class = APIError

    body = response.entity if isinstance(response.entity, str) else ""
    body = body[:200]
    message = f"HTTP {status_code}: {body}" if body else f"HTTP {status_code} {response.status_text}".rstrip()

    if exc_class is RateLimitError:
        retry_after = None
        if "retry-after" in response.headers:
            try:
                retry_after = int(response.headers["retry-after"])
            except (ValueError, TypeError):
                retry_after = None
        raise RateLimitError(
            message=message,
            retry_after=retry_after,
            status_code=status_code,
            response=response,
            request=response.request,
        )

    raise exc_class(
        message=message,
        status_code=status_code,
        response=response,
        request=response.request,
    )
