"""Retry interceptor with exponential backoff.

A failed attempt is retried when it failed with a network error, a timeout,
or a response status that signals a transient condition (429, 502, 503,
504). Other failures, such as 4xx client errors and content negotiation
errors, propagate immediately.

Delays are in milliseconds: the first retry waits ``initial``, each
following retry waits ``multiplier`` times longer, never more than ``max``.

## Example

```python
from rest_client_core.transport.base import chain
from rest_client_core.transport.retry import RetryInterceptor

transport = chain(
    transport,
    RetryInterceptor,
    initial=100,  # 100ms, 200ms, 400ms, ...
    multiplier=2,
    max=10_000,  # never wait longer than 10s
    max_retries=5,
)
```
"""

import asyncio
import logging

from rest_client_core.errors.exceptions import (
    APIError,
    NetworkError,
    RequestError,
    RequestTimeoutError,
)
from rest_client_core.transport.base import Interceptor, RestRequest, RestResponse, Transport

logger = logging.getLogger(__name__)


class RetryInterceptor(Interceptor):
    """Re-drive the wrapped transport on transient failures.

    Every HTTP method is retried; the wrapped chain re-signs and re-sends
    the request on each attempt.

    Args:
        wrapped: The transport to wrap
        initial: Delay before the first retry in milliseconds (default: 100)
        multiplier: Factor applied to the delay after each failure (default: 2)
        max: Upper bound for any single delay in milliseconds (default: 1 hour)
        max_retries: Maximum number of retry attempts (default: 5)
        retry_status_codes: Status codes that trigger a retry (default: 429, 502, 503, 504)
    """

    DEFAULT_RETRY_STATUS_CODES: frozenset[int] = frozenset([429, 502, 503, 504])

    def __init__(
        self,
        *,
        wrapped: Transport,
        initial: float = 100,
        multiplier: float = 2,
        max: float = 1000 * 60 * 60,
        max_retries: int = 5,
        retry_status_codes: frozenset[int] | None = None,
    ) -> None:
        super().__init__(wrapped=wrapped)
        self.initial = initial
        self.multiplier = multiplier
        self.max = max
        self.max_retries = max_retries
        self.retry_status_codes = retry_status_codes or self.DEFAULT_RETRY_STATUS_CODES

    async def handle(self, request: RestRequest) -> RestResponse:
        """Handle request, retrying transient failures with backoff.

        Args:
            request: The request to send

        Returns:
            Response of the first successful attempt

        Raises:
            RequestError: The last failure once retries are exhausted, or the
                first failure that is not retryable.
        """
        retries = 0
        delay = min(self.initial, self.max)

        while True:
            try:
                return await self._wrapped.handle(request)
            except RequestError as e:
                if retries >= self.max_retries or not self._should_retry(e):
                    raise

                retries += 1
                logger.warning(
                    f"Request {request.effective_method} {request.path} failed with {e!r}, "
                    f"retrying in {delay}ms (attempt {retries}/{self.max_retries})"
                )

                await asyncio.sleep(delay / 1000)
                delay = self._next_delay(delay)

    def _should_retry(self, error: RequestError) -> bool:
        """Determine if a failed attempt should be retried.

        Args:
            error: The failure raised by the wrapped transport

        Returns:
            True if should retry, False otherwise
        """
        if isinstance(error, (NetworkError, RequestTimeoutError)):
            return True
        if isinstance(error, APIError):
            return error.status_code in self.retry_status_codes
        return False

    def _next_delay(self, delay: float) -> float:
        """Calculate the delay for the next retry, capped at ``max``."""
        return min(delay * self.multiplier, self.max)
