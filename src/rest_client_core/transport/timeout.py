"""Per-attempt timeout interceptor."""

import asyncio
import logging

from rest_client_core.errors.exceptions import RequestTimeoutError
from rest_client_core.transport.base import Interceptor, RestRequest, RestResponse, Transport

logger = logging.getLogger(__name__)


class TimeoutInterceptor(Interceptor):
    """Cancel an attempt that runs longer than ``timeout`` milliseconds.

    A timeout of zero or less disables cancellation. Placed inside the retry
    interceptor, the deadline applies to each attempt rather than to the
    whole retrying operation.
    """

    def __init__(self, *, wrapped: Transport, timeout: float = 1000 * 30) -> None:
        super().__init__(wrapped=wrapped)
        self.timeout = timeout

    async def handle(self, request: RestRequest) -> RestResponse:
        if self.timeout <= 0:
            return await self._wrapped.handle(request)

        try:
            return await asyncio.wait_for(self._wrapped.handle(request), self.timeout / 1000)
        except TimeoutError as e:
            logger.debug(f"Request {request.effective_method} {request.path} timed out after {self.timeout}ms")
            raise RequestTimeoutError(
                f"Request {request.effective_method} {request.path} timed out after {self.timeout}ms",
                request=request,
            ) from e
