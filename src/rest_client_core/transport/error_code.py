"""Error mapping interceptor: non-2xx responses become exceptions."""

from rest_client_core.errors.handler import raise_for_status
from rest_client_core.transport.base import Interceptor, RestRequest, RestResponse


class ErrorCodeInterceptor(Interceptor):
    """Raise an ``APIError`` for any non-2xx response.

    Successful responses pass through unchanged, so callers branch on
    success or failure with a single ``try``/``except``.
    """

    async def handle(self, request: RestRequest) -> RestResponse:
        response = await self._wrapped.handle(request)
        raise_for_status(response)
        return response
