"""Authentication interceptor."""

import logging
from collections.abc import Mapping
from dataclasses import replace

from rest_client_core.auth.hawk import HawkAuth
from rest_client_core.transport.base import Interceptor, RestRequest, RestResponse, Transport

logger = logging.getLogger(__name__)


class HawkAuthInterceptor(Interceptor):
    """Attach Hawk signing to every request passing through.

    The header itself is computed by ``HawkAuth`` when the request is sent,
    after the path prefix and content negotiation have produced the final
    URL and body.

    Args:
        wrapped: The transport to wrap
        credentials: Mapping with ``id``, ``key`` and ``algorithm``
        ext: Optional application-specific data
        sntp: Accepted for compatibility; requests are always signed with
            the local clock.
    """

    def __init__(
        self,
        *,
        wrapped: Transport,
        credentials: Mapping[str, str],
        ext: str | None = None,
        sntp: bool = False,
    ) -> None:
        super().__init__(wrapped=wrapped)
        self.auth = HawkAuth(credentials, ext=ext)
        if sntp:
            logger.debug("SNTP clock synchronization is not supported; signing with the local clock")

    async def handle(self, request: RestRequest) -> RestResponse:
        return await self._wrapped.handle(replace(request, auth=self.auth))
