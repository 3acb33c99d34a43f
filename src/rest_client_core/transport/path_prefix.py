"""Path prefix interceptor."""

from dataclasses import replace

import httpx

from rest_client_core.transport.base import Interceptor, RestRequest, RestResponse, Transport


def join_path(prefix: str, path: str) -> str:
    """Join ``prefix`` and ``path`` with exactly one slash.

    Absolute URLs are returned unchanged, an empty path yields the prefix.
    """
    if not prefix or httpx.URL(path).is_absolute_url:
        return path
    if not path:
        return prefix
    return f"{prefix.rstrip('/')}/{path.lstrip('/')}"


class PathPrefixInterceptor(Interceptor):
    """Rewrite every request path to be relative to ``prefix``."""

    def __init__(self, *, wrapped: Transport, prefix: str) -> None:
        super().__init__(wrapped=wrapped)
        self.prefix = prefix

    async def handle(self, request: RestRequest) -> RestResponse:
        return await self._wrapped.handle(replace(request, path=join_path(self.prefix, request.path)))
