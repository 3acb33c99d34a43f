"""REST client factory.

``create_client`` resolves the options and builds a ``RestClient`` whose
transport is this interceptor chain, outermost first:

1. content negotiation (unless ``mime`` is False)
2. Hawk authentication (only if ``auth.hawk`` is set)
3. path prefix (``base_url``)
4. retry (unless ``retry`` is False)
5. timeout
6. error mapping

Example:
    ```python
    from rest_client_core import create_client

    async with create_client({"base_url": "http://localhost:8000"}) as client:
        response = await client(
            {"path": "/api/log", "entity": {"tags": ["info"], "data": "hello"}}
        )
    ```
"""

import logging
from collections.abc import Mapping
from dataclasses import asdict
from typing import Any

import httpx

from rest_client_core.config import ResolvedConfig, resolve_config
from rest_client_core.transport.auth import HawkAuthInterceptor
from rest_client_core.transport.base import (
    HttpxTransport,
    Interceptor,
    RestRequest,
    RestResponse,
    Transport,
    chain,
)
from rest_client_core.transport.error_code import ErrorCodeInterceptor
from rest_client_core.transport.mime import MimeInterceptor
from rest_client_core.transport.path_prefix import PathPrefixInterceptor
from rest_client_core.transport.retry import RetryInterceptor
from rest_client_core.transport.timeout import TimeoutInterceptor

logger = logging.getLogger(__name__)


def interceptor_layers(config: ResolvedConfig) -> list[tuple[type[Interceptor], dict[str, Any]]]:
    """Return the interceptors for ``config``, outermost first, with their settings."""
    layers: list[tuple[type[Interceptor], dict[str, Any]]] = []

    if config.mime is not None:
        layers.append((MimeInterceptor, {"mime": config.mime.mime, "accept": config.mime.accept}))

    if config.auth is not None:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Chaining Hawk auth interceptor to REST client")
        layers.append(
            (
                HawkAuthInterceptor,
                {
                    "credentials": asdict(config.auth.credentials),
                    "ext": config.auth.ext,
                    "sntp": config.auth.sntp,
                },
            )
        )

    layers.append((PathPrefixInterceptor, {"prefix": config.base_url}))

    if config.retry is not None:
        layers.append((RetryInterceptor, asdict(config.retry)))

    layers.append((TimeoutInterceptor, {"timeout": config.timeout}))
    layers.append((ErrorCodeInterceptor, {}))
    return layers


def build_transport(config: ResolvedConfig, base: Transport) -> Transport:
    """Wrap ``base`` in the interceptor chain described by ``config``."""
    transport = base
    for interceptor, settings in reversed(interceptor_layers(config)):
        transport = chain(transport, interceptor, **settings)
    return transport


class RestClient:
    """Callable REST client.

    ``await client(request)`` sends one logical request, which may take
    several attempts when retry is enabled, and returns the response of the
    first successful attempt.

    Args:
        config: Resolved client configuration.
        transport: Optional httpx transport used by the underlying
            ``httpx.AsyncClient`` (for example ``httpx.MockTransport`` in tests).

    Raises (when awaited):
        RequestError: If the request ultimately fails.
    """

    def __init__(self, config: ResolvedConfig, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.config = config
        self._http_client = httpx.AsyncClient(transport=transport, timeout=None)
        self.transport = build_transport(config, HttpxTransport(client=self._http_client))

    async def __call__(self, request: RestRequest | Mapping[str, Any] | str) -> RestResponse:
        return await self.transport.handle(RestRequest.coerce(request))

    async def aclose(self) -> None:
        await self.transport.aclose()

    async def __aenter__(self) -> "RestClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()


def create_client(
    options: Mapping[str, Any] | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> RestClient:
    """Resolve ``options`` and build a client.

    Raises:
        ConfigurationError: If the options are invalid. No client is built.
    """
    config = resolve_config(options)
    return RestClient(config, transport=transport)
