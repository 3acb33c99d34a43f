"""Base transport, interceptor and request/response models.

Every layer of a client is a ``Transport``: an object with an async
``handle(request)`` method that returns a ``RestResponse`` or raises a
``RequestError``. Interceptors are transports that wrap another transport,
so layers compose by plain wrapping:

```python
transport = HttpxTransport(client=httpx.AsyncClient())
transport = chain(transport, TimeoutInterceptor, timeout=1000)
response = await transport.handle(RestRequest(path="https://api.example.com/ping"))
```
"""

import abc
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

import httpx

from rest_client_core.errors.exceptions import ContentNegotiationError, NetworkError

logger = logging.getLogger(__name__)

REQUEST_FIELDS = frozenset(["path", "method", "entity", "headers", "params"])


@dataclass(frozen=True)
class RestRequest:
    """Request descriptor passed through the interceptor chain.

    Attributes:
        path: Path relative to the base URL, or an absolute URL.
        method: HTTP method. Defaults to POST with an entity, GET without.
        entity: Request body. Serialized by the content negotiation layer.
        headers: Request headers (case-insensitive).
        params: Optional query parameters.
        auth: httpx auth flow applied when the request is sent.
    """

    path: str = ""
    method: str | None = None
    entity: Any = None
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    params: Mapping[str, Any] | None = None
    auth: httpx.Auth | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.headers, httpx.Headers):
            object.__setattr__(self, "headers", httpx.Headers(self.headers or {}))

    @classmethod
    def coerce(cls, request: "RestRequest | Mapping[str, Any] | str") -> "RestRequest":
        """Build a request from a descriptor mapping or a bare path."""
        if isinstance(request, RestRequest):
            return request
        if isinstance(request, str):
            return cls(path=request)
        if isinstance(request, Mapping):
            unknown = set(request) - REQUEST_FIELDS
            if unknown:
                logger.debug(f"Ignoring unknown request fields: {sorted(unknown)}")
            return cls(**{key: value for key, value in request.items() if key in REQUEST_FIELDS})
        raise TypeError(f"Unsupported request type: {type(request).__name__}")

    @property
    def effective_method(self) -> str:
        if self.method:
            return self.method.upper()
        return "GET" if self.entity is None else "POST"

    def with_headers(self, headers: Mapping[str, str]) -> "RestRequest":
        """Return a copy with ``headers`` set over the existing ones."""
        merged = self.headers.copy()
        merged.update(headers)
        return replace(self, headers=merged)


@dataclass(frozen=True)
class RestResponse:
    """Response returned by a client call."""

    status_code: int
    status_text: str = ""
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    entity: Any = None
    request: RestRequest | None = None
    raw: httpx.Response | None = None

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def content_type(self) -> str:
        """Media type of the response without parameters, lower-cased."""
        return self.headers.get("content-type", "").split(";")[0].strip().lower()

    @classmethod
    def from_httpx(cls, response: httpx.Response, request: RestRequest) -> "RestResponse":
        return cls(
            status_code=response.status_code,
            status_text=response.reason_phrase,
            headers=response.headers,
            entity=response.text,
            request=request,
            raw=response,
        )


class Transport(abc.ABC):
    """A layer of the client: sends one request, returns one response."""

    @abc.abstractmethod
    async def handle(self, request: RestRequest) -> RestResponse:
        """Send ``request`` and return the response.

        Raises:
            RequestError: If the request fails.
        """

    async def aclose(self) -> None:
        """Release resources held by this transport."""

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()


class Interceptor(Transport):
    """Transport that wraps another transport.

    Subclasses implement ``handle`` and delegate to ``self._wrapped``.
    """

    def __init__(self, *, wrapped: Transport) -> None:
        self._wrapped = wrapped

    @property
    def wrapped(self) -> Transport:
        return self._wrapped

    async def aclose(self) -> None:
        """Close the wrapped transport."""
        await self._wrapped.aclose()


def chain(transport: Transport, interceptor: type[Interceptor], **config: Any) -> Transport:
    """Wrap ``transport`` with ``interceptor`` configured by ``config``."""
    return interceptor(wrapped=transport, **config)


def encode_entity(entity: Any) -> bytes | None:
    """Encode an already-serialized entity as request content."""
    if entity is None:
        return None
    if isinstance(entity, bytes):
        return entity
    if isinstance(entity, str):
        return entity.encode("utf-8")
    raise ContentNegotiationError(
        f"Cannot send entity of type {type(entity).__name__} without content negotiation; "
        "serialize it to str or bytes first"
    )


class HttpxTransport(Transport):
    """Innermost transport: sends requests with an ``httpx.AsyncClient``.

    Args:
        client: The httpx client to send with. Its own timeout should be
            disabled; timeouts are applied by ``TimeoutInterceptor``.
        owns_client: Close ``client`` when this transport is closed.
    """

    def __init__(self, *, client: httpx.AsyncClient, owns_client: bool = True) -> None:
        self._client = client
        self._owns_client = owns_client

    async def handle(self, request: RestRequest) -> RestResponse:
        try:
            content = encode_entity(request.entity)
        except ContentNegotiationError as e:
            e.request = request
            raise

        http_request = self._client.build_request(
            request.effective_method,
            request.path,
            headers=request.headers,
            params=request.params,
            content=content,
        )

        try:
            response = await self._client.send(http_request, auth=request.auth)
        except httpx.TransportError as e:
            raise NetworkError(
                f"Request {http_request.method} {http_request.url} failed: {e!r}",
                request=request,
            ) from e

        return RestResponse.from_httpx(response, request)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
