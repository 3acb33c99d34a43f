"""Interceptors that compose into a REST client.

Each interceptor wraps another ``Transport`` and exposes the same
``handle(request)`` coroutine, so layers stack by wrapping.

Modules:
    base: Request/response models, base transport and ``chain``
    mime: Content negotiation
    auth: Hawk authentication
    path_prefix: Base URL prefixing
    retry: Retry with exponential backoff
    timeout: Per-attempt timeout
    error_code: Non-2xx responses to exceptions

Example:
    ```python
    import httpx
    from rest_client_core.transport import HttpxTransport, RetryInterceptor, TimeoutInterceptor, chain

    transport = HttpxTransport(client=httpx.AsyncClient(timeout=None))
    transport = chain(transport, TimeoutInterceptor, timeout=2_000)
    transport = chain(transport, RetryInterceptor, initial=50, multiplier=2, max=1_000)
    ```
"""

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

__all__ = [
    "ErrorCodeInterceptor",
    "HawkAuthInterceptor",
    "HttpxTransport",
    "Interceptor",
    "MimeInterceptor",
    "PathPrefixInterceptor",
    "RestRequest",
    "RestResponse",
    "RetryInterceptor",
    "TimeoutInterceptor",
    "Transport",
    "chain",
]
