"""Hawk request signing as an httpx auth flow.

The ``Authorization`` header is computed by ``mohawk.Sender`` when httpx
sends the request, so it covers the final URL, method, body and
Content-Type, and every attempt gets a fresh timestamp and nonce.

Example:
    ```python
    import httpx
    from rest_client_core.auth.hawk import HawkAuth

    auth = HawkAuth(
        {"id": "dh37fgj492je", "key": "werxhqb98rpaxn39848xrunpaw3489ruxnpa98w4rxn", "algorithm": "sha256"},
        ext="app-specific-data",
    )
    async with httpx.AsyncClient(auth=auth) as client:
        response = await client.get("https://api.example.com/resource")
    ```
"""

import logging
from collections.abc import Generator, Mapping

import httpx
from mohawk import Sender

logger = logging.getLogger(__name__)


class HawkAuth(httpx.Auth):
    """Sign each outgoing request with a Hawk ``Authorization`` header.

    Args:
        credentials: Mapping with ``id``, ``key`` and ``algorithm``.
        ext: Optional application-specific data included in the signature.
    """

    requires_request_body = True

    def __init__(self, credentials: Mapping[str, str], ext: str | None = None):
        self._credentials = {
            "id": credentials["id"],
            "key": credentials["key"],
            "algorithm": credentials["algorithm"],
        }
        self._ext = ext

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        sender = Sender(
            self._credentials,
            str(request.url),
            request.method,
            content=request.content,
            content_type=request.headers.get("content-type", ""),
            ext=self._ext,
        )
        request.headers["Authorization"] = sender.request_header
        logger.debug(f"Signed {request.method} {request.url} with Hawk id {self._credentials['id']}")
        yield request
