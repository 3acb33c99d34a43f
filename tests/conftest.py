"""Pytest configuration and shared fixtures for rest-client-core tests."""

import asyncio
import json
import logging

import httpx
import pytest
from mohawk import Receiver
from mohawk.exc import HawkFail

LOG_ROUTE_PATH = "/api/logging-service/log"

HAWK_ID = "d74s3nz2873n"
HAWK_KEY = "werxhqb98rpaxn39848xrunpaw3489ruxnpa98w4rxn"

HAWK_CREDENTIALS = {
    HAWK_ID: {"id": HAWK_ID, "key": HAWK_KEY, "algorithm": "sha256"},
}


class LogService:
    """In-process logging service used as the server side of client tests.

    Accepts ``POST LOG_ROUTE_PATH`` with a JSON event that has non-empty
    ``tags``; answers 404 for any other path and 400 for invalid events.

    Args:
        require_hawk: Reject requests without a valid Hawk header with 401.
        delay: Seconds to wait before answering.
    """

    def __init__(self, *, require_hawk: bool = False, delay: float = 0.0):
        self.require_hawk = require_hawk
        self.delay = delay
        self.requests: list[httpx.Request] = []
        self.events: list[dict] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)

        if self.require_hawk and not self._authenticated(request):
            return httpx.Response(401, headers={"WWW-Authenticate": "Hawk"}, json={"error": "Unauthorized"})

        if request.url.path != LOG_ROUTE_PATH:
            return httpx.Response(404, json={"error": "Not Found"})
        if request.method != "POST":
            return httpx.Response(405, json={"error": "Method Not Allowed"})

        try:
            event = json.loads(request.content)
        except ValueError:
            return httpx.Response(400, json={"error": "Bad Request", "message": "invalid JSON"})

        if not isinstance(event, dict) or not event.get("tags"):
            return httpx.Response(400, json={"error": "Bad Request", "message": "tags is required"})

        self.events.append(event)
        return httpx.Response(202, json={"status": "accepted"})

    def _authenticated(self, request: httpx.Request) -> bool:
        header = request.headers.get("authorization")
        if not header:
            return False
        try:
            Receiver(
                HAWK_CREDENTIALS.__getitem__,
                header,
                str(request.url),
                request.method,
                content=request.content,
                content_type=request.headers.get("content-type", ""),
            )
        except HawkFail:
            return False
        return True


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """Auto-cleanup: Clear Hawk credential environment variables before each test."""
    import os

    for key in list(os.environ.keys()):
        if key.startswith("REST_CLIENT_"):
            monkeypatch.delenv(key, raising=False)

    yield


@pytest.fixture(autouse=True)
def restore_log_level():
    """Restore the package logger level changed by ``resolve_config``."""
    package_logger = logging.getLogger("rest_client_core")
    level = package_logger.level
    yield
    package_logger.setLevel(level)


@pytest.fixture
def log_service() -> LogService:
    return LogService()


@pytest.fixture
def hawk_log_service() -> LogService:
    return LogService(require_hawk=True)


@pytest.fixture
def slow_log_service() -> LogService:
    return LogService(delay=1.0)


@pytest.fixture
def hawk_credentials() -> dict:
    return dict(HAWK_CREDENTIALS[HAWK_ID])


@pytest.fixture
def event() -> dict:
    return {"tags": ["info"], "data": "test : log a valid event"}


@pytest.fixture
def log_request(event) -> dict:
    """Request descriptor posting ``event`` to the log route as JSON."""
    return {
        "path": LOG_ROUTE_PATH,
        "entity": event,
        "headers": {"Content-Type": "application/json"},
    }
