"""REST Client Core - configurable HTTP client factory.

Builds an async REST client from a base URL and a few options:
- Content negotiation (JSON, form and text entities)
- Automatic retry with exponential backoff
- Per-attempt request timeout
- Optional Hawk request signing
- Non-2xx responses raised as structured exceptions

Example:
    ```python
    from rest_client_core import create_client
    from rest_client_core.errors import RequestError

    client = create_client(
        {
            "base_url": "http://localhost:8000",
            "retry": {"initial": 100, "multiplier": 2, "max": 10_000},
            "timeout": 5_000,
        }
    )

    try:
        response = await client({"path": "/api/log", "entity": {"tags": ["info"]}})
    except RequestError as e:
        print(f"Request failed: {e}")
    finally:
        await client.aclose()
    ```
"""

from rest_client_core.client import RestClient, build_transport, create_client
from rest_client_core.config import ResolvedConfig, resolve_config
from rest_client_core.transport.base import RestRequest, RestResponse

__version__ = "0.1.0"

__all__ = [
    "ResolvedConfig",
    "RestClient",
    "RestRequest",
    "RestResponse",
    "__version__",
    "build_transport",
    "create_client",
    "resolve_config",
]
