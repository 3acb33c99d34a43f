"""Authentication components: Hawk signing and credential resolution.

Example:
    ```python
    from rest_client_core.auth import CredentialResolver, HawkAuth

    resolver = CredentialResolver()
    auth = HawkAuth(
        {
            "id": resolver.resolve(env_var_name="REST_CLIENT_HAWK_ID", required=True),
            "key": resolver.resolve(env_var_name="REST_CLIENT_HAWK_KEY", required=True),
            "algorithm": "sha256",
        }
    )
    ```
"""

from rest_client_core.auth.credentials import CredentialResolver
from rest_client_core.auth.exceptions import CredentialError, CredentialNotFoundError
from rest_client_core.auth.hawk import HawkAuth

__all__ = [
    "CredentialError",
    "CredentialNotFoundError",
    "CredentialResolver",
    "HawkAuth",
]
