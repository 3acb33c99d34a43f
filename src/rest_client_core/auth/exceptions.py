"""Custom exceptions for credential resolution.

Credential errors are configuration errors: they are raised while a client
is being built, before any request is attempted.

Example:
    ```python
    from rest_client_core.auth.exceptions import CredentialNotFoundError

    if not key:
        raise CredentialNotFoundError("Hawk key not found", env_var_name="REST_CLIENT_HAWK_KEY")
    ```
"""

from rest_client_core.errors.exceptions import ConfigurationError


class CredentialError(ConfigurationError):
    """Base exception for credential-related errors."""

    pass


class CredentialNotFoundError(CredentialError):
    """Raised when a required credential cannot be resolved.

    Attributes:
        env_var_name: The environment variable name that was checked (if any).
    """

    def __init__(self, message: str, env_var_name: str | None = None):
        super().__init__(message)
        self.env_var_name = env_var_name
