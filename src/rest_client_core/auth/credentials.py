"""Multi-source credential resolution for Hawk authentication.

Hawk credentials that are not passed in the client options are looked up
in the environment, with a ``.env`` file loaded through python-dotenv.

Resolution order (highest to lowest priority):
1. Explicitly provided value
2. Environment variable (including values loaded from ``.env``)
3. Default value

Example:
    ```python
    from rest_client_core.auth import CredentialResolver

    resolver = CredentialResolver()
    key = resolver.resolve(env_var_name="REST_CLIENT_HAWK_KEY", required=True)
    ```

Credential values are never logged; only their source is.
"""

import logging
import os
from threading import Lock

from dotenv import load_dotenv

from rest_client_core.auth.exceptions import CredentialNotFoundError

logger = logging.getLogger(__name__)

HAWK_ID_ENV = "REST_CLIENT_HAWK_ID"
HAWK_KEY_ENV = "REST_CLIENT_HAWK_KEY"
HAWK_ALGORITHM_ENV = "REST_CLIENT_HAWK_ALGORITHM"


class CredentialResolver:
    """Resolve credentials from an explicit value, the environment, or a default.

    Args:
        dotenv_path: Path to a ``.env`` file. If None, python-dotenv searches
            parent directories.
        load_dotenv: Whether to load the ``.env`` file at all.
    """

    def __init__(self, dotenv_path: str | None = None, load_dotenv: bool = True):
        self._dotenv_loaded = False
        self._dotenv_lock = Lock()
        self._dotenv_path = dotenv_path
        self._load_dotenv_enabled = load_dotenv

        if self._load_dotenv_enabled:
            self._ensure_dotenv_loaded()

    def _ensure_dotenv_loaded(self) -> None:
        """Load the ``.env`` file once (thread-safe)."""
        if self._dotenv_loaded:
            return

        with self._dotenv_lock:
            if self._dotenv_loaded:
                return

            try:
                load_dotenv(dotenv_path=self._dotenv_path)
                logger.debug("Loaded .env file for credential resolution")
            except OSError as e:
                logger.warning(f"Failed to load .env file: {e}")
            self._dotenv_loaded = True

    def resolve(
        self,
        *,
        value: str | None = None,
        env_var_name: str | None = None,
        default: str | None = None,
        required: bool = False,
    ) -> str | None:
        """Resolve a credential from multiple sources.

        Args:
            value: Explicitly provided value (highest priority).
            env_var_name: Environment variable name to check.
            default: Default value if not found elsewhere.
            required: If True, raise when the credential cannot be resolved.

        Returns:
            Resolved credential value, or None if not found and not required.

        Raises:
            CredentialNotFoundError: If required=True and credential not found
                in any source.
        """
        result = None
        source = None

        if value is not None:
            result = value
            source = "explicit parameter"
        elif env_var_name and env_var_name in os.environ:
            result = os.environ[env_var_name]
            source = f"environment variable '{env_var_name}'"
        elif default is not None:
            result = default
            source = "default value"

        if result is not None:
            logger.debug(f"Resolved credential from {source}: ***")

        if required and result is None:
            error_msg = "Required credential not found"
            if env_var_name:
                error_msg += f" (checked env var: {env_var_name})"
            raise CredentialNotFoundError(error_msg, env_var_name=env_var_name)

        return result
