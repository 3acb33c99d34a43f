"""Client option validation and resolution.

``resolve_config`` turns partial caller options into a complete, immutable
``ResolvedConfig`` or raises ``ConfigurationError``.

Options:

```python
options = {
    "base_url": "http://localhost:8000",  # required
    "retry": {  # False disables retry, True uses the defaults
        "initial": 100,  # first delay in ms, > 0
        "multiplier": 2,  # backoff factor, > 0
        "max": 1000 * 60 * 60,  # delay cap in ms, > 0
        "max_retries": 5,  # retry attempts after the first failure, >= 0
    },
    "timeout": 1000 * 30,  # per-attempt timeout in ms, <= 0 disables it
    "mime": {"mime": "application/json"},  # False disables content negotiation
    "auth": {
        "hawk": {
            "credentials": {
                "id": "dh37fgj492je",
                "key": "werxhqb98rpaxn39848xrunpaw3489ruxnpa98w4rxn",
                "algorithm": "sha256",
            },
            "ext": "app-specific-data",
        }
    },
    "log_level": "WARN",
}
```

Hawk ``id``, ``key`` and ``algorithm`` left out of the options are read from
``REST_CLIENT_HAWK_ID``, ``REST_CLIENT_HAWK_KEY`` and
``REST_CLIENT_HAWK_ALGORITHM``.
"""

import copy
import logging
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from typing import Any

from mohawk.exc import BadHeaderValue
from mohawk.util import validate_header_attr

from rest_client_core.auth.credentials import (
    HAWK_ALGORITHM_ENV,
    HAWK_ID_ENV,
    HAWK_KEY_ENV,
    CredentialResolver,
)
from rest_client_core.errors.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

PACKAGE_LOGGER_NAME = "rest_client_core"

DEFAULT_LOG_LEVEL = "WARN"

LOG_LEVELS: dict[str, int] = {
    "TRACE": logging.DEBUG,
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "FATAL": logging.CRITICAL,
    "CRITICAL": logging.CRITICAL,
}

HAWK_ALGORITHMS = frozenset(["sha1", "sha256"])

KNOWN_OPTIONS = frozenset(["base_url", "retry", "timeout", "mime", "auth", "log_level"])


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential backoff policy. Delays are in milliseconds."""

    initial: float = 100
    multiplier: float = 2
    max: float = 1000 * 60 * 60
    max_retries: int = 5


@dataclass(frozen=True)
class MimeConfig:
    """Content negotiation settings. ``None`` fields use the interceptor defaults."""

    mime: str | None = None
    accept: str | None = None


@dataclass(frozen=True)
class HawkCredentials:
    id: str
    key: str
    algorithm: str = "sha256"

    def __repr__(self) -> str:
        return f"HawkCredentials(id={self.id!r}, key='***', algorithm={self.algorithm!r})"


@dataclass(frozen=True)
class HawkConfig:
    credentials: HawkCredentials
    ext: str | None = None
    sntp: bool = False


@dataclass(frozen=True)
class ResolvedConfig:
    """Fully resolved client configuration.

    Attributes:
        base_url: Prefix for every request path.
        retry: Retry policy, or None when retry is disabled.
        timeout: Per-attempt timeout in milliseconds; <= 0 disables it.
        mime: Content negotiation settings, or None when disabled.
        auth: Hawk settings, or None when requests are not signed.
        log_level: Effective level name of the package logger.
    """

    base_url: str
    retry: RetryPolicy | None = RetryPolicy()
    timeout: float = 1000 * 30
    mime: MimeConfig | None = MimeConfig()
    auth: HawkConfig | None = None
    log_level: str = DEFAULT_LOG_LEVEL


def default_options() -> dict[str, Any]:
    """Return a fresh copy of the built-in option defaults."""
    return {
        "retry": asdict(RetryPolicy()),
        "log_level": DEFAULT_LOG_LEVEL,
        "timeout": 1000 * 30,
        "mime": {},
    }


def deep_merge(target: dict[str, Any], source: Mapping[str, Any]) -> dict[str, Any]:
    """Merge ``source`` into ``target`` in place and return ``target``.

    Nested mappings merge key by key; any other value replaces the target
    value. ``None`` values in ``source`` are skipped.
    """
    for key, value in source.items():
        if value is None:
            continue
        if isinstance(value, Mapping) and isinstance(target.get(key), dict):
            deep_merge(target[key], value)
        elif isinstance(value, Mapping):
            target[key] = deep_merge({}, value)
        else:
            target[key] = copy.copy(value)
    return target


def apply_log_level(level: Any) -> str:
    """Set the level of the package logger and return the effective level name.

    Unknown or missing level names fall back to WARN.
    """
    name = level.upper() if isinstance(level, str) else ""
    if name not in LOG_LEVELS:
        if level is not None:
            logger.warning(f"Unknown log level {level!r}, using {DEFAULT_LOG_LEVEL}")
        name = DEFAULT_LOG_LEVEL
    logging.getLogger(PACKAGE_LOGGER_NAME).setLevel(LOG_LEVELS[name])
    return name


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check(condition: bool, message: str) -> None:
    if not condition:
        raise ConfigurationError(message)


def _resolve_retry(retry: Any) -> RetryPolicy | None:
    if retry is False:
        return None
    if retry is True:
        return RetryPolicy()

    _check(isinstance(retry, Mapping), "retry must be a boolean or a mapping")
    for name in ("initial", "multiplier", "max"):
        if name in retry:
            _check(_is_number(retry[name]) and retry[name] > 0, f"retry.{name} must be > 0")
    if "max_retries" in retry:
        max_retries = retry["max_retries"]
        _check(
            isinstance(max_retries, int) and not isinstance(max_retries, bool) and max_retries >= 0,
            "retry.max_retries must be an integer >= 0",
        )

    fields = ("initial", "multiplier", "max", "max_retries")
    return RetryPolicy(**{name: retry[name] for name in fields if name in retry})


def _resolve_mime(mime: Any) -> MimeConfig | None:
    if mime is False:
        return None
    if mime is True:
        return MimeConfig()

    _check(isinstance(mime, Mapping), "mime must be a boolean or a mapping")
    if "mime" in mime:
        _check(isinstance(mime["mime"], str), "mime.mime must be a string")
    if "accept" in mime:
        _check(isinstance(mime["accept"], str), "mime.accept must be a string")

    return MimeConfig(mime=mime.get("mime"), accept=mime.get("accept"))


def _check_header_attr(value: str, name: str) -> None:
    try:
        validate_header_attr(value, name=name)
    except BadHeaderValue as e:
        raise ConfigurationError(f"{name} contains an illegal character") from e


def _resolve_auth(auth: Any) -> HawkConfig | None:
    if auth is None:
        return None
    _check(isinstance(auth, Mapping), "auth must be a mapping")

    hawk = auth.get("hawk")
    if hawk is None:
        return None
    _check(isinstance(hawk, Mapping), "auth.hawk must be a mapping")

    credentials = hawk.get("credentials") or {}
    _check(isinstance(credentials, Mapping), "auth.hawk.credentials must be a mapping")

    resolver = None
    if "id" not in credentials or "key" not in credentials or "algorithm" not in credentials:
        resolver = CredentialResolver()

    def lookup(name: str, env_var_name: str, default: str | None = None) -> str:
        if name in credentials:
            value = credentials[name]
        else:
            value = resolver.resolve(env_var_name=env_var_name, default=default, required=True)
        _check(isinstance(value, str) and value != "", f"auth.hawk.credentials.{name} must be a non-empty string")
        return value

    hawk_id = lookup("id", HAWK_ID_ENV)
    _check_header_attr(hawk_id, "auth.hawk.credentials.id")
    key = lookup("key", HAWK_KEY_ENV)
    algorithm = lookup("algorithm", HAWK_ALGORITHM_ENV, default="sha256")
    _check(algorithm in HAWK_ALGORITHMS, f"auth.hawk.credentials.algorithm must be one of {sorted(HAWK_ALGORITHMS)}")

    ext = hawk.get("ext")
    if ext is not None:
        _check(isinstance(ext, str), "auth.hawk.ext must be a string")
        _check_header_attr(ext, "auth.hawk.ext")

    return HawkConfig(
        credentials=HawkCredentials(id=hawk_id, key=key, algorithm=algorithm),
        ext=ext,
        sntp=bool(hawk.get("sntp", False)),
    )


def resolve_config(options: Mapping[str, Any] | None = None) -> ResolvedConfig:
    """Validate ``options``, merge them over the defaults and resolve them.

    Args:
        options: Caller options; see the module docstring.

    Returns:
        The resolved configuration.

    Raises:
        ConfigurationError: If any option is invalid. Raised before any
            client is built.
    """
    options = options or {}
    _check(isinstance(options, Mapping), "options must be a mapping")

    unknown = set(options) - KNOWN_OPTIONS
    if unknown:
        logger.debug(f"Ignoring unknown options: {sorted(unknown)}")

    merged = deep_merge(default_options(), options)

    base_url = merged.get("base_url")
    _check(isinstance(base_url, str) and base_url != "", "base_url is required")

    retry = _resolve_retry(merged["retry"])

    timeout = merged["timeout"]
    _check(_is_number(timeout), "timeout must be a number")

    mime = _resolve_mime(merged["mime"])
    auth = _resolve_auth(merged.get("auth"))

    log_level = apply_log_level(merged["log_level"])

    config = ResolvedConfig(
        base_url=base_url,
        retry=retry,
        timeout=timeout,
        mime=mime,
        auth=auth,
        log_level=log_level,
    )
    logger.debug(f"Resolved client config: {config}")
    return config
