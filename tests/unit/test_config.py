"""Tests for client option resolution and validation."""

import logging

import pytest

from rest_client_core.auth.exceptions import CredentialNotFoundError
from rest_client_core.config import (
    HawkConfig,
    HawkCredentials,
    MimeConfig,
    ResolvedConfig,
    RetryPolicy,
    apply_log_level,
    deep_merge,
    resolve_config,
)
from rest_client_core.errors import ConfigurationError

BASE_URL = "http://localhost:8000"


class TestResolveDefaults:
    @pytest.mark.unit
    def test_base_url_only_resolves_to_defaults(self):
        config = resolve_config({"base_url": BASE_URL})

        assert config == ResolvedConfig(
            base_url=BASE_URL,
            retry=RetryPolicy(initial=100, multiplier=2, max=3_600_000),
            timeout=30_000,
            mime=MimeConfig(),
            auth=None,
            log_level="WARN",
        )

    @pytest.mark.unit
    def test_resolved_config_is_immutable(self):
        config = resolve_config({"base_url": BASE_URL})

        with pytest.raises(AttributeError):
            config.timeout = 1

    @pytest.mark.unit
    def test_options_are_not_mutated(self):
        options = {"base_url": BASE_URL, "retry": {"initial": 5}}
        resolve_config(options)

        assert options == {"base_url": BASE_URL, "retry": {"initial": 5}}

    @pytest.mark.unit
    def test_none_values_count_as_unset(self):
        config = resolve_config({"base_url": BASE_URL, "timeout": None, "retry": None})

        assert config.timeout == 30_000
        assert config.retry == RetryPolicy()

    @pytest.mark.unit
    def test_unknown_options_are_ignored(self):
        config = resolve_config({"base_url": BASE_URL, "error_callback": print})

        assert config.base_url == BASE_URL


class TestResolveRetry:
    @pytest.mark.unit
    def test_retry_true_uses_default_policy(self):
        config = resolve_config({"base_url": BASE_URL, "retry": True})

        assert config.retry == RetryPolicy()
        assert (config.retry.initial, config.retry.multiplier, config.retry.max) == (100, 2, 3_600_000)

    @pytest.mark.unit
    def test_retry_false_disables_retry(self):
        config = resolve_config({"base_url": BASE_URL, "retry": False})

        assert config.retry is None

    @pytest.mark.unit
    def test_partial_retry_merges_with_defaults(self):
        config = resolve_config({"base_url": BASE_URL, "retry": {"initial": 1, "max": 2}})

        assert config.retry == RetryPolicy(initial=1, multiplier=2, max=2, max_retries=5)

    @pytest.mark.unit
    @pytest.mark.parametrize("field", ["initial", "multiplier", "max"])
    @pytest.mark.parametrize("value", [0, -1, "10", True])
    def test_invalid_retry_numbers_are_rejected(self, field, value):
        with pytest.raises(ConfigurationError, match=f"retry.{field} must be > 0"):
            resolve_config({"base_url": BASE_URL, "retry": {field: value}})

    @pytest.mark.unit
    @pytest.mark.parametrize("value", [-1, 1.5, False])
    def test_invalid_max_retries_is_rejected(self, value):
        with pytest.raises(ConfigurationError, match="max_retries"):
            resolve_config({"base_url": BASE_URL, "retry": {"max_retries": value}})

    @pytest.mark.unit
    def test_zero_max_retries_is_allowed(self):
        config = resolve_config({"base_url": BASE_URL, "retry": {"max_retries": 0}})

        assert config.retry.max_retries == 0

    @pytest.mark.unit
    def test_retry_must_be_bool_or_mapping(self):
        with pytest.raises(ConfigurationError, match="retry must be"):
            resolve_config({"base_url": BASE_URL, "retry": "yes"})


class TestResolveValidation:
    @pytest.mark.unit
    @pytest.mark.parametrize("options", [{}, {"base_url": ""}, {"base_url": 8000}, None])
    def test_base_url_is_required(self, options):
        with pytest.raises(ConfigurationError, match="base_url is required"):
            resolve_config(options)

    @pytest.mark.unit
    def test_configuration_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            resolve_config({})

    @pytest.mark.unit
    @pytest.mark.parametrize("timeout", [0, -1, 0.5, 100])
    def test_timeout_of_any_sign_is_accepted(self, timeout):
        config = resolve_config({"base_url": BASE_URL, "timeout": timeout})

        assert config.timeout == timeout

    @pytest.mark.unit
    @pytest.mark.parametrize("timeout", ["100", True, [100]])
    def test_timeout_must_be_a_number(self, timeout):
        with pytest.raises(ConfigurationError, match="timeout must be a number"):
            resolve_config({"base_url": BASE_URL, "timeout": timeout})

    @pytest.mark.unit
    def test_mime_false_disables_content_negotiation(self):
        config = resolve_config({"base_url": BASE_URL, "mime": False})

        assert config.mime is None

    @pytest.mark.unit
    def test_mime_true_uses_library_defaults(self):
        config = resolve_config({"base_url": BASE_URL, "mime": True})

        assert config.mime == MimeConfig()

    @pytest.mark.unit
    def test_mime_type_is_resolved(self):
        config = resolve_config({"base_url": BASE_URL, "mime": {"mime": "application/json", "accept": "*/*"}})

        assert config.mime == MimeConfig(mime="application/json", accept="*/*")

    @pytest.mark.unit
    def test_mime_type_must_be_a_string(self):
        with pytest.raises(ConfigurationError, match="mime.mime must be a string"):
            resolve_config({"base_url": BASE_URL, "mime": {"mime": 42}})


class TestResolveHawkAuth:
    @pytest.mark.unit
    def test_hawk_options_are_resolved(self, hawk_credentials):
        config = resolve_config(
            {"base_url": BASE_URL, "auth": {"hawk": {"credentials": hawk_credentials, "ext": "data", "sntp": True}}}
        )

        assert config.auth == HawkConfig(
            credentials=HawkCredentials(**hawk_credentials),
            ext="data",
            sntp=True,
        )

    @pytest.mark.unit
    def test_auth_without_hawk_installs_nothing(self):
        config = resolve_config({"base_url": BASE_URL, "auth": {}})

        assert config.auth is None

    @pytest.mark.unit
    def test_key_is_masked_in_repr(self, hawk_credentials):
        config = resolve_config({"base_url": BASE_URL, "auth": {"hawk": {"credentials": hawk_credentials}}})

        assert hawk_credentials["key"] not in repr(config)

    @pytest.mark.unit
    def test_missing_credentials_are_read_from_environment(self, monkeypatch):
        monkeypatch.setenv("REST_CLIENT_HAWK_ID", "env-id")
        monkeypatch.setenv("REST_CLIENT_HAWK_KEY", "env-key")

        config = resolve_config({"base_url": BASE_URL, "auth": {"hawk": {}}})

        assert config.auth.credentials == HawkCredentials(id="env-id", key="env-key", algorithm="sha256")

    @pytest.mark.unit
    def test_explicit_credentials_win_over_environment(self, monkeypatch, hawk_credentials):
        monkeypatch.setenv("REST_CLIENT_HAWK_ID", "env-id")

        config = resolve_config({"base_url": BASE_URL, "auth": {"hawk": {"credentials": hawk_credentials}}})

        assert config.auth.credentials.id == hawk_credentials["id"]

    @pytest.mark.unit
    def test_missing_key_raises_configuration_error(self):
        with pytest.raises(CredentialNotFoundError) as exc_info:
            resolve_config({"base_url": BASE_URL, "auth": {"hawk": {"credentials": {"id": "abc"}}}})

        assert isinstance(exc_info.value, ConfigurationError)
        assert exc_info.value.env_var_name == "REST_CLIENT_HAWK_KEY"

    @pytest.mark.unit
    def test_unsupported_algorithm_is_rejected(self, hawk_credentials):
        hawk_credentials["algorithm"] = "md5"

        with pytest.raises(ConfigurationError, match="algorithm"):
            resolve_config({"base_url": BASE_URL, "auth": {"hawk": {"credentials": hawk_credentials}}})

    @pytest.mark.unit
    def test_illegal_ext_is_rejected(self, hawk_credentials):
        with pytest.raises(ConfigurationError, match="auth.hawk.ext contains an illegal character"):
            resolve_config(
                {"base_url": BASE_URL, "auth": {"hawk": {"credentials": hawk_credentials, "ext": 'say "hi"'}}}
            )

    @pytest.mark.unit
    def test_illegal_id_is_rejected(self, hawk_credentials):
        hawk_credentials["id"] = "back\\slash"

        with pytest.raises(ConfigurationError, match="auth.hawk.credentials.id contains an illegal character"):
            resolve_config({"base_url": BASE_URL, "auth": {"hawk": {"credentials": hawk_credentials}}})


class TestLogLevel:
    @pytest.mark.unit
    def test_log_level_is_applied_to_package_logger(self):
        config = resolve_config({"base_url": BASE_URL, "log_level": "debug"})

        assert config.log_level == "DEBUG"
        assert logging.getLogger("rest_client_core").level == logging.DEBUG

    @pytest.mark.unit
    def test_default_log_level_is_warn(self):
        resolve_config({"base_url": BASE_URL})

        assert logging.getLogger("rest_client_core").level == logging.WARNING

    @pytest.mark.unit
    @pytest.mark.parametrize("level", ["LOUD", 10, None])
    def test_invalid_log_level_falls_back_to_warn(self, level):
        assert apply_log_level(level) == "WARN"
        assert logging.getLogger("rest_client_core").level == logging.WARNING

    @pytest.mark.unit
    def test_fatal_maps_to_critical(self):
        apply_log_level("FATAL")

        assert logging.getLogger("rest_client_core").level == logging.CRITICAL


class TestDeepMerge:
    @pytest.mark.unit
    def test_nested_mappings_merge_key_by_key(self):
        merged = deep_merge({"retry": {"initial": 100, "max": 10}}, {"retry": {"initial": 1}})

        assert merged == {"retry": {"initial": 1, "max": 10}}

    @pytest.mark.unit
    def test_scalars_replace_mappings(self):
        merged = deep_merge({"retry": {"initial": 100}}, {"retry": False})

        assert merged == {"retry": False}

    @pytest.mark.unit
    def test_new_mappings_are_copied(self):
        source = {"auth": {"hawk": {"ext": "a"}}}
        merged = deep_merge({}, source)
        merged["auth"]["hawk"]["ext"] = "b"

        assert source["auth"]["hawk"]["ext"] == "a"
