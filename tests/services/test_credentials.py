"""Tests for credential resolution across deployment modes"""

import pytest

from analyst_mcp.models.credentials import CredentialMode
from analyst_mcp.services.credentials import load_credentials_from_env, resolve_credentials
from analyst_mcp.services.error_handler import (
    ConfigurationError,
    CredentialConfigurationError,
    MissingFieldError,
)

ENV_JSON = '{"type": "service_account", "project_id": "env"}'
FILE_JSON = '{"type": "service_account", "project_id": "file"}'


class TestEnvironmentMode:
    """Caller supplies profileId, server supplies credentials"""

    def test_json_environment_value(self, settings_factory):
        settings = settings_factory(google_credentials_json=ENV_JSON)

        bundle = resolve_credentials({"profileId": "p1"}, CredentialMode.ENVIRONMENT, settings)

        assert bundle.profile_id == "p1"
        assert bundle.credentials == ENV_JSON
        assert bundle.datasource_id is None

    def test_datasource_is_carried(self, settings_factory):
        settings = settings_factory(google_credentials_json=ENV_JSON)

        bundle = resolve_credentials(
            {"profileId": "p1", "datasourceId": "ds1"}, CredentialMode.ENVIRONMENT, settings
        )

        assert bundle.as_payload() == {"profileId": "p1", "datasourceId": "ds1", "credentials": ENV_JSON}

    def test_file_fallback(self, settings_factory, tmp_path):
        key_file = tmp_path / "key.json"
        key_file.write_text(FILE_JSON)
        settings = settings_factory(
            google_credentials_json=None, google_application_credentials=str(key_file)
        )

        bundle = resolve_credentials({"profileId": "p1"}, CredentialMode.ENVIRONMENT, settings)

        assert bundle.credentials == FILE_JSON

    def test_json_wins_over_file(self, settings_factory, tmp_path):
        key_file = tmp_path / "key.json"
        key_file.write_text(FILE_JSON)
        settings = settings_factory(
            google_credentials_json=ENV_JSON, google_application_credentials=str(key_file)
        )

        assert load_credentials_from_env(settings) == ENV_JSON

    def test_no_environment_source_is_configuration_error(self, settings_factory):
        settings = settings_factory(google_credentials_json=None, google_application_credentials=None)

        with pytest.raises(CredentialConfigurationError) as exc_info:
            resolve_credentials({"profileId": "p1"}, CredentialMode.ENVIRONMENT, settings)

        assert isinstance(exc_info.value, ConfigurationError)
        assert not isinstance(exc_info.value, MissingFieldError)
        assert "Server misconfigured" in str(exc_info.value)
        assert "GOOGLE_CREDENTIALS_JSON" in str(exc_info.value)

    def test_unreadable_file_is_configuration_error(self, settings_factory, tmp_path):
        missing = tmp_path / "missing.json"
        settings = settings_factory(
            google_credentials_json=None, google_application_credentials=str(missing)
        )

        with pytest.raises(CredentialConfigurationError) as exc_info:
            resolve_credentials({"profileId": "p1"}, CredentialMode.ENVIRONMENT, settings)

        assert f"Failed to read credentials from {missing}" in str(exc_info.value)

    def test_missing_profile_is_caller_error(self, settings):
        with pytest.raises(MissingFieldError) as exc_info:
            resolve_credentials({"datasourceId": "ds1"}, CredentialMode.ENVIRONMENT, settings)

        assert exc_info.value.field == "profileId"
        assert "profileId" in str(exc_info.value)

    def test_missing_profile_checked_before_environment(self, settings_factory):
        settings = settings_factory(google_credentials_json=None)

        with pytest.raises(MissingFieldError):
            resolve_credentials({}, CredentialMode.ENVIRONMENT, settings)


class TestExplicitMode:
    """Caller supplies both profileId and credentials"""

    def test_pass_through(self, settings_factory):
        settings = settings_factory(google_credentials_json=None)

        bundle = resolve_credentials(
            {"profileId": "p1", "datasourceId": "ds1", "credentials": "{}"},
            CredentialMode.EXPLICIT,
            settings,
        )

        assert bundle.profile_id == "p1"
        assert bundle.datasource_id == "ds1"
        assert bundle.credentials == "{}"

    def test_environment_is_not_consulted(self, settings):
        bundle = resolve_credentials(
            {"profileId": "p1", "credentials": "caller-blob"}, CredentialMode.EXPLICIT, settings
        )

        assert bundle.credentials == "caller-blob"

    @pytest.mark.parametrize(
        "arguments,field",
        [
            ({"credentials": "{}"}, "profileId"),
            ({"profileId": "p1"}, "credentials"),
            ({"profileId": "p1", "credentials": ""}, "credentials"),
        ],
    )
    def test_missing_identity_field(self, settings, arguments, field):
        with pytest.raises(MissingFieldError) as exc_info:
            resolve_credentials(arguments, CredentialMode.EXPLICIT, settings, "ExecuteSQL")

        assert exc_info.value.field == field
        assert f"'{field}'" in str(exc_info.value)
        assert "ExecuteSQL" in str(exc_info.value)


class TestLegacyMode:
    def test_no_resolution(self, settings):
        assert resolve_credentials({"dataset": "sales"}, CredentialMode.LEGACY, settings) is None


def test_bundle_repr_hides_credentials(settings):
    bundle = resolve_credentials({"profileId": "p1"}, CredentialMode.ENVIRONMENT, settings)

    assert "service_account" not in repr(bundle)
    assert "p1" in repr(bundle)
