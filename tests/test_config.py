import pytest

from email_capture import config
from email_capture.config import (
    DEFAULT_REVISIONS,
    ExternalCredentials,
    Settings,
    mask_secret,
)
from email_capture.errors import ConfigurationError


def test_credentials_from_env() -> None:
    creds = ExternalCredentials.from_env(
        {"KLAVIYO_API_KEY": " pk_live_abcdef123456 ", "KLAVIYO_LIST_ID": "LIST1"}
    )
    assert creds.api_key == "pk_live_abcdef123456"
    assert creds.list_id == "LIST1"
    assert creds.is_complete


def test_missing_credentials_are_incomplete() -> None:
    assert not ExternalCredentials.from_env({}).is_complete
    assert not ExternalCredentials.from_env({"KLAVIYO_API_KEY": "pk"}).is_complete


def test_repr_masks_key() -> None:
    creds = ExternalCredentials(api_key="pk_live_abcdef123456", list_id="LIST1")
    assert "abcdef123456" not in repr(creds)
    assert "pk_...456" in repr(creds)


def test_mask_secret() -> None:
    assert mask_secret(None) is None
    assert mask_secret("") is None
    assert mask_secret("short") == "***"
    assert mask_secret("pk_0123456789") == "pk_...789"


def test_settings_defaults() -> None:
    settings = Settings.from_env({})
    assert settings.base_url == "https://a.klaviyo.com/api"
    assert settings.timeout_seconds == 5.0
    assert settings.revisions == DEFAULT_REVISIONS
    assert settings.expose_debug is False


def test_settings_from_env() -> None:
    settings = Settings.from_env(
        {
            "KLAVIYO_BASE_URL": "https://proxy.example.com/api/",
            "KLAVIYO_TIMEOUT_SECONDS": "2.5",
            "KLAVIYO_REVISIONS": "2023-02-22, 2023-10-15",
            "EMAIL_CAPTURE_EXPOSE_DEBUG": "Yes",
        }
    )
    assert settings.base_url == "https://proxy.example.com/api"
    assert settings.timeout_seconds == 2.5
    assert settings.revisions == ("2023-02-22", "2023-10-15")
    assert settings.expose_debug is True


@pytest.mark.parametrize("value", ["abc", "0", "-1"])
def test_invalid_timeout(value: str) -> None:
    with pytest.raises(ConfigurationError):
        Settings.from_env({"KLAVIYO_TIMEOUT_SECONDS": value})


def test_empty_revision_list() -> None:
    with pytest.raises(ConfigurationError):
        Settings.from_env({"KLAVIYO_REVISIONS": " , "})


def test_credentials_are_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    config.reset_cache()
    monkeypatch.setenv("KLAVIYO_API_KEY", "pk_first_0123456789")
    monkeypatch.setenv("KLAVIYO_LIST_ID", "LIST1")
    first = config.get_credentials()
    monkeypatch.setenv("KLAVIYO_API_KEY", "pk_second_0123456789")
    assert config.get_credentials() is first
    config.reset_cache()
    assert config.get_credentials().api_key == "pk_second_0123456789"
    config.reset_cache()


def test_unknown_revision_fails_at_load_time() -> None:
    with pytest.raises(ConfigurationError, match="bogus"):
        Settings.from_env({"KLAVIYO_REVISIONS": "2023-10-15,bogus"})
