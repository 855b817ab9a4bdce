import pytest

from sysmon_events.config import (
    DEFAULT_MAX_UPLOAD_BYTES,
    ENV_LOG_LEVEL,
    ENV_MAX_UPLOAD_BYTES,
    load_settings,
)


def test_defaults(monkeypatch):
    monkeypatch.delenv(ENV_MAX_UPLOAD_BYTES, raising=False)
    monkeypatch.delenv(ENV_LOG_LEVEL, raising=False)
    settings = load_settings()
    assert settings.max_upload_bytes == DEFAULT_MAX_UPLOAD_BYTES
    assert settings.log_level == "INFO"


def test_env_overrides(monkeypatch):
    monkeypatch.setenv(ENV_MAX_UPLOAD_BYTES, "2048")
    monkeypatch.setenv(ENV_LOG_LEVEL, "debug")
    settings = load_settings()
    assert settings.max_upload_bytes == 2048
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("value", ["lots", "0", "-5"])
def test_invalid_upload_limit(monkeypatch, value):
    monkeypatch.setenv(ENV_MAX_UPLOAD_BYTES, value)
    with pytest.raises(RuntimeError):
        load_settings()
