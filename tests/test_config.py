"""
Unit tests for configuration module.
"""
import pytest
from pydantic import ValidationError

from core.config import Settings, get_settings, reset_settings


def test_settings_defaults(monkeypatch):
    """Test default configuration values."""
    for name in ("APP_NAME", "HOST", "PORT", "LOG_LEVEL", "INPUT_ENCODING",
                 "OUTPUT_PATH", "OUTPUT_INDENT", "MAX_UPLOAD_BYTES", "STRICT_TRANSACTION_TYPE"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)
    assert settings.app_name == "Batch Ledger Service"
    assert settings.host == "0.0.0.0"
    assert settings.port == 8000
    assert settings.log_level == "INFO"
    assert settings.input_encoding == "utf-8"
    assert settings.output_path == "output"
    assert settings.output_indent == 2
    assert settings.max_upload_bytes == 10 * 1024 * 1024
    assert settings.strict_transaction_type is False


def test_settings_from_environment(monkeypatch):
    """Test values are read from environment variables."""
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("STRICT_TRANSACTION_TYPE", "true")
    monkeypatch.setenv("OUTPUT_INDENT", "0")

    settings = get_settings()
    assert settings.log_level == "DEBUG"
    assert settings.strict_transaction_type is True
    assert settings.output_indent == 0


def test_settings_validation_port(monkeypatch):
    """Test port validation."""
    monkeypatch.setenv("PORT", "99999")

    reset_settings()
    with pytest.raises(ValidationError):
        get_settings()


def test_settings_validation_log_level(monkeypatch):
    """Test log level validation."""
    monkeypatch.setenv("LOG_LEVEL", "INVALID")

    reset_settings()
    with pytest.raises(ValidationError):
        get_settings()


def test_settings_validation_encoding(monkeypatch):
    """Test unknown encodings are rejected."""
    monkeypatch.setenv("INPUT_ENCODING", "no-such-codec")

    with pytest.raises(ValidationError):
        get_settings()


def test_settings_validation_indent(monkeypatch):
    """Test indent range validation."""
    monkeypatch.setenv("OUTPUT_INDENT", "12")

    with pytest.raises(ValidationError):
        get_settings()


def test_settings_by_field_name():
    """Test settings can be built in code by field name."""
    settings = Settings(_env_file=None, output_indent=4, strict_transaction_type=True)
    assert settings.output_indent == 4
    assert settings.strict_transaction_type is True


def test_settings_singleton():
    """Test settings singleton behavior."""
    reset_settings()
    settings1 = get_settings()
    settings2 = get_settings()
    assert settings1 is settings2
