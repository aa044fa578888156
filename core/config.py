"""
Centralized configuration management.
All environment variables and settings are defined here.
"""
import codecs
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application
    app_name: str = Field(default="Batch Ledger Service", alias="APP_NAME")
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000)
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Input
    input_encoding: str = Field(default="utf-8", alias="INPUT_ENCODING")
    max_upload_bytes: int = Field(default=10 * 1024 * 1024, alias="MAX_UPLOAD_BYTES")
    strict_transaction_type: bool = Field(default=False, alias="STRICT_TRANSACTION_TYPE")

    # Output
    output_path: str = Field(default="output", alias="OUTPUT_PATH")
    output_indent: int = Field(default=2, alias="OUTPUT_INDENT")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level is one of the standard levels."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v_upper

    @field_validator("port")
    @classmethod
    def validate_port(cls, v):
        """Validate port is in valid range."""
        if not (1 <= v <= 65535):
            raise ValueError("Port must be between 1 and 65535")
        return v

    @field_validator("input_encoding")
    @classmethod
    def validate_encoding(cls, v):
        """Validate the input encoding is a codec Python knows."""
        try:
            codecs.lookup(v)
        except LookupError:
            raise ValueError(f"Unknown input encoding: {v}")
        return v

    @field_validator("output_indent")
    @classmethod
    def validate_indent(cls, v):
        if not (0 <= v <= 8):
            raise ValueError("Output indent must be between 0 and 8")
        return v

    @field_validator("max_upload_bytes")
    @classmethod
    def validate_upload_limit(cls, v):
        if v < 1:
            raise ValueError("Max upload size must be at least 1 byte")
        return v


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings singleton (useful for testing)."""
    global _settings
    _settings = None
