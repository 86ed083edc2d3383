"""Centralized configuration for analyzer-compiler using Pydantic Settings."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_LOG_LEVELS = {"debug", "info", "warning", "error", "critical"}


class CompilerSettings(BaseSettings):
    """Typed configuration loaded from ``ANALYZER_COMPILER_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="ANALYZER_COMPILER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    # Compilation
    tokenizer_id: str = Field(
        default="custom_tokenizer",
        min_length=1,
        description="Identifier under which the composed analyzer's tokenizer is registered",
    )
    keep_blank_content_lines: bool = Field(
        default=True,
        description="Keep blank lines of content blocks (stopword files) as empty strings",
    )

    # Logging
    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON logs")

    # Tracing
    tracing_enabled: bool = Field(default=False, description="Install an OpenTelemetry tracer provider")
    service_name: str = Field(default="analyzer-compiler", description="Service name reported in traces")

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(_LOG_LEVELS)}, got '{value}'")
        return normalized
