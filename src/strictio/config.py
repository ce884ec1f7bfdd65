"""strictio configuration settings."""

from pydantic import ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from strictio.infrastructure.config.settings_utils import (
    parse_bool,
    parse_int,
    parse_log_level,
    parse_permissions,
)
from strictio.infrastructure.logging_setup import configure_logging

_MAX_SKIP_CHUNK_SIZE = 16 * 1024 * 1024


class Settings(BaseSettings):
    """Library settings read from ``STRICTIO_*`` env vars and ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="STRICTIO_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Observability
    log_level: str = "INFO"
    log_json: bool = False

    # Escalation
    escalate_all_warnings: bool = True

    # Storage
    data_uri_enabled: bool = True
    default_permissions: int = 0o666
    skip_chunk_size: int = 65536

    @field_validator("log_level", mode="before")
    @classmethod
    def _parse_log_level(cls, value: object) -> str:
        return parse_log_level(value)

    @field_validator("log_json", "escalate_all_warnings", "data_uri_enabled", mode="before")
    @classmethod
    def _parse_flag(cls, value: object, info: ValidationInfo) -> bool:
        return parse_bool(value, default=cls.model_fields[info.field_name].default)

    @field_validator("default_permissions", mode="before")
    @classmethod
    def _parse_permissions(cls, value: object) -> int:
        # "644" in the environment means octal, never decimal.
        return parse_permissions(value)

    @field_validator("skip_chunk_size", mode="before")
    @classmethod
    def _parse_skip_chunk_size(cls, value: object) -> int:
        return parse_int(value, 65536, minimum=1, maximum=_MAX_SKIP_CHUNK_SIZE)

    def setup_logging(self) -> None:
        configure_logging(level=self.log_level, json_logs=self.log_json)


# Global settings instance
settings = Settings()
