"""Configuration for the host probe."""

from typing import Literal

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ProbeConfig(BaseSettings):
    """Settings the probe is started with.

    Built once at startup and never changed afterwards. Every field can be
    given as a keyword argument or through a ``PROBE_*`` environment variable.
    """

    model_config = SettingsConfigDict(
        env_prefix="PROBE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Identity
    node_name: str

    # Collection endpoint
    api_host: str
    token: SecretStr
    request_timeout: float = Field(default=10.0, gt=0)

    # Cycle
    interval_seconds: int = Field(default=1, ge=1)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["console", "json"] = "console"

    @field_validator("node_name")
    @classmethod
    def _check_node_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("node name must not be empty")
        return value

    @field_validator("api_host")
    @classmethod
    def _normalize_api_host(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value:
            raise ValueError("api host must not be empty")
        if "://" not in value:
            value = f"http://{value}"
        return value

    @field_validator("token")
    @classmethod
    def _check_token(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value().strip():
            raise ValueError("token must not be empty")
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("log_format", mode="before")
    @classmethod
    def _lower_log_format(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @property
    def submit_url(self) -> str:
        """URL the reports are posted to."""
        return f"{self.api_host}/submit"
