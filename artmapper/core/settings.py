"""Environment-backed settings.

Every field can be set through an ``ARTMAPPER_``-prefixed environment
variable or a ``.env`` file, e.g. ``ARTMAPPER_HOST=db.internal``.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from artmapper.core.connection import ConnectionConfig


class Settings(BaseSettings):
    """Database settings for the data mapper."""

    driver: str = Field(default="postgresql")
    host: str | None = Field(default="localhost")
    port: int | None = Field(default=5432)
    user: str | None = Field(default=None)
    password: str | None = Field(default=None)
    database: str = Field(default="artmapper")
    pool_size: int = Field(default=5, ge=1)
    connect_timeout: int = Field(default=30, ge=0)
    sql_dir: Path | None = Field(default=None)
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(
        env_prefix="ARTMAPPER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("driver")
    @classmethod
    def validate_driver(cls, v: str) -> str:
        driver = v.lower()
        if driver not in ("postgresql", "sqlite"):
            raise ValueError(f"Unsupported driver '{v}', expected postgresql or sqlite")
        return driver

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Invalid log level '{v}'")
        return level

    def connection_config(self) -> ConnectionConfig:
        """Build the ConnectionConfig for the configured driver."""
        if self.driver == "sqlite":
            return ConnectionConfig(
                driver="sqlite",
                database=self.database,
                pool_size=self.pool_size,
                connect_timeout=self.connect_timeout,
            )
        return ConnectionConfig(
            driver=self.driver,
            host=self.host,
            port=self.port,
            user=self.user,
            password=self.password,
            database=self.database,
            pool_size=self.pool_size,
            connect_timeout=self.connect_timeout,
        )


def get_settings() -> Settings:
    """Read settings from the environment."""
    return Settings()
