"""
Configuration Management for recordkeeper

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here. Defaults are expenses.txt and
tasks.txt in the working directory, " | " delimited, and a malformed line
empties the store for the run.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from recordkeeper.models.records import FIELD_DELIMITER, MalformedLinePolicy


class StorageSettings(BaseSettings):
    """Backing file configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RECORDKEEPER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    expenses_file: str = Field(
        default="expenses.txt",
        description="Backing file for expense records"
    )
    tasks_file: str = Field(
        default="tasks.txt",
        description="Backing file for task records"
    )
    delimiter: str = Field(
        default=FIELD_DELIMITER,
        min_length=1,
        description="Literal field delimiter within a line"
    )
    encoding: str = Field(
        default="utf-8",
        description="Text encoding of the backing files"
    )
    malformed_line_policy: MalformedLinePolicy = Field(
        default=MalformedLinePolicy.ABORT,
        description="What to do with an unparseable stored line: abort, skip or raise"
    )
    sort_tasks_on_refresh: bool = Field(
        default=True,
        description="Re-sort tasks by priority after every change"
    )


class LoggingSettings(BaseSettings):
    """Structured logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RECORDKEEPER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    log_level: str = Field(
        default="INFO",
        description="Minimum level for emitted log lines"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()
