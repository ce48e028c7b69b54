"""Configuration management for the retirement job."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .duration import Duration
from .github import DEFAULT_API_URL


class RetirementSettings(BaseSettings):
    """Runtime configuration sourced from environment variables and optional .env file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    github_token: str | None = Field(default=None, validation_alias="GITHUB_TOKEN")
    github_org: str | None = Field(default=None, validation_alias="GITHUB_ORG")
    github_api_url: str = Field(default=DEFAULT_API_URL, validation_alias="GITHUB_API_URL")
    alumni_team: str | None = Field(default=None, validation_alias="ALUMNI_TEAM")
    source_team: str = Field(default="committers", validation_alias="SOURCE_TEAM")
    maximum_absence_before_retirement: str = Field(
        default="365d", validation_alias="MAXIMUM_ABSENCE_BEFORE_RETIREMENT"
    )
    log_level: str = Field(default="INFO", validation_alias="RETIREMENT_LOG_LEVEL")

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        if normalized not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(
                "RETIREMENT_LOG_LEVEL must be one of CRITICAL, ERROR, WARNING, INFO, DEBUG"
            )
        return normalized

    @field_validator("maximum_absence_before_retirement")
    @classmethod
    def _validate_duration(cls, value: str) -> str:
        return str(Duration.parse(value))

    @field_validator("github_token", "github_org", "alumni_team", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


@lru_cache(maxsize=1)
def get_settings() -> RetirementSettings:
    """Return cached settings instance."""

    return RetirementSettings()


__all__ = ["RetirementSettings", "get_settings"]
