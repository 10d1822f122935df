"""Settings for fluentcriteria."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class FluentCriteriaSettings(BaseSettings):
    """fluentcriteria configuration settings."""

    LOG_LEVEL: str = "INFO"

    # Applied to paginated list calls that do not pass an explicit "max"
    DEFAULT_MAX_RESULTS: Optional[int] = None

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


settings = FluentCriteriaSettings()
