"""Configuration from environment (ASSETHASH_ prefix)."""

from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Command-line settings from env."""

    model_config = SettingsConfigDict(env_prefix="ASSETHASH_", extra="ignore")

    # Directory whose files are made content-addressable
    assets_dir: Path = Path("assets")

    # Logging (empty log_file = stderr only; level DEBUG|INFO|WARNING|ERROR)
    log_level: str = "INFO"
    log_file: str = ""

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, v: str) -> str:
        return v.strip().upper()


def get_settings() -> Settings:
    """Return settings."""
    return Settings()
