"""Process-level runtime settings read from the environment."""

import os
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class RuntimeSettings(BaseModel):
    """Secrets and process settings that do not belong in a config file."""

    openai_api_key: str = Field(default="")
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="text")
    config_path: Path | None = Field(default=None)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        if v not in ("text", "json"):
            raise ValueError("log_format must be 'text' or 'json'")
        return v

    @classmethod
    def from_env(cls) -> "RuntimeSettings":
        """Create settings with environment variable overrides."""
        config_path = os.environ.get("DESIGN_QA_CONFIG")
        return cls(
            openai_api_key=os.environ.get("OPENAI_API_KEY", ""),
            log_level=os.environ.get("DESIGN_QA_LOG_LEVEL", "INFO"),
            log_format=os.environ.get("DESIGN_QA_LOG_FORMAT", "text"),
            config_path=Path(config_path) if config_path else None,
        )
