"""Settings read from the environment.

Environment Variable Format:
    TYPST_OUTLINE_<KEY>=<VALUE>

Examples:
    TYPST_OUTLINE_INDEX_PATH=~/outlines
    TYPST_OUTLINE_LOG_LEVEL=DEBUG
    TYPST_OUTLINE_LOG_JSON=true
"""

from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class Settings(BaseSettings):
    """Server settings."""

    model_config = SettingsConfigDict(
        env_prefix="TYPST_OUTLINE_",
        env_ignore_empty=True,
        frozen=True,
    )

    index_path: Optional[str] = Field(
        default=None,
        description="Index storage directory (default ~/.typst-outline/).",
    )
    log_level: LogLevel = "WARNING"
    log_json: bool = Field(default=False, description="Emit JSON log lines.")

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_level(cls, v):
        if isinstance(v, str):
            v = v.strip().upper()
            return "WARNING" if v == "WARN" else v
        return v
