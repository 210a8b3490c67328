"""Environment-driven settings for the classifier service."""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# .env in the working directory, if any; real environment variables win
load_dotenv(override=False)


DEFAULT_PORT = 3000

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseModel):
    openai_api_key: Optional[str] = None
    host: str = "0.0.0.0"
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    openai_timeout: Optional[float] = Field(default=None, gt=0)
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level


def _env(name: str) -> Optional[str]:
    """Return a stripped environment value, treating blank as unset."""
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return value.strip()


def get_settings() -> Settings:
    """
    Build settings from the current process environment.

    Unset variables fall back to the model defaults. Malformed numbers (PORT,
    OPENAI_TIMEOUT) raise pydantic.ValidationError.
    """
    values = {
        "openai_api_key": _env("OPENAI_API_KEY"),
        "host": _env("HOST"),
        "port": _env("PORT"),
        "openai_timeout": _env("OPENAI_TIMEOUT"),
        "log_level": _env("LOG_LEVEL"),
    }
    return Settings(**{k: v for k, v in values.items() if v is not None})
