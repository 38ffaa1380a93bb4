# config.py
# Runtime settings. Values come from the environment (or a local .env file)
# and fall back to the defaults the assistant was tuned with.
#
# Every override is prefixed BUG_BUTLER_, e.g. BUG_BUTLER_MODEL=gpt-4o.

from pathlib import Path
from typing import Mapping

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_PREFIX = "BUG_BUTLER_"

DEFAULT_STORE_PATH = Path.home() / ".config" / "bug_butler" / "store.json"


class Settings(BaseSettings):
    """Tunable knobs for the completion calls and the conversation gate."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
        extra="ignore",
    )

    model: str = Field(default="gpt-4o-mini", description="Chat-completion model identifier.")
    base_url: str | None = Field(default=None, description="Override for the OpenAI API base URL.")

    chat_max_tokens: int = Field(default=150, gt=0)
    report_max_tokens: int = Field(default=1000, gt=0)
    chat_temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    report_temperature: float = Field(default=0.5, ge=0.0, le=2.0)

    user_turns: int = Field(
        default=4, ge=1, description="User replies collected before a report can be generated."
    )

    store_path: Path = Field(default=DEFAULT_STORE_PATH, description="Local credential store file.")
    log_level: str = Field(default="WARNING")


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """
    Build Settings from BUG_BUTLER_* variables.

    With no argument the process environment and .env are read. An explicit
    mapping takes precedence over the environment and .env is skipped.
    Blank values keep their defaults and malformed values raise
    pydantic.ValidationError at startup.
    """
    if environ is None:
        return Settings()

    overrides = {
        key[len(ENV_PREFIX):].lower(): value
        for key, value in environ.items()
        if key.upper().startswith(ENV_PREFIX) and value.strip()
    }
    return Settings(_env_file=None, **overrides)
