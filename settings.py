# settings.py
"""
Runtime configuration read from the environment (and a .env file, if present).

    EXPRESSER_LOG_LEVEL     logging level name, default WARNING
    EXPRESSER_PRECISION     decimal places for printed results, default unset
    EXPRESSER_HISTORY_FILE  REPL history file, default ~/.expresser_history
"""

import logging
import os
from typing import Mapping, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "EXPRESSER_"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseModel):
    """Validated settings for the command-line shell."""
    log_level: str = "WARNING"
    precision: Optional[int] = Field(None, ge=0, le=17, description="Decimal places for printed results")
    history_file: str = Field(default_factory=lambda: os.path.expanduser("~/.expresser_history"))

    @field_validator('log_level')
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(_LOG_LEVELS)}")
        return level

    @field_validator('history_file')
    @classmethod
    def expand_history_file(cls, v: str) -> str:
        return os.path.expanduser(v.strip())

    @property
    def logging_level(self) -> int:
        return getattr(logging, self.log_level)


def load_settings(environ: Optional[Mapping[str, str]] = None, dotenv: bool = True) -> Settings:
    """
    Build Settings from EXPRESSER_* variables.

    Loads the nearest ``.env`` (searching up from the working directory) into
    the process environment first, unless ``dotenv`` is False or an explicit
    ``environ`` mapping is given.
    Raises pydantic.ValidationError for invalid values.
    """
    if environ is None:
        if dotenv:
            load_dotenv(find_dotenv(usecwd=True))
        environ = os.environ
    values = {}
    for field in Settings.model_fields:
        raw = environ.get(ENV_PREFIX + field.upper())
        if raw is not None and raw.strip():
            values[field] = raw
    return Settings(**values)
