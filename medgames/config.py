"""
Central configuration.

Values come from the environment (a .env file is loaded if present) and can
be overridden from the command line.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .data.dailymed import DAILYMED_BASE_URL
from .llm.client import DEFAULT_MODEL

DEFAULT_REQUEST_DELAY = 0.3     # seconds between DailyMed calls
DEFAULT_TIMEOUT = 10.0


class ConfigError(Exception):
    """A configuration value is missing or invalid."""


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from e


@dataclass
class Settings:
    mistral_api_key: Optional[str] = None
    mistral_model: str = DEFAULT_MODEL
    dailymed_base_url: str = DAILYMED_BASE_URL
    request_delay: float = DEFAULT_REQUEST_DELAY
    timeout: float = DEFAULT_TIMEOUT


def load_settings(env_file: Optional[str] = None) -> Settings:
    """
    Build Settings from environment variables.

    Args:
        env_file: Optional path to a .env file

    Returns:
        Settings instance
    """
    load_dotenv(env_file)

    delay = _float_env("DAILYMED_REQUEST_DELAY", DEFAULT_REQUEST_DELAY)
    if delay < 0:
        raise ConfigError("DAILYMED_REQUEST_DELAY must not be negative")

    return Settings(
        mistral_api_key=os.getenv("MISTRAL_API_KEY") or None,
        mistral_model=os.getenv("MISTRAL_MODEL") or DEFAULT_MODEL,
        dailymed_base_url=os.getenv("DAILYMED_BASE_URL") or DAILYMED_BASE_URL,
        request_delay=delay,
        timeout=_float_env("DAILYMED_TIMEOUT", DEFAULT_TIMEOUT),
    )
