"""Configuration for recipebox."""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# App directories
APP_NAME = "recipebox"
CONFIG_DIR = Path(os.getenv("RECIPEBOX_HOME", str(Path.home() / f".{APP_NAME}"))).expanduser()
LIBRARY_FILE = CONFIG_DIR / "library.json"
ADJUSTMENTS_FILE = CONFIG_DIR / "adjustments.json"

# Duplicate checks compare against at most this many existing recipes
DEFAULT_MAX_CANDIDATES = 1000

DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_HTTP_TIMEOUT = 30.0


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {value!r}") from e


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {value!r}") from e


MAX_CANDIDATES = _env_int("RECIPEBOX_MAX_CANDIDATES", DEFAULT_MAX_CANDIDATES)
HTTP_TIMEOUT = _env_float("RECIPEBOX_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT)


def get_log_level() -> str:
    """Log level name from RECIPEBOX_LOG_LEVEL, defaulting to WARNING."""
    return os.getenv("RECIPEBOX_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
