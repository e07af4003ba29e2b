"""Application configuration and constants."""
import os
from pathlib import Path


def _parse_int_env(name: str, default: int) -> int:
    """Parse integer from environment variable."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_list_env(name: str, default: list[str]) -> list[str]:
    """Parse comma separated list from environment variable."""
    raw = os.environ.get(name)
    if raw is None:
        return default
    items = [item.strip() for item in raw.split(",")]
    return [item for item in items if item] or default


# Database
DB_DIR = Path(os.environ.get("DB_DIR", Path.cwd() / "data"))
DATABASE_URL = os.environ.get("DATABASE_URL", f"sqlite:///{DB_DIR / 'quizzes.db'}")

# Logging
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# HTTP
CORS_ALLOW_ORIGINS = _parse_list_env("CORS_ALLOW_ORIGINS", ["*"])

# Listing limits
QUIZ_LIST_LIMIT = _parse_int_env("QUIZ_LIST_LIMIT", 100)
HISTORY_LIMIT = _parse_int_env("HISTORY_LIMIT", 50)
