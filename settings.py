"""
Configuration for the Pre-Market Brief generators.

Values come from the environment (or a .env file at the repo root) and fall
back to the defaults below. Generators accept explicit arguments that
override these per call.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR: Path = Path(__file__).parent
load_dotenv(BASE_DIR / ".env")


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Generator configuration."""

    # Paths
    BASE_DIR: Path = BASE_DIR
    OUTPUT_DIR: Path = Path(os.getenv("BRIEF_OUTPUT_DIR", str(BASE_DIR / "public")))
    DATA_DIR: Path = BASE_DIR / "data"
    WATCHLIST_PATH: Path = Path(os.getenv("BRIEF_WATCHLIST", str(BASE_DIR / "config" / "watchlists.json")))

    # Site
    SITE_NAME: str = "Pre-Market Stock Brief"
    SITE_URL: str = os.getenv("BRIEF_SITE_URL", "https://premarketbrief.com").rstrip("/")
    ADSENSE_CLIENT_ID: str = os.getenv("ADSENSE_CLIENT_ID", "")

    # Fetching
    REQUEST_DELAY: float = float(os.getenv("BRIEF_REQUEST_DELAY", "0.1"))
    SECTOR_REQUEST_DELAY: float = float(os.getenv("BRIEF_SECTOR_REQUEST_DELAY", "0.05"))
    REQUEST_TIMEOUT: int = int(os.getenv("BRIEF_REQUEST_TIMEOUT", "10"))

    # Ranking caps
    MOVERS_LIMIT: int = int(os.getenv("BRIEF_MOVERS_LIMIT", "10"))
    LANDING_LIMIT: int = 20
    FEED_LIMIT: int = 10

    # Publishing
    AUTO_COMMIT: bool = _env_bool("BRIEF_AUTO_COMMIT")


settings = Settings()
