"""
Load index, stock, landing-page and sector lists from config/watchlists.json.
"""

import json
import os

from pydantic import ValidationError

from models import IndexSpec, Watchlist
from utils import log

DEFAULT_INDICES = [
    IndexSpec(symbol="^GSPC", name="S&P 500"),
    IndexSpec(symbol="^DJI", name="Dow Jones"),
    IndexSpec(symbol="^IXIC", name="Nasdaq"),
    IndexSpec(symbol="^VIX", name="VIX"),
]
DEFAULT_TRACKED = ["AAPL", "MSFT", "NVDA"]


def default_watchlist() -> Watchlist:
    """Minimal watchlist used when the config file is missing."""
    return Watchlist(indices=list(DEFAULT_INDICES), tracked_stocks=list(DEFAULT_TRACKED))


def load_watchlist(path) -> Watchlist:
    """
    Read and validate a watchlist file.

    A missing file is not fatal: a warning is printed and the built-in
    default is returned. A file that exists but does not parse raises
    ValueError naming the path.
    """
    path = str(path)
    if not os.path.exists(path):
        log.warn(f"Watchlist not found: {path}, using defaults")
        return default_watchlist()

    with open(path, "r") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e

    try:
        watchlist = Watchlist(**raw)
    except ValidationError as e:
        raise ValueError(f"Invalid watchlist {path}: {e}") from e

    log.info(
        f"Loaded watchlist: {len(watchlist.indices)} indices, "
        f"{len(watchlist.tracked_stocks)} stocks, "
        f"{len(watchlist.keyword_pages)} pages, {len(watchlist.sectors)} sectors"
    )
    return watchlist
