from __future__ import annotations

from datetime import datetime, time
from zoneinfo import ZoneInfo

ET = ZoneInfo("America/New_York")
PREMARKET_OPEN_TIME = time(4, 0)
MARKET_OPEN_TIME = time(9, 30)
MARKET_CLOSE_TIME = time(16, 0)
AFTER_HOURS_CLOSE_TIME = time(20, 0)


def to_eastern(now: datetime | None = None) -> datetime:
    """Return `now` (default: current time) in America/New_York. Naive values are taken as ET."""
    current = now or datetime.now(ET)
    if current.tzinfo is None:
        return current.replace(tzinfo=ET)
    return current.astimezone(ET)


def session_label(now: datetime | None = None) -> str:
    """Name the US equity session in progress at `now`. Holidays are not modelled."""
    et_now = to_eastern(now)
    if et_now.weekday() >= 5:
        return "Closed"

    current_time = et_now.time()
    if PREMARKET_OPEN_TIME <= current_time < MARKET_OPEN_TIME:
        return "Pre-Market"
    if MARKET_OPEN_TIME <= current_time < MARKET_CLOSE_TIME:
        return "Market Hours"
    if MARKET_CLOSE_TIME <= current_time < AFTER_HOURS_CLOSE_TIME:
        return "After Hours"
    return "Closed"


def is_premarket(now: datetime | None = None) -> bool:
    return session_label(now) == "Pre-Market"


def now_eastern() -> datetime:
    """Current time as an aware America/New_York datetime."""
    return datetime.now(ET)
