"""
Pydantic data models for the Pre-Market Brief generators.

Quotes are transient: they are rebuilt on every run and only live for the
duration of one generation. Page and sector definitions are loaded from
config/watchlists.json.
"""

import math
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class FetchStatus(str, Enum):
    OK = "ok"
    NO_DATA = "no_data"    # service answered, nothing usable
    FAILED = "failed"      # transient: network, HTTP, rate limit, bad body


class Sentiment(str, Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class PageFilter(str, Enum):
    ALL = "all"
    GAINERS = "gainers"
    DECLINERS = "decliners"
    VOLUME = "volume"


class PageSort(str, Enum):
    CHANGE = "change"
    VOLUME = "volume"


# ---------------------------------------------------------------------------
# Quotes
# ---------------------------------------------------------------------------

class Quote(BaseModel):
    """
    One symbol's last price measured against the prior session close.
    """
    symbol: str
    price: float
    reference_price: float = Field(gt=0)
    change: float
    change_percent: float
    volume: int = Field(default=0, ge=0)
    name: str = ""

    @classmethod
    def from_prices(
        cls,
        symbol: str,
        price: float,
        reference_price: Optional[float],
        volume: Optional[int] = 0,
        name: str = "",
    ) -> "Quote":
        """
        Build a Quote, computing change and change_percent.

        Raises:
            ValueError: if the reference price is missing, zero or negative,
                or either price is not a finite number.
        """
        if reference_price is None or reference_price <= 0:
            raise ValueError(f"{symbol}: no valid reference price ({reference_price!r})")
        if price is None or not math.isfinite(price) or not math.isfinite(reference_price):
            raise ValueError(f"{symbol}: non-finite price")

        change = price - reference_price
        return cls(
            symbol=symbol.replace("^", ""),
            price=price,
            reference_price=reference_price,
            change=change,
            change_percent=change / reference_price * 100,
            volume=max(int(volume or 0), 0),
            name=name,
        )

    @property
    def display_name(self) -> str:
        return self.name or self.symbol

    @property
    def is_up(self) -> bool:
        return self.change_percent >= 0


class FetchResult(BaseModel):
    """Outcome of one quote fetch. Only OK results carry a quote."""
    symbol: str
    status: FetchStatus
    quote: Optional[Quote] = None
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.status == FetchStatus.OK and self.quote is not None


class MarketMovers(BaseModel):
    """Ranked views over one run's successfully fetched quotes."""
    gainers: List[Quote] = Field(default_factory=list)
    decliners: List[Quote] = Field(default_factory=list)
    active: List[Quote] = Field(default_factory=list)
    quotes: List[Quote] = Field(default_factory=list)
    skipped: List[str] = Field(default_factory=list)


class MarketAnalysis(BaseModel):
    sentiment: Sentiment = Sentiment.NEUTRAL
    summary: str = ""
    key_levels: str = ""
    watchlist: str = ""


# ---------------------------------------------------------------------------
# Configuration entities
# ---------------------------------------------------------------------------

class IndexSpec(BaseModel):
    """A market index shown on the homepage, e.g. ^GSPC -> S&P 500."""
    symbol: str
    name: str


class KeywordPage(BaseModel):
    """
    An SEO landing page targeting a set of long-tail keywords.

    Pages with `symbols` show exactly those tickers. Pages without apply
    `filter` to the shared symbol universe.
    """
    slug: str
    title: str
    h1: str
    description: str
    keywords: List[str] = Field(default_factory=list)
    symbols: List[str] = Field(default_factory=list)
    filter: PageFilter = PageFilter.ALL
    sort: PageSort = PageSort.CHANGE


class Sector(BaseModel):
    symbol: str
    name: str
    color: str = "#00d4aa"


class SectorPerformance(BaseModel):
    symbol: str
    name: str
    color: str = "#00d4aa"
    price: Optional[float] = None
    change_1d: Optional[float] = None
    change_5d: Optional[float] = None

    @property
    def has_data(self) -> bool:
        return self.price is not None


class Watchlist(BaseModel):
    """Everything the generators need to know about which symbols to fetch."""
    indices: List[IndexSpec] = Field(default_factory=list)
    tracked_stocks: List[str] = Field(default_factory=list)
    keyword_pages: List[KeywordPage] = Field(default_factory=list)
    sectors: List[Sector] = Field(default_factory=list)
