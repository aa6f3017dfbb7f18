"""
Quote aggregation and ranking.

Fetches a Quote per symbol, one request at a time with a flat pause between
requests, and ranks the successful quotes into three views:

    gainers    change_percent > 0, largest first
    decliners  change_percent < 0, most negative first
    active     every quote, highest volume first

Each view is capped at `limit`. A symbol that cannot be fetched is left out
of all three views; nothing here raises to the caller.
"""

import logging
import time
from typing import Callable, Iterable, List, Optional

from models import FetchResult, FetchStatus, MarketMovers, Quote
from sources.quotes.providers.base import (
    DataNotFoundError,
    ProviderError,
    QuoteDataProvider,
    RateLimitError,
)

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10
DEFAULT_DELAY = 0.1


def rank_movers(quotes: List[Quote], limit: int = DEFAULT_LIMIT) -> MarketMovers:
    """
    Split quotes into gainers / decliners / active, each capped at `limit`.

    sorted() is stable, so quotes with equal keys keep their input order.
    """
    gainers = sorted(
        (q for q in quotes if q.change_percent > 0),
        key=lambda q: q.change_percent,
        reverse=True,
    )
    decliners = sorted(
        (q for q in quotes if q.change_percent < 0),
        key=lambda q: q.change_percent,
    )
    active = sorted(quotes, key=lambda q: q.volume, reverse=True)

    return MarketMovers(
        gainers=gainers[:limit],
        decliners=decliners[:limit],
        active=active[:limit],
        quotes=list(quotes),
    )


class QuoteAggregator:
    """
    Sequential quote fetcher and ranker over a QuoteDataProvider.

    Args:
        provider: where quotes come from
        delay: seconds to wait between consecutive requests
        limit: default cap for each ranked view
        sleep: injectable sleep function (tests pass a stub)
    """

    def __init__(
        self,
        provider: QuoteDataProvider,
        delay: float = DEFAULT_DELAY,
        limit: int = DEFAULT_LIMIT,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.provider = provider
        self.delay = delay
        self.limit = limit
        self._sleep = sleep

    def fetch_quote(self, symbol: str, with_name: bool = False) -> FetchResult:
        """
        Fetch one symbol. Never raises.

        A missing or non-positive prior close yields NO_DATA: the symbol is
        excluded rather than priced against its own last trade.
        """
        try:
            raw = self.provider.get_quote(symbol)
        except DataNotFoundError as e:
            logger.info(f"{symbol}: no data - {e}")
            return FetchResult(symbol=symbol, status=FetchStatus.NO_DATA, error=str(e))
        except RateLimitError as e:
            logger.warning(f"{symbol}: rate limited - {e}")
            return FetchResult(symbol=symbol, status=FetchStatus.FAILED, error=str(e))
        except ProviderError as e:
            logger.warning(f"{symbol}: provider error - {e}")
            return FetchResult(symbol=symbol, status=FetchStatus.FAILED, error=str(e))
        except Exception as e:
            logger.exception(f"Failed to fetch quote for {symbol}")
            return FetchResult(symbol=symbol, status=FetchStatus.FAILED, error=str(e))

        try:
            quote = Quote.from_prices(
                symbol=symbol,
                price=raw.get("price"),
                reference_price=raw.get("reference_price"),
                volume=raw.get("volume"),
            )
        except (AttributeError, TypeError, ValueError) as e:
            logger.info(f"{symbol}: unusable quote - {e}")
            return FetchResult(symbol=symbol, status=FetchStatus.NO_DATA, error=str(e))

        if with_name:
            quote.name = self._lookup_name(symbol)

        return FetchResult(symbol=symbol, status=FetchStatus.OK, quote=quote)

    def _lookup_name(self, symbol: str) -> str:
        try:
            name = self.provider.get_company_name(symbol)
        except Exception as e:
            logger.debug(f"{symbol}: name lookup failed - {e}")
            name = None
        return name or symbol.replace("^", "")

    def fetch_all(
        self,
        symbols: Iterable[str],
        with_names: bool = False,
        on_result: Optional[Callable[[int, int, FetchResult], None]] = None,
    ) -> List[FetchResult]:
        """
        Fetch every symbol in order, pausing `delay` seconds between requests.

        Args:
            on_result: called as on_result(index, total, result) after each
                fetch, for progress output
        """
        symbols = list(symbols)
        results = []
        for i, symbol in enumerate(symbols, 1):
            if i > 1 and self.delay > 0:
                self._sleep(self.delay)
            result = self.fetch_quote(symbol, with_name=with_names)
            results.append(result)
            if on_result:
                on_result(i, len(symbols), result)
        return results

    def aggregate(
        self,
        symbols: Iterable[str],
        limit: Optional[int] = None,
        with_names: bool = False,
        on_result: Optional[Callable[[int, int, FetchResult], None]] = None,
    ) -> MarketMovers:
        """Fetch all symbols and rank the successful quotes."""
        results = self.fetch_all(symbols, with_names=with_names, on_result=on_result)
        quotes = [r.quote for r in results if r.ok]
        movers = rank_movers(quotes, limit if limit is not None else self.limit)
        movers.skipped = [r.symbol for r in results if not r.ok]
        if movers.skipped:
            logger.info(f"Skipped {len(movers.skipped)} symbols: {', '.join(movers.skipped)}")
        return movers
