"""
Yahoo Finance quote provider.

Uses the public (unauthenticated) chart and quoteSummary endpoints:
    https://query1.finance.yahoo.com/v8/finance/chart/{symbol}
    https://query1.finance.yahoo.com/v10/finance/quoteSummary/{symbol}

No API key. Yahoo throttles aggressively, so callers pace their requests.
"""

import logging
from typing import Dict, List, Optional

from utils.session import RequestSession

from .base import DataNotFoundError, ProviderError, QuoteDataProvider, RateLimitError

logger = logging.getLogger(__name__)

YAHOO_BASE = "https://query1.finance.yahoo.com"
CHART_URL = YAHOO_BASE + "/v8/finance/chart/{symbol}"
SUMMARY_URL = YAHOO_BASE + "/v10/finance/quoteSummary/{symbol}"


class YahooFinanceProvider(QuoteDataProvider):
    """Yahoo Finance chart API provider."""

    def __init__(self, timeout: int = 10):
        super().__init__(api_key=None)
        self.session = RequestSession(timeout=timeout)
        self.name = "yahoo"

    def _get_json(self, url: str, params: Dict, symbol: str) -> Dict:
        resp = self.session.get(url, params=params)
        if not resp:
            if self.session.last_status_code == 429:
                raise RateLimitError(f"{symbol}: Yahoo rate limit (HTTP 429)")
            if self.session.last_status_code == 404:
                raise DataNotFoundError(f"{symbol}: unknown symbol")
            raise ProviderError(f"{symbol}: request failed (HTTP {self.session.last_status_code})")

        try:
            return resp.json()
        except ValueError as e:
            raise ProviderError(f"{symbol}: invalid JSON: {e}")

    def _get_chart(self, symbol: str, range_: str) -> Dict:
        """Return chart.result[0] for a symbol, or raise DataNotFoundError."""
        data = self._get_json(
            CHART_URL.format(symbol=symbol),
            {"interval": "1d", "range": range_},
            symbol,
        )
        chart = data.get("chart") or {}
        if chart.get("error"):
            raise DataNotFoundError(f"{symbol}: {chart['error'].get('description', chart['error'])}")

        results = chart.get("result") or []
        if not results:
            raise DataNotFoundError(f"{symbol}: no chart result")
        return results[0]

    @staticmethod
    def _closes(result: Dict) -> List[float]:
        quotes = (result.get("indicators") or {}).get("quote") or [{}]
        return [c for c in (quotes[0].get("close") or []) if c is not None]

    def get_quote(self, symbol: str) -> Dict:
        """
        Latest close of the current session plus the prior session close.

        The prior close comes from meta.previousClose, then
        meta.chartPreviousClose. Both missing leaves reference_price None.
        """
        result = self._get_chart(symbol, "1d")
        closes = self._closes(result)
        if not closes:
            raise DataNotFoundError(f"{symbol}: no last price")

        meta = result.get("meta") or {}
        reference = meta.get("previousClose") or meta.get("chartPreviousClose")
        quote = {
            "symbol": symbol,
            "price": float(closes[-1]),
            "reference_price": float(reference) if reference else None,
            "volume": int(meta.get("regularMarketVolume") or 0),
        }
        logger.debug(f"{symbol}: {quote}")
        return quote

    def get_price_history(self, symbol: str, range_: str = "5d") -> List[float]:
        closes = self._closes(self._get_chart(symbol, range_))
        if not closes:
            raise DataNotFoundError(f"{symbol}: no closes in {range_} window")
        return [float(c) for c in closes]

    def get_company_name(self, symbol: str) -> Optional[str]:
        """Long name from quoteSummary/quoteType. Failures return None."""
        try:
            data = self._get_json(
                SUMMARY_URL.format(symbol=symbol),
                {"modules": "quoteType"},
                symbol,
            )
        except (RateLimitError, DataNotFoundError, ProviderError) as e:
            logger.debug(f"{symbol}: company name lookup failed: {e}")
            return None

        results = (data.get("quoteSummary") or {}).get("result") or []
        if not results:
            return None
        quote_type = results[0].get("quoteType") or {}
        return quote_type.get("longName") or quote_type.get("shortName") or None
