"""
Rule-based market read for the homepage "Market Analysis" card.
"""

from typing import List, Optional

from models import MarketAnalysis, MarketMovers, Quote, Sentiment

NASDAQ_SYMBOL = "IXIC"
SP500_SYMBOL = "GSPC"

BULLISH_NASDAQ_PCT = 0.5
BULLISH_SP500_PCT = 0.3


def _find(indices: List[Quote], symbol: str) -> Optional[Quote]:
    symbol = symbol.replace("^", "")
    return next((q for q in indices if q.symbol == symbol), None)


def classify_sentiment(nasdaq: Optional[Quote], sp500: Optional[Quote]) -> Sentiment:
    """
    Bullish needs both indices up past their thresholds; bearish needs
    either one down past its threshold. A missing index counts as flat.
    """
    nasdaq_pct = nasdaq.change_percent if nasdaq else 0.0
    sp500_pct = sp500.change_percent if sp500 else 0.0

    if nasdaq_pct > BULLISH_NASDAQ_PCT and sp500_pct > BULLISH_SP500_PCT:
        return Sentiment.BULLISH
    if nasdaq_pct < -BULLISH_NASDAQ_PCT or sp500_pct < -BULLISH_SP500_PCT:
        return Sentiment.BEARISH
    return Sentiment.NEUTRAL


def analyze_market(indices: List[Quote], movers: MarketMovers) -> MarketAnalysis:
    nasdaq = _find(indices, NASDAQ_SYMBOL)
    sp500 = _find(indices, SP500_SYMBOL)
    sentiment = classify_sentiment(nasdaq, sp500)

    parts = [f"Pre-market shows {sentiment.value} sentiment."]
    if movers.gainers:
        top = movers.gainers[0]
        parts.append(f"{top.symbol} leading gains at +{top.change_percent:.2f}%.")
    if movers.decliners:
        bottom = movers.decliners[0]
        parts.append(f"{bottom.symbol} down {bottom.change_percent:.2f}%.")

    if sp500:
        stance = "holding" if sp500.change_percent >= 0 else "testing"
        key_levels = f"S&P 500 {stance} support at {sp500.price:,.2f}."
    else:
        key_levels = "S&P 500 data unavailable."

    return MarketAnalysis(
        sentiment=sentiment,
        summary=" ".join(parts),
        key_levels=key_levels,
        watchlist=", ".join(q.symbol for q in movers.gainers[:3]),
    )
