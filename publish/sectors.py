"""
Sector performance pages.

Tracks the S&P 500 sector SPDR ETFs. For each one, the last five sessions of
closes give a 1-day change (vs the prior close) and a 5-day change (vs the
first close in the window). Writes sectors/<SYMBOL>.html per sector and a
sectors.html overview table.

Usage:
    python publish/sectors.py
    python publish/sectors.py --output-dir public
"""

import argparse
import datetime
import os
import sys
import time
from pathlib import Path
from typing import Callable, List, Optional

sys.path.append(str(Path(__file__).parent.parent))

from models import Sector, SectorPerformance
from publish.layout import esc, footer, nav, page, updated_line, write_page
from settings import settings
from sources.quotes.providers.base import DataNotFoundError, ProviderError, RateLimitError
from sources.quotes.providers.yahoo_provider import YahooFinanceProvider
from utils import log
from utils.formatting import direction_class, format_percent, format_price
from utils.market_hours import now_eastern
from utils.watchlist import load_watchlist

logger = log.setup_verbose_logging("sectors")

SECTORS_DIRNAME = "sectors"
HISTORY_RANGE = "5d"


def _pct(current: float, base: float) -> Optional[float]:
    if not base:
        return None
    return (current - base) / base * 100


def compute_performance(sector: Sector, closes: List[float]) -> SectorPerformance:
    """
    1d and 5d change from a window of closes (oldest first).

    With a single close there is no prior session, so change_1d is 0 and
    change_5d is 0. An empty window yields a record with no data.
    """
    perf = SectorPerformance(symbol=sector.symbol, name=sector.name, color=sector.color)
    closes = [c for c in closes if c is not None]
    if not closes:
        return perf

    current = closes[-1]
    prior = closes[-2] if len(closes) >= 2 else current
    first = closes[0]
    perf.price = current
    perf.change_1d = _pct(current, prior)
    perf.change_5d = _pct(current, first)
    return perf


def render_sector_page(perf: SectorPerformance, now: datetime.datetime) -> str:
    change_cls = direction_class(perf.change_1d)
    color = esc(perf.color)
    lower_name = esc(perf.name.lower())

    body = f"""
    {nav([("../index.html", "Home"), ("../sectors.html", "All Sectors")])}
    <div class="container">
        <header>
            <div class="symbol" style="font-size:3em;color:{color};">{esc(perf.symbol)}</div>
            <h1>{esc(perf.name)}</h1>
            <div class="{change_cls}" style="font-size:1.5em;">{format_percent(perf.change_1d)}</div>
            <p class="muted">Last: {format_price(perf.price)} &middot; 5 day: {format_percent(perf.change_5d)}</p>
        </header>
        <div class="card">
            <h2 style="color:{color};">About the {esc(perf.name)} Sector</h2>
            <p class="muted">The {esc(perf.name)} sector represents companies in the {lower_name} industry.
            Investors track {esc(perf.symbol)} to gauge {lower_name} performance relative to the broader market.</p>
        </div>
        {updated_line(now)}
        {footer(now.year)}
    </div>"""

    return page(
        f"{perf.name} Sector | {perf.symbol} ETF Performance",
        f"{perf.name} sector performance today. Track {perf.symbol} ETF price and market trends before the opening bell.",
        body,
        canonical=f"{settings.SITE_URL}/{SECTORS_DIRNAME}/{perf.symbol}.html",
    )


def render_overview_page(sectors: List[SectorPerformance], now: datetime.datetime) -> str:
    rows = "".join(f"""
                <tr>
                    <td class="symbol"><a href="{SECTORS_DIRNAME}/{esc(s.symbol)}.html" style="color:{esc(s.color)}">{esc(s.symbol)}</a></td>
                    <td>{esc(s.name)}</td>
                    <td class="{direction_class(s.change_1d)}">{format_percent(s.change_1d)}</td>
                    <td class="{direction_class(s.change_5d)}">{format_percent(s.change_5d)}</td>
                </tr>""" for s in sectors)

    body = f"""
    {nav([("index.html", "Home")])}
    <div class="container">
        <header>
            <h1>Sector Performance</h1>
            <p class="muted">S&amp;P 500 sectors today</p>
        </header>
        <div class="card">
            <table>
                <thead><tr><th>Symbol</th><th>Sector</th><th>1 Day</th><th>5 Day</th></tr></thead>
                <tbody>{rows}
                </tbody>
            </table>
        </div>
        {updated_line(now)}
        {footer(now.year)}
    </div>"""

    return page(
        "Sector Performance | S&P 500 Sectors Today",
        "S&P 500 sector performance today. Track technology, financials, energy, healthcare and all market sectors.",
        body,
        canonical=f"{settings.SITE_URL}/sectors.html",
    )


class SectorPipeline:
    """Fetches 5-day history per sector ETF and writes the sector pages."""

    def __init__(
        self,
        output_dir: str = None,
        watchlist_path: str = None,
        delay: float = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.start = now_eastern()
        self.output_dir = str(output_dir or settings.OUTPUT_DIR)
        self.delay = settings.SECTOR_REQUEST_DELAY if delay is None else delay

        log.header("PRE-MARKET BRIEF: Sector Pages")

        watchlist = load_watchlist(watchlist_path or settings.WATCHLIST_PATH)
        self.sectors = watchlist.sectors
        log.step(f"Processing {len(self.sectors)} sectors")

        self.provider = YahooFinanceProvider(timeout=settings.REQUEST_TIMEOUT)
        self.performance = []
        for i, sector in enumerate(self.sectors, 1):
            if i > 1 and self.delay > 0:
                sleep(self.delay)
            self.performance.append(self._fetch_sector(sector, i, len(self.sectors)))

        log.step("Writing pages...")
        sectors_dir = os.path.join(self.output_dir, SECTORS_DIRNAME)
        for perf in self.performance:
            write_page(os.path.join(sectors_dir, f"{perf.symbol}.html"), render_sector_page(perf, self.start))
        self.overview_path = write_page(
            os.path.join(self.output_dir, "sectors.html"),
            render_overview_page(self.performance, self.start),
        )

        elapsed = now_eastern() - self.start
        log.summary_table("Sector Summary", [
            ("Sectors", str(len(self.sectors))),
            ("With data", str(sum(1 for p in self.performance if p.has_data))),
            ("Elapsed", str(elapsed)),
        ])
        log.ok("Sector pages complete")

    def _fetch_sector(self, sector: Sector, idx: int, total: int) -> SectorPerformance:
        """Fetch one sector; failures leave the record without data."""
        try:
            closes = self.provider.get_price_history(sector.symbol, range_=HISTORY_RANGE)
        except RateLimitError as e:
            log.warn(f"{sector.symbol}: Rate limit hit - {e}")
            closes = []
        except (DataNotFoundError, ProviderError) as e:
            log.err(f"{sector.symbol}: {e}")
            closes = []
        except Exception as e:
            log.err(f"{sector.symbol}: {e}")
            logger.exception(f"Failed to fetch sector {sector.symbol}")
            closes = []

        perf = compute_performance(sector, closes)
        if perf.has_data:
            log.progress(idx, total, sector.symbol, f"1d {format_percent(perf.change_1d)} | 5d {format_percent(perf.change_5d)}")
        else:
            log.progress(idx, total, sector.symbol, f"{log.C.WARN}no data{log.C.RESET}")
        return perf


def main():
    parser = argparse.ArgumentParser(description="Generate sector performance pages")
    parser.add_argument("--output-dir", type=str, help="Output root")
    parser.add_argument("--watchlist", type=str, help="Path to watchlists.json")
    args = parser.parse_args()

    SectorPipeline(output_dir=args.output_dir, watchlist_path=args.watchlist)


if __name__ == "__main__":
    main()
