"""
Pre-Market Brief homepage generator.

Fetches the major indices and the tracked stock list, ranks the stocks into
gainers / decliners / most active, adds a rule-based market read, and
writes index.html.

Usage:
    python publish/brief.py                              # Tracked stocks from config/watchlists.json
    python publish/brief.py --tickers AAPL MSFT NVDA     # Specific tickers
    python publish/brief.py --input-file my_tickers.txt  # Tickers from a file
    python publish/brief.py --output-dir public --excel  # Also write an Excel snapshot
"""

import argparse
import datetime
import os
import sys
from pathlib import Path
from typing import List

import pandas as pd

sys.path.append(str(Path(__file__).parent.parent))

from models import FetchResult, IndexSpec, MarketAnalysis, MarketMovers, Quote
from publish.layout import ad_slot, esc, footer, long_date, page, updated_line, write_page
from settings import settings
from sources.quotes.aggregator import QuoteAggregator
from sources.quotes.analysis import analyze_market
from sources.quotes.providers.yahoo_provider import YahooFinanceProvider
from utils import log
from utils.excel_formatter import ExcelFormatter
from utils.formatting import direction_class, format_change, format_percent, format_price
from utils.input_parser import resolve_symbols
from utils.market_hours import now_eastern
from utils.watchlist import load_watchlist

logger = log.setup_verbose_logging("brief")

BRIEF_CSS = """
        .index-grid { display: grid; grid-template-columns: repeat(auto-fit, minmax(200px, 1fr)); gap: 15px; }
        .index-item { background: #0d1117; padding: 20px; border-radius: 8px; border-left: 4px solid #00d4aa; }
        .index-name { font-size: 0.85em; color: #8b92a8; margin-bottom: 5px; }
        .index-value { font-size: 1.8em; font-weight: bold; }
        .stock-list { list-style: none; }
        .stock-item { display: flex; justify-content: space-between; align-items: center; padding: 15px 0; border-bottom: 1px solid #1e3a5f; }
        .stock-item:last-child { border-bottom: none; }
        .stock-name { font-size: 0.85em; color: #8b92a8; }
        .stock-change { text-align: right; }
        .change-percent { font-size: 1.2em; font-weight: bold; }
        .change-value { font-size: 0.85em; color: #8b92a8; }
        .sentiment { display: inline-block; padding: 5px 15px; border-radius: 20px; font-size: 0.85em; font-weight: bold; text-transform: uppercase; }
        .sentiment.bullish { background: rgba(0, 212, 170, 0.2); color: #00d4aa; }
        .sentiment.bearish { background: rgba(255, 71, 87, 0.2); color: #ff4757; }
        .sentiment.neutral { background: rgba(139, 146, 168, 0.2); color: #8b92a8; }
        .analysis p { margin-bottom: 15px; color: #c9d1d9; }
"""


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def render_index_item(quote: Quote) -> str:
    cls = direction_class(quote.change_percent)
    return f"""
            <div class="index-item">
                <div class="index-name">{esc(quote.display_name)}</div>
                <div class="index-value">{format_price(quote.price)}</div>
                <div class="{cls}">{format_percent(quote.change_percent)}</div>
            </div>"""


def render_stock_list(quotes: List[Quote]) -> str:
    if not quotes:
        return '<li class="stock-item muted">No qualifying stocks right now.</li>'

    items = []
    for q in quotes:
        cls = direction_class(q.change_percent)
        items.append(f"""
                <li class="stock-item">
                    <div>
                        <div class="symbol">{esc(q.symbol)}</div>
                        <div class="stock-name">{esc(q.display_name)}</div>
                    </div>
                    <div class="stock-change">
                        <div class="change-percent {cls}">{format_percent(q.change_percent)}</div>
                        <div class="change-value">{format_change(q.change)}</div>
                    </div>
                </li>""")
    return "".join(items)


def render_brief(
    indices: List[Quote],
    movers: MarketMovers,
    analysis: MarketAnalysis,
    now: datetime.datetime,
) -> str:
    date = long_date(now)
    indices_html = "".join(render_index_item(q) for q in indices) or '<p class="muted">Index data unavailable.</p>'
    sentiment = analysis.sentiment.value

    body = f"""
    <div class="container">
        <header>
            <h1>Pre-Market Brief</h1>
            <p class="tagline">Daily stock market intelligence before the bell</p>
            <p class="date">{esc(date)}</p>
        </header>

        {ad_slot("Top banner")}

        <div class="card">
            <h2>Pre-Market Indices</h2>
            <div class="index-grid">{indices_html}
            </div>
        </div>

        <div class="card">
            <h2>Top Pre-Market Gainers</h2>
            <ul class="stock-list">{render_stock_list(movers.gainers)}
            </ul>
        </div>

        <div class="card">
            <h2>Top Pre-Market Decliners</h2>
            <ul class="stock-list">{render_stock_list(movers.decliners)}
            </ul>
        </div>

        <div class="card">
            <h2>Most Active Pre-Market</h2>
            <ul class="stock-list">{render_stock_list(movers.active)}
            </ul>
        </div>

        <div class="card analysis">
            <h2>Market Analysis</h2>
            <p><strong>Sentiment:</strong> <span class="sentiment {sentiment}">{sentiment}</span></p>
            <p><strong>Summary:</strong> {esc(analysis.summary)}</p>
            <p><strong>Key Levels:</strong> {esc(analysis.key_levels)}</p>
            <p><strong>Watchlist:</strong> {esc(analysis.watchlist or "None")}</p>
        </div>

        {ad_slot("Bottom banner")}

        <p style="text-align:center;"><a href="archive.html" style="color:#00d4aa;">Past briefs</a>
        &middot; <a href="sectors.html" style="color:#00d4aa;">Sectors</a>
        &middot; <a href="feed.xml" style="color:#00d4aa;">RSS</a></p>

        {updated_line(now)}
        {footer(now.year)}
    </div>"""

    return page(
        f"Pre-Market Stock Brief | {date}",
        f"Daily pre-market stock briefing for {date}. Top gainers, decliners, and market analysis before the bell.",
        body,
        canonical=f"{settings.SITE_URL}/",
        extra_css=BRIEF_CSS,
    )


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

class BriefPipeline:
    """
    Homepage generator.

    Fetches indices and tracked stocks, ranks them, and writes
    <output_dir>/index.html. Symbols that fail to fetch are skipped; the page
    is still written with whatever came back.
    """

    def __init__(
        self,
        tickers: List[str] = None,
        output_dir: str = None,
        watchlist_path: str = None,
        delay: float = None,
        limit: int = None,
        excel: bool = False,
        data_dir: str = None,
    ):
        self.start = now_eastern()
        self.output_dir = str(output_dir or settings.OUTPUT_DIR)
        self.data_dir = str(data_dir or settings.DATA_DIR)
        self.limit = settings.MOVERS_LIMIT if limit is None else limit

        log.header("PRE-MARKET BRIEF: Homepage")

        watchlist = load_watchlist(watchlist_path or settings.WATCHLIST_PATH)
        self.tickers = tickers or watchlist.tracked_stocks
        log.step(f"Processing {len(watchlist.indices)} indices and {len(self.tickers)} stocks")

        self.provider = YahooFinanceProvider(timeout=settings.REQUEST_TIMEOUT)
        self.aggregator = QuoteAggregator(
            self.provider,
            delay=settings.REQUEST_DELAY if delay is None else delay,
            limit=self.limit,
        )
        log.info(f"Using provider: {self.provider.name}")

        log.step("Fetching indices...")
        self.indices = self._fetch_indices(watchlist.indices)

        log.step("Fetching stocks...")
        self.movers = self.aggregator.aggregate(self.tickers, with_names=True, on_result=self._progress)

        self.analysis = analyze_market(self.indices, self.movers)
        log.info(f"Sentiment: {self.analysis.sentiment.value}")

        log.step("Writing outputs...")
        html = render_brief(self.indices, self.movers, self.analysis, self.start)
        self.output_path = write_page(os.path.join(self.output_dir, "index.html"), html)
        log.ok(f"Generated {self.output_path}")

        self.excel_path = None
        if excel:
            self.save_to_excel()

        elapsed = now_eastern() - self.start
        log.summary_table("Brief Summary", [
            ("Indices", str(len(self.indices))),
            ("Stocks fetched", str(len(self.movers.quotes))),
            ("Skipped", str(len(self.movers.skipped))),
            ("Gainers", str(len(self.movers.gainers))),
            ("Decliners", str(len(self.movers.decliners))),
            ("Elapsed", str(elapsed)),
        ])

    def _progress(self, idx: int, total: int, result: FetchResult):
        if result.ok:
            log.progress(idx, total, result.symbol, log.quote_line(result.quote))
        else:
            log.progress(idx, total, result.symbol, f"{log.C.WARN}{result.status.value}{log.C.RESET} {result.error}")

    def _fetch_indices(self, specs: List[IndexSpec]) -> List[Quote]:
        names = {s.symbol: s.name for s in specs}
        results = self.aggregator.fetch_all(names.keys(), on_result=self._progress)
        indices = []
        for r in results:
            if r.ok:
                r.quote.name = names[r.symbol]
                indices.append(r.quote)
        return indices

    def save_to_excel(self):
        """Write the run's quotes and ranked views to data/QUOTES_<timestamp>.xlsx."""
        if not self.movers.quotes and not self.indices:
            log.warn("No quotes to write to Excel")
            return

        ef = ExcelFormatter()
        columns = ["symbol", "name", "price", "reference_price", "change", "change_percent", "volume"]
        quotes_df = pd.DataFrame(
            [q.model_dump() for q in self.indices + self.movers.quotes],
            columns=columns,
        )
        ef.add_to_sheet(quotes_df, sheet_name="Quotes")

        rows = []
        for view in ("gainers", "decliners", "active"):
            for rank, q in enumerate(getattr(self.movers, view), 1):
                rows.append({
                    "view": view,
                    "rank": rank,
                    "symbol": q.symbol,
                    "change_percent": round(q.change_percent, 4),
                    "volume": q.volume,
                })
        ef.add_to_sheet(pd.DataFrame(rows, columns=["view", "rank", "symbol", "change_percent", "volume"]), sheet_name="Movers")

        xlsx_name = f"QUOTES_{self.start.strftime('%Y%m%d_%H%M%S')}.xlsx"
        self.excel_path = ef.save(xlsx_name, self.data_dir)
        log.info(f"Excel: {self.excel_path}")


def main():
    parser = argparse.ArgumentParser(description="Generate the Pre-Market Brief homepage")
    parser.add_argument("--tickers", nargs="+", help="Specific tickers to track")
    parser.add_argument("--input-file", type=str, help="Path to file with ticker list")
    parser.add_argument("--output-dir", type=str, help="Where to write index.html (default: BRIEF_OUTPUT_DIR)")
    parser.add_argument("--watchlist", type=str, help="Path to watchlists.json")
    parser.add_argument("--limit", type=int, help="Entries per ranked list (default: 10)")
    parser.add_argument("--excel", action="store_true", help="Also write an Excel snapshot to data/")
    args = parser.parse_args()

    BriefPipeline(
        tickers=resolve_symbols(args.tickers, args.input_file) or None,
        output_dir=args.output_dir,
        watchlist_path=args.watchlist,
        limit=args.limit,
        excel=args.excel,
    )


if __name__ == "__main__":
    main()
