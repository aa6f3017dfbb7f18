"""
SEO landing page generator.

One page per keyword entry in config/watchlists.json. The union of every
page's symbol list is fetched once; each page then shows either its own
symbols or a filtered view of the whole universe.

Usage:
    python publish/landing.py                       # All pages from the watchlist
    python publish/landing.py --output-dir public   # Custom output root
    python publish/landing.py --limit 10            # Rows per page
"""

import argparse
import datetime
import os
import sys
from pathlib import Path
from typing import List

sys.path.append(str(Path(__file__).parent.parent))

from models import FetchResult, KeywordPage, PageFilter, PageSort, Quote
from publish.layout import ad_slot, esc, footer, long_date, nav, page, updated_line, write_page
from settings import settings
from sources.quotes.aggregator import QuoteAggregator
from sources.quotes.providers.yahoo_provider import YahooFinanceProvider
from utils import log
from utils.formatting import direction_class, format_percent, format_volume_millions
from utils.input_parser import dedupe_symbols
from utils.market_hours import now_eastern
from utils.watchlist import load_watchlist

logger = log.setup_verbose_logging("landing")

PAGES_DIRNAME = "pages"

FAQ_HTML = """
        <div class="card">
            <h2>What time does pre-market trading start?</h2>
            <p class="muted">Pre-market trading typically runs from 4:00 AM to 9:30 AM Eastern Time. The most liquid period is usually between 8:00 AM and 9:30 AM ET.</p>
            <h2 style="margin-top:20px;">Why do stocks move in pre-market?</h2>
            <p class="muted">Overnight earnings reports, economic data releases, global market developments, analyst rating changes and company news.</p>
            <h2 style="margin-top:20px;">Should I trade during pre-market hours?</h2>
            <p class="muted">Liquidity is lower and spreads are wider than in the regular session. Many investors use pre-market data to plan rather than to execute.</p>
        </div>"""


def page_universe(pages: List[KeywordPage]) -> List[str]:
    """Every symbol named by any page, de-duplicated in first-seen order."""
    return dedupe_symbols(s for p in pages for s in p.symbols)


def select_page_quotes(config: KeywordPage, quotes: List[Quote], limit: int) -> List[Quote]:
    """
    Pick and order the rows for one landing page.

    Pages with a symbol list keep only those symbols. Others apply the
    page filter. Rows are sorted by change percent or volume, descending.
    """
    if config.symbols:
        # Quote symbols have the index '^' stripped
        wanted = {s.replace("^", "") for s in dedupe_symbols(config.symbols)}
        rows = [q for q in quotes if q.symbol.replace("^", "") in wanted]
    elif config.filter == PageFilter.GAINERS:
        rows = [q for q in quotes if q.change_percent > 0]
    elif config.filter == PageFilter.DECLINERS:
        rows = [q for q in quotes if q.change_percent < 0]
    elif config.filter == PageFilter.VOLUME:
        rows = [q for q in quotes if q.volume > 0]
    else:
        rows = list(quotes)

    if config.sort == PageSort.VOLUME:
        rows = sorted(rows, key=lambda q: q.volume, reverse=True)
    else:
        rows = sorted(rows, key=lambda q: q.change_percent, reverse=True)
    return rows[:limit]


def render_landing_page(
    config: KeywordPage,
    quotes: List[Quote],
    now: datetime.datetime,
    all_pages: List[KeywordPage] = (),
) -> str:
    if quotes:
        rows = "".join(f"""
                <tr class="{direction_class(q.change_percent)}">
                    <td class="symbol">{esc(q.symbol)}</td>
                    <td class="price">${q.price:.2f}</td>
                    <td class="change">{format_percent(q.change_percent)}</td>
                    <td class="volume">{format_volume_millions(q.volume)}</td>
                </tr>""" for q in quotes)
    else:
        rows = '<tr><td colspan="4" class="muted" style="text-align:center;padding:40px;">No market data available right now.</td></tr>'

    links = [("../index.html", "Home")] + [
        (f"{p.slug}.html", p.h1) for p in all_pages[:3] if p.slug != config.slug
    ]
    first_keyword = config.keywords[0] if config.keywords else config.h1

    body = f"""
    {nav(links)}
    <div class="container">
        <header>
            <h1>{esc(config.h1)}</h1>
            <p class="date">{esc(long_date(now))}</p>
        </header>

        {ad_slot(first_keyword)}

        <div class="card">
            <p><strong>What is {esc(config.h1)}?</strong></p>
            <p class="muted">{esc(config.description)} These stocks trade before the official market open at 9:30 AM ET.</p>
        </div>

        <div class="card">
            <h2>{esc(config.h1)}</h2>
            <table>
                <thead>
                    <tr><th>Symbol</th><th>Price</th><th>Change %</th><th>Volume</th></tr>
                </thead>
                <tbody>{rows}
                </tbody>
            </table>
        </div>
        {FAQ_HTML}

        {updated_line(now)}
        {footer(now.year)}
    </div>"""

    return page(
        config.title,
        config.description,
        body,
        canonical=f"{settings.SITE_URL}/{PAGES_DIRNAME}/{config.slug}.html",
        keywords=config.keywords,
    )


class LandingPagesPipeline:
    """Fetches the page universe once and writes pages/<slug>.html for every keyword page."""

    def __init__(
        self,
        output_dir: str = None,
        watchlist_path: str = None,
        delay: float = None,
        limit: int = None,
    ):
        self.start = now_eastern()
        self.output_dir = str(output_dir or settings.OUTPUT_DIR)
        self.limit = settings.LANDING_LIMIT if limit is None else limit

        log.header("PRE-MARKET BRIEF: SEO Landing Pages")

        watchlist = load_watchlist(watchlist_path or settings.WATCHLIST_PATH)
        self.pages = watchlist.keyword_pages
        if not self.pages:
            log.warn("No keyword pages configured, nothing to do")
            self.written = []
            return

        self.symbols = page_universe(self.pages)
        log.step(f"Fetching {len(self.symbols)} symbols for {len(self.pages)} pages")

        self.provider = YahooFinanceProvider(timeout=settings.REQUEST_TIMEOUT)
        self.aggregator = QuoteAggregator(
            self.provider,
            delay=settings.REQUEST_DELAY if delay is None else delay,
        )
        results = self.aggregator.fetch_all(self.symbols, on_result=self._progress)
        self.quotes = [r.quote for r in results if r.ok]

        log.step("Writing pages...")
        pages_dir = os.path.join(self.output_dir, PAGES_DIRNAME)
        self.written = []
        for config in self.pages:
            rows = select_page_quotes(config, self.quotes, self.limit)
            html = render_landing_page(config, rows, self.start, self.pages)
            path = write_page(os.path.join(pages_dir, f"{config.slug}.html"), html)
            self.written.append(path)
            log.ok(f"{config.slug}.html - {len(rows)} stocks")

        elapsed = now_eastern() - self.start
        log.summary_table("Landing Pages Summary", [
            ("Pages", str(len(self.written))),
            ("Symbols fetched", f"{len(self.quotes)}/{len(self.symbols)}"),
            ("Keywords", ", ".join(p.keywords[0] for p in self.pages if p.keywords)),
            ("Elapsed", str(elapsed)),
        ])

    def _progress(self, idx: int, total: int, result: FetchResult):
        if result.ok:
            log.progress(idx, total, result.symbol, log.quote_line(result.quote))
        else:
            log.progress(idx, total, result.symbol, f"{log.C.WARN}skipped{log.C.RESET} {result.error}")


def main():
    parser = argparse.ArgumentParser(description="Generate SEO landing pages")
    parser.add_argument("--output-dir", type=str, help="Output root (pages go in <root>/pages)")
    parser.add_argument("--watchlist", type=str, help="Path to watchlists.json")
    parser.add_argument("--limit", type=int, help="Rows per page (default: 20)")
    args = parser.parse_args()

    LandingPagesPipeline(
        output_dir=args.output_dir,
        watchlist_path=args.watchlist,
        limit=args.limit,
    )


if __name__ == "__main__":
    main()
