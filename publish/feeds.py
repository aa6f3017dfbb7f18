"""
RSS feed, XML sitemap and dated archive.

- feed.xml: the day's biggest movers (by absolute percent change) from the
  tracked stock list, as RSS 2.0 items
- sitemap.xml: home, landing pages, sector pages, archive
- archive/<YYYY-MM-DD>.html: copy of today's index.html
- archive.html: every archived day, newest first

Usage:
    python publish/feeds.py
    python publish/feeds.py --output-dir public --skip-fetch   # sitemap + archive only
"""

import argparse
import datetime
import email.utils
import html
import os
import re
import shutil
import sys
from pathlib import Path
from typing import List, Optional, Tuple

sys.path.append(str(Path(__file__).parent.parent))

from models import Quote, Watchlist
from publish.landing import PAGES_DIRNAME
from publish.layout import esc, footer, page, write_page
from publish.sectors import SECTORS_DIRNAME
from settings import settings
from sources.quotes.aggregator import QuoteAggregator
from sources.quotes.providers.yahoo_provider import YahooFinanceProvider
from utils import log
from utils.watchlist import load_watchlist

logger = log.setup_verbose_logging("feeds")

ARCHIVE_DIRNAME = "archive"
ARCHIVE_FILE_RE = re.compile(r"^(\d{4}-\d{2}-\d{2})\.html$")

SitemapEntry = Tuple[str, str, str]  # (path, changefreq, priority)


def xml_esc(value) -> str:
    return html.escape(str(value), quote=True)


# ---------------------------------------------------------------------------
# RSS
# ---------------------------------------------------------------------------

def feed_items(quotes: List[Quote], limit: int) -> List[Quote]:
    """Biggest absolute movers first. Ties keep input order."""
    return sorted(quotes, key=lambda q: abs(q.change_percent), reverse=True)[:limit]


def render_rss(quotes: List[Quote], now: datetime.datetime, site_url: str = None) -> str:
    """
    RSS 2.0 document with one item per quote.

    Args:
        now: timezone-aware build time, used for pubDate and guid date
    """
    site_url = (site_url or settings.SITE_URL).rstrip("/")
    build_date = email.utils.format_datetime(now)
    day = now.date().isoformat()

    items = []
    for q in quotes:
        arrow = "▲" if q.is_up else "▼"
        direction = "up" if q.is_up else "down"
        pct = f"{abs(q.change_percent):.2f}%"
        items.append(f"""
    <item>
      <title>{xml_esc(q.symbol)} {arrow} {pct}</title>
      <link>{xml_esc(site_url)}/stock/{xml_esc(q.symbol)}</link>
      <pubDate>{build_date}</pubDate>
      <description>{xml_esc(f"{q.symbol} is trading at ${q.price:.2f}, {direction} {pct} in pre-market trading.")}</description>
      <guid isPermaLink="false">{xml_esc(site_url)}/stock/{xml_esc(q.symbol)}-{day}</guid>
    </item>""")

    return f"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:atom="http://www.w3.org/2005/Atom">
  <channel>
    <title>{xml_esc(settings.SITE_NAME)}</title>
    <link>{xml_esc(site_url)}</link>
    <description>Daily pre-market stock market briefing with top movers, indices, and analysis.</description>
    <language>en-us</language>
    <lastBuildDate>{build_date}</lastBuildDate>
    <atom:link href="{xml_esc(site_url)}/feed.xml" rel="self" type="application/rss+xml"/>{"".join(items)}
  </channel>
</rss>
"""


# ---------------------------------------------------------------------------
# Sitemap
# ---------------------------------------------------------------------------

def sitemap_entries(watchlist: Watchlist) -> List[SitemapEntry]:
    entries = [("", "daily", "1.0")]
    entries += [(f"{PAGES_DIRNAME}/{p.slug}.html", "daily", "0.8") for p in watchlist.keyword_pages]
    if watchlist.sectors:
        entries.append(("sectors.html", "daily", "0.8"))
        entries += [(f"{SECTORS_DIRNAME}/{s.symbol}.html", "weekly", "0.6") for s in watchlist.sectors]
    entries.append(("archive.html", "weekly", "0.8"))
    return entries


def render_sitemap(entries: List[SitemapEntry], day: datetime.date, site_url: str = None) -> str:
    site_url = (site_url or settings.SITE_URL).rstrip("/")
    urls = "".join(f"""
  <url>
    <loc>{xml_esc(site_url + ("/" + path if path else "/"))}</loc>
    <lastmod>{day.isoformat()}</lastmod>
    <changefreq>{changefreq}</changefreq>
    <priority>{priority}</priority>
  </url>""" for path, changefreq, priority in entries)

    return f"""<?xml version="1.0" encoding="UTF-8"?>
<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">{urls}
</urlset>
"""


# ---------------------------------------------------------------------------
# Archive
# ---------------------------------------------------------------------------

def archive_brief(output_dir: str, day: datetime.date) -> Optional[str]:
    """Copy index.html to archive/<day>.html. Returns None when there is no index.html yet."""
    index_path = os.path.join(output_dir, "index.html")
    if not os.path.exists(index_path):
        return None
    archive_dir = os.path.join(output_dir, ARCHIVE_DIRNAME)
    os.makedirs(archive_dir, exist_ok=True)
    dest = os.path.join(archive_dir, f"{day.isoformat()}.html")
    shutil.copyfile(index_path, dest)
    return dest


def list_archive_dates(archive_dir: str) -> List[datetime.date]:
    """Dates of archived briefs, newest first. Files not named YYYY-MM-DD.html are ignored."""
    if not os.path.isdir(archive_dir):
        return []
    dates = []
    for fname in os.listdir(archive_dir):
        m = ARCHIVE_FILE_RE.match(fname)
        if not m:
            continue
        try:
            dates.append(datetime.date.fromisoformat(m.group(1)))
        except ValueError:
            continue
    return sorted(dates, reverse=True)


def render_archive_page(dates: List[datetime.date], now: datetime.datetime) -> str:
    if dates:
        items = "".join(f"""
            <tr>
                <td><a href="{ARCHIVE_DIRNAME}/{d.isoformat()}.html" style="color:#fff;">{d:%A}, {d:%B} {d.day}, {d.year}</a></td>
                <td class="muted">Pre-Market Brief</td>
            </tr>""" for d in dates)
    else:
        items = '<tr><td class="muted" style="text-align:center;">No archives yet. Archives are created daily.</td></tr>'

    body = f"""
    <div class="container">
        <header>
            <h1>Archive</h1>
        </header>
        <p><a href="index.html" style="color:#00d4aa;">&larr; Back to Current Brief</a></p>
        <div class="card">
            <table>
                <tbody>{items}
                </tbody>
            </table>
        </div>
        {footer(now.year)}
    </div>"""

    return page(
        f"Archive | {settings.SITE_NAME}",
        "Browse historical pre-market stock market briefings and analysis.",
        body,
        canonical=f"{settings.SITE_URL}/archive.html",
    )


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

class FeedPipeline:
    """Writes feed.xml, sitemap.xml, the archive copy and archive.html."""

    def __init__(
        self,
        tickers: List[str] = None,
        output_dir: str = None,
        watchlist_path: str = None,
        delay: float = None,
        limit: int = None,
        fetch: bool = True,
    ):
        self.start = datetime.datetime.now(datetime.timezone.utc)
        self.output_dir = str(output_dir or settings.OUTPUT_DIR)
        self.limit = settings.FEED_LIMIT if limit is None else limit
        today = self.start.date()

        log.header("PRE-MARKET BRIEF: RSS, Sitemap & Archive")

        self.watchlist = load_watchlist(watchlist_path or settings.WATCHLIST_PATH)
        self.tickers = tickers or self.watchlist.tracked_stocks

        self.items = []
        if fetch:
            log.step(f"Fetching {len(self.tickers)} stocks for the feed...")
            aggregator = QuoteAggregator(
                YahooFinanceProvider(timeout=settings.REQUEST_TIMEOUT),
                delay=settings.REQUEST_DELAY if delay is None else delay,
            )
            movers = aggregator.aggregate(self.tickers)
            self.items = feed_items(movers.quotes, self.limit)
            if movers.skipped:
                log.warn(f"Skipped: {', '.join(movers.skipped)}")
            write_page(os.path.join(self.output_dir, "feed.xml"), render_rss(self.items, self.start))
            log.ok(f"feed.xml ({len(self.items)} items)")
        else:
            log.info("Skipping feed.xml (fetch disabled)")

        entries = sitemap_entries(self.watchlist)
        write_page(os.path.join(self.output_dir, "sitemap.xml"), render_sitemap(entries, today))
        log.ok(f"sitemap.xml ({len(entries)} urls)")

        self.archived_path = archive_brief(self.output_dir, today)
        if self.archived_path:
            log.ok(f"Archived today's brief: {ARCHIVE_DIRNAME}/{today.isoformat()}.html")
        else:
            log.warn("No index.html to archive yet")

        self.archive_dates = list_archive_dates(os.path.join(self.output_dir, ARCHIVE_DIRNAME))
        write_page(os.path.join(self.output_dir, "archive.html"), render_archive_page(self.archive_dates, self.start))
        log.ok(f"archive.html ({len(self.archive_dates)} days)")

        log.summary_table("Feeds Summary", [
            ("Feed items", str(len(self.items))),
            ("Sitemap URLs", str(len(entries))),
            ("Archived days", str(len(self.archive_dates))),
            ("Elapsed", str(datetime.datetime.now(datetime.timezone.utc) - self.start)),
        ])


def main():
    parser = argparse.ArgumentParser(description="Generate RSS feed, sitemap and archive")
    parser.add_argument("--tickers", nargs="+", help="Tickers for the RSS feed")
    parser.add_argument("--output-dir", type=str, help="Output root")
    parser.add_argument("--watchlist", type=str, help="Path to watchlists.json")
    parser.add_argument("--skip-fetch", action="store_true", help="Do not fetch quotes or write feed.xml")
    args = parser.parse_args()

    FeedPipeline(
        tickers=[t.upper() for t in args.tickers] if args.tickers else None,
        output_dir=args.output_dir,
        watchlist_path=args.watchlist,
        fetch=not args.skip_fetch,
    )


if __name__ == "__main__":
    main()
