"""Tests for the RSS feed, sitemap and archive."""

import datetime
import os
import xml.etree.ElementTree as ET
from unittest.mock import patch

import pytest

from models import Watchlist
from publish.feeds import (
    FeedPipeline,
    archive_brief,
    feed_items,
    list_archive_dates,
    render_archive_page,
    render_rss,
    render_sitemap,
    sitemap_entries,
)

NOW = datetime.datetime(2024, 3, 5, 12, 30, tzinfo=datetime.timezone.utc)
SITEMAP_NS = "{http://www.sitemaps.org/schemas/sitemap/0.9}"


# ---------------------------------------------------------------------------
# RSS
# ---------------------------------------------------------------------------

class TestRss:
    def test_feed_items_by_absolute_move(self, make_quote):
        quotes = [make_quote("A", 101, 100), make_quote("B", 90, 100), make_quote("C", 105, 100)]
        assert [q.symbol for q in feed_items(quotes, 2)] == ["B", "C"]

    def test_valid_rss(self, make_quote):
        xml = render_rss([make_quote("AAPL", 105.0, 100.0), make_quote("TSLA", 95.0, 100.0)], NOW,
                         site_url="https://example.com/")
        root = ET.fromstring(xml.encode("utf-8"))
        assert root.tag == "rss" and root.get("version") == "2.0"
        items = root.findall("./channel/item")
        assert [i.findtext("title") for i in items] == ["AAPL ▲ 5.00%", "TSLA ▼ 5.00%"]
        assert items[0].findtext("link") == "https://example.com/stock/AAPL"
        assert items[0].findtext("guid") == "https://example.com/stock/AAPL-2024-03-05"
        assert items[1].findtext("description") == "TSLA is trading at $95.00, down 5.00% in pre-market trading."
        assert root.findtext("./channel/lastBuildDate") == "Tue, 05 Mar 2024 12:30:00 +0000"

    def test_empty_feed_is_valid(self):
        root = ET.fromstring(render_rss([], NOW).encode("utf-8"))
        assert root.findall("./channel/item") == []


# ---------------------------------------------------------------------------
# Sitemap
# ---------------------------------------------------------------------------

class TestSitemap:
    def test_entries(self, watchlist_data):
        entries = sitemap_entries(Watchlist(**watchlist_data))
        paths = [e[0] for e in entries]
        assert paths == [
            "",
            "pages/gainers-page.html",
            "pages/tech-page.html",
            "sectors.html",
            "sectors/XLK.html",
            "sectors/XLE.html",
            "archive.html",
        ]
        assert entries[0][2] == "1.0"

    def test_no_sectors(self):
        assert [e[0] for e in sitemap_entries(Watchlist())] == ["", "archive.html"]

    def test_render(self):
        xml = render_sitemap([("", "daily", "1.0"), ("archive.html", "weekly", "0.8")],
                             datetime.date(2024, 3, 5), site_url="https://example.com")
        root = ET.fromstring(xml.encode("utf-8"))
        urls = root.findall(f"{SITEMAP_NS}url")
        assert [u.findtext(f"{SITEMAP_NS}loc") for u in urls] == [
            "https://example.com/", "https://example.com/archive.html",
        ]
        assert urls[0].findtext(f"{SITEMAP_NS}lastmod") == "2024-03-05"
        assert urls[1].findtext(f"{SITEMAP_NS}changefreq") == "weekly"


# ---------------------------------------------------------------------------
# Archive
# ---------------------------------------------------------------------------

class TestArchive:
    def test_archive_copies_index(self, tmp_path):
        (tmp_path / "index.html").write_text("<html>today</html>")
        dest = archive_brief(str(tmp_path), datetime.date(2024, 3, 5))
        assert dest.endswith(os.path.join("archive", "2024-03-05.html"))
        assert open(dest).read() == "<html>today</html>"

    def test_no_index(self, tmp_path):
        assert archive_brief(str(tmp_path), datetime.date(2024, 3, 5)) is None

    def test_list_dates_newest_first(self, tmp_path):
        for name in ["2024-03-01.html", "2024-03-05.html", "2024-02-28.html", "notes.txt", "2024-13-40.html"]:
            (tmp_path / name).write_text("")
        assert list_archive_dates(str(tmp_path)) == [
            datetime.date(2024, 3, 5), datetime.date(2024, 3, 1), datetime.date(2024, 2, 28),
        ]

    def test_missing_dir(self, tmp_path):
        assert list_archive_dates(str(tmp_path / "nope")) == []

    def test_archive_page(self):
        html = render_archive_page([datetime.date(2024, 3, 5)], NOW)
        assert 'href="archive/2024-03-05.html"' in html
        assert "Tuesday, March 5, 2024" in html
        assert "No archives yet" in render_archive_page([], NOW)


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------

@patch("publish.feeds.log")
class TestFeedPipeline:
    def test_writes_everything(self, mock_log, mock_provider, tmp_path, watchlist_file):
        (tmp_path / "index.html").write_text("<html>brief</html>")
        mock_provider.table = {
            "AAA": {"price": 101.0, "reference_price": 100.0, "volume": 1},
            "BBB": {"price": 90.0, "reference_price": 100.0, "volume": 1},
        }
        with patch("publish.feeds.YahooFinanceProvider", return_value=mock_provider):
            p = FeedPipeline(output_dir=str(tmp_path), watchlist_path=watchlist_file, delay=0)

        assert [q.symbol for q in p.items] == ["BBB", "AAA"]
        for name in ("feed.xml", "sitemap.xml", "archive.html"):
            assert (tmp_path / name).exists()
        assert p.archived_path is not None
        assert p.archive_dates == [p.start.date()]
        ET.parse(str(tmp_path / "feed.xml"))

    def test_skip_fetch(self, mock_log, tmp_path, watchlist_file):
        with patch("publish.feeds.YahooFinanceProvider") as mock_cls:
            p = FeedPipeline(output_dir=str(tmp_path), watchlist_path=watchlist_file, fetch=False)
        mock_cls.assert_not_called()
        assert not (tmp_path / "feed.xml").exists()
        assert (tmp_path / "sitemap.xml").exists()
        assert p.archived_path is None
        assert p.archive_dates == []

    def test_zero_limit_empty_feed(self, mock_log, mock_provider, tmp_path, watchlist_file):
        mock_provider.table = {"AAA": {"price": 101.0, "reference_price": 100.0, "volume": 1}}
        with patch("publish.feeds.YahooFinanceProvider", return_value=mock_provider):
            p = FeedPipeline(output_dir=str(tmp_path), watchlist_path=watchlist_file, delay=0, limit=0)
        assert p.items == []
        assert ET.parse(str(tmp_path / "feed.xml")).getroot().findall("./channel/item") == []
