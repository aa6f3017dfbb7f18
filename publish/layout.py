"""
Shared HTML shell for every generated page.

Pages are plain f-string templates. Anything that comes from the network or
from config goes through `esc` before it lands in markup.
"""

import datetime
import html
import os
from typing import Iterable, Optional, Tuple

from settings import settings
from utils.market_hours import session_label, to_eastern

BASE_CSS = """
        * { margin: 0; padding: 0; box-sizing: border-box; }
        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;
            background: #0a0e1a;
            color: #e8eaed;
            line-height: 1.6;
        }
        .container { max-width: 1000px; margin: 0 auto; padding: 20px; }
        nav { background: #111827; padding: 15px 20px; border-bottom: 1px solid #1e3a5f; }
        nav a { color: #00d4aa; text-decoration: none; margin-right: 20px; font-size: 0.9em; }
        nav a:hover { text-decoration: underline; }
        header { text-align: center; padding: 40px 0; border-bottom: 1px solid #1e3a5f; margin-bottom: 30px; }
        h1 {
            font-size: 2.2em;
            background: linear-gradient(135deg, #00d4aa, #00a8e8);
            -webkit-background-clip: text;
            -webkit-text-fill-color: transparent;
            margin-bottom: 10px;
        }
        .tagline { color: #8b92a8; font-size: 1.1em; }
        .date { color: #00d4aa; font-size: 0.9em; margin-top: 15px; font-family: monospace; }
        .card { background: #111827; border: 1px solid #1e3a5f; border-radius: 12px; padding: 25px; margin-bottom: 25px; }
        .card h2 { color: #00d4aa; font-size: 1.3em; margin-bottom: 20px; }
        table { width: 100%; border-collapse: collapse; }
        th, td { padding: 15px; text-align: left; border-bottom: 1px solid #1e3a5f; }
        th { background: #0d1117; color: #8b92a8; font-weight: 600; font-size: 0.85em; text-transform: uppercase; }
        tr:last-child td { border-bottom: none; }
        .symbol { font-weight: bold; color: #fff; }
        .price, .volume { font-family: monospace; }
        .positive { color: #00d4aa; }
        .negative { color: #ff4757; }
        .muted { color: #8b92a8; }
        .ad-container {
            background: #1a1f2e; border: 2px dashed #2d3748; border-radius: 8px;
            padding: 60px 20px; text-align: center; margin: 30px 0; color: #4a5568;
        }
        .update-time { text-align: center; color: #4a5568; font-size: 0.8em; margin-top: 20px; }
        footer {
            text-align: center; padding: 40px 0; color: #4a5568; font-size: 0.85em;
            border-top: 1px solid #1e3a5f; margin-top: 40px;
        }
"""

DISCLAIMER = "For informational purposes only. Not investment advice."


def esc(value) -> str:
    """HTML-escape any value (quotes included) for text and attributes."""
    return html.escape(str(value), quote=True)


def long_date(now: datetime.datetime) -> str:
    """'Friday, October 16, 2026' for the Eastern date at `now`."""
    now = to_eastern(now)
    return f"{now:%A}, {now:%B} {now.day}, {now.year}"


def updated_line(now: datetime.datetime) -> str:
    et = to_eastern(now)
    return (
        f'<div class="update-time">Data updated: {et:%Y-%m-%d %I:%M %p} ET '
        f'({esc(session_label(et))})</div>'
    )


def ad_slot(label: str = "") -> str:
    """AdSense unit when ADSENSE_CLIENT_ID is set, otherwise a placeholder box."""
    client = settings.ADSENSE_CLIENT_ID
    if not client:
        return f'<div class="ad-container">Advertisement<br><small>{esc(label)}</small></div>'
    return (
        '<div class="ad-container">'
        f'<ins class="adsbygoogle" style="display:block" data-ad-client="{esc(client)}" '
        'data-ad-format="auto" data-full-width-responsive="true"></ins>'
        '<script>(adsbygoogle = window.adsbygoogle || []).push({});</script>'
        '</div>'
    )


def nav(links: Iterable[Tuple[str, str]]) -> str:
    items = "".join(f'<a href="{esc(href)}">{esc(text)}</a>' for href, text in links)
    return f'<nav><div class="container">{items}</div></nav>'


def footer(year: int, source: str = "Yahoo Finance") -> str:
    return (
        "<footer>"
        f"<p>&copy; {year} Pre-Market Brief | Data provided by {esc(source)}</p>"
        f'<p style="margin-top: 10px; font-size: 0.8em;">{DISCLAIMER}</p>'
        "</footer>"
    )


def page(
    title: str,
    description: str,
    body: str,
    *,
    canonical: Optional[str] = None,
    keywords: Iterable[str] = (),
    extra_css: str = "",
) -> str:
    """Wrap a body fragment in a complete HTML document."""
    head = [
        '<meta charset="UTF-8">',
        '<meta name="viewport" content="width=device-width, initial-scale=1.0">',
        f"<title>{esc(title)}</title>",
        f'<meta name="description" content="{esc(description)}">',
    ]
    keywords = list(keywords)
    if keywords:
        head.append(f'<meta name="keywords" content="{esc(", ".join(keywords))}">')
    if canonical:
        head.append(f'<link rel="canonical" href="{esc(canonical)}">')
    if settings.ADSENSE_CLIENT_ID:
        head.append(
            '<script async src="https://pagead2.googlesyndication.com/pagead/js/adsbygoogle.js'
            f'?client={esc(settings.ADSENSE_CLIENT_ID)}" crossorigin="anonymous"></script>'
        )
    head_html = "\n    ".join(head)

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
    {head_html}
    <style>{BASE_CSS}{extra_css}
    </style>
</head>
<body>
{body}
</body>
</html>
"""


def write_page(path: str, content: str) -> str:
    """Write a generated file as UTF-8, creating parent directories."""
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    return path
