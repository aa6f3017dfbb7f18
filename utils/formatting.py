"""
Number formatting shared by the page and feed renderers.
"""

from typing import Optional


def format_number(num: float) -> str:
    """Abbreviate large numbers: 1_234_567 -> '1.23M'."""
    if num >= 1e9:
        return f"{num / 1e9:.2f}B"
    if num >= 1e6:
        return f"{num / 1e6:.2f}M"
    if num >= 1e3:
        return f"{num / 1e3:.2f}K"
    return str(num)


def format_percent(value: Optional[float]) -> str:
    """Signed percent with two decimals, e.g. '+1.25%'. None renders 'N/A'."""
    if value is None:
        return "N/A"
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:.2f}%"


def format_change(value: float) -> str:
    """Signed dollar change, e.g. '+$1.20' / '-$0.35'."""
    sign = "+" if value >= 0 else "-"
    return f"{sign}${abs(value):.2f}"


def format_price(value: Optional[float]) -> str:
    """Price with thousands separators, e.g. '5,123.45'."""
    if value is None:
        return "N/A"
    return f"{value:,.2f}"


def format_volume_millions(volume: int) -> str:
    return f"{volume / 1_000_000:.2f}M"


def direction_class(value: Optional[float]) -> str:
    """CSS class for a change value. Zero and missing count as positive."""
    return "negative" if value is not None and value < 0 else "positive"
