"""
Parse ticker lists from a text file or CLI arguments.
"""

import os
from typing import Iterable, List


BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEFAULT_INPUT_FILE = os.path.join(BASE_DIR, "input.txt")


def normalize_symbol(raw: str) -> str:
    """Uppercase and strip a ticker. Index markers like ^GSPC are kept."""
    return raw.strip().upper()


def dedupe_symbols(symbols: Iterable[str]) -> List[str]:
    """Normalize and drop repeats, keeping first-seen order."""
    seen = set()
    out = []
    for s in symbols:
        sym = normalize_symbol(s)
        if sym and sym not in seen:
            seen.add(sym)
            out.append(sym)
    return out


def parse_input_file(path: str = DEFAULT_INPUT_FILE) -> list[str]:
    """
    Read tickers from a text file (one per line, # for comments, blank lines ignored).
    Returns a de-duplicated list of uppercase tickers in file order.
    """
    tickers = []
    with open(path, 'r') as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            ticker = line.split("#")[0].strip()
            if ticker:
                tickers.append(ticker)
    return dedupe_symbols(tickers)


def resolve_symbols(cli_symbols: List[str] = None, input_file: str = None) -> List[str]:
    """
    Pick the symbol list for a run: CLI symbols win, then an explicit input
    file, then input.txt at the repo root. Returns [] when none applies so the
    caller falls back to its watchlist.
    """
    if cli_symbols:
        return dedupe_symbols(cli_symbols)
    if input_file:
        return parse_input_file(input_file)
    if os.path.exists(DEFAULT_INPUT_FILE):
        return parse_input_file(DEFAULT_INPUT_FILE)
    return []
