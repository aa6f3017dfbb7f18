"""
Color-coded console output for the generator scripts.

Every generator prints the same way: a header, numbered steps, per-symbol
progress lines and a closing summary table. Uses colorama so the colors
also work on Windows terminals.
"""

import datetime
import logging
import os
import sys

from colorama import Fore, Style, init

init(autoreset=True)


# ---------------------------------------------------------------------------
# Color constants
# ---------------------------------------------------------------------------

class C:
    """Color shortcuts for generator output."""
    HEADER = Fore.CYAN + Style.BRIGHT
    STEP = Fore.BLUE + Style.BRIGHT
    OK = Fore.GREEN + Style.BRIGHT
    WARN = Fore.YELLOW + Style.BRIGHT
    ERR = Fore.RED + Style.BRIGHT
    DIM = Style.DIM
    TICKER = Fore.MAGENTA + Style.BRIGHT
    UP = Fore.GREEN
    DOWN = Fore.RED
    VALUE = Fore.GREEN
    RESET = Style.RESET_ALL


def _ts() -> str:
    return datetime.datetime.now().strftime("%H:%M:%S")


# ---------------------------------------------------------------------------
# Console output
# ---------------------------------------------------------------------------

def header(msg: str) -> None:
    """Print a bold section header."""
    print(f"\n{C.HEADER}{'='*60}")
    print(f"  {msg}")
    print(f"{'='*60}{C.RESET}\n")


def step(msg: str) -> None:
    print(f"{C.STEP}[{_ts()}] >> {msg}{C.RESET}")


def info(msg: str) -> None:
    print(f"{C.DIM}[{_ts()}]{C.RESET} {msg}")


def ok(msg: str) -> None:
    print(f"{C.OK}[{_ts()}] OK {msg}{C.RESET}")


def warn(msg: str) -> None:
    print(f"{C.WARN}[{_ts()}] WARN {msg}{C.RESET}")


def err(msg: str) -> None:
    print(f"{C.ERR}[{_ts()}] ERR {msg}{C.RESET}")


def progress(current: int, total: int, ticker: str, msg: str) -> None:
    """Print a progress line like [3/15] AAPL: ..."""
    print(
        f"{C.DIM}[{_ts()}]{C.RESET} "
        f"{C.STEP}[{current}/{total}]{C.RESET} "
        f"{C.TICKER}{ticker}{C.RESET}: {msg}"
    )


def quote_line(quote) -> str:
    """Format a Quote as a colored '$price +x.xx%' fragment for progress lines."""
    color = C.UP if quote.change_percent >= 0 else C.DOWN
    sign = "+" if quote.change_percent >= 0 else ""
    return f"{color}${quote.price:,.2f} {sign}{quote.change_percent:.2f}%{C.RESET}"


def summary_table(title: str, rows: list[tuple[str, str]]) -> None:
    """Print a summary table with label-value pairs."""
    print(f"\n{C.HEADER}{title}{C.RESET}")
    max_label = max(len(r[0]) for r in rows) if rows else 0
    for label, value in rows:
        print(f"  {label:<{max_label}}  {C.VALUE}{value}{C.RESET}")
    print()


# ---------------------------------------------------------------------------
# Verbose logging setup
# ---------------------------------------------------------------------------

def setup_verbose_logging(name: str = "brief", level: int = logging.DEBUG) -> logging.Logger:
    """
    Create a logger that writes INFO+ to the console and DEBUG+ to logs/pipeline.log.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Re-imports must not stack handlers
    if logger.handlers:
        return logger

    fmt = logging.Formatter(
        "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )

    ch = logging.StreamHandler(sys.stdout)
    ch.setLevel(logging.INFO)
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    log_dir = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "logs")
    os.makedirs(log_dir, exist_ok=True)
    fh = logging.FileHandler(os.path.join(log_dir, "pipeline.log"))
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(fmt)
    logger.addHandler(fh)

    return logger
