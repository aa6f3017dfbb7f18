"""
Master generator for the Pre-Market Brief site.

Runs every generator in order (homepage, landing pages, sectors, feeds),
keeps going when one fails, then optionally commits the result to git.

Usage:
    python generate_all.py                      # All generators, no commit
    python generate_all.py --commit             # Commit changes afterwards
    python generate_all.py --only brief feeds   # Subset of generators
    python generate_all.py --output-dir public
"""

import argparse
import datetime
import sys
from pathlib import Path
from typing import Callable, Dict, List, Tuple

sys.path.append(str(Path(__file__).parent))

from publish.brief import BriefPipeline
from publish.feeds import FeedPipeline
from publish.landing import LandingPagesPipeline
from publish.sectors import SectorPipeline
from settings import settings
from utils import log
from utils.git import GitError, commit_changes, daily_commit_message

logger = log.setup_verbose_logging("generate_all")

# (key, label, pipeline class). Feeds run last so the archive picks up today's index.html.
GENERATORS: List[Tuple[str, str, Callable]] = [
    ("brief", "Main Brief", BriefPipeline),
    ("landing", "SEO Pages", LandingPagesPipeline),
    ("sectors", "Sector Pages", SectorPipeline),
    ("feeds", "RSS, Sitemap & Archive", FeedPipeline),
]


def run_generators(only: List[str] = None, output_dir: str = None, watchlist_path: str = None) -> Dict[str, bool]:
    """
    Run the selected generators in order.

    Returns:
        {key: True if it completed, False if it raised}
    """
    results = {}
    for key, label, pipeline_cls in GENERATORS:
        if only and key not in only:
            continue
        log.step(f"Running {label}...")
        try:
            pipeline_cls(output_dir=output_dir, watchlist_path=watchlist_path)
            results[key] = True
        except Exception as e:
            log.err(f"{label} failed: {e}")
            logger.exception(f"Generator '{key}' failed")
            results[key] = False
    return results


def auto_commit(repo_dir: str) -> bool:
    """Commit the working tree with a dated message. Git problems are logged, not raised."""
    try:
        committed = commit_changes(repo_dir, daily_commit_message())
    except GitError as e:
        log.info(f"Git commit skipped: {e}")
        return False

    if committed:
        log.ok("Committed to git")
    else:
        log.info("No changes to commit")
    return committed


def main():
    parser = argparse.ArgumentParser(description="Generate every Pre-Market Brief page")
    parser.add_argument("--only", nargs="+", choices=[g[0] for g in GENERATORS],
                        help="Run only these generators")
    parser.add_argument("--output-dir", type=str, help="Output root (default: BRIEF_OUTPUT_DIR)")
    parser.add_argument("--watchlist", type=str, help="Path to watchlists.json")
    parser.add_argument("--commit", action="store_true", default=settings.AUTO_COMMIT,
                        help="Commit changes to git afterwards (default: BRIEF_AUTO_COMMIT)")
    args = parser.parse_args()

    start = datetime.datetime.now()
    log.header("PRE-MARKET BRIEF: Master Generator")

    results = run_generators(args.only, args.output_dir, args.watchlist)

    if args.commit:
        log.step("Committing changes...")
        auto_commit(str(settings.BASE_DIR))

    log.summary_table("Master Generator Summary", [
        *[(key, "ok" if ok else "FAILED") for key, ok in results.items()],
        ("Elapsed", str(datetime.datetime.now() - start)),
    ])

    if all(results.values()):
        log.ok("All pages generated")
    else:
        log.warn("Some generators failed, see logs/pipeline.log")


if __name__ == "__main__":
    main()
