"""
Commit generated output to the enclosing git repository.
"""

import datetime
import logging
import subprocess
from typing import List, Optional

logger = logging.getLogger(__name__)


class GitError(Exception):
    """Raised when a git command exits non-zero or git is not installed."""
    pass


def _git(args: List[str], cwd: str) -> str:
    try:
        proc = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=True,
        )
    except FileNotFoundError as e:
        raise GitError("git executable not found") from e
    except subprocess.CalledProcessError as e:
        raise GitError(f"git {' '.join(args)} failed: {(e.stderr or '').strip()}") from e
    return proc.stdout


def has_changes(repo_dir: str) -> bool:
    return bool(_git(["status", "--porcelain"], repo_dir).strip())


def daily_commit_message(day: Optional[datetime.date] = None) -> str:
    day = day or datetime.date.today()
    return f"Daily update: {day.isoformat()}"


def commit_changes(repo_dir: str, message: Optional[str] = None) -> bool:
    """
    Stage everything and commit if the working tree is dirty.

    Returns:
        True if a commit was made, False if there was nothing to commit.

    Raises:
        GitError: if any git command fails.
    """
    if not has_changes(repo_dir):
        logger.info("No changes to commit")
        return False

    _git(["add", "-A"], repo_dir)
    _git(["commit", "-m", message or daily_commit_message()], repo_dir)
    logger.info(f"Committed changes in {repo_dir}")
    return True
