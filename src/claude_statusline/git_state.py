"""Query git for the working tree state of the session directory."""

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Optional, Union

from .models import GitState

logger = logging.getLogger(__name__)


def run_git(args: list[str], cwd: Union[str, Path]) -> Optional[str]:
    """Run a git command in ``cwd`` and return its stdout.

    Returns None if git exits non-zero or cannot be started. The command is
    scoped to ``cwd`` through the subprocess, so the calling process's
    working directory is never changed.
    """
    # Read-only queries must not take the index lock from a concurrent git
    env = {**os.environ, "GIT_OPTIONAL_LOCKS": "0"}
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            env=env,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug("git %s failed in %s: %s", " ".join(args), cwd, e)
        return None
    if result.returncode != 0:
        return None
    return result.stdout


def count_lines(output: Optional[str]) -> int:
    if not output:
        return 0
    return len([line for line in output.splitlines() if line.strip()])


def get_branch(cwd: Union[str, Path]) -> str:
    """Current branch, else an exact tag for a detached HEAD, else "HEAD"."""
    branch = (run_git(["branch", "--show-current"], cwd) or "").strip()
    if branch:
        return branch
    tag = (run_git(["describe", "--tags", "--exact-match"], cwd) or "").strip()
    if tag:
        return tag
    return "HEAD"


def get_ahead_behind(cwd: Union[str, Path]) -> tuple[int, int]:
    """Commits ahead of and behind the upstream; (0, 0) without one."""
    output = run_git(["rev-list", "--left-right", "--count", "HEAD...@{u}"], cwd)
    if not output:
        return 0, 0
    parts = output.split()
    if len(parts) != 2:
        return 0, 0
    try:
        return int(parts[0]), int(parts[1])
    except ValueError:
        return 0, 0


def inspect_git(path: Union[str, Path]) -> GitState:
    """Inspect the working tree containing ``path``.

    Any failure degrades to an absent or zeroed state; this never raises.
    """
    if not path or not Path(path).is_dir():
        return GitState()

    if not shutil.which("git"):
        logger.debug("git executable not found")
        return GitState()

    if run_git(["rev-parse", "--git-dir"], path) is None:
        return GitState()

    ahead, behind = get_ahead_behind(path)

    return GitState(
        present=True,
        branch=get_branch(path),
        staged=count_lines(run_git(["diff", "--cached", "--numstat"], path)),
        unstaged=count_lines(run_git(["diff", "--numstat"], path)),
        ahead=ahead,
        behind=behind,
    )
