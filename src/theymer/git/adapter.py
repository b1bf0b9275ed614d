"""Git subprocess wrapper — repository root, remote URL, current branch."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Optional

from theymer.errors import UpstreamError


class GitError(UpstreamError):
    """Raised when git is unavailable or returns an unexpected error."""


def _run_git(args: list[str], cwd: Path, timeout: int = 30) -> str:
    """Run a git command and return stdout. Raises GitError on failure."""
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            timeout=timeout,
            encoding="utf-8",
            errors="replace",
        )
    except FileNotFoundError:
        raise GitError("git is not installed or not on PATH")
    except subprocess.TimeoutExpired:
        raise GitError(f"git command timed out after {timeout}s: git {' '.join(args)}")

    if result.returncode != 0:
        stderr = result.stderr.strip()
        # Quiet failures (e.g. `symbolic-ref -q` on a detached HEAD) are not errors
        if not stderr or "fatal" not in stderr.lower():
            return result.stdout
        raise GitError(f"git error: {stderr}")
    return result.stdout


def find_repo_root(path: Path) -> Optional[Path]:
    """Return the nearest ancestor of *path* (inclusive) holding a ``.git`` entry."""
    start = path if path.is_dir() else path.parent
    for directory in (start, *start.parents):
        if (directory / ".git").exists():
            return directory
    return None


def get_remote_url(repo_root: Path) -> str:
    """Return the fetch URL of ``origin``, or of the first remote if there is none."""
    remotes = [r for r in _run_git(["remote"], cwd=repo_root).splitlines() if r.strip()]
    if not remotes:
        raise GitError(f"repository `{repo_root}` has no remotes")
    name = "origin" if "origin" in remotes else remotes[0]
    url = _run_git(["remote", "get-url", name], cwd=repo_root).strip()
    if not url:
        raise GitError(f"remote `{name}` of `{repo_root}` has no url")
    return url


def get_branch(repo_root: Path) -> str:
    """Return the checked-out branch, or the HEAD commit when detached."""
    branch = _run_git(["symbolic-ref", "--short", "-q", "HEAD"], cwd=repo_root).strip()
    if branch:
        return branch
    commit = _run_git(["rev-parse", "HEAD"], cwd=repo_root).strip()
    if not commit:
        raise GitError(f"cannot resolve HEAD in `{repo_root}`")
    return commit
