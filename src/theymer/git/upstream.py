"""Upstream detection with per-repository memoisation.

Repository metadata is stable for the lifetime of a run, so each repository
root is inspected at most once; every output file under that root reuses the
cached :class:`Upstream`. Detection never raises: anything that goes wrong is
logged and collapses to ``None``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Optional

from theymer.git import adapter
from theymer.git.adapter import GitError
from theymer.log import get_logger

logger = get_logger("upstream")


@dataclass(frozen=True)
class Upstream:
    root: Path
    url: str
    branch: str


@dataclass(frozen=True)
class Special:
    """Per-file upstream annotation exposed to templates."""

    upstream_file: Optional[str] = None
    upstream_repo: Optional[str] = None
    upstream_raw: Optional[str] = None

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "upstream_file": self.upstream_file,
            "upstream_repo": self.upstream_repo,
            "upstream_raw": self.upstream_raw,
        }


def detect(root: Path) -> Upstream:
    """Inspect the repository at *root*. Raises GitError."""
    return Upstream(
        root=root,
        url=adapter.get_remote_url(root),
        branch=adapter.get_branch(root),
    )


class UpstreamCache:
    """Lazily populated map from repository root to its :class:`Upstream`."""

    def __init__(self, detector: Callable[[Path], Upstream] = detect) -> None:
        self._detector = detector
        self._entries: Dict[Path, Optional[Upstream]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def get_or_detect(self, path: Path) -> Optional[Upstream]:
        try:
            abs_path = path.resolve(strict=True)
        except OSError:
            logger.warning(
                "failed to canonicalize `%s`; file may not exist yet", path
            )
            return None

        root = adapter.find_repo_root(abs_path)
        if root is None:
            logger.debug("`%s` is not inside a git repository", abs_path)
            return None

        if root in self._entries:
            return self._entries[root]

        try:
            upstream: Optional[Upstream] = self._detector(root)
        except GitError as exc:
            logger.warning("failed to detect upstream for `%s`: %s", root, exc)
            upstream = None
        else:
            logger.debug("detected upstream %s (%s) for `%s`", upstream.url, upstream.branch, root)

        self._entries[root] = upstream
        return upstream
