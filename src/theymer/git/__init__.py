"""Git interface layer — adapter and upstream detection."""

from theymer.git.adapter import GitError, find_repo_root, get_branch, get_remote_url
from theymer.git.upstream import Special, Upstream, UpstreamCache

__all__ = [
    "GitError",
    "Special",
    "Upstream",
    "UpstreamCache",
    "find_repo_root",
    "get_branch",
    "get_remote_url",
]
