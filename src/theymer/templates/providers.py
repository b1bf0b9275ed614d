"""Provider URL building — map a git remote plus a file path onto web links.

Provider templates use ``{host}``, ``{owner}``, ``{repo}``, ``{ref}`` and
``{file}`` placeholders and carry no URL scheme; links handed to templates are
qualified with ``https://``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional
from urllib.parse import urlsplit

from theymer.config.schema import Provider
from theymer.errors import ProviderError

# user@host:owner/repo(.git), the scp-like syntax used by ssh remotes
_SCP_RE = re.compile(r"^(?:[^@/]+@)?(?P<host>[^:/]+):(?P<path>[^/].*)$")


@dataclass(frozen=True)
class Remote:
    """Host, owner and repository name parsed from a git remote URL."""

    host: str
    owner: str
    repo: str

    @classmethod
    def parse(cls, url: str) -> "Remote":
        url = url.strip()
        if "://" in url:
            parts = urlsplit(url)
            host = parts.hostname or ""
            path = parts.path
        else:
            m = _SCP_RE.match(url)
            if m is None:
                raise ProviderError(f"unrecognised remote url `{url}`")
            host, path = m.group("host"), m.group("path")

        path = path.strip("/")
        if path.endswith(".git"):
            path = path[: -len(".git")]
        segments = [s for s in path.split("/") if s]
        if not host or len(segments) < 2:
            raise ProviderError(f"remote url `{url}` has no owner/repository path")

        return cls(host=host.lower(), owner="/".join(segments[:-1]), repo=segments[-1])


@dataclass(frozen=True)
class Links:
    """Fully qualified upstream links for one file."""

    blob: str
    raw: Optional[str]
    repo: str


def find_provider(host: str, providers: List[Provider]) -> Optional[Provider]:
    host = host.lower()
    return next((p for p in providers if p.host.lower() == host), None)


def qualify(url: str) -> str:
    return url if "://" in url else f"https://{url}"


def _expand(template: str, remote: Remote, ref: str, file: str) -> str:
    try:
        return template.format(
            host=remote.host,
            owner=remote.owner,
            repo=remote.repo,
            ref=ref,
            file=file,
        )
    except (KeyError, IndexError, ValueError) as exc:
        raise ProviderError(f"malformed provider template `{template}`: {exc}") from exc


def _provider_for(remote: Remote, providers: List[Provider]) -> Provider:
    provider = find_provider(remote.host, providers)
    if provider is None:
        raise ProviderError(f"no provider configured for host `{remote.host}`")
    return provider


def build_blob(remote_url: str, file_path: str, branch: str, providers: List[Provider]) -> str:
    """Browsable link (unqualified) for *file_path* at *branch* on the remote.

    A provider's pinned ``branch`` takes precedence over *branch*.
    """
    remote = Remote.parse(remote_url)
    provider = _provider_for(remote, providers)
    if not provider.blob_path:
        raise ProviderError(f"provider `{provider.host}` has no blob_path")
    return _expand(provider.blob_path, remote, provider.branch or branch, file_path)


def build_raw(
    remote_url: str, file_path: str, branch: str, providers: List[Provider]
) -> Optional[str]:
    """Raw-content link (unqualified), or None if the provider has no raw_path."""
    remote = Remote.parse(remote_url)
    provider = _provider_for(remote, providers)
    if not provider.raw_path:
        return None
    return _expand(provider.raw_path, remote, provider.branch or branch, file_path)


def build_repo(remote_url: str, providers: List[Provider]) -> str:
    """Repository home page (unqualified) derived from the blob template's prefix."""
    remote = Remote.parse(remote_url)
    provider = _provider_for(remote, providers)
    template = provider.blob_path or ""
    marker = template.find("{repo}")
    if marker < 0:
        return f"{remote.host}/{remote.owner}/{remote.repo}"
    return _expand(template[: marker + len("{repo}")], remote, "", "")


def resolve_links(
    remote_url: str, file_path: str, branch: str, providers: List[Provider]
) -> Links:
    """All qualified links for one file; raises :class:`ProviderError`."""
    raw = build_raw(remote_url, file_path, branch, providers)
    return Links(
        blob=qualify(build_blob(remote_url, file_path, branch, providers)),
        raw=qualify(raw) if raw else None,
        repo=qualify(build_repo(remote_url, providers)),
    )
