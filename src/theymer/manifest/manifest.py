"""Versioned, atomically persisted manifest of entries keyed by output path."""

from __future__ import annotations

import hashlib
import json
import os
from pathlib import Path
from typing import Any, Callable, ClassVar, Dict, Generic, Iterator, Optional, TypeVar, Union

from theymer.errors import ManifestError
from theymer.output.models import FileStatus

E = TypeVar("E")


def hash_bytes(content: bytes) -> str:
    return hashlib.sha256(content).hexdigest()


def hash_text(content: str) -> str:
    return hash_bytes(content.encode("utf-8"))


def hash_file(path: Path) -> Optional[str]:
    """Digest of *path*'s bytes, or None if it cannot be read."""
    try:
        return hash_bytes(path.read_bytes())
    except OSError:
        return None


def check_status(path: Path, stored_hash: str, inputs_changed: Callable[[], bool]) -> FileStatus:
    """Classify a tracked file.

    The on-disk bytes are compared first: a file that no longer matches what
    was last written (or is gone) is MODIFIED regardless of its inputs.
    """
    if hash_file(path) != stored_hash:
        return FileStatus.MODIFIED
    if inputs_changed():
        return FileStatus.STALE
    return FileStatus.UNCHANGED


class Manifest(Generic[E]):
    """Entries keyed by project-relative POSIX path.

    Subclasses set ``FILENAME`` and ``VERSION`` and implement the entry codec.
    """

    FILENAME: ClassVar[str] = "manifest.json"
    VERSION: ClassVar[int] = 0

    def __init__(self, path: Path, root: Path) -> None:
        self.path = path
        self.root = root
        self._entries: Dict[str, E] = {}
        self._dirty = False

    # ---- entry codec ----

    def entry_key(self, entry: E) -> str:
        raise NotImplementedError

    def entry_to_dict(self, entry: E) -> Dict[str, Any]:
        raise NotImplementedError

    def entry_from_dict(self, data: Dict[str, Any]) -> E:
        raise NotImplementedError

    # ---- queries ----

    def key(self, path: Union[str, Path]) -> str:
        """Project-relative POSIX form of *path* (absolute if outside the root)."""
        path = Path(path)
        if not path.is_absolute():
            return path.as_posix()
        try:
            return path.relative_to(self.root).as_posix()
        except ValueError:
            return path.as_posix()

    def get(self, path: Union[str, Path]) -> Optional[E]:
        return self._entries.get(self.key(path))

    def insert(self, entry: E) -> None:
        """Add *entry*, replacing any previous entry for the same path."""
        self._entries[self.entry_key(entry)] = entry
        self._dirty = True

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[E]:
        return iter(self._entries.values())

    def __contains__(self, path: object) -> bool:
        return isinstance(path, (str, Path)) and self.key(path) in self._entries

    @property
    def dirty(self) -> bool:
        return self._dirty

    # ---- persistence ----

    @classmethod
    def location(cls, state_dir: Path) -> Path:
        return state_dir / cls.FILENAME

    @classmethod
    def load_or_create(cls, path: Path, root: Path) -> "Manifest[E]":
        """Load from *path*; a missing file is an empty manifest."""
        manifest = cls(path, root)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return manifest
        except OSError as exc:
            raise ManifestError(f"failed to read `{path}`: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise ManifestError(f"`{path}` is corrupt: {exc}") from exc

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ManifestError(f"`{path}` is corrupt: {exc}") from exc

        if not isinstance(data, dict) or not isinstance(data.get("entries"), list):
            raise ManifestError(f"`{path}` is corrupt: expected an object with an `entries` list")
        if data.get("version") != cls.VERSION:
            raise ManifestError(
                f"`{path}` has version {data.get('version')!r}, expected {cls.VERSION}; "
                "delete it to start over"
            )

        for item in data["entries"]:
            if not isinstance(item, dict):
                raise ManifestError(f"`{path}` is corrupt: entries must be objects")
            try:
                entry = manifest.entry_from_dict(item)
            except (KeyError, TypeError, ValueError) as exc:
                raise ManifestError(f"`{path}` is corrupt: bad entry {item!r}: {exc}") from exc
            manifest._entries[manifest.entry_key(entry)] = entry
        return manifest

    def dumps(self) -> str:
        entries = [self.entry_to_dict(self._entries[k]) for k in sorted(self._entries)]
        payload = {"version": self.VERSION, "entries": entries}
        return json.dumps(payload, indent=2, sort_keys=True) + "\n"

    def save(self) -> bool:
        """Persist if anything changed. Returns True if the file was written.

        The new content goes to a sibling temp file first and is moved over the
        old one, so an interrupted save leaves the previous manifest readable.
        """
        if not self._dirty:
            return False
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            with open(tmp, "w", encoding="utf-8", newline="\n") as f:
                f.write(self.dumps())
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, self.path)
        except OSError as exc:
            raise ManifestError(f"failed to save `{self.path}`: {exc}") from exc
        self._dirty = False
        return True
