"""Write-pipeline models — file status, decisions, policies, run report."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional


class FileStatus(str, Enum):
    """How an output file relates to its index entry. Recomputed every run."""

    NOT_TRACKED = "not_tracked"
    UNCHANGED = "unchanged"
    STALE = "stale"
    MODIFIED = "modified"


class WriteMode(str, Enum):
    """Write policy. Orthogonal to dry-run."""

    NORMAL = "normal"
    FORCE = "force"


class Decision(str, Enum):
    WRITE = "write"
    FORCE_WRITE = "force_write"
    SKIP = "skip"
    CONFLICT = "conflict"

    @property
    def should_write(self) -> bool:
        return self in (Decision.WRITE, Decision.FORCE_WRITE)

    def log_action(self, status: Optional[FileStatus] = None) -> str:
        """Human-readable label for logs and reports."""
        if self is Decision.WRITE:
            return "updated" if status is FileStatus.STALE else "new"
        if self is Decision.FORCE_WRITE:
            return "forced"
        if self is Decision.SKIP:
            return "up to date"
        return "conflict"


@dataclass
class Action:
    """Outcome of one output file in a run."""

    path: Path
    theme: str
    scheme: str
    template: str
    status: FileStatus
    decision: Decision
    swatch: Optional[str] = None
    written: bool = False

    @property
    def label(self) -> str:
        return self.decision.log_action(self.status)


@dataclass
class RenderReport:
    """Complete result of a render session."""

    actions: List[Action] = field(default_factory=list)
    dry_run: bool = False
    write_mode: WriteMode = WriteMode.NORMAL
    duration_ms: float = 0.0

    @property
    def written(self) -> List[Action]:
        return [a for a in self.actions if a.written]

    @property
    def planned_writes(self) -> List[Action]:
        return [a for a in self.actions if a.decision.should_write]

    @property
    def skipped(self) -> List[Action]:
        return [a for a in self.actions if a.decision is Decision.SKIP]

    @property
    def conflicts(self) -> List[Action]:
        return [a for a in self.actions if a.decision is Decision.CONFLICT]

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)
