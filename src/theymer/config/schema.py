"""Configuration schema — dataclasses for every theymer.toml section."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from theymer.merge import KEEP, merged


class ProjectType(str, Enum):
    MONOTHEME = "monotheme"
    POLYTHEME = "polytheme"


@dataclass
class Provider:
    """A source-hosting service; ``host`` is the identity key and never merged."""

    host: str = merged(KEEP)
    blob_path: Optional[str] = merged(default=None)
    raw_path: Optional[str] = merged(default=None)
    branch: Optional[str] = merged(default=None)


@dataclass
class RawDirs:
    """Directory overrides exactly as written in the file (unexpanded)."""

    themes: Optional[str] = merged(default=None)
    schemes: Optional[str] = merged(default=None)
    templates: Optional[str] = merged(default=None)
    render: Optional[str] = merged(default=None)


@dataclass
class Dirs:
    themes: Path
    schemes: Path
    templates: Path
    render: Path


@dataclass
class ProjectConfig:
    type: ProjectType
    root: Path
    render_all_into: Optional[Path] = None

    @property
    def is_polytheme(self) -> bool:
        return self.type is ProjectType.POLYTHEME


@dataclass
class Config:
    """Fully resolved project configuration; every path is absolute."""

    project: ProjectConfig
    dirs: Dirs
    strip_directives: List[List[str]] = field(default_factory=list)
    providers: List[Provider] = field(default_factory=list)
    formatters: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def root(self) -> Path:
        return self.project.root
