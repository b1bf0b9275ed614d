"""Per-theme configuration (``theymer.toml`` inside a theme directory)."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from theymer.config.defaults import FILENAME
from theymer.config.loader import build_section, expand_and_resolve, parse_toml
from theymer.config.schema import Config
from theymer.merge import merged, merge


@dataclass
class RawThemeDirs:
    """Directory overrides exactly as written in the theme's file (unexpanded)."""

    schemes: Optional[str] = None
    templates: Optional[str] = None
    render: Optional[str] = None

    def expand(self, theme_dir: Path) -> "ThemeDirLayer":
        """Expand and resolve each override once, relative to *theme_dir*."""
        return ThemeDirLayer(
            schemes=expand_and_resolve(self.schemes, theme_dir) if self.schemes else None,
            templates=expand_and_resolve(self.templates, theme_dir) if self.templates else None,
            render=expand_and_resolve(self.render, theme_dir) if self.render else None,
        )


@dataclass
class ThemeDirLayer:
    """One layer of resolved theme directories; ``None`` defers to the layer below."""

    schemes: Optional[Path] = merged(default=None)
    templates: Optional[Path] = merged(default=None)
    render: Optional[Path] = merged(default=None)


@dataclass
class ThemeDirs:
    schemes: Path
    templates: Path
    render: Path


@dataclass
class ThemeConfig:
    inherit: bool
    dirs: ThemeDirs
    path: Optional[Path] = None  # None when the theme ships no config file


def _default_render(theme_dir: Path, config: Config) -> Path:
    if config.project.is_polytheme:
        return theme_dir / "render"
    return config.project.render_all_into or config.dirs.render


def defaults(theme_dir: Path, config: Config) -> ThemeDirLayer:
    """Directory defaults a theme inherits from the project, already resolved."""
    if config.project.is_polytheme:
        schemes = theme_dir / "schemes"
    else:
        schemes = config.dirs.schemes
    return ThemeDirLayer(
        schemes=schemes,
        templates=config.dirs.templates,
        render=_default_render(theme_dir, config),
    )


def load(theme_dir: Path, name: str, config: Config) -> ThemeConfig:
    """Load *theme_dir*'s config merged over the project defaults.

    Monotheme projects share the project file, so only the defaults apply.
    """
    path = theme_dir / FILENAME
    has_file = config.project.is_polytheme and path.is_file()
    raw = parse_toml(path) if has_file else {}

    inherit = bool(raw.get("inherit", False))
    overrides = build_section(raw, RawThemeDirs, "dirs").expand(theme_dir)
    dirs = merge(overrides, defaults(theme_dir, config))

    render = dirs.render
    if inherit and config.project.render_all_into is not None:
        render = config.project.render_all_into / name

    return ThemeConfig(
        inherit=inherit,
        dirs=ThemeDirs(schemes=dirs.schemes, templates=dirs.templates, render=render),
        path=path if has_file else None,
    )
