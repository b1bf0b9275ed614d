"""Theme discovery and loading — base records, schemes directories, inheritance."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from theymer.config.schema import Config
from theymer.errors import ConfigError, ThemeError
from theymer.log import get_logger
from theymer.merge import merge
from theymer.themes import config as theme_config
from theymer.themes.models import RawScheme, Scheme, Theme, to_ascii

logger = get_logger("themes")

BASE_FILENAME = "theme.toml"


def _read_table(path: Path) -> Dict[str, object]:
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ThemeError(f"failed to read theme file `{path}`: {exc}") from exc
    try:
        return tomllib.loads(content)
    except tomllib.TOMLDecodeError as exc:
        raise ThemeError(f"failed to parse theme file `{path}`: {exc}") from exc


def load_raw(path: Path) -> RawScheme:
    """Parse one scheme (or theme base) file into a :class:`RawScheme`."""
    return RawScheme.from_table(_read_table(path), str(path))


def load_base(path: Path) -> Tuple[Optional[str], RawScheme]:
    """Return ``(name_ascii, raw_scheme)`` from a theme's base file."""
    table = _read_table(path)
    name_ascii = table.get("name_ascii")
    if name_ascii is not None and not isinstance(name_ascii, str):
        raise ThemeError(f"`name_ascii` in `{path}` must be a string")
    return name_ascii, RawScheme.from_table(table, str(path))


def load_schemes(directory: Path, base: Optional[RawScheme]) -> Dict[str, Scheme]:
    """Load every ``*.toml`` in *directory*, each layered over *base*."""
    schemes: Dict[str, Scheme] = {}
    for path in sorted(directory.iterdir()):
        if not path.is_file() or path.suffix.lower() != ".toml":
            continue
        raw = load_raw(path)
        if base is not None:
            raw = merge(raw, base)
        scheme = raw.into_scheme(path.stem)
        schemes[scheme.name] = scheme
        logger.debug("loaded scheme `%s` from `%s`", scheme.name, path)
    return schemes


def theme_directory(name: str, config: Config) -> Path:
    if config.project.is_polytheme:
        return config.dirs.themes / name
    return config.root


def discover_themes(config: Config) -> List[str]:
    """Monotheme: the project root's name. Polytheme: sub-directories of themes/."""
    if not config.project.is_polytheme:
        return [config.root.name]

    themes_dir = config.dirs.themes
    if not themes_dir.is_dir():
        raise ConfigError(f"themes directory `{themes_dir}` does not exist")
    return sorted(
        entry.name
        for entry in themes_dir.iterdir()
        if entry.is_dir() and not entry.name.startswith(".")
    )


def load_theme(name: str, config: Config) -> Theme:
    directory = theme_directory(name, config)
    tconfig = theme_config.load(directory, name, config)
    schemes_dir = tconfig.dirs.schemes
    base_path = directory / BASE_FILENAME

    name_ascii: Optional[str] = None
    base: Optional[RawScheme] = None
    if base_path.is_file():
        name_ascii, base = load_base(base_path)

    if schemes_dir.is_dir():
        schemes = load_schemes(schemes_dir, base)
    elif base is not None:
        scheme = base.into_scheme(name)
        schemes = {scheme.name: scheme}
    else:
        raise ThemeError(
            f"theme '{name}' has neither a `{BASE_FILENAME}` nor a schemes "
            f"directory (`{schemes_dir}`)"
        )

    if not schemes:
        logger.warning("theme `%s` has no schemes in `%s`", name, schemes_dir)

    return Theme(
        name=name,
        name_ascii=name_ascii or to_ascii(name),
        directory=directory,
        schemes=schemes,
        config=tconfig,
    )


def load_all(config: Config) -> Dict[str, Theme]:
    """Discover and load every theme in the project, in discovery order."""
    themes: Dict[str, Theme] = {}
    for name in discover_themes(config):
        theme = load_theme(name, config)
        themes[theme.name] = theme
    return themes


__all__ = [
    "BASE_FILENAME",
    "discover_themes",
    "load_all",
    "load_base",
    "load_raw",
    "load_schemes",
    "load_theme",
    "theme_directory",
]
