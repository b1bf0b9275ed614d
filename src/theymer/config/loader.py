"""Locate and load theymer.toml, expanding paths against the project root."""

from __future__ import annotations

import dataclasses
import os
import re
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional

from theymer.config.defaults import (
    DEFAULT_DIRS,
    DEFAULT_STRIP_DIRECTIVES,
    FILENAME,
    default_providers,
)
from theymer.config.schema import (
    Config,
    Dirs,
    ProjectConfig,
    ProjectType,
    Provider,
    RawDirs,
)
from theymer.errors import ConfigError
from theymer.log import get_logger
from theymer.merge import merge

logger = get_logger("config")

_VAR_RE = re.compile(r"\$(?:\{(?P<braced>[A-Za-z_][A-Za-z0-9_]*)\}|(?P<bare>[A-Za-z_][A-Za-z0-9_]*))")


def find_project_root(start: Optional[Path] = None) -> Path:
    """Return the first directory from *start* upwards holding theymer.toml."""
    cwd = (start or Path.cwd()).resolve()
    for directory in (cwd, *cwd.parents):
        if (directory / FILENAME).is_file():
            return directory
    raise ConfigError(f"failed to find `{FILENAME}` in `{cwd}` or any parent directory")


def parse_toml(path: Path) -> Dict[str, Any]:
    """Parse a TOML file; an empty or whitespace-only file is an empty table."""
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"failed to read `{path}`: {exc}") from exc
    if not content.strip():
        return {}
    try:
        return tomllib.loads(content)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"failed to parse `{path}`: {exc}") from exc


def _expand_vars(path: str) -> str:
    def _lookup(match: re.Match[str]) -> str:
        name = match.group("braced") or match.group("bare")
        try:
            return os.environ[name]
        except KeyError:
            raise ConfigError(
                f"failed to expand path `{path}`: environment variable `{name}` is not set"
            ) from None

    return _VAR_RE.sub(_lookup, path)


def expand_and_resolve(path: str, root: Path) -> Path:
    """Expand ``~`` and ``$VARS`` in *path*; relative results hang off *root*."""
    expanded = Path(os.path.expanduser(_expand_vars(path)))
    if expanded.is_absolute():
        return expanded
    return root / expanded


def build_section(data: Dict[str, Any], cls: type, section: str) -> Any:
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    table = data.get(section, {})
    if not isinstance(table, dict):
        raise ConfigError(f"`{section}` must be a table, got {type(table).__name__}")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    return cls(**{k: v for k, v in table.items() if k in valid_fields})


def merge_providers_with_defaults(user_providers: List[Provider]) -> List[Provider]:
    """Merge user providers over the built-ins by host, preserving order."""
    providers: Dict[str, Provider] = {p.host: p for p in default_providers()}

    for user_provider in user_providers:
        default = providers.get(user_provider.host)
        if default is not None:
            providers[user_provider.host] = merge(user_provider, default)
        else:
            providers[user_provider.host] = user_provider

    return list(providers.values())


def _parse_providers(raw: Dict[str, Any]) -> List[Provider]:
    tables = raw.get("provider", [])
    if not isinstance(tables, list):
        raise ConfigError("`provider` must be an array of tables ([[provider]])")
    valid_fields = {f.name for f in dataclasses.fields(Provider)}
    providers: List[Provider] = []
    for table in tables:
        if not isinstance(table, dict) or not table.get("host"):
            raise ConfigError("every [[provider]] table needs a `host`")
        providers.append(Provider(**{k: v for k, v in table.items() if k in valid_fields}))
    return providers


def _parse_strip_directives(raw: Dict[str, Any]) -> List[List[str]]:
    value = raw.get("strip_directives")
    if value is None:
        return [list(tokens) for tokens in DEFAULT_STRIP_DIRECTIVES]
    if not isinstance(value, list) or not all(
        isinstance(tokens, list) and all(isinstance(t, str) for t in tokens) for tokens in value
    ):
        raise ConfigError("`strip_directives` must be a list of string lists")
    return [list(tokens) for tokens in value if tokens]


def _parse_formatters(raw: Dict[str, Any]) -> Dict[str, List[str]]:
    table = raw.get("format", {})
    if not isinstance(table, dict):
        raise ConfigError("`format` must be a table of glob = [command, ...]")
    formatters: Dict[str, List[str]] = {}
    for glob, command in table.items():
        if isinstance(command, str):
            command = command.split()
        if not isinstance(command, list) or not command or not all(isinstance(c, str) for c in command):
            raise ConfigError(f"formatter for `{glob}` must be a non-empty command list")
        formatters[glob] = list(command)
    return formatters


def load_config(start: Optional[Path] = None) -> Config:
    """Find the project root from *start* (default: cwd) and load its config."""
    root = find_project_root(start)
    logger.debug("using project root `%s`", root)

    raw = parse_toml(root / FILENAME)

    project_table = raw.get("project", {})
    if not isinstance(project_table, dict):
        raise ConfigError("`project` must be a table")
    project_type = (
        ProjectType.POLYTHEME if project_table.get("polytheme") else ProjectType.MONOTHEME
    )
    render_all_into_raw = project_table.get("render_all_into") or None

    dirs = merge(build_section(raw, RawDirs, "dirs"), DEFAULT_DIRS)

    return Config(
        project=ProjectConfig(
            type=project_type,
            root=root,
            render_all_into=(
                expand_and_resolve(render_all_into_raw, root) if render_all_into_raw else None
            ),
        ),
        dirs=Dirs(
            themes=expand_and_resolve(dirs.themes, root),
            schemes=expand_and_resolve(dirs.schemes, root),
            templates=expand_and_resolve(dirs.templates, root),
            render=expand_and_resolve(dirs.render, root),
        ),
        strip_directives=_parse_strip_directives(raw),
        providers=merge_providers_with_defaults(_parse_providers(raw)),
        formatters=_parse_formatters(raw),
    )
