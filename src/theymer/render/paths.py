"""Output path resolution for templates."""

from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Optional

from theymer.config.schema import Config
from theymer.errors import InternalBug
from theymer.templates.loader import JINJA_TEMPLATE_SUFFIX, SKIP_RENDERING_PREFIX
from theymer.themes.models import Theme

THEME_MARKER = "{THEME}"
SCHEME_MARKER = "{SCHEME}"
SWATCH_MARKER = "{SWATCH}"


def uses_swatch_iteration(template_name: str) -> bool:
    return SWATCH_MARKER in template_name


def should_render(template_name: str) -> bool:
    """False for templates with any path segment starting with the skip prefix."""
    return not any(
        part.startswith(SKIP_RENDERING_PREFIX) for part in template_name.split("/")
    )


def render_dir(theme: Theme, config: Config) -> Path:
    """Directory a theme renders into."""
    if theme.config is not None:
        return theme.config.dirs.render
    if config.project.is_polytheme:
        if config.project.render_all_into is not None:
            return config.project.render_all_into / theme.name
        return theme.directory / "render"
    return config.project.render_all_into or config.dirs.render


def resolve_path(
    theme: Theme,
    template_name: str,
    scheme_name: str,
    config: Config,
    swatch_name: Optional[str] = None,
) -> Path:
    """Concrete output path: suffix stripped, markers filled, under the render dir."""
    relative = template_name
    if relative.endswith(JINJA_TEMPLATE_SUFFIX):
        relative = relative[: -len(JINJA_TEMPLATE_SUFFIX)]

    pure = PurePosixPath(relative)
    filename = pure.name
    if not filename or filename in (".", "..") or ".." in pure.parts or pure.is_absolute():
        raise InternalBug("render", f"attempted to render to corrupted path `{relative}`")

    filename = filename.replace(THEME_MARKER, theme.name).replace(SCHEME_MARKER, scheme_name)
    if swatch_name is not None:
        filename = filename.replace(SWATCH_MARKER, swatch_name)

    return render_dir(theme, config).joinpath(*pure.parent.parts, filename)
