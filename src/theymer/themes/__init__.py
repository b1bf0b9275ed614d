"""Themes, schemes, palettes and per-theme configuration."""

from theymer.themes.config import ThemeConfig, ThemeDirs
from theymer.themes.loader import discover_themes, load_all, load_theme
from theymer.themes.models import Color, Extra, Meta, RawScheme, Scheme, Swatch, Theme

__all__ = [
    "Color",
    "Extra",
    "Meta",
    "RawScheme",
    "Scheme",
    "Swatch",
    "Theme",
    "ThemeConfig",
    "ThemeDirs",
    "discover_themes",
    "load_all",
    "load_theme",
]
