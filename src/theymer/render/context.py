"""Template context for one render."""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from theymer.errors import InternalBug
from theymer.git.upstream import Special
from theymer.themes.models import Scheme, Theme

SWATCH_VARIABLE = "swatch"

REQUIRED_KEYS = ("theme", "scheme", "palette", "roles", "upstream", SWATCH_VARIABLE)


def build(
    theme: Theme,
    scheme: Scheme,
    special: Special,
    style: Mapping[str, Any],
    current_swatch: Optional[str] = None,
) -> Dict[str, Any]:
    palette = {s.name: s.color for s in scheme.palette}

    swatch: Optional[Dict[str, Any]] = None
    if current_swatch is not None:
        if current_swatch not in palette:
            raise InternalBug(
                "render",
                f"swatch `{current_swatch}` is not in the palette of scheme `{scheme.name}`",
            )
        swatch = {"name": current_swatch, "color": palette[current_swatch]}

    context: Dict[str, Any] = {
        **theme.to_dict(),
        **scheme.to_dict(),
        "palette": palette,
        "swatches": list(scheme.palette),
        "roles": dict(scheme.roles),
        "extra": {"rainbow": [palette[name] for name in scheme.rainbow]},
        "style": dict(style),
        "upstream": special.to_dict(),
        **special.to_dict(),
        SWATCH_VARIABLE: swatch,
    }
    return context


def require(context: Mapping[str, Any], template_name: str, scheme_name: str) -> None:
    """Raise InternalBug if context construction dropped a required key."""
    missing = [key for key in REQUIRED_KEYS if key not in context]
    if missing:
        raise InternalBug(
            "render",
            f"scheme `{scheme_name}` context for template `{template_name}` missing "
            f"{', '.join(f'`{k}`' for k in missing)}",
        )
