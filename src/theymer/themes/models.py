"""Theme, scheme, palette and role models."""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from theymer.errors import SchemeError
from theymer.merge import APPEND, KEYED, NONEMPTY, RECORD, merged
from theymer.themes.config import ThemeConfig

_HEX_RE = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def to_ascii(name: str) -> str:
    """Best-effort ASCII transliteration (``Café`` → ``Cafe``)."""
    decomposed = unicodedata.normalize("NFKD", name)
    return decomposed.encode("ascii", "ignore").decode("ascii")


@dataclass(frozen=True)
class Color:
    """An sRGB colour; ``str(color)`` is its lowercase ``#rrggbb`` form."""

    r: int
    g: int
    b: int

    @classmethod
    def parse(cls, value: str) -> "Color":
        if not isinstance(value, str) or not _HEX_RE.match(value):
            raise SchemeError(f"invalid colour `{value}` (expected #rgb or #rrggbb)")
        digits = value[1:]
        if len(digits) == 3:
            digits = "".join(c * 2 for c in digits)
        return cls(int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16))

    @property
    def hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"

    @property
    def hex_bare(self) -> str:
        return self.hex[1:]

    @property
    def rgb(self) -> Tuple[int, int, int]:
        return (self.r, self.g, self.b)

    def __str__(self) -> str:
        return self.hex


@dataclass(frozen=True)
class Swatch:
    name: str
    color: Color


@dataclass
class Meta:
    author: Optional[str] = merged(default=None)
    author_ascii: Optional[str] = merged(default=None)
    license: Optional[str] = merged(default=None)
    license_ascii: Optional[str] = merged(default=None)
    blurb: Optional[str] = merged(default=None)
    blurb_ascii: Optional[str] = merged(default=None)

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {
            "author": self.author,
            "author_ascii": self.author_ascii or (to_ascii(self.author) if self.author else None),
            "license": self.license,
            "license_ascii": self.license_ascii or (to_ascii(self.license) if self.license else None),
            "blurb": self.blurb,
            "blurb_ascii": self.blurb_ascii or (to_ascii(self.blurb) if self.blurb else None),
        }


@dataclass
class Extra:
    # An empty rainbow means "not set" and falls back to the base layer.
    rainbow: List[str] = merged(NONEMPTY, default_factory=list)


@dataclass
class RawScheme:
    """A scheme record as written on disk, before roles are resolved."""

    scheme: Optional[str] = merged(default=None)
    scheme_ascii: Optional[str] = merged(default=None)
    meta: Meta = merged(RECORD, default_factory=Meta)
    palette: Dict[str, str] = merged(KEYED, default_factory=dict)
    roles: List[Tuple[str, str]] = merged(APPEND, default_factory=list)
    extra: Extra = merged(RECORD, default_factory=Extra)

    @classmethod
    def from_table(cls, table: Dict[str, Any], source: str) -> "RawScheme":
        """Build from a parsed TOML table; *source* names the file in errors."""

        def _table(key: str) -> Dict[str, Any]:
            value = table.get(key, {})
            if not isinstance(value, dict):
                raise SchemeError(f"`{key}` in `{source}` must be a table")
            return value

        meta_table = _table("meta")
        palette = _table("palette")
        roles = _table("roles")
        extra = _table("extra")

        for label, mapping in (("palette", palette), ("roles", roles)):
            for key, value in mapping.items():
                if not isinstance(value, str):
                    raise SchemeError(f"`{label}.{key}` in `{source}` must be a string")

        rainbow = extra.get("rainbow", [])
        if not isinstance(rainbow, list) or not all(isinstance(s, str) for s in rainbow):
            raise SchemeError(f"`extra.rainbow` in `{source}` must be a list of swatch names")

        return cls(
            scheme=table.get("scheme"),
            scheme_ascii=table.get("scheme_ascii"),
            meta=Meta(**{k: v for k, v in meta_table.items() if k in Meta.__dataclass_fields__}),
            palette=dict(palette),
            roles=list(roles.items()),
            extra=Extra(rainbow=list(rainbow)),
        )

    def into_scheme(self, name: str) -> "Scheme":
        """Resolve colours and roles into a renderable :class:`Scheme`."""
        palette: List[Swatch] = []
        by_name: Dict[str, Color] = {}
        for swatch_name, value in self.palette.items():
            try:
                color = Color.parse(value)
            except SchemeError as exc:
                raise SchemeError(f"scheme `{name}`, swatch `{swatch_name}`: {exc}") from exc
            palette.append(Swatch(swatch_name, color))
            by_name[swatch_name] = color

        roles: Dict[str, Color] = {}
        for role, value in self.roles:
            if value.startswith("#"):
                roles[role] = Color.parse(value)
            elif value in by_name:
                roles[role] = by_name[value]
            else:
                raise SchemeError(
                    f"scheme `{name}`: role `{role}` references unknown swatch `{value}`"
                )

        for swatch_name in self.extra.rainbow:
            if swatch_name not in by_name:
                raise SchemeError(
                    f"scheme `{name}`: rainbow references unknown swatch `{swatch_name}`"
                )

        return Scheme(
            name=name,
            display_name=self.scheme or name,
            name_ascii=self.scheme_ascii or to_ascii(self.scheme or name),
            meta=self.meta,
            palette=palette,
            roles=roles,
            rainbow=list(self.extra.rainbow),
        )


@dataclass
class Scheme:
    """A named palette plus resolved roles; the unit templates render against."""

    name: str
    display_name: str
    name_ascii: str
    meta: Meta = field(default_factory=Meta)
    palette: List[Swatch] = field(default_factory=list)
    roles: Dict[str, Color] = field(default_factory=dict)
    rainbow: List[str] = field(default_factory=list)

    def swatch(self, name: str) -> Optional[Swatch]:
        return next((s for s in self.palette if s.name == name), None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scheme": self.name,
            "scheme_display": self.display_name,
            "scheme_ascii": self.name_ascii,
            "meta": self.meta.to_dict(),
            "palette": {s.name: s.color.hex for s in self.palette},
            "roles": {role: color.hex for role, color in self.roles.items()},
            "extra": {"rainbow": list(self.rainbow)},
        }


@dataclass
class Theme:
    """A named collection of schemes plus theme-level configuration."""

    name: str
    name_ascii: str
    directory: Path
    schemes: Dict[str, Scheme] = field(default_factory=dict)
    config: Optional[ThemeConfig] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"theme": self.name, "theme_ascii": self.name_ascii}
