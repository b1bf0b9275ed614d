"""The render index — what was generated from which theme, scheme and template."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, ClassVar, Dict, Union

from theymer.manifest import manifest
from theymer.manifest.manifest import Manifest
from theymer.output.models import FileStatus
from theymer.templates.loader import Template
from theymer.themes.models import Scheme, Theme


@dataclass(frozen=True)
class Entry:
    path: str
    theme: str
    scheme: str
    template: str
    render_hash: str
    theme_hash: str
    scheme_hash: str
    template_hash: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Entry":
        values = {name: data[name] for name in cls.__dataclass_fields__}
        for name, value in values.items():
            if not isinstance(value, str):
                raise TypeError(f"`{name}` must be a string")
        return cls(**values)


def _stable_json(value: Dict[str, Any]) -> str:
    return json.dumps(value, indent=2, sort_keys=True, ensure_ascii=False)


def hash_theme(theme: Theme) -> str:
    return manifest.hash_text(_stable_json(theme.to_dict()))


def hash_scheme(scheme: Scheme) -> str:
    return manifest.hash_text(_stable_json(scheme.to_dict()))


def hash_template(template: Template) -> str:
    return manifest.hash_text(template.source)


class Index(Manifest[Entry]):
    FILENAME: ClassVar[str] = "index.json"
    VERSION: ClassVar[int] = 1

    def entry_key(self, entry: Entry) -> str:
        return entry.path

    def entry_to_dict(self, entry: Entry) -> Dict[str, Any]:
        return asdict(entry)

    def entry_from_dict(self, data: Dict[str, Any]) -> Entry:
        return Entry.from_dict(data)

    def check(self, path: Path, theme: Theme, scheme: Scheme, template: Template) -> FileStatus:
        """Status of *path* against its entry and the current inputs."""
        entry = self.get(path)
        if entry is None:
            return FileStatus.NOT_TRACKED

        return manifest.check_status(
            path,
            entry.render_hash,
            lambda: (
                hash_theme(theme) != entry.theme_hash
                or hash_scheme(scheme) != entry.scheme_hash
                or hash_template(template) != entry.template_hash
            ),
        )

    def create_entry(
        self,
        path: Path,
        theme: Theme,
        scheme: Scheme,
        template: Template,
        content: Union[str, bytes],
    ) -> Entry:
        """Fresh entry for *content*, which must be exactly what is on disk."""
        render_hash = (
            manifest.hash_bytes(content) if isinstance(content, bytes) else manifest.hash_text(content)
        )
        return Entry(
            path=self.key(path),
            theme=theme.name,
            scheme=scheme.name,
            template=template.name,
            render_hash=render_hash,
            theme_hash=hash_theme(theme),
            scheme_hash=hash_scheme(scheme),
            template_hash=hash_template(template),
        )
