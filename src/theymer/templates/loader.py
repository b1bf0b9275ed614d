"""Template discovery and compilation on top of Jinja2."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import jinja2

from theymer.errors import TemplateError
from theymer.templates import directives as directive_parser
from theymer.templates.directives import Directives

JINJA_TEMPLATE_SUFFIX = ".jinja"
SKIP_RENDERING_PREFIX = "_"


class _DirectiveStrippingLoader(jinja2.FileSystemLoader):
    """FileSystemLoader that hides the leading directive block from Jinja."""

    def get_source(self, environment: jinja2.Environment, template: str):
        source, filename, uptodate = super().get_source(environment, template)
        return directive_parser.strip_block(source), filename, uptodate


@dataclass
class Template:
    """A compiled template plus the raw source its hash is taken from."""

    name: str
    source: str
    directives: Directives
    compiled: jinja2.Template

    def render(self, context: Mapping[str, Any]) -> str:
        try:
            return self.compiled.render(**context)
        except (jinja2.TemplateError, UnicodeDecodeError) as exc:
            raise TemplateError(f"rendering template `{self.name}`: {exc}") from exc


class Loader:
    """Lists and compiles templates under one directory."""

    def __init__(self, directory: Path, strip_directives: Optional[List[List[str]]] = None) -> None:
        self.directory = directory
        self.strip_directives = strip_directives or []
        self.env = jinja2.Environment(
            loader=_DirectiveStrippingLoader(str(directory)),
            undefined=jinja2.StrictUndefined,
            keep_trailing_newline=True,
            autoescape=False,
        )
        self._cache: Dict[str, Template] = {}

    def names(self) -> List[str]:
        """Relative POSIX names of every template file, dotfiles excluded."""
        if not self.directory.is_dir():
            raise TemplateError(f"templates directory `{self.directory}` does not exist")
        names = []
        for path in self.directory.rglob("*"):
            rel = path.relative_to(self.directory)
            if not path.is_file() or any(part.startswith(".") for part in rel.parts):
                continue
            names.append(rel.as_posix())
        return sorted(names)

    def load(self, name: str) -> Template:
        cached = self._cache.get(name)
        if cached is not None:
            return cached

        path = self.directory / name
        try:
            source = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise TemplateError(f"failed to read template `{path}`: {exc}") from exc

        directives = directive_parser.parse(source, name, self.strip_directives)
        try:
            compiled = self.env.get_template(name)
        except jinja2.TemplateError as exc:
            raise TemplateError(f"failed to compile template `{name}`: {exc}") from exc

        template = Template(name=name, source=source, directives=directives, compiled=compiled)
        self._cache[name] = template
        return template
