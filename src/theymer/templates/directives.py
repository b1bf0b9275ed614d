"""Template directives — the ``{#theymer ... #}`` block, header text, stripped lines.

A template may open with a Jinja comment whose body is TOML::

    {#theymer
    comment = "//"
    [style]
    case = "upper"
    #}

``comment`` (and optional ``comment_end``) shape the generated header; an empty
``comment`` disables it. ``[style]`` is exposed to the template as ``style``.
"""

from __future__ import annotations

import re
import tomllib
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from theymer.errors import TemplateError

DIRECTIVE_RE = re.compile(r"\A\s*\{#theymer\b(?P<body>.*?)#\}[ \t]*(?:\r?\n)?", re.DOTALL)


@dataclass
class Directives:
    comment: str = "#"
    comment_end: str = ""
    style: Dict[str, Any] = field(default_factory=dict)
    strip: List[List[str]] = field(default_factory=list)

    def _line(self, text: str) -> str:
        end = f" {self.comment_end}" if self.comment_end else ""
        return f"{self.comment} {text}{end}".rstrip() + "\n"

    def make_header(
        self,
        template_name: str,
        theme: str,
        scheme: str,
        upstream: Optional[str] = None,
    ) -> str:
        """Tool-managed header prepended to every generated file."""
        if not self.comment:
            return ""
        lines = [
            f"Generated by theymer from `{template_name}` (theme `{theme}`, scheme `{scheme}`).",
            "Hand edits are kept until the next `theymer render --force`.",
        ]
        if upstream:
            lines.append(f"Upstream: {upstream}")
        return "".join(self._line(text) for text in lines)

    def is_stripped(self, line: str) -> bool:
        tokens = line.split()
        return any(tokens[: len(marker)] == marker for marker in self.strip)

    def split(self, rendered: str) -> Tuple[str, str]:
        """Split *rendered* into (hoisted directive lines, remaining body)."""
        if not self.strip:
            return "", rendered
        hoisted: List[str] = []
        body: List[str] = []
        for line in rendered.splitlines(keepends=True):
            (hoisted if self.is_stripped(line) else body).append(line)
        if hoisted and not hoisted[-1].endswith("\n"):
            hoisted[-1] += "\n"
        return "".join(hoisted), "".join(body)

    def compose(self, rendered: str, header: str) -> str:
        """Final file text: hoisted lines, then header, then body."""
        hoisted, body = self.split(rendered)
        return f"{hoisted}{header}{body}"


def strip_block(source: str) -> str:
    """Remove a leading directive block from template *source*."""
    return DIRECTIVE_RE.sub("", source, count=1)


def parse(source: str, template_name: str, strip: Optional[List[List[str]]] = None) -> Directives:
    """Read the directive block (if any) at the top of *source*."""
    directives = Directives(strip=[list(m) for m in strip or []])
    m = DIRECTIVE_RE.match(source)
    if m is None:
        return directives

    try:
        table = tomllib.loads(m.group("body"))
    except tomllib.TOMLDecodeError as exc:
        raise TemplateError(f"malformed directive block in `{template_name}`: {exc}") from exc

    comment = table.get("comment", directives.comment)
    comment_end = table.get("comment_end", directives.comment_end)
    style = table.get("style", {})
    if not isinstance(comment, str) or not isinstance(comment_end, str):
        raise TemplateError(f"`comment` directives in `{template_name}` must be strings")
    if not isinstance(style, dict):
        raise TemplateError(f"`style` directive in `{template_name}` must be a table")

    directives.comment = comment
    directives.comment_end = comment_end
    directives.style = style
    return directives
