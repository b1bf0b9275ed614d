"""Render session — drives themes × schemes × templates through the index.

A session owns the index and the upstream cache for one run. Every output
goes through the same steps: resolve its path, annotate it with upstream
links, render it, classify it against the index, then apply the decision.
The index is persisted only after every decision has been applied, and never
in dry-run mode, so a failed run leaves the previous index authoritative.
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Dict, List, Optional

from theymer.config.defaults import STATE_DIR
from theymer.config.schema import Config, Provider
from theymer.errors import ProviderError, RenderError
from theymer.git.upstream import Special, UpstreamCache
from theymer.log import get_logger
from theymer.manifest.index import Index
from theymer.output.formatter import format_file
from theymer.output.models import Action, Decision, RenderReport, WriteMode
from theymer.output.strategy import decide
from theymer.render import context as render_context
from theymer.render.paths import (
    SWATCH_MARKER,
    resolve_path,
    should_render,
    uses_swatch_iteration,
)
from theymer.templates import providers
from theymer.templates.loader import Loader, Template
from theymer.themes.models import Scheme, Theme

logger = get_logger("render")


class Session:
    """Process-scoped state for one render run."""

    def __init__(
        self,
        config: Config,
        index: Index,
        *,
        write_mode: WriteMode = WriteMode.NORMAL,
        dry_run: bool = False,
        upstream: Optional[UpstreamCache] = None,
    ) -> None:
        self.config = config
        self.index = index
        self.providers: List[Provider] = list(config.providers)
        self.upstream = upstream if upstream is not None else UpstreamCache()
        self.write_mode = write_mode
        self.dry_run = dry_run
        self.report = RenderReport(dry_run=dry_run, write_mode=write_mode)
        self._loaders: Dict[Path, Loader] = {}
        self._claimed: Dict[Path, str] = {}

    @classmethod
    def open(
        cls,
        config: Config,
        *,
        write_mode: WriteMode = WriteMode.NORMAL,
        dry_run: bool = False,
        upstream: Optional[UpstreamCache] = None,
    ) -> "Session":
        index_path = Index.location(config.root / STATE_DIR)
        index = Index.load_or_create(index_path, config.root)
        return cls(config, index, write_mode=write_mode, dry_run=dry_run, upstream=upstream)

    def save(self) -> None:
        if not self.dry_run:
            self.index.save()

    def loader_for(self, theme: Theme) -> Loader:
        directory = theme.config.dirs.templates if theme.config else self.config.dirs.templates
        loader = self._loaders.get(directory)
        if loader is None:
            loader = Loader(directory, self.config.strip_directives)
            self._loaders[directory] = loader
        return loader

    def claim(self, path: Path, owner: str) -> None:
        previous = self._claimed.get(path)
        if previous is not None and previous != owner:
            logger.warning("`%s` is produced by both %s and %s; the last one wins", path, previous, owner)
        self._claimed[path] = owner


# ---- upstream annotation ----


def strip_prefix(path: Path, prefix: Path, context: str) -> Optional[Path]:
    try:
        return path.relative_to(prefix)
    except ValueError:
        logger.warning("%s... failed to strip prefix `%s` from path `%s`", context, prefix, path)
        return None


def build_upstream(render_path: Path, session: Session) -> Special:
    """Best-effort upstream links for *render_path*; never raises."""
    upstream = session.upstream.get_or_detect(render_path)
    if upstream is None:
        return Special()

    rel_path = strip_prefix(
        render_path.resolve(), upstream.root, "upstream detection... path not under repo root"
    )
    if rel_path is None:
        return Special()

    try:
        links = providers.resolve_links(
            upstream.url, rel_path.as_posix(), upstream.branch, session.providers
        )
    except ProviderError as exc:
        logger.warning("failed to build upstream links for `%s`: %s", render_path, exc)
        return Special()

    return Special(upstream_file=links.blob, upstream_repo=links.repo, upstream_raw=links.raw)


# ---- per-file pipeline ----


def prepare(
    theme: Theme,
    scheme: Scheme,
    template: Template,
    special: Special,
    current_swatch: Optional[str] = None,
) -> str:
    """Rendered file content, header included."""
    directives = template.directives
    ctx = render_context.build(theme, scheme, special, directives.style, current_swatch)
    render_context.require(ctx, template.name, scheme.name)

    rendered = template.render(ctx)
    header = directives.make_header(template.name, theme.name, scheme.name, special.upstream_file)
    return directives.compose(rendered, header)


def execute(
    action: Action,
    output: str,
    theme: Theme,
    scheme: Scheme,
    template: Template,
    session: Session,
) -> None:
    """Apply *action*'s decision to disk and the index."""
    path = action.path

    if action.decision is Decision.CONFLICT:
        logger.warning(
            "conflict: `%s` (last modified by user; use `--force` to overwrite)", path
        )
        return

    if not action.decision.should_write:
        logger.debug("skipped `%s` (%s)", path, action.label)
        return

    if session.dry_run:
        logger.info("would write `%s` (%s)", path, action.label)
        return

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(output.encode("utf-8"))
    except OSError as exc:
        raise RenderError("writing file", path, exc) from exc

    format_file(path, session.config.formatters)

    try:
        formatted = path.read_bytes()
    except OSError as exc:
        raise RenderError("reading file for hashing", path, exc) from exc

    session.index.insert(session.index.create_entry(path, theme, scheme, template, formatted))
    action.written = True
    logger.info("generated `%s` (%s)", path, action.label)


def write(
    theme: Theme,
    scheme: Scheme,
    template: Template,
    session: Session,
    current_swatch: Optional[str] = None,
) -> Action:
    path = resolve_path(theme, template.name, scheme.name, session.config, current_swatch)
    session.claim(path, f"{theme.name}/{scheme.name}/{template.name}")

    special = build_upstream(path, session)
    output = prepare(theme, scheme, template, special, current_swatch)
    status = session.index.check(path, theme, scheme, template)

    action = Action(
        path=path,
        theme=theme.name,
        scheme=scheme.name,
        template=template.name,
        swatch=current_swatch,
        status=status,
        decision=decide(status, session.write_mode),
    )
    execute(action, output, theme, scheme, template, session)
    session.report.actions.append(action)
    return action


def apply(theme: Theme, scheme: Scheme, template: Template, session: Session) -> List[Action]:
    """Render one template for one scheme (once per swatch if the name asks for it)."""
    if not uses_swatch_iteration(template.name):
        return [write(theme, scheme, template, session)]

    if render_context.SWATCH_VARIABLE not in template.source:
        logger.warning(
            "template `%s` has `%s` in filename but doesn't use `%s` inside the template",
            template.name,
            SWATCH_MARKER,
            render_context.SWATCH_VARIABLE,
        )
    return [write(theme, scheme, template, session, swatch.name) for swatch in scheme.palette]


def all_with(theme: Theme, scheme: Scheme, session: Session) -> None:
    loader = session.loader_for(theme)
    for name in loader.names():
        if not should_render(name):
            continue
        apply(theme, scheme, loader.load(name), session)


def render_all(
    themes: Dict[str, Theme],
    config: Config,
    *,
    write_mode: WriteMode = WriteMode.NORMAL,
    dry_run: bool = False,
    upstream: Optional[UpstreamCache] = None,
) -> RenderReport:
    """Run one full session over every theme and scheme, then persist the index."""
    start = time.perf_counter()
    session = Session.open(config, write_mode=write_mode, dry_run=dry_run, upstream=upstream)

    for theme in themes.values():
        for scheme in theme.schemes.values():
            all_with(theme, scheme, session)

    session.save()

    session.report.duration_ms = round((time.perf_counter() - start) * 1000, 2)
    return session.report


__all__ = [
    "Session",
    "apply",
    "build_upstream",
    "execute",
    "prepare",
    "render_all",
    "strip_prefix",
    "write",
]
