"""Shared test fixtures — sample projects, schemes, templates, temp git repos."""

from __future__ import annotations

import subprocess
import textwrap
from pathlib import Path
from typing import Callable, Dict

import pytest

from theymer.templates.loader import Loader, Template
from theymer.themes.models import RawScheme, Scheme, Theme

DARK_SCHEME = textwrap.dedent("""\
    scheme = "Forest Dark"

    [meta]
    author = "Zoë"
    license = "MIT"

    [palette]
    red = "#cc3333"
    green = "#33cc33"

    [roles]
    fg = "green"
    alert = "red"
""")

LIGHT_SCHEME = textwrap.dedent("""\
    [palette]
    red = "#ff0000"
    green = "#00ff00"

    [roles]
    fg = "red"
""")

CONF_TEMPLATE = textwrap.dedent("""\
    name = "{{ theme }}-{{ scheme }}"
    fg = "{{ roles.fg }}"
    {% for s in swatches %}{{ s.name }} = "{{ s.color }}"
    {% endfor %}""")

SWATCH_TEMPLATE = 'swatch = "{{ swatch.name }}"\ncolor = "{{ swatch.color.hex_bare }}"\n'


def write_tree(root: Path, files: Dict[str, str]) -> Path:
    """Create *files* (relative path → content) under *root*."""
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[..., Path]:
    """Factory for a monotheme project named ``forest`` with two schemes."""

    def _make(extra: Dict[str, str] | None = None, *, config: str = "") -> Path:
        root = tmp_path / "forest"
        files = {
            "theymer.toml": config,
            "schemes/dark.toml": DARK_SCHEME,
            "schemes/light.toml": LIGHT_SCHEME,
            "templates/{THEME}-{SCHEME}.conf.jinja": CONF_TEMPLATE,
        }
        files.update(extra or {})
        return write_tree(root, files)

    return _make


@pytest.fixture
def project(make_project) -> Path:
    return make_project()


@pytest.fixture
def scheme() -> Scheme:
    return RawScheme(
        palette={"red": "#cc3333", "green": "#33cc33"},
        roles=[("fg", "green")],
    ).into_scheme("dark")


@pytest.fixture
def theme(tmp_path: Path, scheme: Scheme) -> Theme:
    return Theme(name="forest", name_ascii="forest", directory=tmp_path, schemes={"dark": scheme})


@pytest.fixture
def template_factory(tmp_path: Path) -> Callable[[str, str], Template]:
    """Write a template file and return it compiled."""
    templates_dir = tmp_path / "templates"

    def _make(name: str, source: str) -> Template:
        write_tree(templates_dir, {name: source})
        return Loader(templates_dir).load(name)

    return _make


def _git(cwd: Path, *args: str) -> None:
    subprocess.run(["git", *args], cwd=cwd, capture_output=True, check=True)


@pytest.fixture
def tmp_git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository on ``main`` with a gitlab.com origin."""
    repo = tmp_path / "repo"
    repo.mkdir()
    _git(repo, "init")
    _git(repo, "symbolic-ref", "HEAD", "refs/heads/main")
    _git(repo, "config", "user.email", "test@test.com")
    _git(repo, "config", "user.name", "Test")
    _git(repo, "remote", "add", "origin", "git@gitlab.com:acme/theme.git")
    (repo / "README.md").write_text("# Test\n")
    _git(repo, "add", ".")
    _git(repo, "commit", "-m", "init")
    return repo
