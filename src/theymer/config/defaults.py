"""Default configuration values and starter theymer.toml templates."""

from __future__ import annotations

from typing import List

from theymer.config.schema import Provider, RawDirs

FILENAME = "theymer.toml"

STATE_DIR = ".theymer"

DEFAULT_STRIP_DIRECTIVES: List[List[str]] = [["#:tombi"]]

DEFAULT_DIRS = RawDirs(
    themes="themes",
    schemes="schemes",
    templates="templates",
    render="render",
)


def default_providers() -> List[Provider]:
    """Return fresh copies of the built-in providers, in lookup order."""
    return [
        Provider(
            host="github.com",
            blob_path="{host}/{owner}/{repo}/blob/{ref}/{file}",
            raw_path="raw.githubusercontent.com/{owner}/{repo}/{ref}/{file}",
        ),
        Provider(
            host="gitlab.com",
            blob_path="{host}/{owner}/{repo}/-/blob/{ref}/{file}",
            raw_path="{host}/{owner}/{repo}/-/raw/{ref}/{file}",
        ),
        Provider(
            host="codeberg.org",
            blob_path="{host}/{owner}/{repo}/src/branch/{ref}/{file}",
            raw_path="{host}/{owner}/{repo}/raw/branch/{ref}/{file}",
        ),
        Provider(
            host="bitbucket.org",
            blob_path="{host}/{owner}/{repo}/src/{ref}/{file}",
            raw_path="{host}/{owner}/{repo}/raw/{ref}/{file}",
        ),
    ]


DEFAULT_TOML = """\
# theymer project configuration
# strip_directives = [["#:tombi"]]   # lines hoisted above the generated header

[project]
polytheme = false
# render_all_into = "dist"           # shared render target (supports ~ and $VARS)

[dirs]
schemes = "schemes"
templates = "templates"
render = "render"

# [[provider]]
# host = "git.example.org"
# blob_path = "{host}/{owner}/{repo}/src/branch/{ref}/{file}"
# raw_path = "{host}/{owner}/{repo}/raw/branch/{ref}/{file}"
# branch = "main"

# [format]
# "*.toml" = ["tombi", "format"]
"""

POLYTHEME_TOML = """\
# theymer project configuration
# strip_directives = [["#:tombi"]]

[project]
polytheme = true
# render_all_into = "dist"

[dirs]
themes = "themes"
templates = "templates"
"""
