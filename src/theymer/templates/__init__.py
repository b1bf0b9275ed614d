"""Template loading, directives, and provider link building."""

from theymer.templates.directives import Directives
from theymer.templates.loader import (
    JINJA_TEMPLATE_SUFFIX,
    SKIP_RENDERING_PREFIX,
    Loader,
    Template,
)

__all__ = [
    "JINJA_TEMPLATE_SUFFIX",
    "SKIP_RENDERING_PREFIX",
    "Directives",
    "Loader",
    "Template",
]
