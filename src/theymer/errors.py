"""Error hierarchy shared by every theymer module.

Fatal failures derive from :class:`TheymerError` and propagate to the top of a
render session. ``UpstreamError`` and ``ProviderError`` are decorative: they are
raised and caught inside the pipeline and only ever logged.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class TheymerError(Exception):
    """Base class for all theymer errors."""

    kind = "error"


class ConfigError(TheymerError):
    """Project or theme configuration is missing, unreadable or malformed."""

    kind = "configuration"


class ThemeError(TheymerError):
    """A theme directory cannot be turned into a theme."""

    kind = "theme"


class SchemeError(TheymerError):
    """A scheme file is malformed or references unknown swatches."""

    kind = "scheme"


class TemplateError(TheymerError):
    """A template cannot be loaded, parsed or rendered."""

    kind = "template"


class ManifestError(TheymerError):
    """The persisted index is corrupt or has an unsupported version."""

    kind = "manifest"


class RenderError(TheymerError):
    """I/O failure while writing, reading back or formatting an output file."""

    kind = "rendering"

    def __init__(self, operation: str, path: Union[str, Path], reason: object) -> None:
        self.operation = operation
        self.path = Path(path)
        super().__init__(f"{operation} `{self.path}`: {reason}")


class UpstreamError(TheymerError):
    """Repository metadata could not be detected for a path."""

    kind = "upstream"


class ProviderError(TheymerError):
    """A remote URL could not be mapped onto a hosting provider."""

    kind = "provider"


class InternalBug(TheymerError):
    """An invariant between collaborators was violated."""

    kind = "internal"

    def __init__(self, module: str, reason: str, *, cause: Optional[BaseException] = None) -> None:
        self.module = module
        self.reason = reason
        self.cause = cause
        super().__init__(f"internal error in {module}: {reason}! this is a bug!")
