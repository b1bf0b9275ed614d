"""Post-write formatting — run configured commands over freshly written files."""

from __future__ import annotations

import subprocess
from fnmatch import fnmatch
from pathlib import Path
from typing import Dict, List

from theymer.errors import RenderError
from theymer.log import get_logger

logger = get_logger("format")


def commands_for(path: Path, formatters: Dict[str, List[str]]) -> List[List[str]]:
    """Formatter commands whose glob matches *path*'s name or full path."""
    posix = path.as_posix()
    return [
        list(command)
        for glob, command in formatters.items()
        if fnmatch(path.name, glob) or fnmatch(posix, glob)
    ]


def format_file(path: Path, formatters: Dict[str, List[str]], timeout: int = 60) -> None:
    """Run every matching formatter on *path* in place. Raises RenderError."""
    for command in commands_for(path, formatters):
        argv = [*command, str(path)]
        logger.debug("formatting `%s` with `%s`", path, " ".join(command))
        try:
            result = subprocess.run(
                argv,
                cwd=path.parent,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except FileNotFoundError as exc:
            raise RenderError("formatting", path, f"`{command[0]}` is not installed or not on PATH") from exc
        except subprocess.TimeoutExpired as exc:
            raise RenderError("formatting", path, f"`{command[0]}` timed out after {timeout}s") from exc

        if result.returncode != 0:
            stderr = result.stderr.strip() or result.stdout.strip()
            raise RenderError("formatting", path, f"`{' '.join(command)}` exited {result.returncode}: {stderr}")
