"""JSON reporter for scripted runs."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from theymer.output.models import RenderReport


def _path(path: Path, root: Optional[Path]) -> str:
    if root is not None:
        try:
            return path.relative_to(root).as_posix()
        except ValueError:
            pass
    return path.as_posix()


def to_dict(report: RenderReport, *, root: Optional[Path] = None) -> Dict[str, Any]:
    """Convert a RenderReport to a JSON-serialisable dict."""
    actions: List[Dict[str, Any]] = []
    for a in report.actions:
        actions.append({
            "path": _path(a.path, root),
            "theme": a.theme,
            "scheme": a.scheme,
            "template": a.template,
            **({"swatch": a.swatch} if a.swatch else {}),
            "status": a.status.value,
            "decision": a.decision.value,
            "action": a.label,
            "written": a.written,
        })

    return {
        "version": "1.0",
        "dry_run": report.dry_run,
        "write_mode": report.write_mode.value,
        "files": len(report.actions),
        "written": len(report.written),
        "skipped": len(report.skipped),
        "conflicts": len(report.conflicts),
        "actions": actions,
        "duration_ms": report.duration_ms,
    }


def render(report: RenderReport, *, root: Optional[Path] = None) -> str:
    """Return formatted JSON string."""
    return json.dumps(to_dict(report, root=root), indent=2)
