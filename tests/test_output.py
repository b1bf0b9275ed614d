"""Tests for the JSON and terminal reporters."""

import json
from io import StringIO
from pathlib import Path

from rich.console import Console

from theymer.output import json_report, terminal
from theymer.output.models import Action, Decision, FileStatus, RenderReport, WriteMode


def _report(root: Path, dry_run: bool = False) -> RenderReport:
    return RenderReport(
        actions=[
            Action(root / "render" / "a.conf", "forest", "dark", "a.jinja",
                   FileStatus.NOT_TRACKED, Decision.WRITE, written=not dry_run),
            Action(root / "render" / "b.conf", "forest", "dark", "b.jinja",
                   FileStatus.UNCHANGED, Decision.SKIP),
            Action(root / "render" / "c-red.conf", "forest", "dark", "c-{SWATCH}.jinja",
                   FileStatus.MODIFIED, Decision.CONFLICT, swatch="red"),
        ],
        dry_run=dry_run,
        write_mode=WriteMode.NORMAL,
        duration_ms=12.5,
    )


def _capture(report: RenderReport, root: Path, **kwargs) -> str:
    buf = StringIO()
    terminal.render(report, root=root, console=Console(file=buf, width=160), **kwargs)
    return buf.getvalue()


class TestJsonReport:
    def test_counts(self, tmp_path: Path):
        data = json.loads(json_report.render(_report(tmp_path), root=tmp_path))
        assert data["files"] == 3
        assert data["written"] == 1
        assert data["skipped"] == 1
        assert data["conflicts"] == 1
        assert data["write_mode"] == "normal"
        assert data["duration_ms"] == 12.5

    def test_actions(self, tmp_path: Path):
        actions = json_report.to_dict(_report(tmp_path), root=tmp_path)["actions"]
        assert actions[0]["path"] == "render/a.conf"
        assert actions[0]["action"] == "new"
        assert actions[0]["written"] is True
        assert "swatch" not in actions[0]
        assert actions[2]["swatch"] == "red"
        assert actions[2]["status"] == "modified"

    def test_paths_outside_root_stay_absolute(self, tmp_path: Path):
        other = tmp_path / "elsewhere"
        actions = json_report.to_dict(_report(tmp_path), root=other)["actions"]
        assert actions[0]["path"] == (tmp_path / "render" / "a.conf").as_posix()


class TestTerminalReport:
    def test_hides_skipped_by_default(self, tmp_path: Path):
        out = _capture(_report(tmp_path), tmp_path)
        assert "render/a.conf" in out
        assert "render/b.conf" not in out
        assert "Use --force" in out

    def test_show_skipped(self, tmp_path: Path):
        out = _capture(_report(tmp_path), tmp_path, show_skipped=True)
        assert "render/b.conf" in out
        assert "UP TO DATE" in out

    def test_dry_run_summary(self, tmp_path: Path):
        out = _capture(_report(tmp_path, dry_run=True), tmp_path)
        assert "dry run" in out
        assert "Would write:" in out

    def test_everything_up_to_date(self, tmp_path: Path):
        report = RenderReport(
            actions=[Action(tmp_path / "x", "t", "s", "x.jinja", FileStatus.UNCHANGED, Decision.SKIP)]
        )
        assert "Everything is up to date" in _capture(report, tmp_path, show_summary=False)

    def test_nothing_to_render(self, tmp_path: Path):
        assert "No templates to render" in _capture(RenderReport(), tmp_path)
