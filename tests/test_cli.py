"""Tests for the theymer command line."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from theymer import __version__
from theymer.cli import app
from theymer.config.defaults import DEFAULT_TOML, POLYTHEME_TOML

runner = CliRunner()


@pytest.fixture
def in_project(project: Path, monkeypatch) -> Path:
    monkeypatch.chdir(project)
    return project


class TestVersion:
    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert f"theymer {__version__}" in result.output


class TestInit:
    def test_creates_config(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, ["init"])
        assert result.exit_code == 0
        assert (tmp_path / "theymer.toml").read_text() == DEFAULT_TOML

    def test_polytheme(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        runner.invoke(app, ["init", "--polytheme"])
        assert (tmp_path / "theymer.toml").read_text() == POLYTHEME_TOML

    def test_refuses_to_overwrite(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "theymer.toml").write_text("# mine\n")
        result = runner.invoke(app, ["init"])
        assert result.exit_code == 1
        assert (tmp_path / "theymer.toml").read_text() == "# mine\n"


class TestRender:
    def test_renders_project(self, in_project: Path):
        result = runner.invoke(app, ["render"])
        assert result.exit_code == 0
        assert (in_project / "render" / "forest-dark.conf").exists()
        assert (in_project / ".theymer" / "index.json").exists()

    def test_dry_run_writes_nothing(self, in_project: Path):
        result = runner.invoke(app, ["render", "--dry-run"])
        assert result.exit_code == 0
        assert not (in_project / "render").exists()

    def test_conflict_exit_code(self, in_project: Path):
        runner.invoke(app, ["render"])
        (in_project / "render" / "forest-dark.conf").write_text("mine\n")
        result = runner.invoke(app, ["render"])
        assert result.exit_code == 1
        assert (in_project / "render" / "forest-dark.conf").read_text() == "mine\n"

    def test_force_resolves_conflict(self, in_project: Path):
        runner.invoke(app, ["render"])
        (in_project / "render" / "forest-dark.conf").write_text("mine\n")
        assert runner.invoke(app, ["render", "--force"]).exit_code == 0
        assert runner.invoke(app, ["render"]).exit_code == 0

    def test_outside_project_is_an_error(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, ["render"])
        assert result.exit_code == 2

    def test_invalid_format(self, in_project: Path):
        assert runner.invoke(app, ["render", "--format", "xml"]).exit_code == 2


class TestStatus:
    def test_json_status(self, in_project: Path):
        runner.invoke(app, ["render"])
        result = runner.invoke(app, ["status", "--format", "json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["dry_run"] is True
        assert data["files"] == 2
        assert data["skipped"] == 2
        decisions = {a["path"]: a["decision"] for a in data["actions"]}
        assert decisions == {
            "render/forest-dark.conf": "skip",
            "render/forest-light.conf": "skip",
        }

    def test_status_leaves_conflicts_alone(self, in_project: Path):
        runner.invoke(app, ["render"])
        (in_project / "render" / "forest-light.conf").write_text("mine\n")
        result = runner.invoke(app, ["status"])
        assert result.exit_code == 0
        assert (in_project / "render" / "forest-light.conf").read_text() == "mine\n"
