"""Tests for project/theme config loading, path expansion, and discovery."""

from pathlib import Path

import pytest

from theymer.config.loader import expand_and_resolve, find_project_root, load_config
from theymer.config.schema import ProjectType
from theymer.errors import ConfigError
from theymer.themes import config as theme_config


class TestProjectRoot:
    def test_finds_nearest_ancestor(self, tmp_path: Path):
        (tmp_path / "theymer.toml").write_text("")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_project_root(nested) == tmp_path.resolve()

    def test_missing_everywhere_raises(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="theymer.toml"):
            find_project_root(tmp_path)

    def test_does_not_change_cwd(self, tmp_path: Path, monkeypatch):
        (tmp_path / "theymer.toml").write_text("")
        nested = tmp_path / "sub"
        nested.mkdir()
        monkeypatch.chdir(nested)
        load_config()
        assert Path.cwd() == nested.resolve()


class TestConfigLoading:
    def test_empty_file_uses_defaults(self, tmp_path: Path):
        (tmp_path / "theymer.toml").write_text("")
        cfg = load_config(tmp_path)
        root = tmp_path.resolve()
        assert cfg.project.type is ProjectType.MONOTHEME
        assert cfg.project.render_all_into is None
        assert cfg.dirs.templates == root / "templates"
        assert cfg.dirs.render == root / "render"
        assert cfg.strip_directives == [["#:tombi"]]
        assert [p.host for p in cfg.providers][:1] == ["github.com"]
        assert cfg.formatters == {}

    def test_custom_toml(self, tmp_path: Path):
        (tmp_path / "theymer.toml").write_text(
            'strip_directives = [["#:schema"], ["#", "vim:"]]\n'
            "[project]\n"
            "polytheme = true\n"
            'render_all_into = "dist"\n'
            "[dirs]\n"
            'themes = "src/themes"\n'
            "[[provider]]\n"
            'host = "gitlab.com"\n'
            'branch = "release"\n'
            "[format]\n"
            '"*.toml" = ["tombi", "format"]\n'
        )
        cfg = load_config(tmp_path)
        root = tmp_path.resolve()
        assert cfg.project.type is ProjectType.POLYTHEME
        assert cfg.project.render_all_into == root / "dist"
        assert cfg.dirs.themes == root / "src" / "themes"
        assert cfg.dirs.schemes == root / "schemes"
        assert cfg.strip_directives == [["#:schema"], ["#", "vim:"]]
        gitlab = next(p for p in cfg.providers if p.host == "gitlab.com")
        assert gitlab.branch == "release"
        assert gitlab.blob_path == "{host}/{owner}/{repo}/-/blob/{ref}/{file}"
        assert cfg.formatters == {"*.toml": ["tombi", "format"]}

    def test_empty_render_all_into_is_unset(self, tmp_path: Path):
        (tmp_path / "theymer.toml").write_text('[project]\nrender_all_into = ""\n')
        assert load_config(tmp_path).project.render_all_into is None

    def test_invalid_toml_raises(self, tmp_path: Path):
        (tmp_path / "theymer.toml").write_text("this is not valid [toml")
        with pytest.raises(ConfigError):
            load_config(tmp_path)

    def test_invalid_utf8_raises(self, tmp_path: Path):
        (tmp_path / "theymer.toml").write_bytes(b"[project]\nname = \"\xff\"\n")
        with pytest.raises(ConfigError, match="theymer.toml"):
            load_config(tmp_path)

    def test_provider_without_host_raises(self, tmp_path: Path):
        (tmp_path / "theymer.toml").write_text('[[provider]]\nbranch = "main"\n')
        with pytest.raises(ConfigError, match="host"):
            load_config(tmp_path)

    def test_unknown_keys_ignored(self, tmp_path: Path):
        (tmp_path / "theymer.toml").write_text('[dirs]\nunknown = "x"\n')
        assert load_config(tmp_path).dirs.themes == tmp_path.resolve() / "themes"


class TestPathExpansion:
    def test_env_var(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("THEYMER_OUT", str(tmp_path / "out"))
        assert expand_and_resolve("$THEYMER_OUT/x", Path("/root")) == tmp_path / "out" / "x"
        assert expand_and_resolve("${THEYMER_OUT}/y", Path("/root")) == tmp_path / "out" / "y"

    def test_tilde(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert expand_and_resolve("~/themes", Path("/root")) == tmp_path / "themes"

    def test_relative_hangs_off_root(self, tmp_path: Path):
        assert expand_and_resolve("render", tmp_path) == tmp_path / "render"

    def test_undefined_variable_raises(self, monkeypatch):
        monkeypatch.delenv("THEYMER_NOPE", raising=False)
        with pytest.raises(ConfigError, match="THEYMER_NOPE"):
            expand_and_resolve("$THEYMER_NOPE/x", Path("/root"))


class TestThemeConfig:
    def _polytheme(self, tmp_path: Path, project: str = "", theme: str | None = None):
        (tmp_path / "theymer.toml").write_text("[project]\npolytheme = true\n" + project)
        theme_dir = tmp_path / "themes" / "forest"
        theme_dir.mkdir(parents=True)
        if theme is not None:
            (theme_dir / "theymer.toml").write_text(theme)
        return load_config(tmp_path), theme_dir.resolve()

    def test_defaults_without_file(self, tmp_path: Path):
        cfg, theme_dir = self._polytheme(tmp_path)
        tc = theme_config.load(theme_dir, "forest", cfg)
        assert tc.path is None
        assert tc.inherit is False
        assert tc.dirs.schemes == theme_dir / "schemes"
        assert tc.dirs.render == theme_dir / "render"
        assert tc.dirs.templates == cfg.dirs.templates

    def test_inherit_uses_shared_render_target(self, tmp_path: Path):
        cfg, theme_dir = self._polytheme(
            tmp_path, project='render_all_into = "dist"\n', theme="inherit = true\n"
        )
        tc = theme_config.load(theme_dir, "forest", cfg)
        assert tc.dirs.render == tmp_path.resolve() / "dist" / "forest"

    def test_explicit_dirs_override_defaults(self, tmp_path: Path):
        cfg, theme_dir = self._polytheme(
            tmp_path, theme='[dirs]\nrender = "out"\nschemes = "palettes"\n'
        )
        tc = theme_config.load(theme_dir, "forest", cfg)
        assert tc.dirs.render == theme_dir / "out"
        assert tc.dirs.schemes == theme_dir / "palettes"

    def test_monotheme_uses_project_dirs(self, tmp_path: Path):
        (tmp_path / "theymer.toml").write_text('[project]\nrender_all_into = "dist"\n')
        cfg = load_config(tmp_path)
        tc = theme_config.load(cfg.root, cfg.root.name, cfg)
        assert tc.dirs.render == cfg.root / "dist"
        assert tc.dirs.schemes == cfg.root / "schemes"

    def test_expanded_dollar_is_not_expanded_again(self, tmp_path: Path, monkeypatch):
        out = tmp_path / "out$weird"
        monkeypatch.setenv("THEYMER_OUT", str(out))
        monkeypatch.delenv("weird", raising=False)
        (tmp_path / "theymer.toml").write_text('[project]\nrender_all_into = "$THEYMER_OUT"\n')
        cfg = load_config(tmp_path)
        assert cfg.project.render_all_into == out
        tc = theme_config.load(cfg.root, cfg.root.name, cfg)
        assert tc.dirs.render == out

    def test_theme_directory_with_dollar(self, tmp_path: Path):
        (tmp_path / "theymer.toml").write_text("[project]\npolytheme = true\n")
        theme_dir = tmp_path / "themes" / "odd$name"
        theme_dir.mkdir(parents=True)
        cfg = load_config(tmp_path)
        tc = theme_config.load(cfg.dirs.themes / "odd$name", "odd$name", cfg)
        assert tc.dirs.schemes == cfg.dirs.themes / "odd$name" / "schemes"
        assert tc.dirs.render == cfg.dirs.themes / "odd$name" / "render"

    def test_theme_overrides_are_expanded(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("THEYMER_PALETTES", str(tmp_path / "shared"))
        cfg, theme_dir = self._polytheme(tmp_path, theme='[dirs]\nschemes = "$THEYMER_PALETTES"\n')
        tc = theme_config.load(theme_dir, "forest", cfg)
        assert tc.dirs.schemes == tmp_path / "shared"
        assert tc.dirs.render == theme_dir / "render"
