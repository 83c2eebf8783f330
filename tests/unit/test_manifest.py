"""Tests for primary-theme.toml loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from primary_theme.core.errors import ConfigError
from primary_theme.core.ir import CompileOptions, ThemeMode
from primary_theme.core.manifest import CONFIG_FILENAME, find_config, load_config


def _write(tmp_path: Path, text: str, name: str = CONFIG_FILENAME) -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadConfig:
    def test_key_spellings(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            """
[theme]
theme_mode = "dark"
typo-responsive = false
primaryColor = "ocean"
maxViewportPx = 1440
""",
        )
        config = load_config(path)
        assert config.options == {
            "theme_mode": "dark",
            "typo_responsive": False,
            "primary_color": "ocean",
            "max_viewport_px": 1440,
        }
        options = CompileOptions.model_validate(config.options)
        assert options.theme_mode == ThemeMode.DARK
        assert options.max_viewport_px == 1440

    def test_build_section(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path,
            """
[build]
inputs = ["tokens/primitives.json", "tokens/semantic.json:dark"]
out = "site"
""",
        )
        config = load_config(path)
        assert config.build.inputs == ["tokens/primitives.json", "tokens/semantic.json:dark"]
        assert config.build.out == "site"
        assert config.resolve("site") == tmp_path / "site"
        assert config.resolve(str(tmp_path / "abs")) == tmp_path / "abs"

    def test_custom_colors_file_is_read(self, tmp_path: Path) -> None:
        (tmp_path / "custom.css").write_text("--color-brand-500: #336699;\n", encoding="utf-8")
        path = _write(tmp_path, '[theme]\ncustom_colors_file = "custom.css"\n')
        config = load_config(path)
        assert config.options == {"custom_colors_text": "--color-brand-500: #336699;\n"}

    def test_missing_custom_colors_file(self, tmp_path: Path) -> None:
        path = _write(tmp_path, '[theme]\ncustom-colors-file = "nope.css"\n')
        with pytest.raises(ConfigError, match="custom colors file"):
            load_config(path)

    def test_unknown_key(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "[theme]\nbogus = 1\n")
        with pytest.raises(ConfigError, match=r"\[theme\] bogus"):
            load_config(path)

    def test_invalid_value(self, tmp_path: Path) -> None:
        path = _write(tmp_path, '[theme]\nthemeMode = "sepia"\n')
        with pytest.raises(ConfigError, match="theme_mode"):
            load_config(path)

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "[theme\n")
        with pytest.raises(ConfigError, match="invalid TOML"):
            load_config(path)

    def test_sections_must_be_tables(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "theme = 1\n")
        with pytest.raises(ConfigError, match="must be tables"):
            load_config(path)

    def test_inputs_must_be_paths(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "[build]\ninputs = [1, 2]\n")
        with pytest.raises(ConfigError, match="inputs"):
            load_config(path)

    def test_error_names_the_file(self, tmp_path: Path) -> None:
        path = _write(tmp_path, "[theme\n")
        with pytest.raises(ConfigError) as exc_info:
            load_config(path)
        assert exc_info.value.context is not None
        assert exc_info.value.context.document == str(path)


class TestFindConfig:
    def test_explicit_path_must_exist(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="not found"):
            find_config(tmp_path / "missing.toml")

    def test_explicit_path(self, tmp_path: Path) -> None:
        path = _write(tmp_path, '[theme]\nprimary_color = "ocean"\n', name="other.toml")
        assert find_config(path).options == {"primary_color": "ocean"}

    def test_discovered_in_working_directory(self, tmp_path: Path) -> None:
        _write(tmp_path, '[theme]\ntheme_mode = "light"\n')
        config = find_config(cwd=tmp_path)
        assert config.path == tmp_path / CONFIG_FILENAME
        assert config.options == {"theme_mode": "light"}

    def test_no_config_file(self, tmp_path: Path) -> None:
        config = find_config(cwd=tmp_path)
        assert config.path is None
        assert config.options == {}
        assert config.build.inputs == []
