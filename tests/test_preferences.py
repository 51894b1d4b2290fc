"""Tests for mdtabs.preferences.

Covers load_preferences defaults, validation and the surgical save_*
functions.  All file I/O uses tmp_path so nothing touches the real user
config.
"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from mdtabs.preferences import (
    Preferences,
    load_preferences,
    save_default_mode,
    save_theme_name,
)


class TestLoadPreferencesDefaults:
    """When no file exists, load_preferences returns sensible defaults."""

    def test_defaults_when_no_file(self, tmp_path: Path):
        prefs = load_preferences(tmp_path / "nonexistent.yaml")
        assert prefs.editor.default_mode == "preview"
        assert prefs.editor.soft_wrap is True
        assert prefs.tabs.max_tabs == 50
        assert prefs.tabs.warn_at == 45
        assert prefs.display.theme == "dark"
        assert prefs.confirm_on_close is True

    def test_creates_default_file(self, tmp_path: Path):
        path = tmp_path / "prefs.yaml"
        load_preferences(path)
        assert path.exists()
        data = yaml.safe_load(path.read_text())
        assert data["editor"]["default_mode"] == "preview"

    def test_env_home(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("MDTABS_HOME", str(tmp_path / "home"))
        load_preferences()
        assert (tmp_path / "home" / "preferences.yaml").exists()


class TestLoadPreferencesFromFile:
    def test_reads_values(self, tmp_path: Path):
        path = tmp_path / "prefs.yaml"
        path.write_text(
            "editor:\n"
            "  default_mode: split\n"
            "  soft_wrap: false\n"
            "tabs:\n"
            "  max_tabs: 20\n"
            "  warn_at: 15\n"
            "display:\n"
            "  theme: solarized\n"
            "confirm:\n"
            "  on_close: false\n"
        )
        prefs = load_preferences(path)
        assert prefs.editor.default_mode == "split"
        assert prefs.editor.soft_wrap is False
        assert (prefs.tabs.max_tabs, prefs.tabs.warn_at) == (20, 15)
        assert prefs.display.theme == "solarized"
        assert prefs.confirm_on_close is False

    def test_unknown_values_ignored(self, tmp_path: Path):
        path = tmp_path / "prefs.yaml"
        path.write_text(
            "editor:\n  default_mode: fullscreen\n"
            "display:\n  theme: neon\n"
            "tabs:\n  max_tabs: -4\n"
        )
        prefs = load_preferences(path)
        assert prefs.editor.default_mode == "preview"
        assert prefs.display.theme == "dark"
        assert prefs.tabs.max_tabs == 50

    def test_limits_are_capped(self, tmp_path: Path):
        path = tmp_path / "prefs.yaml"
        path.write_text("tabs:\n  max_tabs: 500\n  warn_at: 400\n")
        prefs = load_preferences(path)
        assert prefs.tabs.max_tabs == 50
        assert prefs.tabs.warn_at == 50

    def test_invalid_yaml_falls_back(self, tmp_path: Path):
        path = tmp_path / "prefs.yaml"
        path.write_text("editor: [unclosed\n")
        assert load_preferences(path) == Preferences()

    def test_non_mapping_falls_back(self, tmp_path: Path):
        path = tmp_path / "prefs.yaml"
        path.write_text("- just\n- a list\n")
        assert load_preferences(path) == Preferences()


class TestSavePreferences:
    def test_save_default_mode_round_trip(self, tmp_path: Path):
        path = tmp_path / "prefs.yaml"
        load_preferences(path)
        save_default_mode("split", path)
        assert load_preferences(path).editor.default_mode == "split"

    def test_save_preserves_comments(self, tmp_path: Path):
        path = tmp_path / "prefs.yaml"
        load_preferences(path)
        save_theme_name("light", path)
        text = path.read_text()
        assert "# mdtabs Preferences" in text
        assert "theme: light" in text
        assert load_preferences(path).display.theme == "light"

    def test_save_creates_file(self, tmp_path: Path):
        path = tmp_path / "new" / "prefs.yaml"
        save_theme_name("solarized", path)
        assert load_preferences(path).display.theme == "solarized"

    def test_save_adds_missing_section(self, tmp_path: Path):
        path = tmp_path / "prefs.yaml"
        path.write_text("editor:\n  soft_wrap: true\n")
        save_theme_name("light", path)
        prefs = load_preferences(path)
        assert prefs.display.theme == "light"
        assert prefs.editor.soft_wrap is True

    def test_unknown_values_rejected(self, tmp_path: Path):
        with pytest.raises(ValueError):
            save_default_mode("fullscreen", tmp_path / "p.yaml")
        with pytest.raises(ValueError):
            save_theme_name("neon", tmp_path / "p.yaml")
