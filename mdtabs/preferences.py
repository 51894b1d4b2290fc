"""User preferences for mdtabs.

Loads settings from ~/.mdtabs/preferences.yaml (or $MDTABS_HOME).
Falls back to sensible defaults if the file doesn't exist or is invalid.
Creates a default file on first run so users can discover and edit it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .constants import MAX_TABS, MODES, TAB_WARNING_THRESHOLD, mdtabs_home
from .log import logger

THEME_NAMES: tuple[str, ...] = ("dark", "light", "solarized")

_DEFAULT_YAML = """\
# mdtabs Preferences
# Delete this file to reset to defaults.

editor:
  default_mode: preview          # code | preview | split
  soft_wrap: true                # wrap long lines in the editor
  show_line_numbers: true        # gutter line numbers in the editor

tabs:
  max_tabs: 50                   # hard limit on open tabs
  warn_at: 45                    # warn when this many tabs are open

display:
  theme: dark                    # dark | light | solarized

confirm:
  on_close: true                 # ask before closing unsaved tabs
"""


def preferences_path() -> Path:
    return mdtabs_home() / "preferences.yaml"


@dataclass
class EditorPreferences:
    """Settings for the editing surface."""

    default_mode: str = "preview"
    soft_wrap: bool = True
    show_line_numbers: bool = True


@dataclass
class TabPreferences:
    max_tabs: int = MAX_TABS
    warn_at: int = TAB_WARNING_THRESHOLD  # Warn (not block) from this many tabs


@dataclass
class DisplayPreferences:
    theme: str = "dark"


@dataclass
class Preferences:
    """Top-level mdtabs preferences."""

    editor: EditorPreferences = field(default_factory=EditorPreferences)
    tabs: TabPreferences = field(default_factory=TabPreferences)
    display: DisplayPreferences = field(default_factory=DisplayPreferences)
    confirm_on_close: bool = True


def _positive_int(value: object, fallback: int) -> int:
    try:
        number = int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        return fallback
    return number if number > 0 else fallback


def load_preferences(path: Path | None = None) -> Preferences:
    """Load preferences from YAML file.

    Falls back to sensible defaults if the file doesn't exist or is invalid.
    Creates a default preferences file on first run.
    """
    path = path or preferences_path()
    prefs = Preferences()

    if path.exists():
        try:
            data = yaml.safe_load(path.read_text()) or {}
            if not isinstance(data, dict):
                raise ValueError("preferences file is not a mapping")
            if isinstance(data.get("editor"), dict):
                edata = data["editor"]
                mode = str(edata.get("default_mode", prefs.editor.default_mode))
                if mode in MODES:
                    prefs.editor.default_mode = mode
                if "soft_wrap" in edata:
                    prefs.editor.soft_wrap = bool(edata["soft_wrap"])
                if "show_line_numbers" in edata:
                    prefs.editor.show_line_numbers = bool(edata["show_line_numbers"])
            if isinstance(data.get("tabs"), dict):
                tdata = data["tabs"]
                prefs.tabs.max_tabs = min(
                    _positive_int(tdata.get("max_tabs"), MAX_TABS), MAX_TABS
                )
                prefs.tabs.warn_at = min(
                    _positive_int(tdata.get("warn_at"), TAB_WARNING_THRESHOLD),
                    prefs.tabs.max_tabs,
                )
            if isinstance(data.get("display"), dict):
                theme = str(data["display"].get("theme", prefs.display.theme))
                if theme in THEME_NAMES:
                    prefs.display.theme = theme
            if isinstance(data.get("confirm"), dict):
                cdata = data["confirm"]
                if "on_close" in cdata:
                    prefs.confirm_on_close = bool(cdata["on_close"])
        except (OSError, ValueError, yaml.YAMLError):
            logger.warning("invalid preferences in %s, using defaults", path, exc_info=True)
            return Preferences()
    else:
        # Create default file for user to customize
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(_DEFAULT_YAML)
        except OSError:
            logger.debug("could not write default preferences to %s", path, exc_info=True)

    return prefs


def _save_value(section: str, key: str, value: str, path: Path | None) -> None:
    """Surgically set ``section.key`` in the preferences file.

    Preserves user comments and the other sections as-is.
    """
    path = path or preferences_path()
    try:
        if path.exists():
            text = path.read_text()
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            text = _DEFAULT_YAML

        if re.search(rf"^\s+{key}:", text, re.MULTILINE):
            text = re.sub(
                rf"^(\s+{key}:)\s*\S*(.*)$",
                rf"\g<1> {value}\g<2>",
                text,
                count=1,
                flags=re.MULTILINE,
            )
        elif re.search(rf"^{section}:", text, re.MULTILINE):
            text = re.sub(
                rf"^({section}:.*)$",
                rf"\g<1>\n  {key}: {value}",
                text,
                count=1,
                flags=re.MULTILINE,
            )
        else:
            text = text.rstrip() + f"\n\n{section}:\n  {key}: {value}\n"

        path.write_text(text)
    except OSError:
        logger.debug("failed to save %s.%s", section, key, exc_info=True)


def save_default_mode(mode: str, path: Path | None = None) -> None:
    """Persist the layout mode used at startup."""
    if mode not in MODES:
        raise ValueError(f"unknown mode: {mode}")
    _save_value("editor", "default_mode", mode, path)


def save_theme_name(theme: str, path: Path | None = None) -> None:
    if theme not in THEME_NAMES:
        raise ValueError(f"unknown theme: {theme}")
    _save_value("display", "theme", theme, path)
