"""Theme definitions for mdtabs.

Each theme name in ``preferences.THEME_NAMES`` has a Textual Theme that
controls the base UI colors ($background, $surface, $panel, $primary, ...)
used by styles.tcss.
"""

from textual.theme import Theme

TEXTUAL_THEMES: dict[str, Theme] = {
    "dark": Theme(
        name="mdtabs-dark",
        primary="#cc7700",
        secondary="#5599dd",
        accent="#445566",
        background="black",
        surface="#111111",
        panel="#333333",
        success="#5599dd",
        warning="#aaaa00",
        error="#cc3333",
        dark=True,
    ),
    "light": Theme(
        name="mdtabs-light",
        primary="#cc6600",
        secondary="#4488aa",
        accent="#667788",
        background="#fafafa",
        surface="#f0f0f0",
        panel="#cccccc",
        success="#338855",
        warning="#aa8800",
        error="#cc3333",
        dark=False,
    ),
    "solarized": Theme(
        name="mdtabs-solarized",
        primary="#b58900",
        secondary="#268bd2",
        accent="#6c71c4",
        background="#002b36",
        surface="#073642",
        panel="#586e75",
        success="#859900",
        warning="#cb4b16",
        error="#dc322f",
        dark=True,
    ),
}

DEFAULT_THEME = TEXTUAL_THEMES["dark"]


def textual_theme_for(name: str) -> Theme:
    return TEXTUAL_THEMES.get(name, DEFAULT_THEME)
