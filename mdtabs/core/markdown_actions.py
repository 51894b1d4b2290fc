"""Markdown formatting applied to an editor selection.

The functions here are pure.  They take the document text and a selection
and return a :class:`TextEdit` describing one replacement, which any
editing surface can apply (and undo) in a single step.

Locations are 0-based ``(row, column)`` pairs, the convention of Textual's
``TextArea``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

Location = tuple[int, int]

INLINE_MARKERS: dict[str, tuple[str, str]] = {
    "bold": ("**", "**"),
    "italic": ("*", "*"),
    "strikethrough": ("~~", "~~"),
    "code": ("`", "`"),
}

HEADING_LEVELS: dict[str, int] = {"h1": 1, "h2": 2, "h3": 3}

BLOCK_PREFIXES: dict[str, str] = {
    "ul": "- ",
    "ol": "1. ",
    "task": "- [ ] ",
    "quote": "> ",
}

_BLOCK_PLACEHOLDERS = {
    "ul": "List item",
    "ol": "List item",
    "task": "Task item",
    "quote": "Quote text",
}

# "heading" cycles the line through levels 1-3 and back to plain text.
ACTIONS: tuple[str, ...] = (
    *INLINE_MARKERS,
    *HEADING_LEVELS,
    "heading",
    *BLOCK_PREFIXES,
)

_HEADING = re.compile(r"^(#{1,6})\s*(.*)$")


@dataclass(frozen=True)
class TextEdit:
    """Replace ``start``..``end`` with ``text``, then put the cursor at ``cursor``."""

    start: Location
    end: Location
    text: str
    cursor: Location


def toggle_heading(line: str, level: int) -> str:
    """Give *line* heading *level*; a line already at that level loses it."""
    match = _HEADING.match(line)
    if match is None:
        return f"{'#' * level} {line}"
    if len(match.group(1)) == level:
        return match.group(2)
    return f"{'#' * level} {match.group(2)}"


def cycle_heading(line: str) -> str:
    """plain -> h1 -> h2 -> h3 -> plain."""
    match = _HEADING.match(line)
    if match is None:
        return f"# {line}"
    level = len(match.group(1))
    if level >= 3:
        return match.group(2)
    return f"{'#' * (level + 1)} {match.group(2)}"


def format_line(action: str, line: str, number: int = 1) -> str:
    if action in INLINE_MARKERS:
        opening, closing = INLINE_MARKERS[action]
        return f"{opening}{line}{closing}"
    if action in HEADING_LEVELS:
        return toggle_heading(line, HEADING_LEVELS[action])
    if action == "heading":
        return cycle_heading(line)
    if action == "ol":
        return f"{number}. {line}"
    return BLOCK_PREFIXES[action] + line


def apply_action(
    action: str, text: str, selection_start: Location, selection_end: Location
) -> TextEdit:
    """Work out the edit that applies *action* to the selection in *text*.

    A selection spanning several lines formats each non-blank line.  A
    selection within one line is replaced by its formatted form.  With no
    selection, inline actions insert a placeholder and put the cursor on it,
    and block actions insert a placeholder line.  ``heading`` always works
    on whole lines.
    """
    if action not in ACTIONS:
        raise ValueError(f"unknown formatting action: {action}")
    lines = text.split("\n")
    start, end = sorted((_clamp(lines, selection_start), _clamp(lines, selection_end)))
    if end[0] > start[0] and end[1] == 0:
        # A selection ending at column 0 does not include that line.
        end = (end[0] - 1, len(lines[end[0] - 1]))

    if end[0] > start[0]:
        return _format_lines(action, lines, start[0], end[0], skip_blank=True)
    if action == "heading":
        return _format_lines(action, lines, start[0], start[0], skip_blank=False)
    selected = lines[start[0]][start[1] : end[1]]
    if selected:
        replacement = format_line(action, selected)
        return TextEdit(start, end, replacement, _end_of(replacement, start))
    return _insert_placeholder(action, lines, start)


def _clamp(lines: list[str], location: Location) -> Location:
    row = max(0, min(location[0], len(lines) - 1))
    col = max(0, min(location[1], len(lines[row])))
    return (row, col)


def _end_of(text: str, start: Location) -> Location:
    """The location just past *text* once it is inserted at *start*."""
    parts = text.split("\n")
    if len(parts) == 1:
        return (start[0], start[1] + len(text))
    return (start[0] + len(parts) - 1, len(parts[-1]))


def _format_lines(
    action: str, lines: list[str], first: int, last: int, *, skip_blank: bool
) -> TextEdit:
    block = [
        line
        if skip_blank and not line.strip()
        else format_line(action, line, number)
        for number, line in enumerate(lines[first : last + 1], start=1)
    ]
    return TextEdit(
        start=(first, 0),
        end=(last, len(lines[last])),
        text="\n".join(block),
        cursor=(last, len(block[-1])),
    )


def _insert_placeholder(action: str, lines: list[str], at: Location) -> TextEdit:
    row, col = at
    if action in INLINE_MARKERS:
        opening, closing = INLINE_MARKERS[action]
        placeholder = "code" if action == "code" else "text"
        return TextEdit(
            at, at, f"{opening}{placeholder}{closing}", (row, col + len(opening))
        )

    if action in HEADING_LEVELS:
        level = HEADING_LEVELS[action]
        replacement = f"{'#' * level} Heading {level}"
    else:
        replacement = BLOCK_PREFIXES[action] + _BLOCK_PLACEHOLDERS[action]
    if not lines[row].strip():
        # Blank line: the placeholder takes the place of any indentation.
        return TextEdit((row, 0), at, replacement, (row, len(replacement)))
    return TextEdit(at, at, "\n" + replacement, (row + 1, len(replacement)))
