"""Export of tab documents to standalone HTML."""

from __future__ import annotations

import html
from pathlib import Path
from typing import Callable

from markdown_it import MarkdownIt

from ..log import logger
from .component import Component, ComponentHost
from .file_io import FileIO, FileIOPort, normalize_path
from .tab_manager import TabManager

_EXPORT_STYLES = """\
body {
  font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Helvetica, Arial, sans-serif;
  line-height: 1.6;
  max-width: 800px;
  margin: 0 auto;
  padding: 20px;
  color: #24292f;
}
h1, h2 { border-bottom: 1px solid #d0d7de; padding-bottom: 0.3em; }
code { background-color: #f6f8fa; padding: 0.2em 0.4em; border-radius: 6px; }
pre { background-color: #f6f8fa; padding: 16px; border-radius: 6px; overflow: auto; }
pre code { padding: 0; }
blockquote { border-left: 0.25em solid #d0d7de; padding: 0 1em; color: #656d76; }
table { border-collapse: collapse; width: 100%; }
th, td { border: 1px solid #d0d7de; padding: 6px 13px; text-align: left; }
th { background-color: #f6f8fa; }"""

_md = MarkdownIt("commonmark", {"html": False, "typographer": True}).enable(
    ["table", "strikethrough"]
)


def render_markdown(text: str) -> str:
    """Render markdown *text* to an HTML fragment."""
    return _md.render(text)


def build_html_document(body: str, title: str = "Exported Markdown") -> str:
    """Wrap an HTML fragment in a standalone, styled page."""
    return (
        "<!DOCTYPE html>\n"
        '<html lang="en">\n'
        "<head>\n"
        '<meta charset="UTF-8">\n'
        '<meta name="viewport" content="width=device-width, initial-scale=1.0">\n'
        f"<title>{html.escape(title)}</title>\n"
        f"<style>\n{_EXPORT_STYLES}\n</style>\n"
        "</head>\n"
        "<body>\n"
        f"{body}"
        "</body>\n"
        "</html>\n"
    )


def default_export_path(source: str | None, file_name: str) -> str:
    """Suggest ``<name>.html`` next to the source file (or in the cwd)."""
    return str(Path(source or file_name).with_suffix(".html"))


class ExportController(ComponentHost):
    """Writes the active (or given) tab as an HTML document.

    Events: ``export-completed{tab, path}``, ``export-error{path, error}``.
    """

    def __init__(
        self,
        tab_manager: TabManager,
        io: FileIOPort | None = None,
        *,
        render: Callable[[str], str] = render_markdown,
    ) -> None:
        self.component = Component("ExportController", self)
        self.tab_manager = tab_manager
        self.io: FileIOPort = io or FileIO()
        self.render = render

    async def export_html(
        self, tab_id: str | None = None, path: str | None = None
    ) -> str | None:
        """Export a tab and return the written path, or None on failure."""
        tab = (
            self.tab_manager.get_tab(tab_id)
            if tab_id is not None
            else self.tab_manager.get_active_tab()
        )
        if tab is None:
            return None
        target = normalize_path(path or default_export_path(tab.file_path, tab.file_name))
        document = build_html_document(self.render(tab.content), title=tab.file_name)
        try:
            await self.io.write(target, document)
        except OSError as exc:
            logger.warning("HTML export to %s failed: %s", target, exc)
            self.emit("export-error", {"path": target, "error": exc})
            return None
        self.emit("export-completed", {"tab": tab, "path": target})
        return target
