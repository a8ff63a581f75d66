"""Renders session state with rich."""

from __future__ import annotations

from collections.abc import Callable

from rich import box
from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.style import Style
from rich.table import Table
from rich.text import Text

from glyphfind._state import SessionState
from glyphfind._ucd import REPLACEMENT_CHARACTER, Entry

CURSOR = "█"
HIGHLIGHT_SYMBOL = "|> "
# title + search panel (3) + table top border, header, header rule, bottom border
CHROME_ROWS = 8

SELECTED_STYLE = Style(reverse=True)
HEADER_STYLE = Style(color="white", bold=True)


def display_glyph(entry: Entry) -> str:
    """Glyph safe to draw in a table cell."""
    glyph = entry.glyph
    return glyph if glyph.isprintable() else REPLACEMENT_CHARACTER


class Presenter:
    """
    Draws the title, the search box and the visible slice of the result table.

    The presenter never touches the session state; it only keeps its own
    scroll offset so the selected row stays on screen.
    """

    def __init__(
        self,
        target: Callable[[RenderableType], object],
        console: Console,
        title: str = "glyphfind",
    ):
        self._target = target
        self._console = console
        self._title = title
        self._offset = 0

    @property
    def visible_rows(self) -> int:
        return max(self._console.size.height - CHROME_ROWS, 1)

    def _scroll(self, selection: int, total: int, rows: int) -> int:
        offset = min(self._offset, max(total - rows, 0))
        if selection >= offset + rows:
            offset = selection - rows + 1
        elif selection < offset:
            offset = selection
        self._offset = offset
        return offset

    def _table(self, state: SessionState) -> Table:
        table = Table(
            box=box.ROUNDED,
            expand=True,
            header_style=HEADER_STYLE,
            show_lines=False,
        )
        table.add_column("", width=len(HIGHLIGHT_SYMBOL), no_wrap=True)
        table.add_column("Char", ratio=1, no_wrap=True)
        table.add_column("Code", ratio=1, no_wrap=True)
        table.add_column("Name", ratio=4, no_wrap=True, overflow="ellipsis")
        table.add_column("Unicode 1.0 Name", ratio=4, no_wrap=True, overflow="ellipsis")

        rows = self.visible_rows
        offset = self._scroll(state.selection, len(state.view), rows)
        for index, entry in enumerate(state.view[offset : offset + rows], start=offset):
            selected = index == state.selection
            table.add_row(
                HIGHLIGHT_SYMBOL if selected else "",
                Text(display_glyph(entry)),
                entry.formatted_codepoint,
                Text(entry.name),
                Text(entry.legacy_name),
                style=SELECTED_STYLE if selected else None,
            )
        return table

    def render(self, state: SessionState) -> RenderableType:
        title = Text(self._title, style="bold")
        search = Panel(
            Text(state.query + CURSOR),
            title=" Search ",
            title_align="left",
            box=box.ROUNDED,
        )
        return Group(title, search, self._table(state))

    def present(self, state: SessionState) -> None:
        self._target(self.render(state))
