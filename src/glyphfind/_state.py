"""Mutable view model of an interactive session."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from glyphfind._rank import rank
from glyphfind._ucd import Entry


@dataclass
class SessionState:
    """
    Query, ranked view, selection cursor and exit choice.

    Only the update loop mutates this; the presenter reads it.
    """

    query: str = ""
    view: list[Entry] = field(default_factory=list)
    selection: int = 0
    exit_choice: str | None = None

    @classmethod
    def for_store(cls, store: Sequence[Entry]) -> SessionState:
        """Initial state: empty query showing the whole store."""
        return cls(view=list(store))

    @property
    def selected(self) -> Entry | None:
        if 0 <= self.selection < len(self.view):
            return self.view[self.selection]
        return None

    def type_char(self, char: str, shift: bool = False) -> None:
        self.query += char.upper() if shift else char

    def delete_backward(self) -> None:
        self.query = self.query[:-1]

    def move_down(self, count: int = 1) -> None:
        """Move the cursor down, wrapping past the last row back to the top."""
        total = len(self.view)
        if not total:
            self.selection = 0
            return
        self.selection = (self.selection + count) % total

    def move_up(self, count: int = 1) -> None:
        """Move the cursor up, wrapping before the first row to the bottom."""
        total = len(self.view)
        if not total:
            self.selection = 0
            return
        self.selection = (self.selection - count) % total

    def jump_first(self) -> None:
        self.selection = 0

    def jump_last(self) -> None:
        self.selection = max(len(self.view) - 1, 0)

    def confirm(self) -> bool:
        """Record the selected glyph as the exit choice.

        Returns False, leaving the state untouched, if nothing is selected.
        """
        entry = self.selected
        if entry is None:
            return False
        self.exit_choice = entry.glyph
        return True

    def refresh(self, store: Sequence[Entry]) -> None:
        """Re-rank the store for the current query and reset the cursor."""
        self.view = rank(store, self.query)
        self.selection = 0
