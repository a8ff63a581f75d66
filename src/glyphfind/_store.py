"""Read-only entry store shared by the ranker and the presenter."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from typing import overload

from glyphfind._config import GlyphfindConfig
from glyphfind._ucd import Entry, builtin_entries, load_ucd


class EntryStore(Sequence[Entry]):
    """
    Immutable sequence of character entries.

    Built once at startup and never mutated; safe to share between threads.
    """

    def __init__(self, entries: Iterable[Entry]):
        self._entries: tuple[Entry, ...] = tuple(entries)

    @overload
    def __getitem__(self, index: int) -> Entry: ...

    @overload
    def __getitem__(self, index: slice) -> Sequence[Entry]: ...

    def __getitem__(self, index):
        return self._entries[index]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self._entries)

    def __repr__(self) -> str:
        return f"EntryStore({len(self._entries)} entries)"


def load_store(config: GlyphfindConfig) -> EntryStore:
    """Load the configured UnicodeData.txt, or the builtin tables if none is set."""
    if config.data.path:
        return EntryStore(load_ucd(config.data.path))
    return EntryStore(builtin_entries())
