"""glyphfind - fuzzy Unicode character picker for the terminal."""

from glyphfind._rank import rank, rank_scored
from glyphfind._store import EntryStore
from glyphfind._ucd import Entry, GeneralCategory, format_codepoint

__all__ = [
    "Entry",
    "EntryStore",
    "GeneralCategory",
    "format_codepoint",
    "rank",
    "rank_scored",
]

__version__ = "0.3.0"
