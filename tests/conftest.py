"""Shared fixtures."""

import queue
import threading
from contextlib import contextmanager
from io import StringIO
from pathlib import Path

import pytest
from rich.console import Console

from glyphfind._store import EntryStore
from glyphfind._ucd import Entry, GeneralCategory

UCD_SAMPLE = """\
0000;<control>;Cc;0;BN;;;;;N;NULL;;;;
0041;LATIN CAPITAL LETTER A;Lu;0;L;;;;;N;;;;0061;
0042;LATIN CAPITAL LETTER B;Lu;0;L;;;;;N;;;;0062;
0061;LATIN SMALL LETTER A;Ll;0;L;;;;;N;;;0041;;0041
00E9;LATIN SMALL LETTER E WITH ACUTE;Ll;0;L;0065 0301;;;;N;LATIN SMALL LETTER E ACUTE;;00C9;;00C9
20AC;EURO SIGN;Sc;0;ET;;;;;N;;;;;
1F980;CRAB;So;0;ON;;;;;N;;;;;
"""


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Temporary working directory."""
    return tmp_path


@pytest.fixture
def ucd_file(temp_dir: Path) -> Path:
    """Small UnicodeData.txt on disk."""
    path = temp_dir / "UnicodeData.txt"
    path.write_text(UCD_SAMPLE, encoding="utf-8")
    return path


@pytest.fixture
def letters() -> list[Entry]:
    return [
        Entry(0x41, "LATIN CAPITAL LETTER A", GeneralCategory.LETTER_UPPERCASE),
        Entry(0x42, "LATIN CAPITAL LETTER B", GeneralCategory.LETTER_UPPERCASE),
    ]


@pytest.fixture
def sample_store() -> EntryStore:
    """A handful of entries spanning a few categories."""
    return EntryStore(
        [
            Entry(0x0A, "<control>", GeneralCategory.OTHER_CONTROL, "LINE FEED (LF)"),
            Entry(0x41, "LATIN CAPITAL LETTER A", GeneralCategory.LETTER_UPPERCASE),
            Entry(0x42, "LATIN CAPITAL LETTER B", GeneralCategory.LETTER_UPPERCASE),
            Entry(0x61, "LATIN SMALL LETTER A", GeneralCategory.LETTER_LOWERCASE),
            Entry(0x20AC, "EURO SIGN", GeneralCategory.SYMBOL_CURRENCY),
            Entry(0x2603, "SNOWMAN", GeneralCategory.SYMBOL_OTHER),
            Entry(0x1F980, "CRAB", GeneralCategory.SYMBOL_OTHER),
        ]
    )


@pytest.fixture
def events() -> queue.SimpleQueue:
    return queue.SimpleQueue()


@pytest.fixture
def running() -> threading.Event:
    flag = threading.Event()
    flag.set()
    return flag


class FakeTerminal:
    """
    Terminal stand-in for driving whole sessions without a tty.

    ``read_events`` replays scripted batches, then blocks until ``close()``
    and reports end of input, like a terminal that was hung up.
    """

    def __init__(self, *batches, error: BaseException | None = None):
        self.console = Console(file=StringIO(), width=100, height=20, color_system=None)
        self.frames: list = []
        self.acquired = False
        self.released = False
        self._batches = list(batches)
        self._error = error
        self._closed = threading.Event()

    @contextmanager
    def session(self):
        self.acquired = True
        try:
            yield self.frames.append
        finally:
            self.released = True

    def read_events(self):
        if self._error is not None:
            raise self._error
        if self._batches:
            return self._batches.pop(0)
        self._closed.wait()
        raise EOFError("terminal input closed")

    def close(self) -> None:
        self._closed.set()


@pytest.fixture
def fake_terminal():
    """Factory for FakeTerminal; every terminal is closed at teardown."""
    made: list[FakeTerminal] = []

    def make(*batches, error: BaseException | None = None) -> FakeTerminal:
        terminal = FakeTerminal(*batches, error=error)
        made.append(terminal)
        return terminal

    yield make
    for terminal in made:
        terminal.close()
