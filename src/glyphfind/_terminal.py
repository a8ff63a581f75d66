"""Raw-mode terminal driver: input decoding and screen acquisition."""

from __future__ import annotations

import codecs
import logging
import os
import select
import sys
import termios
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum, Flag, auto
from typing import TextIO, Union

from rich.console import Console, RenderableType

from glyphfind._errors import TerminalError

logger = logging.getLogger(__name__)

ESC = "\x1b"
ESC_SEQUENCE_TIMEOUT = 0.03
READ_SIZE = 1024

MOUSE_CAPTURE_ON = "\x1b[?1000h\x1b[?1006h"
MOUSE_CAPTURE_OFF = "\x1b[?1006l\x1b[?1000l"


class Key(Enum):
    CHAR = auto()
    ENTER = auto()
    ESCAPE = auto()
    BACKSPACE = auto()
    TAB = auto()
    UP = auto()
    DOWN = auto()
    LEFT = auto()
    RIGHT = auto()
    HOME = auto()
    END = auto()
    PAGE_UP = auto()
    PAGE_DOWN = auto()
    INSERT = auto()
    DELETE = auto()


class Modifier(Flag):
    NONE = 0
    SHIFT = auto()
    ALT = auto()
    CTRL = auto()


class MouseKind(Enum):
    PRESS = auto()
    RELEASE = auto()
    DRAG = auto()
    SCROLL_UP = auto()
    SCROLL_DOWN = auto()


@dataclass(frozen=True)
class KeyEvent:
    key: Key
    char: str = ""
    modifiers: Modifier = Modifier.NONE

    @property
    def is_interrupt(self) -> bool:
        """True for the Ctrl-C chord."""
        return self.key is Key.CHAR and self.char == "c" and Modifier.CTRL in self.modifiers


@dataclass(frozen=True)
class MouseEvent:
    kind: MouseKind
    column: int = 0
    row: int = 0


Event = Union[KeyEvent, MouseEvent]

_CSI_KEYS = {
    "A": Key.UP,
    "B": Key.DOWN,
    "C": Key.RIGHT,
    "D": Key.LEFT,
    "H": Key.HOME,
    "F": Key.END,
}

_CSI_TILDE_KEYS = {
    "1": Key.HOME,
    "2": Key.INSERT,
    "3": Key.DELETE,
    "4": Key.END,
    "5": Key.PAGE_UP,
    "6": Key.PAGE_DOWN,
    "7": Key.HOME,
    "8": Key.END,
}


def _csi_modifiers(params: str) -> Modifier:
    # xterm encodes modifiers as 1 + bitmask in the second parameter.
    parts = params.split(";")
    if len(parts) < 2:
        return Modifier.NONE
    try:
        mask = int(parts[1]) - 1
    except ValueError:
        return Modifier.NONE

    modifiers = Modifier.NONE
    if mask & 1:
        modifiers |= Modifier.SHIFT
    if mask & 2:
        modifiers |= Modifier.ALT
    if mask & 4:
        modifiers |= Modifier.CTRL
    return modifiers


def _decode_mouse(params: str, final: str) -> MouseEvent | None:
    """Decode an SGR (1006) mouse report: ``<button;column;row`` + M/m."""
    try:
        button, column, row = (int(part) for part in params[1:].split(";"))
    except ValueError:
        return None

    if button & 64:
        kind = MouseKind.SCROLL_DOWN if button & 1 else MouseKind.SCROLL_UP
    elif final == "m":
        kind = MouseKind.RELEASE
    elif button & 32:
        kind = MouseKind.DRAG
    else:
        kind = MouseKind.PRESS
    return MouseEvent(kind=kind, column=column - 1, row=row - 1)


def _decode_csi(params: str, final: str) -> Event | None:
    if params.startswith("<") and final in "Mm":
        return _decode_mouse(params, final)
    if final in _CSI_KEYS:
        return KeyEvent(_CSI_KEYS[final], modifiers=_csi_modifiers(params))
    if final == "~":
        key = _CSI_TILDE_KEYS.get(params.split(";")[0])
        if key is not None:
            return KeyEvent(key, modifiers=_csi_modifiers(params))
    return None


def _decode_escape(text: str, i: int) -> tuple[Event | None, int]:
    """Decode the sequence starting at the ESC at ``text[i]``.

    Returns the event (None for unknown sequences) and the index after it.
    """
    n = len(text)
    if i + 1 >= n or text[i + 1] == ESC:
        return KeyEvent(Key.ESCAPE), i + 1

    nxt = text[i + 1]
    if nxt == "[":
        j = i + 2
        while j < n and not "\x40" <= text[j] <= "\x7e":
            j += 1
        if j >= n:
            return None, n  # truncated sequence
        return _decode_csi(text[i + 2 : j], text[j]), j + 1

    if nxt == "O" and i + 2 < n:
        key = _CSI_KEYS.get(text[i + 2])
        return (KeyEvent(key) if key else None), i + 3

    return KeyEvent(Key.CHAR, nxt, Modifier.ALT), i + 2


def _decode_char(ch: str) -> KeyEvent:
    if ch in "\r\n":
        return KeyEvent(Key.ENTER)
    if ch in "\x7f\x08":
        return KeyEvent(Key.BACKSPACE)
    if ch == "\t":
        return KeyEvent(Key.TAB)
    if ch == "\x00":
        return KeyEvent(Key.CHAR, " ", Modifier.CTRL)
    if ord(ch) < 0x20:
        return KeyEvent(Key.CHAR, chr(ord(ch) + 0x60), Modifier.CTRL)
    if ch.isupper():
        return KeyEvent(Key.CHAR, ch, Modifier.SHIFT)
    return KeyEvent(Key.CHAR, ch)


def decode(text: str) -> list[Event]:
    """Decode terminal input into key and mouse events, in order."""
    events: list[Event] = []
    i = 0
    while i < len(text):
        if text[i] == ESC:
            event, i = _decode_escape(text, i)
            if event is not None:
                events.append(event)
            continue
        events.append(_decode_char(text[i]))
        i += 1
    return events


def _sequence_incomplete(text: str) -> bool:
    """True if ``text`` ends inside an escape sequence (or on a bare ESC)."""
    start = text.rfind(ESC)
    if start == -1:
        return False
    tail = text[start + 1 :]
    if tail in ("", "[", "O"):
        return True
    if tail.startswith("["):
        return not any("\x40" <= ch <= "\x7e" for ch in tail[1:])
    return False


class Terminal:
    """
    Owns the controlling terminal for an interactive session.

    Input is read from ``stdin`` in raw mode; the screen is drawn through a
    rich Console (stderr by default, so stdout stays free for the result).
    """

    def __init__(
        self,
        console: Console | None = None,
        stdin: TextIO | None = None,
        mouse: bool = True,
    ):
        self.console = console or Console(stderr=True)
        self.mouse = mouse
        self._stdin = stdin or sys.stdin
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    @property
    def fd(self) -> int:
        return self._stdin.fileno()

    @contextmanager
    def raw_mode(self) -> Iterator[None]:
        """Disable echo, line buffering and signal keys; restore on exit.

        Output processing is left on so rich's newlines still return the
        carriage.
        """
        try:
            fd = self.fd
        except (OSError, ValueError):
            fd = -1
        if fd < 0 or not os.isatty(fd):
            raise TerminalError("standard input is not a terminal")

        try:
            saved = termios.tcgetattr(fd)
            attrs = termios.tcgetattr(fd)
            attrs[0] &= ~(
                termios.BRKINT | termios.ICRNL | termios.INPCK | termios.ISTRIP | termios.IXON
            )
            attrs[2] = (attrs[2] & ~(termios.CSIZE | termios.PARENB)) | termios.CS8
            attrs[3] &= ~(termios.ECHO | termios.ICANON | termios.IEXTEN | termios.ISIG)
            attrs[6][termios.VMIN] = 1
            attrs[6][termios.VTIME] = 0
            termios.tcsetattr(fd, termios.TCSAFLUSH, attrs)
        except termios.error as e:
            raise TerminalError(f"could not enter raw mode: {e}") from e

        try:
            yield
        finally:
            termios.tcsetattr(fd, termios.TCSAFLUSH, saved)

    def _write(self, sequence: str) -> None:
        self.console.file.write(sequence)
        self.console.file.flush()

    @contextmanager
    def session(self) -> Iterator[Callable[[RenderableType], None]]:
        """
        Acquire raw mode, the alternate screen and (optionally) mouse capture.

        Everything is released in reverse order on every exit path.

        Yields:
            Callable that replaces the screen contents with a renderable
        """
        with self.raw_mode(), self.console.screen(hide_cursor=True) as screen:
            if self.mouse:
                self._write(MOUSE_CAPTURE_ON)
            logger.debug("Terminal session acquired (mouse=%s)", self.mouse)
            try:
                yield screen.update
            finally:
                if self.mouse:
                    self._write(MOUSE_CAPTURE_OFF)
                logger.debug("Terminal session released")

    def read_events(self) -> list[Event]:
        """
        Block until input arrives and decode it.

        A trailing ESC is given a short grace period so a split escape
        sequence is not reported as a bare Escape key.

        Raises:
            OSError: If reading the terminal fails
            EOFError: If the terminal input is closed
        """
        data = os.read(self.fd, READ_SIZE)
        if not data:
            raise EOFError("terminal input closed")

        text = self._decoder.decode(data)
        while _sequence_incomplete(text):
            ready, _, _ = select.select([self.fd], [], [], ESC_SEQUENCE_TIMEOUT)
            if not ready:
                break
            more = os.read(self.fd, READ_SIZE)
            if not more:
                break
            text += self._decoder.decode(more)

        return decode(text)
