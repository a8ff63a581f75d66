"""Test whole interactive sessions against a fake terminal."""

import pytest

from glyphfind._config import SessionConfig
from glyphfind._errors import InputError
from glyphfind._session import run_session
from glyphfind._terminal import Key, KeyEvent, Modifier

FAST = SessionConfig(tick_interval=0.001)


def test_navigate_and_confirm(sample_store, fake_terminal):
    terminal = fake_terminal([KeyEvent(Key.DOWN)], [KeyEvent(Key.DOWN)], [KeyEvent(Key.ENTER)])

    assert run_session(sample_store, terminal, FAST) == "B"
    assert terminal.acquired and terminal.released


def test_escape_cancels(sample_store, fake_terminal):
    terminal = fake_terminal([KeyEvent(Key.ESCAPE)])

    assert run_session(sample_store, terminal, FAST) is None
    assert terminal.released


def test_interrupt_cancels(sample_store, fake_terminal):
    terminal = fake_terminal([KeyEvent(Key.CHAR, "c", Modifier.CTRL)])

    assert run_session(sample_store, terminal, FAST) is None
    assert terminal.released


def test_frames_are_presented(sample_store, fake_terminal):
    terminal = fake_terminal([KeyEvent(Key.ESCAPE)])

    run_session(sample_store, terminal, FAST)

    assert terminal.frames


def test_input_failure_is_raised_after_release(sample_store, fake_terminal):
    terminal = fake_terminal(error=OSError(5, "Input/output error"))

    with pytest.raises(InputError, match="Fatal error reading key events"):
        run_session(sample_store, terminal, FAST)

    assert terminal.released
