"""Wires the terminal, listener, update loop and presenter together."""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Sequence

from glyphfind._config import SessionConfig
from glyphfind._errors import InputError
from glyphfind._listener import InputListener
from glyphfind._loop import UpdateLoop
from glyphfind._presenter import Presenter
from glyphfind._terminal import Event, Terminal
from glyphfind._ucd import Entry

logger = logging.getLogger(__name__)


def run_session(
    store: Sequence[Entry],
    terminal: Terminal,
    config: SessionConfig | None = None,
) -> str | None:
    """
    Run an interactive picking session.

    Terminal state is acquired for the duration of the session and
    restored on every exit path, before any error propagates.

    Args:
        store: Entries to search
        terminal: Terminal to draw on and read input from
        config: Session settings

    Returns:
        The selected glyph, or None if the session was cancelled

    Raises:
        TerminalError: If the terminal cannot be put into interactive mode
        InputError: If terminal input failed during the session
    """
    config = config or SessionConfig()
    events: queue.SimpleQueue[Event] = queue.SimpleQueue()
    running = threading.Event()
    running.set()

    with terminal.session() as update_screen:
        presenter = Presenter(update_screen, terminal.console, title=config.title)
        listener = InputListener(terminal.read_events, events, running)
        loop = UpdateLoop(
            store,
            events,
            running,
            presenter.present,
            tick_interval=config.tick_interval,
            page_size=config.page_size,
        )

        logger.info("Session started with %d entries", len(store))
        listener.start()
        try:
            choice = loop.run()
        finally:
            running.clear()

    if listener.error is not None:
        raise InputError(f"Fatal error reading key events: {listener.error}") from listener.error

    logger.info("Session ended (selected=%r)", choice)
    return choice
