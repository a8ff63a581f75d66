"""Update loop: drains input, mutates session state, re-ranks, presents."""

from __future__ import annotations

import logging
import queue
import threading
import time
from collections.abc import Callable, Sequence
from enum import Enum

from glyphfind._state import SessionState
from glyphfind._terminal import Event, Key, KeyEvent, Modifier, MouseEvent, MouseKind
from glyphfind._ucd import Entry

logger = logging.getLogger(__name__)

DEFAULT_TICK_INTERVAL = 0.03
DEFAULT_PAGE_SIZE = 10


class LoopState(Enum):
    RUNNING = "running"
    TERMINATING = "terminating"


class UpdateLoop:
    """
    Single-threaded controller for an interactive session.

    Each tick drains every queued event without blocking, applies them in
    arrival order, re-ranks only if the query changed, presents once and
    then sleeps for ``tick_interval``. The loop runs while ``running`` is
    set; the listener clears it on Ctrl-C, the loop itself on Escape or a
    confirmed selection.
    """

    def __init__(
        self,
        store: Sequence[Entry],
        events: queue.SimpleQueue[Event],
        running: threading.Event,
        present: Callable[[SessionState], object],
        tick_interval: float = DEFAULT_TICK_INTERVAL,
        page_size: int = DEFAULT_PAGE_SIZE,
        sleep: Callable[[float], object] = time.sleep,
    ):
        self.store = store
        self.state = SessionState.for_store(store)
        self._events = events
        self._running = running
        self._present = present
        self._tick_interval = tick_interval
        self._page_size = page_size
        self._sleep = sleep

    @property
    def loop_state(self) -> LoopState:
        return LoopState.RUNNING if self._running.is_set() else LoopState.TERMINATING

    def terminate(self) -> None:
        self._running.clear()

    def _drain(self) -> list[Event]:
        pending = []
        while True:
            try:
                pending.append(self._events.get_nowait())
            except queue.Empty:
                return pending

    def apply(self, event: Event) -> None:
        """Apply a single input event to the session state."""
        state = self.state

        if isinstance(event, MouseEvent):
            if event.kind is MouseKind.SCROLL_UP:
                state.move_up(1)
            elif event.kind is MouseKind.SCROLL_DOWN:
                state.move_down(1)
            return

        if not isinstance(event, KeyEvent):
            return

        key = event.key
        if key is Key.CHAR:
            # Ctrl/Alt chords are not text.
            if not event.modifiers & (Modifier.CTRL | Modifier.ALT):
                state.type_char(event.char, shift=Modifier.SHIFT in event.modifiers)
        elif key is Key.BACKSPACE:
            state.delete_backward()
        elif key is Key.UP:
            state.move_up(1)
        elif key is Key.DOWN:
            state.move_down(1)
        elif key is Key.PAGE_UP:
            state.move_up(self._page_size)
        elif key is Key.PAGE_DOWN:
            state.move_down(self._page_size)
        elif key is Key.HOME:
            state.jump_first()
        elif key is Key.END:
            state.jump_last()
        elif key is Key.ENTER:
            if state.confirm():
                logger.debug("Selected %r", state.exit_choice)
                self.terminate()
        elif key is Key.ESCAPE:
            logger.debug("Cancelled")
            self.terminate()

    def tick(self) -> None:
        """Run one poll/apply/render cycle."""
        previous_query = self.state.query

        for event in self._drain():
            if self.loop_state is LoopState.TERMINATING:
                break
            self.apply(event)

        if self.state.query != previous_query:
            self.state.refresh(self.store)

        self._present(self.state)

    def run(self) -> str | None:
        """
        Tick until termination is requested.

        Returns:
            Glyph of the confirmed entry, or None if cancelled
        """
        while self.loop_state is LoopState.RUNNING:
            self.tick()
            self._sleep(self._tick_interval)
        return self.state.exit_choice
