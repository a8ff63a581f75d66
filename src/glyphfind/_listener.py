"""Background thread forwarding terminal input to the update loop."""

from __future__ import annotations

import logging
import os
import queue
import threading
from collections.abc import Callable, Sequence

from glyphfind._terminal import Event, KeyEvent

logger = logging.getLogger(__name__)

FORCED_EXIT_STATUS = 2


class InputListener(threading.Thread):
    """
    Reads terminal events and forwards them, in order, onto ``events``.

    The Ctrl-C chord is handled here rather than forwarded: the first one
    clears ``running`` to ask for a graceful shutdown, the second one ends
    the process immediately through ``force_exit``.

    If the event source fails during the session, the error is kept on
    ``error``, ``running`` is cleared and the thread stops. Events read
    after the session ended are dropped, except interrupts. The thread is a
    daemon; nobody joins it, since a blocking read cannot be interrupted.
    """

    def __init__(
        self,
        read_events: Callable[[], Sequence[Event]],
        events: queue.SimpleQueue[Event],
        running: threading.Event,
        force_exit: Callable[[int], object] = os._exit,
    ):
        super().__init__(name="glyphfind-input", daemon=True)
        self._read_events = read_events
        self._events = events
        self._running = running
        self._force_exit = force_exit
        self._interrupted = False
        self.error: BaseException | None = None

    def run(self) -> None:
        while True:
            try:
                batch = self._read_events()
            except (OSError, EOFError) as e:
                # The screen is still up; the CLI reports it after cleanup.
                logger.debug("Terminal input failed: %s", e)
                if self._running.is_set():
                    self.error = e
                    self._running.clear()
                return

            for event in batch:
                if isinstance(event, KeyEvent) and event.is_interrupt:
                    self._interrupt()
                    continue

                # Once the session is over nobody drains the queue, but a
                # second interrupt must still be seen.
                if self._running.is_set():
                    self._events.put(event)

    def _interrupt(self) -> None:
        if self._interrupted:
            logger.debug("Second interrupt, exiting immediately")
            self._force_exit(FORCED_EXIT_STATUS)
            return

        logger.debug("Interrupt received, requesting shutdown")
        self._interrupted = True
        self._running.clear()
