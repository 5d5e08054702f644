"""SelectorReader: daemon thread that pulls key events from a readable object."""

from __future__ import annotations

import logging
import selectors
import threading
from typing import Any, Callable, List, Optional, Sequence

import termkeys.log  # noqa: F401  registers logger.trace()
from termkeys.input.source import DoneHandler, ErrorHandler, KeysHandler, report_error

logger = logging.getLogger(__name__)

# Returns the events read on one wake-up, or None at end of input
ReadEvents = Callable[[], Optional[List[Sequence[int]]]]


class SelectorReader:
    """Waits on *fileobj* with ``selectors`` and delivers what *read_events* returns.

    Parameters:
        fileobj:      Anything ``selectors`` accepts (fd or object with ``fileno()``).
        read_events:  Called once per readiness; must not block for long.
        poll_timeout: Seconds between checks of the stop flag.
    """

    def __init__(
        self,
        name: str,
        fileobj: Any,
        read_events: ReadEvents,
        on_keys: KeysHandler,
        on_error: Optional[ErrorHandler] = None,
        on_done: Optional[DoneHandler] = None,
        poll_timeout: float = 0.05,
    ):
        self.name = name
        self._fileobj = fileobj
        self._read_events = read_events
        self._on_keys = on_keys
        self._on_error = on_error
        self._on_done = on_done
        self._poll_timeout = poll_timeout
        self._thread: threading.Thread | None = None
        self._running = False

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return

        self._running = True
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()
        logger.debug("%s reader started", self.name)

    def stop(self, timeout: float = 2.0) -> None:
        """Signal the reader loop to stop and wait for it."""
        self._running = False
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)
        logger.debug("%s reader stopped", self.name)

    @property
    def is_running(self) -> bool:
        return self._running and self._thread is not None and self._thread.is_alive()

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _deliver(self, events: List[Sequence[int]]) -> None:
        for codes in events:
            if not self._running:
                logger.trace("%s dropping %r after stop", self.name, codes)
                return
            try:
                self._on_keys(codes)
            except Exception:
                logger.exception("%s listener error for %r", self.name, codes)

    def _run(self) -> None:
        """Main read loop, runs in a daemon thread."""
        error: BaseException | None = None
        at_eof = False
        selector = selectors.DefaultSelector()
        try:
            selector.register(self._fileobj, selectors.EVENT_READ)
            while self._running:
                if not selector.select(timeout=self._poll_timeout):
                    continue
                if not self._running:
                    break

                events = self._read_events()
                if events is None:
                    logger.debug("%s reached end of input", self.name)
                    at_eof = True
                    break
                self._deliver(events)

        except (OSError, ValueError) as exc:
            error = exc
        finally:
            stopped = not self._running
            self._running = False
            selector.close()

        if stopped:
            return
        if error is not None:
            report_error(self._on_error, error, self.name)
        elif at_eof and self._on_done is not None:
            self._on_done()
