"""BufferedKeys: synchronous "is this key pressed?" over buffered key events.

Reading a terminal leaves two choices: block until a key arrives, or handle
key codes as they are pushed. BufferedKeys sits in between: a producer
appends whole key events as they arrive, and a polling loop asks
synchronously whether a given code sequence arrived since the last frame::

    keys = BufferedKeys.from_source(FileDescriptorSource())
    while running:
        if keys.is_pressed(0x71):        # q
            running = False
        if keys.is_pressed(0x1B, 0x5B, 0x41):  # up arrow
            move_up()
        keys.clear()
    keys.cancel()

Lifecycle:
    1. After querying, call ``clear()`` once per frame. There is no release
       detection: a key stays "pressed" until cleared, and the buffer grows
       without bound if it never is.
    2. When keys are no longer needed, call ``cancel()`` (or use the object
       as a context manager). If the terminal is in raw mode, restore it
       before cancelling.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Optional, Sequence

import termkeys.log  # noqa: F401  registers logger.trace()
from termkeys.core.buffer import EventBuffer, KeyEvent
from termkeys.input.source import KeySource

logger = logging.getLogger(__name__)


class BufferedKeys(ABC):
    """Minimal interface for reading the state of keys synchronously."""

    @classmethod
    def sync(cls, events: Optional[Iterable[Iterable[int]]] = None) -> "SyncBufferedKeys":
        """Keys populated directly by the caller, mostly for tests and stubs."""
        return SyncBufferedKeys(events)

    @classmethod
    def from_source(cls, source: KeySource) -> "AsyncBufferedKeys":
        """Keys fed by *source*; listening starts immediately."""
        return AsyncBufferedKeys(source)

    def cancel(self) -> None:
        """Release the key producer, if any, and empty the buffer.

        Subclasses that override this must call ``super().cancel()``.
        """
        self.clear()

    @abstractmethod
    def clear(self) -> None:
        """Empty the buffer. Call once per frame, after querying."""

    @abstractmethod
    def is_pressed(self, *codes: Optional[int]) -> bool:
        """Return True if a key event equal to *codes* is buffered.

        Up to ``MAX_CODES`` codes may be given, so control sequences can be
        checked as a unit::

            up_arrow = keys.is_pressed(0x1B, 0x5B, 0x41)
        """

    @property
    @abstractmethod
    def is_any_pressed(self) -> bool:
        """True if any key event is buffered."""

    @property
    def is_closed(self) -> bool:
        """True once no more key events can arrive. Caller-fed keys never close."""
        return False

    def __enter__(self) -> "BufferedKeys":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> bool:
        self.cancel()
        return False


class SyncBufferedKeys(BufferedKeys):
    """Keys the caller appends to itself; no producer to cancel."""

    def __init__(self, events: Optional[Iterable[Iterable[int]]] = None):
        self._buffer = EventBuffer(events)

    def append(self, codes: Sequence[int]) -> bool:
        return self._buffer.append(codes)

    def clear(self) -> None:
        self._buffer.clear()

    def is_pressed(self, *codes: Optional[int]) -> bool:
        return self._buffer.is_pressed(*codes)

    @property
    def is_any_pressed(self) -> bool:
        return self._buffer.is_any_pressed

    def events(self) -> List[KeyEvent]:
        return self._buffer.events()


class AsyncBufferedKeys(BufferedKeys):
    """Keys appended by a :class:`KeySource` as they arrive.

    Every delivered sequence is buffered unchanged; nothing is filtered or
    dropped while subscribed. Once ``cancel()`` has begun, late deliveries
    are discarded, so nothing shows up in the buffer after it returns.
    """

    def __init__(self, source: KeySource):
        self._buffer = EventBuffer()
        self._lock = threading.Lock()
        self._cancelled = False
        self._closed = False
        self._error: Optional[BaseException] = None
        self._subscription = source.listen(
            self._on_keys,
            on_error=self._on_error,
            on_done=self._on_done,
        )

    # ------------------------------------------------------------------
    # Producer side
    # ------------------------------------------------------------------

    def _on_keys(self, codes: Sequence[int]) -> None:
        with self._lock:
            if self._cancelled:
                logger.trace("Dropping key event %r delivered after cancel", codes)
                return
            self._buffer.append(codes)

    def _on_error(self, exc: BaseException) -> None:
        logger.error("Key source failed: %s", exc)
        with self._lock:
            self._error = exc
            self._closed = True

    def _on_done(self) -> None:
        logger.debug("Key source finished")
        with self._lock:
            self._closed = True

    # ------------------------------------------------------------------
    # Consumer side
    # ------------------------------------------------------------------

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    @property
    def is_closed(self) -> bool:
        """True once the source finished or failed, or after ``cancel()``."""
        return self._closed or self._cancelled

    @property
    def error(self) -> Optional[BaseException]:
        return self._error

    def cancel(self) -> None:
        with self._lock:
            first = not self._cancelled
            self._cancelled = True

        if first:
            self._subscription.cancel()
            logger.debug("Key subscription cancelled")
        super().cancel()

    def clear(self) -> None:
        self._buffer.clear()

    def is_pressed(self, *codes: Optional[int]) -> bool:
        return self._buffer.is_pressed(*codes)

    @property
    def is_any_pressed(self) -> bool:
        return self._buffer.is_any_pressed

    def events(self) -> List[KeyEvent]:
        return self._buffer.events()
