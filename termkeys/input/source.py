"""KeySource / Subscription: contract for push-based key event producers."""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, Optional, Sequence

logger = logging.getLogger(__name__)

KeysHandler = Callable[[Sequence[int]], None]
ErrorHandler = Callable[[BaseException], None]
DoneHandler = Callable[[], None]


class Subscription:
    """Handle to a live listener registration on a :class:`KeySource`.

    ``cancel()`` runs the source's teardown at most once; every later call
    is a no-op.
    """

    def __init__(self, on_cancel: Optional[Callable[[], None]] = None):
        self._on_cancel = on_cancel
        self._cancelled = False
        self._lock = threading.Lock()

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> bool:
        """Stop delivery.

        Returns:
            True if this call cancelled the subscription, False if it was
            already cancelled.
        """
        with self._lock:
            if self._cancelled:
                return False
            self._cancelled = True
            on_cancel, self._on_cancel = self._on_cancel, None

        if on_cancel is not None:
            on_cancel()
        return True


class KeySource(ABC):
    """Asynchronous producer of key code sequences.

    Sources push; nobody polls them. Each delivered sequence is one key
    event. After ``on_error`` or ``on_done`` has been called the source
    delivers nothing more to that listener.
    """

    @abstractmethod
    def listen(
        self,
        on_keys: KeysHandler,
        on_error: Optional[ErrorHandler] = None,
        on_done: Optional[DoneHandler] = None,
    ) -> Subscription:
        """Start delivering key events to *on_keys*."""


def report_error(on_error: Optional[ErrorHandler], exc: BaseException, source: str) -> None:
    """Hand *exc* to the listener, or log it if nobody asked for errors."""
    if on_error is None:
        logger.error("%s failed: %s", source, exc)
        return
    on_error(exc)
