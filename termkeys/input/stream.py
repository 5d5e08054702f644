"""KeyStream: in-process broadcast source that callers push key events into."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from termkeys.input.source import (
    DoneHandler,
    ErrorHandler,
    KeySource,
    KeysHandler,
    Subscription,
    report_error,
)

logger = logging.getLogger(__name__)


@dataclass
class _Listener:
    on_keys: KeysHandler
    on_error: Optional[ErrorHandler] = None
    on_done: Optional[DoneHandler] = None


class KeyStream(KeySource):
    """Lightweight synchronous pub/sub source.

    ``add()`` delivers to every current listener before returning, so the
    order listeners observe is exactly the order events were added.
    """

    def __init__(self):
        self._listeners: List[_Listener] = []
        self._closed = False

    @property
    def has_listeners(self) -> bool:
        return bool(self._listeners)

    @property
    def is_closed(self) -> bool:
        return self._closed

    def listen(
        self,
        on_keys: KeysHandler,
        on_error: Optional[ErrorHandler] = None,
        on_done: Optional[DoneHandler] = None,
    ) -> Subscription:
        if self._closed:
            raise RuntimeError("KeyStream is closed")

        listener = _Listener(on_keys, on_error, on_done)
        self._listeners.append(listener)
        logger.debug("KeyStream listener added (%d total)", len(self._listeners))
        return Subscription(on_cancel=lambda: self._remove(listener))

    def _remove(self, listener: _Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def add(self, codes: Sequence[int]) -> None:
        """Dispatch one key event to all listeners synchronously."""
        if self._closed:
            raise RuntimeError("Cannot add key events to a closed KeyStream")

        for listener in list(self._listeners):
            try:
                listener.on_keys(codes)
            except Exception:
                logger.exception("KeyStream listener error for %r", codes)

    def add_error(self, exc: BaseException) -> None:
        """Report *exc* to every listener; the stream stays open."""
        for listener in list(self._listeners):
            report_error(listener.on_error, exc, "KeyStream")

    def close(self) -> None:
        """Detach every listener, notifying them through ``on_done``."""
        if self._closed:
            return
        self._closed = True
        listeners, self._listeners = self._listeners, []
        for listener in listeners:
            if listener.on_done is not None:
                listener.on_done()
