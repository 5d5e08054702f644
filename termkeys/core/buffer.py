"""EventBuffer: key events received since the last clear.

A key event is one input notification: 1..N codes that arrived together,
e.g. ``(0x71,)`` for ``q`` or ``(0x1B, 0x5B, 0x41)`` for the up arrow.
Events are matched as whole units, never byte by byte.
"""

from __future__ import annotations

import logging
import threading
from typing import Iterable, List, Optional, Tuple

import termkeys.log  # noqa: F401  registers logger.trace()

logger = logging.getLogger(__name__)

# Longest code sequence a query may name (long enough for CSI/SS3 keys)
MAX_CODES: int = 6

KeyEvent = Tuple[int, ...]


def to_key_event(codes: Iterable[int]) -> KeyEvent:
    """Freeze *codes* (list, tuple, bytes, ...) into a ``KeyEvent``."""
    return tuple(codes)


def build_query(codes: Tuple[Optional[int], ...]) -> KeyEvent:
    """Turn ``is_pressed`` arguments into the exact sequence to look for.

    Trailing ``None`` values count as omitted codes. Omission is only valid
    as a suffix: ``(0x1B, None, 0x41)`` raises ``ValueError``.
    """
    query = list(codes)
    while query and query[-1] is None:
        query.pop()

    if not query:
        raise TypeError("is_pressed() requires at least one key code")
    if len(query) > MAX_CODES:
        raise TypeError(
            f"is_pressed() takes at most {MAX_CODES} key codes ({len(query)} given)"
        )
    if None in query:
        raise ValueError(f"omitted key codes must be trailing: {codes!r}")
    return tuple(query)  # type: ignore[arg-type]


class EventBuffer:
    """Ordered, growable list of key events.

    Insertion order is arrival order. There is no upper bound between
    clears: the consumer must call :meth:`clear` once per polling frame.

    Every operation takes an internal lock, so a producer running on a
    reader thread can append while the consumer queries.
    """

    def __init__(self, events: Optional[Iterable[Iterable[int]]] = None):
        self._events: List[KeyEvent] = []
        self._lock = threading.Lock()
        for event in events or ():
            self.append(event)

    def append(self, codes: Iterable[int]) -> bool:
        """Add one event at the end. Empty events are dropped.

        Returns:
            True if the event was stored.
        """
        event = to_key_event(codes)
        if not event:
            logger.trace("Dropping empty key event")
            return False
        with self._lock:
            self._events.append(event)
        logger.trace("Key event buffered: %s", event)
        return True

    def clear(self) -> None:
        with self._lock:
            self._events.clear()

    def is_pressed(self, *codes: Optional[int]) -> bool:
        """Return True if an event equal to *codes* arrived since the last clear.

        The match is exact: ``is_pressed(1, 2)`` does not match a stored
        ``(1, 2, 3)`` and ``is_pressed(1, 2, 3, 4)`` does not match it either.
        """
        query = build_query(codes)
        with self._lock:
            for event in self._events:
                if event == query:
                    return True
        return False

    @property
    def is_any_pressed(self) -> bool:
        with self._lock:
            return bool(self._events)

    def events(self) -> List[KeyEvent]:
        """Snapshot of buffered events, oldest first."""
        with self._lock:
            return list(self._events)

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)
