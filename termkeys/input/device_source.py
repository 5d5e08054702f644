"""DeviceSource: key presses from a Linux input device (``/dev/input/eventX``).

Unlike the terminal, evdev reports key codes rather than bytes: each key-down
is delivered as the one-code event ``(keycode,)``, e.g. ``(ecodes.KEY_Q,)``.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence

try:
    import evdev
    from evdev import ecodes

    EVDEV_AVAILABLE = True
except ImportError:  # pragma: no cover
    evdev = None  # type: ignore[assignment]
    ecodes = None  # type: ignore[assignment]
    EVDEV_AVAILABLE = False

from termkeys.input.reader import SelectorReader
from termkeys.input.source import (
    DoneHandler,
    ErrorHandler,
    KeySource,
    KeysHandler,
    Subscription,
)

logger = logging.getLogger(__name__)

KEY_DOWN = 1


class DeviceSource(KeySource):
    """Reads key-down events from an evdev input device on a daemon thread.

    Parameters:
        device: A path such as ``/dev/input/event3`` or an already opened
                ``evdev.InputDevice``.
        grab:   Grab the device exclusively while listening.
    """

    def __init__(self, device: Any, grab: bool = False, poll_timeout: float = 0.05):
        if isinstance(device, str):
            if not EVDEV_AVAILABLE:
                raise RuntimeError("evdev is not installed, cannot open input devices")
            device = evdev.InputDevice(device)
        self.device = device
        self.grab = grab
        self.poll_timeout = poll_timeout
        self._reader: Optional[SelectorReader] = None

    def _read_presses(self) -> Optional[List[Sequence[int]]]:
        presses: List[Sequence[int]] = []
        try:
            events = list(self.device.read())
        except BlockingIOError:
            return presses
        for event in events:
            if event.type == ecodes.EV_KEY and event.value == KEY_DOWN:
                presses.append((event.code,))
        return presses

    def _release(self) -> None:
        if self.grab:
            try:
                self.device.ungrab()
            except OSError as exc:
                logger.debug("ungrab failed on %s: %s", getattr(self.device, "path", "?"), exc)

    def listen(
        self,
        on_keys: KeysHandler,
        on_error: Optional[ErrorHandler] = None,
        on_done: Optional[DoneHandler] = None,
    ) -> Subscription:
        if self._reader is not None and self._reader.is_running:
            raise RuntimeError(f"{self.device.path} already has a listener")

        if self.grab:
            self.device.grab()

        reader = SelectorReader(
            f"evdev-{self.device.path}",
            self.device,
            self._read_presses,
            on_keys,
            on_error=on_error,
            on_done=on_done,
            poll_timeout=self.poll_timeout,
        )
        self._reader = reader
        reader.start()
        logger.debug("Listening to %s (%s)", self.device.name, self.device.path)

        def cancel() -> None:
            reader.stop()
            self._release()

        return Subscription(on_cancel=cancel)

    def close(self) -> None:
        """Close the underlying device."""
        if self._reader is not None:
            self._reader.stop()
        try:
            self.device.close()
        except OSError:
            pass

    def __enter__(self) -> "DeviceSource":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> bool:
        self.close()
        return False
