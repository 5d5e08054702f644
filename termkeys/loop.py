"""FrameLoop: fixed-rate polling loop around a BufferedKeys."""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from termkeys.core.keys import BufferedKeys

logger = logging.getLogger(__name__)

# Return False to stop the loop; None or True keep it going
FrameHandler = Callable[[BufferedKeys], Optional[bool]]


class FrameLoop:
    """Calls *on_frame* once per tick and clears the keys afterwards.

    Each frame is: wait for the tick, ``on_frame(keys)``, ``keys.clear()``.
    The loop ends when the handler returns False, :meth:`stop` is called,
    the key source closes, or *max_frames* frames have run.

    *clock* and *sleep* are injectable so tests can run without waiting.
    """

    def __init__(
        self,
        keys: BufferedKeys,
        on_frame: FrameHandler,
        fps: float = 30,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if fps <= 0:
            raise ValueError(f"fps must be positive, got {fps}")
        self.keys = keys
        self.on_frame = on_frame
        self.interval = 1.0 / fps
        self._clock = clock
        self._sleep = sleep
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    def stop(self) -> None:
        """Ask the loop to exit before its next frame."""
        self._running = False

    def _source_closed(self) -> bool:
        return self.keys.is_closed

    def run(self, max_frames: Optional[int] = None) -> int:
        """Run frames until stopped.

        Returns:
            Number of frames processed.
        """
        self._running = True
        frames = 0
        next_tick = self._clock()
        logger.debug("Frame loop started (%.1f ms per frame)", self.interval * 1000)

        try:
            while self._running:
                if max_frames is not None and frames >= max_frames:
                    break

                next_tick += self.interval
                delay = next_tick - self._clock()
                if delay > 0:
                    self._sleep(delay)
                else:
                    # Fell behind: don't try to catch up with a burst of frames
                    next_tick = self._clock()

                if not self._running:
                    break
                # Checked before the frame so the keys from the last read still get processed
                closed = self._source_closed()

                try:
                    keep_going = self.on_frame(self.keys)
                finally:
                    self.keys.clear()
                frames += 1

                if keep_going is False or closed:
                    break
        finally:
            self._running = False
            logger.debug("Frame loop stopped after %d frames", frames)

        return frames
