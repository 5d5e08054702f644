"""Small interactive programs built on termkeys.

``WalkDemo`` moves a position around with WASD in a frame loop;
``dump_keys`` prints the raw codes of every key event until ``q``.
"""

from __future__ import annotations

import logging
import sys
import threading
from typing import Optional, Sequence, TextIO

from termkeys.core.keys import BufferedKeys
from termkeys.input.source import KeySource
from termkeys.terminal import format_codes

logger = logging.getLogger(__name__)

KEY_A = 0x61
KEY_D = 0x64
KEY_S = 0x73
KEY_W = 0x77
KEY_Q = 0x71

BOARD_MIN = 0
BOARD_MAX = 100


def _clamp(value: int) -> int:
    return max(BOARD_MIN, min(BOARD_MAX, value))


class WalkDemo:
    """Press WASD to move, Q to quit.

    Several presses of the same key within one frame count once, since the
    buffer only answers whether a key arrived, not how often.
    """

    def __init__(self, out: Optional[TextIO] = None, x: int = 50, y: int = 50):
        self.out = out if out is not None else sys.stdout
        self.x = x
        self.y = y
        self.dx = 0
        self.dy = 0
        self.should_exit = False

    def process_input(self, keys: BufferedKeys) -> None:
        self.dx = self.dy = 0
        if keys.is_pressed(KEY_A):
            self.dx -= 1
        if keys.is_pressed(KEY_D):
            self.dx += 1
        if keys.is_pressed(KEY_S):
            self.dy += 1
        if keys.is_pressed(KEY_W):
            self.dy -= 1
        if keys.is_pressed(KEY_Q):
            self.should_exit = True

    def update_state(self) -> None:
        self.x = _clamp(self.x + self.dx)
        self.y = _clamp(self.y + self.dy)

    def step(self, keys: BufferedKeys) -> bool:
        """Run one frame. Returns False once Q was pressed."""
        self.process_input(keys)
        self.update_state()

        if self.dx or self.dy:
            self.out.write(f"You are standing at ({self.x}, {self.y}).\n")
            self.out.flush()

        return not self.should_exit


def dump_keys(source: KeySource, out: Optional[TextIO] = None, timeout: Optional[float] = None) -> int:
    """Print every key event from *source* until a lone ``q`` arrives.

    Also returns when the source finishes or fails, or after *timeout*
    seconds.

    Returns:
        Number of events printed.
    """
    out = out if out is not None else sys.stdout
    done = threading.Event()
    printed = 0

    def on_keys(codes: Sequence[int]) -> None:
        nonlocal printed
        codes = tuple(codes)
        if codes == (KEY_Q,):
            done.set()
            return
        out.write(f"{format_codes(codes)}\n")
        out.flush()
        printed += 1

    def on_error(exc: BaseException) -> None:
        logger.error("Key source failed: %s", exc)
        done.set()

    subscription = source.listen(on_keys, on_error=on_error, on_done=done.set)
    try:
        done.wait(timeout)
    finally:
        subscription.cancel()
    return printed
