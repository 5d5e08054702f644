"""Terminal helpers: cbreak mode, stdin keys, code formatting.

POSIX only (termios/tty).
"""

from __future__ import annotations

import logging
import os
import sys
import termios
import tty
from contextlib import contextmanager
from typing import Iterator, Optional, Sequence

from termkeys.core.keys import AsyncBufferedKeys
from termkeys.input.fd_source import DEFAULT_READ_SIZE, FileDescriptorSource

logger = logging.getLogger(__name__)


@contextmanager
def raw_mode(fd: Optional[int] = None) -> Iterator[bool]:
    """Turn off echo and line buffering on *fd* for the duration of the block.

    Yields True if the mode was changed, False when *fd* is not a tty (the
    block then runs with the descriptor untouched). The saved attributes are
    restored on every exit path.
    """
    if fd is None:
        fd = sys.stdin.fileno()

    if not os.isatty(fd):
        logger.debug("fd %d is not a tty, leaving terminal mode alone", fd)
        yield False
        return

    old_settings = termios.tcgetattr(fd)
    tty.setcbreak(fd)
    logger.debug("Terminal fd %d switched to cbreak mode", fd)
    try:
        yield True
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)
        logger.debug("Terminal settings restored")


def open_stdin_keys(
    read_size: int = DEFAULT_READ_SIZE,
    poll_timeout: float = 0.05,
    fd: Optional[int] = None,
) -> AsyncBufferedKeys:
    """Start buffering keys from stdin (or *fd*).

    Put the terminal in :func:`raw_mode` first, otherwise keys only arrive
    after Enter.
    """
    source = FileDescriptorSource(fd, read_size=read_size, poll_timeout=poll_timeout)
    return AsyncBufferedKeys(source)


def format_code(code: int) -> str:
    """``0x71`` -> ``'0x71 (113)'``"""
    return f"0x{code:02X} ({code})"


def format_codes(codes: Sequence[int]) -> str:
    return "[" + ", ".join(format_code(c) for c in codes) + "]"
