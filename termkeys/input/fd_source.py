"""FileDescriptorSource: key events read from a file descriptor (stdin by default)."""

from __future__ import annotations

import logging
import os
import sys
from typing import IO, List, Optional, Sequence, Union

from termkeys.input.reader import SelectorReader
from termkeys.input.source import (
    DoneHandler,
    ErrorHandler,
    KeySource,
    KeysHandler,
    Subscription,
)

logger = logging.getLogger(__name__)

DEFAULT_READ_SIZE = 32


class FileDescriptorSource(KeySource):
    """Delivers each ``os.read()`` chunk of *fd* as one key event.

    Terminal emulators write a key's escape sequence in a single write, so
    with the tty in cbreak mode one chunk is one key press.

    Only one listener at a time: a second ``listen()`` while the first
    subscription is live raises ``RuntimeError``.
    """

    def __init__(
        self,
        fd: Union[int, IO, None] = None,
        read_size: int = DEFAULT_READ_SIZE,
        poll_timeout: float = 0.05,
    ):
        if fd is None:
            fd = sys.stdin
        self.fd = fd if isinstance(fd, int) else fd.fileno()
        self.read_size = read_size
        self.poll_timeout = poll_timeout
        self._reader: Optional[SelectorReader] = None

    def _read_chunk(self) -> Optional[List[Sequence[int]]]:
        data = os.read(self.fd, self.read_size)
        if not data:
            return None
        return [data]

    def listen(
        self,
        on_keys: KeysHandler,
        on_error: Optional[ErrorHandler] = None,
        on_done: Optional[DoneHandler] = None,
    ) -> Subscription:
        if self._reader is not None and self._reader.is_running:
            raise RuntimeError(f"fd {self.fd} already has a listener")

        reader = SelectorReader(
            f"fd-{self.fd}",
            self.fd,
            self._read_chunk,
            on_keys,
            on_error=on_error,
            on_done=on_done,
            poll_timeout=self.poll_timeout,
        )
        self._reader = reader
        reader.start()
        return Subscription(on_cancel=reader.stop)
