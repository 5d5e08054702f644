"""AsyncIterableSource: key events pumped from an async iterable on the asyncio loop."""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterable, AsyncIterator, Optional, Sequence

from termkeys.input.source import (
    DoneHandler,
    ErrorHandler,
    KeySource,
    KeysHandler,
    Subscription,
    report_error,
)

logger = logging.getLogger(__name__)


async def read_chunks(reader: asyncio.StreamReader, read_size: int = 32) -> AsyncIterator[bytes]:
    """Yield each ``reader.read()`` chunk until EOF."""
    while True:
        data = await reader.read(read_size)
        if not data:
            return
        yield data


class AsyncIterableSource(KeySource):
    """Delivers every item of *iterable* as one key event.

    ``listen()`` must be called from a coroutine: the pump runs as a task on
    the running loop and cancelling the subscription cancels the task.
    Async iterables are consumed once, so only one listener is allowed.
    """

    def __init__(self, iterable: AsyncIterable[Sequence[int]]):
        self._iterable = iterable
        self._task: Optional[asyncio.Task] = None

    def listen(
        self,
        on_keys: KeysHandler,
        on_error: Optional[ErrorHandler] = None,
        on_done: Optional[DoneHandler] = None,
    ) -> Subscription:
        if self._task is not None:
            raise RuntimeError("AsyncIterableSource has already been listened to")

        loop = asyncio.get_running_loop()
        self._task = loop.create_task(self._pump(on_keys, on_error, on_done))
        return Subscription(on_cancel=self._task.cancel)

    async def _pump(
        self,
        on_keys: KeysHandler,
        on_error: Optional[ErrorHandler],
        on_done: Optional[DoneHandler],
    ) -> None:
        try:
            async for codes in self._iterable:
                try:
                    on_keys(codes)
                except Exception:
                    logger.exception("AsyncIterableSource listener error for %r", codes)
        except asyncio.CancelledError:
            logger.debug("AsyncIterableSource pump cancelled")
            raise
        except Exception as exc:
            report_error(on_error, exc, "AsyncIterableSource")
            return

        if on_done is not None:
            on_done()
